"""
Business logic for users.

Registration, credential checks, profile reads and updates, and the
nearby‑assistant search.  Passwords are hashed with
``core.security.hash_password`` before they reach the store and are
never returned.  PBKDF2 runs in a worker thread so it does not stall
the event loop.
"""

import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from ..core.errors import AuthorizationError, ConflictError, NotFoundError
from ..core.security import Principal, hash_password, verify_password
from ..models import Location, Role, User
from ..schemas.user import UserCreate, UserRead, UserUpdate
from ..storage import Storage
from .common import partial_changes
from .policy import ensure_self_or_admin

logger = logging.getLogger(__name__)

# Profile fields only an administrator may change.
ADMIN_ONLY_FIELDS = {"role", "is_verified"}

# Fields that cannot be cleared; an explicit null leaves them unchanged.
REQUIRED_FIELDS = {"username", "email", "password", "full_name", "role", "is_verified"}


def to_user_read(user: User) -> UserRead:
    return UserRead.model_validate(user.model_dump())


class UserService:
    """Service for registering, authenticating and updating users."""

    @classmethod
    async def register(cls, storage: Storage, data: UserCreate) -> UserRead:
        """Create a new user.

        Usernames and emails are unique regardless of case.  Raises
        ``ConflictError`` when either is already taken.
        """
        if await storage.get_user_by_username(data.username):
            raise ConflictError("Username already taken")
        if await storage.get_user_by_email(data.email):
            raise ConflictError("Email already registered")
        values = data.model_dump(exclude={"password"})
        values["password_hash"] = await run_in_threadpool(hash_password, data.password)
        user = await storage.create_user(values)
        logger.info("Registered %s %s (id=%s)", user.role.value, user.username, user.id)
        return to_user_read(user)

    @classmethod
    async def authenticate(cls, storage: Storage, username: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, otherwise ``None``."""
        user = await storage.get_user_by_username(username)
        if user is None or not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("Failed login attempt for %s", username)
            return None
        return user

    @classmethod
    async def get_user(cls, storage: Storage, user_id: int) -> UserRead:
        user = await storage.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return to_user_read(user)

    @classmethod
    async def list_users(cls, storage: Storage) -> List[UserRead]:
        return [to_user_read(u) for u in await storage.list_users()]

    @classmethod
    async def update_user(
        cls,
        storage: Storage,
        principal: Principal,
        user_id: int,
        update: UserUpdate,
    ) -> UserRead:
        """Apply a partial profile update.

        Users may update only their own profile; administrators may
        update anyone.  Changing ``role`` or ``is_verified`` requires an
        administrator.  A new username or email must not belong to
        another user.
        """
        ensure_self_or_admin(principal, user_id)
        changes = partial_changes(update, REQUIRED_FIELDS)
        if not principal.is_admin and ADMIN_ONLY_FIELDS.intersection(changes):
            raise AuthorizationError("Forbidden - Only administrators can change role or verification")

        if "username" in changes:
            existing = await storage.get_user_by_username(changes["username"])
            if existing and existing.id != user_id:
                raise ConflictError("Username already taken")
        if "email" in changes:
            existing = await storage.get_user_by_email(changes["email"])
            if existing and existing.id != user_id:
                raise ConflictError("Email already registered")
        if "password" in changes:
            changes["password_hash"] = await run_in_threadpool(hash_password, changes.pop("password"))

        user = await storage.update_user(user_id, changes)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("User %s updated profile of user %s (%s)", principal.id, user_id, ", ".join(sorted(changes)))
        return to_user_read(user)

    @classmethod
    async def nearby_assistants(cls, storage: Storage, location: Location, radius: float) -> List[UserRead]:
        assistants = await storage.get_nearby_assistants(location, radius)
        return [to_user_read(u) for u in assistants]

    @classmethod
    async def ensure_admin(cls, storage: Storage, username: str, email: str, password: str) -> User:
        """Create an administrator account unless the username already exists."""
        existing = await storage.get_user_by_username(username)
        if existing:
            return existing
        user = await storage.create_user(
            {
                "username": username,
                "email": email,
                "full_name": username,
                "role": Role.ADMIN,
                "password_hash": await run_in_threadpool(hash_password, password),
                "is_verified": True,
            }
        )
        logger.info("Bootstrapped administrator %s (id=%s)", username, user.id)
        return user
