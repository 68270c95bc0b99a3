"""
Authentication endpoints for API v1.

Registration, login, logout and the current‑user lookup.  Login sets
an HTTP‑only session cookie holding a signed token; the token is also
returned in the body for clients that prefer the ``Authorization``
header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from assistant_marketplace_api.app.core.config import settings
from assistant_marketplace_api.app.core.errors import AuthenticationError
from assistant_marketplace_api.app.core.security import (
    Principal,
    create_access_token,
    get_current_user,
    get_optional_user,
)
from assistant_marketplace_api.app.schemas.common import StatusMessage
from assistant_marketplace_api.app.schemas.user import LoginResponse, UserCreate, UserLogin, UserRead
from assistant_marketplace_api.app.services.user_service import UserService, to_user_read
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate, storage: Storage = Depends(get_storage)) -> UserRead:
    """Register a new client or assistant.

    Returns 400 if the username or email is already in use.
    """
    return await UserService.register(storage, user)


@router.post("/login", response_model=LoginResponse)
async def login_user(
    credentials: UserLogin,
    response: Response,
    storage: Storage = Depends(get_storage),
) -> LoginResponse:
    """Check the credentials and open a session."""
    user = await UserService.authenticate(storage, credentials.username, credentials.password)
    if user is None:
        raise AuthenticationError("Invalid username or password")
    token = create_access_token({"sub": str(user.id)})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    logger.info("User %s logged in", user.id)
    return LoginResponse(**to_user_read(user).model_dump(), access_token=token)


@router.get("/logout", response_model=StatusMessage)
@router.post("/logout", response_model=StatusMessage)
async def logout_user(
    response: Response,
    current_user: Optional[Principal] = Depends(get_optional_user),
) -> StatusMessage:
    """Close the session by clearing the cookie."""
    if current_user is None:
        return StatusMessage(message="Not logged in")
    response.delete_cookie(settings.session_cookie_name)
    logger.info("User %s logged out", current_user.id)
    return StatusMessage(message="Logged out successfully")


@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> UserRead:
    """Return the profile of the logged in user."""
    return await UserService.get_user(storage, current_user.id)
