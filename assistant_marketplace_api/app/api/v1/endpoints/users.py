"""
User endpoints for API v1.

Public profile lookup, self‑service profile updates and the
administrator user listing.  Responses never contain password data.
"""

from typing import List

from fastapi import APIRouter, Depends, Path

from assistant_marketplace_api.app.core.security import Principal, get_current_user, require_roles
from assistant_marketplace_api.app.models import Role
from assistant_marketplace_api.app.schemas.user import UserRead, UserUpdate
from assistant_marketplace_api.app.services.user_service import UserService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(
    current_user: Principal = Depends(require_roles(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
) -> List[UserRead]:
    """List every user.  Administrators only."""
    return await UserService.list_users(storage)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int = Path(..., description="ID of the user"),
    storage: Storage = Depends(get_storage),
) -> UserRead:
    return await UserService.get_user(storage, user_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    update: UserUpdate,
    user_id: int = Path(..., description="ID of the user"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> UserRead:
    """Update a profile.

    Users may update only their own profile unless they are
    administrators.  Every update refreshes ``last_active``.
    """
    return await UserService.update_user(storage, current_user, user_id, update)
