"""
Service category endpoints for API v1.

Anyone may browse categories; only administrators create, update or
delete them.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from assistant_marketplace_api.app.core.security import Principal, require_roles
from assistant_marketplace_api.app.models import Role
from assistant_marketplace_api.app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from assistant_marketplace_api.app.schemas.common import StatusMessage
from assistant_marketplace_api.app.services.category_service import CategoryService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[CategoryRead])
async def list_categories(storage: Storage = Depends(get_storage)) -> List[CategoryRead]:
    return await CategoryService.list_categories(storage)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: int = Path(..., description="ID of the category"),
    storage: Storage = Depends(get_storage),
) -> CategoryRead:
    return await CategoryService.get_category(storage, category_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    current_user: Principal = Depends(require_roles(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
) -> CategoryRead:
    return await CategoryService.create_category(storage, category)


@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category(
    update: CategoryUpdate,
    category_id: int = Path(..., description="ID of the category"),
    current_user: Principal = Depends(require_roles(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
) -> CategoryRead:
    return await CategoryService.update_category(storage, category_id, update)


@router.delete("/{category_id}", response_model=StatusMessage)
async def delete_category(
    category_id: int = Path(..., description="ID of the category"),
    current_user: Principal = Depends(require_roles(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
) -> StatusMessage:
    """Delete a category.

    Services that reference the category are left as they are.
    """
    return await CategoryService.delete_category(storage, category_id)
