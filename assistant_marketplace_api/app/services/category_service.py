"""
Business logic for service categories.

Category names are unique regardless of case.  Deleting a category does
not touch services that reference it.
"""

import logging
from typing import List, Optional

from ..core.errors import ConflictError, NotFoundError
from ..schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from ..schemas.common import StatusMessage
from ..storage import Storage
from .common import partial_changes

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing service categories."""

    @classmethod
    async def _ensure_unique_name(cls, storage: Storage, name: str, category_id: Optional[int] = None) -> None:
        wanted = name.lower()
        for category in await storage.list_service_categories():
            if category.name.lower() == wanted and category.id != category_id:
                raise ConflictError("Category name already exists")

    @classmethod
    async def list_categories(cls, storage: Storage) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c.model_dump()) for c in await storage.list_service_categories()]

    @classmethod
    async def get_category(cls, storage: Storage, category_id: int) -> CategoryRead:
        category = await storage.get_service_category(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return CategoryRead.model_validate(category.model_dump())

    @classmethod
    async def create_category(cls, storage: Storage, data: CategoryCreate) -> CategoryRead:
        await cls._ensure_unique_name(storage, data.name)
        category = await storage.create_service_category(data.model_dump())
        logger.info("Created category %s (id=%s)", category.name, category.id)
        return CategoryRead.model_validate(category.model_dump())

    @classmethod
    async def update_category(cls, storage: Storage, category_id: int, update: CategoryUpdate) -> CategoryRead:
        changes = partial_changes(update, {"name", "icon"})
        if "name" in changes:
            await cls._ensure_unique_name(storage, changes["name"], category_id)
        category = await storage.update_service_category(category_id, changes)
        if category is None:
            raise NotFoundError("Category not found")
        return CategoryRead.model_validate(category.model_dump())

    @classmethod
    async def delete_category(cls, storage: Storage, category_id: int) -> StatusMessage:
        if not await storage.delete_service_category(category_id):
            raise NotFoundError("Category not found")
        logger.info("Deleted category %s", category_id)
        return StatusMessage(message="Category deleted successfully")
