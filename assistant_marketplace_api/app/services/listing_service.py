"""
Business logic for assistant service listings.

A listing (a ``Service`` record) belongs to one assistant and one
category.  Assistants manage their own listings; administrators manage
anyone's.  Referenced assistants and categories are checked here
because the store does not enforce references.
"""

import logging
from typing import List, Optional

from ..core.errors import AuthorizationError, NotFoundError
from ..core.security import Principal
from ..models import Role
from ..schemas.common import StatusMessage
from ..schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from ..storage import Storage
from .common import partial_changes
from .policy import ensure_can_list_service, ensure_self_or_admin

logger = logging.getLogger(__name__)


class ListingService:
    """Service for creating and maintaining assistant services."""

    @classmethod
    async def _ensure_assistant(cls, storage: Storage, assistant_id: int) -> None:
        assistant = await storage.get_user(assistant_id)
        if assistant is None or assistant.role != Role.ASSISTANT:
            raise NotFoundError("Assistant not found")

    @classmethod
    async def _ensure_category(cls, storage: Storage, category_id: int) -> None:
        if await storage.get_service_category(category_id) is None:
            raise NotFoundError("Category not found")

    @classmethod
    async def list_services(
        cls,
        storage: Storage,
        assistant_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> List[ServiceRead]:
        """List services, optionally only one assistant's or one category's.

        ``assistant_id`` takes precedence when both filters are given.
        """
        if assistant_id is not None:
            services = await storage.list_services_by_assistant(assistant_id)
        elif category_id is not None:
            services = await storage.list_services_by_category(category_id)
        else:
            services = await storage.list_services()
        return [ServiceRead.model_validate(s.model_dump()) for s in services]

    @classmethod
    async def get_service(cls, storage: Storage, service_id: int) -> ServiceRead:
        service = await storage.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        return ServiceRead.model_validate(service.model_dump())

    @classmethod
    async def create_service(cls, storage: Storage, principal: Principal, data: ServiceCreate) -> ServiceRead:
        assistant_id = data.assistant_id if data.assistant_id is not None else principal.id
        ensure_can_list_service(principal, assistant_id)
        await cls._ensure_assistant(storage, assistant_id)
        await cls._ensure_category(storage, data.category_id)
        service = await storage.create_service({**data.model_dump(), "assistant_id": assistant_id})
        logger.info(
            "Assistant %s listed service %s in category %s at %.2f/h",
            assistant_id,
            service.id,
            service.category_id,
            service.price_per_hour,
        )
        return ServiceRead.model_validate(service.model_dump())

    @classmethod
    async def update_service(
        cls,
        storage: Storage,
        principal: Principal,
        service_id: int,
        update: ServiceUpdate,
    ) -> ServiceRead:
        service = await storage.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        ensure_self_or_admin(principal, service.assistant_id)

        changes = partial_changes(update, {"assistant_id", "category_id", "price_per_hour"})
        new_assistant = changes.get("assistant_id")
        if new_assistant is not None and new_assistant != service.assistant_id:
            if not principal.is_admin:
                raise AuthorizationError("Forbidden - Cannot transfer services to other assistants")
            await cls._ensure_assistant(storage, new_assistant)
        if "category_id" in changes:
            await cls._ensure_category(storage, changes["category_id"])

        updated = await storage.update_service(service_id, changes)
        if updated is None:
            raise NotFoundError("Service not found")
        return ServiceRead.model_validate(updated.model_dump())

    @classmethod
    async def delete_service(cls, storage: Storage, principal: Principal, service_id: int) -> StatusMessage:
        service = await storage.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        ensure_self_or_admin(principal, service.assistant_id)
        await storage.delete_service(service_id)
        logger.info("User %s deleted service %s", principal.id, service_id)
        return StatusMessage(message="Service deleted successfully")
