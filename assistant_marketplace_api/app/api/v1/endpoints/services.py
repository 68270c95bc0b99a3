"""
Service listing endpoints for API v1.

Browsing is public.  Assistants create and manage their own services;
administrators manage any.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from assistant_marketplace_api.app.core.security import Principal, get_current_user
from assistant_marketplace_api.app.schemas.common import StatusMessage
from assistant_marketplace_api.app.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from assistant_marketplace_api.app.services.listing_service import ListingService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[ServiceRead])
async def list_services(
    assistant_id: Optional[int] = Query(None, description="Only services of this assistant"),
    category_id: Optional[int] = Query(None, description="Only services in this category"),
    storage: Storage = Depends(get_storage),
) -> List[ServiceRead]:
    return await ListingService.list_services(storage, assistant_id=assistant_id, category_id=category_id)


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service(
    service_id: int = Path(..., description="ID of the service"),
    storage: Storage = Depends(get_storage),
) -> ServiceRead:
    return await ListingService.get_service(storage, service_id)


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service(
    service: ServiceCreate,
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> ServiceRead:
    """List a new service.

    Only assistants and administrators may create services, and an
    assistant only for themselves.
    """
    return await ListingService.create_service(storage, current_user, service)


@router.patch("/{service_id}", response_model=ServiceRead)
async def update_service(
    update: ServiceUpdate,
    service_id: int = Path(..., description="ID of the service"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> ServiceRead:
    return await ListingService.update_service(storage, current_user, service_id, update)


@router.delete("/{service_id}", response_model=StatusMessage)
async def delete_service(
    service_id: int = Path(..., description="ID of the service"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> StatusMessage:
    return await ListingService.delete_service(storage, current_user, service_id)
