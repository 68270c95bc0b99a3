"""
Booking endpoints for API v1.

Every route requires a session.  Listing is scoped to the caller's
role; single bookings are visible to their client, their assistant and
administrators.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from assistant_marketplace_api.app.core.security import Principal, get_current_user
from assistant_marketplace_api.app.schemas.booking import BookingCreate, BookingRead, BookingUpdate
from assistant_marketplace_api.app.services.booking_service import BookingService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[BookingRead])
async def list_bookings(
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> List[BookingRead]:
    return await BookingService.list_bookings(storage, current_user)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> BookingRead:
    return await BookingService.get_booking(storage, current_user, booking_id)


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> BookingRead:
    """Book an assistant's service.  The booking starts as ``pending``."""
    return await BookingService.create_booking(storage, current_user, booking)


@router.patch("/{booking_id}", response_model=BookingRead)
async def update_booking(
    update: BookingUpdate,
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> BookingRead:
    """Update a booking.

    Clients may only cancel; assistants may confirm, complete or
    cancel.  Administrators may set any status.
    """
    return await BookingService.update_booking(storage, current_user, booking_id, update)
