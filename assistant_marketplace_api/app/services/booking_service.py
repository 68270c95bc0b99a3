"""
Business logic for bookings.

The ``BookingService`` creates bookings, lists them for the caller and
applies updates, including status changes gated by
``policy.ensure_status_transition``.  New bookings always start as
``pending``.
"""

import logging
from typing import List

from ..core.errors import NotFoundError, ValidationError
from ..core.security import Principal
from ..models import BookingStatus, Role
from ..schemas.booking import BookingCreate, BookingRead, BookingUpdate
from ..storage import Storage
from .common import partial_changes
from .policy import ensure_booking_party, ensure_self_or_admin, ensure_status_transition

logger = logging.getLogger(__name__)


class BookingService:
    """Service for managing bookings."""

    @classmethod
    async def list_bookings(cls, storage: Storage, principal: Principal) -> List[BookingRead]:
        """Return the bookings visible to the caller.

        Administrators see every booking, assistants the bookings made
        with them, clients their own bookings.
        """
        if principal.role == Role.ADMIN:
            bookings = await storage.list_bookings()
        elif principal.role == Role.ASSISTANT:
            bookings = await storage.list_bookings_by_assistant(principal.id)
        else:
            bookings = await storage.list_bookings_by_client(principal.id)
        return [BookingRead.model_validate(b.model_dump()) for b in bookings]

    @classmethod
    async def get_booking(cls, storage: Storage, principal: Principal, booking_id: int) -> BookingRead:
        booking = await storage.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        ensure_booking_party(principal, booking)
        return BookingRead.model_validate(booking.model_dump())

    @classmethod
    async def create_booking(cls, storage: Storage, principal: Principal, data: BookingCreate) -> BookingRead:
        """Create a pending booking.

        Non‑admin callers may only book for themselves.  The service must
        exist and be offered by the named assistant, who must hold the
        assistant role.
        """
        client_id = data.client_id if data.client_id is not None else principal.id
        ensure_self_or_admin(principal, client_id, "Forbidden - Cannot create bookings for other users")
        if client_id != principal.id and await storage.get_user(client_id) is None:
            raise NotFoundError("Client not found")

        service = await storage.get_service(data.service_id)
        if service is None:
            raise NotFoundError("Service not found")
        assistant = await storage.get_user(data.assistant_id)
        if assistant is None or assistant.role != Role.ASSISTANT:
            raise NotFoundError("Assistant not found")
        if service.assistant_id != assistant.id:
            raise ValidationError("Service is not offered by this assistant")

        values = data.model_dump()
        values.update(client_id=client_id, status=BookingStatus.PENDING)
        booking = await storage.create_booking(values)
        logger.info(
            "Client %s booked service %s with assistant %s (booking %s)",
            client_id,
            service.id,
            assistant.id,
            booking.id,
        )
        return BookingRead.model_validate(booking.model_dump())

    @classmethod
    async def update_booking(
        cls,
        storage: Storage,
        principal: Principal,
        booking_id: int,
        update: BookingUpdate,
    ) -> BookingRead:
        """Apply a partial update to a booking.

        Only the booking's client, its assistant or an administrator may
        update it.  A status change must satisfy the transition policy,
        and the resulting time window must stay valid.
        """
        booking = await storage.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        ensure_booking_party(principal, booking)

        changes = partial_changes(update, {"status", "start_time", "end_time", "location"})
        if "status" in changes:
            ensure_status_transition(principal, booking, changes["status"])

        start = changes.get("start_time", booking.start_time)
        end = changes.get("end_time", booking.end_time)
        if (start.tzinfo is None) != (end.tzinfo is None):
            raise ValidationError("start_time and end_time must both carry a timezone or both omit it")
        if end <= start:
            raise ValidationError("end_time must be after start_time")

        updated = await storage.update_booking(booking_id, changes)
        if updated is None:
            raise NotFoundError("Booking not found")
        if updated.status != booking.status:
            logger.info(
                "User %s moved booking %s from %s to %s",
                principal.id,
                booking_id,
                booking.status.value,
                updated.status.value,
            )
        return BookingRead.model_validate(updated.model_dump())
