"""
Business logic for reviews.

Clients may review an assistant only for a booking between the two of
them that has been completed.  The store recomputes the assistant's
average rating as part of review creation.
"""

import logging
from typing import List

from ..core.errors import NotFoundError, ValidationError
from ..core.security import Principal
from ..models import BookingStatus
from ..schemas.review import ReviewCreate, ReviewRead
from ..storage import Storage
from .policy import ensure_self_or_admin

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for handling assistant reviews."""

    @classmethod
    async def list_for_assistant(cls, storage: Storage, assistant_id: int) -> List[ReviewRead]:
        reviews = await storage.list_reviews_by_assistant(assistant_id)
        return [ReviewRead.model_validate(r.model_dump()) for r in reviews]

    @classmethod
    async def create_review(cls, storage: Storage, principal: Principal, data: ReviewCreate) -> ReviewRead:
        """Create a new review for a completed booking.

        The caller must be the reviewing client (or an administrator).
        The booking must exist, be ``completed`` and involve exactly the
        client and assistant named in the review.
        """
        client_id = data.client_id if data.client_id is not None else principal.id
        ensure_self_or_admin(principal, client_id, "Forbidden - Cannot post reviews as other users")

        booking = await storage.get_booking(data.booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.status != BookingStatus.COMPLETED:
            raise ValidationError("Cannot review incomplete bookings")
        if booking.client_id != client_id or booking.assistant_id != data.assistant_id:
            raise ValidationError("Review details do not match booking")

        review = await storage.create_review({**data.model_dump(), "client_id": client_id})
        logger.info(
            "Client %s rated assistant %s with %s for booking %s",
            client_id,
            review.assistant_id,
            review.rating,
            review.booking_id,
        )
        return ReviewRead.model_validate(review.model_dump())
