"""
In‑memory implementation of the record store.

Each entity kind lives in its own dictionary keyed by identifier, with
a per‑kind counter that only ever moves forward.  Records are replaced
rather than mutated on update so that a caller holding an old record
never observes a half‑applied change.

All mutations go through a single ``asyncio.Lock``.  Reads do not
await anything and therefore always see a consistent snapshot within
the event loop.
"""

import asyncio
import logging
from datetime import datetime, timezone
from itertools import count
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.geo import distance
from ..models import (
    DEFAULT_CATEGORIES,
    Booking,
    Location,
    Message,
    Review,
    Role,
    Service,
    ServiceCategory,
    User,
)
from .base import Storage

RecordT = TypeVar("RecordT", bound=BaseModel)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _merge(record: RecordT, changes: Mapping[str, Any]) -> RecordT:
    """Return a validated copy of ``record`` with ``changes`` applied."""
    merged = record.model_dump()
    merged.update(changes)
    merged["id"] = record.id
    return type(record).model_validate(merged)


class MemoryStorage(Storage):
    """Process‑local store backed by dictionaries."""

    def __init__(self, seed_categories: bool = True) -> None:
        self._lock = asyncio.Lock()
        self._users: Dict[int, User] = {}
        self._categories: Dict[int, ServiceCategory] = {}
        self._services: Dict[int, Service] = {}
        self._bookings: Dict[int, Booking] = {}
        self._reviews: Dict[int, Review] = {}
        self._messages: Dict[int, Message] = {}
        self._ids = {
            User: count(1),
            ServiceCategory: count(1),
            Service: count(1),
            Booking: count(1),
            Review: count(1),
            Message: count(1),
        }
        if seed_categories:
            for category in DEFAULT_CATEGORIES:
                self._insert_category(category)

    def _next_id(self, kind: Type[BaseModel]) -> int:
        return next(self._ids[kind])

    def _insert_category(self, data: Mapping[str, Any]) -> ServiceCategory:
        category = ServiceCategory(**{**data, "id": self._next_id(ServiceCategory)})
        self._categories[category.id] = category
        return category

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        wanted = username.lower()
        return next((u for u in self._users.values() if u.username.lower() == wanted), None)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        return next((u for u in self._users.values() if u.email.lower() == wanted), None)

    async def list_users(self) -> List[User]:
        return list(self._users.values())

    async def create_user(self, data: Mapping[str, Any]) -> User:
        async with self._lock:
            now = _now()
            user = User.model_validate(
                {**data, "id": self._next_id(User), "created_at": now, "last_active": now}
            )
            self._users[user.id] = user
            return user

    async def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        async with self._lock:
            return self._update_user(user_id, changes)

    def _update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = _merge(user, {**changes, "last_active": _now()})
        self._users[user_id] = updated
        return updated

    async def get_nearby_assistants(self, location: Location, radius: float = 10) -> List[User]:
        candidates = []
        for user in self._users.values():
            if user.role != Role.ASSISTANT or user.location is None:
                continue
            km = distance(location.lat, location.lng, user.location.lat, user.location.lng)
            if km <= radius:
                candidates.append((km, user))
        candidates.sort(key=lambda pair: pair[0])
        return [user for _, user in candidates]

    # ------------------------------------------------------------------
    # Service categories
    # ------------------------------------------------------------------

    async def list_service_categories(self) -> List[ServiceCategory]:
        return list(self._categories.values())

    async def get_service_category(self, category_id: int) -> Optional[ServiceCategory]:
        return self._categories.get(category_id)

    async def create_service_category(self, data: Mapping[str, Any]) -> ServiceCategory:
        async with self._lock:
            return self._insert_category(data)

    async def update_service_category(
        self, category_id: int, changes: Mapping[str, Any]
    ) -> Optional[ServiceCategory]:
        async with self._lock:
            category = self._categories.get(category_id)
            if category is None:
                return None
            updated = _merge(category, changes)
            self._categories[category_id] = updated
            return updated

    async def delete_service_category(self, category_id: int) -> bool:
        async with self._lock:
            return self._categories.pop(category_id, None) is not None

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def list_services(self) -> List[Service]:
        return list(self._services.values())

    async def get_service(self, service_id: int) -> Optional[Service]:
        return self._services.get(service_id)

    async def list_services_by_assistant(self, assistant_id: int) -> List[Service]:
        return [s for s in self._services.values() if s.assistant_id == assistant_id]

    async def list_services_by_category(self, category_id: int) -> List[Service]:
        return [s for s in self._services.values() if s.category_id == category_id]

    async def create_service(self, data: Mapping[str, Any]) -> Service:
        async with self._lock:
            service = Service.model_validate({**data, "id": self._next_id(Service)})
            self._services[service.id] = service
            return service

    async def update_service(self, service_id: int, changes: Mapping[str, Any]) -> Optional[Service]:
        async with self._lock:
            service = self._services.get(service_id)
            if service is None:
                return None
            updated = _merge(service, changes)
            self._services[service_id] = updated
            return updated

    async def delete_service(self, service_id: int) -> bool:
        async with self._lock:
            return self._services.pop(service_id, None) is not None

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def list_bookings(self) -> List[Booking]:
        return list(self._bookings.values())

    async def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    async def list_bookings_by_client(self, client_id: int) -> List[Booking]:
        return [b for b in self._bookings.values() if b.client_id == client_id]

    async def list_bookings_by_assistant(self, assistant_id: int) -> List[Booking]:
        return [b for b in self._bookings.values() if b.assistant_id == assistant_id]

    async def create_booking(self, data: Mapping[str, Any]) -> Booking:
        async with self._lock:
            booking = Booking.model_validate(
                {**data, "id": self._next_id(Booking), "created_at": _now()}
            )
            self._bookings[booking.id] = booking
            return booking

    async def update_booking(self, booking_id: int, changes: Mapping[str, Any]) -> Optional[Booking]:
        async with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            updated = _merge(booking, changes)
            self._bookings[booking_id] = updated
            return updated

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def list_reviews(self) -> List[Review]:
        return list(self._reviews.values())

    async def get_review(self, review_id: int) -> Optional[Review]:
        return self._reviews.get(review_id)

    async def list_reviews_by_assistant(self, assistant_id: int) -> List[Review]:
        return [r for r in self._reviews.values() if r.assistant_id == assistant_id]

    async def create_review(self, data: Mapping[str, Any]) -> Review:
        async with self._lock:
            review = Review.model_validate(
                {**data, "id": self._next_id(Review), "created_at": _now()}
            )
            self._reviews[review.id] = review
            ratings = [r.rating for r in self._reviews.values() if r.assistant_id == review.assistant_id]
            avg_rating = sum(ratings) / len(ratings)
            self._update_user(review.assistant_id, {"avg_rating": avg_rating})
            logger.debug(
                "Assistant %s average rating is now %.3f over %d reviews",
                review.assistant_id,
                avg_rating,
                len(ratings),
            )
            return review

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def list_messages(self) -> List[Message]:
        return list(self._messages.values())

    async def get_message(self, message_id: int) -> Optional[Message]:
        return self._messages.get(message_id)

    async def list_messages_between(self, user_id: int, other_user_id: int) -> List[Message]:
        participants = {(user_id, other_user_id), (other_user_id, user_id)}
        conversation = [
            m for m in self._messages.values() if (m.sender_id, m.receiver_id) in participants
        ]
        conversation.sort(key=lambda m: (m.created_at, m.id))
        return conversation

    async def create_message(self, data: Mapping[str, Any]) -> Message:
        async with self._lock:
            message = Message.model_validate(
                {"is_read": False, **data, "id": self._next_id(Message), "created_at": _now()}
            )
            self._messages[message.id] = message
            return message

    async def mark_message_read(self, message_id: int) -> Optional[Message]:
        async with self._lock:
            message = self._messages.get(message_id)
            if message is None:
                return None
            updated = _merge(message, {"is_read": True})
            self._messages[message_id] = updated
            return updated
