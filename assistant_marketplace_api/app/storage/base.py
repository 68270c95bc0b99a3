"""
The record store contract.

``Storage`` lists every read and write operation the rest of the
application may perform on persisted records.  Route handlers and
services depend only on this class, so the in‑memory implementation
can be replaced by the SQLite one (or any other backend) without
touching callers.

Conventions shared by all implementations:

* ``create_*`` methods take a mapping of field values, assign the next
  identifier for that entity kind and stamp ``created_at`` (and, for
  users, ``last_active``).  Identifiers are never reused.
* ``update_*`` methods merge the supplied fields over the stored record
  and return the new record, or ``None`` if the id does not exist.
  Updating a user always refreshes ``last_active``.
* Referential integrity is *not* checked here; callers verify that
  referenced records exist before writing.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from ..models import Booking, Location, Message, Review, Service, ServiceCategory, User


class Storage(ABC):
    """Abstract record store for the marketplace."""

    # Users
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup by username."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""

    @abstractmethod
    async def list_users(self) -> List[User]: ...

    @abstractmethod
    async def create_user(self, data: Mapping[str, Any]) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]: ...

    @abstractmethod
    async def get_nearby_assistants(self, location: Location, radius: float = 10) -> List[User]:
        """Assistants with a location within ``radius`` km, nearest first."""

    # Service categories
    @abstractmethod
    async def list_service_categories(self) -> List[ServiceCategory]: ...

    @abstractmethod
    async def get_service_category(self, category_id: int) -> Optional[ServiceCategory]: ...

    @abstractmethod
    async def create_service_category(self, data: Mapping[str, Any]) -> ServiceCategory: ...

    @abstractmethod
    async def update_service_category(
        self, category_id: int, changes: Mapping[str, Any]
    ) -> Optional[ServiceCategory]: ...

    @abstractmethod
    async def delete_service_category(self, category_id: int) -> bool: ...

    # Services
    @abstractmethod
    async def list_services(self) -> List[Service]: ...

    @abstractmethod
    async def get_service(self, service_id: int) -> Optional[Service]: ...

    @abstractmethod
    async def list_services_by_assistant(self, assistant_id: int) -> List[Service]: ...

    @abstractmethod
    async def list_services_by_category(self, category_id: int) -> List[Service]: ...

    @abstractmethod
    async def create_service(self, data: Mapping[str, Any]) -> Service: ...

    @abstractmethod
    async def update_service(self, service_id: int, changes: Mapping[str, Any]) -> Optional[Service]: ...

    @abstractmethod
    async def delete_service(self, service_id: int) -> bool: ...

    # Bookings
    @abstractmethod
    async def list_bookings(self) -> List[Booking]: ...

    @abstractmethod
    async def get_booking(self, booking_id: int) -> Optional[Booking]: ...

    @abstractmethod
    async def list_bookings_by_client(self, client_id: int) -> List[Booking]: ...

    @abstractmethod
    async def list_bookings_by_assistant(self, assistant_id: int) -> List[Booking]: ...

    @abstractmethod
    async def create_booking(self, data: Mapping[str, Any]) -> Booking: ...

    @abstractmethod
    async def update_booking(self, booking_id: int, changes: Mapping[str, Any]) -> Optional[Booking]: ...

    # Reviews
    @abstractmethod
    async def list_reviews(self) -> List[Review]: ...

    @abstractmethod
    async def get_review(self, review_id: int) -> Optional[Review]: ...

    @abstractmethod
    async def list_reviews_by_assistant(self, assistant_id: int) -> List[Review]: ...

    @abstractmethod
    async def create_review(self, data: Mapping[str, Any]) -> Review:
        """Insert a review and recompute the assistant's average rating."""

    # Messages
    @abstractmethod
    async def list_messages(self) -> List[Message]: ...

    @abstractmethod
    async def get_message(self, message_id: int) -> Optional[Message]: ...

    @abstractmethod
    async def list_messages_between(self, user_id: int, other_user_id: int) -> List[Message]:
        """Both directions of a conversation, oldest first."""

    @abstractmethod
    async def create_message(self, data: Mapping[str, Any]) -> Message: ...

    @abstractmethod
    async def mark_message_read(self, message_id: int) -> Optional[Message]: ...
