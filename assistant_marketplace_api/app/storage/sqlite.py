"""
SQLite implementation of the record store.

Every operation opens a short‑lived connection and runs in a worker
thread via ``run_in_threadpool``.  Writes are serialised through a
``threading.Lock`` and each compound operation (review creation plus
rating recomputation) runs inside a single transaction.

Nested values (``location``, ``languages``) are stored as JSON text;
timestamps as ISO‑8601 strings in UTC, which sort chronologically.
Usernames and emails are matched through the ``unicode_lower`` SQL
function registered by ``core.db.get_connection``, so that case folding
agrees with ``str.lower`` for non‑ASCII names.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ..core.db import get_connection, get_cursor, init_db
from ..core.geo import distance
from ..models import (
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

JSON_COLUMNS = {"location", "languages"}

TABLES: Dict[Type[BaseModel], str] = {
    User: "users",
    ServiceCategory: "service_categories",
    Service: "services",
    Booking: "bookings",
    Review: "reviews",
    Message: "messages",
}

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_column(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        # Fixed-width microseconds keep lexical order equal to time order.
        return value.isoformat(timespec="microseconds")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


def _to_row(record: BaseModel) -> Dict[str, Any]:
    """Convert a record into column values, without its ``id``."""
    return {
        column: _to_column(value)
        for column, value in record.model_dump(exclude={"id"}).items()
    }


def _from_row(model: Type[RecordT], row: sqlite3.Row) -> RecordT:
    values = dict(row)
    for column in JSON_COLUMNS.intersection(values):
        if values[column] is not None:
            values[column] = json.loads(values[column])
    return model.model_validate(values)


class SqliteStorage(Storage):
    """Record store persisted in a SQLite database file."""

    def __init__(self, db_path: str, seed_categories: bool = True) -> None:
        self.db_path = db_path
        self._lock = Lock()
        init_db(db_path, seed_categories=seed_categories)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def _fetch_one(self, model: Type[RecordT], where: str, params: tuple) -> Optional[RecordT]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                f"SELECT * FROM {TABLES[model]} WHERE {where}", params
            ).fetchone()
            return _from_row(model, row) if row else None
        finally:
            conn.close()

    def _fetch_all(
        self,
        model: Type[RecordT],
        where: Optional[str] = None,
        params: tuple = (),
        order_by: str = "id",
    ) -> List[RecordT]:
        query = f"SELECT * FROM {TABLES[model]}"
        if where:
            query += f" WHERE {where}"
        query += f" ORDER BY {order_by}"
        conn = get_connection(self.db_path)
        try:
            return [_from_row(model, row) for row in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    def _insert(self, cursor: sqlite3.Cursor, model: Type[RecordT], data: Mapping[str, Any]) -> RecordT:
        # Validate with a placeholder id so defaults and coercion apply
        # before anything reaches the database.
        record = model.model_validate({**data, "id": 0})
        values = _to_row(record)
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        cursor.execute(
            f"INSERT INTO {TABLES[model]} ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )
        return record.model_copy(update={"id": cursor.lastrowid})

    def _create(self, model: Type[RecordT], data: Mapping[str, Any]) -> RecordT:
        with self._lock, get_cursor(self.db_path) as cursor:
            return self._insert(cursor, model, data)

    def _update_in(
        self,
        cursor: sqlite3.Cursor,
        model: Type[RecordT],
        record_id: int,
        changes: Mapping[str, Any],
    ) -> Optional[RecordT]:
        table = TABLES[model]
        row = cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
        if row is None:
            return None
        current = _from_row(model, row)
        merged = current.model_dump()
        merged.update(changes)
        merged["id"] = record_id
        updated = model.model_validate(merged)
        values = _to_row(updated)
        assignments = ", ".join(f"{column} = ?" for column in values)
        cursor.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            (*values.values(), record_id),
        )
        return updated

    def _update(self, model: Type[RecordT], record_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        with self._lock, get_cursor(self.db_path) as cursor:
            return self._update_in(cursor, model, record_id, changes)

    def _delete(self, model: Type[BaseModel], record_id: int) -> bool:
        with self._lock, get_cursor(self.db_path) as cursor:
            cursor.execute(f"DELETE FROM {TABLES[model]} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id: int) -> Optional[User]:
        return await run_in_threadpool(self._fetch_one, User, "id = ?", (user_id,))

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await run_in_threadpool(self._fetch_one, User, "unicode_lower(username) = ?", (username.lower(),))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await run_in_threadpool(self._fetch_one, User, "unicode_lower(email) = ?", (email.lower(),))

    async def list_users(self) -> List[User]:
        return await run_in_threadpool(self._fetch_all, User)

    async def create_user(self, data: Mapping[str, Any]) -> User:
        now = _now()
        return await run_in_threadpool(self._create, User, {**data, "created_at": now, "last_active": now})

    async def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        return await run_in_threadpool(self._update, User, user_id, {**changes, "last_active": _now()})

    async def get_nearby_assistants(self, location: Location, radius: float = 10) -> List[User]:
        candidates = []
        assistants = await run_in_threadpool(
            self._fetch_all, User, "role = ? AND location IS NOT NULL", (Role.ASSISTANT.value,)
        )
        for user in assistants:
            km = distance(location.lat, location.lng, user.location.lat, user.location.lng)
            if km <= radius:
                candidates.append((km, user))
        candidates.sort(key=lambda pair: pair[0])
        return [user for _, user in candidates]

    # ------------------------------------------------------------------
    # Service categories
    # ------------------------------------------------------------------

    async def list_service_categories(self) -> List[ServiceCategory]:
        return await run_in_threadpool(self._fetch_all, ServiceCategory)

    async def get_service_category(self, category_id: int) -> Optional[ServiceCategory]:
        return await run_in_threadpool(self._fetch_one, ServiceCategory, "id = ?", (category_id,))

    async def create_service_category(self, data: Mapping[str, Any]) -> ServiceCategory:
        return await run_in_threadpool(self._create, ServiceCategory, data)

    async def update_service_category(
        self, category_id: int, changes: Mapping[str, Any]
    ) -> Optional[ServiceCategory]:
        return await run_in_threadpool(self._update, ServiceCategory, category_id, changes)

    async def delete_service_category(self, category_id: int) -> bool:
        return await run_in_threadpool(self._delete, ServiceCategory, category_id)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def list_services(self) -> List[Service]:
        return await run_in_threadpool(self._fetch_all, Service)

    async def get_service(self, service_id: int) -> Optional[Service]:
        return await run_in_threadpool(self._fetch_one, Service, "id = ?", (service_id,))

    async def list_services_by_assistant(self, assistant_id: int) -> List[Service]:
        return await run_in_threadpool(self._fetch_all, Service, "assistant_id = ?", (assistant_id,))

    async def list_services_by_category(self, category_id: int) -> List[Service]:
        return await run_in_threadpool(self._fetch_all, Service, "category_id = ?", (category_id,))

    async def create_service(self, data: Mapping[str, Any]) -> Service:
        return await run_in_threadpool(self._create, Service, data)

    async def update_service(self, service_id: int, changes: Mapping[str, Any]) -> Optional[Service]:
        return await run_in_threadpool(self._update, Service, service_id, changes)

    async def delete_service(self, service_id: int) -> bool:
        return await run_in_threadpool(self._delete, Service, service_id)

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def list_bookings(self) -> List[Booking]:
        return await run_in_threadpool(self._fetch_all, Booking)

    async def get_booking(self, booking_id: int) -> Optional[Booking]:
        return await run_in_threadpool(self._fetch_one, Booking, "id = ?", (booking_id,))

    async def list_bookings_by_client(self, client_id: int) -> List[Booking]:
        return await run_in_threadpool(self._fetch_all, Booking, "client_id = ?", (client_id,))

    async def list_bookings_by_assistant(self, assistant_id: int) -> List[Booking]:
        return await run_in_threadpool(self._fetch_all, Booking, "assistant_id = ?", (assistant_id,))

    async def create_booking(self, data: Mapping[str, Any]) -> Booking:
        return await run_in_threadpool(self._create, Booking, {**data, "created_at": _now()})

    async def update_booking(self, booking_id: int, changes: Mapping[str, Any]) -> Optional[Booking]:
        return await run_in_threadpool(self._update, Booking, booking_id, changes)

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def list_reviews(self) -> List[Review]:
        return await run_in_threadpool(self._fetch_all, Review)

    async def get_review(self, review_id: int) -> Optional[Review]:
        return await run_in_threadpool(self._fetch_one, Review, "id = ?", (review_id,))

    async def list_reviews_by_assistant(self, assistant_id: int) -> List[Review]:
        return await run_in_threadpool(self._fetch_all, Review, "assistant_id = ?", (assistant_id,))

    async def create_review(self, data: Mapping[str, Any]) -> Review:
        return await run_in_threadpool(self._create_review, data)

    def _create_review(self, data: Mapping[str, Any]) -> Review:
        with self._lock, get_cursor(self.db_path) as cursor:
            review = self._insert(cursor, Review, {**data, "created_at": _now()})
            row = cursor.execute(
                "SELECT AVG(rating) AS avg_rating, COUNT(*) AS total FROM reviews WHERE assistant_id = ?",
                (review.assistant_id,),
            ).fetchone()
            self._update_in(
                cursor,
                User,
                review.assistant_id,
                {"avg_rating": row["avg_rating"], "last_active": _now()},
            )
            logger.debug(
                "Assistant %s average rating is now %.3f over %d reviews",
                review.assistant_id,
                row["avg_rating"],
                row["total"],
            )
            return review

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def list_messages(self) -> List[Message]:
        return await run_in_threadpool(self._fetch_all, Message)

    async def get_message(self, message_id: int) -> Optional[Message]:
        return await run_in_threadpool(self._fetch_one, Message, "id = ?", (message_id,))

    async def list_messages_between(self, user_id: int, other_user_id: int) -> List[Message]:
        return await run_in_threadpool(
            self._fetch_all,
            Message,
            "(sender_id = ? AND receiver_id = ?) OR (sender_id = ? AND receiver_id = ?)",
            (user_id, other_user_id, other_user_id, user_id),
            order_by="created_at, id",
        )

    async def create_message(self, data: Mapping[str, Any]) -> Message:
        return await run_in_threadpool(self._create, Message, {"is_read": False, **data, "created_at": _now()})

    async def mark_message_read(self, message_id: int) -> Optional[Message]:
        return await run_in_threadpool(self._update, Message, message_id, {"is_read": True})
