"""
Pydantic models for bookings.

A booking reserves an assistant's service for a time window at a
location.  New bookings always start in the ``pending`` status; status
changes go through ``BookingUpdate`` and the transition policy in
``services.policy``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..models import BookingStatus, Location


class BookingCreate(BaseModel):
    client_id: Optional[int] = Field(None, description="Booking client; defaults to the caller")
    assistant_id: int
    service_id: int
    start_time: datetime
    end_time: datetime
    location: Location
    total_amount: float = Field(..., ge=0, examples=[40.0])
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_time_window(self) -> "BookingCreate":
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("start_time and end_time must both carry a timezone or both omit it")
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class BookingUpdate(BaseModel):
    """Fields a booking party may change.

    Omitted fields keep their current value.  ``status`` is subject to
    the transition policy for non‑admin callers.
    """

    status: Optional[BookingStatus] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[Location] = None
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = {"extra": "forbid"}


class BookingRead(BaseModel):
    id: int
    client_id: int
    assistant_id: int
    service_id: int
    start_time: datetime
    end_time: datetime
    location: Location
    status: BookingStatus
    total_amount: float
    notes: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
