"""
Pydantic schemas for reviews.

Clients review an assistant once the booking between them has been
completed.  Each new review refreshes the assistant's average rating.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    """Schema for creating a new review."""

    booking_id: int = Field(..., description="Completed booking being reviewed")
    client_id: Optional[int] = Field(None, description="Reviewing client; defaults to the caller")
    assistant_id: int = Field(..., description="Assistant being reviewed")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace from the comment and enforce a maximum length."""
        if v is None:
            return None
        v = v.strip()
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v


class ReviewRead(BaseModel):
    """Schema for reading a review from the API."""

    id: int
    booking_id: int
    client_id: int
    assistant_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
