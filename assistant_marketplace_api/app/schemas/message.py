"""Pydantic schemas for direct messages between users."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    sender_id: Optional[int] = Field(None, description="Sender; defaults to the caller")
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class MessageRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime
    is_read: bool

    model_config = {
        "from_attributes": True,
    }
