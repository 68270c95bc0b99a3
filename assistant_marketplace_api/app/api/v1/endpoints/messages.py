"""
Message endpoints for API v1.

Direct messages between users: read a conversation, send a message and
mark a received message as read.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from assistant_marketplace_api.app.core.security import Principal, get_current_user
from assistant_marketplace_api.app.schemas.message import MessageCreate, MessageRead
from assistant_marketplace_api.app.services.message_service import MessageService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("/{user_id}", response_model=List[MessageRead])
async def get_conversation(
    user_id: int = Path(..., description="One participant of the conversation"),
    other_user_id: int = Query(..., description="The other participant"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> List[MessageRead]:
    """Return the conversation between two users, oldest message first."""
    return await MessageService.get_conversation(storage, current_user, user_id, other_user_id)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    message: MessageCreate,
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> MessageRead:
    return await MessageService.send_message(storage, current_user, message)


@router.patch("/{message_id}/read", response_model=MessageRead)
async def mark_message_read(
    message_id: int = Path(..., description="ID of the message"),
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> MessageRead:
    """Mark a message as read.  Only its receiver (or an administrator) may."""
    return await MessageService.mark_read(storage, current_user, message_id)
