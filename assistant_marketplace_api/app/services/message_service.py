"""
Service layer for direct messages.

Users send messages as themselves, read conversations they take part
in and mark messages addressed to them as read.  Administrators may do
all three on anyone's behalf.
"""

import logging
from typing import List

from ..core.errors import NotFoundError
from ..core.security import Principal
from ..schemas.message import MessageCreate, MessageRead
from ..storage import Storage
from .policy import ensure_conversation_participant, ensure_self_or_admin

logger = logging.getLogger(__name__)


class MessageService:
    """Service for user‑to‑user messaging."""

    @classmethod
    async def get_conversation(
        cls,
        storage: Storage,
        principal: Principal,
        user_id: int,
        other_user_id: int,
    ) -> List[MessageRead]:
        """Return every message exchanged between two users, oldest first."""
        ensure_conversation_participant(principal, user_id, other_user_id)
        messages = await storage.list_messages_between(user_id, other_user_id)
        return [MessageRead.model_validate(m.model_dump()) for m in messages]

    @classmethod
    async def send_message(cls, storage: Storage, principal: Principal, data: MessageCreate) -> MessageRead:
        sender_id = data.sender_id if data.sender_id is not None else principal.id
        ensure_self_or_admin(principal, sender_id, "Forbidden - Cannot send messages as other users")
        if sender_id != principal.id and await storage.get_user(sender_id) is None:
            raise NotFoundError("Sender not found")
        if await storage.get_user(data.receiver_id) is None:
            raise NotFoundError("Receiver not found")
        message = await storage.create_message({**data.model_dump(), "sender_id": sender_id})
        logger.debug("User %s messaged user %s (message %s)", sender_id, data.receiver_id, message.id)
        return MessageRead.model_validate(message.model_dump())

    @classmethod
    async def mark_read(cls, storage: Storage, principal: Principal, message_id: int) -> MessageRead:
        message = await storage.get_message(message_id)
        if message is None:
            raise NotFoundError("Message not found")
        ensure_self_or_admin(principal, message.receiver_id)
        updated = await storage.mark_message_read(message_id)
        if updated is None:
            raise NotFoundError("Message not found")
        return MessageRead.model_validate(updated.model_dump())
