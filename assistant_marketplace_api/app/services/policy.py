"""
Authorization and booking transition rules.

Every rule here is a plain function that either returns quietly or
raises ``AuthorizationError``.  Administrators pass every check.
"""

import logging
from typing import Optional

from ..core.errors import AuthorizationError
from ..core.security import Principal
from ..models import Booking, BookingStatus, Role

logger = logging.getLogger(__name__)

# Status values each booking party may move a booking to.
ALLOWED_STATUS_CHANGES = {
    "client": {BookingStatus.CANCELLED},
    "assistant": {BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.CANCELLED},
}


def _deny(principal: Principal, message: str) -> None:
    logger.warning("Denied user %s: %s", principal.id, message)
    raise AuthorizationError(message)


def ensure_self_or_admin(principal: Principal, owner_id: int, message: str = "Forbidden") -> None:
    """Allow the owner of a resource or an administrator."""
    if not principal.is_admin and principal.id != owner_id:
        _deny(principal, message)


def ensure_can_list_service(principal: Principal, assistant_id: int) -> None:
    """Only assistants (for themselves) and administrators list services."""
    if principal.role not in (Role.ASSISTANT, Role.ADMIN):
        _deny(principal, "Forbidden - Only assistants can create services")
    if not principal.is_admin and assistant_id != principal.id:
        _deny(principal, "Forbidden - Cannot create services for other assistants")


def booking_party(principal: Principal, booking: Booking) -> Optional[str]:
    """Return ``"client"`` or ``"assistant"`` for a party to the booking, else ``None``."""
    if booking.client_id == principal.id:
        return "client"
    if booking.assistant_id == principal.id:
        return "assistant"
    return None


def ensure_booking_party(principal: Principal, booking: Booking) -> None:
    if not principal.is_admin and booking_party(principal, booking) is None:
        _deny(principal, "Forbidden")


def ensure_status_transition(principal: Principal, booking: Booking, new_status: BookingStatus) -> None:
    """Apply the booking status policy.

    Re‑submitting the current status is not a transition and is always
    allowed.  Otherwise a client may only cancel; an assistant may
    confirm, complete or cancel.
    """
    if principal.is_admin or new_status == booking.status:
        return
    party = booking_party(principal, booking)
    if party is None:
        _deny(principal, "Forbidden")
    if new_status not in ALLOWED_STATUS_CHANGES[party]:
        _deny(principal, f"{party} cannot change booking status to {new_status.value}")


def ensure_conversation_participant(principal: Principal, user_id: int, other_user_id: int) -> None:
    if not principal.is_admin and principal.id not in (user_id, other_user_id):
        _deny(principal, "Forbidden")
