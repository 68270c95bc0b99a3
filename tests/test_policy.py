from datetime import datetime, timedelta, timezone

import pytest

from assistant_marketplace_api.app.core.errors import AuthorizationError
from assistant_marketplace_api.app.core.security import Principal
from assistant_marketplace_api.app.models import Booking, BookingStatus, Role
from assistant_marketplace_api.app.services.policy import (
    booking_party,
    ensure_booking_party,
    ensure_can_list_service,
    ensure_conversation_participant,
    ensure_self_or_admin,
    ensure_status_transition,
)

CLIENT = Principal(id=1, role=Role.CLIENT)
ASSISTANT = Principal(id=2, role=Role.ASSISTANT)
STRANGER = Principal(id=3, role=Role.CLIENT)
ADMIN = Principal(id=4, role=Role.ADMIN)


def make_booking(status=BookingStatus.PENDING):
    start = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
    return Booking(
        id=1,
        client_id=CLIENT.id,
        assistant_id=ASSISTANT.id,
        service_id=1,
        start_time=start,
        end_time=start + timedelta(hours=2),
        location={"lat": 48.8566, "lng": 2.3522},
        status=status,
        total_amount=40.0,
        created_at=start,
    )


def test_booking_party():
    booking = make_booking()
    assert booking_party(CLIENT, booking) == "client"
    assert booking_party(ASSISTANT, booking) == "assistant"
    assert booking_party(STRANGER, booking) is None
    ensure_booking_party(ADMIN, booking)
    with pytest.raises(AuthorizationError):
        ensure_booking_party(STRANGER, booking)


def test_client_may_only_cancel():
    booking = make_booking()
    ensure_status_transition(CLIENT, booking, BookingStatus.CANCELLED)
    for status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
        with pytest.raises(AuthorizationError) as excinfo:
            ensure_status_transition(CLIENT, booking, status)
        assert excinfo.value.status_code == 403
        assert "client" in excinfo.value.message


@pytest.mark.parametrize(
    "status", [BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.CANCELLED]
)
def test_assistant_may_confirm_complete_or_cancel(status):
    ensure_status_transition(ASSISTANT, make_booking(), status)


def test_assistant_may_not_reset_to_pending():
    with pytest.raises(AuthorizationError):
        ensure_status_transition(ASSISTANT, make_booking(BookingStatus.CONFIRMED), BookingStatus.PENDING)


def test_resubmitting_current_status_is_allowed():
    ensure_status_transition(CLIENT, make_booking(BookingStatus.CONFIRMED), BookingStatus.CONFIRMED)


def test_admin_may_set_any_status():
    for status in BookingStatus:
        ensure_status_transition(ADMIN, make_booking(BookingStatus.CANCELLED), status)


def test_outsider_cannot_change_status():
    with pytest.raises(AuthorizationError):
        ensure_status_transition(STRANGER, make_booking(), BookingStatus.CANCELLED)


def test_self_or_admin():
    ensure_self_or_admin(CLIENT, CLIENT.id)
    ensure_self_or_admin(ADMIN, CLIENT.id)
    with pytest.raises(AuthorizationError) as excinfo:
        ensure_self_or_admin(STRANGER, CLIENT.id, "Forbidden - not yours")
    assert excinfo.value.message == "Forbidden - not yours"


def test_service_listing_rules():
    ensure_can_list_service(ASSISTANT, ASSISTANT.id)
    ensure_can_list_service(ADMIN, ASSISTANT.id)
    with pytest.raises(AuthorizationError, match="Only assistants"):
        ensure_can_list_service(CLIENT, CLIENT.id)
    with pytest.raises(AuthorizationError, match="other assistants"):
        ensure_can_list_service(ASSISTANT, 99)


def test_conversation_participant():
    ensure_conversation_participant(CLIENT, CLIENT.id, ASSISTANT.id)
    ensure_conversation_participant(ASSISTANT, CLIENT.id, ASSISTANT.id)
    ensure_conversation_participant(ADMIN, CLIENT.id, ASSISTANT.id)
    with pytest.raises(AuthorizationError):
        ensure_conversation_participant(STRANGER, CLIENT.id, ASSISTANT.id)
