"""Behaviour every record store must share, run against both backends."""

from datetime import datetime, timedelta, timezone

import pytest

from assistant_marketplace_api.app.models import BookingStatus, DEFAULT_CATEGORIES, Location, Role

from conftest import make_user

NOW = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
PARIS = {"lat": 48.8566, "lng": 2.3522}


async def make_booking(store, client_id, assistant_id, service_id=1):
    return await store.create_booking(
        {
            "client_id": client_id,
            "assistant_id": assistant_id,
            "service_id": service_id,
            "start_time": NOW,
            "end_time": NOW + timedelta(hours=2),
            "location": PARIS,
            "total_amount": 40.0,
        }
    )


async def test_default_categories_are_seeded(store):
    categories = await store.list_service_categories()
    assert [c.name for c in categories] == [c["name"] for c in DEFAULT_CATEGORIES]
    assert [c.id for c in categories] == list(range(1, len(DEFAULT_CATEGORIES) + 1))


async def test_user_ids_increase(store):
    alice = await make_user(store, "alice")
    bob = await make_user(store, "bob")
    carol = await make_user(store, "carol")
    assert alice.id < bob.id < carol.id
    assert (await store.get_user(bob.id)).username == "bob"
    assert await store.get_user(999) is None


async def test_lookups_ignore_case(store):
    alice = await make_user(store, "alice")
    assert (await store.get_user_by_username("ALICE")).id == alice.id
    assert (await store.get_user_by_email("Alice@Mail.com")).id == alice.id
    assert await store.get_user_by_username("nobody") is None

    elodie = await make_user(store, "ÉLODIE")
    assert (await store.get_user_by_username("élodie")).id == elodie.id
    assert (await store.get_user_by_email("élodie@mail.com")).id == elodie.id


async def test_update_user_refreshes_last_active(store):
    alice = await make_user(store, "alice")
    before = datetime.now(timezone.utc)
    updated = await store.update_user(alice.id, {"bio": "Hello"})
    assert updated.bio == "Hello"
    assert updated.last_active >= before
    assert updated.created_at == alice.created_at
    assert (await store.get_user(alice.id)).bio == "Hello"


async def test_update_missing_user_returns_none(store):
    assert await store.update_user(42, {"bio": "x"}) is None


async def test_nested_location_survives_storage(store):
    alice = await make_user(store, "alice", location={**PARIS, "address": "Rue de Rivoli"}, languages=["fr"])
    fetched = await store.get_user(alice.id)
    assert fetched.location == Location(lat=48.8566, lng=2.3522, address="Rue de Rivoli")
    assert fetched.languages == ["fr"]


async def test_nearby_assistants_filters_and_sorts(store):
    # About 5.6 km and 1.1 km north of the center, and one far away.
    far_north = await make_user(store, "far", Role.ASSISTANT, location={"lat": 48.9066, "lng": 2.3522})
    near = await make_user(store, "near", Role.ASSISTANT, location={"lat": 48.8666, "lng": 2.3522})
    await make_user(store, "london", Role.ASSISTANT, location={"lat": 51.5074, "lng": -0.1278})
    await make_user(store, "nowhere", Role.ASSISTANT)
    await make_user(store, "client", Role.CLIENT, location=PARIS)

    found = await store.get_nearby_assistants(Location(**PARIS), 10)
    assert [u.id for u in found] == [near.id, far_north.id]

    found = await store.get_nearby_assistants(Location(**PARIS), 2)
    assert [u.id for u in found] == [near.id]


async def test_nearby_default_radius_is_ten_km(store):
    within = await make_user(store, "within", Role.ASSISTANT, location={"lat": 48.9366, "lng": 2.3522})
    await make_user(store, "beyond", Role.ASSISTANT, location={"lat": 48.9666, "lng": 2.3522})
    found = await store.get_nearby_assistants(Location(**PARIS))
    assert [u.id for u in found] == [within.id]


async def test_category_update_and_delete(store):
    category = await store.create_service_category({"name": "Photographer", "icon": "ri-camera-line"})
    updated = await store.update_service_category(category.id, {"description": "Event photos"})
    assert updated.description == "Event photos"
    assert updated.name == "Photographer"

    assert await store.delete_service_category(category.id) is True
    assert await store.delete_service_category(category.id) is False
    assert await store.get_service_category(category.id) is None

    replacement = await store.create_service_category({"name": "Florist", "icon": "ri-flower-line"})
    assert replacement.id > category.id


async def test_service_filters_and_delete(store):
    anna = await make_user(store, "anna", Role.ASSISTANT)
    ben = await make_user(store, "ben", Role.ASSISTANT)
    s1 = await store.create_service({"assistant_id": anna.id, "category_id": 1, "price_per_hour": 20})
    s2 = await store.create_service({"assistant_id": ben.id, "category_id": 1, "price_per_hour": 30})
    s3 = await store.create_service({"assistant_id": anna.id, "category_id": 2, "price_per_hour": 25})

    assert [s.id for s in await store.list_services_by_assistant(anna.id)] == [s1.id, s3.id]
    assert [s.id for s in await store.list_services_by_category(1)] == [s1.id, s2.id]

    assert await store.delete_service(s2.id) is True
    assert await store.delete_service(s2.id) is False
    assert [s.id for s in await store.list_services()] == [s1.id, s3.id]

    assert await store.delete_service(s3.id) is True
    s4 = await store.create_service({"assistant_id": ben.id, "category_id": 3, "price_per_hour": 15})
    assert s4.id > s3.id
    assert await store.get_service(s2.id) is None


async def test_bookings_by_party_and_status_update(store):
    alice = await make_user(store, "alice")
    anna = await make_user(store, "anna", Role.ASSISTANT)
    booking = await make_booking(store, alice.id, anna.id)
    assert booking.status == BookingStatus.PENDING

    updated = await store.update_booking(booking.id, {"status": BookingStatus.CONFIRMED})
    assert updated.status == BookingStatus.CONFIRMED
    assert updated.start_time == NOW
    assert (await store.get_booking(booking.id)).status == BookingStatus.CONFIRMED

    assert [b.id for b in await store.list_bookings_by_client(alice.id)] == [booking.id]
    assert [b.id for b in await store.list_bookings_by_assistant(anna.id)] == [booking.id]
    assert await store.list_bookings_by_client(anna.id) == []
    assert await store.update_booking(999, {"notes": "x"}) is None


async def test_review_updates_average_rating(store):
    alice = await make_user(store, "alice")
    anna = await make_user(store, "anna", Role.ASSISTANT)
    assert anna.avg_rating is None

    expected = []
    for rating in (5, 3, 4):
        booking = await make_booking(store, alice.id, anna.id)
        n = len(expected)
        mean = sum(expected) / n if n else 0
        await store.create_review(
            {"booking_id": booking.id, "client_id": alice.id, "assistant_id": anna.id, "rating": rating}
        )
        expected.append(rating)
        refreshed = await store.get_user(anna.id)
        assert refreshed.avg_rating == pytest.approx((mean * n + rating) / (n + 1))

    assert (await store.get_user(anna.id)).avg_rating == pytest.approx(4.0)
    assert len(await store.list_reviews_by_assistant(anna.id)) == 3


async def test_conversation_is_ordered_and_private(store):
    alice = await make_user(store, "alice")
    bob = await make_user(store, "bob")
    carol = await make_user(store, "carol")

    m1 = await store.create_message({"sender_id": alice.id, "receiver_id": bob.id, "content": "Hi"})
    await store.create_message({"sender_id": alice.id, "receiver_id": carol.id, "content": "Psst"})
    m3 = await store.create_message({"sender_id": bob.id, "receiver_id": alice.id, "content": "Hello"})
    m4 = await store.create_message({"sender_id": alice.id, "receiver_id": bob.id, "content": "Lunch?"})

    conversation = await store.list_messages_between(bob.id, alice.id)
    assert [m.id for m in conversation] == [m1.id, m3.id, m4.id]
    assert all(a.created_at <= b.created_at for a, b in zip(conversation, conversation[1:]))
    assert not m1.is_read


async def test_mark_message_read(store):
    alice = await make_user(store, "alice")
    bob = await make_user(store, "bob")
    message = await store.create_message({"sender_id": alice.id, "receiver_id": bob.id, "content": "Hi"})
    assert (await store.mark_message_read(message.id)).is_read is True
    assert (await store.get_message(message.id)).is_read is True
    assert await store.mark_message_read(999) is None


async def test_list_all_and_get_by_id(store):
    alice = await make_user(store, "alice")
    anna = await make_user(store, "anna", Role.ASSISTANT)
    booking = await make_booking(store, alice.id, anna.id)
    review = await store.create_review(
        {"booking_id": booking.id, "client_id": alice.id, "assistant_id": anna.id, "rating": 4, "comment": "Good"}
    )
    message = await store.create_message({"sender_id": alice.id, "receiver_id": anna.id, "content": "Thanks"})

    assert [u.id for u in await store.list_users()] == [alice.id, anna.id]
    assert [b.id for b in await store.list_bookings()] == [booking.id]
    assert [r.id for r in await store.list_reviews()] == [review.id]
    assert [m.id for m in await store.list_messages()] == [message.id]
    assert (await store.get_review(review.id)).comment == "Good"
    assert (await store.get_message(message.id)).content == "Thanks"
    assert await store.get_review(999) is None
    assert await store.get_booking(999) is None
