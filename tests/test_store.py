"""
Tests for the SQL store and sample data seeding.
"""
from datetime import date
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from salon_booking.errors import DataAccessError
from salon_booking.models import Booking, Service
from salon_booking.seed import SAMPLE_SERVICES, seed_database
from salon_booking.store import SqlBookingStore


def add_booking(store, day, time, user_id="user1", status="pending"):
    return store.persist_booking(
        Booking(
            service_id=1,
            service_name="Haircut",
            service_price=20,
            service_duration_minutes=30,
            date=day,
            time=time,
            user_id=user_id,
            user_name="Anna",
            user_email="anna@example.com",
            status=status,
        )
    )


def test_fetch_bookings_filters_and_order(store):
    add_booking(store, date(2026, 10, 20), "14:00")
    add_booking(store, date(2026, 10, 20), "09:00", user_id="user2")
    add_booking(store, date(2026, 10, 21), "10:00", status="confirmed")

    all_bookings = store.fetch_bookings()
    assert [(b.date, b.time) for b in all_bookings] == [
        (date(2026, 10, 21), "10:00"),
        (date(2026, 10, 20), "09:00"),
        (date(2026, 10, 20), "14:00"),
    ]

    assert len(store.fetch_bookings(date=date(2026, 10, 20))) == 2
    assert [b.user_id for b in store.fetch_bookings(user_id="user2")] == ["user2"]
    assert [b.status for b in store.fetch_bookings(status="confirmed")] == ["confirmed"]


def test_update_booking_stamps_updated_at(store):
    booking = add_booking(store, date(2026, 10, 20), "10:00")
    assert booking.updated_at is None

    updated = store.update_booking(booking.id, status="confirmed")

    assert updated.status == "confirmed"
    assert updated.updated_at is not None


def test_update_missing_booking_returns_none(store):
    assert store.update_booking(42, status="confirmed") is None


def test_delete_booking(store):
    booking = add_booking(store, date(2026, 10, 20), "10:00")

    assert store.delete_booking(booking.id) is True
    assert store.fetch_booking_by_id(booking.id) is None
    assert store.delete_booking(booking.id) is False


def test_services_crud(store):
    peeling = store.add_service(Service(name="Peeling", category="face", price=30, duration_minutes=30, sort_order=2))
    store.add_service(Service(name="Classic manicure", category="nails", price=25, duration_minutes=45, sort_order=1))

    assert [s.name for s in store.list_services()] == ["Classic manicure", "Peeling"]

    updated = store.update_service(peeling.id, price=32)
    assert updated.price == 32
    assert updated.updated_at is not None

    assert store.delete_service(peeling.id) is True
    assert store.fetch_service_by_id(peeling.id) is None
    assert store.update_service(peeling.id, price=1) is None


def test_settings_default_until_saved(store):
    defaults = store.fetch_settings()
    assert (defaults.work_start, defaults.work_end, defaults.slot_minutes) == ("09:00", "18:00", 30)

    store.save_settings(work_start="10:00", work_end="19:00")
    saved = store.fetch_settings()
    assert (saved.work_start, saved.work_end, saved.slot_minutes) == ("10:00", "19:00", 30)

    store.save_settings(slot_minutes=15)
    assert store.fetch_settings().slot_minutes == 15
    assert store.fetch_settings().work_start == "10:00"


def test_save_settings_publishes(session):
    notifier = Mock()
    store = SqlBookingStore(session, notifier=notifier)

    row = store.save_settings(slot_minutes=45)

    notifier.publish.assert_called_once_with(row)


def test_database_errors_become_data_access_errors():
    session = Mock()
    session.exec.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    store = SqlBookingStore(session)

    with pytest.raises(DataAccessError):
        store.fetch_bookings()
    session.rollback.assert_called_once()


def test_seed_database_is_idempotent(session, store):
    assert seed_database(session) == len(SAMPLE_SERVICES)
    assert seed_database(session) == 0

    names = [s.name for s in store.list_services()]
    assert names[0] == "Classic manicure"
    assert len(names) == 6
