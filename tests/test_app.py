"""
Application wiring: startup, the store-failure handler and log formatting.
"""
import logging
from datetime import date, timedelta
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from salon_booking import db, main
from salon_booking.config import settings
from salon_booking.deps import get_scheduling_policy, get_settings_notifier, get_store
from salon_booking.logging_config import ContextFormatter
from salon_booking.main import app
from salon_booking.models import SalonSettings
from salon_booking.store import SqlBookingStore


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_startup_loads_stored_settings_and_seeds(engine, monkeypatch, restore_root_logger):
    with Session(engine) as session:
        session.add(SalonSettings(id=1, work_start="10:00", work_end="14:00", slot_minutes=60))
        session.commit()

    monkeypatch.setattr(main, "engine", engine)
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(settings, "SEED_SAMPLE_DATA", True)
    get_settings_notifier.cache_clear()
    get_scheduling_policy.cache_clear()

    try:
        with TestClient(app) as client:
            policy = get_scheduling_policy()
            assert policy.slot_minutes == 60
            assert policy.work_hours.start.strftime("%H:%M") == "10:00"
            assert policy.work_hours.end.strftime("%H:%M") == "14:00"
            assert policy.generate_slots(60) == ["10:00", "11:00", "12:00"]

            assert len(client.get("/services").json()) == 6
    finally:
        get_settings_notifier.cache_clear()
        get_scheduling_policy.cache_clear()


@pytest.fixture
def failing_client():
    session = Mock()
    session.exec.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    session.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

    app.dependency_overrides[get_store] = lambda: SqlBookingStore(session)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_store_failure_on_read_route_is_503(failing_client):
    response = failing_client.get("/services")

    assert response.status_code == 503
    assert response.json()["detail"]["error"] == "data_access_failure"


def test_store_failure_while_booking_is_503(failing_client):
    payload = {
        "service_id": 1,
        "date": (date.today() + timedelta(days=1)).isoformat(),
        "time": "10:00",
        "user_id": "user1",
        "user_name": "Maria",
        "user_email": "maria@example.com",
        "user_phone": "0888123456",
    }
    response = failing_client.post("/bookings", json=payload)

    assert response.status_code == 503
    assert response.json()["detail"]["error"] == "data_access_failure"


def test_context_formatter_appends_extra_fields():
    formatter = ContextFormatter("%(levelname)s:%(name)s:%(message)s")
    record = logging.makeLogRecord(
        {"msg": "Booking created", "levelname": "INFO", "name": "salon", "booking_id": 7, "time": "10:00"}
    )

    assert formatter.format(record) == "INFO:salon:Booking created | booking_id=7 time=10:00"


def test_context_formatter_leaves_plain_records_alone():
    formatter = ContextFormatter("%(levelname)s:%(message)s")
    record = logging.makeLogRecord({"msg": "started", "levelname": "INFO"})

    assert formatter.format(record) == "INFO:started"
