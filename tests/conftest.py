"""Shared test fixtures."""
from datetime import datetime, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from salon_booking import models  # noqa: F401
from salon_booking.booking_service import BookingService
from salon_booking.db import get_session
from salon_booking.deps import get_scheduling_policy, get_settings_notifier
from salon_booking.main import app
from salon_booking.models import Service
from salon_booking.scheduling import SchedulingPolicy, SettingsNotifier, WorkingHoursConfig
from salon_booking.store import SqlBookingStore

NOW = datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def notifier() -> SettingsNotifier:
    return SettingsNotifier()


@pytest.fixture
def store(session, notifier) -> SqlBookingStore:
    return SqlBookingStore(session, notifier=notifier)


@pytest.fixture
def policy() -> SchedulingPolicy:
    return SchedulingPolicy(WorkingHoursConfig(start=time(9, 0), end=time(18, 0)), slot_minutes=30)


@pytest.fixture
def booking_service(store, policy) -> BookingService:
    return BookingService(store, policy, clock=lambda: NOW)


@pytest.fixture
def haircut(store) -> Service:
    return store.add_service(
        Service(name="Haircut", category="hair", price=20, duration_minutes=30, sort_order=1)
    )


@pytest.fixture
def gel_manicure(store) -> Service:
    return store.add_service(
        Service(name="Gel manicure", category="nails", price=35, duration_minutes=60, sort_order=2)
    )


@pytest.fixture
def client(engine):
    """API client bound to the in-memory database, with a fresh scheduling policy."""
    get_settings_notifier.cache_clear()
    get_scheduling_policy.cache_clear()

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    # the app builds its policy at startup; do the same here
    get_scheduling_policy()
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_settings_notifier.cache_clear()
    get_scheduling_policy.cache_clear()
