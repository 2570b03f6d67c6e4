# salon_booking/deps.py

from functools import lru_cache

from fastapi import Depends, HTTPException
from sqlmodel import Session

from salon_booking.booking_service import BookingService
from salon_booking.config import settings
from salon_booking.db import get_session
from salon_booking.errors import HTTP_STATUS_BY_ERROR, BookingResult
from salon_booking.scheduling import SchedulingPolicy, SettingsNotifier, WorkingHoursConfig
from salon_booking.store import SqlBookingStore


@lru_cache
def get_settings_notifier() -> SettingsNotifier:
    return SettingsNotifier()


@lru_cache
def get_scheduling_policy() -> SchedulingPolicy:
    # one policy per process, kept current by settings pushed on save
    policy = SchedulingPolicy(
        WorkingHoursConfig.from_strings(settings.DEFAULT_WORK_START, settings.DEFAULT_WORK_END),
        settings.DEFAULT_SLOT_MINUTES,
    )
    policy.follow(get_settings_notifier())
    return policy


def get_store(session: Session = Depends(get_session)) -> SqlBookingStore:
    return SqlBookingStore(session, notifier=get_settings_notifier())


def get_booking_service(store: SqlBookingStore = Depends(get_store)) -> BookingService:
    return BookingService(
        store,
        get_scheduling_policy(),
        horizon_months=settings.BOOKING_HORIZON_MONTHS,
    )


def raise_for_result(result: BookingResult) -> None:
    if not result.ok:
        raise HTTPException(
            status_code=HTTP_STATUS_BY_ERROR[result.error],
            detail={"error": result.error.value, "message": result.detail},
        )
