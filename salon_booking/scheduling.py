# salon_booking/scheduling.py

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Callable, Iterable, List, Optional

from salon_booking.schemas import BookingStatus

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 30


def parse_time(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals, touching ends do not overlap
    return a_start < b_end and a_end > b_start


@dataclass(frozen=True)
class WorkingHoursConfig:
    start: time
    end: time

    @classmethod
    def from_strings(cls, start: str, end: str) -> "WorkingHoursConfig":
        return cls(start=time.fromisoformat(start), end=time.fromisoformat(end))

    @property
    def start_minutes(self) -> int:
        return self.start.hour * 60 + self.start.minute

    @property
    def end_minutes(self) -> int:
        return self.end.hour * 60 + self.end.minute


@dataclass(frozen=True)
class SlotSchedule:
    work_hours: WorkingHoursConfig
    slot_minutes: int


class SchedulingPolicy:
    """
    Working-hour window and slot granularity, plus the slot math built on them.

    The configuration is read on every computation, so a call to
    apply_settings() is visible to the very next slot query. Both values live
    in one immutable SlotSchedule that is swapped whole, and each computation
    works from a single snapshot of it.
    """

    def __init__(
        self,
        work_hours: WorkingHoursConfig,
        slot_minutes: int = DEFAULT_SLOT_MINUTES,
    ) -> None:
        if slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        self._schedule = SlotSchedule(work_hours, slot_minutes)

    @property
    def schedule(self) -> SlotSchedule:
        return self._schedule

    @property
    def work_hours(self) -> WorkingHoursConfig:
        return self._schedule.work_hours

    @property
    def slot_minutes(self) -> int:
        return self._schedule.slot_minutes

    def apply_settings(
        self,
        work_hours: Optional[WorkingHoursConfig] = None,
        slot_minutes: Optional[int] = None,
    ) -> None:
        if slot_minutes is not None and slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")

        current = self._schedule
        schedule = SlotSchedule(
            work_hours if work_hours is not None else current.work_hours,
            slot_minutes if slot_minutes is not None else current.slot_minutes,
        )
        self._schedule = schedule
        logger.info(
            "Scheduling settings applied: %s-%s every %s min",
            schedule.work_hours.start.strftime("%H:%M"),
            schedule.work_hours.end.strftime("%H:%M"),
            schedule.slot_minutes,
        )

    def apply_salon_settings(self, salon_settings) -> None:
        """Apply a stored settings record (work_start, work_end, slot_minutes)."""
        work_hours = None
        if salon_settings.work_start and salon_settings.work_end:
            work_hours = WorkingHoursConfig.from_strings(salon_settings.work_start, salon_settings.work_end)
        self.apply_settings(work_hours, salon_settings.slot_minutes or None)

    def follow(self, notifier: "SettingsNotifier") -> Callable[[], None]:
        """Track settings pushed through notifier. Returns the unsubscribe callable."""
        return notifier.subscribe(self.apply_salon_settings)

    def generate_slots(self, service_duration_minutes: int) -> List[str]:
        if service_duration_minutes <= 0:
            raise ValueError("service duration must be positive")

        schedule = self._schedule
        slots = []
        current = schedule.work_hours.start_minutes
        last_start = schedule.work_hours.end_minutes - service_duration_minutes
        while current < last_start:
            slots.append(format_time(current))
            current += schedule.slot_minutes
        return slots

    def has_conflict(self, candidate: str, duration: int, existing_bookings: Iterable) -> bool:
        """
        True if [candidate, candidate + duration) overlaps any of the given bookings.

        Cancelled bookings must already be filtered out by the caller.
        """
        slot_start = parse_time(candidate)
        slot_end = slot_start + duration

        for b in existing_bookings:
            booked_start = parse_time(b.time)
            booked_end = booked_start + b.service_duration_minutes
            if overlaps(slot_start, slot_end, booked_start, booked_end):
                return True
        return False

    def get_available_slots(self, day: date, duration: int, bookings_for_date: Iterable) -> List[str]:
        active = [
            b for b in bookings_for_date
            if b.status != BookingStatus.cancelled and b.date == day
        ]
        return [
            slot for slot in self.generate_slots(duration)
            if not self.has_conflict(slot, duration, active)
        ]


class SettingsNotifier:
    """Pushes newly saved salon settings to whoever subscribed."""

    def __init__(self) -> None:
        self._subscribers: List[Callable] = []

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, salon_settings) -> None:
        for callback in list(self._subscribers):
            callback(salon_settings)
