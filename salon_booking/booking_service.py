# salon_booking/booking_service.py

import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from salon_booking.errors import BookingErrorKind, BookingResult, DataAccessError
from salon_booking.models import Booking
from salon_booking.scheduling import SchedulingPolicy
from salon_booking.schemas import BookingCreate, BookingStatus, can_transition
from salon_booking.store import BookingStore

DEFAULT_HORIZON_MONTHS = 3


def add_months(day: date, months: int) -> date:
    """
    Same day-of-month, months later. A day past the end of the target month
    rolls over into the next one (Nov 30 + 3 months -> Mar 2, or Mar 1 in a
    leap year).
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=day.day - 1)


class BookingService:
    """
    Sequences booking attempts against the store.

    Availability is recomputed from stored bookings at write time; nothing
    reserves the slot between that check and the insert, so two clients
    submitting the same slot concurrently can both succeed.
    """

    def __init__(
        self,
        store: BookingStore,
        policy: SchedulingPolicy,
        horizon_months: int = DEFAULT_HORIZON_MONTHS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._policy = policy
        self._horizon_months = horizon_months
        self._clock = clock or datetime.now
        self._logger = logging.getLogger(__name__)

    def _today(self) -> date:
        return self._clock().date()

    # Settings

    def load_settings(self) -> None:
        self._policy.apply_salon_settings(self._store.fetch_settings())

    # Availability

    def is_date_available(self, day: date) -> bool:
        today = self._today()
        if day < today:
            return False
        if day > add_months(today, self._horizon_months):
            return False
        return True

    def get_available_slots(self, day: date, duration: int) -> List[str]:
        bookings = self._store.fetch_bookings(date=day)
        return self._policy.get_available_slots(day, duration, bookings)

    # Booking lifecycle

    def create_booking(self, request: BookingCreate) -> BookingResult:
        try:
            bookings = self._store.fetch_bookings(date=request.date)

            duration = request.service_duration_minutes
            if duration is not None and not self._slot_is_free(request, duration, bookings):
                return self._reject(BookingErrorKind.slot_unavailable, "Selected time is no longer available", request)

            service = self._store.fetch_service_by_id(request.service_id)
            if service is None:
                return self._reject(BookingErrorKind.service_not_found, "Service not found", request)

            # the stored booking occupies the service's own duration
            if duration != service.duration_minutes and not self._slot_is_free(
                request, service.duration_minutes, bookings
            ):
                return self._reject(BookingErrorKind.slot_unavailable, "Selected time is no longer available", request)

            booking = Booking(
                service_id=service.id,
                service_name=service.name,
                service_price=service.price,
                service_duration_minutes=service.duration_minutes,
                date=request.date,
                time=request.time,
                user_id=request.user_id,
                user_name=request.user_name,
                user_email=request.user_email,
                user_phone=request.user_phone,
                notes=request.notes,
                status=BookingStatus.pending.value,
                created_at=self._clock(),
            )
            created = self._store.persist_booking(booking)
        except DataAccessError as exc:
            return self._data_access_failure(exc)

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": created.id,
                "service_id": created.service_id,
                "date": created.date.isoformat(),
                "time": created.time,
            },
        )
        return BookingResult.success(created)

    def cancel_booking(self, booking_id: int) -> BookingResult:
        try:
            booking = self._store.fetch_booking_by_id(booking_id)
            if booking is None:
                return BookingResult.failure(BookingErrorKind.not_found, "Booking not found")

            if booking.date < self._today():
                return BookingResult.failure(BookingErrorKind.past_booking, "Cannot cancel a past booking")

            if booking.status == BookingStatus.completed:
                return BookingResult.failure(BookingErrorKind.already_completed, "Cannot cancel a completed booking")

            if booking.status == BookingStatus.cancelled:
                return BookingResult.success(booking)

            updated = self._store.update_booking(
                booking_id,
                status=BookingStatus.cancelled.value,
                cancelled_at=self._clock(),
            )
        except DataAccessError as exc:
            return self._data_access_failure(exc)

        self._logger.info("Booking cancelled", extra={"booking_id": booking_id})
        return BookingResult.success(updated)

    def update_booking_status(self, booking_id: int, new_status: BookingStatus) -> BookingResult:
        new_status = BookingStatus(new_status)
        try:
            booking = self._store.fetch_booking_by_id(booking_id)
            if booking is None:
                return BookingResult.failure(BookingErrorKind.not_found, "Booking not found")

            current = BookingStatus(booking.status)
            if current == new_status:
                return BookingResult.success(booking)

            if not can_transition(current, new_status):
                self._logger.warning(
                    "Rejected status change from %s", current.value,
                    extra={"booking_id": booking_id, "status": new_status.value},
                )
                return BookingResult.failure(
                    BookingErrorKind.invalid_transition,
                    f"Cannot change status from {current.value} to {new_status.value}",
                )

            fields = {"status": new_status.value}
            if new_status == BookingStatus.cancelled:
                fields["cancelled_at"] = self._clock()
            updated = self._store.update_booking(booking_id, **fields)
        except DataAccessError as exc:
            return self._data_access_failure(exc)

        self._logger.info("Booking status changed", extra={"booking_id": booking_id, "status": new_status.value})
        return BookingResult.success(updated)

    # Queries

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        bookings = self._store.fetch_bookings(user_id=user_id)
        return sorted(bookings, key=lambda b: (b.date, b.time), reverse=True)

    def get_all_bookings(
        self,
        date: Optional[date] = None,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        return self._store.fetch_bookings(date=date, user_id=user_id, status=status)

    def get_booking_stats(self, start: date, end: date) -> dict:
        in_range = [b for b in self._store.fetch_bookings() if start <= b.date <= end]

        stats = {"total": len(in_range)}
        for status in BookingStatus:
            stats[status.value] = sum(1 for b in in_range if b.status == status)
        stats["revenue"] = sum(
            b.service_price or 0 for b in in_range if b.status == BookingStatus.completed
        )
        return stats

    # Helpers

    def _slot_is_free(self, request: BookingCreate, duration: int, bookings: List[Booking]) -> bool:
        available = self._policy.get_available_slots(request.date, duration, bookings)
        return request.time in available

    def _reject(self, kind: BookingErrorKind, detail: str, request: BookingCreate) -> BookingResult:
        self._logger.warning(
            "Booking rejected: %s", kind.value,
            extra={"service_id": request.service_id, "date": request.date.isoformat(), "time": request.time},
        )
        return BookingResult.failure(kind, detail)

    def _data_access_failure(self, exc: DataAccessError) -> BookingResult:
        self._logger.error("Booking store unavailable", extra={"error": str(exc)})
        return BookingResult.failure(BookingErrorKind.data_access_failure, str(exc))
