# salon_booking/errors.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from salon_booking.models import Booking


class BookingErrorKind(str, Enum):
    slot_unavailable = "slot_unavailable"
    service_not_found = "service_not_found"
    not_found = "not_found"
    past_booking = "past_booking"
    already_completed = "already_completed"
    invalid_transition = "invalid_transition"
    data_access_failure = "data_access_failure"


class DataAccessError(RuntimeError):
    """Raised by the store when the database rejects or fails a call."""
    pass


@dataclass(frozen=True)
class BookingResult:
    booking: Optional[Booking] = None
    error: Optional[BookingErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, booking: Optional[Booking] = None) -> "BookingResult":
        return cls(booking=booking)

    @classmethod
    def failure(cls, error: BookingErrorKind, detail: str) -> "BookingResult":
        return cls(error=error, detail=detail)


# routers translate result kinds into responses
HTTP_STATUS_BY_ERROR = {
    BookingErrorKind.slot_unavailable: 409,
    BookingErrorKind.service_not_found: 404,
    BookingErrorKind.not_found: 404,
    BookingErrorKind.past_booking: 422,
    BookingErrorKind.already_completed: 409,
    BookingErrorKind.invalid_transition: 409,
    BookingErrorKind.data_access_failure: 503,
}
