# salon_booking/store.py

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from salon_booking.config import settings
from salon_booking.errors import DataAccessError
from salon_booking.models import Booking, SalonSettings, Service
from salon_booking.scheduling import SettingsNotifier

logger = logging.getLogger(__name__)


class BookingStore(ABC):
    """What the booking orchestrator needs from persistence."""

    @abstractmethod
    def fetch_bookings(
        self,
        date: Optional[date] = None,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def fetch_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    def fetch_service_by_id(self, service_id: int) -> Optional[Service]:
        raise NotImplementedError

    @abstractmethod
    def persist_booking(self, booking: Booking) -> Booking:
        """Insert the booking. Returns it with its id assigned."""
        raise NotImplementedError

    @abstractmethod
    def update_booking(self, booking_id: int, **fields) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    def fetch_settings(self) -> SalonSettings:
        raise NotImplementedError


def default_settings() -> SalonSettings:
    return SalonSettings(
        work_start=settings.DEFAULT_WORK_START,
        work_end=settings.DEFAULT_WORK_END,
        slot_minutes=settings.DEFAULT_SLOT_MINUTES,
    )


class SqlBookingStore(BookingStore):
    def __init__(self, session: Session, notifier: Optional[SettingsNotifier] = None) -> None:
        self._session = session
        self._notifier = notifier

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Database call failed: %s", action, extra={"error": str(exc)})
            raise DataAccessError(f"{action} failed") from exc

    # Bookings

    def fetch_bookings(self, date=None, user_id=None, status=None) -> List[Booking]:
        stmt = select(Booking)
        if date is not None:
            stmt = stmt.where(Booking.date == date)
        if user_id is not None:
            stmt = stmt.where(Booking.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Booking.status == status)

        stmt = stmt.order_by(Booking.date.desc(), Booking.time)

        with self._guard("fetch bookings"):
            return list(self._session.exec(stmt).all())

    def fetch_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        with self._guard("fetch booking"):
            return self._session.get(Booking, booking_id)

    def persist_booking(self, booking: Booking) -> Booking:
        with self._guard("persist booking"):
            self._session.add(booking)
            self._session.commit()
            self._session.refresh(booking)  # fills booking.id
        return booking

    def update_booking(self, booking_id: int, **fields) -> Optional[Booking]:
        with self._guard("update booking"):
            target = self._session.get(Booking, booking_id)
            if target is None:
                return None
            for key, value in fields.items():
                setattr(target, key, value)
            target.updated_at = datetime.now()
            self._session.add(target)
            self._session.commit()
            self._session.refresh(target)
        return target

    def delete_booking(self, booking_id: int) -> bool:
        with self._guard("delete booking"):
            target = self._session.get(Booking, booking_id)
            if target is None:
                return False
            self._session.delete(target)
            self._session.commit()
        return True

    # Services

    def list_services(self) -> List[Service]:
        stmt = select(Service).order_by(Service.sort_order, Service.id)
        with self._guard("list services"):
            return list(self._session.exec(stmt).all())

    def fetch_service_by_id(self, service_id: int) -> Optional[Service]:
        with self._guard("fetch service"):
            return self._session.get(Service, service_id)

    def add_service(self, service: Service) -> Service:
        with self._guard("add service"):
            self._session.add(service)
            self._session.commit()
            self._session.refresh(service)
        return service

    def update_service(self, service_id: int, **fields) -> Optional[Service]:
        with self._guard("update service"):
            target = self._session.get(Service, service_id)
            if target is None:
                return None
            for key, value in fields.items():
                setattr(target, key, value)
            target.updated_at = datetime.now()
            self._session.add(target)
            self._session.commit()
            self._session.refresh(target)
        return target

    def delete_service(self, service_id: int) -> bool:
        with self._guard("delete service"):
            target = self._session.get(Service, service_id)
            if target is None:
                return False
            self._session.delete(target)
            self._session.commit()
        return True

    # Settings

    def fetch_settings(self) -> SalonSettings:
        with self._guard("fetch settings"):
            stored = self._session.get(SalonSettings, 1)
        return stored if stored is not None else default_settings()

    def save_settings(
        self,
        work_start: Optional[str] = None,
        work_end: Optional[str] = None,
        slot_minutes: Optional[int] = None,
    ) -> SalonSettings:
        with self._guard("save settings"):
            # DB upsert: one settings row (id is always 1)
            row = self._session.get(SalonSettings, 1)
            if row is None:
                row = default_settings()
            if work_start is not None:
                row.work_start = work_start
            if work_end is not None:
                row.work_end = work_end
            if slot_minutes is not None:
                row.slot_minutes = slot_minutes
            row.updated_at = datetime.now()

            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)

        if self._notifier is not None:
            self._notifier.publish(row)
        return row
