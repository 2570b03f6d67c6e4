# salon_booking/schemas.py

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
from datetime import datetime, date
from typing import List, Optional

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
# Bulgarian mobile numbers, checked with whitespace removed
PHONE_PATTERN = r"^(\+359|0)\s?8[789]\d{1}\s?\d{3}\s?\d{3}$"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


# completed and cancelled are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.pending: {BookingStatus.confirmed, BookingStatus.cancelled},
    BookingStatus.confirmed: {BookingStatus.completed, BookingStatus.cancelled},
    BookingStatus.completed: set(),
    BookingStatus.cancelled: set(),
}


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class ServiceCreate(BaseModel):
    name: str = Field(min_length=3)
    description: str = ""
    category: str = Field(min_length=1)
    price: float = Field(ge=0)
    duration_minutes: int = Field(ge=15)
    sort_order: int = 0


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, ge=15)
    sort_order: Optional[int] = None


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    price: float
    duration_minutes: int
    sort_order: int


class BookingCreate(BaseModel):
    service_id: int
    date: date
    time: str = Field(pattern=TIME_PATTERN)
    # falls back to the service's own duration
    service_duration_minutes: Optional[int] = Field(default=None, gt=0)
    user_id: str = Field(min_length=1)
    user_name: str = Field(min_length=2)
    user_email: str = Field(pattern=EMAIL_PATTERN)
    user_phone: str
    notes: str = Field(default="", max_length=500)

    @field_validator("user_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("user_phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        phone = re.sub(r"\s+", "", value)
        if not re.fullmatch(PHONE_PATTERN, phone):
            raise ValueError("invalid phone number")
        return phone


class BookingPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_id: int
    service_name: str
    service_price: float
    service_duration_minutes: int
    date: date
    time: str
    user_id: str
    user_name: str
    user_email: str
    user_phone: str
    notes: str
    status: BookingStatus
    created_at: datetime
    cancelled_at: Optional[datetime] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class WorkingHours(BaseModel):
    start: str = Field(pattern=TIME_PATTERN)
    end: str = Field(pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class SalonSettingsPublic(BaseModel):
    work_hours: WorkingHours
    slot_minutes: int


class SalonSettingsUpdate(BaseModel):
    work_hours: Optional[WorkingHours] = None
    slot_minutes: Optional[int] = Field(default=None, gt=0)


class AvailabilityResponse(BaseModel):
    date: date
    duration_minutes: int
    available_slots: List[str]


class BookingStats(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    revenue: float
