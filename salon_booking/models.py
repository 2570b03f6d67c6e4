# salon_booking/models.py

from typing import Optional
from datetime import datetime, date as Date

from sqlmodel import SQLModel, Field


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    description: str = ""
    category: str = Field(index=True)
    price: float
    duration_minutes: int
    sort_order: int = 0

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None


class Booking(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # denormalized from the service when the booking is made
    service_id: int
    service_name: str
    service_price: float
    service_duration_minutes: int

    date: Date = Field(index=True)
    time: str  # "HH:MM"

    user_id: str = Field(index=True)
    user_name: str
    user_email: str
    user_phone: str = ""
    notes: str = ""

    status: str = "pending"
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class SalonSettings(SQLModel, table=True):
    # single row, id is always 1
    id: int = Field(default=1, primary_key=True)
    work_start: str  # "HH:MM"
    work_end: str
    slot_minutes: int
    updated_at: Optional[datetime] = None
