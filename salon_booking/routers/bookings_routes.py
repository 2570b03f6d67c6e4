# salon_booking/routers/bookings_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from salon_booking.booking_service import BookingService
from salon_booking.deps import get_booking_service, get_store, raise_for_result
from salon_booking.schemas import (
    AvailabilityResponse,
    BookingCreate,
    BookingPublic,
    BookingStats,
    BookingStatus,
    BookingStatusUpdate,
)
from salon_booking.store import SqlBookingStore

router = APIRouter(
    tags=["bookings"],
)


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    date: date,
    service_id: Optional[int] = None,
    duration: Optional[int] = Query(default=None, gt=0),
    store: SqlBookingStore = Depends(get_store),
    booking_service: BookingService = Depends(get_booking_service),
):
    # 1) Resolve the duration to schedule for
    if duration is None:
        if service_id is None:
            raise HTTPException(status_code=422, detail="Either service_id or duration is required")
        service = store.fetch_service_by_id(service_id)
        if service is None:
            raise HTTPException(status_code=404, detail="Service not found")
        duration = service.duration_minutes

    # 2) Outside the booking window nothing is offered
    if not booking_service.is_date_available(date):
        return {"date": date, "duration_minutes": duration, "available_slots": []}

    # 3) Slots minus existing bookings
    slots = booking_service.get_available_slots(date, duration)
    return {"date": date, "duration_minutes": duration, "available_slots": slots}


@router.post("/bookings", response_model=BookingPublic, status_code=201)
def create_booking(
    request: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service),
):
    if not booking_service.is_date_available(request.date):
        raise HTTPException(status_code=422, detail="Date is outside the booking window")

    result = booking_service.create_booking(request)
    raise_for_result(result)
    return result.booking


@router.get("/bookings", response_model=List[BookingPublic])
def list_bookings(
    on_date: Optional[date] = Query(default=None, alias="date"),
    user_id: Optional[str] = None,
    status: Optional[BookingStatus] = None,
    booking_service: BookingService = Depends(get_booking_service),
):
    return booking_service.get_all_bookings(
        date=on_date,
        user_id=user_id,
        status=status.value if status else None,
    )


@router.get("/bookings/stats", response_model=BookingStats)
def booking_stats(
    start: date,
    end: date,
    booking_service: BookingService = Depends(get_booking_service),
):
    if start > end:
        raise HTTPException(status_code=422, detail="start cannot be after end")
    return booking_service.get_booking_stats(start, end)


@router.get("/bookings/{booking_id}", response_model=BookingPublic)
def get_booking(booking_id: int, store: SqlBookingStore = Depends(get_store)):
    booking = store.fetch_booking_by_id(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.patch("/bookings/{booking_id}/cancel", response_model=BookingPublic)
def cancel_booking(
    booking_id: int,
    booking_service: BookingService = Depends(get_booking_service),
):
    result = booking_service.cancel_booking(booking_id)
    raise_for_result(result)
    return result.booking


@router.patch("/bookings/{booking_id}/status", response_model=BookingPublic)
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    booking_service: BookingService = Depends(get_booking_service),
):
    result = booking_service.update_booking_status(booking_id, update.status)
    raise_for_result(result)
    return result.booking


@router.get("/users/{user_id}/bookings", response_model=List[BookingPublic])
def list_user_bookings(
    user_id: str,
    booking_service: BookingService = Depends(get_booking_service),
):
    return booking_service.get_user_bookings(user_id)
