# salon_booking/routers/settings_routes.py

from fastapi import APIRouter, Depends

from salon_booking.deps import get_store
from salon_booking.schemas import SalonSettingsPublic, SalonSettingsUpdate
from salon_booking.store import SqlBookingStore

router = APIRouter(
    prefix="/settings",
    tags=["settings"],
)


def _public(row) -> dict:
    return {
        "work_hours": {"start": row.work_start, "end": row.work_end},
        "slot_minutes": row.slot_minutes,
    }


@router.get("", response_model=SalonSettingsPublic)
def get_settings(store: SqlBookingStore = Depends(get_store)):
    return _public(store.fetch_settings())


@router.put("", response_model=SalonSettingsPublic)
def update_settings(
    update: SalonSettingsUpdate,
    store: SqlBookingStore = Depends(get_store),
):
    # saving publishes the new values to the scheduling policy
    work_hours = update.work_hours
    row = store.save_settings(
        work_start=work_hours.start if work_hours else None,
        work_end=work_hours.end if work_hours else None,
        slot_minutes=update.slot_minutes,
    )
    return _public(row)
