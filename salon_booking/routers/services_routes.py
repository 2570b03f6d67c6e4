# salon_booking/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from salon_booking.deps import get_store
from salon_booking.models import Service
from salon_booking.schemas import ServiceCreate, ServicePublic, ServiceUpdate
from salon_booking.store import SqlBookingStore

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


@router.get("", response_model=List[ServicePublic])
def list_services(store: SqlBookingStore = Depends(get_store)):
    return store.list_services()


@router.get("/{service_id}", response_model=ServicePublic)
def get_service(service_id: int, store: SqlBookingStore = Depends(get_store)):
    service = store.fetch_service_by_id(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(service: ServiceCreate, store: SqlBookingStore = Depends(get_store)):
    return store.add_service(Service(**service.model_dump()))


@router.patch("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    updates: ServiceUpdate,
    store: SqlBookingStore = Depends(get_store),
):
    # existing bookings keep the name/price/duration they were made with
    updated = store.update_service(service_id, **updates.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return updated


@router.delete("/{service_id}", status_code=204)
def delete_service(service_id: int, store: SqlBookingStore = Depends(get_store)):
    if not store.delete_service(service_id):
        raise HTTPException(status_code=404, detail="Service not found")
    return Response(status_code=204)
