# salon_booking/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from salon_booking.config import settings
from salon_booking.db import engine, init_db
from salon_booking.deps import get_scheduling_policy
from salon_booking.errors import DataAccessError
from salon_booking.logging_config import configure_logging
from salon_booking.routers import bookings_routes, services_routes, settings_routes
from salon_booking.seed import seed_database
from salon_booking.store import SqlBookingStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db(engine)
    with Session(engine) as session:
        if settings.SEED_SAMPLE_DATA:
            seed_database(session)
        # pick up whatever the salon saved last time
        get_scheduling_policy().apply_salon_settings(SqlBookingStore(session).fetch_settings())
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

app.include_router(services_routes.router)
app.include_router(bookings_routes.router)
app.include_router(settings_routes.router)


@app.exception_handler(DataAccessError)
def data_access_error_handler(request: Request, exc: DataAccessError):
    return JSONResponse(
        status_code=503,
        content={"detail": {"error": "data_access_failure", "message": str(exc)}},
    )


@app.get("/health")
def health_check():
    return {"status": "ok"}
