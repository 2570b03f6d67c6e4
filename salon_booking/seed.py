# salon_booking/seed.py

import logging

from sqlmodel import Session, select

from salon_booking.models import Service

logger = logging.getLogger(__name__)

SAMPLE_SERVICES = [
    {"name": "Classic manicure", "category": "nails", "price": 25, "duration_minutes": 45, "sort_order": 1},
    {"name": "Gel manicure", "category": "nails", "price": 35, "duration_minutes": 60, "sort_order": 2},
    {"name": "Facial massage", "category": "face", "price": 40, "duration_minutes": 45, "sort_order": 3},
    {"name": "Peeling", "category": "face", "price": 30, "duration_minutes": 30, "sort_order": 4},
    {"name": "Body massage", "category": "body", "price": 50, "duration_minutes": 60, "sort_order": 5},
    {"name": "Haircut", "category": "hair", "price": 20, "duration_minutes": 30, "sort_order": 6},
]


def seed_database(session: Session) -> int:
    """Insert the sample services into an empty catalog. Returns how many were added."""
    existing = session.exec(select(Service)).first()
    if existing is not None:
        logger.info("Services already exist, skipping seed")
        return 0

    for data in SAMPLE_SERVICES:
        session.add(Service(**data))
    session.commit()

    logger.info("Seeded %d sample services", len(SAMPLE_SERVICES))
    return len(SAMPLE_SERVICES)
