"""
Database seeding.

Populates barbers and services with sample data when those tables are empty.
Idempotent: calling it again on a populated database changes nothing.
"""

import logging
from typing import Tuple

from sqlalchemy import func, select

from barbershop.db.base import Barber, Service
from barbershop.db.session import SessionLocal

logger = logging.getLogger(__name__)

SAMPLE_BARBERS = [
    {
        "name": "João Silva",
        "specialty": "Classic cuts",
        "email": "joao@barbershop.local",
        "phone": "(11) 99999-9999",
        "rating": 4.8,
        "services": ["Haircut", "Beard"],
    },
    {
        "name": "Pedro Santos",
        "specialty": "Beard and moustache",
        "email": "pedro@barbershop.local",
        "phone": "(11) 98888-8888",
        "rating": 4.9,
        "services": ["Beard", "Hydration"],
    },
    {
        "name": "Carlos Mendes",
        "specialty": "Modern cuts",
        "email": "carlos@barbershop.local",
        "phone": "(11) 97777-7777",
        "rating": 4.7,
        "services": ["Haircut", "Haircut + Beard", "Neckline trim"],
    },
    {
        "name": "Marcos Oliveira",
        "specialty": "All services",
        "email": "marcos@barbershop.local",
        "phone": "(11) 96666-6666",
        "rating": 4.6,
        "services": [
            "Haircut",
            "Beard",
            "Haircut + Beard",
            "Hydration",
            "Neckline trim",
        ],
    },
]

SAMPLE_SERVICES = [
    {
        "name": "Haircut",
        "duration": 30,
        "price": 35.0,
        "category": "Hair",
        "description": "Traditional or modern haircut",
    },
    {
        "name": "Beard",
        "duration": 25,
        "price": 25.0,
        "category": "Beard",
        "description": "Beard and moustache trim and shaping",
    },
    {
        "name": "Haircut + Beard",
        "duration": 50,
        "price": 55.0,
        "category": "Combo",
        "description": "Full haircut plus beard",
    },
    {
        "name": "Hydration",
        "duration": 20,
        "price": 30.0,
        "category": "Treatment",
        "description": "Deep hydration for hair and beard",
    },
    {
        "name": "Neckline trim",
        "duration": 15,
        "price": 15.0,
        "category": "Maintenance",
        "description": "Sides and nape touch-up",
    },
]


def seed_sample_data(session=None) -> Tuple[int, int]:
    """Insert sample barbers/services into empty tables.

    Returns:
        (barbers_created, services_created)
    """
    db = session or SessionLocal()
    try:
        barbers_created = 0
        services_created = 0

        if db.scalar(select(func.count()).select_from(Barber)) == 0:
            db.add_all(Barber(available=True, **data) for data in SAMPLE_BARBERS)
            barbers_created = len(SAMPLE_BARBERS)

        if db.scalar(select(func.count()).select_from(Service)) == 0:
            db.add_all(Service(active=True, **data) for data in SAMPLE_SERVICES)
            services_created = len(SAMPLE_SERVICES)

        db.commit()
        logger.info(
            "Sample data seeded",
            extra={
                "context": {
                    "barbers_created": barbers_created,
                    "services_created": services_created,
                }
            },
        )
        return barbers_created, services_created
    except Exception:
        db.rollback()
        logger.error("Failed to seed sample data", exc_info=True)
        raise
    finally:
        if session is None:
            db.close()
