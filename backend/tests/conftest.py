"""
Central pytest configuration for the barbershop scheduling tests.

Provides the in-memory database, a seeded catalog, and ready-built services
for both unit and integration tests.
"""

import os
from datetime import datetime

# Test database configuration (set before any engine is built)
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

import pytest  # noqa: E402

from barbershop.db import base as models  # noqa: E402
from barbershop.db.session import SessionLocal, create_tables, drop_tables  # noqa: E402
from barbershop.services.booking_service import BookingService  # noqa: E402
from barbershop.services.conflict_service import BarberLockRegistry  # noqa: E402
from tests.config.markers import *  # noqa: E402,F401,F403

# Fixed ids keep assertions readable
BARBER_ONE_ID = "64b000000000000000000001"
BARBER_TWO_ID = "64b000000000000000000002"
OFF_DUTY_BARBER_ID = "64b000000000000000000003"
HAIRCUT_ID = "64c000000000000000000001"
BEARD_ID = "64c000000000000000000002"

# A Monday far enough ahead that "upcoming" queries behave predictably
TEST_DAY = datetime(2030, 6, 10)


@pytest.fixture
def db_session():
    """Fresh session over empty tables; the schema is dropped after each test."""
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_tables()


@pytest.fixture
def seeded_catalog(db_session):
    """Two available barbers, one off-duty barber and two services."""
    db_session.add_all(
        [
            models.Barber(id=BARBER_ONE_ID, name="Ana Costa", available=True),
            models.Barber(id=BARBER_TWO_ID, name="Bruno Lima", available=True),
            models.Barber(id=OFF_DUTY_BARBER_ID, name="Caio Reis", available=False),
            models.Service(id=HAIRCUT_ID, name="Haircut", duration=30, price=35.0),
            models.Service(id=BEARD_ID, name="Beard", duration=25, price=25.0),
        ]
    )
    db_session.commit()
    return db_session


@pytest.fixture
def booking_service(seeded_catalog):
    """BookingService over the seeded database with its own lock registry."""
    return BookingService.from_session(
        seeded_catalog, lock_registry=BarberLockRegistry()
    )


@pytest.fixture
def appointment_payload():
    """Factory for valid create payloads; keyword overrides replace fields."""

    def _payload(**overrides):
        data = {
            "client_name": "Maria Souza",
            "client_phone": "(11) 91234-5678",
            "date": TEST_DAY.replace(hour=9).isoformat(),
            "barber_id": BARBER_ONE_ID,
            "service_id": HAIRCUT_ID,
            "duration": 30,
            "price": 35,
        }
        data.update(overrides)
        return data

    return _payload


@pytest.fixture
def app():
    """Flask application bound to the in-memory test database."""
    from barbershop.main import create_app

    flask_app = create_app({"TESTING": True, "SEED_SAMPLE_DATA": False})
    yield flask_app


@pytest.fixture
def client(app, seeded_catalog):
    """Test client over an app whose database holds the seeded catalog."""
    return app.test_client()
