"""
Unit tests for AppointmentService creation functionality.

This module tests appointment creation:
- Successful creation with defaults and catalog snapshots
- Aggregated validation errors
- Conflict rejection, including back-to-back bookings
- Unknown barbers and services
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from barbershop.core.config import SchedulingConfig
from barbershop.core.exceptions import ConflictError, ValidationError
from barbershop.domain.entities import AppointmentStatus
from barbershop.services.appointment_service import AppointmentService
from barbershop.services.conflict_service import BarberLockRegistry
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    CatalogRepositoryFactory,
    make_appointment,
    make_barber,
    make_service,
    window_lookup,
)

BARBER = "64b000000000000000000001"
SERVICE = "64c000000000000000000001"
NOW = datetime(2030, 6, 1, 12, 0)
NINE = datetime(2030, 6, 10, 9, 0)


@pytest.fixture
def stored():
    return []


@pytest.fixture
def mock_appointment_repo(stored) -> Mock:
    """Create a mock appointment repository backed by a plain list."""
    repo = AppointmentRepositoryFactory.create_mock_full()
    repo.find_by_barber_and_window.side_effect = window_lookup(stored)

    def _insert(appointment):
        appointment_id = f"{len(stored) + 1:024x}"
        stored.append(make_appointment(
            appointment.date,
            appointment.duration,
            appointment.barber_id,
            status=appointment.status,
            appointment_id=appointment_id,
        ))
        return appointment_id

    repo.insert.side_effect = _insert
    return repo


@pytest.fixture
def mock_catalog() -> Mock:
    return CatalogRepositoryFactory.create_mock_reader(
        barbers=[make_barber(BARBER, "Ana Costa")],
        services=[make_service(SERVICE, "Haircut", 30, 35.0)],
    )


@pytest.fixture
def service(mock_appointment_repo, mock_catalog) -> AppointmentService:
    """Initialize AppointmentService with mocked repositories."""
    return AppointmentService(
        mock_appointment_repo,
        catalog=mock_catalog,
        config=SchedulingConfig(),
        lock_registry=BarberLockRegistry(),
        clock=lambda: NOW,
    )


def payload(**overrides):
    data = {
        "client_name": "Maria Souza",
        "client_phone": "(11) 91234-5678",
        "date": NINE.isoformat(),
        "barber_id": BARBER,
        "service_id": SERVICE,
    }
    data.update(overrides)
    return data


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentServiceCreation:
    """Test appointment creation functionality."""

    def test_create_appointment_success(self, service, mock_appointment_repo):
        appointment = service.create(payload())

        assert appointment.id is not None
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.duration == 30
        assert appointment.price == 0.0
        assert appointment.created_at == NOW
        assert appointment.updated_at == NOW
        mock_appointment_repo.insert.assert_called_once()

    def test_catalog_names_are_snapshotted(self, service):
        appointment = service.create(payload())

        assert appointment.barber_name == "Ana Costa"
        assert appointment.service_name == "Haircut"

    def test_price_is_not_copied_from_catalog(self, service):
        appointment = service.create(payload())

        assert appointment.price == 0.0

    def test_caller_supplied_names_are_kept(self, service):
        appointment = service.create(
            payload(barber_name="Aninha", service_name="Corte", price=40)
        )

        assert appointment.barber_name == "Aninha"
        assert appointment.service_name == "Corte"
        assert appointment.price == 40.0

    def test_empty_payload_lists_all_violations(self, service, mock_appointment_repo):
        with pytest.raises(ValidationError) as exc_info:
            service.create({})

        assert len(exc_info.value.errors) >= 5
        mock_appointment_repo.insert.assert_not_called()

    def test_overlap_raises_conflict_with_times(self, service, stored):
        service.create(payload())

        with pytest.raises(ConflictError) as exc_info:
            service.create(
                payload(date=(NINE + timedelta(minutes=15)).isoformat())
            )

        assert "09:00" in str(exc_info.value)
        assert "09:30" in str(exc_info.value)
        assert len(stored) == 1

    def test_back_to_back_bookings_are_allowed(self, service, stored):
        service.create(payload())
        service.create(payload(date=(NINE + timedelta(minutes=30)).isoformat()))

        assert len(stored) == 2

    def test_cancelled_slot_can_be_rebooked(self, service, stored):
        stored.append(
            make_appointment(NINE, 30, BARBER, status=AppointmentStatus.CANCELLED)
        )

        appointment = service.create(payload())

        assert appointment.id is not None

    def test_unknown_barber_is_rejected(self, service, mock_appointment_repo):
        with pytest.raises(ValidationError, match="barber_id"):
            service.create(payload(barber_id="64b0000000000000000000ff"))

        mock_appointment_repo.insert.assert_not_called()

    def test_without_catalog_names_stay_blank(self, mock_appointment_repo):
        service = AppointmentService(
            mock_appointment_repo,
            config=SchedulingConfig(),
            lock_registry=BarberLockRegistry(),
        )

        appointment = service.create(payload(barber_id="64b0000000000000000000ff"))

        assert appointment.barber_name == ""

    def test_check_availability(self, service):
        service.create(payload())

        assert not service.check_availability(BARBER, NINE + timedelta(minutes=10), 30)
        assert service.check_availability(BARBER, NINE + timedelta(minutes=30), 30)
        assert service.check_availability(BARBER, NINE - timedelta(minutes=30))

    def test_check_availability_rejects_bad_barber_id(self, service):
        with pytest.raises(ValidationError):
            service.check_availability("undefined", NINE, 30)
