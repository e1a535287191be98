"""
BookingService call-surface tests over the seeded in-memory database.

Covers the day-of-operations flows end to end: book, look up, reschedule,
cancel, complete, list free slots, daily schedule and statistics.
"""

from datetime import datetime, timedelta

import pytest

from barbershop.core.exceptions import (
    ConflictError,
    NoOpError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from barbershop.domain.entities import AppointmentStatus
from barbershop.services.booking_service import BookingService
from barbershop.services.conflict_service import BarberLockRegistry
from tests.conftest import (
    BARBER_ONE_ID,
    BARBER_TWO_ID,
    OFF_DUTY_BARBER_ID,
    TEST_DAY,
)
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    CatalogRepositoryFactory,
)

DAY = TEST_DAY.date().isoformat()


def at(hour, minute=0):
    return TEST_DAY.replace(hour=hour, minute=minute).isoformat()


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestBookingFlows:
    def test_create_and_fetch(self, booking_service, appointment_payload):
        created = booking_service.create_appointment(appointment_payload())

        fetched = booking_service.get_appointment_by_id(created.id)

        assert fetched.id == created.id
        assert fetched.barber_name == "Ana Costa"
        assert fetched.service_name == "Haircut"
        assert fetched.price == 35.0
        assert fetched.end == TEST_DAY.replace(hour=9, minute=30)

    def test_b1_scenario(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(date=at(9)))

        with pytest.raises(ConflictError):
            booking_service.create_appointment(appointment_payload(date=at(9, 15)))

        second = booking_service.create_appointment(appointment_payload(date=at(9, 30)))
        assert second.status == AppointmentStatus.SCHEDULED

        other_barber = booking_service.create_appointment(
            appointment_payload(date=at(9, 15), barber_id=BARBER_TWO_ID)
        )
        assert other_barber.barber_name == "Bruno Lima"

    def test_cancel_frees_the_slot(self, booking_service, appointment_payload):
        created = booking_service.create_appointment(appointment_payload())

        cancelled = booking_service.cancel_appointment(created.id, "client request")

        assert cancelled.notes == "Cancelled: client request"
        assert booking_service.check_availability(BARBER_ONE_ID, at(9), 30)
        booking_service.create_appointment(appointment_payload())

    def test_complete(self, booking_service, appointment_payload):
        created = booking_service.create_appointment(appointment_payload())

        completed = booking_service.complete_appointment(created.id)

        assert completed.status == AppointmentStatus.COMPLETED
        assert completed.notes == "Service completed"

    def test_reschedule_and_no_op(self, booking_service, appointment_payload):
        created = booking_service.create_appointment(appointment_payload())

        moved = booking_service.update_appointment(created.id, {"date": at(10)})

        assert moved.date == TEST_DAY.replace(hour=10)
        assert booking_service.check_availability(BARBER_ONE_ID, at(9))
        with pytest.raises(NoOpError):
            booking_service.update_appointment(created.id, {"date": at(10)})

    def test_delete(self, booking_service, appointment_payload):
        created = booking_service.create_appointment(appointment_payload())

        booking_service.delete_appointment(created.id)

        with pytest.raises(NotFoundError):
            booking_service.get_appointment_by_id(created.id)
        with pytest.raises(NotFoundError):
            booking_service.delete_appointment(created.id)

    def test_placeholder_ids_are_rejected_before_storage(self, booking_service):
        for call in (
            lambda: booking_service.get_appointment_by_id("undefined"),
            lambda: booking_service.delete_appointment("[object Object]"),
            lambda: booking_service.get_available_slots("null", DAY, 30),
        ):
            with pytest.raises(ValidationError):
                call()


@pytest.mark.unit
@pytest.mark.services
class TestBookingQueries:
    def test_get_appointments_for_day(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(date=at(15)))
        booking_service.create_appointment(appointment_payload(date=at(9)))
        booking_service.create_appointment(
            appointment_payload(
                date=(TEST_DAY + timedelta(days=1)).replace(hour=9).isoformat()
            )
        )

        day = booking_service.get_appointments(DAY)

        assert [apt.date.hour for apt in day] == [9, 15]

    def test_get_appointments_requires_a_date(self, booking_service):
        with pytest.raises(ValidationError):
            booking_service.get_appointments("someday")

    def test_available_slots(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(date=at(9)))

        slots = booking_service.get_available_slots(BARBER_ONE_ID, DAY, 30)
        starts = [slot.start for slot in slots]

        assert TEST_DAY.replace(hour=9) not in starts
        assert TEST_DAY.replace(hour=9, minute=30) in starts
        assert slots == booking_service.get_available_slots(BARBER_ONE_ID, DAY, 30)

    def test_slots_default_duration(self, booking_service):
        slots = booking_service.get_available_slots(BARBER_ONE_ID, DAY)

        assert slots[0].end - slots[0].start == timedelta(minutes=30)

    @pytest.mark.parametrize("duration", [0, -10, "abc", 12.5])
    def test_slots_reject_bad_duration(self, booking_service, duration):
        with pytest.raises(ValidationError):
            booking_service.get_available_slots(BARBER_ONE_ID, DAY, duration)

    def test_daily_schedule_groups_by_barber(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(date=at(9)))
        booking_service.create_appointment(appointment_payload(date=at(11)))
        booking_service.create_appointment(
            appointment_payload(date=at(10), barber_id=OFF_DUTY_BARBER_ID)
        )

        schedule = booking_service.get_daily_schedule(DAY)

        assert [apt.date.hour for apt in schedule[BARBER_ONE_ID]["appointments"]] == [
            9,
            11,
        ]
        assert schedule[BARBER_ONE_ID]["barber"].name == "Ana Costa"
        assert schedule[BARBER_TWO_ID]["appointments"] == []
        assert schedule[OFF_DUTY_BARBER_ID]["barber"] is None
        assert len(schedule[OFF_DUTY_BARBER_ID]["appointments"]) == 1

    def test_stats_bare_end_date_includes_that_day(
        self, booking_service, appointment_payload
    ):
        booking_service.create_appointment(appointment_payload(date=at(19)))
        cancelled = booking_service.create_appointment(appointment_payload(date=at(10)))
        booking_service.cancel_appointment(cancelled.id)

        stats = booking_service.get_appointment_stats(DAY, DAY)

        assert stats.total_count == 1
        assert stats.count_by_day == {DAY: 1}
        assert stats.total_revenue == 35.0

    def test_search(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(client_name="Maria Souza"))
        booking_service.create_appointment(
            appointment_payload(client_name="João Pedro", date=at(11))
        )

        found = booking_service.search_appointments({"clientName": "joão"})

        assert [apt.client_name for apt in found] == ["João Pedro"]

    def test_client_history_and_limits(self, booking_service, appointment_payload):
        booking_service.create_appointment(appointment_payload(date=at(9)))
        booking_service.create_appointment(appointment_payload(date=at(11)))

        history = booking_service.get_appointments_by_client("(11) 91234-5678", 1)

        assert [apt.date.hour for apt in history] == [11]
        with pytest.raises(ValidationError):
            booking_service.get_appointments_by_client("(11) 91234-5678", 0)
        with pytest.raises(ValidationError):
            booking_service.get_appointments_by_client("", 5)

    def test_upcoming_and_past(self, seeded_catalog, appointment_payload):
        service = BookingService.from_session(
            seeded_catalog,
            lock_registry=BarberLockRegistry(),
            clock=lambda: TEST_DAY.replace(hour=12),
        )
        earlier = service.create_appointment(appointment_payload(date=at(9)))
        service.complete_appointment(earlier.id)
        service.create_appointment(appointment_payload(date=at(14)))

        assert [apt.date.hour for apt in service.get_upcoming_appointments(5)] == [14]
        assert [apt.date.hour for apt in service.get_past_appointments()] == [9]

    def test_reference_data(self, booking_service):
        assert [barber.name for barber in booking_service.get_barbers()] == [
            "Ana Costa",
            "Bruno Lima",
        ]
        assert [service.name for service in booking_service.get_services()] == [
            "Beard",
            "Haircut",
        ]

    def test_db_connection_ok(self, booking_service):
        assert booking_service.check_db_connection()["connected"] is True

    def test_db_connection_failure_is_reported(self):
        repo = AppointmentRepositoryFactory.create_mock_full()
        repo.ping.side_effect = StorageError("ping")
        service = BookingService(repo, CatalogRepositoryFactory.create_mock_reader())

        result = service.check_db_connection()

        assert result["connected"] is False
        assert "ping" in result["message"]
