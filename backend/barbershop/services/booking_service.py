"""
Booking service - the function-call surface used by the UI process.

Each public method is one named call. Arguments arrive as loosely typed
values (strings from a form, numbers from JSON) and are validated here
before they reach the lifecycle, availability or statistics services.
Results are DTOs and domain objects the boundary can serialize.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional

from barbershop.core.config import SchedulingConfig, get_scheduling_config
from barbershop.core.exceptions import StorageError, ValidationError
from barbershop.domain.entities import AppointmentStats, Barber, Service, Slot
from barbershop.domain.identifiers import parse_entity_id
from barbershop.domain.interfaces import IAppointmentRepository, ICatalogReader
from barbershop.schemas.dtos import (
    AppointmentResponse,
    SearchRequest,
    parse_datetime,
    parse_day,
)

from .appointment_service import AppointmentService
from .availability_service import AvailabilityService
from .conflict_service import BarberLockRegistry
from .stats_service import StatsService

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


def _require_datetime(value: Any, field: str) -> datetime:
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValidationError([f"{field}: invalid or missing date/time"])
    return parsed


def _require_day(value: Any, field: str = "date") -> date:
    parsed = parse_day(value)
    if parsed is None:
        raise ValidationError([f"{field}: invalid or missing date"])
    return parsed


def _is_date_only(value: Any) -> bool:
    if isinstance(value, str):
        return len(value.strip()) == 10
    return isinstance(value, date) and not isinstance(value, datetime)


def _optional_duration(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(["duration: must be a positive number of minutes"])
    try:
        duration = int(value)
    except (TypeError, ValueError):
        raise ValidationError(["duration: must be a positive number of minutes"])
    if duration <= 0 or duration != float(value):
        raise ValidationError(["duration: must be a positive number of minutes"])
    return duration


def _limit(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(["limit: must be a positive integer"])
    if isinstance(value, bool) or not 1 <= limit <= MAX_LIST_LIMIT:
        raise ValidationError([f"limit: must be between 1 and {MAX_LIST_LIMIT}"])
    return limit


class BookingService:
    """Facade exposing every scheduling operation as a single call."""

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        catalog_repo: ICatalogReader,
        config: Optional[SchedulingConfig] = None,
        lock_registry: Optional[BarberLockRegistry] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.appointment_repo = appointment_repo
        self.catalog_repo = catalog_repo
        self.config = config or get_scheduling_config()
        self.clock = clock
        self.appointments = AppointmentService(
            appointment_repo,
            catalog=catalog_repo,
            config=self.config,
            lock_registry=lock_registry,
            clock=clock,
        )
        self.availability = AvailabilityService(appointment_repo, self.config)
        self.stats = StatsService(appointment_repo)

    @classmethod
    def from_session(cls, db_session, **kwargs) -> "BookingService":
        from barbershop.repositories import AppointmentRepository, CatalogRepository

        return cls(
            AppointmentRepository(db_session), CatalogRepository(db_session), **kwargs
        )

    # ---- reference data ----

    def get_barbers(self) -> List[Barber]:
        return self.catalog_repo.get_barbers(only_available=True)

    def get_services(self) -> List[Service]:
        return self.catalog_repo.get_services(only_active=True)

    # ---- appointment reads ----

    def get_appointments(self, day: Any) -> List[AppointmentResponse]:
        """All appointments starting on the given calendar day, ascending."""
        day = _require_day(day)
        appointments = self.appointment_repo.find_by_date_range(
            datetime.combine(day, time.min), datetime.combine(day, time.max)
        )
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_appointment_by_id(self, appointment_id: Any) -> AppointmentResponse:
        return AppointmentResponse.from_domain(self.appointments.get(appointment_id))

    def search_appointments(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[AppointmentResponse]:
        criteria = SearchRequest.from_dict(filters).to_criteria()
        return [
            AppointmentResponse.from_domain(apt)
            for apt in self.appointment_repo.search(criteria)
        ]

    def get_appointments_by_client(
        self, phone: Any, limit: Any = 20
    ) -> List[AppointmentResponse]:
        if not isinstance(phone, str) or not phone.strip():
            raise ValidationError(["client_phone: is required"])
        appointments = self.appointment_repo.find_by_client(
            phone.strip(), limit=_limit(limit, 20)
        )
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_upcoming_appointments(self, limit: Any = 10) -> List[AppointmentResponse]:
        appointments = self.appointment_repo.find_upcoming(
            self.clock(), limit=_limit(limit, 10)
        )
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_past_appointments(self, limit: Any = 20) -> List[AppointmentResponse]:
        appointments = self.appointment_repo.find_past(
            self.clock(), limit=_limit(limit, 20)
        )
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_daily_schedule(self, day: Any) -> Dict[str, Dict[str, Any]]:
        """Appointments of the day grouped by barber.

        Every available barber gets an entry, even with an empty list.
        Appointments held by a barber no longer listed as available are
        grouped under their own key with ``barber`` set to None.
        """
        appointments = self.get_appointments(day)
        schedule: Dict[str, Dict[str, Any]] = {
            barber.id: {"barber": barber, "appointments": []}
            for barber in self.get_barbers()
        }
        for appointment in appointments:
            entry = schedule.setdefault(
                appointment.barber_id, {"barber": None, "appointments": []}
            )
            entry["appointments"].append(appointment)
        return schedule

    def get_appointment_stats(self, start_date: Any, end_date: Any) -> AppointmentStats:
        start = _require_datetime(start_date, "start_date")
        if _is_date_only(end_date):
            end = _require_day(end_date, "end_date")
        else:
            end = _require_datetime(end_date, "end_date")
        return self.stats.get_stats(start, end)

    # ---- availability ----

    def check_availability(
        self, barber_id: Any, start: Any, duration: Any = None
    ) -> bool:
        barber_id = parse_entity_id(barber_id, "barber_id")
        start = _require_datetime(start, "date")
        return self.appointments.check_availability(
            barber_id, start, _optional_duration(duration)
        )

    def get_available_slots(
        self, barber_id: Any, day: Any, duration: Any = None
    ) -> List[Slot]:
        barber_id = parse_entity_id(barber_id, "barber_id")
        day = _require_day(day)
        duration = _optional_duration(duration) or self.config.default_duration_minutes
        return self.availability.get_available_slots(barber_id, day, duration)

    # ---- appointment writes ----

    def create_appointment(self, data: Optional[Dict[str, Any]]) -> AppointmentResponse:
        return AppointmentResponse.from_domain(self.appointments.create(data or {}))

    def update_appointment(
        self, appointment_id: Any, changes: Optional[Dict[str, Any]]
    ) -> AppointmentResponse:
        return AppointmentResponse.from_domain(
            self.appointments.update(appointment_id, changes or {})
        )

    def cancel_appointment(
        self, appointment_id: Any, reason: Optional[str] = None
    ) -> AppointmentResponse:
        return AppointmentResponse.from_domain(
            self.appointments.cancel(appointment_id, reason)
        )

    def complete_appointment(
        self, appointment_id: Any, notes: Optional[str] = None
    ) -> AppointmentResponse:
        return AppointmentResponse.from_domain(
            self.appointments.complete(appointment_id, notes)
        )

    def delete_appointment(self, appointment_id: Any) -> None:
        self.appointments.delete(appointment_id)

    # ---- health ----

    def check_db_connection(self) -> Dict[str, Any]:
        try:
            self.appointment_repo.ping()
        except StorageError as e:
            logger.error(
                "Database connection check failed",
                extra={"context": {"error": str(e)}},
            )
            return {"connected": False, "message": e.message}
        return {"connected": True, "message": "Database connection OK"}
