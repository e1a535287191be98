"""
Appointment lifecycle service.

Owns every rule about creating and mutating appointments: input validation,
the no-double-booking rule, status transitions and the notes written on
cancel/complete. Reads and writes go through the repository interfaces only.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple, Union

from barbershop.core.config import SchedulingConfig, get_scheduling_config
from barbershop.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NoOpError,
    NotFoundError,
    ValidationError,
)
from barbershop.domain.entities import Appointment, AppointmentStatus
from barbershop.domain.identifiers import parse_entity_id
from barbershop.domain.interfaces import IAppointmentRepository, ICatalogReader
from barbershop.schemas.dtos import AppointmentCreateRequest, AppointmentUpdateRequest

from .conflict_service import BarberLockRegistry, ConflictDetector, barber_locks

logger = logging.getLogger(__name__)

# Changing any of these moves the appointment on the barber's timeline
_SCHEDULE_FIELDS = ("date", "barber_id", "duration")


class AppointmentService:
    """Application service for the appointment lifecycle.

    Writers hold the per-barber lock from the conflict check through the
    write, so two concurrent bookings for the same barber cannot both pass
    the check. The lock is process-local; deployments running several
    worker processes against one database still need a storage-level
    guarantee.
    """

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        catalog: Optional[ICatalogReader] = None,
        config: Optional[SchedulingConfig] = None,
        lock_registry: Optional[BarberLockRegistry] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.appointment_repo = appointment_repo
        self.catalog = catalog
        self.config = config or get_scheduling_config()
        self.locks = lock_registry or barber_locks
        self.conflicts = ConflictDetector(appointment_repo)
        self.clock = clock

    # ---- queries ----

    def get(self, appointment_id: Any) -> Appointment:
        appointment_id = parse_entity_id(appointment_id)
        appointment = self.appointment_repo.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def check_availability(
        self, barber_id: Any, start: datetime, duration: Optional[int] = None
    ) -> bool:
        """True when the barber has no overlapping non-cancelled appointment."""
        barber_id = parse_entity_id(barber_id, "barber_id")
        if duration is None:
            duration = self.config.default_duration_minutes
        return not self.conflicts.has_conflict(barber_id, start, duration)

    # ---- commands ----

    def create(
        self, request: Union[AppointmentCreateRequest, Dict[str, Any]]
    ) -> Appointment:
        """Create a scheduled appointment.

        Business Rules:
        - All required fields present and well formed
        - Barber and service exist when a catalog is available
        - The barber has no overlapping non-cancelled appointment
        """
        if not isinstance(request, AppointmentCreateRequest):
            request = AppointmentCreateRequest.from_dict(request)
        request.validate()

        data = request.cleaned(self.config.default_duration_minutes)
        self._snapshot_catalog(data, data)

        now = self.clock()
        appointment = Appointment(
            status=AppointmentStatus.SCHEDULED,
            created_at=now,
            updated_at=now,
            **data,
        )

        with self.locks.hold(appointment.barber_id):
            conflict = self.conflicts.find_conflict(
                appointment.barber_id, appointment.date, appointment.duration
            )
            if conflict is not None:
                logger.warning(
                    "Appointment rejected: time conflict",
                    extra={
                        "context": {
                            "barber_id": appointment.barber_id,
                            "start": appointment.date.isoformat(),
                            "duration": appointment.duration,
                            "conflicting_id": conflict.id,
                        }
                    },
                )
                raise ConflictError(conflict)

            appointment.id = self.appointment_repo.insert(appointment)

        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "barber_id": appointment.barber_id,
                    "start": appointment.date.isoformat(),
                    "duration": appointment.duration,
                }
            },
        )
        return appointment

    def update(
        self,
        appointment_id: Any,
        changes: Union[AppointmentUpdateRequest, Dict[str, Any]],
    ) -> Appointment:
        """Apply a partial update.

        Raises NoOpError when the change set is empty or matches the stored
        values. Moving the appointment (date, barber or duration) re-runs
        the conflict check against the merged values, ignoring the
        appointment itself.
        """
        appointment_id = parse_entity_id(appointment_id)
        if not isinstance(changes, AppointmentUpdateRequest):
            changes = AppointmentUpdateRequest.from_dict(changes)
        changes.validate()
        cleaned = changes.cleaned()
        if not cleaned:
            raise NoOpError(appointment_id)

        current = self.get(appointment_id)
        while True:
            held = {current.barber_id, cleaned.get("barber_id", current.barber_id)}
            with self.locks.hold(*held):
                current = self.get(appointment_id)
                if current.barber_id in held:
                    updated, effective = self._apply_update(current, cleaned)
                    break
            # Another writer moved it to a barber whose lock we do not hold
            logger.debug(
                "Appointment changed barber while locking, retrying",
                extra={"context": {"appointment_id": appointment_id}},
            )

        if updated is None:
            raise NoOpError(appointment_id)

        logger.info(
            "Appointment updated",
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "fields": sorted(k for k in effective if k != "updated_at"),
                }
            },
        )
        return updated

    def _apply_update(
        self, current: Appointment, cleaned: Dict[str, Any]
    ) -> Tuple[Optional[Appointment], Dict[str, Any]]:
        """Check and write one update. Caller holds the affected barber locks."""
        appointment_id = current.id
        effective = {
            key: value
            for key, value in cleaned.items()
            if getattr(current, key) != value
        }
        if not effective:
            raise NoOpError(appointment_id)

        if "status" in effective and not AppointmentStatus.can_transition(
            current.status, effective["status"]
        ):
            raise InvalidTransitionError(current.status, effective["status"])

        if "barber_id" in effective or "service_id" in effective:
            self._snapshot_catalog(effective, cleaned)

        merged_status = effective.get("status", current.status)
        moved = any(key in effective for key in _SCHEDULE_FIELDS)
        if moved and merged_status != AppointmentStatus.CANCELLED:
            barber_id = effective.get("barber_id", current.barber_id)
            start = effective.get("date", current.date)
            duration = effective.get("duration", current.duration)
            conflict = self.conflicts.find_conflict(
                barber_id, start, duration, exclude_id=appointment_id
            )
            if conflict is not None:
                logger.warning(
                    "Appointment update rejected: time conflict",
                    extra={
                        "context": {
                            "appointment_id": appointment_id,
                            "barber_id": barber_id,
                            "start": start.isoformat(),
                            "conflicting_id": conflict.id,
                        }
                    },
                )
                raise ConflictError(conflict)

        effective["updated_at"] = self.clock()
        updated = self.appointment_repo.update(appointment_id, effective)
        return updated, effective

    def cancel(self, appointment_id: Any, reason: Optional[str] = None) -> Appointment:
        reason = (reason or "").strip()
        notes = f"Cancelled: {reason}" if reason else "Cancelled by client"
        return self._transition(appointment_id, AppointmentStatus.CANCELLED, notes)

    def complete(self, appointment_id: Any, notes: Optional[str] = None) -> Appointment:
        notes = (notes or "").strip()
        final_notes = f"{notes} (Completed)" if notes else "Service completed"
        return self._transition(appointment_id, AppointmentStatus.COMPLETED, final_notes)

    def delete(self, appointment_id: Any) -> None:
        appointment_id = parse_entity_id(appointment_id)
        if not self.appointment_repo.delete(appointment_id):
            raise NotFoundError("Appointment", appointment_id)
        logger.info(
            "Appointment deleted",
            extra={"context": {"appointment_id": appointment_id}},
        )

    # ---- helpers ----

    def _transition(self, appointment_id: Any, target: str, notes: str) -> Appointment:
        current = self.get(appointment_id)
        if target not in AppointmentStatus.TRANSITIONS[current.status]:
            raise InvalidTransitionError(current.status, target)
        return self.update(current.id, {"status": target, "notes": notes})

    def _snapshot_catalog(self, target: Dict[str, Any], provided: Dict[str, Any]) -> None:
        """Fill barber/service names from the catalog when the caller left them blank.

        Unknown barbers or services are rejected. Without a catalog the
        caller-supplied names are kept as they are.
        """
        if self.catalog is None:
            return

        errors = []
        if "barber_id" in target:
            barber = self.catalog.get_barber_by_id(target["barber_id"])
            if barber is None:
                errors.append(f"barber_id: barber {target['barber_id']} not found")
            elif not provided.get("barber_name"):
                target["barber_name"] = barber.name

        if "service_id" in target:
            service = self.catalog.get_service_by_id(target["service_id"])
            if service is None:
                errors.append(f"service_id: service {target['service_id']} not found")
            elif not provided.get("service_name"):
                target["service_name"] = service.name

        if errors:
            raise ValidationError(errors)

