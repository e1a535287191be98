"""
Domain package - Pure business logic layer.

This package contains:
- intervals.py: half-open time intervals and the overlap test
- identifiers.py: ObjectId-style identifier validation
- entities.py: Domain entities
- interfaces.py: Repository contracts
"""

from .entities import (
    Appointment,
    AppointmentStats,
    AppointmentStatus,
    Barber,
    SearchCriteria,
    Service,
    Slot,
)
from .identifiers import EntityId, is_valid_entity_id, new_entity_id, parse_entity_id
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    ICatalogReader,
)
from .intervals import TimeInterval

__all__ = [
    # Domain entities
    "Appointment",
    "AppointmentStats",
    "AppointmentStatus",
    "Barber",
    "SearchCriteria",
    "Service",
    "Slot",
    "TimeInterval",
    # Identifiers
    "EntityId",
    "is_valid_entity_id",
    "new_entity_id",
    "parse_entity_id",
    # Repository interfaces
    "IAppointmentRepository",
    "IAppointmentReader",
    "IAppointmentWriter",
    "ICatalogReader",
]
