"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import Appointment, AppointmentStats, Barber, SearchCriteria, Service


class IAppointmentReader(ABC):
    """Interface for appointment read operations.

    Queries exclude nothing by default; callers filter by status themselves.
    """

    @abstractmethod
    def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def find_by_date_range(
        self, start: datetime, end: datetime, barber_id: Optional[str] = None
    ) -> List[Appointment]:
        """Appointments with start in [start, end], ordered by start ascending."""
        pass

    @abstractmethod
    def find_by_barber_and_window(
        self, barber_id: str, start: datetime, end: datetime
    ) -> List[Appointment]:
        """Appointments of a barber whose interval intersects [start, end)."""
        pass

    @abstractmethod
    def find_by_client(self, phone: str, limit: int = 10) -> List[Appointment]:
        """Appointments for a phone number, newest first."""
        pass

    @abstractmethod
    def search(self, criteria: SearchCriteria) -> List[Appointment]:
        """Filtered search, newest first, capped by criteria.limit."""
        pass

    @abstractmethod
    def find_upcoming(self, now: datetime, limit: int = 20) -> List[Appointment]:
        """Scheduled appointments starting at or after now, soonest first."""
        pass

    @abstractmethod
    def find_past(self, now: datetime, limit: int = 20) -> List[Appointment]:
        """Completed or cancelled appointments before now, newest first."""
        pass

    @abstractmethod
    def aggregate_stats(self, start: datetime, end: datetime) -> AppointmentStats:
        """Grouped counts and revenue over non-cancelled appointments."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Check connectivity with the store."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations. Writers never validate."""

    @abstractmethod
    def insert(self, appointment: Appointment) -> str:
        """Persist an appointment and return its new ID."""
        pass

    @abstractmethod
    def update(
        self, appointment_id: str, changes: Dict[str, Any]
    ) -> Optional[Appointment]:
        """Apply field changes.

        Returns None when every value already matched. Raises NotFoundError
        when no row has this ID.
        """
        pass

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        """Hard delete; False when nothing matched."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class ICatalogReader(ABC):
    """Read-only access to barbers and services."""

    @abstractmethod
    def get_barbers(self, only_available: bool = True) -> List[Barber]:
        pass

    @abstractmethod
    def get_barber_by_id(self, barber_id: str) -> Optional[Barber]:
        pass

    @abstractmethod
    def get_services(self, only_active: bool = True) -> List[Service]:
        pass

    @abstractmethod
    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        pass
