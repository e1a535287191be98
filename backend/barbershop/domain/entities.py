"""
Domain entities - Pure business logic, no framework dependencies.

Barber and Service are read-only reference data for the scheduling core.
The barber/service names stored on an Appointment are a snapshot taken
when the appointment is created, so renaming a barber later does not touch
existing appointments. The price is the amount given at booking (0 when
absent) and is never read from the Service catalog.
"""

from dataclasses import dataclass, field
from datetime import date as Date
from datetime import datetime
from typing import Dict, List, Optional

from barbershop.core.exceptions import ValidationError

from .intervals import TimeInterval


class AppointmentStatus:
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (SCHEDULED, COMPLETED, CANCELLED)

    # completed and cancelled are terminal
    TRANSITIONS = {
        SCHEDULED: (COMPLETED, CANCELLED),
        COMPLETED: (),
        CANCELLED: (),
    }

    @classmethod
    def can_transition(cls, current: str, target: str) -> bool:
        return current == target or target in cls.TRANSITIONS.get(current, ())


@dataclass
class Appointment:
    """Domain entity for a client booking with one barber."""

    client_name: str
    client_phone: str
    date: datetime
    barber_id: str
    service_id: str
    duration: int = 30
    barber_name: str = ""
    service_name: str = ""
    price: float = 0.0
    status: str = AppointmentStatus.SCHEDULED
    notes: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.status not in AppointmentStatus.ALL:
            raise ValidationError([f"status: unknown status '{self.status}'"])

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_duration(self.date, self.duration)

    @property
    def end(self) -> datetime:
        return self.interval.end

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED


@dataclass
class Barber:
    """Domain entity representing a barber."""

    name: str
    specialty: str = ""
    available: bool = True
    email: str = ""
    phone: str = ""
    rating: float = 0.0
    services: List[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Service:
    """Domain entity representing a bookable service."""

    name: str
    duration: int = 30
    price: float = 0.0
    category: str = ""
    description: str = ""
    active: bool = True
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Slot:
    """Derived candidate interval; never persisted."""

    start: datetime
    end: datetime
    available: bool = True


@dataclass
class SearchCriteria:
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None
    limit: int = 50


@dataclass
class AppointmentStats:
    total_count: int = 0
    count_by_status: Dict[str, int] = field(default_factory=dict)
    count_by_barber: Dict[str, int] = field(default_factory=dict)
    count_by_service: Dict[str, int] = field(default_factory=dict)
    count_by_day: Dict[str, int] = field(default_factory=dict)
    total_revenue: float = 0.0

    @staticmethod
    def day_key(value: Date) -> str:
        return value.strftime("%Y-%m-%d")
