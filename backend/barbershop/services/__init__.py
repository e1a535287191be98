# Services package initialization
# Application services for the scheduling core

from . import (
    appointment_service,
    availability_service,
    booking_service,
    conflict_service,
    stats_service,
)

__all__ = [
    "appointment_service",
    "availability_service",
    "booking_service",
    "conflict_service",
    "stats_service",
]
