"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the API contracts
and handle input validation.
"""

from .dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentUpdateRequest,
    ErrorResponse,
    SearchRequest,
    parse_datetime,
    parse_day,
)

__all__ = [
    # Appointment DTOs
    "AppointmentCreateRequest",
    "AppointmentUpdateRequest",
    "AppointmentResponse",
    "SearchRequest",
    # Common DTOs
    "ErrorResponse",
    # Parsing helpers
    "parse_datetime",
    "parse_day",
]
