"""
Data Transfer Objects (DTOs) and validation schemas.

Request DTOs accept the payloads sent by the UI (camelCase keys such as
``clientName`` as well as snake_case) and collect every violated rule into a
single ValidationError instead of stopping at the first one.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from barbershop.core.exceptions import ValidationError
from barbershop.domain.entities import (
    AppointmentStats,
    AppointmentStatus,
    SearchCriteria,
)
from barbershop.domain.identifiers import id_error, is_valid_entity_id

# Digits once common punctuation is removed, e.g. "(11) 99999-9999"
_PHONE_ALLOWED = re.compile(r"^\+?[\d\s().\-]+$")
_PHONE_MIN_DIGITS = 8
_PHONE_MAX_DIGITS = 15

_FIELD_ALIASES = {
    "clientName": "client_name",
    "clientPhone": "client_phone",
    "barberId": "barber_id",
    "serviceId": "service_id",
    "barberName": "barber_name",
    "serviceName": "service_name",
    "startDate": "start_date",
    "endDate": "end_date",
}


def _normalize_keys(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(key, key): value for key, value in (data or {}).items()}


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime from the formats the UI sends.

    Accepts datetime/date objects and ISO 8601 strings (``2024-06-10``,
    ``2024-06-10T09:00``, ``2024-06-10 09:00:00``, trailing ``Z``).
    Aware values are converted to naive local time. Returns None when the
    value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_day(value: Any) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _phone_error(value: str) -> Optional[str]:
    digits = re.sub(r"\D", "", value)
    if not _PHONE_ALLOWED.match(value.strip()) or not (
        _PHONE_MIN_DIGITS <= len(digits) <= _PHONE_MAX_DIGITS
    ):
        return "client_phone: invalid phone number"
    return None


def _coerce_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def _coerce_price(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price >= 0 else None


@dataclass
class AppointmentCreateRequest:
    """DTO for appointment creation requests."""

    client_name: Any = None
    client_phone: Any = None
    date: Any = None
    barber_id: Any = None
    service_id: Any = None
    duration: Any = None
    barber_name: Any = None
    service_name: Any = None
    price: Any = None
    notes: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppointmentCreateRequest":
        normalized = _normalize_keys(data)
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: normalized[key] for key in known if key in normalized})

    def validate(self) -> None:
        """Validate the request data, reporting every violated rule."""
        errors: List[str] = []

        if not _is_filled(self.client_name):
            errors.append("client_name: is required")

        if not _is_filled(self.client_phone):
            errors.append("client_phone: is required")
        else:
            phone_error = _phone_error(self.client_phone)
            if phone_error:
                errors.append(phone_error)

        if parse_datetime(self.date) is None:
            errors.append("date: invalid or missing date/time")

        if not is_valid_entity_id(self.barber_id):
            errors.append(id_error(self.barber_id, "barber_id"))

        if not is_valid_entity_id(self.service_id):
            errors.append(id_error(self.service_id, "service_id"))

        if self.duration is not None and _coerce_positive_int(self.duration) is None:
            errors.append("duration: must be a positive number of minutes")

        if self.price is not None and _coerce_price(self.price) is None:
            errors.append("price: must be a non-negative number")

        if self.notes is not None and not isinstance(self.notes, str):
            errors.append("notes: must be text")

        if errors:
            raise ValidationError(errors)

    def cleaned(self, default_duration: int = 30) -> Dict[str, Any]:
        """Normalized field values. Call validate() first."""
        return {
            "client_name": self.client_name.strip(),
            "client_phone": self.client_phone.strip(),
            "date": parse_datetime(self.date),
            "barber_id": str(self.barber_id).strip().lower(),
            "service_id": str(self.service_id).strip().lower(),
            "duration": (
                _coerce_positive_int(self.duration)
                if self.duration is not None
                else default_duration
            ),
            "barber_name": (self.barber_name or "").strip(),
            "service_name": (self.service_name or "").strip(),
            "price": _coerce_price(self.price) if self.price is not None else 0.0,
            "notes": (self.notes or "").strip(),
        }


@dataclass
class AppointmentUpdateRequest:
    """DTO for partial appointment updates. Only present fields are applied."""

    fields: Dict[str, Any] = field(default_factory=dict)

    UPDATABLE = (
        "client_name",
        "client_phone",
        "date",
        "duration",
        "barber_id",
        "service_id",
        "barber_name",
        "service_name",
        "price",
        "status",
        "notes",
    )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppointmentUpdateRequest":
        normalized = _normalize_keys(data)
        return cls(
            fields={key: normalized[key] for key in cls.UPDATABLE if key in normalized}
        )

    def validate(self) -> None:
        errors: List[str] = []
        f = self.fields

        if "client_name" in f and not _is_filled(f["client_name"]):
            errors.append("client_name: cannot be empty")

        if "client_phone" in f:
            if not _is_filled(f["client_phone"]):
                errors.append("client_phone: cannot be empty")
            else:
                phone_error = _phone_error(f["client_phone"])
                if phone_error:
                    errors.append(phone_error)

        if "date" in f and parse_datetime(f["date"]) is None:
            errors.append("date: invalid date/time")

        for key in ("barber_id", "service_id"):
            if key in f and not is_valid_entity_id(f[key]):
                errors.append(id_error(f[key], key))

        if "duration" in f and _coerce_positive_int(f["duration"]) is None:
            errors.append("duration: must be a positive number of minutes")

        if "price" in f and f["price"] is not None and _coerce_price(f["price"]) is None:
            errors.append("price: must be a non-negative number")

        if "status" in f and f["status"] not in AppointmentStatus.ALL:
            errors.append(f"status: must be one of {', '.join(AppointmentStatus.ALL)}")

        for key in ("notes", "barber_name", "service_name"):
            if key in f and f[key] is not None and not isinstance(f[key], str):
                errors.append(f"{key}: must be text")

        if errors:
            raise ValidationError(errors)

    def cleaned(self) -> Dict[str, Any]:
        """Normalized changes. Call validate() first."""
        changes: Dict[str, Any] = {}
        for key, value in self.fields.items():
            if key in ("client_name", "client_phone"):
                changes[key] = value.strip()
            elif key in ("notes", "barber_name", "service_name"):
                changes[key] = (value or "").strip()
            elif key == "date":
                changes[key] = parse_datetime(value)
            elif key in ("barber_id", "service_id"):
                changes[key] = str(value).strip().lower()
            elif key == "duration":
                changes[key] = _coerce_positive_int(value)
            elif key == "price":
                changes[key] = _coerce_price(value) if value is not None else 0.0
            else:
                changes[key] = value
        return changes


@dataclass
class SearchRequest:
    """DTO for appointment search filters."""

    client_name: Any = None
    client_phone: Any = None
    start_date: Any = None
    end_date: Any = None
    status: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SearchRequest":
        normalized = _normalize_keys(data)
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: normalized[key] for key in known if key in normalized})

    def to_criteria(self) -> SearchCriteria:
        errors: List[str] = []
        start = end = None
        if self.start_date:
            start = parse_datetime(self.start_date)
            if start is None:
                errors.append("start_date: invalid date")
        if self.end_date:
            end = parse_datetime(self.end_date)
            if end is None:
                errors.append("end_date: invalid date")
        if self.status and self.status not in AppointmentStatus.ALL:
            errors.append(f"status: must be one of {', '.join(AppointmentStatus.ALL)}")
        for key in ("client_name", "client_phone"):
            value = getattr(self, key)
            if value is not None and not isinstance(value, str):
                errors.append(f"{key}: must be text")
        if errors:
            raise ValidationError(errors)

        return SearchCriteria(
            client_name=(self.client_name or "").strip() or None,
            client_phone=(self.client_phone or "").strip() or None,
            start_date=start,
            end_date=end,
            status=self.status or None,
        )


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: str
    client_name: str
    client_phone: str
    date: datetime
    end: datetime
    duration: int
    barber_id: str
    barber_name: str
    service_id: str
    service_name: str
    price: float
    status: str
    notes: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        return cls(
            id=appointment.id,
            client_name=appointment.client_name,
            client_phone=appointment.client_phone,
            date=appointment.date,
            end=appointment.end,
            duration=appointment.duration,
            barber_id=appointment.barber_id,
            barber_name=appointment.barber_name,
            service_id=appointment.service_id,
            service_name=appointment.service_name,
            price=appointment.price,
            status=appointment.status,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_name": self.client_name,
            "client_phone": self.client_phone,
            "date": self.date.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration,
            "barber_id": self.barber_id,
            "barber_name": self.barber_name,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "price": self.price,
            "status": self.status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def slot_to_dict(slot) -> Dict[str, Any]:
    return {
        "start": slot.start.isoformat(),
        "end": slot.end.isoformat(),
        "available": slot.available,
    }


def barber_to_dict(barber) -> Dict[str, Any]:
    return {
        "id": barber.id,
        "name": barber.name,
        "specialty": barber.specialty,
        "available": barber.available,
        "email": barber.email,
        "phone": barber.phone,
        "rating": barber.rating,
        "services": list(barber.services),
    }


def service_to_dict(service) -> Dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "duration": service.duration,
        "price": service.price,
        "category": service.category,
        "description": service.description,
        "active": service.active,
    }


def stats_to_dict(stats: AppointmentStats) -> Dict[str, Any]:
    return {
        "total_count": stats.total_count,
        "count_by_status": dict(stats.count_by_status),
        "count_by_barber": dict(stats.count_by_barber),
        "count_by_service": dict(stats.count_by_service),
        "count_by_day": dict(stats.count_by_day),
        "total_revenue": stats.total_revenue,
    }


@dataclass
class ErrorResponse:
    """DTO for error responses."""

    error: str
    message: str
    details: Optional[dict] = None

    @classmethod
    def from_exception(cls, exc) -> "ErrorResponse":
        data = exc.to_dict()
        error = data.pop("error")
        message = data.pop("message")
        return cls(error=error, message=message, details=data or None)

    @classmethod
    def server_error(cls, message: str = "Internal server error") -> "ErrorResponse":
        """Create server error response."""
        return cls(error="server_error", message=message)
