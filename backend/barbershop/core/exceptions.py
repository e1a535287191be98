"""
Custom exceptions for the scheduling core.

Every error carries enough structured data for the boundary layer to render
a user-facing message; `to_dict()` is what ends up in API responses.
"""

from typing import Any, Dict, List, Optional


class SchedulingError(Exception):
    """Base class for all errors raised by the scheduling core."""

    code = "scheduling_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(SchedulingError):
    """Input failed structural rules. Carries every violated rule."""

    code = "validation_error"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or "Validation failed: " + "; ".join(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class InvalidTransitionError(ValidationError):
    """Status change not allowed from the appointment's current status."""

    code = "invalid_transition"

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            [f"Cannot change status from '{current_status}' to '{target_status}'"]
        )


class NotFoundError(SchedulingError):
    code = "not_found"

    def __init__(self, resource: str, resource_id: Any):
        self.resource = resource
        self.resource_id = str(resource_id)
        super().__init__(f"{resource} {resource_id} not found")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["resource"] = self.resource
        data["id"] = self.resource_id
        return data


class ConflictError(SchedulingError):
    """Candidate interval overlaps a non-cancelled appointment of the barber."""

    code = "conflict"

    def __init__(self, conflicting):
        self.conflicting = conflicting
        start = conflicting.date
        end = conflicting.end
        super().__init__(
            "Time conflict: the barber already has an appointment from "
            f"{start:%Y-%m-%d %H:%M} to {end:%H:%M}"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["conflicting_appointment"] = {
            "id": self.conflicting.id,
            "barber_id": self.conflicting.barber_id,
            "start": self.conflicting.date.isoformat(),
            "end": self.conflicting.end.isoformat(),
        }
        return data


class StorageError(SchedulingError):
    """Underlying persistence failure. Writes must not be retried blindly."""

    code = "storage_error"

    def __init__(self, operation: str, original: Optional[BaseException] = None):
        self.operation = operation
        self.original = original
        detail = f": {original}" if original is not None else ""
        super().__init__(f"Storage failure during {operation}{detail}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["operation"] = self.operation
        return data


class NoOpError(SchedulingError):
    """Update requested but nothing changed."""

    code = "no_op"

    def __init__(self, appointment_id: Any):
        self.appointment_id = str(appointment_id)
        super().__init__(f"No changes applied to appointment {appointment_id}")
