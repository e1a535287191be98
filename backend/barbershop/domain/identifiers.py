"""
Identifier handling.

Appointments, barbers and services are keyed by 24-hex-character ObjectId
strings. Anything else (including placeholders such as "undefined",
"null" or "[object Object]" sent by a careless caller) is rejected before it
reaches the repository.
"""

from typing import Any, NewType

from bson import ObjectId

from barbershop.core.exceptions import ValidationError

EntityId = NewType("EntityId", str)


def new_entity_id() -> EntityId:
    return EntityId(str(ObjectId()))


def is_valid_entity_id(value: Any) -> bool:
    if isinstance(value, ObjectId):
        return True
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    # is_valid also takes 12-byte binary ids; only the hex string form is accepted
    return len(candidate) == 24 and ObjectId.is_valid(candidate)


def id_error(value: Any, field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"{field}: is required"
    return f"{field}: invalid identifier {value!r}"


def parse_entity_id(value: Any, field: str = "id") -> EntityId:
    """Return the canonical (lowercase) identifier or raise ValidationError."""
    if not is_valid_entity_id(value):
        raise ValidationError([id_error(value, field)])
    return EntityId(str(value).strip().lower())
