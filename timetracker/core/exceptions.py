"""
Domain exceptions raised by the service layer.
Each carries the HTTP status and error code the API renders it with.
"""
from enum import Enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


class TimeTrackerError(Exception):
    """Base class for every error the core reports to callers."""

    status_code: int = 500
    error: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TimeTrackerError):
    """Missing or invalid input, billing-mode mismatch, bad task number."""

    status_code = 400
    error = "validation_error"


class PermissionDeniedError(TimeTrackerError):
    status_code = 403
    error = "access_denied"


class NotFoundError(TimeTrackerError):
    """Unknown user, entry, project or task id."""

    status_code = 404
    error = "not_found"


class ConflictError(TimeTrackerError):
    """A uniqueness rule enforced by the database was violated."""

    status_code = 409
    error = "constraint_violation"


def parse_enum(enum_cls: Type[E], raw, field: str) -> E:
    """
    Convert a boundary string (or an existing member) into *enum_cls*.

    Matching is case-insensitive on the member value. Unknown strings raise
    ValidationError instead of falling back to a default.
    """
    if isinstance(raw, enum_cls):
        return raw
    candidate: Optional[str] = raw.strip().upper() if isinstance(raw, str) else None
    for member in enum_cls:
        if candidate is not None and str(member.value).upper() == candidate:
            return member
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ValidationError(f"Invalid {field} '{raw}'. Allowed values: {allowed}")
