# bjjconnect/core/exceptions.py
"""
Domain errors raised by services.

Routers never translate these by hand: the handlers registered in
``bjjconnect.core.errors`` turn them into the ``{success: false, ...}``
envelope with the status code declared on each class.
"""
from __future__ import annotations

from typing import Optional

from fastapi import status


class DomainError(Exception):
    """Base class for every business-rule failure."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "domain_error"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)


class NotFound(DomainError):
    """Instructor, session or pending booking does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class Forbidden(DomainError):
    """Role or ownership mismatch."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "forbidden"


class InstructorUnavailable(DomainError):
    """Requested window is not contained in the instructor's availability."""

    default_code = "instructor_unavailable"


class SlotTaken(DomainError):
    """A non-terminal session already occupies the requested slot."""

    default_code = "slot_taken"


class InvalidState(DomainError):
    """Operation not allowed in the session's current status."""

    default_code = "invalid_state"


class ValidationError(DomainError):
    """Malformed input that passed schema validation but breaks a business rule."""

    default_code = "validation_error"


__all__ = [
    "DomainError",
    "NotFound",
    "Forbidden",
    "InstructorUnavailable",
    "SlotTaken",
    "InvalidState",
    "ValidationError",
]
