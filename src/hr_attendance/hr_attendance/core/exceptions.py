from __future__ import annotations

from typing import Optional

from .enums import GpsFailureReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidCoordinates(ValidationError):
    """Latitude/longitude outside [-90, 90] x [-180, 180]."""


class NonMonotonicTime(ValidationError):
    """Check-out not strictly later than check-in."""


class StateConflict(DomainError):
    """Raised when a transition is not legal for the record's current state."""


class AlreadyCheckedIn(StateConflict):
    pass


class NoActiveCheckIn(StateConflict):
    pass


class RecordNotFound(DomainError):
    pass


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class UpstreamUnavailable(DomainError):
    """GPS or geocoding failure. Always recovered locally, never surfaced."""


class GpsUnavailable(UpstreamUnavailable):
    def __init__(self, reason: GpsFailureReason, message: Optional[str] = None):
        super().__init__(message or reason.value)
        self.reason = reason


class GeocodingUnavailable(UpstreamUnavailable):
    pass


class StoreFailure(DomainError):
    """The attendance store could not complete an operation."""
