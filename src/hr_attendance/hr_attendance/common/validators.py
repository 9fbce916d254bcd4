from __future__ import annotations

import math
from typing import Optional

from ..core.exceptions import InvalidCoordinates, ValidationError


def require_coordinates(latitude: float, longitude: float) -> tuple[float, float]:
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        raise InvalidCoordinates(f"Coordinates are not numeric: {latitude!r}, {longitude!r}")
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinates(f"Coordinates are not numeric: {latitude!r}, {longitude!r}") from None

    if math.isnan(lat) or math.isnan(lon):
        raise InvalidCoordinates("Coordinates must not be NaN")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinates(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinates(f"Longitude out of range: {lon}")
    return lat, lon


def normalize_accuracy(accuracy: Optional[float]) -> Optional[float]:
    """Missing or zero accuracy means "unknown", not invalid."""
    if accuracy is None:
        return None
    if isinstance(accuracy, bool):
        raise ValidationError(f"Accuracy is not numeric: {accuracy!r}")
    try:
        value = float(accuracy)
    except (TypeError, ValueError):
        raise ValidationError(f"Accuracy is not numeric: {accuracy!r}") from None
    if math.isnan(value) or value < 0:
        raise ValidationError(f"Accuracy must be a non-negative number: {accuracy!r}")
    return value or None


def clean_notes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Notes must be text, got {type(value).__name__}")
    return value.strip() or None


def require_flag(name: str, value: object) -> bool:
    """Only real booleans; "false" or 0 are rejected rather than coerced."""
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false")
    return value
