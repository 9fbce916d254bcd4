"""Geofence classification of a reported position against work sites.

Client-supplied coordinates cannot be authenticated server side. They are
only checked for well-formedness; location authenticity is best-effort.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..common.validators import normalize_accuracy, require_coordinates
from ..core.constants import EARTH_RADIUS_M
from ..core.enums import GeofenceOutcome
from .model import GeofenceResult, Position, WorkLocation


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


class GeofenceValidator:
    """Stateless; safe to share between request handlers."""

    def validate_position(self, position: Position) -> Position:
        lat, lon = require_coordinates(position.latitude, position.longitude)
        return Position(latitude=lat, longitude=lon, accuracy=normalize_accuracy(position.accuracy))

    def classify(self, position: Position, locations: Iterable[WorkLocation]) -> GeofenceResult:
        position = self.validate_position(position)
        active = [loc for loc in locations if loc.is_active]

        best: Optional[WorkLocation] = None
        best_distance: Optional[float] = None
        nearest_distance: Optional[float] = None

        for loc in active:
            distance = haversine_distance_m(position.latitude, position.longitude, loc.latitude, loc.longitude)
            if nearest_distance is None or distance < nearest_distance:
                nearest_distance = distance

            if distance > loc.radius_m:
                continue
            # Overlapping sites: the smallest radius wins, then the closest center.
            if best is None or (loc.radius_m, distance) < (best.radius_m, best_distance):
                best = loc
                best_distance = distance

        if best is not None:
            return GeofenceResult(outcome=GeofenceOutcome.MATCHED, location=best, distance_m=best_distance)

        if any(loc.is_remote_allowed for loc in active):
            return GeofenceResult(outcome=GeofenceOutcome.REMOTE, distance_m=nearest_distance)

        return GeofenceResult(outcome=GeofenceOutcome.OUTSIDE, distance_m=nearest_distance)
