from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_M, OUTSIDE_LOCATION, REMOTE_LOCATION
from ..core.enums import GeofenceOutcome


@dataclass(frozen=True)
class Position:
    """A client-reported GPS fix. Accuracy is in meters, ``None`` when unknown."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class WorkLocation:
    location_id: int
    name: str
    latitude: float
    longitude: float
    radius_m: float = DEFAULT_GEOFENCE_RADIUS_M
    is_active: bool = True
    is_remote_allowed: bool = False
    address: Optional[str] = None


@dataclass(frozen=True)
class GeofenceResult:
    outcome: GeofenceOutcome
    location: Optional[WorkLocation] = None
    distance_m: Optional[float] = None

    @property
    def is_location_valid(self) -> bool:
        return self.outcome == GeofenceOutcome.MATCHED

    @property
    def requires_approval(self) -> bool:
        return self.outcome == GeofenceOutcome.OUTSIDE

    @property
    def label(self) -> str:
        if self.location is not None:
            return self.location.name
        if self.outcome == GeofenceOutcome.REMOTE:
            return REMOTE_LOCATION
        return OUTSIDE_LOCATION
