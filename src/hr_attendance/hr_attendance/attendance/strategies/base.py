from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geofence.model import GeofenceResult


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    location_label: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a check-in status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, geofence: Optional[GeofenceResult]) -> StatusDecision:
        raise NotImplementedError

    @staticmethod
    def location_label(geofence: Optional[GeofenceResult]) -> Optional[str]:
        return geofence.label if geofence is not None else None
