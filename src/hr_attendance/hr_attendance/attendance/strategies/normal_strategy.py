from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geofence.model import GeofenceResult
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in (on site, unverified or outside every geofence)."""

    def decide_checkin(self, *, now: datetime, geofence: Optional[GeofenceResult]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, location_label=self.location_label(geofence))
