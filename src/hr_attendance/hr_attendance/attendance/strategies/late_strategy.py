from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geofence.model import GeofenceResult
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, geofence: Optional[GeofenceResult]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, location_label=self.location_label(geofence))
