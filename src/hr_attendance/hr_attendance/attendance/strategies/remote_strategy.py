from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.constants import REMOTE_LOCATION
from ...core.enums import AttendanceStatus
from ...geofence.model import GeofenceResult
from .base import AttendanceStrategy, StatusDecision


class RemoteStrategy(AttendanceStrategy):
    """Outside every geofence, but remote work is allowed somewhere."""

    def decide_checkin(self, *, now: datetime, geofence: Optional[GeofenceResult]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.REMOTE, location_label=REMOTE_LOCATION)
