from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import GeofenceOutcome
from ..geofence.model import GeofenceResult
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.remote_strategy import RemoteStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    ``workday_start`` is optional; without it nobody is ever late.
    """

    workday_start: Optional[time] = None
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def for_checkin(self, *, now: datetime, geofence: Optional[GeofenceResult]) -> AttendanceStrategy:
        if geofence is not None and geofence.outcome == GeofenceOutcome.REMOTE:
            return RemoteStrategy()

        if self.workday_start is None:
            return NormalStrategy()

        start = datetime.combine(now.date(), self.workday_start)
        if now <= start + timedelta(minutes=int(self.grace_minutes)):
            return NormalStrategy()
        return LateStrategy()
