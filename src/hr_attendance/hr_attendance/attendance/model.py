from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, RecordState

ZERO_HOURS = Decimal("0.00")


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (user_id, work_date).

    Records are never deleted. Check-out, the midnight sweeper and admin
    edits produce new versions through ``dataclasses.replace``.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    check_out_time: Optional[datetime] = None

    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_in_accuracy: Optional[float] = None
    check_in_address: Optional[str] = None
    check_in_location: Optional[str] = None
    distance_m: Optional[float] = None

    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    check_out_accuracy: Optional[float] = None
    check_out_address: Optional[str] = None
    check_out_location: Optional[str] = None

    working_hours: Decimal = ZERO_HOURS
    overtime_hours: Decimal = ZERO_HOURS
    toil_hours_earned: Decimal = ZERO_HOURS
    is_weekend_work: bool = False
    is_holiday_work: bool = False

    is_gps_verified: bool = False
    is_location_valid: bool = False
    requires_approval: bool = False
    is_auto_checkout: bool = False

    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    admin_edited_by: Optional[int] = None
    admin_edited_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def state(self) -> RecordState:
        return RecordState.OPEN if self.check_out_time is None else RecordState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None
