from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status as persisted on the record."""

    PRESENT = "present"
    REMOTE = "remote"
    LATE = "late"
    ABSENT = "absent"


class RecordState(str, Enum):
    """Lifecycle of the attendance record for one (user, date)."""

    NO_RECORD = "no_record"
    OPEN = "open"
    CLOSED = "closed"


class GeofenceOutcome(str, Enum):
    MATCHED = "matched"
    REMOTE = "remote"
    OUTSIDE = "outside"


class GpsFailureReason(str, Enum):
    """Why a position could not be acquired from the device."""

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    NOT_PROVIDED = "not_provided"


class WeekendToilPolicy(str, Enum):
    """How weekend (and holiday) work is credited as TOIL."""

    FULL_HOURS = "full_hours"
    OVERTIME_ONLY = "overtime_only"
