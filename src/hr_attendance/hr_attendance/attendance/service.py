from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..accounting.calculator.base import TimeAccountingCalculator
from ..accounting.calculator.standard_calculator import StandardTimeCalculator
from ..accounting.model import TimeSummary
from ..common.datetime_utils import now_local
from ..common.validators import clean_notes, require_flag
from ..core.constants import (
    AUTO_CHECKOUT_ADMIN_NOTE,
    AUTO_CHECKOUT_LOCATION,
    MANUAL_CHECKIN_LOCATION,
    MANUAL_CHECKOUT_LOCATION,
    OUTSIDE_LOCATION,
)
from ..core.enums import AttendanceStatus, GpsFailureReason
from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    NoActiveCheckIn,
    RecordNotFound,
    StateConflict,
    UpstreamUnavailable,
    ValidationError,
)
from ..geocoding.provider import GeocodingProvider, coordinate_label
from ..geofence.model import GeofenceResult, Position
from ..geofence.repository import WorkLocationRepository
from ..geofence.validator import GeofenceValidator
from ..toil.service import ToilService
from ..users.model import User
from .factory import AttendanceStrategyFactory
from .model import ZERO_HOURS, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ADMIN_EDITABLE_FIELDS = frozenset(
    {
        "check_in_time",
        "check_out_time",
        "status",
        "notes",
        "admin_notes",
        "requires_approval",
        "is_location_valid",
    }
)

AUTO_CHECKOUT_NOTE = "Automatically checked out at midnight - no manual checkout recorded"


def _append_note(existing: Optional[str], extra: Optional[str]) -> Optional[str]:
    if not extra:
        return existing
    if not existing:
        return extra
    return f"{existing}\n{extra}"


def _gps_failure_note(reason: GpsFailureReason) -> str:
    if reason == GpsFailureReason.NOT_PROVIDED:
        return "Manual entry: no GPS position provided"
    return f"GPS unavailable ({reason.value}): manual entry"


class AttendanceService:
    """Per-user, per-day attendance state machine: NoRecord -> Open -> Closed.

    The service holds no mutable state of its own; concurrent requests are
    arbitrated by the repository's create-if-absent / close-if-open guards.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        locations: WorkLocationRepository,
        *,
        calculator: TimeAccountingCalculator | None = None,
        validator: GeofenceValidator | None = None,
        geocoder: GeocodingProvider | None = None,
        toil: ToilService | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._locations = locations
        self._calculator = calculator or StandardTimeCalculator()
        self._validator = validator or GeofenceValidator()
        self._geocoder = geocoder
        self._toil = toil
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    # -- helpers ---------------------------------------------------------

    def _classify(self, position: Optional[Position]) -> tuple[Optional[Position], Optional[GeofenceResult]]:
        if position is None:
            return None, None
        position = self._validator.validate_position(position)
        return position, self._validator.classify(position, self._locations.list_active())

    def _resolve_address(self, position: Position) -> str:
        if self._geocoder is None:
            return coordinate_label(position.latitude, position.longitude)
        try:
            return self._geocoder.reverse(position.latitude, position.longitude)
        except UpstreamUnavailable as e:
            logger.warning("Reverse geocoding unavailable, storing coordinates instead: %s", e)
            return coordinate_label(position.latitude, position.longitude)

    @staticmethod
    def _apply_summary(record: AttendanceRecord, summary: TimeSummary) -> AttendanceRecord:
        return replace(
            record,
            working_hours=summary.working_hours,
            overtime_hours=summary.overtime_hours,
            toil_hours_earned=summary.toil_hours_earned,
            is_weekend_work=summary.is_weekend_work,
            is_holiday_work=summary.is_holiday_work,
        )

    def _credit_toil(self, record: AttendanceRecord) -> None:
        if self._toil is not None:
            self._toil.credit(record)

    def _load(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if record is None:
            raise RecordNotFound(f"Attendance record {attendance_id} not found")
        return record

    @staticmethod
    def _require_admin(user: User) -> None:
        if not user.is_admin:
            raise AuthorizationError("Only administrators may modify attendance records")

    # -- transitions -----------------------------------------------------

    def request_check_in(
        self,
        user_id: int,
        *,
        now: datetime | None = None,
        position: Position | None = None,
        notes: str | None = None,
        gps_failure: GpsFailureReason | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        # Validation happens before anything is written.
        position, geofence = self._classify(position)

        if self._attendance.get_for_user_and_date(user_id, today) is not None:
            raise AlreadyCheckedIn("Already checked in today")

        strategy = self._factory.for_checkin(now=now, geofence=geofence)
        decision = strategy.decide_checkin(now=now, geofence=geofence)

        notes = clean_notes(notes)
        if position is None:
            notes = _append_note(notes, _gps_failure_note(gps_failure or GpsFailureReason.NOT_PROVIDED))
            record = AttendanceRecord(
                attendance_id=0,
                user_id=int(user_id),
                work_date=today,
                check_in_time=now,
                status=decision.status,
                check_in_location=MANUAL_CHECKIN_LOCATION,
                is_gps_verified=False,
                is_location_valid=False,
                requires_approval=True,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
        else:
            record = AttendanceRecord(
                attendance_id=0,
                user_id=int(user_id),
                work_date=today,
                check_in_time=now,
                status=decision.status,
                check_in_latitude=position.latitude,
                check_in_longitude=position.longitude,
                check_in_accuracy=position.accuracy,
                check_in_address=self._resolve_address(position),
                check_in_location=decision.location_label or OUTSIDE_LOCATION,
                distance_m=geofence.distance_m,
                is_gps_verified=True,
                is_location_valid=geofence.is_location_valid,
                requires_approval=geofence.requires_approval,
                notes=notes,
                created_at=now,
                updated_at=now,
            )

        created = self._attendance.create_if_absent(record)
        if created is None:
            logger.info("Concurrent check-in rejected for user %s on %s", user_id, today)
            raise AlreadyCheckedIn("Already checked in today")

        logger.info(
            "User %s checked in at %s (status=%s, gps=%s, approval=%s)",
            user_id,
            now.isoformat(),
            created.status.value,
            created.is_gps_verified,
            created.requires_approval,
        )
        return created

    def request_check_out(
        self,
        user_id: int,
        *,
        now: datetime | None = None,
        position: Position | None = None,
        notes: str | None = None,
        gps_failure: GpsFailureReason | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        position, geofence = self._classify(position)

        record = self._attendance.get_for_user_and_date(user_id, today)
        if record is None:
            raise NoActiveCheckIn("No check-in record found for today")
        if not record.is_open:
            # Safe client retry: hand back the closed record unchanged.
            return record

        summary = self._calculator.summarize(record.check_in_time, now)

        notes = clean_notes(notes)
        if position is None:
            notes = _append_note(notes, _gps_failure_note(gps_failure or GpsFailureReason.NOT_PROVIDED))
            closed = replace(
                record,
                check_out_time=now,
                check_out_location=MANUAL_CHECKOUT_LOCATION,
                is_gps_verified=False,
                requires_approval=True,
            )
        else:
            closed = replace(
                record,
                check_out_time=now,
                check_out_latitude=position.latitude,
                check_out_longitude=position.longitude,
                check_out_accuracy=position.accuracy,
                check_out_address=self._resolve_address(position),
                check_out_location=geofence.label,
                is_location_valid=record.is_location_valid and geofence.is_location_valid,
                requires_approval=record.requires_approval or geofence.requires_approval,
            )

        closed = self._apply_summary(replace(closed, notes=_append_note(record.notes, notes), updated_at=now), summary)

        if not self._attendance.close_if_open(closed):
            logger.info("Check-out for user %s lost a race on record %s", user_id, record.attendance_id)
            raise StateConflict("Attendance record was closed by a concurrent request")

        self._credit_toil(closed)
        logger.info(
            "User %s checked out at %s (worked=%s, overtime=%s, toil=%s)",
            user_id,
            now.isoformat(),
            closed.working_hours,
            closed.overtime_hours,
            closed.toil_hours_earned,
        )
        return closed

    def auto_checkout(self, record: AttendanceRecord, boundary: datetime) -> Optional[AttendanceRecord]:
        """Close an abandoned record at ``boundary`` (the midnight after its date).

        Returns None when the record is no longer open, e.g. the user
        checked out concurrently.
        """

        summary = self._calculator.summarize(record.check_in_time, boundary)
        closed = self._apply_summary(
            replace(
                record,
                check_out_time=boundary,
                check_out_location=AUTO_CHECKOUT_LOCATION,
                is_auto_checkout=True,
                notes=_append_note(record.notes, AUTO_CHECKOUT_NOTE),
                admin_notes=_append_note(record.admin_notes, AUTO_CHECKOUT_ADMIN_NOTE),
                updated_at=self._clock(),
            ),
            summary,
        )
        if not self._attendance.close_if_open(closed):
            return None

        self._credit_toil(closed)
        logger.info(
            "Auto-checkout applied for user %s - attendance ID %s - working hours: %s",
            record.user_id,
            record.attendance_id,
            closed.working_hours,
        )
        return closed

    # -- queries ---------------------------------------------------------

    def get_today(self, user_id: int, *, today: date | None = None) -> Optional[AttendanceRecord]:
        today = today or self._clock().date()
        return self._attendance.get_for_user_and_date(user_id, today)

    def list_history(
        self,
        user_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = None,
    ) -> Sequence[AttendanceRecord]:
        if limit is not None and limit < 1:
            raise ValidationError("limit must be a positive integer")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        return self._attendance.list_for_user(user_id, start_date=start_date, end_date=end_date, limit=limit)

    def list_pending_approval(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_requiring_approval()

    # -- privileged ------------------------------------------------------

    def admin_update(
        self,
        attendance_id: int,
        fields: Mapping[str, Any],
        *,
        editor: User,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Edit a record bypassing state guards; time changes are re-accounted."""

        self._require_admin(editor)
        unknown = set(fields) - ADMIN_EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

        now = now or self._clock()
        record = self._load(attendance_id)

        changes = dict(fields)
        if "status" in changes:
            try:
                changes["status"] = AttendanceStatus(changes["status"])
            except (TypeError, ValueError):
                raise ValidationError(f"Unknown status: {changes['status']!r}") from None
        if "check_in_time" in changes and changes["check_in_time"] is None:
            raise ValidationError("check_in_time cannot be cleared")
        for name in ("check_in_time", "check_out_time"):
            value = changes.get(name)
            if value is not None and (not isinstance(value, datetime) or value.tzinfo is not None):
                raise ValidationError(f"{name} must be a local (naive) datetime")
        for flag in ("requires_approval", "is_location_valid"):
            if flag in changes:
                changes[flag] = require_flag(flag, changes[flag])
        for text in ("notes", "admin_notes"):
            if text in changes:
                changes[text] = clean_notes(changes[text])

        updated = replace(record, **changes, admin_edited_by=editor.user_id, admin_edited_at=now, updated_at=now)

        if "check_in_time" in changes or "check_out_time" in changes:
            if updated.check_out_time is None:
                updated = replace(
                    updated,
                    working_hours=ZERO_HOURS,
                    overtime_hours=ZERO_HOURS,
                    toil_hours_earned=ZERO_HOURS,
                    is_weekend_work=False,
                    is_holiday_work=False,
                )
            else:
                updated = self._apply_summary(
                    updated, self._calculator.summarize(updated.check_in_time, updated.check_out_time)
                )

        if not self._attendance.update(updated):
            raise RecordNotFound(f"Attendance record {attendance_id} not found")

        self._credit_toil(updated)
        logger.info("Admin %s edited attendance %s: %s", editor.user_id, attendance_id, ", ".join(sorted(fields)))
        return updated

    def approve(self, attendance_id: int, *, approver: User, now: datetime | None = None) -> AttendanceRecord:
        self._require_admin(approver)
        record = self._load(attendance_id)
        if not record.requires_approval:
            return record

        now = now or self._clock()
        approved = replace(
            record,
            requires_approval=False,
            approved_by=approver.user_id,
            approved_at=now,
            updated_at=now,
        )
        if not self._attendance.update(approved):
            raise RecordNotFound(f"Attendance record {attendance_id} not found")
        logger.info("Admin %s approved attendance %s", approver.user_id, attendance_id)
        return approved

    def recalculate_hours(self) -> int:
        """Repair closed records whose stored hours disagree with the calculator."""

        fixed = 0
        for record in self._attendance.list_closed():
            summary = self._calculator.summarize(record.check_in_time, record.check_out_time)
            repaired = self._apply_summary(record, summary)
            if repaired == record:
                continue
            if self._attendance.update(replace(repaired, updated_at=self._clock())):
                self._credit_toil(repaired)
                fixed += 1
                logger.info("Fixed attendance record ID %s - working hours: %s", record.attendance_id, repaired.working_hours)
        logger.info("Fixed %d attendance records with incorrect working hours", fixed)
        return fixed
