from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from threading import Lock
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.constants import TOIL_EXPIRING_WINDOW_DAYS, TOIL_EXPIRY_DAYS
from ..core.exceptions import ValidationError
from .model import ToilBalance, ToilEntry
from .repository import ToilRepository

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


class ToilService:
    """Ledger of TOIL hours earned from closed attendance records."""

    def __init__(
        self,
        entries: ToilRepository,
        *,
        expiry_days: int = TOIL_EXPIRY_DAYS,
        expiring_window_days: int = TOIL_EXPIRING_WINDOW_DAYS,
    ):
        self._entries = entries
        self._expiry = timedelta(days=int(expiry_days))
        self._expiring_window = timedelta(days=int(expiring_window_days))
        self._lock = Lock()

    @staticmethod
    def _note_for(record: AttendanceRecord) -> str:
        if record.is_weekend_work:
            return "TOIL earned for weekend work"
        if record.is_holiday_work:
            return "TOIL earned for holiday work"
        return f"TOIL earned for {record.overtime_hours} hours overtime"

    def credit(self, record: AttendanceRecord) -> Optional[ToilEntry]:
        """Credit (or re-sync) the ledger entry for a record.

        Idempotent per attendance_id; a changed amount after an admin edit
        adjusts the existing entry without giving back hours already used.
        A reopened record earns nothing, so its entry drops to zero.
        """

        hours = _ZERO if record.is_open else record.toil_hours_earned
        with self._lock:
            existing = self._entries.get_for_attendance(record.attendance_id)
            if existing is not None:
                if existing.hours_earned == hours:
                    return existing
                updated = replace(
                    existing,
                    hours_earned=hours,
                    hours_remaining=max(_ZERO, hours - existing.hours_used),
                    note=self._note_for(record),
                )
                self._entries.update(updated)
                logger.info(
                    "Re-synced TOIL entry %s to %s hours (attendance %s)", existing.entry_id, hours, record.attendance_id
                )
                return updated

            if hours <= 0:
                return None

            earned = record.check_in_time
            entry = self._entries.add(
                ToilEntry(
                    entry_id=0,
                    user_id=record.user_id,
                    attendance_id=record.attendance_id,
                    hours_earned=hours,
                    hours_used=_ZERO,
                    hours_remaining=hours,
                    earned_date=earned,
                    expiry_date=earned + self._expiry,
                    note=self._note_for(record),
                )
            )
        logger.info("Credited %s TOIL hours to user %s (attendance %s)", hours, record.user_id, record.attendance_id)
        return entry

    def _usable(self, user_id: int, now: datetime) -> list[ToilEntry]:
        return [e for e in self._entries.list_active_for_user(user_id) if e.expiry_date > now]

    def balance(self, user_id: int, now: datetime) -> ToilBalance:
        horizon = now + self._expiring_window
        total = _ZERO
        expiring = _ZERO
        expiring_date: Optional[datetime] = None

        for e in self._usable(user_id, now):
            total += e.hours_remaining
            if e.expiry_date <= horizon:
                expiring += e.hours_remaining
                if expiring_date is None or e.expiry_date < expiring_date:
                    expiring_date = e.expiry_date

        return ToilBalance(total_hours=total, expiring_hours=expiring, expiring_date=expiring_date)

    def use_hours(self, user_id: int, hours: Decimal, now: datetime) -> bool:
        """Consume TOIL oldest-expiring first. All or nothing."""

        hours = Decimal(str(hours))
        if hours <= 0:
            raise ValidationError("Hours to use must be positive")

        with self._lock:
            usable = self._usable(user_id, now)
            if sum((e.hours_remaining for e in usable), _ZERO) < hours:
                return False

            remaining = hours
            for e in usable:
                if remaining <= 0:
                    break
                take = min(remaining, e.hours_remaining)
                self._entries.update(
                    replace(e, hours_used=e.hours_used + take, hours_remaining=e.hours_remaining - take)
                )
                remaining -= take
        return True

    def expire_old(self, now: datetime) -> int:
        count = 0
        with self._lock:
            for e in self._entries.list_lapsed(now):
                if self._entries.update(replace(e, is_expired=True)):
                    count += 1
        if count:
            logger.info("Expired %d TOIL entries", count)
        return count
