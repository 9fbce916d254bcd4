from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage contract for attendance records.

    ``create_if_absent`` and ``close_if_open`` must be atomic: of two
    concurrent callers for the same (user_id, work_date) or the same open
    record, exactly one succeeds.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest work_date first."""

        raise NotImplementedError

    def list_open_before(self, work_date: date) -> Sequence[AttendanceRecord]:
        """Open records whose work_date is strictly earlier than ``work_date``."""

        raise NotImplementedError

    def list_requiring_approval(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_closed(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        """Insert ``record`` unless one exists for its (user_id, work_date).

        Returns the stored record with its assigned id, or None if a record
        already existed.
        """

        raise NotImplementedError

    def close_if_open(self, record: AttendanceRecord) -> bool:
        """Replace the stored record only while it still has no check-out."""

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        """Unconditional replace, for privileged edits and maintenance."""

        raise NotImplementedError
