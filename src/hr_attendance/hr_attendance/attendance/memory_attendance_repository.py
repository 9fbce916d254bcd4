from __future__ import annotations

from dataclasses import replace
from datetime import date
from threading import Lock
from typing import Optional, Sequence

from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store. A single lock makes every operation atomic."""

    def __init__(self):
        self._lock = Lock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id_by_user_date: dict[tuple[int, date], int] = {}
        self._next_id = 1

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_id.get(int(attendance_id))

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            attendance_id = self._id_by_user_date.get((int(user_id), work_date))
            return self._by_id.get(attendance_id) if attendance_id else None

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [
                r
                for r in self._by_id.values()
                if r.user_id == int(user_id)
                and (start_date is None or r.work_date >= start_date)
                and (end_date is None or r.work_date <= end_date)
            ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit] if limit else items

    def list_open_before(self, work_date: date) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.is_open and r.work_date < work_date]
        items.sort(key=lambda r: (r.work_date, r.attendance_id))
        return items

    def list_requiring_approval(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.requires_approval]
        items.sort(key=lambda r: (r.work_date, r.attendance_id))
        return items

    def list_closed(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self._by_id.values() if not r.is_open]

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        key = (int(record.user_id), record.work_date)
        with self._lock:
            if key in self._id_by_user_date:
                return None
            stored = replace(record, attendance_id=self._next_id)
            self._next_id += 1
            self._by_id[stored.attendance_id] = stored
            self._id_by_user_date[key] = stored.attendance_id
            return stored

    def close_if_open(self, record: AttendanceRecord) -> bool:
        with self._lock:
            current = self._by_id.get(record.attendance_id)
            if current is None or not current.is_open:
                return False
            self._by_id[record.attendance_id] = record
            return True

    def update(self, record: AttendanceRecord) -> bool:
        with self._lock:
            if record.attendance_id not in self._by_id:
                return False
            self._by_id[record.attendance_id] = record
            return True
