from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Optional, Sequence

from .model import ToilEntry
from .repository import ToilRepository


class InMemoryToilRepository(ToilRepository):
    def __init__(self):
        self._lock = Lock()
        self._by_id: dict[int, ToilEntry] = {}
        self._next_id = 1

    def get_for_attendance(self, attendance_id: int) -> Optional[ToilEntry]:
        with self._lock:
            for entry in self._by_id.values():
                if entry.attendance_id == int(attendance_id):
                    return entry
            return None

    def add(self, entry: ToilEntry) -> ToilEntry:
        with self._lock:
            stored = replace(entry, entry_id=self._next_id)
            self._next_id += 1
            self._by_id[stored.entry_id] = stored
            return stored

    def update(self, entry: ToilEntry) -> bool:
        with self._lock:
            if entry.entry_id not in self._by_id:
                return False
            self._by_id[entry.entry_id] = entry
            return True

    def list_active_for_user(self, user_id: int) -> Sequence[ToilEntry]:
        with self._lock:
            items = [
                e
                for e in self._by_id.values()
                if e.user_id == int(user_id) and not e.is_expired and e.hours_remaining > 0
            ]
        items.sort(key=lambda e: (e.expiry_date, e.entry_id))
        return items

    def list_lapsed(self, now: datetime) -> Sequence[ToilEntry]:
        with self._lock:
            return [
                e
                for e in self._by_id.values()
                if not e.is_expired and e.hours_remaining > 0 and e.expiry_date <= now
            ]
