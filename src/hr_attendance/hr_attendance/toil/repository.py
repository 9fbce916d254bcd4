from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ToilEntry


class ToilRepository(Protocol):
    def get_for_attendance(self, attendance_id: int) -> Optional[ToilEntry]:
        raise NotImplementedError

    def add(self, entry: ToilEntry) -> ToilEntry:
        raise NotImplementedError

    def update(self, entry: ToilEntry) -> bool:
        raise NotImplementedError

    def list_active_for_user(self, user_id: int) -> Sequence[ToilEntry]:
        """Not expired with hours remaining, oldest expiry first."""

        raise NotImplementedError

    def list_lapsed(self, now: datetime) -> Sequence[ToilEntry]:
        """Not yet marked expired, hours remaining, expiry_date <= now."""

        raise NotImplementedError
