from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ToilEntry:
    """TOIL hours credited from one closed attendance record."""

    entry_id: int
    user_id: int
    attendance_id: int
    hours_earned: Decimal
    hours_used: Decimal
    hours_remaining: Decimal
    earned_date: datetime
    expiry_date: datetime
    is_expired: bool = False
    note: Optional[str] = None


@dataclass(frozen=True)
class ToilBalance:
    total_hours: Decimal
    expiring_hours: Decimal
    expiring_date: Optional[datetime] = None
