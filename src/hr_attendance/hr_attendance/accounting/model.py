from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TimeSummary:
    """Output of the time accounting engine for one (check-in, check-out) pair."""

    working_hours: Decimal
    overtime_hours: Decimal
    toil_hours_earned: Decimal
    is_weekend_work: bool
    is_holiday_work: bool = False

    @property
    def is_toil_eligible(self) -> bool:
        return self.toil_hours_earned > 0
