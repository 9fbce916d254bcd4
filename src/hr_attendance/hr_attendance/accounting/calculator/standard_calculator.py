from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...core.constants import HOURS_QUANTUM, STANDARD_HOURS_PER_DAY
from ...core.enums import WeekendToilPolicy
from ...core.exceptions import NonMonotonicTime
from ..holidays import HolidayCalendar
from ..model import TimeSummary
from .base import TimeAccountingCalculator

_SECONDS_PER_HOUR = Decimal(3600)
_ZERO = Decimal("0.00")


def round_hours(value: Decimal) -> Decimal:
    return value.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


class StandardTimeCalculator(TimeAccountingCalculator):
    """Standard rule set.

    - working = (out - in) in hours, 2 decimals, half-up
    - overtime = max(0, working - standard_hours_per_day)
    - weekend = check-out falls on Saturday/Sunday (local)
    - TOIL = working on weekend/holiday days (FULL_HOURS policy), else overtime
    """

    def __init__(
        self,
        *,
        standard_hours_per_day: Decimal = STANDARD_HOURS_PER_DAY,
        weekend_policy: WeekendToilPolicy = WeekendToilPolicy.FULL_HOURS,
        holidays: Optional[HolidayCalendar] = None,
    ):
        self._standard_hours = Decimal(str(standard_hours_per_day))
        if self._standard_hours < 0:
            raise ValueError("standard_hours_per_day must be >= 0")
        self._weekend_policy = WeekendToilPolicy(weekend_policy)
        self._holidays = holidays

    @property
    def standard_hours_per_day(self) -> Decimal:
        return self._standard_hours

    def summarize(self, check_in: datetime, check_out: datetime) -> TimeSummary:
        if check_out <= check_in:
            raise NonMonotonicTime(f"Check-out {check_out.isoformat()} must be later than check-in {check_in.isoformat()}")

        delta = check_out - check_in
        seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)
        working = round_hours(seconds / _SECONDS_PER_HOUR)
        overtime = max(_ZERO, round_hours(working - self._standard_hours))

        is_weekend = check_out.weekday() >= 5
        is_holiday = bool(self._holidays and self._holidays.is_holiday(check_out.date()))

        if (is_weekend or is_holiday) and self._weekend_policy == WeekendToilPolicy.FULL_HOURS:
            toil = working
        else:
            toil = overtime

        return TimeSummary(
            working_hours=working,
            overtime_hours=overtime,
            toil_hours_earned=toil,
            is_weekend_work=is_weekend,
            is_holiday_work=is_holiday,
        )
