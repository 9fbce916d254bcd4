from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hr_attendance.hr_attendance.accounting.calculator.standard_calculator import StandardTimeCalculator, round_hours
from src.hr_attendance.hr_attendance.accounting.holidays import StaticHolidayCalendar
from src.hr_attendance.hr_attendance.core.enums import WeekendToilPolicy
from src.hr_attendance.hr_attendance.core.exceptions import NonMonotonicTime, ValidationError


def test_weekday_overtime_becomes_toil():
    calc = StandardTimeCalculator()
    summary = calc.summarize(datetime(2025, 1, 7, 9, 0), datetime(2025, 1, 7, 17, 30))

    assert summary.working_hours == Decimal("8.50")
    assert summary.overtime_hours == Decimal("0.50")
    assert summary.is_weekend_work is False
    assert summary.toil_hours_earned == Decimal("0.50")


def test_weekend_hours_are_all_toil():
    calc = StandardTimeCalculator()
    summary = calc.summarize(datetime(2025, 1, 4, 10, 0), datetime(2025, 1, 4, 14, 0))

    assert summary.working_hours == Decimal("4.00")
    assert summary.overtime_hours == Decimal("0.00")
    assert summary.is_weekend_work is True
    assert summary.toil_hours_earned == Decimal("4.00")


def test_short_weekday_has_no_overtime():
    summary = StandardTimeCalculator().summarize(datetime(2025, 1, 7, 9, 0), datetime(2025, 1, 7, 13, 0))

    assert summary.overtime_hours == Decimal("0.00")
    assert summary.toil_hours_earned == Decimal("0.00")
    assert summary.is_toil_eligible is False


def test_rounding_is_half_up_to_two_decimals():
    # 1 minute 3 seconds = 0.0175 h
    summary = StandardTimeCalculator().summarize(datetime(2025, 1, 7, 9, 0, 0), datetime(2025, 1, 7, 9, 1, 3))

    assert summary.working_hours == Decimal("0.02")
    assert round_hours(Decimal("0.125")) == Decimal("0.13")


@pytest.mark.parametrize(
    "check_out",
    [datetime(2025, 1, 7, 9, 0), datetime(2025, 1, 7, 8, 59)],
)
def test_non_monotonic_times_are_rejected(check_out):
    with pytest.raises(NonMonotonicTime):
        StandardTimeCalculator().summarize(datetime(2025, 1, 7, 9, 0), check_out)

    assert issubclass(NonMonotonicTime, ValidationError)


def test_weekend_is_decided_by_check_out_day():
    # Friday evening to Saturday morning
    summary = StandardTimeCalculator().summarize(datetime(2025, 1, 3, 22, 0), datetime(2025, 1, 4, 2, 0))

    assert summary.is_weekend_work is True
    assert summary.toil_hours_earned == Decimal("4.00")


def test_holiday_work_earns_full_toil():
    calc = StandardTimeCalculator(holidays=StaticHolidayCalendar([date(2025, 1, 1)]))
    summary = calc.summarize(datetime(2025, 1, 1, 9, 0), datetime(2025, 1, 1, 12, 15))

    assert summary.is_holiday_work is True
    assert summary.is_weekend_work is False
    assert summary.toil_hours_earned == Decimal("3.25")


def test_overtime_only_policy_on_weekend():
    calc = StandardTimeCalculator(weekend_policy=WeekendToilPolicy.OVERTIME_ONLY)
    summary = calc.summarize(datetime(2025, 1, 4, 8, 0), datetime(2025, 1, 4, 18, 0))

    assert summary.working_hours == Decimal("10.00")
    assert summary.overtime_hours == Decimal("2.00")
    assert summary.toil_hours_earned == Decimal("2.00")


def test_custom_standard_hours():
    calc = StandardTimeCalculator(standard_hours_per_day=Decimal("7.5"))
    summary = calc.summarize(datetime(2025, 1, 7, 9, 0), datetime(2025, 1, 7, 17, 0))

    assert summary.overtime_hours == Decimal("0.50")
