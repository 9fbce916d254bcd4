from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from src.hr_attendance.hr_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.hr_attendance.hr_attendance.attendance.service import AttendanceService
from src.hr_attendance.hr_attendance.geofence.memory_work_location_repository import InMemoryWorkLocationRepository
from src.hr_attendance.hr_attendance.sweeper.midnight_sweeper import MidnightAutoCheckoutSweeper
from src.hr_attendance.hr_attendance.toil.memory_toil_repository import InMemoryToilRepository
from src.hr_attendance.hr_attendance.toil.service import ToilService

MONDAY_10PM = datetime(2025, 1, 6, 22, 0)
TUESDAY_MIDNIGHT = datetime(2025, 1, 7, 0, 0)


def _setup(toil=None):
    repo = InMemoryAttendanceRepository()
    service = AttendanceService(repo, InMemoryWorkLocationRepository(), toil=toil)
    sweeper = MidnightAutoCheckoutSweeper(repo, service)
    return repo, service, sweeper


def test_abandoned_record_closes_at_midnight_boundary():
    repo, service, sweeper = _setup()
    rec = service.request_check_in(1, now=MONDAY_10PM)

    closed = sweeper.sweep(now=datetime(2025, 1, 7, 3, 17))

    assert len(closed) == 1
    stored = repo.get_by_id(rec.attendance_id)
    assert stored.check_out_time == TUESDAY_MIDNIGHT
    assert stored.is_auto_checkout is True
    assert stored.working_hours == Decimal("2.00")
    assert stored.check_out_location == "Auto Check-out (Midnight)"
    assert "Auto-checkout" in stored.admin_notes


def test_todays_open_record_is_untouched():
    repo, service, sweeper = _setup()
    rec = service.request_check_in(1, now=datetime(2025, 1, 7, 0, 30))

    assert sweeper.sweep(now=datetime(2025, 1, 7, 23, 59)) == []
    assert repo.get_by_id(rec.attendance_id).is_open


def test_sweep_is_idempotent():
    repo, service, sweeper = _setup()
    service.request_check_in(1, now=MONDAY_10PM)

    first = sweeper.sweep(now=TUESDAY_MIDNIGHT + timedelta(minutes=1))
    second = sweeper.sweep(now=TUESDAY_MIDNIGHT + timedelta(minutes=2))

    assert len(first) == 1
    assert second == []


def test_user_check_out_wins_over_sweeper():
    repo, service, sweeper = _setup()
    rec = service.request_check_in(1, now=MONDAY_10PM)
    stale = repo.get_by_id(rec.attendance_id)
    user_closed = service.request_check_out(1, now=datetime(2025, 1, 6, 23, 30))

    # The sweeper read the record before the user closed it.
    assert service.auto_checkout(stale, TUESDAY_MIDNIGHT) is None
    assert repo.get_by_id(rec.attendance_id) == user_closed


def test_sweeper_covers_several_days_and_users():
    repo, service, sweeper = _setup()
    service.request_check_in(1, now=datetime(2025, 1, 4, 9, 0))
    service.request_check_in(2, now=datetime(2025, 1, 5, 20, 0))

    closed = sweeper.sweep(now=datetime(2025, 1, 7, 1, 0))

    assert {(r.user_id, r.check_out_time) for r in closed} == {
        (1, datetime(2025, 1, 5, 0, 0)),
        (2, datetime(2025, 1, 6, 0, 0)),
    }


def test_weekend_auto_checkout_credits_toil():
    toil = ToilService(InMemoryToilRepository())
    _, service, sweeper = _setup(toil=toil)
    service.request_check_in(1, now=datetime(2025, 1, 4, 18, 0))

    sweeper.sweep(now=datetime(2025, 1, 5, 0, 5))

    # Saturday 18:00 to Sunday 00:00, check-out day is a weekend day
    assert toil.balance(1, datetime(2025, 1, 5, 1, 0)).total_hours == Decimal("6.00")
