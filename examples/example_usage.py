"""Example: drive the service layer directly (no Flask, in-memory store).

Controllers are a thin layer; the attendance rules live in the services.
"""

from datetime import datetime

from src.hr_attendance.hr_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.hr_attendance.hr_attendance.attendance.service import AttendanceService
from src.hr_attendance.hr_attendance.geofence.memory_work_location_repository import InMemoryWorkLocationRepository
from src.hr_attendance.hr_attendance.geofence.model import Position, WorkLocation
from src.hr_attendance.hr_attendance.toil.memory_toil_repository import InMemoryToilRepository
from src.hr_attendance.hr_attendance.toil.service import ToilService


def main():
    office = WorkLocation(location_id=1, name="Head Office", latitude=51.5074, longitude=-0.1278, radius_m=100)
    toil = ToilService(InMemoryToilRepository())
    service = AttendanceService(
        InMemoryAttendanceRepository(),
        InMemoryWorkLocationRepository([office]),
        toil=toil,
    )

    # Saturday shift at the office: every hour worked is TOIL.
    here = Position(latitude=51.5075, longitude=-0.1279, accuracy=12.0)
    service.request_check_in(7, now=datetime(2025, 1, 4, 9, 0), position=here)
    record = service.request_check_out(7, now=datetime(2025, 1, 4, 14, 30), position=here)

    print(record.check_in_location, record.working_hours, record.toil_hours_earned)
    print(toil.balance(7, datetime(2025, 1, 5)))


if __name__ == "__main__":
    main()
