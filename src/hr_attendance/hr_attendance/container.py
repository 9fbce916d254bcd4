from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from .accounting.calculator.standard_calculator import StandardTimeCalculator
from .accounting.holidays import StaticHolidayCalendar
from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import parse_hhmm, parse_iso_date
from .core import constants
from .core.enums import WeekendToilPolicy
from .fallback.coordinator import FallbackCoordinator
from .geocoding.http_geocoder import HttpReverseGeocoder
from .geofence.memory_work_location_repository import InMemoryWorkLocationRepository
from .geofence.repository import WorkLocationRepository
from .sessions.cache import SessionCache
from .sweeper.midnight_sweeper import MidnightAutoCheckoutSweeper
from .toil.memory_toil_repository import InMemoryToilRepository
from .toil.repository import ToilRepository
from .toil.service import ToilService
from .users.model import User

SessionLookup = Callable[[str], Optional[User]]


def _no_session(session_id: str) -> Optional[User]:
    return None


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    locations_repo: WorkLocationRepository
    toil_repo: ToilRepository

    attendance_service: AttendanceService
    toil_service: ToilService
    coordinator: FallbackCoordinator
    sweeper: MidnightAutoCheckoutSweeper
    session_cache: SessionCache
    session_lookup: SessionLookup

    def start_background(self) -> None:
        self.sweeper.start()
        self.session_cache.start_cleanup()

    def shutdown(self) -> None:
        self.sweeper.stop()
        self.session_cache.stop_cleanup()
        self.coordinator.shutdown()


def _holidays(values: Iterable[Any]) -> list[date]:
    return [parse_iso_date(v) if isinstance(v, str) else v for v in values]


def _build_repositories(settings: Any):
    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()
    if backend == "memory":
        return InMemoryAttendanceRepository(), InMemoryWorkLocationRepository(), InMemoryToilRepository()

    if backend == "mysql":
        from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
        from .database.connection import DBConfig, DatabaseConnection
        from .geofence.mysql_work_location_repository import MySQLWorkLocationRepository
        from .toil.mysql_toil_repository import MySQLToilRepository

        conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        return MySQLAttendanceRepository(conn), MySQLWorkLocationRepository(conn), MySQLToilRepository(conn)

    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(
    settings: Any,
    *,
    session_lookup: SessionLookup | None = None,
    attendance_repo: AttendanceRepository | None = None,
    locations_repo: WorkLocationRepository | None = None,
    toil_repo: ToilRepository | None = None,
) -> Container:
    if attendance_repo is None or locations_repo is None or toil_repo is None:
        default_attendance, default_locations, default_toil = _build_repositories(settings)
        attendance_repo = attendance_repo or default_attendance
        locations_repo = locations_repo or default_locations
        toil_repo = toil_repo or default_toil

    calculator = StandardTimeCalculator(
        standard_hours_per_day=Decimal(str(getattr(settings, "STANDARD_HOURS_PER_DAY", constants.STANDARD_HOURS_PER_DAY))),
        weekend_policy=WeekendToilPolicy(getattr(settings, "WEEKEND_TOIL_POLICY", WeekendToilPolicy.FULL_HOURS)),
        holidays=StaticHolidayCalendar(_holidays(getattr(settings, "HOLIDAYS", ()))),
    )

    geocoder = None
    if getattr(settings, "GEOCODER_ENABLED", False):
        geocoder = HttpReverseGeocoder(
            timeout_seconds=float(getattr(settings, "GEOCODER_TIMEOUT_SECONDS", constants.DEFAULT_GEOCODER_TIMEOUT_SECONDS)),
            user_agent=str(getattr(settings, "GEOCODER_USER_AGENT", "hr-attendance/1.0")),
        )

    toil_service = ToilService(
        toil_repo,
        expiry_days=int(getattr(settings, "TOIL_EXPIRY_DAYS", constants.TOIL_EXPIRY_DAYS)),
        expiring_window_days=int(getattr(settings, "TOIL_EXPIRING_WINDOW_DAYS", constants.TOIL_EXPIRING_WINDOW_DAYS)),
    )

    attendance_service = AttendanceService(
        attendance_repo,
        locations_repo,
        calculator=calculator,
        geocoder=geocoder,
        toil=toil_service,
        strategy_factory=AttendanceStrategyFactory(
            workday_start=parse_hhmm(getattr(settings, "WORKDAY_START", "")),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", constants.DEFAULT_LATE_GRACE_MINUTES)),
        ),
    )

    coordinator = FallbackCoordinator(
        attendance_service,
        timeout_seconds=float(getattr(settings, "GPS_TIMEOUT_SECONDS", constants.DEFAULT_GPS_TIMEOUT_SECONDS)),
        max_workers=int(getattr(settings, "GPS_WORKERS", constants.DEFAULT_GPS_WORKERS)),
    )

    sweeper = MidnightAutoCheckoutSweeper(
        attendance_repo,
        attendance_service,
        interval_seconds=int(getattr(settings, "SWEEP_INTERVAL_SECONDS", constants.DEFAULT_SWEEP_INTERVAL_SECONDS)),
    )

    session_cache = SessionCache(
        ttl=timedelta(minutes=int(getattr(settings, "SESSION_TTL_MINUTES", 15))),
        cleanup_interval=timedelta(minutes=int(getattr(settings, "SESSION_CLEANUP_MINUTES", 5))),
    )

    return Container(
        attendance_repo=attendance_repo,
        locations_repo=locations_repo,
        toil_repo=toil_repo,
        attendance_service=attendance_service,
        toil_service=toil_service,
        coordinator=coordinator,
        sweeper=sweeper,
        session_cache=session_cache,
        session_lookup=session_lookup or _no_session,
    )
