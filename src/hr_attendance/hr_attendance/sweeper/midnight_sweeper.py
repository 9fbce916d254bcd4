from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..common.datetime_utils import next_midnight, now_local
from ..common.scheduling import PeriodicJob
from ..core.constants import DEFAULT_SWEEP_INTERVAL_SECONDS
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class MidnightAutoCheckoutSweeper:
    """Force-closes records left open past the midnight that ends their date.

    The check-out time is that midnight, never the time the sweep runs.
    Closing goes through the same close-if-open guard as a user check-out.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        service: AttendanceService,
        *,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._service = service
        self._clock = clock
        self._job = PeriodicJob(self.sweep, seconds=interval_seconds, name="midnight-auto-checkout")

    def sweep(self, now: datetime | None = None) -> list[AttendanceRecord]:
        now = now or self._clock()
        closed: list[AttendanceRecord] = []

        # Only dates strictly before today: today's midnight has not passed.
        candidates = self._attendance.list_open_before(now.date())
        for record in candidates:
            boundary = next_midnight(record.work_date)
            if boundary > now:
                continue
            try:
                result = self._service.auto_checkout(record, boundary)
            except ValidationError as e:
                logger.warning("Skipping auto-checkout of attendance %s: %s", record.attendance_id, e)
                continue
            if result is None:
                logger.debug("Attendance %s was closed before the sweep reached it", record.attendance_id)
                continue
            closed.append(result)

        if candidates:
            logger.info("Processed %d incomplete attendance records, closed %d", len(candidates), len(closed))
        return closed

    @property
    def running(self) -> bool:
        return self._job.running

    def start(self) -> None:
        self._job.start()

    def stop(self) -> None:
        self._job.stop()
