"""Single bounded GPS attempt in front of the attendance state machine.

Attendance capture never waits on the device for longer than the timeout:
a failed or slow acquisition degrades to a manual, approval-required entry.
There is exactly one attempt per request, never a retry loop.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_GPS_TIMEOUT_SECONDS, DEFAULT_GPS_WORKERS
from ..core.enums import GpsFailureReason
from ..core.exceptions import GpsUnavailable
from ..geofence.model import Position

logger = logging.getLogger(__name__)

PositionSource = Callable[[], Position]


class FallbackCoordinator:
    def __init__(
        self,
        attendance: AttendanceService,
        *,
        timeout_seconds: float = DEFAULT_GPS_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_GPS_WORKERS,
        clock: Callable[[], datetime] = now_local,
    ):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._attendance = attendance
        self._timeout = float(timeout_seconds)
        self._clock = clock
        self._executor = ThreadPoolExecutor(max_workers=int(max_workers), thread_name_prefix="gps-acquire")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def acquire(self, source: Optional[PositionSource]) -> tuple[Optional[Position], Optional[GpsFailureReason]]:
        """Run ``source`` once, bounded by the timeout.

        Returns ``(position, None)`` on success or ``(None, reason)``.
        """

        if source is None:
            return None, GpsFailureReason.NOT_PROVIDED

        future = self._executor.submit(source)
        try:
            position = future.result(timeout=self._timeout)
        except FutureTimeout:
            # The worker thread may still finish later; its result is ignored.
            future.cancel()
            logger.warning("GPS acquisition timed out after %ss, falling back to manual entry", self._timeout)
            return None, GpsFailureReason.TIMEOUT
        except GpsUnavailable as e:
            logger.warning("GPS unavailable (%s), falling back to manual entry", e.reason.value)
            return None, e.reason
        except Exception:
            logger.exception("GPS source failed unexpectedly, falling back to manual entry")
            return None, GpsFailureReason.POSITION_UNAVAILABLE

        if position is None:
            return None, GpsFailureReason.POSITION_UNAVAILABLE
        return position, None

    def check_in(
        self,
        user_id: int,
        source: Optional[PositionSource] = None,
        *,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        position, failure = self.acquire(source)
        return self._attendance.request_check_in(
            user_id, now=now, position=position, notes=notes, gps_failure=failure
        )

    def check_out(
        self,
        user_id: int,
        source: Optional[PositionSource] = None,
        *,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        position, failure = self.acquire(source)
        return self._attendance.request_check_out(
            user_id, now=now, position=position, notes=notes, gps_failure=failure
        )

    def shutdown(self, *, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)
