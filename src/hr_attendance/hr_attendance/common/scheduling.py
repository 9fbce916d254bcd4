from __future__ import annotations

import logging
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


class PeriodicJob:
    """A single interval job on its own background scheduler.

    ``start()`` and ``stop()`` are the explicit lifecycle handle; nothing
    runs until ``start()`` is called.
    """

    def __init__(self, func: Callable[[], object], *, seconds: float, name: str):
        self._func = func
        self._seconds = float(seconds)
        self._name = name
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def _run(self) -> None:
        try:
            self._func()
        except Exception:
            # Keep the schedule alive; the next tick retries.
            logger.exception("Periodic job %s failed", self._name)

    def start(self) -> None:
        if self.running:
            logger.info("Periodic job %s already running", self._name)
            return
        scheduler = BackgroundScheduler(job_defaults={"coalesce": True, "max_instances": 1})
        scheduler.add_job(self._run, "interval", seconds=self._seconds, id=self._name, name=self._name)
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Periodic job %s started (every %ss)", self._name, self._seconds)

    def stop(self, *, wait: bool = False) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Periodic job %s stopped", self._name)
