from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..model import TimeSummary


class TimeAccountingCalculator(ABC):
    """Calculator interface (Strategy Pattern for hours/overtime/TOIL)."""

    @abstractmethod
    def summarize(self, check_in: datetime, check_out: datetime) -> TimeSummary:
        raise NotImplementedError
