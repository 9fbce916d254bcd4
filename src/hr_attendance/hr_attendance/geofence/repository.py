from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkLocation


class WorkLocationRepository(Protocol):
    def list_active(self) -> Sequence[WorkLocation]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[WorkLocation]:
        raise NotImplementedError

    def save(self, location: WorkLocation) -> WorkLocation:
        """Insert (``location_id == 0``) or replace a work location."""

        raise NotImplementedError
