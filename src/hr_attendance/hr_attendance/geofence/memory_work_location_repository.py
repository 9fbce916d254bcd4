from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Iterable, Optional, Sequence

from .model import WorkLocation
from .repository import WorkLocationRepository


class InMemoryWorkLocationRepository(WorkLocationRepository):
    def __init__(self, locations: Iterable[WorkLocation] = ()):
        self._lock = Lock()
        self._by_id: dict[int, WorkLocation] = {}
        self._next_id = 1
        for loc in locations:
            self.save(loc)

    def list_active(self) -> Sequence[WorkLocation]:
        with self._lock:
            return [loc for loc in self._by_id.values() if loc.is_active]

    def get_by_id(self, location_id: int) -> Optional[WorkLocation]:
        with self._lock:
            return self._by_id.get(int(location_id))

    def save(self, location: WorkLocation) -> WorkLocation:
        with self._lock:
            if not location.location_id:
                location = replace(location, location_id=self._next_id)
            self._next_id = max(self._next_id, location.location_id + 1)
            self._by_id[location.location_id] = location
            return location
