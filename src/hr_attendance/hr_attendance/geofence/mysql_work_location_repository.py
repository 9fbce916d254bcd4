from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WorkLocation
from .repository import WorkLocationRepository

_SELECT = """
    SELECT location_id, name, address, latitude, longitude, radius_m, is_active, is_remote_allowed
    FROM work_locations
"""


def _to_location(r: dict) -> WorkLocation:
    return WorkLocation(
        location_id=int(r["location_id"]),
        name=r["name"],
        address=r.get("address"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_m=float(r["radius_m"]),
        is_active=bool(r["is_active"]),
        is_remote_allowed=bool(r["is_remote_allowed"]),
    )


class MySQLWorkLocationRepository(WorkLocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[WorkLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE is_active=1 ORDER BY location_id")
            return [_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[WorkLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE location_id=%s", (int(location_id),))
            r = fetchone(cur)
            return _to_location(r) if r else None

    def save(self, location: WorkLocation) -> WorkLocation:
        params = (
            location.name,
            location.address,
            float(location.latitude),
            float(location.longitude),
            float(location.radius_m),
            int(location.is_active),
            int(location.is_remote_allowed),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if location.location_id:
                cur.execute(
                    """
                    UPDATE work_locations
                    SET name=%s, address=%s, latitude=%s, longitude=%s, radius_m=%s, is_active=%s, is_remote_allowed=%s
                    WHERE location_id=%s
                    """,
                    params + (int(location.location_id),),
                )
                return location
            cur.execute(
                """
                INSERT INTO work_locations(name, address, latitude, longitude, radius_m, is_active, is_remote_allowed)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                params,
            )
            return replace(location, location_id=int(cur.lastrowid))
