from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_hours
from .model import ToilEntry
from .repository import ToilRepository

_SELECT = """
    SELECT entry_id, user_id, attendance_id, hours_earned, hours_used, hours_remaining,
           earned_date, expiry_date, is_expired, note
    FROM toil_entries
"""


def _to_entry(r: dict) -> ToilEntry:
    return ToilEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        attendance_id=int(r["attendance_id"]),
        hours_earned=to_hours(r["hours_earned"]),
        hours_used=to_hours(r["hours_used"]),
        hours_remaining=to_hours(r["hours_remaining"]),
        earned_date=r["earned_date"],
        expiry_date=r["expiry_date"],
        is_expired=bool(r["is_expired"]),
        note=r.get("note"),
    )


class MySQLToilRepository(ToilRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_attendance(self, attendance_id: int) -> Optional[ToilEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def add(self, entry: ToilEntry) -> ToilEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO toil_entries(user_id, attendance_id, hours_earned, hours_used, hours_remaining,
                                         earned_date, expiry_date, is_expired, note)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.user_id),
                    int(entry.attendance_id),
                    entry.hours_earned,
                    entry.hours_used,
                    entry.hours_remaining,
                    entry.earned_date,
                    entry.expiry_date,
                    int(entry.is_expired),
                    entry.note,
                ),
            )
            return replace(entry, entry_id=int(cur.lastrowid))

    def update(self, entry: ToilEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE toil_entries
                SET hours_earned=%s, hours_used=%s, hours_remaining=%s, is_expired=%s, note=%s
                WHERE entry_id=%s
                """,
                (
                    entry.hours_earned,
                    entry.hours_used,
                    entry.hours_remaining,
                    int(entry.is_expired),
                    entry.note,
                    int(entry.entry_id),
                ),
            )
            return cur.rowcount > 0

    def list_active_for_user(self, user_id: int) -> Sequence[ToilEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_id=%s AND is_expired=0 AND hours_remaining > 0 ORDER BY expiry_date, entry_id",
                (int(user_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_lapsed(self, now: datetime) -> Sequence[ToilEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE is_expired=0 AND hours_remaining > 0 AND expiry_date <= %s",
                (now,),
            )
            return [_to_entry(r) for r in fetchall(cur)]
