from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float, to_hours
from .model import AttendanceRecord
from .repository import AttendanceRepository

_MUTABLE_COLUMNS = (
    "check_in_time",
    "check_out_time",
    "status",
    "check_in_latitude",
    "check_in_longitude",
    "check_in_accuracy",
    "check_in_address",
    "check_in_location",
    "distance_m",
    "check_out_latitude",
    "check_out_longitude",
    "check_out_accuracy",
    "check_out_address",
    "check_out_location",
    "working_hours",
    "overtime_hours",
    "toil_hours_earned",
    "is_weekend_work",
    "is_holiday_work",
    "is_gps_verified",
    "is_location_valid",
    "requires_approval",
    "is_auto_checkout",
    "notes",
    "admin_notes",
    "admin_edited_by",
    "admin_edited_at",
    "approved_by",
    "approved_at",
    "created_at",
    "updated_at",
)

_SELECT = "SELECT attendance_id, user_id, work_date, " + ", ".join(_MUTABLE_COLUMNS) + " FROM attendance_records"
_SET = ", ".join(f"{col}=%s" for col in _MUTABLE_COLUMNS)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        check_in_latitude=to_float(r.get("check_in_latitude")),
        check_in_longitude=to_float(r.get("check_in_longitude")),
        check_in_accuracy=to_float(r.get("check_in_accuracy")),
        check_in_address=r.get("check_in_address"),
        check_in_location=r.get("check_in_location"),
        distance_m=to_float(r.get("distance_m")),
        check_out_latitude=to_float(r.get("check_out_latitude")),
        check_out_longitude=to_float(r.get("check_out_longitude")),
        check_out_accuracy=to_float(r.get("check_out_accuracy")),
        check_out_address=r.get("check_out_address"),
        check_out_location=r.get("check_out_location"),
        working_hours=to_hours(r.get("working_hours")),
        overtime_hours=to_hours(r.get("overtime_hours")),
        toil_hours_earned=to_hours(r.get("toil_hours_earned")),
        is_weekend_work=bool(r.get("is_weekend_work")),
        is_holiday_work=bool(r.get("is_holiday_work")),
        is_gps_verified=bool(r.get("is_gps_verified")),
        is_location_valid=bool(r.get("is_location_valid")),
        requires_approval=bool(r.get("requires_approval")),
        is_auto_checkout=bool(r.get("is_auto_checkout")),
        notes=r.get("notes"),
        admin_notes=r.get("admin_notes"),
        admin_edited_by=r.get("admin_edited_by"),
        admin_edited_at=r.get("admin_edited_at"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _values(record: AttendanceRecord) -> tuple[Any, ...]:
    values = []
    for col in _MUTABLE_COLUMNS:
        value = getattr(record, col)
        if isinstance(value, AttendanceStatus):
            value = value.value
        elif isinstance(value, bool):
            value = int(value)
        values.append(value)
    return tuple(values)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _query(self, where: str, params: tuple, *, suffix: str = "") -> list[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} {suffix}", params)
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s AND work_date=%s", (int(user_id), work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        suffix = "ORDER BY work_date DESC"
        if limit:
            suffix += " LIMIT %s"
            params.append(int(limit))

        return self._query(" AND ".join(clauses), tuple(params), suffix=suffix)

    def list_open_before(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._query(
            "check_out_time IS NULL AND work_date < %s",
            (work_date,),
            suffix="ORDER BY work_date ASC, attendance_id ASC",
        )

    def list_requiring_approval(self) -> Sequence[AttendanceRecord]:
        return self._query("requires_approval=1", (), suffix="ORDER BY work_date ASC, attendance_id ASC")

    def list_closed(self) -> Sequence[AttendanceRecord]:
        return self._query("check_out_time IS NOT NULL", ())

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        columns = ("user_id", "work_date") + _MUTABLE_COLUMNS
        placeholders = ", ".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"INSERT INTO attendance_records({', '.join(columns)}) VALUES({placeholders})",
                    (int(record.user_id), record.work_date) + _values(record),
                )
            except mysql.connector.IntegrityError:
                # uq_attendance_user_date: someone else created today's record.
                return None
            return replace(record, attendance_id=int(cur.lastrowid))

    def close_if_open(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {_SET} WHERE attendance_id=%s AND check_out_time IS NULL",
                _values(record) + (int(record.attendance_id),),
            )
            return cur.rowcount > 0

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {_SET} WHERE attendance_id=%s",
                _values(record) + (int(record.attendance_id),),
            )
            return cur.rowcount > 0
