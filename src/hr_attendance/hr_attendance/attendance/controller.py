from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import GpsFailureReason
from ..core.exceptions import (
    AuthorizationError,
    GpsUnavailable,
    RecordNotFound,
    StateConflict,
    StoreFailure,
    ValidationError,
)
from ..container import Container
from ..fallback.coordinator import PositionSource
from ..geofence.model import Position, WorkLocation
from ..toil.model import ToilBalance
from ..users.model import User
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"

_TIME_FIELDS = ("check_in_time", "check_out_time")


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value


def record_to_dict(record: AttendanceRecord) -> dict:
    data = {name: _json_value(getattr(record, name)) for name in record.__dataclass_fields__}
    data["state"] = record.state.value
    return data


def balance_to_dict(balance: ToilBalance) -> dict:
    return {
        "total_hours": float(balance.total_hours),
        "expiring_hours": float(balance.expiring_hours),
        "expiring_date": _json_value(balance.expiring_date),
    }


def location_to_dict(location: WorkLocation) -> dict:
    return {name: getattr(location, name) for name in location.__dataclass_fields__}


def _position_source(payload: dict) -> Optional[PositionSource]:
    """Turn a request body into the position source the coordinator runs.

    Clients either send coordinates or report why the device could not
    produce a fix (``gps_error``).
    """

    gps_error = payload.get("gps_error")
    if gps_error:
        try:
            reason = GpsFailureReason(str(gps_error))
        except ValueError:
            reason = GpsFailureReason.POSITION_UNAVAILABLE

        def failing() -> Position:
            raise GpsUnavailable(reason)

        return failing

    if payload.get("latitude") is None and payload.get("longitude") is None:
        return None

    position = Position(
        latitude=payload.get("latitude"),
        longitude=payload.get("longitude"),
        accuracy=payload.get("accuracy"),
    )
    return lambda: position


def _parse_edit_fields(payload: dict) -> dict:
    fields = dict(payload)
    for name in _TIME_FIELDS:
        if name in fields and fields[name] is not None:
            try:
                value = datetime.fromisoformat(str(fields[name]))
            except ValueError:
                raise ValidationError(f"{name} must be an ISO-8601 datetime") from None
            if value.tzinfo is not None:
                raise ValidationError(f"{name} must be local time without a UTC offset")
            fields[name] = value
    return fields


def _optional_date(name: str) -> Optional[date]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD") from None


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _current_user() -> Optional[User]:
        session_id = (request.headers.get(SESSION_HEADER) or "").strip()
        if not session_id:
            return None
        user = container.session_cache.get(session_id)
        if user is None:
            user = container.session_lookup(session_id)
            if user is not None:
                container.session_cache.set(session_id, user)
        if user is None or not user.is_active:
            return None
        return user

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _current_user()
            if user is None:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _current_user()
            if user is None:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            if not user.is_admin:
                return jsonify({"success": False, "message": "Administrator access required"}), 403
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e):
        return jsonify({"success": False, "message": str(e)}), 403

    @app.errorhandler(RecordNotFound)
    def _not_found(e):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(StateConflict)
    def _conflict(e):
        return jsonify({"success": False, "message": str(e)}), 409

    @app.errorhandler(StoreFailure)
    def _store_failure(e):
        logger.error("Attendance store failure: %s", e)
        return jsonify({"success": False, "message": "Attendance store unavailable"}), 503

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @login_required
    def checkin():
        payload = request.get_json(silent=True) or {}
        record = container.coordinator.check_in(
            g.current_user.user_id, _position_source(payload), notes=payload.get("notes")
        )
        return jsonify({"success": True, "message": "Checked in", "record": record_to_dict(record)}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @login_required
    def checkout():
        payload = request.get_json(silent=True) or {}
        record = container.coordinator.check_out(
            g.current_user.user_id, _position_source(payload), notes=payload.get("notes")
        )
        return jsonify({"success": True, "message": "Checked out", "record": record_to_dict(record)}), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today")
    @login_required
    def today():
        record = service.get_today(g.current_user.user_id)
        return jsonify({"success": True, "record": record_to_dict(record) if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_history")
    @login_required
    def history():
        limit = request.args.get("limit", type=int)
        records = service.list_history(
            g.current_user.user_id,
            start_date=_optional_date("start"),
            end_date=_optional_date("end"),
            limit=limit,
        )
        return jsonify({"success": True, "records": [record_to_dict(r) for r in records]})

    @app.route("/api/attendance/pending", methods=["GET"], endpoint="api_pending")
    @admin_required
    def pending():
        records = service.list_pending_approval()
        return jsonify({"success": True, "records": [record_to_dict(r) for r in records]})

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="api_admin_update")
    @admin_required
    def admin_update(attendance_id: int):
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not payload:
            raise ValidationError("Request body must be a non-empty JSON object")
        record = service.admin_update(attendance_id, _parse_edit_fields(payload), editor=g.current_user)
        return jsonify({"success": True, "message": "Attendance updated", "record": record_to_dict(record)})

    @app.route("/api/attendance/<int:attendance_id>/approve", methods=["POST"], endpoint="api_approve")
    @admin_required
    def approve(attendance_id: int):
        record = service.approve(attendance_id, approver=g.current_user)
        return jsonify({"success": True, "message": "Attendance approved", "record": record_to_dict(record)})

    @app.route("/api/toil/balance", methods=["GET"], endpoint="api_toil_balance")
    @login_required
    def toil_balance():
        balance = container.toil_service.balance(g.current_user.user_id, now_local())
        return jsonify({"success": True, "balance": balance_to_dict(balance)})

    @app.route("/api/work-locations", methods=["GET"], endpoint="api_work_locations")
    @login_required
    def work_locations():
        locations = container.locations_repo.list_active()
        return jsonify({"success": True, "locations": [location_to_dict(loc) for loc in locations]})

    @app.route("/api/session", methods=["DELETE"], endpoint="api_logout")
    def logout():
        session_id = (request.headers.get(SESSION_HEADER) or "").strip()
        if session_id:
            container.session_cache.remove(session_id)
        return jsonify({"success": True, "message": "Session cleared"})
