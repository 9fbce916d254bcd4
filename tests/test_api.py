from __future__ import annotations

import pytest

from src.hr_attendance.hr_attendance.core.enums import Role
from src.hr_attendance.hr_attendance.geofence.model import WorkLocation
from src.hr_attendance.hr_attendance.main import create_app
from src.hr_attendance.hr_attendance.users.model import User

EMPLOYEE = User(user_id=1, full_name="Eve Employee", username="eve")
ADMIN = User(user_id=99, full_name="Ada Admin", username="ada", role=Role.ADMIN)
SESSIONS = {"emp-token": EMPLOYEE, "admin-token": ADMIN}


@pytest.fixture
def app():
    app = create_app("config.testing", session_lookup=SESSIONS.get)
    container = app.extensions["hr_attendance"]
    container.locations_repo.save(WorkLocation(location_id=0, name="Head Office", latitude=51.5, longitude=-0.1))
    yield app
    container.shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


def _as(token):
    return {"X-Session-Id": token}


def test_requests_without_session_are_rejected(client):
    assert client.get("/api/attendance/today").status_code == 401
    assert client.get("/api/attendance/today", headers=_as("bogus")).status_code == 401


def test_session_is_cached_after_first_lookup(app, client):
    client.get("/api/attendance/today", headers=_as("emp-token"))

    assert "emp-token" in app.extensions["hr_attendance"].session_cache


def test_check_in_flow(client):
    resp = client.post(
        "/api/attendance/checkin",
        json={"latitude": 51.5, "longitude": -0.1, "accuracy": 10},
        headers=_as("emp-token"),
    )
    assert resp.status_code == 201
    record = resp.get_json()["record"]
    assert record["check_in_location"] == "Head Office"
    assert record["state"] == "open"
    assert record["is_location_valid"] is True

    again = client.post("/api/attendance/checkin", json={"latitude": 51.5, "longitude": -0.1}, headers=_as("emp-token"))
    assert again.status_code == 409

    today = client.get("/api/attendance/today", headers=_as("emp-token")).get_json()
    assert today["record"]["attendance_id"] == record["attendance_id"]


def test_gps_error_falls_back_to_manual(client):
    resp = client.post("/api/attendance/checkin", json={"gps_error": "permission_denied"}, headers=_as("emp-token"))

    assert resp.status_code == 201
    record = resp.get_json()["record"]
    assert record["check_in_location"] == "Manual Check-in"
    assert record["requires_approval"] is True


def test_invalid_coordinates_are_400(client):
    resp = client.post("/api/attendance/checkin", json={"latitude": 95, "longitude": 0}, headers=_as("emp-token"))

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_check_out_without_check_in_is_409(client):
    resp = client.post("/api/attendance/checkout", json={}, headers=_as("emp-token"))

    assert resp.status_code == 409


def test_history_rejects_bad_dates(client):
    assert client.get("/api/attendance/history?start=yesterday", headers=_as("emp-token")).status_code == 400
    assert (
        client.get("/api/attendance/history?start=2025-01-10&end=2025-01-01", headers=_as("emp-token")).status_code
        == 400
    )


def test_admin_routes_require_admin(client):
    assert client.get("/api/attendance/pending", headers=_as("emp-token")).status_code == 403
    assert client.get("/api/attendance/pending", headers=_as("admin-token")).status_code == 200


def test_admin_edit_and_approve(client):
    created = client.post("/api/attendance/checkin", json={}, headers=_as("emp-token")).get_json()["record"]
    attendance_id = created["attendance_id"]

    pending = client.get("/api/attendance/pending", headers=_as("admin-token")).get_json()["records"]
    assert [r["attendance_id"] for r in pending] == [attendance_id]

    edited = client.patch(
        f"/api/attendance/{attendance_id}",
        json={"check_in_time": "2025-01-07T09:00:00", "check_out_time": "2025-01-07T17:30:00"},
        headers=_as("admin-token"),
    )
    assert edited.status_code == 200
    assert edited.get_json()["record"]["working_hours"] == 8.5

    approved = client.post(f"/api/attendance/{attendance_id}/approve", headers=_as("admin-token"))
    assert approved.status_code == 200
    assert approved.get_json()["record"]["requires_approval"] is False

    assert client.patch("/api/attendance/424242", json={"notes": "x"}, headers=_as("admin-token")).status_code == 404
    assert client.patch(f"/api/attendance/{attendance_id}", json={}, headers=_as("admin-token")).status_code == 400


def test_toil_balance_and_locations(client):
    balance = client.get("/api/toil/balance", headers=_as("emp-token")).get_json()["balance"]
    assert balance["total_hours"] == 0.0

    locations = client.get("/api/work-locations", headers=_as("emp-token")).get_json()["locations"]
    assert [loc["name"] for loc in locations] == ["Head Office"]


def test_logout_clears_cached_session(app, client):
    client.get("/api/attendance/today", headers=_as("emp-token"))
    client.delete("/api/session", headers=_as("emp-token"))

    assert "emp-token" not in app.extensions["hr_attendance"].session_cache


def test_boolean_coordinates_are_400(client):
    resp = client.post("/api/attendance/checkin", json={"latitude": True, "longitude": 0}, headers=_as("emp-token"))

    assert resp.status_code == 400
    assert client.get("/api/attendance/today", headers=_as("emp-token")).get_json()["record"] is None


def test_non_text_notes_are_400(client):
    resp = client.post("/api/attendance/checkin", json={"notes": 5}, headers=_as("emp-token"))
    assert resp.status_code == 400
    assert client.get("/api/attendance/today", headers=_as("emp-token")).get_json()["record"] is None

    client.post("/api/attendance/checkin", json={}, headers=_as("emp-token"))
    resp = client.post("/api/attendance/checkout", json={"notes": 5}, headers=_as("emp-token"))
    assert resp.status_code == 400
    assert client.get("/api/attendance/today", headers=_as("emp-token")).get_json()["record"]["state"] == "open"


def test_admin_edit_rejects_offset_times_and_string_flags(client):
    created = client.post("/api/attendance/checkin", json={}, headers=_as("emp-token")).get_json()["record"]
    url = f"/api/attendance/{created['attendance_id']}"

    aware = client.patch(url, json={"check_out_time": "2025-01-01T00:00:00+02:00"}, headers=_as("admin-token"))
    assert aware.status_code == 400

    flag = client.patch(url, json={"requires_approval": "false"}, headers=_as("admin-token"))
    assert flag.status_code == 400

    record = client.get("/api/attendance/today", headers=_as("emp-token")).get_json()["record"]
    assert record["requires_approval"] is True
    assert record["check_out_time"] is None


def test_history_rejects_non_positive_limit(client):
    client.post("/api/attendance/checkin", json={}, headers=_as("emp-token"))

    assert client.get("/api/attendance/history?limit=-1", headers=_as("emp-token")).status_code == 400
    assert client.get("/api/attendance/history?limit=0", headers=_as("emp-token")).status_code == 400
    ok = client.get("/api/attendance/history?limit=1", headers=_as("emp-token")).get_json()
    assert len(ok["records"]) == 1
