from __future__ import annotations

import pytest
from flask import Flask
from werkzeug.security import generate_password_hash

from src.venue_attendance.venue_attendance.attendance import controller as attendance_controller
from src.venue_attendance.venue_attendance.attendance.service import AttendanceService
from src.venue_attendance.venue_attendance.attendance.workflow.registry import SessionRegistry
from src.venue_attendance.venue_attendance.attendance.workflow.session import CheckInSession
from src.venue_attendance.venue_attendance.container import Container
from src.venue_attendance.venue_attendance.core.enums import Role
from src.venue_attendance.venue_attendance.monitor import controller as monitor_controller
from src.venue_attendance.venue_attendance.monitor.aggregator import PresenceMonitor
from src.venue_attendance.venue_attendance.users import controller as users_controller
from src.venue_attendance.venue_attendance.users.service import AuthService, WorkerService
from src.venue_attendance.venue_attendance.venues.service import VenueService

PHOTO = "data:image/jpeg;base64,/9j/4AAQ"
AT_VENUE = {"lat": -34.6037, "lng": -58.3816, "accuracy": 5}


@pytest.fixture
def client(worker_factory, workers_repo_factory, attendance_repo, venues_repo, stub_validator, image_store):
    password_hash = generate_password_hash("secreto123")
    workers = workers_repo_factory(
        [
            worker_factory(7, schedule=(), password_hash=password_hash),
            worker_factory(1, role=Role.ADMIN, schedule=(), password_hash=password_hash),
        ]
    )

    def new_session(worker):
        return CheckInSession(
            worker, venues=venues_repo, attendance=attendance_repo, validator=stub_validator, images=image_store
        )

    container = Container(
        conn=None,
        workers_repo=workers,
        venues_repo=venues_repo,
        attendance_repo=attendance_repo,
        incidents_repo=None,
        settings_repo=None,
        images=image_store,
        validator=stub_validator,
        auth_service=AuthService(workers),
        worker_service=WorkerService(workers, image_store),
        venue_service=VenueService(venues_repo),
        attendance_service=AttendanceService(attendance_repo),
        incident_service=None,
        payroll_report_service=None,
        settings_service=None,
        presence_monitor=PresenceMonitor(venues=venues_repo, workers=workers, attendance=attendance_repo),
        checkin_sessions=SessionRegistry(new_session),
    )

    app = Flask(__name__)
    app.secret_key = "test"
    app.config["TESTING"] = True
    users_controller.register(app, container)
    attendance_controller.register(app, container)
    monitor_controller.register(app, container)
    return app.test_client()


def login(client, identifier):
    return client.post("/api/login", json={"identifier": identifier, "password": "secreto123"})


def test_login_rejects_bad_password(client):
    res = client.post("/api/login", json={"identifier": "0007", "password": "otra"})
    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Credenciales incorrectas"}


def test_endpoints_require_login(client):
    assert client.get("/api/checkin/state").status_code == 401


def test_worker_cannot_reach_admin_endpoints(client):
    login(client, "0007")
    res = client.get("/api/admin/monitor")
    assert res.status_code == 403


def test_check_in_over_http(client):
    assert login(client, "0007").get_json()["success"] is True

    state = client.post("/api/checkin/request", json={"action": "CHECK_IN", **AT_VENUE}).get_json()["state"]
    assert state["step"] == "CAMERA"
    assert state["allowed"] == ["capture", "cancel"]

    state = client.post("/api/checkin/capture", json={"photo": PHOTO}).get_json()["state"]
    assert state["step"] == "RESULT"
    assert state["draft"]["location_status"] == "VALID"
    assert "finalize" in state["allowed"]

    state = client.post("/api/checkin/finalize").get_json()["state"]
    assert state["step"] == "SUCCESS"
    assert state["record"]["type"] == "CHECK_IN"

    status = client.get("/api/attendance/status").get_json()["status"]
    assert status["clocked_in"] is True
    assert status["next_action"] == "CHECK_OUT"


def test_wrong_action_is_rejected(client):
    login(client, "0007")
    res = client.post("/api/checkin/request", json={"action": "CHECK_OUT", **AT_VENUE})
    assert res.status_code == 400
    assert res.get_json()["message"] == "No tiene una entrada registrada"


def test_permission_denied_then_retry(client):
    login(client, "0007")
    state = client.post(
        "/api/checkin/request", json={"action": "CHECK_IN", "position_error": "permission_denied"}
    ).get_json()["state"]
    assert state["step"] == "PERMISSION_DENIED"

    state = client.post("/api/checkin/retry", json=AT_VENUE).get_json()["state"]
    assert state["step"] == "CAMERA"


def test_monitor_for_admin(client):
    login(client, "0001")
    body = client.get("/api/admin/monitor").get_json()
    assert body["success"] is True
    assert body["refresh_seconds"] > 0
    venue = body["snapshot"]["venues"][0]
    assert venue["venue"]["name"] == "Salón Central"
