from __future__ import annotations

from datetime import date, datetime

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, current_role, current_user_id, json_endpoint, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import LogType
from ..core.exceptions import ValidationError
from .workflow.positioning import ReportedPositionSource
from .workflow.presenter import state_to_dict
from .workflow.session import CheckInSession
from .workflow.states import Success


def register(app: Flask, container: Container) -> None:
    def _session() -> CheckInSession:
        session = container.checkin_sessions.get(current_user_id())
        if session is None:
            worker = container.worker_service.get_worker(current_user_id())
            session = container.checkin_sessions.get_or_open(worker)
        return session

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _position() -> ReportedPositionSource:
        return ReportedPositionSource.from_payload(_payload())

    def _state(session: CheckInSession):
        return ok({"state": state_to_dict(session.state)})

    def _parse_date(value: str | None, field_name: str) -> date:
        try:
            return parse_iso_date(value or "")
        except ValueError:
            raise ValidationError(f"{field_name} inválida (YYYY-MM-DD)")

    @app.route("/api/attendance/status", endpoint="attendance_status")
    @login_required
    @json_endpoint
    def attendance_status():
        session = _session()
        status = container.attendance_service.dashboard_status(session.worker, now=now_local())
        return ok({"status": status.to_dict(), "state": state_to_dict(session.state)})

    @app.route("/api/attendance/history", endpoint="my_history")
    @login_required
    @json_endpoint
    def my_history():
        today = now_local().date()
        start = _parse_date(request.args.get("start"), "Fecha de inicio") if request.args.get("start") else today
        end = _parse_date(request.args.get("end"), "Fecha de fin") if request.args.get("end") else today
        records = container.attendance_service.records_between(start=start, end=end, user_id=current_user_id())
        return ok({"records": [r.to_dict() for r in records]})

    # ---- check-in workflow ----

    @app.route("/api/checkin/state", endpoint="checkin_state")
    @login_required
    @json_endpoint
    def checkin_state():
        return _state(_session())

    @app.route("/api/checkin/request", methods=["POST"], endpoint="checkin_request")
    @login_required
    @json_endpoint
    def checkin_request():
        try:
            action = LogType(str(_payload().get("action", "")).upper())
        except ValueError:
            raise ValidationError("Acción inválida")

        session = _session()
        if isinstance(session.state, Success):
            session.reset()
        session.request_action(action, _position())
        return _state(session)

    @app.route("/api/checkin/proceed", methods=["POST"], endpoint="checkin_proceed")
    @login_required
    @json_endpoint
    def checkin_proceed():
        session = _session()
        session.proceed_anyway(_position())
        return _state(session)

    @app.route("/api/checkin/retry", methods=["POST"], endpoint="checkin_retry")
    @login_required
    @json_endpoint
    def checkin_retry():
        session = _session()
        session.retry_location(_position())
        return _state(session)

    @app.route("/api/checkin/cancel", methods=["POST"], endpoint="checkin_cancel")
    @login_required
    @json_endpoint
    def checkin_cancel():
        session = _session()
        session.cancel()
        return _state(session)

    @app.route("/api/checkin/capture", methods=["POST"], endpoint="checkin_capture")
    @login_required
    @json_endpoint
    def checkin_capture():
        session = _session()
        session.capture_photo(_payload().get("photo") or "")
        return _state(session)

    @app.route("/api/checkin/retry-photo", methods=["POST"], endpoint="checkin_retry_photo")
    @login_required
    @json_endpoint
    def checkin_retry_photo():
        session = _session()
        session.retry_photo()
        return _state(session)

    @app.route("/api/checkin/finalize", methods=["POST"], endpoint="checkin_finalize")
    @login_required
    @json_endpoint
    def checkin_finalize():
        session = _session()
        session.finalize()
        return _state(session)

    @app.route("/api/checkin/save-with-incident", methods=["POST"], endpoint="checkin_save_with_incident")
    @login_required
    @json_endpoint
    def checkin_save_with_incident():
        session = _session()
        session.save_with_incident()
        return _state(session)

    # ---- admin ----

    @app.route("/api/admin/attendance", endpoint="admin_attendance")
    @admin_required
    @json_endpoint
    def admin_attendance():
        try:
            limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
        except ValueError:
            raise ValidationError("Límite inválido")
        records = container.attendance_service.recent_records(limit=max(limit, 1))
        return ok({"records": [r.to_dict() for r in records]})

    @app.route("/api/admin/attendance/range", endpoint="admin_attendance_range")
    @admin_required
    @json_endpoint
    def admin_attendance_range():
        start = _parse_date(request.args.get("start"), "Fecha de inicio")
        end = _parse_date(request.args.get("end"), "Fecha de fin")
        user_id = request.args.get("user_id", type=int)
        records = container.attendance_service.records_between(start=start, end=end, user_id=user_id)
        return ok({"records": [r.to_dict() for r in records]})

    @app.route("/api/admin/attendance/<int:record_id>", methods=["PUT"], endpoint="edit_attendance")
    @admin_required
    @json_endpoint
    def edit_attendance(record_id: int):
        data = _payload()
        timestamp = None
        if data.get("timestamp"):
            try:
                timestamp = datetime.fromisoformat(str(data["timestamp"]))
            except ValueError:
                raise ValidationError("Fecha y hora inválidas")

        record = container.attendance_service.edit_record(
            current_role=current_role(),
            record_id=record_id,
            timestamp=timestamp,
            ai_feedback=data.get("ai_feedback"),
            scheduled_start_override=data.get("scheduled_start_override"),
            scheduled_end_override=data.get("scheduled_end_override"),
        )
        return ok({"record": record.to_dict()}, message="Fichada actualizada")

    @app.route("/api/admin/attendance/<int:record_id>", methods=["DELETE"], endpoint="delete_attendance")
    @admin_required
    @json_endpoint
    def delete_attendance(record_id: int):
        container.attendance_service.delete_record(current_role=current_role(), record_id=record_id)
        return ok(message="Fichada eliminada")
