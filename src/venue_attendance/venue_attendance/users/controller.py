from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, request, session

from ..common.web import admin_required, current_role, current_user_id, json_endpoint, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS

_logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_endpoint
    def login():
        data = request.get_json(silent=True) or {}
        worker = container.auth_service.authenticate(data.get("identifier", ""), data.get("password", ""))
        s_user = container.auth_service.to_session_user(worker)

        session.clear()
        session.permanent = bool(data.get("remember"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.worker_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["legajo"] = s_user.legajo

        # every login starts from a clean check-in workflow
        container.checkin_sessions.open(worker)
        _logger.info("worker=%s signed in", s_user.worker_id)
        return ok({"user": worker.to_public_dict()}, message=f"Bienvenido, {s_user.name}")

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        if "user_id" in session:
            container.checkin_sessions.close(current_user_id())
        session.clear()
        return ok(message="Sesión cerrada")

    @app.route("/api/me", endpoint="me")
    @login_required
    @json_endpoint
    def me():
        worker = container.worker_service.get_worker(current_user_id())
        return ok({"user": worker.to_public_dict()})

    @app.route("/api/admin/workers", endpoint="admin_workers")
    @admin_required
    @json_endpoint
    def admin_workers():
        workers = container.worker_service.list_workers()
        return ok({"workers": [w.to_public_dict() for w in workers]})

    @app.route("/api/admin/workers", methods=["POST"], endpoint="create_worker")
    @admin_required
    @json_endpoint
    def create_worker():
        worker_id = container.worker_service.save_worker(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
        )
        return ok({"id": worker_id}, message="Usuario creado", status=201)

    @app.route("/api/admin/workers/<int:worker_id>", methods=["PUT"], endpoint="update_worker")
    @admin_required
    @json_endpoint
    def update_worker(worker_id: int):
        container.worker_service.save_worker(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
            worker_id=worker_id,
        )
        # drop any in-flight workflow built from the old profile
        container.checkin_sessions.close(worker_id)
        return ok({"id": worker_id}, message="Usuario actualizado")

    @app.route("/api/admin/workers/<int:worker_id>", methods=["DELETE"], endpoint="delete_worker")
    @admin_required
    @json_endpoint
    def delete_worker(worker_id: int):
        container.worker_service.delete_worker(
            current_role=current_role(),
            current_worker_id=current_user_id(),
            worker_id=worker_id,
        )
        container.checkin_sessions.close(worker_id)
        return ok(message="Usuario eliminado")
