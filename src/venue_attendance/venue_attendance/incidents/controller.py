from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_role, json_endpoint, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _optional_date(name: str):
        value = request.args.get(name)
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Fecha inválida (YYYY-MM-DD)")

    @app.route("/api/admin/incidents", endpoint="incidents")
    @admin_required
    @json_endpoint
    def incidents():
        items = container.incident_service.list_incidents(
            user_id=request.args.get("user_id", type=int),
            start=_optional_date("start"),
            end=_optional_date("end"),
        )
        return ok({"incidents": [i.to_dict() for i in items]})

    @app.route("/api/admin/incidents", methods=["POST"], endpoint="create_incident")
    @admin_required
    @json_endpoint
    def create_incident():
        incident_id = container.incident_service.save_incident(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
        )
        return ok({"id": incident_id}, message="Incidencia registrada", status=201)

    @app.route("/api/admin/incidents/<int:incident_id>", methods=["PUT"], endpoint="update_incident")
    @admin_required
    @json_endpoint
    def update_incident(incident_id: int):
        container.incident_service.save_incident(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
            incident_id=incident_id,
        )
        return ok({"id": incident_id}, message="Incidencia actualizada")

    @app.route("/api/admin/incidents/<int:incident_id>", methods=["DELETE"], endpoint="delete_incident")
    @admin_required
    @json_endpoint
    def delete_incident(incident_id: int):
        container.incident_service.delete_incident(current_role=current_role(), incident_id=incident_id)
        return ok(message="Incidencia eliminada")
