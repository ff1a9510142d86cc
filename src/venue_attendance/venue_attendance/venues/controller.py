from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_role, json_endpoint, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/venues", endpoint="venues")
    @login_required
    @json_endpoint
    def venues():
        return ok({"venues": [v.to_dict() for v in container.venue_service.list_venues()]})

    @app.route("/api/admin/venues", methods=["POST"], endpoint="create_venue")
    @admin_required
    @json_endpoint
    def create_venue():
        venue_id = container.venue_service.save_venue(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
        )
        return ok({"id": venue_id}, message="Salón creado", status=201)

    @app.route("/api/admin/venues/<int:venue_id>", methods=["PUT"], endpoint="update_venue")
    @admin_required
    @json_endpoint
    def update_venue(venue_id: int):
        container.venue_service.save_venue(
            current_role=current_role(),
            data=request.get_json(silent=True) or {},
            venue_id=venue_id,
        )
        return ok({"id": venue_id}, message="Salón actualizado")

    @app.route("/api/admin/venues/<int:venue_id>", methods=["DELETE"], endpoint="delete_venue")
    @admin_required
    @json_endpoint
    def delete_venue(venue_id: int):
        container.venue_service.delete_venue(current_role=current_role(), venue_id=venue_id)
        return ok(message="Salón eliminado")
