from __future__ import annotations

from flask import Flask, abort, request, send_from_directory

from ..common.web import admin_required, current_role, fail, json_endpoint, ok
from ..container import Container


def register(app: Flask, container: Container, *, upload_dir: str, upload_url_prefix: str) -> None:
    @app.route("/api/settings/logo", endpoint="company_logo")
    @json_endpoint
    def company_logo():
        return ok({"logo": container.settings_service.get_company_logo()})

    @app.route("/api/admin/settings/logo", methods=["POST"], endpoint="save_company_logo")
    @admin_required
    @json_endpoint
    def save_company_logo():
        data = request.get_json(silent=True) or {}
        url = container.settings_service.save_company_logo(current_role=current_role(), data_url=data.get("image") or "")
        if url is None:
            return fail("No se pudo guardar el logo", 502)
        return ok({"logo": url}, message="Logo actualizado")

    @app.route(f"{upload_url_prefix.rstrip('/')}/<path:filename>", endpoint="uploaded_file")
    def uploaded_file(filename: str):
        if ".." in filename.split("/"):
            abort(404)
        return send_from_directory(upload_dir, filename)
