from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, json_endpoint, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/monitor", endpoint="presence_monitor")
    @admin_required
    @json_endpoint
    def presence_monitor():
        """Fresh snapshot; clients poll this every `refresh_seconds`."""
        monitor = container.presence_monitor
        snapshot = monitor.refresh()
        return ok({"snapshot": snapshot.to_dict(), "refresh_seconds": monitor.refresh_seconds})
