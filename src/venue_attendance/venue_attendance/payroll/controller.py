from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_endpoint, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/payroll", endpoint="payroll")
    @admin_required
    @json_endpoint
    def payroll():
        try:
            start = parse_iso_date(request.args.get("start", ""))
            end = parse_iso_date(request.args.get("end", ""))
        except ValueError:
            raise ValidationError("Fechas inválidas (YYYY-MM-DD)")

        lines = container.payroll_report_service.build_payroll(start=start, end=end)
        return ok(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "lines": [line.to_dict() for line in lines],
                "total_net": round(sum(line.net_pay for line in lines), 2),
            }
        )
