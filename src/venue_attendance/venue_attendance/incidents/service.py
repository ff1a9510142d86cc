from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_number
from ..core.enums import IncidentType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import WorkerRepository
from .repository import IncidentRepository


class IncidentService:
    """Use case: payroll adjustments per worker (admin)."""

    def __init__(self, incidents: IncidentRepository, workers: WorkerRepository):
        self._incidents = incidents
        self._workers = workers

    def list_incidents(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ):
        return self._incidents.list_filtered(user_id=user_id, start=start, end=end)

    def _clean(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            raise ValidationError("Empleado inválido")
        if not self._workers.get_by_id(user_id):
            raise NotFoundError("Empleado inexistente")

        try:
            incident_type = IncidentType(str(data.get("type") or IncidentType.DISCOUNT.value).upper())
        except ValueError:
            raise ValidationError("Tipo de incidencia inválido")

        amount = require_number(data.get("amount"), "Monto")
        if amount == 0:
            raise ValidationError("El monto no puede ser 0")

        raw_date = data.get("date")
        try:
            incident_date = raw_date if isinstance(raw_date, date) else parse_iso_date(str(raw_date))
        except ValueError:
            raise ValidationError("Fecha inválida (YYYY-MM-DD)")

        return {
            "user_id": user_id,
            "incident_date": incident_date,
            "type": incident_type,
            "amount": amount,
            "description": (data.get("description") or "").strip(),
        }

    def save_incident(self, *, current_role: Role, data: dict[str, Any], incident_id: Optional[int] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")

        fields = self._clean(data)
        if incident_id:
            if not self._incidents.update(incident_id=int(incident_id), **fields):
                raise NotFoundError("Incidencia inexistente")
            return int(incident_id)
        return self._incidents.create(**fields)

    def delete_incident(self, *, current_role: Role, incident_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")
        if not self._incidents.delete_by_id(int(incident_id)):
            raise NotFoundError("Incidencia inexistente")
