from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import IncidentType
from .model import Incident


class IncidentRepository(Protocol):
    def list_filtered(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Incident]:
        """Newest first; start/end are inclusive when given."""

        raise NotImplementedError

    def create(self, *, user_id: int, incident_date: date, type: IncidentType, amount: float, description: str) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        incident_id: int,
        user_id: int,
        incident_date: date,
        type: IncidentType,
        amount: float,
        description: str,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, incident_id: int) -> bool:
        raise NotImplementedError
