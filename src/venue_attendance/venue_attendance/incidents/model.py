from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import IncidentType


@dataclass(frozen=True)
class Incident:
    """A dated monetary adjustment for a worker (negative amounts are discounts)."""

    incident_id: int
    user_id: int
    incident_date: date
    type: IncidentType
    amount: float
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.incident_id,
            "user_id": self.user_id,
            "date": self.incident_date.isoformat(),
            "type": self.type.value,
            "amount": self.amount,
            "description": self.description,
        }
