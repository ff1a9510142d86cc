from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role
from ..schedules.model import WorkSchedule, schedule_to_json


@dataclass(frozen=True)
class Worker:
    """Domain entity: a worker (plain data, no DB access).

    legajo is the badge number, dni the national id number; either one
    identifies the worker at login.
    """

    worker_id: int
    legajo: str
    dni: str
    name: str
    role: Role
    password_hash: str = field(repr=False, default="")
    dress_code: str = ""
    reference_image: Optional[str] = None
    schedule: tuple[WorkSchedule, ...] = ()
    assigned_locations: tuple[int, ...] = ()
    hourly_rate: float = 0.0

    @property
    def skips_biometrics(self) -> bool:
        return self.role.skips_biometrics

    def to_public_dict(self) -> dict:
        return {
            "id": self.worker_id,
            "legajo": self.legajo,
            "dni": self.dni,
            "name": self.name,
            "role": self.role.value,
            "dress_code": self.dress_code,
            "reference_image": self.reference_image,
            "schedule": schedule_to_json(self.schedule),
            "assigned_locations": list(self.assigned_locations),
            "hourly_rate": self.hourly_rate,
        }
