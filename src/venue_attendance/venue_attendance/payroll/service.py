from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import day_bounds
from ..core.exceptions import ValidationError
from ..attendance.repository import AttendanceRepository
from ..incidents.repository import IncidentRepository
from ..users.repository import WorkerRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class PayrollLine:
    user_id: int
    legajo: str
    name: str
    hours: float
    hourly_rate: float
    base_pay: float
    adjustments: float

    @property
    def net_pay(self) -> float:
        return self.base_pay + self.adjustments

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "legajo": self.legajo,
            "name": self.name,
            "hours": round(self.hours, 2),
            "hourly_rate": self.hourly_rate,
            "base_pay": round(self.base_pay, 2),
            "adjustments": round(self.adjustments, 2),
            "net_pay": round(self.net_pay, 2),
        }


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        incidents: IncidentRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._workers = workers
        self._incidents = incidents
        self._calculator = calculator or StandardPayrollCalculator()

    def build_payroll(self, *, start: date, end: date) -> list[PayrollLine]:
        if end < start:
            raise ValidationError("La fecha de fin es anterior a la de inicio")

        records = self._attendance.list_range(start=day_bounds(start)[0], end=day_bounds(end)[1])
        by_user = defaultdict(list)
        for r in records:
            by_user[r.user_id].append(r)

        adjustments: dict[int, float] = defaultdict(float)
        has_incidents: set[int] = set()
        for i in self._incidents.list_filtered(start=start, end=end):
            adjustments[i.user_id] += i.amount
            has_incidents.add(i.user_id)

        lines = []
        for w in self._workers.list_all():
            hours = self._calculator.worked_seconds(by_user.get(w.worker_id, [])) / 3600
            # workers with nothing to pay or adjust are left out of the report
            if hours == 0 and w.worker_id not in has_incidents:
                continue
            lines.append(
                PayrollLine(
                    user_id=w.worker_id,
                    legajo=w.legajo,
                    name=w.name,
                    hours=hours,
                    hourly_rate=w.hourly_rate,
                    base_pay=hours * w.hourly_rate,
                    adjustments=adjustments.get(w.worker_id, 0.0),
                )
            )
        return lines
