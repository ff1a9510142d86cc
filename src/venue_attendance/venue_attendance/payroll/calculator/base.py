from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_seconds(self, records: Sequence[AttendanceRecord]) -> float:
        """Total worked time of one worker's records, in any order."""

        raise NotImplementedError
