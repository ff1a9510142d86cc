from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...attendance.model import AttendanceRecord
from ...core.enums import LogType
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: each CHECK_IN pairs with the next CHECK_OUT.

    A second CHECK_IN before any CHECK_OUT replaces the first one; a
    CHECK_IN left open at the end of the period counts nothing.
    """

    def worked_seconds(self, records: Sequence[AttendanceRecord]) -> float:
        total = 0.0
        opened: Optional[datetime] = None
        for r in sorted(records, key=lambda x: (x.timestamp, x.record_id)):
            if r.type == LogType.CHECK_IN:
                opened = r.timestamp
            elif r.type == LogType.CHECK_OUT and opened is not None:
                total += (r.timestamp - opened).total_seconds()
                opened = None
        return total
