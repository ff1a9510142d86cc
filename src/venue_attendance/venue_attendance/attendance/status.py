"""The single "most recent record for worker X up to time T" lookup.

Both the dashboard toggle and the presence monitor go through here so they
agree on what a worker's current state is.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import LogType
from .model import AttendanceRecord


def latest_record(
    records: Iterable[AttendanceRecord],
    user_id: int,
    *,
    until: Optional[datetime] = None,
    include_blocked: bool = False,
) -> Optional[AttendanceRecord]:
    best: Optional[AttendanceRecord] = None
    for r in records:
        if r.user_id != user_id:
            continue
        if until is not None and r.timestamp > until:
            continue
        if not include_blocked and r.type == LogType.BLOCKED:
            continue
        # ties resolved by insertion id so the later write wins
        if best is None or (r.timestamp, r.record_id) > (best.timestamp, best.record_id):
            best = r
    return best


def is_clocked_in(latest: Optional[AttendanceRecord]) -> bool:
    return latest is not None and latest.type == LogType.CHECK_IN


def next_action(latest: Optional[AttendanceRecord]) -> LogType:
    return LogType.CHECK_OUT if is_clocked_in(latest) else LogType.CHECK_IN
