"""Live presence per venue.

A snapshot is a pure function of (venues, workers, today's records, now):
re-running it on unchanged inputs yields the same classifications and
counts. "Expected" is anyone with a shift today, whether or not the shift
window has started or already ended.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.status import latest_record
from ..common.datetime_utils import day_bounds, format_hhmm, now_local
from ..core.constants import MONITOR_REFRESH_SECONDS
from ..core.enums import LogType, PresenceStatus
from ..schedules.matcher import schedule_for_day
from ..users.model import Worker
from ..users.repository import WorkerRepository
from ..venues.model import Venue
from ..venues.repository import VenueRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkerPresence:
    worker_id: int
    name: str
    role: str
    status: PresenceStatus
    shift: Optional[str]
    last_record: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        last = self.last_record
        return {
            "worker_id": self.worker_id,
            "name": self.name,
            "role": self.role,
            "status": self.status.value,
            "shift": self.shift,
            "last_type": last.type.value if last else None,
            "last_timestamp": last.timestamp.isoformat() if last else None,
            "last_location": last.location_name if last else None,
        }


@dataclass(frozen=True)
class VenuePresence:
    venue: Venue
    workers: tuple[WorkerPresence, ...]

    @property
    def present_count(self) -> int:
        return sum(1 for w in self.workers if w.status == PresenceStatus.PRESENT)

    @property
    def expected_count(self) -> int:
        return sum(1 for w in self.workers if w.status != PresenceStatus.NO_SHIFT)

    def to_dict(self) -> dict:
        return {
            "venue": self.venue.to_dict(),
            "present_count": self.present_count,
            "expected_count": self.expected_count,
            "workers": [w.to_dict() for w in self.workers],
        }


@dataclass(frozen=True)
class PresenceSnapshot:
    generated_at: datetime
    venues: tuple[VenuePresence, ...]

    def to_dict(self) -> dict:
        return {
            "generated_at": self.generated_at.isoformat(),
            "venues": [v.to_dict() for v in self.venues],
        }


def classify(worker: Worker, todays_records: Sequence[AttendanceRecord], now: datetime) -> WorkerPresence:
    slot = schedule_for_day(worker.schedule, now.date())
    last = latest_record(todays_records, worker.worker_id, until=now, include_blocked=True)

    if slot is None:
        status = PresenceStatus.NO_SHIFT
    elif last is not None and last.type == LogType.CHECK_IN:
        status = PresenceStatus.PRESENT
    else:
        status = PresenceStatus.ABSENT

    return WorkerPresence(
        worker_id=worker.worker_id,
        name=worker.name,
        role=worker.role.value,
        status=status,
        shift=f"{format_hhmm(slot.start)} - {format_hhmm(slot.end)}" if slot else None,
        last_record=last,
    )


def build_snapshot(
    venues: Sequence[Venue],
    workers: Sequence[Worker],
    todays_records: Sequence[AttendanceRecord],
    now: datetime,
) -> PresenceSnapshot:
    day_start, _ = day_bounds(now.date())
    # records from another day never count, even if the caller passed them
    todays = [r for r in todays_records if day_start <= r.timestamp]

    out = []
    for venue in venues:
        assigned = [w for w in workers if venue.venue_id in w.assigned_locations]
        out.append(VenuePresence(venue=venue, workers=tuple(classify(w, todays, now) for w in assigned)))
    return PresenceSnapshot(generated_at=now, venues=tuple(out))


class PresenceMonitor:
    """Keeps the most recent snapshot; nothing else survives between refreshes."""

    refresh_seconds = MONITOR_REFRESH_SECONDS

    def __init__(
        self,
        *,
        venues: VenueRepository,
        workers: WorkerRepository,
        attendance: AttendanceRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._venues = venues
        self._workers = workers
        self._attendance = attendance
        self._clock = clock
        self._lock = threading.Lock()
        self._latest: Optional[PresenceSnapshot] = None

    @property
    def latest(self) -> Optional[PresenceSnapshot]:
        return self._latest

    def refresh(self) -> PresenceSnapshot:
        now = self._clock()
        first, last = day_bounds(now.date())
        snapshot = build_snapshot(
            self._venues.list_all(),
            self._workers.list_all(),
            self._attendance.list_range(start=first, end=last),
            now,
        )
        with self._lock:
            self._latest = snapshot
        _logger.debug("Presence snapshot refreshed for %d venues", len(snapshot.venues))
        return snapshot
