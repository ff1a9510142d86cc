from __future__ import annotations

from datetime import datetime, time

from src.venue_attendance.venue_attendance.attendance.model import AttendanceRecord
from src.venue_attendance.venue_attendance.core.enums import (
    DressCodeStatus,
    IdentityStatus,
    LocationStatus,
    LogType,
    PresenceStatus,
    ScheduleStatus,
)
from src.venue_attendance.venue_attendance.monitor.aggregator import PresenceMonitor, build_snapshot
from src.venue_attendance.venue_attendance.schedules.model import WorkSchedule
from src.venue_attendance.venue_attendance.venues.model import Venue

ANNEX = Venue(venue_id=2, name="Anexo", address="", city="", lat=-34.61, lng=-58.39, radius_meters=80)


def _log(record_id: int, user_id: int, at: datetime, log_type: LogType) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        user_id=user_id,
        user_name=f"Worker {user_id}",
        legajo=f"{user_id:04d}",
        timestamp=at,
        type=log_type,
        location_id=1,
        location_name="Salón Central",
        location_status=LocationStatus.VALID,
        schedule_status=ScheduleStatus.ON_TIME,
        dress_code_status=DressCodeStatus.PASS,
        identity_status=IdentityStatus.MATCH,
        photo_evidence="",
        ai_feedback="",
    )


def _statuses(venue_presence):
    return {w.worker_id: w.status for w in venue_presence.workers}


def test_classification_and_counts(worker_factory, central_venue, fixed_now):
    present = worker_factory(1)
    left = worker_factory(2)
    never_came = worker_factory(3)
    day_off = worker_factory(4, schedule=(WorkSchedule(day="Lunes", start=time(9, 0), end=time(17, 0)),))
    elsewhere = worker_factory(5, assigned_locations=(ANNEX.venue_id,))

    records = [
        _log(1, 1, datetime(2026, 10, 16, 20, 5), LogType.CHECK_IN),
        _log(2, 2, datetime(2026, 10, 16, 20, 0), LogType.CHECK_IN),
        _log(3, 2, datetime(2026, 10, 16, 20, 45), LogType.CHECK_OUT),
    ]

    snapshot = build_snapshot([central_venue, ANNEX], [present, left, never_came, day_off, elsewhere], records, fixed_now)
    central, annex = snapshot.venues

    assert _statuses(central) == {
        1: PresenceStatus.PRESENT,
        2: PresenceStatus.ABSENT,
        3: PresenceStatus.ABSENT,
        4: PresenceStatus.NO_SHIFT,
    }
    assert central.present_count == 1
    assert central.expected_count == 3
    assert _statuses(annex) == {5: PresenceStatus.ABSENT}
    assert annex.present_count == 0


def test_yesterdays_check_in_does_not_count(worker_factory, central_venue, fixed_now):
    worker = worker_factory(1)
    records = [_log(1, 1, datetime(2026, 10, 15, 23, 0), LogType.CHECK_IN)]

    snapshot = build_snapshot([central_venue], [worker], records, fixed_now)

    assert _statuses(snapshot.venues[0]) == {1: PresenceStatus.ABSENT}


def test_snapshot_is_idempotent(worker_factory, central_venue, fixed_now):
    workers = [worker_factory(1), worker_factory(2)]
    records = [_log(1, 1, datetime(2026, 10, 16, 20, 5), LogType.CHECK_IN)]

    first = build_snapshot([central_venue], workers, records, fixed_now)
    second = build_snapshot([central_venue], workers, records, fixed_now)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_monitor_keeps_only_the_latest_snapshot(
    worker_factory, venues_repo, workers_repo_factory, attendance_repo, fixed_now
):
    workers = workers_repo_factory([worker_factory(1)])
    monitor = PresenceMonitor(venues=venues_repo, workers=workers, attendance=attendance_repo, clock=lambda: fixed_now)
    assert monitor.latest is None

    first = monitor.refresh()
    assert first.venues[0].present_count == 0

    attendance_repo.records.append(_log(1, 1, datetime(2026, 10, 16, 20, 5), LogType.CHECK_IN))
    second = monitor.refresh()

    assert monitor.latest is second
    assert second.venues[0].present_count == 1
    assert monitor.refresh_seconds == 10
