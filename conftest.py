from __future__ import annotations

from dataclasses import replace
from datetime import datetime, time
from typing import Optional

import pytest

from src.venue_attendance.venue_attendance.attendance.model import AttendanceDraft, AttendanceRecord
from src.venue_attendance.venue_attendance.attendance.status import latest_record
from src.venue_attendance.venue_attendance.core.enums import Role
from src.venue_attendance.venue_attendance.core.exceptions import PersistenceError, PhotoValidationError
from src.venue_attendance.venue_attendance.schedules.model import WorkSchedule
from src.venue_attendance.venue_attendance.storage.images import Fallback, Uploaded
from src.venue_attendance.venue_attendance.users.model import Worker
from src.venue_attendance.venue_attendance.venues.model import Venue
from src.venue_attendance.venue_attendance.vision.model import ValidationResult

# Friday
FIXED_NOW = datetime(2026, 10, 16, 21, 0)

CENTRAL = Venue(
    venue_id=1,
    name="Salón Central",
    address="Av. Corrientes 1234",
    city="Buenos Aires",
    lat=-34.6037,
    lng=-58.3816,
    radius_meters=100,
)


class InMemoryAttendance:
    def __init__(self, records=None):
        self.records: list[AttendanceRecord] = list(records or [])
        self._next_id = max((r.record_id for r in self.records), default=0) + 1
        self.fail_inserts = False
        self.insert_calls = 0

    def insert(self, draft: AttendanceDraft) -> AttendanceRecord:
        self.insert_calls += 1
        if self.fail_inserts:
            raise PersistenceError("No se pudo guardar la fichada")
        record = AttendanceRecord(
            record_id=self._next_id,
            user_id=draft.user_id,
            user_name=draft.user_name,
            legajo=draft.legajo,
            timestamp=draft.timestamp,
            type=draft.type,
            location_id=draft.location_id,
            location_name=draft.location_name,
            location_status=draft.location_status,
            schedule_status=draft.schedule_status,
            dress_code_status=draft.dress_code_status,
            identity_status=draft.identity_status,
            photo_evidence=draft.photo_evidence,
            ai_feedback=draft.ai_feedback,
        )
        self._next_id += 1
        self.records.append(record)
        return record

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self.records if r.record_id == record_id), None)

    def get_latest_for_user(self, user_id, *, until=None, include_blocked=False):
        return latest_record(self.records, user_id, until=until, include_blocked=include_blocked)

    def list_recent(self, limit):
        items = sorted(self.records, key=lambda r: (r.timestamp, r.record_id), reverse=True)
        return items[:limit]

    def list_range(self, *, start, end, user_id=None):
        items = [
            r
            for r in self.records
            if start <= r.timestamp <= end and (user_id is None or r.user_id == user_id)
        ]
        return sorted(items, key=lambda r: (r.timestamp, r.record_id), reverse=True)

    def update_record(self, *, record_id, timestamp, ai_feedback, scheduled_start_override, scheduled_end_override):
        for i, r in enumerate(self.records):
            if r.record_id == record_id:
                self.records[i] = replace(
                    r,
                    timestamp=timestamp,
                    ai_feedback=ai_feedback,
                    scheduled_start_override=scheduled_start_override,
                    scheduled_end_override=scheduled_end_override,
                )
                return True
        return False

    def delete_by_id(self, record_id):
        before = len(self.records)
        self.records = [r for r in self.records if r.record_id != record_id]
        return len(self.records) < before


class InMemoryVenues:
    def __init__(self, venues=None):
        self.venues: list[Venue] = list(venues or [])
        self.fail = False

    def list_all(self):
        if self.fail:
            raise RuntimeError("database unavailable")
        return sorted(self.venues, key=lambda v: v.name)

    def get_by_id(self, venue_id):
        return next((v for v in self.venues if v.venue_id == venue_id), None)

    def create(self, **fields):
        venue_id = max((v.venue_id for v in self.venues), default=0) + 1
        self.venues.append(Venue(venue_id=venue_id, **fields))
        return venue_id

    def update(self, *, venue_id, **fields):
        for i, v in enumerate(self.venues):
            if v.venue_id == venue_id:
                self.venues[i] = Venue(venue_id=venue_id, **fields)
                return True
        return False

    def delete_by_id(self, venue_id):
        before = len(self.venues)
        self.venues = [v for v in self.venues if v.venue_id != venue_id]
        return len(self.venues) < before


class InMemoryWorkers:
    def __init__(self, workers=None):
        self.workers: dict[int, Worker] = {w.worker_id: w for w in (workers or [])}

    def get_by_id(self, worker_id):
        return self.workers.get(worker_id)

    def find_by_identifier(self, identifier):
        return next((w for w in self.workers.values() if identifier in (w.dni, w.legajo)), None)

    def list_all(self):
        return sorted(self.workers.values(), key=lambda w: w.name)

    def create(self, *, password_hash, schedule, assigned_locations, **fields):
        worker_id = max(self.workers, default=0) + 1
        self.workers[worker_id] = Worker(
            worker_id=worker_id,
            password_hash=password_hash,
            schedule=tuple(schedule),
            assigned_locations=tuple(assigned_locations),
            **fields,
        )
        return worker_id

    def update(self, *, worker_id, password_hash=None, schedule, assigned_locations, **fields):
        current = self.workers.get(worker_id)
        if not current:
            return False
        self.workers[worker_id] = replace(
            current,
            password_hash=password_hash or current.password_hash,
            schedule=tuple(schedule),
            assigned_locations=tuple(assigned_locations),
            **fields,
        )
        return True

    def delete_by_id(self, worker_id):
        return self.workers.pop(worker_id, None) is not None


class StubValidator:
    """Answers with a fixed verdict, or raises when given an exception."""

    def __init__(self, result: Optional[ValidationResult] = None, error: Optional[Exception] = None):
        self.result = result or ValidationResult(True, True, "Todo correcto", 0.95)
        self.error = error
        self.calls = []

    def analyze(self, captured_photo, dress_code_description, reference_photo):
        self.calls.append((captured_photo, dress_code_description, reference_photo))
        if self.error:
            raise self.error
        return self.result


class RecordingImageStore:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.uploads = []

    def upload(self, data_url, *, folder, file_name=None):
        self.uploads.append((folder, file_name))
        if self.fail:
            return Fallback(original=data_url, reason="disk full")
        return Uploaded(url=f"/uploads/{folder}/{file_name}")


def make_worker(worker_id: int = 7, *, role: Role = Role.WAITER, **overrides) -> Worker:
    fields = dict(
        worker_id=worker_id,
        legajo=f"{worker_id:04d}",
        dni=f"3000000{worker_id}",
        name=f"Worker {worker_id}",
        role=role,
        dress_code="Camisa blanca y moño negro",
        reference_image="/uploads/users/ref.jpg",
        schedule=(WorkSchedule(day="Viernes", start=time(20, 0), end=time(4, 0)),),
        assigned_locations=(CENTRAL.venue_id,),
        hourly_rate=1500.0,
    )
    fields.update(overrides)
    return Worker(**fields)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def central_venue() -> Venue:
    return CENTRAL


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def venues_repo() -> InMemoryVenues:
    return InMemoryVenues([CENTRAL])


@pytest.fixture
def worker_factory():
    return make_worker


@pytest.fixture
def image_store() -> RecordingImageStore:
    return RecordingImageStore()


@pytest.fixture
def stub_validator() -> StubValidator:
    return StubValidator()


@pytest.fixture
def failing_validator() -> StubValidator:
    return StubValidator(error=PhotoValidationError("Error en el servidor de Inteligencia Artificial."))


@pytest.fixture
def workers_repo_factory():
    return InMemoryWorkers


@pytest.fixture
def attendance_repo_factory():
    return InMemoryAttendance


@pytest.fixture
def validator_factory():
    return StubValidator


@pytest.fixture
def image_store_factory():
    return RecordingImageStore
