from __future__ import annotations

import itertools
from datetime import datetime, timedelta

import pytest

from src.venue_attendance.venue_attendance.attendance.workflow.positioning import (
    PERMISSION_DENIED,
    TIMEOUT,
    ReportedPositionSource,
)
from src.venue_attendance.venue_attendance.attendance.workflow.presenter import allowed_actions, state_to_dict
from src.venue_attendance.venue_attendance.attendance.workflow.session import CheckInSession
from src.venue_attendance.venue_attendance.attendance.workflow.states import (
    Camera,
    Dashboard,
    OffScheduleWarning,
    PermissionDenied,
    Result,
    Success,
)
from src.venue_attendance.venue_attendance.core.constants import EXTRA_WAITER_NOTE, SAVE_FAILED_MESSAGE
from src.venue_attendance.venue_attendance.core.enums import (
    DressCodeStatus,
    IdentityStatus,
    LocationStatus,
    LogType,
    Role,
    ScheduleStatus,
)
from src.venue_attendance.venue_attendance.core.exceptions import ValidationError
from src.venue_attendance.venue_attendance.storage.images import Uploaded
from src.venue_attendance.venue_attendance.vision.model import ValidationResult

PHOTO = "data:image/jpeg;base64,/9j/AAAA"
MONDAY_MORNING = datetime(2026, 10, 12, 10, 0)


class Clock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock(fixed_now):
    return Clock(fixed_now)


@pytest.fixture
def make_session(venues_repo, attendance_repo, stub_validator, image_store, clock):
    counter = itertools.count(1)

    def _make(worker, *, validator=None, images=None):
        return CheckInSession(
            worker,
            venues=venues_repo,
            attendance=attendance_repo,
            validator=validator or stub_validator,
            images=images or image_store,
            clock=clock,
            run_ids=lambda: f"run-{next(counter)}",
        )

    return _make


@pytest.fixture
def on_site(central_venue):
    return ReportedPositionSource(lat=central_venue.lat, lng=central_venue.lng, accuracy=8)


def test_extra_waiter_skips_biometrics_and_finalizes(make_session, worker_factory, on_site, attendance_repo, stub_validator):
    session = make_session(worker_factory(role=Role.EXTRA_WAITER))

    state = session.request_action(LogType.CHECK_IN, on_site)

    assert isinstance(state, Result)
    assert state.draft.identity_status == IdentityStatus.SKIPPED
    assert state.draft.dress_code_status == DressCodeStatus.SKIPPED
    assert state.draft.photo_evidence == ""
    assert state.draft.ai_feedback == EXTRA_WAITER_NOTE
    assert allowed_actions(state) == ["finalize", "cancel"]
    assert stub_validator.calls == []

    state = session.finalize()

    assert isinstance(state, Success)
    assert len(attendance_repo.records) == 1
    record = attendance_repo.records[0]
    assert record.location_status == LocationStatus.VALID
    assert record.schedule_status == ScheduleStatus.ON_TIME
    assert record.type == LogType.CHECK_IN


def test_waiter_off_schedule_saved_with_incident(
    make_session, worker_factory, on_site, attendance_repo, clock, image_store, validator_factory
):
    clock.now = MONDAY_MORNING
    validator_result = ValidationResult(identity_match=False, dress_code_matches=True, description="Otra persona", confidence=0.8)

    session = make_session(worker_factory(), validator=validator_factory(validator_result))

    state = session.request_action(LogType.CHECK_IN, on_site)
    assert isinstance(state, OffScheduleWarning)

    state = session.proceed_anyway(on_site)
    assert isinstance(state, Camera)
    assert state.draft.schedule_status == ScheduleStatus.OFF_SCHEDULE

    state = session.capture_photo(PHOTO)
    assert isinstance(state, Result)
    assert state.draft.identity_status == IdentityStatus.NO_MATCH
    assert "finalize" not in allowed_actions(state)
    assert set(allowed_actions(state)) == {"save_with_incident", "retry_photo", "cancel"}

    state = session.save_with_incident()

    assert isinstance(state, Success)
    assert [r.identity_status for r in attendance_repo.records] == [IdentityStatus.NO_MATCH]
    # evidence moved to the image store
    folder, name = image_store.uploads[0]
    assert folder == "evidence/2026/10"
    assert attendance_repo.records[0].photo_evidence == f"/uploads/{folder}/{name}"


def test_permission_denied_then_retry_keeps_checkout(
    make_session, worker_factory, on_site, attendance_repo
):
    worker = worker_factory()
    session = make_session(worker)
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)
    session.finalize()
    session.reset()

    denied = ReportedPositionSource(error=PERMISSION_DENIED)
    state = session.request_action(LogType.CHECK_OUT, denied)

    assert isinstance(state, PermissionDenied)
    assert state.attempt.action == LogType.CHECK_OUT
    assert denied.active is False

    state = session.retry_location(on_site)

    assert isinstance(state, Camera)
    assert state.attempt.action == LogType.CHECK_OUT
    assert state.draft.type == LogType.CHECK_OUT
    assert on_site.active is False


def test_timestamp_is_fixed_when_the_action_is_requested(make_session, worker_factory, on_site, attendance_repo, clock):
    requested_at = clock.now
    session = make_session(worker_factory())

    session.request_action(LogType.CHECK_IN, on_site)
    clock.advance(minutes=2)
    session.capture_photo(PHOTO)
    clock.advance(minutes=1)
    session.finalize()

    assert attendance_repo.records[0].timestamp == requested_at


def test_sensor_error_returns_to_dashboard_without_record(make_session, worker_factory, attendance_repo):
    session = make_session(worker_factory())

    state = session.request_action(LogType.CHECK_IN, ReportedPositionSource(error=TIMEOUT))

    assert isinstance(state, Dashboard)
    assert "10" in state.message
    assert attendance_repo.records == []


def test_venue_lookup_failure_returns_to_dashboard(make_session, worker_factory, on_site, attendance_repo, venues_repo):
    venues_repo.fail = True
    session = make_session(worker_factory())

    state = session.request_action(LogType.CHECK_IN, on_site)

    assert isinstance(state, Dashboard)
    assert state.message
    assert attendance_repo.records == []


def test_validator_failure_abandons_the_attempt(make_session, worker_factory, on_site, attendance_repo, failing_validator):
    session = make_session(worker_factory(), validator=failing_validator)
    session.request_action(LogType.CHECK_IN, on_site)

    state = session.capture_photo(PHOTO)

    assert isinstance(state, Dashboard)
    assert state.message == "Error en el servidor de Inteligencia Artificial."
    assert attendance_repo.records == []
    assert attendance_repo.insert_calls == 0


def test_cancel_from_camera_writes_nothing(make_session, worker_factory, on_site, attendance_repo):
    session = make_session(worker_factory())
    session.request_action(LogType.CHECK_IN, on_site)

    assert isinstance(session.cancel(), Dashboard)
    assert attendance_repo.records == []


def test_missing_reference_photo_needs_incident(make_session, worker_factory, on_site):
    session = make_session(worker_factory(reference_image=None))
    session.request_action(LogType.CHECK_IN, on_site)

    state = session.capture_photo(PHOTO)

    assert state.draft.identity_status == IdentityStatus.NO_REF
    assert "save_with_incident" in allowed_actions(state)


def test_persist_failure_stays_in_result(make_session, worker_factory, on_site, attendance_repo):
    session = make_session(worker_factory())
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)
    attendance_repo.fail_inserts = True

    state = session.finalize()

    assert isinstance(state, Result)
    assert state.saving is False
    assert state.message
    assert attendance_repo.records == []

    attendance_repo.fail_inserts = False
    assert isinstance(session.finalize(), Success)
    assert len(attendance_repo.records) == 1


class ExplodingImageStore:
    def __init__(self, failures: int = 1):
        self.failures = failures
        self.uploads = []

    def upload(self, data_url, *, folder, file_name=None):
        self.uploads.append((folder, file_name))
        if self.failures:
            self.failures -= 1
            raise RuntimeError("image decoder crashed")
        return Uploaded(url=f"/uploads/{folder}/{file_name}")


def test_unexpected_upload_error_does_not_strand_the_save(make_session, worker_factory, on_site, attendance_repo):
    session = make_session(worker_factory(), images=ExplodingImageStore())
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)

    state = session.finalize()

    assert isinstance(state, Result)
    assert state.saving is False
    assert state.message == SAVE_FAILED_MESSAGE
    assert attendance_repo.records == []
    assert "cancel" in allowed_actions(state)

    assert isinstance(session.finalize(), Success)
    assert attendance_repo.records[0].photo_evidence.startswith("/uploads/evidence/")


def test_unexpected_insert_error_allows_cancel(make_session, worker_factory, on_site, attendance_repo, monkeypatch):
    session = make_session(worker_factory())
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)

    def broken_insert(draft):
        raise ConnectionResetError("connection reset")

    monkeypatch.setattr(attendance_repo, "insert", broken_insert)
    state = session.finalize()

    assert isinstance(state, Result) and not state.saving
    assert isinstance(session.cancel(), Dashboard)


def test_evidence_file_is_named_after_the_worker_id(make_session, worker_factory, on_site, image_store):
    session = make_session(worker_factory(name="Ana/../../etc"))
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)
    session.finalize()

    folder, name = image_store.uploads[0]
    assert folder == "evidence/2026/10"
    assert name.startswith("7_CHECK_IN_")
    assert "/" not in name


def test_repeated_finalize_writes_one_record(make_session, worker_factory, on_site, attendance_repo):
    session = make_session(worker_factory())
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)

    session.finalize()
    session.finalize()
    session.save_with_incident()

    assert attendance_repo.insert_calls == 1


def test_evidence_kept_inline_when_upload_falls_back(
    make_session, worker_factory, on_site, attendance_repo, image_store_factory
):
    session = make_session(worker_factory(), images=image_store_factory(fail=True))
    session.request_action(LogType.CHECK_IN, on_site)
    session.capture_photo(PHOTO)

    assert isinstance(session.finalize(), Success)
    assert attendance_repo.records[0].photo_evidence == PHOTO


def test_only_the_offered_action_can_be_requested(make_session, worker_factory, on_site):
    session = make_session(worker_factory())

    with pytest.raises(ValidationError, match="No tiene una entrada registrada"):
        session.request_action(LogType.CHECK_OUT, on_site)


def test_cannot_start_a_second_attempt_while_one_is_running(make_session, worker_factory, on_site):
    session = make_session(worker_factory())
    session.request_action(LogType.CHECK_IN, on_site)

    with pytest.raises(ValidationError):
        session.request_action(LogType.CHECK_IN, on_site)


def test_state_to_dict_reports_success(make_session, worker_factory, on_site):
    session = make_session(worker_factory(role=Role.EXTRA_WAITER))
    session.request_action(LogType.CHECK_IN, on_site)

    out = state_to_dict(session.finalize())

    assert out["step"] == "SUCCESS"
    assert out["action"] == "CHECK_IN"
    assert out["record"]["identity_status"] == "SKIPPED"
    assert out["sign_out_after"] > 0
