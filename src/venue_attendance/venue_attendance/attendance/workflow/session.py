from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable

from ...common.datetime_utils import now_local
from ...core.constants import SAVE_FAILED_MESSAGE
from ...core.enums import LogType
from ...core.exceptions import (
    PersistenceError,
    PhotoValidationError,
    PositionError,
    PositionPermissionDenied,
    ValidationError,
)
from ...schedules.matcher import get_schedule_delay_info, is_within_schedule
from ...storage.images import Fallback, ImageStore, is_data_url
from ...users.model import Worker
from ...venues.repository import VenueRepository
from ...vision.validator import PhotoValidator
from ..model import AttendanceDraft
from ..repository import AttendanceRepository
from ..status import next_action
from .draft import apply_validation, build_draft
from .events import (
    ActionRequested,
    Cancel,
    Event,
    Finalize,
    Persisted,
    PersistFailed,
    PhotoCaptured,
    PositionDenied,
    PositionFailed,
    PositionResolved,
    ProceedAnyway,
    Retry,
    RetryPhoto,
    SaveWithIncident,
    ValidationFailed,
    ValidationSucceeded,
)
from .positioning import PositionSource
from .reducer import transition
from .states import Camera, Dashboard, PendingAttempt, Processing, Result, State, ValidatingLocation

_logger = logging.getLogger(__name__)


class CheckInSession:
    """Drives one worker's check-in workflow.

    Every external call happens outside the state lock and its result is fed
    back as an event tagged with the run id that issued it, so a result that
    arrives after the attempt was abandoned is dropped by the reducer.
    """

    def __init__(
        self,
        worker: Worker,
        *,
        venues: VenueRepository,
        attendance: AttendanceRepository,
        validator: PhotoValidator,
        images: ImageStore,
        clock: Callable[[], datetime] = now_local,
        run_ids: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self.worker = worker
        self._venues = venues
        self._attendance = attendance
        self._validator = validator
        self._images = images
        self._clock = clock
        self._run_ids = run_ids
        self._lock = threading.Lock()
        self._state: State = Dashboard()

    @property
    def state(self) -> State:
        return self._state

    def _advance(self, event: Event) -> tuple[State, bool]:
        """Apply an event; the flag tells whether it moved the workflow."""
        with self._lock:
            before = self._state
            self._state = transition(before, event)
            after = self._state
        if after is before:
            _logger.debug("worker=%s ignored %s in %s", self.worker.worker_id, type(event).__name__, before.step.value)
        else:
            _logger.debug(
                "worker=%s %s -> %s on %s",
                self.worker.worker_id,
                before.step.value,
                after.step.value,
                type(event).__name__,
            )
        return after, after is not before

    def _dispatch(self, event: Event) -> State:
        return self._advance(event)[0]

    def offered_action(self) -> LogType:
        return next_action(self._attendance.get_latest_for_user(self.worker.worker_id))

    # Step 1
    def request_action(self, action: LogType, position: PositionSource) -> State:
        if not isinstance(self._state, Dashboard):
            raise ValidationError("Ya hay una fichada en curso")
        if action == LogType.BLOCKED:
            raise ValidationError("Acción inválida")
        if action != self.offered_action():
            if action == LogType.CHECK_IN:
                raise ValidationError("Ya registró su entrada")
            raise ValidationError("No tiene una entrada registrada")

        now = self._clock()
        attempt = PendingAttempt(run_id=self._run_ids(), action=action, requested_at=now)
        state, moved = self._advance(
            ActionRequested(
                attempt=attempt,
                within_schedule=is_within_schedule(self.worker.schedule, now),
                delay_info=get_schedule_delay_info(self.worker.schedule, now),
            )
        )
        if moved and isinstance(state, ValidatingLocation):
            return self._locate(state.attempt, position)
        return state

    # Step 2
    def proceed_anyway(self, position: PositionSource) -> State:
        state, moved = self._advance(ProceedAnyway())
        if moved and isinstance(state, ValidatingLocation):
            return self._locate(state.attempt, position)
        return state

    def cancel(self) -> State:
        state, moved = self._advance(Cancel())
        if moved and isinstance(state, Dashboard):
            _logger.info("worker=%s abandoned the attempt", self.worker.worker_id)
        return state

    # Step 4
    def retry_location(self, position: PositionSource) -> State:
        state, moved = self._advance(Retry())
        if moved and isinstance(state, ValidatingLocation):
            return self._locate(state.attempt, position)
        return state

    # Step 3
    def _locate(self, attempt: PendingAttempt, source: PositionSource) -> State:
        try:
            with source.acquire():
                position = source.current_position()
        except PositionPermissionDenied:
            return self._dispatch(PositionDenied(run_id=attempt.run_id))
        except PositionError as e:
            return self._dispatch(PositionFailed(run_id=attempt.run_id, message=str(e)))

        try:
            venues = self._venues.list_all()
        except Exception:
            _logger.exception("Venues could not be loaded for worker=%s", self.worker.worker_id)
            return self._dispatch(PositionFailed(run_id=attempt.run_id, message="No se pudieron cargar los salones"))

        draft = build_draft(self.worker, attempt, position, venues, self._clock())
        return self._dispatch(PositionResolved(run_id=attempt.run_id, draft=draft))

    # Steps 5 and 6
    def capture_photo(self, photo: str) -> State:
        if not photo:
            raise ValidationError("No se recibió la foto")

        state = self._state
        if not isinstance(state, Camera):
            return state

        state, moved = self._advance(PhotoCaptured(run_id=state.attempt.run_id, photo=photo))
        if not (moved and isinstance(state, Processing)):
            return state

        try:
            result = self._validator.analyze(photo, self.worker.dress_code, self.worker.reference_image)
        except PhotoValidationError as e:
            _logger.info("worker=%s photo validation failed: %s", self.worker.worker_id, e)
            return self._dispatch(ValidationFailed(run_id=state.attempt.run_id, message=str(e)))

        draft = apply_validation(state.draft, self.worker, result, photo)
        return self._dispatch(ValidationSucceeded(run_id=state.attempt.run_id, draft=draft))

    # Step 8
    def retry_photo(self) -> State:
        return self._dispatch(RetryPhoto())

    # Step 7
    def finalize(self) -> State:
        return self._save(Finalize())

    def save_with_incident(self) -> State:
        return self._save(SaveWithIncident())

    def _save(self, event: Event) -> State:
        state, moved = self._advance(event)
        if not (moved and isinstance(state, Result) and state.saving):
            return state

        try:
            record = self._attendance.insert(self._with_uploaded_photo(state.draft))
        except PersistenceError as e:
            _logger.error("worker=%s record insert failed: %s", self.worker.worker_id, e)
            return self._dispatch(PersistFailed(run_id=state.attempt.run_id, message=str(e)))
        except Exception:
            # a save in flight only leaves Result(saving) through Persisted or PersistFailed
            _logger.exception("worker=%s unexpected error while saving", self.worker.worker_id)
            return self._dispatch(PersistFailed(run_id=state.attempt.run_id, message=SAVE_FAILED_MESSAGE))

        _logger.info(
            "worker=%s %s recorded id=%s location=%s identity=%s",
            self.worker.worker_id,
            record.type.value,
            record.record_id,
            record.location_status.value,
            record.identity_status.value,
        )
        return self._dispatch(Persisted(run_id=state.attempt.run_id, record=record))

    def _with_uploaded_photo(self, draft: AttendanceDraft) -> AttendanceDraft:
        if not is_data_url(draft.photo_evidence):
            return draft

        stamp = draft.timestamp
        folder = f"evidence/{stamp.year}/{stamp.month:02d}"
        name = f"{draft.user_id}_{draft.type.value}_{int(stamp.timestamp() * 1000)}.jpg"
        outcome = self._images.upload(draft.photo_evidence, folder=folder, file_name=name)
        if isinstance(outcome, Fallback):
            _logger.warning("Evidence photo kept inline for worker=%s: %s", draft.user_id, outcome.reason)
            return draft
        return replace(draft, photo_evidence=outcome.url)

    def reset(self) -> State:
        """Start over after a terminal Success (e.g. when the worker signs in again)."""
        with self._lock:
            self._state = Dashboard()
        return self._state
