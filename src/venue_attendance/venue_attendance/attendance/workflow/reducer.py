"""Pure transition function of the check-in workflow.

transition(state, event) never performs I/O. Events that are not admissible
in the current state, and results tagged with a stale run id, return the
state unchanged.
"""
from __future__ import annotations

from dataclasses import replace

from ...core.constants import SIGN_OUT_DELAY_SECONDS
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
from .states import (
    Camera,
    Dashboard,
    OffScheduleWarning,
    PermissionDenied,
    Processing,
    Result,
    State,
    Success,
    ValidatingLocation,
    current_attempt,
)


def _is_current(state: State, event: Event) -> bool:
    run_id = getattr(event, "run_id", None)
    if run_id is None:
        return True
    attempt = current_attempt(state)
    return attempt is not None and attempt.run_id == run_id


def _on_dashboard(state: Dashboard, event: Event) -> State:
    if isinstance(event, ActionRequested):
        if event.within_schedule:
            return ValidatingLocation(attempt=event.attempt)
        return OffScheduleWarning(attempt=event.attempt, delay_info=event.delay_info)
    return state


def _on_off_schedule(state: OffScheduleWarning, event: Event) -> State:
    if isinstance(event, ProceedAnyway):
        return ValidatingLocation(attempt=state.attempt)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


def _on_validating_location(state: ValidatingLocation, event: Event) -> State:
    if isinstance(event, PositionResolved):
        # biometrics bypassed: the draft arrives already complete
        if event.draft.is_complete:
            return Result(attempt=state.attempt, draft=event.draft)
        return Camera(attempt=state.attempt, draft=event.draft)
    if isinstance(event, PositionDenied):
        return PermissionDenied(attempt=state.attempt)
    if isinstance(event, PositionFailed):
        return Dashboard(message=event.message)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


def _on_permission_denied(state: PermissionDenied, event: Event) -> State:
    if isinstance(event, Retry):
        return ValidatingLocation(attempt=state.attempt)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


def _on_camera(state: Camera, event: Event) -> State:
    if isinstance(event, PhotoCaptured):
        return Processing(attempt=state.attempt, draft=state.draft, photo=event.photo)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


def _on_processing(state: Processing, event: Event) -> State:
    if isinstance(event, ValidationSucceeded):
        return Result(attempt=state.attempt, draft=event.draft)
    if isinstance(event, ValidationFailed):
        return Dashboard(message=event.message)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


def _on_result(state: Result, event: Event) -> State:
    if state.saving:
        # an insert is in flight; only its outcome may move the workflow
        if isinstance(event, Persisted):
            return Success(attempt=state.attempt, record=event.record, sign_out_after=SIGN_OUT_DELAY_SECONDS)
        if isinstance(event, PersistFailed):
            return replace(state, saving=False, message=event.message)
        return state

    if isinstance(event, Finalize) and state.draft.can_finalize:
        return replace(state, saving=True, message=None)
    if isinstance(event, SaveWithIncident) and state.draft.needs_incident:
        return replace(state, saving=True, message=None)
    if isinstance(event, RetryPhoto) and state.draft.can_retry_photo:
        draft = replace(
            state.draft,
            dress_code_status=None,
            identity_status=None,
            photo_evidence="",
            ai_feedback="",
        )
        return Camera(attempt=state.attempt, draft=draft)
    if isinstance(event, Cancel):
        return Dashboard()
    return state


_HANDLERS = {
    Dashboard: _on_dashboard,
    OffScheduleWarning: _on_off_schedule,
    ValidatingLocation: _on_validating_location,
    PermissionDenied: _on_permission_denied,
    Camera: _on_camera,
    Processing: _on_processing,
    Result: _on_result,
}


def transition(state: State, event: Event) -> State:
    if not _is_current(state, event):
        return state
    handler = _HANDLERS.get(type(state))
    if handler is None:
        # Success is terminal
        return state
    return handler(state, event)
