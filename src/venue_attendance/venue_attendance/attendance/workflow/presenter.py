from __future__ import annotations

from typing import Optional

from ..model import AttendanceDraft
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


def allowed_actions(state: State) -> list[str]:
    """User actions the client may offer in this state."""
    if isinstance(state, Dashboard):
        return ["request"]
    if isinstance(state, OffScheduleWarning):
        return ["proceed", "cancel"]
    if isinstance(state, PermissionDenied):
        return ["retry", "cancel"]
    if isinstance(state, Camera):
        return ["capture", "cancel"]
    if isinstance(state, Result):
        if state.saving:
            return []
        actions = []
        if state.draft.can_finalize:
            actions.append("finalize")
        if state.draft.needs_incident:
            actions.append("save_with_incident")
        if state.draft.can_retry_photo:
            actions.append("retry_photo")
        return actions + ["cancel"]
    if isinstance(state, (ValidatingLocation, Processing)):
        return ["cancel"]
    return []


def _draft_to_dict(draft: AttendanceDraft) -> dict:
    return {
        "timestamp": draft.timestamp.isoformat(),
        "type": draft.type.value,
        "location_id": draft.location_id,
        "location_name": draft.location_name,
        "location_status": draft.location_status.value,
        "distance_meters": round(draft.distance_meters, 1) if draft.distance_meters is not None else None,
        "schedule_status": draft.schedule_status.value,
        "dress_code_status": draft.dress_code_status.value if draft.dress_code_status else None,
        "identity_status": draft.identity_status.value if draft.identity_status else None,
        "ai_feedback": draft.ai_feedback,
    }


def state_to_dict(state: State) -> dict:
    attempt = current_attempt(state)
    draft: Optional[AttendanceDraft] = getattr(state, "draft", None)

    out = {
        "step": state.step.value,
        "action": attempt.action.value if attempt else None,
        "allowed": allowed_actions(state),
        "message": getattr(state, "message", None),
        "draft": _draft_to_dict(draft) if draft else None,
    }
    if isinstance(state, OffScheduleWarning):
        out["delay_info"] = state.delay_info
    if isinstance(state, Success):
        out["record"] = state.record.to_dict()
        out["sign_out_after"] = state.sign_out_after
    return out
