from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Sequence

from ...core.constants import EXTRA_WAITER_NOTE
from ...core.enums import DressCodeStatus, IdentityStatus, LocationStatus, ScheduleStatus
from ...schedules.matcher import is_within_schedule
from ...users.model import Worker
from ...venues.geofence import nearest_venue
from ...venues.model import Venue
from ...vision.model import ValidationResult
from ..model import AttendanceDraft
from .positioning import Position
from .states import PendingAttempt


def build_draft(
    worker: Worker,
    attempt: PendingAttempt,
    position: Position,
    venues: Sequence[Venue],
    now: datetime,
) -> AttendanceDraft:
    """Location/schedule part of the record, plus the bypass fields for roles without biometrics."""

    match = nearest_venue(position.lat, position.lng, venues)
    if match is None:
        location_id, location_name, location_status, distance = None, "", LocationStatus.SKIPPED, None
    else:
        location_id = match.venue.venue_id
        location_name = match.venue.name
        location_status = LocationStatus.VALID if match.inside else LocationStatus.INVALID
        distance = match.distance

    draft = AttendanceDraft(
        user_id=worker.worker_id,
        user_name=worker.name,
        legajo=worker.legajo,
        timestamp=attempt.requested_at,
        type=attempt.action,
        location_id=location_id,
        location_name=location_name,
        location_status=location_status,
        schedule_status=ScheduleStatus.ON_TIME if is_within_schedule(worker.schedule, now) else ScheduleStatus.OFF_SCHEDULE,
        distance_meters=distance,
    )

    if worker.skips_biometrics:
        draft = replace(
            draft,
            dress_code_status=DressCodeStatus.SKIPPED,
            identity_status=IdentityStatus.SKIPPED,
            photo_evidence="",
            ai_feedback=EXTRA_WAITER_NOTE,
        )
    return draft


def apply_validation(draft: AttendanceDraft, worker: Worker, result: ValidationResult, photo: str) -> AttendanceDraft:
    if not worker.reference_image:
        identity = IdentityStatus.NO_REF
    else:
        identity = IdentityStatus.MATCH if result.identity_match else IdentityStatus.NO_MATCH

    return replace(
        draft,
        identity_status=identity,
        dress_code_status=DressCodeStatus.PASS if result.dress_code_matches else DressCodeStatus.FAIL,
        ai_feedback=result.description,
        photo_evidence=photo,
    )
