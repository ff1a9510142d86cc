from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DressCodeStatus, IdentityStatus, LocationStatus, LogType, ScheduleStatus


@dataclass(frozen=True)
class AttendanceDraft:
    """In-progress record built by the check-in workflow.

    dress_code_status / identity_status stay None until the photo has been
    validated (or biometrics were skipped).
    """

    user_id: int
    user_name: str
    legajo: str
    timestamp: datetime
    type: LogType
    location_id: Optional[int]
    location_name: str
    location_status: LocationStatus
    schedule_status: ScheduleStatus
    dress_code_status: Optional[DressCodeStatus] = None
    identity_status: Optional[IdentityStatus] = None
    photo_evidence: str = ""
    ai_feedback: str = ""
    distance_meters: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.dress_code_status is not None and self.identity_status is not None

    @property
    def can_finalize(self) -> bool:
        return self.identity_status in (IdentityStatus.MATCH, IdentityStatus.SKIPPED)

    @property
    def needs_incident(self) -> bool:
        return self.identity_status in (IdentityStatus.NO_MATCH, IdentityStatus.NO_REF)

    @property
    def can_retry_photo(self) -> bool:
        return self.is_complete and not self.can_finalize


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: a persisted attendance log entry. Never mutated by the workflow."""

    record_id: int
    user_id: int
    user_name: str
    legajo: str
    timestamp: datetime
    type: LogType
    location_id: Optional[int]
    location_name: str
    location_status: LocationStatus
    schedule_status: ScheduleStatus
    dress_code_status: DressCodeStatus
    identity_status: IdentityStatus
    photo_evidence: str
    ai_feedback: str
    scheduled_start_override: Optional[str] = None
    scheduled_end_override: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "legajo": self.legajo,
            "timestamp": self.timestamp.isoformat(),
            "type": self.type.value,
            "location_id": self.location_id,
            "location_name": self.location_name,
            "location_status": self.location_status.value,
            "schedule_status": self.schedule_status.value,
            "dress_code_status": self.dress_code_status.value,
            "identity_status": self.identity_status.value,
            "photo_evidence": self.photo_evidence,
            "ai_feedback": self.ai_feedback,
            "scheduled_start_override": self.scheduled_start_override,
            "scheduled_end_override": self.scheduled_end_override,
        }
