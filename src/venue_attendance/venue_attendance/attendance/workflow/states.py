"""Check-in workflow states.

Each state is an immutable value carrying exactly the data that is valid
while in it, so e.g. a Camera state without a pending attempt cannot exist.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union

from ...core.enums import LogType
from ..model import AttendanceDraft, AttendanceRecord


class Step(str, Enum):
    DASHBOARD = "DASHBOARD"
    OFF_SCHEDULE_WARNING = "OFF_SCHEDULE_WARNING"
    VALIDATING_LOCATION = "VALIDATING_LOCATION"
    CAMERA = "CAMERA"
    PROCESSING = "PROCESSING"
    RESULT = "RESULT"
    SUCCESS = "SUCCESS"
    PERMISSION_DENIED = "PERMISSION_DENIED"


@dataclass(frozen=True)
class PendingAttempt:
    """One workflow run. requested_at becomes the record timestamp."""

    run_id: str
    action: LogType
    requested_at: datetime


@dataclass(frozen=True)
class Dashboard:
    step: ClassVar[Step] = Step.DASHBOARD
    message: Optional[str] = None


@dataclass(frozen=True)
class OffScheduleWarning:
    step: ClassVar[Step] = Step.OFF_SCHEDULE_WARNING
    attempt: PendingAttempt
    delay_info: Optional[str] = None


@dataclass(frozen=True)
class ValidatingLocation:
    step: ClassVar[Step] = Step.VALIDATING_LOCATION
    attempt: PendingAttempt


@dataclass(frozen=True)
class PermissionDenied:
    step: ClassVar[Step] = Step.PERMISSION_DENIED
    attempt: PendingAttempt


@dataclass(frozen=True)
class Camera:
    step: ClassVar[Step] = Step.CAMERA
    attempt: PendingAttempt
    draft: AttendanceDraft


@dataclass(frozen=True)
class Processing:
    step: ClassVar[Step] = Step.PROCESSING
    attempt: PendingAttempt
    draft: AttendanceDraft
    photo: str


@dataclass(frozen=True)
class Result:
    step: ClassVar[Step] = Step.RESULT
    attempt: PendingAttempt
    draft: AttendanceDraft
    saving: bool = False
    message: Optional[str] = None


@dataclass(frozen=True)
class Success:
    step: ClassVar[Step] = Step.SUCCESS
    attempt: PendingAttempt
    record: AttendanceRecord
    sign_out_after: int


State = Union[Dashboard, OffScheduleWarning, ValidatingLocation, PermissionDenied, Camera, Processing, Result, Success]


def current_attempt(state: State) -> Optional[PendingAttempt]:
    return getattr(state, "attempt", None)
