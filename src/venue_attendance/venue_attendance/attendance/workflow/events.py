"""Check-in workflow events.

User actions carry no run id. Results of external calls carry the run id of
the attempt that issued the call; the reducer drops them when that attempt
is no longer current.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..model import AttendanceDraft, AttendanceRecord
from .states import PendingAttempt


@dataclass(frozen=True)
class ActionRequested:
    attempt: PendingAttempt
    within_schedule: bool
    delay_info: Optional[str] = None


@dataclass(frozen=True)
class ProceedAnyway:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class Finalize:
    pass


@dataclass(frozen=True)
class SaveWithIncident:
    pass


@dataclass(frozen=True)
class RetryPhoto:
    pass


@dataclass(frozen=True)
class PositionResolved:
    run_id: str
    draft: AttendanceDraft


@dataclass(frozen=True)
class PositionDenied:
    run_id: str


@dataclass(frozen=True)
class PositionFailed:
    run_id: str
    message: str


@dataclass(frozen=True)
class PhotoCaptured:
    run_id: str
    photo: str


@dataclass(frozen=True)
class ValidationSucceeded:
    run_id: str
    draft: AttendanceDraft


@dataclass(frozen=True)
class ValidationFailed:
    run_id: str
    message: str


@dataclass(frozen=True)
class Persisted:
    run_id: str
    record: AttendanceRecord


@dataclass(frozen=True)
class PersistFailed:
    run_id: str
    message: str


Event = Union[
    ActionRequested,
    ProceedAnyway,
    Cancel,
    Retry,
    Finalize,
    SaveWithIncident,
    RetryPhoto,
    PositionResolved,
    PositionDenied,
    PositionFailed,
    PhotoCaptured,
    ValidationSucceeded,
    ValidationFailed,
    Persisted,
    PersistFailed,
]
