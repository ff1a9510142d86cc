from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceDraft, AttendanceRecord


class AttendanceRepository(Protocol):
    def insert(self, draft: AttendanceDraft) -> AttendanceRecord:
        """Persist a complete draft as a single atomic insert.

        Raises PersistenceError when the write is not acknowledged.
        """

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_user(
        self,
        user_id: int,
        *,
        until: Optional[datetime] = None,
        include_blocked: bool = False,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: datetime,
        end: datetime,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records with start <= timestamp <= end, newest first."""

        raise NotImplementedError

    def update_record(
        self,
        *,
        record_id: int,
        timestamp: datetime,
        ai_feedback: str,
        scheduled_start_override: Optional[str],
        scheduled_end_override: Optional[str],
    ) -> bool:
        """Admin-only correction of an existing record."""

        raise NotImplementedError

    def delete_by_id(self, record_id: int) -> bool:
        raise NotImplementedError
