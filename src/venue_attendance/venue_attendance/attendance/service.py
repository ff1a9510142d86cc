from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import day_bounds, parse_hhmm
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import LogType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..schedules.matcher import get_schedule_delay_info, is_within_schedule, schedule_for_day
from ..users.model import Worker
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .status import is_clocked_in, next_action


@dataclass(frozen=True)
class DashboardStatus:
    clocked_in: bool
    next_action: LogType
    last_record: Optional[AttendanceRecord]
    within_schedule: bool
    delay_info: Optional[str]
    today_shift: Optional[str]

    def to_dict(self) -> dict:
        return {
            "clocked_in": self.clocked_in,
            "next_action": self.next_action.value,
            "last_record": self.last_record.to_dict() if self.last_record else None,
            "within_schedule": self.within_schedule,
            "delay_info": self.delay_info,
            "today_shift": self.today_shift,
        }


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def dashboard_status(self, worker: Worker, *, now: datetime) -> DashboardStatus:
        latest = self._attendance.get_latest_for_user(worker.worker_id, until=now)
        slot = schedule_for_day(worker.schedule, now.date())
        return DashboardStatus(
            clocked_in=is_clocked_in(latest),
            next_action=next_action(latest),
            last_record=latest,
            within_schedule=is_within_schedule(worker.schedule, now),
            delay_info=get_schedule_delay_info(worker.schedule, now),
            today_shift=f"{slot.start:%H:%M} - {slot.end:%H:%M}" if slot else None,
        )

    def recent_records(self, *, limit: int = DEFAULT_HISTORY_LIMIT):
        return self._attendance.list_recent(limit)

    def records_between(self, *, start: date, end: date, user_id: Optional[int] = None):
        if end < start:
            raise ValidationError("La fecha de fin es anterior a la de inicio")
        return self._attendance.list_range(start=day_bounds(start)[0], end=day_bounds(end)[1], user_id=user_id)

    def todays_records(self, *, now: datetime):
        first, last = day_bounds(now.date())
        return self._attendance.list_range(start=first, end=last)

    @staticmethod
    def _clean_override(value: Optional[str]) -> Optional[str]:
        v = (value or "").strip()
        if not v:
            return None
        try:
            return parse_hhmm(v).strftime("%H:%M")
        except ValueError:
            raise ValidationError("Hora inválida (HH:MM)")

    def edit_record(
        self,
        *,
        current_role: Role,
        record_id: int,
        timestamp: Optional[datetime] = None,
        ai_feedback: Optional[str] = None,
        scheduled_start_override: Optional[str] = None,
        scheduled_end_override: Optional[str] = None,
        clear_overrides: bool = False,
    ) -> AttendanceRecord:
        """Admin correction. Fields left as None keep their stored value."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")

        current = self._attendance.get_by_id(int(record_id))
        if not current:
            raise NotFoundError("Fichada inexistente")

        start = None if clear_overrides else current.scheduled_start_override
        end = None if clear_overrides else current.scheduled_end_override
        if scheduled_start_override is not None:
            start = self._clean_override(scheduled_start_override)
        if scheduled_end_override is not None:
            end = self._clean_override(scheduled_end_override)

        fields = dict(
            timestamp=timestamp or current.timestamp,
            ai_feedback=current.ai_feedback if ai_feedback is None else ai_feedback.strip(),
            scheduled_start_override=start,
            scheduled_end_override=end,
        )
        if not self._attendance.update_record(record_id=current.record_id, **fields):
            raise NotFoundError("Fichada inexistente")

        return AttendanceRecord(**{**current.__dict__, **fields})

    def delete_record(self, *, current_role: Role, record_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")
        if not self._attendance.delete_by_id(int(record_id)):
            raise NotFoundError("Fichada inexistente")
