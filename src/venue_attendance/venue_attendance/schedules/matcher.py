"""Weekly schedule window matching.

Times are compared at minute resolution, the same as comparing "HH:MM"
strings. An entry with start > end is an overnight shift: on its own day it
matches from start until midnight, and on the following day it matches
until end.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import format_hhmm, minutes_of_day, weekday_name
from .model import WorkSchedule


def schedule_for_day(schedules: Sequence[WorkSchedule], day: date) -> Optional[WorkSchedule]:
    """First entry declared for the weekday of `day` (at most one is expected)."""
    name = weekday_name(day)
    return next((s for s in schedules if s.day == name), None)


def _matches(slot: WorkSchedule, *, today: str, yesterday: str, now_min: int) -> bool:
    start = minutes_of_day(slot.start)
    end = minutes_of_day(slot.end)

    if slot.day == today:
        if start <= end:
            return start <= now_min <= end
        return now_min >= start

    if slot.day == yesterday and start > end:
        return now_min <= end

    return False


def is_within_schedule(schedules: Sequence[WorkSchedule], now: datetime) -> bool:
    if not schedules:
        return True

    today = weekday_name(now.date())
    yesterday = weekday_name(now.date() - timedelta(days=1))
    now_min = minutes_of_day(now)

    return any(_matches(s, today=today, yesterday=yesterday, now_min=now_min) for s in schedules)


def get_schedule_delay_info(schedules: Sequence[WorkSchedule], now: datetime) -> Optional[str]:
    """Lateness message relative to today's shift start, or None when on time.

    Only the entry for today's weekday is inspected; a shift that started
    yesterday and runs past midnight yields None.
    """
    slot = schedule_for_day(schedules, now.date())
    if not slot:
        return None

    diff = minutes_of_day(now) - minutes_of_day(slot.start)
    if diff <= 0:
        return None

    hours, mins = divmod(diff, 60)
    delay = f"{hours} hrs {mins} mins" if hours > 0 else f"{mins} mins"
    return f"Horario asignado: {format_hhmm(slot.start)}. Demora: {delay}"
