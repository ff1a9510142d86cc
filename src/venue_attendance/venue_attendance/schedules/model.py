from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Iterable, Sequence

from ..common.datetime_utils import format_hhmm, normalize_weekday, parse_hhmm
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class WorkSchedule:
    """One weekly recurring shift. start > end means the shift wraps past midnight."""

    day: str
    start: time
    end: time

    @property
    def is_overnight(self) -> bool:
        return self.start > self.end

    def to_dict(self) -> dict:
        return {"day": self.day, "start": format_hhmm(self.start), "end": format_hhmm(self.end)}


def parse_schedule_entry(raw: Any) -> WorkSchedule:
    if isinstance(raw, WorkSchedule):
        return raw
    if not isinstance(raw, dict):
        raise ValidationError("Horario inválido")

    day = normalize_weekday(str(raw.get("day", "")))
    if not day:
        raise ValidationError(f"Día inválido: {raw.get('day')!r}")

    try:
        start = parse_hhmm(str(raw.get("start", "")))
        end = parse_hhmm(str(raw.get("end", "")))
    except ValueError:
        raise ValidationError("Hora inválida (HH:MM)")

    return WorkSchedule(day=day, start=start, end=end)


def parse_schedule(raw: Iterable[Any] | None) -> list[WorkSchedule]:
    return [parse_schedule_entry(item) for item in (raw or [])]


def schedule_to_json(schedules: Sequence[WorkSchedule]) -> list[dict]:
    return [s.to_dict() for s in schedules]
