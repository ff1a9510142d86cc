from __future__ import annotations

from datetime import date, datetime, time, timedelta

# Index 0 is Monday, matching date.weekday().
WEEKDAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")

_ENGLISH_WEEKDAYS = {
    "monday": "Lunes",
    "tuesday": "Martes",
    "wednesday": "Miércoles",
    "thursday": "Jueves",
    "friday": "Viernes",
    "saturday": "Sábado",
    "sunday": "Domingo",
}


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string into a time (seconds are always zero)."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_of_day(value: time | datetime) -> int:
    """Minute-resolution position within the day; seconds are discarded."""
    return value.hour * 60 + value.minute


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def normalize_weekday(value: str) -> str | None:
    """Return the canonical weekday name for a Spanish or English label."""
    v = (value or "").strip()
    for name in WEEKDAY_NAMES:
        if v.lower() == name.lower():
            return name
    return _ENGLISH_WEEKDAYS.get(v.lower())


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last representable instant of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
