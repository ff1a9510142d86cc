from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Worker role. Values are the labels stored in the database."""

    ADMIN = "Admin"
    WAITER = "Mozo"
    EXTRA_WAITER = "Mozo Extra"
    KITCHEN = "Cocina"
    SECURITY = "Seguridad"
    OTHER = "Otro"

    @property
    def skips_biometrics(self) -> bool:
        return self is Role.EXTRA_WAITER


class LogType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    BLOCKED = "BLOCKED"


class LocationStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"
    SKIPPED = "SKIPPED"


class ScheduleStatus(str, Enum):
    ON_TIME = "ON_TIME"
    OFF_SCHEDULE = "OFF_SCHEDULE"


class DressCodeStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    SKIPPED = "SKIPPED"


class IdentityStatus(str, Enum):
    MATCH = "MATCH"
    NO_MATCH = "NO_MATCH"
    NO_REF = "NO_REF"
    SKIPPED = "SKIPPED"


class PresenceStatus(str, Enum):
    """Live classification of an assigned worker at a venue."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    NO_SHIFT = "NO_SHIFT"


class IncidentType(str, Enum):
    LATE = "LATE"
    ABSENCE = "ABSENCE"
    DISCOUNT = "DISCOUNT"
    BONUS = "BONUS"
    DAMAGE = "DAMAGE"
