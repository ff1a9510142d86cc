"""Schedule overrides stored inside the ai_feedback column.

Stored form: "<feedback> |||SCH_START:<start>|SCH_END:<end>|||".
Plain feedback without overrides is stored unchanged.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_SEPARATOR = " |||"
_START_RE = re.compile(r"SCH_START:([^|]*)")
_END_RE = re.compile(r"SCH_END:([^|]*)")


@dataclass(frozen=True)
class DecodedFeedback:
    feedback: str
    start: Optional[str] = None
    end: Optional[str] = None


def encode_overrides(feedback: str, start: Optional[str] = None, end: Optional[str] = None) -> str:
    clean = (feedback or "").split(_SEPARATOR)[0]
    if not start and not end:
        return clean
    return f"{clean}{_SEPARATOR}SCH_START:{start or ''}|SCH_END:{end or ''}|||"


def decode_overrides(stored: Optional[str]) -> DecodedFeedback:
    if not stored:
        return DecodedFeedback(feedback="")

    parts = stored.split(_SEPARATOR)
    if len(parts) < 2 or not parts[1]:
        return DecodedFeedback(feedback=parts[0])

    start = _START_RE.search(parts[1])
    end = _END_RE.search(parts[1])
    return DecodedFeedback(
        feedback=parts[0],
        start=(start.group(1) or None) if start else None,
        end=(end.group(1) or None) if end else None,
    )
