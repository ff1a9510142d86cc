from __future__ import annotations

import math
from dataclasses import dataclass


def _flag(payload: dict, key: str) -> bool:
    value = payload[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a JSON boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of the photo validator for one captured frame."""

    identity_match: bool
    dress_code_matches: bool
    description: str
    confidence: float

    @classmethod
    def negative(cls, description: str) -> "ValidationResult":
        return cls(identity_match=False, dress_code_matches=False, description=description, confidence=0.0)

    @classmethod
    def from_payload(cls, payload: dict) -> "ValidationResult":
        """Build from the validator's JSON answer; raises KeyError/TypeError/ValueError if malformed."""
        confidence = float(payload["confidence"])
        if not math.isfinite(confidence):
            raise ValueError(f"confidence must be finite, got {confidence!r}")
        return cls(
            identity_match=_flag(payload, "identityMatch"),
            dress_code_matches=_flag(payload, "dressCodeMatches"),
            description=str(payload["description"]),
            confidence=min(max(confidence, 0.0), 1.0),
        )
