from __future__ import annotations

from typing import Optional, Protocol

from .model import ValidationResult


class PhotoValidator(Protocol):
    """Judges identity and dress code of a captured photo.

    With no reference photo the validator only confirms that a human face is
    visible. Transport or parsing failures raise PhotoValidationError; a
    missing configuration returns ValidationResult.negative(...) instead.
    """

    def analyze(
        self,
        captured_photo: str,
        dress_code_description: str,
        reference_photo: Optional[str],
    ) -> ValidationResult:
        raise NotImplementedError
