from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..storage.images import Fallback, ImageStore, is_data_url
from .repository import COMPANY_LOGO_KEY, SettingsRepository

_logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, settings: SettingsRepository, images: ImageStore, clock: Callable[[], datetime] = now_local):
        self._settings = settings
        self._images = images
        self._clock = clock

    def get_company_logo(self) -> Optional[str]:
        return self._settings.get(COMPANY_LOGO_KEY) or None

    def save_company_logo(self, *, current_role: Role, data_url: str) -> Optional[str]:
        """Upload and store the logo. Returns its URL, or None when the upload fell back."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")
        if not is_data_url(data_url):
            raise ValidationError("Imagen inválida")

        name = f"company_logo_{int(self._clock().timestamp() * 1000)}.jpg"
        outcome = self._images.upload(data_url, folder="config", file_name=name)
        if isinstance(outcome, Fallback):
            _logger.warning("Company logo not saved: %s", outcome.reason)
            return None

        self._settings.put(COMPANY_LOGO_KEY, outcome.url)
        _logger.info("Company logo updated: %s", outcome.url)
        return outcome.url
