from __future__ import annotations

from typing import Optional, Protocol

COMPANY_LOGO_KEY = "company_logo"


class SettingsRepository(Protocol):
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, key: str, value: Optional[str]) -> None:
        """Insert or replace a single setting."""

        raise NotImplementedError
