from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_write, fetchone
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM app_settings WHERE `key`=%s", (key,))
            r = fetchone(cur)
            return r["value"] if r else None

    def put(self, key: str, value: Optional[str]) -> None:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_settings(`key`, value) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE value=VALUES(value)
                """,
                (key, value),
            )
