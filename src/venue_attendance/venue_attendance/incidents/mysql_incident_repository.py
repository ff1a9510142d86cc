from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import IncidentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_write, fetchall
from .model import Incident
from .repository import IncidentRepository


def _to_incident(r: dict) -> Incident:
    return Incident(
        incident_id=int(r["incident_id"]),
        user_id=int(r["user_id"]),
        incident_date=r["incident_date"],
        type=IncidentType(r["type"]),
        amount=float(r["amount"]),
        description=r.get("description") or "",
    )


class MySQLIncidentRepository(IncidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_filtered(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Incident]:
        where = []
        params: list = []
        if user_id is not None:
            where.append("user_id=%s")
            params.append(user_id)
        if start is not None:
            where.append("incident_date >= %s")
            params.append(start)
        if end is not None:
            where.append("incident_date <= %s")
            params.append(end)

        sql = "SELECT incident_id, user_id, incident_date, type, amount, description FROM incidents"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY incident_date DESC, incident_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_incident(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, incident_date: date, type: IncidentType, amount: float, description: str) -> int:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO incidents(user_id, incident_date, type, amount, description)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user_id, incident_date, type.value, amount, description),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        incident_id: int,
        user_id: int,
        incident_date: date,
        type: IncidentType,
        amount: float,
        description: str,
    ) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE incidents
                SET user_id=%s, incident_date=%s, type=%s, amount=%s, description=%s
                WHERE incident_id=%s
                """,
                (user_id, incident_date, type.value, amount, description, incident_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, incident_id: int) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM incidents WHERE incident_id=%s", (incident_id,))
            return cur.rowcount > 0
