from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_write, fetchall, fetchone
from .model import Venue
from .repository import VenueRepository

_COLUMNS = "venue_id, name, address, city, lat, lng, radius_meters"


def _to_venue(r: dict) -> Venue:
    return Venue(
        venue_id=int(r["venue_id"]),
        name=r["name"],
        address=r.get("address") or "",
        city=r.get("city") or "",
        lat=float(r["lat"]),
        lng=float(r["lng"]),
        radius_meters=float(r["radius_meters"]),
    )


class MySQLVenueRepository(VenueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Venue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM venues ORDER BY name")
            return [_to_venue(r) for r in fetchall(cur)]

    def get_by_id(self, venue_id: int) -> Optional[Venue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM venues WHERE venue_id=%s", (venue_id,))
            r = fetchone(cur)
            return _to_venue(r) if r else None

    def create(self, *, name: str, address: str, city: str, lat: float, lng: float, radius_meters: float) -> int:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO venues(name, address, city, lat, lng, radius_meters)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, address, city, lat, lng, radius_meters),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        venue_id: int,
        name: str,
        address: str,
        city: str,
        lat: float,
        lng: float,
        radius_meters: float,
    ) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE venues
                SET name=%s, address=%s, city=%s, lat=%s, lng=%s, radius_meters=%s
                WHERE venue_id=%s
                """,
                (name, address, city, lat, lng, radius_meters, venue_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, venue_id: int) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM venues WHERE venue_id=%s", (venue_id,))
            return cur.rowcount > 0
