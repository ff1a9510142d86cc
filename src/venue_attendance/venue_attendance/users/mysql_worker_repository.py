from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_write, dump_json_column, fetchall, fetchone, load_json_column
from ..schedules.model import WorkSchedule, parse_schedule, schedule_to_json
from .model import Worker
from .repository import WorkerRepository

_COLUMNS = (
    "worker_id, legajo, dni, password_hash, name, role, dress_code, "
    "reference_image, schedule, assigned_locations, hourly_rate"
)


def _to_worker(r: dict) -> Worker:
    return Worker(
        worker_id=int(r["worker_id"]),
        legajo=r.get("legajo") or "",
        dni=r["dni"],
        password_hash=r["password_hash"],
        name=r["name"],
        role=Role(r["role"]),
        dress_code=r.get("dress_code") or "",
        reference_image=r.get("reference_image") or None,
        schedule=tuple(parse_schedule(load_json_column(r.get("schedule"), []))),
        assigned_locations=tuple(int(v) for v in load_json_column(r.get("assigned_locations"), [])),
        hourly_rate=float(r.get("hourly_rate") or 0),
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE worker_id=%s", (worker_id,))
            row = fetchone(cur)
            return _to_worker(row) if row else None

    def find_by_identifier(self, identifier: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM workers WHERE dni=%s OR legajo=%s ORDER BY worker_id LIMIT 1",
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _to_worker(row) if row else None

    def list_all(self) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers ORDER BY name")
            return [_to_worker(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        legajo: str,
        dni: str,
        password_hash: str,
        name: str,
        role: Role,
        dress_code: str,
        reference_image: Optional[str],
        schedule: Sequence[WorkSchedule],
        assigned_locations: Sequence[int],
        hourly_rate: float,
    ) -> int:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO workers(legajo, dni, password_hash, name, role, dress_code,
                                    reference_image, schedule, assigned_locations, hourly_rate)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    legajo,
                    dni,
                    password_hash,
                    name,
                    role.value,
                    dress_code,
                    reference_image,
                    dump_json_column(schedule_to_json(schedule)),
                    dump_json_column(list(assigned_locations)),
                    hourly_rate,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        worker_id: int,
        legajo: str,
        dni: str,
        name: str,
        role: Role,
        dress_code: str,
        reference_image: Optional[str],
        schedule: Sequence[WorkSchedule],
        assigned_locations: Sequence[int],
        hourly_rate: float,
        password_hash: Optional[str] = None,
    ) -> bool:
        sets = [
            "legajo=%s",
            "dni=%s",
            "name=%s",
            "role=%s",
            "dress_code=%s",
            "reference_image=%s",
            "schedule=%s",
            "assigned_locations=%s",
            "hourly_rate=%s",
        ]
        params: list = [
            legajo,
            dni,
            name,
            role.value,
            dress_code,
            reference_image,
            dump_json_column(schedule_to_json(schedule)),
            dump_json_column(list(assigned_locations)),
            hourly_rate,
        ]
        if password_hash:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(worker_id)

        with db_write(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE workers SET {', '.join(sets)} WHERE worker_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete_by_id(self, worker_id: int) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM workers WHERE worker_id=%s", (worker_id,))
            return cur.rowcount > 0
