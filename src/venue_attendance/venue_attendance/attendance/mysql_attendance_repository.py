from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import DressCodeStatus, IdentityStatus, LocationStatus, LogType, ScheduleStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_write, fetchall, fetchone
from .feedback import decode_overrides, encode_overrides
from .model import AttendanceDraft, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "log_id, user_id, user_name, legajo, `timestamp`, type, location_id, location_name, "
    "location_status, schedule_status, dress_code_status, identity_status, photo_evidence, ai_feedback"
)


def _to_record(r: dict) -> AttendanceRecord:
    decoded = decode_overrides(r.get("ai_feedback"))
    return AttendanceRecord(
        record_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        legajo=r.get("legajo") or "",
        timestamp=r["timestamp"],
        type=LogType(r["type"]),
        location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
        location_name=r.get("location_name") or "",
        location_status=LocationStatus(r["location_status"]),
        schedule_status=ScheduleStatus(r["schedule_status"]),
        dress_code_status=DressCodeStatus(r["dress_code_status"]),
        identity_status=IdentityStatus(r["identity_status"]),
        photo_evidence=r.get("photo_evidence") or "",
        ai_feedback=decoded.feedback,
        scheduled_start_override=decoded.start,
        scheduled_end_override=decoded.end,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, draft: AttendanceDraft) -> AttendanceRecord:
        if not draft.is_complete:
            raise ValidationError("El registro de fichada está incompleto")

        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(user_id, user_name, legajo, `timestamp`, type, location_id,
                    location_name, location_status, schedule_status, dress_code_status, identity_status,
                    photo_evidence, ai_feedback)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.user_id,
                    draft.user_name,
                    draft.legajo,
                    draft.timestamp,
                    draft.type.value,
                    draft.location_id,
                    draft.location_name,
                    draft.location_status.value,
                    draft.schedule_status.value,
                    draft.dress_code_status.value,
                    draft.identity_status.value,
                    draft.photo_evidence,
                    encode_overrides(draft.ai_feedback),
                ),
            )
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            user_id=draft.user_id,
            user_name=draft.user_name,
            legajo=draft.legajo,
            timestamp=draft.timestamp,
            type=draft.type,
            location_id=draft.location_id,
            location_name=draft.location_name,
            location_status=draft.location_status,
            schedule_status=draft.schedule_status,
            dress_code_status=draft.dress_code_status,
            identity_status=draft.identity_status,
            photo_evidence=draft.photo_evidence,
            ai_feedback=draft.ai_feedback,
        )

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_logs WHERE log_id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_latest_for_user(
        self,
        user_id: int,
        *,
        until: Optional[datetime] = None,
        include_blocked: bool = False,
    ) -> Optional[AttendanceRecord]:
        where = ["user_id=%s"]
        params: list = [user_id]
        if until is not None:
            where.append("`timestamp` <= %s")
            params.append(until)
        if not include_blocked:
            where.append("type <> %s")
            params.append(LogType.BLOCKED.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE {' AND '.join(where)}
                ORDER BY `timestamp` DESC, log_id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs ORDER BY `timestamp` DESC, log_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_range(
        self,
        *,
        start: datetime,
        end: datetime,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["`timestamp` >= %s", "`timestamp` <= %s"]
        params: list = [start, end]
        if user_id is not None:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE {' AND '.join(where)}
                ORDER BY `timestamp` DESC, log_id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def update_record(
        self,
        *,
        record_id: int,
        timestamp: datetime,
        ai_feedback: str,
        scheduled_start_override: Optional[str],
        scheduled_end_override: Optional[str],
    ) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_logs SET `timestamp`=%s, ai_feedback=%s WHERE log_id=%s",
                (
                    timestamp,
                    encode_overrides(ai_feedback, scheduled_start_override, scheduled_end_override),
                    record_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, record_id: int) -> bool:
        with db_write(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs WHERE log_id=%s", (record_id,))
            return cur.rowcount > 0
