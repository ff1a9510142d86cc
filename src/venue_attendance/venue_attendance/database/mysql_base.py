from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import PersistenceError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def db_write(conn_factory: DatabaseConnection):
    """Like db_cursor, but driver errors surface as PersistenceError."""
    try:
        with db_cursor(conn_factory) as (conn, cur):
            yield conn, cur
    except mysql.connector.Error as e:
        raise PersistenceError(f"Error de base de datos: {e}") from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_json_column(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def load_json_column(value: Any, default: Any) -> Any:
    """Decode a JSON column; mysql-connector may hand back str, bytes or None."""

    if value is None or value == "":
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return default
    return value
