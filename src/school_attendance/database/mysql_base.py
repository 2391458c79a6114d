from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

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


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def range_clauses(column: str, start: Optional[date], end: Optional[date]) -> tuple[list[str], list[object]]:
    """WHERE fragments for an optional inclusive date range on `column`."""
    clauses: list[str] = []
    params: list[object] = []
    if start is not None:
        clauses.append(f"{column} >= %s")
        params.append(start)
    if end is not None:
        clauses.append(f"{column} <= %s")
        params.append(end)
    return clauses, params


def normalize_mysql_date(value: Any) -> date:
    """mysql-connector returns DATE as date, but some drivers hand back datetime or str."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")


def normalize_mysql_time(value: Any) -> Optional[str]:
    """Times are stored as short strings; TIME columns from older schemas arrive as timedelta."""

    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    total = getattr(value, "total_seconds", None)
    if total is not None:
        seconds = int(total()) % 86400
        return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}"
    return str(value)


def count_rows(conn_factory: DatabaseConnection, table: str) -> int:
    """COUNT(*) over a whole table; `table` is a fixed identifier, never user input."""
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(f"SELECT COUNT(*) AS n FROM {table}")
        r = fetchone(cur)
        return int(r["n"]) if r else 0
