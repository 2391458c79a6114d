from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AlertSeverity, AlertType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count_rows, db_cursor, fetchall, fetchone
from .model import Alert
from .repository import AlertRepository

_COLUMNS = "alert_id, teacher_id, alert_type, message, severity, is_read, created_at"


def _to_alert(r: dict) -> Alert:
    return Alert(
        alert_id=int(r["alert_id"]),
        teacher_id=int(r["teacher_id"]),
        alert_type=AlertType(r["alert_type"]),
        message=r["message"],
        severity=AlertSeverity(r["severity"]),
        is_read=bool(r.get("is_read", False)),
        created_at=r.get("created_at"),
    )


class MySQLAlertRepository(AlertRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent(self, *, limit: int, unread_only: bool = True) -> Sequence[Alert]:
        where = "WHERE is_read=0" if unread_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM alerts {where} ORDER BY created_at DESC, alert_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_alert(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Alert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM alerts ORDER BY alert_id")
            return [_to_alert(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        return count_rows(self._conn_factory, "alerts")

    def get_by_id(self, alert_id: int) -> Optional[Alert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM alerts WHERE alert_id=%s", (int(alert_id),))
            r = fetchone(cur)
            return _to_alert(r) if r else None

    def latest_unread_for_teacher(self, teacher_id: int, alert_type: AlertType) -> Optional[Alert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM alerts
                WHERE teacher_id=%s AND alert_type=%s AND is_read=0
                ORDER BY created_at DESC, alert_id DESC
                LIMIT 1
                """,
                (int(teacher_id), alert_type.value),
            )
            r = fetchone(cur)
            return _to_alert(r) if r else None

    def create(
        self,
        *,
        teacher_id: int,
        alert_type: AlertType,
        message: str,
        severity: AlertSeverity,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO alerts(teacher_id, alert_type, message, severity) VALUES(%s,%s,%s,%s)",
                (int(teacher_id), alert_type.value, message, severity.value),
            )
            return int(cur.lastrowid)

    def mark_read(self, alert_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE alerts SET is_read=1 WHERE alert_id=%s", (int(alert_id),))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM alerts WHERE alert_id=%s", (int(alert_id),))
            return fetchone(cur) is not None
