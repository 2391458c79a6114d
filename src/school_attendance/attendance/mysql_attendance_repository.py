from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AbsentCategory, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    count_rows,
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_date,
    normalize_mysql_time,
    range_clauses,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, teacher_id, work_date, status, absent_category, check_in_time,
    check_out_time, notes, recorded_by, created_at, updated_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    category = r.get("absent_category")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        teacher_id=int(r["teacher_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        status=AttendanceStatus(r["status"]),
        absent_category=AbsentCategory(category) if category else None,
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        notes=r.get("notes"),
        recorded_by=r.get("recorded_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY teacher_id
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_teacher(
        self,
        teacher_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses, params = range_clauses("work_date", start_date, end_date)
        clauses.insert(0, "teacher_id=%s")
        params.insert(0, int(teacher_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_in_range(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses, params = range_clauses("work_date", start_date, end_date)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date ASC, teacher_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        return count_rows(self._conn_factory, "attendance_records")

    def count_for_teacher(self, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_records WHERE teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def upsert(
        self,
        *,
        teacher_id: int,
        work_date: date,
        status: AttendanceStatus,
        absent_category: Optional[AbsentCategory] = None,
        check_in_time: Optional[str] = None,
        check_out_time: Optional[str] = None,
        notes: Optional[str] = None,
        recorded_by: Optional[int] = None,
    ) -> AttendanceRecord:
        # One statement against uq_attendance_teacher_date: concurrent marks
        # for the same teacher and day cannot insert two rows.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    teacher_id, work_date, status, absent_category,
                    check_in_time, check_out_time, notes, recorded_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    absent_category=VALUES(absent_category),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    notes=VALUES(notes),
                    recorded_by=COALESCE(VALUES(recorded_by), recorded_by)
                """,
                (
                    int(teacher_id),
                    work_date,
                    status.value,
                    absent_category.value if absent_category else None,
                    check_in_time,
                    check_out_time,
                    notes,
                    recorded_by,
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE teacher_id=%s AND work_date=%s",
                (int(teacher_id), work_date),
            )
            return _to_record(fetchone(cur))

    def update(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        absent_category: Optional[AbsentCategory] = None,
        check_in_time: Optional[str] = None,
        check_out_time: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, absent_category=%s, check_in_time=%s, check_out_time=%s, notes=%s
                WHERE record_id=%s
                """,
                (
                    status.value,
                    absent_category.value if absent_category else None,
                    check_in_time,
                    check_out_time,
                    notes,
                    int(record_id),
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return fetchone(cur) is not None
