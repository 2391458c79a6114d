from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import count_rows, db_cursor, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository


_COLUMNS = """
    teacher_id, teacher_code, full_name, department, email, phone, join_date,
    portal_username, portal_password_hash, portal_enabled
"""

_UPDATABLE = {
    "teacher_code",
    "full_name",
    "department",
    "email",
    "phone",
    "join_date",
    "portal_username",
    "portal_password_hash",
    "portal_enabled",
}


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        teacher_code=r["teacher_code"],
        full_name=r["full_name"],
        department=r.get("department"),
        email=r.get("email"),
        phone=r.get("phone"),
        join_date=r.get("join_date"),
        portal_username=r.get("portal_username"),
        portal_password_hash=r.get("portal_password_hash"),
        portal_enabled=bool(r.get("portal_enabled", False)),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY full_name")
            return [_to_teacher(r) for r in fetchall(cur)]

    def _get_one(self, where: str, value) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE {where}=%s", (value,))
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._get_one("teacher_id", int(teacher_id))

    def get_by_code(self, teacher_code: str) -> Optional[Teacher]:
        return self._get_one("teacher_code", teacher_code)

    def get_by_username(self, username: str) -> Optional[Teacher]:
        return self._get_one("portal_username", username)

    def count_all(self) -> int:
        return count_rows(self._conn_factory, "teachers")

    def list_codes(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_code FROM teachers")
            return [r["teacher_code"] for r in fetchall(cur)]

    def create(
        self,
        *,
        teacher_code: str,
        full_name: str,
        department: Optional[str],
        email: Optional[str] = None,
        phone: Optional[str] = None,
        join_date: Optional[date] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(teacher_code, full_name, department, email, phone, join_date)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (teacher_code, full_name, department, email, phone, join_date),
            )
            return int(cur.lastrowid)

    def update(self, teacher_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown teacher columns: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(teacher_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE teachers SET {assignments} WHERE teacher_id=%s",
                (*fields.values(), int(teacher_id)),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when values are unchanged
            cur.execute("SELECT 1 AS found FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            return fetchone(cur) is not None

    def delete(self, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            return cur.rowcount > 0
