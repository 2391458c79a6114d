from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import count_rows, db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository


def _to_department(r: dict) -> Department:
    return Department(
        dept_id=int(r["dept_id"]),
        name=r["dept_name"],
        description=r.get("description"),
        created_at=r.get("created_at"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name, description, created_at FROM departments ORDER BY dept_name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT dept_id, dept_name, description, created_at FROM departments WHERE dept_id=%s",
                (int(dept_id),),
            )
            r = fetchone(cur)
            return _to_department(r) if r else None

    def count_all(self) -> int:
        return count_rows(self._conn_factory, "departments")

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT dept_id, dept_name, description, created_at FROM departments WHERE dept_name=%s",
                (name,),
            )
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(dept_name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update(self, dept_id: int, *, name: str, description: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET dept_name=%s, description=%s WHERE dept_id=%s",
                (name, description, int(dept_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM departments WHERE dept_id=%s", (int(dept_id),))
            return fetchone(cur) is not None

    def delete(self, dept_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE dept_id=%s", (int(dept_id),))
            return cur.rowcount > 0
