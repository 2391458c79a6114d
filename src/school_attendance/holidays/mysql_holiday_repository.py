from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import HolidayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count_rows, db_cursor, fetchall, fetchone, normalize_mysql_date, range_clauses
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, holiday_date, name, holiday_type, description, created_by"


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        holiday_date=normalize_mysql_date(r["holiday_date"]),
        name=r["name"],
        holiday_type=HolidayType(r.get("holiday_type") or HolidayType.PUBLIC.value),
        description=r.get("description"),
        created_by=r.get("created_by"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_in_range(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[Holiday]:
        clauses, params = range_clauses("holiday_date", start_date, end_date)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays {where} ORDER BY holiday_date", tuple(params))
            return [_to_holiday(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        return count_rows(self._conn_factory, "holidays")

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_date=%s", (holiday_date,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def create(
        self,
        *,
        holiday_date: date,
        name: str,
        holiday_type: HolidayType,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_date, name, holiday_type, description, created_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (holiday_date, name, holiday_type.value, description, created_by),
            )
            return int(cur.lastrowid)

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        name: str,
        holiday_type: HolidayType,
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET holiday_date=%s, name=%s, holiday_type=%s, description=%s
                WHERE holiday_id=%s
                """,
                (holiday_date, name, holiday_type.value, description, int(holiday_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return fetchone(cur) is not None

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
