from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsentCategory, AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_teacher(
        self,
        teacher_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records for one teacher, newest first, optionally bounded on either side."""

        raise NotImplementedError

    def get_in_range(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_for_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError

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
        """Insert or update the single record for (teacher_id, work_date) atomically."""

        raise NotImplementedError

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
        raise NotImplementedError
