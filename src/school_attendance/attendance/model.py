from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsentCategory, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one teacher's status for one calendar date.

    (teacher_id, work_date) is unique; absent_category is set iff status is absent.
    """

    record_id: int
    teacher_id: int
    work_date: date
    status: AttendanceStatus
    absent_category: Optional[AbsentCategory] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "teacherId": self.teacher_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "absentCategory": self.absent_category.value if self.absent_category else None,
            "checkInTime": self.check_in_time,
            "checkOutTime": self.check_out_time,
            "notes": self.notes,
            "recordedBy": self.recorded_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class AttendanceMark:
    """Validated input for marking one teacher on one day."""

    teacher_id: int
    status: AttendanceStatus
    absent_category: Optional[AbsentCategory] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: Optional[str] = None
