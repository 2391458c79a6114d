from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..analytics import engine
from ..analytics.weights import DEFAULT_WEIGHTS, AttendanceWeights
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_iso_date
from ..core.exceptions import NotFoundError, ValidationError
from ..holidays.repository import HolidayRepository
from ..holidays.service import HolidayFilter
from ..teachers.repository import TeacherRepository

EXPORT_COLUMNS = [
    ("teacherId", "Teacher ID"),
    ("teacherName", "Teacher Name"),
    ("department", "Department"),
    ("totalAbsences", "Total Absences"),
    ("officialLeave", "Official Leave"),
    ("privateLeave", "Private Leave"),
    ("sickLeave", "Sick Leave"),
    ("shortLeave", "Short Leave"),
    ("attendanceRate", "Attendance Rate"),
]


@dataclass(frozen=True)
class TeacherReport:
    teacher: dict
    start: Optional[str]
    end: Optional[str]
    records: list[dict]
    counts: dict
    breakdown: dict
    attendance_rate: float

    def to_dict(self) -> dict:
        return {
            "teacher": self.teacher,
            "startDate": self.start,
            "endDate": self.end,
            "records": self.records,
            "summary": self.counts,
            "absences": self.breakdown,
            "attendanceRate": self.attendance_rate,
        }


@dataclass(frozen=True)
class DailyReport:
    date: str
    holiday: Optional[str]
    rows: list[dict]
    counts: dict
    attendance_rate: float

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "isHoliday": self.holiday is not None,
            "holidayName": self.holiday,
            "rows": self.rows,
            "summary": self.counts,
            "attendanceRate": self.attendance_rate,
        }


def _counts_dict(counts: engine.StatusCounts) -> dict:
    return {
        "total": counts.total,
        "present": counts.present,
        "absent": counts.absent,
        "halfDay": counts.half_day,
        "shortLeave": counts.short_leave,
    }


class ReportService:
    """Shapes engine output into export rows and printable reports."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        holidays: HolidayRepository,
        *,
        weights: AttendanceWeights = DEFAULT_WEIGHTS,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._holidays = holidays
        self._holiday_filter = HolidayFilter(holidays)
        self._weights = weights

    def get_export_data(self, start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
        """One row per teacher, ordered by teacher code.

        Absence counts cover every record in the range; the rate is the
        historical rate with holiday dates left out.
        """

        self._check_range(start, end)
        records = self._attendance.get_in_range(start, end)
        holidays = self._holiday_filter.holiday_dates(start, end)

        by_teacher: dict[int, list] = {}
        for r in records:
            by_teacher.setdefault(r.teacher_id, []).append(r)

        rows: list[dict] = []
        for teacher in sorted(self._teachers.list_all(), key=lambda t: (t.teacher_code, t.teacher_id)):
            own = by_teacher.get(teacher.teacher_id, [])
            breakdown = engine.compute_absence_breakdown(own, start, end)
            rated = engine.select_records(own, start=start, end=end, holidays=holidays)
            rows.append(
                {
                    "teacherId": teacher.teacher_code,
                    "teacherName": teacher.full_name,
                    "department": engine.department_key(teacher.department),
                    "totalAbsences": breakdown.total_absent,
                    "officialLeave": breakdown.official_leave,
                    "privateLeave": breakdown.private_leave,
                    "sickLeave": breakdown.sick_leave,
                    "shortLeave": breakdown.short_leave,
                    "attendanceRate": round(engine.historical_rate(rated, self._weights), 2),
                    "recordCount": len(rated),
                }
            )
        return rows

    def export_csv(self, start: Optional[date] = None, end: Optional[date] = None) -> bytes:
        """Export rows as CSV bytes with a UTF-8 BOM so spreadsheet apps pick the encoding."""
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=[key for key, _ in EXPORT_COLUMNS], extrasaction="ignore")
        writer.writerow(dict(EXPORT_COLUMNS))
        for row in self.get_export_data(start, end):
            writer.writerow({**row, "attendanceRate": f"{row['attendanceRate']}%"})
        return out.getvalue().encode("utf-8-sig")

    def build_teacher_report(
        self,
        teacher_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> TeacherReport:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        self._check_range(start, end)

        records = list(self._attendance.get_by_teacher(teacher_id, start, end))
        holidays = self._holiday_filter.holiday_dates(start, end)
        rated = engine.select_records(records, start=start, end=end, holidays=holidays)

        return TeacherReport(
            teacher=teacher.to_dict(),
            start=format_iso_date(start) if start else None,
            end=format_iso_date(end) if end else None,
            records=[r.to_dict() for r in records],
            counts=_counts_dict(engine.count_statuses(records)),
            breakdown=engine.compute_absence_breakdown(records, start, end).to_dict(),
            attendance_rate=round(engine.historical_rate(rated, self._weights), 2),
        )

    def build_daily_report(self, day: date) -> DailyReport:
        """Every teacher with their status for `day`; unmarked teachers have status None."""
        teachers = sorted(self._teachers.list_all(), key=lambda t: (t.full_name, t.teacher_id))
        records = {r.teacher_id: r for r in self._attendance.get_by_date(day)}
        holiday = self._holidays.get_by_date(day)

        rows: list[dict] = []
        for teacher in teachers:
            record = records.get(teacher.teacher_id)
            rows.append(
                {
                    "teacher": teacher.to_summary(),
                    "status": record.status.value if record else None,
                    "absentCategory": record.absent_category.value if record and record.absent_category else None,
                    "checkInTime": record.check_in_time if record else None,
                    "checkOutTime": record.check_out_time if record else None,
                    "notes": record.notes if record else None,
                }
            )

        marked = list(records.values())
        rate = 0.0 if holiday else engine.org_wide_rate(marked, len(teachers), self._weights)
        return DailyReport(
            date=format_iso_date(day),
            holiday=holiday.name if holiday else None,
            rows=rows,
            counts=_counts_dict(engine.count_statuses(marked)),
            attendance_rate=round(rate, 2),
        )

    @staticmethod
    def _check_range(start: Optional[date], end: Optional[date]) -> None:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
