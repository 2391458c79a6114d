from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone, tzinfo
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import days_before, format_iso_date, today_in, trailing_window, week_start
from ..core.constants import (
    DEFAULT_PATTERN_WEEKS,
    DEFAULT_STATS_WINDOW_DAYS,
    DEFAULT_TOP_PERFORMERS_LIMIT,
    MAX_PATTERN_WEEKS,
    MAX_TREND_DAYS,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..holidays.service import HolidayFilter
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository
from . import engine
from .weights import DEFAULT_WEIGHTS, AttendanceWeights

Clock = Callable[[], datetime]


class StatsService:
    """Dashboard and analytics figures.

    Loads rows from the stores, hands them to the engine together with the
    holiday set, and rounds the results for display. "Today" is the calendar
    date in the configured reporting timezone.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        departments: DepartmentRepository,
        holiday_filter: HolidayFilter,
        *,
        weights: AttendanceWeights = DEFAULT_WEIGHTS,
        timezone: Optional[tzinfo] = None,
        window_days: int = DEFAULT_STATS_WINDOW_DAYS,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._departments = departments
        self._holidays = holiday_filter
        self._weights = weights
        self._tz = timezone or dt_timezone.utc
        self._window_days = int(window_days)
        self._clock = clock

    def today(self) -> date:
        now = self._clock() if self._clock else None
        return today_in(self._tz, now=now)

    def get_overview_stats(self, day: Optional[date] = None) -> dict:
        day = day or self.today()
        teachers = self._teachers.list_all()
        records = self._attendance.get_by_date(day)
        counts = engine.count_statuses(records)
        is_holiday = self._holidays.is_holiday(day)

        rate = 0.0 if is_holiday else engine.org_wide_rate(records, len(teachers), self._weights)
        return {
            "date": format_iso_date(day),
            "isHoliday": is_holiday,
            "totalTeachers": len(teachers),
            "presentToday": counts.present,
            "absentToday": counts.absent,
            "halfDayToday": counts.half_day,
            "shortLeaveToday": counts.short_leave,
            "attendanceRate": round(rate, 2),
        }

    def get_trends(
        self,
        days: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        """Daily tallies for an explicit range, or for the last `days` days ending today."""

        if (start is None) != (end is None):
            raise ValidationError("startDate and endDate must be given together")
        if start is None:
            days = int(days or 7)
            if not 0 < days <= MAX_TREND_DAYS:
                raise ValidationError(f"days must be between 1 and {MAX_TREND_DAYS}")
            end = self.today()
            start = days_before(end, days - 1)
        elif start > end:
            raise ValidationError("startDate must not be after endDate")

        records = self._attendance.get_in_range(start, end)
        holidays = self._holidays.holiday_dates(start, end)
        trend = engine.compute_trend(records, start, end, holidays, self._weights)
        return [t.to_dict() for t in trend]

    def get_department_stats(self) -> list[dict]:
        start, end = trailing_window(self.today(), self._window_days)
        summaries = engine.compute_department_stats(
            self._attendance.get_in_range(start, end),
            self._teachers.list_all(),
            start=start,
            end=end,
            holidays=self._holidays.holiday_dates(start, end),
            weights=self._weights,
            known_departments=[d.name for d in self._departments.list_all()],
        )
        return [s.to_dict() for s in summaries]

    def get_top_performers(self, limit: int = DEFAULT_TOP_PERFORMERS_LIMIT) -> list[dict]:
        start, end = trailing_window(self.today(), self._window_days)
        ranked = engine.compute_top_performers(
            self._attendance.get_in_range(start, end),
            self._teachers.list_all(),
            limit=limit,
            start=start,
            end=end,
            holidays=self._holidays.holiday_dates(start, end),
            weights=self._weights,
        )
        return [r.to_dict() for r in ranked]

    def get_absence_analytics(self, start: Optional[date] = None, end: Optional[date] = None) -> dict:
        self._check_range(start, end)
        records = self._attendance.get_in_range(start, end)
        return engine.compute_absence_breakdown(records, start, end).to_dict()

    def get_teacher_absence_totals(
        self,
        teacher_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict:
        teacher = self._require_teacher(teacher_id)
        self._check_range(start, end)
        records = self._attendance.get_by_teacher(teacher_id, start, end)
        out = engine.compute_absence_breakdown(records, start, end).to_dict()
        out["teacher"] = teacher.to_summary()
        return out

    def get_teacher_pattern(self, teacher_id: int, weeks: int = DEFAULT_PATTERN_WEEKS) -> dict:
        """Weekly historical rate for the last `weeks` Monday-based weeks, this week included."""
        teacher = self._require_teacher(teacher_id)
        weeks = int(weeks)
        if not 0 < weeks <= MAX_PATTERN_WEEKS:
            raise ValidationError(f"weeks must be between 1 and {MAX_PATTERN_WEEKS}")

        end = self.today()
        start = days_before(week_start(end), 7 * (weeks - 1))
        records = self._attendance.get_by_teacher(teacher_id, start, end)
        pattern = engine.compute_weekly_pattern(
            records,
            start=start,
            end=end,
            holidays=self._holidays.holiday_dates(start, end),
            weights=self._weights,
        )
        return {
            "teacher": teacher.to_summary(),
            "startDate": format_iso_date(start),
            "endDate": format_iso_date(end),
            "weeks": [w.to_dict() for w in pattern],
        }

    def _require_teacher(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    @staticmethod
    def _check_range(start: Optional[date], end: Optional[date]) -> None:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
