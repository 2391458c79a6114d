"""Attendance-rate aggregation.

Pure functions from raw attendance records to rates, daily trends,
department summaries, rankings and absence breakdowns. Nothing here touches
the database or the clock; callers pass in records, rosters, date bounds and
the holiday set.

Two rate modes exist, each with its own entry point:

* ``org_wide_rate`` divides by a headcount (every teacher counts, marked or not).
* ``historical_rate`` divides by the number of records found for the scope,
  so unmarked days are left out rather than treated as absences.

All rates are unrounded floats in [0, 100]. Rounding is the caller's job.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Collection, Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import week_start
from ..core.constants import UNKNOWN_DEPARTMENT
from ..core.enums import AbsentCategory, AttendanceStatus
from ..teachers.model import Teacher
from .weights import DEFAULT_WEIGHTS, AttendanceWeights

_NULL_STRINGS = {"", "null", "none", "undefined", "nan"}


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    half_day: int = 0
    short_leave: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.half_day + self.short_leave


@dataclass(frozen=True)
class DailyTally:
    date: date
    present: int
    absent: int
    half_day: int
    short_leave: int
    rate: float

    def to_dict(self, ndigits: int = 2) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "present": self.present,
            "absent": self.absent,
            "halfDay": self.half_day,
            "shortLeave": self.short_leave,
            "rate": round(self.rate, ndigits),
        }


@dataclass(frozen=True)
class DepartmentSummary:
    department: str
    teacher_count: int
    rate: float
    record_count: int = 0

    def to_dict(self, ndigits: int = 2) -> dict:
        return {
            "department": self.department,
            "teacherCount": self.teacher_count,
            "attendanceRate": round(self.rate, ndigits),
            "recordCount": self.record_count,
        }


@dataclass(frozen=True)
class RankedTeacher:
    teacher: Teacher
    rate: float
    record_count: int

    def to_dict(self, ndigits: int = 2) -> dict:
        return {
            "teacher": self.teacher.to_summary(),
            "attendanceRate": round(self.rate, ndigits),
            "recordCount": self.record_count,
        }


@dataclass(frozen=True)
class AbsenceBreakdown:
    """Absences split by category, with short leave counted alongside.

    short_leave is not part of total_absent: it is a reduced-attendance
    status, not an absence.
    """

    total_absent: int = 0
    official_leave: int = 0
    private_leave: int = 0
    sick_leave: int = 0
    short_leave: int = 0

    def to_dict(self) -> dict:
        return {
            "totalAbsent": self.total_absent,
            "officialLeave": self.official_leave,
            "privateLeave": self.private_leave,
            "sickLeave": self.sick_leave,
            "shortLeave": self.short_leave,
        }


@dataclass(frozen=True)
class WeeklyRate:
    week_start: date
    rate: float
    record_count: int

    def to_dict(self, ndigits: int = 2) -> dict:
        return {
            "week": self.week_start.strftime("%Y-%m-%d"),
            "rate": round(self.rate, ndigits),
            "recordCount": self.record_count,
        }


def safe_number(value: Any) -> float:
    """Coerce anything to a non-negative finite float; unparseable input is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if value.lower() in _NULL_STRINGS:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _status_of(item: Any) -> Optional[AttendanceStatus]:
    raw = getattr(item, "status", item)
    try:
        return AttendanceStatus(raw)
    except ValueError:
        return None


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def select_records(
    records: Iterable[AttendanceRecord],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    holidays: Collection[date] = frozenset(),
) -> list[AttendanceRecord]:
    """Records inside [start, end] whose date is not a holiday."""
    return [r for r in records if _in_range(r.work_date, start, end) and r.work_date not in holidays]


def count_statuses(records: Iterable[Any]) -> StatusCounts:
    tally = {s: 0 for s in AttendanceStatus}
    for r in records:
        status = _status_of(r)
        if status is not None:
            tally[status] += 1
    return StatusCounts(
        present=tally[AttendanceStatus.PRESENT],
        absent=tally[AttendanceStatus.ABSENT],
        half_day=tally[AttendanceStatus.HALF_DAY],
        short_leave=tally[AttendanceStatus.SHORT_LEAVE],
    )


def effective_presence(records: Iterable[Any], weights: AttendanceWeights = DEFAULT_WEIGHTS) -> float:
    return sum(weights.credit(_status_of(r)) for r in records)


def compute_rate(records: Iterable[Any], denominator: Any, weights: AttendanceWeights = DEFAULT_WEIGHTS) -> float:
    """Weighted presence over `denominator`, as a percentage in [0, 100].

    Never NaN or infinite: non-numeric, negative or zero denominators give 0.
    """
    denominator = safe_number(denominator)
    if denominator <= 0:
        return 0.0
    rate = safe_number(effective_presence(records, weights)) / denominator * 100.0
    if not math.isfinite(rate):
        return 0.0
    return min(max(rate, 0.0), 100.0)


def org_wide_rate(records: Iterable[Any], headcount: Any, weights: AttendanceWeights = DEFAULT_WEIGHTS) -> float:
    """Rate against total headcount; unmarked teachers count against the rate."""
    return compute_rate(records, headcount, weights)


def historical_rate(records: Iterable[Any], weights: AttendanceWeights = DEFAULT_WEIGHTS) -> float:
    """Rate against the records that exist; unmarked days are ignored."""
    records = list(records)
    return compute_rate(records, len(records), weights)


def department_key(value: Optional[str]) -> str:
    """Bucket name for a teacher's free-text department."""
    if value is None:
        return UNKNOWN_DEPARTMENT
    value = str(value).strip()
    return value or UNKNOWN_DEPARTMENT


def compute_trend(
    records: Iterable[AttendanceRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    holidays: Collection[date] = frozenset(),
    weights: AttendanceWeights = DEFAULT_WEIGHTS,
) -> list[DailyTally]:
    """Per-day tallies ascending by date.

    Holiday dates are dropped entirely. Each day's rate divides by the number
    of distinct teachers observed anywhere in the (non-holiday) range.
    """
    selected = select_records(records, start=start, end=end, holidays=holidays)
    observed = len({r.teacher_id for r in selected})

    by_day: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in selected:
        by_day[r.work_date].append(r)

    out: list[DailyTally] = []
    for day in sorted(by_day):
        day_records = by_day[day]
        counts = count_statuses(day_records)
        out.append(
            DailyTally(
                date=day,
                present=counts.present,
                absent=counts.absent,
                half_day=counts.half_day,
                short_leave=counts.short_leave,
                rate=org_wide_rate(day_records, observed, weights),
            )
        )
    return out


def compute_department_stats(
    records: Iterable[AttendanceRecord],
    teachers: Iterable[Teacher],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    holidays: Collection[date] = frozenset(),
    weights: AttendanceWeights = DEFAULT_WEIGHTS,
    known_departments: Iterable[str] = (),
) -> list[DepartmentSummary]:
    """Historical rate per department-name bucket, sorted by department.

    Blank or missing department names share one "Unknown" bucket. Names in
    `known_departments` without any teacher still appear, with zero counts.
    Names match case-insensitively; a bucket is labelled with the
    `known_departments` spelling when there is one, else the first teacher's.
    """
    labels: dict[str, str] = {}
    members: dict[str, set[int]] = defaultdict(set)
    for name in known_departments:
        label = department_key(name)
        labels.setdefault(label.casefold(), label)
        members.setdefault(label.casefold(), set())

    bucket_of: dict[int, str] = {}
    for t in teachers:
        label = department_key(t.department)
        key = label.casefold()
        labels.setdefault(key, label)
        bucket_of[t.teacher_id] = key
        members[key].add(t.teacher_id)

    bucket_records: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in select_records(records, start=start, end=end, holidays=holidays):
        key = bucket_of.get(r.teacher_id)
        if key is not None:
            bucket_records[key].append(r)

    return [
        DepartmentSummary(
            department=labels[key],
            teacher_count=len(members[key]),
            rate=historical_rate(bucket_records[key], weights),
            record_count=len(bucket_records[key]),
        )
        for key in sorted(members)
    ]


def compute_top_performers(
    records: Iterable[AttendanceRecord],
    teachers: Iterable[Teacher],
    *,
    limit: Any,
    start: Optional[date] = None,
    end: Optional[date] = None,
    holidays: Collection[date] = frozenset(),
    weights: AttendanceWeights = DEFAULT_WEIGHTS,
) -> list[RankedTeacher]:
    """Teachers ranked by historical rate, best first, ties by name.

    A teacher with no records in the window is not ranked at all.
    """
    limit = int(safe_number(limit))
    if limit <= 0:
        return []

    roster = {t.teacher_id: t for t in teachers}
    per_teacher: dict[int, list[AttendanceRecord]] = defaultdict(list)
    for r in select_records(records, start=start, end=end, holidays=holidays):
        if r.teacher_id in roster:
            per_teacher[r.teacher_id].append(r)

    ranked = [
        RankedTeacher(teacher=roster[tid], rate=historical_rate(recs, weights), record_count=len(recs))
        for tid, recs in per_teacher.items()
        if recs
    ]
    ranked.sort(key=lambda x: (-x.rate, x.teacher.full_name, x.teacher.teacher_id))
    return ranked[:limit]


def compute_absence_breakdown(
    records: Iterable[AttendanceRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> AbsenceBreakdown:
    """Count absences by category plus short leaves, within an optional range.

    An absence with a missing or unrecognised category counts toward
    total_absent only.
    """
    total = official = private = sick = short = 0
    for r in records:
        if not _in_range(r.work_date, start, end):
            continue
        status = _status_of(r)
        if status == AttendanceStatus.SHORT_LEAVE:
            short += 1
        elif status == AttendanceStatus.ABSENT:
            total += 1
            try:
                category = AbsentCategory(r.absent_category) if r.absent_category else None
            except ValueError:
                category = None
            if category == AbsentCategory.OFFICIAL_LEAVE:
                official += 1
            elif category == AbsentCategory.PRIVATE_LEAVE:
                private += 1
            elif category == AbsentCategory.SICK_LEAVE:
                sick += 1
    return AbsenceBreakdown(
        total_absent=total,
        official_leave=official,
        private_leave=private,
        sick_leave=sick,
        short_leave=short,
    )


def compute_weekly_pattern(
    records: Iterable[AttendanceRecord],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    holidays: Collection[date] = frozenset(),
    weights: AttendanceWeights = DEFAULT_WEIGHTS,
) -> list[WeeklyRate]:
    """Historical rate per Monday-based week, ascending."""
    by_week: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in select_records(records, start=start, end=end, holidays=holidays):
        by_week[week_start(r.work_date)].append(r)

    return [
        WeeklyRate(week_start=week, rate=historical_rate(by_week[week], weights), record_count=len(by_week[week]))
        for week in sorted(by_week)
    ]

