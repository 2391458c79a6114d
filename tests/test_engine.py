from __future__ import annotations

import math
from datetime import date

import pytest

from school_attendance.analytics import engine
from school_attendance.analytics.weights import AttendanceWeights
from school_attendance.attendance.model import AttendanceRecord
from school_attendance.core.enums import AbsentCategory, AttendanceStatus
from school_attendance.teachers.model import Teacher

P = AttendanceStatus.PRESENT
A = AttendanceStatus.ABSENT
H = AttendanceStatus.HALF_DAY
S = AttendanceStatus.SHORT_LEAVE


def rec(teacher_id: int, day: date, status, category=None, record_id: int = 0) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        teacher_id=teacher_id,
        work_date=day,
        status=status,
        absent_category=category,
    )


def teacher(teacher_id: int, name: str, department=None) -> Teacher:
    return Teacher(teacher_id=teacher_id, teacher_code=f"T{teacher_id:03d}", full_name=name, department=department)


@pytest.mark.parametrize(
    "denominator",
    [None, "", "null", "undefined", "abc", -5, 0, float("nan"), float("inf"), float("-inf"), [], {}, True],
)
def test_compute_rate_is_zero_for_degenerate_denominators(denominator):
    assert engine.compute_rate([rec(1, date(2024, 1, 1), P)], denominator) == 0.0


@pytest.mark.parametrize("denominator", [1, 2, 3.5, "4", 1e-9, 10**6])
def test_compute_rate_is_finite_and_bounded(denominator):
    records = [rec(1, date(2024, 1, 1), P), rec(2, date(2024, 1, 1), P), rec(3, date(2024, 1, 1), H)]
    rate = engine.compute_rate(records, denominator)
    assert math.isfinite(rate)
    assert 0.0 <= rate <= 100.0


def test_compute_rate_ignores_unknown_statuses():
    records = [rec(1, date(2024, 1, 1), P), rec(2, date(2024, 1, 1), "on_strike")]
    assert engine.compute_rate(records, 2) == 50.0


def test_safe_number_coerces_garbage_to_zero():
    assert engine.safe_number(None) == 0.0
    assert engine.safe_number(" null ") == 0.0
    assert engine.safe_number("NaN") == 0.0
    assert engine.safe_number(-3) == 0.0
    assert engine.safe_number("12.5") == 12.5


def test_historical_rate_weights_half_day_and_short_leave():
    d = date(2024, 1, 8)
    records = [rec(1, d, P), rec(1, date(2024, 1, 9), P), rec(1, date(2024, 1, 10), H), rec(1, date(2024, 1, 11), S)]
    assert engine.historical_rate(records) == pytest.approx(81.25)


def test_short_leave_credit_is_configurable():
    records = [rec(1, date(2024, 1, 8), S), rec(1, date(2024, 1, 9), P)]
    weights = AttendanceWeights(short_leave=0.5)
    assert engine.historical_rate(records, weights) == pytest.approx(75.0)


def test_weights_reject_out_of_range_credit():
    with pytest.raises(ValueError):
        AttendanceWeights(short_leave=1.5)
    with pytest.raises(ValueError):
        AttendanceWeights(half_day=float("nan"))


def test_org_wide_rate_counts_unmarked_teachers_against_rate():
    d = date(2024, 1, 8)
    assert engine.org_wide_rate([rec(1, d, P), rec(2, d, P)], headcount=4) == 50.0
    assert engine.historical_rate([rec(1, d, P), rec(2, d, P)]) == 100.0


def test_empty_inputs_are_total():
    assert engine.historical_rate([]) == 0.0
    assert engine.org_wide_rate([], 0) == 0.0
    assert engine.compute_trend([]) == []
    assert engine.compute_department_stats([], []) == []
    assert engine.compute_top_performers([], [], limit=10) == []
    assert engine.compute_absence_breakdown([]).to_dict() == {
        "totalAbsent": 0,
        "officialLeave": 0,
        "privateLeave": 0,
        "sickLeave": 0,
        "shortLeave": 0,
    }


def test_trend_skips_holidays_and_unmarked_days():
    records = [
        rec(1, date(2024, 1, 15), P),
        rec(1, date(2024, 1, 16), P),
        rec(2, date(2024, 1, 16), A, AbsentCategory.SICK_LEAVE),
        rec(1, date(2024, 1, 18), H),
    ]
    trend = engine.compute_trend(records, date(2024, 1, 1), date(2024, 1, 31), holidays={date(2024, 1, 15)})

    assert [t.date for t in trend] == [date(2024, 1, 16), date(2024, 1, 18)]
    assert trend[0].present == 1 and trend[0].absent == 1
    # two distinct teachers seen across the range
    assert trend[0].rate == 50.0
    assert trend[1].rate == 25.0


def test_trend_is_ascending_and_respects_range():
    records = [rec(1, date(2024, 1, d), P) for d in (20, 3, 11, 31)]
    trend = engine.compute_trend(records, date(2024, 1, 5), date(2024, 1, 25))
    assert [t.date.day for t in trend] == [11, 20]


def test_department_stats_group_blank_names_into_unknown():
    teachers = [
        teacher(1, "Ann", "Science"),
        teacher(2, "Bob", None),
        teacher(3, "Cid", ""),
        teacher(4, "Dee", "   "),
    ]
    records = [rec(1, date(2024, 1, 8), P), rec(2, date(2024, 1, 8), H), rec(3, date(2024, 1, 8), A, AbsentCategory.PRIVATE_LEAVE)]

    stats = {s.department: s for s in engine.compute_department_stats(records, teachers)}

    assert set(stats) == {"Science", "Unknown"}
    assert stats["Unknown"].teacher_count == 3
    assert stats["Unknown"].rate == pytest.approx(25.0)
    assert stats["Science"].rate == 100.0


def test_department_without_records_has_zero_rate_and_known_departments_are_listed():
    teachers = [teacher(1, "Ann", "Science"), teacher(2, "Bob", "Arts")]
    records = [rec(1, date(2024, 1, 8), P)]

    stats = engine.compute_department_stats(records, teachers, known_departments=["Music"])

    assert [s.department for s in stats] == ["Arts", "Music", "Science"]
    arts, music, _ = stats
    assert arts.rate == 0.0 and arts.teacher_count == 1
    assert music.teacher_count == 0 and music.record_count == 0


def test_department_stats_exclude_holidays_and_out_of_window_records():
    teachers = [teacher(1, "Ann", "Science")]
    records = [
        rec(1, date(2024, 1, 8), P),
        rec(1, date(2024, 1, 9), A, AbsentCategory.SICK_LEAVE),
        rec(1, date(2023, 12, 1), A, AbsentCategory.SICK_LEAVE),
    ]
    stats = engine.compute_department_stats(
        records,
        teachers,
        start=date(2024, 1, 1),
        end=date(2024, 1, 31),
        holidays={date(2024, 1, 9)},
    )
    assert stats[0].rate == 100.0
    assert stats[0].record_count == 1


def test_top_performers_exclude_teachers_without_records():
    teachers = [teacher(1, "Ann"), teacher(2, "Bob"), teacher(3, "Cid")]
    records = [rec(1, date(2024, 1, 8), P), rec(2, date(2024, 1, 8), H)]

    ranked = engine.compute_top_performers(records, teachers, limit=50)

    assert [r.teacher.teacher_id for r in ranked] == [1, 2]


def test_top_performers_sort_ties_by_name_and_truncate():
    teachers = [teacher(1, "Zoe"), teacher(2, "Amy"), teacher(3, "Max")]
    records = [rec(1, date(2024, 1, 8), P), rec(2, date(2024, 1, 8), P), rec(3, date(2024, 1, 8), S)]

    ranked = engine.compute_top_performers(records, teachers, limit=2)

    assert [r.teacher.full_name for r in ranked] == ["Amy", "Zoe"]
    assert engine.compute_top_performers(records, teachers, limit=0) == []
    assert engine.compute_top_performers(records, teachers, limit="garbage") == []


def test_absence_breakdown_keeps_short_leave_out_of_total():
    d = date(2024, 1, 8)
    records = [
        rec(1, d, A, AbsentCategory.OFFICIAL_LEAVE),
        rec(2, d, A, AbsentCategory.PRIVATE_LEAVE),
        rec(3, d, A, AbsentCategory.SICK_LEAVE),
        rec(4, d, A, None),
        rec(5, d, S),
        rec(6, d, S),
        rec(7, d, P),
    ]
    breakdown = engine.compute_absence_breakdown(records)

    assert breakdown.total_absent == 4
    assert (breakdown.official_leave, breakdown.private_leave, breakdown.sick_leave) == (1, 1, 1)
    assert breakdown.short_leave == 2


def test_absence_breakdown_respects_range():
    records = [rec(1, date(2024, 1, 8), A, AbsentCategory.SICK_LEAVE), rec(1, date(2024, 2, 8), A, AbsentCategory.SICK_LEAVE)]
    assert engine.compute_absence_breakdown(records, date(2024, 2, 1), date(2024, 2, 29)).total_absent == 1


def test_weekly_pattern_groups_by_monday():
    records = [
        rec(1, date(2024, 1, 8), P),  # Monday
        rec(1, date(2024, 1, 14), A, AbsentCategory.SICK_LEAVE),  # Sunday, same week
        rec(1, date(2024, 1, 15), H),  # next Monday
    ]
    weeks = engine.compute_weekly_pattern(records)

    assert [w.week_start for w in weeks] == [date(2024, 1, 8), date(2024, 1, 15)]
    assert weeks[0].rate == 50.0 and weeks[0].record_count == 2
    assert weeks[1].rate == 50.0


def test_department_names_group_case_insensitively():
    teachers = [teacher(1, "Ann", "science"), teacher(2, "Bob", "SCIENCE "), teacher(3, "Cid", "Arts")]
    records = [rec(1, date(2024, 1, 8), P), rec(2, date(2024, 1, 8), H)]

    stats = engine.compute_department_stats(records, teachers, known_departments=["Science"])

    assert [(s.department, s.teacher_count) for s in stats] == [("Arts", 1), ("Science", 2)]
    assert stats[1].rate == 75.0


def test_department_label_falls_back_to_first_teacher_spelling():
    teachers = [teacher(1, "Ann", "music"), teacher(2, "Bob", "Music")]

    stats = engine.compute_department_stats([], teachers)

    assert [(s.department, s.teacher_count) for s in stats] == [("music", 2)]
