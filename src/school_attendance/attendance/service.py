from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..alerts.service import AlertService
from ..common.datetime_utils import parse_date_arg
from ..common.validators import optional_enum, optional_text, optional_time, require_enum, require_int
from ..core.enums import AbsentCategory, AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..teachers.repository import TeacherRepository
from .model import AttendanceMark, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record daily attendance and read it back.

    Writes go through the repository upsert so that marking a teacher twice
    for the same day leaves one record holding the latest values.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        *,
        alerts: Optional[AlertService] = None,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._alerts = alerts

    def build_mark(
        self,
        *,
        teacher_id: Any,
        status: Any,
        absent_category: Any = None,
        check_in_time: Optional[str] = None,
        check_out_time: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AttendanceMark:
        """Validate raw input into an AttendanceMark (no storage access)."""

        teacher_id = require_int(teacher_id, "teacherId")
        status = require_enum(status, AttendanceStatus, "status")
        category = optional_enum(absent_category, AbsentCategory, "absentCategory")

        if status == AttendanceStatus.ABSENT and category is None:
            raise ValidationError("absentCategory is required when status is absent")
        if status != AttendanceStatus.ABSENT and category is not None:
            raise ValidationError("absentCategory is only allowed when status is absent")

        return AttendanceMark(
            teacher_id=teacher_id,
            status=status,
            absent_category=category,
            check_in_time=optional_time(check_in_time, "checkInTime"),
            check_out_time=optional_time(check_out_time, "checkOutTime"),
            notes=optional_text(notes),
        )

    def mark(self, *, work_date, recorded_by: Optional[int] = None, **raw) -> AttendanceRecord:
        day = self._require_date(work_date)
        mark = self.build_mark(**raw)
        self._require_teacher(mark.teacher_id)

        record = self._store(day, mark, recorded_by)
        self._evaluate_alerts([mark.teacher_id], day)
        return record

    def bulk_mark(
        self,
        *,
        work_date,
        marks: Sequence[Mapping[str, Any]],
        recorded_by: Optional[int] = None,
    ) -> list[AttendanceRecord]:
        """Mark several teachers for one day.

        Every entry is validated before anything is written: one invalid entry,
        an unknown teacher or a teacher listed twice rejects the whole batch.
        """

        day = self._require_date(work_date)
        if not marks:
            raise ValidationError("records must not be empty")

        validated: list[AttendanceMark] = []
        seen: set[int] = set()
        for i, raw in enumerate(marks):
            if not isinstance(raw, Mapping):
                raise ValidationError(f"records[{i}] must be an object")
            try:
                mark = self.build_mark(**raw)
            except ValidationError as e:
                raise ValidationError(f"records[{i}]: {e}")
            if mark.teacher_id in seen:
                raise ValidationError(f"records[{i}]: teacher {mark.teacher_id} is listed more than once")
            seen.add(mark.teacher_id)
            validated.append(mark)

        for mark in validated:
            self._require_teacher(mark.teacher_id)

        out = [self._store(day, mark, recorded_by) for mark in validated]
        logger.info("Bulk attendance for %s: %s records", day, len(out))
        self._evaluate_alerts([m.teacher_id for m in validated], day)
        return out

    def update(self, record_id: int, **raw) -> AttendanceRecord:
        current = self._attendance.get_by_id(record_id)
        if not current:
            raise NotFoundError("Attendance record not found")

        mark = self.build_mark(teacher_id=current.teacher_id, **raw)
        self._attendance.update(
            record_id=record_id,
            status=mark.status,
            absent_category=mark.absent_category,
            check_in_time=mark.check_in_time,
            check_out_time=mark.check_out_time,
            notes=mark.notes,
        )
        logger.info("Attendance record %s updated to %s", record_id, mark.status.value)
        self._evaluate_alerts([current.teacher_id], current.work_date)

        updated = self._attendance.get_by_id(record_id)
        if not updated:
            raise NotFoundError("Attendance record not found")
        return updated

    def by_date(self, day: date) -> list[dict]:
        """Records for one day with the teacher summary attached, by teacher name."""
        roster = {t.teacher_id: t for t in self._teachers.list_all()}
        rows: list[dict] = []
        for record in self._attendance.get_by_date(day):
            teacher = roster.get(record.teacher_id)
            item = record.to_dict()
            item["teacher"] = teacher.to_summary() if teacher else None
            rows.append(item)
        rows.sort(key=lambda r: ((r["teacher"] or {}).get("name") or "", r["teacherId"]))
        return rows

    def by_teacher(
        self,
        teacher_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        self._require_teacher(teacher_id)
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        return self._attendance.get_by_teacher(teacher_id, start, end)

    def _store(self, day: date, mark: AttendanceMark, recorded_by: Optional[int]) -> AttendanceRecord:
        record = self._attendance.upsert(
            teacher_id=mark.teacher_id,
            work_date=day,
            status=mark.status,
            absent_category=mark.absent_category,
            check_in_time=mark.check_in_time,
            check_out_time=mark.check_out_time,
            notes=mark.notes,
            recorded_by=recorded_by,
        )
        logger.info("Attendance marked: teacher=%s date=%s status=%s", mark.teacher_id, day, mark.status.value)
        return record

    def _evaluate_alerts(self, teacher_ids: Sequence[int], day: date) -> None:
        if not self._alerts:
            return
        for teacher_id in teacher_ids:
            try:
                self._alerts.evaluate(teacher_id, day)
            except Exception:
                # The mark is already stored; alerting must not undo it.
                logger.exception("Alert evaluation failed for teacher %s", teacher_id)

    def _require_teacher(self, teacher_id: int) -> None:
        if not self._teachers.get_by_id(teacher_id):
            raise NotFoundError(f"Teacher {teacher_id} not found")

    @staticmethod
    def _require_date(value) -> date:
        if isinstance(value, date):
            return value
        day = parse_date_arg(value, "date")
        if day is None:
            raise ValidationError("date is required")
        return day
