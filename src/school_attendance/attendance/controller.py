from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_date_arg
from ..common.web import current_user_id, date_arg, json_body, login_required
from ..container import Container
from ..core.exceptions import ValidationError

_MARK_FIELDS = {
    "teacherId": "teacher_id",
    "status": "status",
    "absentCategory": "absent_category",
    "checkInTime": "check_in_time",
    "checkOutTime": "check_out_time",
    "notes": "notes",
}


def _mark_fields(item: dict, *, exclude=()) -> dict:
    return {attr: item.get(key) for key, attr in _MARK_FIELDS.items() if attr not in exclude}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/date/<day>", methods=["GET"], endpoint="api_attendance_by_date")
    @login_required
    def attendance_by_date(day: str):
        return jsonify(container.attendance_service.by_date(parse_date_arg(day, "date")))

    @app.route("/api/attendance/teacher/<int:teacher_id>", methods=["GET"], endpoint="api_attendance_by_teacher")
    @login_required
    def attendance_by_teacher(teacher_id: int):
        records = container.attendance_service.by_teacher(teacher_id, date_arg("startDate"), date_arg("endDate"))
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="api_mark_attendance")
    @login_required
    def mark_attendance():
        data = json_body()
        record = container.attendance_service.mark(
            work_date=data.get("date"),
            recorded_by=current_user_id(),
            **_mark_fields(data),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="api_bulk_attendance")
    @login_required
    def bulk_attendance():
        data = json_body()
        items = data.get("records")
        if not isinstance(items, list):
            raise ValidationError("records must be a list")

        marks = [_mark_fields(item) if isinstance(item, dict) else item for item in items]
        records = container.attendance_service.bulk_mark(
            work_date=data.get("date"),
            marks=marks,
            recorded_by=current_user_id(),
        )
        return jsonify({"count": len(records), "records": [r.to_dict() for r in records]}), 201

    @app.route("/api/attendance/<int:record_id>", methods=["PUT"], endpoint="api_update_attendance")
    @login_required
    def update_attendance(record_id: int):
        data = json_body()
        record = container.attendance_service.update(record_id, **_mark_fields(data, exclude={"teacher_id"}))
        return jsonify(record.to_dict())
