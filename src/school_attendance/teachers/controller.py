from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import admin_required, date_arg, json_body, login_required, portal_login_required
from ..container import Container
from ..core.constants import DEFAULT_PORTAL_HISTORY_DAYS

logger = logging.getLogger(__name__)

_FIELDS = {
    "teacherId": "teacher_code",
    "name": "full_name",
    "department": "department",
    "email": "email",
    "phone": "phone",
    "joinDate": "join_date",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/teachers", methods=["GET"], endpoint="api_teachers")
    @login_required
    def list_teachers():
        return jsonify([t.to_dict() for t in container.teacher_service.list_all()])

    @app.route("/api/teachers/next-id", methods=["GET"], endpoint="api_next_teacher_id")
    @admin_required
    def next_teacher_id():
        return jsonify({"teacherId": container.teacher_service.next_code()})

    @app.route("/api/teachers/<int:teacher_id>", methods=["GET"], endpoint="api_teacher")
    @login_required
    def get_teacher(teacher_id: int):
        return jsonify(container.teacher_service.get(teacher_id).to_dict())

    @app.route("/api/teachers", methods=["POST"], endpoint="api_create_teacher")
    @admin_required
    def create_teacher():
        data = json_body()
        fields = {attr: data.get(key) for key, attr in _FIELDS.items()}
        return jsonify(container.teacher_service.create(**fields).to_dict()), 201

    @app.route("/api/teachers/<int:teacher_id>", methods=["PUT"], endpoint="api_update_teacher")
    @admin_required
    def update_teacher(teacher_id: int):
        data = json_body()
        changes = {attr: data[key] for key, attr in _FIELDS.items() if key in data}
        return jsonify(container.teacher_service.update(teacher_id, **changes).to_dict())

    @app.route("/api/teachers/<int:teacher_id>", methods=["DELETE"], endpoint="api_delete_teacher")
    @admin_required
    def delete_teacher(teacher_id: int):
        container.teacher_service.delete(teacher_id)
        return "", 204

    @app.route("/api/teachers/<int:teacher_id>/credentials", methods=["PUT"], endpoint="api_teacher_credentials")
    @admin_required
    def set_credentials(teacher_id: int):
        data = json_body()
        teacher = container.teacher_service.set_portal_credentials(
            teacher_id,
            username=data.get("username"),
            password=data.get("password"),
            enabled=data.get("isPortalEnabled", True),
        )
        return jsonify(teacher.to_dict())

    @app.route("/api/teacher-portal/login", methods=["POST"], endpoint="api_portal_login")
    def portal_login():
        data = json_body()
        teacher = container.teacher_service.authenticate_portal(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["portal_teacher_id"] = teacher.teacher_id
        session["name"] = teacher.full_name

        logger.info("Teacher %s signed in to the portal", teacher.teacher_id)
        return jsonify({"teacher": teacher.to_dict()})

    @app.route("/api/teacher-portal/logout", methods=["POST"], endpoint="api_portal_logout")
    def portal_logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/teacher-portal/attendance", methods=["GET"], endpoint="api_portal_attendance")
    @portal_login_required
    def portal_attendance():
        teacher_id = int(session["portal_teacher_id"])
        start, end = date_arg("startDate"), date_arg("endDate")
        if start is None and end is None:
            end = container.stats_service.today()
            start = end - timedelta(days=DEFAULT_PORTAL_HISTORY_DAYS - 1)

        report = container.report_service.build_teacher_report(teacher_id, start, end)
        payload = report.to_dict()
        payload["pattern"] = container.stats_service.get_teacher_pattern(teacher_id)["weeks"]
        return jsonify(payload)
