from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    @login_required
    def list_departments():
        return jsonify([d.to_dict() for d in container.department_service.list_all()])

    @app.route("/api/departments", methods=["POST"], endpoint="api_create_department")
    @admin_required
    def create_department():
        data = json_body()
        department = container.department_service.create(name=data.get("name"), description=data.get("description"))
        return jsonify(department.to_dict()), 201

    @app.route("/api/departments/<int:dept_id>", methods=["PUT"], endpoint="api_update_department")
    @admin_required
    def update_department(dept_id: int):
        data = json_body()
        changes = {key: data[key] for key in ("name", "description") if key in data}
        return jsonify(container.department_service.update(dept_id, **changes).to_dict())

    @app.route("/api/departments/<int:dept_id>", methods=["DELETE"], endpoint="api_delete_department")
    @admin_required
    def delete_department(dept_id: int):
        container.department_service.delete(dept_id)
        return "", 204
