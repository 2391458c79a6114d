from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_date_arg
from ..common.web import admin_required, current_user_id, date_arg, json_body, login_required
from ..container import Container

_FIELDS = {"date": "holiday_date", "name": "name", "type": "holiday_type", "description": "description"}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="api_holidays")
    @login_required
    def list_holidays():
        holidays = container.holiday_service.list(date_arg("startDate"), date_arg("endDate"))
        return jsonify([h.to_dict() for h in holidays])

    @app.route("/api/holidays/<day>/check", methods=["GET"], endpoint="api_check_holiday")
    @login_required
    def check_holiday(day: str):
        holiday = container.holiday_service.check(parse_date_arg(day, "date"))
        return jsonify({"date": day, "isHoliday": holiday is not None, "holiday": holiday.to_dict() if holiday else None})

    @app.route("/api/holidays", methods=["POST"], endpoint="api_create_holiday")
    @admin_required
    def create_holiday():
        data = json_body()
        holiday = container.holiday_service.create(
            holiday_date=data.get("date"),
            name=data.get("name"),
            holiday_type=data.get("type"),
            description=data.get("description"),
            created_by=current_user_id(),
        )
        return jsonify(holiday.to_dict()), 201

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="api_update_holiday")
    @admin_required
    def update_holiday(holiday_id: int):
        data = json_body()
        changes = {attr: data[key] for key, attr in _FIELDS.items() if key in data}
        return jsonify(container.holiday_service.update(holiday_id, **changes).to_dict())

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_delete_holiday")
    @admin_required
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete(holiday_id)
        return "", 204
