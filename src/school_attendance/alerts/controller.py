from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_positive_int
from ..common.web import login_required
from ..container import Container
from ..core.constants import DEFAULT_ALERT_LIMIT, MAX_LIST_LIMIT


def register(app: Flask, container: Container) -> None:
    @app.route("/api/alerts", methods=["GET"], endpoint="api_alerts")
    @login_required
    def list_alerts():
        limit = optional_positive_int(request.args.get("limit"), "limit", DEFAULT_ALERT_LIMIT, MAX_LIST_LIMIT)
        unread_only = request.args.get("all") not in {"1", "true", "yes"}
        return jsonify(container.alert_service.list(limit=limit, unread_only=unread_only))

    @app.route("/api/alerts/<int:alert_id>/read", methods=["POST", "PUT"], endpoint="api_mark_alert_read")
    @login_required
    def mark_alert_read(alert_id: int):
        container.alert_service.mark_read(alert_id)
        return jsonify({"message": "Alert marked as read"})
