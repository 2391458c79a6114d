from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_iso_date
from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    backups = container.backup_service

    @app.route("/api/backup/stats", methods=["GET"], endpoint="api_backup_stats")
    @admin_required
    def backup_stats():
        return jsonify(backups.stats())

    @app.route("/api/backup/create", methods=["POST"], endpoint="api_backup_create")
    @admin_required
    def create_backup():
        resp = jsonify(backups.create())
        filename = f"school-attendance-backup-{format_iso_date(container.stats_service.today())}.json"
        resp.headers["Content-Disposition"] = f"attachment; filename={filename}"
        return resp
