from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_positive_int
from ..common.web import date_arg, login_required
from ..container import Container
from ..core.constants import (
    DEFAULT_PATTERN_WEEKS,
    DEFAULT_TOP_PERFORMERS_LIMIT,
    DEFAULT_TREND_DAYS,
    MAX_LIST_LIMIT,
    MAX_PATTERN_WEEKS,
    MAX_TREND_DAYS,
)


def register(app: Flask, container: Container) -> None:
    stats = container.stats_service

    @app.route("/api/stats/overview", methods=["GET"], endpoint="api_stats_overview")
    @login_required
    def overview():
        return jsonify(stats.get_overview_stats(date_arg("date")))

    @app.route("/api/stats/trends", methods=["GET"], endpoint="api_stats_trends")
    @login_required
    def trends():
        days = optional_positive_int(request.args.get("days"), "days", DEFAULT_TREND_DAYS, MAX_TREND_DAYS)
        return jsonify(stats.get_trends(days=days, start=date_arg("startDate"), end=date_arg("endDate")))

    @app.route("/api/stats/departments", methods=["GET"], endpoint="api_stats_departments")
    @login_required
    def departments():
        return jsonify(stats.get_department_stats())

    @app.route("/api/stats/top-performers", methods=["GET"], endpoint="api_stats_top_performers")
    @login_required
    def top_performers():
        limit = optional_positive_int(request.args.get("limit"), "limit", DEFAULT_TOP_PERFORMERS_LIMIT, MAX_LIST_LIMIT)
        return jsonify(stats.get_top_performers(limit))

    @app.route("/api/stats/teacher/<int:teacher_id>/pattern", methods=["GET"], endpoint="api_stats_teacher_pattern")
    @login_required
    def teacher_pattern(teacher_id: int):
        weeks = optional_positive_int(request.args.get("weeks"), "weeks", DEFAULT_PATTERN_WEEKS, MAX_PATTERN_WEEKS)
        return jsonify(stats.get_teacher_pattern(teacher_id, weeks))

    @app.route("/api/analytics/absent", methods=["GET"], endpoint="api_analytics_absent")
    @login_required
    def absence_analytics():
        return jsonify(stats.get_absence_analytics(date_arg("startDate"), date_arg("endDate")))

    @app.route(
        "/api/analytics/teacher/<int:teacher_id>/absent-totals",
        methods=["GET"],
        endpoint="api_analytics_teacher_absent_totals",
    )
    @login_required
    def teacher_absence_totals(teacher_id: int):
        return jsonify(stats.get_teacher_absence_totals(teacher_id, date_arg("startDate"), date_arg("endDate")))
