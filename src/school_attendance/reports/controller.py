from __future__ import annotations

from flask import Flask, jsonify, render_template, request

from ..common.datetime_utils import format_iso_date
from ..common.web import date_arg, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _render(template: str, report: dict) -> str:
        return render_template(template, report=report, generated_on=format_iso_date(container.stats_service.today()))

    @app.route("/api/export/attendance", methods=["GET"], endpoint="api_export_attendance")
    @login_required
    def export_attendance():
        fmt = (request.args.get("format") or "csv").lower()
        start, end = date_arg("startDate"), date_arg("endDate")

        if fmt == "csv":
            return app.response_class(
                reports.export_csv(start, end),
                mimetype="text/csv",
                headers={"Content-Disposition": "attachment; filename=attendance-report.csv"},
            )
        if fmt == "json":
            return jsonify(reports.get_export_data(start, end))
        if fmt in {"html", "pdf"}:
            # printable page; the browser turns it into a PDF
            teacher_id = request.args.get("teacherId")
            if teacher_id:
                if not teacher_id.isdigit():
                    raise ValidationError("teacherId must be an integer")
                report = reports.build_teacher_report(int(teacher_id), start, end)
                return _render("reports/teacher.html", report.to_dict())
            day = end or container.stats_service.today()
            return _render("reports/daily.html", reports.build_daily_report(day).to_dict())

        raise ValidationError("Unsupported export format. Use 'csv', 'json' or 'html'")

    @app.route("/api/reports/teacher/<int:teacher_id>", methods=["GET"], endpoint="api_teacher_report")
    @login_required
    def teacher_report(teacher_id: int):
        report = reports.build_teacher_report(teacher_id, date_arg("startDate"), date_arg("endDate"))
        if (request.args.get("format") or "").lower() == "html":
            return _render("reports/teacher.html", report.to_dict())
        return jsonify(report.to_dict())

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_daily_report")
    @login_required
    def daily_report():
        day = date_arg("date") or container.stats_service.today()
        report = reports.build_daily_report(day)
        if (request.args.get("format") or "").lower() == "html":
            return _render("reports/daily.html", report.to_dict())
        return jsonify(report.to_dict())
