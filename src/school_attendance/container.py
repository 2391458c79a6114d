from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Callable, Optional

from .alerts.mysql_alert_repository import MySQLAlertRepository
from .alerts.policy import AbsenceThresholdPolicy, AlertPolicy
from .alerts.repository import AlertRepository
from .alerts.service import AlertService
from .analytics.service import StatsService
from .analytics.weights import AttendanceWeights
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .backup.service import BackupService
from .common.datetime_utils import resolve_timezone
from .core.constants import DEFAULT_STATS_WINDOW_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayFilter, HolidayService
from .reports.service import ReportService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService

DEFAULT_ALERT_THRESHOLDS = [(3, "low"), (5, "medium"), (8, "high")]


@dataclass(frozen=True)
class EngineSettings:
    """Settings that shape the numbers: weights, "today", windows, alert table."""

    weights: AttendanceWeights
    timezone: tzinfo
    window_days: int
    alert_policy: AlertPolicy

    @classmethod
    def from_module(cls, settings) -> "EngineSettings":
        return cls(
            weights=AttendanceWeights.from_settings(settings),
            timezone=resolve_timezone(getattr(settings, "REPORT_TIMEZONE", "UTC")),
            window_days=int(getattr(settings, "STATS_WINDOW_DAYS", DEFAULT_STATS_WINDOW_DAYS)),
            alert_policy=AbsenceThresholdPolicy(
                getattr(settings, "ALERT_THRESHOLDS", DEFAULT_ALERT_THRESHOLDS),
                window_days=int(getattr(settings, "ALERT_WINDOW_DAYS", 30)),
            ),
        )


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    teachers_repo: TeacherRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    alerts_repo: AlertRepository

    auth_service: AuthService
    teacher_service: TeacherService
    department_service: DepartmentService
    attendance_service: AttendanceService
    holiday_service: HolidayService
    holiday_filter: HolidayFilter
    stats_service: StatsService
    alert_service: AlertService
    report_service: ReportService
    backup_service: BackupService


def assemble(
    *,
    users_repo: UserRepository,
    teachers_repo: TeacherRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    alerts_repo: AlertRepository,
    engine_settings: EngineSettings,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    """Wire services on top of any repository implementations."""

    holiday_filter = HolidayFilter(holidays_repo)
    alert_service = AlertService(alerts_repo, attendance_repo, teachers_repo, engine_settings.alert_policy)

    return Container(
        users_repo=users_repo,
        teachers_repo=teachers_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        alerts_repo=alerts_repo,
        auth_service=AuthService(users_repo),
        teacher_service=TeacherService(teachers_repo, attendance_repo),
        department_service=DepartmentService(departments_repo),
        attendance_service=AttendanceService(attendance_repo, teachers_repo, alerts=alert_service),
        holiday_service=HolidayService(holidays_repo),
        holiday_filter=holiday_filter,
        stats_service=StatsService(
            attendance_repo,
            teachers_repo,
            departments_repo,
            holiday_filter,
            weights=engine_settings.weights,
            timezone=engine_settings.timezone,
            window_days=engine_settings.window_days,
            clock=clock,
        ),
        alert_service=alert_service,
        report_service=ReportService(
            attendance_repo,
            teachers_repo,
            holidays_repo,
            weights=engine_settings.weights,
        ),
        backup_service=BackupService(
            users=users_repo,
            teachers=teachers_repo,
            departments=departments_repo,
            attendance=attendance_repo,
            holidays=holidays_repo,
            alerts=alerts_repo,
            clock=clock,
        ),
    )


def build_container(*, db_config: dict, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        alerts_repo=MySQLAlertRepository(conn),
        engine_settings=EngineSettings.from_module(settings),
    )
