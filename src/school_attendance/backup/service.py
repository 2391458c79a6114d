from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..alerts.repository import AlertRepository
from ..attendance.repository import AttendanceRepository
from ..departments.repository import DepartmentRepository
from ..holidays.repository import HolidayRepository
from ..teachers.repository import TeacherRepository
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

BACKUP_FORMAT_VERSION = "1.0"


class BackupService:
    """Use case: export the whole data set as one JSON document (admin).

    Password hashes for staff and portal accounts are left out of the dump.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        teachers: TeacherRepository,
        departments: DepartmentRepository,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        alerts: AlertRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._users = users
        self._teachers = teachers
        self._departments = departments
        self._attendance = attendance
        self._holidays = holidays
        self._alerts = alerts
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def stats(self) -> dict:
        """Row counts per table, shown before a backup is taken."""
        return {
            "teachers": self._teachers.count_all(),
            "departments": self._departments.count_all(),
            "attendanceRecords": self._attendance.count_all(),
            "holidays": self._holidays.count_all(),
            "alerts": self._alerts.count_all(),
            "users": self._users.count_all(),
        }

    def create(self) -> dict:
        data = {
            "users": [u.to_dict() for u in self._users.list_all()],
            "departments": [d.to_dict() for d in self._departments.list_all()],
            "teachers": [t.to_dict() for t in self._teachers.list_all()],
            "attendanceRecords": [r.to_dict() for r in self._attendance.get_in_range(None, None)],
            "holidays": [h.to_dict() for h in self._holidays.list_in_range(None, None)],
            "alerts": [a.to_dict() for a in self._alerts.list_all()],
        }
        created_at = self._clock()
        logger.info("Backup created: %s", {k: len(v) for k, v in data.items()})
        return {
            "metadata": {
                "version": BACKUP_FORMAT_VERSION,
                "createdAt": created_at.isoformat(),
                "description": "School attendance data export",
            },
            "data": data,
        }
