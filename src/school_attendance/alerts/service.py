from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import NotFoundError
from ..teachers.repository import TeacherRepository
from .model import Alert
from .policy import AlertPolicy
from .repository import AlertRepository

logger = logging.getLogger(__name__)


class AlertService:
    """Use case: raise absence alerts and let staff acknowledge them."""

    def __init__(
        self,
        alerts: AlertRepository,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        policy: AlertPolicy,
    ):
        self._alerts = alerts
        self._attendance = attendance
        self._teachers = teachers
        self._policy = policy

    def evaluate(self, teacher_id: int, as_of: date) -> Optional[Alert]:
        """Apply the policy to the teacher's trailing window ending at `as_of`.

        A new alert is stored only when no unread alert of the same type and
        at least the same severity is already waiting.
        """

        start = as_of - timedelta(days=self._policy.window_days - 1)
        records = self._attendance.get_by_teacher(teacher_id, start, as_of)
        decision = self._policy.evaluate(records)
        if decision is None:
            return None

        existing = self._alerts.latest_unread_for_teacher(teacher_id, decision.alert_type)
        if existing and existing.severity.rank >= decision.severity.rank:
            return None

        alert_id = self._alerts.create(
            teacher_id=teacher_id,
            alert_type=decision.alert_type,
            message=decision.message,
            severity=decision.severity,
        )
        logger.info("Alert %s (%s) raised for teacher %s", alert_id, decision.severity.value, teacher_id)
        return self._alerts.get_by_id(alert_id)

    def list(self, *, limit: int = 10, unread_only: bool = True) -> list[dict]:
        out: list[dict] = []
        for alert in self._alerts.list_recent(limit=limit, unread_only=unread_only):
            teacher = self._teachers.get_by_id(alert.teacher_id)
            item = alert.to_dict()
            item["teacher"] = teacher.to_summary() if teacher else None
            out.append(item)
        return out

    def mark_read(self, alert_id: int) -> None:
        if not self._alerts.mark_read(alert_id):
            raise NotFoundError("Alert not found")
