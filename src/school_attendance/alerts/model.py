from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AlertSeverity, AlertType


@dataclass(frozen=True)
class Alert:
    """A derived notice about a teacher's absence pattern."""

    alert_id: int
    teacher_id: int
    alert_type: AlertType
    message: str
    severity: AlertSeverity
    is_read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.alert_id,
            "teacherId": self.teacher_id,
            "type": self.alert_type.value,
            "message": self.message,
            "severity": self.severity.value,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
