from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AlertSeverity, AlertType
from .model import Alert


class AlertRepository(Protocol):
    def list_recent(self, *, limit: int, unread_only: bool = True) -> Sequence[Alert]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Alert]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def get_by_id(self, alert_id: int) -> Optional[Alert]:
        raise NotImplementedError

    def latest_unread_for_teacher(self, teacher_id: int, alert_type: AlertType) -> Optional[Alert]:
        raise NotImplementedError

    def create(
        self,
        *,
        teacher_id: int,
        alert_type: AlertType,
        message: str,
        severity: AlertSeverity,
    ) -> int:
        raise NotImplementedError

    def mark_read(self, alert_id: int) -> bool:
        raise NotImplementedError
