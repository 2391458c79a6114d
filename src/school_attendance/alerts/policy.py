from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, Tuple, Union

from ..attendance.model import AttendanceRecord
from ..core.enums import AlertSeverity, AlertType, AttendanceStatus

Threshold = Tuple[int, Union[AlertSeverity, str]]


@dataclass(frozen=True)
class AlertDecision:
    alert_type: AlertType
    severity: AlertSeverity
    message: str


class AlertPolicy(Protocol):
    """Decides whether a teacher's recent records warrant an alert."""

    window_days: int

    def evaluate(self, records: Sequence[AttendanceRecord]) -> Optional[AlertDecision]:
        raise NotImplementedError


class AbsenceThresholdPolicy:
    """Counts absences in the trailing window and looks the total up in a table.

    The table is a list of (minimum absences, severity) rows; the row with the
    highest minimum that the count reaches wins. Short leave and half days do
    not count as absences.
    """

    def __init__(self, thresholds: Iterable[Threshold], *, window_days: int = 30):
        rows: list[tuple[int, AlertSeverity]] = []
        for minimum, severity in thresholds:
            minimum = int(minimum)
            if minimum <= 0:
                raise ValueError("Alert thresholds must be positive absence counts")
            rows.append((minimum, AlertSeverity(severity)))
        if not rows:
            raise ValueError("At least one alert threshold is required")
        if int(window_days) <= 0:
            raise ValueError("Alert window must be at least one day")

        self._rows = sorted(rows, key=lambda row: row[0])
        self.window_days = int(window_days)

    @property
    def thresholds(self) -> list[tuple[int, AlertSeverity]]:
        return list(self._rows)

    def severity_for(self, absences: int) -> Optional[AlertSeverity]:
        matched = None
        for minimum, severity in self._rows:
            if absences >= minimum:
                matched = severity
        return matched

    def evaluate(self, records: Sequence[AttendanceRecord]) -> Optional[AlertDecision]:
        absences = sum(1 for r in records if r.status == AttendanceStatus.ABSENT)
        severity = self.severity_for(absences)
        if severity is None:
            return None
        return AlertDecision(
            alert_type=AlertType.ABSENCE,
            severity=severity,
            message=f"{absences} absences in the last {self.window_days} days",
        )
