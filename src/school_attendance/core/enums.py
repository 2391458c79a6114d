from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles for back-office accounts."""

    ADMIN = "admin"
    DATA_ENTRY = "dataentry"


class AttendanceStatus(str, Enum):
    """Daily attendance status as stored and exchanged on the wire."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    SHORT_LEAVE = "short_leave"


class AbsentCategory(str, Enum):
    """Reason recorded with an absence. Only valid when status is absent."""

    OFFICIAL_LEAVE = "official_leave"
    PRIVATE_LEAVE = "private_leave"
    SICK_LEAVE = "sick_leave"


class HolidayType(str, Enum):
    PUBLIC = "public"
    SCHOOL = "school"
    EMERGENCY = "emergency"


class AlertType(str, Enum):
    ABSENCE = "absence"
    PATTERN = "pattern"
    EXTENDED = "extended"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {AlertSeverity.LOW: 1, AlertSeverity.MEDIUM: 2, AlertSeverity.HIGH: 3}[self]
