from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceWeights:
    """Effective-presence credit per status.

    Every rate in the system is built from these four numbers, so they are
    configured once (HALF_DAY_CREDIT / SHORT_LEAVE_CREDIT) and passed down.
    """

    present: float = 1.0
    half_day: float = 0.5
    short_leave: float = 0.75
    absent: float = 0.0

    def __post_init__(self) -> None:
        for name in ("present", "half_day", "short_leave", "absent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} credit must be a number")
            if not math.isfinite(value) or not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} credit must be between 0 and 1")

    @classmethod
    def from_settings(cls, settings) -> "AttendanceWeights":
        return cls(
            half_day=float(getattr(settings, "HALF_DAY_CREDIT", cls.half_day)),
            short_leave=float(getattr(settings, "SHORT_LEAVE_CREDIT", cls.short_leave)),
        )

    def credit(self, status: Union[AttendanceStatus, str, None]) -> float:
        """Credit for one record; unknown or missing statuses earn nothing."""
        try:
            status = AttendanceStatus(status)
        except ValueError:
            return 0.0
        return {
            AttendanceStatus.PRESENT: self.present,
            AttendanceStatus.HALF_DAY: self.half_day,
            AttendanceStatus.SHORT_LEAVE: self.short_leave,
            AttendanceStatus.ABSENT: self.absent,
        }[status]


DEFAULT_WEIGHTS = AttendanceWeights()
