from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayType


@dataclass(frozen=True)
class Holiday:
    """A calendar date excluded from attendance-rate denominators and trends."""

    holiday_id: int
    holiday_date: date
    name: str
    holiday_type: HolidayType = HolidayType.PUBLIC
    description: Optional[str] = None
    created_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "date": self.holiday_date.strftime("%Y-%m-%d"),
            "name": self.name,
            "type": self.holiday_type.value,
            "description": self.description,
            "createdBy": self.created_by,
        }
