from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_date_arg
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import HolidayType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayFilter:
    """Looks up which dates in a range are holidays.

    Any day-range computation consults this before counting a date.
    """

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def holiday_dates(self, start: Optional[date] = None, end: Optional[date] = None) -> set[date]:
        return {h.holiday_date for h in self._holidays.list_in_range(start, end)}

    def is_holiday(self, day: date) -> bool:
        return self._holidays.get_by_date(day) is not None


class HolidayService:
    """Use case: manage the holiday calendar (admin)."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        return self._holidays.list_in_range(start, end)

    def get(self, holiday_id: int) -> Holiday:
        holiday = self._holidays.get_by_id(holiday_id)
        if not holiday:
            raise NotFoundError("Holiday not found")
        return holiday

    def check(self, day: date) -> Optional[Holiday]:
        return self._holidays.get_by_date(day)

    def create(
        self,
        *,
        holiday_date,
        name: Optional[str],
        holiday_type=HolidayType.PUBLIC,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> Holiday:
        day = self._require_date(holiday_date)
        name = require_non_empty(name, "name")
        kind = require_enum(holiday_type or HolidayType.PUBLIC, HolidayType, "type")

        if self._holidays.get_by_date(day):
            raise ValidationError(f"A holiday already exists on {day:%Y-%m-%d}")

        holiday_id = self._holidays.create(
            holiday_date=day,
            name=name,
            holiday_type=kind,
            description=optional_text(description),
            created_by=created_by,
        )
        logger.info("Holiday %s created for %s", holiday_id, day)
        return self.get(holiday_id)

    def update(self, holiday_id: int, **changes) -> Holiday:
        current = self.get(holiday_id)

        day = self._require_date(changes["holiday_date"]) if "holiday_date" in changes else current.holiday_date
        name = require_non_empty(changes["name"], "name") if "name" in changes else current.name
        kind = (
            require_enum(changes["holiday_type"], HolidayType, "type")
            if "holiday_type" in changes
            else current.holiday_type
        )
        description = optional_text(changes["description"]) if "description" in changes else current.description

        clash = self._holidays.get_by_date(day)
        if clash and clash.holiday_id != current.holiday_id:
            raise ValidationError(f"A holiday already exists on {day:%Y-%m-%d}")

        self._holidays.update(holiday_id, holiday_date=day, name=name, holiday_type=kind, description=description)
        logger.info("Holiday %s updated", holiday_id)
        return self.get(holiday_id)

    def delete(self, holiday_id: int) -> None:
        if not self._holidays.delete(holiday_id):
            raise NotFoundError("Holiday not found")
        logger.info("Holiday %s deleted", holiday_id)

    @staticmethod
    def _require_date(value) -> date:
        if isinstance(value, date):
            return value
        day = parse_date_arg(value, "date")
        if day is None:
            raise ValidationError("date is required")
        return day
