from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import HolidayType
from .model import Holiday


class HolidayRepository(Protocol):
    def list_in_range(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(
        self,
        *,
        holiday_date: date,
        name: str,
        holiday_type: HolidayType,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        name: str,
        holiday_type: HolidayType,
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
