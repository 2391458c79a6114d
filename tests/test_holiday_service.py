from __future__ import annotations

from datetime import date

import pytest

from school_attendance.core.enums import HolidayType
from school_attendance.core.exceptions import NotFoundError, ValidationError


def test_create_and_check_holiday(container):
    holiday = container.holiday_service.create(holiday_date="2024-01-15", name="Founders Day", holiday_type="school")

    assert holiday.holiday_type == HolidayType.SCHOOL
    assert container.holiday_service.check(date(2024, 1, 15)).name == "Founders Day"
    assert container.holiday_service.check(date(2024, 1, 16)) is None


def test_one_holiday_per_date(container):
    container.holiday_service.create(holiday_date="2024-01-15", name="Founders Day")
    with pytest.raises(ValidationError):
        container.holiday_service.create(holiday_date="2024-01-15", name="Something else")


@pytest.mark.parametrize(
    "fields",
    [
        {"holiday_date": "2024-13-01", "name": "Bad date"},
        {"holiday_date": None, "name": "No date"},
        {"holiday_date": "2024-01-15", "name": "  "},
        {"holiday_date": "2024-01-15", "name": "Bad type", "holiday_type": "national"},
    ],
)
def test_create_rejects_malformed_input(container, fields):
    with pytest.raises(ValidationError):
        container.holiday_service.create(**fields)


def test_update_moves_holiday_and_rejects_clash(container):
    first = container.holiday_service.create(holiday_date="2024-01-15", name="A")
    container.holiday_service.create(holiday_date="2024-01-16", name="B")

    moved = container.holiday_service.update(first.holiday_id, holiday_date="2024-01-17", holiday_type="emergency")
    assert moved.holiday_date == date(2024, 1, 17)
    assert moved.holiday_type == HolidayType.EMERGENCY
    assert moved.name == "A"

    with pytest.raises(ValidationError):
        container.holiday_service.update(first.holiday_id, holiday_date="2024-01-16")


def test_delete_and_missing(container):
    holiday = container.holiday_service.create(holiday_date="2024-01-15", name="A")
    container.holiday_service.delete(holiday.holiday_id)

    with pytest.raises(NotFoundError):
        container.holiday_service.delete(holiday.holiday_id)
    with pytest.raises(NotFoundError):
        container.holiday_service.update(holiday.holiday_id, name="B")


def test_list_in_range(container):
    for day in ("2024-01-01", "2024-02-10", "2024-03-05"):
        container.holiday_service.create(holiday_date=day, name=day)

    listed = container.holiday_service.list(date(2024, 2, 1), date(2024, 3, 31))

    assert [h.holiday_date.month for h in listed] == [2, 3]
    with pytest.raises(ValidationError):
        container.holiday_service.list(date(2024, 3, 31), date(2024, 2, 1))


def test_holiday_filter_lookups(container):
    container.holiday_service.create(holiday_date="2024-01-02", name="A")

    assert container.holiday_filter.holiday_dates(date(2024, 1, 1), date(2024, 1, 3)) == {date(2024, 1, 2)}
    assert container.holiday_filter.is_holiday(date(2024, 1, 2))
    assert container.holiday_filter.holiday_dates(date(2024, 1, 3), date(2024, 1, 31)) == set()
