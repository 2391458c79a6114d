from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_arg(value: Optional[str], field_name: str = "date") -> Optional[date]:
    """Parse an optional request argument, raising ValidationError on bad input."""
    if value is None or not str(value).strip():
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def resolve_timezone(name: str) -> tzinfo:
    """Resolve a reporting timezone setting.

    Accepts "UTC", a fixed offset such as "+08:00", or an IANA zone name.
    """

    name = (name or "UTC").strip()
    if name.upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc

    m = _OFFSET_RE.match(name)
    if m:
        sign = -1 if m.group(1) == "-" else 1
        offset = timedelta(hours=int(m.group(2)), minutes=int(m.group(3)))
        return timezone(sign * offset)

    return ZoneInfo(name)


def today_in(tz: tzinfo, *, now: Optional[datetime] = None) -> date:
    """Calendar date of `now` (default: current time) in the reporting timezone."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def days_before(day: date, days: int) -> date:
    """`day` shifted back by `days`; a result outside the calendar is a ValidationError."""
    try:
        return day - timedelta(days=days)
    except OverflowError:
        raise ValidationError("Date range is out of bounds")


def trailing_window(end: date, days: int) -> tuple[date, date]:
    """Inclusive [start, end] covering `days` days back from `end`."""
    days = max(int(days), 0)
    return days_before(end, days), end


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())
