from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(value, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = "|".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of {allowed}")


def optional_enum(value, enum_cls: Type[E], field_name: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return require_enum(value, enum_cls, field_name)


def optional_time(value: Optional[str], field_name: str) -> Optional[str]:
    """Validate an HH:MM[:SS] time string; blank means not recorded."""
    if value is None or not str(value).strip():
        return None
    value = str(value).strip()
    if not _TIME_RE.match(value):
        raise ValidationError(f"{field_name} must be HH:MM or HH:MM:SS")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def optional_positive_int(value, field_name: str, default: int, maximum: Optional[int] = None) -> int:
    """Parse a query-string count; missing means default, garbage is rejected."""
    if value is None or str(value).strip() == "":
        return default
    n = require_int(value, field_name)
    if n <= 0:
        raise ValidationError(f"{field_name} must be positive")
    if maximum is not None and n > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return n


def require_bool(value, field_name: str) -> bool:
    """JSON booleans only; strings such as "false" are rejected, not coerced."""
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value
