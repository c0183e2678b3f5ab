from __future__ import annotations

from enum import Enum
from typing import Any, Type, TypeVar

from ..core.constants import MAX_YEAR, MIN_YEAR
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(enum_cls: Type[E], value: Any, field_name: str = "status") -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}")


def require_non_negative_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive number")
    if number != number or number < 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return number


def _require_whole_number(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError("Month and year are required")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("Month and year must be whole numbers")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be whole numbers")


def require_month(value: Any) -> int:
    month = _require_whole_number(value)
    if month < 1 or month > 12:
        raise ValidationError("Invalid month. Must be between 1-12")
    return month


def require_year(value: Any) -> int:
    year = _require_whole_number(value)
    if year < MIN_YEAR or year > MAX_YEAR:
        raise ValidationError(f"Invalid year. Must be between {MIN_YEAR}-{MAX_YEAR}")
    return year


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be a whole number of at least 1")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number of at least 1")
    if number < 1:
        raise ValidationError(f"{field_name} must be a whole number of at least 1")
    return number
