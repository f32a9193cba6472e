from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} is out of range")
    return number


def require_latitude(value: Any) -> float:
    return require_coordinate(value, "latitude", limit=90.0)


def require_longitude(value: Any) -> float:
    return require_coordinate(value, "longitude", limit=180.0)
