"""Coercion helpers for loosely typed record fields."""

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

MIN_PIN_LEVEL = 0
MAX_PIN_LEVEL = 5

_datetime_adapter = TypeAdapter(datetime)


def coerce_pin_level(value: Any) -> int:
    """
    Coerce any raw value into a pin level between 0 and 5.

    Booleans (the legacy representation) map to 0 and 1. Numbers and numeric
    strings are truncated toward zero and clamped into range. Anything else
    becomes 0.

    Args:
        value: Raw pinned value from a caller, a stored row or an import

    Returns:
        Integer pin level

    Examples:
        >>> coerce_pin_level(True)
        1
        >>> coerce_pin_level("3")
        3
        >>> coerce_pin_level(4.9)
        4
        >>> coerce_pin_level(9)
        5
        >>> coerce_pin_level("high")
        0
    """
    if value is None:
        return MIN_PIN_LEVEL
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(MIN_PIN_LEVEL, min(MAX_PIN_LEVEL, value))
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return MIN_PIN_LEVEL
    if not math.isfinite(number):
        return MIN_PIN_LEVEL
    return max(MIN_PIN_LEVEL, min(MAX_PIN_LEVEL, int(number)))


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage_datetime(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime) -> datetime:
    """Attach UTC to a naive datetime read back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a timestamp from an import payload.

    Args:
        value: ISO 8601 string, epoch number or datetime

    Returns:
        Naive UTC datetime, or None if the value is missing or unparseable
    """
    if value is None or value == "":
        return None
    try:
        return to_storage_datetime(_datetime_adapter.validate_python(value))
    except (ValidationError, ValueError, OverflowError):
        # Aware times at the edge of the calendar overflow on conversion to UTC
        return None
