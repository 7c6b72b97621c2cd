"""Coercion helpers for the API's string-encoded values.

The trading API transmits decimals and share quantities as JSON strings
(``"179.08"``, ``"100"``). Required values go through the strict parsers,
which raise ``ValueError`` on anything that is not a number. Optional values
go through the lenient parsers: ``None`` and non-string values become
``None``, while a string that does not parse is still an error.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_INTEGER_RE = re.compile(r"-?[0-9]+")


def parse_float(value: Any) -> float:
    """Parse a required decimal transmitted as a string."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Expected numeric string, got {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Invalid decimal value: {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"Expected numeric string, got {type(value).__name__}")
    if not _DECIMAL_RE.fullmatch(value):
        raise ValueError(f"Invalid decimal value: {value!r}")
    return float(value)


def parse_int(value: Any) -> int:
    """Parse a required integer quantity transmitted as a string."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Expected integer string, got {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected integer string, got {type(value).__name__}")
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"Invalid integer value: {value!r}")
    return int(value)


def _optional(parser: Callable[[str], T], value: Any) -> T | None:
    if value is None:
        return None
    if not isinstance(value, str):
        _LOGGER.warning("String expected but found something else: %r", value)
        return None
    return parser(value)


def parse_optional_float(value: Any) -> float | None:
    """Parse an optional decimal; null and non-string values map to None."""
    return _optional(parse_float, value)


def parse_optional_int(value: Any) -> int | None:
    """Parse an optional integer; null and non-string values map to None."""
    return _optional(parse_int, value)


def to_string(value: float | int) -> str:
    """Format a number the way the API expects it in request bodies."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_datetime(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2018-02-28T20:38:22Z``."""
    if not isinstance(value, str):
        raise ValueError(f"Expected timestamp string, got {value!r}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as err:
        raise ValueError(f"Invalid timestamp: {value!r}") from err


def parse_optional_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    return parse_datetime(value)


def format_datetime(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def parse_date(value: Any) -> date:
    """Parse a calendar date (``YYYY-MM-DD``)."""
    if not isinstance(value, str):
        raise ValueError(f"Expected date string, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise ValueError(f"Invalid date: {value!r}") from err


def parse_hour_minute(value: Any) -> time:
    """Parse a market session time (``HH:MM``)."""
    if not isinstance(value, str):
        raise ValueError(f"Expected HH:MM string, got {value!r}")
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as err:
        raise ValueError(f"Invalid HH:MM time: {value!r}") from err


def format_hour_minute(value: time) -> str:
    return value.strftime("%H:%M")
