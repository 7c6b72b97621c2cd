"""Market calendar and clock records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from ..utils import (
    format_hour_minute,
    parse_date,
    parse_datetime,
    parse_hour_minute,
)


@dataclass(frozen=True)
class Calendar:
    """Trading session for one market day."""

    date: date
    open: time
    close: time

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "open": format_hour_minute(self.open),
            "close": format_hour_minute(self.close),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Calendar:
        return cls(
            date=parse_date(data["date"]),
            open=parse_hour_minute(data["open"]),
            close=parse_hour_minute(data["close"]),
        )


@dataclass(frozen=True)
class Clock:
    """Current market time and the next open/close."""

    timestamp: datetime
    is_open: bool
    next_open: datetime
    next_close: datetime

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Clock:
        return cls(
            timestamp=parse_datetime(data["timestamp"]),
            is_open=bool(data["is_open"]),
            next_open=parse_datetime(data["next_open"]),
            next_close=parse_datetime(data["next_close"]),
        )
