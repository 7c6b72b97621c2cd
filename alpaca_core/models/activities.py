"""Account activity records.

The activities endpoint returns an untagged mix of trade fills and
non-trade entries (dividends, fees, transfers). Trade entries are the ones
carrying a ``transaction_time``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..utils import (
    parse_datetime,
    parse_float,
    parse_int,
    parse_optional_float,
    parse_optional_int,
)


class FillType(Enum):
    FILL = "fill"
    PARTIAL_FILL = "partial_fill"


class ActivitySide(Enum):
    BUY = "buy"
    SELL = "sell"
    SELL_SHORT = "sell_short"


@dataclass(frozen=True)
class TradeActivity:
    """A fill or partial fill."""

    activity_type: str
    id: str
    qty: int
    cum_qty: int
    leaves_qty: int
    price: float
    side: ActivitySide
    symbol: str
    transaction_time: datetime
    order_id: str
    fill_type: FillType


@dataclass(frozen=True)
class NonTradeActivity:
    """Any activity that is not an order fill."""

    activity_type: str
    id: str
    date: datetime
    net_amount: float
    symbol: str | None = None
    qty: int | None = None
    per_share_amount: float | None = None


Activity = TradeActivity | NonTradeActivity


def activity_from_dict(data: dict[str, Any]) -> Activity:
    """Build the matching activity record for a JSON entry."""
    if "transaction_time" in data:
        return TradeActivity(
            activity_type=data["activity_type"],
            id=data["id"],
            qty=parse_int(data["qty"]),
            cum_qty=parse_int(data["cum_qty"]),
            leaves_qty=parse_int(data["leaves_qty"]),
            price=parse_float(data["price"]),
            side=ActivitySide(data["side"]),
            symbol=data["symbol"],
            transaction_time=parse_datetime(data["transaction_time"]),
            order_id=data["order_id"],
            fill_type=FillType(data["type"]),
        )
    return NonTradeActivity(
        activity_type=data["activity_type"],
        id=data["id"],
        date=parse_datetime(data["date"]),
        net_amount=parse_float(data["net_amount"]),
        symbol=data.get("symbol"),
        qty=parse_optional_int(data.get("qty")),
        per_share_amount=parse_optional_float(data.get("per_share_amount")),
    )
