"""Open position records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..utils import parse_float, parse_int


class PositionSide(Enum):
    LONG = "long"
    SHORT = "short"


@dataclass
class Position:
    """An open position in one asset.

    Attributes:
        qty: Signed share count as reported by the API.
        unrealized_plpc: Unrealized profit/loss as a fraction of cost basis.
        change_today: Fractional price change since the previous close.
    """

    asset_id: str
    symbol: str
    exchange: str
    asset_class: str
    avg_entry_price: float
    qty: int
    side: PositionSide
    market_value: float
    cost_basis: float
    unrealized_pl: float
    unrealized_plpc: float
    unrealized_intraday_pl: float
    unrealized_intraday_plpc: float
    current_price: float
    lastday_price: float
    change_today: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        return cls(
            asset_id=data["asset_id"],
            symbol=data["symbol"],
            exchange=data["exchange"],
            asset_class=data["asset_class"],
            avg_entry_price=parse_float(data["avg_entry_price"]),
            qty=parse_int(data["qty"]),
            side=PositionSide(data["side"]),
            market_value=parse_float(data["market_value"]),
            cost_basis=parse_float(data["cost_basis"]),
            unrealized_pl=parse_float(data["unrealized_pl"]),
            unrealized_plpc=parse_float(data["unrealized_plpc"]),
            unrealized_intraday_pl=parse_float(data["unrealized_intraday_pl"]),
            unrealized_intraday_plpc=parse_float(data["unrealized_intraday_plpc"]),
            current_price=parse_float(data["current_price"]),
            lastday_price=parse_float(data["lastday_price"]),
            change_today=parse_float(data["change_today"]),
        )
