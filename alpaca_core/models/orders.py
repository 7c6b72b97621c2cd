"""Order records and order submission payloads.

``Order`` is the record returned by the orders endpoints and embedded in
every ``trade_updates`` stream event. ``OrderIntent`` is the body for
submitting or replacing an order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..utils import (
    parse_datetime,
    parse_int,
    parse_optional_datetime,
    parse_optional_float,
    to_string,
)


class Side(Enum):
    """Order side."""

    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> Side:
        return Side.SELL if self is Side.BUY else Side.BUY


class OrderType(Enum):
    """Order type; selects which price fields apply."""

    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stop_limit"
    TRAILING_STOP = "trailing_stop"


class TimeInForce(Enum):
    """How long an order stays working."""

    DAY = "day"
    GOOD_TIL_CANCELLED = "gtc"
    OPEN = "opg"
    CLOSE = "cls"
    IMMEDIATE_OR_CANCEL = "ioc"
    FILL_OR_KILL = "fok"


class OrderStatus(Enum):
    """Order lifecycle status."""

    ACCEPTED = "accepted"
    ACCEPTED_FOR_BIDDING = "accepted_for_bidding"
    CALCULATED = "calculated"
    CANCELED = "canceled"
    DONE_FOR_DAY = "done_for_day"
    EXPIRED = "expired"
    FILLED = "filled"
    NEW = "new"
    PARTIALLY_FILLED = "partially_filled"
    PENDING_CANCEL = "pending_cancel"
    PENDING_NEW = "pending_new"
    PENDING_REPLACE = "pending_replace"
    REJECTED = "rejected"
    REPLACED = "replaced"
    STOPPED = "stopped"
    SUSPENDED = "suspended"


class OrderClass(Enum):
    """Order class for advanced (multi-leg) orders."""

    SIMPLE = "simple"
    BRACKET = "bracket"
    ONE_CANCELS_OTHER = "oco"
    ONE_TRIGGERS_OTHER = "oto"


class QueryOrderStatus(Enum):
    """Status filter for listing orders."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class SortDirection(Enum):
    """Chronological sort order for list endpoints."""

    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class TakeProfitSpec:
    """Take-profit leg of a bracket or OCO order."""

    limit_price: float

    def to_dict(self) -> dict[str, Any]:
        return {"limit_price": to_string(self.limit_price)}


@dataclass(frozen=True)
class StopLossSpec:
    """Stop-loss leg of a bracket, OCO or OTO order."""

    stop_price: float
    limit_price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"stop_price": to_string(self.stop_price)}
        if self.limit_price is not None:
            result["limit_price"] = to_string(self.limit_price)
        return result


@dataclass
class Order:
    """An order record as reported by the API.

    Attributes:
        id: Server-assigned order identifier.
        client_order_id: Client-supplied (or generated) identifier.
        qty: Ordered share quantity.
        filled_qty: Shares filled so far.
        order_type: Order type; the matching price fields are populated.
        legs: Child orders for bracket/OCO/OTO orders, when requested nested.
    """

    id: str
    client_order_id: str
    created_at: datetime
    asset_id: str
    symbol: str
    asset_class: str
    qty: int
    filled_qty: int
    order_type: OrderType
    side: Side
    time_in_force: TimeInForce
    status: OrderStatus
    extended_hours: bool = False
    updated_at: datetime | None = None
    submitted_at: datetime | None = None
    filled_at: datetime | None = None
    expired_at: datetime | None = None
    canceled_at: datetime | None = None
    failed_at: datetime | None = None
    replaced_at: datetime | None = None
    replaced_by: str | None = None
    replaces: str | None = None
    notional: float | None = None
    filled_avg_price: float | None = None
    limit_price: float | None = None
    stop_price: float | None = None
    trail_price: float | None = None
    trail_percent: float | None = None
    hwm: float | None = None
    legs: list[Order] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        """Create an Order from its JSON representation.

        Raises:
            KeyError: A required field is missing.
            ValueError: A field holds a value of the wrong shape.
        """
        order_type = data.get("type", data.get("order_type"))
        if order_type is None:
            raise KeyError("type")

        extended_hours = data.get("extended_hours", False)
        if not isinstance(extended_hours, bool):
            raise ValueError(f"extended_hours must be a boolean, got {extended_hours!r}")

        legs = data.get("legs")
        return cls(
            id=data["id"],
            client_order_id=data["client_order_id"],
            created_at=parse_datetime(data["created_at"]),
            updated_at=parse_optional_datetime(data.get("updated_at")),
            submitted_at=parse_optional_datetime(data.get("submitted_at")),
            filled_at=parse_optional_datetime(data.get("filled_at")),
            expired_at=parse_optional_datetime(data.get("expired_at")),
            canceled_at=parse_optional_datetime(data.get("canceled_at")),
            failed_at=parse_optional_datetime(data.get("failed_at")),
            replaced_at=parse_optional_datetime(data.get("replaced_at")),
            replaced_by=data.get("replaced_by"),
            replaces=data.get("replaces"),
            asset_id=data["asset_id"],
            symbol=data["symbol"],
            asset_class=data["asset_class"],
            notional=parse_optional_float(data.get("notional")),
            qty=parse_int(data["qty"]),
            filled_qty=parse_int(data["filled_qty"]),
            filled_avg_price=parse_optional_float(data.get("filled_avg_price")),
            order_type=OrderType(order_type),
            limit_price=parse_optional_float(data.get("limit_price")),
            stop_price=parse_optional_float(data.get("stop_price")),
            trail_price=parse_optional_float(data.get("trail_price")),
            trail_percent=parse_optional_float(data.get("trail_percent")),
            side=Side(data["side"]),
            time_in_force=TimeInForce(data["time_in_force"]),
            status=OrderStatus(data["status"]),
            extended_hours=extended_hours,
            legs=[cls.from_dict(leg) for leg in legs] if legs else None,
            hwm=parse_optional_float(data.get("hwm")),
        )


@dataclass
class OrderIntent:
    """Order submission payload.

    Defaults describe a single-share GTC market buy. Price fields must match
    ``order_type``; ``validate()`` checks this before the request is sent.
    """

    symbol: str
    qty: int = 1
    side: Side = Side.BUY
    order_type: OrderType = OrderType.MARKET
    time_in_force: TimeInForce = TimeInForce.GOOD_TIL_CANCELLED
    limit_price: float | None = None
    stop_price: float | None = None
    trail_price: float | None = None
    trail_percent: float | None = None
    extended_hours: bool = False
    client_order_id: str | None = None
    order_class: OrderClass = OrderClass.SIMPLE
    take_profit: TakeProfitSpec | None = None
    stop_loss: StopLossSpec | None = None

    def validate(self) -> None:
        """Raise ValueError if the price fields do not fit the order type."""
        if self.qty <= 0:
            raise ValueError("qty must be positive")
        needs_limit = self.order_type in (OrderType.LIMIT, OrderType.STOP_LIMIT)
        needs_stop = self.order_type in (OrderType.STOP, OrderType.STOP_LIMIT)
        if needs_limit and self.limit_price is None:
            raise ValueError(f"limit_price is required for {self.order_type.value}")
        if needs_stop and self.stop_price is None:
            raise ValueError(f"stop_price is required for {self.order_type.value}")
        if self.order_type is OrderType.TRAILING_STOP and (
            (self.trail_price is None) == (self.trail_percent is None)
        ):
            raise ValueError("trailing_stop needs exactly one of trail_price/trail_percent")
        if self.order_class is OrderClass.BRACKET and (
            self.take_profit is None or self.stop_loss is None
        ):
            raise ValueError("bracket orders need take_profit and stop_loss")
        if self.order_class is OrderClass.ONE_TRIGGERS_OTHER and (
            self.take_profit is None and self.stop_loss is None
        ):
            raise ValueError("oto orders need take_profit or stop_loss")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON request body."""
        result: dict[str, Any] = {
            "symbol": self.symbol,
            "qty": to_string(self.qty),
            "side": self.side.value,
            "type": self.order_type.value,
            "time_in_force": self.time_in_force.value,
            "extended_hours": self.extended_hours,
            "order_class": self.order_class.value,
        }
        for name in ("limit_price", "stop_price", "trail_price", "trail_percent"):
            value = getattr(self, name)
            if value is not None:
                result[name] = to_string(value)
        if self.client_order_id is not None:
            result["client_order_id"] = self.client_order_id
        if self.take_profit is not None:
            result["take_profit"] = self.take_profit.to_dict()
        if self.stop_loss is not None:
            result["stop_loss"] = self.stop_loss.to_dict()
        return result
