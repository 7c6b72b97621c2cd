"""Wire codec for the trading stream.

Outbound frames are ``{"action": <tag>, "data": {...}}`` envelopes. Inbound
frames are ``{"stream": <tag>, "data": {...}}`` envelopes; ``trade_updates``
payloads carry a second ``"event"`` discriminant and the order snapshot.

Both directions map onto closed sets of frozen dataclasses. ``encode`` and
``decode`` are pure functions with no shared state.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from .errors import AlpacaMalformedMessage, AlpacaUnrecognizedMessage
from .models.orders import Order
from .utils import parse_datetime, parse_float, parse_int, parse_optional_int

TRADE_UPDATES = "trade_updates"
ACCOUNT_UPDATES = "account_updates"


# -----------------------------------------------------------------------------
# Outbound actions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Authenticate:
    """Credentials sent as the first frame of a session."""

    action: ClassVar[str] = "authenticate"

    key_id: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class Listen:
    """Request to receive the given channels."""

    action: ClassVar[str] = "listen"

    streams: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "streams", tuple(self.streams))


OutboundAction = Authenticate | Listen


def encode(action: OutboundAction) -> str:
    """Serialize an outbound action into a text frame."""
    if isinstance(action, Authenticate):
        data: dict[str, Any] = {
            "key_id": action.key_id,
            "secret_key": action.secret_key,
        }
    elif isinstance(action, Listen):
        data = {"streams": list(action.streams)}
    else:
        raise TypeError(f"Cannot encode {type(action).__name__}")
    return json.dumps({"action": action.action, "data": data}, separators=(",", ":"))


# -----------------------------------------------------------------------------
# Order lifecycle events
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Calculated:
    tag: ClassVar[str] = "calculated"


@dataclass(frozen=True)
class Canceled:
    tag: ClassVar[str] = "canceled"

    timestamp: datetime


@dataclass(frozen=True)
class DoneForDay:
    tag: ClassVar[str] = "done_for_day"


@dataclass(frozen=True)
class Expired:
    tag: ClassVar[str] = "expired"

    timestamp: datetime


@dataclass(frozen=True)
class Fill:
    """The order was completely filled.

    Attributes:
        price: Price of this fill.
        timestamp: Time of the fill.
        qty: Shares filled by this execution.
        position_qty: Position size after the fill, when reported.
    """

    tag: ClassVar[str] = "fill"

    price: float
    timestamp: datetime
    qty: int
    position_qty: int | None = None


@dataclass(frozen=True)
class New:
    tag: ClassVar[str] = "new"


@dataclass(frozen=True)
class OrderCancelRejected:
    tag: ClassVar[str] = "order_cancel_rejected"


@dataclass(frozen=True)
class OrderReplaceRejected:
    tag: ClassVar[str] = "order_replace_rejected"


@dataclass(frozen=True)
class PartialFill:
    """Part of the order was filled; fields as for ``Fill``."""

    tag: ClassVar[str] = "partial_fill"

    price: float
    timestamp: datetime
    qty: int
    position_qty: int | None = None


@dataclass(frozen=True)
class PendingCancel:
    tag: ClassVar[str] = "pending_cancel"


@dataclass(frozen=True)
class PendingNew:
    tag: ClassVar[str] = "pending_new"


@dataclass(frozen=True)
class PendingReplace:
    tag: ClassVar[str] = "pending_replace"


@dataclass(frozen=True)
class Rejected:
    tag: ClassVar[str] = "rejected"

    timestamp: datetime


@dataclass(frozen=True)
class Replaced:
    tag: ClassVar[str] = "replaced"

    timestamp: datetime


@dataclass(frozen=True)
class Stopped:
    tag: ClassVar[str] = "stopped"


@dataclass(frozen=True)
class Suspended:
    tag: ClassVar[str] = "suspended"


Event = (
    Calculated
    | Canceled
    | DoneForDay
    | Expired
    | Fill
    | New
    | OrderCancelRejected
    | OrderReplaceRejected
    | PartialFill
    | PendingCancel
    | PendingNew
    | PendingReplace
    | Rejected
    | Replaced
    | Stopped
    | Suspended
)

_EVENT_TYPES: dict[str, type[Event]] = {
    cls.tag: cls
    for cls in (
        Calculated,
        Canceled,
        DoneForDay,
        Expired,
        Fill,
        New,
        OrderCancelRejected,
        OrderReplaceRejected,
        PartialFill,
        PendingCancel,
        PendingNew,
        PendingReplace,
        Rejected,
        Replaced,
        Stopped,
        Suspended,
    )
}


# -----------------------------------------------------------------------------
# Inbound messages
# -----------------------------------------------------------------------------


class AuthorizationStatus(Enum):
    """Outcome of the authenticate action."""

    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class Authorization:
    """Reply to ``authenticate``."""

    stream: ClassVar[str] = "authorization"

    status: AuthorizationStatus
    action: str


@dataclass(frozen=True)
class Listening:
    """Reply to ``listen`` listing the active channels."""

    stream: ClassVar[str] = "listening"

    streams: tuple[str, ...]


@dataclass(frozen=True)
class TradeUpdates:
    """An order lifecycle event together with the order snapshot."""

    stream: ClassVar[str] = TRADE_UPDATES

    event: Event
    order: Order


@dataclass(frozen=True)
class AccountUpdates:
    """Account cash balance change."""

    stream: ClassVar[str] = ACCOUNT_UPDATES

    id: str
    created_at: str
    updated_at: str
    status: str
    currency: str
    cash: float
    cash_withdrawable: float
    deleted_at: str | None = None


InboundMessage = Authorization | Listening | TradeUpdates | AccountUpdates


def _decode_event(data: dict[str, Any]) -> Event:
    tag = data.get("event")
    event_cls = _EVENT_TYPES.get(tag) if isinstance(tag, str) else None
    if event_cls is None:
        raise AlpacaUnrecognizedMessage(f"Unknown order event: {tag!r}")

    if event_cls is Fill or event_cls is PartialFill:
        return event_cls(
            price=parse_float(data["price"]),
            timestamp=parse_datetime(data["timestamp"]),
            qty=parse_int(data["qty"]),
            position_qty=parse_optional_int(data.get("position_qty")),
        )
    if event_cls in (Canceled, Expired, Rejected, Replaced):
        return event_cls(timestamp=parse_datetime(data["timestamp"]))
    return event_cls()


def _decode_authorization(data: dict[str, Any]) -> Authorization:
    return Authorization(
        status=AuthorizationStatus(data["status"]),
        action=str(data["action"]),
    )


def _decode_listening(data: dict[str, Any]) -> Listening:
    streams = data["streams"]
    if not isinstance(streams, list) or not all(isinstance(s, str) for s in streams):
        raise ValueError("streams must be a list of strings")
    return Listening(streams=tuple(streams))


def _decode_trade_updates(data: dict[str, Any]) -> TradeUpdates:
    order = data["order"]
    if not isinstance(order, dict):
        raise ValueError("order must be an object")
    return TradeUpdates(event=_decode_event(data), order=Order.from_dict(order))


def _decode_account_updates(data: dict[str, Any]) -> AccountUpdates:
    return AccountUpdates(
        id=data["id"],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        deleted_at=data.get("deleted_at"),
        status=data["status"],
        currency=data["currency"],
        cash=parse_float(data["cash"]),
        cash_withdrawable=parse_float(data["cash_withdrawable"]),
    )


_DECODERS: dict[str, Callable[[dict[str, Any]], InboundMessage]] = {
    Authorization.stream: _decode_authorization,
    Listening.stream: _decode_listening,
    TradeUpdates.stream: _decode_trade_updates,
    AccountUpdates.stream: _decode_account_updates,
}


def decode(frame: str | bytes | bytearray) -> InboundMessage:
    """Decode a text or binary frame into an inbound message.

    Raises:
        AlpacaMalformedMessage: The frame is not valid JSON.
        AlpacaUnrecognizedMessage: The JSON does not match any known message,
            including missing fields and unparsable numeric strings.
    """
    try:
        payload = json.loads(frame)
    except ValueError as err:
        raise AlpacaMalformedMessage(f"Invalid JSON frame: {err}") from err

    if not isinstance(payload, dict):
        raise AlpacaUnrecognizedMessage("Frame is not a JSON object")

    stream = payload.get("stream")
    decoder = _DECODERS.get(stream) if isinstance(stream, str) else None
    if decoder is None:
        raise AlpacaUnrecognizedMessage(f"Unknown stream: {stream!r}")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise AlpacaUnrecognizedMessage(f"Missing data object for {stream}")

    try:
        return decoder(data)
    except (KeyError, TypeError, ValueError) as err:
        raise AlpacaUnrecognizedMessage(f"Invalid {stream} message: {err!r}") from err
