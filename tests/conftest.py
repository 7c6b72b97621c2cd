"""Pytest configuration and fixtures for alpaca_core tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from alpaca_core.errors import AlpacaStreamClosed
from alpaca_core.transport import AlpacaWsClient, AlpacaWsFrame, AlpacaWsFrameType

ORDER_DATA: dict[str, Any] = {
    "id": "61e69015-8549-4bfd-b9c3-01e75843f47d",
    "client_order_id": "eb9e2aaa-f71a-4f51-b5b4-52a6c565dad4",
    "created_at": "2021-03-16T18:38:01.942282Z",
    "updated_at": "2021-03-16T18:38:01.942282Z",
    "submitted_at": "2021-03-16T18:38:01.937734Z",
    "filled_at": None,
    "expired_at": None,
    "canceled_at": None,
    "failed_at": None,
    "replaced_at": None,
    "replaced_by": None,
    "replaces": None,
    "asset_id": "b0b6dd9d-8b9b-48a9-ba46-b9d54906e415",
    "symbol": "AAPL",
    "asset_class": "us_equity",
    "qty": "100",
    "filled_qty": "100",
    "filled_avg_price": "179.08",
    "order_class": "",
    "order_type": "market",
    "type": "market",
    "side": "buy",
    "time_in_force": "day",
    "limit_price": None,
    "stop_price": None,
    "status": "accepted",
    "extended_hours": False,
    "legs": None,
    "trail_percent": None,
    "trail_price": None,
    "hwm": None,
}


def order_data(**overrides: Any) -> dict[str, Any]:
    """Return a copy of the sample order JSON with fields replaced."""
    data = dict(ORDER_DATA)
    data.update(overrides)
    return data


def inbound(stream: str, data: dict[str, Any]) -> str:
    """Build an inbound text frame."""
    return json.dumps({"stream": stream, "data": data})


def authorization(status: str = "authorized") -> str:
    return inbound("authorization", {"status": status, "action": "authenticate"})


def listening(*streams: str) -> str:
    return inbound("listening", {"streams": list(streams)})


def fill_update(price: str = "179.08", qty: str = "100") -> str:
    return inbound(
        "trade_updates",
        {
            "event": "fill",
            "price": price,
            "timestamp": "2018-02-28T20:38:22Z",
            "qty": qty,
            "position_qty": "100",
            "order": ORDER_DATA,
        },
    )


def scripted_ws_client(*frames: str | bytes) -> tuple[AsyncMock, list[tuple[str, Any]]]:
    """Create a mock channel that replays ``frames`` and records traffic.

    Returns the mock and a log of ``("send", text)`` / ``("recv", frame)``
    entries in call order. Once the script runs out, receive raises
    AlpacaStreamClosed.
    """
    log: list[tuple[str, Any]] = []
    pending = list(frames)
    client = AsyncMock(spec=AlpacaWsClient)

    def send_text(text: str) -> None:
        log.append(("send", text))

    def receive() -> AlpacaWsFrame:
        if not pending:
            raise AlpacaStreamClosed()
        frame = pending.pop(0)
        log.append(("recv", frame))
        frame_type = (
            AlpacaWsFrameType.BINARY
            if isinstance(frame, bytes)
            else AlpacaWsFrameType.TEXT
        )
        return AlpacaWsFrame(frame_type, frame)

    client.send_text.side_effect = send_text
    client.receive.side_effect = receive
    return client, log


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    text_data: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data to return from json() call
        text_data: Data to return from text() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status

    if json_data is not None:
        response.json.return_value = json_data
    if text_data is not None:
        response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response
