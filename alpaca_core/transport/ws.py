"""WebSocket connection helpers for the trading stream."""

from __future__ import annotations

import asyncio

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from ..errors import (
    AlpacaConnectionError,
    AlpacaHandshakeError,
    AlpacaTimeout,
)


async def connect_websocket(
    url: str,
    *,
    ping_interval: int | None = 20,
    timeout: float = 15.0,
) -> ClientConnection:
    """Connect to a streaming endpoint.

    ``wss://`` URLs are wrapped in TLS by the websockets library, which also
    answers pings and performs the closing handshake.

    Args:
        url: Stream endpoint, e.g. ``wss://paper-api.alpaca.markets/stream``
        ping_interval: Interval for keepalive ping frames (None disables)
        timeout: Connection timeout
    """
    try:
        return await asyncio.wait_for(
            websockets.connect(
                url,
                ping_interval=ping_interval,
                close_timeout=5,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise AlpacaTimeout("WebSocket connection timed out") from err
    except (InvalidHandshake, InvalidURI) as err:
        raise AlpacaHandshakeError("WebSocket handshake failed") from err
    except (OSError, WebSocketException) as err:
        raise AlpacaConnectionError("WebSocket connection failed") from err
