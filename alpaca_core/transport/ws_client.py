"""WebSocket channel wrapper for the trading stream."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import aiohttp
from aiohttp import WSMsgType
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..errors import AlpacaConnectionError, AlpacaStreamClosed
from .ws import connect_websocket

_LOGGER = logging.getLogger(__name__)


class AlpacaWsFrameType(Enum):
    """Application frame types surfaced by the channel."""

    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class AlpacaWsFrame:
    """Normalized application frame."""

    type: AlpacaWsFrameType
    data: str | bytes


class AlpacaWsClient:
    """Duplex message channel over a websockets (or aiohttp) connection.

    Only text and binary frames reach the caller. Ping, pong and
    continuation frames are consumed here; a close frame or the end of the
    connection ends the channel. After that every send/receive raises
    ``AlpacaStreamClosed``. The channel never reconnects.
    """

    def __init__(self) -> None:
        self._ws: ClientConnection | aiohttp.ClientWebSocketResponse | None = None
        self._closed = False

    @classmethod
    def from_connection(
        cls, connection: ClientConnection | aiohttp.ClientWebSocketResponse
    ) -> AlpacaWsClient:
        """Wrap an already-open websocket connection."""
        client = cls()
        client._attach(connection)
        return client

    async def connect(
        self,
        url: str,
        *,
        ping_interval: int | None = 20,
        timeout: float = 15.0,
    ) -> None:
        """Connect to the stream endpoint."""
        self._attach(
            await connect_websocket(
                url,
                ping_interval=ping_interval,
                timeout=timeout,
            )
        )

    def _attach(self, connection: Any) -> None:
        self._ws = connection
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once the connection has ended or been closed locally."""
        return self._closed

    async def close(self) -> None:
        """Close the websocket connection."""
        if self._ws is not None:
            self._closed = True
            await self._ws.close()

    def _require_open(self) -> ClientConnection | aiohttp.ClientWebSocketResponse:
        if self._ws is None:
            raise AlpacaConnectionError("WebSocket is not connected")
        if self._closed:
            raise AlpacaStreamClosed()
        return self._ws

    async def send_text(self, text: str) -> None:
        """Send a text frame."""
        ws = self._require_open()
        try:
            if isinstance(ws, aiohttp.ClientWebSocketResponse):
                await ws.send_str(text)
            else:
                await ws.send(text)
        except ConnectionClosed as err:
            self._closed = True
            raise self._closed_error(err) from err
        except (OSError, WebSocketException, aiohttp.ClientError) as err:
            self._closed = True
            raise AlpacaConnectionError("WebSocket send failed") from err

    async def send_json(self, payload: dict[str, Any]) -> None:
        """Send a JSON payload as a text frame."""
        await self.send_text(json.dumps(payload))

    async def receive(self) -> AlpacaWsFrame:
        """Wait for the next text or binary frame.

        Raises:
            AlpacaStreamClosed: The connection has ended.
            AlpacaConnectionError: The connection failed.
        """
        ws = self._require_open()

        while True:
            try:
                if isinstance(ws, aiohttp.ClientWebSocketResponse):
                    msg = await ws.receive()
                else:
                    msg = await ws.recv()
            except ConnectionClosed as err:
                self._closed = True
                raise self._closed_error(err) from err
            except (OSError, WebSocketException, aiohttp.ClientError) as err:
                self._closed = True
                raise AlpacaConnectionError("WebSocket receive failed") from err

            try:
                frame = self._normalize_message(msg)
            except AlpacaConnectionError:
                self._closed = True
                raise

            if frame is None:
                continue
            return frame

    @staticmethod
    def _closed_error(err: ConnectionClosed) -> AlpacaStreamClosed:
        close = err.rcvd
        if close is None:
            return AlpacaStreamClosed()
        return AlpacaStreamClosed(
            f"WebSocket stream has been closed ({close.code})",
            code=close.code,
            reason=close.reason,
        )

    @staticmethod
    def _normalize_message(msg: Any) -> AlpacaWsFrame | None:
        """Normalize backend-specific frames; None means skip."""
        if isinstance(msg, str):
            return AlpacaWsFrame(AlpacaWsFrameType.TEXT, msg)
        if isinstance(msg, (bytes, bytearray)):
            return AlpacaWsFrame(AlpacaWsFrameType.BINARY, bytes(msg))

        msg_type = getattr(msg, "type", None)
        if msg_type is None:
            _LOGGER.debug("Skipping unknown frame object: %r", msg)
            return None

        if msg_type in {WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED}:
            raise AlpacaStreamClosed()
        if msg_type is WSMsgType.ERROR:
            raise AlpacaConnectionError("WebSocket error frame received")

        normalized_type = AlpacaWsClient._map_aiohttp_type(msg_type)
        if normalized_type is None:
            return None
        return AlpacaWsFrame(normalized_type, msg.data)

    @staticmethod
    def _map_aiohttp_type(msg_type: Any) -> AlpacaWsFrameType | None:
        """Map aiohttp WSMsgType data frames to channel frame types."""
        if msg_type is WSMsgType.TEXT:
            return AlpacaWsFrameType.TEXT
        if msg_type is WSMsgType.BINARY:
            return AlpacaWsFrameType.BINARY
        # PING, PONG and CONTINUATION never reach the session
        return None
