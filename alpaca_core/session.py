"""Handshake state machine for the trading stream.

A session drives one connection through connect, authenticate and subscribe,
then hands the channel to an ``AlpacaStream``. Sessions are single use: any
failure closes the channel and the caller starts over with a new session.

Phases:
    IDLE -> CONNECTING -> AUTHENTICATING -> SUBSCRIBING -> STREAMING -> CLOSED

Every phase may move to CLOSED on error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import (
    AlpacaClientError,
    AlpacaConnectionError,
    AlpacaConnectionFailure,
    AlpacaTimeout,
)
from .protocol import (
    TRADE_UPDATES,
    Authenticate,
    Authorization,
    AuthorizationStatus,
    InboundMessage,
    Listen,
    Listening,
    decode,
    encode,
)
from .stream import AlpacaStream
from .transport import AlpacaWsClient

if TYPE_CHECKING:
    from .config import AlpacaConfig

_LOGGER = logging.getLogger(__name__)


class SessionPhase(Enum):
    """Lifecycle phase of a session."""

    IDLE = "idle"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    SUBSCRIBING = "subscribing"
    STREAMING = "streaming"
    CLOSED = "closed"


@dataclass(frozen=True)
class ConnectionParams:
    """Where to connect and which credentials to present.

    Attributes:
        url: Stream endpoint, e.g. ``wss://paper-api.alpaca.markets/stream``
        key_id: API key id
        secret_key: API secret key (never logged)
        streams: Channels to subscribe to after authorization
    """

    url: str
    key_id: str
    secret_key: str = field(repr=False)
    streams: tuple[str, ...] = (TRADE_UPDATES,)

    def __post_init__(self) -> None:
        object.__setattr__(self, "streams", tuple(self.streams))

    @classmethod
    def from_config(cls, config: AlpacaConfig) -> ConnectionParams:
        return cls(
            url=config.stream_url,
            key_id=config.key_id,
            secret_key=config.secret_key,
            streams=config.streams,
        )


class AlpacaSession:
    """Single-use handshake driver.

    Args:
        params: Connection parameters
        handshake_timeout: Seconds to wait for each handshake reply
            (None waits forever)
        connect_timeout: Seconds to wait for the WebSocket upgrade
        ping_interval: Keepalive ping interval (None disables)
        strict_streams: Fail when the server listens to a different channel
            set than requested, instead of logging a warning
        ws_client: Already-connected channel; skips the CONNECTING phase
    """

    def __init__(
        self,
        params: ConnectionParams,
        *,
        handshake_timeout: float | None = 15.0,
        connect_timeout: float = 15.0,
        ping_interval: int | None = 20,
        strict_streams: bool = False,
        ws_client: AlpacaWsClient | None = None,
    ) -> None:
        self._params = params
        self._handshake_timeout = handshake_timeout
        self._connect_timeout = connect_timeout
        self._ping_interval = ping_interval
        self._strict_streams = strict_streams
        self._ws = ws_client
        self._phase = SessionPhase.IDLE
        self._phase_callback: Callable[[SessionPhase], None] | None = None

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    def on_phase_changed(self, callback: Callable[[SessionPhase], None]) -> None:
        """Register callback for phase transitions."""
        self._phase_callback = callback

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def connect(self) -> AlpacaStream:
        """Run the handshake and return the live stream.

        Raises:
            AlpacaClientError: The session was already used.
            AlpacaTimeout: The upgrade or a handshake reply timed out.
            AlpacaConnectionError: The channel failed or closed.
            AlpacaHandshakeError: The WebSocket upgrade was rejected.
            AlpacaConnectionFailure: Authorization or subscription was refused,
                or an unexpected message arrived during the handshake.
            AlpacaDecodeError: A handshake reply could not be decoded.
        """
        if self._phase is not SessionPhase.IDLE:
            raise AlpacaClientError(f"Session cannot connect from {self._phase.value}")

        try:
            if self._ws is None:
                self._set_phase(SessionPhase.CONNECTING)
                _LOGGER.info("Connecting to %s", self._params.url)
                self._ws = AlpacaWsClient()
                await self._ws.connect(
                    self._params.url,
                    ping_interval=self._ping_interval,
                    timeout=self._connect_timeout,
                )
                _LOGGER.debug("WebSocket connected")

            self._set_phase(SessionPhase.AUTHENTICATING)
            await self._authenticate()

            self._set_phase(SessionPhase.SUBSCRIBING)
            await self._subscribe()
        except (AlpacaClientError, asyncio.CancelledError) as err:
            _LOGGER.warning("Handshake failed in %s: %s", self._phase.value, err)
            await self._abort()
            raise

        self._set_phase(SessionPhase.STREAMING)
        return AlpacaStream(
            self._ws,
            self._params.streams,
            on_close=lambda: self._set_phase(SessionPhase.CLOSED),
        )

    # -------------------------------------------------------------------------
    # Internal: handshake
    # -------------------------------------------------------------------------

    async def _authenticate(self) -> None:
        ws = self._channel()
        await ws.send_text(
            encode(Authenticate(self._params.key_id, self._params.secret_key))
        )
        _LOGGER.debug("Auth sent")

        reply = await self._receive_reply()
        if not isinstance(reply, Authorization):
            raise AlpacaConnectionFailure(
                f"unexpected {reply.stream} message during authentication"
            )
        if reply.status is not AuthorizationStatus.AUTHORIZED:
            _LOGGER.error("Authorization rejected (action=%s)", reply.action)
            raise AlpacaConnectionFailure(f"{reply.status.value} ({reply.action})")
        _LOGGER.info("Authorization successful")

    async def _subscribe(self) -> None:
        ws = self._channel()
        requested = self._params.streams
        await ws.send_text(encode(Listen(requested)))
        _LOGGER.debug("Listen sent: %s", ", ".join(requested))

        reply = await self._receive_reply()
        if not isinstance(reply, Listening):
            raise AlpacaConnectionFailure(
                f"unexpected {reply.stream} message during subscription"
            )

        if set(reply.streams) != set(requested):
            detail = (
                f"listening to [{', '.join(reply.streams)}], "
                f"requested [{', '.join(requested)}]"
            )
            if self._strict_streams:
                raise AlpacaConnectionFailure(detail)
            _LOGGER.warning("Channel set differs: %s", detail)
        _LOGGER.info("Listening to %s", ", ".join(reply.streams) or "no streams")

    async def _receive_reply(self) -> InboundMessage:
        ws = self._channel()
        try:
            frame = await asyncio.wait_for(
                ws.receive(), timeout=self._handshake_timeout
            )
        except TimeoutError as err:
            raise AlpacaTimeout(
                f"No reply within {self._handshake_timeout}s during "
                f"{self._phase.value}"
            ) from err
        return decode(frame.data)

    def _channel(self) -> AlpacaWsClient:
        if self._ws is None:
            raise AlpacaConnectionError("WebSocket is not connected")
        return self._ws

    async def _abort(self) -> None:
        if self._ws is not None:
            try:
                await asyncio.wait_for(self._ws.close(), timeout=2.0)
            except TimeoutError:
                _LOGGER.warning("WebSocket close timed out")
        self._set_phase(SessionPhase.CLOSED)

    def _set_phase(self, phase: SessionPhase) -> None:
        """Update phase and notify callback."""
        if self._phase is not phase:
            _LOGGER.debug("State: %s → %s", self._phase.value, phase.value)
            self._phase = phase
            if self._phase_callback:
                self._phase_callback(phase)


async def connect(params: ConnectionParams, **kwargs: Any) -> AlpacaStream:
    """Connect, authenticate and subscribe in one call.

    Keyword arguments are passed to ``AlpacaSession``.
    """
    return await AlpacaSession(params, **kwargs).connect()
