"""Subscription handle returned by a completed handshake.

The handle owns the channel. Messages are pulled one at a time, either with
``receive()`` or with ``async for``. Any error ends the handle: it is raised
once, the channel is closed, and iteration stops afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from types import TracebackType

from .errors import AlpacaClientError, AlpacaStreamClosed
from .protocol import InboundMessage, Listen, decode, encode
from .transport import AlpacaWsClient

_LOGGER = logging.getLogger(__name__)


class AlpacaStream:
    """Live trading stream.

    Example:
        async with await connect(params) as stream:
            async for message in stream:
                if isinstance(message, TradeUpdates):
                    ...
    """

    def __init__(
        self,
        ws_client: AlpacaWsClient,
        streams: Sequence[str],
        *,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._ws = ws_client
        self._streams: tuple[str, ...] = tuple(streams)
        self._on_close = on_close
        # receive and subscribe share one reader
        self._lock = asyncio.Lock()
        self._finished = False

    @property
    def streams(self) -> tuple[str, ...]:
        """Channels requested so far, in request order."""
        return self._streams

    @property
    def closed(self) -> bool:
        return self._finished

    def __aiter__(self) -> AlpacaStream:
        return self

    async def __anext__(self) -> InboundMessage:
        if self._finished:
            raise StopAsyncIteration
        return await self.receive()

    async def receive(self) -> InboundMessage:
        """Wait for and decode the next inbound message.

        Raises:
            AlpacaStreamClosed: The handle has already ended.
            AlpacaClientError: The channel failed or the frame could not be
                decoded. The handle is closed before the error propagates.
        """
        async with self._lock:
            if self._finished:
                raise AlpacaStreamClosed()
            try:
                frame = await self._ws.receive()
                return decode(frame.data)
            except AlpacaClientError as err:
                _LOGGER.warning("Stream ended: %s", err)
                await self._finish()
                raise

    async def subscribe(self, streams: Iterable[str]) -> None:
        """Extend the channel set.

        The full set (existing channels first, then new ones) is sent in a
        single ``listen`` action. Exactly one reply is consumed; it only has
        to decode.
        """
        extended = tuple(dict.fromkeys((*self._streams, *streams)))

        async with self._lock:
            if self._finished:
                raise AlpacaStreamClosed()
            try:
                await self._ws.send_text(encode(Listen(extended)))
                frame = await self._ws.receive()
                reply = decode(frame.data)
            except AlpacaClientError as err:
                _LOGGER.warning("Subscribe failed: %s", err)
                await self._finish()
                raise

        self._streams = extended
        _LOGGER.debug("Subscribe reply: %r", reply)

    async def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        await self._finish()

    async def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            await asyncio.wait_for(self._ws.close(), timeout=2.0)
        except TimeoutError:
            _LOGGER.warning("WebSocket close timed out")
        if self._on_close is not None:
            self._on_close()

    async def __aenter__(self) -> AlpacaStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
