"""End-to-end tests against a local websockets server."""

from __future__ import annotations

import pytest
from websockets.asyncio.server import ServerConnection, serve

from alpaca_core.errors import AlpacaConnectionFailure, AlpacaStreamClosed
from alpaca_core.protocol import Fill, TradeUpdates
from alpaca_core.session import ConnectionParams, connect

from .conftest import authorization, fill_update, listening

AUTH_FRAME = '{"action":"authenticate","data":{"key_id":"key","secret_key":"secret"}}'
LISTEN_FRAME = '{"action":"listen","data":{"streams":["account_updates","trade_updates"]}}'


class TestLoopbackStream:
    """Tests running the full handshake over a real socket."""

    @pytest.mark.asyncio
    async def test_handshake_binary_update_and_remote_close(self):
        received: list[str] = []

        async def handler(ws: ServerConnection) -> None:
            received.append(await ws.recv())
            await ws.send(authorization())
            received.append(await ws.recv())
            await ws.send(listening("account_updates", "trade_updates"))
            await ws.ping()
            await ws.send(fill_update().encode())
            await ws.close(1000, "bye")

        async with serve(handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            stream = await connect(
                ConnectionParams(
                    f"ws://127.0.0.1:{port}",
                    "key",
                    "secret",
                    ("account_updates", "trade_updates"),
                ),
                handshake_timeout=5.0,
                ping_interval=None,
            )

            message = await stream.receive()

            with pytest.raises(AlpacaStreamClosed) as exc_info:
                await stream.receive()
            with pytest.raises(StopAsyncIteration):
                await anext(stream)

        assert received == [AUTH_FRAME, LISTEN_FRAME]
        assert isinstance(message, TradeUpdates)
        assert isinstance(message.event, Fill)
        assert message.event.price == 179.08
        assert message.event.qty == 100
        assert exc_info.value.code == 1000
        assert exc_info.value.reason == "bye"
        assert stream.closed is True

    @pytest.mark.asyncio
    async def test_unauthorized_closes_socket(self):
        received: list[str] = []

        async def handler(ws: ServerConnection) -> None:
            received.append(await ws.recv())
            await ws.send(authorization("unauthorized"))
            await ws.wait_closed()

        async with serve(handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            with pytest.raises(AlpacaConnectionFailure, match="unauthorized"):
                await connect(
                    ConnectionParams(f"ws://127.0.0.1:{port}", "key", "secret"),
                    handshake_timeout=5.0,
                    ping_interval=None,
                )

        assert received == [AUTH_FRAME]
