"""Transport layer for the trading stream.

This package contains the WebSocket IO and frame handling.

Components:
- ws: WebSocket connection setup
- ws_client: Frame-level channel (send text, receive application frames)
"""

from .ws import connect_websocket
from .ws_client import AlpacaWsClient, AlpacaWsFrame, AlpacaWsFrameType

__all__ = [
    "AlpacaWsClient",
    "AlpacaWsFrame",
    "AlpacaWsFrameType",
    "connect_websocket",
]
