"""Typed client for the Alpaca brokerage trading API.

REST endpoints via ``AlpacaHttpClient``; the authenticated trade stream via
``connect()`` / ``AlpacaSession``.
"""

__version__ = "0.1.0"

from .config import AlpacaConfig
from .errors import (
    AlpacaClientError,
    AlpacaConfigError,
    AlpacaConnectionError,
    AlpacaConnectionFailure,
    AlpacaDecodeError,
    AlpacaHandshakeError,
    AlpacaMalformedMessage,
    AlpacaResponseError,
    AlpacaStreamClosed,
    AlpacaTimeout,
    AlpacaUnrecognizedMessage,
)
from .http import AlpacaHttpClient
from .protocol import (
    ACCOUNT_UPDATES,
    TRADE_UPDATES,
    AccountUpdates,
    Authenticate,
    Authorization,
    AuthorizationStatus,
    InboundMessage,
    Listen,
    Listening,
    TradeUpdates,
    decode,
    encode,
)
from .session import AlpacaSession, ConnectionParams, SessionPhase, connect
from .stream import AlpacaStream

__all__ = [
    "ACCOUNT_UPDATES",
    "TRADE_UPDATES",
    "AccountUpdates",
    "AlpacaClientError",
    "AlpacaConfig",
    "AlpacaConfigError",
    "AlpacaConnectionError",
    "AlpacaConnectionFailure",
    "AlpacaDecodeError",
    "AlpacaHandshakeError",
    "AlpacaHttpClient",
    "AlpacaMalformedMessage",
    "AlpacaResponseError",
    "AlpacaSession",
    "AlpacaStream",
    "AlpacaStreamClosed",
    "AlpacaTimeout",
    "AlpacaUnrecognizedMessage",
    "Authenticate",
    "Authorization",
    "AuthorizationStatus",
    "ConnectionParams",
    "InboundMessage",
    "Listen",
    "Listening",
    "SessionPhase",
    "TradeUpdates",
    "__version__",
    "connect",
    "decode",
    "encode",
]
