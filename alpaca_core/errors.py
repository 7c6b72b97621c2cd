"""Client error types for Alpaca trading API interactions."""

from __future__ import annotations


class AlpacaClientError(Exception):
    """Base error for Alpaca client failures."""


class AlpacaConfigError(AlpacaClientError):
    """Client configuration is missing or invalid."""


class AlpacaTimeout(AlpacaClientError):
    """Timeout while communicating with the API."""


class AlpacaConnectionError(AlpacaClientError):
    """Network connection to the API failed."""


class AlpacaStreamClosed(AlpacaConnectionError):
    """The streaming connection has been closed."""

    def __init__(
        self,
        message: str = "WebSocket stream has been closed",
        *,
        code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.reason = reason


class AlpacaHandshakeError(AlpacaClientError):
    """WebSocket handshake failed."""


class AlpacaConnectionFailure(AlpacaClientError):
    """The server refused the stream authentication or subscription."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to connect: {reason}")
        self.reason = reason


class AlpacaDecodeError(AlpacaClientError):
    """A payload could not be decoded."""


class AlpacaMalformedMessage(AlpacaDecodeError):
    """The payload is not valid JSON."""


class AlpacaUnrecognizedMessage(AlpacaDecodeError):
    """The payload is valid JSON but not a known message shape."""


class AlpacaResponseError(AlpacaClientError):
    """HTTP response error from the API."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
