"""Client configuration from the environment or a YAML file."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import AlpacaConfigError
from .protocol import TRADE_UPDATES

_LOGGER = logging.getLogger(__name__)

PAPER_API_URL = "https://paper-api.alpaca.markets"
LIVE_API_URL = "https://api.alpaca.markets"
PAPER_STREAM_URL = "wss://paper-api.alpaca.markets/stream"
LIVE_STREAM_URL = "wss://api.alpaca.markets/stream"

_ENV_PREFIX = "APCA_API_"


def stream_url_for(base_url: str) -> str:
    """Derive the stream endpoint from a REST base URL.

    ``https://paper-api.alpaca.markets/v2`` becomes
    ``wss://paper-api.alpaca.markets/stream``.
    """
    url = base_url.rstrip("/")
    if url.endswith("/v2"):
        url = url[: -len("/v2")]
    if url.startswith("https://"):
        url = "wss://" + url[len("https://") :]
    elif url.startswith("http://"):
        url = "ws://" + url[len("http://") :]
    return f"{url}/stream"


def _split_streams(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(s.strip() for s in value.split(",") if s.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(s, str) for s in value):
        return tuple(value)
    raise AlpacaConfigError(f"Invalid streams value: {value!r}")


@dataclass(frozen=True)
class AlpacaConfig:
    """Credentials and endpoints for one account.

    Attributes:
        key_id: API key id
        secret_key: API secret key
        base_url: REST base URL, without the ``/v2`` suffix
        stream_url: Streaming endpoint
        streams: Channels to subscribe to on connect
    """

    key_id: str
    secret_key: str = field(repr=False)
    base_url: str = PAPER_API_URL
    stream_url: str = PAPER_STREAM_URL
    streams: tuple[str, ...] = (TRADE_UPDATES,)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AlpacaConfig:
        """Build a config from lower-case keys, deriving ``stream_url``."""
        try:
            key_id = data["key_id"]
            secret_key = data["secret_key"]
        except KeyError as err:
            raise AlpacaConfigError(f"Missing required setting: {err.args[0]}") from err
        if not key_id or not secret_key:
            raise AlpacaConfigError("key_id and secret_key must not be empty")

        base_url = data.get("base_url") or PAPER_API_URL
        stream_url = data.get("stream_url") or stream_url_for(base_url)
        streams = data.get("streams")

        return cls(
            key_id=str(key_id),
            secret_key=str(secret_key),
            base_url=str(base_url).rstrip("/"),
            stream_url=str(stream_url),
            streams=_split_streams(streams) if streams else (TRADE_UPDATES,),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AlpacaConfig:
        """Read ``APCA_API_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
        """
        env = os.environ if environ is None else environ
        data = {
            name: env[_ENV_PREFIX + name.upper()]
            for name in ("key_id", "secret_key", "base_url", "stream_url", "streams")
            if _ENV_PREFIX + name.upper() in env
        }
        try:
            return cls.from_mapping(data)
        except AlpacaConfigError as err:
            raise AlpacaConfigError(f"Environment: {err}") from err

    @classmethod
    def from_yaml(cls, path: Path | str) -> AlpacaConfig:
        """Load a config file.

        Example:
            key_id: PKXXXXXXXX
            secret_key: xxxxxxxx
            base_url: https://paper-api.alpaca.markets
            streams: [trade_updates, account_updates]
        """
        path = Path(path)
        data = _load_yaml(path)
        if not isinstance(data, dict):
            raise AlpacaConfigError(f"Expected a mapping in {path}")
        _LOGGER.debug("Loaded config from %s", path)
        return cls.from_mapping(data)


def _load_yaml(path: Path) -> Any:
    """Load a YAML file, returning empty dict if file is empty."""
    if not path.exists():
        raise AlpacaConfigError(f"File not found: {path}")
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as err:
        raise AlpacaConfigError(f"Invalid YAML in {path}: {err}") from err
