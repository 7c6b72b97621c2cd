"""Tests for AlpacaConfig loading."""

from __future__ import annotations

import pytest

from alpaca_core.config import (
    LIVE_STREAM_URL,
    PAPER_API_URL,
    PAPER_STREAM_URL,
    AlpacaConfig,
    stream_url_for,
)
from alpaca_core.errors import AlpacaConfigError


class TestStreamUrl:
    """Tests for deriving the stream endpoint."""

    def test_paper(self):
        assert stream_url_for(PAPER_API_URL) == PAPER_STREAM_URL

    def test_live_with_version(self):
        assert stream_url_for("https://api.alpaca.markets/v2/") == LIVE_STREAM_URL

    def test_plain_http(self):
        assert stream_url_for("http://localhost:8080") == "ws://localhost:8080/stream"


class TestFromEnv:
    """Tests for AlpacaConfig.from_env()."""

    def test_minimal(self):
        config = AlpacaConfig.from_env(
            {"APCA_API_KEY_ID": "key", "APCA_API_SECRET_KEY": "secret"}
        )
        assert config.key_id == "key"
        assert config.secret_key == "secret"
        assert config.base_url == PAPER_API_URL
        assert config.stream_url == PAPER_STREAM_URL
        assert config.streams == ("trade_updates",)

    def test_live_base_url_derives_stream(self):
        config = AlpacaConfig.from_env(
            {
                "APCA_API_KEY_ID": "key",
                "APCA_API_SECRET_KEY": "secret",
                "APCA_API_BASE_URL": "https://api.alpaca.markets",
            }
        )
        assert config.stream_url == LIVE_STREAM_URL

    def test_streams_comma_separated(self):
        config = AlpacaConfig.from_env(
            {
                "APCA_API_KEY_ID": "key",
                "APCA_API_SECRET_KEY": "secret",
                "APCA_API_STREAMS": "trade_updates, account_updates",
            }
        )
        assert config.streams == ("trade_updates", "account_updates")

    def test_explicit_stream_url(self):
        config = AlpacaConfig.from_env(
            {
                "APCA_API_KEY_ID": "key",
                "APCA_API_SECRET_KEY": "secret",
                "APCA_API_STREAM_URL": "ws://localhost:12345",
            }
        )
        assert config.stream_url == "ws://localhost:12345"

    def test_missing_secret(self):
        with pytest.raises(AlpacaConfigError, match="secret_key"):
            AlpacaConfig.from_env({"APCA_API_KEY_ID": "key"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("APCA_API_KEY_ID", "env-key")
        monkeypatch.setenv("APCA_API_SECRET_KEY", "env-secret")
        assert AlpacaConfig.from_env().key_id == "env-key"

    def test_secret_hidden_from_repr(self):
        config = AlpacaConfig(key_id="key", secret_key="hunter2")
        assert "hunter2" not in repr(config)


class TestFromYaml:
    """Tests for AlpacaConfig.from_yaml()."""

    def test_load(self, tmp_path):
        path = tmp_path / "alpaca.yaml"
        path.write_text(
            "key_id: key\n"
            "secret_key: secret\n"
            "base_url: https://api.alpaca.markets\n"
            "streams: [trade_updates, account_updates]\n"
        )

        config = AlpacaConfig.from_yaml(path)

        assert config.base_url == "https://api.alpaca.markets"
        assert config.stream_url == LIVE_STREAM_URL
        assert config.streams == ("trade_updates", "account_updates")

    def test_missing_file(self, tmp_path):
        with pytest.raises(AlpacaConfigError, match="not found"):
            AlpacaConfig.from_yaml(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(AlpacaConfigError, match="key_id"):
            AlpacaConfig.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(AlpacaConfigError, match="mapping"):
            AlpacaConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key_id: [unclosed\n")
        with pytest.raises(AlpacaConfigError, match="Invalid YAML"):
            AlpacaConfig.from_yaml(path)

    def test_invalid_streams(self, tmp_path):
        path = tmp_path / "streams.yaml"
        path.write_text("key_id: key\nsecret_key: secret\nstreams: {a: 1}\n")
        with pytest.raises(AlpacaConfigError, match="streams"):
            AlpacaConfig.from_yaml(path)
