"""Tests for client configuration."""

from __future__ import annotations

import pytest

from bpxclient.config import (
    BACKPACK_API_BASE_URL,
    BACKPACK_WS_URL,
    DEFAULT_TIMEOUT_S,
    DEFAULT_WINDOW_MS,
    REDACTED_ENV_VARS,
    ClientConfig,
    validate_url,
)
from bpxclient.errors import ConfigError, InvalidUrlError


class TestClientConfigDefaults:
    """Default values."""

    def test_defaults(self) -> None:
        """Production URLs, 30s timeout, 5000ms window, no secret."""
        config = ClientConfig()
        assert config.base_url == BACKPACK_API_BASE_URL == "https://api.backpack.exchange"
        assert config.ws_url == BACKPACK_WS_URL == "wss://ws.backpack.exchange"
        assert config.timeout_s == DEFAULT_TIMEOUT_S == 30.0
        assert config.window_ms == DEFAULT_WINDOW_MS == 5000
        assert config.secret is None
        assert not config.is_authenticated

    def test_secret_not_in_repr(self) -> None:
        """The secret never appears in repr."""
        config = ClientConfig(secret="c2VjcmV0")
        assert "c2VjcmV0" not in repr(config)
        assert config.is_authenticated


class TestClientConfigValidation:
    """__post_init__ validation."""

    @pytest.mark.parametrize("url", ["ftp://api.backpack.exchange", "api.backpack.exchange", ""])
    def test_invalid_base_url(self, url: str) -> None:
        """Base URL must be http(s) with a host."""
        with pytest.raises(InvalidUrlError):
            ClientConfig(base_url=url)

    def test_invalid_ws_url(self) -> None:
        """Stream URL must be ws(s)."""
        with pytest.raises(InvalidUrlError):
            ClientConfig(ws_url="https://ws.backpack.exchange")

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_non_positive_timeout(self, timeout: float) -> None:
        """Timeout must be positive."""
        with pytest.raises(ConfigError, match="timeout_s"):
            ClientConfig(timeout_s=timeout)

    @pytest.mark.parametrize("window", [0, -5, 60001])
    def test_window_out_of_range(self, window: int) -> None:
        """Window must be within 1..60000."""
        with pytest.raises(ConfigError, match="window_ms"):
            ClientConfig(window_ms=window)

    def test_window_upper_bound_allowed(self) -> None:
        """60000 is accepted."""
        assert ClientConfig(window_ms=60000).window_ms == 60000

    def test_validate_url_returns_input(self) -> None:
        """Valid URLs pass through unchanged."""
        assert validate_url("http://localhost:8080", ("http", "https")) == "http://localhost:8080"


class TestClientConfigFromEnv:
    """ClientConfig.from_env."""

    def test_reads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """All BPX_* variables are honored."""
        monkeypatch.setenv("BPX_API_URL", "http://localhost:8080")
        monkeypatch.setenv("BPX_WS_URL", "ws://localhost:8081")
        monkeypatch.setenv("BPX_SECRET", "c2VjcmV0")
        monkeypatch.setenv("BPX_TIMEOUT_S", "5")
        monkeypatch.setenv("BPX_WINDOW_MS", "10000")

        config = ClientConfig.from_env()

        assert config.base_url == "http://localhost:8080"
        assert config.ws_url == "ws://localhost:8081"
        assert config.secret == "c2VjcmV0"
        assert config.timeout_s == 5.0
        assert config.window_ms == 10000

    def test_defaults_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset variables fall back to defaults; empty secret means none."""
        for var in ("BPX_API_URL", "BPX_WS_URL", "BPX_TIMEOUT_S", "BPX_WINDOW_MS"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("BPX_SECRET", "")

        config = ClientConfig.from_env()

        assert config == ClientConfig()

    def test_bad_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Non-numeric settings raise ConfigError."""
        monkeypatch.setenv("BPX_WINDOW_MS", "five")
        with pytest.raises(ConfigError):
            ClientConfig.from_env()

    def test_secret_env_is_redacted(self) -> None:
        """BPX_SECRET is on the redaction list."""
        assert "BPX_SECRET" in REDACTED_ENV_VARS
