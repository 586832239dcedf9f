"""
Client configuration.

Defaults point at the production exchange. Values can be supplied directly or
read from the environment with ClientConfig.from_env().
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from bpxclient.errors import ConfigError, InvalidUrlError

BACKPACK_API_BASE_URL = "https://api.backpack.exchange"
BACKPACK_WS_URL = "wss://ws.backpack.exchange"

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_WINDOW_MS = 5000
MAX_WINDOW_MS = 60000

# Env vars that must never be logged
REDACTED_ENV_VARS = frozenset({"BPX_SECRET"})


def validate_url(url: str, schemes: tuple[str, ...]) -> str:
    """Return url unchanged if it has one of the allowed schemes and a host."""
    parts = urlsplit(url)
    if parts.scheme not in schemes or not parts.netloc:
        raise InvalidUrlError(f"Invalid URL: {url!r} (expected {'/'.join(schemes)})")
    return url


@dataclass
class ClientConfig:
    """Configuration for BpxClient."""

    base_url: str = BACKPACK_API_BASE_URL
    ws_url: str = BACKPACK_WS_URL
    secret: str | None = field(default=None, repr=False)  # From BPX_SECRET env var
    headers: dict[str, str] = field(default_factory=dict)
    timeout_s: float = DEFAULT_TIMEOUT_S
    window_ms: int = DEFAULT_WINDOW_MS

    def __post_init__(self) -> None:
        validate_url(self.base_url, ("http", "https"))
        validate_url(self.ws_url, ("ws", "wss"))
        if self.timeout_s <= 0:
            raise ConfigError(f"timeout_s must be > 0, got {self.timeout_s}")
        if not 0 < self.window_ms <= MAX_WINDOW_MS:
            raise ConfigError(f"window_ms must be in 1..{MAX_WINDOW_MS}, got {self.window_ms}")

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build configuration from BPX_* environment variables."""
        try:
            timeout_s = float(os.environ.get("BPX_TIMEOUT_S", DEFAULT_TIMEOUT_S))
            window_ms = int(os.environ.get("BPX_WINDOW_MS", DEFAULT_WINDOW_MS))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        return cls(
            base_url=os.environ.get("BPX_API_URL", BACKPACK_API_BASE_URL),
            ws_url=os.environ.get("BPX_WS_URL", BACKPACK_WS_URL),
            secret=os.environ.get("BPX_SECRET") or None,
            timeout_s=timeout_s,
            window_ms=window_ms,
        )

    @property
    def is_authenticated(self) -> bool:
        """Check if a secret is configured."""
        return bool(self.secret)
