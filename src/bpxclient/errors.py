"""
Error taxonomy for the Backpack Exchange client.

Every failure surfaces as a distinct subclass of BpxError so callers can tell
apart requests that were never sent (configuration, authentication,
canonicalization) from requests the server rejected (BpxApiError) and from
accepted responses the client could not read (DecodeError).
"""

from __future__ import annotations


class BpxError(Exception):
    """Base class for all client errors."""

    # True when the request reached the server
    sent: bool = False


class ConfigError(BpxError):
    """Invalid client configuration, raised at construction time."""


class SecretDecodeError(ConfigError):
    """Secret is not valid base64."""


class InvalidSecretKeyError(ConfigError):
    """Secret decodes but is not a 32-byte Ed25519 seed."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Invalid secret key: expected 32 bytes, got {length}")
        self.length = length


class InvalidUrlError(ConfigError):
    """Malformed base URL."""


class NotAuthenticatedError(BpxError):
    """Signing required but the client holds no key pair."""

    def __init__(self, message: str = "Client is not authenticated") -> None:
        super().__init__(message)


class InvalidRequestError(BpxError):
    """Request cannot be built, e.g. a body that cannot be canonicalized."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid request: {reason}")
        self.reason = reason


class TransportError(BpxError):
    """DNS, connect, TLS or timeout failure below the HTTP layer."""


class BpxApiError(BpxError):
    """Server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code.
        message: Response body text, verbatim.
    """

    sent = True

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Backpack API error: {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DecodeError(BpxError):
    """2xx response body does not match the expected type."""

    sent = True

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body
