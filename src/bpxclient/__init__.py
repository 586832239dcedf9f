"""
Async client for the Backpack Exchange REST API and websocket streams.

Signed endpoints use Ed25519 signatures over a canonical signee string; see
bpxclient.signing. Streams are relayed through bpxclient.ws.StreamChannel.
"""

from bpxclient.config import BACKPACK_API_BASE_URL, BACKPACK_WS_URL, ClientConfig
from bpxclient.errors import (
    BpxApiError,
    BpxError,
    ConfigError,
    DecodeError,
    InvalidRequestError,
    InvalidSecretKeyError,
    InvalidUrlError,
    NotAuthenticatedError,
    SecretDecodeError,
    TransportError,
)
from bpxclient.metrics import ClientMetrics
from bpxclient.rest_client import BpxClient, BpxClientBuilder, BpxRequest
from bpxclient.signing import KeyPair
from bpxclient.ws import ChannelClosedError, StreamChannel, StreamSubscriber

__all__ = [
    "BACKPACK_API_BASE_URL",
    "BACKPACK_WS_URL",
    "BpxApiError",
    "BpxClient",
    "BpxClientBuilder",
    "BpxError",
    "BpxRequest",
    "ChannelClosedError",
    "ClientConfig",
    "ClientMetrics",
    "ConfigError",
    "DecodeError",
    "InvalidRequestError",
    "InvalidSecretKeyError",
    "InvalidUrlError",
    "KeyPair",
    "NotAuthenticatedError",
    "SecretDecodeError",
    "StreamChannel",
    "StreamSubscriber",
    "TransportError",
]
