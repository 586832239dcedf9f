"""
Ed25519 key material for request signing.

The secret is the base64 encoding of a 32-byte Ed25519 seed. The verifying key
derived from it doubles as the API key sent in X-API-Key. Only the verifying
key is ever exposed; the signing key stays inside KeyPair.
"""

from __future__ import annotations

import base64
import binascii

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from bpxclient.errors import InvalidSecretKeyError, SecretDecodeError

SEED_LENGTH = 32


class KeyPair:
    """Ed25519 signing key and its verifying key."""

    __slots__ = ("_private", "_public", "_verifying_key")

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private = private_key
        self._public: Ed25519PublicKey = private_key.public_key()
        self._verifying_key = self._public.public_bytes(Encoding.Raw, PublicFormat.Raw)

    @classmethod
    def from_secret(cls, secret: str) -> KeyPair:
        """
        Decode a base64 secret into a key pair.

        Raises:
            SecretDecodeError: If the secret is not valid base64.
            InvalidSecretKeyError: If it decodes to anything but 32 bytes.
        """
        try:
            seed = base64.b64decode(secret.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise SecretDecodeError(f"base64 decode error: {e}") from e

        if len(seed) != SEED_LENGTH:
            raise InvalidSecretKeyError(len(seed))

        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def generate(cls) -> KeyPair:
        return cls(Ed25519PrivateKey.generate())

    @property
    def verifying_key(self) -> bytes:
        """Raw 32-byte verifying key."""
        return self._verifying_key

    @property
    def verifying_key_b64(self) -> str:
        """Verifying key as sent in X-API-Key."""
        return base64.b64encode(self._verifying_key).decode("ascii")

    def sign(self, message: bytes) -> bytes:
        """Sign message, returning the 64-byte signature."""
        return self._private.sign(message)

    def sign_b64(self, message: bytes) -> str:
        return base64.b64encode(self.sign(message)).decode("ascii")

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Check a signature against the verifying key."""
        try:
            self._public.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def secret_b64(self) -> str:
        """Export the seed as a base64 secret (for key provisioning scripts)."""
        seed = self._private.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        return base64.b64encode(seed).decode("ascii")

    def __repr__(self) -> str:
        return f"KeyPair(verifying_key={self.verifying_key_b64!r})"
