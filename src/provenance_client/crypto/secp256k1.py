"""
SECP256K1 cryptographic operations for Provenance.

Provides Cosmos-style ECDSA signatures: deterministic (RFC 6979) signatures over the
SHA-256 digest of the message, encoded as 64-byte ``r || s`` with low-S normalization.
"""

from __future__ import annotations
import hashlib
import os
from typing import Optional

from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError, BadDigestError
from ecdsa.util import sigencode_string_canonize, sigdecode_string, MalformedSignature

PRIVATE_KEY_LENGTH = 32
COMPRESSED_PUBLIC_KEY_LENGTH = 33
SIGNATURE_LENGTH = 64


class Secp256k1Error(Exception):
    """Base exception for SECP256K1 operations."""
    pass


class Secp256k1PublicKey:
    """SECP256K1 public key for verification."""

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize public key.

        Args:
            public_key_bytes: Public key bytes (33 or 65 bytes)

        Raises:
            Secp256k1Error: If the bytes are not a point on the curve
        """
        try:
            self._verifying_key = VerifyingKey.from_string(public_key_bytes, curve=SECP256k1)
        except (ValueError, AssertionError) as e:
            raise Secp256k1Error(f"Invalid public key: {e}") from e
        self.public_key_bytes = self._verifying_key.to_string("compressed")

    def to_bytes(self) -> bytes:
        """Get the 33-byte compressed public key."""
        return self.public_key_bytes

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a ``r || s`` signature against the SHA-256 digest of ``message``.

        Args:
            signature: 64-byte signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        digest = hashlib.sha256(message).digest()
        try:
            return self._verifying_key.verify_digest(signature, digest, sigdecode=sigdecode_string)
        except (BadSignatureError, BadDigestError, MalformedSignature):
            return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Secp256k1PublicKey) and other.public_key_bytes == self.public_key_bytes

    def __hash__(self) -> int:
        return hash(self.public_key_bytes)

    def __str__(self) -> str:
        return f"Secp256k1PublicKey({self.public_key_bytes.hex()[:16]}...)"


class Secp256k1KeyPair:
    """
    SECP256K1 key pair used by every signer in this package.

    The private key never leaves this object; callers get signatures and the
    compressed public key only.
    """

    def __init__(self, private_key_bytes: Optional[bytes] = None):
        """
        Initialize key pair.

        Args:
            private_key_bytes: 32-byte private key (random if omitted)

        Raises:
            Secp256k1Error: If the key is malformed or out of range
        """
        if private_key_bytes is None:
            private_key_bytes = os.urandom(PRIVATE_KEY_LENGTH)
        if len(private_key_bytes) != PRIVATE_KEY_LENGTH:
            raise Secp256k1Error(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key_bytes)}"
            )

        try:
            self._signing_key = SigningKey.from_string(private_key_bytes, curve=SECP256k1)
        except (ValueError, AssertionError) as e:
            raise Secp256k1Error(f"Invalid private key: {e}") from e

        self._public_key = Secp256k1PublicKey(
            self._signing_key.get_verifying_key().to_string("compressed")
        )

    @classmethod
    def generate(cls) -> Secp256k1KeyPair:
        """Generate a new random key pair."""
        return cls()

    @classmethod
    def from_hex(cls, private_key_hex: str) -> Secp256k1KeyPair:
        """Create key pair from private key hex string."""
        try:
            private_key_bytes = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise Secp256k1Error(f"Invalid hex string: {e}") from e
        return cls(private_key_bytes)

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        The message is hashed with SHA-256 and signed deterministically.

        Args:
            message: Message to sign

        Returns:
            64-byte ``r || s`` signature with low S
        """
        digest = hashlib.sha256(message).digest()
        return self._signing_key.sign_digest_deterministic(
            digest,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_string_canonize,
        )

    def public_key(self) -> Secp256k1PublicKey:
        """Get the public key."""
        return self._public_key

    def __str__(self) -> str:
        return f"Secp256k1KeyPair(public={self._public_key.to_bytes().hex()[:16]}...)"


__all__ = [
    "Secp256k1KeyPair",
    "Secp256k1PublicKey",
    "Secp256k1Error",
    "PRIVATE_KEY_LENGTH",
    "COMPRESSED_PUBLIC_KEY_LENGTH",
    "SIGNATURE_LENGTH",
]
