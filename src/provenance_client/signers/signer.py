"""
Base signer interface for Provenance transactions.

A signer is a capability: it knows its address and public key and can produce a
raw signature over arbitrary bytes. It has no knowledge of transactions; the
pipeline hands it serialized sign documents.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from google.protobuf import any_pb2
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey

from ..crypto.address import address_from_public_key
from ..crypto.secp256k1 import Secp256k1Error, Secp256k1KeyPair, Secp256k1PublicKey
from ..runtime.errors import ErrorCode, SigningError


class Signer(ABC):
    """
    Base signer interface.

    ``address()`` must be stable for the lifetime of the key and every signature
    returned by ``sign()`` must verify against ``public_key()``. Implementations
    shared between concurrent pipeline runs must be safe for concurrent use.
    """

    @abstractmethod
    def address(self) -> str:
        """
        Get the signer's account address.

        Returns:
            bech32 account address
        """
        pass

    @abstractmethod
    def public_key(self) -> bytes:
        """
        Get the public key bytes.

        Returns:
            33-byte compressed secp256k1 public key
        """
        pass

    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        """
        Sign arbitrary bytes.

        Args:
            data: Bytes to sign (a serialized sign document)

        Returns:
            Raw signature bytes

        Raises:
            SigningError: If signing fails
        """
        pass

    def verify(self, signature: bytes, data: bytes) -> bool:
        """
        Verify a signature against this signer's public key.

        Args:
            signature: Signature bytes to verify
            data: Bytes that were signed

        Returns:
            True if signature is valid
        """
        return Secp256k1PublicKey(self.public_key()).verify(signature, data)

    def pub_key_any(self) -> any_pb2.Any:
        """Public key packed as ``/cosmos.crypto.secp256k1.PubKey``."""
        packed = any_pb2.Any()
        packed.Pack(PubKey(key=self.public_key()), type_url_prefix="/")
        return packed

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.address()})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address='{self.address()}')"


class KeySigner(Signer):
    """
    Base class for signers backed by a local secp256k1 key pair.

    Subclasses only decide where the key comes from.
    """

    def __init__(self, key_pair: Secp256k1KeyPair, prefix: str):
        """
        Initialize key signer.

        Args:
            key_pair: Resolved secp256k1 key pair
            prefix: bech32 human readable prefix of the network
        """
        self._key_pair = key_pair
        self.prefix = prefix
        self._address = address_from_public_key(key_pair.public_key().to_bytes(), prefix)

    def address(self) -> str:
        return self._address

    def public_key(self) -> bytes:
        return self._key_pair.public_key().to_bytes()

    def sign(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise SigningError(
                f"Can only sign bytes, got {type(data).__name__}",
                details={"address": self._address},
            )
        try:
            return self._key_pair.sign(bytes(data))
        except Secp256k1Error as e:
            raise SigningError(
                f"Signing failed for {self._address}",
                details={"address": self._address},
                cause=e,
            ) from e


class PrivateKeySigner(KeySigner):
    """Signer over a raw 32-byte private key."""

    def __init__(self, private_key: bytes, prefix: str):
        """
        Initialize signer.

        Args:
            private_key: 32-byte secp256k1 private key
            prefix: bech32 human readable prefix

        Raises:
            SigningError: If the key material is invalid
        """
        try:
            key_pair = Secp256k1KeyPair(private_key)
        except Secp256k1Error as e:
            raise SigningError("Invalid private key", code=ErrorCode.INVALID_KEY, cause=e) from e
        super().__init__(key_pair, prefix)

    @classmethod
    def from_hex(cls, private_key_hex: str, prefix: str) -> PrivateKeySigner:
        """Create a signer from a hex encoded private key."""
        try:
            private_key = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise SigningError("Invalid private key hex", code=ErrorCode.INVALID_KEY, cause=e) from e
        return cls(private_key, prefix)


__all__ = [
    "Signer",
    "KeySigner",
    "PrivateKeySigner",
]
