"""
Account address derivation.

Cosmos account addresses are the bech32 encoding of the 20-byte
``RIPEMD-160(SHA-256(compressed_public_key))`` hash under a human readable prefix.
"""

from __future__ import annotations
import hashlib
from typing import Tuple

from bech32 import bech32_decode, bech32_encode, convertbits
from Crypto.Hash import RIPEMD160


class AddressError(ValueError):
    """Malformed address or address input."""
    pass


def public_key_hash(public_key_bytes: bytes) -> bytes:
    """
    Compute the Bitcoin-style public key hash: SHA256 + RIPEMD-160.

    Args:
        public_key_bytes: Compressed public key bytes

    Returns:
        20-byte hash
    """
    sha256_hash = hashlib.sha256(public_key_bytes).digest()
    return RIPEMD160.new(sha256_hash).digest()


def encode_address(prefix: str, data: bytes) -> str:
    """Encode raw address bytes under ``prefix``."""
    words = convertbits(data, 8, 5)
    if words is None:
        raise AddressError("Unable to convert address bytes")
    return bech32_encode(prefix, words)


def decode_address(address: str) -> Tuple[str, bytes]:
    """
    Decode a bech32 address.

    Returns:
        ``(prefix, address_bytes)``

    Raises:
        AddressError: If the checksum or payload is invalid
    """
    prefix, words = bech32_decode(address)
    if prefix is None or words is None:
        raise AddressError(f"Invalid bech32 address: {address}")
    data = convertbits(words, 5, 8, False)
    if data is None:
        raise AddressError(f"Invalid bech32 payload: {address}")
    return prefix, bytes(data)


def address_from_public_key(public_key_bytes: bytes, prefix: str) -> str:
    """Derive the account address for a compressed secp256k1 public key."""
    return encode_address(prefix, public_key_hash(public_key_bytes))


__all__ = [
    "AddressError",
    "public_key_hash",
    "encode_address",
    "decode_address",
    "address_from_public_key",
]
