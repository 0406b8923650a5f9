"""
Cryptographic primitives for the Provenance client.

secp256k1 signing/verification and bech32 account addresses.
"""

from .secp256k1 import (
    Secp256k1KeyPair,
    Secp256k1PublicKey,
    Secp256k1Error,
)
from .address import (
    AddressError,
    public_key_hash,
    encode_address,
    decode_address,
    address_from_public_key,
)

__all__ = [
    "Secp256k1KeyPair",
    "Secp256k1PublicKey",
    "Secp256k1Error",
    "AddressError",
    "public_key_hash",
    "encode_address",
    "decode_address",
    "address_from_public_key",
]
