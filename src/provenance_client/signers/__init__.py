"""
Signing infrastructure for the Provenance client.

Provides the signer capability and its key-backed implementations.
"""

from .signer import Signer, KeySigner, PrivateKeySigner
from .wallet import NetworkType, WalletSigner

__all__ = [
    "Signer",
    "KeySigner",
    "PrivateKeySigner",
    "NetworkType",
    "WalletSigner",
]
