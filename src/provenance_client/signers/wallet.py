"""
Mnemonic wallet signer.

Derives a secp256k1 key from a BIP39 mnemonic along the network's HD path and
exposes it as a :class:`~provenance_client.signers.signer.Signer`.
"""

from __future__ import annotations
import logging
from enum import Enum

from bip_utils import (
    Bip32KeyError,
    Bip32PathError,
    Bip32Slip10Secp256k1,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
)

from ..crypto.secp256k1 import Secp256k1Error, Secp256k1KeyPair
from ..runtime.errors import ErrorCode, SigningError
from .signer import KeySigner

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    """Address prefix and HD derivation path for each network."""

    TESTNET = ("tp", "m/44'/1'/0'/0/0'")
    MAINNET = ("pb", "m/505'/1'/0'/0/0")

    def __init__(self, prefix: str, path: str):
        self.prefix = prefix
        self.path = path


class WalletSigner(KeySigner):
    """Signer for the first account of a mnemonic wallet."""

    def __init__(self, network_type: NetworkType, mnemonic: str, passphrase: str = ""):
        """
        Initialize wallet signer.

        Args:
            network_type: Network selecting address prefix and derivation path
            mnemonic: BIP39 mnemonic phrase
            passphrase: Optional BIP39 passphrase

        Raises:
            SigningError: If the mnemonic is invalid or derivation fails
        """
        if not Bip39MnemonicValidator().IsValid(mnemonic):
            raise SigningError("Invalid BIP39 mnemonic", code=ErrorCode.INVALID_MNEMONIC)

        seed = Bip39SeedGenerator(mnemonic).Generate(passphrase)
        try:
            node = Bip32Slip10Secp256k1.FromSeedAndPath(seed, network_type.path)
            key_pair = Secp256k1KeyPair(node.PrivateKey().Raw().ToBytes())
        except (Bip32KeyError, Bip32PathError, Secp256k1Error) as e:
            raise SigningError(
                f"Key derivation failed for path {network_type.path}",
                code=ErrorCode.INVALID_KEY,
                cause=e,
            ) from e

        self.network_type = network_type
        super().__init__(key_pair, network_type.prefix)
        logger.debug(f"Derived {network_type.name.lower()} wallet account {self.address()}")


__all__ = [
    "NetworkType",
    "WalletSigner",
]
