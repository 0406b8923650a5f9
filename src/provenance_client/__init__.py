"""
Provenance Python client

Builds, signs, gas-estimates and broadcasts Provenance (cosmos SDK)
transactions for one or more signers.
"""

from .api_client import ClientConfig, PbClient, mainnet_client, testnet_client, local_client
from .runtime.errors import *
from .signers import *
from .transport import *
from .tx import *

__version__ = "0.1.0"
__all__ = [
    "ClientConfig",
    "PbClient",
    "mainnet_client",
    "testnet_client",
    "local_client",
    "ErrorCode",
    "PbClientError",
    "ValidationError",
    "ResolutionError",
    "AccountNotFoundError",
    "SigningError",
    "EstimationError",
    "BroadcastError",
    "TransportError",
    "Signer",
    "KeySigner",
    "PrivateKeySigner",
    "NetworkType",
    "WalletSigner",
    "ChannelOpts",
    "GrpcTransport",
    "RestTransport",
    "Transport",
    "ResolvedAccount",
    "SignerEntry",
    "BaseRequest",
    "build_base_request",
    "AccountResolver",
    "Coin",
    "GasEstimate",
    "cosmos_simulation_estimator",
    "fixed_gas_estimator",
    "COSMOS_SIMULATION",
    "build_tx",
    "BroadcastMode",
    "Broadcaster",
    "ensure_accepted",
]
