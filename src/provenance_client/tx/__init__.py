"""
Transaction pipeline stages.

Base request construction, sign-document and transaction assembly, gas
estimation and broadcast.
"""

from .context import DEFAULT_FEE_ADJUSTMENT, ResolvedAccount, SignerEntry, BaseRequest, build_base_request
from .accounts import AccountResolver
from .fees import (
    DEFAULT_GAS_PRICE,
    DEFAULT_FEE_DENOM,
    Coin,
    GasEstimate,
    GasEstimator,
    GasEstimationMethod,
    cosmos_simulation_estimator,
    fixed_gas_estimator,
    COSMOS_SIMULATION,
)
from .codec import (
    build_auth_info,
    build_sign_docs,
    build_sign_doc_bytes_list,
    sign_all,
    build_provisional_tx,
    build_tx,
)
from .execute import BroadcastMode, Broadcaster, ensure_accepted

__all__ = [
    "DEFAULT_FEE_ADJUSTMENT",
    "ResolvedAccount",
    "SignerEntry",
    "BaseRequest",
    "build_base_request",
    "AccountResolver",
    "DEFAULT_GAS_PRICE",
    "DEFAULT_FEE_DENOM",
    "Coin",
    "GasEstimate",
    "GasEstimator",
    "GasEstimationMethod",
    "cosmos_simulation_estimator",
    "fixed_gas_estimator",
    "COSMOS_SIMULATION",
    "build_auth_info",
    "build_sign_docs",
    "build_sign_doc_bytes_list",
    "sign_all",
    "build_provisional_tx",
    "build_tx",
    "BroadcastMode",
    "Broadcaster",
    "ensure_accepted",
]
