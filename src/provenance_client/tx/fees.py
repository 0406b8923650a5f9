"""
Gas estimation for Provenance transactions.

A gas estimation method is a strategy: given the client it returns an
estimator, and the estimator turns a provisionally signed transaction plus a
gas adjustment into a :class:`GasEstimate`. The default strategy asks the node
to simulate the transaction.

Example usage:
    ```python
    client = PbClient("pio-testnet-1", transport, gas_estimation_method=fixed_gas_estimator(200_000, 381_000))
    ```
"""

from __future__ import annotations
import logging
import math
from typing import Awaitable, Callable, Sequence, Tuple, TYPE_CHECKING

from pydantic import BaseModel, Field
from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin as CoinProto
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import Tx

from ..runtime.errors import EstimationError, ValidationError
from .context import DEFAULT_FEE_ADJUSTMENT

if TYPE_CHECKING:
    from ..api_client import PbClient

logger = logging.getLogger(__name__)

DEFAULT_GAS_PRICE = 1905.0
DEFAULT_FEE_DENOM = "nhash"


class Coin(BaseModel):
    """Amount of a single denomination."""

    denom: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    model_config = {"frozen": True}

    def to_proto(self) -> CoinProto:
        return CoinProto(denom=self.denom, amount=str(self.amount))


class GasEstimate(BaseModel):
    """Gas limit and fee embedded in a transaction's auth info."""

    gas_limit: int = Field(..., ge=0, description="Gas limit")
    fee_amount: Tuple[Coin, ...] = Field(default=(), description="Fee coins")
    fee_adjustment: float = Field(default=DEFAULT_FEE_ADJUSTMENT, gt=0, description="Adjustment applied")

    model_config = {"frozen": True}

    @classmethod
    def placeholder(cls) -> GasEstimate:
        """Zero estimate used while signing the provisional transaction."""
        return cls(gas_limit=0, fee_amount=())

    def fee_protos(self) -> Sequence[CoinProto]:
        return [coin.to_proto() for coin in self.fee_amount]


GasEstimator = Callable[[Tx, float], Awaitable[GasEstimate]]
GasEstimationMethod = Callable[["PbClient"], GasEstimator]


def cosmos_simulation_estimator(
    gas_price: float = DEFAULT_GAS_PRICE,
    denom: str = DEFAULT_FEE_DENOM,
) -> GasEstimationMethod:
    """
    Strategy that simulates the transaction on the node.

    ``gas_limit = ceil(gas_used * adjustment)`` and
    ``fee = ceil(gas_limit * gas_price)`` of ``denom``.

    Args:
        gas_price: Price per unit of gas
        denom: Fee denomination

    Returns:
        Gas estimation method
    """

    def method(client: PbClient) -> GasEstimator:
        async def estimate(tx: Tx, adjustment: float) -> GasEstimate:
            response = await client.transport.simulate(tx.SerializeToString(deterministic=True))
            if not response.HasField("gas_info"):
                raise EstimationError("Simulation returned no gas info")

            gas_used = response.gas_info.gas_used
            if gas_used <= 0:
                raise EstimationError("Simulation reported no gas used", details={"gasUsed": gas_used})
            gas_limit = math.ceil(gas_used * adjustment)
            fee = math.ceil(gas_limit * gas_price)
            logger.debug(f"Simulated gas_used={gas_used} adjustment={adjustment} -> limit={gas_limit} fee={fee}{denom}")
            return GasEstimate(
                gas_limit=gas_limit,
                fee_amount=(Coin(denom=denom, amount=fee),),
                fee_adjustment=adjustment,
            )

        return estimate

    return method


def fixed_gas_estimator(gas_limit: int, fee_amount: int, denom: str = DEFAULT_FEE_DENOM) -> GasEstimationMethod:
    """
    Strategy that returns a fixed gas limit and fee without any network call.

    Args:
        gas_limit: Gas limit to use
        fee_amount: Fee amount in ``denom``
        denom: Fee denomination

    Returns:
        Gas estimation method
    """
    if gas_limit < 0 or fee_amount < 0:
        raise ValidationError("Gas limit and fee amount must be non-negative")

    def method(client: PbClient) -> GasEstimator:
        async def estimate(tx: Tx, adjustment: float) -> GasEstimate:
            return GasEstimate(
                gas_limit=gas_limit,
                fee_amount=(Coin(denom=denom, amount=fee_amount),),
                fee_adjustment=adjustment,
            )

        return estimate

    return method


COSMOS_SIMULATION = cosmos_simulation_estimator()


__all__ = [
    "DEFAULT_GAS_PRICE",
    "DEFAULT_FEE_DENOM",
    "Coin",
    "GasEstimate",
    "GasEstimator",
    "GasEstimationMethod",
    "cosmos_simulation_estimator",
    "fixed_gas_estimator",
    "COSMOS_SIMULATION",
]
