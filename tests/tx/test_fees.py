"""
Tests for gas estimation strategies.
"""

import pydantic
import pytest
from unittest.mock import AsyncMock, Mock

from cosmpy.protos.cosmos.tx.v1beta1.service_pb2 import SimulateResponse
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import Tx

from provenance_client.runtime.errors import ErrorCode, EstimationError, ValidationError
from provenance_client.tx.fees import (
    COSMOS_SIMULATION,
    DEFAULT_FEE_DENOM,
    DEFAULT_GAS_PRICE,
    Coin,
    GasEstimate,
    cosmos_simulation_estimator,
    fixed_gas_estimator,
)

from helpers import mk_body, simulate_response


@pytest.fixture
def fake_client():
    client = Mock()
    client.transport = AsyncMock()
    client.transport.simulate.return_value = simulate_response(gas_used=100_000)
    return client


@pytest.fixture
def tx():
    return Tx(body=mk_body(), signatures=[b"\x01" * 64])


class TestGasEstimate:
    """Test gas estimate values."""

    def test_defaults(self):
        assert DEFAULT_GAS_PRICE == 1905.0
        assert DEFAULT_FEE_DENOM == "nhash"

    def test_placeholder(self):
        placeholder = GasEstimate.placeholder()
        assert placeholder.gas_limit == 0
        assert placeholder.fee_amount == ()
        assert placeholder.fee_protos() == []

    def test_rejects_negative_limit(self):
        with pytest.raises(pydantic.ValidationError):
            GasEstimate(gas_limit=-1)

    def test_is_frozen(self):
        estimate = GasEstimate(gas_limit=1)
        with pytest.raises(pydantic.ValidationError):
            estimate.gas_limit = 2

    def test_coin_to_proto(self):
        proto = Coin(denom="nhash", amount=381_000_000).to_proto()
        assert (proto.denom, proto.amount) == ("nhash", "381000000")


class TestCosmosSimulation:
    """Test the simulation-based estimator."""

    @pytest.mark.asyncio
    async def test_limit_and_fee(self, fake_client, tx):
        estimator = COSMOS_SIMULATION(fake_client)

        estimate = await estimator(tx, 1.5)

        assert estimate.gas_limit == 150_000
        assert estimate.fee_amount == (Coin(denom="nhash", amount=285_750_000),)
        assert estimate.fee_adjustment == 1.5

    @pytest.mark.asyncio
    async def test_rounds_up(self, fake_client, tx):
        fake_client.transport.simulate.return_value = simulate_response(gas_used=1001)

        estimate = await COSMOS_SIMULATION(fake_client)(tx, 1.25)

        assert estimate.gas_limit == 1252
        assert estimate.fee_amount[0].amount == 1252 * 1905

    @pytest.mark.asyncio
    async def test_custom_price_and_denom(self, fake_client, tx):
        estimator = cosmos_simulation_estimator(gas_price=0.5, denom="vspn")(fake_client)

        estimate = await estimator(tx, 1.0)

        assert estimate.gas_limit == 100_000
        assert estimate.fee_amount == (Coin(denom="vspn", amount=50_000),)

    @pytest.mark.asyncio
    async def test_simulates_serialized_tx(self, fake_client, tx):
        await COSMOS_SIMULATION(fake_client)(tx, 1.25)

        fake_client.transport.simulate.assert_awaited_once_with(tx.SerializeToString(deterministic=True))

    @pytest.mark.asyncio
    async def test_missing_gas_info(self, fake_client, tx):
        fake_client.transport.simulate.return_value = SimulateResponse()

        with pytest.raises(EstimationError):
            await COSMOS_SIMULATION(fake_client)(tx, 1.25)

    @pytest.mark.asyncio
    async def test_zero_gas_used(self, fake_client, tx):
        fake_client.transport.simulate.return_value = simulate_response(gas_used=0)

        with pytest.raises(EstimationError):
            await COSMOS_SIMULATION(fake_client)(tx, 1.25)

    @pytest.mark.asyncio
    async def test_rejection_propagates(self, fake_client, tx):
        fake_client.transport.simulate.side_effect = EstimationError("out of gas", ErrorCode.SIMULATION_REJECTED)

        with pytest.raises(EstimationError) as exc_info:
            await COSMOS_SIMULATION(fake_client)(tx, 1.25)
        assert exc_info.value.code == ErrorCode.SIMULATION_REJECTED


class TestFixedGasEstimator:
    """Test the offline estimator."""

    @pytest.mark.asyncio
    async def test_returns_fixed_values(self, fake_client, tx):
        estimate = await fixed_gas_estimator(200_000, 381_000_000)(fake_client)(tx, 1.25)

        assert estimate.gas_limit == 200_000
        assert estimate.fee_amount == (Coin(denom="nhash", amount=381_000_000),)
        fake_client.transport.simulate.assert_not_awaited()

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            fixed_gas_estimator(-1, 0)
