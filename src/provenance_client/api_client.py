"""
Provenance transaction client.

:class:`PbClient` drives the full pipeline for one transaction: resolve the
signers' accounts, sign a provisional transaction, estimate gas, re-sign with
the final fee and broadcast. Each stage is also exposed on its own.

Example usage:
    ```python
    async with testnet_client() as client:
        signer = WalletSigner(NetworkType.TESTNET, mnemonic)
        response = await client.estimate_and_broadcast_tx(body, [signer])
    ```
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from cosmpy.protos.cosmos.tx.v1beta1.service_pb2 import BroadcastTxResponse
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import TxBody, TxRaw

from .runtime.errors import ValidationError
from .signers.signer import Signer
from .transport.base import Transport
from .transport.grpc import ChannelOpts, GrpcTransport
from .tx import codec
from .tx.accounts import AccountResolver
from .tx.context import DEFAULT_FEE_ADJUSTMENT, BaseRequest, SignerEntry, build_base_request
from .tx.execute import BroadcastMode, Broadcaster
from .tx.fees import COSMOS_SIMULATION, GasEstimate, GasEstimationMethod

# Well-known networks: gRPC endpoint and chain id
NETWORKS = {
    "mainnet": ("grpcs://grpc.provenance.io:443", "pio-mainnet-1"),
    "testnet": ("grpcs://grpc.test.provenance.io:443", "pio-testnet-1"),
    "local": ("grpc://localhost:9090", "testing"),
}


@dataclass
class ClientConfig:
    """Configuration for the Provenance client."""

    chain_id: str
    endpoint: Optional[str] = None
    default_gas_adjustment: float = DEFAULT_FEE_ADJUSTMENT
    default_broadcast_mode: BroadcastMode = BroadcastMode.SYNC
    debug: bool = False


class PbClient:
    """
    Transaction pipeline client.

    The client holds no per-transaction state, so one instance can run any
    number of pipelines concurrently over its shared transport.
    """

    def __init__(
        self,
        chain_id: str,
        transport: Transport,
        gas_estimation_method: GasEstimationMethod = COSMOS_SIMULATION,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the client.

        Args:
            chain_id: Chain identifier signed into every transaction
            transport: Transport to the node; borrowed, not closed by the client
            gas_estimation_method: Strategy producing the gas estimator
            config: Optional client configuration
        """
        if not chain_id:
            raise ValidationError("chain_id must not be empty")
        if config is not None and config.chain_id != chain_id:
            raise ValidationError(
                f"Config chain_id {config.chain_id!r} does not match {chain_id!r}",
                details={"chainId": chain_id, "configChainId": config.chain_id},
            )

        self.chain_id = chain_id
        self.config = config or ClientConfig(chain_id=chain_id)
        self.transport = transport
        self._owns_transport = False

        self.logger = logging.getLogger(__name__)
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self.resolver = AccountResolver(transport)
        self.broadcaster = Broadcaster(transport)
        self.gas_estimator = gas_estimation_method(self)

    @classmethod
    def from_uri(
        cls,
        chain_id: str,
        uri: str,
        opts: Optional[ChannelOpts] = None,
        gas_estimation_method: GasEstimationMethod = COSMOS_SIMULATION,
        config: Optional[ClientConfig] = None,
    ) -> PbClient:
        """
        Create a client with its own gRPC transport.

        Args:
            chain_id: Chain identifier
            uri: Node URI, e.g. ``grpcs://grpc.test.provenance.io:443``
            opts: Channel options
            gas_estimation_method: Strategy producing the gas estimator
            config: Optional client configuration

        Returns:
            Client that closes the transport on :meth:`close`
        """
        config = config or ClientConfig(chain_id=chain_id, endpoint=uri)
        client = cls(chain_id, GrpcTransport(uri, opts), gas_estimation_method, config)
        client._owns_transport = True
        return client

    @classmethod
    def for_network(cls, network: str, **kwargs) -> PbClient:
        """
        Create a client for a well-known network.

        Args:
            network: Network name ('mainnet', 'testnet', 'local')
            **kwargs: Passed to :meth:`from_uri`

        Returns:
            Configured client instance
        """
        try:
            uri, chain_id = NETWORKS[network.lower()]
        except KeyError:
            raise ValidationError(f"Unknown network: {network}", details={"known": sorted(NETWORKS)}) from None
        return cls.from_uri(chain_id, uri, **kwargs)

    async def close(self) -> None:
        """Close the transport if owned by this client."""
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> PbClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Pipeline stages
    # =========================================================================

    async def base_request(
        self,
        body: TxBody,
        signers: Sequence[Union[Signer, SignerEntry]],
        gas_adjustment: Optional[float] = None,
        fee_granter: Optional[str] = None,
    ) -> BaseRequest:
        """
        Build a base request on this client's chain, resolving signer accounts.

        Args:
            body: Transaction body
            signers: Signers or signer entries, in signature order
            gas_adjustment: Optional gas adjustment override
            fee_granter: Optional fee granter address

        Returns:
            Frozen BaseRequest
        """
        return await build_base_request(
            body,
            signers,
            self.chain_id,
            self.resolver,
            gas_adjustment=gas_adjustment,
            fee_granter=fee_granter,
        )

    async def estimate_tx(self, base_request: BaseRequest) -> GasEstimate:
        """
        Estimate gas for a request.

        Signs a provisional transaction with a zero fee (every signer signs) and
        hands it to the gas estimator with the request's gas adjustment.

        Raises:
            SigningError: If any signer fails
            EstimationError: If the estimator cannot produce an estimate
        """
        adjustment = (
            base_request.gas_adjustment
            if base_request.gas_adjustment is not None
            else self.config.default_gas_adjustment
        )
        provisional = codec.build_provisional_tx(base_request)
        estimate = await self.gas_estimator(provisional, adjustment)
        self.logger.debug(
            f"Estimated gas_limit={estimate.gas_limit} fee={[c.model_dump() for c in estimate.fee_amount]}"
        )
        return estimate

    def build_tx(self, base_request: BaseRequest, gas_estimate: GasEstimate) -> TxRaw:
        """Assemble and sign the final raw transaction."""
        return codec.build_tx(base_request, gas_estimate)

    async def broadcast_tx(
        self,
        base_request: BaseRequest,
        gas_estimate: GasEstimate,
        mode: Optional[BroadcastMode] = None,
    ) -> BroadcastTxResponse:
        """
        Build the final transaction and broadcast it.

        Args:
            base_request: Request to broadcast
            gas_estimate: Final gas limit and fee
            mode: Broadcast mode; the configured default when omitted

        Returns:
            Network response, unchanged
        """
        tx_raw = self.build_tx(base_request, gas_estimate)
        return await self.broadcaster.broadcast(tx_raw, mode if mode is not None else self.config.default_broadcast_mode)

    async def estimate_and_broadcast_tx(
        self,
        body: TxBody,
        signers: Sequence[Union[Signer, SignerEntry]],
        mode: Optional[BroadcastMode] = None,
        gas_adjustment: Optional[float] = None,
        fee_granter: Optional[str] = None,
    ) -> BroadcastTxResponse:
        """
        Resolve, estimate, sign and broadcast a transaction.

        Any failure propagates unchanged and nothing is broadcast unless every
        earlier stage succeeded.

        Args:
            body: Transaction body
            signers: Signers or signer entries, in signature order
            mode: Broadcast mode; the configured default when omitted
            gas_adjustment: Optional gas adjustment override
            fee_granter: Optional fee granter address

        Returns:
            Network response, unchanged

        Raises:
            ResolutionError: If an account cannot be resolved
            SigningError: If any signer fails
            EstimationError: If gas estimation fails
            BroadcastError: If the broadcast call is rejected
            TransportError: If the node cannot be reached
        """
        request = await self.base_request(body, signers, gas_adjustment, fee_granter)
        estimate = await self.estimate_tx(request)
        return await self.broadcast_tx(request, estimate, mode)


# Convenience functions for quick client creation
def mainnet_client(**kwargs) -> PbClient:
    """Create a client for Provenance mainnet."""
    return PbClient.for_network("mainnet", **kwargs)


def testnet_client(**kwargs) -> PbClient:
    """Create a client for Provenance testnet."""
    return PbClient.for_network("testnet", **kwargs)


def local_client(**kwargs) -> PbClient:
    """Create a client for a local Provenance node."""
    return PbClient.for_network("local", **kwargs)


__all__ = [
    "NETWORKS",
    "ClientConfig",
    "PbClient",
    "mainnet_client",
    "testnet_client",
    "local_client",
]
