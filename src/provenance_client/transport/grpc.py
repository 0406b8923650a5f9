"""
gRPC transport for the cosmos account-query and transaction services.

The channel is long-lived and shared by every pipeline run that uses this
transport; the transport itself never retries a call.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple
from urllib.parse import urlparse

import grpc
from cosmpy.protos.cosmos.auth.v1beta1 import query_pb2 as auth_query
from cosmpy.protos.cosmos.auth.v1beta1 import query_pb2_grpc as auth_query_grpc
from cosmpy.protos.cosmos.tx.v1beta1 import service_pb2 as tx_service
from cosmpy.protos.cosmos.tx.v1beta1 import service_pb2_grpc as tx_service_grpc

from .base import Operation, operation_error

logger = logging.getLogger(__name__)

SECURE_URL_SCHEMES = ("https", "grpcs", "tcp+tls")
DEFAULT_SECURE_PORT = 443
DEFAULT_PLAINTEXT_PORT = 9090


@dataclass
class ChannelOpts:
    """Configuration for the gRPC channel."""
    inbound_message_size: int = 40 * 1024 * 1024
    idle_timeout: float = 300.0
    keep_alive_time: float = 60.0
    keep_alive_timeout: float = 20.0
    call_timeout: Optional[float] = 30.0

    def to_channel_options(self) -> List[Tuple[str, int]]:
        """Render as ``grpc`` channel arguments."""
        return [
            ("grpc.max_receive_message_length", self.inbound_message_size),
            ("grpc.client_idle_timeout_ms", int(self.idle_timeout * 1000)),
            ("grpc.keepalive_time_ms", int(self.keep_alive_time * 1000)),
            ("grpc.keepalive_timeout_ms", int(self.keep_alive_timeout * 1000)),
        ]


def is_secure_uri(uri: str) -> bool:
    """Whether the URI scheme selects transport-layer security."""
    return urlparse(uri).scheme.lower() in SECURE_URL_SCHEMES


def channel_target(uri: str) -> str:
    """
    Get the ``host:port`` target for a channel URI.

    Raises:
        ValueError: If the URI has no scheme or host
    """
    parsed = urlparse(uri)
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"Channel URI must look like scheme://host[:port], got {uri!r}")
    port = parsed.port or (DEFAULT_SECURE_PORT if is_secure_uri(uri) else DEFAULT_PLAINTEXT_PORT)
    return f"{parsed.hostname}:{port}"


class GrpcTransport:
    """
    Transport over a ``grpc.aio`` channel.

    Example:
        ```python
        transport = GrpcTransport("grpcs://grpc.test.provenance.io:443")
        response = await transport.simulate(tx.SerializeToString())
        await transport.close()
        ```
    """

    def __init__(
        self,
        uri: str,
        opts: Optional[ChannelOpts] = None,
        channel: Optional[grpc.aio.Channel] = None,
    ):
        """
        Initialize the transport.

        Args:
            uri: Node URI; ``https``, ``grpcs`` and ``tcp+tls`` select TLS
            opts: Channel options
            channel: Pre-built channel to use instead of creating one
        """
        self.uri = uri
        self.opts = opts or ChannelOpts()

        if channel is None:
            target = channel_target(uri)
            options = self.opts.to_channel_options()
            if is_secure_uri(uri):
                channel = grpc.aio.secure_channel(target, grpc.ssl_channel_credentials(), options=options)
            else:
                channel = grpc.aio.insecure_channel(target, options=options)
            logger.info(f"Opened {'TLS' if is_secure_uri(uri) else 'plaintext'} channel to {target}")

        self.channel = channel
        self.tx_service = tx_service_grpc.ServiceStub(channel)
        self.auth_query = auth_query_grpc.QueryStub(channel)

    async def _call(
        self,
        operation: Operation,
        rpc: Callable[..., Awaitable[Any]],
        request: Any,
    ) -> Any:
        try:
            return await rpc(request, timeout=self.opts.call_timeout)
        except grpc.aio.AioRpcError as e:
            status = e.code()
            logger.debug(f"{operation.value} failed with {status.name}: {e.details()}")
            raise operation_error(
                operation,
                e.details() or status.name,
                status_code=status.value[0],
                cause=e,
            ) from e

    async def account(self, address: str) -> auth_query.QueryAccountResponse:
        return await self._call(
            Operation.ACCOUNT,
            self.auth_query.Account,
            auth_query.QueryAccountRequest(address=address),
        )

    async def simulate(self, tx_bytes: bytes) -> tx_service.SimulateResponse:
        return await self._call(
            Operation.SIMULATE,
            self.tx_service.Simulate,
            tx_service.SimulateRequest(tx_bytes=tx_bytes),
        )

    async def broadcast_tx(self, tx_bytes: bytes, mode: int) -> tx_service.BroadcastTxResponse:
        return await self._call(
            Operation.BROADCAST,
            self.tx_service.BroadcastTx,
            tx_service.BroadcastTxRequest(tx_bytes=tx_bytes, mode=mode),
        )

    async def close(self, grace: Optional[float] = 10.0) -> None:
        """Close the channel, waiting up to ``grace`` seconds for in-flight calls."""
        await self.channel.close(grace)
        logger.info(f"Closed channel to {self.uri}")

    async def __aenter__(self) -> GrpcTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "ChannelOpts",
    "GrpcTransport",
    "SECURE_URL_SCHEMES",
    "is_secure_uri",
    "channel_target",
]
