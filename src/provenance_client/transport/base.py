"""
Remote service contract used by the transaction pipeline.

The pipeline only needs three remote calls: account lookup, transaction simulation
and transaction broadcast. Both transports implement :class:`Transport` and map
their native failures onto the client error taxonomy with :func:`operation_error`.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from cosmpy.protos.cosmos.auth.v1beta1.query_pb2 import QueryAccountResponse
from cosmpy.protos.cosmos.tx.v1beta1.service_pb2 import BroadcastTxResponse, SimulateResponse

from ..runtime.errors import (
    AccountNotFoundError,
    BroadcastError,
    ErrorCode,
    EstimationError,
    PbClientError,
    ResolutionError,
    TransportError,
)

# gRPC status codes (also reported in the REST gateway's error bodies)
STATUS_CANCELLED = 1
STATUS_DEADLINE_EXCEEDED = 4
STATUS_NOT_FOUND = 5
STATUS_UNAVAILABLE = 14

TRANSIENT_STATUS_CODES = frozenset({STATUS_CANCELLED, STATUS_DEADLINE_EXCEEDED, STATUS_UNAVAILABLE})


class Operation(str, Enum):
    """Remote operations performed by the pipeline."""
    ACCOUNT = "account"
    SIMULATE = "simulate"
    BROADCAST = "broadcast"


class Transport(Protocol):
    """Async access to the account-query and transaction services."""

    async def account(self, address: str) -> QueryAccountResponse:
        """Look up the packed account stored at ``address``."""
        ...

    async def simulate(self, tx_bytes: bytes) -> SimulateResponse:
        """Simulate a serialized ``Tx``."""
        ...

    async def broadcast_tx(self, tx_bytes: bytes, mode: int) -> BroadcastTxResponse:
        """Broadcast a serialized ``TxRaw`` with a cosmos ``BroadcastMode`` value."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...


def operation_error(
    operation: Operation,
    message: str,
    status_code: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    cause: Optional[BaseException] = None,
) -> PbClientError:
    """
    Map a failed remote call onto the client error taxonomy.

    Args:
        operation: Operation that failed
        message: Error message reported by the remote side
        status_code: gRPC status code, if known
        details: Additional error details
        cause: Underlying exception

    Returns:
        Error instance to raise
    """
    details = dict(details or {})
    details["operation"] = operation.value
    if status_code is not None:
        details["status"] = status_code

    if status_code in TRANSIENT_STATUS_CODES:
        code = ErrorCode.TIMEOUT if status_code == STATUS_DEADLINE_EXCEEDED else ErrorCode.UNAVAILABLE
        return TransportError(f"{operation.value} call failed: {message}", code, details, cause)

    if operation is Operation.ACCOUNT:
        if status_code == STATUS_NOT_FOUND:
            return AccountNotFoundError(f"Account not found: {message}", details=details, cause=cause)
        return ResolutionError(f"Account lookup failed: {message}", details=details, cause=cause)

    if operation is Operation.SIMULATE:
        return EstimationError(
            f"Simulation rejected: {message}", ErrorCode.SIMULATION_REJECTED, details, cause
        )

    return BroadcastError(f"Broadcast rejected: {message}", ErrorCode.TX_REJECTED, details, cause)


__all__ = [
    "Operation",
    "Transport",
    "operation_error",
    "TRANSIENT_STATUS_CODES",
    "STATUS_NOT_FOUND",
]
