"""
Transaction broadcast.

Submits a raw transaction and hands back the network's response unchanged.
Nothing is retried or resubmitted here.
"""

from __future__ import annotations
import logging
from enum import IntEnum

from cosmpy.protos.cosmos.tx.v1beta1 import service_pb2 as tx_service
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import TxRaw

from ..runtime.errors import BroadcastError, ErrorCode
from ..transport.base import Transport

logger = logging.getLogger(__name__)


class BroadcastMode(IntEnum):
    """Broadcast modes, valued as the cosmos ``BroadcastMode`` enum."""

    SYNC = tx_service.BROADCAST_MODE_SYNC
    ASYNC = tx_service.BROADCAST_MODE_ASYNC
    BLOCK = tx_service.BROADCAST_MODE_BLOCK


class Broadcaster:
    """Submits raw transactions through a transport."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def broadcast(
        self,
        tx_raw: TxRaw,
        mode: BroadcastMode = BroadcastMode.SYNC,
    ) -> tx_service.BroadcastTxResponse:
        """
        Broadcast a raw transaction.

        Args:
            tx_raw: Signed raw transaction
            mode: Broadcast mode, passed through unmodified

        Returns:
            Network response; a non-zero check code is not raised here

        Raises:
            BroadcastError: If the broadcast call itself is rejected
            TransportError: If the node cannot be reached
        """
        response = await self.transport.broadcast_tx(tx_raw.SerializeToString(deterministic=True), int(mode))
        logger.debug(
            f"Broadcast ({BroadcastMode(mode).name}) txhash={response.tx_response.txhash} "
            f"code={response.tx_response.code}"
        )
        return response


def ensure_accepted(response: tx_service.BroadcastTxResponse) -> tx_service.BroadcastTxResponse:
    """
    Raise if the network rejected the transaction.

    Args:
        response: Broadcast response

    Returns:
        The same response when the check result code is zero

    Raises:
        BroadcastError: With the code, codespace, raw log and hash of the rejection
    """
    result = response.tx_response
    if result.code == 0:
        return response

    logger.warning(f"Transaction {result.txhash} rejected: code={result.code} codespace={result.codespace}")
    raise BroadcastError(
        f"Transaction rejected with code {result.code}: {result.raw_log}",
        ErrorCode.TX_REJECTED,
        tx_code=result.code,
        codespace=result.codespace,
        raw_log=result.raw_log,
        tx_hash=result.txhash,
    )


__all__ = [
    "BroadcastMode",
    "Broadcaster",
    "ensure_accepted",
]
