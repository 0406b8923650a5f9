"""
REST gateway transport.

Speaks the cosmos REST gateway (grpc-gateway) JSON API over ``aiohttp`` and maps
the responses back onto the same protobuf types the gRPC transport returns, so
the pipeline cannot tell the two apart.
"""

from __future__ import annotations
import asyncio
import base64
import logging
from typing import Any, Dict, Optional

import aiohttp
from google.protobuf import any_pb2, json_format
from cosmpy.protos.cosmos.auth.v1beta1.auth_pb2 import BaseAccount
from cosmpy.protos.cosmos.auth.v1beta1.query_pb2 import QueryAccountResponse
from cosmpy.protos.cosmos.tx.v1beta1 import service_pb2 as tx_service

from ..runtime.errors import ErrorCode, TransportError
from .base import (
    Operation,
    STATUS_DEADLINE_EXCEEDED,
    STATUS_NOT_FOUND,
    STATUS_UNAVAILABLE,
    operation_error,
)

logger = logging.getLogger(__name__)

BASE_ACCOUNT_TYPE_URL = "/" + BaseAccount.DESCRIPTOR.full_name

ACCOUNT_PATH = "/cosmos/auth/v1beta1/accounts/{address}"
SIMULATE_PATH = "/cosmos/tx/v1beta1/simulate"
BROADCAST_PATH = "/cosmos/tx/v1beta1/txs"

# TxResponse fields carried over from the gateway JSON; nested event and
# message payloads are dropped.
TX_RESPONSE_FIELDS = (
    "height", "txhash", "codespace", "code", "data", "raw_log",
    "info", "gas_wanted", "gas_used", "timestamp",
)

HTTP_STATUS_TO_GRPC = {
    404: STATUS_NOT_FOUND,
    502: STATUS_UNAVAILABLE,
    503: STATUS_UNAVAILABLE,
    504: STATUS_DEADLINE_EXCEEDED,
}


class RestTransport:
    """
    Transport over the cosmos REST gateway.

    Example:
        ```python
        async with RestTransport("https://api.test.provenance.io") as transport:
            response = await transport.account("tp1...")
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the transport.

        Args:
            endpoint: Gateway base URL
            timeout: Total timeout per request in seconds
            session: Optional aiohttp session; one is created on first use otherwise
        """
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                trust_env=True,
            )
            logger.debug(f"Created session for {self.endpoint}")
        return self._session

    async def _request(
        self,
        operation: Operation,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Perform one gateway request and decode the JSON body.

        Raises:
            TransportError: On connection failures, timeouts or undecodable bodies
            PbClientError: Operation specific error for gateway error responses
        """
        url = f"{self.endpoint}{path}"
        try:
            async with self._get_session().request(method, url, json=payload) as response:
                status = response.status
                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    if status == 200:
                        raise TransportError(
                            f"Invalid JSON response from {url}",
                            details={"operation": operation.value, "httpStatus": status},
                            cause=e,
                        ) from e
                    body = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            code = ErrorCode.TIMEOUT if isinstance(e, asyncio.TimeoutError) else ErrorCode.UNAVAILABLE
            raise TransportError(
                f"{operation.value} request to {url} failed: {e}",
                code,
                details={"operation": operation.value},
                cause=e,
            ) from e

        if status != 200:
            body = body if isinstance(body, dict) else {}
            raise operation_error(
                operation,
                body.get("message") or f"HTTP {status}",
                status_code=body.get("code") or HTTP_STATUS_TO_GRPC.get(status),
                details={"httpStatus": status},
            )

        if not isinstance(body, dict):
            raise TransportError(
                f"Unexpected response from {url}",
                details={"operation": operation.value, "httpStatus": status},
            )
        return body

    async def account(self, address: str) -> QueryAccountResponse:
        body = await self._request(Operation.ACCOUNT, "GET", ACCOUNT_PATH.format(address=address))

        response = QueryAccountResponse()
        account = body.get("account")
        if not account:
            return response

        type_url = account.get("@type", "")
        if type_url != BASE_ACCOUNT_TYPE_URL:
            # Keep only the type so the resolver can report it
            response.account.CopyFrom(any_pb2.Any(type_url=type_url))
            return response

        base_account = BaseAccount(
            address=account.get("address", ""),
            account_number=int(account.get("account_number", 0)),
            sequence=int(account.get("sequence", 0)),
        )
        response.account.Pack(base_account, type_url_prefix="/")
        return response

    async def simulate(self, tx_bytes: bytes) -> tx_service.SimulateResponse:
        body = await self._request(
            Operation.SIMULATE,
            "POST",
            SIMULATE_PATH,
            {"tx_bytes": base64.b64encode(tx_bytes).decode("ascii")},
        )
        response = tx_service.SimulateResponse()
        if body.get("gas_info") is None:
            return response
        return json_format.ParseDict(
            {"gas_info": body["gas_info"]},
            response,
            ignore_unknown_fields=True,
        )

    async def broadcast_tx(self, tx_bytes: bytes, mode: int) -> tx_service.BroadcastTxResponse:
        body = await self._request(
            Operation.BROADCAST,
            "POST",
            BROADCAST_PATH,
            {
                "tx_bytes": base64.b64encode(tx_bytes).decode("ascii"),
                "mode": tx_service.BroadcastMode.Name(mode),
            },
        )
        tx_response = body.get("tx_response") or {}
        fields = {k: tx_response[k] for k in TX_RESPONSE_FIELDS if tx_response.get(k) is not None}
        return json_format.ParseDict(
            {"tx_response": fields},
            tx_service.BroadcastTxResponse(),
            ignore_unknown_fields=True,
        )

    async def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            logger.info(f"Closed session for {self.endpoint}")

    async def __aenter__(self) -> RestTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "RestTransport",
    "BASE_ACCOUNT_TYPE_URL",
]
