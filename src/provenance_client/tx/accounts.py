"""
Account metadata lookup.

Turns an address into the (account number, sequence) pair a signer needs.
"""

from __future__ import annotations
import logging

from cosmpy.protos.cosmos.auth.v1beta1.auth_pb2 import BaseAccount

from ..runtime.errors import AccountNotFoundError, ErrorCode
from ..transport.base import Transport
from .context import ResolvedAccount

logger = logging.getLogger(__name__)


class AccountResolver:
    """
    Resolves on-chain account metadata through a transport.

    Read-only: the same address resolves to the same pair for as long as the
    chain state is unchanged.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    async def resolve(self, address: str) -> ResolvedAccount:
        """
        Look up the account at ``address``.

        Args:
            address: bech32 account address

        Returns:
            Resolved account number and sequence

        Raises:
            AccountNotFoundError: If the account is absent or of an unhandled type
            TransportError: If the remote call fails
        """
        response = await self.transport.account(address)

        if not response.HasField("account") or not response.account.type_url:
            raise AccountNotFoundError(f"Account not found: {address}", details={"address": address})

        packed = response.account
        if not packed.Is(BaseAccount.DESCRIPTOR):
            raise AccountNotFoundError(
                f"Account type not handled: {packed.type_url}",
                code=ErrorCode.UNSUPPORTED_ACCOUNT_TYPE,
                details={"address": address, "typeUrl": packed.type_url},
            )

        account = BaseAccount()
        packed.Unpack(account)
        resolved = ResolvedAccount.from_base_account(account)
        logger.debug(f"Account {address}: number={resolved.account_number} sequence={resolved.sequence}")
        return resolved


__all__ = [
    "AccountResolver",
]
