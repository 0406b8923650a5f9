"""
Request context for transaction construction.

Provides the immutable :class:`BaseRequest` that every later pipeline stage reads,
its :class:`SignerEntry` list, and :func:`build_base_request`, which resolves any
missing account metadata before the request is frozen.

Example usage:
    ```python
    request = await build_base_request(
        body,
        [SignerEntry(signer=alice), SignerEntry(signer=bob, sequence_offset=1)],
        chain_id="pio-testnet-1",
        resolver=AccountResolver(transport),
    )
    ```
"""

from __future__ import annotations
import asyncio
import logging
from typing import Optional, Sequence, Tuple, Union, TYPE_CHECKING

import pydantic
from pydantic import BaseModel, Field, field_validator
from cosmpy.protos.cosmos.auth.v1beta1.auth_pb2 import BaseAccount
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import TxBody

from ..runtime.errors import ValidationError
from ..signers.signer import Signer

if TYPE_CHECKING:
    from .accounts import AccountResolver

logger = logging.getLogger(__name__)

DEFAULT_FEE_ADJUSTMENT = 1.25


class ResolvedAccount(BaseModel):
    """On-chain account metadata needed to sign for an address."""

    account_number: int = Field(..., ge=0, description="Account number assigned by the chain")
    sequence: int = Field(..., ge=0, description="Current account sequence")
    address: Optional[str] = Field(default=None, description="Account address, when known")

    model_config = {"frozen": True}

    @classmethod
    def from_base_account(cls, account: BaseAccount) -> ResolvedAccount:
        """Create from a cosmos ``BaseAccount`` message."""
        return cls(
            account_number=account.account_number,
            sequence=account.sequence,
            address=account.address or None,
        )


class SignerEntry(BaseModel):
    """
    One signer of a transaction.

    ``account`` may be supplied by the caller to override the on-chain sequence,
    otherwise it is resolved when the base request is built. ``sequence_offset``
    is added on top, so several transactions can be pre-built for the same
    block window (offsets 0, 1, 2, ...).
    """

    signer: Signer = Field(..., description="Signer capability, borrowed from the caller")
    sequence_offset: int = Field(default=0, ge=0, description="Added to the resolved sequence")
    account: Optional[ResolvedAccount] = Field(default=None, description="Resolved account metadata")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @property
    def sequence(self) -> int:
        """Sequence this signer signs with: resolved sequence plus offset."""
        if self.account is None:
            raise ValidationError(f"Signer {self.signer.address()} has no resolved account")
        return self.account.sequence + self.sequence_offset

    @property
    def account_number(self) -> int:
        if self.account is None:
            raise ValidationError(f"Signer {self.signer.address()} has no resolved account")
        return self.account.account_number

    def with_account(self, account: ResolvedAccount) -> SignerEntry:
        """Return a copy with resolved account metadata."""
        return self.model_copy(update={"account": account})


class BaseRequest(BaseModel):
    """
    Immutable description of a single transaction attempt.

    The order of ``signers`` is fixed here and determines the order of signer
    infos, sign documents and signatures in every later stage.
    """

    signers: Tuple[SignerEntry, ...] = Field(..., min_length=1, description="Ordered signer entries")
    body: TxBody = Field(..., description="Transaction body")
    chain_id: str = Field(..., min_length=1, description="Chain identifier")
    gas_adjustment: Optional[float] = Field(default=None, gt=0, description="Gas adjustment override")
    fee_granter: Optional[str] = Field(default=None, description="Address paying the fee")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @field_validator("signers")
    @classmethod
    def validate_signers(cls, v: Tuple[SignerEntry, ...]) -> Tuple[SignerEntry, ...]:
        """Every signer must carry a resolved account."""
        for index, entry in enumerate(v):
            if entry.account is None:
                raise ValueError(f"signer {index} ({entry.signer.address()}) has no resolved account")
        return v

    @field_validator("body")
    @classmethod
    def copy_body(cls, v: TxBody) -> TxBody:
        """Take a private copy so later caller mutations cannot leak in."""
        body = TxBody()
        body.CopyFrom(v)
        return body

    def body_bytes(self) -> bytes:
        """Deterministic serialization of the body."""
        return self.body.SerializeToString(deterministic=True)


def _as_entry(signer: Union[Signer, SignerEntry]) -> SignerEntry:
    if isinstance(signer, SignerEntry):
        return signer
    if isinstance(signer, Signer):
        return SignerEntry(signer=signer)
    raise ValidationError(f"Expected Signer or SignerEntry, got {type(signer).__name__}")


async def build_base_request(
    body: TxBody,
    signers: Sequence[Union[Signer, SignerEntry]],
    chain_id: str,
    resolver: AccountResolver,
    gas_adjustment: Optional[float] = None,
    fee_granter: Optional[str] = None,
) -> BaseRequest:
    """
    Build a base request, resolving accounts for entries that lack one.

    Lookups for unresolved entries run concurrently, one per entry; the result
    keeps the input order. Caller-supplied accounts pass through unchanged. The
    first failed lookup cancels the others.

    Args:
        body: Transaction body
        signers: Signers or signer entries, in signature order
        chain_id: Chain identifier
        resolver: Account resolver used for unresolved entries
        gas_adjustment: Optional gas adjustment override
        fee_granter: Optional fee granter address

    Returns:
        Frozen BaseRequest

    Raises:
        ResolutionError: If any account lookup fails
        ValidationError: If the inputs are malformed
    """
    entries = [_as_entry(s) for s in signers]
    if not entries:
        raise ValidationError("At least one signer is required")

    async def resolve(entry: SignerEntry) -> SignerEntry:
        if entry.account is not None:
            return entry
        account = await resolver.resolve(entry.signer.address())
        logger.debug(
            f"Resolved {entry.signer.address()}: account_number={account.account_number} "
            f"sequence={account.sequence}"
        )
        return entry.with_account(account)

    tasks = [asyncio.ensure_future(resolve(entry)) for entry in entries]
    try:
        resolved = await asyncio.gather(*tasks)
    except BaseException:
        # Stop lookups still in flight before the failure propagates
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    try:
        return BaseRequest(
            signers=tuple(resolved),
            body=body,
            chain_id=chain_id,
            gas_adjustment=gas_adjustment,
            fee_granter=fee_granter,
        )
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid base request: {e}", cause=e) from e


__all__ = [
    "DEFAULT_FEE_ADJUSTMENT",
    "ResolvedAccount",
    "SignerEntry",
    "BaseRequest",
    "build_base_request",
]
