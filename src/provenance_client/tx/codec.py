"""
Sign-document and transaction assembly.

Every signer signs the cosmos ``SIGN_MODE_DIRECT`` document: the deterministic
body bytes, the deterministic auth-info bytes, the chain id and the signer's
account number. Signer infos, sign documents and signatures all follow the
signer order of the :class:`~provenance_client.tx.context.BaseRequest`.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import (
    AuthInfo,
    Fee,
    ModeInfo,
    SignDoc,
    SignerInfo,
    Tx,
    TxRaw,
)

from ..runtime.errors import SigningError
from .context import BaseRequest
from .fees import GasEstimate

logger = logging.getLogger(__name__)


def build_auth_info(base_request: BaseRequest, gas_estimate: Optional[GasEstimate] = None) -> AuthInfo:
    """
    Build the auth info for a request.

    Args:
        base_request: Request to describe
        gas_estimate: Gas limit and fee; the zero placeholder when omitted

    Returns:
        AuthInfo with one signer info per signer
    """
    gas_estimate = gas_estimate or GasEstimate.placeholder()
    signer_infos = [
        SignerInfo(
            public_key=entry.signer.pub_key_any(),
            mode_info=ModeInfo(single=ModeInfo.Single(mode=SignMode.SIGN_MODE_DIRECT)),
            sequence=entry.sequence,
        )
        for entry in base_request.signers
    ]
    fee = Fee(
        amount=gas_estimate.fee_protos(),
        gas_limit=gas_estimate.gas_limit,
        granter=base_request.fee_granter or "",
    )
    return AuthInfo(signer_infos=signer_infos, fee=fee)


def build_sign_docs(base_request: BaseRequest, auth_info_bytes: bytes, body_bytes: bytes) -> List[SignDoc]:
    """One sign document per signer, in signer order."""
    return [
        SignDoc(
            body_bytes=body_bytes,
            auth_info_bytes=auth_info_bytes,
            chain_id=base_request.chain_id,
            account_number=entry.account_number,
        )
        for entry in base_request.signers
    ]


def build_sign_doc_bytes_list(base_request: BaseRequest, auth_info_bytes: bytes, body_bytes: bytes) -> List[bytes]:
    """Deterministic serializations of :func:`build_sign_docs`."""
    return [
        doc.SerializeToString(deterministic=True)
        for doc in build_sign_docs(base_request, auth_info_bytes, body_bytes)
    ]


def sign_all(base_request: BaseRequest, sign_doc_bytes: Sequence[bytes]) -> List[bytes]:
    """
    Have every signer sign its document.

    Args:
        base_request: Request whose signers sign
        sign_doc_bytes: Serialized sign documents, in signer order

    Returns:
        Signatures in signer order

    Raises:
        SigningError: If any signer fails; nothing is returned in that case
    """
    if len(sign_doc_bytes) != len(base_request.signers):
        raise SigningError(
            f"Expected {len(base_request.signers)} sign documents, got {len(sign_doc_bytes)}"
        )

    signatures = []
    for entry, doc in zip(base_request.signers, sign_doc_bytes):
        try:
            signatures.append(entry.signer.sign(doc))
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(
                f"Signer {entry.signer.address()} failed: {e}",
                details={"address": entry.signer.address()},
                cause=e,
            ) from e
    return signatures


def _sign(base_request: BaseRequest, gas_estimate: Optional[GasEstimate]) -> Tuple[bytes, AuthInfo, bytes, List[bytes]]:
    body_bytes = base_request.body_bytes()
    auth_info = build_auth_info(base_request, gas_estimate)
    auth_info_bytes = auth_info.SerializeToString(deterministic=True)
    signatures = sign_all(base_request, build_sign_doc_bytes_list(base_request, auth_info_bytes, body_bytes))
    return body_bytes, auth_info, auth_info_bytes, signatures


def build_provisional_tx(base_request: BaseRequest) -> Tx:
    """
    Build the fully signed transaction used for gas estimation.

    Uses the placeholder gas estimate; its signatures are never broadcast.
    """
    _, auth_info, _, signatures = _sign(base_request, GasEstimate.placeholder())
    tx = Tx(auth_info=auth_info, signatures=signatures)
    tx.body.CopyFrom(base_request.body)
    return tx


def build_tx(base_request: BaseRequest, gas_estimate: GasEstimate) -> TxRaw:
    """
    Build the final raw transaction.

    The auth info embeds ``gas_estimate`` and every signer signs again, so the
    signatures cover the final fee.

    Args:
        base_request: Request to assemble
        gas_estimate: Final gas limit and fee

    Returns:
        TxRaw ready for broadcast
    """
    body_bytes, _, auth_info_bytes, signatures = _sign(base_request, gas_estimate)
    logger.debug(
        f"Built tx for chain {base_request.chain_id}: {len(signatures)} signature(s), "
        f"gas_limit={gas_estimate.gas_limit}"
    )
    return TxRaw(body_bytes=body_bytes, auth_info_bytes=auth_info_bytes, signatures=signatures)


__all__ = [
    "build_auth_info",
    "build_sign_docs",
    "build_sign_doc_bytes_list",
    "sign_all",
    "build_provisional_tx",
    "build_tx",
]
