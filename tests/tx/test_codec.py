"""
Tests for sign-document and transaction assembly.
"""

import pytest
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo

from provenance_client.runtime.errors import SigningError
from provenance_client.tx.codec import (
    build_auth_info,
    build_provisional_tx,
    build_sign_doc_bytes_list,
    build_sign_docs,
    build_tx,
    sign_all,
)
from provenance_client.tx.context import BaseRequest
from provenance_client.tx.fees import Coin, GasEstimate

from helpers import CountingSigner, FailingSigner, assert_signatures_verify, mk_body, mk_entry, mk_signer


def mk_request(*entries, chain_id="test-1", fee_granter=None) -> BaseRequest:
    return BaseRequest(signers=entries, body=mk_body(), chain_id=chain_id, fee_granter=fee_granter)


@pytest.fixture
def estimate():
    return GasEstimate(gas_limit=150_000, fee_amount=(Coin(denom="nhash", amount=285_750_000),), fee_adjustment=1.5)


class TestBuildAuthInfo:
    """Test auth info construction."""

    def test_one_signer_info_per_signer(self):
        a, b = mk_signer(1), mk_signer(2)
        request = mk_request(mk_entry(a, 7, account_number=1), mk_entry(b, 3, account_number=2, sequence_offset=2))

        auth_info = build_auth_info(request)

        assert len(auth_info.signer_infos) == 2
        assert [info.sequence for info in auth_info.signer_infos] == [7, 5]
        assert auth_info.signer_infos[0].public_key == a.pub_key_any()
        assert auth_info.signer_infos[1].public_key == b.pub_key_any()
        for info in auth_info.signer_infos:
            assert info.mode_info.single.mode == SignMode.SIGN_MODE_DIRECT

    def test_placeholder_fee(self):
        auth_info = build_auth_info(mk_request(mk_entry(mk_signer(1), 0)))
        assert auth_info.fee.gas_limit == 0
        assert len(auth_info.fee.amount) == 0
        assert auth_info.fee.granter == ""

    def test_embeds_estimate_and_granter(self, estimate):
        request = mk_request(mk_entry(mk_signer(1), 0), fee_granter="tp1granter")

        auth_info = build_auth_info(request, estimate)

        assert auth_info.fee.gas_limit == 150_000
        assert [(c.denom, c.amount) for c in auth_info.fee.amount] == [("nhash", "285750000")]
        assert auth_info.fee.granter == "tp1granter"


class TestSignDocs:
    """Test sign document assembly."""

    def test_one_doc_per_signer_in_order(self):
        request = mk_request(
            mk_entry(mk_signer(1), 0, account_number=12),
            mk_entry(mk_signer(2), 0, account_number=40),
        )
        auth_info_bytes = build_auth_info(request).SerializeToString(deterministic=True)

        docs = build_sign_docs(request, auth_info_bytes, request.body_bytes())

        assert [doc.account_number for doc in docs] == [12, 40]
        for doc in docs:
            assert doc.chain_id == "test-1"
            assert doc.body_bytes == request.body_bytes()
            assert doc.auth_info_bytes == auth_info_bytes

    def test_deterministic(self):
        request = mk_request(mk_entry(mk_signer(1), 4), mk_entry(mk_signer(2), 9, sequence_offset=1))
        auth_info_bytes = build_auth_info(request).SerializeToString(deterministic=True)

        first = build_sign_doc_bytes_list(request, auth_info_bytes, request.body_bytes())
        second = build_sign_doc_bytes_list(request, auth_info_bytes, request.body_bytes())

        assert first == second

    def test_equal_requests_give_identical_docs(self):
        signer = mk_signer(1)
        first = mk_request(mk_entry(signer, 4))
        second = mk_request(mk_entry(signer, 4))

        def doc_bytes(request):
            auth_info_bytes = build_auth_info(request).SerializeToString(deterministic=True)
            return build_sign_doc_bytes_list(request, auth_info_bytes, request.body_bytes())

        assert doc_bytes(first) == doc_bytes(second)

    def test_sequence_offsets(self):
        signer = mk_signer(1)
        request = mk_request(mk_entry(signer, 11), mk_entry(signer, 11, sequence_offset=1))

        sequences = [info.sequence for info in build_auth_info(request).signer_infos]

        assert sequences == [11, 12]


class TestSignAll:
    """Test signature collection."""

    def test_signs_in_order(self):
        a = CountingSigner(b"\x01" * 32)
        b = CountingSigner(b"\x02" * 32)
        request = mk_request(mk_entry(a, 0, account_number=1), mk_entry(b, 0, account_number=2))
        docs = [b"doc-a", b"doc-b"]

        signatures = sign_all(request, docs)

        assert a.signed == [b"doc-a"]
        assert b.signed == [b"doc-b"]
        assert a.verify(signatures[0], b"doc-a")
        assert b.verify(signatures[1], b"doc-b")

    def test_document_count_must_match(self):
        request = mk_request(mk_entry(mk_signer(1), 0))
        with pytest.raises(SigningError):
            sign_all(request, [b"a", b"b"])

    def test_signing_error_propagates(self):
        request = mk_request(mk_entry(mk_signer(1), 0), mk_entry(FailingSigner(mk_signer(2)), 0))
        with pytest.raises(SigningError, match="Key material unavailable"):
            sign_all(request, [b"a", b"b"])

    def test_other_failures_become_signing_errors(self):
        failing = FailingSigner(mk_signer(2), RuntimeError("hsm offline"))
        request = mk_request(mk_entry(failing, 0))

        with pytest.raises(SigningError) as exc_info:
            sign_all(request, [b"a"])
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.details["address"] == failing.address()


class TestBuildTx:
    """Test provisional and final transaction assembly."""

    def test_signature_per_signer_verifies(self, estimate):
        request = mk_request(
            mk_entry(mk_signer(1), 7, account_number=3),
            mk_entry(mk_signer(2), 3, account_number=8, sequence_offset=2),
            mk_entry(mk_signer(3), 0, account_number=9),
        )

        tx_raw = build_tx(request, estimate)

        assert len(tx_raw.signatures) == 3
        assert tx_raw.body_bytes == request.body_bytes()
        assert_signatures_verify(tx_raw.body_bytes, tx_raw.auth_info_bytes, list(tx_raw.signatures), request)

    def test_final_auth_info_carries_estimate(self, estimate):
        request = mk_request(mk_entry(mk_signer(1), 5, account_number=12))

        auth_info = AuthInfo.FromString(build_tx(request, estimate).auth_info_bytes)

        assert auth_info.fee.gas_limit == estimate.gas_limit
        assert auth_info.fee.amount[0].amount == "285750000"

    def test_provisional_tx_is_fully_signed(self):
        request = mk_request(mk_entry(mk_signer(1), 5), mk_entry(mk_signer(2), 1))

        tx = build_provisional_tx(request)

        assert tx.body == request.body
        assert tx.auth_info.fee.gas_limit == 0
        assert_signatures_verify(
            request.body_bytes(),
            tx.auth_info.SerializeToString(deterministic=True),
            list(tx.signatures),
            request,
        )

    def test_rounds_differ_only_in_fee(self, estimate):
        request = mk_request(mk_entry(mk_signer(1), 5, account_number=12), mk_entry(mk_signer(2), 3, sequence_offset=2))

        provisional = build_provisional_tx(request)
        final = build_tx(request, estimate)
        final_auth_info = AuthInfo.FromString(final.auth_info_bytes)

        assert provisional.body.SerializeToString(deterministic=True) == final.body_bytes
        assert list(provisional.auth_info.signer_infos) == list(final_auth_info.signer_infos)
        assert provisional.auth_info.fee != final_auth_info.fee

        provisional.auth_info.fee.CopyFrom(final_auth_info.fee)
        assert provisional.auth_info.SerializeToString(deterministic=True) == final.auth_info_bytes

    def test_final_round_re_signs(self, estimate):
        signer = CountingSigner(b"\x05" * 32)
        request = mk_request(mk_entry(signer, 0))

        provisional = build_provisional_tx(request)
        final = build_tx(request, estimate)

        assert len(signer.signed) == 2
        assert signer.signed[0] != signer.signed[1]
        assert provisional.signatures[0] != final.signatures[0]
