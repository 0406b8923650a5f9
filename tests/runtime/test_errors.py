"""
Tests for the client error model.
"""

import pytest

from provenance_client.runtime.errors import (
    AccountNotFoundError,
    BroadcastError,
    ErrorCode,
    EstimationError,
    PbClientError,
    ResolutionError,
    SigningError,
    TransportError,
    ValidationError,
)


class TestErrorHierarchy:
    """Every pipeline error is a PbClientError with its own default code."""

    @pytest.mark.parametrize("error_class, code", [
        (ValidationError, ErrorCode.INVALID_REQUEST),
        (ResolutionError, ErrorCode.RESOLUTION_FAILED),
        (AccountNotFoundError, ErrorCode.ACCOUNT_NOT_FOUND),
        (SigningError, ErrorCode.SIGNING_FAILED),
        (EstimationError, ErrorCode.ESTIMATION_FAILED),
        (BroadcastError, ErrorCode.BROADCAST_FAILED),
        (TransportError, ErrorCode.TRANSPORT_ERROR),
    ])
    def test_default_codes(self, error_class, code):
        error = error_class("boom")
        assert isinstance(error, PbClientError)
        assert error.code == code

    def test_account_not_found_is_resolution_error(self):
        assert isinstance(AccountNotFoundError(), ResolutionError)
        assert AccountNotFoundError().message == "Account not found"

    def test_explicit_code_wins(self):
        assert EstimationError("x", ErrorCode.SIMULATION_REJECTED).code == ErrorCode.SIMULATION_REJECTED


class TestErrorRendering:
    """Test string and dictionary forms."""

    def test_str_plain(self):
        assert str(SigningError("no key")) == "[SIGNING_FAILED] no key"

    def test_str_with_details_and_cause(self):
        error = TransportError("down", details={"operation": "simulate"}, cause=OSError("reset"))
        text = str(error)
        assert text.startswith("[TRANSPORT_ERROR] down")
        assert "Details: {'operation': 'simulate'}" in text
        assert "Caused by: reset" in text

    def test_to_dict(self):
        error = ResolutionError("lookup failed", details={"address": "tp1x"}, cause=ValueError("bad"))
        assert error.to_dict() == {
            "code": ErrorCode.RESOLUTION_FAILED.value,
            "message": "lookup failed",
            "details": {"address": "tp1x"},
            "cause": "bad",
        }

    def test_broadcast_error_to_dict(self):
        error = BroadcastError(
            "rejected",
            ErrorCode.TX_REJECTED,
            tx_code=13,
            codespace="sdk",
            raw_log="insufficient fee",
            tx_hash="ABC",
        )
        result = error.to_dict()
        assert result["code"] == ErrorCode.TX_REJECTED.value
        assert result["txCode"] == 13
        assert result["codespace"] == "sdk"
        assert result["rawLog"] == "insufficient fee"
        assert result["txHash"] == "ABC"

    def test_broadcast_error_omits_missing_fields(self):
        result = BroadcastError("rejected").to_dict()
        assert "txCode" not in result
        assert "txHash" not in result
