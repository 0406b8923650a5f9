"""
Provenance client error model.

This module provides the error handling framework for the transaction pipeline.
Every stage raises one of the types below and the orchestrator lets it propagate
unchanged, so a pipeline run either fully succeeds or fails with exactly one of them.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Pipeline error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    INVALID_REQUEST = 3

    # Account resolution errors (100-199)
    RESOLUTION_FAILED = 100
    ACCOUNT_NOT_FOUND = 101
    UNSUPPORTED_ACCOUNT_TYPE = 102

    # Signing errors (200-299)
    SIGNING_FAILED = 200
    INVALID_KEY = 201
    INVALID_MNEMONIC = 202

    # Estimation errors (300-399)
    ESTIMATION_FAILED = 300
    SIMULATION_REJECTED = 301

    # Broadcast errors (400-499)
    BROADCAST_FAILED = 400
    TX_REJECTED = 401

    # Transport errors (500-599)
    TRANSPORT_ERROR = 500
    UNAVAILABLE = 501
    TIMEOUT = 502


class PbClientError(Exception):
    """
    Base class for all client errors.

    Carries a code, free-form details and the underlying cause, if any.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code (defaults to the class default)
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(PbClientError):
    """Malformed request inputs."""

    default_code = ErrorCode.INVALID_REQUEST


class ResolutionError(PbClientError):
    """Account lookup failed or returned an unrecognized account type."""

    default_code = ErrorCode.RESOLUTION_FAILED


class AccountNotFoundError(ResolutionError):
    """Account does not exist on chain or is of an unsupported type."""

    default_code = ErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, message: str = "Account not found", code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class SigningError(PbClientError):
    """Key material unavailable or the signing operation failed."""

    default_code = ErrorCode.SIGNING_FAILED


class EstimationError(PbClientError):
    """Gas simulation rejected the transaction or returned no usable estimate."""

    default_code = ErrorCode.ESTIMATION_FAILED


class BroadcastError(PbClientError):
    """
    The network rejected the transaction.

    ``tx_code``, ``codespace``, ``raw_log`` and ``tx_hash`` mirror the check
    result reported by the node when one is available.
    """

    default_code = ErrorCode.BROADCAST_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None,
                 tx_code: Optional[int] = None, codespace: Optional[str] = None,
                 raw_log: Optional[str] = None, tx_hash: Optional[str] = None):
        super().__init__(message, code, details, cause)
        self.tx_code = tx_code
        self.codespace = codespace
        self.raw_log = raw_log
        self.tx_hash = tx_hash

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.tx_code is not None:
            result["txCode"] = self.tx_code
        if self.codespace:
            result["codespace"] = self.codespace
        if self.raw_log:
            result["rawLog"] = self.raw_log
        if self.tx_hash:
            result["txHash"] = self.tx_hash
        return result


class TransportError(PbClientError):
    """Connectivity or timeout failure at a remote-call boundary."""

    default_code = ErrorCode.TRANSPORT_ERROR


__all__ = [
    "ErrorCode",
    "PbClientError",
    "ValidationError",
    "ResolutionError",
    "AccountNotFoundError",
    "SigningError",
    "EstimationError",
    "BroadcastError",
    "TransportError",
]
