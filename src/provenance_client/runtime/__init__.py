"""Runtime helpers for the Provenance client"""

from .errors import (
    ErrorCode,
    PbClientError,
    ValidationError,
    ResolutionError,
    AccountNotFoundError,
    SigningError,
    EstimationError,
    BroadcastError,
    TransportError,
)

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
