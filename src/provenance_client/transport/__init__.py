"""
Remote transports for the Provenance client.

Both transports implement the :class:`Transport` contract: gRPC is the default,
the REST gateway transport is available where only HTTP access is possible.
"""

from .base import Operation, Transport, operation_error
from .grpc import ChannelOpts, GrpcTransport, SECURE_URL_SCHEMES
from .rest import RestTransport

__all__ = [
    "Operation",
    "Transport",
    "operation_error",
    "ChannelOpts",
    "GrpcTransport",
    "SECURE_URL_SCHEMES",
    "RestTransport",
]
