from .assertions import assert_signatures_verify
from .mocks import FakeTransport, CountingSigner, FailingSigner
from .factories import (
    mk_signer,
    mk_body,
    mk_entry,
    base_account_response,
    packed_account_response,
    simulate_response,
    broadcast_response,
)

__all__ = [
    "assert_signatures_verify",
    "FakeTransport",
    "CountingSigner",
    "FailingSigner",
    "mk_signer",
    "mk_body",
    "mk_entry",
    "base_account_response",
    "packed_account_response",
    "simulate_response",
    "broadcast_response",
]
