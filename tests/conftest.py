"""
Shared fixtures: deterministic signers, an in-memory transport and a client
wired to it.
"""

import pytest

from provenance_client.api_client import PbClient

from helpers import FakeTransport, mk_body, mk_signer


@pytest.fixture
def signer():
    """Deterministic testnet signer."""
    return mk_signer(1)


@pytest.fixture
def second_signer():
    """Second deterministic testnet signer."""
    return mk_signer(2)


@pytest.fixture
def body():
    return mk_body()


@pytest.fixture
def fake_transport(signer, second_signer):
    """Transport knowing both fixture signers' accounts."""
    transport = FakeTransport(gas_used=100_000)
    transport.set_account(signer.address(), account_number=12, sequence=5)
    transport.set_account(second_signer.address(), account_number=40, sequence=3)
    return transport


@pytest.fixture
def client(fake_transport):
    """Client on chain ``test-1`` over the fake transport."""
    return PbClient("test-1", fake_transport)
