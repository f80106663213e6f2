"""Pytest configuration and shared fixtures for all tests."""

import pytest

from tokenledger.core.config import LedgerConfig
from tokenledger.core.types import NewTransaction, TransactionKind
from tokenledger.storage import InMemoryStore, SQLiteStore, initialize

from tests.fixtures.addresses import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    CHARLIE_ADDRESS,
    SENDER_1,
    SENDER_2,
)
from tests.fixtures.ledger import SCENARIO_TIMESTAMP


# =============================================================================
# Address Fixtures
# =============================================================================

@pytest.fixture
def alice_address():
    return ALICE_ADDRESS


@pytest.fixture
def bob_address():
    return BOB_ADDRESS


@pytest.fixture
def charlie_address():
    return CHARLIE_ADDRESS


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def config():
    """Default ledger configuration."""
    return LedgerConfig()


@pytest.fixture
def sqlite_store(config):
    """In-memory SQLite store."""
    store = SQLiteStore(":memory:", config=config)
    yield store
    store.close()


@pytest.fixture
def memory_store(config):
    return InMemoryStore(config=config)


@pytest.fixture(params=["sqlite", "memory"])
def store(request, config):
    """Run the test against every storage backend."""
    store = initialize(request.param, ":memory:", config=config)
    yield store
    store.close()


@pytest.fixture
def make_tx():
    """Factory for NewTransaction with sensible defaults."""
    def _make(
        kind=TransactionKind.CreateToken,
        sender=SENDER_1,
        data=b"0x",
        timestamp=SCENARIO_TIMESTAMP,
    ):
        return NewTransaction(sender=sender, kind=kind, data=data, timestamp=timestamp)
    return _make


@pytest.fixture
def populated_store(store, make_tx):
    """Two CreateToken from distinct senders, one Mint, one Transfer."""
    store.insert_transaction(make_tx(TransactionKind.CreateToken, SENDER_1, timestamp=1000))
    store.insert_transaction(make_tx(TransactionKind.CreateToken, SENDER_2, timestamp=2000))
    store.insert_transaction(make_tx(TransactionKind.Mint, SENDER_1, timestamp=3000))
    store.insert_transaction(make_tx(TransactionKind.Transfer, SENDER_2, timestamp=4000))
    return store
