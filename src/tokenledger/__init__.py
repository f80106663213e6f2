"""Token transaction ledger with deterministic CREATE2 contract addresses."""

from tokenledger.core import (
    Address,
    Contract,
    LedgerConfig,
    NewTransaction,
    Transaction,
    TransactionKind,
)
from tokenledger.storage import InMemoryStore, SQLiteStore, initialize

__version__ = "0.1.0"

__all__ = [
    "Address",
    "Contract",
    "InMemoryStore",
    "LedgerConfig",
    "NewTransaction",
    "SQLiteStore",
    "Transaction",
    "TransactionKind",
    "initialize",
]
