"""Ledger storage backends."""

from typing import Optional, Union

from tokenledger.core.config import LedgerConfig

from .sqlite_store import SQLiteStore
from .store import InMemoryStore

Store = Union[SQLiteStore, InMemoryStore]


def initialize(
    store_type: str = "sqlite",
    db_path: str = ":memory:",
    config: Optional[LedgerConfig] = None,
) -> Store:
    """Create a ready-to-use store with its tables in place."""
    if store_type == "sqlite":
        return SQLiteStore(db_path, config=config)
    if store_type == "memory":
        return InMemoryStore(config=config)
    raise ValueError(f"Unknown store type: {store_type}")


__all__ = ["InMemoryStore", "SQLiteStore", "Store", "initialize"]
