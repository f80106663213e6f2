"""SQLite-based persistent storage for ledger transactions and contracts."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from tokenledger.core.address import (
    Address,
    AddressLike,
    decode_address_list,
    encode_address_list,
    to_address,
)
from tokenledger.core.config import LedgerConfig
from tokenledger.core.create2 import (
    compute_create2_address_with_code_hash,
    salt_from_transaction_id,
)
from tokenledger.core.types import (
    Contract,
    KindLike,
    NewTransaction,
    Transaction,
    TransactionKind,
    to_kind,
    to_timestamp,
)
from tokenledger.errors import (
    Corrupt,
    DecodeError,
    DuplicateContractAddress,
    DuplicateTransactionForContract,
    InsertError,
    MissingSignedData,
    NotFound,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)

class SQLiteStore:
    """SQLite-based persistent storage for the ledger.

    Every insert runs as one unit of work: the transaction row and, for
    ``CreateToken``, the derived contract row are committed together or not
    at all. Uniqueness of contract addresses and of the contract's
    transaction id is enforced by table constraints.
    """

    def __init__(self, db_path: str = ":memory:", config: Optional[LedgerConfig] = None):
        """
        Initialize SQLite storage.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory database.
            config: Deployer address and init code used for contract derivation.
        """
        self.db_path = db_path
        self.config = config or LedgerConfig()
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            try:
                # Autocommit mode; units of work issue BEGIN/COMMIT themselves
                self._conn = sqlite3.connect(
                    self.db_path, check_same_thread=False, isolation_level=None
                )
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"cannot open {self.db_path}: {exc}") from exc
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self):
        """Initialize database tables."""
        with self._lock, self._unit_of_work() as cursor:
            # data is nullable in the schema; insert_transaction rejects NULL
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    sender BLOB NOT NULL,
                    transaction_type TEXT NOT NULL,
                    data BLOB,
                    timestamp INTEGER NOT NULL
                )
            """)

            # signers holds the concatenated 20-byte signer addresses
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS contracts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    address BLOB NOT NULL UNIQUE,
                    signers BLOB,
                    transaction_id INTEGER NOT NULL UNIQUE
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_transactions_sender ON transactions(sender)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_transactions_type_timestamp
                ON transactions(transaction_type, timestamp)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_transactions_timestamp ON transactions(timestamp)
            """)

    @contextmanager
    def _unit_of_work(self) -> Iterator[sqlite3.Cursor]:
        """Run the body inside BEGIN IMMEDIATE ... COMMIT, rolling back on error.

        Callers must hold ``_lock``.
        """
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"cannot begin transaction: {exc}") from exc

        cursor = conn.cursor()
        try:
            yield cursor
        except BaseException as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.warning("Rolled back unit of work: %s", exc)
            raise
        else:
            try:
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise StoreUnavailable(f"commit failed: {exc}") from exc
        finally:
            cursor.close()

    # ==================== Insert pipeline ====================

    def derive_contract_address(self, transaction_id: int) -> Address:
        """Derive the contract address for a CreateToken transaction id."""
        return compute_create2_address_with_code_hash(
            self.config.deployer,
            salt_from_transaction_id(transaction_id),
            self.config.init_code_hash,
        )

    def insert_transaction(self, tx: NewTransaction) -> int:
        """
        Insert a transaction, creating its token contract when it is a CreateToken.

        Args:
            tx: Transaction to record. ``tx.data`` must not be None.

        Returns:
            The id assigned to the transaction.

        Raises:
            MissingSignedData: tx.data is None
            DuplicateContractAddress: the derived address is already taken
            DuplicateTransactionForContract: a contract already references the new id
            StoreUnavailable: the database could not be written
            DecodeError: tx.sender, tx.kind or tx.timestamp is malformed
            sqlite3.IntegrityError: a constraint with no matching InsertError failed
        """
        if tx.data is None:
            raise MissingSignedData()
        sender = to_address(tx.sender)
        kind = to_kind(tx.kind)
        timestamp = to_timestamp(tx.timestamp)

        tx_id: int | None = None
        address: Address | None = None

        with self._lock, self._unit_of_work() as cursor:
            try:
                cursor.execute("""
                    INSERT INTO transactions (sender, transaction_type, data, timestamp)
                    VALUES (?, ?, ?, ?)
                """, (bytes(sender), kind.name, bytes(tx.data), timestamp))
                tx_id = cursor.lastrowid

                if kind.creates_contract:
                    address = self.derive_contract_address(tx_id)
                    cursor.execute("""
                        INSERT INTO contracts (address, signers, transaction_id)
                        VALUES (?, ?, ?)
                    """, (bytes(address), encode_address_list([sender]), tx_id))
            except sqlite3.IntegrityError as exc:
                error = self._integrity_error(exc, address, tx_id)
                if error is None:
                    raise
                raise error from exc
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"insert failed: {exc}") from exc

        logger.debug("Inserted transaction %d (%s) from %s", tx_id, kind.name, sender)
        if address is not None:
            logger.info("Created contract %s for transaction %d", address, tx_id)
        return tx_id

    @staticmethod
    def _integrity_error(
        exc: sqlite3.IntegrityError,
        address: Address | None,
        tx_id: int | None,
    ) -> Optional[InsertError]:
        """Map a constraint violation to the matching InsertError, or None if unknown."""
        message = str(exc)
        if "contracts.address" in message:
            return DuplicateContractAddress(address)
        if "contracts.transaction_id" in message:
            return DuplicateTransactionForContract(tx_id)
        return None

    # ==================== Row decoding ====================

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert database row to Transaction object."""
        if row["data"] is None:
            raise Corrupt(f"transaction {row['id']} has no signed data")
        try:
            return Transaction(
                id=row["id"],
                sender=Address(row["sender"]),
                kind=TransactionKind.parse(row["transaction_type"]),
                data=bytes(row["data"]),
                timestamp=to_timestamp(row["timestamp"]),
            )
        except (DecodeError, TypeError) as exc:
            raise Corrupt(f"transaction {row['id']}: {exc}") from exc

    def _row_to_contract(self, row: sqlite3.Row) -> Contract:
        """Convert database row to Contract object."""
        try:
            signers = decode_address_list(row["signers"] or b"")
            address = Address(row["address"])
        except (DecodeError, TypeError) as exc:
            raise Corrupt(f"contract {row['id']}: {exc}") from exc
        if not signers:
            raise Corrupt(f"contract {row['id']} has no signers")
        return Contract(
            id=row["id"],
            address=address,
            signers=tuple(signers),
            transaction_id=row["transaction_id"],
        )

    def _fetch(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._get_conn().execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"query failed: {exc}") from exc

    def _transactions(self, where: str, params: tuple) -> list[Transaction]:
        rows = self._fetch(f"SELECT * FROM transactions WHERE {where} ORDER BY id", params)
        return [self._row_to_transaction(row) for row in rows]

    def _contract(self, column: str, value, label: str) -> Contract:
        rows = self._fetch(f"SELECT * FROM contracts WHERE {column} = ?", (value,))
        if not rows:
            raise NotFound(f"no contract with {label}")
        return self._row_to_contract(rows[0])

    # ==================== Transaction queries ====================

    def transaction_by_id(self, tx_id: int) -> Transaction:
        """Get transaction by id. Raises NotFound if absent."""
        rows = self._fetch("SELECT * FROM transactions WHERE id = ?", (tx_id,))
        if not rows:
            raise NotFound(f"no transaction with id {tx_id}")
        return self._row_to_transaction(rows[0])

    def transactions_by_sender(self, sender: AddressLike) -> list[Transaction]:
        return self._transactions("sender = ?", (bytes(to_address(sender)),))

    def transactions_by_kind(self, kind: KindLike) -> list[Transaction]:
        return self._transactions("transaction_type = ?", (to_kind(kind).name,))

    def transactions_by_kind_and_sender(
        self, kind: KindLike, sender: AddressLike
    ) -> list[Transaction]:
        return self._transactions(
            "transaction_type = ? AND sender = ?",
            (to_kind(kind).name, bytes(to_address(sender))),
        )

    def transactions_by_kind_after(self, kind: KindLike, timestamp: int) -> list[Transaction]:
        """Transactions of a kind with timestamp strictly greater than ``timestamp``."""
        return self._transactions(
            "transaction_type = ? AND timestamp > ?", (to_kind(kind).name, timestamp)
        )

    def transactions_between(self, start: int, end: int) -> list[Transaction]:
        """Transactions with ``start <= timestamp <= end``, in insertion order."""
        return self._transactions("timestamp >= ? AND timestamp <= ?", (start, end))

    def latest_transaction_id(self) -> int:
        """Get the highest committed transaction id, or 0 for an empty ledger."""
        rows = self._fetch("SELECT MAX(id) AS max_id FROM transactions")
        return rows[0]["max_id"] or 0

    # ==================== Contract queries ====================

    def contract_by_id(self, contract_id: int) -> Contract:
        return self._contract("id", contract_id, f"id {contract_id}")

    def contract_by_address(self, address: AddressLike) -> Contract:
        address = to_address(address)
        return self._contract("address", bytes(address), f"address {address}")

    def contract_by_transaction_id(self, tx_id: int) -> Contract:
        return self._contract("transaction_id", tx_id, f"transaction id {tx_id}")

    def contracts_by_signer(self, signer: AddressLike) -> list[Contract]:
        """Contracts whose initial signer set includes ``signer``."""
        signer = to_address(signer)
        rows = self._fetch("SELECT * FROM contracts ORDER BY id")
        contracts = [self._row_to_contract(row) for row in rows]
        return [c for c in contracts if signer in c.signers]

    def close(self):
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> "SQLiteStore":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __del__(self):
        """Clean up database connection on object destruction."""
        # __init__ may have failed before the lock existed
        if getattr(self, "_lock", None) is not None:
            self.close()
