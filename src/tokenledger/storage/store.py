"""In-memory storage for ledger transactions and contracts."""

import logging
import threading
from typing import Optional

from tokenledger.core.address import Address, AddressLike, to_address
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
    to_kind,
    to_timestamp,
)
from tokenledger.errors import (
    DuplicateContractAddress,
    MissingSignedData,
    NotFound,
)

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dict-backed ledger with the same semantics as SQLiteStore.

    An insert stages its rows and checks the contract address before any
    of them become visible, so a failed insert leaves no trace. A freshly
    allocated id never has a contract, so the address is the only
    uniqueness rule left to check. Ids only advance on success, as
    SQLite's AUTOINCREMENT counter is rolled back with the failed
    transaction.
    """

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig()
        self._transactions: dict[int, Transaction] = {}
        self._contracts: dict[int, Contract] = {}
        self._contract_by_address: dict[bytes, int] = {}
        self._contract_by_tx: dict[int, int] = {}
        self._latest_tx_id: int = 0
        self._latest_contract_id: int = 0
        self._lock = threading.RLock()

    def derive_contract_address(self, transaction_id: int) -> Address:
        return compute_create2_address_with_code_hash(
            self.config.deployer,
            salt_from_transaction_id(transaction_id),
            self.config.init_code_hash,
        )

    def insert_transaction(self, tx: NewTransaction) -> int:
        if tx.data is None:
            raise MissingSignedData()
        sender = to_address(tx.sender)
        kind = to_kind(tx.kind)
        timestamp = to_timestamp(tx.timestamp)

        with self._lock:
            tx_id = self._latest_tx_id + 1
            transaction = Transaction(
                id=tx_id,
                sender=sender,
                kind=kind,
                data=bytes(tx.data),
                timestamp=timestamp,
            )

            contract = None
            if kind.creates_contract:
                try:
                    address = self.derive_contract_address(tx_id)
                    if address in self._contract_by_address:
                        raise DuplicateContractAddress(address)
                except Exception as exc:
                    logger.warning("Rolled back unit of work: %s", exc)
                    raise
                contract = Contract(
                    id=self._latest_contract_id + 1,
                    address=address,
                    signers=(sender,),
                    transaction_id=tx_id,
                )

            # Commit
            self._transactions[tx_id] = transaction
            self._latest_tx_id = tx_id
            if contract is not None:
                self._contracts[contract.id] = contract
                self._contract_by_address[bytes(contract.address)] = contract.id
                self._contract_by_tx[tx_id] = contract.id
                self._latest_contract_id = contract.id

        logger.debug("Inserted transaction %d (%s) from %s", tx_id, kind.name, sender)
        if contract is not None:
            logger.info("Created contract %s for transaction %d", contract.address, tx_id)
        return tx_id

    def _select(self, predicate) -> list[Transaction]:
        with self._lock:
            return [tx for _, tx in sorted(self._transactions.items()) if predicate(tx)]

    def transaction_by_id(self, tx_id: int) -> Transaction:
        with self._lock:
            tx = self._transactions.get(tx_id)
        if tx is None:
            raise NotFound(f"no transaction with id {tx_id}")
        return tx

    def transactions_by_sender(self, sender: AddressLike) -> list[Transaction]:
        sender = to_address(sender)
        return self._select(lambda tx: tx.sender == sender)

    def transactions_by_kind(self, kind: KindLike) -> list[Transaction]:
        kind = to_kind(kind)
        return self._select(lambda tx: tx.kind is kind)

    def transactions_by_kind_and_sender(
        self, kind: KindLike, sender: AddressLike
    ) -> list[Transaction]:
        kind = to_kind(kind)
        sender = to_address(sender)
        return self._select(lambda tx: tx.kind is kind and tx.sender == sender)

    def transactions_by_kind_after(self, kind: KindLike, timestamp: int) -> list[Transaction]:
        kind = to_kind(kind)
        return self._select(lambda tx: tx.kind is kind and tx.timestamp > timestamp)

    def transactions_between(self, start: int, end: int) -> list[Transaction]:
        return self._select(lambda tx: start <= tx.timestamp <= end)

    def latest_transaction_id(self) -> int:
        return self._latest_tx_id

    def contract_by_id(self, contract_id: int) -> Contract:
        with self._lock:
            contract = self._contracts.get(contract_id)
        if contract is None:
            raise NotFound(f"no contract with id {contract_id}")
        return contract

    def contract_by_address(self, address: AddressLike) -> Contract:
        address = to_address(address)
        with self._lock:
            contract_id = self._contract_by_address.get(bytes(address))
        if contract_id is None:
            raise NotFound(f"no contract with address {address}")
        return self.contract_by_id(contract_id)

    def contract_by_transaction_id(self, tx_id: int) -> Contract:
        with self._lock:
            contract_id = self._contract_by_tx.get(tx_id)
        if contract_id is None:
            raise NotFound(f"no contract with transaction id {tx_id}")
        return self.contract_by_id(contract_id)

    def contracts_by_signer(self, signer: AddressLike) -> list[Contract]:
        signer = to_address(signer)
        with self._lock:
            return [c for _, c in sorted(self._contracts.items()) if signer in c.signers]

    def close(self):
        pass
