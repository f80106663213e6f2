"""Tests for concurrent inserts against a shared store."""

import threading

import pytest

from tokenledger.core.types import NewTransaction, TransactionKind
from tokenledger.storage import initialize
from tests.fixtures.addresses import ALICE_ADDRESS, BOB_ADDRESS


class TestThreadSafety:
    """Concurrent writers must not break id assignment or the 1:1 invariant."""

    @pytest.mark.parametrize("store_type", ["sqlite", "memory"])
    def test_concurrent_inserts(self, tmp_path, store_type):
        store = initialize(store_type, str(tmp_path / "ledger.db"))

        num_threads = 10
        txs_per_thread = 5
        results = []
        errors = []
        results_lock = threading.Lock()

        def insert_transactions(thread_id):
            sender = ALICE_ADDRESS if thread_id % 2 else BOB_ADDRESS
            try:
                for i in range(txs_per_thread):
                    kind = TransactionKind.CreateToken if i % 2 == 0 else TransactionKind.Transfer
                    tx_id = store.insert_transaction(NewTransaction(
                        sender=sender, kind=kind, data=bytes([thread_id, i]), timestamp=thread_id,
                    ))
                    with results_lock:
                        results.append((tx_id, kind))
            except Exception as e:
                with results_lock:
                    errors.append(e)

        threads = [threading.Thread(target=insert_transactions, args=(t,)) for t in range(num_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        total = num_threads * txs_per_thread
        assert sorted(tx_id for tx_id, _ in results) == list(range(1, total + 1))
        assert store.latest_transaction_id() == total

        created = [tx_id for tx_id, kind in results if kind is TransactionKind.CreateToken]
        addresses = {store.contract_by_transaction_id(tx_id).address for tx_id in created}
        assert len(addresses) == len(created)

        store.close()

    def test_reads_during_writes(self, tmp_path):
        store = initialize("sqlite", str(tmp_path / "ledger.db"))
        stop = threading.Event()
        errors = []

        def reader():
            try:
                while not stop.is_set():
                    for tx in store.transactions_by_kind(TransactionKind.CreateToken):
                        # A visible CreateToken always has its contract
                        store.contract_by_transaction_id(tx.id)
            except Exception as e:
                errors.append(e)

        readers = [threading.Thread(target=reader) for _ in range(3)]
        for t in readers:
            t.start()
        for i in range(30):
            store.insert_transaction(NewTransaction(
                sender=ALICE_ADDRESS, kind=TransactionKind.CreateToken, data=b"", timestamp=i,
            ))
        stop.set()
        for t in readers:
            t.join()

        assert errors == []
        store.close()
