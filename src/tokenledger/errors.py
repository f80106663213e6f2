"""Exception hierarchy for the ledger.

DecodeError   - malformed addresses, signer lists, transaction kinds or timestamps
InsertError   - a unit of work was rolled back
QueryError    - a lookup missed, or a stored row could not be decoded
"""


class LedgerError(Exception):
    pass


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class DecodeError(LedgerError, ValueError):
    pass


class InvalidAddressLength(DecodeError):
    def __init__(self, length: int):
        self.length = length
        super().__init__(f"address must be 20 bytes, got {length}")


class InvalidHex(DecodeError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid hex string: {text!r}")


class MisalignedList(DecodeError):
    def __init__(self, length: int):
        self.length = length
        super().__init__(f"address list length {length} is not a multiple of 20")


class UnknownTransactionKind(DecodeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown transaction kind: {name!r}")


class InvalidTimestamp(DecodeError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"timestamp must be an integer, got {value!r}")


# ---------------------------------------------------------------------------
# Inserting
# ---------------------------------------------------------------------------

class InsertError(LedgerError):
    pass


class MissingSignedData(InsertError):
    def __init__(self):
        super().__init__(
            "transaction data cannot be null - all transactions must contain signed data"
        )


class DuplicateContractAddress(InsertError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"contract address already exists: {address}")


class DuplicateTransactionForContract(InsertError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"transaction {transaction_id} already has a contract")


# ---------------------------------------------------------------------------
# Querying
# ---------------------------------------------------------------------------

class QueryError(LedgerError):
    pass


class NotFound(QueryError):
    pass


class Corrupt(QueryError):
    pass


# Raised by both writes and reads when the backend cannot be reached
class StoreUnavailable(InsertError, QueryError):
    pass
