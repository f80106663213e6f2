"""Ledger record types."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from eth_utils import encode_hex

from tokenledger.core.address import Address
from tokenledger.errors import InvalidTimestamp, UnknownTransactionKind


class TransactionKind(Enum):
    CreateToken = "CreateToken"
    AddTokenSigner = "AddTokenSigner"
    RemoveTokenSigner = "RemoveTokenSigner"
    SetDefaultTokenURI = "SetDefaultTokenURI"
    SetTokenURIPerId = "SetTokenURIPerId"
    Mint = "Mint"
    Transfer = "Transfer"
    Burn = "Burn"
    Approve = "Approve"
    SetApprovalForAll = "SetApprovalForAll"

    @classmethod
    def parse(cls, name: str) -> "TransactionKind":
        """Look up a kind by its canonical (case-sensitive) name."""
        try:
            return cls[name]
        except (KeyError, TypeError):
            raise UnknownTransactionKind(name) from None

    @property
    def creates_contract(self) -> bool:
        return self is TransactionKind.CreateToken

    def __str__(self) -> str:
        return self.name


KindLike = Union[TransactionKind, str]


def to_kind(kind: KindLike) -> TransactionKind:
    if isinstance(kind, TransactionKind):
        return kind
    return TransactionKind.parse(kind)


def to_timestamp(value) -> int:
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTimestamp(value)
    return value


@dataclass(frozen=True)
class NewTransaction:
    """A signed transaction submitted for insertion.

    ``data`` is the signed transaction body. It may be empty, but ``None``
    is rejected by the store.
    """
    sender: Address
    kind: TransactionKind
    data: Optional[bytes]
    timestamp: int


@dataclass(frozen=True)
class Transaction:
    id: int
    sender: Address
    kind: TransactionKind
    data: bytes
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender": self.sender.to_hex(),
            "kind": self.kind.name,
            "data": encode_hex(self.data),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Contract:
    id: int
    address: Address
    signers: tuple[Address, ...]
    transaction_id: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "address": self.address.to_hex(),
            "signers": [signer.to_hex() for signer in self.signers],
            "transactionId": self.transaction_id,
        }
