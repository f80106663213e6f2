"""Core types and constants."""

from .address import (
    Address,
    decode_address_list,
    encode_address_list,
    format_address,
    parse_address,
    to_address,
)
from .config import LedgerConfig
from .constants import DEFAULT_DEPLOYER, DEFAULT_INIT_CODE, ZERO_ADDRESS
from .create2 import derive_contract_address
from .crypto import keccak256
from .types import Contract, NewTransaction, Transaction, TransactionKind, to_kind, to_timestamp

__all__ = [
    "Address",
    "Contract",
    "LedgerConfig",
    "NewTransaction",
    "Transaction",
    "TransactionKind",
    "DEFAULT_DEPLOYER",
    "DEFAULT_INIT_CODE",
    "ZERO_ADDRESS",
    "decode_address_list",
    "derive_contract_address",
    "encode_address_list",
    "format_address",
    "keccak256",
    "parse_address",
    "to_address",
    "to_kind",
    "to_timestamp",
]
