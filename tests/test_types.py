"""Tests for ledger record types and configuration."""

import pytest

from tokenledger.core.address import Address
from tokenledger.core.config import LedgerConfig
from tokenledger.core.constants import DEFAULT_DEPLOYER, DEFAULT_INIT_CODE
from tokenledger.core.crypto import keccak256
from tokenledger.core.types import TransactionKind, to_kind, to_timestamp
from tokenledger.errors import (
    DecodeError,
    InvalidAddressLength,
    InvalidTimestamp,
    UnknownTransactionKind,
)


class TestTransactionKind:
    def test_closed_set(self):
        assert [k.name for k in TransactionKind] == [
            "CreateToken",
            "AddTokenSigner",
            "RemoveTokenSigner",
            "SetDefaultTokenURI",
            "SetTokenURIPerId",
            "Mint",
            "Transfer",
            "Burn",
            "Approve",
            "SetApprovalForAll",
        ]

    @pytest.mark.parametrize("kind", list(TransactionKind))
    def test_name_round_trip(self, kind):
        assert TransactionKind.parse(str(kind)) is kind

    @pytest.mark.parametrize("text", ["createtoken", "CREATETOKEN", "Stake", "", " Mint"])
    def test_unknown_names_rejected(self, text):
        with pytest.raises(UnknownTransactionKind) as excinfo:
            TransactionKind.parse(text)
        assert excinfo.value.name == text

    def test_non_string_rejected(self):
        with pytest.raises(DecodeError):
            TransactionKind.parse(None)

    def test_only_create_token_creates_contract(self):
        assert [k for k in TransactionKind if k.creates_contract] == [TransactionKind.CreateToken]

    def test_to_kind(self):
        assert to_kind("Burn") is TransactionKind.Burn
        assert to_kind(TransactionKind.Burn) is TransactionKind.Burn


class TestTimestamp:
    @pytest.mark.parametrize("value", [0, 1715136000, 2**63 - 1])
    def test_integers_pass_through(self, value):
        assert to_timestamp(value) == value

    @pytest.mark.parametrize("value", [None, "abc", "5", 1.0, b"\x05", True, False])
    def test_non_integers_rejected(self, value):
        with pytest.raises(InvalidTimestamp) as excinfo:
            to_timestamp(value)
        assert excinfo.value.value is value


class TestLedgerConfig:
    def test_defaults(self):
        config = LedgerConfig()
        assert config.deployer == DEFAULT_DEPLOYER
        assert isinstance(config.deployer, Address)
        assert config.init_code == DEFAULT_INIT_CODE
        assert config.init_code_hash == keccak256(DEFAULT_INIT_CODE)

    def test_raw_deployer_is_wrapped(self):
        config = LedgerConfig(deployer=b"\x01" * 20)
        assert isinstance(config.deployer, Address)

    def test_malformed_deployer_rejected(self):
        with pytest.raises(InvalidAddressLength):
            LedgerConfig(deployer=b"\x01" * 32)

    def test_frozen(self):
        config = LedgerConfig()
        with pytest.raises(AttributeError):
            config.init_code = b""


class TestKeccak:
    def test_empty(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )
