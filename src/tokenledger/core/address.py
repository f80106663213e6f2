"""20-byte account/contract addresses.

Addresses are stored as raw bytes and rendered as 0x-prefixed lowercase hex.
Parsing is case-insensitive and accepts the text with or without the prefix.
Signer lists are persisted as a flat concatenation of 20-byte chunks.
"""

from typing import Iterable, Union

from eth_utils import decode_hex, encode_hex, is_hex, to_checksum_address

from tokenledger.core.constants import ADDRESS_SIZE
from tokenledger.errors import InvalidAddressLength, InvalidHex, MisalignedList


class Address(bytes):
    """Immutable 20-byte address. Compares byte-wise with other bytes."""

    def __new__(cls, value: Union[bytes, bytearray, memoryview]) -> "Address":
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Address expects bytes, got {type(value).__name__}")
        value = bytes(value)
        if len(value) != ADDRESS_SIZE:
            raise InvalidAddressLength(len(value))
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, text: str) -> "Address":
        if not isinstance(text, str) or not is_hex(text):
            raise InvalidHex(text)
        try:
            raw = decode_hex(text)
        except ValueError as exc:
            # odd number of digits
            raise InvalidHex(text) from exc
        return cls(raw)

    def to_hex(self) -> str:
        return encode_hex(bytes(self))

    @property
    def checksum(self) -> str:
        """EIP-55 mixed-case form, for display only."""
        return to_checksum_address(bytes(self))

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Address('{self.to_hex()}')"


AddressLike = Union[Address, bytes, str]


def parse_address(text: str) -> Address:
    return Address.parse(text)


def format_address(address: bytes) -> str:
    return Address(address).to_hex()


def to_address(value: AddressLike) -> Address:
    """Coerce hex text or raw bytes into an Address."""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.parse(value)
    return Address(value)


def encode_address_list(addresses: Iterable[AddressLike]) -> bytes:
    return b"".join(bytes(to_address(a)) for a in addresses)


def decode_address_list(data: bytes) -> list[Address]:
    if len(data) % ADDRESS_SIZE != 0:
        raise MisalignedList(len(data))
    return [
        Address(data[i:i + ADDRESS_SIZE])
        for i in range(0, len(data), ADDRESS_SIZE)
    ]
