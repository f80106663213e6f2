"""Test fixtures for ledger tests."""

from .addresses import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    CHARLIE_ADDRESS,
    SENDER_1,
    SENDER_2,
    ZERO_ADDRESS,
    TEST_ADDRESSES,
)
from .ledger import SCENARIO_TIMESTAMP

__all__ = [
    "ALICE_ADDRESS",
    "BOB_ADDRESS",
    "CHARLIE_ADDRESS",
    "SENDER_1",
    "SENDER_2",
    "ZERO_ADDRESS",
    "TEST_ADDRESSES",
    "SCENARIO_TIMESTAMP",
]
