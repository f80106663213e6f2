"""
Ledger configuration.

The deployer address and init code feed every contract address derivation,
so all stores sharing a database must be built from the same config.
"""

from dataclasses import dataclass, field
from functools import cached_property

from tokenledger.core.address import Address
from tokenledger.core.constants import DEFAULT_DEPLOYER, DEFAULT_INIT_CODE
from tokenledger.core.crypto import keccak256


@dataclass(frozen=True)
class LedgerConfig:
    deployer: Address = field(default_factory=lambda: Address(DEFAULT_DEPLOYER))
    init_code: bytes = DEFAULT_INIT_CODE

    def __post_init__(self):
        # Reject a malformed deployer here, before any derivation runs
        if not isinstance(self.deployer, Address):
            object.__setattr__(self, "deployer", Address(self.deployer))
        object.__setattr__(self, "init_code", bytes(self.init_code))

    @cached_property
    def init_code_hash(self) -> bytes:
        return keccak256(self.init_code)
