"""Ledger-wide constants."""

ADDRESS_SIZE = 20
SALT_SIZE = 32

# Only the low 8 bytes of the salt carry the transaction id.
SALT_ID_BYTES = 8
MAX_TRANSACTION_ID = 2 ** (8 * SALT_ID_BYTES) - 1

ZERO_ADDRESS = b"\x00" * ADDRESS_SIZE

# Deterministic deployment proxy, used as the factory for every token contract.
DEFAULT_DEPLOYER = bytes.fromhex("4e59b44847b379578588920ca78fbf26c0b4956c")

# Placeholder token bytecode until the token contract is finalized.
DEFAULT_INIT_CODE = bytes.fromhex("602a60005260206000f3")

CREATE2_PREFIX = b"\xff"
