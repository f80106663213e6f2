"""CREATE2 address computation utilities (EIP-1014).

Token contracts are assigned addresses before any chain round-trip.
The address is computed as:
    address = keccak256(0xff ++ deployer ++ salt ++ keccak256(init_code))[12:]

The salt is the id of the transaction that created the contract, written
big-endian into the last 8 bytes of an otherwise zero 32-byte buffer.

Reference: https://eips.ethereum.org/EIPS/eip-1014
"""

from tokenledger.core.address import Address
from tokenledger.core.constants import (
    ADDRESS_SIZE,
    CREATE2_PREFIX,
    MAX_TRANSACTION_ID,
    SALT_ID_BYTES,
    SALT_SIZE,
)
from tokenledger.core.crypto import keccak256


def compute_create2_address(
    deployer: bytes,
    salt: bytes,
    init_code: bytes,
) -> Address:
    """
    Compute CREATE2 contract address.

    Args:
        deployer: 20-byte deployer (factory) address
        salt: 32-byte salt value
        init_code: Contract initialization code

    Returns:
        20-byte contract address

    Raises:
        ValueError: If deployer is not 20 bytes or salt is not 32 bytes

    Example:
        >>> addr = compute_create2_address(bytes(20), bytes(32), b"\\x00")
        >>> addr.to_hex()
        '0x4d1a2e2bb4f88f0250f26ffff098b0b30b26bf38'
    """
    return compute_create2_address_with_code_hash(deployer, salt, keccak256(init_code))


def compute_create2_address_with_code_hash(
    deployer: bytes,
    salt: bytes,
    init_code_hash: bytes,
) -> Address:
    """
    Compute CREATE2 address with pre-computed init_code hash.

    Stores hash their configured init code once and reuse it for every
    derivation through this function.

    Raises:
        ValueError: If lengths are incorrect
    """
    if len(deployer) != ADDRESS_SIZE:
        raise ValueError(f"Deployer must be 20 bytes, got {len(deployer)}")
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be 32 bytes, got {len(salt)}")
    if len(init_code_hash) != 32:
        raise ValueError(f"Init code hash must be 32 bytes, got {len(init_code_hash)}")

    preimage = CREATE2_PREFIX + bytes(deployer) + salt + init_code_hash
    return Address(keccak256(preimage)[12:])


def salt_from_transaction_id(transaction_id: int) -> bytes:
    """Build the 32-byte salt for a transaction id.

    Ids above 2**64 - 1 do not fit in the 8 salt bytes and are rejected.
    """
    if not 0 <= transaction_id <= MAX_TRANSACTION_ID:
        raise ValueError(
            f"Transaction id {transaction_id} does not fit in {SALT_ID_BYTES} salt bytes"
        )
    return bytes(SALT_SIZE - SALT_ID_BYTES) + transaction_id.to_bytes(SALT_ID_BYTES, "big")


def derive_contract_address(
    deployer: bytes,
    transaction_id: int,
    init_code: bytes,
) -> Address:
    """Derive the address of the token contract created by a transaction."""
    return compute_create2_address(deployer, salt_from_transaction_id(transaction_id), init_code)
