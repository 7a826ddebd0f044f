"""Shared type definitions for pool identifiers and amounts.

Asset identifiers and holders are Ethereum-style addresses. Amounts are
uint256 values; on the wire they travel as decimal strings so that JSON
clients never round them through floats.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from cpamm.safe_int import UINT256_MAX


def parse_uint256(value: Any) -> int:
    """Parse a uint256 from a decimal string or int.

    Args:
        value: Value to parse (string or int)

    Returns:
        The value as int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    elif not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase with 0x prefix.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address (0x + 40 hex chars)."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def address_sort_key(address: str) -> bytes:
    """Byte value of an address, the key for canonical pair ordering."""
    return bytes.fromhex(normalize_address(address)[2:])


ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

# Ethereum address, normalized to lowercase on input
Address = Annotated[
    str,
    Field(pattern=ADDRESS_PATTERN),
    BeforeValidator(lambda v: normalize_address(v) if isinstance(v, str) else v),
]

# 256-bit unsigned integer: int in Python, decimal string in JSON
Uint256 = Annotated[
    int,
    BeforeValidator(parse_uint256),
    PlainSerializer(str, return_type=str),
    Field(description="256-bit unsigned integer as decimal string"),
]
