"""Shared type definitions for API models.

Token and reserve amounts travel as uint256 decimal strings so that 18-decimal
values never pass through a JSON float.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return str(int_value)


# Ethereum-style account address (40 hex chars after 0x prefix)
ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)
Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Canonical account key: lowercase, with the 0x prefix added if missing.

    Balances, hooks and the owner check all compare keys in this form, so a
    checksummed and a lowercase spelling of one account are the same holder.
    With validate=True a malformed account raises ValueError instead of
    becoming a key nobody can reach.
    """
    account = address.lower()
    if not account.startswith("0x"):
        account = "0x" + account

    if validate and not is_valid_address(account):
        raise ValueError(f"Invalid address: {address}")

    return account


def is_valid_address(address: object) -> bool:
    """True for an account written as 0x plus 40 hex digits, in any letter case."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None
