"""Curve constants.

Defaults describe a 0.01 ether base price growing 1% per whole token.
"""

from bonding.models.types import is_valid_address

# Token amounts are integers in the smallest unit, 10^18 per whole token
TOKEN_DECIMALS = 18
TOKEN_UNIT = 10**TOKEN_DECIMALS

# Reserve amounts are in wei
ETHER = 10**18

# Price of the first whole token: 0.01 ether
DEFAULT_BASE_PRICE = ETHER // 100

# Growth ratio f = 101/100 per whole token
DEFAULT_GROWTH_NUMERATOR = 101
DEFAULT_GROWTH_DENOMINATOR = 100

# Hard issuance cap. At f = 1.01 the growth factor leaves the 64.64 range
# beyond ~4388 whole tokens, so the default stays well inside it.
DEFAULT_MAX_SUPPLY = 1_000 * TOKEN_UNIT


def _validate_owner_address(address: str) -> str:
    """Validate and return the owner address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid owner address: {address} (must be 0x + 40 hex chars)")
    return address.lower()


# Owner used when none is configured (first hardhat development account)
DEFAULT_OWNER = _validate_owner_address("0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266")

# Most recent events kept in memory by EventLog; older ones are dropped
DEFAULT_EVENT_HISTORY = 10_000
