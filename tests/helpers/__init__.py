"""Test helpers module for shared test utilities.

- constants: Accounts and common amounts
- reference: Per-token reference pricing for cross-checks
"""

from tests.helpers.constants import ALICE, BASE_PRICE, BOB, OWNER, PRICE_AT_ONE, UNIT
from tests.helpers.reference import (
    ceil,
    exact_price,
    exact_series_cost,
    floor,
    iterative_cost,
)

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "OWNER",
    "UNIT",
    "BASE_PRICE",
    "PRICE_AT_ONE",
    # Reference pricing
    "exact_price",
    "exact_series_cost",
    "iterative_cost",
    "floor",
    "ceil",
]
