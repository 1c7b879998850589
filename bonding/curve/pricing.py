"""Exponential bonding curve pricing.

Core math for a curve where whole token k (0-based) costs base_price * f^k
for a rational growth ratio f = numerator / denominator > 1.

Formulas:
    price(s)   = base_price * f^(s / scale)
    cost(a, b) = base_price * (f^(b / scale) - f^(a / scale)) / (f - 1)

The growth factor f^x is split into whole and fractional exponent parts:
- f^n for the whole-unit part n is an exact rational power
- f^r for the remainder r in [0, 1) goes through the 64.64 pow_fractional
So prices at whole-token supplies are exact, and only sub-unit supplies
carry the fixed-point error (relative error below 2^-56).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from bonding.config import CurveConfig
from bonding.errors import InsufficientSupply, InvalidRange, SupplyCapExceeded, ZeroAmount
from bonding.math.fixed_point import (
    EXP2_MAX_EXPONENT,
    ONE,
    Overflow,
    from_fraction,
    log_2,
    mul,
    pow_fractional,
)


class Growth(NamedTuple):
    """f^x as an exact ratio numerator / denominator."""

    numerator: int
    denominator: int


@dataclass(frozen=True)
class BuyQuote:
    """Result of pricing a buy without executing it."""

    total_cost: int
    new_supply: int
    new_price: int


@dataclass(frozen=True)
class SellQuote:
    """Result of pricing a sell without executing it."""

    proceeds: int
    new_supply: int
    new_price: int


class ExponentialCurve:
    """Pure pricing functions over an immutable CurveConfig.

    Nothing here reads or writes state; every method is a function of its
    arguments and the curve parameters.
    """

    def __init__(self, config: CurveConfig) -> None:
        self.config = config
        self.scale = config.scale
        self._numerator = config.growth_numerator
        self._denominator = config.growth_denominator
        self._growth = from_fraction(config.growth_numerator, config.growth_denominator)
        self._log2_growth = log_2(self._growth)

    @property
    def growth(self) -> int:
        """The growth ratio f as a raw 64.64 value (rounded down)."""
        return self._growth

    def growth_at(self, supply: int) -> Growth:
        """Compute f^(supply / scale) as an exact ratio.

        Raises:
            Overflow: If f^(supply / scale) exceeds the 64.64 range
        """
        if supply < 0:
            raise InvalidRange(f"Supply cannot be negative: {supply}")

        exponent = mul(self._log2_growth, from_fraction(supply, self.scale))
        if exponent >= EXP2_MAX_EXPONENT:
            raise Overflow(f"Growth factor at supply {supply} exceeds the 64.64 range")

        whole, remainder = divmod(supply, self.scale)
        if remainder == 0:
            fractional = ONE
        else:
            fractional = pow_fractional(self._growth, from_fraction(remainder, self.scale))

        return Growth(
            numerator=self._numerator**whole * fractional,
            denominator=self._denominator**whole * ONE,
        )

    def price_at_supply(self, supply: int) -> int:
        """Price of the next token unit at the given supply, rounded down.

        Raises:
            Overflow: If the supply is beyond the representable exponent range
        """
        growth = self.growth_at(supply)
        return (self.config.base_price * growth.numerator) // growth.denominator

    def cost(self, start_supply: int, end_supply: int, *, round_up: bool = False) -> int:
        """Reserve amount for moving supply from start_supply to end_supply.

        Uses the closed-form geometric series. For whole-token endpoints the
        result equals the sum of the per-token prices exactly (before
        rounding); for sub-unit amounts the closed form is the definition.

        Args:
            start_supply: Supply before the operation
            end_supply: Supply after a buy (or before a sell)
            round_up: Round the exact value up instead of down

        Raises:
            InvalidRange: If start_supply >= end_supply
            Overflow: If either endpoint is beyond the representable range
        """
        if start_supply >= end_supply:
            raise InvalidRange(f"cost requires start < end, got {start_supply} >= {end_supply}")

        start = self.growth_at(start_supply)
        end = self.growth_at(end_supply)

        # (f^e - f^s) / (f - 1), with f - 1 = (num - den) / den
        numerator = (
            self.config.base_price
            * (end.numerator * start.denominator - start.numerator * end.denominator)
            * self._denominator
        )
        denominator = end.denominator * start.denominator * (self._numerator - self._denominator)

        if round_up:
            return -(-numerator // denominator)
        return numerator // denominator

    def quote_buy(self, current_supply: int, amount: int) -> BuyQuote:
        """Price minting `amount` tokens at `current_supply`.

        The cost is rounded up and is never zero.

        Raises:
            ZeroAmount: If amount is zero
            SupplyCapExceeded: If current_supply + amount > max_supply
        """
        if amount <= 0:
            raise ZeroAmount("Buy amount must be positive")
        new_supply = current_supply + amount
        if new_supply > self.config.max_supply:
            raise SupplyCapExceeded(
                f"Supply {current_supply} + {amount} exceeds cap {self.config.max_supply}"
            )

        total_cost = max(self.cost(current_supply, new_supply, round_up=True), 1)
        return BuyQuote(
            total_cost=total_cost,
            new_supply=new_supply,
            new_price=self.price_at_supply(new_supply),
        )

    def quote_sell(self, current_supply: int, amount: int) -> SellQuote:
        """Price burning `amount` tokens at `current_supply`.

        Proceeds are rounded down.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientSupply: If amount > current_supply
        """
        if amount <= 0:
            raise ZeroAmount("Sell amount must be positive")
        if amount > current_supply:
            raise InsufficientSupply(f"Cannot burn {amount} of supply {current_supply}")

        new_supply = current_supply - amount
        return SellQuote(
            proceeds=self.cost(new_supply, current_supply),
            new_supply=new_supply,
            new_price=self.price_at_supply(new_supply),
        )
