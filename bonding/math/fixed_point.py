"""Signed 64.64 fixed-point math library.

Values are stored as Python integers scaled by 2^64 and must fit a signed
128-bit word, so the representable range is [-2^63, 2^63 - 2^-64]. Every
operation checks its result against that range and raises instead of
wrapping.

log_2 and exp_2 follow the classic binary algorithms used by on-chain 64.64
libraries:
- log_2 normalises the argument to [1, 2) and extracts one fraction bit per
  squaring step.
- exp_2 multiplies together the precomputed factors 2^(2^-k) selected by the
  fraction bits, in 128-bit precision, then shifts by the integer part.

Error bounds (for results >= 1):
- log_2: absolute error below 2^-64 (truncated toward -inf).
- exp_2: relative error below 2^-63 (truncated toward zero).
- pow_fractional: relative error below (|exponent| + 4) * 2^-64, which
  MAX_RELATIVE_ERROR rounds up to 2^-56 for |exponent| <= 64.
"""

from __future__ import annotations

from decimal import Decimal
from math import isqrt
from typing import ClassVar

__all__ = [
    # Classes
    "Q64x64",
    # Errors
    "FixedPointError",
    "Overflow",
    "DomainError",
    "DivisionByZero",
    # Functions
    "from_int",
    "to_int",
    "from_fraction",
    "mul",
    "div",
    "log_2",
    "exp_2",
    "pow_fractional",
    # Constants
    "ONE",
    "MIN_64x64",
    "MAX_64x64",
    "EXP2_MAX_EXPONENT",
    "MAX_RELATIVE_ERROR",
]

# =============================================================================
# Constants
# =============================================================================

FRACTION_BITS = 64
ONE = 1 << FRACTION_BITS

MIN_64x64 = -(1 << 127)
MAX_64x64 = (1 << 127) - 1

MIN_INT64 = -(1 << 63)
MAX_INT64 = (1 << 63) - 1

_FRACTION_MASK = ONE - 1

# exp_2(x) exceeds MAX_64x64 for every x >= 63
EXP2_MAX_EXPONENT = 63 * ONE
# exp_2(x) truncates to zero for every x < -64
EXP2_MIN_EXPONENT = -64 * ONE

# 2^-56 in 64.64 raw units
MAX_RELATIVE_ERROR = 1 << 8


def _exp2_factors() -> tuple[int, ...]:
    """Compute 2^(2^-k) for k = 1..64 as 128-bit fractions (scaled by 2^128).

    Each factor is the integer square root of the previous one, so the table
    is exact to within one unit in the last place per step.
    """
    factors = []
    factor = isqrt(2 << 256)  # sqrt(2) * 2^128
    for _ in range(FRACTION_BITS):
        factors.append(factor)
        factor = isqrt(factor << 128)
    return tuple(factors)


# _EXP2_FACTORS[k] = 2^(2^-(k+1)) * 2^128, matched to fraction bit 63 - k
_EXP2_FACTORS = _exp2_factors()


# =============================================================================
# Error classes
# =============================================================================


class FixedPointError(ArithmeticError):
    """Base error for fixed-point operations."""

    pass


class Overflow(FixedPointError):
    """Result does not fit the signed 64.64 range."""

    pass


class DomainError(FixedPointError):
    """Argument is outside the domain of the function."""

    pass


class DivisionByZero(FixedPointError):
    """Division by a zero divisor."""

    pass


# =============================================================================
# Core math functions (raw 64.64 integers)
# =============================================================================


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero.

    Python's // floors toward -inf; fixed-point division truncates toward
    zero so that div(-x, y) == -div(x, y).
    """
    if b == 0:
        raise DivisionByZero(f"Division by zero: {a} / 0")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _checked(value: int, operation: str) -> int:
    if not (MIN_64x64 <= value <= MAX_64x64):
        raise Overflow(f"{operation} result {value} outside 64.64 range")
    return value


def from_int(n: int) -> int:
    """Convert a signed 64-bit integer to 64.64.

    Raises:
        Overflow: If n is outside [-2^63, 2^63 - 1]
    """
    if not (MIN_INT64 <= n <= MAX_INT64):
        raise Overflow(f"Integer {n} outside int64 range")
    return n << FRACTION_BITS


def to_int(x: int) -> int:
    """Convert 64.64 to an integer, truncating toward zero."""
    return _div_trunc(x, ONE)


def from_fraction(numerator: int, denominator: int) -> int:
    """Compute numerator / denominator as 64.64 for unsigned integer inputs.

    Unlike div(from_int(a), from_int(b)), the operands may be any uint256,
    which is what token supplies at 18 decimals need.

    Raises:
        DomainError: If either operand is negative
        DivisionByZero: If denominator is zero
        Overflow: If the quotient is 2^63 or more
    """
    if numerator < 0 or denominator < 0:
        raise DomainError(f"from_fraction requires unsigned operands: {numerator}/{denominator}")
    if denominator == 0:
        raise DivisionByZero(f"Division by zero: {numerator} / 0")
    return _checked((numerator << FRACTION_BITS) // denominator, "from_fraction")


def mul(x: int, y: int) -> int:
    """Multiply two 64.64 values, rounding toward -inf.

    Raises:
        Overflow: If the product is outside the 64.64 range
    """
    return _checked((x * y) >> FRACTION_BITS, "mul")


def div(x: int, y: int) -> int:
    """Divide two 64.64 values, truncating toward zero.

    Raises:
        DivisionByZero: If y is zero
        Overflow: If the quotient is outside the 64.64 range
    """
    if y == 0:
        raise DivisionByZero(f"Division by zero: {x} / 0")
    return _checked(_div_trunc(x << FRACTION_BITS, y), "div")


def log_2(x: int) -> int:
    """Compute the binary logarithm of a positive 64.64 value.

    The result is exact for powers of two (log_2(ONE) == 0) and is
    monotonically non-decreasing in x.

    Raises:
        DomainError: If x <= 0
        Overflow: If x is above MAX_64x64
    """
    if x <= 0:
        raise DomainError(f"log_2 undefined for {x}")
    if x > MAX_64x64:
        raise Overflow(f"log_2 argument {x} outside 64.64 range")

    msb = x.bit_length() - 1
    result = (msb - FRACTION_BITS) << FRACTION_BITS

    # Normalise to [2^127, 2^128), i.e. the mantissa in [1, 2) with 127 fraction bits
    ux = x << (127 - msb)

    bit = 1 << (FRACTION_BITS - 1)
    while bit > 0:
        ux *= ux
        b = ux >> 255
        ux >>= 127 + b
        result += bit * b
        bit >>= 1

    return result


def exp_2(x: int) -> int:
    """Compute 2^x for a 64.64 exponent.

    Raises:
        Overflow: If x >= 63 (the result would exceed MAX_64x64)
    """
    if x >= EXP2_MAX_EXPONENT:
        raise Overflow(f"exp_2 exponent {x} too large")
    if x < EXP2_MIN_EXPONENT:
        return 0

    # Two's complement fraction bits give 2^frac in [1, 2) even when x < 0
    fraction = x & _FRACTION_MASK
    result = 1 << 127
    for k, factor in enumerate(_EXP2_FACTORS):
        if fraction & (1 << (FRACTION_BITS - 1 - k)):
            result = (result * factor) >> 128

    # result holds 2^frac with 127 fraction bits; scale by the integer part
    result >>= 63 - (x >> FRACTION_BITS)
    return _checked(result, "exp_2")


def pow_fractional(base: int, exponent: int) -> int:
    """Compute base^exponent as exp_2(log_2(base) * exponent).

    Both arguments are 64.64. The exponent may be any real value whose
    result stays in range; base must be positive.

    Raises:
        DomainError: If base <= 0
        Overflow: If the result exceeds the 64.64 range
    """
    if base <= 0:
        raise DomainError(f"pow_fractional requires a positive base, got {base}")
    if exponent == 0:
        return ONE
    return exp_2(mul(log_2(base), exponent))


# =============================================================================
# Q64x64 class (wrapper for convenient usage)
# =============================================================================


class Q64x64:
    """Signed 64.64 fixed-point number stored as int.

    The raw value is the number scaled by 2^64.
    Example: 1.5 is stored as 3 << 63
    """

    ONE: ClassVar[int] = ONE

    __slots__ = ("raw",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, raw: int) -> None:
        """Create from a raw 64.64 value."""
        self.raw = _checked(raw, "Q64x64")

    @classmethod
    def from_int(cls, n: int) -> Q64x64:
        """Create from a signed 64-bit integer."""
        return cls(from_int(n))

    @classmethod
    def from_fraction(cls, numerator: int, denominator: int) -> Q64x64:
        """Create from an unsigned ratio, rounding down."""
        return cls(from_fraction(numerator, denominator))

    def to_int(self) -> int:
        """Truncate toward zero."""
        return to_int(self.raw)

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.raw) / Decimal(self.ONE)

    def mul(self, other: Q64x64) -> Q64x64:
        return Q64x64(mul(self.raw, other.raw))

    def div(self, other: Q64x64) -> Q64x64:
        return Q64x64(div(self.raw, other.raw))

    def log2(self) -> Q64x64:
        return Q64x64(log_2(self.raw))

    def exp2(self) -> Q64x64:
        return Q64x64(exp_2(self.raw))

    def pow_fractional(self, exponent: Q64x64) -> Q64x64:
        """Compute self^exponent via log_2/exp_2."""
        return Q64x64(pow_fractional(self.raw, exponent.raw))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Q64x64):
            return NotImplemented
        return self.raw == other.raw

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Q64x64):
            return NotImplemented
        return self.raw < other.raw

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Q64x64):
            return NotImplemented
        return self.raw <= other.raw

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Q64x64):
            return NotImplemented
        return self.raw > other.raw

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Q64x64):
            return NotImplemented
        return self.raw >= other.raw

    def __repr__(self) -> str:
        return f"Q64x64({self.raw})"

    def __str__(self) -> str:
        return str(self.to_decimal())
