"""Mathematical utilities for the bonding curve.

This package provides the fixed-point primitives the pricing engine needs:
- Q64x64: signed 64.64 fixed-point arithmetic with log_2/exp_2
"""

from bonding.math.fixed_point import (
    DivisionByZero,
    DomainError,
    FixedPointError,
    Overflow,
    Q64x64,
)

__all__ = ["Q64x64", "FixedPointError", "Overflow", "DomainError", "DivisionByZero"]
