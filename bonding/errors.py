"""Bonding curve error classes.

Every error aborts the whole operation; none of them is retried. Validation
and funding errors are raised before any state is touched.

Arithmetic errors (Overflow, DomainError, DivisionByZero) come from the
fixed-point layer and are re-exported here for convenience.
"""

from bonding.math.fixed_point import DivisionByZero, DomainError, FixedPointError, Overflow

__all__ = [
    "BondingCurveError",
    "InvalidCurveParams",
    # Validation
    "CurveValidationError",
    "ZeroAmount",
    "InvalidRange",
    "SupplyCapExceeded",
    "InsufficientSupply",
    # Funding
    "FundingError",
    "InsufficientPayment",
    "InsufficientReserve",
    "InsufficientBalance",
    "TransferFailed",
    # Access
    "AccessError",
    "Unauthorized",
    "ReentrantCall",
    # Arithmetic
    "FixedPointError",
    "Overflow",
    "DomainError",
    "DivisionByZero",
]


class BondingCurveError(Exception):
    """Base error for bonding curve operations."""

    pass


class InvalidCurveParams(ValueError):
    """Curve parameters violate BasePrice > 0 or Numerator > Denominator > 0."""

    pass


# =============================================================================
# Validation errors (caller input)
# =============================================================================


class CurveValidationError(BondingCurveError):
    """The request itself is malformed; the caller must correct it."""

    pass


class ZeroAmount(CurveValidationError):
    """Token amount must be positive."""

    pass


class InvalidRange(CurveValidationError):
    """Cost range requires start_supply < end_supply."""

    pass


class SupplyCapExceeded(CurveValidationError):
    """Minting would push total supply above max_supply."""

    pass


class InsufficientSupply(CurveValidationError):
    """Burning more tokens than are in circulation."""

    pass


# =============================================================================
# Funding errors (economic preconditions)
# =============================================================================


class FundingError(BondingCurveError):
    """An economic precondition was not met."""

    pass


class InsufficientPayment(FundingError):
    """Attached payment is below the total cost of the buy."""

    pass


class InsufficientReserve(FundingError):
    """Custody holds less reserve than the payout requires."""

    pass


class InsufficientBalance(FundingError):
    """Account holds fewer tokens than the operation moves."""

    pass


class TransferFailed(FundingError):
    """The payee rejected a reserve transfer."""

    pass


# =============================================================================
# Access errors
# =============================================================================


class AccessError(BondingCurveError):
    """Caller is not allowed to perform the operation right now."""

    pass


class Unauthorized(AccessError):
    """Only the owner may withdraw reserve."""

    pass


class ReentrantCall(AccessError):
    """A state-mutating call was started while another one is in progress."""

    pass
