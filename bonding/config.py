"""Curve configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from bonding.constants import (
    DEFAULT_BASE_PRICE,
    DEFAULT_GROWTH_DENOMINATOR,
    DEFAULT_GROWTH_NUMERATOR,
    DEFAULT_MAX_SUPPLY,
    DEFAULT_OWNER,
    TOKEN_DECIMALS,
)
from bonding.errors import InvalidCurveParams
from bonding.models.types import is_valid_address, normalize_address

# Environment variable names read by CurveConfig.from_env()
ENV_BASE_PRICE = "BONDING_BASE_PRICE"
ENV_GROWTH_NUMERATOR = "BONDING_GROWTH_NUMERATOR"
ENV_GROWTH_DENOMINATOR = "BONDING_GROWTH_DENOMINATOR"
ENV_MAX_SUPPLY = "BONDING_MAX_SUPPLY"
ENV_DECIMALS = "BONDING_DECIMALS"
ENV_OWNER = "BONDING_OWNER"


@dataclass(frozen=True)
class CurveConfig:
    """Immutable parameters of an exponential bonding curve.

    Attributes:
        base_price: Price of the first whole token, in reserve units (wei)
        growth_numerator: Numerator of the per-token growth ratio f
        growth_denominator: Denominator of f (f = numerator / denominator > 1)
        max_supply: Hard issuance cap, in the smallest token unit
        decimals: Token decimals; one whole token is 10^decimals units
        owner: Address allowed to withdraw reserve
    """

    base_price: int = DEFAULT_BASE_PRICE
    growth_numerator: int = DEFAULT_GROWTH_NUMERATOR
    growth_denominator: int = DEFAULT_GROWTH_DENOMINATOR
    max_supply: int = DEFAULT_MAX_SUPPLY
    decimals: int = TOKEN_DECIMALS
    owner: str = DEFAULT_OWNER

    def __post_init__(self) -> None:
        if self.base_price <= 0:
            raise InvalidCurveParams(f"base_price must be positive, got {self.base_price}")
        if self.growth_denominator <= 0:
            raise InvalidCurveParams(
                f"growth_denominator must be positive, got {self.growth_denominator}"
            )
        if self.growth_numerator <= self.growth_denominator:
            raise InvalidCurveParams(
                "growth ratio must exceed 1: "
                f"{self.growth_numerator}/{self.growth_denominator}"
            )
        if self.growth_numerator >= self.growth_denominator << 63:
            # from_fraction(numerator, denominator) must fit 64.64
            raise InvalidCurveParams(
                "growth ratio must be below 2**63: "
                f"{self.growth_numerator}/{self.growth_denominator}"
            )
        if self.max_supply < 0:
            raise InvalidCurveParams(f"max_supply cannot be negative, got {self.max_supply}")
        if self.decimals < 0:
            raise InvalidCurveParams(f"decimals cannot be negative, got {self.decimals}")
        if not is_valid_address(self.owner):
            raise InvalidCurveParams(f"Invalid owner address: {self.owner}")
        # frozen dataclass: bypass __setattr__ to store the normalized owner
        object.__setattr__(self, "owner", normalize_address(self.owner))

    @property
    def scale(self) -> int:
        """Smallest token units per whole token."""
        return 10**self.decimals

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CurveConfig:
        """Build a config from BONDING_* environment variables.

        Unset variables fall back to the defaults.

        Raises:
            InvalidCurveParams: If a value is not an integer or violates an invariant
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def read_int(name: str, default: int) -> int:
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return int(raw)
            except ValueError as err:
                raise InvalidCurveParams(f"{name} must be an integer, got '{raw}'") from err

        return cls(
            base_price=read_int(ENV_BASE_PRICE, defaults.base_price),
            growth_numerator=read_int(ENV_GROWTH_NUMERATOR, defaults.growth_numerator),
            growth_denominator=read_int(ENV_GROWTH_DENOMINATOR, defaults.growth_denominator),
            max_supply=read_int(ENV_MAX_SUPPLY, defaults.max_supply),
            decimals=read_int(ENV_DECIMALS, defaults.decimals),
            owner=env.get(ENV_OWNER) or defaults.owner,
        )


# Default configuration instance
DEFAULT_CURVE_CONFIG = CurveConfig()
