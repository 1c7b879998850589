"""Pydantic models for the HTTP API.

Amounts are uint256 decimal strings; field names are camelCase on the wire
and snake_case in Python.
"""

from pydantic import BaseModel, Field

from bonding.models.types import Address, Uint256

_MODEL_CONFIG = {"populate_by_name": True}


class BuyRequest(BaseModel):
    """Mint tokens against an attached reserve payment."""

    buyer: Address = Field(description="Account receiving the tokens.")
    amount: Uint256 = Field(description="Token amount in the smallest unit.")
    payment: Uint256 = Field(description="Reserve attached to the call; excess is refunded.")

    model_config = _MODEL_CONFIG


class SellRequest(BaseModel):
    """Burn tokens for reserve proceeds."""

    seller: Address = Field(description="Account whose tokens are burned.")
    amount: Uint256 = Field(description="Token amount in the smallest unit.")

    model_config = _MODEL_CONFIG


class WithdrawRequest(BaseModel):
    """Owner-only reserve withdrawal."""

    caller: Address = Field(description="Must be the curve owner.")
    amount: Uint256 = Field(description="Reserve amount to withdraw.")

    model_config = _MODEL_CONFIG


class CurveStateResponse(BaseModel):
    """Curve parameters and current state."""

    base_price: Uint256 = Field(alias="basePrice")
    growth_numerator: Uint256 = Field(alias="growthNumerator")
    growth_denominator: Uint256 = Field(alias="growthDenominator")
    max_supply: Uint256 = Field(alias="maxSupply")
    decimals: int
    owner: Address
    total_supply: Uint256 = Field(alias="totalSupply")
    current_price: Uint256 = Field(alias="currentPrice")
    reserve_balance: Uint256 = Field(alias="reserveBalance")

    model_config = _MODEL_CONFIG


class PriceResponse(BaseModel):
    supply: Uint256
    price: Uint256


class BuyQuoteResponse(BaseModel):
    amount: Uint256
    total_cost: Uint256 = Field(alias="totalCost")
    new_supply: Uint256 = Field(alias="newSupply")
    new_price: Uint256 = Field(alias="newPrice")

    model_config = _MODEL_CONFIG


class SellQuoteResponse(BaseModel):
    amount: Uint256
    proceeds: Uint256
    new_supply: Uint256 = Field(alias="newSupply")
    new_price: Uint256 = Field(alias="newPrice")

    model_config = _MODEL_CONFIG


class BuyReceipt(BaseModel):
    """Committed buy."""

    buyer: Address
    amount: Uint256
    total_cost: Uint256 = Field(alias="totalCost")
    refund: Uint256
    new_supply: Uint256 = Field(alias="newSupply")
    new_price: Uint256 = Field(alias="newPrice")

    model_config = _MODEL_CONFIG


class SellReceipt(BaseModel):
    """Committed sell."""

    seller: Address
    amount: Uint256
    proceeds: Uint256
    new_supply: Uint256 = Field(alias="newSupply")
    new_price: Uint256 = Field(alias="newPrice")

    model_config = _MODEL_CONFIG


class WithdrawReceipt(BaseModel):
    owner: Address
    amount: Uint256


class BalanceResponse(BaseModel):
    account: Address
    balance: Uint256


class ErrorResponse(BaseModel):
    """Body returned for every rejected operation."""

    error: str = Field(description="Error class name, e.g. InsufficientPayment.")
    detail: str
