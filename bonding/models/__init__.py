"""Pydantic models for the bonding curve API."""

from bonding.models.api import (
    BalanceResponse,
    BuyQuoteResponse,
    BuyReceipt,
    BuyRequest,
    CurveStateResponse,
    ErrorResponse,
    PriceResponse,
    SellQuoteResponse,
    SellReceipt,
    SellRequest,
    WithdrawReceipt,
    WithdrawRequest,
)
from bonding.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Requests
    "BuyRequest",
    "SellRequest",
    "WithdrawRequest",
    # Responses
    "CurveStateResponse",
    "PriceResponse",
    "BuyQuoteResponse",
    "SellQuoteResponse",
    "BuyReceipt",
    "SellReceipt",
    "WithdrawReceipt",
    "BalanceResponse",
    "ErrorResponse",
]
