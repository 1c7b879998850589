"""Exponential bonding curve pricing and execution.

Usage:
    from bonding.curve import CurveEngine, ExponentialCurve

    curve = ExponentialCurve(config)
    quote = curve.quote_buy(current_supply, amount)
"""

from bonding.curve.engine import BuyResult, CurveEngine, SellResult
from bonding.curve.pricing import BuyQuote, ExponentialCurve, Growth, SellQuote

__all__ = [
    # Pricing
    "ExponentialCurve",
    "Growth",
    "BuyQuote",
    "SellQuote",
    # Engine
    "CurveEngine",
    "BuyResult",
    "SellResult",
]
