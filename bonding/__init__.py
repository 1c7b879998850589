"""Exponential bonding curve token - Python implementation."""

from bonding.config import DEFAULT_CURVE_CONFIG, CurveConfig
from bonding.curve import CurveEngine, ExponentialCurve
from bonding.service import BondingCurveToken

__version__ = "0.1.0"
__all__ = [
    "BondingCurveToken",
    "CurveConfig",
    "CurveEngine",
    "DEFAULT_CURVE_CONFIG",
    "ExponentialCurve",
    "__version__",
]
