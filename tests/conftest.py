"""Pytest configuration and fixtures."""

import pytest

from bonding.config import CurveConfig
from bonding.curve.engine import CurveEngine
from bonding.curve.pricing import ExponentialCurve
from bonding.custody import InMemoryCustody
from bonding.ledger import InMemoryLedger
from bonding.service import BondingCurveToken


@pytest.fixture
def config() -> CurveConfig:
    """Default curve: 0.01 ether base price, f = 101/100, 1000 token cap."""
    return CurveConfig()


@pytest.fixture
def curve(config: CurveConfig) -> ExponentialCurve:
    return ExponentialCurve(config)


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def custody() -> InMemoryCustody:
    return InMemoryCustody()


@pytest.fixture
def engine(config: CurveConfig, ledger: InMemoryLedger, custody: InMemoryCustody) -> CurveEngine:
    return CurveEngine(config, ledger, custody)


@pytest.fixture
def token(
    config: CurveConfig, ledger: InMemoryLedger, custody: InMemoryCustody
) -> BondingCurveToken:
    """A fresh token with in-memory ledger and custody."""
    return BondingCurveToken(config, ledger=ledger, custody=custody)
