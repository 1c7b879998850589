"""API endpoints for the bonding curve token."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Query

from bonding.config import CurveConfig
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
from bonding.models.types import ADDRESS_PATTERN
from bonding.service import BondingCurveToken

logger = structlog.get_logger()

router = APIRouter()


@lru_cache(maxsize=1)
def get_default_token() -> BondingCurveToken:
    """Process-wide token built from BONDING_* environment variables."""
    config = CurveConfig.from_env()
    logger.info(
        "curve_initialized",
        base_price=config.base_price,
        growth=f"{config.growth_numerator}/{config.growth_denominator}",
        max_supply=config.max_supply,
        owner=config.owner,
    )
    return BondingCurveToken(config)


def get_token() -> BondingCurveToken:
    """Dependency provider for the token instance.

    Override this in tests to inject a fresh token:
        app.dependency_overrides[get_token] = lambda: token
    """
    return get_default_token()


TokenDep = Annotated[BondingCurveToken, Depends(get_token)]
AccountPath = Annotated[str, Path(pattern=ADDRESS_PATTERN)]

READ_ERRORS: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Invalid amount or supply"},
    422: {"model": ErrorResponse, "description": "Outside the fixed-point range"},
}
TRADE_ERRORS: dict[int | str, dict] = {
    **READ_ERRORS,
    409: {"model": ErrorResponse, "description": "Funding failure or concurrent call"},
}
WITHDRAW_ERRORS: dict[int | str, dict] = {
    **TRADE_ERRORS,
    403: {"model": ErrorResponse, "description": "Caller is not the owner"},
}


@router.get("/curve", response_model=CurveStateResponse)
def curve_state(token: TokenDep) -> CurveStateResponse:
    """Curve parameters plus supply, cached price and reserve."""
    config = token.config
    state = token.state()
    return CurveStateResponse(
        base_price=config.base_price,
        growth_numerator=config.growth_numerator,
        growth_denominator=config.growth_denominator,
        max_supply=config.max_supply,
        decimals=config.decimals,
        owner=config.owner,
        total_supply=state.total_supply,
        current_price=state.current_price,
        reserve_balance=state.reserve_balance,
    )


@router.get("/price", response_model=PriceResponse, responses=READ_ERRORS)
def price(token: TokenDep, supply: Annotated[int, Query(ge=0)]) -> PriceResponse:
    """Price of the next token unit at an arbitrary supply."""
    value = token.price_at_supply(supply)
    return PriceResponse(supply=supply, price=value)


@router.get("/quote/buy", response_model=BuyQuoteResponse, responses=READ_ERRORS)
def quote_buy(token: TokenDep, amount: Annotated[int, Query(ge=0)]) -> BuyQuoteResponse:
    """Cost of minting `amount` at the current supply."""
    quote = token.quote_buy(amount)
    return BuyQuoteResponse(
        amount=amount,
        total_cost=quote.total_cost,
        new_supply=quote.new_supply,
        new_price=quote.new_price,
    )


@router.get("/quote/sell", response_model=SellQuoteResponse, responses=READ_ERRORS)
def quote_sell(token: TokenDep, amount: Annotated[int, Query(ge=0)]) -> SellQuoteResponse:
    """Proceeds of burning `amount` at the current supply."""
    quote = token.quote_sell(amount)
    return SellQuoteResponse(
        amount=amount,
        proceeds=quote.proceeds,
        new_supply=quote.new_supply,
        new_price=quote.new_price,
    )


@router.post("/buy", response_model=BuyReceipt, responses=TRADE_ERRORS)
def buy(request: BuyRequest, token: TokenDep) -> BuyReceipt:
    """Mint tokens; overpayment is refunded in the receipt."""
    result = token.buy(request.buyer, int(request.amount), int(request.payment))
    return BuyReceipt(
        buyer=request.buyer.lower(),
        amount=result.amount,
        total_cost=result.total_cost,
        refund=result.refund,
        new_supply=result.new_supply,
        new_price=result.new_price,
    )


@router.post("/sell", response_model=SellReceipt, responses=TRADE_ERRORS)
def sell(request: SellRequest, token: TokenDep) -> SellReceipt:
    """Burn tokens for reserve."""
    result = token.sell(request.seller, int(request.amount))
    return SellReceipt(
        seller=request.seller.lower(),
        amount=result.amount,
        proceeds=result.proceeds,
        new_supply=result.new_supply,
        new_price=result.new_price,
    )


@router.post("/withdraw", response_model=WithdrawReceipt, responses=WITHDRAW_ERRORS)
def withdraw(request: WithdrawRequest, token: TokenDep) -> WithdrawReceipt:
    """Owner-only reserve withdrawal."""
    amount = token.withdraw(request.caller, int(request.amount))
    return WithdrawReceipt(owner=request.caller.lower(), amount=amount)


@router.get("/balances/{account}", response_model=BalanceResponse)
def balance(account: AccountPath, token: TokenDep) -> BalanceResponse:
    """Token balance of an account."""
    return BalanceResponse(account=account.lower(), balance=token.balance_of(account))
