"""Curve engine: prices supply changes and keeps current_price in sync.

The engine owns one piece of state, the cached current_price, and drives the
ledger and custody collaborators. Each execute_* call checks every
precondition before it mutates anything, then applies the effects in a fixed
order: ledger mint/burn first, current_price last. Moving reserve to a payee
is left to the caller (see bonding.service), which does it only after the
effects are committed.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bonding.config import CurveConfig
from bonding.curve.pricing import BuyQuote, ExponentialCurve, SellQuote
from bonding.custody import ReserveCustody
from bonding.errors import InsufficientBalance, InsufficientPayment, InsufficientReserve, ZeroAmount
from bonding.ledger import TokenLedger

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuyResult:
    """Committed buy: what was charged and what goes back to the payer."""

    amount: int
    total_cost: int
    refund: int
    new_supply: int
    new_price: int
    previous_price: int


@dataclass(frozen=True)
class SellResult:
    """Committed sell: proceeds owed to the seller."""

    amount: int
    proceeds: int
    new_supply: int
    new_price: int
    previous_price: int


class CurveEngine:
    """Exponential bonding curve bound to a ledger and a reserve custody."""

    def __init__(
        self,
        config: CurveConfig,
        ledger: TokenLedger,
        custody: ReserveCustody,
    ) -> None:
        self.config = config
        self.curve = ExponentialCurve(config)
        self.ledger = ledger
        self.custody = custody
        self._current_price = self.curve.price_at_supply(ledger.total_supply)

    @property
    def current_price(self) -> int:
        """price_at_supply(total_supply) as of the last committed buy or sell."""
        return self._current_price

    # --- Pure pricing (delegated) ---

    def price_at_supply(self, supply: int) -> int:
        return self.curve.price_at_supply(supply)

    def cost(self, start_supply: int, end_supply: int) -> int:
        """Exact closed-form cost, rounded down."""
        return self.curve.cost(start_supply, end_supply)

    def quote_buy(self, amount: int, current_supply: int | None = None) -> BuyQuote:
        supply = self.ledger.total_supply if current_supply is None else current_supply
        return self.curve.quote_buy(supply, amount)

    def quote_sell(self, amount: int, current_supply: int | None = None) -> SellQuote:
        supply = self.ledger.total_supply if current_supply is None else current_supply
        return self.curve.quote_sell(supply, amount)

    # --- State transitions ---

    def execute_buy(self, buyer: str, payment: int, amount: int) -> BuyResult:
        """Mint `amount` to buyer against `payment`.

        Does not touch custody: the caller credits the payment and returns
        the refund once this has committed.

        Raises:
            ZeroAmount: If amount is zero
            SupplyCapExceeded: If the buy would exceed max_supply
            InsufficientPayment: If payment < total cost
            Overflow: If the new supply is beyond the representable range
        """
        quote = self.quote_buy(amount)
        if payment < quote.total_cost:
            raise InsufficientPayment(f"Payment {payment} below cost {quote.total_cost}")

        previous_price = self._current_price
        self.ledger.mint(buyer, amount)
        self._current_price = quote.new_price

        logger.debug(
            "buy_committed",
            buyer=buyer,
            amount=amount,
            total_cost=quote.total_cost,
            new_supply=quote.new_supply,
            new_price=quote.new_price,
        )
        return BuyResult(
            amount=amount,
            total_cost=quote.total_cost,
            refund=payment - quote.total_cost,
            new_supply=quote.new_supply,
            new_price=quote.new_price,
            previous_price=previous_price,
        )

    def execute_sell(self, seller: str, amount: int) -> SellResult:
        """Burn `amount` from seller; the caller pays out the proceeds.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientSupply: If amount exceeds total supply
            InsufficientBalance: If seller holds fewer than amount tokens
            InsufficientReserve: If custody cannot cover the proceeds
        """
        quote = self.quote_sell(amount)
        if self.custody.balance < quote.proceeds:
            raise InsufficientReserve(
                f"Reserve {self.custody.balance} cannot cover proceeds {quote.proceeds}"
            )
        held = self.ledger.balance_of(seller)
        if held < amount:
            raise InsufficientBalance(f"Seller holds {held}, cannot sell {amount}")

        previous_price = self._current_price
        self.ledger.burn(seller, amount)
        self._current_price = quote.new_price

        logger.debug(
            "sell_committed",
            seller=seller,
            amount=amount,
            proceeds=quote.proceeds,
            new_supply=quote.new_supply,
            new_price=quote.new_price,
        )
        return SellResult(
            amount=amount,
            proceeds=quote.proceeds,
            new_supply=quote.new_supply,
            new_price=quote.new_price,
            previous_price=previous_price,
        )

    def withdraw(self, amount: int) -> int:
        """Check that custody can release `amount`; the caller pays it out.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientReserve: If custody holds less than amount
        """
        if amount <= 0:
            raise ZeroAmount("Withdraw amount must be positive")
        if amount > self.custody.balance:
            raise InsufficientReserve(
                f"Cannot withdraw {amount}, reserve holds {self.custody.balance}"
            )
        return amount

    # --- Compensation for aborted payouts ---

    def revert_buy(self, buyer: str, result: BuyResult) -> None:
        """Undo a committed buy whose payout step failed."""
        self.ledger.burn(buyer, result.amount)
        self._current_price = result.previous_price

    def revert_sell(self, seller: str, result: SellResult) -> None:
        """Undo a committed sell whose payout step failed."""
        self.ledger.mint(seller, result.amount)
        self._current_price = result.previous_price
