"""Bonding curve token service.

BondingCurveToken is the boundary callers talk to. It serializes every
state-mutating call behind one lock and runs each operation in three phases:

1. checks and effects through CurveEngine (mint/burn, current_price)
2. reserve movement through custody (credit payment, pay refund/proceeds)
3. notifications (events, logs)

Phase 2 is where a payee hook may run arbitrary code. A second mutating call
started from there is rejected with ReentrantCall, and the ledger is held
frozen so the hook cannot move balances behind the service. If a payout
fails, the phase-1 effects are compensated before the error propagates, so
no partial state survives.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from bonding.config import DEFAULT_CURVE_CONFIG, CurveConfig
from bonding.curve.engine import BuyResult, CurveEngine, SellResult
from bonding.curve.pricing import BuyQuote, SellQuote
from bonding.custody import InMemoryCustody, ReserveCustody
from bonding.errors import BondingCurveError, ReentrantCall, Unauthorized
from bonding.events import EventLog, ReserveWithdrawn, TokensBought, TokensSold
from bonding.ledger import InMemoryLedger, TokenLedger
from bonding.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurveState:
    """Read-only snapshot of the curve."""

    total_supply: int
    current_price: int
    reserve_balance: int


class BondingCurveToken:
    """Token whose issuance and redemption are priced by an exponential curve."""

    def __init__(
        self,
        config: CurveConfig = DEFAULT_CURVE_CONFIG,
        ledger: TokenLedger | None = None,
        custody: ReserveCustody | None = None,
    ) -> None:
        self.config = config
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.custody = custody if custody is not None else InMemoryCustody()
        self.engine = CurveEngine(config, self.ledger, self.custody)
        self.events = EventLog()
        self._lock = threading.RLock()
        self._entered = False

    # --- Reads ---

    @property
    def owner(self) -> str:
        return self.config.owner

    @property
    def total_supply(self) -> int:
        return self.ledger.total_supply

    @property
    def current_price(self) -> int:
        return self.engine.current_price

    @property
    def reserve_balance(self) -> int:
        return self.custody.balance

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def state(self) -> CurveState:
        with self._lock:
            return CurveState(
                total_supply=self.ledger.total_supply,
                current_price=self.engine.current_price,
                reserve_balance=self.custody.balance,
            )

    def price_at_supply(self, supply: int) -> int:
        return self.engine.price_at_supply(supply)

    def quote_buy(self, amount: int) -> BuyQuote:
        with self._lock:
            return self.engine.quote_buy(amount)

    def quote_sell(self, amount: int) -> SellQuote:
        with self._lock:
            return self.engine.quote_sell(amount)

    # --- Mutations ---

    @contextmanager
    def _non_reentrant(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._entered:
                logger.warning("reentrant_call_rejected", operation=operation)
                raise ReentrantCall(f"{operation} called while another operation is in progress")
            self._entered = True
            try:
                yield
            finally:
                self._entered = False

    def _pay(self, payee: str, amount: int) -> None:
        """Move reserve to payee with the ledger frozen for the payee's hook."""
        with self.ledger.frozen():
            self.custody.pay(payee, amount)

    def buy(self, buyer: str, amount: int, payment: int) -> BuyResult:
        """Mint `amount` tokens to buyer, charging the curve cost from `payment`.

        Any overpayment is refunded to the buyer.

        Raises:
            ZeroAmount, SupplyCapExceeded, InsufficientPayment, Overflow:
                before any state change
            TransferFailed: If the refund is rejected; the buy is rolled back
            ReentrantCall: If called from inside another operation's payout
        """
        buyer = normalize_address(buyer)
        with self._non_reentrant("buy"):
            try:
                result = self.engine.execute_buy(buyer, payment, amount)
            except BondingCurveError as err:
                logger.info(
                    "buy_rejected", buyer=buyer, amount=amount, payment=payment, error=repr(err)
                )
                raise

            self.custody.receive(buyer, payment)
            if result.refund > 0:
                try:
                    self._pay(buyer, result.refund)
                except Exception:
                    logger.warning("refund_failed", buyer=buyer, refund=result.refund)
                    self.custody.cancel_receipt(buyer, payment)
                    self.engine.revert_buy(buyer, result)
                    raise

            self.events.emit(TokensBought(buyer=buyer, amount=amount, cost=result.total_cost))
            logger.info(
                "tokens_bought",
                buyer=buyer,
                amount=amount,
                total_cost=result.total_cost,
                refund=result.refund,
                new_price=result.new_price,
            )
            return result

    def sell(self, seller: str, amount: int) -> SellResult:
        """Burn `amount` tokens from seller and pay out the curve proceeds.

        Raises:
            ZeroAmount, InsufficientSupply, InsufficientBalance, InsufficientReserve:
                before any state change
            TransferFailed: If the payout is rejected; the sell is rolled back
            ReentrantCall: If called from inside another operation's payout
        """
        seller = normalize_address(seller)
        with self._non_reentrant("sell"):
            try:
                result = self.engine.execute_sell(seller, amount)
            except BondingCurveError as err:
                logger.info("sell_rejected", seller=seller, amount=amount, error=repr(err))
                raise

            if result.proceeds > 0:
                try:
                    self._pay(seller, result.proceeds)
                except Exception:
                    logger.warning("payout_failed", seller=seller, proceeds=result.proceeds)
                    self.engine.revert_sell(seller, result)
                    raise

            self.events.emit(TokensSold(seller=seller, amount=amount, proceeds=result.proceeds))
            logger.info(
                "tokens_sold",
                seller=seller,
                amount=amount,
                proceeds=result.proceeds,
                new_price=result.new_price,
            )
            return result

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move tokens between holders; supply and price are unchanged.

        Raises:
            ZeroAmount, InsufficientBalance: If the transfer cannot be made
            ReentrantCall: If called from inside another operation's payout
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        with self._non_reentrant("transfer"):
            self.ledger.transfer(sender, recipient, amount)
            logger.info("tokens_transferred", sender=sender, recipient=recipient, amount=amount)

    def withdraw(self, caller: str, amount: int) -> int:
        """Pay `amount` of reserve to the owner.

        Raises:
            Unauthorized: If caller is not the owner
            ZeroAmount, InsufficientReserve: If the amount cannot be paid
            TransferFailed: If the owner rejects the payment
            ReentrantCall: If called from inside another operation's payout
        """
        caller = normalize_address(caller)
        with self._non_reentrant("withdraw"):
            if caller != self.config.owner:
                logger.warning("unauthorized_withdraw", caller=caller, amount=amount)
                raise Unauthorized(f"{caller} is not the owner")

            self.engine.withdraw(amount)
            self._pay(caller, amount)

            self.events.emit(ReserveWithdrawn(owner=caller, amount=amount))
            logger.info("reserve_withdrawn", owner=caller, amount=amount)
            return amount
