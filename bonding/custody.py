"""Reserve currency custody.

Holds the reserve paid in by buyers and pays out sell proceeds, refunds and
owner withdrawals. A payout is the one place control leaves the service: the
payee hook runs there, so callers must have committed their state first.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import structlog

from bonding.errors import InsufficientReserve, TransferFailed, ZeroAmount
from bonding.models.types import normalize_address

logger = structlog.get_logger()

# Called with (payee, amount) when reserve is delivered; raising rejects the payment
PayoutHook = Callable[[str, int], None]


class ReserveCustody(Protocol):
    """Reserve balance held on behalf of the curve."""

    @property
    def balance(self) -> int: ...

    def receive(self, payer: str, amount: int) -> None: ...

    def cancel_receipt(self, payer: str, amount: int) -> None: ...

    def pay(self, payee: str, amount: int) -> None: ...


class InMemoryCustody:
    """In-process ReserveCustody with optional per-payee delivery hooks.

    Hooks stand in for the payee's side of a transfer (a contract receiving
    funds). They may call back into the service, which is how reentrancy is
    exercised in tests.
    """

    def __init__(self, initial_balance: int = 0) -> None:
        self._balance = initial_balance
        self._hooks: dict[str, PayoutHook] = {}
        self.delivered: dict[str, int] = {}

    @property
    def balance(self) -> int:
        return self._balance

    def set_hook(self, payee: str, hook: PayoutHook | None) -> None:
        """Install (or clear, with None) the delivery hook for a payee."""
        key = normalize_address(payee)
        if hook is None:
            self._hooks.pop(key, None)
        else:
            self._hooks[key] = hook

    def receive(self, payer: str, amount: int) -> None:
        """Credit a payment attached to a call."""
        if amount < 0:
            raise ZeroAmount(f"Cannot receive a negative amount: {amount}")
        self._balance += amount
        logger.debug("reserve_received", payer=normalize_address(payer), amount=amount)

    def cancel_receipt(self, payer: str, amount: int) -> None:
        """Undo a receive() from an aborted operation. Never calls a hook."""
        if amount > self._balance:
            raise InsufficientReserve(f"Cannot cancel {amount}, custody holds {self._balance}")
        self._balance -= amount
        logger.debug("reserve_receipt_cancelled", payer=normalize_address(payer), amount=amount)

    def pay(self, payee: str, amount: int) -> None:
        """Deliver reserve to payee.

        The balance is debited before the hook runs. If the hook raises, the
        debit is reverted and TransferFailed is raised from the hook's error.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientReserve: If custody holds less than amount
            TransferFailed: If the payee hook rejects the payment
        """
        if amount <= 0:
            raise ZeroAmount("Payout amount must be positive")
        if amount > self._balance:
            raise InsufficientReserve(f"Cannot pay {amount}, custody holds {self._balance}")

        key = normalize_address(payee)
        self._balance -= amount
        hook = self._hooks.get(key)
        if hook is not None:
            try:
                hook(key, amount)
            except Exception as err:
                self._balance += amount
                raise TransferFailed(f"Payee {key} rejected {amount}: {err}") from err

        self.delivered[key] = self.delivered.get(key, 0) + amount
        logger.debug("reserve_paid", payee=key, amount=amount)
