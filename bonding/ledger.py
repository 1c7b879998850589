"""Fungible token ledger.

The curve only needs total supply plus mint and burn; transfer is here so
holders can move tokens like any fungible asset. Accounts are keyed by their
normalized (lowercase) address.

While a reserve payout is in flight the service holds the ledger frozen():
any mint, burn or transfer attempted from the payee's side is rejected, so a
failed payout can always be compensated exactly.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

import structlog

from bonding.errors import InsufficientBalance, ReentrantCall, ZeroAmount
from bonding.models.types import normalize_address

logger = structlog.get_logger()


class TokenLedger(Protocol):
    """Balance bookkeeping the curve engine mints into and burns from."""

    @property
    def total_supply(self) -> int: ...

    def balance_of(self, account: str) -> int: ...

    def mint(self, account: str, amount: int) -> None: ...

    def burn(self, account: str, amount: int) -> None: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...

    def frozen(self) -> AbstractContextManager[None]: ...


class InMemoryLedger:
    """Dict-backed TokenLedger."""

    def __init__(self) -> None:
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._total_supply = 0
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @contextmanager
    def frozen(self) -> Iterator[None]:
        """Reject every balance change until the block exits."""
        previous = self._frozen
        self._frozen = True
        try:
            yield
        finally:
            self._frozen = previous

    def _check_writable(self, operation: str) -> None:
        if self._frozen:
            logger.warning("ledger_frozen", operation=operation)
            raise ReentrantCall(f"Ledger {operation} rejected while a payout is in progress")

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def holders(self) -> dict[str, int]:
        """Snapshot of all non-zero balances."""
        return {account: balance for account, balance in self._balances.items() if balance}

    def mint(self, account: str, amount: int) -> None:
        self._check_writable("mint")
        if amount <= 0:
            raise ZeroAmount("Mint amount must be positive")
        self._balances[normalize_address(account)] += amount
        self._total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        """Destroy tokens held by account.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientBalance: If account holds less than amount
            ReentrantCall: If the ledger is frozen
        """
        self._check_writable("burn")
        if amount <= 0:
            raise ZeroAmount("Burn amount must be positive")
        key = normalize_address(account)
        balance = self._balances.get(key, 0)
        if balance < amount:
            raise InsufficientBalance(f"Account {key} holds {balance}, cannot burn {amount}")
        self._balances[key] = balance - amount
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move tokens between holders. Total supply is unchanged.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientBalance: If sender holds less than amount
            ReentrantCall: If the ledger is frozen
        """
        self._check_writable("transfer")
        if amount <= 0:
            raise ZeroAmount("Transfer amount must be positive")
        source = normalize_address(sender)
        balance = self._balances.get(source, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Account {source} holds {balance}, cannot transfer {amount}"
            )
        self._balances[source] = balance - amount
        self._balances[normalize_address(recipient)] += amount
        logger.debug("tokens_transferred", sender=source, recipient=recipient, amount=amount)
