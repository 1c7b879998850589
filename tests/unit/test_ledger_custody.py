"""Tests for the in-memory ledger and reserve custody."""

import pytest

from bonding.custody import InMemoryCustody
from bonding.errors import (
    InsufficientBalance,
    InsufficientReserve,
    ReentrantCall,
    TransferFailed,
    ZeroAmount,
)
from bonding.ledger import InMemoryLedger
from tests.helpers import ALICE, BOB


class TestInMemoryLedger:
    def test_mint_and_burn(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 100)
        ledger.mint(BOB, 50)
        ledger.burn(ALICE, 30)

        assert ledger.total_supply == 120
        assert ledger.balance_of(ALICE) == 70
        assert ledger.holders() == {ALICE: 70, BOB: 50}

    def test_case_insensitive_accounts(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE.upper().replace("0X", "0x"), 10)
        assert ledger.balance_of(ALICE) == 10

    def test_unknown_account_has_zero_balance(self):
        assert InMemoryLedger().balance_of(BOB) == 0

    def test_burn_more_than_held(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 10)
        with pytest.raises(InsufficientBalance):
            ledger.burn(ALICE, 11)
        assert ledger.total_supply == 10

    def test_zero_amounts(self):
        ledger = InMemoryLedger()
        with pytest.raises(ZeroAmount):
            ledger.mint(ALICE, 0)
        with pytest.raises(ZeroAmount):
            ledger.burn(ALICE, 0)
        with pytest.raises(ZeroAmount):
            ledger.transfer(ALICE, BOB, 0)

    def test_transfer_keeps_supply(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 10)
        ledger.transfer(ALICE, BOB, 4)

        assert ledger.total_supply == 10
        assert ledger.balance_of(ALICE) == 6
        assert ledger.balance_of(BOB) == 4

    def test_transfer_more_than_held(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 1)
        with pytest.raises(InsufficientBalance):
            ledger.transfer(ALICE, BOB, 2)
        assert ledger.balance_of(BOB) == 0

    def test_frozen_rejects_every_change(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 10)

        with ledger.frozen():
            assert ledger.is_frozen
            with pytest.raises(ReentrantCall):
                ledger.mint(ALICE, 1)
            with pytest.raises(ReentrantCall):
                ledger.burn(ALICE, 1)
            with pytest.raises(ReentrantCall):
                ledger.transfer(ALICE, BOB, 1)
            assert ledger.balance_of(ALICE) == 10

        assert not ledger.is_frozen
        ledger.transfer(ALICE, BOB, 1)
        assert ledger.balance_of(BOB) == 1

    def test_frozen_released_on_error(self):
        ledger = InMemoryLedger()
        with pytest.raises(RuntimeError):
            with ledger.frozen():
                raise RuntimeError("payout failed")
        assert not ledger.is_frozen
        ledger.mint(ALICE, 1)

    def test_emptied_account_drops_from_holders(self):
        ledger = InMemoryLedger()
        ledger.mint(ALICE, 5)
        ledger.burn(ALICE, 5)
        assert ledger.holders() == {}


class TestInMemoryCustody:
    def test_receive_and_pay(self):
        custody = InMemoryCustody()
        custody.receive(ALICE, 100)
        custody.pay(BOB, 40)

        assert custody.balance == 60
        assert custody.delivered == {BOB: 40}

    def test_initial_balance(self):
        assert InMemoryCustody(initial_balance=7).balance == 7

    def test_pay_more_than_held(self):
        custody = InMemoryCustody(initial_balance=5)
        with pytest.raises(InsufficientReserve):
            custody.pay(ALICE, 6)

    def test_pay_zero(self):
        with pytest.raises(ZeroAmount):
            InMemoryCustody(initial_balance=5).pay(ALICE, 0)

    def test_receive_negative(self):
        with pytest.raises(ZeroAmount):
            InMemoryCustody().receive(ALICE, -1)

    def test_cancel_receipt(self):
        custody = InMemoryCustody()
        custody.receive(ALICE, 10)
        custody.cancel_receipt(ALICE, 10)
        assert custody.balance == 0
        with pytest.raises(InsufficientReserve):
            custody.cancel_receipt(ALICE, 1)

    def test_hook_sees_debited_balance(self):
        custody = InMemoryCustody(initial_balance=10)
        seen = []
        custody.set_hook(ALICE, lambda payee, amount: seen.append((payee, amount, custody.balance)))

        custody.pay(ALICE, 4)

        assert seen == [(ALICE, 4, 6)]

    def test_rejecting_hook_restores_balance(self):
        custody = InMemoryCustody(initial_balance=10)

        def reject(payee, amount):
            raise ValueError("no thanks")

        custody.set_hook(ALICE, reject)
        with pytest.raises(TransferFailed) as excinfo:
            custody.pay(ALICE, 4)

        assert isinstance(excinfo.value.__cause__, ValueError)
        assert custody.balance == 10
        assert custody.delivered == {}

    def test_clear_hook(self):
        custody = InMemoryCustody(initial_balance=10)
        custody.set_hook(ALICE, lambda payee, amount: 1 / 0)
        custody.set_hook(ALICE, None)
        custody.pay(ALICE, 1)
        assert custody.delivered[ALICE] == 1
