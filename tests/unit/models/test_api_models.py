"""Tests for API models and shared field types."""

import pytest
from pydantic import ValidationError

from bonding.models import BuyQuoteResponse, BuyRequest, CurveStateResponse, SellRequest
from bonding.models.types import (
    UINT256_MAX,
    is_valid_address,
    normalize_address,
    validate_uint256,
)
from tests.helpers import ALICE, OWNER


class TestUint256:
    @pytest.mark.parametrize("value", [0, "0", 10**18, "1000000000000000000", UINT256_MAX])
    def test_valid(self, value):
        assert validate_uint256(value) == str(int(value))

    @pytest.mark.parametrize("value", [-1, "-1", UINT256_MAX + 1, "1.5", "abc", 1.0, None, True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_uint256(value)


class TestAddress:
    def test_valid(self):
        assert is_valid_address(ALICE)
        assert is_valid_address(ALICE.upper().replace("0X", "0x"))

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "0x",
            ALICE[2:],
            ALICE + "00",
            "0x" + "g" * 40,
            "0x" + "1_" * 20,
            "0x" + "0" * 39 + "\n",
            "0X" + "0" * 40,
            42,
            None,
        ],
    )
    def test_invalid(self, value):
        assert not is_valid_address(value)

    def test_normalize(self):
        assert normalize_address(ALICE.upper().replace("0X", "0x")) == ALICE
        assert normalize_address(ALICE[2:]) == ALICE

    def test_normalize_validates_on_request(self):
        with pytest.raises(ValueError):
            normalize_address("0x12", validate=True)


class TestRequests:
    def test_buy_request(self):
        request = BuyRequest.model_validate(
            {"buyer": ALICE, "amount": "1000000000000000000", "payment": 10**16}
        )
        assert request.amount == "1000000000000000000"
        assert request.payment == "10000000000000000"

    def test_buy_request_rejects_bad_address(self):
        with pytest.raises(ValidationError):
            BuyRequest.model_validate({"buyer": "0x12", "amount": "1", "payment": "1"})

    def test_sell_request_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            SellRequest.model_validate({"seller": ALICE, "amount": "-5"})


class TestResponses:
    def test_camel_case_on_the_wire(self):
        quote = BuyQuoteResponse(amount=1, total_cost=2, new_supply=3, new_price=4)
        assert quote.model_dump(by_alias=True) == {
            "amount": "1",
            "totalCost": "2",
            "newSupply": "3",
            "newPrice": "4",
        }

    def test_accepts_aliases(self):
        quote = BuyQuoteResponse.model_validate(
            {"amount": "1", "totalCost": "2", "newSupply": "3", "newPrice": "4"}
        )
        assert quote.total_cost == "2"

    def test_curve_state(self):
        state = CurveStateResponse(
            base_price=10**16,
            growth_numerator=101,
            growth_denominator=100,
            max_supply=10**21,
            decimals=18,
            owner=OWNER,
            total_supply=0,
            current_price=10**16,
            reserve_balance=0,
        )
        body = state.model_dump(by_alias=True)
        assert body["basePrice"] == "10000000000000000"
        assert body["decimals"] == 18
        assert body["owner"] == OWNER
