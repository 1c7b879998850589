"""Tests for the 64.64 fixed-point math library.

Covers conversions, range guards, and the log_2/exp_2 pair at its
boundaries (near zero, near the largest exponent, log_2(1)).
"""

from math import isqrt

import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from bonding.math.fixed_point import (
    EXP2_MAX_EXPONENT,
    MAX_64x64,
    MAX_RELATIVE_ERROR,
    MIN_64x64,
    ONE,
    DivisionByZero,
    DomainError,
    FixedPointError,
    Overflow,
    Q64x64,
    div,
    exp_2,
    from_fraction,
    from_int,
    log_2,
    mul,
    pow_fractional,
    to_int,
)

SQRT2 = isqrt(2 << 128)  # sqrt(2) in 64.64, rounded down


class TestConversions:
    """from_int / to_int / from_fraction."""

    def test_from_int(self):
        assert from_int(5) == 5 * ONE
        assert from_int(-3) == -3 * ONE
        assert from_int(0) == 0

    def test_from_int_bounds(self):
        """int64 limits are accepted, anything outside raises Overflow."""
        assert from_int(2**63 - 1) == (2**63 - 1) * ONE
        assert from_int(-(2**63)) == MIN_64x64
        with pytest.raises(Overflow):
            from_int(2**63)
        with pytest.raises(Overflow):
            from_int(-(2**63) - 1)

    def test_to_int_truncates_toward_zero(self):
        assert to_int(from_int(7)) == 7
        assert to_int(from_int(7) + ONE // 2) == 7
        assert to_int(-(ONE + ONE // 2)) == -1
        assert to_int(-(ONE // 2)) == 0

    def test_from_fraction(self):
        assert from_fraction(1, 2) == ONE // 2
        assert from_fraction(10**21, 10**18) == from_int(1000)
        assert from_fraction(0, 7) == 0

    def test_from_fraction_rounds_down(self):
        assert from_fraction(1, 3) == ONE // 3

    def test_from_fraction_errors(self):
        with pytest.raises(DivisionByZero):
            from_fraction(1, 0)
        with pytest.raises(DomainError):
            from_fraction(-1, 2)
        with pytest.raises(Overflow):
            from_fraction(2**63, 1)


class TestMulDiv:
    """mul / div."""

    def test_mul(self):
        assert mul(from_int(3), from_int(4)) == from_int(12)
        assert mul(ONE // 2, ONE // 2) == ONE // 4
        assert mul(from_int(-3), from_int(4)) == from_int(-12)

    def test_mul_overflow(self):
        with pytest.raises(Overflow):
            mul(MAX_64x64, from_int(2))

    def test_div(self):
        assert div(from_int(12), from_int(4)) == from_int(3)
        assert div(from_int(1), from_int(3)) == ONE // 3

    def test_div_truncates_toward_zero(self):
        assert div(from_int(-1), from_int(3)) == -(ONE // 3)
        assert div(from_int(1), from_int(-3)) == -(ONE // 3)

    def test_div_by_zero(self):
        with pytest.raises(DivisionByZero):
            div(ONE, 0)

    def test_div_overflow(self):
        with pytest.raises(Overflow):
            div(from_int(2**62), ONE // 4)

    def test_errors_are_arithmetic_errors(self):
        """Callers may catch every fixed-point failure as ArithmeticError."""
        assert issubclass(FixedPointError, ArithmeticError)
        for error in (Overflow, DomainError, DivisionByZero):
            assert issubclass(error, FixedPointError)


class TestLog2:
    """log_2 exactness, domain and monotonicity."""

    def test_log2_of_one_is_zero(self):
        assert log_2(ONE) == 0

    @pytest.mark.parametrize("power", [-64, -10, -1, 1, 2, 3, 10, 62])
    def test_log2_of_powers_of_two_is_exact(self, power):
        x = ONE << power if power >= 0 else ONE >> -power
        assert log_2(x) == power * ONE

    def test_log2_smallest_positive(self):
        """The smallest representable value is 2^-64."""
        assert log_2(1) == -64 * ONE

    def test_log2_of_sqrt2(self):
        assert abs(log_2(SQRT2) - ONE // 2) <= 2

    @pytest.mark.parametrize("x", [0, -1, -ONE, MIN_64x64])
    def test_log2_domain(self, x):
        with pytest.raises(DomainError):
            log_2(x)

    def test_log2_out_of_range(self):
        with pytest.raises(Overflow):
            log_2(MAX_64x64 + 1)

    @settings(max_examples=300, deadline=None)
    @given(
        st.integers(min_value=1, max_value=MAX_64x64),
        st.integers(min_value=1, max_value=MAX_64x64),
    )
    def test_log2_monotonic(self, a, b):
        low, high = sorted((a, b))
        assert log_2(low) <= log_2(high)

    @pytest.mark.parametrize("x", [ONE - 1, ONE, ONE + 1])
    def test_log2_monotonic_around_one(self, x):
        assert log_2(x) <= log_2(x + 1)

    def test_log2_of_growth_ratio(self):
        """log2(1.01) ~= 0.0143552929770701."""
        value = Q64x64(log_2(from_fraction(101, 100))).to_decimal()
        assert abs(float(value) - 0.0143552929770701) < 1e-15


class TestExp2:
    """exp_2 exactness, range guards and monotonicity."""

    def test_exp2_of_zero_is_one(self):
        assert exp_2(0) == ONE

    @pytest.mark.parametrize("power", [-64, -3, -1, 1, 2, 10, 62])
    def test_exp2_of_integers_is_exact(self, power):
        expected = ONE << power if power >= 0 else ONE >> -power
        assert exp_2(from_int(power)) == expected

    def test_exp2_of_half(self):
        assert abs(exp_2(ONE // 2) - SQRT2) <= 1

    def test_exp2_of_negative_half(self):
        """2^-0.5 = sqrt(2) / 2."""
        assert abs(exp_2(-(ONE // 2)) - SQRT2 // 2) <= 1

    def test_exp2_upper_bound(self):
        """2^x does not fit 64.64 for x >= 63."""
        with pytest.raises(Overflow):
            exp_2(EXP2_MAX_EXPONENT)
        with pytest.raises(Overflow):
            exp_2(from_int(64))
        assert exp_2(EXP2_MAX_EXPONENT - 1) <= MAX_64x64

    def test_exp2_underflows_to_zero(self):
        assert exp_2(from_int(-64)) == 1
        assert exp_2(from_int(-64) - 1) == 0
        assert exp_2(from_int(-1000)) == 0

    @settings(max_examples=300, deadline=None)
    @given(
        st.integers(min_value=-64 * ONE, max_value=EXP2_MAX_EXPONENT - 1),
        st.integers(min_value=-64 * ONE, max_value=EXP2_MAX_EXPONENT - 1),
    )
    def test_exp2_monotonic(self, a, b):
        low, high = sorted((a, b))
        assert exp_2(low) <= exp_2(high)


class TestRoundTrip:
    """exp_2(log_2(x)) ~= x within the documented bound."""

    @settings(max_examples=500, deadline=None)
    @given(st.integers(min_value=ONE, max_value=(1 << 126) - 1))
    def test_round_trip(self, x):
        y = exp_2(log_2(x))
        # both steps truncate, so the result never exceeds x
        assert 0 <= x - y <= (x * MAX_RELATIVE_ERROR >> 64) + 2

    @pytest.mark.parametrize("x", [ONE, ONE + 1, 2 * ONE - 1, 2 * ONE, 3 * ONE, 1 << 126])
    def test_round_trip_boundaries(self, x):
        y = exp_2(log_2(x))
        assert 0 <= x - y <= (x * MAX_RELATIVE_ERROR >> 64) + 2


class TestPowFractional:
    """pow_fractional = exp_2(log_2(base) * exponent)."""

    def test_square_root_of_four(self):
        assert pow_fractional(from_int(4), ONE // 2) == from_int(2)

    def test_zero_exponent(self):
        assert pow_fractional(from_fraction(101, 100), 0) == ONE

    def test_base_at_growth_ratio(self):
        """1.01^1 reproduces the base within the error bound."""
        base = from_fraction(101, 100)
        result = pow_fractional(base, ONE)
        assert 0 <= base - result <= (base * MAX_RELATIVE_ERROR >> 64) + 2

    def test_growth_ratio_half_power(self):
        """1.01^0.5 ~= 1.004987562112089."""
        result = Q64x64(pow_fractional(from_fraction(101, 100), ONE // 2)).to_decimal()
        assert abs(float(result) - 1.004987562112089) < 1e-15

    @pytest.mark.parametrize("base", [0, -ONE])
    def test_non_positive_base(self, base):
        with pytest.raises(DomainError):
            pow_fractional(base, ONE)

    def test_overflow(self):
        with pytest.raises(Overflow):
            pow_fractional(from_int(2), from_int(63))


class TestQ64x64:
    """Q64x64 wrapper class."""

    def test_arithmetic(self):
        assert Q64x64.from_int(3).mul(Q64x64.from_int(2)) == Q64x64.from_int(6)
        assert Q64x64.from_int(3).div(Q64x64.from_int(2)) == Q64x64.from_fraction(3, 2)

    def test_log_exp(self):
        assert Q64x64.from_int(8).log2() == Q64x64.from_int(3)
        assert Q64x64.from_int(3).exp2() == Q64x64.from_int(8)
        assert Q64x64.from_int(9).pow_fractional(Q64x64(ONE // 2)).to_int() in (2, 3)

    def test_range_checked_on_construction(self):
        with pytest.raises(Overflow):
            Q64x64(MAX_64x64 + 1)
        with pytest.raises(Overflow):
            Q64x64(MIN_64x64 - 1)

    def test_comparisons(self):
        half = Q64x64(ONE // 2)
        one = Q64x64(ONE)
        assert half < one
        assert one >= half
        assert half != one

    def test_display(self):
        assert str(Q64x64(ONE // 2)) == "0.5"
        assert repr(Q64x64(ONE)) == f"Q64x64({ONE})"
        assert Q64x64.from_int(-2).to_int() == -2
