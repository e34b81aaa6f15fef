"""Tests for exact decimal rounding.

Tests cover:
- Midpoint policies on integer quotients
- Rounding rationals to decimal places
- Policy name parsing
- Error handling
"""

from __future__ import annotations

from fractions import Fraction

import pytest

from decimalnotation.errors import InvalidArgumentError, NonFiniteValueError
from decimalnotation.rational import Rational
from decimalnotation.rounding import (
    MidpointRounding,
    round_rational,
    round_to_int,
    round_to_integer,
)


# =============================================================================
# Integer Rounding
# =============================================================================


class TestRoundToInteger:
    """Tests for round_to_integer."""

    @pytest.mark.parametrize(
        "mode,expected",
        [
            (MidpointRounding.AWAY_FROM_ZERO, [3, -3, 2, -2, 4, -4]),
            (MidpointRounding.TO_EVEN, [2, -2, 2, -2, 4, -4]),
            (MidpointRounding.TO_ZERO, [2, -2, 2, -2, 3, -3]),
            (MidpointRounding.TO_POSITIVE_INFINITY, [3, -2, 3, -2, 4, -3]),
            (MidpointRounding.TO_NEGATIVE_INFINITY, [2, -3, 2, -3, 3, -4]),
        ],
    )
    def test_policies(self, mode, expected):
        """Midpoints and non-midpoints under each policy."""
        pairs = [(5, 2), (-5, 2), (21, 10), (-21, 10), (7, 2), (-7, 2)]
        assert [round_to_integer(n, d, mode) for n, d in pairs] == expected

    def test_default_is_to_even(self):
        assert round_to_integer(5, 2) == 2
        assert round_to_integer(3, 2) == 2

    def test_non_midpoint_goes_to_nearest(self):
        for mode in (MidpointRounding.AWAY_FROM_ZERO, MidpointRounding.TO_EVEN):
            assert round_to_integer(2, 3, mode) == 1
            assert round_to_integer(1, 3, mode) == 0
            assert round_to_integer(-2, 3, mode) == -1

    def test_negative_denominator(self):
        assert round_to_integer(5, -2, MidpointRounding.AWAY_FROM_ZERO) == -3
        assert round_to_integer(-7, -2, MidpointRounding.TO_EVEN) == 4

    def test_zero_numerator(self):
        assert round_to_integer(0, 7, MidpointRounding.TO_POSITIVE_INFINITY) == 0

    def test_exact_division(self):
        assert round_to_integer(12, 4, MidpointRounding.TO_POSITIVE_INFINITY) == 3

    def test_large_values(self):
        n = 10**40 + 5
        assert round_to_integer(n, 10, MidpointRounding.TO_EVEN) == 10**39
        assert round_to_integer(n, 10, MidpointRounding.AWAY_FROM_ZERO) == 10**39 + 1

    def test_zero_denominator_raises(self):
        with pytest.raises(NonFiniteValueError):
            round_to_integer(1, 0)

    def test_accepts_mode_value(self):
        assert round_to_integer(5, 2, "away_from_zero") == 3


# =============================================================================
# Decimal Rounding
# =============================================================================


class TestRoundRational:
    """Tests for round_rational."""

    def test_two_thirds(self):
        assert round_rational(Rational(2, 3), 2) == Rational(67, 100)

    def test_unreduced_keeps_power_of_ten(self):
        result = round_rational(Rational(1, 8), 2, MidpointRounding.TO_EVEN, reduce=False)
        assert (result.numerator, result.denominator) == (12, 100)

    def test_reduced_by_default(self):
        result = round_rational(Rational(1, 8), 1, MidpointRounding.AWAY_FROM_ZERO)
        assert (result.numerator, result.denominator) == (1, 10)

    def test_midpoint_at_decimal_place(self):
        value = Rational(125, 1000)
        assert round_rational(value, 2, MidpointRounding.TO_EVEN) == Rational(12, 100)
        assert round_rational(value, 2, MidpointRounding.AWAY_FROM_ZERO) == Rational(13, 100)
        assert round_rational(-value, 2, MidpointRounding.TO_NEGATIVE_INFINITY) == Rational(-13, 100)
        assert round_rational(-value, 2, MidpointRounding.TO_POSITIVE_INFINITY) == Rational(-12, 100)

    def test_zero_decimals(self):
        result = round_rational(Rational(5, 2), 0, MidpointRounding.TO_EVEN)
        assert (result.numerator, result.denominator) == (2, 1)

    def test_integer_unchanged(self):
        result = round_rational(Rational(42), 5, reduce=False)
        assert (result.numerator, result.denominator) == (42, 1)

    def test_zero_unchanged(self):
        assert round_rational(Rational(0), 3).is_zero

    def test_specials_unchanged(self):
        assert round_rational(Rational.nan(), 2).is_nan
        assert round_rational(Rational.positive_infinity(), 2).is_positive_infinity
        assert round_rational(Rational.negative_infinity(), 2).is_negative_infinity

    def test_accepts_fraction(self):
        assert round_rational(Fraction(1, 3), 3) == Rational(333, 1000)

    def test_negative_decimals_raises(self):
        with pytest.raises(InvalidArgumentError):
            round_rational(Rational(1, 3), -1)

    def test_round_to_int(self):
        assert round_to_int(Rational(7, 2), MidpointRounding.TO_EVEN) == 4
        assert round_to_int(Rational(-7, 2), MidpointRounding.TO_ZERO) == -3

    def test_round_to_int_special_raises(self):
        with pytest.raises(NonFiniteValueError):
            round_to_int(Rational.nan())


# =============================================================================
# Policy Parsing
# =============================================================================


class TestMidpointRoundingParsing:
    """Tests for MidpointRounding.from_string."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("to_even", MidpointRounding.TO_EVEN),
            ("TO-EVEN", MidpointRounding.TO_EVEN),
            ("bankers", MidpointRounding.TO_EVEN),
            ("half_up", MidpointRounding.AWAY_FROM_ZERO),
            ("away_from_zero", MidpointRounding.AWAY_FROM_ZERO),
            ("truncate", MidpointRounding.TO_ZERO),
            ("ceiling", MidpointRounding.TO_POSITIVE_INFINITY),
            ("floor", MidpointRounding.TO_NEGATIVE_INFINITY),
        ],
    )
    def test_names(self, name, expected):
        assert MidpointRounding.from_string(name) is expected

    def test_unknown_name(self):
        with pytest.raises(InvalidArgumentError, match="unknown rounding mode"):
            MidpointRounding.from_string("sideways")


# =============================================================================
# Properties
# =============================================================================


NEAREST_MODES = (MidpointRounding.AWAY_FROM_ZERO, MidpointRounding.TO_EVEN)


class TestRoundingProperties:
    """Error bounds of round_rational over a spread of fractions."""

    @pytest.mark.parametrize("mode", list(MidpointRounding))
    @pytest.mark.parametrize("decimals", range(5))
    def test_denominator_and_error_bounds(self, mode, decimals):
        scale = 10**decimals
        unit = Fraction(1, scale)
        half = unit / 2

        for denominator in range(1, 31):
            for numerator in range(-50, 51):
                exact = Fraction(numerator, denominator)
                result = round_rational(exact, decimals, mode, reduce=False)

                assert scale % result.denominator == 0
                rounded = result.to_fraction()
                error = abs(rounded - exact)

                if mode in NEAREST_MODES:
                    assert error <= half
                    if (exact * scale).denominator != 2:
                        assert error < half
                else:
                    assert error < unit

                if mode is MidpointRounding.TO_ZERO:
                    assert abs(rounded) <= abs(exact)
                elif mode is MidpointRounding.TO_POSITIVE_INFINITY:
                    assert rounded >= exact
                elif mode is MidpointRounding.TO_NEGATIVE_INFINITY:
                    assert rounded <= exact

    @pytest.mark.parametrize("decimals", range(5))
    def test_midpoint_ties(self, decimals):
        scale = 10**decimals
        for units in range(-20, 21):
            tie = Fraction(2 * units + 1, 2 * scale)
            away = round_rational(tie, decimals, MidpointRounding.AWAY_FROM_ZERO).to_fraction()
            even = round_rational(tie, decimals, MidpointRounding.TO_EVEN).to_fraction()

            assert abs(away) > abs(tie)
            assert (even * scale).numerator % 2 == 0
