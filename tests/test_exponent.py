"""Tests for the powers-of-ten cache and the exponent locator."""

from __future__ import annotations

from fractions import Fraction

import pytest

from decimalnotation.errors import InvalidArgumentError
from decimalnotation.exponent import locate_exponent
from decimalnotation.powers import PowersOfTen, get_powers_of_ten, integer_digits, power_of_ten


def reference_exponent(numerator: int, denominator: int) -> int:
    """Exponent found by repeated exact division or multiplication by ten."""
    value = Fraction(numerator, denominator)
    exponent = 0
    while value >= 10:
        value /= 10
        exponent += 1
    while value < 1:
        value *= 10
        exponent -= 1
    return exponent


# =============================================================================
# PowersOfTen
# =============================================================================


class TestPowersOfTen:
    """Tests for PowersOfTen."""

    def test_precomputed(self):
        powers = PowersOfTen(precomputed=8)
        assert len(powers) == 9
        assert powers.get(0) == 1
        assert powers.get(8) == 10**8

    def test_lazy_growth(self):
        powers = PowersOfTen(precomputed=4, max_cached_exponent=100)
        assert 50 not in powers
        assert powers.get(50) == 10**50
        assert 50 in powers

    def test_beyond_cache_not_stored(self):
        powers = PowersOfTen(precomputed=4, max_cached_exponent=10)
        assert powers.get(25) == 10**25
        assert 25 not in powers

    def test_adjacent(self):
        powers = PowersOfTen(precomputed=4, max_cached_exponent=10)
        assert powers.previous(1000, 3) == 100
        assert powers.next(1000, 3) == 10000
        assert powers.next(10**20, 20) == 10**21
        assert powers.previous(10**20, 20) == 10**19

    def test_negative_exponent_raises(self):
        with pytest.raises(ValueError):
            PowersOfTen().get(-1)

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            PowersOfTen(precomputed=10, max_cached_exponent=5)

    def test_shared_instance(self):
        assert get_powers_of_ten() is get_powers_of_ten()
        assert power_of_ten(12) == 10**12


class TestIntegerDigits:
    """Tests for integer_digits."""

    def test_small_values(self):
        assert integer_digits(0) == "0"
        assert integer_digits(1234) == "1234"
        assert integer_digits(42, 5) == "00042"
        assert integer_digits(0, 3) == "000"

    def test_beyond_str_digit_limit(self):
        chunk = "1234567890" * 400
        value = int(chunk) * 10**4000 + int(chunk)
        assert integer_digits(value) == chunk * 2

    def test_inner_zero_runs_kept(self):
        assert integer_digits(10**5000 + 7) == "1" + "0" * 4999 + "7"

    def test_padding_of_long_values(self):
        assert integer_digits(10**700, 705) == "0000" + "1" + "0" * 700
        assert integer_digits(1, 5000) == "0" * 4999 + "1"

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            integer_digits(-1)


# =============================================================================
# Exponent Location
# =============================================================================


class TestLocateExponent:
    """Tests for locate_exponent."""

    def test_examples(self):
        assert locate_exponent(400, 3) == (2, 100)
        assert locate_exponent(1, 2000) == (-4, 10000)
        assert locate_exponent(1, 1) == (0, 1)
        assert locate_exponent(9, 10) == (-1, 10)

    def test_equal_bit_lengths(self):
        # 12/10 and 10/12 share a bit length.
        assert locate_exponent(12, 10) == (0, 1)
        assert locate_exponent(10, 12) == (-1, 10)
        assert locate_exponent(15, 8) == (0, 1)

    def test_sign_normalised(self):
        assert locate_exponent(-400, -3) == (2, 100)

    @pytest.mark.parametrize("value", [(0, 1), (-1, 3), (1, -3), (1, 0)])
    def test_non_positive_raises(self, value):
        with pytest.raises(InvalidArgumentError):
            locate_exponent(*value)

    def test_exact_powers(self):
        for exponent in range(-300, 301):
            if exponent >= 0:
                pair = (10**exponent, 1)
            else:
                pair = (1, 10**-exponent)
            assert locate_exponent(*pair) == (exponent, 10 ** abs(exponent))

    def test_just_below_powers(self):
        for exponent in range(-300, 301):
            if exponent >= 0:
                numerator, denominator = 10 ** (exponent + 3) - 1, 1000
            else:
                numerator, denominator = 10**3 - 1, 10 ** (3 - exponent)
            expected = exponent - 1
            assert locate_exponent(numerator, denominator)[0] == expected

    def test_against_reference(self):
        pairs = [
            (7, 3),
            (2, 3),
            (1, 7),
            (22, 7),
            (355, 113),
            (99999, 100000),
            (100001, 100000),
            (1, 99999999),
            (2**200, 3**50),
            (3**50, 2**200),
            (10**100 + 1, 7),
            (7, 10**100 + 1),
        ]
        for numerator, denominator in pairs:
            exponent, power = locate_exponent(numerator, denominator)
            assert exponent == reference_exponent(numerator, denominator)
            assert power == 10 ** abs(exponent)

    def test_custom_powers(self):
        powers = PowersOfTen(precomputed=2, max_cached_exponent=4)
        assert locate_exponent(10**30, 3, powers) == (29, 10**29)
