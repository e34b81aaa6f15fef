"""Tests for digit extraction and grouping."""

from __future__ import annotations

from dataclasses import replace

import pytest

from decimalnotation.digits import (
    extract_fixed,
    extract_significant,
    group_digits,
    to_native_digits,
)
from decimalnotation.errors import InvalidArgumentError, NonFiniteValueError
from decimalnotation.numberformat import INVARIANT, get_format_table
from decimalnotation.rational import Rational


# =============================================================================
# Grouping
# =============================================================================


class TestGroupDigits:
    """Tests for group_digits."""

    @pytest.mark.parametrize(
        "digits,sizes,expected",
        [
            ("1234567", [3], "1,234,567"),
            ("123", [3], "123"),
            ("1234", [3], "1,234"),
            ("1234567", [3, 2], "12,34,567"),
            ("123456789", [3, 2], "12,34,56,789"),
            ("1234567", [3, 0], "1234,567"),
            ("1234567", [0], "1234567"),
            ("1234567", [], "1234567"),
            ("0", [3], "0"),
        ],
    )
    def test_grouping(self, digits, sizes, expected):
        assert group_digits(digits, sizes, ",") == expected

    def test_multi_character_separator(self):
        assert group_digits("1234567", [3], " ") == "1 234 567"


class TestNativeDigits:
    """Tests for to_native_digits."""

    def test_ascii_unchanged(self):
        assert to_native_digits("12.5", "0123456789") == "12.5"

    def test_arabic_indic(self):
        table = get_format_table("ar-EG")
        assert to_native_digits("2025", table.native_digits) == "٢٠٢٥"


# =============================================================================
# Extraction
# =============================================================================


class TestExtractFixed:
    """Tests for extract_fixed."""

    def test_pads_fraction(self):
        assert extract_fixed(Rational(12345, 100, reduce=False), 2, INVARIANT) == "123.45"
        assert extract_fixed(Rational.unreduced(5, 1000), 3, INVARIANT) == "0.005"

    def test_integer_value(self):
        assert extract_fixed(Rational(7), 3, INVARIANT) == "7.000"

    def test_no_separator_without_digits(self):
        assert extract_fixed(Rational(1234), 0, INVARIANT) == "1234"

    def test_grouped(self):
        value = Rational.unreduced(123456789, 100)
        assert extract_fixed(value, 2, INVARIANT, grouped=True) == "1,234,567.89"

    def test_locale_separators(self):
        value = Rational.unreduced(123456789, 100)
        assert extract_fixed(value, 2, get_format_table("de-DE"), grouped=True) == "1.234.567,89"

    def test_native_digits(self):
        value = Rational.unreduced(1250, 100)
        assert extract_fixed(value, 2, get_format_table("ar-EG")) == "١٢٫٥٠"

    def test_unrounded_value_rejected(self):
        with pytest.raises(InvalidArgumentError, match="round the value first"):
            extract_fixed(Rational(1, 3), 2, INVARIANT)

    def test_negative_value_rejected(self):
        with pytest.raises(InvalidArgumentError):
            extract_fixed(Rational.unreduced(-5, 10), 1, INVARIANT)

    def test_negative_digits_rejected(self):
        with pytest.raises(InvalidArgumentError):
            extract_fixed(Rational(5), -1, INVARIANT)

    def test_special_rejected(self):
        with pytest.raises(NonFiniteValueError):
            extract_fixed(Rational.nan(), 2, INVARIANT)

    def test_integer_part_beyond_str_digit_limit(self):
        value = Rational(10**5000 + 7)
        assert extract_fixed(value, 1, INVARIANT) == "1" + "0" * 4999 + "7.0"

    def test_fraction_beyond_str_digit_limit(self):
        value = Rational.unreduced(1, 10**5000)
        assert extract_fixed(value, 5000, INVARIANT) == "0." + "0" * 4999 + "1"

    def test_grouped_long_integer(self):
        text = extract_fixed(Rational(10**4500), 0, INVARIANT, grouped=True)
        assert text.startswith("1,000,000,")
        assert text.replace(",", "") == "1" + "0" * 4500


class TestExtractSignificant:
    """Tests for extract_significant."""

    def test_trailing_zeros_dropped(self):
        assert extract_significant(Rational.unreduced(12500, 1000), 3, INVARIANT) == "12.5"

    def test_whole_value_has_no_separator(self):
        assert extract_significant(Rational.unreduced(12000, 1000), 3, INVARIANT) == "12"
        assert extract_significant(Rational(12), 3, INVARIANT) == "12"

    def test_leading_fraction_zeros_kept(self):
        assert extract_significant(Rational.unreduced(1005, 10000), 4, INVARIANT) == "0.1005"
        assert extract_significant(Rational.unreduced(5, 10000), 4, INVARIANT) == "0.0005"

    def test_grouped(self):
        table = replace(INVARIANT, number_group_sizes=(3, 2))
        value = Rational.unreduced(12345678, 10)
        assert extract_significant(value, 1, table, grouped=True) == "12,34,567.8"

    def test_unrounded_value_rejected(self):
        with pytest.raises(InvalidArgumentError):
            extract_significant(Rational(2, 3), 4, INVARIANT)

    def test_long_fraction(self):
        value = Rational.unreduced(5 * 10**4999, 10**5000)
        assert extract_significant(value, 5000, INVARIANT) == "0.5"
        value = Rational.unreduced(10**5000 - 1, 10**5000)
        assert extract_significant(value, 5000, INVARIANT) == "0." + "9" * 5000
