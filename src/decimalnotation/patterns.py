"""Sign and symbol layout patterns.

Every pattern family is an ``IntEnum`` whose values are the conventional
pattern indices, so a locale table can store plain integers. Each member
also carries its layout template:

- ``n`` is replaced by the formatted number
- ``$`` and ``%`` are replaced by the currency or percent symbol
- ``-`` is replaced by the negative sign
- any other character is copied as is

Usage:
    from decimalnotation.patterns import CurrencyNegativePattern, render_layout

    pattern = CurrencyNegativePattern.from_index(8)
    render_layout(pattern.template, "1,234.57", symbol="€")   # "-1,234.57 €"
"""

from __future__ import annotations

import re
from enum import IntEnum

from decimalnotation.errors import PatternOutOfRangeError

NUMBER_PLACEHOLDER = "n"
SIGN_PLACEHOLDER = "-"
SYMBOL_PLACEHOLDERS = frozenset("$%")


class LayoutPattern(IntEnum):
    """Base class for pattern families; members are ``(index, template)``."""

    def __new__(cls, index: int, template: str) -> "LayoutPattern":
        member = int.__new__(cls, index)
        member._value_ = index
        member.template = template
        return member

    @classmethod
    def kind(cls) -> str:
        """Snake-case family name used in error messages."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()

    @classmethod
    def from_index(cls, index: int, maximum: int | None = None) -> "LayoutPattern":
        """Look up a member by index.

        Args:
            index: Pattern index as stored in a locale table.
            maximum: Optional lower cap on the accepted range.

        Raises:
            PatternOutOfRangeError: If the index is outside ``0..maximum``.
        """
        upper = len(cls) - 1 if maximum is None else min(maximum, len(cls) - 1)
        if not 0 <= index <= upper:
            raise PatternOutOfRangeError(cls.kind(), index, upper)
        return cls(index)


class NumberNegativePattern(LayoutPattern):
    """Negative layouts for the grouped number style."""

    PARENTHESES = 0, "(n)"
    LEADING_SIGN = 1, "-n"
    LEADING_SIGN_SPACE = 2, "- n"
    TRAILING_SIGN = 3, "n-"
    TRAILING_SIGN_SPACE = 4, "n -"


class PercentPositivePattern(LayoutPattern):
    NUMBER_SPACE_SYMBOL = 0, "n %"
    NUMBER_SYMBOL = 1, "n%"
    SYMBOL_NUMBER = 2, "%n"
    SYMBOL_SPACE_NUMBER = 3, "% n"


class PercentNegativePattern(LayoutPattern):
    SIGN_NUMBER_SPACE_SYMBOL = 0, "-n %"
    SIGN_NUMBER_SYMBOL = 1, "-n%"
    SIGN_SYMBOL_NUMBER = 2, "-%n"
    SYMBOL_SIGN_NUMBER = 3, "%-n"
    SYMBOL_NUMBER_SIGN = 4, "%n-"
    NUMBER_SIGN_SYMBOL = 5, "n-%"
    NUMBER_SYMBOL_SIGN = 6, "n%-"
    SIGN_SYMBOL_SPACE_NUMBER = 7, "-% n"
    NUMBER_SPACE_SYMBOL_SIGN = 8, "n %-"
    SYMBOL_SPACE_NUMBER_SIGN = 9, "% n-"
    SYMBOL_SPACE_SIGN_NUMBER = 10, "% -n"
    NUMBER_SIGN_SPACE_SYMBOL = 11, "n- %"


class CurrencyPositivePattern(LayoutPattern):
    SYMBOL_NUMBER = 0, "$n"
    NUMBER_SYMBOL = 1, "n$"
    SYMBOL_SPACE_NUMBER = 2, "$ n"
    NUMBER_SPACE_SYMBOL = 3, "n $"


class CurrencyNegativePattern(LayoutPattern):
    """Negative currency layouts.

    Index 16 (``$- n``) only exists in the current revision; the legacy
    revision caps the family at 15.
    """

    PARENTHESES_SYMBOL_NUMBER = 0, "($n)"
    SIGN_SYMBOL_NUMBER = 1, "-$n"
    SYMBOL_SIGN_NUMBER = 2, "$-n"
    SYMBOL_NUMBER_SIGN = 3, "$n-"
    PARENTHESES_NUMBER_SYMBOL = 4, "(n$)"
    SIGN_NUMBER_SYMBOL = 5, "-n$"
    NUMBER_SIGN_SYMBOL = 6, "n-$"
    NUMBER_SYMBOL_SIGN = 7, "n$-"
    SIGN_NUMBER_SPACE_SYMBOL = 8, "-n $"
    SIGN_SYMBOL_SPACE_NUMBER = 9, "-$ n"
    NUMBER_SPACE_SYMBOL_SIGN = 10, "n $-"
    SYMBOL_SPACE_NUMBER_SIGN = 11, "$ n-"
    SYMBOL_SPACE_SIGN_NUMBER = 12, "$ -n"
    NUMBER_SIGN_SPACE_SYMBOL = 13, "n- $"
    PARENTHESES_SYMBOL_SPACE_NUMBER = 14, "($ n)"
    PARENTHESES_NUMBER_SPACE_SYMBOL = 15, "(n $)"
    SYMBOL_SIGN_SPACE_NUMBER = 16, "$- n"


LEGACY_CURRENCY_NEGATIVE_MAXIMUM = 15


def render_layout(
    template: str,
    number: str,
    symbol: str = "",
    negative_sign: str = "-",
) -> str:
    """Substitute a layout template.

    Args:
        template: Template such as ``"-$ n"``.
        number: Already formatted digits.
        symbol: Currency or percent symbol.
        negative_sign: Locale negative sign.

    Returns:
        The laid out text.
    """
    parts = []
    for char in template:
        if char == NUMBER_PLACEHOLDER:
            parts.append(number)
        elif char in SYMBOL_PLACEHOLDERS:
            parts.append(symbol)
        elif char == SIGN_PLACEHOLDER:
            parts.append(negative_sign)
        else:
            parts.append(char)
    return "".join(parts)
