"""Exact digit extraction from rounded rationals.

The extractor only accepts *rounded intermediates*: non-negative values
whose denominator is ``1`` or exactly ``10 ** digits``. Anything else means
a caller skipped the rounding step, which is reported as an
:class:`InvalidArgumentError` rather than producing wrong digits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from decimalnotation.errors import InvalidArgumentError, NonFiniteValueError
from decimalnotation.powers import PowersOfTen, get_powers_of_ten, integer_digits
from decimalnotation.rational import Rational

if TYPE_CHECKING:
    from decimalnotation.numberformat import NumberFormatTable

ASCII_DIGITS = "0123456789"


def group_digits(digits: str, sizes: Sequence[int], separator: str) -> str:
    """Insert group separators into a run of integer digits.

    Groups are taken from the right. The last size repeats, a size of ``0``
    leaves the remaining digits ungrouped and an empty ``sizes`` disables
    grouping.

    Example:
        >>> group_digits("1234567", [3], ",")
        '1,234,567'
        >>> group_digits("1234567", [3, 2], ",")
        '12,34,567'
        >>> group_digits("1234567", [3, 0], ",")
        '1234,567'
    """
    if not sizes:
        return digits

    groups: list[str] = []
    end = len(digits)
    index = 0
    size = sizes[0]
    while 0 < size < end:
        groups.append(digits[end - size:end])
        end -= size
        if index < len(sizes) - 1:
            index += 1
            size = sizes[index]
    groups.append(digits[:end])
    return separator.join(reversed(groups))


def to_native_digits(text: str, native_digits: Sequence[str]) -> str:
    """Replace ASCII digits with a locale's native digit glyphs."""
    if "".join(native_digits) == ASCII_DIGITS:
        return text
    mapping = {ord(ascii_digit): glyph for ascii_digit, glyph in zip(ASCII_DIGITS, native_digits)}
    return text.translate(mapping)


def _split(
    value: Rational,
    digits: int,
    powers: PowersOfTen | None,
) -> tuple[int, int]:
    """Validate a rounded intermediate and split it into quotient and remainder."""
    if not value.is_finite:
        raise NonFiniteValueError(f"cannot extract digits from {value}")
    if digits < 0:
        raise InvalidArgumentError("digits", f"must be non-negative, got {digits}")
    if value.numerator < 0:
        raise InvalidArgumentError("value", f"expected a non-negative value, got {value}")

    denominator = value.denominator
    if denominator != 1 and denominator != (powers or get_powers_of_ten()).get(digits):
        raise InvalidArgumentError(
            "value",
            f"denominator {denominator} is neither 1 nor 10**{digits}; round the value first",
        )
    return divmod(value.numerator, denominator)


def _integer_part(
    quotient: int,
    table: NumberFormatTable,
    grouped: bool,
    powers: PowersOfTen | None,
) -> str:
    text = integer_digits(quotient, powers=powers)
    if grouped:
        text = group_digits(text, table.number_group_sizes, table.number_group_separator)
    return text


def extract_fixed(
    value: Rational,
    digits: int,
    table: NumberFormatTable,
    grouped: bool = False,
    *,
    powers: PowersOfTen | None = None,
) -> str:
    """Render exactly ``digits`` fractional digits, zero padded.

    Args:
        value: Non-negative value with denominator ``1`` or ``10 ** digits``.
        digits: Number of fractional digits to write.
        table: Supplies separators, group sizes and digit glyphs.
        grouped: Group the integer part.
        powers: Powers-of-ten cache used for the precondition check.

    Returns:
        The digit text. No decimal separator is written when ``digits`` is 0.

    Raises:
        InvalidArgumentError: If ``value`` is not a rounded intermediate.
        NonFiniteValueError: If ``value`` is NaN or an infinity.
    """
    quotient, remainder = _split(value, digits, powers)
    text = _integer_part(quotient, table, grouped, powers)
    if digits > 0:
        fraction = integer_digits(remainder, digits, powers)
        text = f"{text}{table.number_decimal_separator}{fraction}"
    return to_native_digits(text, table.native_digits)


def extract_significant(
    value: Rational,
    max_digits: int,
    table: NumberFormatTable,
    grouped: bool = False,
    *,
    powers: PowersOfTen | None = None,
) -> str:
    """Render at most ``max_digits`` fractional digits, dropping trailing zeros.

    The decimal separator is omitted entirely for whole values.

    Raises:
        InvalidArgumentError: If ``value`` is not a rounded intermediate.
        NonFiniteValueError: If ``value`` is NaN or an infinity.
    """
    quotient, remainder = _split(value, max_digits, powers)
    text = _integer_part(quotient, table, grouped, powers)
    if remainder:
        fraction = integer_digits(remainder, max_digits, powers).rstrip("0")
        text = f"{text}{table.number_decimal_separator}{fraction}"
    return to_native_digits(text, table.native_digits)
