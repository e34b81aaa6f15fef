"""Exact decimal rounding of rational values.

Rounding never passes through floating point: the value is scaled by
``10 ** decimals`` and the resulting fraction is divided with one of five
midpoint policies on plain Python integers.

Usage:
    from decimalnotation.rounding import MidpointRounding, round_rational

    round_rational(Rational(2, 3), 2)                       # Rational(67, 100)
    round_rational(Rational(5, 2), 0, MidpointRounding.TO_EVEN)   # Rational(2, 1)
    round_rational(Rational(1, 8), 2, reduce=False)         # Rational(12, 100)
"""

from __future__ import annotations

from enum import Enum

from decimalnotation.errors import InvalidArgumentError, NonFiniteValueError
from decimalnotation.powers import PowersOfTen, get_powers_of_ten
from decimalnotation.rational import Rational, RationalInput


class MidpointRounding(str, Enum):
    """Strategy for choosing between the two nearest representable results."""

    AWAY_FROM_ZERO = "away_from_zero"
    TO_EVEN = "to_even"
    TO_ZERO = "to_zero"
    TO_POSITIVE_INFINITY = "to_positive_infinity"
    TO_NEGATIVE_INFINITY = "to_negative_infinity"

    @classmethod
    def from_string(cls, value: str) -> "MidpointRounding":
        """Parse a policy name, accepting a few common aliases.

        Raises:
            InvalidArgumentError: If the name is unknown.
        """
        aliases = {
            "half_up": cls.AWAY_FROM_ZERO,
            "away": cls.AWAY_FROM_ZERO,
            "half_even": cls.TO_EVEN,
            "even": cls.TO_EVEN,
            "bankers": cls.TO_EVEN,
            "down": cls.TO_ZERO,
            "truncate": cls.TO_ZERO,
            "ceiling": cls.TO_POSITIVE_INFINITY,
            "ceil": cls.TO_POSITIVE_INFINITY,
            "floor": cls.TO_NEGATIVE_INFINITY,
        }
        key = value.strip().lower().replace("-", "_")
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                "mode", f"unknown rounding mode {value!r} (expected one of {choices})"
            ) from None


def _truncating_divmod(numerator: int, denominator: int) -> tuple[int, int]:
    """Divide rounding toward zero; the remainder takes the numerator's sign."""
    quotient, remainder = divmod(abs(numerator), abs(denominator))
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    if numerator < 0:
        remainder = -remainder
    return quotient, remainder


def _round_away_from_zero(numerator: int, denominator: int) -> int:
    half = denominator >> 1
    if numerator >= 0:
        return _truncating_divmod(numerator + half, denominator)[0]
    return _truncating_divmod(numerator - half, denominator)[0]


def _round_to_even(numerator: int, denominator: int) -> int:
    quotient, remainder = _truncating_divmod(numerator, denominator)
    if remainder == 0:
        return quotient

    midpoint = abs(remainder) << 1
    if midpoint > denominator or (midpoint == denominator and quotient % 2 != 0):
        return quotient + 1 if numerator > 0 else quotient - 1
    return quotient


def _round_to_positive_infinity(numerator: int, denominator: int) -> int:
    quotient, remainder = _truncating_divmod(numerator, denominator)
    return quotient + 1 if remainder > 0 else quotient


def _round_to_negative_infinity(numerator: int, denominator: int) -> int:
    quotient, remainder = _truncating_divmod(numerator, denominator)
    return quotient - 1 if remainder < 0 else quotient


_POLICIES = {
    MidpointRounding.AWAY_FROM_ZERO: _round_away_from_zero,
    MidpointRounding.TO_EVEN: _round_to_even,
    MidpointRounding.TO_ZERO: lambda n, d: _truncating_divmod(n, d)[0],
    MidpointRounding.TO_POSITIVE_INFINITY: _round_to_positive_infinity,
    MidpointRounding.TO_NEGATIVE_INFINITY: _round_to_negative_infinity,
}


def round_to_integer(
    numerator: int,
    denominator: int,
    mode: MidpointRounding = MidpointRounding.TO_EVEN,
) -> int:
    """Round ``numerator / denominator`` to an integer.

    Args:
        numerator: Dividend.
        denominator: Divisor. A negative divisor is allowed.
        mode: Midpoint policy.

    Returns:
        The rounded quotient.

    Raises:
        NonFiniteValueError: If the denominator is zero, i.e. the pair encodes
            NaN or an infinity.
    """
    if denominator == 0:
        raise NonFiniteValueError()

    if numerator == 0 or denominator == 1:
        return numerator

    if denominator < 0:
        numerator, denominator = -numerator, -denominator

    return _POLICIES[MidpointRounding(mode)](numerator, denominator)


def round_rational(
    value: RationalInput,
    decimals: int,
    mode: MidpointRounding = MidpointRounding.TO_EVEN,
    *,
    reduce: bool = True,
    powers: PowersOfTen | None = None,
) -> Rational:
    """Round a rational to a number of decimal places.

    Args:
        value: Value to round.
        decimals: Number of fractional decimal digits to keep.
        mode: Midpoint policy.
        reduce: Reduce the result to lowest terms. With ``reduce=False`` the
            denominator of a rounded result is exactly ``10 ** decimals``.
        powers: Powers-of-ten cache (defaults to the shared one).

    Returns:
        The rounded value. Zero, integral and special values are returned
        unchanged (reduced when ``reduce`` is set).

    Raises:
        InvalidArgumentError: If ``decimals`` is negative.
    """
    if decimals < 0:
        raise InvalidArgumentError("decimals", f"must be non-negative, got {decimals}")

    value = Rational.from_value(value)
    if value.numerator == 0 or value.denominator in (0, 1):
        return value.reduced() if reduce else value

    factor = (powers or get_powers_of_ten()).get(decimals)
    rounded = round_to_integer(value.numerator * factor, value.denominator, mode)
    return Rational(rounded, factor, reduce=reduce)


def round_to_int(
    value: RationalInput,
    mode: MidpointRounding = MidpointRounding.TO_EVEN,
) -> int:
    """Round a rational to the nearest integer.

    Raises:
        NonFiniteValueError: For NaN and the infinities.
    """
    value = Rational.from_value(value)
    return round_to_integer(value.numerator, value.denominator, mode)
