"""Minimal rational value consumed by the formatter.

:class:`Rational` is deliberately small. It models exactly what the rounding
engine and the notation assembler need from a fraction: numerator,
denominator, sign, the special values, and scaling by small integers.
General arithmetic, parsing and ordering belong to ``fractions.Fraction``;
use :meth:`Rational.from_value` / :meth:`Rational.to_fraction` to move
between the two.

Specials are a tagged kind. They also keep the zero-denominator encoding
(``0/0`` NaN, ``1/0`` +inf, ``-1/0`` -inf) so code working on raw
``(numerator, denominator)`` pairs can still detect them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Union

from decimalnotation.errors import InvalidArgumentError, NonFiniteValueError
from decimalnotation.powers import integer_digits


class RationalKind(str, Enum):
    """Tag distinguishing finite values from the special values."""

    FINITE = "finite"
    POSITIVE_INFINITY = "positive_infinity"
    NEGATIVE_INFINITY = "negative_infinity"
    NAN = "nan"


@dataclass(frozen=True, init=False)
class Rational:
    """Exact fraction with an integer numerator and denominator.

    A finite value always has a positive denominator; the numerator carries
    the sign. Reduction to lowest terms is the default but can be skipped,
    which the formatter relies on to keep power-of-ten denominators intact.

    Example:
        >>> Rational(6, -4)
        Rational(-3, 2)
        >>> Rational.unreduced(150, 100).denominator
        100
        >>> f"{Rational(2, 3):P2}"
        '66.67 %'
    """

    numerator: int
    denominator: int
    kind: RationalKind

    def __init__(self, numerator: int, denominator: int = 1, *, reduce: bool = True) -> None:
        if not isinstance(numerator, int) or not isinstance(denominator, int):
            raise InvalidArgumentError(
                "numerator", "numerator and denominator must be integers"
            )
        if denominator == 0:
            raise InvalidArgumentError(
                "denominator", "must not be zero; use Rational.nan() or the infinities"
            )
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        if reduce:
            divisor = math.gcd(numerator, denominator)
            if divisor > 1:
                numerator //= divisor
                denominator //= divisor
        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)
        object.__setattr__(self, "kind", RationalKind.FINITE)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def unreduced(cls, numerator: int, denominator: int) -> "Rational":
        """Create a finite value without reducing it to lowest terms."""
        return cls(numerator, denominator, reduce=False)

    @classmethod
    def _special(cls, kind: RationalKind, numerator: int) -> "Rational":
        value = object.__new__(cls)
        object.__setattr__(value, "numerator", numerator)
        object.__setattr__(value, "denominator", 0)
        object.__setattr__(value, "kind", kind)
        return value

    @classmethod
    def nan(cls) -> "Rational":
        """Not-a-number."""
        return cls._special(RationalKind.NAN, 0)

    @classmethod
    def positive_infinity(cls) -> "Rational":
        """Positive infinity."""
        return cls._special(RationalKind.POSITIVE_INFINITY, 1)

    @classmethod
    def negative_infinity(cls) -> "Rational":
        """Negative infinity."""
        return cls._special(RationalKind.NEGATIVE_INFINITY, -1)

    @classmethod
    def from_value(cls, value: "RationalInput") -> "Rational":
        """Coerce a number into a :class:`Rational`.

        Floats and decimals are converted exactly; their NaN and infinities
        map to the special kinds.

        Raises:
            InvalidArgumentError: If the value is not a supported number type.
        """
        if isinstance(value, Rational):
            return value
        if isinstance(value, bool):
            return cls(int(value))
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, Fraction):
            return cls(value.numerator, value.denominator, reduce=False)
        if isinstance(value, Decimal):
            if value.is_nan():
                return cls.nan()
            if value.is_infinite():
                return cls.negative_infinity() if value.is_signed() else cls.positive_infinity()
            numerator, denominator = value.as_integer_ratio()
            return cls(numerator, denominator, reduce=False)
        if isinstance(value, float):
            if math.isnan(value):
                return cls.nan()
            if math.isinf(value):
                return cls.positive_infinity() if value > 0 else cls.negative_infinity()
            numerator, denominator = value.as_integer_ratio()
            return cls(numerator, denominator, reduce=False)
        raise InvalidArgumentError(
            "value", f"cannot convert {type(value).__name__} to Rational"
        )

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def is_nan(self) -> bool:
        return self.kind is RationalKind.NAN

    @property
    def is_positive_infinity(self) -> bool:
        return self.kind is RationalKind.POSITIVE_INFINITY

    @property
    def is_negative_infinity(self) -> bool:
        return self.kind is RationalKind.NEGATIVE_INFINITY

    @property
    def is_finite(self) -> bool:
        return self.kind is RationalKind.FINITE

    @property
    def is_zero(self) -> bool:
        return self.is_finite and self.numerator == 0

    @property
    def is_integer(self) -> bool:
        """True for finite values whose denominator divides the numerator."""
        return self.is_finite and self.numerator % self.denominator == 0

    @property
    def sign(self) -> int:
        """-1, 0 or 1. NaN has sign 0."""
        return (self.numerator > 0) - (self.numerator < 0)

    # ------------------------------------------------------------------
    # The few operations the formatter consumes
    # ------------------------------------------------------------------

    def __abs__(self) -> "Rational":
        if self.is_finite:
            return Rational.unreduced(abs(self.numerator), self.denominator)
        if self.is_negative_infinity:
            return Rational.positive_infinity()
        return self

    def __neg__(self) -> "Rational":
        if self.is_finite:
            return Rational.unreduced(-self.numerator, self.denominator)
        if self.is_positive_infinity:
            return Rational.negative_infinity()
        if self.is_negative_infinity:
            return Rational.positive_infinity()
        return self

    def scale(self, factor: int, *, reduce: bool = False) -> "Rational":
        """Multiply by an integer factor."""
        if not self.is_finite:
            if factor == 0 or self.is_nan:
                return Rational.nan()
            return self if factor > 0 else -self
        return Rational(self.numerator * factor, self.denominator, reduce=reduce)

    def divide(self, divisor: int, *, reduce: bool = False) -> "Rational":
        """Divide by a non-zero integer divisor."""
        if divisor == 0:
            raise InvalidArgumentError("divisor", "must not be zero")
        if not self.is_finite:
            return self if divisor > 0 or self.is_nan else -self
        return Rational(self.numerator, self.denominator * divisor, reduce=reduce)

    def reduced(self) -> "Rational":
        """Return the value in lowest terms."""
        if not self.is_finite:
            return self
        return Rational(self.numerator, self.denominator)

    def to_fraction(self) -> Fraction:
        """Convert to ``fractions.Fraction``.

        Raises:
            NonFiniteValueError: For NaN and the infinities.
        """
        if not self.is_finite:
            raise NonFiniteValueError(f"{self} has no Fraction representation")
        return Fraction(self.numerator, self.denominator)

    def __float__(self) -> float:
        """Lossy conversion to the nearest double."""
        if self.is_nan:
            return math.nan
        if self.is_positive_infinity:
            return math.inf
        if self.is_negative_infinity:
            return -math.inf
        return self.numerator / self.denominator

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if self.is_nan:
            return "NaN"
        if self.is_positive_infinity:
            return "Infinity"
        if self.is_negative_infinity:
            return "-Infinity"
        if self.denominator == 1:
            return _signed_digits(self.numerator)
        return f"{_signed_digits(self.numerator)}/{integer_digits(self.denominator)}"

    def __repr__(self) -> str:
        if not self.is_finite:
            return f"Rational.{self.kind.value}()"
        return f"Rational({_signed_digits(self.numerator)}, {integer_digits(self.denominator)})"

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)
        from decimalnotation.formatter import format_decimal

        return format_decimal(self, format_spec)


def _signed_digits(value: int) -> str:
    return f"-{integer_digits(-value)}" if value < 0 else integer_digits(value)


RationalInput = Union[Rational, Fraction, int, float, Decimal]


def coerce(value: Any) -> Rational:
    """Module-level alias of :meth:`Rational.from_value`."""
    return Rational.from_value(value)
