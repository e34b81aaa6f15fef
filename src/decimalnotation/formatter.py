"""Decimal notation formatter for rational values.

Renders an exact rational in one of the standard numeric styles without
passing through floating point:

==========  ==========================================  =====================
Spec        Style                                       Example
==========  ==========================================  =====================
``G``/``g`` general (fixed or scientific, shorter)      400/3, G2 -> 1.3E+02
``F``/``f`` fixed-point                                 12345/10, F2 -> 1234.50
``N``/``n`` grouped number                              1234567/1000, N2 -> 1,234.57
``E``/``e`` scientific                                  1234567/1000, E2 -> 1.23E+003
``P``/``p`` percent                                     2/3, P2 -> 66.67 %
``C``/``c`` currency                                    1234567/1000, C2 -> ¤1,234.57
``S``/``s`` significant digits after the radix          400/3, S2 -> 133.33
``R``/``r`` round-trip (lossy, via float)               1234567/1000, R -> 1234.567
==========  ==========================================  =====================

Anything else is treated as a Python float format spec (``".3f"``,
``",.2%"``) and rendered through ``float``, which may lose precision.

Usage:
    from decimalnotation import Rational, format_decimal

    format_decimal(Rational(2, 3), "P2")              # "66.67 %"
    format_decimal(Rational(-1234567, 1000), "C", "de-DE")   # "-1.234,57 €"
    f"{Rational(1, 3):F4}"                            # "0.3333"
"""

from __future__ import annotations

import math
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from decimalnotation.config import FormatterSettings, get_settings
from decimalnotation.digits import extract_fixed, extract_significant, to_native_digits
from decimalnotation.errors import FormatSpecError, NonFiniteValueError
from decimalnotation.exponent import locate_exponent
from decimalnotation.logging import get_logger
from decimalnotation.numberformat import NumberFormatTable, get_format_table
from decimalnotation.patterns import (
    CurrencyNegativePattern,
    CurrencyPositivePattern,
    NumberNegativePattern,
    PercentNegativePattern,
    PercentPositivePattern,
    render_layout,
)
from decimalnotation.powers import PowersOfTen, get_powers_of_ten, integer_digits
from decimalnotation.rational import Rational, RationalInput
from decimalnotation.rounding import MidpointRounding, round_rational, round_to_integer

logger = get_logger(__name__)

ZERO = Rational(0)

_PRECISION = re.compile(r"[0-9]+")

# Longer precisions make the format string a custom one.
MAX_PRECISION = 999_999_999


# =============================================================================
# Format Requests
# =============================================================================


class NotationStyle(str, Enum):
    """Standard numeric styles, keyed by their upper-case letter."""

    GENERAL = "G"
    FIXED = "F"
    NUMBER = "N"
    SCIENTIFIC = "E"
    PERCENT = "P"
    CURRENCY = "C"
    ROUND_TRIP = "R"
    SIGNIFICANT = "S"


@dataclass(frozen=True)
class FormatSpec:
    """A parsed format request.

    Attributes:
        text: The spec as given.
        style: The style, or None for a custom spec.
        precision: The explicit precision, or None for the style default.
        lowercase: Whether the style letter was lower case.
    """

    text: str
    style: NotationStyle | None
    precision: int | None = None
    lowercase: bool = False

    @property
    def is_custom(self) -> bool:
        return self.style is None

    @property
    def exponent_marker(self) -> str:
        return "e" if self.lowercase else "E"

    @classmethod
    def parse(cls, spec: str | None) -> "FormatSpec":
        """Parse a style letter followed by an optional ASCII precision.

        An empty or None spec means ``G``. Anything that is not a known
        letter followed by digits, or whose precision exceeds
        ``MAX_PRECISION``, is returned as a custom spec.

        Example:
            >>> FormatSpec.parse("n2")
            FormatSpec(text='n2', style=<NotationStyle.NUMBER: 'N'>, precision=2, lowercase=True)
            >>> FormatSpec.parse(".3f").is_custom
            True
        """
        if not spec:
            return cls("G", NotationStyle.GENERAL)

        letter, suffix = spec[0], spec[1:]
        try:
            style = NotationStyle(letter.upper())
        except ValueError:
            return cls(spec, None)

        if not suffix:
            return cls(spec, style, None, letter.islower())
        if _PRECISION.fullmatch(suffix):
            digits = suffix.lstrip("0") or "0"
            if len(digits) <= len(str(MAX_PRECISION)):
                return cls(spec, style, int(digits), letter.islower())
        return cls(spec, None)


def _carry(mantissa: Rational, exponent: int) -> tuple[Rational, int]:
    """Renormalise a mantissa that rounding carried up to exactly 10."""
    if mantissa.numerator >= 10 * mantissa.denominator:
        return Rational(mantissa.numerator // 10, mantissa.denominator, reduce=False), exponent + 1
    return mantissa, exponent


# =============================================================================
# Formatter
# =============================================================================


class DecimalNotationFormatter:
    """Formats rationals in the standard numeric styles.

    The formatter holds no per-call state and can be shared between threads.
    Settings not passed explicitly are read from :func:`get_settings` on
    every call, so :func:`reset_settings` takes effect immediately.

    Example:
        >>> formatter = DecimalNotationFormatter()
        >>> formatter.format("N2", Rational(1234567, 1000))
        '1,234.57'
        >>> formatter.format("E2", Rational(1234567, 1000), "de-DE")
        '1,23E+003'
    """

    _instance: "DecimalNotationFormatter | None" = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        settings: FormatterSettings | None = None,
        midpoint_rounding: MidpointRounding | str | None = None,
        *,
        powers: PowersOfTen | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            settings: Fixed settings (defaults to the process-wide settings).
            midpoint_rounding: Rounding policy overriding the settings.
            powers: Powers-of-ten cache (defaults to the shared one).
        """
        if isinstance(midpoint_rounding, str) and not isinstance(midpoint_rounding, MidpointRounding):
            midpoint_rounding = MidpointRounding.from_string(midpoint_rounding)
        self._settings = settings
        self._midpoint_rounding = midpoint_rounding
        self._powers = powers or get_powers_of_ten()
        self._styles: dict[NotationStyle, Callable[[Rational, FormatSpec, NumberFormatTable], str]] = {
            NotationStyle.GENERAL: self._format_general,
            NotationStyle.FIXED: self._format_fixed,
            NotationStyle.NUMBER: self._format_number,
            NotationStyle.SCIENTIFIC: self._format_scientific,
            NotationStyle.PERCENT: self._format_percent,
            NotationStyle.CURRENCY: self._format_currency,
            NotationStyle.SIGNIFICANT: self._format_significant,
        }

    @classmethod
    def instance(cls) -> "DecimalNotationFormatter":
        """Get the shared formatter, creating it on first use."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @property
    def settings(self) -> FormatterSettings:
        return self._settings or get_settings()

    @property
    def midpoint_rounding(self) -> MidpointRounding:
        return self._midpoint_rounding or self.settings.rounding_mode

    def resolve_table(self, table: str | NumberFormatTable | None = None) -> NumberFormatTable:
        """Resolve a locale tag or table, falling back to the default locale."""
        settings = self.settings
        locale = settings.default_locale if table is None else table
        return get_format_table(locale, strict=settings.strict_locale)

    def format(
        self,
        spec: str | None,
        value: RationalInput,
        table: str | NumberFormatTable | None = None,
    ) -> str:
        """Format a value.

        Args:
            spec: Style letter plus optional precision, or a Python float
                format spec. Empty or None means ``G``.
            value: Value to format. Floats and decimals are converted exactly.
            table: Locale tag or table (defaults to ``locale.default``).

        Returns:
            The formatted text.

        Raises:
            PatternOutOfRangeError: If the table selects an unsupported layout.
            FormatSpecError: If a custom spec is rejected by float formatting.
            NonFiniteValueError: If a custom spec is given a value beyond the
                float range.
            UnknownLocaleError: On an unknown tag with ``locale.strict`` set.
        """
        value = Rational.from_value(value)
        table = self.resolve_table(table)

        if value.is_nan:
            return table.nan_symbol
        if value.is_positive_infinity:
            return table.positive_infinity_symbol
        if value.is_negative_infinity:
            return table.negative_infinity_symbol

        request = FormatSpec.parse(spec)
        if request.is_custom or request.style is NotationStyle.ROUND_TRIP:
            return self._format_float(value, request, table)
        return self._styles[request.style](value, request, table)

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    def _round(self, value: Rational, decimals: int) -> Rational:
        return round_rational(
            value, decimals, self.midpoint_rounding, reduce=False, powers=self._powers
        )

    def _split_sign(self, value: Rational) -> tuple[bool, Rational]:
        return value.numerator < 0, abs(value)

    def _locate(self, magnitude: Rational) -> tuple[int, int]:
        return locate_exponent(magnitude.numerator, magnitude.denominator, self._powers)

    def _scientific_exponent(self, exponent: int, marker: str, table: NumberFormatTable) -> str:
        """``E+003`` form: explicit sign and at least three digits."""
        sign = table.positive_sign if exponent >= 0 else table.negative_sign
        digits = to_native_digits(f"{abs(exponent):03d}", table.native_digits)
        return f"{marker}{sign}{digits}"

    def _general_exponent(self, exponent: int, marker: str, table: NumberFormatTable) -> str:
        """``E+02`` form: two digits, three from 100, unpadded from 1000."""
        magnitude = abs(exponent)
        if exponent < 0:
            sign = table.negative_sign
            digits = str(magnitude) if magnitude >= 1000 else f"{magnitude:02d}"
        else:
            sign = table.positive_sign
            if magnitude < 100:
                digits = f"{magnitude:02d}"
            elif magnitude < 1000:
                digits = f"{magnitude:03d}"
            else:
                digits = str(magnitude)
        return f"{marker}{sign}{to_native_digits(digits, table.native_digits)}"

    # -------------------------------------------------------------------------
    # Fixed, number, percent and currency
    # -------------------------------------------------------------------------

    def _format_fixed(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        digits = table.number_decimal_digits if request.precision is None else request.precision
        rounded = self._round(value, digits)
        if rounded.is_zero:
            return extract_fixed(ZERO, digits, table)

        negative, magnitude = self._split_sign(rounded)
        text = extract_fixed(magnitude, digits, table, powers=self._powers)
        return f"{table.negative_sign}{text}" if negative else text

    def _format_number(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        digits = table.number_decimal_digits if request.precision is None else request.precision
        rounded = self._round(value, digits)
        if rounded.is_zero:
            return extract_fixed(ZERO, digits, table, grouped=True)

        negative, magnitude = self._split_sign(rounded)
        text = extract_fixed(magnitude, digits, table, grouped=True, powers=self._powers)
        if not negative:
            return text
        pattern = NumberNegativePattern.from_index(table.number_negative_pattern)
        return render_layout(pattern.template, text, negative_sign=table.negative_sign)

    def _format_percent(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        derived = table.percent_table()
        digits = derived.number_decimal_digits if request.precision is None else request.precision
        rounded = self._round(value.scale(100), digits)
        if rounded.is_zero:
            rounded = ZERO

        negative, magnitude = self._split_sign(rounded)
        text = extract_fixed(magnitude, digits, derived, grouped=True, powers=self._powers)
        if not negative:
            pattern = PercentPositivePattern.from_index(table.percent_positive_pattern)
            return render_layout(pattern.template, text, symbol=table.percent_symbol)
        pattern = PercentNegativePattern.from_index(table.percent_negative_pattern)
        return render_layout(
            pattern.template, text, symbol=table.percent_symbol, negative_sign=table.negative_sign
        )

    def _format_currency(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        derived = table.currency_table()
        digits = derived.number_decimal_digits if request.precision is None else request.precision
        rounded = self._round(value, digits)
        if rounded.is_zero:
            rounded = ZERO

        negative, magnitude = self._split_sign(rounded)
        text = extract_fixed(magnitude, digits, derived, grouped=True, powers=self._powers)
        if not negative:
            pattern = CurrencyPositivePattern.from_index(table.currency_positive_pattern)
            return render_layout(pattern.template, text, symbol=table.currency_symbol)
        pattern = CurrencyNegativePattern.from_index(
            table.currency_negative_pattern, self.settings.currency_max_negative_pattern
        )
        return render_layout(
            pattern.template, text, symbol=table.currency_symbol, negative_sign=table.negative_sign
        )

    # -------------------------------------------------------------------------
    # Scientific, general and significant
    # -------------------------------------------------------------------------

    def _format_scientific(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        digits = self.settings.scientific_precision if request.precision is None else request.precision
        marker = request.exponent_marker
        if value.is_zero:
            return extract_fixed(ZERO, digits, table) + self._scientific_exponent(0, marker, table)

        negative, magnitude = self._split_sign(value)
        exponent, power = self._locate(magnitude)
        if exponent > 0:
            magnitude = magnitude.divide(power)
        elif exponent < 0:
            magnitude = magnitude.scale(power)

        mantissa, exponent = _carry(self._round(magnitude, digits), exponent)
        text = extract_fixed(mantissa, digits, table, powers=self._powers)
        text += self._scientific_exponent(exponent, marker, table)
        return f"{table.negative_sign}{text}" if negative else text

    def _format_general(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        precision = request.precision or self.settings.general_precision
        if value.is_zero:
            return to_native_digits("0", table.native_digits)

        negative, magnitude = self._split_sign(value)
        sign = table.negative_sign if negative else ""
        exponent, power = self._locate(magnitude)

        if exponent == precision - 1:
            # Exactly `precision` integer digits: the rounded integer itself.
            integer = round_to_integer(
                magnitude.numerator, magnitude.denominator, self.midpoint_rounding
            )
            text = integer_digits(integer, powers=self._powers)
            return sign + to_native_digits(text, table.native_digits)

        if exponent > precision - 1 or exponent <= -5:
            if exponent > 0:
                scaled = magnitude.divide(power)
            else:
                scaled = magnitude.scale(power)
            mantissa, exponent = _carry(self._round(scaled, precision - 1), exponent)
            text = extract_significant(mantissa, precision - 1, table, powers=self._powers)
            return sign + text + self._general_exponent(exponent, request.exponent_marker, table)

        digits = precision - exponent - 1
        rounded = self._round(magnitude, digits)
        return sign + extract_significant(rounded, digits, table, powers=self._powers)

    def _format_significant(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        precision = self.settings.significant_precision if request.precision is None else request.precision
        if value.is_zero:
            return to_native_digits("0", table.native_digits)

        negative, magnitude = self._split_sign(value)
        exponent, power = self._locate(magnitude)

        if exponent > 5 or exponent <= -4:
            if exponent > 0:
                scaled = magnitude.divide(power)
            else:
                scaled = magnitude.scale(power)
            mantissa, exponent = _carry(self._round(scaled, precision), exponent)
            text = extract_significant(mantissa, precision, table, grouped=True, powers=self._powers)
            text += self._general_exponent(exponent, request.exponent_marker, table)
        else:
            # Leading zeros after the radix do not count against the budget.
            digits = precision - exponent - 1 if exponent < 0 else precision
            rounded = self._round(magnitude, digits)
            if rounded.is_zero:
                return to_native_digits("0", table.native_digits)
            text = extract_significant(rounded, digits, table, grouped=True, powers=self._powers)

        return f"{table.negative_sign}{text}" if negative else text

    # -------------------------------------------------------------------------
    # Float fallback
    # -------------------------------------------------------------------------

    def _format_float(self, value: Rational, request: FormatSpec, table: NumberFormatTable) -> str:
        """Render through ``float``; precision may be lost."""
        try:
            number = float(value)
        except OverflowError as e:
            raise NonFiniteValueError(f"{value} is outside the float range") from e

        if request.style is NotationStyle.ROUND_TRIP:
            logger.debug("Lossy float fallback", spec=request.text, reason="round-trip style")
            return self._localize_repr(number, table)

        logger.debug("Lossy float fallback", spec=request.text, reason="custom format spec")
        try:
            return format(number, request.text)
        except ValueError as e:
            raise FormatSpecError(request.text, str(e)) from e

    def _localize_repr(self, number: float, table: NumberFormatTable) -> str:
        if math.isnan(number):
            return table.nan_symbol
        if math.isinf(number):
            return table.positive_infinity_symbol if number > 0 else table.negative_infinity_symbol

        mantissa, _, exponent = repr(number).partition("e")
        text = mantissa.replace("-", table.negative_sign).replace(".", table.number_decimal_separator)
        if exponent:
            sign = table.negative_sign if exponent.startswith("-") else table.positive_sign
            text += f"E{sign}{exponent.lstrip('+-')}"
        return to_native_digits(text, table.native_digits)


def format_decimal(
    value: RationalInput,
    spec: str | None = "G",
    locale: str | NumberFormatTable | None = None,
) -> str:
    """Format a value with the shared formatter.

    Args:
        value: Rational, Fraction, int, Decimal or float.
        spec: Format spec (see module docstring).
        locale: Locale tag or table (defaults to ``locale.default``).

    Returns:
        The formatted text.
    """
    return DecimalNotationFormatter.instance().format(spec, value, locale)
