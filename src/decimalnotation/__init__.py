"""decimalnotation - Exact decimal notation for rational numbers."""

from decimalnotation.rational import Rational, RationalKind
from decimalnotation.rounding import MidpointRounding, round_rational, round_to_int, round_to_integer
from decimalnotation.exponent import locate_exponent
from decimalnotation.digits import extract_fixed, extract_significant, group_digits
from decimalnotation.patterns import (
    CurrencyNegativePattern,
    CurrencyPositivePattern,
    NumberNegativePattern,
    PercentNegativePattern,
    PercentPositivePattern,
)
from decimalnotation.numberformat import (
    INVARIANT,
    NumberFormatTable,
    get_format_table,
    list_locales,
    load_format_table,
    register_format_table,
    unregister_format_table,
)
from decimalnotation.formatter import (
    DecimalNotationFormatter,
    FormatSpec,
    NotationStyle,
    format_decimal,
)
from decimalnotation.config import FormatterSettings, get_settings, load_settings, reset_settings
from decimalnotation.errors import (
    ConfigError,
    ConfigValidationError,
    DecimalNotationError,
    FormatSpecError,
    InvalidArgumentError,
    NonFiniteValueError,
    PatternOutOfRangeError,
    UnknownLocaleError,
)

__version__ = "0.1.0"

__all__ = [
    # Values
    "Rational",
    "RationalKind",
    # Rounding
    "MidpointRounding",
    "round_rational",
    "round_to_int",
    "round_to_integer",
    # Building blocks
    "locate_exponent",
    "extract_fixed",
    "extract_significant",
    "group_digits",
    # Patterns
    "NumberNegativePattern",
    "PercentPositivePattern",
    "PercentNegativePattern",
    "CurrencyPositivePattern",
    "CurrencyNegativePattern",
    # Locale tables
    "INVARIANT",
    "NumberFormatTable",
    "get_format_table",
    "list_locales",
    "load_format_table",
    "register_format_table",
    "unregister_format_table",
    # Formatting
    "DecimalNotationFormatter",
    "FormatSpec",
    "NotationStyle",
    "format_decimal",
    # Settings
    "FormatterSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
    # Errors
    "DecimalNotationError",
    "InvalidArgumentError",
    "PatternOutOfRangeError",
    "NonFiniteValueError",
    "FormatSpecError",
    "UnknownLocaleError",
    "ConfigError",
    "ConfigValidationError",
]
