"""Locale number format tables.

A :class:`NumberFormatTable` holds every symbol, separator, group size and
layout pattern index the formatter reads. Tables are immutable; the percent
and currency styles work on *derived* copies whose number separators and
digit defaults are swapped for the style's own.

Tables are looked up by locale tag. Lookup tries the full tag, then the
language alone, then falls back to the invariant table (or raises, in
strict mode).

Usage:
    from decimalnotation.numberformat import get_format_table, load_format_table

    get_format_table("de-DE").number_decimal_separator    # ","
    get_format_table("de_AT").currency_symbol             # "€" (language fallback)

    table = load_format_table("tables/de-li.yaml", register_as="de-LI")
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from decimalnotation.config import read_structured_file
from decimalnotation.errors import ConfigValidationError, UnknownLocaleError
from decimalnotation.logging import get_logger
from decimalnotation.patterns import (
    CurrencyNegativePattern,
    CurrencyPositivePattern,
    NumberNegativePattern,
    PercentNegativePattern,
    PercentPositivePattern,
)

logger = get_logger(__name__)

INVARIANT_TAG = "invariant"
ASCII_DIGITS = tuple("0123456789")


# ==============================================================================
# Locale Tags
# ==============================================================================


@dataclass(frozen=True)
class LocaleTag:
    """Parsed locale tag.

    Attributes:
        language: ISO 639 language code (e.g., "en", "de")
        region: ISO 3166-1 region code (e.g., "US", "CH")
        script: ISO 15924 script code (e.g., "Latn", "Hans")
    """

    language: str
    region: str | None = None
    script: str | None = None

    @property
    def tag(self) -> str:
        """Canonical tag without the script (e.g., "en-US")."""
        return f"{self.language}-{self.region}" if self.region else self.language

    @classmethod
    def parse(cls, tag: str) -> "LocaleTag":
        """Parse a locale tag.

        Supports formats:
        - Simple: "en", "de"
        - With region: "en-US", "en_US"
        - With script: "zh-Hans-CN", "sr-Latn-RS"
        - POSIX suffixes: "de_DE.UTF-8", "fr_FR@euro"
        """
        tag = tag.split(".", 1)[0].split("@", 1)[0]
        parts = tag.replace("_", "-").split("-")

        language = parts[0].lower()
        region = None
        script = None

        for part in parts[1:]:
            if len(part) == 4 and part.isalpha():
                script = part.capitalize()
            elif len(part) == 2 and part.isalpha():
                region = part.upper()
            elif len(part) == 3 and part.isdigit():
                region = part

        return cls(language=language, region=region, script=script)


# ==============================================================================
# Number Format Table
# ==============================================================================


@dataclass(frozen=True)
class NumberFormatTable:
    """Symbols and layout rules for one locale.

    Group sizes follow the usual convention: the last size repeats, and a
    trailing ``0`` leaves the remaining digits ungrouped. Pattern fields are
    indices into the families of :mod:`decimalnotation.patterns`.

    Example:
        >>> table = NumberFormatTable(number_decimal_separator=",", number_group_separator=".")
        >>> table.percent_table().number_decimal_separator
        '.'
    """

    name: str = INVARIANT_TAG

    number_decimal_separator: str = "."
    number_group_separator: str = ","
    number_group_sizes: tuple[int, ...] = (3,)
    number_decimal_digits: int = 2
    number_negative_pattern: int = 1

    native_digits: tuple[str, ...] = ASCII_DIGITS
    negative_sign: str = "-"
    positive_sign: str = "+"

    nan_symbol: str = "NaN"
    positive_infinity_symbol: str = "Infinity"
    negative_infinity_symbol: str = "-Infinity"

    percent_symbol: str = "%"
    percent_decimal_separator: str = "."
    percent_group_separator: str = ","
    percent_group_sizes: tuple[int, ...] = (3,)
    percent_decimal_digits: int = 2
    percent_positive_pattern: int = 0
    percent_negative_pattern: int = 0

    currency_symbol: str = "¤"
    currency_decimal_separator: str = "."
    currency_group_separator: str = ","
    currency_group_sizes: tuple[int, ...] = (3,)
    currency_decimal_digits: int = 2
    currency_positive_pattern: int = 0
    currency_negative_pattern: int = 0

    def percent_table(self) -> "NumberFormatTable":
        """Derived table whose number fields carry the percent conventions."""
        return replace(
            self,
            number_decimal_separator=self.percent_decimal_separator,
            number_group_separator=self.percent_group_separator,
            number_group_sizes=self.percent_group_sizes,
            number_decimal_digits=self.percent_decimal_digits,
        )

    def currency_table(self) -> "NumberFormatTable":
        """Derived table whose number fields carry the currency conventions."""
        return replace(
            self,
            number_decimal_separator=self.currency_decimal_separator,
            number_group_separator=self.currency_group_separator,
            number_group_sizes=self.currency_group_sizes,
            number_decimal_digits=self.currency_decimal_digits,
        )

    def validate(self) -> list[str]:
        """Return a list of problems (empty if the table is usable)."""
        errors: list[str] = []

        if len(self.native_digits) != 10:
            errors.append(f"native_digits must have 10 entries, got {len(self.native_digits)}")

        for name in ("number_group_sizes", "percent_group_sizes", "currency_group_sizes"):
            sizes = getattr(self, name)
            if any(size < 0 for size in sizes):
                errors.append(f"{name} must not contain negative sizes")
            if any(size == 0 for size in sizes[:-1]):
                errors.append(f"{name} may only use 0 as its last size")

        for name in ("number_decimal_digits", "percent_decimal_digits", "currency_decimal_digits"):
            if getattr(self, name) < 0:
                errors.append(f"{name} must be non-negative")

        pattern_fields = {
            "number_negative_pattern": NumberNegativePattern,
            "percent_positive_pattern": PercentPositivePattern,
            "percent_negative_pattern": PercentNegativePattern,
            "currency_positive_pattern": CurrencyPositivePattern,
            "currency_negative_pattern": CurrencyNegativePattern,
        }
        for name, family in pattern_fields.items():
            index = getattr(self, name)
            if not 0 <= index < len(family):
                errors.append(f"{name} must be in 0..{len(family) - 1}, got {index}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary with lists in place of tuples."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        base: "NumberFormatTable | None" = None,
    ) -> "NumberFormatTable":
        """Build a table from a mapping of field names.

        Args:
            data: Field values. Missing fields come from ``base``.
            base: Table providing defaults (the invariant table if omitted).

        Raises:
            ConfigValidationError: On unknown fields, wrong types, or values
                rejected by :meth:`validate`.
        """
        base = base or INVARIANT
        known = {f.name: f for f in fields(cls)}
        errors: list[str] = []
        values: dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                errors.append(f"Unknown table field '{key}'")
                continue
            current = getattr(base, key)
            if isinstance(current, tuple):
                if isinstance(value, str) and key == "native_digits":
                    value = tuple(value)
                elif isinstance(value, (list, tuple)):
                    value = tuple(value)
                else:
                    errors.append(f"Field '{key}' should be a list, got {type(value).__name__}")
                    continue
                if key.endswith("_group_sizes") and not all(
                    isinstance(v, int) and not isinstance(v, bool) for v in value
                ):
                    errors.append(f"Field '{key}' must contain integers")
                    continue
            elif isinstance(current, int):
                if isinstance(value, bool) or not isinstance(value, int):
                    errors.append(f"Field '{key}' should be int, got {type(value).__name__}")
                    continue
            elif not isinstance(value, str):
                errors.append(f"Field '{key}' should be str, got {type(value).__name__}")
                continue
            values[key] = value

        if errors:
            raise ConfigValidationError(errors)

        table = replace(base, **values)
        problems = table.validate()
        if problems:
            raise ConfigValidationError(problems)
        return table


# ==============================================================================
# Built-in Tables
# ==============================================================================

INVARIANT = NumberFormatTable()

_LATIN = dict(
    positive_infinity_symbol="∞",
    negative_infinity_symbol="-∞",
)


def _separators(decimal: str, group: str) -> dict[str, str]:
    return dict(
        number_decimal_separator=decimal,
        number_group_separator=group,
        percent_decimal_separator=decimal,
        percent_group_separator=group,
        currency_decimal_separator=decimal,
        currency_group_separator=group,
    )


_COMMA_DECIMAL = _separators(",", ".")
_SPACE_GROUPED = _separators(",", "\u00a0")
_NARROW_SPACE_GROUPED = _separators(",", "\u202f")

_BUILTIN_TABLES: dict[str, NumberFormatTable] = {
    INVARIANT_TAG: INVARIANT,

    # English
    "en-US": NumberFormatTable(
        name="en-US", currency_symbol="$",
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),
    "en-GB": NumberFormatTable(
        name="en-GB", currency_symbol="£",
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),
    "en-IN": NumberFormatTable(
        name="en-IN", currency_symbol="₹",
        number_group_sizes=(3, 2), percent_group_sizes=(3, 2), currency_group_sizes=(3, 2),
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),

    # German
    "de-DE": NumberFormatTable(
        name="de-DE", currency_symbol="€",
        currency_positive_pattern=3, currency_negative_pattern=8,
        **_COMMA_DECIMAL, **_LATIN,
    ),
    "de-CH": NumberFormatTable(
        name="de-CH", currency_symbol="CHF",
        number_group_separator="’", percent_group_separator="’", currency_group_separator="’",
        currency_positive_pattern=2, currency_negative_pattern=12,
        percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),

    # Romance
    "fr-FR": NumberFormatTable(
        name="fr-FR", currency_symbol="€",
        currency_positive_pattern=3, currency_negative_pattern=8,
        **_NARROW_SPACE_GROUPED, **_LATIN,
    ),
    "es-ES": NumberFormatTable(
        name="es-ES", currency_symbol="€",
        currency_positive_pattern=3, currency_negative_pattern=8,
        **_COMMA_DECIMAL, **_LATIN,
    ),
    "it-IT": NumberFormatTable(
        name="it-IT", currency_symbol="€",
        currency_positive_pattern=3, currency_negative_pattern=8,
        percent_positive_pattern=1, percent_negative_pattern=1,
        **_COMMA_DECIMAL, **_LATIN,
    ),
    "pt-BR": NumberFormatTable(
        name="pt-BR", currency_symbol="R$",
        currency_positive_pattern=2, currency_negative_pattern=9,
        percent_positive_pattern=1, percent_negative_pattern=1,
        **_COMMA_DECIMAL, **_LATIN,
    ),

    # Germanic
    "nl-NL": NumberFormatTable(
        name="nl-NL", currency_symbol="€",
        currency_positive_pattern=2, currency_negative_pattern=12,
        percent_positive_pattern=1, percent_negative_pattern=1,
        **_COMMA_DECIMAL, **_LATIN,
    ),
    "sv-SE": NumberFormatTable(
        name="sv-SE", currency_symbol="kr", negative_sign="−",
        currency_positive_pattern=3, currency_negative_pattern=8,
        negative_infinity_symbol="−∞", positive_infinity_symbol="∞",
        **_SPACE_GROUPED,
    ),

    # Slavic
    "ru-RU": NumberFormatTable(
        name="ru-RU", currency_symbol="₽", nan_symbol="не число",
        currency_positive_pattern=3, currency_negative_pattern=8,
        **_SPACE_GROUPED, **_LATIN,
    ),

    # East Asian
    "ja-JP": NumberFormatTable(
        name="ja-JP", currency_symbol="￥", currency_decimal_digits=0,
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),
    "ko-KR": NumberFormatTable(
        name="ko-KR", currency_symbol="₩", currency_decimal_digits=0,
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),
    "zh-CN": NumberFormatTable(
        name="zh-CN", currency_symbol="¥",
        currency_negative_pattern=1, percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),

    # Arabic
    "ar-EG": NumberFormatTable(
        name="ar-EG", currency_symbol="ج.م.‏", nan_symbol="ليس رقمًا",
        native_digits=tuple("٠١٢٣٤٥٦٧٨٩"),
        number_decimal_separator="٫", number_group_separator="٬",
        percent_symbol="٪", percent_decimal_separator="٫", percent_group_separator="٬",
        currency_decimal_separator="٫", currency_group_separator="٬",
        currency_positive_pattern=2, currency_negative_pattern=12,
        percent_positive_pattern=1, percent_negative_pattern=1,
        **_LATIN,
    ),
}

# Language-only tags resolve to these regions.
_LANGUAGE_DEFAULTS: dict[str, str] = {
    "en": "en-US",
    "de": "de-DE",
    "fr": "fr-FR",
    "es": "es-ES",
    "it": "it-IT",
    "pt": "pt-BR",
    "nl": "nl-NL",
    "sv": "sv-SE",
    "ru": "ru-RU",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "zh": "zh-CN",
    "ar": "ar-EG",
}


# ==============================================================================
# Registry
# ==============================================================================

_tables: dict[str, NumberFormatTable] = dict(_BUILTIN_TABLES)
_languages: dict[str, str] = dict(_LANGUAGE_DEFAULTS)
_registry_lock = threading.Lock()


def _normalize(tag: str) -> str:
    if tag.strip().lower() in ("", INVARIANT_TAG):
        return INVARIANT_TAG
    return LocaleTag.parse(tag.strip()).tag


def list_locales() -> list[str]:
    """Registered locale tags, invariant first."""
    with _registry_lock:
        tags = sorted(tag for tag in _tables if tag != INVARIANT_TAG)
    return [INVARIANT_TAG, *tags]


def register_format_table(
    tag: str,
    table: NumberFormatTable,
    *,
    language_default: bool = False,
) -> None:
    """Register a table under a locale tag, replacing any previous one.

    Args:
        tag: Locale tag (e.g., "de-LI").
        table: Table to register.
        language_default: Also resolve the bare language (e.g., "de") to it.
    """
    key = _normalize(tag)
    with _registry_lock:
        _tables[key] = table
        if language_default and key != INVARIANT_TAG:
            _languages[LocaleTag.parse(key).language] = key
    logger.debug("Registered number format table", locale=key)


def unregister_format_table(tag: str) -> None:
    """Remove a registered table; built-in tables are restored instead."""
    key = _normalize(tag)
    with _registry_lock:
        if key in _BUILTIN_TABLES:
            _tables[key] = _BUILTIN_TABLES[key]
        else:
            _tables.pop(key, None)
        for language, target in list(_languages.items()):
            if target != key:
                continue
            if language in _LANGUAGE_DEFAULTS:
                _languages[language] = _LANGUAGE_DEFAULTS[language]
            else:
                del _languages[language]


def get_format_table(
    locale: str | NumberFormatTable | None = None,
    *,
    strict: bool = False,
) -> NumberFormatTable:
    """Resolve a locale tag to a table.

    Args:
        locale: Locale tag, a table (returned as is) or None (invariant).
        strict: Raise instead of falling back to the invariant table.

    Returns:
        The table for the full tag, else for its language, else the
        invariant table.

    Raises:
        UnknownLocaleError: In strict mode, if neither the tag nor its
            language is registered.
    """
    if isinstance(locale, NumberFormatTable):
        return locale
    if locale is None:
        return INVARIANT

    key = _normalize(locale)
    with _registry_lock:
        table = _tables.get(key)
        if table is not None:
            return table

        language = LocaleTag.parse(key).language
        table = _tables.get(language)
        if table is None and language in _languages:
            table = _tables.get(_languages[language])

    if table is not None:
        logger.debug("Locale resolved by language", locale=locale, table=table.name)
        return table

    if strict:
        raise UnknownLocaleError(locale)

    logger.debug("Unknown locale, using invariant table", locale=locale)
    return INVARIANT


def load_format_table(
    path: str | Path,
    *,
    register_as: str | None = None,
) -> NumberFormatTable:
    """Load a table from a YAML, JSON or TOML file.

    The file holds field names of :class:`NumberFormatTable`. An optional
    ``base`` key names a registered locale whose table supplies the fields
    the file leaves out; an optional ``locale`` key is used as the
    registration tag when ``register_as`` is not given.

    Example file:
        base: de-DE
        currency_symbol: CHF
        currency_positive_pattern: 2
        currency_negative_pattern: 12

    Raises:
        ConfigSourceError: If the file cannot be read or parsed.
        ConfigValidationError: If the content is not a valid table.
        UnknownLocaleError: If ``base`` names an unregistered locale.
    """
    data = dict(read_structured_file(path))
    base_tag = data.pop("base", None)
    tag = register_as or data.pop("locale", None)
    data.pop("locale", None)

    base = get_format_table(str(base_tag), strict=True) if base_tag else INVARIANT
    if tag and "name" not in data:
        data["name"] = _normalize(str(tag))

    table = NumberFormatTable.from_dict(data, base=base)
    if tag:
        register_format_table(str(tag), table)
    return table
