"""Tests for locale number format tables and their registry.

Tests cover:
- Locale tag parsing
- Derived percent and currency tables
- Table validation and dictionary conversion
- Registry lookup, fallback and registration
- Loading tables from files
"""

from __future__ import annotations

import json
from dataclasses import replace

import pytest
import yaml

from decimalnotation.errors import ConfigSourceError, ConfigValidationError, UnknownLocaleError
from decimalnotation.numberformat import (
    INVARIANT,
    LocaleTag,
    NumberFormatTable,
    get_format_table,
    list_locales,
    load_format_table,
    register_format_table,
    unregister_format_table,
)


@pytest.fixture
def cleanup_tags():
    """Unregister tags added by a test."""
    tags: list[str] = []
    yield tags
    for tag in tags:
        unregister_format_table(tag)


# =============================================================================
# Locale Tags
# =============================================================================


class TestLocaleTag:
    """Tests for LocaleTag."""

    @pytest.mark.parametrize(
        "raw,language,region,script",
        [
            ("en", "en", None, None),
            ("en-US", "en", "US", None),
            ("en_us", "en", "US", None),
            ("zh-Hans-CN", "zh", "CN", "Hans"),
            ("de_DE.UTF-8", "de", "DE", None),
            ("fr_FR@euro", "fr", "FR", None),
            ("es-419", "es", "419", None),
        ],
    )
    def test_parse(self, raw, language, region, script):
        tag = LocaleTag.parse(raw)
        assert (tag.language, tag.region, tag.script) == (language, region, script)

    def test_canonical_tag(self):
        assert LocaleTag.parse("pt_br").tag == "pt-BR"
        assert LocaleTag.parse("zh-Hans-CN").tag == "zh-CN"


# =============================================================================
# Tables
# =============================================================================


class TestNumberFormatTable:
    """Tests for NumberFormatTable."""

    def test_invariant_defaults(self):
        assert INVARIANT.number_decimal_separator == "."
        assert INVARIANT.number_group_separator == ","
        assert INVARIANT.number_group_sizes == (3,)
        assert INVARIANT.number_decimal_digits == 2
        assert INVARIANT.currency_symbol == "¤"
        assert INVARIANT.nan_symbol == "NaN"
        assert INVARIANT.validate() == []

    def test_percent_table(self):
        table = replace(
            INVARIANT,
            percent_decimal_separator="·",
            percent_group_separator="'",
            percent_group_sizes=(4,),
            percent_decimal_digits=1,
        )
        derived = table.percent_table()
        assert derived.number_decimal_separator == "·"
        assert derived.number_group_separator == "'"
        assert derived.number_group_sizes == (4,)
        assert derived.number_decimal_digits == 1

    def test_currency_table(self):
        derived = get_format_table("ja-JP").currency_table()
        assert derived.number_decimal_digits == 0

    def test_validate_reports_problems(self):
        table = replace(
            INVARIANT,
            native_digits=("0", "1"),
            number_group_sizes=(0, 3),
            currency_decimal_digits=-1,
            currency_negative_pattern=17,
        )
        problems = table.validate()
        assert len(problems) == 4
        assert any("currency_negative_pattern" in p for p in problems)

    def test_to_dict_uses_lists(self):
        data = INVARIANT.to_dict()
        assert data["number_group_sizes"] == [3]
        assert isinstance(data["native_digits"], list)
        json.dumps(data)

    def test_from_dict_with_base(self):
        table = NumberFormatTable.from_dict(
            {"name": "de-LI", "currency_symbol": "CHF", "number_group_sizes": [3]},
            base=get_format_table("de-DE"),
        )
        assert table.currency_symbol == "CHF"
        assert table.number_decimal_separator == ","
        assert table.number_group_sizes == (3,)

    def test_from_dict_native_digits_string(self):
        table = NumberFormatTable.from_dict({"native_digits": "٠١٢٣٤٥٦٧٨٩"})
        assert table.native_digits[1] == "١"

    def test_from_dict_rejects_unknown_and_wrong_types(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            NumberFormatTable.from_dict(
                {"colour": "red", "number_decimal_digits": "2", "negative_sign": 1}
            )
        assert len(exc_info.value.errors) == 3

    def test_from_dict_rejects_bool_for_int(self):
        with pytest.raises(ConfigValidationError):
            NumberFormatTable.from_dict({"number_decimal_digits": True})

    def test_from_dict_validates(self):
        with pytest.raises(ConfigValidationError, match="number_negative_pattern"):
            NumberFormatTable.from_dict({"number_negative_pattern": 9})


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    """Tests for locale table lookup and registration."""

    def test_builtin_locales(self):
        locales = list_locales()
        assert locales[0] == "invariant"
        for tag in ("en-US", "de-DE", "fr-FR", "ja-JP", "ar-EG"):
            assert tag in locales

    def test_exact_lookup(self):
        assert get_format_table("de-DE").currency_symbol == "€"
        assert get_format_table("de_DE.UTF-8").name == "de-DE"

    def test_default_is_invariant(self):
        assert get_format_table() is INVARIANT
        assert get_format_table("") is INVARIANT
        assert get_format_table("Invariant") is INVARIANT

    def test_table_passthrough(self):
        table = replace(INVARIANT, name="custom")
        assert get_format_table(table) is table

    def test_language_fallback(self):
        assert get_format_table("de").name == "de-DE"
        assert get_format_table("de-AT").name == "de-DE"

    def test_unknown_falls_back_to_invariant(self):
        assert get_format_table("xx-YY") is INVARIANT

    def test_strict_unknown_raises(self):
        with pytest.raises(UnknownLocaleError) as exc_info:
            get_format_table("xx-YY", strict=True)
        assert exc_info.value.tag == "xx-YY"

    def test_strict_language_fallback_allowed(self):
        assert get_format_table("fr-CA", strict=True).name == "fr-FR"

    def test_register_and_unregister(self, cleanup_tags):
        table = replace(get_format_table("de-DE"), name="de-LI", currency_symbol="CHF")
        register_format_table("de_LI", table)
        cleanup_tags.append("de-LI")
        assert get_format_table("de-LI") is table
        assert "de-LI" in list_locales()

        unregister_format_table("de-LI")
        assert get_format_table("de-LI").name == "de-DE"

    def test_register_language_default(self, cleanup_tags):
        table = replace(INVARIANT, name="eo-001", currency_symbol="₷")
        register_format_table("eo-001", table, language_default=True)
        cleanup_tags.append("eo-001")
        assert get_format_table("eo") is table

        unregister_format_table("eo-001")
        assert get_format_table("eo") is INVARIANT

    def test_override_builtin_restored(self, cleanup_tags):
        original = get_format_table("en-US")
        register_format_table("en-US", replace(original, currency_symbol="US$"))
        cleanup_tags.append("en-US")
        assert get_format_table("en-US").currency_symbol == "US$"

        unregister_format_table("en-US")
        assert get_format_table("en-US") is original


# =============================================================================
# Loading
# =============================================================================


class TestLoadFormatTable:
    """Tests for load_format_table."""

    def test_yaml_with_base(self, tmp_path, cleanup_tags):
        path = tmp_path / "de-li.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "base": "de-DE",
                    "locale": "de-LI",
                    "currency_symbol": "CHF",
                    "currency_positive_pattern": 2,
                    "currency_negative_pattern": 12,
                },
                allow_unicode=True,
            ),
            encoding="utf-8",
        )
        cleanup_tags.append("de-LI")

        table = load_format_table(path)
        assert table.name == "de-LI"
        assert table.number_decimal_separator == ","
        assert table.currency_negative_pattern == 12
        assert get_format_table("de-LI") is table

    def test_json_without_registration(self, tmp_path):
        path = tmp_path / "table.json"
        path.write_text(json.dumps({"number_decimal_separator": ","}), encoding="utf-8")

        table = load_format_table(path)
        assert table.number_decimal_separator == ","
        assert table.name == "invariant"

    def test_toml_register_as(self, tmp_path, cleanup_tags):
        path = tmp_path / "table.toml"
        path.write_text('currency_symbol = "Kč"\nnumber_group_separator = " "\n', encoding="utf-8")
        cleanup_tags.append("cs-CZ")

        table = load_format_table(path, register_as="cs-CZ")
        assert table.name == "cs-CZ"
        assert get_format_table("cs-CZ").currency_symbol == "Kč"

    def test_unknown_base(self, tmp_path):
        path = tmp_path / "table.yaml"
        path.write_text("base: xx-YY\n", encoding="utf-8")
        with pytest.raises(UnknownLocaleError):
            load_format_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigSourceError):
            load_format_table(tmp_path / "missing.yaml")
