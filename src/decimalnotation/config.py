"""Configuration management for decimalnotation.

Settings are merged from an ordered list of sources and exposed as a typed
:class:`FormatterSettings` value.

Architecture:
    ConfigSource[] (ordered by priority)
         |
         +---> FileConfigSource (YAML, JSON, TOML)
         +---> EnvConfigSource (DECIMALNOTATION_* variables)
         |
         v
    ConfigManager
         |
         +---> Merge & Validate
         |
         v
    ConfigProfile (typed access) ---> FormatterSettings

Usage:
    >>> from decimalnotation.config import get_settings, load_settings
    >>>
    >>> settings = load_settings("decimalnotation.yaml")
    >>> settings.general_precision
    16
    >>>
    >>> # DECIMALNOTATION_ROUNDING_MODE=to_even overrides the file
    >>> get_settings().rounding_mode
    <MidpointRounding.TO_EVEN: 'to_even'>

Example file (YAML):
    general:
      precision: 15
    rounding:
      mode: to_even
    locale:
      default: de-DE
      strict: true
"""

from __future__ import annotations

import json
import os
import threading
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from decimalnotation.errors import (
    ConfigSourceError,
    ConfigValidationError,
    InvalidArgumentError,
)
from decimalnotation.logging import LOG_FORMATS, LogLevel
from decimalnotation.rounding import MidpointRounding

ENV_PREFIX = "DECIMALNOTATION"
CONFIG_FILE_STEM = "decimalnotation"
CONFIG_SUFFIXES = (".yaml", ".yml", ".json", ".toml")


def read_structured_file(path: str | Path) -> dict[str, Any]:
    """Parse a YAML, JSON or TOML file into a dictionary.

    The format is chosen from the file extension.

    Raises:
        ConfigSourceError: If the file is missing, unreadable, has an unknown
            extension, or does not contain a mapping.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in CONFIG_SUFFIXES:
        raise ConfigSourceError(f"Unsupported file format: {suffix or path.name}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigSourceError(f"Cannot read {path}: {e}") from e

    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content)
        else:
            data = tomllib.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigSourceError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigSourceError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """A provider of nested settings.

    Sources are merged in ascending ``priority``, so a higher priority wins.
    """

    def __init__(self, priority: int = 0) -> None:
        self.priority = priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        pass


class EnvConfigSource(ConfigSource):
    """Settings from ``DECIMALNOTATION_<SECTION>_<KEY>`` variables.

    Only the first separator after the prefix splits section from key, so
    key names keep their underscores. Values are read as YAML scalars.

    Example:
        DECIMALNOTATION_GENERAL_PRECISION=15
        DECIMALNOTATION_CURRENCY_MAX_NEGATIVE_PATTERN=15

        Will produce:
        {"general": {"precision": 15}, "currency": {"max_negative_pattern": 15}}
    """

    def __init__(
        self,
        prefix: str = ENV_PREFIX,
        priority: int = 100,
        *,
        environ: dict[str, str] | None = None,
    ) -> None:
        super().__init__(priority)
        self._prefix = f"{prefix}_"
        self._environ = environ

    def load(self) -> dict[str, Any]:
        environ = os.environ if self._environ is None else self._environ
        result: dict[str, Any] = {}
        for name, raw in environ.items():
            if not name.startswith(self._prefix):
                continue
            section, _, key = name[len(self._prefix):].lower().partition("_")
            value = self._parse_value(raw)
            if key:
                result.setdefault(section, {})[key] = value
            else:
                result[section] = value
        return result

    @staticmethod
    def _parse_value(raw: str) -> Any:
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw


class FileConfigSource(ConfigSource):
    """Settings from a YAML, JSON or TOML file."""

    def __init__(self, path: str | Path, *, required: bool = False, priority: int = 50) -> None:
        """Initialize file source.

        Args:
            path: Settings file.
            required: Raise if the file does not exist instead of
                contributing nothing.
            priority: Source priority.
        """
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    def load(self) -> dict[str, Any]:
        if self._path.exists():
            return read_structured_file(self._path)
        if self._required:
            raise ConfigSourceError(f"Configuration file not found: {self._path}")
        return {}


class DictConfigSource(ConfigSource):
    """In-memory settings, used for explicit overrides."""

    def __init__(self, values: dict[str, Any], priority: int = 200) -> None:
        super().__init__(priority)
        self._values = values

    def load(self) -> dict[str, Any]:
        return self._values


# =============================================================================
# Schema & Validation
# =============================================================================


@dataclass
class ConfigField:
    """Constraints on one dot-separated setting."""

    name: str
    type: type | tuple[type, ...] = str
    min_value: int | None = None
    choices: list[Any] | None = None

    def check(self, value: Any) -> str | None:
        """Return a problem description, or None if the value is acceptable."""
        expected = self.type if isinstance(self.type, tuple) else (self.type,)
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            names = "/".join(t.__name__ for t in expected)
            return f"Field '{self.name}' should be {names}, got {type(value).__name__}"
        if self.min_value is not None and isinstance(value, int) and value < self.min_value:
            return f"Field '{self.name}' must be >= {self.min_value}"
        if self.choices is not None:
            candidate = value.lower() if isinstance(value, str) else value
            if candidate not in self.choices:
                return f"Field '{self.name}' must be one of {self.choices}"
        return None


@dataclass
class ConfigSchema:
    """The settings a configuration may contain.

    Example:
        >>> schema = ConfigSchema().add_field("general.precision", int, min_value=1)
    """

    fields: list[ConfigField] = field(default_factory=list)

    def add_field(self, name: str, type: type | tuple[type, ...] = str, **constraints: Any) -> "ConfigSchema":
        self.fields.append(ConfigField(name, type, **constraints))
        return self


class ConfigValidator:
    """Checks a nested settings dictionary against a schema."""

    def __init__(self, schema: ConfigSchema) -> None:
        self._schema = schema

    def validate(self, config: dict[str, Any]) -> list[str]:
        """Return every problem found (empty if valid). Absent settings are fine."""
        problems = []
        for field_def in self._schema.fields:
            value = _get_nested(config, field_def.name)
            if value is not None:
                problem = field_def.check(value)
                if problem:
                    problems.append(problem)
        return problems


def _get_nested(config: dict[str, Any], key: str) -> Any:
    current: Any = config
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def create_default_schema() -> ConfigSchema:
    """Create the schema of every recognised setting."""
    return (
        ConfigSchema()
        .add_field("general.precision", int, min_value=1)
        .add_field("scientific.precision", int, min_value=0)
        .add_field("significant.precision", int, min_value=0)
        .add_field("rounding.mode", str)
        .add_field("locale.default", str)
        .add_field("locale.strict", (bool, int, str))
        .add_field("currency.max_negative_pattern", int, choices=[15, 16])
        .add_field("logging.level", str, choices=[level.name.lower() for level in LogLevel])
        .add_field("logging.format", str, choices=list(LOG_FORMATS))
    )


# =============================================================================
# Profile & Manager
# =============================================================================


class ConfigProfile:
    """Typed access to merged settings by dot-separated key.

    Example:
        >>> profile = ConfigProfile({"general": {"precision": "15"}})
        >>> profile.get_int("general.precision", default=16)
        15
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config = config

    def get(self, key: str, default: Any = None) -> Any:
        value = _get_nested(self._config, key)
        return default if value is None else value

    def get_str(self, key: str, default: str = "") -> str:
        return str(self.get(key, default))

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "on")
        return bool(value)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


class ConfigManager:
    """Merges sources by priority and validates the result.

    Example:
        >>> manager = ConfigManager(schema=create_default_schema())
        >>> manager.add_source(FileConfigSource("decimalnotation.yaml"))
        >>> manager.add_source(EnvConfigSource())
        >>> profile = manager.load()
    """

    def __init__(self, schema: ConfigSchema | None = None) -> None:
        self._sources: list[ConfigSource] = []
        self._schema = schema

    def add_source(self, source: ConfigSource) -> "ConfigManager":
        self._sources.append(source)
        return self

    def load(self, validate: bool = True) -> ConfigProfile:
        """Load and merge every source.

        Raises:
            ConfigSourceError: If a required source cannot be read.
            ConfigValidationError: If the merged values fail the schema.
        """
        config: dict[str, Any] = {}
        for source in sorted(self._sources, key=lambda s: s.priority):
            _deep_merge(config, source.load())

        if validate and self._schema is not None:
            problems = ConfigValidator(self._schema).validate(config)
            if problems:
                raise ConfigValidationError(problems)
        return ConfigProfile(config)


# =============================================================================
# Formatter Settings
# =============================================================================


@dataclass(frozen=True)
class FormatterSettings:
    """Typed settings consumed by the formatter and the CLI.

    Attributes:
        general_precision: Default precision of the general style.
        scientific_precision: Default precision of the scientific style.
        significant_precision: Default precision of the significant style.
        rounding_mode: Midpoint policy used while formatting.
        default_locale: Locale tag used when none is given.
        strict_locale: Raise on unknown locale tags instead of falling back.
        currency_max_negative_pattern: Highest accepted currency negative
            pattern (15 for the legacy revision).
        log_level: Logging level name.
        log_format: Logging output format.
    """

    general_precision: int = 16
    scientific_precision: int = 6
    significant_precision: int = 2
    rounding_mode: MidpointRounding = MidpointRounding.AWAY_FROM_ZERO
    default_locale: str = "invariant"
    strict_locale: bool = False
    currency_max_negative_pattern: int = 16
    log_level: str = "INFO"
    log_format: str = "console"

    @classmethod
    def legacy(cls) -> "FormatterSettings":
        """Settings of the legacy numeric-format revision."""
        return cls(general_precision=15, currency_max_negative_pattern=15)

    @classmethod
    def from_profile(cls, profile: ConfigProfile) -> "FormatterSettings":
        """Build settings from a loaded profile.

        Raises:
            ConfigValidationError: If the rounding mode is unknown.
        """
        defaults = cls()
        try:
            mode = MidpointRounding.from_string(
                profile.get_str("rounding.mode", defaults.rounding_mode.value)
            )
        except InvalidArgumentError as e:
            raise ConfigValidationError([f"Field 'rounding.mode': {e}"]) from e

        return cls(
            general_precision=profile.get_int("general.precision", defaults.general_precision),
            scientific_precision=profile.get_int("scientific.precision", defaults.scientific_precision),
            significant_precision=profile.get_int("significant.precision", defaults.significant_precision),
            rounding_mode=mode,
            default_locale=profile.get_str("locale.default", defaults.default_locale),
            strict_locale=profile.get_bool("locale.strict", defaults.strict_locale),
            currency_max_negative_pattern=profile.get_int(
                "currency.max_negative_pattern", defaults.currency_max_negative_pattern
            ),
            log_level=LogLevel.from_string(profile.get_str("logging.level", defaults.log_level)).name,
            log_format=profile.get_str("logging.format", defaults.log_format).lower(),
        )


# =============================================================================
# Global Settings
# =============================================================================

_settings: FormatterSettings | None = None
_lock = threading.Lock()


def _find_config_file(directory: Path) -> Path | None:
    for suffix in CONFIG_SUFFIXES:
        candidate = directory / f"{CONFIG_FILE_STEM}{suffix}"
        if candidate.exists():
            return candidate
    return None


def load_settings(
    config_path: str | Path | None = None,
    *,
    env_prefix: str = ENV_PREFIX,
    overrides: dict[str, Any] | None = None,
    validate: bool = True,
) -> FormatterSettings:
    """Load settings and make them the process-wide settings.

    Args:
        config_path: A settings file, or a directory searched for
            ``decimalnotation.{yaml,yml,json,toml}``.
        env_prefix: Environment variable prefix.
        overrides: Nested values applied above every other source.
        validate: Validate against the default schema.

    Returns:
        The loaded settings.

    Raises:
        ConfigSourceError: If ``config_path`` names a missing or unreadable file.
        ConfigValidationError: If a value is invalid.
    """
    global _settings

    manager = ConfigManager(schema=create_default_schema())

    if config_path is not None:
        path = Path(config_path)
        if path.is_dir():
            found = _find_config_file(path)
            if found is not None:
                manager.add_source(FileConfigSource(found, priority=50))
        else:
            manager.add_source(FileConfigSource(path, required=True, priority=50))

    manager.add_source(EnvConfigSource(prefix=env_prefix, priority=100))

    if overrides:
        manager.add_source(DictConfigSource(overrides, priority=200))

    settings = FormatterSettings.from_profile(manager.load(validate=validate))
    with _lock:
        _settings = settings
    return settings


def get_settings() -> FormatterSettings:
    """Get the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        with _lock:
            if _settings is None:
                manager = ConfigManager(schema=create_default_schema())
                manager.add_source(EnvConfigSource(priority=100))
                _settings = FormatterSettings.from_profile(manager.load())
    return _settings


def reset_settings() -> None:
    """Forget the process-wide settings; the next access reloads them."""
    global _settings

    with _lock:
        _settings = None
