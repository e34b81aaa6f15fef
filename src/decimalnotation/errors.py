"""Exception hierarchy for decimalnotation.

All errors raised by the package derive from :class:`DecimalNotationError`.
Where a builtin exception type carries the same meaning, the specific error
also inherits from it, so callers can keep catching ``ValueError`` or
``OverflowError`` without importing this module.
"""

from __future__ import annotations


class DecimalNotationError(Exception):
    """Base exception for all decimalnotation errors."""

    pass


class InvalidArgumentError(DecimalNotationError, ValueError):
    """Raised when an argument is outside the range an operation accepts."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"Invalid argument '{argument}': {message}")


class PatternOutOfRangeError(InvalidArgumentError):
    """Raised when a layout pattern index is not supported."""

    def __init__(self, pattern_kind: str, index: int, maximum: int) -> None:
        self.pattern_kind = pattern_kind
        self.index = index
        self.maximum = maximum
        super().__init__(
            pattern_kind,
            f"pattern index {index} is outside the supported range 0..{maximum}",
        )


class NonFiniteValueError(DecimalNotationError, OverflowError):
    """Raised when NaN or an infinity reaches rounding or digit extraction."""

    def __init__(self, message: str = "Value must not be NaN or infinity") -> None:
        super().__init__(message)


class FormatSpecError(DecimalNotationError, ValueError):
    """Raised when a custom format spec is rejected by the float fallback."""

    def __init__(self, spec: str, reason: str) -> None:
        self.spec = spec
        self.reason = reason
        super().__init__(f"Unsupported format spec {spec!r}: {reason}")


class UnknownLocaleError(DecimalNotationError, LookupError):
    """Raised on strict lookup of a locale tag with no registered table."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"No number format table registered for locale: {tag}")


class ConfigError(DecimalNotationError):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source error."""

    pass
