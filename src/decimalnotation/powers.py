"""Shared cache of exact powers of ten, and decimal text built from it.

The rounding engine and the exponent locator multiply and divide by powers
of ten constantly. :class:`PowersOfTen` keeps the small ones precomputed and
grows an append-only table lazily for larger exponents, so that stepping to
an adjacent power costs one lookup or one multiplication by ten.

Reads need no synchronisation: an entry is never changed once stored, and a
concurrent second insert of the same exponent stores an identical value.
"""

from __future__ import annotations

import threading

TEN = 10


class PowersOfTen:
    """Append-only lookup service for ``10 ** exponent``.

    Example:
        >>> powers = PowersOfTen()
        >>> powers.get(3)
        1000
        >>> powers.previous(1000, 3)
        100
    """

    def __init__(self, precomputed: int = 64, max_cached_exponent: int = 1024) -> None:
        """Initialize the cache.

        Args:
            precomputed: Exponents ``0..precomputed`` are computed eagerly.
            max_cached_exponent: Largest exponent kept in the table; larger
                powers are computed on demand and not stored.
        """
        if precomputed < 0 or max_cached_exponent < precomputed:
            raise ValueError("require 0 <= precomputed <= max_cached_exponent")
        self._max_cached_exponent = max_cached_exponent
        self._table: dict[int, int] = {}
        self._lock = threading.Lock()

        value = 1
        for exponent in range(precomputed + 1):
            self._table[exponent] = value
            value *= TEN

    @property
    def max_cached_exponent(self) -> int:
        """Largest exponent that is ever stored."""
        return self._max_cached_exponent

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, exponent: int) -> bool:
        return exponent in self._table

    def get(self, exponent: int) -> int:
        """Return ``10 ** exponent`` for a non-negative exponent."""
        value = self._table.get(exponent)
        if value is not None:
            return value
        if exponent < 0:
            raise ValueError(f"exponent must be non-negative, got {exponent}")

        value = self._derive(exponent)
        if exponent <= self._max_cached_exponent:
            with self._lock:
                self._table.setdefault(exponent, value)
        return value

    def previous(self, power: int, exponent: int) -> int:
        """Return ``10 ** (exponent - 1)`` given ``power == 10 ** exponent``."""
        value = self._table.get(exponent - 1)
        if value is not None:
            return value
        return power // TEN

    def next(self, power: int, exponent: int) -> int:
        """Return ``10 ** (exponent + 1)`` given ``power == 10 ** exponent``."""
        value = self._table.get(exponent + 1)
        if value is not None:
            return value
        return power * TEN

    def _derive(self, exponent: int) -> int:
        # Start from the largest cached power below the target.
        base = min(exponent, self._max_cached_exponent)
        while base not in self._table:
            base -= 1
        return self._table[base] * TEN ** (exponent - base)


_default: PowersOfTen | None = None
_default_lock = threading.Lock()


def get_powers_of_ten() -> PowersOfTen:
    """Get the process-wide powers-of-ten cache."""
    global _default

    if _default is None:
        with _default_lock:
            if _default is None:
                _default = PowersOfTen()
    return _default


def power_of_ten(exponent: int) -> int:
    """Shortcut for ``get_powers_of_ten().get(exponent)``."""
    return get_powers_of_ten().get(exponent)


# Below the smallest int-to-str digit limit the interpreter accepts (640).
_DIRECT_DIGITS = 600


def integer_digits(value: int, width: int = 0, powers: PowersOfTen | None = None) -> str:
    """Decimal digits of a non-negative integer, zero padded to ``width``.

    Values too long for a single ``str()`` are split with ``divmod`` against
    a power of ten and each half is rendered and padded on its own, so the
    interpreter's int-to-str digit limit never applies.

    Example:
        >>> integer_digits(42, 5)
        '00042'
    """
    if value < 0:
        raise ValueError("value must be non-negative")

    powers = powers or get_powers_of_ten()
    if value < powers.get(_DIRECT_DIGITS):
        return str(value).rjust(width, "0")

    # log10(2) ~ 0.30103; only needs to land near the middle.
    split = (value.bit_length() * 30103 // 100000 + 1) // 2
    high, low = divmod(value, powers.get(split))
    return integer_digits(high, width - split, powers) + integer_digits(low, split, powers)
