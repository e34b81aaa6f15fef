"""Decimal exponent of a positive rational.

:func:`locate_exponent` finds the integer ``e`` with
``10**e <= n/d < 10**(e+1)`` without expanding the fraction. The estimate
comes from the bit lengths of the two terms and is then checked against
exact integer comparisons, stepping to the adjacent power of ten while the
bracket does not hold.
"""

from __future__ import annotations

import math

from decimalnotation.errors import InvalidArgumentError
from decimalnotation.powers import PowersOfTen, get_powers_of_ten

LOG10_OF_2 = math.log10(2)


def locate_exponent(
    numerator: int,
    denominator: int,
    powers: PowersOfTen | None = None,
) -> tuple[int, int]:
    """Locate the decimal exponent of ``numerator / denominator``.

    Args:
        numerator: Numerator of a positive value.
        denominator: Denominator of a positive value. Both terms may be
            negative as long as the quotient is positive.
        powers: Powers-of-ten cache (defaults to the shared one).

    Returns:
        ``(exponent, power)`` where ``power`` is ``10 ** abs(exponent)``.
        Dividing the value by ``power`` (for ``exponent >= 0``) or multiplying
        it by ``power`` (for ``exponent < 0``) brings it into ``[1, 10)``.

    Raises:
        InvalidArgumentError: If the value is not strictly positive.

    Example:
        >>> locate_exponent(400, 3)
        (2, 100)
        >>> locate_exponent(1, 2000)
        (-4, 10000)
    """
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    if numerator <= 0 or denominator <= 0:
        raise InvalidArgumentError(
            "numerator", "exponent is only defined for strictly positive values"
        )

    powers = powers or get_powers_of_ten()
    numerator_bits = numerator.bit_length()
    denominator_bits = denominator.bit_length()

    # Same bit length: the ratio is in [0.5, 2).
    if numerator_bits == denominator_bits:
        if numerator >= denominator:
            return 0, 1
        return -1, powers.get(1)

    if numerator_bits > denominator_bits:
        # An L-bit number is at least 2**(L-1).
        diff = numerator_bits - denominator_bits
        exponent = math.floor((diff - 1) * LOG10_OF_2) + 1
        power = powers.get(exponent)

        while exponent > 0 and numerator < denominator * power:
            power = powers.previous(power, exponent)
            exponent -= 1

        following = powers.next(power, exponent)
        while numerator >= denominator * following:
            power = following
            exponent += 1
            following = powers.next(power, exponent)

        return exponent, power

    # Smallest k with numerator * 10**k >= denominator.
    diff = denominator_bits - numerator_bits
    k = max(math.ceil(diff * LOG10_OF_2) - 1, 0)
    power = powers.get(k)

    while numerator * power < denominator:
        power = powers.next(power, k)
        k += 1

    while k > 1:
        smaller = powers.previous(power, k)
        if numerator * smaller < denominator:
            break
        power = smaller
        k -= 1

    return -k, power
