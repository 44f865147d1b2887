"""Rounding helpers shared by the simulation.

Python's built-in ``round`` uses banker's rounding; simulation quantities
(percentages, cargo per tick, loading times) round halves away from zero.
"""

import math


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves rounding up.

    Args:
        value: Value to round.

    Returns:
        Rounded integer.

    Examples:
        >>> round_half_up(37.5)
        38
        >>> round_half_up(2.4)
        2
    """
    return math.floor(value + 0.5)
