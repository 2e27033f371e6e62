"""Rounding helpers shared by the size, crop and slider logic."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round *value* to the nearest integer; halves round up.

    The value is first rounded to 9 decimals so that ``2.25 / 0.1``
    (``22.499999999999996``) snaps like ``22.5``.
    """

    return int(math.floor(round(value, 9) + 0.5))
