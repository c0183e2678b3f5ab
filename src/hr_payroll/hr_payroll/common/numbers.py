from __future__ import annotations

import math


def round_half_up(value: float, places: int = 0) -> float:
    """Round with halves going up, e.g. 2.345 -> 2.35 and 0.5 -> 1.

    Python's round() uses banker's rounding; payroll figures need half-up.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor
