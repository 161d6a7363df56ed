"""Rounding helpers shared by the sizing stages.

Reported quantities round half away from zero (2.5 → 3), not to even.
"""

import numpy as np


def round_half_up(value: float, ndigits: int = 0) -> float:
    scale = 10.0 ** ndigits
    return float(np.sign(value) * np.floor(abs(value) * scale + 0.5) / scale)


def round_int(value: float) -> int:
    return int(round_half_up(value))


def ceil_int(value: float) -> int:
    return int(np.ceil(value))


def round_money(value: float) -> float:
    """Currency amounts are carried to the cent."""
    return round_half_up(value, 2)
