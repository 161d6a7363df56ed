"""Low-Voltage Distribution Sizing

Row and rack current draw with busbar, tap-off box and rPDU selection for
three-phase distribution.

Key equations:
    I_row  = P_rack × 14 × 1000 / (V × √3 × PF)
    I_rack = P_rack × 1000 / (V × √3 × PF)

A row is 14 racks. The busbar is the smallest standard rating that carries
the row current; rows beyond the largest rating need several busbars.
"""

import bisect
import logging

import numpy as np

from matrix_calculator.calculation_params import ElectricalParams
from matrix_calculator.results import ElectricalResult
from matrix_calculator.rounding import ceil_int, round_int
from matrix_calculator.selectors import (
    BUSBAR_RATINGS_A,
    MAX_BUSBAR_RATING_A,
    RPDUSize,
    TapOffBox,
)

logger = logging.getLogger(__name__)

RACKS_PER_ROW = 14

# Upper current bound (A) → selector; anything above the last bound gets custom250A
TAP_OFF_BRACKETS = (
    (63, TapOffBox.STANDARD_63A),
    (100, TapOffBox.CUSTOM_100A),
    (150, TapOffBox.CUSTOM_150A),
    (200, TapOffBox.CUSTOM_200A),
)
RPDU_BRACKETS = (
    (80, RPDUSize.STANDARD_80A),
)


def three_phase_current(power_kw: float, params: ElectricalParams) -> float:
    """Line current (A) drawn by ``power_kw`` on a three-phase feed."""
    return power_kw * 1000.0 / (params.voltage_factor * np.sqrt(3) * params.power_factor)


def select_busbar(current_a: float) -> int:
    """Smallest standard busbar rating ≥ ``current_a``; the largest if none fits."""
    idx = bisect.bisect_left(BUSBAR_RATINGS_A, current_a)
    if idx >= len(BUSBAR_RATINGS_A):
        return MAX_BUSBAR_RATING_A
    return BUSBAR_RATINGS_A[idx]


def select_tap_off_box(current_a: float) -> TapOffBox:
    for limit, selector in TAP_OFF_BRACKETS:
        if current_a <= limit:
            return selector
    return TapOffBox.CUSTOM_250A


def select_rpdu(current_a: float) -> RPDUSize:
    for limit, selector in RPDU_BRACKETS:
        if current_a <= limit:
            return selector
    return RPDUSize.STANDARD_112A


def size_electrical(kw_per_rack: float, params: ElectricalParams) -> ElectricalResult:
    """Size the row distribution for racks of ``kw_per_rack``."""
    current_per_row = round_int(three_phase_current(kw_per_rack * RACKS_PER_ROW, params))
    current_per_rack = round_int(three_phase_current(kw_per_rack, params))

    busbar = select_busbar(current_per_row)
    busbars_per_row = max(params.busbars_per_row, ceil_int(current_per_row / MAX_BUSBAR_RATING_A))
    warning = None
    if current_per_row > MAX_BUSBAR_RATING_A:
        warning = (f"Row current {current_per_row} A exceeds a single {MAX_BUSBAR_RATING_A} A busbar; "
                   f"{busbars_per_row} busbars per row required")
        logger.warning(warning)

    return ElectricalResult(
        current_per_row_a=current_per_row,
        current_per_rack_a=current_per_rack,
        busbar_size_a=busbar,
        busbars_per_row=busbars_per_row,
        tap_off_box=select_tap_off_box(current_per_rack),
        rpdu=select_rpdu(current_per_rack),
        multiplicity_warning=warning,
    )
