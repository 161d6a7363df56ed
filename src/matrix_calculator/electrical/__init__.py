"""Electrical Sizing

- Low-voltage distribution (busbar, tap-off box, rPDU)
- UPS array, battery cabinets and standby generator
"""

from matrix_calculator.electrical.distribution import (
    RACKS_PER_ROW,
    select_busbar,
    select_rpdu,
    select_tap_off_box,
    size_electrical,
    three_phase_current,
)
from matrix_calculator.electrical.ups_model import (
    guarded_generator_input,
    select_generator_model,
    select_ups_frame,
    size_battery,
    size_generator,
    size_ups,
)

__all__ = [
    "RACKS_PER_ROW",
    "select_busbar",
    "select_rpdu",
    "select_tap_off_box",
    "size_electrical",
    "three_phase_current",
    "guarded_generator_input",
    "select_generator_model",
    "select_ups_frame",
    "size_battery",
    "size_generator",
    "size_ups",
]
