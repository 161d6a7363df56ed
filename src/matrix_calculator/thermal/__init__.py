"""Thermal management: cooling capacity, thermal distribution and pipe sizing."""

from matrix_calculator.thermal.cooling import (
    COOLING_PROFILES,
    CoolingProfile,
    calculate_pue,
    cooling_profile,
    size_cooling,
    thermal_distribution,
)
from matrix_calculator.thermal.piping import get_nominal_pipe_size, size_pipe

__all__ = [
    "COOLING_PROFILES",
    "CoolingProfile",
    "calculate_pue",
    "cooling_profile",
    "size_cooling",
    "thermal_distribution",
    "get_nominal_pipe_size",
    "size_pipe",
]
