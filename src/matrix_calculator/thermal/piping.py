"""Coolant Pipe Sizing

Selects the nominal pipe size for a liquid loop and reports velocity and
friction loss.

Key equations:
    d_min = √(4 Q / (π v_max))
    v     = 4 Q / (π d²)
    Re    = v d / ν
    f     = 0.25 / [log10(ε / 3.7d + 5.74 / Re^0.9)]²        (Swamee-Jain)
    Δp    = f (L / d) ρ v² / 2                               (Darcy-Weisbach)
"""

import bisect
import logging

import numpy as np

from matrix_calculator.results import PipeSizingResult
from matrix_calculator.rounding import round_half_up

logger = logging.getLogger(__name__)

# Nominal size → bore (mm), ascending
PIPE_SCHEDULE_MM = (
    ("DN50", 50.0),
    ("DN80", 80.0),
    ("DN100", 100.0),
    ("DN110", 110.0),
    ("DN125", 125.0),
    ("DN150", 150.0),
    ("DN160", 160.0),
    ("DN200", 200.0),
    ("DN250", 250.0),
)

WATER_DENSITY_KG_M3 = 998.0
WATER_KINEMATIC_VISCOSITY_M2_S = 1.004e-6
PIPE_ROUGHNESS_M = 1.5e-6       # drawn plastic
WARNING_VELOCITY_M_S = 3.0
REFERENCE_LENGTH_M = 100.0


def get_nominal_pipe_size(diameter_mm: float):
    """Smallest (name, bore) whose bore ≥ ``diameter_mm``; the largest if none."""
    bores = [bore for _, bore in PIPE_SCHEDULE_MM]
    idx = bisect.bisect_left(bores, diameter_mm)
    if idx >= len(PIPE_SCHEDULE_MM):
        return PIPE_SCHEDULE_MM[-1]
    return PIPE_SCHEDULE_MM[idx]


def swamee_jain_friction_factor(reynolds: float, diameter_m: float,
                                roughness_m: float = PIPE_ROUGHNESS_M) -> float:
    return 0.25 / np.log10(roughness_m / (3.7 * diameter_m) + 5.74 / reynolds ** 0.9) ** 2


def size_pipe(flow_rate_lpm: float, max_velocity_m_s: float = 2.5) -> PipeSizingResult:
    """Size the supply pipe for ``flow_rate_lpm``.

    Args:
        flow_rate_lpm: Coolant flow (L/min)
        max_velocity_m_s: Velocity ceiling used to pick the bore

    Returns:
        PipeSizingResult with the pressure drop per 100 m of pipe
    """
    flow_m3_s = max(flow_rate_lpm, 0.0) / 1000.0 / 60.0
    required_d_m = float(np.sqrt(4.0 * flow_m3_s / (np.pi * max_velocity_m_s)))
    name, bore_mm = get_nominal_pipe_size(required_d_m * 1000.0)
    bore_m = bore_mm / 1000.0

    velocity = 4.0 * flow_m3_s / (np.pi * bore_m ** 2)
    pressure_drop_kpa = 0.0
    if velocity > 0:
        reynolds = velocity * bore_m / WATER_KINEMATIC_VISCOSITY_M2_S
        friction = swamee_jain_friction_factor(reynolds, bore_m)
        pressure_drop_kpa = (friction * (REFERENCE_LENGTH_M / bore_m)
                             * WATER_DENSITY_KG_M3 * velocity ** 2 / 2.0 / 1000.0)

    warning = None
    if velocity > WARNING_VELOCITY_M_S:
        warning = f"Flow velocity {velocity:.2f} m/s exceeds recommended maximum ({WARNING_VELOCITY_M_S:g} m/s)"
        logger.warning(warning)

    return PipeSizingResult(
        flow_rate_lpm=flow_rate_lpm,
        flow_rate_m3_s=flow_m3_s,
        required_diameter_mm=round_half_up(required_d_m * 1000.0, 1),
        nominal_size=name,
        inner_diameter_mm=bore_mm,
        velocity_m_s=round_half_up(float(velocity), 2),
        pressure_drop_kpa_per_100m=round_half_up(float(pressure_drop_kpa), 2),
        warning=warning,
    )
