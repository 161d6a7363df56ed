"""Reliability Model

Steady-state availability of the power and cooling chain, adjusted for the
redundancy scheme, and the matching Uptime tier.

Key equations:
    A_component = MTBF / (MTBF + MTTR)
    A_power     = A_ups                          (no generator)
                = 1 - (1 - A_ups)(1 - A_gen)     (generator backed)
    A_system    = A_power × A_cooling × R_redundancy
    downtime    = (1 - A_system) × 525600 min/yr
"""

import logging
from dataclasses import dataclass
from typing import Dict, Union

from matrix_calculator.calculation_params import ReliabilityParams
from matrix_calculator.results import ReliabilityResult
from matrix_calculator.rounding import round_half_up
from matrix_calculator.selectors import RedundancyMode, parse_redundancy_mode

logger = logging.getLogger(__name__)

MINUTES_PER_YEAR = 365 * 24 * 60

# Capacity factor applied to modes outside the table
UNKNOWN_MODE_CAPACITY_FACTOR = 1.5


@dataclass(frozen=True)
class RedundancyProfile:
    """Sizing and reliability characteristics of a redundancy scheme.

    Attributes:
        description: Human-readable scheme description
        capacity_factor: Installed capacity / load
        reliability_factor: Availability multiplier
        cost_factor: Relative equipment cost versus N
    """
    description: str
    capacity_factor: float
    reliability_factor: float
    cost_factor: float


REDUNDANCY_PROFILES: Dict[RedundancyMode, RedundancyProfile] = {
    RedundancyMode.N: RedundancyProfile("No redundancy", 1.0, 0.98, 1.0),
    RedundancyMode.N_PLUS_1: RedundancyProfile("One redundant component", 1.2, 0.995, 1.2),
    RedundancyMode.TWO_N: RedundancyProfile("Full redundancy (two complete systems)", 2.0, 0.9998, 1.9),
    RedundancyMode.TWO_N_PLUS_1: RedundancyProfile("Full redundancy plus one component", 2.2, 0.99995, 2.1),
    RedundancyMode.THREE_N: RedundancyProfile("Triple redundancy", 3.0, 0.99999, 2.8),
}


def redundancy_capacity_factor(mode: Union[RedundancyMode, str]) -> float:
    """Installed-capacity multiplier for ``mode``.

    Strings outside the known schemes size at 1.5× load.
    """
    resolved = parse_redundancy_mode(mode, default=None)
    if resolved is None:
        logger.warning(f"Unknown redundancy mode {mode!r}, sizing at {UNKNOWN_MODE_CAPACITY_FACTOR}x load")
        return UNKNOWN_MODE_CAPACITY_FACTOR
    return REDUNDANCY_PROFILES[resolved].capacity_factor


def component_availability(mtbf_hours: float, mttr_hours: float) -> float:
    return mtbf_hours / (mtbf_hours + mttr_hours)


def classify_tier(availability: float) -> str:
    """Uptime tier for a system availability (0-1)."""
    if availability > 0.9999:
        return "Tier IV"
    if availability > 0.999:
        return "Tier III"
    if availability > 0.99:
        return "Tier II"
    return "Tier I"


def calculate_reliability(redundancy_mode: RedundancyMode, has_generator: bool,
                          params: ReliabilityParams) -> ReliabilityResult:
    """System availability for a redundancy scheme."""
    profile = REDUNDANCY_PROFILES.get(redundancy_mode, REDUNDANCY_PROFILES[RedundancyMode.N_PLUS_1])

    ups = component_availability(params.mtbf_ups, params.mttr_ups)
    cooling = component_availability(params.mtbf_cooling, params.mttr_cooling)
    generator = None
    power = ups
    if has_generator:
        generator = component_availability(params.mtbf_generator, params.mttr_generator)
        power = 1.0 - (1.0 - ups) * (1.0 - generator)

    system = power * cooling * profile.reliability_factor

    return ReliabilityResult(
        ups_availability=ups,
        generator_availability=generator,
        cooling_availability=cooling,
        power_availability=power,
        redundancy_factor=profile.reliability_factor,
        system_availability=system,
        availability_percentage=round_half_up(system * 100, 4),
        tier=classify_tier(system),
        annual_downtime_minutes=round_half_up((1.0 - system) * MINUTES_PER_YEAR, 1),
        redundancy_description=profile.description,
    )
