"""Cooling Capacity Sizing

Heat rejection sizing for the four supported technologies:

    air        capacity = 1.1 × P_IT, rear-door heat exchangers at 150 kW each
    dlc        liquid loop takes (1 - f_residual) of P_IT, room air the rest
    hybrid     liquid share r_hybrid, air share (1 - r_hybrid) on RDHX units
    immersion  capacity = 1.05 × P_IT, one tank per 4 racks,
               fluid removes 80% of the heat

Coolant flow:
    Q_flow = P_liquid × k_flow      [L/min, k_flow in L/min/kW]

PUE uses a fixed per-technology coefficient whose facility overhead
(PUE - 1) is scaled by the chiller efficiency factor and, for sited
projects, by the climate PUE factor.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from matrix_calculator.calculation_params import CoolingParams
from matrix_calculator.results import ClimateFactor, CoolingResult, ThermalDistribution
from matrix_calculator.rounding import ceil_int, round_half_up
from matrix_calculator.selectors import CoolingType, RDHXModel

logger = logging.getLogger(__name__)

RDHX_UNIT_CAPACITY_KW = 150.0
RACKS_PER_IMMERSION_TANK = 4
AIR_MARGIN = 1.1
IMMERSION_MARGIN = 1.05
IMMERSION_FLUID_HEAT_FRACTION = 0.8
DLC_LARGE_LOOP_KW = 1000.0


@dataclass(frozen=True)
class CoolingProfile:
    """Per-technology coefficients.

    Attributes:
        name: Display name
        max_density_kw: Highest practical rack density (kW/rack)
        pue: Nominal PUE
        water_usage: Evaporative water use (L/h per kW of IT load)
        cost_factor: Maintenance cost multiplier relative to air
    """
    name: str
    max_density_kw: float
    pue: float
    water_usage: float
    cost_factor: float


COOLING_PROFILES: Dict[CoolingType, CoolingProfile] = {
    CoolingType.AIR: CoolingProfile("Air Cooling", 75.0, 1.4, 0.5, 1.0),
    CoolingType.DLC: CoolingProfile("Direct Liquid Cooling", 200.0, 1.15, 1.2, 1.5),
    CoolingType.HYBRID: CoolingProfile("Hybrid Cooling", 150.0, 1.25, 0.9, 1.3),
    CoolingType.IMMERSION: CoolingProfile("Immersion Cooling", 250.0, 1.08, 0.3, 2.0),
}


def cooling_profile(cooling_type: CoolingType) -> CoolingProfile:
    return COOLING_PROFILES.get(cooling_type, COOLING_PROFILES[CoolingType.AIR])


def select_rdhx_model(kw_per_rack: float) -> RDHXModel:
    if kw_per_rack <= 15:
        return RDHXModel.BASIC
    if kw_per_rack <= 30:
        return RDHXModel.STANDARD
    return RDHXModel.HIGH_DENSITY


def calculate_pue(cooling_type: CoolingType, params: CoolingParams,
                  climate: Optional[ClimateFactor] = None) -> float:
    """Effective PUE for a cooling technology."""
    overhead = (cooling_profile(cooling_type).pue - 1.0) * params.chiller_efficiency_factor
    pue = 1.0 + overhead
    if climate is not None:
        pue *= climate.pue_factor
    return round_half_up(pue, 4)


def size_cooling(kw_per_rack: float, total_racks: int, cooling_type: CoolingType,
                 params: CoolingParams, climate_factor: float = 1.0,
                 climate: Optional[ClimateFactor] = None) -> CoolingResult:
    """Size cooling plant for ``total_racks`` racks of ``kw_per_rack``.

    Args:
        kw_per_rack: Rack density (kW)
        total_racks: Rack count
        cooling_type: Heat rejection technology
        params: Cooling loop parameters
        climate_factor: Capacity multiplier for the site climate
        climate: Site climate, used for the PUE adjustment

    Returns:
        CoolingResult; piping_size is "none" for air cooling
    """
    load = kw_per_rack * total_racks
    pue = calculate_pue(cooling_type, params, climate)

    if cooling_type is CoolingType.DLC:
        capacity = load * climate_factor
        liquid = capacity * (1.0 - params.dlc_residual_heat_fraction)
        residual = capacity * params.dlc_residual_heat_fraction
        return CoolingResult(
            cooling_type=cooling_type,
            total_capacity_kw=capacity,
            dlc_capacity_kw=liquid,
            residual_capacity_kw=residual,
            flow_rate_lpm=liquid * params.flow_rate_factor,
            piping_size="dn160" if liquid > DLC_LARGE_LOOP_KW else "dn110",
            pue=pue,
        )

    if cooling_type is CoolingType.HYBRID:
        liquid = load * params.hybrid_cooling_ratio * climate_factor
        air = load * (1.0 - params.hybrid_cooling_ratio) * climate_factor
        return CoolingResult(
            cooling_type=cooling_type,
            total_capacity_kw=liquid + air,
            dlc_capacity_kw=liquid,
            residual_capacity_kw=air,
            flow_rate_lpm=liquid * params.flow_rate_factor,
            piping_size="dn110",
            rdhx_units=ceil_int(air / RDHX_UNIT_CAPACITY_KW),
            rdhx_model=RDHXModel.AVERAGE,
            pue=pue,
        )

    if cooling_type is CoolingType.IMMERSION:
        capacity = load * IMMERSION_MARGIN * climate_factor
        return CoolingResult(
            cooling_type=cooling_type,
            total_capacity_kw=capacity,
            dlc_capacity_kw=capacity,
            residual_capacity_kw=0.0,
            flow_rate_lpm=capacity * params.flow_rate_factor * IMMERSION_FLUID_HEAT_FRACTION,
            piping_size="dn110",
            immersion_tanks=ceil_int(total_racks / RACKS_PER_IMMERSION_TANK),
            pue=pue,
        )

    capacity = load * AIR_MARGIN * climate_factor
    return CoolingResult(
        cooling_type=CoolingType.AIR,
        total_capacity_kw=capacity,
        dlc_capacity_kw=0.0,
        residual_capacity_kw=capacity,
        flow_rate_lpm=0.0,
        piping_size="none",
        rdhx_units=ceil_int(capacity / RDHX_UNIT_CAPACITY_KW),
        rdhx_model=select_rdhx_model(kw_per_rack),
        pue=pue,
    )


def liquid_fraction(cooling_type: CoolingType, params: CoolingParams) -> float:
    """Share of the IT heat removed by liquid (0-1)."""
    if cooling_type is CoolingType.DLC:
        return 1.0 - params.dlc_residual_heat_fraction
    if cooling_type is CoolingType.HYBRID:
        return params.hybrid_cooling_ratio
    if cooling_type is CoolingType.IMMERSION:
        return 1.0
    return 0.0


def thermal_distribution(total_it_load_kw: float, cooling_type: CoolingType,
                         params: CoolingParams, pue: float) -> ThermalDistribution:
    """Split of the IT heat load between liquid and air paths."""
    fraction = liquid_fraction(cooling_type, params)
    water = total_it_load_kw * cooling_profile(cooling_type).water_usage * 24
    return ThermalDistribution(
        liquid_cooling_percentage=round_half_up(fraction * 100, 1),
        air_cooling_percentage=round_half_up((1.0 - fraction) * 100, 1),
        liquid_load_kw=round_half_up(total_it_load_kw * fraction, 2),
        air_load_kw=round_half_up(total_it_load_kw * (1.0 - fraction), 2),
        pue=pue,
        water_usage_l_per_day=round_half_up(water, 1),
    )
