"""Energy, water and carbon metrics.

Key equations:
    E_IT    = P_IT × 8760                       [kWh/yr]
    E_total = E_IT × PUE
    W       = P_IT × w_cooling × 8760 / 1000    [m³/yr], × (1 - r_recovery) when recycled
    WUE     = W × 1000 / E_IT                   [L/kWh]
    CO2     = E_total × (1 - RE%) × I_grid + S_gen × t_test × LF_test × I_diesel
"""

import logging
from typing import Any, Dict

from matrix_calculator.calculation_params import GeneratorParams, SustainabilityParams
from matrix_calculator.requests import SustainabilityOptions
from matrix_calculator.results import (
    CalculationResult,
    CarbonFootprintResult,
    GeneratorResult,
    SustainabilityResult,
)
from matrix_calculator.rounding import round_half_up
from matrix_calculator.selectors import CoolingType
from matrix_calculator.thermal.cooling import cooling_profile

logger = logging.getLogger(__name__)

HOURS_PER_YEAR = 8760


def renewable_percentage(options: SustainabilityOptions, params: SustainabilityParams) -> float:
    """Renewable share (0-100) from the request, else the site default."""
    if options.renewable_energy_percentage is not None:
        return options.renewable_energy_percentage
    return params.renewable_energy_fraction * 100.0


def calculate_sustainability(total_it_load_kw: float, pue: float, cooling_type: CoolingType,
                             options: SustainabilityOptions,
                             params: SustainabilityParams) -> SustainabilityResult:
    """Annual energy, water and heat recovery for a deployment."""
    it_energy = total_it_load_kw * HOURS_PER_YEAR
    total_energy = it_energy * pue

    water_m3 = total_it_load_kw * cooling_profile(cooling_type).water_usage * HOURS_PER_YEAR / 1000.0
    if options.enable_water_recycling:
        water_m3 *= (1.0 - params.water_recovery_rate)
    wue = water_m3 * 1000.0 / it_energy if it_energy > 0 else 0.0

    recovered = total_energy * params.waste_heat_recovery_rate if options.enable_waste_heat_recovery else 0.0

    return SustainabilityResult(
        annual_it_energy_kwh=round_half_up(it_energy, 1),
        annual_total_energy_kwh=round_half_up(total_energy, 1),
        annual_overhead_energy_kwh=round_half_up(total_energy - it_energy, 1),
        pue=pue,
        water_usage_m3=round_half_up(water_m3, 1),
        water_usage_effectiveness=round_half_up(wue, 4),
        water_recycled=options.enable_water_recycling,
        waste_heat_recovered_kwh=round_half_up(recovered, 1),
        waste_heat_value=round_half_up(recovered * params.heat_value_per_kwh, 2),
        renewable_percentage=renewable_percentage(options, params),
    )


def calculate_carbon_footprint(annual_total_energy_kwh: float, renewable_pct: float,
                               generator: GeneratorResult, params: SustainabilityParams,
                               generator_params: GeneratorParams) -> CarbonFootprintResult:
    """Annual emissions (kg CO2) from grid supply and generator testing."""
    share = renewable_pct / 100.0
    grid = annual_total_energy_kwh * (1.0 - share) * params.carbon_intensity_grid

    generator_em = 0.0
    if generator.included and generator.capacity_kva > 0:
        test_energy = (generator.capacity_kva * generator_params.test_hours_per_year
                       * generator_params.test_load_factor)
        generator_em = test_energy * params.carbon_intensity_diesel

    total = grid + generator_em
    avoided = annual_total_energy_kwh * share * params.carbon_intensity_grid
    intensity = total / annual_total_energy_kwh if annual_total_energy_kwh > 0 else 0.0

    return CarbonFootprintResult(
        grid_emissions_kg=round_half_up(grid, 1),
        generator_emissions_kg=round_half_up(generator_em, 1),
        total_emissions_kg=round_half_up(total, 1),
        total_emissions_tonnes=round_half_up(total / 1000.0, 2),
        avoided_emissions_kg=round_half_up(avoided, 1),
        carbon_intensity=round_half_up(intensity, 4),
    )


def _percent_of(saving: float, base: float) -> float:
    return round_half_up(saving / base * 100.0, 1) if base else 0.0


def calculate_carbon_savings(base: CalculationResult, optimized: CalculationResult) -> Dict[str, Any]:
    """Annual carbon, energy cost and energy saved by ``optimized`` against ``base``.

    Positive values are savings; percentages are of the base figures.
    """
    carbon = base.carbon_footprint.total_emissions_kg - optimized.carbon_footprint.total_emissions_kg
    cost = base.tco.annual_energy_cost - optimized.tco.annual_energy_cost
    energy = (base.sustainability.annual_total_energy_kwh
              - optimized.sustainability.annual_total_energy_kwh)
    return {
        "carbon_savings_kg": round_half_up(carbon, 1),
        "cost_savings": round_half_up(cost, 2),
        "energy_savings_kwh": round_half_up(energy, 1),
        "percentage_savings": {
            "carbon": _percent_of(carbon, base.carbon_footprint.total_emissions_kg),
            "cost": _percent_of(cost, base.tco.annual_energy_cost),
            "energy": _percent_of(energy, base.sustainability.annual_total_energy_kwh),
        },
    }
