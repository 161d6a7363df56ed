"""Total Cost of Ownership

Capital plus lifetime operating cost, inflated and discounted to present
value.

Key equations:
    C_op    = E_total × c_kWh + C_cap × m% × k_cooling (+15% with generator) + C_cap × o%
    NPV     = C_cap + Σ_{y=1..L} C_op × (1 + i)^y / (1 + d)^y
    TCO_ann = NPV / L
"""

import numpy as np

from matrix_calculator.calculation_params import CostFactors, TCOParams
from matrix_calculator.results import TCOResult
from matrix_calculator.rounding import round_money
from matrix_calculator.selectors import CoolingType
from matrix_calculator.thermal.cooling import cooling_profile

# Generator upkeep as a share of the base maintenance budget
GENERATOR_MAINTENANCE_SHARE = 0.15


def present_value_factors(years: int, inflation_rate: float, discount_rate: float) -> np.ndarray:
    """Per-year multipliers (1 + i)^y / (1 + d)^y for y = 1..years."""
    y = np.arange(1, years + 1)
    return (1.0 + inflation_rate) ** y / (1.0 + discount_rate) ** y


def calculate_tco(capital_cost: float, annual_energy_kwh: float, cooling_type: CoolingType,
                  include_generator: bool, cost_factors: CostFactors,
                  params: TCOParams) -> TCOResult:
    """Lifetime cost of a deployment.

    Args:
        capital_cost: Total project cost
        annual_energy_kwh: Annual facility energy including overhead (kWh)
        cooling_type: Scales maintenance by the technology's cost factor
        include_generator: Adds generator maintenance
        cost_factors: Maintenance and operational percentages
        params: Tariff, rates and lifespan

    Returns:
        TCOResult with NPV, annualized TCO and flat 5/10-year totals
    """
    energy = annual_energy_kwh * params.electricity_rate
    base_maintenance = capital_cost * cost_factors.maintenance_percentage
    maintenance = base_maintenance * cooling_profile(cooling_type).cost_factor
    if include_generator:
        maintenance += base_maintenance * GENERATOR_MAINTENANCE_SHARE
    operational = capital_cost * cost_factors.operational_percentage
    annual = energy + maintenance + operational

    factors = present_value_factors(params.lifespan_years, params.inflation_rate, params.discount_rate)
    npv = capital_cost + float(np.sum(annual * factors))

    return TCOResult(
        capital_cost=round_money(capital_cost),
        annual_energy_cost=round_money(energy),
        annual_maintenance_cost=round_money(maintenance),
        annual_operational_cost=round_money(operational),
        annual_operating_cost=round_money(annual),
        lifespan_years=params.lifespan_years,
        npv=round_money(npv),
        annualized_tco=round_money(npv / params.lifespan_years),
        total_5_year=round_money(capital_cost + annual * 5),
        total_10_year=round_money(capital_cost + annual * 10),
    )
