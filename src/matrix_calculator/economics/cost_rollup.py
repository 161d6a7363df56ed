"""Project cost rollup.

Prices the selections of the electrical, cooling and power stages against
the pricing matrix, then adds installation, engineering and contingency as
percentages of the equipment subtotal.

All amounts are carried to the cent and every total is the sum of its
already-rounded parts, so

    total_project_cost == equipment_total + installation + engineering + contingency

holds exactly.
"""

import logging

from matrix_calculator.calculation_params import CalculationParams
from matrix_calculator.pricing_matrix import PricingMatrix
from matrix_calculator.requests import CalculationRequest
from matrix_calculator.results import (
    CoolingResult,
    CostResult,
    ElectricalCost,
    ElectricalResult,
    PowerCost,
    PowerResult,
)
from matrix_calculator.rounding import round_money
from matrix_calculator.selectors import CoolingType, RDHXModel, TapOffBox

logger = logging.getLogger(__name__)

BUSBAR_RUN_M = 30
DLC_PIPE_RUN_M = 100
DLC_VALVES = 10
HYBRID_PIPE_RUN_M = 50
HYBRID_CHILLER_SHARE = 0.7
IMMERSION_PIPE_RUN_M = 50
SOLAR_OVERSIZE = 1.5


def busbar_cost(rating_a: int, pricing: PricingMatrix) -> float:
    base_key = "base1250A" if rating_a <= 1250 else "base2000A"
    return pricing.price("busbar", base_key) + pricing.price("busbar", "perMeter") * BUSBAR_RUN_M


def cooling_cost(cooling: CoolingResult, total_racks: int, pricing: PricingMatrix) -> float:
    """Equipment cost of the cooling plant."""
    p = pricing.price
    if cooling.cooling_type is CoolingType.DLC:
        size = "dn160" if cooling.piping_size == "dn160" else "dn110"
        return (p("cooler", "tcs310aXht") + p("cooler", "grundfosPump") + p("cooler", "bufferTank")
                + p("piping", f"{size}PerMeter") * DLC_PIPE_RUN_M
                + p("piping", f"valve{size.capitalize()}") * DLC_VALVES)

    if cooling.cooling_type is CoolingType.HYBRID:
        liquid = (p("cooler", "tcs310aXht") * HYBRID_CHILLER_SHARE
                  + p("cooler", "grundfosPump") + p("cooler", "bufferTank")
                  + p("piping", "dn110PerMeter") * HYBRID_PIPE_RUN_M)
        air = p("rdhx", RDHXModel.AVERAGE.value) * max(1, cooling.rdhx_units)
        return liquid + air

    if cooling.cooling_type is CoolingType.IMMERSION:
        tanks = cooling.immersion_tanks or -(-total_racks // 4)
        return (p("cooler", "immersionTank") * tanks + p("cooler", "immersionCDU")
                + p("piping", "dn110PerMeter") * IMMERSION_PIPE_RUN_M)

    model = cooling.rdhx_model or RDHXModel.STANDARD
    return p("rdhx", model.value) * cooling.rdhx_units


def e_house_area(power: PowerResult, params: CalculationParams) -> float:
    """Prefabricated electrical room floor area (m²)."""
    area = (params.power.e_house_base_sqm * power.ups.frames_needed
            + params.power.e_house_battery_sqm * power.battery.cabinets_needed)
    if power.generator.included:
        area += params.generator.e_house_sqm
    return area


def calculate_cost(request: CalculationRequest, electrical: ElectricalResult,
                   cooling: CoolingResult, power: PowerResult,
                   pricing: PricingMatrix, params: CalculationParams) -> CostResult:
    """Cost breakdown for a sized deployment.

    DLC racks are always fed through custom250A tap-off boxes.
    """
    p = pricing.price
    racks = request.total_racks
    load = request.total_it_load_kw

    tap_off = TapOffBox.CUSTOM_250A if request.cooling_type is CoolingType.DLC else electrical.tap_off_box
    busbar = round_money(busbar_cost(electrical.busbar_size_a, pricing) * electrical.busbars_per_row)
    tap_off_cost = round_money(p("tapOffBox", tap_off.value) * racks)
    rpdu = round_money(p("rpdu", electrical.rpdu.value) * racks)
    electrical_cost = ElectricalCost(busbar, tap_off_cost, rpdu, round_money(busbar + tap_off_cost + rpdu))

    cooling_total = round_money(cooling_cost(cooling, racks, pricing))

    ups = round_money(p("ups", power.ups.frame_size.value) * power.ups.frames_needed
                      + p("ups", "module250kw") * power.ups.modules_needed)
    battery = round_money(p("battery", "revoTp240Cabinet") * power.battery.cabinets_needed)
    generator = 0.0
    if power.generator.included:
        generator = round_money(p("generator", power.generator.model.price_key)
                                + power.generator.tank_size_l * p("generator", "fuelTankPerLiter"))
    power_cost = PowerCost(ups, battery, generator, round_money(ups + battery + generator))

    infrastructure = round_money(p("eHouse", "base") + p("eHouse", "perSqMeter") * e_house_area(power, params))

    options = request.options.sustainability_options
    sustainability = 0.0
    if options.enable_waste_heat_recovery:
        sustainability += p("sustainability", "heatRecoverySystem")
    if options.enable_water_recycling:
        sustainability += p("sustainability", "waterRecyclingSystem")
    if options.renewable_energy_percentage:
        solar_kw = load * options.renewable_energy_percentage / 100.0 * SOLAR_OVERSIZE
        sustainability += solar_kw * p("sustainability", "solarPanelPerKw")
    sustainability = round_money(sustainability)

    equipment = round_money(electrical_cost.total + cooling_total + power_cost.total
                            + infrastructure + sustainability)
    factors = params.cost_factors
    installation = round_money(equipment * factors.installation_percentage)
    engineering = round_money(equipment * factors.engineering_percentage)
    contingency = round_money(equipment * factors.contingency_percentage)
    total = round_money(equipment + installation + engineering + contingency)

    return CostResult(
        electrical=electrical_cost,
        cooling=cooling_total,
        power=power_cost,
        infrastructure=infrastructure,
        sustainability=sustainability,
        equipment_total=equipment,
        installation=installation,
        engineering=engineering,
        contingency=contingency,
        total_project_cost=total,
        cost_per_rack=total / (racks or 1),
        cost_per_kw=total / (load or 1),
    )
