"""Reduced-fidelity calculator used when the sizing pipeline fails outright.

Produces the full CalculationResult shape from constant-factor formulas
that only depend on the request, so a caller always receives a usable
quote. Nominal PUE and availability keep the same ordering across cooling
types and redundancy modes as the full pipeline, and the cost breakdown
keeps the project cost identity.
"""

import logging
import math

from matrix_calculator.reliability import classify_tier
from matrix_calculator.requests import CalculationRequest
from matrix_calculator.results import (
    BatteryResult,
    CalculationResult,
    CarbonFootprintResult,
    CoolingResult,
    CostResult,
    ElectricalCost,
    ElectricalResult,
    GeneratorResult,
    PowerCost,
    PowerResult,
    RackSummary,
    ReliabilityResult,
    SustainabilityResult,
    TCOResult,
    ThermalDistribution,
    UPSResult,
)
from matrix_calculator.rounding import round_half_up, round_money
from matrix_calculator.selectors import (
    BUSBAR_RATINGS_A,
    MAX_BUSBAR_RATING_A,
    CoolingType,
    GeneratorModel,
    RDHXModel,
    RedundancyMode,
    RPDUSize,
    TapOffBox,
    UPSFrame,
)
from matrix_calculator.thermal.cooling import COOLING_PROFILES

logger = logging.getLogger(__name__)

VOLTAGE = 400.0
POWER_FACTOR = 0.9
EQUIPMENT_COST_PER_FACILITY_KW = 7700.0
GRID_INTENSITY = 0.35
ELECTRICITY_RATE = 0.12
LIFESPAN_YEARS = 10

# mode → (capacity factor, availability)
MODE_CONSTANTS = {
    RedundancyMode.N: (1.0, 0.999),
    RedundancyMode.N_PLUS_1: (1.2, 0.9999),
    RedundancyMode.TWO_N: (2.0, 0.99999),
    RedundancyMode.TWO_N_PLUS_1: (2.2, 0.999995),
    RedundancyMode.THREE_N: (3.0, 0.999999),
}

# cooling type → liquid share of the heat
LIQUID_SHARE = {
    CoolingType.AIR: 0.0,
    CoolingType.DLC: 0.75,
    CoolingType.HYBRID: 0.7,
    CoolingType.IMMERSION: 1.0,
}


def _fallback_cooling(request: CalculationRequest, pue: float) -> CoolingResult:
    load = request.total_it_load_kw
    cooling_type = request.cooling_type
    share = LIQUID_SHARE[cooling_type]
    margin = 1.05 if cooling_type is CoolingType.IMMERSION else (1.1 if cooling_type is CoolingType.AIR else 1.0)
    capacity = load * margin
    liquid = capacity * share
    air = capacity - liquid
    rdhx_units = math.ceil(air / 150.0) if cooling_type in (CoolingType.AIR, CoolingType.HYBRID) else 0
    if cooling_type is CoolingType.AIR:
        rdhx_model = RDHXModel.BASIC if request.kw_per_rack <= 15 else (
            RDHXModel.STANDARD if request.kw_per_rack <= 30 else RDHXModel.HIGH_DENSITY)
    elif cooling_type is CoolingType.HYBRID:
        rdhx_model = RDHXModel.AVERAGE
    else:
        rdhx_model = None
    return CoolingResult(
        cooling_type=cooling_type,
        total_capacity_kw=capacity,
        dlc_capacity_kw=liquid,
        residual_capacity_kw=air,
        flow_rate_lpm=liquid * 2.22,
        piping_size="none" if cooling_type is CoolingType.AIR else "dn110",
        rdhx_units=rdhx_units,
        rdhx_model=rdhx_model,
        immersion_tanks=math.ceil(request.total_racks / 4) if cooling_type is CoolingType.IMMERSION else 0,
        pue=pue,
    )


def _fallback_power(request: CalculationRequest, mode: RedundancyMode, factor: float) -> PowerResult:
    load = request.total_it_load_kw
    required = load * factor
    modules = max(1, math.ceil(required / 250.0))
    frame = (UPSFrame.FRAME_2_MODULE if modules <= 2 else
             UPSFrame.FRAME_4_MODULE if modules <= 4 else UPSFrame.FRAME_6_MODULE)
    ups = UPSResult(mode, factor, required, modules, max(1, math.ceil(modules / 6)), frame, modules * 250.0)

    runtime = request.options.battery_runtime or 10.0
    energy = load * runtime / 60.0
    cabinets = max(1, math.ceil(energy / 40.0))
    battery = BatteryResult(runtime, round_half_up(energy, 2), cabinets, cabinets * 1200.0)

    generator = GeneratorResult.default()
    if request.options.include_generator:
        capacity = max(1, math.ceil(required * 1.2 / 500.0)) * 500.0
        model = (GeneratorModel.KVA_1000 if capacity <= 1000 else
                 GeneratorModel.KVA_2000 if capacity <= 2000 else GeneratorModel.KVA_3000)
        generator = GeneratorResult(True, capacity, model, capacity * 0.2, capacity * 0.2 * 8)
    return PowerResult(ups, battery, generator)


def _fallback_cost(request: CalculationRequest, facility_kw: float, include_generator: bool) -> CostResult:
    equipment = round_money(facility_kw * EQUIPMENT_COST_PER_FACILITY_KW)
    tenth = round_money(equipment * 0.10)
    electrical = ElectricalCost(tenth, tenth, tenth, round_money(tenth * 3))
    cooling = round_money(equipment * 0.30)
    ups = round_money(equipment * (0.10 if include_generator else 0.15))
    battery = round_money(equipment * 0.05)
    generator = round_money(equipment * 0.05) if include_generator else 0.0
    power = PowerCost(ups, battery, generator, round_money(ups + battery + generator))
    sustainability = 0.0
    infrastructure = round_money(equipment - electrical.total - cooling - power.total - sustainability)

    installation = round_money(equipment * 0.15)
    engineering = round_money(equipment * 0.10)
    contingency = round_money(equipment * 0.05)
    total = round_money(equipment + installation + engineering + contingency)
    return CostResult(
        electrical=electrical,
        cooling=cooling,
        power=power,
        infrastructure=infrastructure,
        sustainability=sustainability,
        equipment_total=equipment,
        installation=installation,
        engineering=engineering,
        contingency=contingency,
        total_project_cost=total,
        cost_per_rack=total / (request.total_racks or 1),
        cost_per_kw=total / (request.total_it_load_kw or 1),
    )


def fallback_calculation(request: CalculationRequest) -> CalculationResult:
    """Constant-factor quote for ``request``; never raises for a valid request."""
    logger.warning(f"Using fallback calculation for {request.kw_per_rack} kW x {request.total_racks} "
                   f"racks ({request.cooling_type.value})")
    opts = request.options
    load = request.total_it_load_kw
    mode = opts.redundancy_mode or RedundancyMode.N_PLUS_1
    factor, availability = MODE_CONSTANTS[mode]
    profile = COOLING_PROFILES[request.cooling_type]
    pue = profile.pue

    current_row = round_half_up(request.kw_per_rack * 14 * 1000 / (VOLTAGE * math.sqrt(3) * POWER_FACTOR))
    current_rack = round_half_up(request.kw_per_rack * 1000 / (VOLTAGE * math.sqrt(3) * POWER_FACTOR))
    busbars = max(1, math.ceil(current_row / 2000))
    electrical = ElectricalResult(
        current_per_row_a=int(current_row),
        current_per_rack_a=int(current_rack),
        busbar_size_a=next((r for r in BUSBAR_RATINGS_A if r >= current_row), MAX_BUSBAR_RATING_A),
        busbars_per_row=busbars,
        tap_off_box=TapOffBox.STANDARD_63A if current_rack <= 63 else TapOffBox.CUSTOM_250A,
        rpdu=RPDUSize.STANDARD_80A if current_rack <= 80 else RPDUSize.STANDARD_112A,
    )

    cooling = _fallback_cooling(request, pue)
    share = LIQUID_SHARE[request.cooling_type]
    thermal = ThermalDistribution(share * 100, (1 - share) * 100, load * share, load * (1 - share),
                                  pue, load * profile.water_usage * 24)
    power = _fallback_power(request, mode, factor)

    downtime = (1 - availability) * 525600
    reliability = ReliabilityResult(
        ups_availability=availability,
        generator_availability=None,
        cooling_availability=1.0,
        power_availability=availability,
        redundancy_factor=1.0,
        system_availability=availability,
        availability_percentage=round_half_up(availability * 100, 4),
        tier=classify_tier(availability),
        annual_downtime_minutes=round_half_up(downtime, 1),
        redundancy_description=mode.value,
    )

    it_energy = load * 8760
    total_energy = it_energy * pue
    renewable = opts.sustainability_options.renewable_energy_percentage
    renewable = 20.0 if renewable is None else renewable
    water = load * profile.water_usage * 8760 / 1000
    if opts.sustainability_options.enable_water_recycling:
        water *= 0.4
    sustainability = SustainabilityResult(
        annual_it_energy_kwh=it_energy,
        annual_total_energy_kwh=total_energy,
        annual_overhead_energy_kwh=total_energy - it_energy,
        pue=pue,
        water_usage_m3=water,
        water_usage_effectiveness=water * 1000 / it_energy if it_energy else 0.0,
        water_recycled=opts.sustainability_options.enable_water_recycling,
        waste_heat_recovered_kwh=0.0,
        waste_heat_value=0.0,
        renewable_percentage=renewable,
    )
    grid = total_energy * (1 - renewable / 100) * GRID_INTENSITY
    carbon = CarbonFootprintResult(grid, 0.0, grid, grid / 1000, total_energy * renewable / 100 * GRID_INTENSITY,
                                   grid / total_energy if total_energy else 0.0)

    cost = _fallback_cost(request, load * pue * factor, opts.include_generator)
    annual = total_energy * ELECTRICITY_RATE + cost.total_project_cost * 0.05
    npv = cost.total_project_cost + annual * LIFESPAN_YEARS
    tco = TCOResult(
        capital_cost=cost.total_project_cost,
        annual_energy_cost=round_money(total_energy * ELECTRICITY_RATE),
        annual_maintenance_cost=round_money(cost.total_project_cost * 0.03),
        annual_operational_cost=round_money(cost.total_project_cost * 0.02),
        annual_operating_cost=round_money(annual),
        lifespan_years=LIFESPAN_YEARS,
        npv=round_money(npv),
        annualized_tco=round_money(npv / LIFESPAN_YEARS),
        total_5_year=round_money(cost.total_project_cost + annual * 5),
        total_10_year=round_money(npv),
    )

    return CalculationResult(
        rack=RackSummary(request.kw_per_rack, request.total_racks, load),
        electrical=electrical,
        cooling=cooling,
        thermal_distribution=thermal,
        pipe_sizing=None,
        power=power,
        reliability=reliability,
        sustainability=sustainability,
        carbon_footprint=carbon,
        cost=cost,
        tco=tco,
        climate=None,
        degraded_stages=(),
        is_fallback=True,
    )
