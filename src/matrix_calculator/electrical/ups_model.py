"""UPS, Battery and Generator Sizing

Modular UPS array, battery cabinet and standby generator sizing for a
given IT load and redundancy scheme.

Key equations:
    P_required = P_IT × k_redundancy
    n_modules  = ⌈P_required / P_module⌉
    n_frames   = ⌈n_modules / modules_per_frame⌉
    E_battery  = P_IT × t_runtime / (60 × η_battery)      [kWh]
    S_gen      = ⌈P_required × k_headroom / S_unit⌉ × S_unit  [kVA]

Battery cabinets hold 40 kWh and weigh 1200 kg each.
"""

import logging
from typing import Optional

from matrix_calculator.calculation_params import GeneratorParams, PowerParams
from matrix_calculator.reliability import redundancy_capacity_factor
from matrix_calculator.results import BatteryResult, GeneratorResult, UPSResult
from matrix_calculator.rounding import ceil_int, round_half_up
from matrix_calculator.selectors import GeneratorModel, RedundancyMode, UPSFrame

logger = logging.getLogger(__name__)

CABINET_ENERGY_KWH = 40.0
CABINET_WEIGHT_KG = 1200.0

# Headroom applied to the generator input when UPS sizing is unavailable
GENERATOR_GUARD_FACTOR = 1.2


def select_ups_frame(modules_needed: int) -> UPSFrame:
    if modules_needed <= 2:
        return UPSFrame.FRAME_2_MODULE
    if modules_needed <= 4:
        return UPSFrame.FRAME_4_MODULE
    return UPSFrame.FRAME_6_MODULE


def size_ups(total_it_load_kw: float, redundancy_mode: RedundancyMode,
             params: PowerParams) -> UPSResult:
    """Size the modular UPS array.

    Args:
        total_it_load_kw: Total IT load (kW)
        redundancy_mode: Redundancy scheme
        params: Module size and frame capacity

    Returns:
        UPSResult with at least one module and one frame
    """
    factor = redundancy_capacity_factor(redundancy_mode)
    required = total_it_load_kw * factor
    modules = max(1, ceil_int(required / params.ups_module_size))
    frames = max(1, ceil_int(modules / params.ups_frame_max_modules))

    return UPSResult(
        redundancy_mode=redundancy_mode,
        redundancy_factor=factor,
        required_capacity_kw=required,
        modules_needed=modules,
        frames_needed=frames,
        frame_size=select_ups_frame(modules),
        installed_capacity_kw=modules * params.ups_module_size,
    )


def size_battery(total_it_load_kw: float, params: PowerParams) -> BatteryResult:
    """Size battery cabinets for the configured runtime."""
    runtime = params.battery_runtime
    energy = total_it_load_kw * runtime / (60.0 * params.battery_efficiency)
    cabinets = max(1, ceil_int(energy / CABINET_ENERGY_KWH))
    return BatteryResult(
        runtime_minutes=runtime,
        energy_needed_kwh=round_half_up(energy, 2),
        cabinets_needed=cabinets,
        weight_kg=cabinets * CABINET_WEIGHT_KG,
    )


def select_generator_model(capacity_kva: float) -> GeneratorModel:
    if capacity_kva <= 1000:
        return GeneratorModel.KVA_1000
    if capacity_kva <= 2000:
        return GeneratorModel.KVA_2000
    return GeneratorModel.KVA_3000


def size_generator(required_capacity_kw: Optional[float], include_generator: bool,
                   params: GeneratorParams) -> GeneratorResult:
    """Size the standby generator from the UPS required capacity.

    Capacity is rounded up to whole ``rounding_unit_kva`` blocks after
    ``sizing_factor`` headroom.
    """
    if not include_generator:
        return GeneratorResult.default()
    if required_capacity_kw is None:
        raise ValueError("Generator sizing needs the UPS required capacity")

    blocks = ceil_int(required_capacity_kw * params.sizing_factor / params.rounding_unit_kva)
    capacity = max(1, blocks) * params.rounding_unit_kva
    consumption = capacity * params.fuel_consumption_rate

    return GeneratorResult(
        included=True,
        capacity_kva=capacity,
        model=select_generator_model(capacity),
        fuel_consumption_lph=consumption,
        tank_size_l=consumption * params.fuel_tank_runtime,
    )


def guarded_generator_input(ups: Optional[UPSResult], kw_per_rack: float, total_racks: int) -> float:
    """Generator input capacity, falling back to 1.2× IT load without a UPS result."""
    if ups is not None and ups.required_capacity_kw > 0:
        return ups.required_capacity_kw
    fallback = total_racks * kw_per_rack * GENERATOR_GUARD_FACTOR
    logger.warning(f"UPS required capacity unavailable, sizing generator from {fallback:.1f} kW")
    return fallback
