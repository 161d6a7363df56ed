"""Matrix calculator: the full sizing and quoting pipeline.

    request → climate → electrical, cooling, power → reliability,
    sustainability, carbon → cost → TCO → CalculationResult

Each stage runs through ``run_stage``. A failing stage is replaced by its
default record and named in ``degraded_stages``; if the pipeline itself
breaks, the constant-factor fallback produces the result instead.
"""

import logging
from typing import Any, List, Optional

from matrix_calculator.cache import CalculationCache, make_key
from matrix_calculator.calculation_params import CalculationParams, DEFAULT_CALCULATION_PARAMS
from matrix_calculator.economics.cost_rollup import calculate_cost
from matrix_calculator.economics.sustainability import calculate_carbon_footprint, calculate_sustainability
from matrix_calculator.economics.tco import calculate_tco
from matrix_calculator.electrical.distribution import size_electrical
from matrix_calculator.electrical.ups_model import (
    guarded_generator_input,
    size_battery,
    size_generator,
    size_ups,
)
from matrix_calculator.environment.climate import climate_for_location, effective_cooling_factor
from matrix_calculator.fallback import fallback_calculation
from matrix_calculator.pricing_matrix import DEFAULT_PRICING, PricingMatrix
from matrix_calculator.provider import ParamsProvider, PricingAndParams
from matrix_calculator.reliability import calculate_reliability
from matrix_calculator.requests import CalculationRequest, normalize_request
from matrix_calculator.results import (
    BatteryResult,
    CalculationResult,
    CarbonFootprintResult,
    CoolingResult,
    CostResult,
    ElectricalResult,
    GeneratorResult,
    PowerResult,
    RackSummary,
    ReliabilityResult,
    SustainabilityResult,
    TCOResult,
    ThermalDistribution,
    UPSResult,
)
from matrix_calculator.selectors import CoolingType
from matrix_calculator.stages import StageResult, run_stage
from matrix_calculator.thermal.cooling import cooling_profile, size_cooling, thermal_distribution
from matrix_calculator.thermal.piping import size_pipe

logger = logging.getLogger(__name__)

LIQUID_LOOP_TYPES = (CoolingType.DLC, CoolingType.HYBRID)


class _Degradation:
    """Collects stage failures while the pipeline substitutes defaults."""

    def __init__(self):
        self.stages: List[str] = []

    def take(self, outcome: StageResult, default: Any) -> Any:
        if outcome.ok:
            return outcome.value
        self.stages.append(outcome.stage)
        return default


def effective_params(request: CalculationRequest, params: CalculationParams) -> CalculationParams:
    """Parameters with the request's overrides applied."""
    options = request.options
    if options.redundancy_mode is not None:
        params = params.with_redundancy_mode(options.redundancy_mode)
    if options.battery_runtime is not None:
        params = params.with_battery_runtime(options.battery_runtime)
    return params


def config_fingerprint(config: PricingAndParams) -> str:
    """Canonical key of a pricing/parameter pair."""
    return make_key({"pricing": config.pricing.to_document(), "params": config.params.to_document()})


class MatrixCalculator:
    """Data-center sizing and quoting engine.

    Args:
        provider: Source of pricing and parameters (defaults only when omitted)
        result_cache: Optional cache of results keyed by the normalized request
            and the pricing and parameters in force
    """

    def __init__(self, provider: Optional[ParamsProvider] = None,
                 result_cache: Optional[CalculationCache] = None):
        self.provider = provider if provider is not None else ParamsProvider()
        self.result_cache = result_cache

    def pricing_and_params(self) -> PricingAndParams:
        try:
            return self.provider.get_pricing_and_params()
        except Exception as exc:
            logger.error(f"Parameter provider failed: {exc}; using defaults")
            return PricingAndParams(pricing=DEFAULT_PRICING, params=DEFAULT_CALCULATION_PARAMS)

    def config_fingerprint(self) -> str:
        """Identity of the pricing and parameters currently in force."""
        return config_fingerprint(self.pricing_and_params())

    def calculate(self, kw_per_rack: Any, cooling_type: Any, total_racks: Any,
                  options: Any = None) -> CalculationResult:
        """Size and price a deployment.

        Args:
            kw_per_rack: Rack density (kW); invalid values become 10
            cooling_type: "air", "dlc", "hybrid" or "immersion"; invalid values become air
            total_racks: Rack count; invalid values become 28
            options: CalculationOptions or a mapping of option fields

        Returns:
            CalculationResult, from the fallback calculator if the pipeline fails
        """
        request = normalize_request(kw_per_rack, cooling_type, total_racks, options)
        config = self.pricing_and_params()
        cache_key = {"request": request.cache_key(), "config": config_fingerprint(config)}
        if self.result_cache is not None:
            cached = self.result_cache.get(cache_key)
            if cached is not None:
                return cached

        try:
            result = self._run_pipeline(request, config.pricing, config.params)
        except Exception as exc:
            logger.error(f"Calculation pipeline failed: {type(exc).__name__}: {exc}")
            return fallback_calculation(request)

        if self.result_cache is not None:
            self.result_cache.set(cache_key, result)
        return result

    def _run_pipeline(self, request: CalculationRequest, pricing: PricingMatrix,
                      params: CalculationParams) -> CalculationResult:
        params = effective_params(request, params)
        options = request.options
        mode = params.electrical.redundancy_mode
        cooling_type = request.cooling_type
        kw, racks = request.kw_per_rack, request.total_racks
        load = request.total_it_load_kw
        degraded = _Degradation()

        climate = None
        climate_factor = 1.0
        if options.location is not None:
            climate = degraded.take(run_stage("climate", climate_for_location, options.location), None)
            if climate is not None:
                climate_factor = effective_cooling_factor(climate, cooling_type)
                params = params.with_energy_rates(climate.electricity_rate, climate.carbon_intensity_grid)

        electrical = degraded.take(
            run_stage("electrical", size_electrical, kw, params.electrical),
            ElectricalResult.default())

        cooling = degraded.take(
            run_stage("cooling", size_cooling, kw, racks, cooling_type, params.cooling,
                      climate_factor, climate),
            CoolingResult.default(cooling_type))
        pue = cooling.pue if cooling.total_capacity_kw > 0 else cooling_profile(cooling_type).pue

        thermal = degraded.take(
            run_stage("thermal_distribution", thermal_distribution, load, cooling_type, params.cooling, pue),
            ThermalDistribution.default())

        pipe_sizing = None
        if cooling_type in LIQUID_LOOP_TYPES:
            pipe_sizing = degraded.take(
                run_stage("pipe_sizing", size_pipe, cooling.flow_rate_lpm, params.cooling.max_pipe_velocity),
                None)

        ups_outcome = run_stage("ups", size_ups, load, mode, params.power)
        ups = degraded.take(ups_outcome, UPSResult.default(mode))
        battery = degraded.take(
            run_stage("battery", size_battery, load, params.power),
            BatteryResult.default())
        generator_input = guarded_generator_input(ups_outcome.value, kw, racks)
        generator = degraded.take(
            run_stage("generator", size_generator, generator_input, options.include_generator, params.generator),
            GeneratorResult.default())
        power = PowerResult(ups=ups, battery=battery, generator=generator)

        reliability = degraded.take(
            run_stage("reliability", calculate_reliability, mode, generator.included, params.reliability),
            ReliabilityResult.default())

        sustainability = degraded.take(
            run_stage("sustainability", calculate_sustainability, load, pue, cooling_type,
                      options.sustainability_options, params.sustainability),
            SustainabilityResult.default())
        carbon = degraded.take(
            run_stage("carbon_footprint", calculate_carbon_footprint,
                      sustainability.annual_total_energy_kwh, sustainability.renewable_percentage,
                      generator, params.sustainability, params.generator),
            CarbonFootprintResult.default())

        cost = degraded.take(
            run_stage("cost", calculate_cost, request, electrical, cooling, power, pricing, params),
            CostResult.default())
        tco = degraded.take(
            run_stage("tco", calculate_tco, cost.total_project_cost, sustainability.annual_total_energy_kwh,
                      cooling_type, generator.included, params.cost_factors, params.tco),
            TCOResult.default())

        if degraded.stages:
            logger.warning(f"Calculation completed with degraded stages: {', '.join(degraded.stages)}")

        return CalculationResult(
            rack=RackSummary(kw_per_rack=kw, total_racks=racks, total_it_load_kw=load),
            electrical=electrical,
            cooling=cooling,
            thermal_distribution=thermal,
            pipe_sizing=pipe_sizing,
            power=power,
            reliability=reliability,
            sustainability=sustainability,
            carbon_footprint=carbon,
            cost=cost,
            tco=tco,
            climate=climate,
            degraded_stages=tuple(degraded.stages),
            is_fallback=False,
        )


def calculate(kw_per_rack: Any, cooling_type: Any, total_racks: Any,
              options: Any = None) -> CalculationResult:
    """Run a calculation with default pricing and parameters."""
    return MatrixCalculator().calculate(kw_per_rack, cooling_type, total_racks, options)
