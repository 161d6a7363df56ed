"""Calculation parameters for the sizing pipeline.

Tunable coefficients grouped per subsystem. Documents coming from the
backing store use camelCase keys (``voltageFactor``, ``dlcResidualHeatFraction``),
so every field carries its store alias and the models accept either form.

Parameters are validated at construction and frozen afterwards; each
calculation receives an effective copy produced by the ``with_*`` update
functions rather than mutating a shared record.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from matrix_calculator.selectors import RedundancyMode, parse_redundancy_mode


class _ParamsSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class ElectricalParams(_ParamsSection):
    """Low-voltage distribution parameters."""
    voltage_factor: float = Field(400.0, alias="voltageFactor", gt=0)
    power_factor: float = Field(0.9, alias="powerFactor", gt=0, le=1)
    busbars_per_row: int = Field(1, alias="busbarsPerRow", ge=1)
    redundancy_mode: RedundancyMode = Field(RedundancyMode.N_PLUS_1, alias="redundancyMode")

    @field_validator("redundancy_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> RedundancyMode:
        # Unknown modes in stored documents fall back to N+1
        return parse_redundancy_mode(value)


class CoolingParams(_ParamsSection):
    """Cooling loop parameters.

    Attributes:
        delta_t: Supply/return temperature difference (°C)
        flow_rate_factor: Coolant flow per kW of liquid heat (L/min/kW)
        dlc_residual_heat_fraction: Share of DLC rack heat left for air (0-1)
        chiller_efficiency_factor: Multiplier on facility cooling overhead
        hybrid_cooling_ratio: Liquid share of a hybrid deployment (0-1)
        max_pipe_velocity: Velocity ceiling for pipe selection (m/s)
    """
    delta_t: float = Field(10.0, alias="deltaT", gt=0)
    flow_rate_factor: float = Field(2.22, alias="flowRateFactor", ge=0)
    dlc_residual_heat_fraction: float = Field(0.25, alias="dlcResidualHeatFraction", ge=0, le=1)
    chiller_efficiency_factor: float = Field(1.0, alias="chillerEfficiencyFactor", gt=0)
    hybrid_cooling_ratio: float = Field(0.7, alias="hybridCoolingRatio", ge=0, le=1)
    max_pipe_velocity: float = Field(2.5, alias="maxPipeVelocity", gt=0)


class PowerParams(_ParamsSection):
    """UPS, battery and e-house parameters."""
    ups_module_size: float = Field(250.0, alias="upsModuleSize", gt=0)  # kW
    ups_frame_max_modules: int = Field(6, alias="upsFrameMaxModules", ge=1)
    battery_runtime: float = Field(10.0, alias="batteryRuntime", gt=0)  # minutes
    battery_efficiency: float = Field(0.95, alias="batteryEfficiency", gt=0, le=1)
    e_house_base_sqm: float = Field(20.0, alias="eHouseBaseSqm", ge=0)  # per UPS frame
    e_house_battery_sqm: float = Field(5.0, alias="eHouseBatterySqm", ge=0)  # per cabinet


class GeneratorParams(_ParamsSection):
    """Standby generator sizing parameters."""
    sizing_factor: float = Field(1.2, alias="sizingFactor", ge=1)
    rounding_unit_kva: float = Field(500.0, alias="roundingUnitKva", gt=0)
    fuel_consumption_rate: float = Field(0.2, alias="fuelConsumptionRate", ge=0)  # L/h per kVA
    fuel_tank_runtime: float = Field(8.0, alias="fuelTankRuntime", ge=0)  # hours
    test_hours_per_year: float = Field(24.0, alias="testHoursPerYear", ge=0)
    test_load_factor: float = Field(0.8, alias="testLoadFactor", ge=0, le=1)
    e_house_sqm: float = Field(30.0, alias="eHouseSqm", ge=0)


class CostFactors(_ParamsSection):
    """Project cost add-ons as fractions of the equipment subtotal."""
    installation_percentage: float = Field(0.15, alias="installationPercentage", ge=0, le=1)
    engineering_percentage: float = Field(0.10, alias="engineeringPercentage", ge=0, le=1)
    contingency_percentage: float = Field(0.05, alias="contingencyPercentage", ge=0, le=1)
    maintenance_percentage: float = Field(0.03, alias="maintenancePercentage", ge=0, le=1)
    operational_percentage: float = Field(0.02, alias="operationalPercentage", ge=0, le=1)


class CoolingThresholds(_ParamsSection):
    """Rack density thresholds used by recommendations (kW/rack)."""
    air_cooled_max: float = Field(75.0, alias="airCooledMax", gt=0)
    recommended_dlc_min: float = Field(75.0, alias="recommendedDlcMin", gt=0)


class SustainabilityParams(_ParamsSection):
    """Emission intensities and recovery rates."""
    carbon_intensity_grid: float = Field(0.35, alias="carbonIntensityGrid", ge=0)  # kg CO2/kWh
    carbon_intensity_diesel: float = Field(0.8, alias="carbonIntensityDiesel", ge=0)  # kg CO2/kWh
    water_recovery_rate: float = Field(0.6, alias="waterRecoveryRate", ge=0, le=1)
    waste_heat_recovery_rate: float = Field(0.4, alias="wasteHeatRecoveryRate", ge=0, le=1)
    renewable_energy_fraction: float = Field(0.2, alias="renewableEnergyFraction", ge=0, le=1)
    heat_value_per_kwh: float = Field(0.05, alias="heatValuePerKwh", ge=0)


class ReliabilityParams(_ParamsSection):
    """Component MTBF/MTTR (hours)."""
    mtbf_ups: float = Field(250000.0, alias="mtbfUps", gt=0)
    mtbf_generator: float = Field(175000.0, alias="mtbfGenerator", gt=0)
    mtbf_cooling: float = Field(200000.0, alias="mtbfCooling", gt=0)
    mttr_ups: float = Field(4.0, alias="mttrUps", ge=0)
    mttr_generator: float = Field(6.0, alias="mttrGenerator", ge=0)
    mttr_cooling: float = Field(8.0, alias="mttrCooling", ge=0)


class TCOParams(_ParamsSection):
    """Lifetime cost assumptions."""
    electricity_rate: float = Field(0.12, alias="electricityRate", ge=0)  # per kWh
    inflation_rate: float = Field(0.02, alias="inflationRate", ge=0, le=1)
    discount_rate: float = Field(0.05, alias="discountRate", ge=0, le=1)
    lifespan_years: int = Field(10, alias="lifespanYears", ge=1)


class CalculationParams(_ParamsSection):
    """Complete parameter record consumed by every pipeline stage."""
    electrical: ElectricalParams = Field(default_factory=ElectricalParams)
    cooling: CoolingParams = Field(default_factory=CoolingParams)
    power: PowerParams = Field(default_factory=PowerParams)
    generator: GeneratorParams = Field(default_factory=GeneratorParams)
    cost_factors: CostFactors = Field(default_factory=CostFactors, alias="costFactors")
    cooling_thresholds: CoolingThresholds = Field(default_factory=CoolingThresholds, alias="coolingThresholds")
    sustainability: SustainabilityParams = Field(default_factory=SustainabilityParams)
    reliability: ReliabilityParams = Field(default_factory=ReliabilityParams)
    tco: TCOParams = Field(default_factory=TCOParams)

    # -------------------------------------------------------------------------
    # Named section updates
    # -------------------------------------------------------------------------

    def with_redundancy_mode(self, mode) -> "CalculationParams":
        """Copy with the electrical redundancy mode replaced."""
        electrical = self.electrical.model_copy(
            update={"redundancy_mode": parse_redundancy_mode(mode, self.electrical.redundancy_mode)})
        return self.model_copy(update={"electrical": electrical})

    def with_battery_runtime(self, minutes: float) -> "CalculationParams":
        """Copy with the battery runtime replaced; non-positive values are ignored."""
        if not isinstance(minutes, (int, float)) or minutes <= 0:
            return self
        power = self.power.model_copy(update={"battery_runtime": float(minutes)})
        return self.model_copy(update={"power": power})

    def with_energy_rates(self, electricity_rate: float, carbon_intensity_grid: float) -> "CalculationParams":
        """Copy with a site's grid tariff and carbon intensity."""
        tco = self.tco.model_copy(update={"electricity_rate": float(electricity_rate)})
        sustainability = self.sustainability.model_copy(
            update={"carbon_intensity_grid": float(carbon_intensity_grid)})
        return self.model_copy(update={"tco": tco, "sustainability": sustainability})

    def to_document(self) -> Dict[str, Any]:
        """Serialize with store (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")


DEFAULT_CALCULATION_PARAMS = CalculationParams()
