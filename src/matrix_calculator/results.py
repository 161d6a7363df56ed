"""Result records produced by the sizing pipeline.

Each stage returns one frozen dataclass. ``default()`` builds the empty
record substituted when a stage fails, so downstream stages and the cost
rollup always see a complete structure.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from matrix_calculator.selectors import (
    CoolingType,
    GeneratorModel,
    RDHXModel,
    RedundancyMode,
    RPDUSize,
    TapOffBox,
    UPSFrame,
    ClimateZone,
    BUSBAR_RATINGS_A,
)


@dataclass(frozen=True)
class RackSummary:
    kw_per_rack: float
    total_racks: int
    total_it_load_kw: float


# =============================================================================
# Electrical
# =============================================================================

@dataclass(frozen=True)
class ElectricalResult:
    """Distribution sizing for one row of racks.

    Attributes:
        current_per_row_a: Row current at 14 racks per row (A)
        current_per_rack_a: Single rack current (A)
        busbar_size_a: Selected busbar rating (A)
        busbars_per_row: Busbars needed to carry the row current
        tap_off_box: Tap-off box selector
        rpdu: rPDU selector
        multiplicity_warning: Set when one busbar cannot carry the row
    """
    current_per_row_a: int
    current_per_rack_a: int
    busbar_size_a: int
    busbars_per_row: int
    tap_off_box: TapOffBox
    rpdu: RPDUSize
    multiplicity_warning: Optional[str] = None

    @classmethod
    def default(cls) -> "ElectricalResult":
        return cls(0, 0, BUSBAR_RATINGS_A[0], 1, TapOffBox.STANDARD_63A, RPDUSize.STANDARD_80A)


# =============================================================================
# Cooling
# =============================================================================

@dataclass(frozen=True)
class CoolingResult:
    cooling_type: CoolingType
    total_capacity_kw: float
    dlc_capacity_kw: float          # liquid loop share
    residual_capacity_kw: float     # air share
    flow_rate_lpm: float
    piping_size: str                # "none", "dn110" or "dn160"
    rdhx_units: int = 0
    rdhx_model: Optional[RDHXModel] = None
    immersion_tanks: int = 0
    pue: float = 1.0

    @classmethod
    def default(cls, cooling_type: CoolingType = CoolingType.AIR) -> "CoolingResult":
        return cls(cooling_type, 0.0, 0.0, 0.0, 0.0, "none")


@dataclass(frozen=True)
class ThermalDistribution:
    liquid_cooling_percentage: float
    air_cooling_percentage: float
    liquid_load_kw: float
    air_load_kw: float
    pue: float
    water_usage_l_per_day: float

    @classmethod
    def default(cls) -> "ThermalDistribution":
        return cls(0.0, 100.0, 0.0, 0.0, 1.0, 0.0)


@dataclass(frozen=True)
class PipeSizingResult:
    flow_rate_lpm: float
    flow_rate_m3_s: float
    required_diameter_mm: float
    nominal_size: str
    inner_diameter_mm: float
    velocity_m_s: float
    pressure_drop_kpa_per_100m: float
    warning: Optional[str] = None


# =============================================================================
# Power
# =============================================================================

@dataclass(frozen=True)
class UPSResult:
    redundancy_mode: RedundancyMode
    redundancy_factor: float
    required_capacity_kw: float
    modules_needed: int
    frames_needed: int
    frame_size: UPSFrame
    installed_capacity_kw: float

    @classmethod
    def default(cls, redundancy_mode: RedundancyMode = RedundancyMode.N_PLUS_1) -> "UPSResult":
        return cls(redundancy_mode, 0.0, 0.0, 0, 0, UPSFrame.FRAME_2_MODULE, 0.0)


@dataclass(frozen=True)
class BatteryResult:
    runtime_minutes: float
    energy_needed_kwh: float
    cabinets_needed: int
    weight_kg: float

    @classmethod
    def default(cls) -> "BatteryResult":
        return cls(0.0, 0.0, 0, 0.0)


@dataclass(frozen=True)
class GeneratorResult:
    included: bool
    capacity_kva: float = 0.0
    model: GeneratorModel = GeneratorModel.NONE
    fuel_consumption_lph: float = 0.0
    tank_size_l: float = 0.0

    @classmethod
    def default(cls) -> "GeneratorResult":
        return cls(included=False)


@dataclass(frozen=True)
class PowerResult:
    ups: UPSResult
    battery: BatteryResult
    generator: GeneratorResult


# =============================================================================
# Reliability, sustainability
# =============================================================================

@dataclass(frozen=True)
class ReliabilityResult:
    ups_availability: float
    generator_availability: Optional[float]
    cooling_availability: float
    power_availability: float
    redundancy_factor: float
    system_availability: float
    availability_percentage: float
    tier: str
    annual_downtime_minutes: float
    redundancy_description: str

    @classmethod
    def default(cls) -> "ReliabilityResult":
        return cls(0.0, None, 0.0, 0.0, 0.0, 0.0, 0.0, "Tier I", 525600.0, "")


@dataclass(frozen=True)
class SustainabilityResult:
    annual_it_energy_kwh: float
    annual_total_energy_kwh: float
    annual_overhead_energy_kwh: float
    pue: float
    water_usage_m3: float
    water_usage_effectiveness: float   # L/kWh of IT energy
    water_recycled: bool
    waste_heat_recovered_kwh: float
    waste_heat_value: float
    renewable_percentage: float

    @classmethod
    def default(cls) -> "SustainabilityResult":
        return cls(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, False, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class CarbonFootprintResult:
    grid_emissions_kg: float
    generator_emissions_kg: float
    total_emissions_kg: float
    total_emissions_tonnes: float
    avoided_emissions_kg: float
    carbon_intensity: float            # kg CO2 per kWh of total energy

    @classmethod
    def default(cls) -> "CarbonFootprintResult":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


# =============================================================================
# Cost
# =============================================================================

@dataclass(frozen=True)
class ElectricalCost:
    busbar: float = 0.0
    tap_off_box: float = 0.0
    rpdu: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class PowerCost:
    ups: float = 0.0
    battery: float = 0.0
    generator: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class CostResult:
    electrical: ElectricalCost
    cooling: float
    power: PowerCost
    infrastructure: float
    sustainability: float
    equipment_total: float
    installation: float
    engineering: float
    contingency: float
    total_project_cost: float
    cost_per_rack: float
    cost_per_kw: float

    @classmethod
    def default(cls) -> "CostResult":
        return cls(ElectricalCost(), 0.0, PowerCost(), 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class TCOResult:
    capital_cost: float
    annual_energy_cost: float
    annual_maintenance_cost: float
    annual_operational_cost: float
    annual_operating_cost: float
    lifespan_years: int
    npv: float
    annualized_tco: float
    total_5_year: float
    total_10_year: float

    @classmethod
    def default(cls) -> "TCOResult":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ClimateFactor:
    zone: ClimateZone
    nominal_temperature_c: float
    cooling_factor: float
    pue_factor: float
    region: str = "Default"
    electricity_rate: float = 0.15  # per kWh
    carbon_intensity_grid: float = 0.5  # kg CO2/kWh
    renewable_percentage: float = 20.0  # regional grid share (%)


# =============================================================================
# Full result
# =============================================================================

def _plain(items) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


@dataclass(frozen=True)
class CalculationResult:
    rack: RackSummary
    electrical: ElectricalResult
    cooling: CoolingResult
    thermal_distribution: ThermalDistribution
    pipe_sizing: Optional[PipeSizingResult]
    power: PowerResult
    reliability: ReliabilityResult
    sustainability: SustainabilityResult
    carbon_footprint: CarbonFootprintResult
    cost: CostResult
    tco: TCOResult
    climate: Optional[ClimateFactor] = None
    degraded_stages: Tuple[str, ...] = field(default_factory=tuple)
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested mapping with enum selectors as their string values."""
        result = asdict(self, dict_factory=_plain)
        result["degraded_stages"] = list(self.degraded_stages)
        return result
