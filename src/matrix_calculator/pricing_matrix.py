"""Unit cost tables for the cost rollup.

The pricing matrix is grouped per component family. Keys follow the
selector values produced by the sizing stages (``standard63A``,
``frame4Module``, ``generator2000kva``), so the cost rollup prices a
selection with a single ``price(section, key)`` lookup.

Every selector has a default price. Stored documents may carry additional
keys per section; those are kept and are reachable through ``price`` too.
A lookup that misses resolves to 0 and logs a warning.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class _PriceSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    def get(self, key: str) -> Optional[float]:
        """Price for a store key or field name, None when absent."""
        for name, info in type(self).model_fields.items():
            if key == name or key == info.alias:
                return float(getattr(self, name))
        value = (self.model_extra or {}).get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return None


class BusbarPricing(_PriceSection):
    base_1250a: float = Field(42000.0, alias="base1250A", ge=0)
    base_2000a: float = Field(65000.0, alias="base2000A", ge=0)
    per_meter: float = Field(1200.0, alias="perMeter", ge=0)
    copper_premium: float = Field(1.0, alias="copperPremium", ge=0)


class TapOffBoxPricing(_PriceSection):
    standard_63a: float = Field(1200.0, alias="standard63A", ge=0)
    custom_100a: float = Field(1500.0, alias="custom100A", ge=0)
    custom_150a: float = Field(1800.0, alias="custom150A", ge=0)
    custom_200a: float = Field(2100.0, alias="custom200A", ge=0)
    custom_250a: float = Field(2400.0, alias="custom250A", ge=0)


class RPDUPricing(_PriceSection):
    standard_80a: float = Field(3500.0, alias="standard80A", ge=0)
    standard_112a: float = Field(4200.0, alias="standard112A", ge=0)


class CoolerPricing(_PriceSection):
    tcs310a_xht: float = Field(75000.0, alias="tcs310aXht", ge=0)
    grundfos_pump: float = Field(15000.0, alias="grundfosPump", ge=0)
    buffer_tank: float = Field(8000.0, alias="bufferTank", ge=0)
    immersion_tank: float = Field(80000.0, alias="immersionTank", ge=0)
    immersion_cdu: float = Field(150000.0, alias="immersionCDU", ge=0)


class RDHXPricing(_PriceSection):
    basic: float = Field(6000.0, ge=0)
    standard: float = Field(8000.0, ge=0)
    high_density: float = Field(12000.0, alias="highDensity", ge=0)
    average: float = Field(8000.0, ge=0)
    high_end: float = Field(12000.0, alias="highEnd", ge=0)


class PipingPricing(_PriceSection):
    dn110_per_meter: float = Field(350.0, alias="dn110PerMeter", ge=0)
    dn160_per_meter: float = Field(520.0, alias="dn160PerMeter", ge=0)
    valve_dn110: float = Field(1200.0, alias="valveDn110", ge=0)
    valve_dn160: float = Field(1800.0, alias="valveDn160", ge=0)


class UPSPricing(_PriceSection):
    frame_2_module: float = Field(120000.0, alias="frame2Module", ge=0)
    frame_4_module: float = Field(180000.0, alias="frame4Module", ge=0)
    frame_6_module: float = Field(240000.0, alias="frame6Module", ge=0)
    module_250kw: float = Field(45000.0, alias="module250kw", ge=0)


class BatteryPricing(_PriceSection):
    revo_tp240_cabinet: float = Field(35000.0, alias="revoTp240Cabinet", ge=0)


class GeneratorPricing(_PriceSection):
    generator_1000kva: float = Field(200000.0, alias="generator1000kva", ge=0)
    generator_2000kva: float = Field(350000.0, alias="generator2000kva", ge=0)
    generator_3000kva: float = Field(500000.0, alias="generator3000kva", ge=0)
    fuel_tank_per_liter: float = Field(2.0, alias="fuelTankPerLiter", ge=0)


class EHousePricing(_PriceSection):
    base: float = Field(120000.0, ge=0)
    per_sq_meter: float = Field(5000.0, alias="perSqMeter", ge=0)


class SustainabilityPricing(_PriceSection):
    heat_recovery_system: float = Field(100000.0, alias="heatRecoverySystem", ge=0)
    water_recycling_system: float = Field(80000.0, alias="waterRecyclingSystem", ge=0)
    solar_panel_per_kw: float = Field(1500.0, alias="solarPanelPerKw", ge=0)


class PricingMatrix(BaseModel):
    """Unit costs per component family."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    busbar: BusbarPricing = Field(default_factory=BusbarPricing)
    tap_off_box: TapOffBoxPricing = Field(default_factory=TapOffBoxPricing, alias="tapOffBox")
    rpdu: RPDUPricing = Field(default_factory=RPDUPricing)
    cooler: CoolerPricing = Field(default_factory=CoolerPricing)
    rdhx: RDHXPricing = Field(default_factory=RDHXPricing)
    piping: PipingPricing = Field(default_factory=PipingPricing)
    ups: UPSPricing = Field(default_factory=UPSPricing)
    battery: BatteryPricing = Field(default_factory=BatteryPricing)
    generator: GeneratorPricing = Field(default_factory=GeneratorPricing)
    e_house: EHousePricing = Field(default_factory=EHousePricing, alias="eHouse")
    sustainability: SustainabilityPricing = Field(default_factory=SustainabilityPricing)

    def section(self, name: str) -> Optional[_PriceSection]:
        for field_name, info in type(self).model_fields.items():
            if name == field_name or name == info.alias:
                return getattr(self, field_name)
        return None

    def price(self, section: str, key: str) -> float:
        """Unit price for ``key`` in ``section``; 0 when either is unknown."""
        table = self.section(section)
        value = table.get(key) if table is not None else None
        if value is None:
            logger.warning(f"No price for '{section}.{key}', using 0")
            return 0.0
        return value

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


DEFAULT_PRICING = PricingMatrix()
