"""Site climate and regional energy adjustment.

Coarse climate zone from latitude and the resulting cooling capacity and
PUE multipliers. Warm sites (nominal temperature above 25 °C) run 5% worse
PUE, cooler sites 5% better. Liquid cooling is half as sensitive to the
climate as air cooling.

The grid tariff, carbon intensity and renewable share come from a coarse
region picked by longitude band:

    Australia      latitude < 0 and longitude > 100
    Europe         -30 < longitude < 40
    Asia           40 < longitude < 180
    North America  everywhere else
"""

import logging
from dataclasses import dataclass
from typing import Dict

from matrix_calculator.requests import Location
from matrix_calculator.results import ClimateFactor
from matrix_calculator.selectors import ClimateZone, CoolingType

logger = logging.getLogger(__name__)

WARM_SITE_THRESHOLD_C = 25.0
WARM_PUE_FACTOR = 1.05
COOL_PUE_FACTOR = 0.95


@dataclass(frozen=True)
class ZoneProfile:
    max_abs_latitude: float
    nominal_temperature_c: float
    cooling_factor: float
    humidity_factor: float


# Ordered by latitude band, equator first
CLIMATE_ZONES: Dict[ClimateZone, ZoneProfile] = {
    ClimateZone.TROPICAL: ZoneProfile(23.5, 28.0, 1.2, 1.15),
    ClimateZone.ARID: ZoneProfile(35.0, 25.0, 1.15, 0.9),
    ClimateZone.TEMPERATE: ZoneProfile(50.0, 15.0, 1.0, 1.0),
    ClimateZone.CONTINENTAL: ZoneProfile(66.5, 5.0, 0.95, 0.95),
    ClimateZone.POLAR: ZoneProfile(90.0, -5.0, 0.9, 0.9),
}


@dataclass(frozen=True)
class RegionalEnergyRates:
    """Grid supply characteristics for a region."""
    region: str
    electricity_rate: float  # per kWh
    carbon_intensity_grid: float  # kg CO2/kWh
    renewable_percentage: float  # %


ENERGY_REGIONS: Dict[str, RegionalEnergyRates] = {
    "North America": RegionalEnergyRates("North America", 0.12, 0.45, 18.0),
    "Europe": RegionalEnergyRates("Europe", 0.22, 0.35, 30.0),
    "Asia": RegionalEnergyRates("Asia", 0.15, 0.60, 15.0),
    "Australia": RegionalEnergyRates("Australia", 0.25, 0.50, 22.0),
}

DEFAULT_ENERGY_RATES = RegionalEnergyRates("Default", 0.15, 0.5, 20.0)


def climate_zone_for_latitude(latitude: float) -> ClimateZone:
    abs_lat = abs(latitude)
    for zone, profile in CLIMATE_ZONES.items():
        if abs_lat < profile.max_abs_latitude:
            return zone
    return ClimateZone.POLAR


def energy_region_for_location(location: Location) -> str:
    lat, lon = location.latitude, location.longitude
    if lat < 0 and lon > 100:
        return "Australia"
    if -30 < lon < 40:
        return "Europe"
    if 40 < lon < 180:
        return "Asia"
    return "North America"


def regional_energy_rates(location: Location) -> RegionalEnergyRates:
    """Tariff, carbon intensity and renewable share for a site."""
    region = energy_region_for_location(location)
    return ENERGY_REGIONS.get(region, DEFAULT_ENERGY_RATES)


def climate_for_location(location: Location) -> ClimateFactor:
    """Climate multipliers and regional energy rates for a site."""
    zone = climate_zone_for_latitude(location.latitude)
    profile = CLIMATE_ZONES[zone]
    pue_factor = WARM_PUE_FACTOR if profile.nominal_temperature_c > WARM_SITE_THRESHOLD_C else COOL_PUE_FACTOR
    rates = regional_energy_rates(location)
    logger.debug(f"Location ({location.latitude}, {location.longitude}) → {zone.value}, {rates.region}")
    return ClimateFactor(
        zone=zone,
        nominal_temperature_c=profile.nominal_temperature_c,
        cooling_factor=profile.cooling_factor,
        pue_factor=pue_factor,
        region=rates.region,
        electricity_rate=rates.electricity_rate,
        carbon_intensity_grid=rates.carbon_intensity_grid,
        renewable_percentage=rates.renewable_percentage,
    )


def effective_cooling_factor(climate: ClimateFactor, cooling_type: CoolingType) -> float:
    """Capacity multiplier for a cooling technology at this site."""
    if cooling_type is CoolingType.DLC:
        return 1.0 + (climate.cooling_factor - 1.0) * 0.5
    return climate.cooling_factor
