"""Site climate and regional energy adjustment."""

from .climate import (
    CLIMATE_ZONES,
    ENERGY_REGIONS,
    RegionalEnergyRates,
    climate_for_location,
    climate_zone_for_latitude,
    effective_cooling_factor,
    energy_region_for_location,
    regional_energy_rates,
)

__all__ = [
    'CLIMATE_ZONES',
    'ENERGY_REGIONS',
    'RegionalEnergyRates',
    'climate_for_location',
    'climate_zone_for_latitude',
    'effective_cooling_factor',
    'energy_region_for_location',
    'regional_energy_rates',
]
