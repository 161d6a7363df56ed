"""Calculation requests and input coercion.

A request is built once per calculation from loosely typed caller input
(numbers, strings, mappings with camelCase or snake_case keys) and is
immutable afterwards. ``normalize_request`` never raises: anything that
does not make sense is replaced by a documented default and logged.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from matrix_calculator.selectors import (
    CoolingType,
    RedundancyMode,
    parse_cooling_type,
    parse_redundancy_mode,
)

logger = logging.getLogger(__name__)

DEFAULT_KW_PER_RACK = 10.0
DEFAULT_TOTAL_RACKS = 28
DEFAULT_RENEWABLE_PERCENTAGE = 20.0


@dataclass(frozen=True)
class SustainabilityOptions:
    """Optional sustainability add-ons.

    ``renewable_energy_percentage`` is 0-100; None means the site default
    from the calculation parameters applies and no solar array is quoted.
    """
    enable_waste_heat_recovery: bool = False
    enable_water_recycling: bool = False
    renewable_energy_percentage: Optional[float] = None


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    address: str = ""


@dataclass(frozen=True)
class CalculationOptions:
    """Per-request overrides of the calculation parameters."""
    redundancy_mode: Optional[RedundancyMode] = None
    include_generator: bool = False
    battery_runtime: Optional[float] = None  # minutes
    sustainability_options: SustainabilityOptions = field(default_factory=SustainabilityOptions)
    location: Optional[Location] = None


@dataclass(frozen=True)
class CalculationRequest:
    """Validated input to one pipeline run."""
    kw_per_rack: float
    cooling_type: CoolingType
    total_racks: int
    options: CalculationOptions = field(default_factory=CalculationOptions)

    @property
    def total_it_load_kw(self) -> float:
        return self.kw_per_rack * self.total_racks

    def cache_key(self) -> Dict[str, Any]:
        """JSON-serializable identity of the request."""
        opts = self.options
        sus = opts.sustainability_options
        loc = opts.location
        return {
            "kwPerRack": self.kw_per_rack,
            "coolingType": self.cooling_type.value,
            "totalRacks": self.total_racks,
            "redundancyMode": opts.redundancy_mode.value if opts.redundancy_mode else None,
            "includeGenerator": opts.include_generator,
            "batteryRuntime": opts.battery_runtime,
            "sustainabilityOptions": {
                "enableWasteHeatRecovery": sus.enable_waste_heat_recovery,
                "enableWaterRecycling": sus.enable_water_recycling,
                "renewableEnergyPercentage": sus.renewable_energy_percentage,
            },
            "location": None if loc is None else {
                "latitude": loc.latitude,
                "longitude": loc.longitude,
                "address": loc.address,
            },
        }


# =============================================================================
# Coercion helpers
# =============================================================================

def _pick(source: Any, *keys: str) -> Any:
    """First present value among ``keys`` from a mapping or an object."""
    if source is None:
        return None
    for key in keys:
        if isinstance(source, Mapping):
            if key in source:
                return source[key]
        elif hasattr(source, key):
            return getattr(source, key)
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def coerce_kw_per_rack(value: Any) -> float:
    number = _as_number(value)
    if number is None or number <= 0:
        logger.warning(f"Invalid kW per rack {value!r}, using {DEFAULT_KW_PER_RACK}")
        return DEFAULT_KW_PER_RACK
    return number


def coerce_total_racks(value: Any) -> int:
    number = _as_number(value)
    if number is None or number < 1:
        logger.warning(f"Invalid rack count {value!r}, using {DEFAULT_TOTAL_RACKS}")
        return DEFAULT_TOTAL_RACKS
    return int(number)


def coerce_cooling_type(value: Any) -> CoolingType:
    cooling = parse_cooling_type(value, default=None)
    if cooling is None:
        logger.warning(f"Invalid cooling type {value!r}, using air")
        return CoolingType.AIR
    return cooling


def _coerce_sustainability(source: Any) -> SustainabilityOptions:
    if isinstance(source, SustainabilityOptions):
        return source
    if source is None:
        return SustainabilityOptions()

    renewable = _pick(source, "renewableEnergyPercentage", "renewable_energy_percentage")
    percentage = None
    if renewable is not None:
        percentage = _as_number(renewable)
        if percentage is None or not 0 <= percentage <= 100:
            logger.warning(f"Invalid renewable percentage {renewable!r}, using {DEFAULT_RENEWABLE_PERCENTAGE}")
            percentage = DEFAULT_RENEWABLE_PERCENTAGE

    return SustainabilityOptions(
        enable_waste_heat_recovery=_as_bool(
            _pick(source, "enableWasteHeatRecovery", "enable_waste_heat_recovery")),
        enable_water_recycling=_as_bool(
            _pick(source, "enableWaterRecycling", "enable_water_recycling")),
        renewable_energy_percentage=percentage,
    )


def _coerce_location(source: Any) -> Optional[Location]:
    if source is None or isinstance(source, Location):
        return source
    latitude = _as_number(_pick(source, "latitude", "lat"))
    longitude = _as_number(_pick(source, "longitude", "lng", "lon"))
    if latitude is None or longitude is None or not -90 <= latitude <= 90:
        logger.warning(f"Ignoring invalid location {source!r}")
        return None
    address = _pick(source, "address")
    return Location(latitude=latitude, longitude=longitude,
                    address=address if isinstance(address, str) else "")


def coerce_options(source: Any) -> CalculationOptions:
    """Build options from a CalculationOptions, a mapping, or None."""
    if isinstance(source, CalculationOptions):
        return source
    if source is None:
        return CalculationOptions()

    mode_value = _pick(source, "redundancyMode", "redundancy_mode")
    redundancy_mode = None
    if mode_value is not None:
        redundancy_mode = parse_redundancy_mode(mode_value, default=None)
        if redundancy_mode is None:
            logger.warning(f"Invalid redundancy mode {mode_value!r}, using N+1")
            redundancy_mode = RedundancyMode.N_PLUS_1

    runtime_value = _pick(source, "batteryRuntime", "battery_runtime")
    battery_runtime = _as_number(runtime_value)
    if battery_runtime is not None and battery_runtime <= 0:
        battery_runtime = None
    if runtime_value is not None and battery_runtime is None:
        logger.warning(f"Invalid battery runtime {runtime_value!r}, using parameter default")

    return CalculationOptions(
        redundancy_mode=redundancy_mode,
        include_generator=_as_bool(_pick(source, "includeGenerator", "include_generator")),
        battery_runtime=battery_runtime,
        sustainability_options=_coerce_sustainability(
            _pick(source, "sustainabilityOptions", "sustainability_options")),
        location=_coerce_location(_pick(source, "location")),
    )


def normalize_request(kw_per_rack: Any, cooling_type: Any, total_racks: Any,
                      options: Any = None) -> CalculationRequest:
    """Coerce raw calculator input into a CalculationRequest."""
    return CalculationRequest(
        kw_per_rack=coerce_kw_per_rack(kw_per_rack),
        cooling_type=coerce_cooling_type(cooling_type),
        total_racks=coerce_total_racks(total_racks),
        options=coerce_options(options),
    )
