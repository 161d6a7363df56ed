"""Component selectors for the sizing stages.

Every sizing stage resolves its choice to one of these closed enums. The
enum values are the keys used by the pricing matrix documents, so a
selector maps directly onto a price entry.
"""

from enum import Enum
from typing import Tuple


class CoolingType(Enum):
    """Heat rejection technologies."""
    AIR = "air"
    DLC = "dlc"
    HYBRID = "hybrid"
    IMMERSION = "immersion"


class RedundancyMode(Enum):
    """Power/cooling capacity over-provisioning schemes."""
    N = "N"
    N_PLUS_1 = "N+1"
    TWO_N = "2N"
    TWO_N_PLUS_1 = "2N+1"
    THREE_N = "3N"


class TapOffBox(Enum):
    """Busbar tap-off box ratings."""
    STANDARD_63A = "standard63A"
    CUSTOM_100A = "custom100A"
    CUSTOM_150A = "custom150A"
    CUSTOM_200A = "custom200A"
    CUSTOM_250A = "custom250A"


class RPDUSize(Enum):
    """Rack power distribution unit ratings."""
    STANDARD_80A = "standard80A"
    STANDARD_112A = "standard112A"


class RDHXModel(Enum):
    """Rear-door heat exchanger models."""
    BASIC = "basic"
    STANDARD = "standard"
    HIGH_DENSITY = "highDensity"
    AVERAGE = "average"


class UPSFrame(Enum):
    """UPS frame sizes by module slots."""
    FRAME_2_MODULE = "frame2Module"
    FRAME_4_MODULE = "frame4Module"
    FRAME_6_MODULE = "frame6Module"


class GeneratorModel(Enum):
    """Diesel generator sets."""
    NONE = "none"
    KVA_1000 = "1000kVA"
    KVA_2000 = "2000kVA"
    KVA_3000 = "3000kVA"

    @property
    def price_key(self) -> str:
        return {
            GeneratorModel.KVA_1000: "generator1000kva",
            GeneratorModel.KVA_2000: "generator2000kva",
            GeneratorModel.KVA_3000: "generator3000kva",
        }.get(self, "")


class ClimateZone(Enum):
    """Coarse climate zones derived from latitude."""
    TROPICAL = "tropical"
    ARID = "arid"
    TEMPERATE = "temperate"
    CONTINENTAL = "continental"
    POLAR = "polar"


# Ordered busbar ratings (A); the busbar selector is the rating itself
BUSBAR_RATINGS_A: Tuple[int, ...] = (250, 400, 600, 800, 1000, 1250, 1600, 2000)
MAX_BUSBAR_RATING_A = BUSBAR_RATINGS_A[-1]


def parse_cooling_type(value, default: CoolingType = CoolingType.AIR) -> CoolingType:
    """Resolve a cooling type from an enum, a string, or garbage.

    "air-cooled" is accepted as an alias of "air".
    """
    if isinstance(value, CoolingType):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in ("air-cooled", "air_cooled"):
            key = "air"
        for member in CoolingType:
            if member.value == key:
                return member
    return default


def parse_redundancy_mode(value, default: RedundancyMode = RedundancyMode.N_PLUS_1) -> RedundancyMode:
    """Resolve a redundancy mode from an enum or its string form."""
    if isinstance(value, RedundancyMode):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        for member in RedundancyMode:
            if member.value == key:
                return member
    return default
