"""Pricing and parameter provider.

The only place the calculator touches external data. A loader callable
returns a document of the form ``{"pricing": {...}, "params": {...}}`` (or
None when the backing store has nothing); the provider validates each
section, falls back to built-in defaults for anything missing or invalid,
and caches the pair for the cache TTL.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from matrix_calculator.cache import CalculationCache
from matrix_calculator.calculation_params import CalculationParams, DEFAULT_CALCULATION_PARAMS
from matrix_calculator.exceptions import ConfigurationError
from matrix_calculator.pricing_matrix import DEFAULT_PRICING, PricingMatrix

logger = logging.getLogger(__name__)

Loader = Callable[[], Optional[Mapping[str, Any]]]
M = TypeVar("M", bound=BaseModel)

_CACHE_KEY = "pricing_and_params"


@dataclass(frozen=True)
class PricingAndParams:
    pricing: PricingMatrix
    params: CalculationParams


class JsonFileLoader:
    """Load a pricing/params document from a JSON file.

    A missing file is not an error: it means "no stored configuration".
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __call__(self) -> Optional[Mapping[str, Any]]:
        if not self.path.exists():
            logger.info(f"No configuration file at {self.path}, using defaults")
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)


def _validate_section(model: Type[M], raw: Any, name: str) -> M:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {name} document ({exc.error_count()} errors): {exc}") from exc


class ParamsProvider:
    """Supplies validated pricing and calculation parameters.

    Args:
        loader: Callable returning the stored document, or None for defaults only
        cache: Cache holding the loaded pair (5 minute TTL by default)
    """

    def __init__(self, loader: Optional[Loader] = None, cache: Optional[CalculationCache] = None):
        self.loader = loader
        self.cache = cache if cache is not None else CalculationCache(max_size=1, ttl_seconds=300.0)

    def get_pricing_and_params(self) -> PricingAndParams:
        return self.cache.get_or_compute(_CACHE_KEY, self._load)

    def invalidate(self) -> None:
        """Force the next call to reload from the loader."""
        self.cache.clear()

    def _load(self) -> PricingAndParams:
        document = None
        if self.loader is not None:
            try:
                document = self.loader()
            except Exception as exc:
                logger.error(f"Failed to load pricing/params document: {exc}; using defaults")
                document = None

        if document is not None and not isinstance(document, Mapping):
            logger.error(f"Pricing/params document is {type(document).__name__}, expected a mapping")
            document = None

        pricing = self._section(document, "pricing", PricingMatrix, DEFAULT_PRICING)
        params = self._section(document, "params", CalculationParams, DEFAULT_CALCULATION_PARAMS)
        return PricingAndParams(pricing=pricing, params=params)

    @staticmethod
    def _section(document: Optional[Mapping[str, Any]], name: str,
                 model: Type[M], default: M) -> M:
        raw = document.get(name) if document is not None else None
        if raw is None:
            logger.info(f"No stored {name}, using defaults")
            return default
        try:
            return _validate_section(model, raw, name)
        except ConfigurationError as exc:
            logger.error(f"{exc}; using default {name}")
            return default


def get_pricing_and_params(loader: Optional[Loader] = None) -> PricingAndParams:
    """One-shot load without caching; defaults when no loader is given."""
    return ParamsProvider(loader=loader).get_pricing_and_params()
