"""Per-stage outcome wrapper for the sizing pipeline."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from matrix_calculator.exceptions import CalculationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Value of a stage, or the error that replaced it."""
    stage: str
    value: Optional[T] = None
    error: Optional[CalculationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.error is None else default


def run_stage(stage: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> StageResult[T]:
    """Run one stage function, capturing any exception as a CalculationError."""
    try:
        return StageResult(stage=stage, value=fn(*args, **kwargs))
    except Exception as exc:
        error = CalculationError(stage, exc)
        logger.error(str(error))
        return StageResult(stage=stage, error=error)
