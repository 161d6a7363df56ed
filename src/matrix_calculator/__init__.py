"""Matrix Calculator.

Data-center sizing and quoting engine: electrical distribution, cooling,
UPS/battery/generator, reliability, sustainability, cost and TCO from a
handful of sizing inputs, plus search and comparison over the pipeline.
"""

__version__ = "0.1.0"

from matrix_calculator.calculation_params import CalculationParams, DEFAULT_CALCULATION_PARAMS
from matrix_calculator.pricing_matrix import PricingMatrix, DEFAULT_PRICING
from matrix_calculator.selectors import CoolingType, RedundancyMode
from matrix_calculator.requests import (
    CalculationOptions,
    CalculationRequest,
    Location,
    SustainabilityOptions,
)
from matrix_calculator.results import CalculationResult
from matrix_calculator.cache import CalculationCache
from matrix_calculator.provider import (
    JsonFileLoader,
    ParamsProvider,
    PricingAndParams,
    get_pricing_and_params,
)
from matrix_calculator.calculator import MatrixCalculator, calculate
from matrix_calculator.exceptions import CalculationError, ConfigurationError, MatrixCalculatorError
from matrix_calculator.optimization import (
    ConfigurationOptimizer,
    OptimizationConstraints,
    OptimizationGoal,
    analyze_configuration,
    compare_configurations,
    compare_cooling_technologies,
    compare_redundancy_options,
    find_optimal_configuration,
)

__all__ = [
    "CalculationParams",
    "DEFAULT_CALCULATION_PARAMS",
    "PricingMatrix",
    "DEFAULT_PRICING",
    "CoolingType",
    "RedundancyMode",
    "CalculationOptions",
    "CalculationRequest",
    "Location",
    "SustainabilityOptions",
    "CalculationResult",
    "CalculationCache",
    "JsonFileLoader",
    "ParamsProvider",
    "PricingAndParams",
    "get_pricing_and_params",
    "MatrixCalculator",
    "calculate",
    "CalculationError",
    "ConfigurationError",
    "MatrixCalculatorError",
    "ConfigurationOptimizer",
    "OptimizationConstraints",
    "OptimizationGoal",
    "analyze_configuration",
    "compare_configurations",
    "compare_cooling_technologies",
    "compare_redundancy_options",
    "find_optimal_configuration",
]
