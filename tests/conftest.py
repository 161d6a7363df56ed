"""
Pytest configuration and shared fixtures for Matrix Calculator tests.
"""

import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from matrix_calculator.cache import CalculationCache
from matrix_calculator.calculation_params import CalculationParams
from matrix_calculator.calculator import MatrixCalculator
from matrix_calculator.pricing_matrix import PricingMatrix
from matrix_calculator.provider import ParamsProvider


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def params():
    """Default calculation parameters"""
    return CalculationParams()


@pytest.fixture
def pricing():
    """Default pricing matrix"""
    return PricingMatrix()


@pytest.fixture
def calculator():
    """Calculator on built-in defaults, no result cache"""
    return MatrixCalculator(provider=ParamsProvider())


@pytest.fixture
def stored_document():
    """Pricing/params document as the backing store returns it (camelCase keys)"""
    return {
        "pricing": {
            "busbar": {"base1250A": 50000, "base2000A": 70000, "perMeter": 1000},
            "tapOffBox": {"standard63A": 1000},
        },
        "params": {
            "electrical": {"voltageFactor": 415, "powerFactor": 0.95, "redundancyMode": "2N"},
            "power": {"batteryRuntime": 15},
            "costFactors": {"installationPercentage": 0.2},
        },
    }


@pytest.fixture
def small_cache(clock):
    return CalculationCache(max_size=3, ttl_seconds=60.0, clock=clock)
