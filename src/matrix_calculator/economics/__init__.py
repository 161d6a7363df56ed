"""Economic and environmental analysis.

This module provides the project cost rollup, energy/water/carbon
metrics and total cost of ownership.
"""

from .cost_rollup import calculate_cost
from .sustainability import calculate_carbon_footprint, calculate_carbon_savings, calculate_sustainability
from .tco import calculate_tco

__all__ = [
    'calculate_cost',
    'calculate_carbon_footprint',
    'calculate_carbon_savings',
    'calculate_sustainability',
    'calculate_tco',
]
