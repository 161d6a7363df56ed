"""Configuration search and comparison.

This module ranks candidate configurations by cost, efficiency,
reliability or sustainability and compares cooling and redundancy
alternatives for a fixed workload.
"""

from .search import (
    Candidate,
    ConfigurationOptimizer,
    OptimizationConstraints,
    OptimizationGoal,
    OptimizationResult,
    find_optimal_configuration,
)
from .comparison import (
    analyze_configuration,
    compare_configurations,
    compare_cooling_technologies,
    compare_redundancy_options,
)

__all__ = [
    'Candidate',
    'ConfigurationOptimizer',
    'OptimizationConstraints',
    'OptimizationGoal',
    'OptimizationResult',
    'find_optimal_configuration',
    'analyze_configuration',
    'compare_configurations',
    'compare_cooling_technologies',
    'compare_redundancy_options',
]
