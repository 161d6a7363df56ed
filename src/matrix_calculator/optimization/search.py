"""Best-configuration search.

Evaluates the calculator over a grid of rack densities, cooling types and
rack counts, filters by the caller's limits and ranks what remains by the
chosen objective:

    cost            1e6 / total project cost
    efficiency      10 / PUE
    reliability     availability (%)
    sustainability  0.4 × 10/PUE + 0.4 × 1000/(t CO2 + 1) + 0.2 × water score

Candidates are calculated concurrently; a candidate that fails is logged
and dropped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from matrix_calculator.cache import CalculationCache
from matrix_calculator.calculator import MatrixCalculator
from matrix_calculator.results import CalculationResult
from matrix_calculator.rounding import round_half_up
from matrix_calculator.selectors import CoolingType, parse_cooling_type

logger = logging.getLogger(__name__)

POWER_DENSITY_OPTIONS_KW = (50, 75, 100, 150, 200)
DEFAULT_RACK_COUNT_RANGE = (14, 56)
TOP_N = 3


class OptimizationGoal(Enum):
    COST = "cost"
    EFFICIENCY = "efficiency"
    RELIABILITY = "reliability"
    SUSTAINABILITY = "sustainability"


@dataclass(frozen=True)
class OptimizationConstraints:
    """Search limits; None means unconstrained.

    Attributes:
        min_power_density: Lowest rack density considered (kW)
        max_power_density: Highest rack density considered (kW)
        preferred_cooling_types: Cooling types to consider (all when None)
        max_budget: Upper bound on total project cost
        min_reliability: Lower bound on availability (%)
        max_pue: Upper bound on PUE
        rack_count_range: (min, max) rack count
    """
    min_power_density: Optional[float] = None
    max_power_density: Optional[float] = None
    preferred_cooling_types: Optional[Tuple[CoolingType, ...]] = None
    max_budget: Optional[float] = None
    min_reliability: Optional[float] = None
    max_pue: Optional[float] = None
    rack_count_range: Tuple[int, int] = DEFAULT_RACK_COUNT_RANGE

    def __post_init__(self):
        if self.preferred_cooling_types is not None:
            parsed = tuple(dict.fromkeys(
                c for c in (parse_cooling_type(v, default=None) for v in self.preferred_cooling_types)
                if c is not None))
            object.__setattr__(self, "preferred_cooling_types", parsed)

    def densities(self) -> List[float]:
        return [d for d in POWER_DENSITY_OPTIONS_KW
                if (self.min_power_density is None or d >= self.min_power_density)
                and (self.max_power_density is None or d <= self.max_power_density)]

    def cooling_types(self) -> List[CoolingType]:
        if self.preferred_cooling_types is None:
            return list(CoolingType)
        return list(self.preferred_cooling_types)

    def rack_counts(self) -> List[int]:
        low, high = self.rack_count_range
        return list(dict.fromkeys([low, (low + high) // 2, high]))

    def cache_key(self) -> Dict[str, Any]:
        key = asdict(self)
        if self.preferred_cooling_types is not None:
            key["preferred_cooling_types"] = [c.value for c in self.preferred_cooling_types]
        return key


@dataclass(frozen=True)
class Candidate:
    kw_per_rack: float
    cooling_type: CoolingType
    total_racks: int
    result: CalculationResult
    score: float


@dataclass(frozen=True)
class OptimizationResult:
    top_configurations: Tuple[Candidate, ...]
    recommended_configuration: Optional[Candidate]
    summary: Dict[str, Any]
    evaluated: int = 0
    rejected: int = 0
    ranking: pd.DataFrame = field(default_factory=pd.DataFrame, compare=False, repr=False)


def parse_optimization_goal(value: Any) -> OptimizationGoal:
    if isinstance(value, OptimizationGoal):
        return value
    try:
        return OptimizationGoal(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown optimization goal {value!r}, using {OptimizationGoal.COST.value}")
        return OptimizationGoal.COST


def payback_period(result: CalculationResult) -> float:
    """Capital cost over annual operating cost (years)."""
    annual = result.tco.annual_operating_cost
    if annual <= 0:
        return 0.0
    return round_half_up(result.cost.total_project_cost / annual, 1)


def score_result(result: CalculationResult, goal: OptimizationGoal) -> float:
    """Objective score; higher is better."""
    if goal is OptimizationGoal.COST:
        total = result.cost.total_project_cost
        return 1_000_000.0 / total if total > 0 else 0.0
    pue = result.sustainability.pue
    pue_score = 10.0 / pue if pue > 0 else 0.0
    if goal is OptimizationGoal.EFFICIENCY:
        return pue_score
    if goal is OptimizationGoal.RELIABILITY:
        return result.reliability.availability_percentage
    carbon_score = 1000.0 / (result.carbon_footprint.total_emissions_tonnes + 1.0)
    water_score = 2.0 if result.sustainability.water_recycled else 1.0
    return pue_score * 0.4 + carbon_score * 0.4 + water_score * 0.2


def summarize(best: Optional[Candidate], goal: OptimizationGoal) -> Dict[str, Any]:
    if best is None:
        return {"message": "No configuration satisfies the constraints"}
    result = best.result
    if goal is OptimizationGoal.COST:
        return {
            "message": "Optimized for lowest total project cost",
            "total_project_cost": result.cost.total_project_cost,
            "cost_per_rack": result.cost.cost_per_rack,
            "cost_per_kw": result.cost.cost_per_kw,
            "payback_period_years": payback_period(result),
        }
    if goal is OptimizationGoal.EFFICIENCY:
        return {
            "message": "Optimized for maximum energy efficiency",
            "pue": result.sustainability.pue,
            "annual_energy_kwh": result.sustainability.annual_total_energy_kwh,
            "annual_energy_cost": result.tco.annual_energy_cost,
        }
    if goal is OptimizationGoal.RELIABILITY:
        return {
            "message": "Optimized for maximum system reliability",
            "availability_percentage": result.reliability.availability_percentage,
            "tier": result.reliability.tier,
            "annual_downtime_minutes": result.reliability.annual_downtime_minutes,
        }
    return {
        "message": "Optimized for environmental sustainability",
        "total_emissions_tonnes": result.carbon_footprint.total_emissions_tonnes,
        "water_usage_m3": result.sustainability.water_usage_m3,
        "renewable_percentage": result.sustainability.renewable_percentage,
    }


class ConfigurationOptimizer:
    """Grid search over calculator runs with memoized answers.

    Args:
        calculator: Calculator to evaluate candidates with
        cache: Memo of previous searches keyed by (constraints, goal, pricing and parameters)
        max_workers: Thread pool size for candidate evaluation
    """

    def __init__(self, calculator: Optional[MatrixCalculator] = None,
                 cache: Optional[CalculationCache] = None, max_workers: int = 8):
        self.calculator = calculator if calculator is not None else MatrixCalculator()
        self.cache = cache if cache is not None else CalculationCache()
        self.max_workers = max_workers

    def _grid(self, constraints: OptimizationConstraints) -> List[Tuple[float, CoolingType, int]]:
        return [(kw, cooling, racks)
                for kw in constraints.densities()
                for cooling in constraints.cooling_types()
                for racks in constraints.rack_counts()]

    def _evaluate(self, grid: Sequence[Tuple[float, CoolingType, int]]) -> List[Optional[CalculationResult]]:
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self.calculator.calculate, kw, cooling, racks)
                       for kw, cooling, racks in grid]
            results = []
            for (kw, cooling, racks), future in zip(grid, futures):
                try:
                    result = future.result()
                except Exception as exc:
                    logger.error(f"Candidate {kw} kW/{cooling.value}/{racks} racks failed: {exc}")
                    result = None
                if result is not None and result.is_fallback:
                    logger.warning(f"Candidate {kw} kW/{cooling.value}/{racks} racks fell back, dropped")
                    result = None
                results.append(result)
        return results

    @staticmethod
    def _accepts(result: CalculationResult, constraints: OptimizationConstraints) -> bool:
        if constraints.max_budget is not None and result.cost.total_project_cost > constraints.max_budget:
            return False
        if (constraints.min_reliability is not None
                and result.reliability.availability_percentage < constraints.min_reliability):
            return False
        if constraints.max_pue is not None and result.sustainability.pue > constraints.max_pue:
            return False
        return True

    def find_optimal_configuration(self, constraints: Optional[OptimizationConstraints] = None,
                                   goal: Any = OptimizationGoal.COST) -> OptimizationResult:
        """Best configurations for a goal; unknown goals fall back to cost.

        Answers are memoized per (constraints, goal, pricing and parameters).
        Each call gets its own copy of the ranking table.
        """
        constraints = constraints or OptimizationConstraints()
        goal = parse_optimization_goal(goal)
        key = {
            "constraints": constraints.cache_key(),
            "goal": goal.value,
            "config": self.calculator.config_fingerprint(),
        }
        result = self.cache.get_or_compute(key, lambda: self._search(constraints, goal))
        return replace(result, summary=dict(result.summary), ranking=result.ranking.copy())

    def _search(self, constraints: OptimizationConstraints, goal: OptimizationGoal) -> OptimizationResult:
        grid = self._grid(constraints)
        results = self._evaluate(grid)

        rows = []
        kept: List[CalculationResult] = []
        rejected = 0
        for (kw, cooling, racks), result in zip(grid, results):
            if result is None:
                continue
            if not self._accepts(result, constraints):
                rejected += 1
                continue
            rows.append({
                "kw_per_rack": kw,
                "cooling_type": cooling.value,
                "total_racks": racks,
                "total_project_cost": result.cost.total_project_cost,
                "pue": result.sustainability.pue,
                "availability_percentage": result.reliability.availability_percentage,
                "score": score_result(result, goal),
                "candidate": len(kept),
            })
            kept.append(result)

        ranking = pd.DataFrame(rows, columns=["kw_per_rack", "cooling_type", "total_racks",
                                              "total_project_cost", "pue", "availability_percentage",
                                              "score", "candidate"])
        ranking = ranking.sort_values("score", ascending=False, kind="mergesort").reset_index(drop=True)

        top = []
        for row in ranking.head(TOP_N).itertuples(index=False):
            result = kept[int(row.candidate)]
            top.append(Candidate(
                kw_per_rack=float(row.kw_per_rack),
                cooling_type=CoolingType(row.cooling_type),
                total_racks=int(row.total_racks),
                result=result,
                score=float(row.score),
            ))
        best = top[0] if top else None
        logger.info(f"Evaluated {len(grid)} configurations for {goal.value}: "
                    f"{len(kept)} feasible, {rejected} rejected by limits")

        return OptimizationResult(
            top_configurations=tuple(top),
            recommended_configuration=best,
            summary=summarize(best, goal),
            evaluated=len(grid),
            rejected=rejected,
            ranking=ranking.drop(columns="candidate"),
        )


def find_optimal_configuration(constraints: Optional[OptimizationConstraints] = None,
                               goal: Any = OptimizationGoal.COST,
                               calculator: Optional[MatrixCalculator] = None,
                               optimizer: Optional[ConfigurationOptimizer] = None) -> OptimizationResult:
    """Search with ``optimizer``, or a fresh one around ``calculator``.

    Memoization lives on the optimizer; pass the same optimizer to reuse
    answers across calls.
    """
    if optimizer is None:
        optimizer = ConfigurationOptimizer(calculator=calculator)
    return optimizer.find_optimal_configuration(constraints, goal)
