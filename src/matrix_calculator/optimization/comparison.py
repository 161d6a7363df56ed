"""Side-by-side comparisons of cooling technologies, redundancy schemes and
arbitrary results, plus rule-based improvement hints for a single result.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from matrix_calculator.calculation_params import CoolingThresholds
from matrix_calculator.calculator import MatrixCalculator
from matrix_calculator.optimization.search import payback_period
from matrix_calculator.requests import CalculationOptions
from matrix_calculator.results import CalculationResult
from matrix_calculator.rounding import round_half_up
from matrix_calculator.selectors import CoolingType, RedundancyMode

logger = logging.getLogger(__name__)

COMPARED_REDUNDANCY_MODES = (
    RedundancyMode.N,
    RedundancyMode.N_PLUS_1,
    RedundancyMode.TWO_N,
    RedundancyMode.TWO_N_PLUS_1,
)

COOLING_REASONS = {
    CoolingType.AIR: "Air cooling offers the lowest initial cost and simplest implementation, with a PUE of {pue}.",
    CoolingType.DLC: ("Direct liquid cooling provides excellent efficiency with a PUE of {pue}, "
                      "making it ideal for high-density deployments."),
    CoolingType.HYBRID: ("Hybrid cooling balances efficiency (PUE {pue}) and cost, "
                         "suitable for mixed workloads."),
    CoolingType.IMMERSION: ("Immersion cooling delivers the best efficiency (PUE {pue}) and suits "
                            "very high-density deployments despite higher initial cost."),
}


def _pct(part: float, whole: float) -> float:
    return round_half_up(part / whole * 100.0, 1) if whole else 0.0


def rank_points(df: pd.DataFrame, columns: Sequence[str]) -> pd.Series:
    """Rank-sum score: 3 points for 1st, 2 for 2nd, 1 for the rest, per column (lower is better)."""
    points = pd.Series(0, index=df.index)
    for column in columns:
        rank = df[column].rank(method="first", ascending=True)
        points = points + (3 - (rank - 1).clip(upper=2)).astype(int)
    return points


def compare_cooling_technologies(kw_per_rack: float, total_racks: int,
                                 calculator: Optional[MatrixCalculator] = None) -> Dict[str, Any]:
    """Compare the four cooling technologies for the same IT load, air as baseline."""
    calculator = calculator or MatrixCalculator()
    results = {cooling: calculator.calculate(kw_per_rack, cooling, total_racks) for cooling in CoolingType}
    baseline = results[CoolingType.AIR]
    base_pue = baseline.sustainability.pue
    base_cost = baseline.cost.total_project_cost
    base_energy = baseline.sustainability.annual_total_energy_kwh

    rows = []
    for cooling, result in results.items():
        pue_improvement = base_pue - result.sustainability.pue
        cost_difference = result.cost.total_project_cost - base_cost
        rows.append({
            "cooling_type": cooling.value,
            "pue": result.sustainability.pue,
            "pue_improvement": round_half_up(pue_improvement, 4),
            "pue_improvement_percentage": _pct(pue_improvement, base_pue),
            "initial_cost": result.cost.total_project_cost,
            "cost_difference": round_half_up(cost_difference, 2),
            "cost_difference_percentage": _pct(cost_difference, base_cost),
            "annual_energy_savings_kwh": round_half_up(base_energy - result.sustainability.annual_total_energy_kwh, 1),
            "water_usage_m3": result.sustainability.water_usage_m3,
            "payback_period_years": payback_period(result),
        })

    df = pd.DataFrame(rows)
    df["points"] = rank_points(df, ["pue", "initial_cost", "payback_period_years"])
    best = df.loc[df["points"].idxmax()]
    best_type = CoolingType(best["cooling_type"])
    metrics = {k: v for k, v in best.items() if k != "points"}

    return {
        "base_configuration": {
            "kw_per_rack": kw_per_rack,
            "total_racks": total_racks,
            "total_power_kw": kw_per_rack * total_racks,
        },
        "comparison_results": df.drop(columns="points").to_dict(orient="records"),
        "recommendation": {
            "recommended_cooling_type": best_type.value,
            "reason": COOLING_REASONS[best_type].format(pue=best["pue"]),
            "points": int(best["points"]),
            "metrics": metrics,
        },
    }


def compare_redundancy_options(kw_per_rack: float, cooling_type: Any, total_racks: int,
                               calculator: Optional[MatrixCalculator] = None) -> Dict[str, Any]:
    """Compare redundancy schemes on availability and cost, N as baseline."""
    calculator = calculator or MatrixCalculator()
    rows = []
    for mode in COMPARED_REDUNDANCY_MODES:
        result = calculator.calculate(kw_per_rack, cooling_type, total_racks,
                                      CalculationOptions(redundancy_mode=mode))
        rows.append({
            "redundancy_mode": mode.value,
            "availability": result.reliability.availability_percentage,
            "annual_downtime_minutes": result.reliability.annual_downtime_minutes,
            "tier": result.reliability.tier,
            "total_cost": result.cost.total_project_cost,
        })

    df = pd.DataFrame(rows)
    base = df.iloc[0]
    df["cost_increase"] = (df["total_cost"] - base["total_cost"]).round(2)
    gain = df["availability"] - base["availability"]
    df["cost_per_availability_point"] = (df["cost_increase"] / gain.where(gain > 0)).fillna(0.0)

    by_availability = df.sort_values("availability", ascending=False, kind="mergesort")
    tier_iv = by_availability[by_availability["tier"] == "Tier IV"]
    tier_iii = by_availability[by_availability["tier"] == "Tier III"]
    chosen = tier_iii.iloc[0] if not tier_iii.empty else by_availability.iloc[0]
    cost_effective = df[df["cost_per_availability_point"] > 0].sort_values(
        "cost_per_availability_point", kind="mergesort")

    def increase_pct(row) -> float:
        return _pct(row["cost_increase"], base["total_cost"])

    highest = None
    if not tier_iv.empty:
        top = tier_iv.iloc[0]
        highest = {"mode": top["redundancy_mode"], "availability": top["availability"],
                   "cost_increase_percentage": increase_pct(top)}
    most_cost_effective = None
    if not cost_effective.empty:
        top = cost_effective.iloc[0]
        most_cost_effective = {"mode": top["redundancy_mode"], "availability": top["availability"],
                               "cost_per_availability_point": round_half_up(float(top["cost_per_availability_point"]), 2)}

    return {
        "base_configuration": {
            "kw_per_rack": kw_per_rack,
            "cooling_type": cooling_type.value if isinstance(cooling_type, CoolingType) else cooling_type,
            "total_racks": total_racks,
            "total_power_kw": kw_per_rack * total_racks,
        },
        "comparison_results": df.to_dict(orient="records"),
        "recommendation": {
            "recommended_redundancy": chosen["redundancy_mode"],
            "tier": chosen["tier"],
            "availability": chosen["availability"],
            "annual_downtime_minutes": chosen["annual_downtime_minutes"],
            "cost_increase_percentage": increase_pct(chosen),
            "alternative_options": {
                "highest_availability": highest,
                "most_cost_effective": most_cost_effective,
            },
        },
    }


def compare_configurations(results: Sequence[CalculationResult]) -> Dict[str, Any]:
    """Relative differences of each result against the first, and the best per metric.

    The summary names the index of the winning result for each metric.
    """
    if not results:
        return {"configurations": [], "summary": {}}

    df = pd.DataFrame([{
        "kw_per_rack": r.rack.kw_per_rack,
        "cooling_type": r.cooling.cooling_type.value,
        "total_racks": r.rack.total_racks,
        "total_project_cost": r.cost.total_project_cost,
        "pue": r.sustainability.pue,
        "water_usage_m3": r.sustainability.water_usage_m3,
        "total_emissions_tonnes": r.carbon_footprint.total_emissions_tonnes,
        "availability_percentage": r.reliability.availability_percentage,
    } for r in results])

    for metric in ("total_project_cost", "pue", "water_usage_m3", "total_emissions_tonnes"):
        base = df[metric].iloc[0]
        df[f"{metric}_diff_percentage"] = ((df[metric] - base) / base * 100.0).round(1) if base else 0.0
    df["is_baseline"] = df.index == 0

    summary = {
        "lowest_cost": int(df["total_project_cost"].idxmin()),
        "lowest_pue": int(df["pue"].idxmin()),
        "lowest_water_usage": int(df["water_usage_m3"].idxmin()),
        "lowest_carbon_footprint": int(df["total_emissions_tonnes"].idxmin()),
        "highest_reliability": int(df["availability_percentage"].idxmax()),
    }
    return {"configurations": df.to_dict(orient="records"), "summary": summary}


def analyze_configuration(result: CalculationResult,
                          thresholds: CoolingThresholds = CoolingThresholds()) -> Dict[str, Any]:
    """Rule-based improvement recommendations for a calculated configuration."""
    recommendations: List[Dict[str, str]] = []
    kw = result.rack.kw_per_rack
    cooling = result.cooling.cooling_type

    if cooling is CoolingType.AIR and kw > thresholds.air_cooled_max:
        recommendations.append({
            "type": "cooling",
            "severity": "high",
            "message": (f"Air cooling is unsuitable above {thresholds.air_cooled_max:g} kW/rack. "
                        "Consider DLC or hybrid cooling."),
        })
    if result.sustainability.pue > 1.3:
        recommendations.append({
            "type": "efficiency",
            "severity": "medium",
            "message": "PUE could be improved with better cooling solutions or waste heat recovery.",
        })
    if result.power.ups.redundancy_factor < 1.2 and kw > thresholds.recommended_dlc_min:
        recommendations.append({
            "type": "reliability",
            "severity": "high",
            "message": "Consider increasing redundancy for high-density deployments.",
        })
    if not result.power.generator.included and result.reliability.tier == "Tier III":
        recommendations.append({
            "type": "reliability",
            "severity": "medium",
            "message": "Adding a generator would improve reliability for Tier III requirements.",
        })
    if cooling is CoolingType.DLC and result.sustainability.waste_heat_recovered_kwh == 0:
        recommendations.append({
            "type": "sustainability",
            "severity": "medium",
            "message": "DLC systems are well suited to waste heat recovery. Consider enabling it.",
        })

    count = len(recommendations)
    return {
        "recommendations": recommendations,
        "optimization_potential": "high" if count > 2 else "medium" if count > 0 else "low",
        "summary": f"{count} improvement opportunities identified",
    }
