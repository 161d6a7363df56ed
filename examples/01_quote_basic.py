"""Example 01: Deployment Quote.

Sizes and prices a 28-rack DLC deployment, then compares cooling
technologies and redundancy schemes for the same load and searches for
the most efficient configuration.

Usage:
    python examples/01_quote_basic.py
"""

import logging

from matrix_calculator import (
    MatrixCalculator,
    OptimizationConstraints,
    OptimizationGoal,
    analyze_configuration,
    compare_cooling_technologies,
    compare_redundancy_options,
    find_optimal_configuration,
)


def section_header(title: str):
    """Print formatted section header."""
    print(f"\n{'='*80}")
    print(f"  {title}")
    print(f"{'='*80}")


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    calculator = MatrixCalculator()

    # =========================================================================
    # 1. Single quote
    # =========================================================================
    section_header("Quote: 75 kW x 28 racks, DLC, 2N, generator")

    result = calculator.calculate(75, "dlc", 28, {
        "redundancyMode": "2N",
        "includeGenerator": True,
        "sustainabilityOptions": {"enableWasteHeatRecovery": True},
    })
    e, c, p = result.electrical, result.cooling, result.power
    print(f"\n  IT load:           {result.rack.total_it_load_kw:,.0f} kW")
    print(f"  Row current:       {e.current_per_row_a} A -> {e.busbars_per_row} x {e.busbar_size_a} A busbar")
    print(f"  Tap-off / rPDU:    {e.tap_off_box.value} / {e.rpdu.value}")
    print(f"  Liquid / air:      {c.dlc_capacity_kw:,.0f} / {c.residual_capacity_kw:,.0f} kW ({c.piping_size})")
    if result.pipe_sizing is not None:
        print(f"  Pipe:              {result.pipe_sizing.nominal_size} at {result.pipe_sizing.velocity_m_s} m/s")
    print(f"  UPS:               {p.ups.modules_needed} modules in {p.ups.frames_needed} frame(s)")
    print(f"  Battery:           {p.battery.cabinets_needed} cabinets")
    print(f"  Generator:         {p.generator.capacity_kva:,.0f} kVA ({p.generator.model.value})")
    print(f"  Availability:      {result.reliability.availability_percentage}% ({result.reliability.tier})")
    print(f"  PUE:               {result.sustainability.pue}")
    print(f"  CO2:               {result.carbon_footprint.total_emissions_tonnes:,.1f} t/yr")
    print(f"  Project cost:      {result.cost.total_project_cost:,.2f}")
    print(f"  Cost per kW:       {result.cost.cost_per_kw:,.2f}")
    print(f"  10-year NPV:       {result.tco.npv:,.2f}")

    for rec in analyze_configuration(result)["recommendations"]:
        print(f"  [{rec['severity']}] {rec['message']}")

    # =========================================================================
    # 2. Cooling technologies
    # =========================================================================
    section_header("Cooling technology comparison (air baseline)")

    cooling = compare_cooling_technologies(75, 28, calculator=calculator)
    for row in cooling["comparison_results"]:
        print(f"  {row['cooling_type']:<10} PUE {row['pue']:.2f}  "
              f"cost {row['initial_cost']:>14,.2f}  payback {row['payback_period_years']} yr")
    print(f"\n  Recommended: {cooling['recommendation']['recommended_cooling_type']}")
    print(f"  {cooling['recommendation']['reason']}")

    # =========================================================================
    # 3. Redundancy
    # =========================================================================
    section_header("Redundancy comparison")

    redundancy = compare_redundancy_options(75, "dlc", 28, calculator=calculator)
    for row in redundancy["comparison_results"]:
        print(f"  {row['redundancy_mode']:<5} {row['availability']:.4f}%  {row['tier']:<9} "
              f"+{row['cost_increase']:,.2f}")
    print(f"\n  Recommended: {redundancy['recommendation']['recommended_redundancy']}")

    # =========================================================================
    # 4. Search
    # =========================================================================
    section_header("Most efficient configuration, 75-150 kW/rack")

    constraints = OptimizationConstraints(min_power_density=75, max_power_density=150)
    best = find_optimal_configuration(constraints, OptimizationGoal.EFFICIENCY, calculator=calculator)
    print(best.ranking.head(5).to_string(index=False))
    print(f"\n  {best.summary['message']}")


if __name__ == "__main__":
    main()
