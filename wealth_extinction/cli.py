"""CLI entry point: project when a household's wealth runs out."""

import argparse
import sys
import warnings
from pathlib import Path

from wealth_extinction.config import build_engine_config, create_parser, load_config, load_profile, resolve
from wealth_extinction.engine import CalculationResult, compute_calculation
from wealth_extinction.errors import CalculationTimeoutError, ValidationError
from wealth_extinction.recommendations import recommendation_impact_score


def _build_parser() -> argparse.ArgumentParser:
    parser = create_parser("Household wealth-extinction projection")
    parser.add_argument("profile", type=Path, help="household profile TOML file")
    parser.add_argument("--chart", type=Path, default=None, metavar="DIR", help="write PNG charts to DIR")
    parser.add_argument("--quiet", action="store_true", help="suppress progress output and warnings")
    return parser


def _print_header(result: CalculationResult):
    print("=" * 80)
    print("Wealth extinction projection")
    print(f"  Current wealth:     {result.current_wealth:>16,.0f}")
    print(f"  Extinction year:    {result.extinction_year:>16}")
    print(f"  Years remaining:    {result.years_remaining:>16}")
    print(f"  Complexity score:   {result.complexity.score:>16.1f}")
    print("=" * 80)


def _print_trajectory(result: CalculationResult):
    print("\n[Trajectory, every 5 years]")
    print("-" * 80)
    print(f"{'Year':<6} {'Age':<5} {'Income':>14} {'Expenses':>14} {'Net flow':>14} {'Wealth':>16}")
    print("-" * 80)
    last = len(result.trajectory) - 1
    for i, r in enumerate(result.trajectory):
        if i % 5 == 0 or i == last:
            print(
                f"{r.year:<6} {r.age:<5} {r.income:>14,.0f} {r.expenses:>14,.0f} "
                f"{r.net_cash_flow:>14,.0f} {r.wealth:>16,.0f}"
            )
    print("-" * 80)


def _print_scenarios(result: CalculationResult):
    a = result.scenario_analysis
    s = a.statistics
    n = len(result.monte_carlo_runs)
    note = " (stopped early)" if result.monte_carlo_timed_out else ""
    print(f"\n[Scenarios, {n} Monte Carlo runs{note}]")
    print(f"  Worst case:   {a.worst_case.extinction_year}")
    print(f"  Most likely:  {a.most_likely.extinction_year}")
    print(f"  Best case:    {a.best_case.extinction_year}")
    print(f"  Mean {s.mean:.1f} / median {s.median} / std {s.std:.1f}")
    print(f"  95% interval: {s.confidence_interval_95[0]}-{s.confidence_interval_95[1]}")
    print("  Stress tests:")
    for t in a.stress_tests:
        print(f"    {t.scenario:<36} {t.extinction_year_impact:+d} years -> {t.extinction_year} (p={t.probability:.0%})")


def _print_destroyers(result: CalculationResult):
    print("\n[Top wealth destroyers]")
    for i, (d, step) in enumerate(zip(result.top_wealth_destroyers, result.prevention_plan), 1):
        print(f"  {i}. {d.factor:<24} {d.impact:>14,.0f}  {step.impact:<6} {step.difficulty:<6} {step.timeframe}")
        print(f"     {d.prevention_strategy}")
    print(f"  Total at risk: {result.total_wealth_destruction:,.0f}")


def _print_portfolio(result: CalculationResult):
    p = result.portfolio
    if p is None:
        return
    t = p.target_allocation
    print("\n[Portfolio]")
    print(f"  Target allocation: stocks {t.stocks:.0%} / bonds {t.bonds:.0%} / "
          f"real estate {t.real_estate:.0%} / alternatives {t.alternatives:.0%}")
    print(f"  Drift {p.drift:.0%}, rebalancing cost {p.rebalancing_cost:,.0f}")
    print(f"  Sharpe ratio {p.sharpe_ratio:.2f}, max drawdown {p.max_drawdown:.1%}")


def _print_inheritance(result: CalculationResult):
    inheritance = result.family_impact.inheritance
    protected = result.protected_scenario
    print("\n[Generational impact]")
    print(f"  Transfer year {inheritance.year}: estate tax {inheritance.estate_tax:,.0f}, "
          f"planning efficiency {inheritance.planning_efficiency:.0%}")
    print(f"  Children inheritance:      {result.children_inheritance:>16,.0f}")
    print(f"  Grandchildren inheritance: {result.grandchildren_inheritance:>16,.0f}")
    print(f"  Protected scenario: extinction {protected.extinction_year} "
          f"(+{protected.additional_years:.1f} years, saves {protected.total_savings:,.0f})")
    if result.family_impact.life_events:
        print("  Life events:")
        for e in result.family_impact.life_events:
            print(f"    {e.event:<24} {e.financial_impact:>14,.0f}  {e.timing}")


def _print_evt(result: CalculationResult):
    evt = result.evt
    if evt is None:
        return
    flag = f"  [degraded: {evt.degraded_reason}]" if evt.degraded else ""
    print(f"\n[Tail risk: {evt.tail_risk}]{flag}")
    print(f"  VaR99 {evt.var99:.1%} / VaR99.5 {evt.var995:.1%} / VaR99.9 {evt.var999:.1%} / ES99 {evt.es99:.1%}")


def _print_recommendations(result: CalculationResult):
    rec = result.recommendations
    print("\n[Immediate actions]")
    for a in rec.immediate:
        print(
            f"  [{a.priority:<8}] {a.action} (+{a.timeline_impact:g} years, by {a.deadline.isoformat()}, "
            f"score {recommendation_impact_score(a)})"
        )
    print("\n[Short term]")
    for a in rec.short_term:
        print(f"  - {a.action} ({a.timeframe}): {a.expected_benefit}")
    print("\n[Long term]")
    for a in rec.long_term:
        print(f"  - {a.action} ({a.timeframe}): {a.expected_benefit}")
    if rec.insights:
        print("\n[Insights]")
        for insight in rec.insights:
            print(f"  * {insight}")


def _print_report(result: CalculationResult):
    _print_header(result)
    _print_trajectory(result)
    _print_scenarios(result)
    _print_destroyers(result)
    _print_portfolio(result)
    _print_inheritance(result)
    _print_evt(result)
    _print_recommendations(result)


def _write_charts(result: CalculationResult, output_dir: Path, name: str):
    from wealth_extinction.charts import (
        plot_extinction_distribution,
        plot_trajectory,
        plot_wealth_destroyers,
    )

    paths = []
    if result.trajectory:
        paths.append(plot_trajectory(result.trajectory, output_dir, name))
    if result.monte_carlo_runs:
        paths.append(plot_extinction_distribution(result.monte_carlo_runs, output_dir, name))
    if result.top_wealth_destroyers:
        paths.append(plot_wealth_destroyers(result.top_wealth_destroyers, output_dir, name))
    for p in paths:
        print(f"Chart saved: {p}")


def main(argv: list[str] | None = None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.profile.exists():
        print(f"Profile file not found: {args.profile}", file=sys.stderr)
        raise SystemExit(1)

    config = load_config(args.config if args.config is not None else args.profile)
    r = resolve(args, config)

    with warnings.catch_warnings():
        if args.quiet:
            warnings.simplefilter("ignore")
        try:
            profile = load_profile(args.profile)
            engine_config = build_engine_config(r)
            result = compute_calculation(profile, engine_config, quiet=args.quiet)
        except (ValidationError, CalculationTimeoutError) as e:
            print(f"Error: {e}", file=sys.stderr)
            raise SystemExit(1)
        except ValueError as e:
            print(f"Invalid engine settings: {e}", file=sys.stderr)
            raise SystemExit(1)

    _print_report(result)
    if args.chart is not None:
        _write_charts(result, args.chart, args.profile.stem)


if __name__ == "__main__":
    main()
