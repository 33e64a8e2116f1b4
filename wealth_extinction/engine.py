"""Calculation facade: validation, simulation, Monte Carlo and analysis."""

import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from random import Random
from typing import Callable

from wealth_extinction.complexity import ComplexityResult, analyze_complexity
from wealth_extinction.destroyers import (
    PreventionStrategy,
    WealthDestroyer,
    prevention_plan,
    rank_wealth_destroyers,
    total_wealth_destruction,
)
from wealth_extinction.errors import CalculationTimeoutError
from wealth_extinction.evt import (
    DEFAULT_THRESHOLD_PERCENTILE,
    EVTResult,
    analyze_tail_risk,
    fallback_evt_result,
    losses_from_changes,
    wealth_changes,
)
from wealth_extinction.impact import FamilyImpact, calculate_family_impact
from wealth_extinction.investments import PortfolioSummary, summarize_portfolio
from wealth_extinction.monte_carlo import MonteCarloConfig, ScenarioRun, run_monte_carlo
from wealth_extinction.profile import HouseholdProfile, validate_profile
from wealth_extinction.protected import ProtectedScenario, calculate_protected_scenario
from wealth_extinction.recommendations import Recommendations, generate_recommendations
from wealth_extinction.scenarios import ScenarioAnalysis, analyze_scenarios
from wealth_extinction.simulation import (
    BASE_MAX_YEARS,
    BASE_RUNAWAY_MULTIPLE,
    BASE_YEAR,
    YearRecord,
    find_extinction_year,
    simulate_trajectory,
)

DEFAULT_TIMEOUT = 15.0
MAX_DESTROYERS = 5
# Monte Carlo may use at most this share of the time left on the deadline
MC_DEADLINE_SHARE = 0.5


@dataclass
class EngineConfig:
    monte_carlo: MonteCarloConfig = field(default_factory=MonteCarloConfig)
    timeout: float = DEFAULT_TIMEOUT  # seconds for the whole calculation
    base_max_years: int = BASE_MAX_YEARS
    base_runaway_multiple: float = BASE_RUNAWAY_MULTIPLE
    evt_enabled: bool = True
    evt_threshold_percentile: float = DEFAULT_THRESHOLD_PERCENTILE
    max_workers: int | None = None
    seed: int | None = None


@dataclass
class CalculationResult:
    extinction_year: int
    years_remaining: int
    current_wealth: float
    children_inheritance: float
    grandchildren_inheritance: float
    trajectory: list[YearRecord]
    top_wealth_destroyers: list[WealthDestroyer]
    family_impact: FamilyImpact
    protected_scenario: ProtectedScenario
    complexity: ComplexityResult
    scenario_analysis: ScenarioAnalysis
    recommendations: Recommendations
    prevention_plan: list[PreventionStrategy] = field(default_factory=list)
    total_wealth_destruction: float = 0.0
    portfolio: PortfolioSummary | None = None
    evt: EVTResult | None = None
    monte_carlo_runs: list[ScenarioRun] = field(default_factory=list)
    monte_carlo_timed_out: bool = False


def _evt_for_trajectory(
    trajectory: list[YearRecord], rng: Random, threshold_percentile: float,
) -> EVTResult:
    losses = losses_from_changes(wealth_changes(trajectory))
    try:
        return analyze_tail_risk(losses, rng, threshold_percentile)
    except (ArithmeticError, ValueError):
        return fallback_evt_result()


def compute_calculation(
    profile: HouseholdProfile,
    config: EngineConfig | None = None,
    rng: Random | None = None,
    quiet: bool = True,
    clock: Callable[[], float] = time.monotonic,
) -> CalculationResult:
    """Run the full household projection.

    Raises ValidationError for an invalid profile and CalculationTimeoutError
    once `config.timeout` seconds have elapsed at any phase boundary. Monte
    Carlo gets at most MC_DEADLINE_SHARE of the time left, so a stage cut
    short by the deadline still contributes its partial runs.
    """
    if config is None:
        config = EngineConfig()
    if rng is None:
        rng = Random(config.seed)
    start = clock()

    def remaining() -> float:
        left = config.timeout - (clock() - start)
        if left <= 0:
            raise CalculationTimeoutError()
        return left

    profile = validate_profile(profile)

    trajectory = simulate_trajectory(
        profile, rng,
        max_years=config.base_max_years,
        runaway_multiple=config.base_runaway_multiple,
    )
    extinction_year = find_extinction_year(trajectory)

    mc_config = config.monte_carlo
    budget = min(mc_config.time_budget, remaining() * MC_DEADLINE_SHARE)
    mc_rng = Random(rng.getrandbits(64))
    mc_result = run_monte_carlo(
        profile,
        MonteCarloConfig(
            n_simulations=mc_config.n_simulations,
            seed=mc_config.seed,
            batch_size=mc_config.batch_size,
            time_budget=budget,
            max_years=mc_config.max_years,
            runaway_multiple=mc_config.runaway_multiple,
            executor=mc_config.executor,
            max_workers=mc_config.max_workers,
        ),
        rng=mc_rng,
        quiet=quiet,
        clock=clock,
    )

    timeout = remaining()
    evt_rng = Random(rng.getrandbits(64))
    executor = ThreadPoolExecutor(max_workers=config.max_workers)
    try:
        futures = {
            "complexity": executor.submit(analyze_complexity, profile),
            "destroyers": executor.submit(rank_wealth_destroyers, profile, MAX_DESTROYERS),
            "family": executor.submit(calculate_family_impact, profile, trajectory),
            "protected": executor.submit(calculate_protected_scenario, profile, trajectory),
            "portfolio": executor.submit(summarize_portfolio, profile, [r.wealth for r in trajectory]),
            "scenarios": executor.submit(analyze_scenarios, mc_result.runs, extinction_year),
        }
        if config.evt_enabled:
            futures["evt"] = executor.submit(
                _evt_for_trajectory, trajectory, evt_rng, config.evt_threshold_percentile,
            )
        _, pending = wait(futures.values(), timeout=timeout)
        if pending:
            raise CalculationTimeoutError()
        results = {name: f.result() for name, f in futures.items()}
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    remaining()
    complexity = results["complexity"]
    recommendations = generate_recommendations(profile, complexity)
    family = results["family"]
    destroyers = results["destroyers"]

    return CalculationResult(
        extinction_year=extinction_year,
        years_remaining=extinction_year - BASE_YEAR,
        current_wealth=profile.finances.net_worth,
        children_inheritance=sum(c.inheritance for c in family.inheritance.children),
        grandchildren_inheritance=family.grandchildren.inheritance,
        trajectory=trajectory,
        top_wealth_destroyers=destroyers,
        family_impact=family,
        protected_scenario=results["protected"],
        complexity=complexity,
        scenario_analysis=results["scenarios"],
        recommendations=recommendations,
        prevention_plan=prevention_plan(destroyers),
        total_wealth_destruction=total_wealth_destruction(destroyers),
        portfolio=results["portfolio"],
        evt=results.get("evt"),
        monte_carlo_runs=mc_result.runs,
        monte_carlo_timed_out=mc_result.timed_out,
    )


def compute_complexity(profile: HouseholdProfile) -> ComplexityResult:
    return analyze_complexity(validate_profile(profile))


def compute_evt(changes: list[float], rng: Random | None = None) -> EVTResult:
    """Tail-risk analysis of fractional wealth changes.

    Declines are fitted as positive loss magnitudes; gains and flat years are
    ignored.
    """
    losses = losses_from_changes(changes)
    try:
        return analyze_tail_risk(losses, rng)
    except (ArithmeticError, ValueError):
        return fallback_evt_result()
