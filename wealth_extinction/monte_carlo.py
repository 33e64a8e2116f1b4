"""Monte Carlo simulation engine."""

import dataclasses
import math
import sys
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from random import Random
from typing import Callable

from wealth_extinction.profile import Allocation, HouseholdProfile
from wealth_extinction.simulation import (
    find_extinction_year,
    identify_scenario_risks,
    simulate_trajectory,
)

MC_PERCENTILES = (10, 25, 50, 75, 90)
EXECUTORS = ("thread", "process", "none")
MAX_EVENTS_PER_RUN = 5
MAX_RISKS_PER_RUN = 3


@dataclass
class MonteCarloConfig:
    """Configuration for Monte Carlo simulation."""

    n_simulations: int = 20
    seed: int | None = None
    batch_size: int = 5
    time_budget: float = 10.0  # seconds, checked between batches
    max_years: int = 50
    runaway_multiple: float = 10
    executor: str = "thread"  # thread / process / none
    max_workers: int | None = None

    def __post_init__(self):
        if self.n_simulations < 0:
            raise ValueError(f"n_simulations must be non-negative, got {self.n_simulations}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")


@dataclass
class ScenarioRun:
    """Summary of one perturbed trajectory."""

    run_id: int
    extinction_year: int
    final_wealth: float
    events: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)


@dataclass
class MonteCarloResult:
    """Completed runs plus extinction-year distribution summary."""

    runs: list[ScenarioRun] = field(default_factory=list)
    n_requested: int = 0
    timed_out: bool = False
    elapsed: float = 0.0
    percentiles: dict[int, int] = field(default_factory=dict)
    mean: float = 0.0
    std: float = 0.0

    @property
    def n_completed(self) -> int:
        return len(self.runs)

    @property
    def extinction_years(self) -> list[int]:
        return [r.extinction_year for r in self.runs]


def _percentile_from_sorted(sorted_vals: list, p: int):
    """Calculate percentile from a pre-sorted list."""
    n = len(sorted_vals)
    idx = max(0, min(int(p / 100 * n), n - 1))
    return sorted_vals[idx]


def perturb_profile(profile: HouseholdProfile, rng: Random) -> HouseholdProfile:
    """Derive a Monte Carlo variant of `profile`.

    Income varies by ±20%, net worth by ±15%, each parent has a 10% chance of
    falling into poor health and each allocation weight varies by ±10% before
    renormalization. Only the perturbed fields are replaced.
    """
    finances = profile.finances
    income = finances.annual_income * rng.uniform(0.8, 1.2)
    net_worth = finances.net_worth * rng.uniform(0.85, 1.15)

    parents = tuple(
        dataclasses.replace(p, health_status="poor") if rng.random() < 0.1 else p
        for p in profile.family.parents
    )

    weights = {name: value * rng.uniform(0.9, 1.1) for name, value in finances.allocation.as_dict().items()}
    total = sum(weights.values())
    allocation = Allocation(**{k: v / total for k, v in weights.items()}) if total > 0 else finances.allocation

    return dataclasses.replace(
        profile,
        finances=dataclasses.replace(
            finances, annual_income=income, net_worth=net_worth, allocation=allocation,
        ),
        family=dataclasses.replace(profile.family, parents=parents),
    )


def run_single_scenario(
    profile: HouseholdProfile, run_id: int, seed: int, config: MonteCarloConfig,
) -> ScenarioRun:
    """Perturb the profile, simulate it and summarize the outcome.

    Takes an integer seed so that it can be shipped to worker processes.
    """
    rng = Random(seed)
    variant = perturb_profile(profile, rng)
    trajectory = simulate_trajectory(
        variant, rng,
        max_years=config.max_years,
        runaway_multiple=config.runaway_multiple,
        events_per_year=2,
    )
    events = [e for record in trajectory for e in record.events]
    return ScenarioRun(
        run_id=run_id,
        extinction_year=find_extinction_year(trajectory),
        final_wealth=trajectory[-1].wealth if trajectory else 0.0,
        events=events[:MAX_EVENTS_PER_RUN],
        risks=identify_scenario_risks(trajectory)[:MAX_RISKS_PER_RUN],
    )


def _make_executor(config: MonteCarloConfig) -> Executor | None:
    if config.executor == "none":
        return None
    if config.executor == "process":
        return ProcessPoolExecutor(max_workers=config.max_workers)
    return ThreadPoolExecutor(max_workers=config.max_workers)


def _summarize(result: MonteCarloResult) -> None:
    years = sorted(result.extinction_years)
    n = len(years)
    if n == 0:
        return
    result.percentiles = {p: _percentile_from_sorted(years, p) for p in MC_PERCENTILES}
    result.mean = sum(years) / n
    result.std = math.sqrt(sum((y - result.mean) ** 2 for y in years) / n)


def run_monte_carlo(
    profile: HouseholdProfile,
    config: MonteCarloConfig,
    rng: Random | None = None,
    quiet: bool = False,
    clock: Callable[[], float] = time.monotonic,
) -> MonteCarloResult:
    """Run up to `config.n_simulations` perturbed trajectories in batches.

    The time budget is checked after every batch. Once it is exceeded no
    further batches are issued and the runs completed so far are returned
    with `timed_out` set; the budget never raises.
    """
    if rng is None:
        rng = Random(config.seed)
    # one independent stream per run, derived up front so results do not
    # depend on worker scheduling
    seeds = [rng.getrandbits(64) for _ in range(config.n_simulations)]
    result = MonteCarloResult(n_requested=config.n_simulations)
    start = clock()
    executor = _make_executor(config)

    try:
        for batch_start in range(0, config.n_simulations, config.batch_size):
            batch = range(batch_start, min(batch_start + config.batch_size, config.n_simulations))
            if executor is None:
                runs = [run_single_scenario(profile, i, seeds[i], config) for i in batch]
            else:
                futures = [
                    executor.submit(run_single_scenario, profile, i, seeds[i], config)
                    for i in batch
                ]
                runs = [f.result() for f in futures]
            result.runs.extend(runs)

            if not quiet:
                print(
                    f"\r  Monte Carlo: {result.n_completed}/{config.n_simulations}",
                    end="", file=sys.stderr,
                )
            if clock() - start > config.time_budget and result.n_completed < config.n_simulations:
                result.timed_out = True
                if not quiet:
                    print(
                        f"\n  Monte Carlo stopped early after {config.time_budget:.1f}s",
                        end="", file=sys.stderr,
                    )
                break
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    if not quiet and config.n_simulations > 0:
        print(file=sys.stderr)
    result.elapsed = clock() - start
    _summarize(result)
    return result
