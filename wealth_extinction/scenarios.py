"""Best / likely / worst case scenarios and stress tests from Monte Carlo runs."""

import math
from dataclasses import dataclass, field

from wealth_extinction.monte_carlo import ScenarioRun

# percentile: baseline offset used when no runs completed
PERCENTILE_FALLBACK_OFFSETS = {0.10: -5, 0.25: -3, 0.50: 0, 0.75: 3, 0.90: 5}
INTERVAL_LOW = 0.025
INTERVAL_HIGH = 0.975

BEST_CASE_CONDITIONS = (
    "Optimal investment returns",
    "Lower than expected inflation",
    "Minimal unexpected expenses",
    "Excellent family coordination",
)
MOST_LIKELY_CONDITIONS = (
    "Average investment returns",
    "Expected inflation rates",
    "Typical life events and expenses",
    "Good family coordination",
)
WORST_CASE_CONDITIONS = (
    "Below average investment returns",
    "Higher than expected inflation",
    "Multiple unexpected expenses",
    "Poor family coordination",
)


@dataclass(frozen=True)
class StressTestSpec:
    scenario: str
    years_impact: int
    wealth_impact: float
    probability: float
    description: str


STRESS_TESTS = (
    StressTestSpec(
        "Market Crash + Health Emergency", -8, -3_500_000, 0.03,
        "Simultaneous 30% market decline and major health emergency",
    ),
    StressTestSpec(
        "Extended Bear Market", -5, -2_200_000, 0.05,
        "5-year period of negative real returns",
    ),
    StressTestSpec(
        "Family Coordination Failure", -4, -1_800_000, 0.07,
        "Lack of coordination leading to inefficient resource allocation",
    ),
)


@dataclass
class ScenarioCase:
    extinction_year: int
    probability: float
    conditions: list[str] = field(default_factory=list)


@dataclass
class StressTest:
    scenario: str
    extinction_year_impact: int
    extinction_year: int
    wealth_impact: float
    probability: float
    description: str


@dataclass
class ScenarioStatistics:
    median: float
    mean: float
    std: float
    confidence_interval_95: tuple[float, float]
    interquartile_range: tuple[float, float]
    n_runs: int = 0


@dataclass
class ScenarioAnalysis:
    best_case: ScenarioCase
    most_likely: ScenarioCase
    worst_case: ScenarioCase
    stress_tests: list[StressTest]
    statistics: ScenarioStatistics


def mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def std(values: list[float]) -> float:
    """Population standard deviation, 0 for an empty sample."""
    if not values:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def _at_fraction(sorted_years: list[int], fraction: float, fallback: int) -> int:
    if not sorted_years:
        return fallback
    idx = min(math.floor(fraction * len(sorted_years)), len(sorted_years) - 1)
    return sorted_years[idx]


def analyze_scenarios(runs: list[ScenarioRun], baseline_extinction_year: int) -> ScenarioAnalysis:
    """Summarize the extinction-year distribution of Monte Carlo runs."""
    years = sorted(r.extinction_year for r in runs)
    marks = {
        p: _at_fraction(years, p, baseline_extinction_year + offset)
        for p, offset in PERCENTILE_FALLBACK_OFFSETS.items()
    }

    stress_tests = [
        StressTest(
            scenario=s.scenario,
            extinction_year_impact=s.years_impact,
            extinction_year=baseline_extinction_year + s.years_impact,
            wealth_impact=s.wealth_impact,
            probability=s.probability,
            description=s.description,
        )
        for s in STRESS_TESTS
    ]

    statistics = ScenarioStatistics(
        median=marks[0.50],
        mean=mean(years),
        std=std(years),
        confidence_interval_95=(
            _at_fraction(years, INTERVAL_LOW, marks[0.10]),
            _at_fraction(years, INTERVAL_HIGH, marks[0.90]),
        ),
        interquartile_range=(marks[0.25], marks[0.75]),
        n_runs=len(years),
    )

    return ScenarioAnalysis(
        best_case=ScenarioCase(marks[0.90], 0.1, list(BEST_CASE_CONDITIONS)),
        most_likely=ScenarioCase(marks[0.50], 0.6, list(MOST_LIKELY_CONDITIONS)),
        worst_case=ScenarioCase(marks[0.10], 0.1, list(WORST_CASE_CONDITIONS)),
        stress_tests=stress_tests,
        statistics=statistics,
    )
