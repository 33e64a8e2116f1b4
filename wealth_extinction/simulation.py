"""Year-by-year wealth trajectory simulation."""

from dataclasses import dataclass, field
from random import Random

from wealth_extinction.events import sample_life_events
from wealth_extinction.expenses import project_expenses
from wealth_extinction.income import project_income
from wealth_extinction.investments import project_investment_return
from wealth_extinction.profile import HouseholdProfile

BASE_YEAR = 2025
SIMULATION_YEARS = 75
BASE_MAX_YEARS = 60
BASE_RUNAWAY_MULTIPLE = 15
NO_EXTINCTION_YEAR = 2100
EXTINCTION_HORIZON_PADDING = 10
NEUTRAL_COMPLEXITY = 5.0

MIN_CONFIDENCE = 0.25
MAX_CONFIDENCE = 0.95
CONFIDENCE_DECAY_PER_YEAR = 0.012
CONFIDENCE_PER_COMPLEXITY_POINT = 0.06

MAJOR_DROP_SHARE = 0.2
MAJOR_DROP_AMOUNT = 1_000_000
NEGATIVE_CASH_FLOW_RUN = 3


@dataclass
class YearRecord:
    """One simulated year. `wealth` is the end-of-year balance, floored at 0."""

    year: int
    age: int
    wealth: float
    income: float
    expenses: float
    net_cash_flow: float
    events: list[str] = field(default_factory=list)
    confidence: float = MAX_CONFIDENCE


def confidence_level(year_index: int, complexity_score: float) -> float:
    """Projection confidence, decaying with horizon and household complexity."""
    raw = (
        MAX_CONFIDENCE
        - year_index * CONFIDENCE_DECAY_PER_YEAR
        - (complexity_score - NEUTRAL_COMPLEXITY) * CONFIDENCE_PER_COMPLEXITY_POINT
    )
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, raw))


def simulate_trajectory(
    profile: HouseholdProfile,
    rng: Random,
    max_years: int = BASE_MAX_YEARS,
    runaway_multiple: float = BASE_RUNAWAY_MULTIPLE,
    events_per_year: int = 3,
) -> list[YearRecord]:
    """Integrate income, expenses, returns and life events into a trajectory.

    Stops after the first year in which wealth reaches 0, after `max_years`
    (never more than SIMULATION_YEARS), or once wealth exceeds
    `runaway_multiple` times the starting net worth.
    """
    net_worth = profile.finances.net_worth
    score = profile.complexity_score if profile.complexity_score is not None else NEUTRAL_COMPLEXITY
    wealth = net_worth
    trajectory: list[YearRecord] = []

    for y in range(min(SIMULATION_YEARS, max_years)):
        age = profile.core.age + y
        income = project_income(y, age, profile, rng)
        expenses = project_expenses(y, age, profile, rng).total
        returns = project_investment_return(wealth, y, profile, rng)
        life = sample_life_events(rng, y, age, profile)

        net = income - expenses + returns + life.net_impact
        wealth = max(0.0, wealth + net)
        trajectory.append(YearRecord(
            year=BASE_YEAR + y,
            age=age,
            wealth=wealth,
            income=income,
            expenses=expenses,
            net_cash_flow=net,
            events=life.events[:events_per_year],
            confidence=confidence_level(y, score),
        ))

        if wealth <= 0:
            break
        if net_worth > 0 and wealth > net_worth * runaway_multiple:
            break
    return trajectory


def find_extinction_year(trajectory: list[YearRecord]) -> int:
    """First year wealth hits 0; otherwise the last simulated year plus padding."""
    for record in trajectory:
        if record.wealth <= 0:
            return record.year
    if trajectory:
        return trajectory[-1].year + EXTINCTION_HORIZON_PADDING
    return NO_EXTINCTION_YEAR


def identify_scenario_risks(trajectory: list[YearRecord]) -> list[str]:
    """Describe sustained negative cash flow and sharp wealth drops."""
    risks = []
    negative_run = 0
    for record in trajectory:
        if record.net_cash_flow < 0:
            negative_run += 1
            if negative_run == NEGATIVE_CASH_FLOW_RUN:
                start_age = record.age - (NEGATIVE_CASH_FLOW_RUN - 1)
                risks.append(f"Sustained negative cash flow starting at age {start_age}")
        else:
            negative_run = 0

    for prev, cur in zip(trajectory, trajectory[1:]):
        if prev.wealth <= 0:
            continue
        drop = prev.wealth - cur.wealth
        share = drop / prev.wealth
        if share > MAJOR_DROP_SHARE and drop > MAJOR_DROP_AMOUNT:
            risks.append(f"Major wealth drop ({share * 100:.1f}%) at age {cur.age}")
    return risks
