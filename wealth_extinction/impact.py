"""Generational impact: inheritance for children and grandchildren."""

from collections import Counter
from dataclasses import dataclass, field

from wealth_extinction.events import WEDDING_COSTS
from wealth_extinction.profile import HouseholdProfile
from wealth_extinction.simulation import BASE_YEAR, YearRecord

LIFE_EXPECTANCY = 85
ESTATE_TAX_EXEMPTION = 10_000_000
ESTATE_TAX_RATE = 0.10
TRANSFER_COST_RATE = 0.05
GRANDCHILDREN_SHARE = 0.3
GRANDCHILDREN_PER_CHILD = 1.5
YEARS_UNTIL_GRANDCHILD_COLLEGE = 30
EDUCATION_INFLATION = 0.08
DEFAULT_EDUCATION_PATH = "private_state"

EDUCATION_COSTS = {
    "public_state": 800_000,
    "public_premium": 1_500_000,
    "private_state": 2_500_000,
    "private_premium": 4_000_000,
    "international": 8_000_000,
}

BASE_PLANNING_EFFICIENCY = {"expert": 0.9, "good": 0.8, "moderate": 0.7, "beginner": 0.6}
PLANNING_APPROACH_ADJUSTMENT = {
    "detailed_research": 0.05,
    "important_overwhelming": -0.05,
    "delegate_experts": 0.03,
    "avoid_thinking": -0.1,
}
COORDINATION_ADJUSTMENT = {"excellent": 0.05, "poor": -0.1}
MIN_EFFICIENCY = 0.5
MAX_EFFICIENCY = 0.95

# (threshold, tier); first match wins
STATUS_TIERS = (
    (100_000_000, "Ultra High Net Worth"),
    (10_000_000, "High Net Worth"),
    (5_000_000, "Affluent"),
    (2_000_000, "Upper Middle Class"),
    (500_000, "Middle Class"),
)

PARENT_CARE_ANNUAL = {
    "occasional_support": 120_000,
    "regular_support": 300_000,
    "full_dependency": 600_000,
}
RETIREMENT_AGE = 60
RETIREMENT_REPLACEMENT = 0.7
RETIREMENT_YEARS = 25


@dataclass
class ChildInheritance:
    name: str
    age: int  # age at the year of transfer
    inheritance: float


@dataclass
class CurrentStatus:
    net_worth: float
    status: str


@dataclass
class InheritanceImpact:
    year: int
    estate_tax: float
    transfer_costs: float
    net_transfer: float
    planning_efficiency: float
    effective_transfer: float
    children: list[ChildInheritance] = field(default_factory=list)


@dataclass
class GrandchildrenImpact:
    year: int
    estimated_grandchildren: float
    inheritance: float
    per_grandchild: float
    future_education_cost: float
    college_shortfall: float


@dataclass
class LifeEventImpact:
    event: str
    timing: str
    financial_impact: float
    description: str


@dataclass
class FamilyImpact:
    today: CurrentStatus
    inheritance: InheritanceImpact
    grandchildren: GrandchildrenImpact
    life_events: list[LifeEventImpact] = field(default_factory=list)


def financial_status(net_worth: float) -> str:
    for threshold, tier in STATUS_TIERS:
        if net_worth >= threshold:
            return tier
    return "Building Wealth"


def estate_tax(wealth: float) -> float:
    if wealth <= ESTATE_TAX_EXEMPTION:
        return 0.0
    return (wealth - ESTATE_TAX_EXEMPTION) * ESTATE_TAX_RATE


def planning_efficiency(profile: HouseholdProfile) -> float:
    efficiency = BASE_PLANNING_EFFICIENCY.get(profile.core.financial_sophistication, 0.7)
    efficiency += PLANNING_APPROACH_ADJUSTMENT.get(profile.behavior.planning_approach, 0)
    efficiency += COORDINATION_ADJUSTMENT.get(profile.family.family_coordination, 0)
    return min(MAX_EFFICIENCY, max(MIN_EFFICIENCY, efficiency))


def wealth_at_year(trajectory: list[YearRecord], year: int) -> float:
    """Wealth of the first record at or after `year`, else the last record."""
    for record in trajectory:
        if record.year >= year:
            return record.wealth
    return trajectory[-1].wealth if trajectory else 0.0


def dominant_education_path(profile: HouseholdProfile) -> str:
    if not profile.children:
        return DEFAULT_EDUCATION_PATH
    counts = Counter(c.education_aspirations for c in profile.children)
    return counts.most_common(1)[0][0]


def calculate_family_impact(profile: HouseholdProfile, trajectory: list[YearRecord]) -> FamilyImpact:
    """Project what the household passes on at an assumed death at age 85."""
    death_year = BASE_YEAR + (LIFE_EXPECTANCY - profile.core.age)
    wealth = wealth_at_year(trajectory, death_year)

    tax = estate_tax(wealth)
    costs = wealth * TRANSFER_COST_RATE
    net = max(0.0, wealth - tax - costs)
    efficiency = planning_efficiency(profile)
    effective = net * efficiency
    per_child = effective / max(1, len(profile.children))
    children = [
        ChildInheritance(name=c.name, age=c.age + (death_year - BASE_YEAR), inheritance=per_child)
        for c in profile.children
    ]
    inheritance = InheritanceImpact(
        year=death_year,
        estate_tax=tax,
        transfer_costs=costs,
        net_transfer=net,
        planning_efficiency=efficiency,
        effective_transfer=effective,
        children=children,
    )

    estimated = max(1, len(profile.children) * GRANDCHILDREN_PER_CHILD)
    grandchildren_total = effective * GRANDCHILDREN_SHARE
    per_grandchild = grandchildren_total / estimated
    college_year = death_year + YEARS_UNTIL_GRANDCHILD_COLLEGE
    path = dominant_education_path(profile)
    future_cost = EDUCATION_COSTS.get(path, EDUCATION_COSTS[DEFAULT_EDUCATION_PATH]) * (
        (1 + EDUCATION_INFLATION) ** (college_year - BASE_YEAR)
    )
    grandchildren = GrandchildrenImpact(
        year=college_year,
        estimated_grandchildren=estimated,
        inheritance=grandchildren_total,
        per_grandchild=per_grandchild,
        future_education_cost=future_cost,
        college_shortfall=max(0.0, future_cost - per_grandchild),
    )

    return FamilyImpact(
        today=CurrentStatus(
            net_worth=profile.finances.net_worth,
            status=financial_status(profile.finances.net_worth),
        ),
        inheritance=inheritance,
        grandchildren=grandchildren,
        life_events=life_event_impacts(profile),
    )


def life_event_impacts(profile: HouseholdProfile) -> list[LifeEventImpact]:
    """Big-ticket family obligations, largest first."""
    age = profile.core.age
    impacts = []
    for child in profile.children:
        cost = EDUCATION_COSTS.get(child.education_aspirations, EDUCATION_COSTS[DEFAULT_EDUCATION_PATH])
        offset = child.age - age
        impacts.append(LifeEventImpact(
            event=f"{child.name}'s Education",
            timing=f"Ages {18 + offset} to {22 + offset}",
            financial_impact=-cost,
            description=f"College education costs based on {child.education_aspirations.replace('_', ' ')} path",
        ))

    for parent in profile.family.parents:
        annual = PARENT_CARE_ANNUAL.get(parent.financial_independence, 0)
        if annual <= 0:
            continue
        years = max(5, 90 - parent.age)
        impacts.append(LifeEventImpact(
            event=f"{parent.name}'s Care",
            timing=f"Next {years} years",
            financial_impact=-annual * years,
            description=f"Ongoing care costs based on {parent.financial_independence.replace('_', ' ')} status",
        ))

    city = profile.core.city_type
    wedding = WEDDING_COSTS.get(city, WEDDING_COSTS["tier2"])
    for child in profile.children:
        impacts.append(LifeEventImpact(
            event=f"{child.name}'s Wedding",
            timing=f"In {max(0, 28 - child.age)} years",
            financial_impact=-(wedding.low + wedding.high) / 2,
            description=f"Estimated wedding costs based on {city} location",
        ))

    years_to_retirement = max(0, RETIREMENT_AGE - age)
    if years_to_retirement <= 30:
        needs = profile.finances.annual_income * RETIREMENT_REPLACEMENT * RETIREMENT_YEARS
        impacts.append(LifeEventImpact(
            event="Retirement",
            timing=f"In {years_to_retirement} years",
            financial_impact=-needs,
            description=(
                f"Estimated retirement needs for {RETIREMENT_YEARS} years "
                f"at {RETIREMENT_REPLACEMENT:.0%} income replacement"
            ),
        ))
    return sorted(impacts, key=lambda i: abs(i.financial_impact), reverse=True)
