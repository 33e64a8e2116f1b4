"""Stochastic lifecycle events sampled once per simulated year."""

from dataclasses import dataclass, field
from random import Random

from wealth_extinction.profile import HouseholdProfile


@dataclass(frozen=True)
class CostRange:
    low: float
    high: float

    def sample(self, rng: Random) -> float:
        return self.low + rng.random() * (self.high - self.low)


@dataclass(frozen=True)
class CareerEvent:
    probability: float
    impact: CostRange  # fraction of base income


WEDDING_COSTS = {
    "metro": CostRange(1_800_000, 6_000_000),
    "tier2": CostRange(1_000_000, 3_000_000),
    "tier3": CostRange(600_000, 1_800_000),
    "rural": CostRange(400_000, 1_200_000),
}
HEALTH_EMERGENCY_COSTS = {
    "minor": CostRange(60_000, 250_000),
    "moderate": CostRange(250_000, 1_000_000),
    "major": CostRange(1_000_000, 3_500_000),
    "critical": CostRange(3_500_000, 12_000_000),
}
INHERITANCE_RANGES = {
    "metro": CostRange(2_000_000, 10_000_000),
    "tier2": CostRange(1_000_000, 5_000_000),
    "tier3": CostRange(500_000, 2_500_000),
    "rural": CostRange(200_000, 1_000_000),
}
CAREER_EVENTS = {
    "promotion": CareerEvent(0.06, CostRange(0.08, 0.25)),
    "job_change": CareerEvent(0.08, CostRange(-0.25, 0.35)),
    "layoff": CareerEvent(0.04, CostRange(-0.60, -0.25)),
    "business_expansion": CareerEvent(0.03, CostRange(0.15, 0.50)),
}
SOCIAL_CITY_MULTIPLIERS = {"metro": 1.5, "tier2": 1.2, "tier3": 0.9, "rural": 0.7}
SOCIAL_INCOME_SHARE = 0.06
CAREER_EVENT_MAX_AGE = 55

COLLEGE_ADMISSION_COST = CostRange(60_000, 180_000)
POST_GRADUATION_COST = CostRange(120_000, 370_000)


@dataclass
class LifeEvents:
    """Net wealth impact and descriptions of the events sampled for one year."""

    net_impact: float = 0.0
    events: list[str] = field(default_factory=list)

    def add(self, amount: float, description: str) -> None:
        self.net_impact += amount
        self.events.append(description)


def wedding_probability(child_age: int) -> float:
    if 23 <= child_age <= 30:
        return 0.15
    if 31 <= child_age <= 35:
        return 0.08
    return 0.0


def health_emergency_probability(age: int, profile: HouseholdProfile) -> float:
    base = max(0.0, min(0.15, (age - 35) * 0.01))
    for parent in profile.family.parents:
        if parent.health_status == "poor":
            base *= 1.2
    return base


def _emergency_severity(rng: Random, age: int) -> str:
    if age < 50:
        return "minor" if rng.random() < 0.6 else "moderate"
    if age < 65:
        if rng.random() < 0.4:
            return "minor"
        return "moderate" if rng.random() < 0.7 else "major"
    if rng.random() < 0.2:
        return "minor"
    if rng.random() < 0.5:
        return "moderate"
    return "major" if rng.random() < 0.8 else "critical"


def _career_description(kind: str, impact: float) -> str:
    amount = f"{abs(impact):,.0f}"
    if kind == "promotion":
        return f"Career promotion: {amount} income boost"
    if kind == "job_change":
        direction = "increase" if impact > 0 else "decrease"
        return f"Job change: {amount} income {direction}"
    if kind == "layoff":
        return f"Job loss: {amount} income loss"
    return f"Business expansion: {amount} income boost"


def sample_life_events(rng: Random, year: int, age: int, profile: HouseholdProfile) -> LifeEvents:
    """Sample weddings, health emergencies, inheritance, career, social and education events."""
    result = LifeEvents()
    city = profile.core.city_type
    income = profile.finances.annual_income

    for child in profile.children:
        if rng.random() < wedding_probability(child.age + year):
            cost = WEDDING_COSTS.get(city, WEDDING_COSTS["tier2"]).sample(rng)
            result.add(-cost, f"{child.name}'s wedding: {cost:,.0f} expense")

    if rng.random() < health_emergency_probability(age, profile):
        severity = _emergency_severity(rng, age)
        cost = HEALTH_EMERGENCY_COSTS[severity].sample(rng)
        result.add(-cost, f"{severity.capitalize()} health emergency: {cost:,.0f} cost")

    for parent in profile.family.parents:
        parent_age = parent.age + year
        probability = min(0.08, (parent_age - 75) * 0.02) if parent_age > 75 else 0.0
        if rng.random() < probability:
            value = INHERITANCE_RANGES.get(city, INHERITANCE_RANGES["tier2"]).sample(rng)
            result.add(value, f"Property inheritance from {parent.name}: {value:,.0f} received")

    if age < CAREER_EVENT_MAX_AGE:
        for kind, event in CAREER_EVENTS.items():
            if rng.random() < event.probability:
                impact = income * event.impact.sample(rng)
                result.add(impact, _career_description(kind, impact))

    social = income * SOCIAL_INCOME_SHARE * SOCIAL_CITY_MULTIPLIERS.get(city, 1.0)
    result.add(-social, f"Annual social expenses: {social:,.0f}")

    for child in profile.children:
        child_age = child.age + year
        if child_age == 18:
            cost = COLLEGE_ADMISSION_COST.sample(rng)
            result.add(-cost, f"{child.name}'s college admission: {cost:,.0f}")
        if child_age == 22:
            cost = POST_GRADUATION_COST.sample(rng)
            result.add(-cost, f"{child.name}'s post-graduation: {cost:,.0f}")
    return result
