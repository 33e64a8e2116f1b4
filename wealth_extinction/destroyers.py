"""Ranking of the factors most likely to deplete household wealth."""

from dataclasses import dataclass
from typing import Callable

from wealth_extinction.profile import HouseholdProfile

NEUTRAL_COMPLEXITY = 5.0
HIGH_IMPACT = 2_000_000
MEDIUM_IMPACT = 1_000_000


@dataclass
class WealthDestroyer:
    factor: str
    impact: float
    description: str
    prevention_strategy: str


@dataclass
class PreventionStrategy:
    destroyer: str
    strategy: str
    difficulty: str  # easy / medium / hard
    impact: str  # low / medium / high
    timeframe: str


def _income_factor(income: float) -> float:
    if income > 2_000_000:
        return 1.5
    if income > 1_000_000:
        return 1.2
    if income > 500_000:
        return 1.0
    return 0.8


def _age_factor(age: int, bands: tuple[float, float, float, float]) -> float:
    """Factor for age bands <40, <50, <60 and 60+."""
    if age < 40:
        return bands[0]
    if age < 50:
        return bands[1]
    if age < 60:
        return bands[2]
    return bands[3]


def _net_worth_factor(net_worth: float, bands: tuple[float, float, float, float]) -> float:
    """Factor for net worth above 1e7, above 5e6, above 1e6 and the rest."""
    if net_worth > 10_000_000:
        return bands[0]
    if net_worth > 5_000_000:
        return bands[1]
    if net_worth > 1_000_000:
        return bands[2]
    return bands[3]


EDUCATION_ASPIRATION_WEIGHT = {
    "international": 2.0,
    "private_premium": 1.5,
    "private_state": 1.0,
    "public_premium": 0.7,
    "public_state": 0.5,
}


def education_context(p: HouseholdProfile) -> float:
    # per-child average multiplier times child count
    return 1.0 + sum(EDUCATION_ASPIRATION_WEIGHT.get(c.education_aspirations, 0) for c in p.children)


def healthcare_context(p: HouseholdProfile) -> float:
    family = 1.0 + 0.2 * sum(1 for parent in p.family.parents if parent.health_status in ("poor", "fair"))
    return _age_factor(p.core.age, (0.8, 1.0, 1.3, 1.6)) * family


PARENT_DEPENDENCY_WEIGHT = {
    "independent": 0.2,
    "occasional_support": 0.6,
    "regular_support": 1.0,
    "full_dependency": 1.5,
}
SIBLING_COORDINATION_FACTOR = {"excellent": 0.6, "good": 0.8, "poor": 1.2}


def parent_care_context(p: HouseholdProfile) -> float:
    factor = 0.0
    for parent in p.family.parents:
        factor += PARENT_DEPENDENCY_WEIGHT.get(parent.financial_independence, 0)
        factor += {"poor": 0.5, "fair": 0.3}.get(parent.health_status, 0)
        factor += {"different_state": 0.3, "different_city": 0.1}.get(parent.location, 0)
    if p.family.siblings:
        factor *= SIBLING_COORDINATION_FACTOR.get(p.family.family_coordination, 1.0)
    return factor


CRASH_RESPONSE_FACTOR = {
    "panic_sell": 2.0,
    "worry_hold": 1.2,
    "buying_opportunity": 0.5,
    "ignore_it": 0.8,
}


def market_volatility_context(p: HouseholdProfile) -> float:
    risk = {"aggressive": 1.5, "moderate": 1.0}.get(p.behavior.risk_tolerance, 0.7)
    behavior = CRASH_RESPONSE_FACTOR.get(p.behavior.market_crash_response, 1.0)
    sophistication = {"expert": 0.6, "good": 0.8, "moderate": 1.0}.get(p.core.financial_sophistication, 1.3)
    return risk * behavior * sophistication


def lifestyle_context(p: HouseholdProfile) -> float:
    city = {"metro": 1.4, "tier2": 1.2, "tier3": 1.0}.get(p.core.city_type, 0.8)
    return _income_factor(p.finances.annual_income) * city


def tax_context(p: HouseholdProfile) -> float:
    sophistication = {"expert": 0.5, "good": 0.7, "moderate": 1.0}.get(p.core.financial_sophistication, 1.3)
    return sophistication * _income_factor(p.finances.annual_income)


def fees_context(p: HouseholdProfile) -> float:
    sophistication = {"expert": 0.6, "good": 0.8, "moderate": 1.0}.get(p.core.financial_sophistication, 1.2)
    return sophistication * _net_worth_factor(p.finances.net_worth, (1.5, 1.2, 1.0, 0.8))


def emergency_context(p: HouseholdProfile) -> float:
    return (1.0 + 0.2 * len(p.children)) * _age_factor(p.core.age, (0.8, 1.0, 1.2, 1.4))


def disputes_context(p: HouseholdProfile) -> float:
    siblings = 1.0
    for sibling in p.family.siblings:
        siblings += {"strained": 0.3, "non_communicative": 0.5}.get(sibling.relationship_quality, 0)
    coordination = {"excellent": 0.5, "good": 0.8, "chaotic": 1.5}.get(p.family.family_coordination, 2.0)
    return siblings * coordination


def estate_context(p: HouseholdProfile) -> float:
    family = 1.0 + 0.2 * len(p.children) + 0.1 * len(p.family.siblings)
    return _net_worth_factor(p.finances.net_worth, (1.8, 1.4, 1.0, 0.7)) * family


@dataclass(frozen=True)
class DestroyerSpec:
    factor: str
    base_impact: float
    complexity_sensitivity: float
    description: str
    prevention_strategy: str
    difficulty: str
    timeframe: str
    context: Callable[[HouseholdProfile], float]
    applies: Callable[[HouseholdProfile], bool] = lambda p: True


DESTROYERS = (
    DestroyerSpec(
        "Education Costs", 2_500_000, 0.2,
        "High education aspirations for children can significantly impact wealth",
        "Start education planning early, explore scholarships and loans",
        "hard", "1-2 years", education_context, lambda p: bool(p.children),
    ),
    DestroyerSpec(
        "Healthcare Expenses", 1_800_000, 0.15,
        "Unexpected health emergencies can rapidly deplete wealth",
        "Maintain comprehensive health insurance and emergency fund",
        "hard", "1-2 years", healthcare_context,
    ),
    DestroyerSpec(
        "Parent Care Costs", 1_500_000, 0.25,
        "Caring for aging parents can strain family finances",
        "Coordinate with siblings and plan for care costs early",
        "hard", "1-2 years", parent_care_context, lambda p: bool(p.family.parents),
    ),
    DestroyerSpec(
        "Market Volatility", 1_200_000, 0.1,
        "Poor investment decisions during market downturns",
        "Maintain diversified portfolio and avoid panic selling",
        "medium", "3-6 months", market_volatility_context,
    ),
    DestroyerSpec(
        "Lifestyle Inflation", 800_000, 0.15,
        "Increasing expenses outpacing income growth",
        "Monitor expenses and maintain disciplined spending",
        "medium", "3-6 months", lifestyle_context,
    ),
    DestroyerSpec(
        "Tax Inefficiency", 700_000, 0.1,
        "Suboptimal tax planning reducing investment returns",
        "Optimize investment accounts and tax planning",
        "easy", "3-6 months", tax_context,
    ),
    DestroyerSpec(
        "Investment Fees", 600_000, 0.05,
        "High fees eroding long-term investment returns",
        "Use low-cost investment vehicles and negotiate fees",
        "easy", "1-3 months", fees_context,
    ),
    DestroyerSpec(
        "Emergency Expenses", 500_000, 0.1,
        "Unexpected expenses without adequate emergency fund",
        "Build and maintain adequate emergency fund",
        "easy", "1-3 months", emergency_context,
    ),
    DestroyerSpec(
        "Family Disputes", 1_000_000, 0.3,
        "Financial conflicts and coordination failures among family members",
        "Establish clear communication and decision-making processes",
        "hard", "6-12 months", disputes_context, lambda p: bool(p.family.siblings),
    ),
    DestroyerSpec(
        "Estate Planning Gaps", 900_000, 0.2,
        "Inefficient wealth transfer due to inadequate estate planning",
        "Create comprehensive estate plan with professional guidance",
        "medium", "6-12 months", estate_context,
    ),
)
DESTROYERS_BY_FACTOR = {spec.factor: spec for spec in DESTROYERS}


def complexity_multiplier(score: float, sensitivity: float) -> float:
    """1 at or below neutral complexity, growing linearly above it."""
    if score <= NEUTRAL_COMPLEXITY:
        return 1.0
    return 1.0 + (score - NEUTRAL_COMPLEXITY) * sensitivity


def _all_destroyers(profile: HouseholdProfile) -> list[WealthDestroyer]:
    score = profile.complexity_score if profile.complexity_score is not None else NEUTRAL_COMPLEXITY
    return [
        WealthDestroyer(
            factor=spec.factor,
            impact=spec.base_impact * complexity_multiplier(score, spec.complexity_sensitivity) * spec.context(profile),
            description=spec.description,
            prevention_strategy=spec.prevention_strategy,
        )
        for spec in DESTROYERS
        if spec.applies(profile)
    ]


def rank_wealth_destroyers(profile: HouseholdProfile, limit: int = 5) -> list[WealthDestroyer]:
    """Applicable destroyers sorted by estimated impact, largest first."""
    ranked = sorted(_all_destroyers(profile), key=lambda d: d.impact, reverse=True)
    return ranked[:limit]


def impact_label(impact: float) -> str:
    if impact > HIGH_IMPACT:
        return "high"
    if impact > MEDIUM_IMPACT:
        return "medium"
    return "low"


def prevention_plan(destroyers: list[WealthDestroyer]) -> list[PreventionStrategy]:
    plan = []
    for d in destroyers:
        spec = DESTROYERS_BY_FACTOR.get(d.factor)
        plan.append(PreventionStrategy(
            destroyer=d.factor,
            strategy=d.prevention_strategy,
            difficulty=spec.difficulty if spec else "medium",
            impact=impact_label(d.impact),
            timeframe=spec.timeframe if spec else "6-12 months",
        ))
    return plan


def total_wealth_destruction(destroyers: list[WealthDestroyer]) -> float:
    return sum(d.impact for d in destroyers)
