"""Action recommendations derived from the profile and its complexity analysis."""

from dataclasses import dataclass, field
from datetime import date, timedelta

from wealth_extinction.complexity import ComplexityResult
from wealth_extinction.investments import optimal_allocation
from wealth_extinction.profile import HouseholdProfile

PRIORITY_WEIGHTS = {"critical": 3, "high": 2, "medium": 1}

EXPENSE_RATIO = 0.6
EMERGENCY_MONTHS = 6
INSURANCE_COVER_MULTIPLE = 10
INSURANCE_PREMIUM = 25_000
REBALANCING_DRIFT_LIMIT = 0.1
REBALANCING_COST = 100_000
EDUCATION_SEED_SHARE = 0.1
MAX_COORDINATION_ITEMS = 3

EDUCATION_ESTIMATES = {
    "international": 8_000_000,
    "private_premium": 4_000_000,
    "private_state": 2_500_000,
    "public_premium": 1_500_000,
    "public_state": 800_000,
}
DEFAULT_EDUCATION_ESTIMATE = 2_000_000


@dataclass
class ImmediateAction:
    action: str
    priority: str  # critical / high / medium
    timeline_impact: float  # years added to the extinction horizon
    cost: float
    deadline: date


@dataclass
class PlannedAction:
    action: str
    timeframe: str
    expected_benefit: str


@dataclass
class Recommendations:
    immediate: list[ImmediateAction] = field(default_factory=list)
    short_term: list[PlannedAction] = field(default_factory=list)
    long_term: list[PlannedAction] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


def emergency_fund_amount(profile: HouseholdProfile, complexity_score: float) -> float:
    monthly = profile.finances.annual_income * EXPENSE_RATIO / 12
    return monthly * EMERGENCY_MONTHS * (1 + complexity_score / 10)


def education_estimate(aspiration: str) -> float:
    return EDUCATION_ESTIMATES.get(aspiration, DEFAULT_EDUCATION_ESTIMATE)


def _immediate(profile: HouseholdProfile, score: float, today: date) -> list[ImmediateAction]:
    actions = []

    fund = emergency_fund_amount(profile, score)
    actions.append(ImmediateAction(
        f"Build emergency fund of {fund:,.0f} within 3 months",
        "critical", 2, fund, today + timedelta(days=30),
    ))

    cover = profile.finances.annual_income * INSURANCE_COVER_MULTIPLE
    actions.append(ImmediateAction(
        f"Purchase term life insurance with {cover:,.0f} coverage",
        "critical", 3, INSURANCE_PREMIUM, today + timedelta(days=15),
    ))

    current = profile.finances.allocation
    target = optimal_allocation(profile.core.age, profile.behavior.risk_tolerance)
    drift = abs(current.stocks - target.stocks) + abs(current.bonds - target.bonds)
    if drift > REBALANCING_DRIFT_LIMIT:
        actions.append(ImmediateAction(
            f"Rebalance portfolio to {target.stocks:.0%} equity, {target.bonds:.0%} debt allocation",
            "high", 1, REBALANCING_COST, today + timedelta(days=45),
        ))

    if profile.children:
        child = profile.children[0]
        estimate = education_estimate(child.education_aspirations)
        actions.append(ImmediateAction(
            f"Start education fund for {child.name} with {estimate:,.0f}",
            "high", 2, estimate * EDUCATION_SEED_SHARE, today + timedelta(days=90),
        ))

    # stable sort keeps insertion order within a priority
    return sorted(actions, key=lambda a: PRIORITY_WEIGHTS[a.priority], reverse=True)


def _short_term(profile: HouseholdProfile, complexity: ComplexityResult) -> list[PlannedAction]:
    actions = [
        PlannedAction(
            f"Implement {opp.name.lower()}",
            opp.time_to_implement,
            f"Save {opp.savings:.1%} of annual expenses",
        )
        for opp in complexity.coordination_opportunities[:MAX_COORDINATION_ITEMS]
    ]
    actions.append(PlannedAction(
        "Optimize tax structure for business income", "6 months", "Reduce tax liability by 15-20%",
    ))
    actions.append(PlannedAction(
        "Increase systematic investment plan (SIP)", "12 months", "Improve portfolio returns by 2-3% annually",
    ))
    if profile.family.parents:
        actions.append(PlannedAction(
            "Research and budget for care facilities", "8 months",
            "Reduce care costs by 25-30% through coordination",
        ))
    return actions


def _long_term(profile: HouseholdProfile) -> list[PlannedAction]:
    actions = [
        PlannedAction(
            "Plan for smooth wealth transfer to next generation", "2-3 years",
            "Ensure smooth wealth transfer and minimize taxes",
        ),
        PlannedAction(
            "Plan for post-retirement income sources", "5-10 years",
            "Achieve financial independence by age 60",
        ),
    ]
    if profile.family.siblings:
        actions.append(PlannedAction(
            "Establish family investment pool", "3-5 years",
            "Create sustainable family wealth management system",
        ))
    actions.append(PlannedAction(
        "Diversify into international and alternative investments", "5-7 years",
        "Build globally diversified portfolio for better risk-adjusted returns",
    ))
    return actions


def personalized_insights(profile: HouseholdProfile, complexity: ComplexityResult) -> list[str]:
    insights = []
    if complexity.score > 7:
        insights.append("Your family situation is highly complex. Consider professional financial planning assistance.")
    if profile.core.age > 50:
        insights.append("Focus on wealth preservation and retirement planning as you approach retirement age.")
    if len(profile.children) > 2:
        insights.append("With multiple children, prioritize education planning and consider bulk purchase strategies.")
    if profile.family.parents:
        insights.append("Coordinate with siblings for parent care to reduce costs and improve care quality.")
    if profile.core.financial_sophistication == "beginner":
        insights.append("Consider working with a financial advisor to improve your investment knowledge and strategy.")
    return insights


def generate_recommendations(
    profile: HouseholdProfile,
    complexity: ComplexityResult,
    today: date | None = None,
) -> Recommendations:
    if today is None:
        today = date.today()
    return Recommendations(
        immediate=_immediate(profile, complexity.score, today),
        short_term=_short_term(profile, complexity),
        long_term=_long_term(profile),
        insights=personalized_insights(profile, complexity),
    )


def recommendation_impact_score(item: ImmediateAction) -> int:
    """Rank an action by years gained, cost efficiency and priority."""
    impact = item.timeline_impact * 10
    if item.cost > 0:
        impact += item.timeline_impact * 10 / (item.cost / 100_000)
    return round(impact * PRIORITY_WEIGHTS.get(item.priority, 1))
