"""Household complexity scoring, coordination opportunities and risk factors."""

from dataclasses import dataclass, field

from wealth_extinction.profile import HouseholdProfile

MAX_SUB_SCORE = 10.0
DRIVER_THRESHOLD = 7.0
MAX_OPTIMIZATION_POTENTIAL = 0.5
MAX_RISK_PROBABILITY = 0.5

# sub-score: (weight, label used when the sub-score drives complexity)
FACTORS = {
    "children": (0.15, "Multiple children with diverse education needs"),
    "parent_care": (0.20, "Complex parent care requirements"),
    "sibling": (0.12, "Challenging sibling coordination"),
    "geographic": (0.10, "Geographic dispersion of family"),
    "health": (0.18, "Health-related financial risks"),
    "education": (0.12, "High-aspiration education planning"),
    "financial": (0.08, "Limited financial sophistication"),
    "employment": (0.05, "Complex employment situation"),
}

ASPIRATION_POINTS = {
    "international": 3,
    "private_premium": 2,
    "private_state": 1.5,
    "public_premium": 1,
    "public_state": 0.5,
}
PERFORMANCE_POINTS = {"struggling": 1.5, "exceptional": 0.5}
PARENT_HEALTH_POINTS = {"poor": 4, "fair": 2.5, "good": 1.5, "excellent": 0.5}
DEPENDENCY_POINTS = {
    "full_dependency": 3,
    "regular_support": 2,
    "occasional_support": 1,
    "independent": 0.2,
}
PARENT_LOCATION_POINTS = {"different_state": 2, "different_city": 1, "same_city": 0.2}
RELATIONSHIP_POINTS = {"non_communicative": 3, "strained": 2, "good": 1, "close": 0.5}
CAPACITY_POINTS = {"limited": 2, "moderate": 1, "strong": 0.2}
CITY_POINTS = {"metro": 2, "tier2": 1, "tier3": 0.5, "rural": 0.2}
SCHOOL_POINTS = {
    "international": 2,
    "private_english": 1.5,
    "private_vernacular": 1,
    "government": 0.5,
}
SOPHISTICATION_POINTS = {"beginner": 4, "moderate": 2, "good": 1, "expert": 0.5}
FINANCIAL_EMPLOYMENT_POINTS = {"business_owner": 2, "self_employed": 1.5, "corporate": 0.5}
EMPLOYMENT_STATUS_POINTS = {"business_owner": 3, "self_employed": 2, "corporate": 0.5}
ROLE_POINTS = {"leadership": 1.5, "senior": 1, "mid": 0.5, "junior": 0.2}

SOPHISTICATION_POTENTIAL = {"beginner": 0.15, "moderate": 0.10, "good": 0.05, "expert": 0.02}


@dataclass(frozen=True)
class OpportunitySpec:
    savings: float
    difficulty: str
    time_to_implement: str


COORDINATION_OPPORTUNITIES = {
    "family_meetings": OpportunitySpec(0.05, "low", "1 month"),
    "shared_resources": OpportunitySpec(0.08, "medium", "3 months"),
    "bulk_purchases": OpportunitySpec(0.03, "low", "2 weeks"),
    "care_coordination": OpportunitySpec(0.12, "high", "6 months"),
    "education_planning": OpportunitySpec(0.06, "medium", "4 months"),
    "investment_pooling": OpportunitySpec(0.10, "high", "8 months"),
}

# risk: (base probability, impact multiplier, mitigation)
RISK_FACTORS = {
    "health_emergency": (
        0.08, 1.5,
        "Build emergency fund, maintain health insurance, regular health checkups",
    ),
    "job_loss": (
        0.03, 1.2,
        "Diversify income sources, maintain skill development, build emergency fund",
    ),
    "market_crash": (
        0.15, 1.8,
        "Diversify investments, maintain long-term perspective, avoid panic selling",
    ),
    "family_conflict": (
        0.12, 1.3,
        "Open communication, family meetings, professional mediation if needed",
    ),
    "education_cost_spike": (
        0.06, 1.4,
        "Start education planning early, explore scholarship options, consider education loans",
    ),
    "parent_care_crisis": (
        0.05, 1.6,
        "Plan for parent care early, coordinate with siblings, explore care options",
    ),
}


@dataclass
class CoordinationOpportunity:
    name: str
    savings: float
    difficulty: str
    time_to_implement: str


@dataclass
class RiskFactor:
    name: str
    probability: float
    impact: float
    mitigation: str

    @property
    def severity(self) -> float:
        return self.probability * self.impact


@dataclass
class ComplexityResult:
    score: float
    primary_drivers: list[str] = field(default_factory=list)
    coordination_opportunities: list[CoordinationOpportunity] = field(default_factory=list)
    optimization_potential: float = 0.0
    risk_factors: list[RiskFactor] = field(default_factory=list)
    detailed_scores: dict[str, float] = field(default_factory=dict)


def _display_name(key: str) -> str:
    return " ".join(word.capitalize() for word in key.split("_"))


def _clamp(points: float) -> float:
    return min(MAX_SUB_SCORE, points)


def children_complexity(profile: HouseholdProfile) -> float:
    points = 2 * len(profile.children)
    for child in profile.children:
        points += ASPIRATION_POINTS.get(child.education_aspirations, 0)
        points += PERFORMANCE_POINTS.get(child.academic_performance, 0)
    return _clamp(points)


def parent_care_complexity(profile: HouseholdProfile) -> float:
    points = 0.0
    for parent in profile.family.parents:
        points += PARENT_HEALTH_POINTS.get(parent.health_status, 0)
        points += DEPENDENCY_POINTS.get(parent.financial_independence, 0)
        points += PARENT_LOCATION_POINTS.get(parent.location, 0)
    return _clamp(points)


def sibling_complexity(profile: HouseholdProfile) -> float:
    siblings = profile.family.siblings
    points = 1.5 * len(siblings)
    for sibling in siblings:
        points += RELATIONSHIP_POINTS.get(sibling.relationship_quality, 0)
        points += CAPACITY_POINTS.get(sibling.financial_capacity, 0)
    return _clamp(points)


def geographic_complexity(profile: HouseholdProfile) -> float:
    points = CITY_POINTS.get(profile.core.city_type, 0)
    locations = {profile.core.city_type}
    for parent in profile.family.parents:
        if parent.location in ("different_state", "different_city"):
            locations.add(parent.location)
    points += 1.5 * len(locations)
    return _clamp(points)


def health_complexity(profile: HouseholdProfile) -> float:
    points = 0.0
    for parent in profile.family.parents:
        if parent.health_status == "poor":
            points += 3
        elif parent.health_status == "fair":
            points += 2
    if profile.core.age > 50:
        points += 1
    if profile.core.age > 60:
        points += 1.5
    if profile.core.is_married:
        points += 0.5
    return _clamp(points)


def education_complexity(profile: HouseholdProfile) -> float:
    points = 0.0
    for child in profile.children:
        points += SCHOOL_POINTS.get(child.current_school_type, 0)
        points += ASPIRATION_POINTS.get(child.education_aspirations, 0)
    return _clamp(points)


def financial_complexity(profile: HouseholdProfile) -> float:
    points = SOPHISTICATION_POINTS.get(profile.core.financial_sophistication, 0)
    points += FINANCIAL_EMPLOYMENT_POINTS.get(profile.core.employment.status, 0)
    return _clamp(points)


def employment_complexity(profile: HouseholdProfile) -> float:
    points = EMPLOYMENT_STATUS_POINTS.get(profile.core.employment.status, 0)
    points += ROLE_POINTS.get(profile.core.employment.role_level, 0)
    return _clamp(points)


SUB_SCORES = {
    "children": children_complexity,
    "parent_care": parent_care_complexity,
    "sibling": sibling_complexity,
    "geographic": geographic_complexity,
    "health": health_complexity,
    "education": education_complexity,
    "financial": financial_complexity,
    "employment": employment_complexity,
}


def weighted_score(scores: dict[str, float]) -> float:
    total_weight = sum(weight for weight, _ in FACTORS.values())
    return sum(scores.get(name, 0) * weight for name, (weight, _) in FACTORS.items()) / total_weight


def _opportunity_applies(name: str, profile: HouseholdProfile) -> bool:
    if name in ("family_meetings", "shared_resources", "investment_pooling"):
        return len(profile.family.siblings) > 0
    if name == "bulk_purchases":
        return len(profile.children) > 1
    if name == "care_coordination":
        return len(profile.family.parents) > 0
    return len(profile.children) > 0


def coordination_opportunities(profile: HouseholdProfile, score: float) -> list[CoordinationOpportunity]:
    opportunities = [
        CoordinationOpportunity(
            name=_display_name(name),
            savings=spec.savings * (1 + score * 0.1),
            difficulty=spec.difficulty,
            time_to_implement=spec.time_to_implement,
        )
        for name, spec in COORDINATION_OPPORTUNITIES.items()
        if _opportunity_applies(name, profile)
    ]
    return sorted(opportunities, key=lambda o: o.savings, reverse=True)


def risk_factors(profile: HouseholdProfile, score: float) -> list[RiskFactor]:
    risks = []
    for name, (base, impact, mitigation) in RISK_FACTORS.items():
        probability = base * (1 + score * 0.1)
        if name == "health_emergency" and profile.core.age > 50:
            probability *= 1.5
        elif name == "job_loss" and profile.core.employment.status == "self_employed":
            probability *= 1.3
        elif name == "family_conflict" and len(profile.family.siblings) > 2:
            probability *= 1.2
        risks.append(RiskFactor(
            name=_display_name(name),
            probability=min(MAX_RISK_PROBABILITY, probability),
            impact=impact,
            mitigation=mitigation,
        ))
    return sorted(risks, key=lambda r: r.severity, reverse=True)


def analyze_complexity(profile: HouseholdProfile) -> ComplexityResult:
    """Score household complexity on a 0-10 scale from eight weighted sub-scores."""
    scores = {name: fn(profile) for name, fn in SUB_SCORES.items()}
    score = weighted_score(scores)
    drivers = [label for name, (_, label) in FACTORS.items() if scores[name] > DRIVER_THRESHOLD]
    opportunities = coordination_opportunities(profile, score)
    potential = sum(o.savings for o in opportunities)
    potential += SOPHISTICATION_POTENTIAL.get(profile.core.financial_sophistication, 0)
    return ComplexityResult(
        score=score,
        primary_drivers=drivers,
        coordination_opportunities=opportunities,
        optimization_potential=min(MAX_OPTIMIZATION_POTENTIAL, potential),
        risk_factors=risk_factors(profile, score),
        detailed_scores=scores,
    )
