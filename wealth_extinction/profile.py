"""Household profile model, validation and normalization."""

import dataclasses
import warnings
from dataclasses import dataclass, field

from wealth_extinction.errors import NormalizationWarning, ValidationError

MIN_AGE = 18
MAX_AGE = 100
ALLOCATION_TOLERANCE = 0.01
ASSET_CLASSES = ("stocks", "bonds", "real_estate", "alternatives")


@dataclass(frozen=True)
class Employment:
    status: str = "corporate"  # corporate / self_employed / business_owner
    industry: str = "default"
    role_level: str = "mid"  # junior / mid / senior / leadership


@dataclass(frozen=True)
class Allocation:
    """Asset allocation as fractions of total wealth."""

    stocks: float = 0.6
    bonds: float = 0.3
    real_estate: float = 0.1
    alternatives: float = 0.0

    def total(self) -> float:
        return self.stocks + self.bonds + self.real_estate + self.alternatives

    def normalized(self) -> "Allocation":
        """Return a copy scaled so the fractions sum to 1."""
        total = self.total()
        if total <= 0:
            raise ValidationError("Asset allocation must contain at least one positive fraction")
        return Allocation(
            stocks=self.stocks / total,
            bonds=self.bonds / total,
            real_estate=self.real_estate / total,
            alternatives=self.alternatives / total,
        )

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in ASSET_CLASSES}


@dataclass(frozen=True)
class CoreIdentity:
    age: int
    gender: str = "male"
    marital_status: str = "single"
    city_type: str = "tier2"  # metro / tier2 / tier3 / rural
    education_level: str = "bachelors"
    employment: Employment = field(default_factory=Employment)
    financial_sophistication: str = "moderate"  # beginner / moderate / good / expert

    @property
    def is_married(self) -> bool:
        return self.marital_status == "married"


@dataclass(frozen=True)
class FinancialFoundation:
    net_worth: float
    annual_income: float
    income_source: str = "salary"  # salary / business / mixed / other
    allocation: Allocation = field(default_factory=Allocation)


@dataclass(frozen=True)
class Child:
    name: str
    age: int
    gender: str = "female"
    academic_performance: str = "average"
    education_aspirations: str = "private_state"
    current_school_type: str = "private_english"


@dataclass(frozen=True)
class Parent:
    name: str
    age: int
    health_status: str = "good"  # excellent / good / fair / poor
    financial_independence: str = "independent"
    living_arrangement: str = "independent"
    location: str = "same_city"  # same_city / different_city / different_state


@dataclass(frozen=True)
class SpouseParent:
    name: str
    age: int
    support_needed: bool = False


@dataclass(frozen=True)
class Sibling:
    relationship_quality: str = "good"  # close / good / strained / non_communicative
    financial_capacity: str = "moderate"  # strong / moderate / limited
    care_involvement: str = "shared"


@dataclass(frozen=True)
class FamilyCare:
    parents: tuple[Parent, ...] = ()
    spouse_parents: tuple[SpouseParent, ...] = ()
    siblings: tuple[Sibling, ...] = ()
    family_coordination: str = "good"  # excellent / good / poor / chaotic


@dataclass(frozen=True)
class BehavioralProfile:
    risk_tolerance: str = "moderate"  # conservative / moderate / aggressive
    market_crash_response: str = "worry_hold"
    review_frequency: str = "monthly"
    planning_approach: str = "detailed_research"
    biggest_fear: str = ""


@dataclass(frozen=True)
class HouseholdProfile:
    """Complete household description consumed by every model."""

    core: CoreIdentity | None
    finances: FinancialFoundation | None
    children: tuple[Child, ...] = ()
    family: FamilyCare = field(default_factory=FamilyCare)
    behavior: BehavioralProfile = field(default_factory=BehavioralProfile)
    complexity_score: float | None = None


def validate_profile(profile: HouseholdProfile) -> HouseholdProfile:
    """Validate a profile and return a normalized copy.

    Allocation fractions are renormalized to sum to 1. A drift larger than
    ALLOCATION_TOLERANCE is reported with NormalizationWarning first.
    A missing complexity score is filled from the complexity analyzer.
    """
    if profile.core is None:
        raise ValidationError("Missing required profile section: core_identity")
    if profile.finances is None:
        raise ValidationError("Missing required profile section: financial_foundation")

    core = profile.core
    finances = profile.finances
    if not MIN_AGE <= core.age <= MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}, got {core.age}")
    if finances.net_worth < 0:
        raise ValidationError("Net worth cannot be negative")
    if finances.annual_income < 0:
        raise ValidationError("Annual income cannot be negative")
    for child in profile.children:
        if child.age < 0:
            raise ValidationError(f"Child age cannot be negative: {child.name}")
    for parent in profile.family.parents:
        if parent.age < 0:
            raise ValidationError(f"Parent age cannot be negative: {parent.name}")
    if profile.complexity_score is not None and not 0 <= profile.complexity_score <= 10:
        raise ValidationError(
            f"Complexity score must be between 0 and 10, got {profile.complexity_score}"
        )

    allocation = finances.allocation
    for name, value in allocation.as_dict().items():
        if value < 0:
            raise ValidationError(f"Allocation fraction cannot be negative: {name}={value}")
    total = allocation.total()
    if total <= 0:
        raise ValidationError("Asset allocation must contain at least one positive fraction")
    if abs(total - 1) > ALLOCATION_TOLERANCE:
        warnings.warn(
            f"Asset allocation sums to {total:.3f}; renormalizing to 1.0",
            NormalizationWarning,
            stacklevel=2,
        )
    if total != 1:
        allocation = allocation.normalized()

    result = dataclasses.replace(
        profile,
        finances=dataclasses.replace(finances, allocation=allocation),
    )
    if result.complexity_score is None:
        from wealth_extinction.complexity import analyze_complexity

        result = dataclasses.replace(result, complexity_score=analyze_complexity(result).score)
    return result


def _build(cls, data: dict, **overrides):
    """Construct a dataclass from a mapping, ignoring unknown keys."""
    names = {f.name for f in dataclasses.fields(cls)}
    kwargs = {k: v for k, v in data.items() if k in names}
    kwargs.update(overrides)
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValidationError(f"Invalid {cls.__name__} entry: {e}") from e


def profile_from_dict(data: dict) -> HouseholdProfile:
    """Build a HouseholdProfile from nested mappings (e.g. a parsed TOML file).

    Expected sections: core_identity, financial_foundation (with optional
    allocation table), children, family_care, behavioral_profile and an
    optional top-level complexity_score.
    """
    for section in ("core_identity", "financial_foundation"):
        if section not in data:
            raise ValidationError(f"Missing required profile section: {section}")

    raw_core = dict(data["core_identity"])
    employment = _build(Employment, raw_core.pop("employment", {}))
    core = _build(CoreIdentity, raw_core, employment=employment)

    raw_fin = dict(data["financial_foundation"])
    allocation = _build(Allocation, raw_fin.pop("allocation", {}))
    finances = _build(FinancialFoundation, raw_fin, allocation=allocation)

    children = tuple(_build(Child, c) for c in data.get("children", []))

    raw_family = data.get("family_care", {})
    family = FamilyCare(
        parents=tuple(_build(Parent, p) for p in raw_family.get("parents", [])),
        spouse_parents=tuple(_build(SpouseParent, p) for p in raw_family.get("spouse_parents", [])),
        siblings=tuple(_build(Sibling, s) for s in raw_family.get("siblings", [])),
        family_coordination=raw_family.get("family_coordination", "good"),
    )
    behavior = _build(BehavioralProfile, data.get("behavioral_profile", {}))

    return HouseholdProfile(
        core=core,
        finances=finances,
        children=children,
        family=family,
        behavior=behavior,
        complexity_score=data.get("complexity_score"),
    )
