"""Annual household expense projection."""

from dataclasses import dataclass
from random import Random

from wealth_extinction.profile import Child, HouseholdProfile, Parent

# category: (share of baseline, annual inflation)
LIVING_CATEGORIES = {
    "housing": (0.35, 0.07),
    "food": (0.25, 0.06),
    "transportation": (0.12, 0.055),
    "utilities": (0.12, 0.06),
    "leisure": (0.08, 0.05),
    "other": (0.08, 0.055),
}
HOUSING_INFLATION = LIVING_CATEGORIES["housing"][1]
EDUCATION_INFLATION = 0.09
HEALTHCARE_INFLATION = 0.085

CITY_EXPENSE_RATIOS = {
    "metro": 0.70,
    "tier2": 0.65,
    "tier3": 0.60,
    "rural": 0.55,
}
DEFAULT_CITY_EXPENSE_RATIO = 0.65

PRESCHOOL_COST = 120_000
SCHOOL_COSTS = {
    "international": 600_000,
    "private_english": 350_000,
    "private_vernacular": 180_000,
    "government": 60_000,
}
DEFAULT_SCHOOL_COST = 180_000
HIGHER_EDUCATION_COST = 350_000
ASPIRATION_MULTIPLIERS = {
    "public_state": 1.0,
    "public_premium": 1.5,
    "private_state": 2.0,
    "private_premium": 3.5,
    "international": 6.0,
}
DEFAULT_ASPIRATION_MULTIPLIER = 1.5
PERFORMANCE_FACTORS = {
    "exceptional": 0.7,
    "above_average": 0.85,
    "average": 1.0,
    "struggling": 1.3,
}

HEALTHCARE_BASE = 60_000
MARRIED_HEALTHCARE_MULTIPLIER = 1.9
HEALTH_SPIKE_PROBABILITY = 0.15

PARENT_CARE_MONTHLY = {
    "independent": 12_000,
    "occasional_support": 30_000,
    "regular_support": 50_000,
    "full_dependency": 75_000,
}
PARENT_HEALTH_MULTIPLIERS = {
    "excellent": 1.0,
    "good": 1.3,
    "fair": 2.0,
    "poor": 3.5,
}
DEFAULT_PARENT_HEALTH_MULTIPLIER = 1.5
LIVING_ARRANGEMENT_MULTIPLIERS = {
    "with_family": 0.85,
    "assisted": 1.7,
    "independent": 1.0,
}
PARENT_LOCATION_MULTIPLIERS = {
    "same_city": 1.0,
    "different_city": 1.15,
    "different_state": 1.25,
}
PARENT_LIFE_EXPECTANCY = 95
SPOUSE_PARENT_SUPPORT = 300_000

MARRIAGE_COST = 2_500_000
RENOVATION_SHARE = 0.06
MAJOR_HEALTH_EVENT_COST = 1_500_000
FAMILY_EMERGENCY_PROBABILITY = 0.08
VEHICLE_COST = 800_000


@dataclass
class ExpenseBreakdown:
    living: float = 0.0
    education: float = 0.0
    healthcare: float = 0.0
    parent_care: float = 0.0
    lifecycle: float = 0.0

    @property
    def total(self) -> float:
        return self.living + self.education + self.healthcare + self.parent_care + self.lifecycle


def living_expenses(baseline: float, year: int) -> float:
    """Baseline split into categories, each compounded at its own inflation."""
    return sum(
        baseline * share * (1 + inflation) ** year
        for share, inflation in LIVING_CATEGORIES.values()
    )


def child_education_cost(child: Child, year: int) -> float:
    child_age = child.age + year
    if child_age < 3 or child_age > 25:
        return 0.0
    if child_age < 6:
        cost = PRESCHOOL_COST
    elif child_age < 18:
        cost = SCHOOL_COSTS.get(child.current_school_type, DEFAULT_SCHOOL_COST)
    else:
        cost = HIGHER_EDUCATION_COST * ASPIRATION_MULTIPLIERS.get(
            child.education_aspirations, DEFAULT_ASPIRATION_MULTIPLIER
        )
    cost *= PERFORMANCE_FACTORS.get(child.academic_performance, 1.0)
    return cost * (1 + EDUCATION_INFLATION) ** year


def healthcare_expenses(year: int, age: int, profile: HouseholdProfile, rng: Random) -> float:
    cost = HEALTHCARE_BASE
    if age > 40:
        cost *= 1 + 0.04 * (age - 40)
    if profile.core.is_married:
        cost *= MARRIED_HEALTHCARE_MULTIPLIER
    cost *= (1 + HEALTHCARE_INFLATION) ** year
    if age > 60 and rng.random() < HEALTH_SPIKE_PROBABILITY:
        cost += rng.uniform(100_000, 500_000)
    return cost


def parent_care_cost(parent: Parent, year: int) -> float:
    parent_age = parent.age + year
    if parent_age > PARENT_LIFE_EXPECTANCY:
        return 0.0
    monthly = PARENT_CARE_MONTHLY.get(parent.financial_independence, 0)
    monthly *= PARENT_HEALTH_MULTIPLIERS.get(parent.health_status, DEFAULT_PARENT_HEALTH_MULTIPLIER)
    monthly *= LIVING_ARRANGEMENT_MULTIPLIERS.get(parent.living_arrangement, 1.0)
    monthly *= PARENT_LOCATION_MULTIPLIERS.get(parent.location, 1.0)
    if parent_age > 75:
        monthly *= 1 + 0.05 * (parent_age - 75)
    return monthly * (1 + HEALTHCARE_INFLATION) ** year * 12


def parent_care_expenses(year: int, profile: HouseholdProfile) -> float:
    total = sum(parent_care_cost(p, year) for p in profile.family.parents)
    if profile.core.is_married:
        inflation = (1 + HEALTHCARE_INFLATION) ** year
        total += sum(
            SPOUSE_PARENT_SUPPORT * inflation
            for p in profile.family.spouse_parents
            if p.support_needed
        )
    return total


def lifecycle_expenses(year: int, age: int, profile: HouseholdProfile, rng: Random) -> float:
    """One-off costs: weddings, renovation, health events, emergencies, vehicles."""
    total = 0.0
    for child in profile.children:
        marriage_age = 27 if child.gender == "female" else 30
        if child.age + year == marriage_age:
            total += MARRIAGE_COST * 1.06 ** year

    if year % 15 == 5:
        total += profile.finances.net_worth * RENOVATION_SHARE * (1 + HOUSING_INFLATION) ** year

    if age > 60 and rng.random() < (age - 60) * 0.015:
        total += MAJOR_HEALTH_EVENT_COST * (1 + HEALTHCARE_INFLATION) ** year

    if rng.random() < FAMILY_EMERGENCY_PROBABILITY:
        total += rng.uniform(100_000, 400_000)

    if year % 8 == 4:
        total += VEHICLE_COST * 1.05 ** year
    return total


def project_expenses(year: int, age: int, profile: HouseholdProfile, rng: Random) -> ExpenseBreakdown:
    """Expense breakdown for simulation year `year` at household age `age`."""
    ratio = CITY_EXPENSE_RATIOS.get(profile.core.city_type, DEFAULT_CITY_EXPENSE_RATIO)
    baseline = profile.finances.annual_income * ratio
    return ExpenseBreakdown(
        living=living_expenses(baseline, year),
        education=sum(child_education_cost(c, year) for c in profile.children),
        healthcare=healthcare_expenses(year, age, profile, rng),
        parent_care=parent_care_expenses(year, profile),
        lifecycle=lifecycle_expenses(year, age, profile, rng),
    )
