"""Protected scenario: the outcome if the standard mitigations are adopted."""

import math
from dataclasses import dataclass, field

from wealth_extinction.profile import HouseholdProfile
from wealth_extinction.simulation import YearRecord, find_extinction_year

GRANDCHILDREN_SHARE = 0.3
FALLBACK_NET_WORTH_SHARE = 0.15
PROTECTION_MULTIPLIER = 2.5


@dataclass(frozen=True)
class Improvement:
    action: str
    impact: str
    years_added: float
    savings: float


IMPROVEMENTS = (
    Improvement("Family coordination optimization", "Reduces care costs by 25%", 2, 500_000),
    Improvement("Investment strategy optimization", "Improves returns by 1-2% annually", 3, 1_200_000),
    Improvement("Education funding strategy", "Reduces education costs by 15%", 1.5, 800_000),
)


@dataclass
class ProtectedScenario:
    extinction_year: int  # whole years; additional_years keeps the fraction
    additional_years: float
    total_savings: float
    grandchildren_inheritance: float
    improvements: list[Improvement] = field(default_factory=list)


def calculate_protected_scenario(
    profile: HouseholdProfile, trajectory: list[YearRecord],
) -> ProtectedScenario:
    additional = sum(i.years_added for i in IMPROVEMENTS)
    if trajectory:
        base_inheritance = trajectory[-1].wealth * GRANDCHILDREN_SHARE
    else:
        base_inheritance = profile.finances.net_worth * FALLBACK_NET_WORTH_SHARE
    return ProtectedScenario(
        extinction_year=find_extinction_year(trajectory) + math.floor(additional),
        additional_years=additional,
        total_savings=sum(i.savings for i in IMPROVEMENTS),
        grandchildren_inheritance=base_inheritance * PROTECTION_MULTIPLIER,
        improvements=list(IMPROVEMENTS),
    )
