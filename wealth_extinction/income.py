"""Annual income projection by income source."""

from random import Random

from wealth_extinction.profile import HouseholdProfile

INDUSTRY_GROWTH_RATES = {
    "technology": 0.10,
    "healthcare": 0.08,
    "finance": 0.07,
    "manufacturing": 0.05,
    "retail": 0.04,
    "education": 0.035,
    "government": 0.03,
    "agriculture": 0.025,
    "construction": 0.045,
    "hospitality": 0.04,
    "transportation": 0.035,
    "energy": 0.06,
    "telecommunications": 0.07,
    "media": 0.05,
    "pharmaceutical": 0.085,
    "consulting": 0.065,
    "real_estate": 0.055,
}
DEFAULT_INDUSTRY_GROWTH = 0.045

ROLE_PROGRESSION = {
    "junior": 0.07,
    "mid": 0.05,
    "senior": 0.035,
    "leadership": 0.025,
}

# (business age upper bound, growth rate); last entry catches everything older
BUSINESS_STAGE_GROWTH = (
    (3, 0.20),   # startup
    (7, 0.12),   # growth
    (15, 0.06),  # established
    (None, 0.03),  # mature
)
BUSINESS_START_AGE = 30

EDUCATION_MULTIPLIERS = {
    "phd": 1.15,
    "professional": 1.12,
    "masters": 1.08,
    "bachelors": 1.0,
    "high_school": 0.92,
}
LOCATION_MULTIPLIERS = {
    "metro": 1.1,
    "tier2": 1.0,
    "tier3": 0.9,
    "rural": 0.8,
}
SOPHISTICATION_MULTIPLIERS = {
    "expert": 1.15,
    "good": 1.08,
    "moderate": 1.0,
    "beginner": 0.92,
}

SALARY_GROWTH_DECAY = 0.96
BUSINESS_GROWTH_DECAY = 0.94
INDUSTRY_WEIGHT = 0.3
MIXED_SALARY_SHARE = 0.6
DEFAULT_GROWTH = 0.04


def is_downturn_year(year: int) -> bool:
    return year % 7 == 3 or year % 11 == 5


def _age_adjusted_growth(base: float, age: int) -> float:
    """Growth slows after 45 and turns negative after 60."""
    if 45 < age <= 60:
        return base * 0.92 ** (age - 45)
    if age > 60:
        return -0.05 - 0.01 * (age - 60)
    return base


def salary_income(year: int, age: int, base_income: float, profile: HouseholdProfile) -> float:
    core = profile.core
    industry = core.employment.industry.lower()
    industry_growth = INDUSTRY_GROWTH_RATES.get(industry, DEFAULT_INDUSTRY_GROWTH)
    growth = _age_adjusted_growth(ROLE_PROGRESSION.get(core.employment.role_level, ROLE_PROGRESSION["mid"]), age)
    edu = EDUCATION_MULTIPLIERS.get(core.education_level, 1.0)
    loc = LOCATION_MULTIPLIERS.get(core.city_type, 1.0)

    income = base_income
    for _ in range(year):
        income *= 1 + (growth + industry_growth * INDUSTRY_WEIGHT) * edu * loc
        growth *= SALARY_GROWTH_DECAY

    if age >= 60:
        income *= max(0.05, 1 - 0.20 * (age - 60))
    return income


def business_income(
    year: int, age: int, base_income: float, profile: HouseholdProfile, rng: Random,
) -> float:
    core = profile.core
    business_age = max(0, age - BUSINESS_START_AGE)
    growth = next(g for limit, g in BUSINESS_STAGE_GROWTH if limit is None or business_age < limit)
    soph = SOPHISTICATION_MULTIPLIERS.get(core.financial_sophistication, 1.0)
    loc = LOCATION_MULTIPLIERS.get(core.city_type, 1.0)

    income = base_income
    for _ in range(year):
        volatility = rng.uniform(0.7, 1.2)
        income *= 1 + growth * soph * loc * volatility
        growth *= BUSINESS_GROWTH_DECAY

    if age >= 65:
        income *= max(0.15, 1 - 0.15 * (age - 65))
    if is_downturn_year(year):
        income *= 0.85
    return income


def default_income(year: int, age: int, base_income: float) -> float:
    growth = _age_adjusted_growth(DEFAULT_GROWTH, age)
    income = base_income
    for _ in range(year):
        income *= 1 + growth
        growth *= SALARY_GROWTH_DECAY

    if age >= 60:
        income *= max(0.10, 1 - 0.15 * (age - 60))
    if is_downturn_year(year):
        income *= 0.9
    return income


def project_income(year: int, age: int, profile: HouseholdProfile, rng: Random) -> float:
    """Income for simulation year `year` (0-based) at household age `age`."""
    base = profile.finances.annual_income
    source = profile.finances.income_source
    if source == "salary":
        return salary_income(year, age, base, profile)
    if source == "business":
        return business_income(year, age, base, profile, rng)
    if source == "mixed":
        return (
            salary_income(year, age, base * MIXED_SALARY_SHARE, profile)
            + business_income(year, age, base * (1 - MIXED_SALARY_SHARE), profile, rng)
        )
    return default_income(year, age, base)
