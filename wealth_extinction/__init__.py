"""Household Wealth-Extinction Projection Package."""

from wealth_extinction.profile import (
    Allocation,
    BehavioralProfile,
    Child,
    CoreIdentity,
    Employment,
    FamilyCare,
    FinancialFoundation,
    HouseholdProfile,
    Parent,
    Sibling,
    SpouseParent,
    profile_from_dict,
    validate_profile,
    MIN_AGE,
    MAX_AGE,
)
from wealth_extinction.errors import (
    CalculationTimeoutError,
    NormalizationWarning,
    TailAnalysisDegraded,
    ValidationError,
)
from wealth_extinction.simulation import (
    YearRecord,
    simulate_trajectory,
    find_extinction_year,
    BASE_YEAR,
)
from wealth_extinction.monte_carlo import MonteCarloConfig, MonteCarloResult, run_monte_carlo
from wealth_extinction.complexity import ComplexityResult, analyze_complexity
from wealth_extinction.evt import EVTResult, GPDModel, analyze_tail_risk, fit_gpd
from wealth_extinction.engine import (
    CalculationResult,
    EngineConfig,
    compute_calculation,
    compute_complexity,
    compute_evt,
)

__all__ = [
    "Allocation",
    "BehavioralProfile",
    "Child",
    "CoreIdentity",
    "Employment",
    "FamilyCare",
    "FinancialFoundation",
    "HouseholdProfile",
    "Parent",
    "Sibling",
    "SpouseParent",
    "profile_from_dict",
    "validate_profile",
    "MIN_AGE",
    "MAX_AGE",
    "CalculationTimeoutError",
    "NormalizationWarning",
    "TailAnalysisDegraded",
    "ValidationError",
    "YearRecord",
    "simulate_trajectory",
    "find_extinction_year",
    "BASE_YEAR",
    "MonteCarloConfig",
    "MonteCarloResult",
    "run_monte_carlo",
    "ComplexityResult",
    "analyze_complexity",
    "EVTResult",
    "GPDModel",
    "analyze_tail_risk",
    "fit_gpd",
    "CalculationResult",
    "EngineConfig",
    "compute_calculation",
    "compute_complexity",
    "compute_evt",
]
