"""Annual portfolio return model and portfolio helpers."""

import math
from dataclasses import dataclass
from random import Random

from wealth_extinction.profile import Allocation, HouseholdProfile


@dataclass(frozen=True)
class AssetClass:
    base_return: float
    volatility: float
    crash_return: float
    cycle: tuple[float, ...] = ()
    cycle_weight: float = 0.0


# 7-year market cycles, indexed by year % 7
EQUITY_CYCLE = (0.15, 0.12, -0.12, 0.20, 0.08, -0.18, 0.16)
DEBT_CYCLE = (0.07, 0.05, 0.09, 0.04, 0.08, 0.10, 0.06)
REAL_ESTATE_CYCLE = (0.10, 0.12, 0.03, 0.15, 0.06, -0.08, 0.11)

ASSET_CLASSES = {
    "stocks": AssetClass(0.10, 0.28, -0.35, EQUITY_CYCLE, 0.5),
    "bonds": AssetClass(0.06, 0.10, -0.10, DEBT_CYCLE, 0.5),
    "real_estate": AssetClass(0.08, 0.18, -0.25, REAL_ESTATE_CYCLE, 0.6),
    "alternatives": AssetClass(0.09, 0.25, -0.30),
}

MARKET_CRASH_PROBABILITY = 0.08

RISK_TOLERANCE_ADJUSTMENT = {"conservative": 0.75, "moderate": 1.0, "aggressive": 1.25}
SOPHISTICATION_BONUS = {"expert": 0.03, "good": 0.015, "moderate": 0.005, "beginner": -0.01}
REAL_ESTATE_LOCATION = {"metro": 1.3, "tier2": 1.1, "tier3": 0.9, "rural": 0.7}
ILLIQUIDITY_DISCOUNT = 0.03
ALTERNATIVES_DISCOUNT = 0.02

BEHAVIOR_GAP = {
    "panic_sell": 0.035,
    "worry_hold": 0.018,
    "buying_opportunity": -0.005,
    "ignore_it": 0.008,
}
DEFAULT_BEHAVIOR_GAP = 0.015
CRASH_BEHAVIOR_MULTIPLIER = 5.0
REVIEW_FREQUENCY_IMPACT = {
    "daily": 0.93,
    "weekly": 0.96,
    "monthly": 1.0,
    "quarterly": 1.01,
    "rarely": 0.95,
}
PLANNING_APPROACH_IMPACT = {
    "detailed_research": 1.02,
    "important_overwhelming": 0.97,
    "delegate_experts": 1.01,
    "avoid_thinking": 0.94,
}

EXPENSE_RATIOS = {"mutual_funds": 0.018, "bonds": 0.005, "real_estate": 0.025}
EQUITY_LTCG_RATE = 0.10
DEBT_LTCG_RATE = 0.20
EQUITY_REALIZED_SHARE = 0.4
DEBT_REALIZED_SHARE = 0.3

REBALANCING_COST = 0.006


def interest_rate_adjustment(year: int) -> float:
    position = year % 10
    if position < 3:
        return 1.1
    if position < 7:
        return 0.95
    return 1.05


def _asset_return(name: str, year: int, rng: Random, crash: bool) -> float:
    """Raw expected return rate for one asset class, before class-specific scaling."""
    asset = ASSET_CLASSES[name]
    rate = asset.base_return
    if asset.cycle:
        rate += asset.cycle[year % len(asset.cycle)] * asset.cycle_weight
    rate += (rng.random() - 0.5) * asset.volatility
    if crash:
        rate = asset.crash_return
    return rate


def project_investment_return(
    wealth: float, year: int, profile: HouseholdProfile, rng: Random,
) -> float:
    """Net investment return (currency units) on `wealth` in simulation year `year`."""
    allocation = profile.finances.allocation
    core = profile.core
    behavior = profile.behavior
    crash = rng.random() < MARKET_CRASH_PROBABILITY

    total = 0.0
    for name, fraction in allocation.as_dict().items():
        allocated = wealth * fraction
        if allocated <= 0:
            continue
        rate = _asset_return(name, year, rng, crash)
        if name == "stocks":
            rate *= RISK_TOLERANCE_ADJUSTMENT.get(behavior.risk_tolerance, 1.0)
            rate *= 1 + SOPHISTICATION_BONUS.get(core.financial_sophistication, 0.0)
        elif name == "bonds":
            rate *= interest_rate_adjustment(year)
        elif name == "real_estate":
            rate = rate * REAL_ESTATE_LOCATION.get(core.city_type, 1.0) - ILLIQUIDITY_DISCOUNT
        else:
            rate -= ALTERNATIVES_DISCOUNT
        total += allocated * rate

    gap = BEHAVIOR_GAP.get(behavior.market_crash_response, DEFAULT_BEHAVIOR_GAP)
    if crash:
        gap *= CRASH_BEHAVIOR_MULTIPLIER
    adjusted = total - total * gap
    adjusted *= REVIEW_FREQUENCY_IMPACT.get(behavior.review_frequency, 1.0)
    adjusted *= PLANNING_APPROACH_IMPACT.get(behavior.planning_approach, 1.0)

    # drag is levied on the pre-behaviour portfolio return
    expense_ratio = (
        allocation.stocks * EXPENSE_RATIOS["mutual_funds"]
        + allocation.bonds * EXPENSE_RATIOS["bonds"]
        + allocation.real_estate * EXPENSE_RATIOS["real_estate"]
        + allocation.alternatives * EXPENSE_RATIOS["mutual_funds"]
    )
    tax_drag = (
        total * allocation.stocks * EQUITY_LTCG_RATE * EQUITY_REALIZED_SHARE
        + total * allocation.bonds * DEBT_LTCG_RATE * DEBT_REALIZED_SHARE
    )
    return adjusted - total * expense_ratio - tax_drag


def optimal_allocation(age: int, risk_tolerance: str) -> Allocation:
    """Age-based glide path adjusted for risk tolerance."""
    stocks = max(0.2, 1 - (age - 25) / 40)
    bonds = max(0.0, min(0.6, (age - 25) / 40))
    if risk_tolerance == "conservative":
        stocks *= 0.7
        bonds *= 1.3
    elif risk_tolerance == "aggressive":
        stocks *= 1.3
        bonds *= 0.7
    total = stocks + bonds
    stocks /= total
    bonds /= total
    return Allocation(
        stocks=stocks * 0.8,
        bonds=bonds,
        real_estate=stocks * 0.15,
        alternatives=stocks * 0.05,
    )


def allocation_drift(current: Allocation, target: Allocation) -> float:
    return sum(
        abs(a - b) for a, b in zip(current.as_dict().values(), target.as_dict().values())
    )


def rebalancing_cost(current: Allocation, target: Allocation, wealth: float) -> float:
    return wealth * REBALANCING_COST * allocation_drift(current, target) / 2


def sharpe_ratio(returns: list[float], risk_free: float = 0.05) -> float:
    if not returns:
        return 0.0
    mean = sum(returns) / len(returns)
    std = math.sqrt(sum((r - mean) ** 2 for r in returns) / len(returns))
    if std == 0:
        return 0.0
    return (mean - risk_free) / std


def max_drawdown(wealth_path: list[float]) -> float:
    """Largest peak-to-trough decline as a fraction of the peak."""
    if len(wealth_path) <= 1:
        return 0.0
    worst = 0.0
    peak = wealth_path[0]
    for value in wealth_path[1:]:
        if value > peak:
            peak = value
        elif peak > 0:
            worst = max(worst, (peak - value) / peak)
    return worst


@dataclass
class PortfolioSummary:
    target_allocation: Allocation
    drift: float
    rebalancing_cost: float
    sharpe_ratio: float  # of yearly wealth growth
    max_drawdown: float


def summarize_portfolio(profile: HouseholdProfile, wealth_path: list[float]) -> PortfolioSummary:
    """Allocation drift against the glide path plus risk figures of a wealth path."""
    current = profile.finances.allocation
    target = optimal_allocation(profile.core.age, profile.behavior.risk_tolerance)
    growth = [(b - a) / a for a, b in zip(wealth_path, wealth_path[1:]) if a > 0]
    return PortfolioSummary(
        target_allocation=target,
        drift=allocation_drift(current, target),
        rebalancing_cost=rebalancing_cost(current, target, profile.finances.net_worth),
        sharpe_ratio=sharpe_ratio(growth),
        max_drawdown=max_drawdown(wealth_path),
    )
