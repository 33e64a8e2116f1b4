"""Tests for wealth-destroyer ranking."""

import pytest

from wealth_extinction.destroyers import (
    DESTROYERS,
    complexity_multiplier,
    education_context,
    impact_label,
    prevention_plan,
    rank_wealth_destroyers,
    total_wealth_destruction,
)
from wealth_extinction.profile import Child, Parent, Sibling


class TestComplexityMultiplier:
    def test_neutral_and_below(self):
        assert complexity_multiplier(5.0, 0.2) == 1
        assert complexity_multiplier(2.0, 0.2) == 1

    def test_above_neutral(self):
        assert complexity_multiplier(8.0, 0.2) == pytest.approx(1.6)


class TestRankWealthDestroyers:
    def test_at_most_five_sorted(self, make_profile):
        p = make_profile(
            children=[Child("A", 10, education_aspirations="international")],
            parents=[Parent("Dad", 80, health_status="poor")],
            siblings=[Sibling("strained")],
            complexity_score=8.0,
        )
        ranked = rank_wealth_destroyers(p)
        assert len(ranked) == 5
        impacts = [d.impact for d in ranked]
        assert impacts == sorted(impacts, reverse=True)

    def test_conditional_destroyers_skipped(self, profile):
        factors = {d.factor for d in rank_wealth_destroyers(profile, limit=len(DESTROYERS))}
        assert "Education Costs" not in factors
        assert "Parent Care Costs" not in factors
        assert "Family Disputes" not in factors
        assert len(factors) == 7

    def test_complexity_raises_impact(self, make_profile):
        low = total_wealth_destruction(rank_wealth_destroyers(make_profile(complexity_score=3.0)))
        high = total_wealth_destruction(rank_wealth_destroyers(make_profile(complexity_score=9.0)))
        assert high > low

    def test_education_context(self, make_profile):
        p = make_profile(children=[Child("A", 5, education_aspirations="international"), Child("B", 3)])
        assert education_context(p) == pytest.approx(1.0 + 2.0 + 1.0)


class TestPreventionPlan:
    @pytest.mark.parametrize("impact,label", [(2_500_000, "high"), (1_500_000, "medium"), (500_000, "low")])
    def test_impact_label(self, impact, label):
        assert impact_label(impact) == label

    def test_plan_uses_catalog(self, profile):
        plan = prevention_plan(rank_wealth_destroyers(profile))
        assert len(plan) == 5
        fees = [s for s in plan if s.destroyer == "Investment Fees"]
        for s in fees:
            assert s.difficulty == "easy"
            assert s.timeframe == "1-3 months"
