"""Tests for generational impact and the protected scenario."""

import pytest

from wealth_extinction.impact import (
    calculate_family_impact,
    dominant_education_path,
    estate_tax,
    financial_status,
    life_event_impacts,
    planning_efficiency,
    wealth_at_year,
)
from wealth_extinction.profile import Child, Parent
from wealth_extinction.protected import calculate_protected_scenario
from wealth_extinction.simulation import YearRecord


def _trajectory(values: list[float], start: int = 2025) -> list[YearRecord]:
    return [
        YearRecord(year=start + i, age=42 + i, wealth=w, income=0, expenses=0, net_cash_flow=0)
        for i, w in enumerate(values)
    ]


class TestHelpers:
    @pytest.mark.parametrize("net_worth,status", [
        (200_000_000, "Ultra High Net Worth"),
        (10_000_000, "High Net Worth"),
        (6_000_000, "Affluent"),
        (2_000_000, "Upper Middle Class"),
        (600_000, "Middle Class"),
        (100_000, "Building Wealth"),
    ])
    def test_financial_status(self, net_worth, status):
        assert financial_status(net_worth) == status

    def test_estate_tax(self):
        assert estate_tax(5_000_000) == 0
        assert estate_tax(20_000_000) == pytest.approx(1_000_000)

    def test_planning_efficiency_default(self, profile):
        assert planning_efficiency(profile) == pytest.approx(0.75)

    def test_planning_efficiency_floor(self, make_profile):
        import dataclasses

        p = make_profile(financial_sophistication="beginner")
        p = dataclasses.replace(
            p,
            behavior=dataclasses.replace(p.behavior, planning_approach="avoid_thinking"),
            family=dataclasses.replace(p.family, family_coordination="poor"),
        )
        assert planning_efficiency(p) == pytest.approx(0.5)

    def test_wealth_at_year(self):
        t = _trajectory([100, 200, 300])
        assert wealth_at_year(t, 2026) == 200
        assert wealth_at_year(t, 2090) == 300
        assert wealth_at_year([], 2030) == 0

    def test_dominant_education_path(self, profile, make_profile):
        assert dominant_education_path(profile) == "private_state"
        p = make_profile(children=[
            Child("A", 5, education_aspirations="international"),
            Child("B", 7, education_aspirations="international"),
            Child("C", 9, education_aspirations="public_state"),
        ])
        assert dominant_education_path(p) == "international"


class TestFamilyImpact:
    def test_transfer_at_life_expectancy(self, make_profile):
        p = make_profile(children=[Child("A", 10), Child("B", 12)])
        # death year 2025 + (85 - 42) = 2068
        t = _trajectory([20_000_000] * 50)
        impact = calculate_family_impact(p, t)
        inh = impact.inheritance
        assert inh.year == 2068
        assert inh.estate_tax == pytest.approx(1_000_000)
        assert inh.transfer_costs == pytest.approx(1_000_000)
        assert inh.net_transfer == pytest.approx(18_000_000)
        assert inh.effective_transfer == pytest.approx(18_000_000 * 0.75)
        assert [c.inheritance for c in inh.children] == pytest.approx([6_750_000, 6_750_000])
        assert inh.children[0].age == 10 + 43

        g = impact.grandchildren
        assert g.estimated_grandchildren == 3
        assert g.inheritance == pytest.approx(18_000_000 * 0.75 * 0.3)
        assert g.per_grandchild == pytest.approx(g.inheritance / 3)
        assert g.college_shortfall >= 0

    def test_extinct_household(self, profile):
        impact = calculate_family_impact(profile, _trajectory([1_000_000, 0]))
        assert impact.inheritance.net_transfer == 0
        assert impact.grandchildren.inheritance == 0
        assert impact.today.status == "High Net Worth"

    def test_life_event_impacts_sorted(self, make_profile):
        p = make_profile(
            children=[Child("A", 10, education_aspirations="international")],
            parents=[Parent("Dad", 75, financial_independence="regular_support")],
        )
        events = life_event_impacts(p)
        magnitudes = [abs(e.financial_impact) for e in events]
        assert magnitudes == sorted(magnitudes, reverse=True)
        names = {e.event for e in events}
        assert {"A's Education", "Dad's Care", "A's Wedding", "Retirement"} <= names

    def test_life_events_carried_in_family_impact(self, make_profile):
        p = make_profile(children=[Child("A", 10)])
        impact = calculate_family_impact(p, _trajectory([1_000_000] * 5))
        assert impact.life_events == life_event_impacts(p)
        assert impact.life_events


class TestProtectedScenario:
    def test_improvements_applied(self, profile):
        t = _trajectory([10_000_000, 5_000_000, 0])
        s = calculate_protected_scenario(profile, t)
        assert s.additional_years == pytest.approx(6.5)
        assert s.extinction_year == 2033
        assert isinstance(s.extinction_year, int)
        assert s.total_savings == pytest.approx(2_500_000)
        assert s.grandchildren_inheritance == 0
        assert len(s.improvements) == 3

    def test_surviving_wealth(self, profile):
        s = calculate_protected_scenario(profile, _trajectory([10_000_000, 12_000_000]))
        assert s.grandchildren_inheritance == pytest.approx(12_000_000 * 0.3 * 2.5)

    def test_empty_trajectory(self, profile):
        s = calculate_protected_scenario(profile, [])
        assert s.extinction_year == 2106
        assert s.grandchildren_inheritance == pytest.approx(10_000_000 * 0.15 * 2.5)
