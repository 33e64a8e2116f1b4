"""Tests for expense projection."""

import pytest

from wealth_extinction.expenses import (
    ExpenseBreakdown,
    LIVING_CATEGORIES,
    child_education_cost,
    healthcare_expenses,
    lifecycle_expenses,
    living_expenses,
    parent_care_cost,
    parent_care_expenses,
    project_expenses,
)
from wealth_extinction.profile import Child, FamilyCare, Parent, SpouseParent


class TestLivingExpenses:
    def test_shares_sum_to_one(self):
        assert sum(share for share, _ in LIVING_CATEGORIES.values()) == pytest.approx(1.0)

    def test_year_zero_is_baseline(self):
        assert living_expenses(1_000_000, 0) == pytest.approx(1_000_000)

    def test_inflates(self):
        assert living_expenses(1_000_000, 10) > 1_000_000 * 1.05 ** 10


class TestChildEducation:
    def test_too_young(self):
        assert child_education_cost(Child("A", 2), 0) == 0

    def test_too_old(self):
        assert child_education_cost(Child("A", 26), 0) == 0

    def test_preschool(self):
        assert child_education_cost(Child("A", 4), 0) == pytest.approx(120_000)

    def test_school_type(self):
        assert child_education_cost(Child("A", 10, current_school_type="international"), 0) == pytest.approx(600_000)

    def test_higher_education_by_aspiration(self):
        c = Child("A", 18, education_aspirations="private_state")
        assert child_education_cost(c, 0) == pytest.approx(700_000)

    def test_performance_factor(self):
        c = Child("A", 10, academic_performance="struggling", current_school_type="government")
        assert child_education_cost(c, 0) == pytest.approx(60_000 * 1.3)

    def test_inflation_and_ageing(self):
        # age 8 now, 18 in ten years
        c = Child("A", 8, education_aspirations="public_state")
        assert child_education_cost(c, 10) == pytest.approx(350_000 * 1.09 ** 10)


class TestHealthcare:
    def test_young_single(self, make_profile, constant_rng):
        p = make_profile(age=30)
        assert healthcare_expenses(0, 30, p, constant_rng(0.9)) == pytest.approx(60_000)

    def test_married_multiplier(self, make_profile, constant_rng):
        p = make_profile(age=30, marital_status="married")
        assert healthcare_expenses(0, 30, p, constant_rng(0.9)) == pytest.approx(60_000 * 1.9)

    def test_spike_after_60(self, make_profile, constant_rng):
        p = make_profile(age=70)
        base = 60_000 * (1 + 0.04 * 30)
        assert healthcare_expenses(0, 70, p, constant_rng(0.9)) == pytest.approx(base)
        assert healthcare_expenses(0, 70, p, constant_rng(0.0)) == pytest.approx(base + 100_000)


class TestParentCare:
    def test_independent_good_health(self):
        p = Parent("Mum", 60)
        assert parent_care_cost(p, 0) == pytest.approx(12_000 * 1.3 * 12)

    def test_full_dependency_poor_health_far_away(self):
        p = Parent(
            "Dad", 70, health_status="poor", financial_independence="full_dependency",
            living_arrangement="assisted", location="different_state",
        )
        assert parent_care_cost(p, 0) == pytest.approx(75_000 * 3.5 * 1.7 * 1.25 * 12)

    def test_age_escalation(self):
        p = Parent("Dad", 80)
        assert parent_care_cost(p, 0) == pytest.approx(12_000 * 1.3 * 1.25 * 12)

    def test_after_life_expectancy(self):
        assert parent_care_cost(Parent("Gran", 90), 6) == 0

    def test_spouse_parents_only_when_married(self, make_profile):
        import dataclasses

        single = make_profile()
        family = FamilyCare(spouse_parents=(SpouseParent("In-law", 70, support_needed=True),))
        single = dataclasses.replace(single, family=family)
        married = dataclasses.replace(single, core=dataclasses.replace(single.core, marital_status="married"))
        assert parent_care_expenses(0, single) == 0
        assert parent_care_expenses(0, married) == pytest.approx(300_000)


class TestLifecycle:
    def test_quiet_year(self, profile, constant_rng):
        assert lifecycle_expenses(0, 42, profile, constant_rng(0.99)) == 0

    def test_renovation_year(self, profile, constant_rng):
        expected = 10_000_000 * 0.06 * 1.07 ** 5
        assert lifecycle_expenses(5, 47, profile, constant_rng(0.99)) == pytest.approx(expected)

    def test_vehicle_year(self, profile, constant_rng):
        assert lifecycle_expenses(4, 46, profile, constant_rng(0.99)) == pytest.approx(800_000 * 1.05 ** 4)

    def test_family_emergency(self, profile, constant_rng):
        assert lifecycle_expenses(0, 42, profile, constant_rng(0.0)) == pytest.approx(100_000)

    def test_child_wedding(self, make_profile, constant_rng):
        p = make_profile(children=[Child("A", 26, gender="female")])
        assert lifecycle_expenses(1, 43, p, constant_rng(0.99)) == pytest.approx(2_500_000 * 1.06)


class TestProjectExpenses:
    def test_total_is_sum(self):
        b = ExpenseBreakdown(1, 2, 3, 4, 5)
        assert b.total == 15

    def test_city_ratio(self, make_profile, constant_rng):
        p = make_profile(city_type="metro", annual_income=1_000_000)
        b = project_expenses(0, 42, p, constant_rng(0.99))
        assert b.living == pytest.approx(700_000)
        assert b.education == 0
        assert b.parent_care == 0
        assert b.total == pytest.approx(b.living + b.healthcare + b.lifecycle)
