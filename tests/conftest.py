"""Shared fixtures: profile factory and a constant-returning random source."""

from random import Random

import pytest

from wealth_extinction.profile import (
    Allocation,
    BehavioralProfile,
    CoreIdentity,
    FamilyCare,
    FinancialFoundation,
    HouseholdProfile,
)


class ConstantRandom(Random):
    """Random whose random() always returns `value`; uniform() follows from it."""

    def __init__(self, value: float = 0.5):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def constant_rng():
    return ConstantRandom


def _make_profile(
    age: int = 42,
    net_worth: float = 10_000_000,
    annual_income: float = 2_000_000,
    income_source: str = "salary",
    allocation: Allocation | None = None,
    children: tuple = (),
    parents: tuple = (),
    siblings: tuple = (),
    complexity_score: float | None = 5.0,
    **core_kwargs,
) -> HouseholdProfile:
    return HouseholdProfile(
        core=CoreIdentity(age=age, **core_kwargs),
        finances=FinancialFoundation(
            net_worth=net_worth,
            annual_income=annual_income,
            income_source=income_source,
            allocation=allocation if allocation is not None else Allocation(0.6, 0.3, 0.1, 0.0),
        ),
        children=tuple(children),
        family=FamilyCare(parents=tuple(parents), siblings=tuple(siblings)),
        behavior=BehavioralProfile(),
        complexity_score=complexity_score,
    )


@pytest.fixture
def make_profile():
    return _make_profile


@pytest.fixture
def profile():
    """The reference household: age 42, 10M net worth, 2M salary, no dependants."""
    return _make_profile()
