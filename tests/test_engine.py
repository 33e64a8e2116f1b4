"""Tests for the calculation facade."""

import itertools
from random import Random

import pytest

from wealth_extinction.engine import EngineConfig, compute_calculation, compute_complexity, compute_evt
from wealth_extinction.errors import CalculationTimeoutError, ValidationError
from wealth_extinction.monte_carlo import MonteCarloConfig
from wealth_extinction.profile import Child, Parent
from wealth_extinction.simulation import BASE_YEAR

pytestmark = pytest.mark.filterwarnings("ignore::wealth_extinction.errors.TailAnalysisDegraded")


def _config(**kwargs) -> EngineConfig:
    mc = MonteCarloConfig(n_simulations=4, batch_size=2, executor="none")
    return EngineConfig(monte_carlo=mc, **kwargs)


class TestComputeCalculation:
    def test_result_fields(self, make_profile):
        p = make_profile(children=[Child("A", 10)], parents=[Parent("Dad", 72)])
        result = compute_calculation(p, _config(), rng=Random(42))
        assert result.years_remaining == result.extinction_year - BASE_YEAR
        assert result.current_wealth == 10_000_000
        assert result.trajectory[0].year == BASE_YEAR
        assert len(result.top_wealth_destroyers) <= 5
        assert len(result.monte_carlo_runs) == 4
        assert not result.monte_carlo_timed_out
        assert result.evt is not None
        assert result.scenario_analysis.statistics.n_runs == 4
        assert result.children_inheritance == pytest.approx(
            sum(c.inheritance for c in result.family_impact.inheritance.children)
        )
        assert result.recommendations.immediate[0].priority == "critical"
        assert [s.destroyer for s in result.prevention_plan] == [d.factor for d in result.top_wealth_destroyers]
        assert result.total_wealth_destruction == pytest.approx(sum(d.impact for d in result.top_wealth_destroyers))
        assert result.portfolio.max_drawdown >= 0
        assert result.family_impact.life_events
        assert isinstance(result.protected_scenario.extinction_year, int)

    @pytest.mark.parametrize("seed", range(5))
    def test_tail_model_fitted_from_trajectory(self, profile, seed):
        result = compute_calculation(profile, _config(), rng=Random(seed))
        assert not result.evt.model.fallback
        assert result.evt.model.exceedance_count >= 10

    def test_reproducible_with_seed(self, profile):
        a = compute_calculation(profile, _config(), rng=Random(7))
        b = compute_calculation(profile, _config(), rng=Random(7))
        assert a.extinction_year == b.extinction_year
        assert [r.wealth for r in a.trajectory] == [r.wealth for r in b.trajectory]
        assert [r.extinction_year for r in a.monte_carlo_runs] == [r.extinction_year for r in b.monte_carlo_runs]

    def test_evt_disabled(self, profile):
        result = compute_calculation(profile, _config(evt_enabled=False), rng=Random(42))
        assert result.evt is None

    def test_missing_complexity_score_filled(self, make_profile):
        result = compute_calculation(make_profile(complexity_score=None), _config(), rng=Random(42))
        assert 0 <= result.complexity.score <= 10

    def test_invalid_profile(self, make_profile):
        with pytest.raises(ValidationError, match="Age"):
            compute_calculation(make_profile(age=10), _config(), rng=Random(42))

    def test_partial_monte_carlo_within_deadline(self, profile):
        clock = itertools.count(0, 1).__next__
        mc = MonteCarloConfig(n_simulations=50, batch_size=1, time_budget=20.0, executor="none")
        config = EngineConfig(monte_carlo=mc, timeout=15.0)
        result = compute_calculation(profile, config, rng=Random(42), clock=clock)
        assert result.monte_carlo_timed_out
        assert 0 < len(result.monte_carlo_runs) < 50
        assert result.scenario_analysis.statistics.n_runs == len(result.monte_carlo_runs)

    def test_timeout(self, profile):
        clock = itertools.count(0, 100).__next__
        with pytest.raises(CalculationTimeoutError):
            compute_calculation(profile, _config(timeout=15.0), rng=Random(42), clock=clock)


class TestStandaloneOperations:
    def test_compute_complexity(self, make_profile):
        result = compute_complexity(make_profile(parents=[Parent("Dad", 80, health_status="poor")]))
        assert result.detailed_scores["parent_care"] > 0

    def test_compute_complexity_validates(self, make_profile):
        with pytest.raises(ValidationError):
            compute_complexity(make_profile(net_worth=-1))

    def test_compute_evt_fits_declines(self):
        changes = [0.05, -0.1, 0.0, 0.02, -0.08] * 10
        result = compute_evt(changes, Random(0))
        model = result.model
        assert model.total_observations == 20
        assert not model.fallback
        assert model.threshold == pytest.approx(0.08)
        assert model.exceedance_count == 10
        assert model.scale == pytest.approx(0.02)

    def test_compute_evt_empty(self):
        result = compute_evt([], Random(0))
        assert result.model.total_observations == 100
        assert result.degraded
