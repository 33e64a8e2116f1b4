"""Tests for extreme value theory tail-risk estimation."""

import math
import warnings
from random import Random

import pytest

from wealth_extinction.errors import TailAnalysisDegraded
from wealth_extinction.evt import (
    GPDModel,
    analyze_tail_risk,
    assess_tail_risk,
    augment_losses,
    expected_shortfall,
    fallback_evt_result,
    fit_gpd,
    goodness_of_fit,
    gpd_cdf,
    losses_from_changes,
    threshold_index,
    value_at_risk,
    wealth_changes,
)
from wealth_extinction.simulation import YearRecord


def _model(shape: float, scale: float = 0.05, threshold: float = 0.1) -> GPDModel:
    return GPDModel(
        shape=shape, scale=scale, threshold=threshold, threshold_percentile=0.95,
        exceedance_count=10, total_observations=100,
    )


def _synthetic_losses(n: int, seed: int = 42) -> list[float]:
    rng = Random(seed)
    return [max(0.001, rng.gauss(0.05, 0.03)) for _ in range(n)]


class TestLossExtraction:
    def test_wealth_changes_skip_zero_base(self):
        t = [
            YearRecord(year=2025 + i, age=40 + i, wealth=w, income=0, expenses=0, net_cash_flow=0)
            for i, w in enumerate([100.0, 80.0, 0.0, 50.0])
        ]
        assert wealth_changes(t) == pytest.approx([-0.2, -1.0])

    def test_losses_are_positive_magnitudes(self):
        assert losses_from_changes([0.1, -0.2, 0.0, -0.05]) == pytest.approx([0.2, 0.05])


class TestAugmentLosses:
    def test_enough_losses_unchanged(self):
        losses = _synthetic_losses(25)
        assert augment_losses(losses, Random(1)) == losses

    def test_thin_sample_padded(self):
        out = augment_losses([0.1, 0.2, 0.3], Random(1))
        assert len(out) == 103
        assert out[:3] == [0.1, 0.2, 0.3]
        assert all(x >= 0.001 for x in out)

    def test_identical_losses_get_default_spread(self):
        out = augment_losses([0.04, 0.04], Random(1))
        assert len(set(out[2:])) > 1

    def test_empty_uses_defaults(self):
        out = augment_losses([], Random(1))
        assert len(out) == 100
        assert sum(out) / len(out) == pytest.approx(0.05, abs=0.01)


class TestGPDCdf:
    def test_zero_at_origin(self):
        assert gpd_cdf(0, 0.2, 0.05) == 0
        assert gpd_cdf(-1, 0.2, 0.05) == 0

    @pytest.mark.parametrize("shape", [-0.4, 0.0, 0.3])
    def test_non_decreasing(self, shape):
        xs = [i * 0.01 for i in range(200)]
        values = [gpd_cdf(x, shape, 0.05) for x in xs]
        assert all(a <= b + 1e-12 for a, b in zip(values, values[1:]))
        assert all(0 <= v <= 1 for v in values)

    def test_exponential_case(self):
        assert gpd_cdf(0.05, 0.0, 0.05) == pytest.approx(1 - math.exp(-1))

    def test_bounded_tail(self):
        # upper endpoint for shape -0.5, scale 0.05 is 0.1
        assert gpd_cdf(0.2, -0.5, 0.05) == 1


class TestFitGPD:
    def test_rejects_other_methods(self):
        with pytest.raises(ValueError, match="MLE"):
            fit_gpd(_synthetic_losses(50), fit_method="MLE")

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            fit_gpd([])

    def test_fallback_on_tiny_sample(self):
        data = _synthetic_losses(10)
        model = fit_gpd(data)
        assert model.fallback
        assert model.shape == 0.2
        assert model.exceedance_count == 5
        assert model.goodness_of_fit.passed is False
        assert model.threshold == min(data)

    def test_fallback_on_tied_sample(self):
        model = fit_gpd([0.05] * 40)
        assert model.fallback

    def test_threshold_lowered_to_keep_ten_exceedances(self):
        data = _synthetic_losses(100)
        model = fit_gpd(data)
        assert not model.fallback
        assert model.threshold == sorted(data)[89]
        assert model.threshold_percentile == pytest.approx(0.89)
        assert model.exceedance_count == 10

    @pytest.mark.parametrize("n,p,expected", [(1000, 0.5, 500), (100, 0.95, 89), (25, 0.95, 14), (5, 0.95, 0)])
    def test_threshold_index(self, n, p, expected):
        assert threshold_index(n, p) == expected

    def test_method_of_moments(self):
        data = _synthetic_losses(200)
        model = fit_gpd(data, threshold_percentile=0.5)
        assert not model.fallback
        assert model.fit_method == "MOM"
        assert model.exceedance_count >= 10
        assert -0.5 <= model.shape <= 0.5
        assert model.scale > 0
        gof = model.goodness_of_fit
        assert gof.p_value == pytest.approx(math.exp(-10 * gof.statistic))
        assert gof.passed == (gof.p_value > 0.05)

    def test_constant_exceedances_fall_back_to_exponential(self):
        data = [0.0] * 50 + [1.0] * 50
        model = fit_gpd(data, threshold_percentile=0.0)
        assert model.shape == 0
        assert model.scale == pytest.approx(1.0)


class TestRiskMetrics:
    def test_var_exponential(self):
        m = _model(0.0)
        p = 0.01 * 100 / 10
        assert value_at_risk(m, 0.99) == pytest.approx(0.1 + 0.05 * math.log(1 / p))

    def test_var_increasing_in_confidence(self):
        m = _model(0.2)
        assert value_at_risk(m, 0.99) < value_at_risk(m, 0.995) < value_at_risk(m, 0.999)

    @pytest.mark.parametrize("shape", [-0.3, 0.0, 0.2, 0.5])
    def test_es_at_least_var(self, shape):
        m = _model(shape)
        assert expected_shortfall(m, 0.99) >= value_at_risk(m, 0.99)

    @pytest.mark.parametrize("shape", [1.0, 1.5])
    def test_es_infinite_for_heavy_tail(self, shape):
        assert expected_shortfall(_model(shape), 0.99) == math.inf

    @pytest.mark.parametrize("shape,level", [(0.4, "EXTREME"), (0.2, "HIGH"), (0.0, "MEDIUM"), (-0.2, "LOW")])
    def test_assess_tail_risk(self, shape, level):
        assert assess_tail_risk(shape) == level


class TestAnalyzeTailRisk:
    def test_twenty_five_losses(self):
        """25 losses around mean 0.05 / std 0.03 give a fitted tail."""
        losses = _synthetic_losses(25)
        result = analyze_tail_risk(losses, Random(0))
        model = result.model
        assert not model.fallback
        assert model.total_observations == 25
        assert model.exceedance_count == 10
        assert abs(model.shape) <= 0.5
        exceedances = [x - model.threshold for x in losses if x > model.threshold]
        assert model.goodness_of_fit == goodness_of_fit(exceedances, model.shape, model.scale)
        assert result.var99 < result.var995 < result.var999
        assert "synthetic" not in result.degraded_reason
        assert "fallback" not in result.degraded_reason
        assert len(result.tail_events) == 5
        assert result.tail_events[0].impact == result.var99
        assert result.tail_events[3].impact == pytest.approx(result.var995 * 1.2)

    def test_thin_data_flagged(self):
        with pytest.warns(TailAnalysisDegraded, match="synthetic"):
            result = analyze_tail_risk([0.1, 0.2], Random(0))
        assert result.model.total_observations == 102
        assert "synthetic" in result.degraded_reason

    def test_good_fit_not_degraded(self):
        data = _synthetic_losses(400)
        result = analyze_tail_risk(data, Random(0), threshold_percentile=0.5)
        if result.model.goodness_of_fit.passed:
            assert not result.degraded
        else:
            assert "poor fit" in result.degraded_reason

    def test_fallback_result(self):
        r = fallback_evt_result()
        assert (r.var99, r.var995, r.var999, r.es99) == (0.25, 0.35, 0.5, 0.35)
        assert r.tail_risk == "MEDIUM"
        assert r.degraded
        assert r.model.shape == 0.2
        assert [e.severity for e in r.tail_events] == ["MEDIUM", "HIGH", "EXTREME"]

    def test_no_warning_from_fallback_result(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            fallback_evt_result()
