"""Tests for chart generation."""

import pytest

from wealth_extinction.charts import plot_extinction_distribution, plot_trajectory, plot_wealth_destroyers
from wealth_extinction.destroyers import WealthDestroyer
from wealth_extinction.monte_carlo import ScenarioRun
from wealth_extinction.simulation import YearRecord


def _trajectory(values):
    return [
        YearRecord(year=2025 + i, age=40 + i, wealth=w, income=1_000_000, expenses=1_500_000, net_cash_flow=-500_000)
        for i, w in enumerate(values)
    ]


class TestCharts:
    def test_trajectory(self, tmp_path):
        path = plot_trajectory(_trajectory([3_000_000, 2_000_000, 1_000_000, 0]), tmp_path, "demo")
        assert path == tmp_path / "trajectory-demo.png"
        assert path.stat().st_size > 0

    def test_extinction_distribution(self, tmp_path):
        runs = [ScenarioRun(run_id=i, extinction_year=2050 + i % 7, final_wealth=0.0) for i in range(20)]
        path = plot_extinction_distribution(runs, tmp_path / "nested")
        assert path == tmp_path / "nested" / "extinction.png"
        assert path.exists()

    def test_wealth_destroyers(self, tmp_path):
        destroyers = [
            WealthDestroyer("Inflation", 3_000_000, "Rising prices", "Hold real assets"),
            WealthDestroyer("Investment Fees", 1_200_000, "High fees", "Use index funds"),
        ]
        assert plot_wealth_destroyers(destroyers, tmp_path).exists()

    @pytest.mark.parametrize("plot", [plot_trajectory, plot_extinction_distribution, plot_wealth_destroyers])
    def test_empty_input(self, plot, tmp_path):
        with pytest.raises(ValueError):
            plot([], tmp_path)
