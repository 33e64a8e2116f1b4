"""Chart generation for wealth-extinction results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from wealth_extinction.destroyers import WealthDestroyer
from wealth_extinction.monte_carlo import ScenarioRun
from wealth_extinction.scenarios import analyze_scenarios
from wealth_extinction.simulation import YearRecord, find_extinction_year

COLOR_WEALTH = "#1f77b4"
COLOR_INCOME = "#27ae60"
COLOR_EXPENSE = "#c0392b"
COLOR_EXTINCTION = "#d62728"
CASE_COLORS = {"Worst": "#d62728", "Likely": "#ff7f0e", "Best": "#2ca02c"}


def _format_millions_axis(ax: plt.Axes):
    """Y axis in millions with thousands separators."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 1_000_000:,.1f}M" if x != 0 else "0")
    )


def _save(fig: plt.Figure, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_trajectory(trajectory: list[YearRecord], output_path: Path, name: str = "") -> Path:
    """Generate a line chart of wealth, income and expenses by calendar year.

    Args:
        trajectory: base-case YearRecords.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "42" → "trajectory-42.png").

    Returns:
        Path to the generated PNG file.
    """
    if not trajectory:
        raise ValueError("Cannot plot an empty trajectory")

    years = [r.year for r in trajectory]
    fig, ax = plt.subplots(figsize=(14, 8))
    ax.plot(years, [r.wealth for r in trajectory], label="Wealth", color=COLOR_WEALTH, linewidth=2)
    ax.plot(years, [r.income for r in trajectory], label="Income", color=COLOR_INCOME, linewidth=1.2)
    ax.plot(years, [r.expenses for r in trajectory], label="Expenses", color=COLOR_EXPENSE, linewidth=1.2)

    extinction = find_extinction_year(trajectory)
    if trajectory[-1].wealth <= 0:
        ax.axvline(extinction, color=COLOR_EXTINCTION, linewidth=1.0, linestyle="--", alpha=0.8)
        y_lo, y_hi = ax.get_ylim()
        ax.annotate(
            f"Extinction {extinction}",
            xy=(extinction, y_lo + (y_hi - y_lo) * 0.9),
            fontsize=11, color=COLOR_EXTINCTION,
            ha="right", va="bottom",
            bbox=dict(boxstyle="round,pad=0.5", fc="white", ec=COLOR_EXTINCTION, alpha=0.9, linewidth=0.8),
        )

    ax.set_xlabel("Year")
    ax.set_ylabel("Amount")
    ax.set_title("Wealth trajectory (base case)")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_millions_axis(ax)
    return _save(fig, output_path, "trajectory", name)


def plot_extinction_distribution(runs: list[ScenarioRun], output_path: Path, name: str = "") -> Path:
    """Histogram of Monte Carlo extinction years with worst/likely/best markers."""
    if not runs:
        raise ValueError("No Monte Carlo runs to plot")

    years = [r.extinction_year for r in runs]
    analysis = analyze_scenarios(runs, baseline_extinction_year=min(years))
    bins = max(1, max(years) - min(years) + 1)

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.hist(years, bins=min(bins, 40), color=COLOR_WEALTH, alpha=0.7, edgecolor="white")
    for label, case in (
        ("Worst", analysis.worst_case),
        ("Likely", analysis.most_likely),
        ("Best", analysis.best_case),
    ):
        ax.axvline(
            case.extinction_year, color=CASE_COLORS[label], linewidth=1.5, linestyle="--",
            label=f"{label}: {case.extinction_year}",
        )

    ax.set_xlabel("Extinction year")
    ax.set_ylabel("Runs")
    ax.set_title(f"Monte Carlo extinction years (N={len(runs):,})")
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)
    return _save(fig, output_path, "extinction", name)


def plot_wealth_destroyers(destroyers: list[WealthDestroyer], output_path: Path, name: str = "") -> Path:
    """Horizontal bars of estimated impact, largest on top."""
    if not destroyers:
        raise ValueError("No wealth destroyers to plot")

    ordered = sorted(destroyers, key=lambda d: d.impact)
    fig, ax = plt.subplots(figsize=(12, 1 + 0.8 * len(ordered)))
    bars = ax.barh([d.factor for d in ordered], [d.impact for d in ordered], color=COLOR_EXPENSE, alpha=0.8)
    for bar, d in zip(bars, ordered):
        ax.text(
            bar.get_width(), bar.get_y() + bar.get_height() / 2,
            f" {d.impact:,.0f}", va="center", fontsize=9,
        )

    ax.set_xlabel("Estimated impact")
    ax.set_title("Top wealth destroyers")
    ax.grid(True, axis="x", alpha=0.3)
    ax.xaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 1_000_000:,.1f}M" if x != 0 else "0")
    )
    return _save(fig, output_path, "destroyers", name)
