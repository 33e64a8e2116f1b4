"""TOML profile/config loader with CLI > config > default resolution."""

import argparse
import sys
import tomllib
from pathlib import Path

from wealth_extinction.engine import DEFAULT_TIMEOUT, EngineConfig
from wealth_extinction.monte_carlo import EXECUTORS, MonteCarloConfig
from wealth_extinction.profile import HouseholdProfile, profile_from_dict

DEFAULT_CONFIG_PATH = Path("household.toml")

DEFAULTS = {
    "mc_runs": 20,
    "seed": None,
    "batch_size": 5,
    "mc_time_budget": 10.0,
    "timeout": DEFAULT_TIMEOUT,
    "workers": None,
    "executor": "thread",
    "evt": True,
}


def _read_toml(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)


def load_config(path: Path | None = None) -> dict:
    """Load the [engine] table of a TOML file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    raw = _read_toml(path)
    engine = raw.get("engine", {})
    # Accept both snake_case and the dashed spelling of the CLI flags
    return {key.replace("-", "_"): value for key, value in engine.items()}


def load_profile(path: Path) -> HouseholdProfile:
    """Build a HouseholdProfile from the profile tables of a TOML file.

    The file holds [core_identity], [financial_foundation], [[children]],
    [family_care] and [behavioral_profile] tables; [engine] is ignored here.
    """
    raw = _read_toml(path)
    raw.pop("engine", None)
    return profile_from_dict(raw)


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared engine flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="engine settings file (default: the profile file)")
    parser.add_argument("--runs", dest="mc_runs", type=int, default=None, help=f"Monte Carlo runs (default: {d['mc_runs']})")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible output")
    parser.add_argument("--batch-size", type=int, default=None, help=f"Monte Carlo runs per batch (default: {d['batch_size']})")
    parser.add_argument("--mc-time-budget", type=float, default=None, help=f"Monte Carlo budget in seconds (default: {d['mc_time_budget']})")
    parser.add_argument("--timeout", type=float, default=None, help=f"whole-calculation budget in seconds (default: {d['timeout']})")
    parser.add_argument("--workers", type=int, default=None, help="worker count (default: executor default)")
    parser.add_argument("--executor", choices=EXECUTORS, default=None, help=f"Monte Carlo executor (default: {d['executor']})")
    parser.add_argument("--no-evt", dest="evt", action="store_false", default=None, help="skip the tail-risk analysis")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config file > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def build_engine_config(r: dict) -> EngineConfig:
    """Build EngineConfig from resolved config dict."""
    return EngineConfig(
        monte_carlo=MonteCarloConfig(
            n_simulations=r["mc_runs"],
            seed=r["seed"],
            batch_size=r["batch_size"],
            time_budget=r["mc_time_budget"],
            executor=r["executor"],
            max_workers=r["workers"],
        ),
        timeout=r["timeout"],
        evt_enabled=r["evt"],
        max_workers=r["workers"],
        seed=r["seed"],
    )
