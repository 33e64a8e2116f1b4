"""End-to-end tests for the command line entry point."""

import pytest

from wealth_extinction.cli import main

PROFILE_TOML = """\
[core_identity]
age = {age}

[financial_foundation]
net_worth = 12000000
annual_income = 2500000

[[children]]
name = "Ravi"
age = 6

[[family_care.parents]]
name = "Mum"
age = 70
"""

FAST = ["--runs", "2", "--batch-size", "1", "--seed", "1", "--quiet", "--executor", "none"]


@pytest.fixture
def profile_path(tmp_path):
    path = tmp_path / "household.toml"
    path.write_text(PROFILE_TOML.format(age=40))
    return path


class TestMain:
    def test_report(self, profile_path, capsys):
        main([str(profile_path), *FAST])
        out = capsys.readouterr().out
        assert "Wealth extinction projection" in out
        assert "[Top wealth destroyers]" in out
        assert "[Immediate actions]" in out
        assert "2 Monte Carlo runs" in out
        assert "Total at risk:" in out
        assert "[Portfolio]" in out
        assert "Ravi's Education" in out
        assert "score " in out

    def test_no_evt(self, profile_path, capsys):
        main([str(profile_path), *FAST, "--no-evt"])
        assert "[Tail risk" not in capsys.readouterr().out

    def test_invalid_profile(self, tmp_path, capsys):
        path = tmp_path / "young.toml"
        path.write_text(PROFILE_TOML.format(age=10))
        with pytest.raises(SystemExit) as exc:
            main([str(path), *FAST])
        assert exc.value.code == 1
        assert "Error: Age must be between" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "nope.toml"), *FAST])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_charts(self, profile_path, tmp_path, capsys):
        chart_dir = tmp_path / "charts"
        main([str(profile_path), *FAST, "--chart", str(chart_dir)])
        assert (chart_dir / "trajectory-household.png").exists()
        assert (chart_dir / "extinction-household.png").exists()
        assert (chart_dir / "destroyers-household.png").exists()
        assert "Chart saved:" in capsys.readouterr().out
