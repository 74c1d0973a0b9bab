from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scripts import gameplay


def test_run_gameplay_writes_chart_and_summary(tmp_path: Path) -> None:
    result = gameplay.run_gameplay(
        initial_stake=5,
        win_probability=0.5,
        target_amount=10,
        seed=42,
        out_dir=tmp_path,
    )
    assert (tmp_path / "trajectory.png").exists()
    saved = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert saved["game"]["overall_win_probability"] == 0.5
    assert saved["game"]["outcome"] in ("won", "lost")
    assert saved["expected_duration"] == 25.0
    assert "monte_carlo" not in saved
    assert result["artifacts"]["chart"] == str(tmp_path / "trajectory.png")


def test_run_gameplay_with_monte_carlo_and_gif(tmp_path: Path) -> None:
    result = gameplay.run_gameplay(
        initial_stake=1,
        win_probability=0.5,
        target_amount=2,
        seed=3,
        out_dir=tmp_path,
        n_games=20,
        gif=True,
    )
    assert (tmp_path / "trajectory.gif").exists()
    assert result["monte_carlo"]["n_games"] == 20
    report = gameplay._format_report(result)
    assert "Monte Carlo (20 games)" in report
    assert "P(win) analytic:   50.00%" in report


def test_main_uses_config_and_cli_overrides(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "game.yaml"
    config_path.write_text(
        "game:\n  initial_stake: 2\n  target_amount: 4\n  seed: 1\nchart:\n  theme: classic\n",
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"
    gameplay.main(["--config", str(config_path), "--p", "0.6", "--output-dir", str(out_dir)])

    saved = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert saved["game"]["initial_stake"] == 2
    assert saved["game"]["target_amount"] == 4
    assert saved["game"]["win_probability"] == 0.6
    assert saved["seed"] == 1
    assert "stake 2 -> target 4" in capsys.readouterr().out


def test_main_default_output_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    gameplay.main(["--stake", "3", "--p", "0.5", "--target", "6", "--seed", "8"])
    assert (tmp_path / "results" / "3_0.5_6" / "summary.json").exists()


def test_summary_counts_rounds_and_bets_separately(tmp_path: Path) -> None:
    result = gameplay.run_gameplay(
        initial_stake=1,
        win_probability=0.5,
        target_amount=2,
        seed=4,
        out_dir=tmp_path,
        n_games=10,
    )
    assert result["game"]["rounds_played"] == 2
    assert result["monte_carlo"]["mean_bets"] == 1.0
    assert "mean_rounds" not in result["monte_carlo"]
    assert "Mean bets/game:    1.0" in gameplay._format_report(result)


def test_main_log_level_flag_sets_package_logger(tmp_path: Path) -> None:
    package_logger = logging.getLogger("src")
    previous = package_logger.level
    try:
        argv = ["--stake", "1", "--p", "0.5", "--target", "2", "--seed", "2"]
        gameplay.main(argv + ["--output-dir", str(tmp_path), "--log-level", "debug"])
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)
