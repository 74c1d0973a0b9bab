from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.gameplay import play_game
from src.plotting.trajectory_chart import ChartStyle, animate_trajectory, plot_trajectory, save_animation
from src.risk.ruin_probability import expected_duration
from src.simulation.monte_carlo import estimate_win_rate
from src.utils.config import load_config
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)


def run_gameplay(
    initial_stake: int,
    win_probability: float,
    target_amount: int,
    seed: int | None,
    out_dir: Path,
    n_games: int = 0,
    max_rounds: int | None = None,
    style: ChartStyle | None = None,
    gif: bool = False,
) -> dict[str, Any]:
    """Play one game, save its chart (and optionally a reveal GIF) and summarize it."""
    report = play_game(
        initial_stake,
        win_probability,
        target_amount,
        seed=seed,
        max_rounds=max_rounds,
    )
    out_dir.mkdir(parents=True, exist_ok=True)

    fig = plot_trajectory(report.trajectory, report.params, report.win_probability, style=style)
    chart_path = out_dir / "trajectory.png"
    fig.savefig(chart_path, dpi=120)
    LOGGER.info("Saved trajectory chart to %s", chart_path)

    result: dict[str, Any] = {
        "game": report.to_dict(),
        "expected_duration": expected_duration(initial_stake, win_probability, target_amount),
        "seed": seed,
        "artifacts": {"chart": str(chart_path)},
    }

    if gif:
        animation = animate_trajectory(report.trajectory, report.params, report.win_probability, style=style)
        gif_path = save_animation(animation, out_dir / "trajectory.gif")
        LOGGER.info("Saved trajectory animation to %s", gif_path)
        result["artifacts"]["animation"] = str(gif_path)

    if n_games > 0:
        result["monte_carlo"] = estimate_win_rate(
            report.params,
            n_games=n_games,
            seed=seed,
            max_rounds=max_rounds,
        )

    summary_path = out_dir / "summary.json"
    summary_path.write_text(json.dumps(result, indent=2), encoding="utf-8")
    LOGGER.info("Saved gameplay summary to %s", summary_path)
    return result


def _format_report(result: dict[str, Any]) -> str:
    game = result["game"]
    verdict = "WON" if game["outcome"] == "won" else "RUINED"
    lines = [
        f"Gambler's Ruin: stake {game['initial_stake']} -> target {game['target_amount']} (p = {game['win_probability']:g})",
        "═══════════════════════════════════════════════════════════════════",
        "",
        f"  P(win) analytic:   {100*game['overall_win_probability']:.2f}%",
        f"  Expected bets:     {result['expected_duration']:.1f}",
        f"  Outcome:           {verdict} with capital {game['final_capital']}",
        f"  Rounds played:     {game['rounds_played']}",
    ]
    mc = result.get("monte_carlo")
    if mc is not None:
        lines += [
            "",
            f"Monte Carlo ({mc['n_games']} games):",
            f"  Empirical P(win):  {100*mc['empirical_win_rate']:.2f}% ± {100*mc['standard_error']:.2f}%",
            f"  Mean bets/game:    {mc['mean_bets']:.1f}",
        ]
    return "\n".join(lines) + "\n"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate and chart a gambler's ruin game")
    parser.add_argument("--config", default=None, help="YAML file with game/monte_carlo/chart sections.")
    parser.add_argument("--stake", type=int, default=None)
    parser.add_argument("--p", type=float, default=None)
    parser.add_argument("--target", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--n-games", type=int, default=None)
    parser.add_argument("--max-rounds", type=int, default=None)
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--gif", action="store_true")
    parser.add_argument("--log-level", default=None, help="Level for the src.* loggers, e.g. DEBUG.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for a single gambler's ruin game."""
    args = _parse_args(argv)
    if args.log_level is not None:
        get_logger("src", level=args.log_level.upper())
    config = load_config(args.config)
    game = config["game"]

    stake = args.stake if args.stake is not None else game["initial_stake"]
    p = args.p if args.p is not None else game["win_probability"]
    target = args.target if args.target is not None else game["target_amount"]
    seed = args.seed if args.seed is not None else game["seed"]
    max_rounds = args.max_rounds if args.max_rounds is not None else game["max_rounds"]
    n_games = args.n_games if args.n_games is not None else config["monte_carlo"]["n_games"]

    out_dir = Path(args.output_dir) if args.output_dir else Path("results") / f"{stake}_{p:g}_{target}"
    result = run_gameplay(
        initial_stake=stake,
        win_probability=p,
        target_amount=target,
        seed=seed,
        out_dir=out_dir,
        n_games=n_games,
        max_rounds=max_rounds,
        style=ChartStyle.from_config(config["chart"]),
        gif=args.gif,
    )
    print(_format_report(result))


if __name__ == "__main__":
    main()
