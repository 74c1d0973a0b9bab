from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from matplotlib.figure import Figure

from src.game.parameters import GameParameters, GameState
from src.plotting.trajectory_chart import ChartStyle, plot_trajectory
from src.risk.ruin_probability import win_probability as closed_form_win_probability
from src.simulation.random_walk import Sampler, Trajectory, simulate_trajectory
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class GameReport:
    params: GameParameters
    trajectory: Trajectory
    win_probability: float

    @property
    def outcome(self) -> GameState:
        return self.trajectory.outcome

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_stake": self.params.initial_stake,
            "win_probability": self.params.win_probability,
            "target_amount": self.params.target_amount,
            "overall_win_probability": self.win_probability,
            "outcome": self.outcome.label,
            "rounds_played": self.trajectory.rounds_played,
            "final_capital": self.trajectory.final_capital,
            "capital": list(self.trajectory.capital),
        }


def play_game(
    initial_stake: int,
    win_probability: float,
    target_amount: int,
    *,
    seed: int | None = None,
    sampler: Sampler | None = None,
    max_rounds: int | None = None,
) -> GameReport:
    """Validate inputs, play one game and attach the analytic win probability.

    All validation happens before the first round is played.
    """
    params = GameParameters(initial_stake, win_probability, target_amount)
    overall = closed_form_win_probability(params.initial_stake, params.win_probability, params.target_amount)
    trajectory = simulate_trajectory(params, sampler=sampler, seed=seed, max_rounds=max_rounds)
    LOGGER.info(
        "Gambler %s after %d rounds (stake=%d, target=%d, p=%s, P(win)=%.4f)",
        trajectory.outcome.label,
        trajectory.rounds_played,
        params.initial_stake,
        params.target_amount,
        params.win_probability,
        overall,
    )
    return GameReport(params=params, trajectory=trajectory, win_probability=overall)


def simulate_gamblers_ruin(
    initial_stake: int,
    win_probability: float,
    target_amount: int,
    *,
    seed: int | None = None,
    sampler: Sampler | None = None,
    style: ChartStyle | None = None,
    max_rounds: int | None = None,
) -> Figure:
    """Simulate one gambler's ruin game and chart the capital over rounds.

    Args:
        initial_stake: Capital the gambler enters with, a positive integer.
        win_probability: Probability of winning each one-unit round, in (0, 1).
        target_amount: Capital at which the gambler stops, above the stake.
        seed: Seed for the default NumPy sampler.
        sampler: Replacement Bernoulli sampler returning 1 on a won round.
        style: Chart rendering options.
        max_rounds: Cap on the number of bets before giving up.

    Returns:
        Figure with the trajectory, titled with the overall win probability,
        the outcome and the number of rounds played.

    Raises:
        InvalidParameterError: If inputs are outside supported ranges.
        NumericOverflowError: If the win probability cannot be computed.
        RoundLimitExceededError: If the game does not end within ``max_rounds``.
    """
    report = play_game(
        initial_stake,
        win_probability,
        target_amount,
        seed=seed,
        sampler=sampler,
        max_rounds=max_rounds,
    )
    return plot_trajectory(report.trajectory, report.params, report.win_probability, style=style)
