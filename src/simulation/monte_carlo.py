from __future__ import annotations

from typing import Any

import numpy as np
from tqdm import tqdm

from src.game.errors import InvalidParameterError
from src.game.parameters import GameParameters, GameState
from src.risk.ruin_probability import win_probability
from src.simulation.random_walk import bernoulli_sampler, simulate_trajectory
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)


def estimate_win_rate(
    params: GameParameters,
    n_games: int,
    seed: int | None = 42,
    max_rounds: int | None = None,
    progress: bool = True,
) -> dict[str, Any]:
    """Play independent games and compare the empirical win rate to the closed form.

    Each game draws from its own generator spawned from one seed sequence, so
    results do not depend on how many rounds earlier games lasted.

    Args:
        params: Validated game parameters.
        n_games: Number of independent games to play.
        seed: Root seed for the spawned generators.
        max_rounds: Per-game round cap passed to the simulator.
        progress: Show a tqdm progress bar.

    Returns:
        Dict with game count, wins, empirical and analytic win rates, mean
        number of bets per game and the standard error of the empirical rate.
    """
    if n_games <= 0:
        raise InvalidParameterError("n_games must be positive.")

    children = np.random.SeedSequence(seed).spawn(n_games)
    wins = np.zeros(n_games, dtype=bool)
    bets = np.zeros(n_games, dtype=np.int64)
    for i in tqdm(range(n_games), desc="Games", unit="game", disable=not progress):
        sampler = bernoulli_sampler(np.random.default_rng(children[i]))
        trajectory = simulate_trajectory(params, sampler=sampler, max_rounds=max_rounds)
        wins[i] = trajectory.outcome is GameState.WON
        bets[i] = trajectory.n_bets

    empirical = float(np.mean(wins))
    analytic = win_probability(params.initial_stake, params.win_probability, params.target_amount)
    LOGGER.info("Empirical win rate %.4f over %d games (analytic %.4f)", empirical, n_games, analytic)
    return {
        "n_games": int(n_games),
        "wins": int(np.sum(wins)),
        "empirical_win_rate": empirical,
        "analytic_win_probability": analytic,
        "mean_bets": float(np.mean(bets)),
        "standard_error": float(np.sqrt(empirical * (1.0 - empirical) / n_games)),
    }
