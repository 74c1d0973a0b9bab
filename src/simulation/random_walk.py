from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np
import pandas as pd

from src.game.errors import InvalidParameterError, RoundLimitExceededError
from src.game.parameters import GameParameters, GameState
from src.risk.ruin_probability import expected_duration
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)

Sampler = Callable[[float], int]

MIN_ROUND_CAP = 10_000
ROUND_CAP_FACTOR = 50


@dataclass(frozen=True)
class Trajectory:
    """Capital held by the gambler after each round, opening stake first."""

    capital: tuple[int, ...]
    target_amount: int

    @property
    def initial_stake(self) -> int:
        return self.capital[0]

    @property
    def final_capital(self) -> int:
        return self.capital[-1]

    @property
    def outcome(self) -> GameState:
        return GameState.from_capital(self.final_capital, self.target_amount)

    @property
    def rounds_played(self) -> int:
        """Number of rounds on the chart; the opening stake counts as round one."""
        return len(self.capital)

    @property
    def n_bets(self) -> int:
        return len(self.capital) - 1

    def to_frame(self) -> pd.DataFrame:
        """Return the path as a ``round``/``capital`` table with 1-based rounds."""
        return pd.DataFrame(
            {
                "round": np.arange(1, len(self.capital) + 1, dtype=np.int64),
                "capital": np.asarray(self.capital, dtype=np.int64),
            }
        )


def bernoulli_sampler(rng: np.random.Generator) -> Sampler:
    """Wrap a NumPy generator as a single-trial Bernoulli sampler."""

    def sample(p: float) -> int:
        return int(rng.binomial(1, p))

    return sample


def default_round_cap(params: GameParameters) -> int:
    """Generous upper bound on rounds before a game is treated as stuck."""
    expected = math.ceil(
        expected_duration(params.initial_stake, params.win_probability, params.target_amount)
    )
    return max(MIN_ROUND_CAP, ROUND_CAP_FACTOR * (expected + params.target_amount**2))


def simulate_trajectory(
    params: GameParameters,
    sampler: Sampler | None = None,
    seed: int | None = None,
    max_rounds: int | None = None,
) -> Trajectory:
    """Play one game of unit bets until ruin or the target is reached.

    Args:
        params: Validated game parameters.
        sampler: Callable returning 1 for a won round and 0 for a lost one.
            Defaults to a NumPy Bernoulli sampler seeded with ``seed``.
        seed: Seed for the default sampler; ignored when ``sampler`` is given.
        max_rounds: Maximum number of bets before giving up. Defaults to
            :func:`default_round_cap`.

    Returns:
        The sampled capital trajectory, ending at 0 or ``target_amount``.

    Raises:
        InvalidParameterError: If ``max_rounds`` is not positive.
        RoundLimitExceededError: If the game is not absorbed within ``max_rounds``.
    """
    if sampler is None:
        sampler = bernoulli_sampler(np.random.default_rng(seed))
    if max_rounds is None:
        max_rounds = default_round_cap(params)
    if max_rounds <= 0:
        raise InvalidParameterError("max_rounds must be positive.")

    capital = params.initial_stake
    path = [capital]
    state = GameState.PLAYING
    while not state.is_terminal:
        if len(path) > max_rounds:
            raise RoundLimitExceededError(max_rounds, capital)
        capital += 1 if sampler(params.win_probability) == 1 else -1
        path.append(capital)
        state = GameState.from_capital(capital, params.target_amount)

    LOGGER.debug(
        "Game %s after %d bets (stake=%d, p=%s, target=%d)",
        state.label,
        len(path) - 1,
        params.initial_stake,
        params.win_probability,
        params.target_amount,
    )
    return Trajectory(capital=tuple(path), target_amount=params.target_amount)
