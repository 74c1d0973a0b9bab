from __future__ import annotations

import itertools

import numpy as np
import pytest

from src.game.errors import InvalidParameterError, RoundLimitExceededError
from src.game.parameters import GameParameters, GameState
from src.simulation.random_walk import (
    MIN_ROUND_CAP,
    bernoulli_sampler,
    default_round_cap,
    simulate_trajectory,
)


def _always(value: int):
    return lambda _p: value


@pytest.mark.parametrize("seed", range(10))
@pytest.mark.parametrize("stake, p, target", [(5, 0.5, 10), (3, 0.4, 8), (50, 0.6, 100), (1, 0.5, 2)])
def test_trajectory_is_absorbed_with_unit_steps(seed: int, stake: int, p: float, target: int) -> None:
    params = GameParameters(stake, p, target)
    capital = simulate_trajectory(params, seed=seed).capital

    assert capital[0] == stake
    assert capital[-1] in (0, target)
    assert np.all(np.abs(np.diff(capital)) == 1)
    assert all(0 < value < target for value in capital[1:-1])


def test_fair_single_unit_game_ends_after_one_bet() -> None:
    trajectory = simulate_trajectory(GameParameters(1, 0.5, 2), seed=3)
    assert trajectory.n_bets == 1
    assert trajectory.rounds_played == 2


def test_same_seed_gives_identical_trajectories() -> None:
    params = GameParameters(5, 0.5, 10)
    a = simulate_trajectory(params, seed=2024)
    b = simulate_trajectory(params, seed=2024)
    assert a == b


def test_injected_sampler_controls_outcome() -> None:
    params = GameParameters(5, 0.5, 10)

    won = simulate_trajectory(params, sampler=_always(1))
    assert won.capital == (5, 6, 7, 8, 9, 10)
    assert won.outcome is GameState.WON

    lost = simulate_trajectory(params, sampler=_always(0))
    assert lost.capital == (5, 4, 3, 2, 1, 0)
    assert lost.outcome is GameState.RUINED


def test_sampler_receives_round_win_probability() -> None:
    seen: list[float] = []

    def sampler(p: float) -> int:
        seen.append(p)
        return 1

    simulate_trajectory(GameParameters(2, 0.3, 4), sampler=sampler)
    assert seen == [0.3, 0.3]


def test_round_limit_allows_exact_number_of_bets() -> None:
    params = GameParameters(5, 0.5, 10)
    trajectory = simulate_trajectory(params, sampler=_always(1), max_rounds=5)
    assert trajectory.n_bets == 5

    with pytest.raises(RoundLimitExceededError):
        simulate_trajectory(params, sampler=_always(1), max_rounds=4)


def test_round_limit_stops_a_game_that_never_ends() -> None:
    flips = itertools.cycle([1, 0])
    with pytest.raises(RoundLimitExceededError) as excinfo:
        simulate_trajectory(GameParameters(5, 0.5, 10), sampler=lambda _p: next(flips), max_rounds=100)
    assert excinfo.value.max_rounds == 100
    assert excinfo.value.capital == 5


def test_non_positive_round_limit_raises() -> None:
    with pytest.raises(InvalidParameterError):
        simulate_trajectory(GameParameters(5, 0.5, 10), seed=1, max_rounds=0)


def test_default_round_cap_is_generous() -> None:
    assert default_round_cap(GameParameters(1, 0.5, 2)) == MIN_ROUND_CAP
    assert default_round_cap(GameParameters(50, 0.5, 100)) >= 50 * 100**2


def test_trajectory_frame_has_one_based_rounds() -> None:
    trajectory = simulate_trajectory(GameParameters(2, 0.5, 4), sampler=_always(0))
    frame = trajectory.to_frame()
    assert list(frame.columns) == ["round", "capital"]
    assert frame["round"].tolist() == [1, 2, 3]
    assert frame["capital"].tolist() == [2, 1, 0]


def test_bernoulli_sampler_returns_binary_draws() -> None:
    sample = bernoulli_sampler(np.random.default_rng(0))
    draws = [sample(0.3) for _ in range(200)]
    assert set(draws) <= {0, 1}
    assert 0 < sum(draws) < 200
