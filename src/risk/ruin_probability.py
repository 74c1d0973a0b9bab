from __future__ import annotations

import math

from src.game.errors import NumericOverflowError
from src.game.parameters import GameParameters


def win_probability(initial_stake: int, win_probability: float, target_amount: int) -> float:
    """Closed-form probability of reaching the target before ruin.

    Args:
        initial_stake: Starting capital in betting units.
        win_probability: Probability of winning one round, in (0, 1).
        target_amount: Capital at which the gambler stops as the winner.

    Returns:
        Probability in [0, 1] of eventually winning the game.

    Raises:
        InvalidParameterError: If inputs are outside supported ranges.
        NumericOverflowError: If the biased formula overflows a float.
    """
    params = GameParameters(initial_stake, win_probability, target_amount)
    return _win_probability(params)


def ruin_probability(initial_stake: int, win_probability: float, target_amount: int) -> float:
    """Probability of going broke before reaching the target."""
    params = GameParameters(initial_stake, win_probability, target_amount)
    return 1.0 - _win_probability(params)


def expected_duration(initial_stake: int, win_probability: float, target_amount: int) -> float:
    """Expected number of one-unit bets until the game is absorbed.

    Args:
        initial_stake: Starting capital in betting units.
        win_probability: Probability of winning one round, in (0, 1).
        target_amount: Capital at which the gambler stops as the winner.

    Returns:
        Expected number of rounds after the opening stake.
    """
    params = GameParameters(initial_stake, win_probability, target_amount)
    return _expected_duration(params)


def _win_probability(params: GameParameters) -> float:
    s = params.initial_stake
    w = params.target_amount
    if params.is_fair:
        return s / w

    # 1 - r**n == -expm1(n * log r); keeps precision when p is close to 0.5.
    log_ratio = math.log(params.loss_probability / params.win_probability)
    if log_ratio > 0.0:
        # Divide through by r**w so no power exceeds one.
        scale = math.exp((s - w) * log_ratio)
        numerator = math.expm1(-s * log_ratio)
        denominator = math.expm1(-w * log_ratio)
    else:
        scale = 1.0
        numerator = math.expm1(s * log_ratio)
        denominator = math.expm1(w * log_ratio)

    value = scale * numerator / denominator if denominator != 0.0 else math.nan
    if not math.isfinite(value):
        raise NumericOverflowError(
            f"win probability is not representable for p={params.win_probability}, target_amount={w}."
        )
    return min(1.0, max(0.0, value))


def _expected_duration(params: GameParameters) -> float:
    s = params.initial_stake
    w = params.target_amount
    if params.is_fair:
        return float(s * (w - s))

    drift = params.loss_probability - params.win_probability
    return s / drift - (w / drift) * _win_probability(params)
