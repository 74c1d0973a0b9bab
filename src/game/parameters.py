from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import Enum

from src.game.errors import InvalidParameterError


class GameState(str, Enum):
    PLAYING = "playing"
    RUINED = "ruined"
    WON = "won"

    @classmethod
    def from_capital(cls, capital: int, target_amount: int) -> GameState:
        """Classify a capital level; 0 and the target are absorbing."""
        if capital <= 0:
            return cls.RUINED
        if capital >= target_amount:
            return cls.WON
        return cls.PLAYING

    @property
    def is_terminal(self) -> bool:
        return self is not GameState.PLAYING

    @property
    def label(self) -> str:
        """Short outcome label used in reports and chart titles."""
        if self is GameState.RUINED:
            return "lost"
        return self.value


def _is_integer(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class GameParameters:
    """Inputs of one gambler's ruin game.

    Attributes:
        initial_stake: Capital the gambler starts with, in betting units.
        win_probability: Probability of winning a single one-unit round.
        target_amount: Capital at which the gambler stops as the winner.
    """

    initial_stake: int
    win_probability: float
    target_amount: int

    def __post_init__(self) -> None:
        if not _is_integer(self.initial_stake) or self.initial_stake <= 0:
            raise InvalidParameterError("initial_stake must be a positive integer.")
        if not _is_integer(self.target_amount):
            raise InvalidParameterError("target_amount must be an integer.")
        if self.target_amount <= self.initial_stake:
            raise InvalidParameterError("target_amount must be greater than initial_stake.")
        if isinstance(self.win_probability, bool) or not isinstance(self.win_probability, numbers.Real):
            raise InvalidParameterError("win_probability must be a real number.")
        if not 0.0 < self.win_probability < 1.0:
            raise InvalidParameterError("win_probability must be in (0, 1).")
        object.__setattr__(self, "initial_stake", int(self.initial_stake))
        object.__setattr__(self, "target_amount", int(self.target_amount))
        object.__setattr__(self, "win_probability", float(self.win_probability))

    @property
    def loss_probability(self) -> float:
        return 1.0 - self.win_probability

    @property
    def is_fair(self) -> bool:
        return self.win_probability == 0.5
