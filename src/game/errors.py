from __future__ import annotations


class InvalidParameterError(ValueError):
    """Raised when game or simulation inputs are outside supported ranges."""


class NumericOverflowError(ArithmeticError):
    """Raised when a closed-form probability cannot be represented as a float."""


class RoundLimitExceededError(RuntimeError):
    """Raised when a game is still running after the allowed number of rounds."""

    def __init__(self, max_rounds: int, capital: int) -> None:
        super().__init__(f"game not absorbed after {max_rounds} rounds (capital={capital}).")
        self.max_rounds = max_rounds
        self.capital = capital
