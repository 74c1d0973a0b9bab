from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import numpy as np
from matplotlib import colormaps
from matplotlib import style as mpl_style
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.collections import LineCollection, PathCollection
from matplotlib.colors import Normalize
from matplotlib.figure import Figure

from src.game.errors import InvalidParameterError
from src.game.parameters import GameParameters, GameState
from src.simulation.random_walk import Trajectory

OUTCOME_MESSAGES = {
    GameState.WON: "Congratulations, you won!",
    GameState.RUINED: "Sorry, you lost!",
}


@dataclass(frozen=True)
class ChartStyle:
    """Rendering options applied to a single chart.

    The style sheet is entered as a context for the duration of one call, so
    nothing leaks into matplotlib's global rcParams.
    """

    theme: str = "ggplot"
    cmap: str = "viridis"
    point_color: str = "#8E44AD"
    point_size: float = 4.0
    line_width: float = 1.5
    figsize: tuple[float, float] = (10.0, 6.0)
    show_legend: bool = False
    xlabel: str = "Rounds of the game"
    ylabel: str = "Capital in each round"

    @classmethod
    def from_config(cls, section: dict[str, Any]) -> ChartStyle:
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise InvalidParameterError(f"unknown chart options: {sorted(unknown)}")
        values = dict(section)
        if "figsize" in values:
            values["figsize"] = tuple(float(v) for v in values["figsize"])
        return cls(**values)


def chart_title(params: GameParameters, overall_win_probability: float, trajectory: Trajectory) -> str:
    """Multi-line chart title: odds, game setup, outcome and length."""
    outcome = trajectory.outcome
    if not outcome.is_terminal:
        raise InvalidParameterError("trajectory must end at 0 or target_amount.")
    return "\n".join(
        [
            f"Overall probability of winning this entire game is {overall_win_probability}",
            f"Initial stake = {params.initial_stake}; Winning amount = {params.target_amount}",
            f"Win probability in each round is p = {params.win_probability}",
            OUTCOME_MESSAGES[outcome],
            f"Number of rounds played = {trajectory.rounds_played}",
        ]
    )


def _segments(rounds: np.ndarray, capital: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    points = np.column_stack([rounds, capital]).astype(float)
    segments = np.stack([points[:-1], points[1:]], axis=1)
    levels = (capital[:-1] + capital[1:]) / 2.0
    return segments, levels


def _draw(
    trajectory: Trajectory,
    params: GameParameters,
    overall_win_probability: float,
    style: ChartStyle,
) -> tuple[Figure, LineCollection, PathCollection, np.ndarray, np.ndarray, np.ndarray]:
    frame = trajectory.to_frame()
    rounds = frame["round"].to_numpy()
    capital = frame["capital"].to_numpy()
    segments, levels = _segments(rounds, capital)

    with mpl_style.context(style.theme):
        fig = Figure(figsize=style.figsize)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot()

        lines = LineCollection(
            segments,
            cmap=colormaps[style.cmap],
            norm=Normalize(vmin=0, vmax=params.target_amount),
            linewidths=style.line_width,
        )
        lines.set_array(levels)
        ax.add_collection(lines)
        points = ax.scatter(
            rounds,
            capital,
            s=style.point_size**2,
            color=style.point_color,
            zorder=3,
            label="capital",
        )

        ax.set_xlim(0.5, len(rounds) + 0.5)
        ax.set_ylim(-0.5, params.target_amount + 0.5)
        ax.set_xlabel(style.xlabel)
        ax.set_ylabel(style.ylabel)
        ax.set_title(chart_title(params, overall_win_probability, trajectory), loc="left", fontsize=10)
        if style.show_legend:
            fig.colorbar(lines, ax=ax, label="capital")
            ax.legend(loc="upper right")
        fig.tight_layout()

    offsets = np.column_stack([rounds, capital]).astype(float)
    return fig, lines, points, segments, levels, offsets


def plot_trajectory(
    trajectory: Trajectory,
    params: GameParameters,
    overall_win_probability: float,
    style: ChartStyle | None = None,
) -> Figure:
    """Render a capital trajectory as a colour-mapped line with one point per round.

    Args:
        trajectory: Absorbed capital path to draw.
        params: Parameters the path was generated with.
        overall_win_probability: Analytic probability of winning, shown in the title.
        style: Rendering options; defaults to :class:`ChartStyle`.

    Returns:
        A matplotlib Figure backed by the Agg canvas.
    """
    fig, *_ = _draw(trajectory, params, overall_win_probability, style or ChartStyle())
    return fig


def animate_trajectory(
    trajectory: Trajectory,
    params: GameParameters,
    overall_win_probability: float,
    style: ChartStyle | None = None,
    interval: int = 100,
) -> FuncAnimation:
    """Reveal the trajectory one round per frame on the same chart layout."""
    fig, lines, points, segments, levels, offsets = _draw(
        trajectory, params, overall_win_probability, style or ChartStyle()
    )

    def update(frame: int) -> list[Any]:
        lines.set_segments(segments[: frame - 1])
        lines.set_array(levels[: frame - 1])
        points.set_offsets(offsets[:frame])
        return [lines, points]

    return FuncAnimation(fig, update, frames=range(1, len(offsets) + 1), interval=interval, blit=False)


def save_animation(animation: FuncAnimation, path: str | Path, fps: int = 10) -> Path:
    """Write an animation to a GIF file and return its path."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    animation.save(str(out_path), writer=PillowWriter(fps=fps))
    return out_path
