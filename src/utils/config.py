from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from src.game.errors import InvalidParameterError

DEFAULT_CONFIG: dict[str, Any] = {
    "game": {
        "initial_stake": 5,
        "win_probability": 0.5,
        "target_amount": 10,
        "seed": None,
        "max_rounds": None,
    },
    "monte_carlo": {
        "n_games": 0,
    },
    "chart": {
        "theme": "ggplot",
        "cmap": "viridis",
        "point_color": "#8E44AD",
        "point_size": 4.0,
        "line_width": 1.5,
        "figsize": [10.0, 6.0],
        "show_legend": False,
        "xlabel": "Rounds of the game",
        "ylabel": "Capital in each round",
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any], section: str) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if key not in base:
            raise InvalidParameterError(f"unknown config key: {section}.{key}")
        merged[key] = value
    return merged


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load gameplay configuration from YAML over the built-in defaults.

    Args:
        path: YAML file path. If None, the defaults are returned.

    Returns:
        Dict with ``game``, ``monte_carlo`` and ``chart`` sections.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidParameterError: If the file has unknown sections or keys.
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise InvalidParameterError(f"config root must be a mapping: {path}")

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in raw.items():
        if section not in DEFAULT_CONFIG:
            raise InvalidParameterError(f"unknown config section: {section}")
        if not isinstance(values, dict):
            raise InvalidParameterError(f"config section {section} must be a mapping.")
        config[section] = _merge(DEFAULT_CONFIG[section], values, section)
    return config
