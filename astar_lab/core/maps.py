# astar_lab/core/maps.py
#!/usr/bin/env python3
"""
Preset maps stored as JSON:

    {"rows": 5, "cols": 5, "start": [0, 0], "goal": [4, 4],
     "cells": ["..#..", "..#..", "..#..", "..#..", "....."]}

`cells` is optional. Each row is either a string ('#' or '1' = wall) or a list
of ints (1 = wall).
"""

import json
from pathlib import Path
from typing import Dict, List

from astar_lab.core.grid import Grid
from astar_lab.core.types import ConfigurationError, Role

DEFAULT_MAP_DIR = Path(__file__).resolve().parents[1] / "maps"

_WALL_MARKS = ("#", "1", 1)


def _parse_row(raw, cols: int, r: int) -> List[Role]:
    if len(raw) != cols:
        raise ConfigurationError(f"row {r} has {len(raw)} cells, expected {cols}")
    return [Role.OBSTACLE if v in _WALL_MARKS else Role.EMPTY for v in raw]


def grid_from_dict(data: dict) -> Grid:
    try:
        rows = int(data["rows"])
        cols = int(data["cols"])
        start = tuple(int(v) for v in data["start"])
        goal = tuple(int(v) for v in data["goal"])
    except (KeyError, TypeError, ValueError) as ex:
        raise ConfigurationError(f"bad map header: {ex}") from ex
    if len(start) != 2 or len(goal) != 2:
        raise ConfigurationError("start and goal must be [row, col] pairs")

    cells = data.get("cells")
    roles: List[List[Role]] = []
    if cells is not None:
        if len(cells) != rows:
            raise ConfigurationError(f"cells has {len(cells)} rows, expected {rows}")
        roles = [_parse_row(raw, cols, r) for r, raw in enumerate(cells)]
    return Grid(rows, cols, start, goal, roles)


def load_map(path: Path) -> Grid:
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise ConfigurationError(f"cannot read map {path}: {ex}") from ex
    return grid_from_dict(data)


def list_maps(directory: Path = DEFAULT_MAP_DIR) -> Dict[str, Path]:
    """Map name (file stem) -> path, sorted by name."""
    return {p.stem: p for p in sorted(Path(directory).glob("*.json"))}
