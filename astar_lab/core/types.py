# astar_lab/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple, Union

Coord = Tuple[int, int]  # (row, col)


class ConfigurationError(ValueError):
    """Grid or map that cannot be searched (bad size, missing markers, ...)."""


class Role(str, Enum):
    EMPTY = "empty"
    OBSTACLE = "obstacle"
    START = "start"
    GOAL = "goal"


class Overlay(str, Enum):
    NONE = "none"
    FRONTIER = "frontier"
    VISITED = "visited"
    PATH = "path"


@dataclass(frozen=True)
class GridSnapshot:
    """What the search engine reads: layout only, no display state."""
    rows: int
    cols: int
    start: Coord
    goal: Coord
    obstacles: FrozenSet[Coord] = frozenset()

    def in_bounds(self, c: Coord) -> bool:
        r, k = c
        return 0 <= r < self.rows and 0 <= k < self.cols

    def is_block(self, c: Coord) -> bool:
        return c in self.obstacles


# -------------------- events --------------------

@dataclass(frozen=True)
class Visited:
    coord: Coord


@dataclass(frozen=True)
class Frontier:
    coord: Coord


@dataclass(frozen=True)
class PathStep:
    coord: Coord
    index: int  # 0 is the start cell


SearchEvent = Union[Visited, Frontier, PathStep]


# -------------------- terminal results --------------------

@dataclass(frozen=True)
class Found:
    path: Tuple[Coord, ...]  # start -> goal, inclusive
    total_steps: int


@dataclass(frozen=True)
class Unreachable:
    pass


@dataclass(frozen=True)
class Cancelled:
    pass


SearchResult = Union[Found, Unreachable, Cancelled]
