# astar_lab/core/grid.py
#!/usr/bin/env python3
"""
Grid model: cell roles (empty / obstacle / start / goal) plus a display
overlay (frontier / visited / path) that only lives between clear_search_state()
calls.

Roles are edited between searches; the search engine works on a frozen
snapshot() and never touches this object.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from astar_lab.core.types import (
    ConfigurationError, Coord, Frontier, GridSnapshot, Overlay, PathStep,
    Role, SearchEvent, Visited,
)

DEFAULT_ROWS = 15
DEFAULT_COLS = 20
DEFAULT_START: Coord = (7, 3)
DEFAULT_GOAL: Coord = (7, 16)

# right, left, down, up
NEIGHBOR_DIRS: Tuple[Coord, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))

_EVENT_OVERLAY = {
    Visited: Overlay.VISITED,
    Frontier: Overlay.FRONTIER,
    PathStep: Overlay.PATH,
}


@dataclass
class Grid:
    rows: int
    cols: int
    start: Coord
    goal: Coord
    roles: List[List[Role]] = field(default_factory=list)        # [row][col]
    overlays: List[List[Overlay]] = field(default_factory=list)  # [row][col]

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"grid must be at least 1x1, got {self.rows}x{self.cols}")
        if not self.in_bounds(self.start):
            raise ConfigurationError(f"start {self.start} out of bounds")
        if not self.in_bounds(self.goal):
            raise ConfigurationError(f"goal {self.goal} out of bounds")
        if self.start == self.goal:
            raise ConfigurationError("start and goal must be different cells")
        if not self.roles:
            self.roles = [[Role.EMPTY] * self.cols for _ in range(self.rows)]
        if len(self.roles) != self.rows or any(len(r) != self.cols for r in self.roles):
            raise ConfigurationError("roles size mismatch")
        try:
            self.roles = [[Role(v) for v in row] for row in self.roles]
        except ValueError as ex:
            raise ConfigurationError(f"bad role in roles: {ex}") from ex
        if any(v not in (Role.EMPTY, Role.OBSTACLE) for row in self.roles for v in row):
            raise ConfigurationError("roles may only hold EMPTY or OBSTACLE, start and goal are set separately")
        self.overlays = [[Overlay.NONE] * self.cols for _ in range(self.rows)]
        self._set(self.start, Role.START)
        self._set(self.goal, Role.GOAL)

    # -------------------- read access --------------------

    def in_bounds(self, c: Coord) -> bool:
        r, k = c
        return 0 <= r < self.rows and 0 <= k < self.cols

    def role(self, c: Coord) -> Role:
        self._check(c)
        return self.roles[c[0]][c[1]]

    def overlay(self, c: Coord) -> Overlay:
        self._check(c)
        return self.overlays[c[0]][c[1]]

    def is_obstacle(self, c: Coord) -> bool:
        return self.role(c) is Role.OBSTACLE

    def obstacles(self) -> FrozenSet[Coord]:
        return frozenset(
            (r, k)
            for r in range(self.rows)
            for k in range(self.cols)
            if self.roles[r][k] is Role.OBSTACLE
        )

    def neighbors(self, c: Coord) -> List[Coord]:
        """In-bounds orthogonal neighbours, fixed order: right, left, down, up."""
        r, k = c
        out: List[Coord] = []
        for dr, dk in NEIGHBOR_DIRS:
            n = (r + dr, k + dk)
            if self.in_bounds(n):
                out.append(n)
        return out

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(self.rows, self.cols, self.start, self.goal, self.obstacles())

    # -------------------- editing --------------------

    def set_cell_role(self, c: Coord, role: Role) -> bool:
        """
        Apply `role` to cell c. Returns True if the grid changed.

        START/GOAL move the existing marker (the old cell becomes EMPTY).
        A start or goal cell is never overwritten: wall edits on it and moving
        the other marker onto it are ignored.
        """
        current = self.role(c)
        try:
            role = Role(role)
        except ValueError as ex:
            raise ConfigurationError(f"unknown role {role!r}") from ex
        if current is role:
            return False
        if current in (Role.START, Role.GOAL):
            return False

        if role is Role.START:
            self._set(self.start, Role.EMPTY)
            self.start = c
        elif role is Role.GOAL:
            self._set(self.goal, Role.EMPTY)
            self.goal = c
        self._set(c, role)
        return True

    def toggle_obstacle(self, c: Coord) -> bool:
        current = self.role(c)
        if current is Role.EMPTY:
            return self.set_cell_role(c, Role.OBSTACLE)
        if current is Role.OBSTACLE:
            return self.set_cell_role(c, Role.EMPTY)
        return False

    def clear_walls(self) -> None:
        for row in self.roles:
            for k, role in enumerate(row):
                if role is Role.OBSTACLE:
                    row[k] = Role.EMPTY

    # -------------------- search overlay --------------------

    def apply(self, event: SearchEvent) -> None:
        """Paint a search event onto the overlay layer (start/goal stay bare)."""
        self._check(event.coord)
        r, k = event.coord
        if self.roles[r][k] in (Role.START, Role.GOAL):
            return
        self.overlays[r][k] = _EVENT_OVERLAY[type(event)]

    def clear_search_state(self) -> None:
        for row in self.overlays:
            for k in range(self.cols):
                row[k] = Overlay.NONE

    # -------------------- helpers --------------------

    def _check(self, c: Coord) -> None:
        if not self.in_bounds(c):
            raise ConfigurationError(f"cell {c} out of bounds for {self.rows}x{self.cols} grid")

    def _set(self, c: Coord, role: Role) -> None:
        r, k = c
        self.roles[r][k] = role
        self.overlays[r][k] = Overlay.NONE


def create_grid(
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    default_start: Coord = DEFAULT_START,
    default_goal: Coord = DEFAULT_GOAL,
) -> Grid:
    return Grid(rows, cols, tuple(default_start), tuple(default_goal))
