# astar_lab/core/astar.py
#!/usr/bin/env python3
"""
A* on a 4-connected occupancy grid, one event per step() for animation.

API used by the viewer and tests:
- search(grid) -> AStarSearch
- AStarSearch.step() -> next SearchEvent, or the terminal SearchResult
- AStarSearch.cancel()
- iter(AStarSearch) -> events, then the terminal result as the last item

Heuristic: Manhattan distance, unit step cost.

Tie-breaking in the PQ: (f, h, row, col) ascending. Lower f, then lower h
(closer to the goal), then top-most row, then left-most column. The order is
total, so the same grid always yields the same events and the same path.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, List, Optional, Set, Tuple, Union
import heapq

from astar_lab.core.grid import Grid, NEIGHBOR_DIRS
from astar_lab.core.types import (
    Cancelled, ConfigurationError, Coord, Found, Frontier, GridSnapshot,
    PathStep, SearchEvent, SearchResult, Unreachable, Visited,
)


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _validate(grid: GridSnapshot) -> None:
    if grid.rows <= 0 or grid.cols <= 0:
        raise ConfigurationError(f"cannot search a {grid.rows}x{grid.cols} grid")
    for label, c in (("start", grid.start), ("goal", grid.goal)):
        if c is None:
            raise ConfigurationError(f"grid has no {label} cell")
        if not grid.in_bounds(c):
            raise ConfigurationError(f"{label} {c} out of bounds")
        if grid.is_block(c):
            raise ConfigurationError(f"{label} {c} is an obstacle")


@dataclass
class AStarSearch:
    grid: GridSnapshot
    name: str = "A*"

    # Internal state
    open_pq: List[Tuple[int, int, int, int]] = field(default_factory=list)  # (f, h, row, col)
    open_set: Set[Coord] = field(default_factory=set)
    closed_set: Set[Coord] = field(default_factory=set)
    g: Dict[Coord, int] = field(default_factory=dict)
    h: Dict[Coord, int] = field(default_factory=dict)
    parent: Dict[Coord, Coord] = field(default_factory=dict)
    pending: Deque[SearchEvent] = field(default_factory=deque)
    popped_count: int = 0

    _outcome: Optional[SearchResult] = field(default=None, repr=False)  # found, path steps still queued
    _result: Optional[SearchResult] = field(default=None, repr=False)
    _final_metrics: Optional[dict] = field(default=None, repr=False)
    _cancel_requested: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        _validate(self.grid)
        self.reset()

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Drop all scratch state and seed with the start node."""
        self._release()
        self.popped_count = 0
        self._outcome = None
        self._result = None
        self._final_metrics = None
        self._cancel_requested = False

        s = self.grid.start
        if s == self.grid.goal:
            self._outcome = Found((s,), 0)
            return
        self.g[s] = 0
        self.h[s] = self._h(s)
        heapq.heappush(self.open_pq, (self.h[s], self.h[s], s[0], s[1]))
        self.open_set.add(s)

    def cancel(self) -> None:
        """Ask the search to stop; the next step() returns Cancelled."""
        if self._result is None:
            self._cancel_requested = True

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[SearchResult]:
        return self._result

    # -------------------- helpers --------------------

    def _h(self, c: Coord) -> int:
        return manhattan(c, self.grid.goal)

    def _neighbors4(self, c: Coord) -> List[Coord]:
        r, k = c
        out: List[Coord] = []
        for dr, dk in NEIGHBOR_DIRS:
            n = (r + dr, k + dk)
            if self.grid.in_bounds(n) and not self.grid.is_block(n):
                out.append(n)
        return out

    def _reconstruct_path(self, end: Coord) -> List[Coord]:
        path: List[Coord] = [end]
        cur = end
        while cur != self.grid.start:
            cur = self.parent[cur]
            path.append(cur)
        path.reverse()
        return path

    def _release(self) -> None:
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.g.clear()
        self.h.clear()
        self.parent.clear()
        self.pending.clear()

    def _finish(self, result: SearchResult) -> SearchResult:
        self._result = result
        self._final_metrics = self.metrics()
        self._release()
        return result

    # -------------------- main stepping logic --------------------

    def step(self) -> Union[SearchEvent, SearchResult]:
        """
        Hand out ONE event. Expands cells lazily until an event is available:
          - pop the lowest (f, h, row, col) node, skipping stale heap entries;
          - if goal, queue the path (start first) and finish after it drains;
          - else close it and relax its neighbours.
        """
        if self._result is not None:
            return self._result
        if self._cancel_requested:
            return self._finish(Cancelled())

        while not self.pending:
            if self._outcome is not None:
                return self._finish(self._outcome)
            if not self.open_pq:
                return self._finish(Unreachable())
            self._expand_next()

        return self.pending.popleft()

    def _expand_next(self) -> None:
        f_u, _, r, k = heapq.heappop(self.open_pq)
        u = (r, k)

        # Ignore stale pops
        if u in self.closed_set or f_u != self.g[u] + self.h[u]:
            return

        self.popped_count += 1
        self.open_set.discard(u)

        if u == self.grid.goal:
            path = self._reconstruct_path(u)
            self.pending.extend(PathStep(c, i) for i, c in enumerate(path))
            self._outcome = Found(tuple(path), self.g[u])
            return

        self.closed_set.add(u)
        if u != self.grid.start:
            self.pending.append(Visited(u))

        for v in self._neighbors4(u):
            if v in self.closed_set:
                continue
            alt = self.g[u] + 1
            is_new = v not in self.open_set
            if is_new or alt < self.g[v]:
                self.g[v] = alt
                self.h[v] = self._h(v)
                self.parent[v] = u
                heapq.heappush(self.open_pq, (alt + self.h[v], self.h[v], v[0], v[1]))
                if is_new:
                    self.open_set.add(v)
                    if v != self.grid.goal:
                        self.pending.append(Frontier(v))

    def __iter__(self) -> Iterator[Union[SearchEvent, SearchResult]]:
        while True:
            item = self.step()
            yield item
            if self.done:
                return

    # -------------------- metrics --------------------

    def metrics(self) -> dict:
        if self._final_metrics is not None:
            return dict(self._final_metrics)
        res = self._result or self._outcome
        found = isinstance(res, Found)
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": len(res.path) if found else 0,
            "total_steps": res.total_steps if found else None,
        }


def search(grid: Union[Grid, GridSnapshot]) -> AStarSearch:
    """Start a search over the grid's current layout; later edits don't leak in."""
    snap = grid.snapshot() if isinstance(grid, Grid) else grid
    return AStarSearch(snap)


def solve(grid: Union[Grid, GridSnapshot]) -> SearchResult:
    """Run a search to completion and return only the terminal result."""
    run = search(grid)
    while not run.done:
        run.step()
    return run.result
