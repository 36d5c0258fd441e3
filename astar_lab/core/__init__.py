from astar_lab.core.types import (
    Cancelled, ConfigurationError, Coord, Found, Frontier, GridSnapshot,
    Overlay, PathStep, Role, SearchEvent, SearchResult, Unreachable, Visited,
)
from astar_lab.core.grid import Grid, create_grid
from astar_lab.core.astar import AStarSearch, manhattan, search, solve
from astar_lab.core.maps import DEFAULT_MAP_DIR, list_maps, load_map
