import pytest

from astar_lab.core.grid import DEFAULT_GOAL, DEFAULT_START, Grid, create_grid
from astar_lab.core.types import (
    ConfigurationError, Frontier, Overlay, PathStep, Role, Visited,
)


def test_default_grid():
    grid = create_grid()
    assert (grid.rows, grid.cols) == (15, 20)
    assert grid.start == DEFAULT_START
    assert grid.goal == DEFAULT_GOAL
    assert grid.role((7, 3)) is Role.START
    assert grid.role((7, 16)) is Role.GOAL
    assert grid.obstacles() == frozenset()


@pytest.mark.parametrize("rows, cols, start, goal", [
    (0, 5, (0, 0), (0, 1)),
    (5, 0, (0, 0), (0, 1)),
    (-1, 5, (0, 0), (0, 1)),
    (3, 3, (3, 0), (0, 1)),
    (3, 3, (0, 0), (0, -1)),
    (3, 3, (1, 1), (1, 1)),
])
def test_bad_construction_fails_fast(rows, cols, start, goal):
    with pytest.raises(ConfigurationError):
        create_grid(rows, cols, start, goal)


def test_toggle_obstacle_flips_empty_cells_only():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    assert grid.toggle_obstacle((1, 1))
    assert grid.is_obstacle((1, 1))
    assert grid.toggle_obstacle((1, 1))
    assert grid.role((1, 1)) is Role.EMPTY

    assert not grid.toggle_obstacle((0, 0))
    assert not grid.toggle_obstacle((2, 2))
    assert grid.role((0, 0)) is Role.START
    assert grid.role((2, 2)) is Role.GOAL


def test_moving_start_demotes_old_cell():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    assert grid.set_cell_role((1, 0), Role.START)
    assert grid.start == (1, 0)
    assert grid.role((0, 0)) is Role.EMPTY
    assert grid.role((1, 0)) is Role.START


def test_moving_goal_onto_wall_replaces_it():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    grid.toggle_obstacle((2, 1))
    assert grid.set_cell_role((2, 1), Role.GOAL)
    assert grid.goal == (2, 1)
    assert grid.obstacles() == frozenset()
    assert grid.role((2, 2)) is Role.EMPTY


def test_markers_cannot_be_overwritten():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    assert not grid.set_cell_role((2, 2), Role.START)
    assert not grid.set_cell_role((0, 0), Role.GOAL)
    assert not grid.set_cell_role((0, 0), Role.OBSTACLE)
    assert not grid.set_cell_role((2, 2), Role.EMPTY)
    assert (grid.start, grid.goal) == ((0, 0), (2, 2))
    assert sum(row.count(Role.START) for row in grid.roles) == 1
    assert sum(row.count(Role.GOAL) for row in grid.roles) == 1


def test_set_cell_role_accepts_plain_strings():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    assert grid.set_cell_role((1, 1), "obstacle")
    assert grid.is_obstacle((1, 1))


def test_out_of_bounds_edit_rejected():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    with pytest.raises(ConfigurationError):
        grid.toggle_obstacle((3, 0))
    with pytest.raises(ConfigurationError):
        grid.set_cell_role((0, -1), Role.START)


def test_neighbors_order_right_left_down_up():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    assert grid.neighbors((1, 1)) == [(1, 2), (1, 0), (2, 1), (0, 1)]
    assert grid.neighbors((0, 0)) == [(0, 1), (1, 0)]
    assert grid.neighbors((2, 2)) == [(2, 1), (1, 2)]


def test_neighbors_include_walls():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    grid.toggle_obstacle((0, 1))
    assert (0, 1) in grid.neighbors((0, 0))


def test_apply_and_clear_search_state():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    grid.toggle_obstacle((1, 1))
    grid.apply(Frontier((0, 1)))
    grid.apply(Visited((1, 0)))
    grid.apply(PathStep((2, 1), 3))
    grid.apply(PathStep((0, 0), 0))
    grid.apply(PathStep((2, 2), 4))

    assert grid.overlay((0, 1)) is Overlay.FRONTIER
    assert grid.overlay((1, 0)) is Overlay.VISITED
    assert grid.overlay((2, 1)) is Overlay.PATH
    assert grid.overlay((0, 0)) is Overlay.NONE
    assert grid.overlay((2, 2)) is Overlay.NONE

    grid.clear_search_state()
    assert all(o is Overlay.NONE for row in grid.overlays for o in row)
    assert grid.is_obstacle((1, 1))
    assert grid.role((0, 0)) is Role.START


def test_clear_walls_keeps_markers():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    for c in [(0, 1), (1, 1), (2, 1)]:
        grid.toggle_obstacle(c)
    grid.clear_walls()
    assert grid.obstacles() == frozenset()
    assert (grid.start, grid.goal) == ((0, 0), (2, 2))


def test_snapshot_is_frozen_copy():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    grid.toggle_obstacle((1, 1))
    snap = grid.snapshot()
    grid.toggle_obstacle((1, 1))
    grid.set_cell_role((0, 1), Role.START)
    assert snap.obstacles == frozenset({(1, 1)})
    assert snap.start == (0, 0)
    assert (snap.rows, snap.cols, snap.goal) == (3, 3, (2, 2))


def test_roles_matrix_with_markers_rejected():
    roles = [[Role.START] * 3 for _ in range(3)]
    with pytest.raises(ConfigurationError):
        Grid(3, 3, (0, 0), (2, 2), roles)
    with pytest.raises(ConfigurationError):
        Grid(3, 3, (0, 0), (2, 2), [["empty", "lava", "empty"]] * 3)


def test_roles_matrix_is_copied():
    roles = [[Role.EMPTY, Role.OBSTACLE, Role.EMPTY] for _ in range(3)]
    grid = Grid(3, 3, (0, 0), (2, 2), roles)
    grid.toggle_obstacle((1, 1))
    assert roles[1][1] is Role.OBSTACLE
    assert roles[0][0] is Role.EMPTY
    assert grid.role((0, 0)) is Role.START
    assert sum(row.count(Role.START) for row in grid.roles) == 1
    assert sum(row.count(Role.GOAL) for row in grid.roles) == 1


def test_apply_out_of_bounds_event_rejected():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    with pytest.raises(ConfigurationError):
        grid.apply(Visited((-1, 1)))
    with pytest.raises(ConfigurationError):
        grid.apply(Frontier((3, 0)))
    assert all(o is Overlay.NONE for row in grid.overlays for o in row)


def test_unknown_role_is_configuration_error():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    with pytest.raises(ConfigurationError):
        grid.set_cell_role((1, 1), "lava")
    assert grid.role((1, 1)) is Role.EMPTY
