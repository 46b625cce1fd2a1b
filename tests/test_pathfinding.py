"""Tests for the shortest-path solver and path reconstruction."""

import math

import pytest

from ventmaze.api.exceptions import PathReconstructionError
from ventmaze.api.models import Cell, Direction
from ventmaze.api.pathfinding import (
    PathStopReason,
    compute_distances,
    find_reachable,
    find_shortest_path,
    get_cost,
    is_movement_blocked,
    path_cost,
    reconstruct_path,
)
from ventmaze.maze.grid import GridMap


def make_walled_maze():
    """
    5x5 maze with a climbable gap, a solid divider and a vent pair.

        y=4  . . | . .
        y=3  . . | . .
        y=2  . . ~ . .     ~ = climbable wall (cost 3)
        y=1  . . | . .
        y=0  V . | . V     V = linked vents (cost 6)
    """
    grid = GridMap(5, 5)
    for y in (0, 1, 3, 4):
        grid.add_wall((1, y), Direction.E)
    grid.add_wall((1, 2), Direction.E, cost=3.0)
    grid.add_vent_group([(0, 0), (4, 0)], cost=6.0)
    return grid


def assert_valid_path(start, result, map_query):
    """Every step is an allowed move and the costs add up."""
    current = Cell(*start) if isinstance(start, tuple) else start
    total = 0.0
    for step in result.path:
        cost = get_cost(current, step, map_query)
        assert cost < math.inf, f"step {current} -> {step} is blocked"
        total += cost
        current = step
    assert total == pytest.approx(result.cost)


class TestOpenGrid:
    """Search on grids with no walls and no vents."""

    def test_three_by_three_corner_to_corner(self):
        """Ties break on distance, then x, then y."""
        result = find_shortest_path((0, 0), (2, 2), GridMap(3, 3))

        assert result.reason == PathStopReason.SUCCESS
        assert result.path == [Cell(0, 1), Cell(0, 2), Cell(1, 2), Cell(2, 2)]
        assert result.cost == 4.0

    @pytest.mark.parametrize(
        "start,goal",
        [((0, 0), (4, 3)), ((4, 3), (0, 0)), ((2, 1), (2, 3)), ((3, 0), (0, 2)), ((1, 1), (2, 1))],
    )
    def test_length_equals_manhattan_distance(self, start, goal):
        result = find_shortest_path(start, goal, GridMap(5, 4))

        assert result.success
        assert len(result) == Cell(*start).manhattan_distance(Cell(*goal))
        assert result.cost == len(result)
        assert result.path[-1] == Cell(*goal)
        assert_valid_path(start, result, GridMap(5, 4))

    def test_start_is_not_in_path(self):
        result = find_shortest_path((0, 0), (0, 1), GridMap(2, 2))
        assert result.path == [Cell(0, 1)]

    def test_start_equals_goal(self):
        """Standing on the goal is found with an empty path."""
        result = find_shortest_path((1, 1), (1, 1), GridMap(3, 3))

        assert result.reason == PathStopReason.ALREADY_AT_TARGET
        assert result.success
        assert bool(result)
        assert result.path == []
        assert result.cost == 0.0

    def test_repeated_calls_return_same_path(self):
        grid = GridMap(6, 6)
        first = find_shortest_path((0, 0), (5, 5), grid)
        for _ in range(5):
            assert find_shortest_path((0, 0), (5, 5), grid).path == first.path

    def test_tuple_and_cell_inputs_agree(self):
        grid = GridMap(4, 4)
        assert find_shortest_path((0, 3), (3, 0), grid).path == \
            find_shortest_path(Cell(0, 3), Cell(3, 0), grid).path


class TestWalls:
    """Search with solid and climbable walls."""

    def test_walled_off_goal_is_not_found(self):
        """A goal enclosed by walls and the map edge is unreachable."""
        grid = GridMap(3, 3)
        grid.add_wall((2, 2), Direction.S)
        grid.add_wall((2, 2), Direction.W)

        result = find_shortest_path((0, 0), (2, 2), grid)

        assert result.reason == PathStopReason.NO_PATH_EXISTS
        assert not result
        assert result.path == []

    def test_detour_around_expensive_climb(self):
        """Three open moves beat one climb costing five."""
        grid = GridMap(2, 2)
        grid.add_wall((0, 0), Direction.E, cost=5.0)

        result = find_shortest_path((0, 0), (1, 0), grid)

        assert result.path == [Cell(0, 1), Cell(1, 1), Cell(1, 0)]
        assert result.cost == 3.0

    def test_cheap_climb_is_taken(self):
        grid = GridMap(2, 2)
        grid.add_wall((0, 0), Direction.E, cost=2.0)

        result = find_shortest_path((0, 0), (1, 0), grid)

        assert result.path == [Cell(1, 0)]
        assert result.cost == 2.0

    def test_climb_through_divider(self):
        grid = make_walled_maze()
        result = find_shortest_path((1, 2), (2, 2), grid)

        assert result.path == [Cell(2, 2)]
        assert result.cost == 3.0

    def test_every_step_is_allowed(self):
        grid = make_walled_maze()
        result = find_shortest_path((0, 4), (4, 4), grid)

        assert result.success
        assert_valid_path((0, 4), result, grid)
        # 3 moves to the gap, climb, 4 moves to the goal
        assert result.cost == 10.0


class TestVents:
    """Search through vent shortcuts."""

    def test_vent_shortcut_reduces_cost(self):
        corridor = GridMap(5, 1)
        without_vent = find_shortest_path((0, 0), (4, 0), corridor)
        corridor.add_vent_group([(0, 0), (4, 0)], cost=1.5)
        with_vent = find_shortest_path((0, 0), (4, 0), corridor)

        assert without_vent.cost == 4.0
        assert with_vent.cost == 1.5
        assert with_vent.path == [Cell(4, 0)]

    def test_expensive_vent_is_ignored(self):
        corridor = GridMap(5, 1)
        corridor.add_vent_group([(0, 0), (4, 0)], cost=10.0)

        result = find_shortest_path((0, 0), (4, 0), corridor)

        assert result.cost == 4.0
        assert len(result) == 4

    def test_vent_crosses_solid_wall(self):
        """A vent is the only way through a sealed divider."""
        grid = GridMap(4, 1)
        grid.add_wall((1, 0), Direction.E)
        assert not find_shortest_path((0, 0), (3, 0), grid)

        grid.add_vent_group([(1, 0), (2, 0)], cost=2.0)
        result = find_shortest_path((0, 0), (3, 0), grid)

        assert result.path == [Cell(1, 0), Cell(2, 0), Cell(3, 0)]
        assert result.cost == 4.0
        assert_valid_path((0, 0), result, grid)

    def test_walled_maze_uses_vent_when_cheaper(self):
        grid = make_walled_maze()
        result = find_shortest_path((0, 0), (4, 0), grid)

        assert result.path == [Cell(4, 0)]
        assert result.cost == 6.0


class TestInvalidInput:
    """Out-of-bounds cells are caller errors, not missing paths."""

    def test_start_out_of_bounds(self):
        result = find_shortest_path((3, 0), (0, 0), GridMap(3, 3))
        assert result.reason == PathStopReason.START_OUT_OF_BOUNDS
        assert not result.success

    def test_goal_out_of_bounds(self):
        result = find_shortest_path((0, 0), (0, -1), GridMap(3, 3))
        assert result.reason == PathStopReason.TARGET_OUT_OF_BOUNDS
        assert not result.success

    def test_compute_distances_rejects_bad_start(self):
        with pytest.raises(ValueError):
            compute_distances((9, 9), GridMap(3, 3))


class TestComputeDistances:
    """Tests for the distance and predecessor maps."""

    def test_every_cell_has_an_entry(self):
        state = compute_distances((0, 0), GridMap(4, 3))

        assert len(state.distance) == 12
        assert len(state.predecessor) == 12
        assert state.distance[Cell(0, 0)] == 0.0
        assert state.predecessor[Cell(0, 0)] is None

    def test_unreachable_cells_stay_infinite(self):
        grid = GridMap(3, 1)
        grid.add_wall((1, 0), Direction.E)
        state = compute_distances((0, 0), grid)

        assert state.distance[Cell(2, 0)] == math.inf
        assert state.predecessor[Cell(2, 0)] is None
        assert not state.has_path_to(Cell(2, 0))
        assert state.has_path_to(Cell(1, 0))

    def test_predecessors_are_closer(self):
        state = compute_distances((0, 4), make_walled_maze())
        for cell, previous in state.predecessor.items():
            if previous is not None:
                assert state.distance[previous] < state.distance[cell]

    def test_goal_distance_matches_path_cost(self):
        grid = make_walled_maze()
        state = compute_distances((0, 4), grid)
        path = reconstruct_path(Cell(4, 2), Cell(0, 4), state.predecessor, state.distance)

        assert path_cost((0, 4), path, grid) == pytest.approx(state.distance[Cell(4, 2)])

    def test_fewest_moves_mode(self):
        """Unweighted search ignores climbing cost."""
        grid = GridMap(2, 2)
        grid.add_wall((0, 0), Direction.E, cost=5.0)

        result = find_shortest_path((0, 0), (1, 0), grid, weighted=False)

        assert result.path == [Cell(1, 0)]
        assert result.cost == 1.0

    def test_fewest_moves_ignores_blocked_vent(self):
        """Fewest-moves search agrees with is_movement_blocked on vents."""
        corridor = GridMap(5, 1)
        corridor.add_vent_group([(0, 0), (4, 0)], cost=math.inf)

        result = find_shortest_path((0, 0), (4, 0), corridor, weighted=False)

        assert result.path == [Cell(1, 0), Cell(2, 0), Cell(3, 0), Cell(4, 0)]
        assert result.cost == 4.0
        assert is_movement_blocked((0, 0), (4, 0), corridor)

    def test_fewest_moves_respects_solid_walls(self):
        grid = GridMap(2, 2)
        grid.add_wall((0, 0), Direction.E)

        result = find_shortest_path((0, 0), (1, 0), grid, weighted=False)

        assert len(result) == 3


class TestReconstructPath:
    """Tests for reconstruct_path."""

    def test_unreachable_goal_returns_none(self):
        distance = {Cell(0, 0): 0.0, Cell(1, 0): math.inf}
        predecessor = {Cell(0, 0): None, Cell(1, 0): None}
        assert reconstruct_path(Cell(1, 0), Cell(0, 0), predecessor, distance) is None

    def test_walks_chain_forward(self):
        a, b, c = Cell(0, 0), Cell(1, 0), Cell(2, 0)
        distance = {a: 0.0, b: 1.0, c: 2.0}
        predecessor = {a: None, b: a, c: b}
        assert reconstruct_path(c, a, predecessor, distance) == [b, c]

    def test_goal_equals_start(self):
        a = Cell(0, 0)
        assert reconstruct_path(a, a, {a: None}, {a: 0.0}) == []

    def test_cycle_raises(self):
        """A looping chain is bounded by the cell count."""
        a, b, c = Cell(0, 0), Cell(1, 0), Cell(2, 0)
        distance = {a: 0.0, b: 1.0, c: 1.0}
        predecessor = {a: None, b: c, c: b}
        with pytest.raises(PathReconstructionError):
            reconstruct_path(b, a, predecessor, distance)

    def test_broken_chain_raises(self):
        """A finite distance with no way back is a solver defect."""
        a, b = Cell(0, 0), Cell(1, 0)
        distance = {a: 0.0, b: 1.0}
        predecessor = {a: None, b: None}
        with pytest.raises(PathReconstructionError):
            reconstruct_path(b, a, predecessor, distance)


class TestFindReachable:
    """Tests for find_reachable."""

    def test_lists_connected_cells_in_order(self):
        grid = GridMap(3, 1)
        grid.add_wall((1, 0), Direction.E)
        assert find_reachable((0, 0), grid) == [(0.0, Cell(0, 0)), (1.0, Cell(1, 0))]

    def test_max_cost(self):
        reachable = find_reachable((0, 0), GridMap(5, 1), max_cost=2.0)
        assert [cell for _, cell in reachable] == [Cell(0, 0), Cell(1, 0), Cell(2, 0)]

    def test_ties_sort_by_x_then_y(self):
        reachable = find_reachable((1, 1), GridMap(3, 3), max_cost=1.0)
        assert [cell for _, cell in reachable] == [
            Cell(1, 1), Cell(0, 1), Cell(1, 0), Cell(1, 2), Cell(2, 1),
        ]


class TestPathCost:
    """Tests for path_cost."""

    def test_sums_steps(self):
        grid = GridMap(3, 1)
        grid.add_wall((1, 0), Direction.E, cost=4.0)
        assert path_cost((0, 0), [(1, 0), (2, 0)], grid) == 5.0

    def test_blocked_step_is_infinite(self):
        assert path_cost((0, 0), [(1, 1)], GridMap(3, 3)) == math.inf

    def test_empty_path(self):
        assert path_cost((0, 0), [], GridMap(3, 3)) == 0.0
