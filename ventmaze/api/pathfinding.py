"""
Pathfinding over a maze grid with weighted walls and vents.

Implements Dijkstra's algorithm over the implicit graph defined by a
MapQuery: orthogonal moves cost whatever the crossed wall record says,
and linked vents allow a direct transition for the vent's usage cost.

Conventions:
- Blocked moves cost ``math.inf`` and are never returned as neighbors
- Returned paths exclude the start cell and include the goal
- Unreachable goals are reported through PathResult, never raised
"""

import heapq
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .exceptions import InvalidMoveCostError, PathReconstructionError
from .map_query import MapQuery
from .models import CARDINAL_DIRECTIONS, Cell, Direction, to_cell

logger = logging.getLogger(__name__)


class PathStopReason(Enum):
    """Reasons why pathfinding stopped or couldn't start."""
    SUCCESS = "success"
    ALREADY_AT_TARGET = "already_at_target"
    START_OUT_OF_BOUNDS = "start_out_of_bounds"
    TARGET_OUT_OF_BOUNDS = "target_out_of_bounds"
    NO_PATH_EXISTS = "no_path_exists"


@dataclass
class PathResult:
    """Result of a pathfinding operation."""
    path: list[Cell]
    reason: PathStopReason
    cost: float = 0.0
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether a route to the goal exists (possibly empty)."""
        return self.reason in (PathStopReason.SUCCESS, PathStopReason.ALREADY_AT_TARGET)

    def __bool__(self) -> bool:
        """Allow `if result:` to check for success."""
        return self.success

    def __iter__(self):
        """Allow `for cell in result:` to iterate path."""
        return iter(self.path)

    def __len__(self) -> int:
        """Return path length."""
        return len(self.path)

    def __repr__(self) -> str:
        if self.success:
            return f"PathResult(path={self.path}, cost={self.cost}, reason={self.reason.value})"
        return f"PathResult(path=[], reason={self.reason.value}, message='{self.message}')"


@dataclass
class SearchState:
    """Distances and predecessor links produced by one search."""
    start: Cell
    distance: dict[Cell, float] = field(default_factory=dict)
    predecessor: dict[Cell, Optional[Cell]] = field(default_factory=dict)

    def has_path_to(self, cell: Cell) -> bool:
        """Whether the cell was reached from the start."""
        return self.distance.get(cell, math.inf) < math.inf


# =============================================================================
# Cost Model
# =============================================================================


def _is_valid_cell(cell: Cell, map_query: MapQuery) -> bool:
    """Check if cell is within map bounds."""
    return cell.in_bounds(map_query.width, map_query.height)


def _checked(cost: float, source: Cell, target: Cell) -> float:
    cost = float(cost)
    if math.isnan(cost) or cost < 0:
        raise InvalidMoveCostError(
            f"Move cost from {source} to {target} must be non-negative, got {cost}",
            cost=cost,
        )
    return cost


def _wall_cost(source: Cell, target: Cell, map_query: MapQuery) -> float:
    """
    Read the wall record crossed by an orthogonal move.

    North/east moves read the record at the target cell, south/west moves
    read it at the source cell. Both directions of a boundary therefore
    read the same record.
    """
    direction = source.direction_to(target)
    if direction is Direction.N:
        return map_query.get_horizontal_wall_cost(target.x, target.y)
    if direction is Direction.E:
        return map_query.get_vertical_wall_cost(target.x, target.y)
    if direction is Direction.S:
        return map_query.get_horizontal_wall_cost(source.x, source.y)
    if direction is Direction.W:
        return map_query.get_vertical_wall_cost(source.x, source.y)
    return math.inf


def _has_wall(source: Cell, target: Cell, map_query: MapQuery) -> bool:
    """Blocked/unblocked version of _wall_cost using the wall predicates."""
    direction = source.direction_to(target)
    if direction is Direction.N:
        return map_query.has_horizontal_wall(target.x, target.y)
    if direction is Direction.E:
        return map_query.has_vertical_wall(target.x, target.y)
    if direction is Direction.S:
        return map_query.has_horizontal_wall(source.x, source.y)
    if direction is Direction.W:
        return map_query.has_vertical_wall(source.x, source.y)
    return True


def _linked_vents(cell: Cell, map_query: MapQuery) -> list[Cell]:
    """Vent cells reachable from this vent, in the map's reported order."""
    if not map_query.has_vent(cell.x, cell.y):
        return []
    linked = []
    for other in map_query.get_other_vent_positions(cell):
        other = to_cell(other)
        if other == cell or not _is_valid_cell(other, map_query):
            continue
        if not map_query.has_vent(other.x, other.y):
            continue
        linked.append(other)
    return linked


def _is_vent_link(source: Cell, target: Cell, map_query: MapQuery) -> bool:
    return target in _linked_vents(source, map_query)


def get_cost(source, target, map_query: MapQuery) -> float:
    """
    Cost of moving directly from source to target.

    A vent link takes priority over the orthogonal wall rule, whatever the
    distance between the two cells.

    Args:
        source: Cell or (x, y) moved from
        target: Cell or (x, y) moved to
        map_query: Map to read walls and vents from

    Returns:
        Non-negative move cost, or math.inf if the move is blocked
    """
    source, target = to_cell(source), to_cell(target)
    if not _is_valid_cell(source, map_query) or not _is_valid_cell(target, map_query):
        return math.inf

    if _is_vent_link(source, target, map_query):
        return _checked(map_query.get_vent_cost(source.x, source.y), source, target)

    if not source.is_adjacent(target):
        return math.inf

    return _checked(_wall_cost(source, target, map_query), source, target)


def _unit_vent_cost(source: Cell, map_query: MapQuery) -> float:
    """One move through an open vent, math.inf through a blocked one."""
    if math.isinf(map_query.get_vent_cost(source.x, source.y)):
        return math.inf
    return 1.0


def _move_count_cost(source: Cell, target: Cell, map_query: MapQuery) -> float:
    """Unit cost for any allowed move, for fewest-moves search."""
    if not _is_valid_cell(source, map_query) or not _is_valid_cell(target, map_query):
        return math.inf
    if _is_vent_link(source, target, map_query):
        return _unit_vent_cost(source, map_query)
    if not source.is_adjacent(target) or _has_wall(source, target, map_query):
        return math.inf
    return 1.0


def is_movement_blocked(source, target, map_query: MapQuery) -> bool:
    """Check whether a single move is impossible."""
    return math.isinf(get_cost(source, target, map_query))


# =============================================================================
# Neighbor Generator
# =============================================================================


def adjacent_with_cost(
    cell,
    map_query: MapQuery,
    weighted: bool = True,
) -> list[tuple[Cell, float]]:
    """
    List the cells reachable in one move, with their move costs.

    Order is north, east, south, west, then linked vents in the map's
    order. Blocked moves are omitted.

    Args:
        cell: Cell or (x, y) to expand
        map_query: Map to read walls and vents from
        weighted: If False, every allowed move costs 1 and walls are read
            through the has_*_wall predicates

    Returns:
        List of (neighbor, cost) pairs with finite costs
    """
    cell = to_cell(cell)
    edge_cost = get_cost if weighted else _move_count_cost
    neighbors: list[tuple[Cell, float]] = []

    for direction in CARDINAL_DIRECTIONS:
        target = cell.move(direction)
        if not _is_valid_cell(target, map_query):
            continue
        cost = edge_cost(cell, target, map_query)
        if cost < math.inf:
            neighbors.append((target, cost))

    vents = _linked_vents(cell, map_query)
    if vents:
        if weighted:
            vent_cost = _checked(map_query.get_vent_cost(cell.x, cell.y), cell, vents[0])
        else:
            vent_cost = _unit_vent_cost(cell, map_query)
        if vent_cost < math.inf:
            neighbors.extend((vent, vent_cost) for vent in vents)

    return neighbors


# =============================================================================
# Shortest-Path Solver
# =============================================================================


def compute_distances(start, map_query: MapQuery, weighted: bool = True) -> SearchState:
    """
    Run Dijkstra's algorithm from start over the whole map.

    The frontier is a binary heap of (distance, cell) entries; cells order
    by x then y, so equal distances pop deterministically. Improved cells
    are pushed again instead of updated in place, and entries whose
    distance is worse than the recorded one are skipped when popped. The
    search runs until the frontier is empty.

    Args:
        start: Cell or (x, y) to search from
        map_query: Map to search
        weighted: If False, count moves instead of summing costs

    Returns:
        SearchState with a distance and predecessor entry for every cell

    Raises:
        ValueError: If start is outside the map
    """
    start = to_cell(start)
    if not _is_valid_cell(start, map_query):
        raise ValueError(f"Start {start} is out of map bounds")

    state = SearchState(start=start)
    for x in range(map_query.width):
        for y in range(map_query.height):
            cell = Cell(x, y)
            state.distance[cell] = math.inf
            state.predecessor[cell] = None

    distance = state.distance
    distance[start] = 0.0
    frontier: list[tuple[float, Cell]] = [(0.0, start)]
    expanded = 0

    while frontier:
        dist, current = heapq.heappop(frontier)
        if dist > distance[current]:
            # Superseded by a shorter path found after this entry was pushed
            continue
        expanded += 1

        for neighbor, cost in adjacent_with_cost(current, map_query, weighted):
            candidate = dist + cost
            if candidate < distance[neighbor]:
                distance[neighbor] = candidate
                state.predecessor[neighbor] = current
                heapq.heappush(frontier, (candidate, neighbor))

    logger.debug(f"compute_distances: expanded {expanded} cells from {start} (weighted={weighted})")
    return state


# =============================================================================
# Path Reconstructor
# =============================================================================


def reconstruct_path(
    goal: Cell,
    start: Cell,
    predecessor: dict[Cell, Optional[Cell]],
    distance: dict[Cell, float],
) -> Optional[list[Cell]]:
    """
    Walk predecessor links back from goal to start.

    Returns:
        Cells from the one after start through goal, or None if goal is
        unreachable

    Raises:
        PathReconstructionError: If the chain is broken or cycles
    """
    if distance.get(goal, math.inf) == math.inf:
        return None

    limit = len(distance)
    reversed_path: list[Cell] = []
    current = goal
    while current != start:
        if len(reversed_path) >= limit:
            raise PathReconstructionError(
                f"Predecessor chain from {goal} exceeds {limit} cells without reaching {start}",
                goal=goal,
                start=start,
            )
        reversed_path.append(current)
        previous = predecessor.get(current)
        if previous is None:
            raise PathReconstructionError(
                f"Predecessor chain from {goal} ends at {current} before reaching {start}",
                goal=goal,
                start=start,
            )
        current = previous

    reversed_path.reverse()
    return reversed_path


# =============================================================================
# Public entry points
# =============================================================================


def find_shortest_path(
    start,
    goal,
    map_query: MapQuery,
    weighted: bool = True,
) -> PathResult:
    """
    Find the cheapest route from start to goal.

    Args:
        start: Cell or (x, y) the caller stands on
        goal: Cell or (x, y) to reach
        map_query: Map to search
        weighted: If False, find the route with the fewest moves

    Returns:
        PathResult with the path (excluding start), its total cost, and
        the reason for success/failure
    """
    start, goal = to_cell(start), to_cell(goal)

    if not _is_valid_cell(start, map_query):
        logger.debug(f"find_shortest_path: start {start} out of bounds")
        return PathResult([], PathStopReason.START_OUT_OF_BOUNDS, message=f"Start {start} is out of map bounds")
    if not _is_valid_cell(goal, map_query):
        logger.debug(f"find_shortest_path: goal {goal} out of bounds")
        return PathResult([], PathStopReason.TARGET_OUT_OF_BOUNDS, message=f"Target {goal} is out of map bounds")
    if start == goal:
        return PathResult([], PathStopReason.ALREADY_AT_TARGET, message="Already at target position")

    state = compute_distances(start, map_query, weighted)
    path = reconstruct_path(goal, start, state.predecessor, state.distance)

    if path is None:
        logger.debug(f"find_shortest_path: no path from {start} to {goal}")
        return PathResult([], PathStopReason.NO_PATH_EXISTS, message=f"No path from {start} to {goal}")

    return PathResult(path, PathStopReason.SUCCESS, cost=state.distance[goal])


def find_reachable(
    start,
    map_query: MapQuery,
    max_cost: float = math.inf,
    weighted: bool = True,
) -> list[tuple[float, Cell]]:
    """
    List every cell reachable from start within max_cost.

    Returns:
        (distance, cell) pairs ordered by distance, then x, then y.
        The start cell comes first at distance 0.
    """
    state = compute_distances(start, map_query, weighted)
    reachable = [
        (dist, cell)
        for cell, dist in state.distance.items()
        if dist <= max_cost and dist < math.inf
    ]
    reachable.sort()
    return reachable


def path_cost(start, path: Iterable, map_query: MapQuery) -> float:
    """
    Sum the move costs along a path that starts after start.

    Returns:
        Total cost, or math.inf if any step is blocked
    """
    total = 0.0
    current = to_cell(start)
    for step in path:
        step = to_cell(step)
        cost = get_cost(current, step, map_query)
        if cost == math.inf:
            return math.inf
        total += cost
        current = step
    return total
