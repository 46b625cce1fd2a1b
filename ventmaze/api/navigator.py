"""
Maze navigation API.

Provides a small facade over the pathfinding functions for callers such
as movement or animation code that hold on to one maze.
"""

import logging
import math
from pathlib import Path
from typing import Iterable, Optional

from ventmaze.config import Config
from ventmaze.maze.loader import load_grid_map

from .map_query import MapQuery
from .models import Cell, to_cell
from .pathfinding import (
    PathResult,
    find_reachable,
    find_shortest_path,
    get_cost,
    is_movement_blocked,
    path_cost,
)

logger = logging.getLogger(__name__)


class MazeNavigator:
    """
    High-level API for routing through a maze.

    No search state is kept between calls; every find_path() call runs a
    fresh search over the current map.

    Example usage:
        nav = MazeNavigator.from_file("mazes/level1.yaml")
        result = nav.find_path((0, 0), (4, 3))
        if result:
            for cell in result:
                move_to(cell)
    """

    def __init__(self, map_query: MapQuery, config: Optional[Config] = None):
        """
        Initialize the navigator.

        Args:
            map_query: Map to route through
            config: Configuration (defaults are used if None)
        """
        self.map_query = map_query
        self.config = config or Config()
        logger.debug(f"MazeNavigator initialized with {map_query.width}x{map_query.height} map")

    @classmethod
    def from_file(cls, path: str | Path, config: Optional[Config] = None) -> "MazeNavigator":
        """Load a maze document and wrap it."""
        config = config or Config()
        grid = load_grid_map(
            path,
            base_cost=config.maze.base_move_cost,
            default_vent_cost=config.maze.default_vent_cost,
        )
        return cls(grid, config)

    @property
    def weighted(self) -> bool:
        return self.config.pathfinding.weighted

    # ==================== Pathfinding ====================

    def find_path(self, start, goal, weighted: Optional[bool] = None) -> PathResult:
        """
        Find a route from start to goal.

        Args:
            start: Cell or (x, y)
            goal: Cell or (x, y)
            weighted: Override the configured search mode

        Returns:
            PathResult (path excludes start)
        """
        if weighted is None:
            weighted = self.weighted
        result = find_shortest_path(to_cell(start), to_cell(goal), self.map_query, weighted=weighted)
        if result.success:
            logger.debug(f"find_path: {start} -> {goal} in {len(result)} steps, cost {result.cost}")
        else:
            logger.debug(f"find_path: {start} -> {goal} failed: {result.reason.value}")
        return result

    def reachable(self, start, max_cost: float = math.inf) -> list[tuple[float, Cell]]:
        """Cells reachable from start within max_cost, nearest first."""
        return find_reachable(to_cell(start), self.map_query, max_cost=max_cost, weighted=self.weighted)

    # ==================== Single moves ====================

    def get_cost(self, source, target) -> float:
        """Cost of one move, math.inf if blocked."""
        return get_cost(source, target, self.map_query)

    def is_blocked(self, source, target) -> bool:
        """Check if one move is impossible."""
        return is_movement_blocked(source, target, self.map_query)

    def path_cost(self, start, path: Iterable) -> float:
        """Total cost of walking a path from start."""
        return path_cost(start, path, self.map_query)
