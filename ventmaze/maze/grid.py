"""
In-memory maze map.

Stores wall costs in two numpy arrays indexed [y, x]:
- horizontal[y, x]: boundary on the south edge of (x, y)
- vertical[y, x]: boundary on the west edge of (x, y)

An open boundary carries the base move cost, a climbable wall a higher
cost, and a solid wall ``math.inf``.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from ventmaze.api.models import Cell, Direction, to_cell

logger = logging.getLogger(__name__)


@dataclass
class Vent:
    """A vent cell, its usage cost, and the vents it connects to."""

    cell: Cell
    cost: float
    links: list[Cell] = field(default_factory=list)


class GridMap:
    """
    Rectangular maze with weighted walls and vents.

    Implements the MapQuery interface, so it can be passed straight to
    find_shortest_path().
    """

    def __init__(self, width: int, height: int, base_cost: float = 1.0):
        """
        Create an open maze.

        Args:
            width: Number of columns
            height: Number of rows
            base_cost: Cost of crossing a boundary with no wall
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        _validate_cost(base_cost)
        if math.isinf(base_cost):
            raise ValueError("Base cost must be finite")

        self._width = width
        self._height = height
        self.base_cost = float(base_cost)
        self._horizontal = np.full((height, width), self.base_cost, dtype=np.float64)
        self._vertical = np.full((height, width), self.base_cost, dtype=np.float64)
        self._vents: dict[Cell, Vent] = {}
        self._vent_groups: list[tuple[list[Cell], float]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def vents(self) -> list[Vent]:
        """All vents in insertion order."""
        return list(self._vents.values())

    @property
    def vent_groups(self) -> list[tuple[list[Cell], float]]:
        """Vent groups as they were added, with their costs."""
        return [(list(cells), cost) for cells, cost in self._vent_groups]

    def _require_in_bounds(self, x: int, y: int) -> None:
        # numpy would silently wrap negative indices
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise ValueError(f"Cell ({x}, {y}) is outside {self._width}x{self._height} grid")

    # ==================== Building ====================

    def set_horizontal_wall_cost(self, x: int, y: int, cost: float) -> None:
        """Set the cost of the boundary on the south edge of (x, y)."""
        self._require_in_bounds(x, y)
        _validate_cost(cost)
        self._horizontal[y, x] = cost

    def set_vertical_wall_cost(self, x: int, y: int, cost: float) -> None:
        """Set the cost of the boundary on the west edge of (x, y)."""
        self._require_in_bounds(x, y)
        _validate_cost(cost)
        self._vertical[y, x] = cost

    def add_wall(self, cell, direction: Direction, cost: float = math.inf) -> None:
        """
        Put a wall on one side of a cell.

        Args:
            cell: Cell or (x, y) the wall borders
            direction: Side of the cell the wall is on
            cost: Climbing cost, or math.inf for a solid wall
        """
        cell = to_cell(cell)
        self._require_in_bounds(cell.x, cell.y)

        if direction is Direction.N:
            record, setter = cell.move(Direction.N), self.set_horizontal_wall_cost
        elif direction is Direction.E:
            record, setter = cell.move(Direction.E), self.set_vertical_wall_cost
        elif direction is Direction.S:
            record, setter = cell, self.set_horizontal_wall_cost
        else:
            record, setter = cell, self.set_vertical_wall_cost

        if not record.in_bounds(self._width, self._height):
            # Map edge, already impassable
            logger.debug(f"add_wall: ignoring {direction.name} wall of {cell} on map edge")
            return
        setter(record.x, record.y, cost)

    def add_vent_group(self, cells: Iterable, cost: float) -> None:
        """
        Link a group of vents so each can reach every other one.

        Args:
            cells: Cells or (x, y) pairs in the group (at least two)
            cost: Usage cost charged when leaving any vent in the group

        Raises:
            ValueError: If a cell is already a vent with a different cost
        """
        group = []
        for cell in cells:
            cell = to_cell(cell)
            self._require_in_bounds(cell.x, cell.y)
            if cell not in group:
                group.append(cell)
        if len(group) < 2:
            raise ValueError(f"A vent group needs at least two distinct cells, got {group}")
        _validate_cost(cost)
        cost = float(cost)

        # A vent has a single usage cost across every group it belongs to
        for cell in group:
            vent = self._vents.get(cell)
            if vent is not None and vent.cost != cost:
                raise ValueError(
                    f"Vent at {cell} already costs {vent.cost}, cannot join a group costing {cost}"
                )

        for cell in group:
            vent = self._vents.get(cell)
            if vent is None:
                vent = Vent(cell=cell, cost=cost)
                self._vents[cell] = vent
            for other in group:
                if other != cell and other not in vent.links:
                    vent.links.append(other)

        self._vent_groups.append((group, cost))
        logger.debug(f"add_vent_group: linked {len(group)} vents at cost {cost}")

    # ==================== MapQuery ====================

    def has_horizontal_wall(self, x: int, y: int) -> bool:
        return math.isinf(self.get_horizontal_wall_cost(x, y))

    def has_vertical_wall(self, x: int, y: int) -> bool:
        return math.isinf(self.get_vertical_wall_cost(x, y))

    def get_horizontal_wall_cost(self, x: int, y: int) -> float:
        self._require_in_bounds(x, y)
        return float(self._horizontal[y, x])

    def get_vertical_wall_cost(self, x: int, y: int) -> float:
        self._require_in_bounds(x, y)
        return float(self._vertical[y, x])

    def has_vent(self, x: int, y: int) -> bool:
        return Cell(x, y) in self._vents

    def get_other_vent_positions(self, cell) -> list[Cell]:
        vent = self._vents.get(to_cell(cell))
        return list(vent.links) if vent else []

    def get_vent_cost(self, x: int, y: int) -> float:
        vent = self._vents.get(Cell(x, y))
        return vent.cost if vent else math.inf

    # ==================== Inspection ====================

    def walls(self) -> tuple[list[tuple[Cell, float]], list[tuple[Cell, float]]]:
        """
        List every boundary whose cost differs from the base cost.

        Returns:
            (horizontal, vertical) lists of (record cell, cost)
        """
        horizontal = [
            (Cell(int(x), int(y)), float(self._horizontal[y, x]))
            for y, x in zip(*np.nonzero(self._horizontal != self.base_cost))
        ]
        vertical = [
            (Cell(int(x), int(y)), float(self._vertical[y, x]))
            for y, x in zip(*np.nonzero(self._vertical != self.base_cost))
        ]
        horizontal.sort()
        vertical.sort()
        return horizontal, vertical

    def __repr__(self) -> str:
        return f"GridMap({self._width}x{self._height}, vents={len(self._vents)})"


def _validate_cost(cost: float) -> None:
    if cost is None or math.isnan(cost) or cost < 0:
        raise ValueError(f"Wall and vent costs must be non-negative, got {cost}")
