"""
Read-only map query interface consumed by the pathfinder.

Wall records follow a fixed storage layout:
- the horizontal wall at (x, y) is the boundary on the south edge of (x, y)
- the vertical wall at (x, y) is the boundary on the west edge of (x, y)

Costs are non-negative floats; ``math.inf`` marks an impassable boundary.
"""

from typing import Iterable, Protocol, runtime_checkable

from .models import Cell


@runtime_checkable
class MapQuery(Protocol):
    """Anything that can answer grid, wall and vent questions."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def has_horizontal_wall(self, x: int, y: int) -> bool: ...

    def has_vertical_wall(self, x: int, y: int) -> bool: ...

    def get_horizontal_wall_cost(self, x: int, y: int) -> float: ...

    def get_vertical_wall_cost(self, x: int, y: int) -> float: ...

    def has_vent(self, x: int, y: int) -> bool: ...

    def get_other_vent_positions(self, cell: Cell) -> Iterable[Cell]: ...

    def get_vent_cost(self, x: int, y: int) -> float: ...
