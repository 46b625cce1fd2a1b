"""
Data models for the maze pathfinding API.

Cells and directions are small immutable values so they can be used
as dictionary keys and compared directly by the search.
"""

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Orthogonal movement directions."""

    N = "n"
    E = "e"
    S = "s"
    W = "w"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction. North is +y."""
        deltas = {
            Direction.N: (0, 1),
            Direction.E: (1, 0),
            Direction.S: (0, -1),
            Direction.W: (-1, 0),
        }
        return deltas[self]


# Neighbor expansion order
CARDINAL_DIRECTIONS = (Direction.N, Direction.E, Direction.S, Direction.W)


@dataclass(frozen=True, order=True)
class Cell:
    """A cell on the maze grid.

    Ordering is by x then y, which is the frontier tie-break.
    """

    x: int
    y: int

    def manhattan_distance(self, other: "Cell") -> int:
        """Number of orthogonal steps between two cells on an open grid."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def move(self, direction: Direction) -> "Cell":
        """Get the cell one step away in a direction."""
        dx, dy = direction.delta
        return Cell(self.x + dx, self.y + dy)

    def direction_to(self, other: "Cell") -> Direction | None:
        """Get the direction of an orthogonally adjacent cell, or None."""
        delta = (other.x - self.x, other.y - self.y)
        for direction in CARDINAL_DIRECTIONS:
            if direction.delta == delta:
                return direction
        return None

    def is_adjacent(self, other: "Cell") -> bool:
        """Check if other is exactly one orthogonal step away."""
        return self.manhattan_distance(other) == 1

    def in_bounds(self, width: int, height: int) -> bool:
        """Check if this cell lies inside a width x height grid."""
        return 0 <= self.x < width and 0 <= self.y < height

    def __repr__(self) -> str:
        return f"Cell({self.x}, {self.y})"


def to_cell(value) -> Cell:
    """Convert a Cell or (x, y) pair to a Cell."""
    if isinstance(value, Cell):
        return value
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Cell(int(value[0]), int(value[1]))
    raise TypeError(f"Expected Cell or (x, y) tuple, got {type(value)}")
