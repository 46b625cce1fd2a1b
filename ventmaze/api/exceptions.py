"""Exceptions raised by the pathfinding core."""


class VentMazeError(Exception):
    """Base class for maze pathfinding errors."""


class PathReconstructionError(VentMazeError):
    """The predecessor chain does not lead back to the start cell.

    Signals a defect in the solver, never an unreachable goal.
    """

    def __init__(self, message: str, goal=None, start=None):
        super().__init__(message)
        self.goal = goal
        self.start = start


class InvalidMoveCostError(VentMazeError):
    """A map query reported a negative or NaN move cost."""

    def __init__(self, message: str, cost: float | None = None):
        super().__init__(message)
        self.cost = cost
