"""In-memory maze maps and maze documents."""

from .grid import GridMap, Vent
from .loader import (
    grid_map_from_dict,
    grid_map_to_dict,
    load_grid_map,
    save_grid_map,
)

__all__ = [
    "GridMap",
    "Vent",
    "grid_map_from_dict",
    "grid_map_to_dict",
    "load_grid_map",
    "save_grid_map",
]
