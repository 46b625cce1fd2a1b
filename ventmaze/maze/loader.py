"""
Maze documents.

A maze is described as a mapping (usually read from YAML):

    width: 5
    height: 4
    base_cost: 1.0
    horizontal_walls:        # south edge of (x, y)
      - {x: 1, y: 2}         # no cost -> solid wall
      - {x: 3, y: 1, cost: 4.5}
    vertical_walls:          # west edge of (x, y)
      - {x: 2, y: 0, cost: .inf}
    vents:
      - {cells: [[0, 0], [4, 3]], cost: 2.0}
"""

import logging
import math
from pathlib import Path
from typing import Any, Optional

import yaml

from .grid import GridMap

logger = logging.getLogger(__name__)


def _wall_entry_cost(entry: dict) -> float:
    cost = entry.get("cost")
    if cost is None:
        return math.inf
    return float(cost)


def _require_keys(entry: dict, kind: str, *keys: str) -> list:
    missing = [key for key in keys if key not in entry]
    if missing:
        raise ValueError(f"Maze document {kind} entry {entry} is missing {missing[0]!r}")
    return [entry[key] for key in keys]


def grid_map_from_dict(
    data: dict[str, Any],
    base_cost: Optional[float] = None,
    default_vent_cost: Optional[float] = None,
) -> GridMap:
    """
    Build a GridMap from a maze document.

    Args:
        data: Parsed maze document
        base_cost: Fallback open-boundary cost when the document has none
        default_vent_cost: Cost for vent groups that do not give one

    Returns:
        Populated GridMap
    """
    try:
        width = int(data["width"])
        height = int(data["height"])
    except KeyError as e:
        raise ValueError(f"Maze document is missing {e.args[0]!r}") from e

    if "base_cost" in data:
        base_cost = float(data["base_cost"])
    grid = GridMap(width, height, base_cost=1.0 if base_cost is None else base_cost)

    for entry in data.get("horizontal_walls") or []:
        x, y = _require_keys(entry, "horizontal wall", "x", "y")
        grid.set_horizontal_wall_cost(int(x), int(y), _wall_entry_cost(entry))
    for entry in data.get("vertical_walls") or []:
        x, y = _require_keys(entry, "vertical wall", "x", "y")
        grid.set_vertical_wall_cost(int(x), int(y), _wall_entry_cost(entry))
    for entry in data.get("vents") or []:
        (cells,) = _require_keys(entry, "vent group", "cells")
        cost = entry.get("cost", default_vent_cost)
        if cost is None:
            raise ValueError(f"Vent group {cells} has no cost")
        grid.add_vent_group([tuple(cell) for cell in cells], float(cost))

    return grid


def grid_map_to_dict(grid: GridMap) -> dict[str, Any]:
    """Convert a GridMap to a maze document."""
    horizontal, vertical = grid.walls()

    def wall_entries(walls):
        entries = []
        for cell, cost in walls:
            entry = {"x": cell.x, "y": cell.y}
            if not math.isinf(cost):
                entry["cost"] = cost
            entries.append(entry)
        return entries

    return {
        "width": grid.width,
        "height": grid.height,
        "base_cost": grid.base_cost,
        "horizontal_walls": wall_entries(horizontal),
        "vertical_walls": wall_entries(vertical),
        "vents": [
            {"cells": [[cell.x, cell.y] for cell in cells], "cost": cost}
            for cells, cost in grid.vent_groups
        ],
    }


def load_grid_map(
    path: str | Path,
    base_cost: Optional[float] = None,
    default_vent_cost: Optional[float] = None,
) -> GridMap:
    """Read a maze document from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Maze file {path} does not contain a mapping")

    grid = grid_map_from_dict(data, base_cost=base_cost, default_vent_cost=default_vent_cost)
    logger.info(f"Loaded {grid} from {path}")
    return grid


def save_grid_map(grid: GridMap, path: str | Path) -> None:
    """Write a maze document to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(grid_map_to_dict(grid), f, sort_keys=False)
