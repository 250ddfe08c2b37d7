# gridpath/core/maps.py
#!/usr/bin/env python3
"""
Map files and endpoint selection.

Map JSON:
    {
      "name":  "wall_gap",            # optional, defaults to the file stem
      "rows":  3, "cols": 3,
      "cells": [[0,0,0],[1,0,1],[0,0,0]],   # [row][col], 1 = blocked
      "start": [0, 0], "goal": [2, 2]       # optional
    }
"""

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from gridpath.core.grid import Grid
from gridpath.core.types import Cell, Coord

BLOCK = 1


@dataclass
class GridMap:
    name: str
    grid: Grid
    start: Optional[Coord] = None
    goal: Optional[Coord] = None


def _coord(data: dict, key: str, name: str) -> Optional[Coord]:
    if data.get(key) is None:
        return None
    try:
        r, c = data[key]
        return int(r), int(c)
    except (TypeError, ValueError):
        raise ValueError(f"map {name!r}: invalid {key} {data[key]!r}")


def _dimension(data: dict, key: str, name: str) -> int:
    if key not in data:
        raise ValueError(f"map {name!r}: missing {key}")
    try:
        return int(data[key])
    except (TypeError, ValueError):
        raise ValueError(f"map {name!r}: invalid {key} {data[key]!r}")


def parse_map(data: dict, name: str = "custom") -> GridMap:
    if not isinstance(data, dict):
        raise ValueError(f"map {name!r}: expected a JSON object")
    rows = _dimension(data, "rows", name)
    cols = _dimension(data, "cols", name)
    if "cells" not in data:
        raise ValueError(f"map {name!r}: missing cells")
    cells = data["cells"]
    if not isinstance(cells, list) or not all(isinstance(r, list) for r in cells):
        raise ValueError(f"map {name!r}: invalid cells, expected a list of rows")
    if len(cells) != rows or any(len(r) != cols for r in cells):
        raise ValueError(f"map {name!r}: cells size mismatch, expected {rows}x{cols}")
    grid = Grid.from_mask([[v != BLOCK for v in row] for row in cells])

    start = _coord(data, "start", name)
    goal = _coord(data, "goal", name)
    for label, pos in (("start", start), ("goal", goal)):
        if pos is None:
            continue
        if not grid.in_bounds(pos):
            raise ValueError(f"map {name!r}: {label} {pos} out of bounds")
        if not grid[pos].walkable:
            raise ValueError(f"map {name!r}: {label} {pos} is blocked")
    if start is not None and start == goal:
        raise ValueError(f"map {name!r}: start and goal are the same cell")
    return GridMap(data.get("name", name), grid, start, goal)


def load_map(path: Path) -> GridMap:
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)
    return parse_map(data, name=path.stem)


def list_maps(directory: Path) -> Dict[str, Path]:
    """Map files in `directory` keyed by stem, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return {}
    return {p.stem: p for p in sorted(directory.glob("*.json"))}


def random_endpoints(grid: Grid, rng: Optional[random.Random] = None) -> Tuple[Cell, Cell]:
    """Two distinct walkable cells; the second is re-drawn until it differs."""
    rng = rng or random.Random()
    candidates = [cell for cell in grid if cell.walkable]
    if len(candidates) < 2:
        raise ValueError(f"{grid!r} has fewer than two walkable cells")
    first = rng.randrange(len(candidates))
    final = rng.randrange(len(candidates))
    while final == first:
        final = rng.randrange(len(candidates))
    return candidates[first], candidates[final]
