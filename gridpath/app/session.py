# gridpath/app/session.py
#!/usr/bin/env python3
"""
Run state behind the viewer: the grid, its endpoints, the stepping A* engine
and the overlays (open / closed / path) accumulated so far.

Kept free of pygame so it can be driven from tests or a headless script.
"""

import logging
import random
from typing import List, Optional, Set

from gridpath.core.astar import AStarAlgo
from gridpath.core.grid import Grid
from gridpath.core.maps import GridMap, random_endpoints
from gridpath.core.types import Cell, Coord, StepResult

logger = logging.getLogger(__name__)


def _empty_metrics(algo: str) -> dict:
    return {
        "algo": algo,
        "popped": 0,
        "open_size": 0,
        "closed_count": 0,
        "path_len": 0,
        "total_cost": None,
    }


class Session:
    def __init__(self, grid: Grid, start: Optional[Coord] = None, target: Optional[Coord] = None,
                 rng: Optional[random.Random] = None, name: str = "random"):
        self.rng = rng or random.Random()
        self.grid = grid
        self.name = name
        self.algo = AStarAlgo()
        self.start: Optional[Cell] = None
        self.target: Optional[Cell] = None

        self.open_set: Set[Coord] = set()
        self.closed_set: Set[Coord] = set()
        self.path: List[Coord] = []
        self.state = "Idle"
        self.running = False
        self.metrics = _empty_metrics(self.algo.name)

        if start is not None and target is not None:
            self.set_endpoints(start, target)
        else:
            self.randomize()

    @classmethod
    def from_map(cls, grid_map: GridMap, rng: Optional[random.Random] = None) -> "Session":
        return cls(grid_map.grid, grid_map.start, grid_map.goal, rng=rng, name=grid_map.name)

    # -------------------- endpoints --------------------

    def set_endpoints(self, start: Coord, target: Coord) -> None:
        self.start = self.grid[start]
        self.target = self.grid[target]
        self.restart()

    def randomize(self) -> None:
        """New random start/target on a clean grid, then restart the search."""
        self.start, self.target = random_endpoints(self.grid, self.rng)
        logger.info("endpoints %s -> %s", self.start.position, self.target.position)
        self.restart()

    def load(self, grid_map: GridMap) -> None:
        self.grid = grid_map.grid
        self.name = grid_map.name
        if grid_map.start is not None and grid_map.goal is not None:
            self.set_endpoints(grid_map.start, grid_map.goal)
        else:
            self.randomize()

    # -------------------- search lifecycle --------------------

    def restart(self) -> None:
        """Clear cell scratch and overlays, re-seed the engine."""
        self.grid.reset()
        self.algo.init(self.grid, self.start, self.target)
        self.open_set = {self.start.position}
        self.closed_set.clear()
        self.path = []
        self.running = False
        self.state = "Idle"
        self.metrics = _empty_metrics(self.algo.name)

    def toggle_run(self) -> None:
        if self.finished:
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"

    @property
    def finished(self) -> bool:
        return self.state in ("Done", "No path")

    def step(self) -> StepResult:
        res = self.algo.step()
        self.open_set.update(res.opened)
        for c in res.closed:
            self.open_set.discard(c)
            self.closed_set.add(c)
        if res.path is not None:
            self.path = res.path
        if res.status == "done":
            self.state = "Done"
            self.running = False
        elif res.status == "no_path":
            self.state = "No path"
            self.running = False
        else:
            self.state = "Running" if self.running else "Idle"
        if res.metrics:
            self.metrics = res.metrics
        return res

    def solve(self) -> Optional[List[Coord]]:
        """Run to completion; the path coordinates or None."""
        while not self.finished:
            self.step()
        return self.path if self.state == "Done" else None

    # -------------------- editing --------------------

    def toggle_wall(self, pos: Coord) -> bool:
        """Flip walkability of pos (endpoints stay walkable). True if changed."""
        if not self.grid.in_bounds(pos):
            return False
        cell = self.grid[pos]
        if cell is self.start or cell is self.target:
            return False
        cell.walkable = not cell.walkable
        self.restart()
        return True
