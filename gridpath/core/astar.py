# gridpath/core/astar.py
#!/usr/bin/env python3
"""
A* on a 4-connected, unit-cost grid. One expansion per step() for animation,
or find_path() to run a whole search in one call.

Open set:
- Plain list scanned linearly. Cells are appended when first discovered and
  removal keeps the order of the others.

Selection / tie-breaking:
- lowest f, then lowest h, then earliest in the open list.

Heuristic:
- Manhattan distance (admissible and consistent for unit 4-way moves).

Contract:
- The engine writes g/h/parent straight onto the grid's cells and does NOT
  clear them first. Call grid.reset() between searches (or pass
  reset_first=True). Stale scratch from an earlier search corrupts the cost
  bookkeeping of the next one.
- The returned path excludes the start cell and ends with the target.
  start == target gives []; no route gives None.
- Coordinates must be exactly two ints inside the grid, and cells must be
  the grid's own. A blocked start cell is rejected the same way
  (InvalidSearchInput); a blocked target is just unreachable (None).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Union

from gridpath.core.grid import Grid
from gridpath.core.types import Cell, Coord, InvalidSearchInput, StepResult

logger = logging.getLogger(__name__)

CellRef = Union[Cell, Coord]


def manhattan(a: CellRef, b: CellRef) -> int:
    (ar, ac) = a.position if isinstance(a, Cell) else a
    (br, bc) = b.position if isinstance(b, Cell) else b
    return abs(ar - br) + abs(ac - bc)


def retrace_path(start: Cell, target: Cell) -> List[Cell]:
    """Walk parent links back from target; start itself is not collected."""
    path: List[Cell] = []
    cur = target
    while cur is not start:
        path.append(cur)
        cur = cur.parent
    path.reverse()
    return path


def path_positions(path: Optional[List[Cell]]) -> Optional[List[Coord]]:
    if path is None:
        return None
    return [c.position for c in path]


def _resolve(grid: Grid, ref: CellRef, role: str) -> Cell:
    if isinstance(ref, Cell):
        if not grid.contains(ref):
            raise InvalidSearchInput(f"{role} {ref!r} does not belong to {grid!r}")
        return ref
    if (not isinstance(ref, (tuple, list)) or len(ref) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in ref)):
        raise InvalidSearchInput(f"{role} must be a Cell or (row, col) ints, got {ref!r}")
    pos = (ref[0], ref[1])
    if not grid.in_bounds(pos):
        raise InvalidSearchInput(f"{role} {pos} is outside {grid!r}")
    return grid[pos]


@dataclass
class AStarAlgo:
    name: str = "A*"

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    target: Optional[Cell] = None
    open_list: List[Cell] = field(default_factory=list)
    open_members: Set[Cell] = field(default_factory=set)
    closed_set: Set[Cell] = field(default_factory=set)
    path: Optional[List[Cell]] = None
    popped_count: int = 0
    done: bool = False
    no_path: bool = False

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: CellRef, target: CellRef, *, reset_grid: bool = False) -> None:
        """Validate the inputs and seed the open list with start."""
        if grid is None:
            raise InvalidSearchInput("no grid supplied")
        s = _resolve(grid, start, "start")
        t = _resolve(grid, target, "target")
        if not s.walkable:
            raise InvalidSearchInput(f"start {s.position} is not walkable")
        self.grid, self.start, self.target = grid, s, t
        if reset_grid:
            grid.reset()
        self.reset()

    def reset(self) -> None:
        """Clear the engine's own bookkeeping. Cell scratch is the caller's job."""
        self.open_list.clear()
        self.open_members.clear()
        self.closed_set.clear()
        self.path = None
        self.popped_count = 0
        self.done = False
        self.no_path = False
        if self.start is None:
            return
        self.open_list.append(self.start)
        self.open_members.add(self.start)

    def release(self) -> None:
        """Drop every reference to the borrowed grid."""
        self.open_list.clear()
        self.open_members.clear()
        self.closed_set.clear()
        self.path = None
        self.grid = self.start = self.target = None

    # -------------------- helpers --------------------

    def _select(self) -> Cell:
        best = self.open_list[0]
        for cell in self.open_list[1:]:
            if cell.f_cost < best.f_cost or (
                cell.f_cost == best.f_cost and cell.h_cost < best.h_cost
            ):
                best = cell
        return best

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE expansion:
          - Pop the best open cell (f, then h, then open-list order).
          - If it is the target, retrace and finish.
          - Else relax its walkable, unclosed neighbors with edge cost 1.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(
                status="done",
                path=path_positions(self.path),
                metrics=self._metrics(),
            )

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.open_list:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._select()
        self.open_list.remove(u)
        self.open_members.discard(u)
        self.closed_set.add(u)
        self.popped_count += 1

        if u is self.target:
            self.done = True
            self.path = retrace_path(self.start, self.target)
            return StepResult(
                status="done",
                closed=[u.position],
                current=u.position,
                path=path_positions(self.path),
                metrics=self._metrics(),
            )

        opened_now: List[Coord] = []
        for v in self.grid.neighbors(u):
            if not v.walkable or v in self.closed_set:
                continue
            alt = u.g_cost + 1
            if v not in self.open_members or alt < v.g_cost:
                v.g_cost = alt
                v.h_cost = manhattan(v, self.target)
                v.parent = u
                if v not in self.open_members:
                    self.open_list.append(v)
                    self.open_members.add(v)
                    opened_now.append(v.position)

        return StepResult(
            status="running",
            opened=opened_now,
            closed=[u.position],
            current=u.position,
            metrics=self._metrics(),
        )

    def run(self) -> Optional[List[Cell]]:
        """Step until the search finishes; the path or None."""
        while True:
            res = self.step()
            if res.status == "done":
                return self.path
            if res.status in ("no_path", "idle"):
                return None

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_list),
            "closed_count": len(self.closed_set),
            "path_len": len(self.path) if self.path else 0,
            "total_cost": self.target.g_cost if self.done else None,
        }


def find_path(grid: Grid, start: CellRef, target: CellRef, *,
              reset_first: bool = False) -> Optional[List[Cell]]:
    """
    Shortest path from start (exclusive) to target (inclusive), or None.

    Raises InvalidSearchInput for a missing grid, out-of-bounds coordinates
    or cells from another grid. With reset_first=True the grid's scratch is
    cleared before searching, otherwise the caller must have reset it.
    """
    algo = AStarAlgo()
    algo.init(grid, start, target, reset_grid=reset_first)
    s, t = algo.start.position, algo.target.position
    try:
        path = algo.run()
        if path is None:
            logger.debug("no path %s -> %s after %d expansions", s, t, algo.popped_count)
        else:
            logger.debug("path %s -> %s: %d steps, %d expansions",
                         s, t, len(path), algo.popped_count)
        return path
    finally:
        algo.release()
