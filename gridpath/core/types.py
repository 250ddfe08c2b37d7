# gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any

Coord = Tuple[int, int]  # (row, col)


class InvalidSearchInput(ValueError):
    """Raised when a search is called with a grid/start/target it cannot use."""


@dataclass(eq=False)
class Cell:
    position: Coord
    walkable: bool = True

    # per-search scratch, cleared by Grid.reset()
    g_cost: int = 0
    h_cost: int = 0
    parent: Optional["Cell"] = None

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost

    @property
    def row(self) -> int:
        return self.position[0]

    @property
    def col(self) -> int:
        return self.position[1]

    def clear(self) -> None:
        self.g_cost = 0
        self.h_cost = 0
        self.parent = None

    def __repr__(self) -> str:
        flag = "" if self.walkable else ", blocked"
        return f"Cell({self.position}{flag})"


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
