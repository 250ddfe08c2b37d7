# gridpath/core/grid.py
#!/usr/bin/env python3
"""
Grid model: a fixed rows x cols block of Cells.

Neighbors are enumerated in a fixed order (up, right, down, left). The A*
engine relies on that order for reproducible tie-breaks, so do not reorder
NEIGHBOR_OFFSETS.
"""

from typing import Iterator, List, Sequence, Tuple

from gridpath.core.types import Cell, Coord

NEIGHBOR_OFFSETS: Tuple[Coord, ...] = (
    (-1, 0),  # up
    (0, 1),   # right
    (1, 0),   # down
    (0, -1),  # left
)


class Grid:
    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._cells: List[List[Cell]] = [
            [Cell(position=(r, c)) for c in range(cols)] for r in range(rows)
        ]

    # -------------------- construction --------------------

    @classmethod
    def create(cls, rows: int, cols: int) -> "Grid":
        """All cells walkable, scratch fields zeroed."""
        return cls(rows, cols)

    @classmethod
    def from_mask(cls, mask: Sequence[Sequence[object]]) -> "Grid":
        """Build from rows of walkability flags (truthy = walkable)."""
        if not mask or not mask[0]:
            raise ValueError("walkability mask is empty")
        cols = len(mask[0])
        if any(len(row) != cols for row in mask):
            raise ValueError("walkability mask rows differ in length")
        grid = cls(len(mask), cols)
        for r, row in enumerate(mask):
            for c, flag in enumerate(row):
                grid._cells[r][c].walkable = bool(flag)
        return grid

    # -------------------- addressing --------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def in_bounds(self, pos: Coord) -> bool:
        r, c = pos
        return 0 <= r < self.rows and 0 <= c < self.cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds((row, col)):
            raise IndexError(f"({row}, {col}) outside {self.rows}x{self.cols} grid")
        return self._cells[row][col]

    def __getitem__(self, pos: Coord) -> Cell:
        return self.cell(*pos)

    def contains(self, cell: Cell) -> bool:
        """True only for the very Cell object this grid holds at that position."""
        return self.in_bounds(cell.position) and self._cells[cell.row][cell.col] is cell

    def __iter__(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def __len__(self) -> int:
        return self.rows * self.cols

    # -------------------- queries --------------------

    def neighbors(self, cell: Cell) -> List[Cell]:
        """In-bounds cells at up, right, down, left (walkable or not)."""
        r, c = cell.position
        out: List[Cell] = []
        for dr, dc in NEIGHBOR_OFFSETS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols:
                out.append(self._cells[nr][nc])
        return out

    def walkable_mask(self) -> List[List[bool]]:
        return [[cell.walkable for cell in row] for row in self._cells]

    # -------------------- mutation --------------------

    def set_walkable(self, pos: Coord, walkable: bool) -> None:
        self[pos].walkable = bool(walkable)

    def reset(self) -> None:
        """Clear g/h costs and parent links; walkability is left as is."""
        for cell in self:
            cell.clear()

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols})"
