"""
Tests for map loading and endpoint selection.
"""

import json
import random
from pathlib import Path

import pytest

from gridpath.core.astar import find_path, path_positions
from gridpath.core.grid import Grid
from gridpath.core.maps import list_maps, load_map, parse_map, random_endpoints

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"


class TestBundledMaps:
    def test_list_maps(self) -> None:
        maps = list_maps(MAP_DIR)
        assert list(maps) == ["01_open_board", "02_wall_gap", "03_maze"]

    def test_open_board(self) -> None:
        m = load_map(MAP_DIR / "01_open_board.json")
        assert m.name == "open_board"
        assert m.grid.shape == (8, 8)
        assert (m.start, m.goal) == ((0, 0), (7, 7))
        assert len(find_path(m.grid, m.start, m.goal)) == 14

    def test_wall_gap_goes_through_opening(self) -> None:
        m = load_map(MAP_DIR / "02_wall_gap.json")
        path = find_path(m.grid, m.start, m.goal)
        assert path is not None
        assert (4, 7) in path_positions(path)
        assert len(path) == 22

    def test_maze_is_solvable(self) -> None:
        m = load_map(MAP_DIR / "03_maze.json")
        path = find_path(m.grid, m.start, m.goal)
        assert path is not None
        assert path_positions(path)[-1] == (9, 9)
        assert all(c.walkable for c in path)

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert list_maps(tmp_path / "nope") == {}


class TestParseMap:
    def test_blocked_cells(self) -> None:
        m = parse_map({"rows": 2, "cols": 2, "cells": [[0, 1], [0, 0]]}, name="tiny")
        assert m.name == "tiny"
        assert m.grid.walkable_mask() == [[True, False], [True, True]]
        assert m.start is None and m.goal is None

    def test_size_mismatch(self) -> None:
        with pytest.raises(ValueError, match="size mismatch"):
            parse_map({"rows": 2, "cols": 2, "cells": [[0, 0]]})

    def test_endpoint_out_of_bounds(self) -> None:
        with pytest.raises(ValueError, match="out of bounds"):
            parse_map({"rows": 1, "cols": 2, "cells": [[0, 0]], "start": [0, 0], "goal": [0, 2]})

    def test_blocked_goal(self) -> None:
        data = {"rows": 1, "cols": 3, "cells": [[0, 1, 0]], "start": [0, 0], "goal": [0, 1]}
        with pytest.raises(ValueError, match=r"goal \(0, 1\) is blocked"):
            parse_map(data)

    def test_blocked_start(self) -> None:
        data = {"rows": 1, "cols": 3, "cells": [[1, 0, 0]], "start": [0, 0], "goal": [0, 2]}
        with pytest.raises(ValueError, match=r"start \(0, 0\) is blocked"):
            parse_map(data)

    @pytest.mark.parametrize("missing", ["rows", "cols", "cells"])
    def test_missing_field(self, missing: str) -> None:
        data = {"rows": 1, "cols": 2, "cells": [[0, 0]]}
        del data[missing]
        with pytest.raises(ValueError, match=f"missing {missing}"):
            parse_map(data)

    @pytest.mark.parametrize("data", [
        {"rows": "two", "cols": 2, "cells": [[0, 0]]},
        {"rows": 1, "cols": 2, "cells": 7},
        {"rows": 1, "cols": 2, "cells": ["00"]},
        {"rows": 1, "cols": 2, "cells": [[0, 0]], "start": 3},
        [1, 2],
    ])
    def test_invalid_field(self, data) -> None:
        with pytest.raises(ValueError, match="invalid|expected"):
            parse_map(data)

    def test_load_rejects_malformed_file(self, tmp_path: Path) -> None:
        p = tmp_path / "broken.json"
        p.write_text(json.dumps({"cols": 2, "cells": [[0, 0]]}))
        with pytest.raises(ValueError, match="'broken': missing rows"):
            load_map(p)

    def test_same_endpoints(self) -> None:
        with pytest.raises(ValueError, match="same cell"):
            parse_map({"rows": 1, "cols": 2, "cells": [[0, 0]], "start": [0, 1], "goal": [0, 1]})

    def test_load_uses_file_stem(self, tmp_path: Path) -> None:
        p = tmp_path / "corridor.json"
        p.write_text(json.dumps({"rows": 1, "cols": 3, "cells": [[0, 0, 0]], "start": [0, 0], "goal": [0, 2]}))
        m = load_map(p)
        assert m.name == "corridor"
        assert m.goal == (0, 2)


class TestRandomEndpoints:
    def test_distinct_and_walkable(self) -> None:
        grid = Grid.from_mask([[1, 0], [1, 1]])
        rng = random.Random(7)
        for _ in range(50):
            a, b = random_endpoints(grid, rng)
            assert a is not b
            assert a.walkable and b.walkable
            assert grid.contains(a) and grid.contains(b)

    def test_seeded_rng_repeats(self) -> None:
        grid = Grid.create(6, 6)
        a = random_endpoints(grid, random.Random(3))
        b = random_endpoints(grid, random.Random(3))
        assert [c.position for c in a] == [c.position for c in b]

    def test_needs_two_walkable_cells(self) -> None:
        with pytest.raises(ValueError):
            random_endpoints(Grid.create(1, 1))
        with pytest.raises(ValueError):
            random_endpoints(Grid.from_mask([[1, 0, 0]]))
