"""
Tests for settings resolution and viewer session bootstrap.
"""

import pytest

from gridpath.app.config import DEFAULT_SIZE, DEFAULT_SPEED, MAP_DIR, Settings, resolve_settings


class TestResolveSettings:
    def test_defaults(self) -> None:
        s = resolve_settings([], {})
        assert s.size == DEFAULT_SIZE
        assert s.map_name is None
        assert s.seed is None
        assert s.steps_per_sec == DEFAULT_SPEED
        assert s.log_level == "INFO"

    def test_env(self) -> None:
        s = resolve_settings([], {"GRIDPATH_SIZE": "12", "GRIDPATH_SEED": "9", "GRIDPATH_LOG_LEVEL": "debug"})
        assert (s.size, s.seed, s.log_level) == (12, 9, "DEBUG")

    def test_args_override_env(self) -> None:
        s = resolve_settings(["--size=6", "--map=03_maze", "--speed=20", "stray"], {"GRIDPATH_SIZE": "12"})
        assert s.size == 6
        assert s.map_name == "03_maze"
        assert s.steps_per_sec == 20

    def test_unknown_args_ignored(self) -> None:
        s = resolve_settings(["--colour=red", "-v"], {})
        assert s.size == DEFAULT_SIZE

    @pytest.mark.parametrize("arg", ["--size=1", "--size=abc", "--speed=0", "--seed=-1", "--log-level=LOUD"])
    def test_invalid_values(self, arg: str) -> None:
        with pytest.raises(ValueError):
            resolve_settings([arg], {})


class TestBuildSession:
    def test_random_board(self) -> None:
        viewer = pytest.importorskip("gridpath.app.viewer")
        sess = viewer.build_session(Settings(size=5, seed=1))
        assert sess.grid.shape == (5, 5)
        assert sess.start is not sess.target

    def test_named_map(self) -> None:
        viewer = pytest.importorskip("gridpath.app.viewer")
        sess = viewer.build_session(Settings(map_name="02_wall_gap", map_dir=MAP_DIR))
        assert sess.name == "wall_gap"
        assert sess.start.position == (0, 0)

    def test_unknown_map(self) -> None:
        viewer = pytest.importorskip("gridpath.app.viewer")
        with pytest.raises(ValueError, match="unknown map"):
            viewer.build_session(Settings(map_name="nope"))
