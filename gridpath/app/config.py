# gridpath/app/config.py
#!/usr/bin/env python3
"""
Viewer settings.

Resolution order (later wins):
- defaults below
- ENV:  GRIDPATH_SIZE, GRIDPATH_MAP, GRIDPATH_SEED, GRIDPATH_SPEED, GRIDPATH_LOG_LEVEL
- CLI:  --size=N --map=NAME --seed=N --speed=N --log-level=LEVEL
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

MAP_DIR = Path(__file__).resolve().parents[2] / "maps"

DEFAULT_SIZE = 10
MIN_SIZE = 2
MAX_SIZE = 64
DEFAULT_SPEED = 8     # expansions per second
MAX_SPEED = 60

_KEYS = ("size", "map", "seed", "speed", "log-level")


@dataclass
class Settings:
    size: int = DEFAULT_SIZE
    map_name: Optional[str] = None   # None -> random board of size x size
    seed: Optional[int] = None
    steps_per_sec: int = DEFAULT_SPEED
    log_level: str = "INFO"
    map_dir: Path = MAP_DIR


def _int(key: str, raw: str, lo: int, hi: int) -> int:
    try:
        v = int(raw)
    except ValueError:
        raise ValueError(f"{key}: expected an integer, got {raw!r}")
    if not lo <= v <= hi:
        raise ValueError(f"{key}: {v} not in [{lo}, {hi}]")
    return v


def _collect(argv: Sequence[str], env: Mapping[str, str]) -> dict:
    raw = {}
    for key in _KEYS:
        var = "GRIDPATH_" + key.upper().replace("-", "_")
        if env.get(var):
            raw[key] = env[var]
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key in _KEYS:
            raw[key] = value
    return raw


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     env: Optional[Mapping[str, str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    env = os.environ if env is None else env
    raw = _collect(argv, env)

    s = Settings()
    if "size" in raw:
        s.size = _int("size", raw["size"], MIN_SIZE, MAX_SIZE)
    if "map" in raw:
        s.map_name = raw["map"].strip() or None
    if "seed" in raw:
        s.seed = _int("seed", raw["seed"], 0, 2**32 - 1)
    if "speed" in raw:
        s.steps_per_sec = _int("speed", raw["speed"], 1, MAX_SPEED)
    if "log-level" in raw:
        level = raw["log-level"].upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log-level: unknown level {raw['log-level']!r}")
        s.log_level = level
    return s
