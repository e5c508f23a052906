#!/usr/bin/env python3
"""
Viewer configuration and map loading.

Resolution order: defaults, then GRIDPATH_* environment variables, then
``--key=value`` command-line flags.

    GRIDPATH_STRATEGY / --strategy=     layer | greedy | astar
    GRIDPATH_CELL_SIZE / --cell-size=   pixels per cell
    GRIDPATH_WIDTH, GRIDPATH_HEIGHT     window size (pixels)
    GRIDPATH_SPEED / --speed=           steps per second in visualized mode
    GRIDPATH_INSTANT / --instant        start in instant mode
    GRIDPATH_MAP / --map=               JSON map file (walls, start, goal)
    GRIDPATH_LOG_LEVEL / --log-level=   logging level name
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from gridpath.core.obstacles import ObstacleSet
from gridpath.core.strategies import Strategy
from gridpath.core.types import Cell, CELL_SIZE

MAP_DIR = Path(__file__).resolve().parents[2] / "maps"

_TRUE = ("1", "true", "yes", "on")


@dataclass
class ViewerConfig:
    strategy: Strategy = Strategy.ASTAR
    cell_size: int = CELL_SIZE
    width: int = 1280
    height: int = 720
    steps_per_sec: int = 30
    instant: bool = False
    visualize: bool = True
    map_path: Optional[Path] = None
    log_level: str = "INFO"


@dataclass
class GridMap:
    """A wall layout in pixel space, ready to seed a search session."""
    width: int
    height: int
    start: Cell
    goal: Cell
    walls: List[Cell] = field(default_factory=list)
    cell_size: int = CELL_SIZE

    def obstacles(self) -> ObstacleSet:
        obs = ObstacleSet(self.walls, cell_size=self.cell_size)
        obs.add_border(self.width, self.height)
        return obs


def _parse_flags(argv: Sequence[str]) -> Dict[str, str]:
    flags: Dict[str, str] = {}
    for arg in argv:
        if not arg.startswith("--"):
            continue
        key, sep, value = arg[2:].partition("=")
        flags[key.replace("-", "_")] = value if sep else "1"
    return flags


def _int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    raw: Dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("GRIDPATH_"):
            raw[key[len("GRIDPATH_"):].lower()] = value
    raw.update(_parse_flags(argv))

    cfg = ViewerConfig()
    if "strategy" in raw:
        cfg.strategy = Strategy.parse(raw["strategy"])
    if "cell_size" in raw:
        cfg.cell_size = _int("cell_size", raw["cell_size"])
    if "width" in raw:
        cfg.width = _int("width", raw["width"])
    if "height" in raw:
        cfg.height = _int("height", raw["height"])
    if "speed" in raw:
        cfg.steps_per_sec = max(1, _int("speed", raw["speed"]))
    if "instant" in raw:
        cfg.instant = raw["instant"].lower() in _TRUE
    if "visualize" in raw:
        cfg.visualize = raw["visualize"].lower() in _TRUE
    if raw.get("map"):
        cfg.map_path = Path(raw["map"])
    if "log_level" in raw:
        cfg.log_level = raw["log_level"].upper()

    if cfg.cell_size <= 0:
        raise ValueError("cell_size must be positive")
    return cfg


def load_map(path: Path, cell_size: int = CELL_SIZE) -> GridMap:
    """Read a JSON map: ``cells`` is [row][col] with 1 marking a wall."""
    with open(path, "r") as f:
        data = json.load(f)
    try:
        width = int(data["width"])
        height = int(data["height"])
        cells = data["cells"]
        sx, sy = (int(v) for v in data["start"])
        gx, gy = (int(v) for v in data["goal"])
    except KeyError as ex:
        raise ValueError(f"{path}: missing key {ex}") from None
    except (TypeError, ValueError) as ex:
        raise ValueError(f"{path}: malformed map ({ex})") from None

    if (not isinstance(cells, list) or len(cells) != height
            or any(not isinstance(r, list) or len(r) != width for r in cells)):
        raise ValueError(f"{path}: cells size mismatch")
    if not (0 <= sx < width and 0 <= sy < height):
        raise ValueError(f"{path}: start out of bounds")
    if not (0 <= gx < width and 0 <= gy < height):
        raise ValueError(f"{path}: goal out of bounds")

    walls = [
        (col * cell_size, row * cell_size)
        for row, line in enumerate(cells)
        for col, v in enumerate(line)
        if v == 1
    ]
    return GridMap(
        width=(width - 1) * cell_size,
        height=(height - 1) * cell_size,
        start=(sx * cell_size, sy * cell_size),
        goal=(gx * cell_size, gy * cell_size),
        walls=walls,
        cell_size=cell_size,
    )


def bundled_maps() -> Dict[str, Path]:
    return {p.stem: p for p in sorted(MAP_DIR.glob("*.json"))}
