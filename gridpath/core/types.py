# gridpath/core/types.py
#!/usr/bin/env python3
import math
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Iterator

Cell = Tuple[int, int]  # (x, y), multiples of the cell size

CELL_SIZE = 20

# up, right, down, left; expansion order is fixed
DIRECTIONS: Tuple[Cell, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def _round_half_away(v: float) -> int:
    return int(math.floor(abs(v) + 0.5) * (1 if v >= 0 else -1))


def snap(x: float, y: float, cell_size: int = CELL_SIZE) -> Cell:
    """Round pixel coordinates to the nearest grid-aligned position (halves away from zero)."""
    return (
        cell_size * _round_half_away(x / cell_size),
        cell_size * _round_half_away(y / cell_size),
    )


def neighbors4(c: Cell, cell_size: int = CELL_SIZE) -> Iterator[Cell]:
    x, y = c
    for dx, dy in DIRECTIONS:
        yield (x + dx * cell_size, y + dy * cell_size)


def manhattan(a: Cell, b: Cell) -> int:
    """Admissible and consistent for a 4-connected grid with uniform steps."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def adjacent(a: Cell, b: Cell, cell_size: int = CELL_SIZE) -> bool:
    return manhattan(a, b) == cell_size and (a[0] == b[0] or a[1] == b[1])


@dataclass
class Node:
    id: int
    position: Cell
    parent: Optional[int] = None   # id of the parent node, never a reference
    cost: int = 0
    priority: int = 0


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[int] = field(default_factory=list)
    current: Optional[int] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
