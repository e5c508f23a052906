#!/usr/bin/env python3
"""
Expansion strategies: one unit of work per call, for frame-by-frame animation.

Each step function has the same contract:
    step(arena, obstacles, target) -> bool
returning True when the target was found or the frontier is exhausted.

Shared expansion primitive:
- Neighbours in the fixed order up, right, down, left, one cell size away.
- Obstacles are skipped; an existing node is never duplicated.

Tie-breaking (all priority-driven strategies):
- The first minimum in frontier order wins; there is no secondary key.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict

from gridpath.core.obstacles import ObstacleSet
from gridpath.core.types import Cell, manhattan, neighbors4

if TYPE_CHECKING:
    from gridpath.core.arena import SearchArena


class Strategy(Enum):
    LAYER = "layer"
    GREEDY = "greedy"
    ASTAR = "astar"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, name: str) -> "Strategy":
        key = name.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"unknown strategy {name!r}; expected one of {sorted(_ALIASES)}")


_LABELS = {
    Strategy.LAYER: "Breadth-first",
    Strategy.GREEDY: "Greedy best-first",
    Strategy.ASTAR: "A*",
}

_ALIASES = {
    "layer": Strategy.LAYER,
    "bfs": Strategy.LAYER,
    "breadth-first": Strategy.LAYER,
    "greedy": Strategy.GREEDY,
    "best-first": Strategy.GREEDY,
    "astar": Strategy.ASTAR,
    "a*": Strategy.ASTAR,
}


# -------------------- breadth-first --------------------

def layer_step(arena: "SearchArena", obstacles: ObstacleSet, target: Cell) -> bool:
    """Consume the whole current layer and replace it with the next one."""
    if not arena.frontier:
        return True

    next_layer = []
    for i in arena.frontier:
        arena.current = i
        for pos in neighbors4(arena.nodes[i].position, arena.cell_size):
            if pos in obstacles or arena.node_exists(pos) is not None:
                continue
            hops = arena.path_length(i) + 1
            child = arena.new_child(i, pos, cost=hops, priority=hops)
            next_layer.append(child.id)
            if arena.mark_if_target(child.id, target):
                arena.frontier = next_layer
                return True

    arena.frontier = next_layer
    return not next_layer


# -------------------- greedy best-first --------------------

def greedy_step(arena: "SearchArena", obstacles: ObstacleSet, target: Cell) -> bool:
    """Pop the node closest to the target by heuristic alone and expand it."""
    if not arena.frontier:
        return True

    i = arena.pop_min()
    node = arena.nodes[i]
    for pos in neighbors4(node.position, arena.cell_size):
        if pos in obstacles or arena.node_exists(pos) is not None:
            continue
        child = arena.new_child(
            i, pos, cost=node.cost + arena.cell_size, priority=manhattan(pos, target)
        )
        arena.push(child.id)
        if arena.mark_if_target(child.id, target):
            return True
    return False


# -------------------- A* --------------------

def astar_step(arena: "SearchArena", obstacles: ObstacleSet, target: Cell) -> bool:
    """
    Pop the lowest cost + heuristic node and expand it.

    A neighbour that already exists is relaxed in place when the new cost is
    strictly lower: it takes the expanded node as parent and is re-queued.
    """
    if not arena.frontier:
        return True

    i = arena.pop_min()
    node = arena.nodes[i]
    for pos in neighbors4(node.position, arena.cell_size):
        if pos in obstacles:
            continue
        cost = node.cost + arena.cell_size
        priority = cost + manhattan(pos, target)

        existing = arena.node_exists(pos)
        if existing is None:
            touched = arena.new_child(i, pos, cost=cost, priority=priority)
        elif cost < existing.cost:
            touched = arena.relax(existing.id, i, cost=cost, priority=priority)
        else:
            continue

        arena.push(touched.id)
        if arena.mark_if_target(touched.id, target):
            return True
    return False


StepFn = Callable[["SearchArena", ObstacleSet, Cell], bool]

STEPPERS: Dict[Strategy, StepFn] = {
    Strategy.LAYER: layer_step,
    Strategy.GREEDY: greedy_step,
    Strategy.ASTAR: astar_step,
}
