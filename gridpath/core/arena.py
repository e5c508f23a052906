#!/usr/bin/env python3
"""
Search arena: every discovered node, the frontier, and the active strategy.

Nodes live in an append-only list and are addressed by integer id; ``parent``
is an id, so growing the list never invalidates a reference.

Lifecycle:
- ``SearchArena(start)`` seeds a root node (id 0) and the frontier ``[0]``.
- ``advance()`` runs one step of the strategy; ``run_to_completion()`` loops it.
- ``reset()`` drops everything except a fresh root at ``start``.
"""

import logging
from typing import Any, Dict, List, Optional

from gridpath.core.obstacles import ObstacleSet
from gridpath.core.strategies import STEPPERS, Strategy
from gridpath.core.types import Cell, CELL_SIZE, Node

logger = logging.getLogger(__name__)


class SearchArena:
    def __init__(self, start: Cell, strategy: Strategy = Strategy.ASTAR,
                 cell_size: int = CELL_SIZE):
        self.start = start
        self.cell_size = cell_size
        self._strategy = strategy

        self.nodes: List[Node] = []
        self.frontier: List[int] = []
        self.target_id: Optional[int] = None
        self.exhausted = False
        self.greatest_cost = 0
        self.steps = 0

        # what the last step touched, for renderers
        self.current: Optional[int] = None
        self.opened: List[int] = []

        self.reset()

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Discard all nodes and reinstate the root at ``start``."""
        self.nodes = [Node(id=0, position=self.start)]
        self.frontier = [0]
        self.target_id = None
        self.exhausted = False
        self.greatest_cost = 0
        self.steps = 0
        self.current = None
        self.opened = []
        logger.debug("arena reset at %s (%s)", self.start, self._strategy.value)

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @strategy.setter
    def strategy(self, strategy: Strategy) -> None:
        if strategy is self._strategy:
            return
        logger.debug("strategy %s -> %s", self._strategy.value, strategy.value)
        self._strategy = strategy
        self.reset()

    # -------------------- node bookkeeping --------------------

    def new_child(self, parent: int, pos: Cell, cost: int, priority: int) -> Node:
        node = Node(id=len(self.nodes), position=pos, parent=parent,
                    cost=cost, priority=priority)
        self.nodes.append(node)
        self.opened.append(node.id)
        if cost > self.greatest_cost:
            self.greatest_cost = cost
        return node

    def relax(self, node_id: int, parent: int, cost: int, priority: int) -> Node:
        """Lower a node's cost in place and re-parent it; costs never increase."""
        node = self.nodes[node_id]
        if cost >= node.cost:
            return node
        node.cost = cost
        node.priority = priority
        node.parent = parent
        self.opened.append(node_id)
        return node

    def push(self, node_id: int) -> None:
        if node_id not in self.frontier:
            self.frontier.append(node_id)

    def pop_min(self) -> int:
        """Remove and return the lowest-priority frontier id (first one on ties)."""
        best = min(self.frontier, key=lambda i: self.nodes[i].priority)
        self.frontier.remove(best)
        self.current = best
        return best

    def node_exists(self, pos: Cell) -> Optional[Node]:
        for node in self.nodes:
            if node.position == pos:
                return node
        return None

    def path_length(self, node_id: int) -> int:
        hops = 0
        parent = self.nodes[node_id].parent
        while parent is not None:
            hops += 1
            parent = self.nodes[parent].parent
        return hops

    def reconstruct_path(self, node_id: int) -> List[Cell]:
        """Positions from the root to ``node_id``, following ``parent`` ids."""
        path: List[Cell] = []
        cur: Optional[int] = node_id
        while cur is not None:
            node = self.nodes[cur]
            path.append(node.position)
            cur = node.parent
        path.reverse()
        return path

    def mark_if_target(self, node_id: int, target: Cell) -> bool:
        if self.nodes[node_id].position != target:
            return False
        if self.target_id is None:
            self.target_id = node_id
            logger.info("target %s found after %d nodes", target, len(self.nodes))
        return True

    def cached_lookup(self, target: Cell) -> bool:
        """Satisfy a moved target from an already discovered node, if there is one."""
        node = self.node_exists(target)
        if node is None:
            return False
        self.target_id = node.id
        logger.debug("target %s already discovered as node %d", target, node.id)
        return True

    # -------------------- stepping --------------------

    @property
    def finished(self) -> bool:
        return self.target_id is not None or self.exhausted

    @property
    def status(self) -> str:
        if self.target_id is not None:
            return "done"
        if self.exhausted:
            return "no_path"
        return "running"

    def advance(self, obstacles: ObstacleSet, target: Cell) -> bool:
        """Run one unit of work; True once the target is found or the frontier is empty."""
        if self.finished:
            return True

        self.current = None
        self.opened = []
        self.steps += 1
        done = STEPPERS[self._strategy](self, obstacles, target)
        if done and self.target_id is None:
            self.exhausted = True
            logger.info("frontier exhausted after %d nodes; %s unreachable",
                        len(self.nodes), target)
        return done

    def run_to_completion(self, obstacles: ObstacleSet, target: Cell,
                          max_steps: Optional[int] = None) -> bool:
        """Call ``advance`` until it reports completion or ``max_steps`` runs out."""
        taken = 0
        while not self.advance(obstacles, target):
            taken += 1
            if max_steps is not None and taken >= max_steps:
                return False
        return True

    # -------------------- metrics --------------------

    def metrics(self) -> Dict[str, Any]:
        path_len = 0
        if self.target_id is not None:
            path_len = self.path_length(self.target_id) + 1
        return {
            "algo": self._strategy.label,
            "nodes": len(self.nodes),
            "open_size": len(self.frontier),
            "path_len": path_len,
            "steps": self.steps,
        }

    def __len__(self) -> int:
        return len(self.nodes)
