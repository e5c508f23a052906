#!/usr/bin/env python3
"""
Driver-owned search state: obstacles, arena, target and strategy.

Re-planning policy:
- any obstacle edit resets the arena;
- moving the target onto an already discovered cell is answered from the
  arena (no new search); anywhere else resets the arena.
"""

import logging
from typing import List, Optional

from gridpath.core.arena import SearchArena
from gridpath.core.obstacles import ObstacleSet
from gridpath.core.strategies import Strategy
from gridpath.core.types import Cell, CELL_SIZE, StepResult

logger = logging.getLogger(__name__)


class SearchSession:
    def __init__(self, start: Cell, target: Cell,
                 obstacles: Optional[ObstacleSet] = None,
                 strategy: Strategy = Strategy.ASTAR,
                 cell_size: int = CELL_SIZE):
        self.cell_size = cell_size
        self.obstacles = obstacles if obstacles is not None else ObstacleSet(cell_size=cell_size)
        self.arena = SearchArena(start, strategy=strategy, cell_size=cell_size)
        self.target = target
        self._check_root()

    # -------------------- commands --------------------

    def add_obstacle(self, pos: Cell) -> None:
        if self.obstacles.add(pos):
            self.reset()

    def remove_obstacle(self, pos: Cell) -> None:
        if self.obstacles.remove(pos):
            self.reset()

    def set_target(self, pos: Cell) -> None:
        self.target = pos
        if not self.arena.cached_lookup(pos):
            self.reset()

    def set_strategy(self, strategy: Strategy) -> None:
        self.arena.strategy = strategy
        self._check_root()

    def reset(self) -> None:
        self.arena.reset()
        self._check_root()

    def advance(self) -> bool:
        return self.arena.advance(self.obstacles, self.target)

    def run_to_completion(self, max_steps: Optional[int] = None) -> bool:
        return self.arena.run_to_completion(self.obstacles, self.target, max_steps=max_steps)

    def step(self) -> StepResult:
        """One visualized step: advance and report what it touched."""
        was_finished = self.arena.finished
        self.advance()
        arena = self.arena
        return StepResult(
            status=arena.status,
            opened=[] if was_finished else list(arena.opened),
            current=None if was_finished else arena.current,
            path=self.path() or None,
            metrics=arena.metrics(),
        )

    # -------------------- queries --------------------

    @property
    def strategy(self) -> Strategy:
        return self.arena.strategy

    @property
    def start(self) -> Cell:
        return self.arena.start

    def path(self) -> List[Cell]:
        if self.arena.target_id is None:
            return []
        return self.arena.reconstruct_path(self.arena.target_id)

    def _check_root(self) -> None:
        # the root is never "newly created", so a target on the start cell is
        # recognised here
        if self.arena.mark_if_target(0, self.target):
            logger.debug("target coincides with start %s", self.arena.start)
