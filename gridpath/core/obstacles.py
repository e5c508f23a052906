#!/usr/bin/env python3
"""Blocked grid cells, consulted as a predicate during node expansion."""

from typing import Iterable, Iterator, Set

from gridpath.core.types import Cell, CELL_SIZE


class ObstacleSet:
    def __init__(self, cells: Iterable[Cell] = (), cell_size: int = CELL_SIZE):
        self.cell_size = cell_size
        self._cells: Set[Cell] = set(cells)

    def add(self, pos: Cell) -> bool:
        """Insert ``pos``; returns False when it was already blocked."""
        if pos in self._cells:
            return False
        self._cells.add(pos)
        return True

    def remove(self, pos: Cell) -> bool:
        """Delete ``pos``; returns False when it was not blocked."""
        if pos not in self._cells:
            return False
        self._cells.discard(pos)
        return True

    def contains(self, pos: Cell) -> bool:
        return pos in self._cells

    def clear(self) -> None:
        self._cells.clear()

    def add_border(self, width: int, height: int) -> int:
        """Wall in a ``width`` x ``height`` pixel area one cell outside its edges.

        Returns the number of cells that were newly blocked.
        """
        cs = self.cell_size
        right = cs * (width // cs) + cs
        bottom = cs * (height // cs) + cs
        added = 0
        for x in range(-cs, right + 1, cs):
            added += self.add((x, -cs))
            added += self.add((x, bottom))
        for y in range(0, bottom, cs):
            added += self.add((-cs, y))
            added += self.add((right, y))
        return added

    def __contains__(self, pos: object) -> bool:
        return pos in self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)
