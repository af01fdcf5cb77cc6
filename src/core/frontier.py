# src/core/frontier.py
#!/usr/bin/env python3
"""
Open set for A*.

Heap entries are (f, h, seq, cell): lower f, then lower h, then the cell that
entered the open set first. ``seq`` is assigned on admission and kept when an
open cell's cost improves, so an improvement never changes a cell's place
among equal (f, h) ties. Improved cells get a fresh heap entry; the old one
goes stale and is skipped on pop.
"""

import heapq
from typing import Dict, Iterator, List, Optional, Tuple

from src.core.search_state import SearchState
from src.core.types import Cell

_Entry = Tuple[float, int, int, Cell]


class Frontier:
    def __init__(self, state: SearchState):
        self._state = state
        self._heap: List[_Entry] = []
        self._live: Dict[Cell, _Entry] = {}
        self._seq = 0

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._live

    def contains(self, cell: Cell) -> bool:
        return cell in self._live

    def is_empty(self) -> bool:
        return not self._live

    def cells(self) -> Iterator[Cell]:
        return iter(self._live)

    def insert_or_improve(self, cell: Cell, g: int, h: int, parent: Optional[Cell]) -> bool:
        """
        Record (g, h, parent) for ``cell`` and (re)admit it.

        Applies only when ``g`` beats the cell's best known cost or the cell is
        not currently open. Returns whether anything changed.
        """
        if not (g < self._state.g_cost(cell) or cell not in self._live):
            return False
        self._state.update(cell, g, h, parent)
        old = self._live.get(cell)
        if old is None:
            self._seq += 1
            seq = self._seq
        else:
            seq = old[2]
        entry = (g + h, h, seq, cell)
        self._live[cell] = entry
        heapq.heappush(self._heap, entry)
        return True

    def pop_best(self) -> Cell:
        while self._heap:
            entry = heapq.heappop(self._heap)
            cell = entry[3]
            if self._live.get(cell) == entry:
                del self._live[cell]
                return cell
        raise IndexError("pop_best from an empty frontier")
