# src/core/search_state.py
#!/usr/bin/env python3
"""
Per-search bookkeeping, one slot per grid cell.

Slots are indexed by ``y * width + x``; parents are stored as coordinates so
nothing here holds references to other slots. A fresh SearchState is made
for every search and thrown away when it ends.
"""

from math import inf
from typing import List, Optional

from src.core.types import Cell


class SearchState:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        n = width * height
        self._g: List[float] = [inf] * n
        self._h: List[int] = [0] * n
        self._parent: List[Optional[Cell]] = [None] * n
        self._closed: List[bool] = [False] * n
        self._closed_count = 0

    def _idx(self, c: Cell) -> int:
        x, y = c
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell {c} outside {self.width}x{self.height} search state")
        return y * self.width + x

    # -------------------- costs --------------------

    def g_cost(self, c: Cell) -> float:
        """Best known cost from start; ``inf`` until reached."""
        return self._g[self._idx(c)]

    def h_cost(self, c: Cell) -> int:
        return self._h[self._idx(c)]

    def f_cost(self, c: Cell) -> float:
        i = self._idx(c)
        return self._g[i] + self._h[i]

    def parent(self, c: Cell) -> Optional[Cell]:
        return self._parent[self._idx(c)]

    def reached(self, c: Cell) -> bool:
        return self._g[self._idx(c)] != inf

    def update(self, c: Cell, g: int, h: int, parent: Optional[Cell]) -> None:
        i = self._idx(c)
        self._g[i] = g
        self._h[i] = h
        self._parent[i] = parent

    # -------------------- closed set --------------------

    def close(self, c: Cell) -> None:
        i = self._idx(c)
        if not self._closed[i]:
            self._closed[i] = True
            self._closed_count += 1

    def reopen(self, c: Cell) -> None:
        i = self._idx(c)
        if self._closed[i]:
            self._closed[i] = False
            self._closed_count -= 1

    def is_closed(self, c: Cell) -> bool:
        return self._closed[self._idx(c)]

    def closed_count(self) -> int:
        return self._closed_count
