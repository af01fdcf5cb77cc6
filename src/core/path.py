# src/core/path.py
#!/usr/bin/env python3
from typing import List, Sequence

from src.core.search_state import SearchState
from src.core.types import Cell, CostGrid


def reconstruct(state: SearchState, end: Cell) -> List[Cell]:
    """Follow parent links back from ``end``; empty if ``end`` was never reached."""
    if not state.reached(end):
        return []
    path: List[Cell] = []
    cur = end
    while cur is not None:
        path.append(cur)
        cur = state.parent(cur)
    path.reverse()
    return path


def path_cost(grid: CostGrid, path: Sequence[Cell]) -> int:
    """Sum of entry costs along ``path``; the first cell is free."""
    return sum(grid.cost_of(x, y) for (x, y) in path[1:])


def is_adjacent(a: Cell, b: Cell) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
