# src/core/astar.py
#!/usr/bin/env python3
"""
A* on a 4-connected cost grid — one expansion per step() for animation,
or run() / find_path() to search to completion.

Algorithm API used by the viewer:
- init(grid, start, goal) - reset() - step() -> StepResult

Heuristic:
- Manhattan distance to the goal.

Expansion:
- Neighbors are visited in the fixed order +y, +x, -y, -x.
- Closed cells are final unless ``reopen_closed`` is set.
- Every time a neighbor's cost improves the observer receives a
  ProgressEvent with the current best path to that neighbor.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from src.core.frontier import Frontier
from src.core.path import reconstruct
from src.core.search_state import SearchState
from src.core.types import (
    Cancelled,
    Cell,
    CostGrid,
    Found,
    NotFound,
    PathResult,
    ProgressEvent,
    ProgressObserver,
    SearchStatus,
    StepResult,
)

logger = logging.getLogger(__name__)

# +y, +x, -y, -x
NEIGHBOR_OFFSETS = ((0, 1), (1, 0), (0, -1), (-1, 0))


def heuristic(a: Cell, b: Cell) -> int:
    """Manhattan distance; admissible while every entered cell costs at least 1."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _ignore_progress(_event: ProgressEvent) -> None:
    pass


@dataclass
class AStarAlgo:
    name: str = "A*"
    reopen_closed: bool = False   # closed set is final unless set
    observer: ProgressObserver = _ignore_progress

    # Internal state
    grid: Optional[CostGrid] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    state: Optional[SearchState] = None
    frontier: Optional[Frontier] = None
    status: SearchStatus = SearchStatus.IDLE
    popped_count: int = 0
    final_path: List[Cell] = field(default_factory=list)

    # -------------------- lifecycle --------------------

    def init(self, grid: CostGrid, start: Cell, goal: Cell) -> None:
        """Bind to a grid and endpoints, then reset."""
        for label, c in (("start", start), ("goal", goal)):
            if not grid.in_bounds(*c):
                raise IndexError(f"{label} {c} outside {grid.width}x{grid.height} grid")
        self.grid = grid
        self.start = tuple(start)
        self.goal = tuple(goal)
        self.reset()

    def reset(self) -> None:
        """Drop all search state and seed the frontier with the start cell."""
        if self.grid is None:
            return
        self.state = SearchState(self.grid.width, self.grid.height)
        self.frontier = Frontier(self.state)
        self.status = SearchStatus.RUNNING
        self.popped_count = 0
        self.final_path = []
        self.frontier.insert_or_improve(self.start, 0, heuristic(self.start, self.goal), None)
        logger.debug("%s: search %s -> %s on %dx%d grid", self.name, self.start, self.goal,
                     self.grid.width, self.grid.height)

    def cancel(self) -> None:
        if self.status == SearchStatus.RUNNING:
            self.status = SearchStatus.CANCELLED
            logger.info("%s: search cancelled after %d expansions", self.name, self.popped_count)

    # -------------------- helpers --------------------

    def _neighbors4(self, c: Cell) -> List[Cell]:
        x, y = c
        out: List[Cell] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.grid.in_bounds(nx, ny) and self.grid.is_walkable(nx, ny):
                out.append((nx, ny))
        return out

    def total_cost(self) -> Optional[int]:
        if self.status != SearchStatus.SUCCEEDED:
            return None
        return int(self.state.g_cost(self.goal))

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* iteration:
          - Pop the best (f, h) cell; fail if the frontier is empty.
          - If it is the goal, reconstruct and finish.
          - Else close it and relax its neighbors.
        """
        if self.grid is None:
            return StepResult(status=SearchStatus.IDLE, metrics={"algo": self.name})

        if self.status.finished:
            return StepResult(status=self.status,
                              path=list(self.final_path) if self.final_path else None,
                              metrics=self._metrics())

        if self.frontier.is_empty():
            self.status = SearchStatus.FAILED
            logger.info("%s: no path from %s to %s (%d expansions)",
                        self.name, self.start, self.goal, self.popped_count)
            return StepResult(status=self.status, metrics=self._metrics())

        u = self.frontier.pop_best()
        self.popped_count += 1

        if u == self.goal:
            self.status = SearchStatus.SUCCEEDED
            self.final_path = reconstruct(self.state, u)
            logger.info("%s: path found, %d cells, cost %d (%d expansions)",
                        self.name, len(self.final_path), self.total_cost(), self.popped_count)
            return StepResult(status=self.status, current=u, path=list(self.final_path),
                              metrics=self._metrics())

        self.state.close(u)
        g_u = int(self.state.g_cost(u))

        opened_now: List[Cell] = []
        for v in self._neighbors4(u):
            alt = g_u + self.grid.cost_of(*v)
            if self.state.is_closed(v):
                if not (self.reopen_closed and alt < self.state.g_cost(v)):
                    continue
                self.state.reopen(v)
            was_open = v in self.frontier
            if not self.frontier.insert_or_improve(v, alt, heuristic(v, self.goal), u):
                continue
            if not was_open:
                opened_now.append(v)
            self.observer(ProgressEvent(cell=v, path=tuple(reconstruct(self.state, v)),
                                        g_cost=alt, settled=u))

        return StepResult(status=self.status, opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run(self, cancel: Optional[threading.Event] = None) -> PathResult:
        """Step until the search terminates; ``cancel`` is checked before every iteration."""
        while True:
            if cancel is not None and cancel.is_set():
                self.cancel()
            if self.status == SearchStatus.CANCELLED:
                return Cancelled()
            res = self.step()
            if res.status == SearchStatus.SUCCEEDED:
                return Found(tuple(self.final_path), self.total_cost())
            if res.status == SearchStatus.FAILED:
                return NotFound()
            if res.status == SearchStatus.IDLE:
                raise RuntimeError("run() called before init()")

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.frontier) if self.frontier else 0,
            "closed_count": self.state.closed_count() if self.state else 0,
            "path_len": len(self.final_path),
            "total_cost": self.total_cost(),
        }


def find_path(grid: CostGrid, start: Cell, goal: Cell,
              observer: Optional[ProgressObserver] = None,
              cancel: Optional[threading.Event] = None,
              reopen_closed: bool = False) -> PathResult:
    """Search ``grid`` from ``start`` to ``goal`` and return Found, NotFound or Cancelled."""
    algo = AStarAlgo(reopen_closed=reopen_closed, observer=observer or _ignore_progress)
    algo.init(grid, start, goal)
    return algo.run(cancel)
