# src/app/console.py
#!/usr/bin/env python3
"""
Console demo — redraws the grid after every improved cell.

    .  walkable      #  wall      t  traversed
    x  best path to the cell just improved      G  goal

Usage:
    python -m src.app.console [--map=maps/02_walled.json]
                              [--size=25x25] [--p=0.9] [--max-cost=1]
                              [--seed=N] [--delay=MS] [--no-color]
"""

# --- bootstrap import path so `from src...` works when run as a script ---
import sys
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

import logging
import signal
import threading
import time
from typing import Iterable, List, Optional, Set, TextIO

from src.app.settings import configure_logging, load_settings, resolve_option
from src.core.astar import find_path
from src.core.generator import random_map
from src.core.maps import GridMap, load_map
from src.core.types import Cancelled, Cell, CostGrid, Found, ProgressEvent

logger = logging.getLogger(__name__)

# ANSI colors
RESET  = "\033[0m"
YELLOW = "\033[33m"
GREEN  = "\033[32m"
RED    = "\033[31m"
WHITE  = "\033[37m"
CLEAR  = "\033[2J\033[H"

COLORS = {"G": YELLOW, "x": GREEN, "t": RED}


def render(grid: CostGrid, goal: Cell, traversed: Iterable[Cell] = (),
           path: Optional[Iterable[Cell]] = None, color: bool = True) -> str:
    """Text picture of the grid, one row per line, cells separated by a space."""
    display = [["." if c is not None else "#" for c in row] for row in grid.costs]
    for (x, y) in traversed:
        display[y][x] = "t"
    if path is not None:
        for (x, y) in path:
            display[y][x] = "x"
        display[goal[1]][goal[0]] = "G"

    lines = [f"Goal coordinates are {goal[0]}:{goal[1]}"]
    for row in display:
        if color:
            lines.append(" ".join(f"{COLORS.get(ch, WHITE)}{ch}{RESET}" for ch in row))
        else:
            lines.append(" ".join(row))
    return "\n".join(lines)


class ConsoleAnimator:
    """Progress observer that repaints the whole grid for each event."""

    def __init__(self, gm: GridMap, delay_ms: int = 1, color: bool = True,
                 out: Optional[TextIO] = None):
        self.gm = gm
        self.delay = delay_ms / 1000.0
        self.color = color
        self.out = out or sys.stdout
        self.traversed: List[Cell] = []
        self._seen: Set[Cell] = set()
        self.frames = 0

    def __call__(self, event: ProgressEvent) -> None:
        if event.cell not in self._seen:
            self._seen.add(event.cell)
            self.traversed.append(event.cell)
        self.draw(event.path)
        if self.delay > 0:
            time.sleep(self.delay)

    def draw(self, path: Optional[Iterable[Cell]]) -> None:
        if self.color:
            self.out.write(CLEAR)
        self.out.write(render(self.gm.grid, self.gm.goal, self.traversed, path, self.color))
        self.out.write("\n")
        self.out.flush()
        self.frames += 1


def _parse_size(text: str) -> tuple:
    w, _, h = text.lower().partition("x")
    return int(w), int(h or w)


def build_map(argv: List[str], seed: Optional[int]) -> GridMap:
    map_file = resolve_option("map", None, argv)
    if map_file:
        return load_map(map_file)
    width, height = _parse_size(resolve_option("size", None, argv) or "25x25")
    p = float(resolve_option("p", None, argv) or 0.9)
    max_cost = int(resolve_option("max-cost", None, argv) or 1)
    return random_map(width, height, p, start=(0, 0), max_cost=max_cost, seed=seed)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings(argv)
    configure_logging(settings)
    color = "--no-color" not in argv

    try:
        gm = build_map(argv, settings.seed)
    except (OSError, ValueError, KeyError) as ex:
        logger.error("Failed to build grid: %s", ex)
        return 2

    animator = ConsoleAnimator(gm, settings.delay_ms, color)
    # Ctrl+C stops the search between expansions; handlers only install on the main thread
    cancel = threading.Event()
    on_main = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGINT, lambda *_: cancel.set()) if on_main else None
    try:
        result = find_path(gm.grid, gm.start, gm.goal, observer=animator, cancel=cancel)
    finally:
        if on_main:
            signal.signal(signal.SIGINT, previous)
    if isinstance(result, Found):
        animator.draw(result.path)
        print(f"Path found: {len(result.path)} cells, total cost {result.total_cost}")
        return 0
    if isinstance(result, Cancelled):
        print("Search cancelled")
        return 1
    print("No path found")
    return 1


if __name__ == "__main__":
    sys.exit(main())
