# src/core/generator.py
#!/usr/bin/env python3
import logging
import random
from typing import Optional

from src.core.maps import GridMap
from src.core.types import Cell, CostGrid

logger = logging.getLogger(__name__)


def validate_params(width: int, height: int, walkable_probability: float,
                    start: Cell, goal: Cell, max_cost: int = 1) -> None:
    """Reject settings a random grid can't be built from; messages are shown to users."""
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")
    if not 0.0 <= walkable_probability <= 1.0:
        raise ValueError("Traverse probability must be between 0 and 1.")
    if max_cost < 1:
        raise ValueError("Maximum cell cost must be at least 1.")
    for label, (x, y) in (("Start", start), ("Goal", goal)):
        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"{label} position must be within the grid.")


def random_grid(width: int, height: int, walkable_probability: float,
                start: Cell, goal: Cell, max_cost: int = 1,
                rng: Optional[random.Random] = None) -> CostGrid:
    """
    Each cell is walkable with ``walkable_probability`` and then costs a
    uniform draw from 1..max_cost. Start and goal are always walkable, cost 1.
    """
    validate_params(width, height, walkable_probability, start, goal, max_cost)
    rng = rng or random.Random()
    rows = []
    for _ in range(height):
        row = []
        for _ in range(width):
            if rng.random() < walkable_probability:
                row.append(rng.randint(1, max_cost))
            else:
                row.append(None)
        rows.append(row)
    for (x, y) in (start, goal):
        rows[y][x] = 1
    return CostGrid.from_rows(rows)


def random_map(width: int, height: int, walkable_probability: float,
               start: Optional[Cell] = None, goal: Optional[Cell] = None,
               max_cost: int = 1, seed: Optional[int] = None) -> GridMap:
    """Random grid bundled with endpoints; a missing goal is drawn at random."""
    rng = random.Random(seed)
    start = start if start is not None else (0, 0)
    if goal is None:
        goal = (rng.randrange(width), rng.randrange(height)) if width > 0 and height > 0 else (0, 0)
    grid = random_grid(width, height, walkable_probability, start, goal, max_cost, rng)
    logger.debug("generated %dx%d grid (p=%.2f, seed=%s) %s -> %s",
                 width, height, walkable_probability, seed, start, goal)
    return GridMap("random", grid, tuple(start), tuple(goal))
