# src/core/maps.py
#!/usr/bin/env python3
"""
JSON map files.

    {
      "width": 5, "height": 4,
      "start": [0, 0], "goal": [4, 3],
      "cells": [[0, 0, 1, 0, 0], ...],      # terrain codes, [row][col]
      "weights": {"1": "BLOCK", "2": 5}     # optional code -> cost | "BLOCK"
    }

Code 1 is a wall unless ``weights`` says otherwise; any other code without
a weight costs 1. Start and goal must sit on walkable cells.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from src.core.types import Cell, CostGrid

logger = logging.getLogger(__name__)

BLOCK = "BLOCK"
WALL_CODE = 1


@dataclass(frozen=True)
class GridMap:
    name: str
    grid: CostGrid
    start: Cell
    goal: Cell


def _code_cost(code: int, weights: Dict[str, Any]) -> Optional[int]:
    w = weights.get(str(code))
    if w is None:
        return None if code == WALL_CODE else 1
    if w == BLOCK:
        return None
    cost = int(w)
    if cost < 0:
        raise ValueError(f"negative weight {w!r} for terrain code {code}")
    return cost


def grid_from_terrain(cells: Sequence[Sequence[int]], weights: Optional[Dict[str, Any]] = None) -> CostGrid:
    weights = weights or {}
    return CostGrid.from_rows([[_code_cost(v, weights) for v in row] for row in cells])


def check_endpoints(grid: CostGrid, start: Cell, goal: Cell) -> None:
    """Raise ValueError unless start and goal are inside ``grid`` and walkable."""
    for label, c in (("start", start), ("goal", goal)):
        x, y = c
        if not grid.in_bounds(x, y):
            raise ValueError(f"{label} {tuple(c)} out of bounds")
        if not grid.is_walkable(x, y):
            raise ValueError(f"{label} {tuple(c)} is not walkable")


def parse_map(data: Dict[str, Any], name: str = "custom") -> GridMap:
    width = int(data["width"])
    height = int(data["height"])
    start = tuple(data["start"])
    goal = tuple(data["goal"])
    cells = data["cells"]
    if len(cells) != height or any(len(r) != width for r in cells):
        raise ValueError("cells size mismatch")
    grid = grid_from_terrain(cells, data.get("weights", {}))
    check_endpoints(grid, start, goal)
    return GridMap(name, grid, start, goal)


def load_map(path: Union[str, Path]) -> GridMap:
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)
    gm = parse_map(data, name=path.stem)
    logger.debug("loaded map %s (%dx%d)", gm.name, gm.grid.width, gm.grid.height)
    return gm


def map_to_dict(gm: GridMap) -> Dict[str, Any]:
    """Inverse of parse_map. Cells are written as their cost, walls as code 1."""
    codes: Dict[int, int] = {}
    cells: List[List[int]] = []
    for row in gm.grid.costs:
        out = []
        for cost in row:
            if cost is None:
                out.append(WALL_CODE)
            elif cost == 1:
                out.append(0)
            else:
                code = codes.setdefault(cost, len(codes) + 2)
                out.append(code)
        cells.append(out)
    return {
        "width": gm.grid.width,
        "height": gm.grid.height,
        "start": list(gm.start),
        "goal": list(gm.goal),
        "cells": cells,
        "weights": {str(code): cost for cost, code in codes.items()},
    }


def dump_map(gm: GridMap, path: Union[str, Path]) -> None:
    path = Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(map_to_dict(gm), fh, indent=2)


def save_map(gm: GridMap, map_dir: Union[str, Path]) -> Path:
    path = Path(map_dir) / f"{gm.name}.json"
    dump_map(gm, path)
    logger.info("saved map %s to %s", gm.name, path)
    return path


def toggle_wall(gm: GridMap, cell: Cell) -> GridMap:
    """Turn a wall into a cost-1 cell or any walkable cell into a wall."""
    if cell in (gm.start, gm.goal):
        raise ValueError(f"cannot wall off endpoint {cell}")
    x, y = cell
    cost = 1 if not gm.grid.is_walkable(x, y) else None
    return GridMap(gm.name, gm.grid.with_cell(cell, cost), gm.start, gm.goal)


def list_maps(map_dir: Union[str, Path]) -> Dict[str, Path]:
    """Map files in ``map_dir`` keyed by file stem, sorted by name."""
    d = Path(map_dir)
    if not d.is_dir():
        return {}
    return {p.stem: p for p in sorted(d.glob("*.json"))}
