# src/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

Cell = Tuple[int, int]  # (col, row)


@dataclass(frozen=True)
class CostGrid:
    """Row-major grid of entry costs; ``None`` marks an impassable cell."""
    width: int
    height: int
    costs: Tuple[Tuple[Optional[int], ...], ...]   # [row][col]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}")
        if len(self.costs) != self.height or any(len(r) != self.width for r in self.costs):
            raise ValueError("costs size mismatch")
        for row in self.costs:
            for c in row:
                if c is not None and c < 0:
                    raise ValueError(f"negative cell cost {c}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[int]]]) -> "CostGrid":
        costs = tuple(tuple(r) for r in rows)
        width = len(costs[0]) if costs else 0
        return cls(width, len(costs), costs)

    @classmethod
    def uniform(cls, width: int, height: int, cost: int = 1) -> "CostGrid":
        return cls(width, height, tuple((cost,) * width for _ in range(height)))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _at(self, x: int, y: int) -> Optional[int]:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return self.costs[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        return self._at(x, y) is not None

    def cost_of(self, x: int, y: int) -> int:
        v = self._at(x, y)
        if v is None:
            raise ValueError(f"Asked cost of a blocked cell ({x}, {y})")
        return v

    def with_cell(self, c: Cell, cost: Optional[int]) -> "CostGrid":
        """Copy of this grid with one cell replaced."""
        x, y = c
        self._at(x, y)
        rows = [list(r) for r in self.costs]
        rows[y][x] = cost
        return CostGrid.from_rows(rows)


class SearchStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def finished(self) -> bool:
        return self in (SearchStatus.SUCCEEDED, SearchStatus.FAILED, SearchStatus.CANCELLED)


@dataclass(frozen=True)
class Found:
    path: Tuple[Cell, ...]
    total_cost: int


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Cancelled:
    pass


PathResult = Union[Found, NotFound, Cancelled]


@dataclass(frozen=True)
class ProgressEvent:
    cell: Cell                    # neighbor whose state just improved
    path: Tuple[Cell, ...]        # current best path start -> cell
    g_cost: int
    settled: Cell                 # cell closed in this iteration (closed-set delta)


ProgressObserver = Callable[[ProgressEvent], None]


@dataclass
class StepResult:
    status: SearchStatus
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
