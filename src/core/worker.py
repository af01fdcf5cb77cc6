# src/core/worker.py
#!/usr/bin/env python3
"""Run a search on a background thread and hand its progress to a UI loop."""

import logging
import queue
import threading
from typing import List, Optional

from src.core.astar import find_path
from src.core.types import Cell, CostGrid, PathResult, ProgressEvent

logger = logging.getLogger(__name__)


class SearchWorker:
    def __init__(self, grid: CostGrid, start: Cell, goal: Cell, reopen_closed: bool = False):
        self.grid = grid
        self.start = start
        self.goal = goal
        self.reopen_closed = reopen_closed
        self.events: "queue.Queue[ProgressEvent]" = queue.Queue()
        self.result: Optional[PathResult] = None
        self.error: Optional[BaseException] = None
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._run, name="astar-search", daemon=True)

    def start_search(self) -> "SearchWorker":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.result = find_path(self.grid, self.start, self.goal,
                                    observer=self.events.put,
                                    cancel=self._cancel,
                                    reopen_closed=self.reopen_closed)
        except Exception as ex:
            logger.exception("background search failed")
            self.error = ex
        finally:
            self._done.set()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> Optional[PathResult]:
        """Block until the search ends; re-raises anything the search thread raised."""
        self._done.wait(timeout)
        if self.error is not None:
            raise self.error
        return self.result

    def drain(self, limit: Optional[int] = None) -> List[ProgressEvent]:
        """Pop up to ``limit`` queued events without blocking."""
        out: List[ProgressEvent] = []
        while limit is None or len(out) < limit:
            try:
                out.append(self.events.get_nowait())
            except queue.Empty:
                break
        return out
