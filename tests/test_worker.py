import pytest

from src.core.types import Cancelled, CostGrid, Found, NotFound
from src.core.worker import SearchWorker


def test_background_search_finds_path(open_grid):
    worker = SearchWorker(open_grid, (0, 0), (4, 4)).start_search()
    result = worker.wait(timeout=10)
    assert worker.done
    assert isinstance(result, Found)
    assert result.total_cost == 8

    events = worker.drain()
    assert events
    assert events[0].settled == (0, 0)
    assert (4, 4) in {e.cell for e in events}
    # the goal is reached while expanding (3, 4), which then still opens (3, 3)
    assert events[-1].settled == (3, 4)
    assert worker.drain() == []


def test_drain_respects_limit(open_grid):
    worker = SearchWorker(open_grid, (0, 0), (4, 4)).start_search()
    worker.wait(timeout=10)
    total = worker.events.qsize()
    assert len(worker.drain(limit=3)) == 3
    assert len(worker.drain()) == total - 3


def test_cancel_before_start_returns_cancelled(open_grid):
    worker = SearchWorker(open_grid, (0, 0), (4, 4))
    worker.cancel()
    worker.start_search()
    assert worker.wait(timeout=10) == Cancelled()
    assert worker.drain() == []


def test_unreachable_goal_in_background():
    grid = CostGrid.from_rows([[1, None, 1]])
    assert SearchWorker(grid, (0, 0), (2, 0)).start_search().wait(timeout=10) == NotFound()


def test_search_errors_are_reraised(open_grid):
    worker = SearchWorker(open_grid, (0, 0), (9, 9)).start_search()
    with pytest.raises(IndexError):
        worker.wait(timeout=10)
