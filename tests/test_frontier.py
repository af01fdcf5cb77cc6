import pytest

from src.core.frontier import Frontier
from src.core.search_state import SearchState


def _frontier(w=4, h=4):
    state = SearchState(w, h)
    return state, Frontier(state)


def test_empty_frontier():
    _, f = _frontier()
    assert f.is_empty()
    assert len(f) == 0
    with pytest.raises(IndexError):
        f.pop_best()


def test_lowest_f_first():
    _, f = _frontier()
    f.insert_or_improve((0, 0), 5, 1, None)
    f.insert_or_improve((1, 0), 2, 1, None)
    f.insert_or_improve((2, 0), 4, 0, None)
    assert [f.pop_best() for _ in range(3)] == [(1, 0), (2, 0), (0, 0)]
    assert f.is_empty()


def test_equal_f_prefers_lower_h():
    _, f = _frontier()
    f.insert_or_improve((0, 0), 1, 3, None)   # f 4, h 3
    f.insert_or_improve((1, 1), 2, 2, None)   # f 4, h 2
    assert f.pop_best() == (1, 1)


def test_full_ties_go_to_first_admitted():
    _, f = _frontier()
    f.insert_or_improve((3, 0), 2, 2, None)
    f.insert_or_improve((0, 3), 2, 2, None)
    f.insert_or_improve((1, 2), 2, 2, None)
    assert [f.pop_best() for _ in range(3)] == [(3, 0), (0, 3), (1, 2)]


def test_improvement_keeps_admission_order():
    state, f = _frontier()
    f.insert_or_improve((0, 0), 5, 1, None)
    f.insert_or_improve((1, 0), 3, 1, None)
    assert f.insert_or_improve((0, 0), 3, 1, (0, 1))
    assert len(f) == 2
    assert state.parent((0, 0)) == (0, 1)
    assert f.pop_best() == (0, 0)
    assert f.pop_best() == (1, 0)
    assert f.is_empty()


def test_no_change_unless_cheaper_while_open():
    state, f = _frontier()
    assert f.insert_or_improve((2, 2), 4, 1, (2, 1))
    assert not f.insert_or_improve((2, 2), 4, 1, (1, 2))
    assert not f.insert_or_improve((2, 2), 6, 1, (1, 2))
    assert state.g_cost((2, 2)) == 4
    assert state.parent((2, 2)) == (2, 1)


def test_popped_cell_is_readmitted():
    state, f = _frontier()
    f.insert_or_improve((1, 1), 4, 0, None)
    assert f.pop_best() == (1, 1)
    assert not f.contains((1, 1))
    assert f.insert_or_improve((1, 1), 7, 0, (0, 1))
    assert (1, 1) in f
    assert state.g_cost((1, 1)) == 7


def test_cells_lists_open_members():
    _, f = _frontier()
    f.insert_or_improve((0, 0), 1, 1, None)
    f.insert_or_improve((0, 1), 1, 2, None)
    f.pop_best()
    assert set(f.cells()) == {(0, 1)}
