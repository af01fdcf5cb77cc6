# tests/conftest.py
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.core.types import CostGrid


@pytest.fixture
def open_grid() -> CostGrid:
    """5x5, every cell walkable at cost 1."""
    return CostGrid.uniform(5, 5)


@pytest.fixture
def maps_dir():
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "maps"))
