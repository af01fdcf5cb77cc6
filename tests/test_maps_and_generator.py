import json
import random

import pytest

from src.core.astar import find_path
from src.core.generator import random_grid, random_map, validate_params
from src.core.maps import (
    check_endpoints,
    dump_map,
    grid_from_terrain,
    list_maps,
    load_map,
    map_to_dict,
    parse_map,
    save_map,
    toggle_wall,
)
from src.core.types import CostGrid, Found


# ---------- Map files -----------------------------------------------------------

def test_terrain_codes_and_weights():
    grid = grid_from_terrain([[0, 1, 2], [3, 2, 0]], {"2": 5, "3": "BLOCK"})
    assert grid.costs == ((1, None, 5), (None, 5, 1))


def test_code_one_can_be_weighted():
    grid = grid_from_terrain([[1, 0]], {"1": 4})
    assert grid.cost_of(0, 0) == 4


def test_negative_weight_is_rejected():
    with pytest.raises(ValueError):
        grid_from_terrain([[2]], {"2": -1})


def test_parse_map():
    gm = parse_map({
        "width": 3, "height": 2,
        "start": [0, 0], "goal": [2, 1],
        "cells": [[0, 1, 0], [0, 0, 0]],
    }, name="tiny")
    assert gm.name == "tiny"
    assert gm.start == (0, 0) and gm.goal == (2, 1)
    assert not gm.grid.is_walkable(1, 0)


@pytest.mark.parametrize("patch", [
    {"cells": [[0, 0, 0]]},
    {"width": 4},
    {"start": [3, 0]},
    {"goal": [0, 2]},
    {"start": [1, 0], "cells": [[0, 1, 0], [0, 0, 0]]},
    {"goal": [2, 1], "cells": [[0, 0, 0], [0, 0, 1]]},
])
def test_parse_map_rejects_bad_shapes(patch):
    data = {"width": 3, "height": 2, "start": [0, 0], "goal": [2, 1],
            "cells": [[0, 0, 0], [0, 0, 0]]}
    data.update(patch)
    with pytest.raises(ValueError):
        parse_map(data)


def test_dump_then_load(tmp_path):
    gm = random_map(6, 4, 0.7, start=(0, 0), goal=(5, 3), max_cost=4, seed=7)
    out = tmp_path / "nested" / "saved.json"
    dump_map(gm, out)
    loaded = load_map(out)
    assert loaded.name == "saved"
    assert loaded.grid == gm.grid
    assert (loaded.start, loaded.goal) == (gm.start, gm.goal)
    assert json.loads(out.read_text())["width"] == 6


def test_map_to_dict_keeps_code_one_for_walls():
    data = map_to_dict(parse_map({
        "width": 3, "height": 1, "start": [0, 0], "goal": [2, 0],
        "cells": [[0, 1, 0]],
    }))
    assert data["cells"] == [[0, 1, 0]]
    assert data["weights"] == {}


def test_check_endpoints():
    grid = CostGrid.from_rows([[1, None], [1, 1]])
    check_endpoints(grid, (0, 0), (1, 1))
    with pytest.raises(ValueError, match="not walkable"):
        check_endpoints(grid, (0, 0), (1, 0))
    with pytest.raises(ValueError, match="out of bounds"):
        check_endpoints(grid, (2, 0), (1, 1))


def test_bundled_maps_load_and_solve(maps_dir):
    maps = list_maps(maps_dir)
    assert list(maps) == ["01_open_field", "02_walled", "03_weighted"]
    for path in maps.values():
        gm = load_map(path)
        check_endpoints(gm.grid, gm.start, gm.goal)
        assert isinstance(find_path(gm.grid, gm.start, gm.goal), Found)


def test_list_maps_missing_dir(tmp_path):
    assert list_maps(tmp_path / "nope") == {}


def test_load_map_rejects_walled_start(tmp_path):
    path = tmp_path / "walled.json"
    path.write_text(json.dumps({
        "width": 3, "height": 1, "start": [0, 0], "goal": [2, 0],
        "cells": [[1, 0, 0]],
    }))
    with pytest.raises(ValueError, match="start .* is not walkable"):
        load_map(path)


def test_save_map_lands_in_map_dir(tmp_path):
    gm = random_map(5, 5, 0.6, start=(0, 0), goal=(4, 4), max_cost=3, seed=11)
    path = save_map(gm, tmp_path)
    assert path == tmp_path / "random.json"
    assert list(list_maps(tmp_path)) == ["random"]
    assert load_map(path).grid == gm.grid


def test_toggle_wall_flips_cell():
    gm = parse_map({
        "width": 3, "height": 1, "start": [0, 0], "goal": [2, 0],
        "cells": [[0, 0, 0]],
    })
    walled = toggle_wall(gm, (1, 0))
    assert not walled.grid.is_walkable(1, 0)
    assert gm.grid.is_walkable(1, 0)
    assert not isinstance(find_path(walled.grid, walled.start, walled.goal), Found)
    opened = toggle_wall(walled, (1, 0))
    assert opened.grid.cost_of(1, 0) == 1


def test_toggle_wall_keeps_endpoints_open():
    gm = random_map(4, 4, 1.0, start=(0, 0), goal=(3, 3), seed=1)
    with pytest.raises(ValueError):
        toggle_wall(gm, (0, 0))
    with pytest.raises(ValueError):
        toggle_wall(gm, (3, 3))


# ---------- Random generation ---------------------------------------------------

@pytest.mark.parametrize("args", [
    (0, 5, 0.5, (0, 0), (0, 0), 1),
    (5, -1, 0.5, (0, 0), (0, 0), 1),
    (5, 5, 1.5, (0, 0), (4, 4), 1),
    (5, 5, -0.1, (0, 0), (4, 4), 1),
    (5, 5, 0.5, (5, 0), (4, 4), 1),
    (5, 5, 0.5, (0, 0), (4, 5), 1),
    (5, 5, 0.5, (0, 0), (4, 4), 0),
])
def test_validate_params_rejects(args):
    with pytest.raises(ValueError):
        validate_params(*args)


def test_endpoints_always_walkable():
    grid = random_grid(6, 6, 0.0, (0, 0), (5, 5), rng=random.Random(1))
    assert grid.cost_of(0, 0) == 1
    assert grid.cost_of(5, 5) == 1
    walkable = [(x, y) for y in range(6) for x in range(6) if grid.is_walkable(x, y)]
    assert walkable == [(0, 0), (5, 5)]


def test_costs_stay_in_range():
    grid = random_grid(10, 10, 1.0, (0, 0), (9, 9), max_cost=9, rng=random.Random(5))
    costs = {c for row in grid.costs for c in row}
    assert None not in costs
    assert costs <= set(range(1, 10))
    assert len(costs) > 1


def test_seeded_maps_repeat():
    a = random_map(8, 8, 0.6, max_cost=3, seed=99)
    b = random_map(8, 8, 0.6, max_cost=3, seed=99)
    assert a == b
    assert a.start == (0, 0)
    assert a.grid.in_bounds(*a.goal)
