"""
Tests for the walking-distance field (multi-source BFS from destinations).
"""

import random
from collections import deque

import numpy as np

from parking_simulation import (
    CellType, Edges, Grid, PathCell, WallCell, UNREACHABLE,
    build_distance_field, distance_at, has_distance_signal, grid_from_strings,
)


# -- Helpers ----------------------------------------------------------

def _random_grid(rng, width, height):
    chars = "#....PM"
    rows = ["".join(rng.choice(chars) for _ in range(width)) for _ in range(height)]
    return grid_from_strings(rows)


def _brute_force(grid):
    """Independent BFS from every destination; keep the minimum per cell."""
    best = np.full(grid.shape, UNREACHABLE, dtype=np.int64)
    for sx, sy in grid.positions_of(CellType.DESTINATION):
        dist = {(sx, sy): 0}
        queue = deque([(sx, sy)])
        while queue:
            x, y = queue.popleft()
            for dx, dy in [(1, 0), (-1, 0), (0, 1), (0, -1)]:
                nx, ny = x + dx, y + dy
                if not grid.in_bounds(nx, ny) or (nx, ny) in dist:
                    continue
                if grid.cell(nx, ny).cell_type == CellType.WALL:
                    continue
                dist[(nx, ny)] = dist[(x, y)] + 1
                queue.append((nx, ny))
        for (x, y), d in dist.items():
            best[y, x] = min(best[y, x], d)
    return best


# -- Tests ------------------------------------------------------------

def test_destinations_are_zero():
    grid = grid_from_strings(["M..", "..M"])
    field = build_distance_field(grid)
    assert field[0, 0] == 0
    assert field[1, 2] == 0
    assert field[0, 2] == 1
    assert field[1, 0] == 1


def test_walls_block_and_mark_unreachable():
    grid = grid_from_strings(["M#."])
    field = build_distance_field(grid)
    assert field[0, 1] == UNREACHABLE
    assert field[0, 2] == UNREACHABLE
    assert distance_at(field, (2, 0)) is None


def test_detour_around_wall():
    grid = grid_from_strings([
        "M#.",
        "...",
    ])
    field = build_distance_field(grid)
    assert distance_at(field, (2, 0)) == 4


def test_non_wall_types_are_passable():
    grid = grid_from_strings(["MPIOZ>"])
    field = build_distance_field(grid)
    assert list(field[0]) == [0, 1, 2, 3, 4, 5]


def test_edge_walls_do_not_block_walking():
    blocked = PathCell(edges=Edges(east=True, west=True))
    grid = grid_from_strings(["M.."]).with_cell(1, 0, blocked)
    field = build_distance_field(grid)
    assert distance_at(field, (2, 0)) == 2


def test_matches_brute_force_on_random_grids():
    rng = random.Random(1234)
    for _ in range(40):
        grid = _random_grid(rng, rng.randint(1, 9), rng.randint(1, 9))
        field = build_distance_field(grid)
        assert field.dtype == np.int32
        assert np.array_equal(field.astype(np.int64), _brute_force(grid))


def test_no_destination_gives_no_signal():
    grid = grid_from_strings(["..P", "I.O"])
    field = build_distance_field(grid)
    assert (field == UNREACHABLE).all()
    assert not has_distance_signal(field)
    assert not has_distance_signal(None)


def test_zero_size_grid():
    empty = build_distance_field(Grid([]))
    assert empty.shape == (0, 0)
    assert not has_distance_signal(empty)

    no_width = build_distance_field(Grid([[], []]))
    assert no_width.shape == (2, 0)


def test_distance_at_out_of_range():
    field = build_distance_field(Grid([[WallCell()]]))
    assert distance_at(field, (5, 5)) is None
    assert distance_at(None, (0, 0)) is None
