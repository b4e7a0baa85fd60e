"""
Tests for the grid model: cell variants, grid access, profiles and config.
"""

import random

import pytest

from parking_simulation import (
    CellType, Direction, DriverProfile, Edges, ExitCell, Grid, ParkingCell,
    PathCell, SimulationConfig, SpotType, WallCell, ZoneCell, grid_from_strings,
)


def test_path_rotation_validated():
    with pytest.raises(ValueError):
        PathCell(rotation=45, has_flow=True)


def test_path_flow_only_when_enabled():
    assert PathCell(rotation=180).flow is None
    assert PathCell(rotation=180, has_flow=True).flow == Direction.DOWN


def test_cell_types_are_tagged():
    assert WallCell().cell_type == CellType.WALL
    assert ParkingCell().spot_type == SpotType.STANDARD
    assert ZoneCell(CellType.DISPLAY).cell_type == CellType.DISPLAY
    with pytest.raises(ValueError):
        ZoneCell(CellType.PATH)


def test_sub_mask_threshold():
    assert not PathCell().sub_blocked
    assert not PathCell(sub_mask=[[1, 1], [0, 0]]).sub_blocked   # exactly half
    assert PathCell(sub_mask=[[1, 1], [1, 0]]).sub_blocked
    assert not PathCell(sub_mask=[]).sub_blocked


def test_edges():
    edges = Edges(north=True)
    assert edges.is_solid("north")
    assert not edges.is_solid("south")
    assert Edges() == Edges()


def test_default_edges_cannot_leak_between_cells():
    grid = grid_from_strings(["I>>P"])
    with pytest.raises(AttributeError):
        grid.cell(1, 0).edges.east = True
    assert grid.cell(0, 0).edges.east is False
    assert grid.cell(1, 0).edges == Edges()

    walled = grid.with_cell(1, 0, PathCell(rotation=90, has_flow=True, edges=Edges(east=True)))
    assert walled.cell(1, 0).edges.east
    assert not walled.cell(0, 0).edges.east
    assert not walled.cell(2, 0).edges.east


def test_direction_helpers():
    assert [d.value for d in Direction] == [0, 90, 180, 270]
    assert Direction.UP.opposite == Direction.DOWN
    assert Direction.LEFT.opposite == Direction.RIGHT
    assert Direction.RIGHT.delta == (1, 0)
    assert Direction.UP.edge == "north"


def test_grid_shape_and_lookup():
    grid = grid_from_strings(["I.P", "#MO"])
    assert (grid.width, grid.height) == (3, 2)
    assert grid.cell(2, 0).cell_type == CellType.PARKING
    assert grid.entry_points() == [(0, 0)]
    assert grid.exit_point() == (2, 1)
    assert grid.parking_positions() == [(2, 0)]
    assert grid.in_bounds(2, 1)
    assert not grid.in_bounds(3, 0)
    assert not grid.in_bounds(0, -1)


def test_ragged_rows_rejected():
    with pytest.raises(ValueError):
        Grid([[WallCell(), WallCell()], [WallCell()]])


def test_empty_grid():
    grid = Grid([])
    assert grid.shape == (0, 0)
    assert grid.exit_point() is None
    assert list(grid) == []


def test_with_cell_is_copy_on_write():
    grid = grid_from_strings(["..."])
    changed = grid.with_cell(1, 0, ExitCell())
    assert grid.cell(1, 0).cell_type == CellType.PATH
    assert changed.cell(1, 0).cell_type == CellType.EXIT
    assert changed.cell(0, 0) is grid.cell(0, 0)
    with pytest.raises(ValueError):
        grid.with_cell(9, 0, ExitCell())


def test_exit_point_is_first_in_row_major_order():
    grid = grid_from_strings(["..O", "O.."])
    assert grid.exit_point() == (2, 0)


def test_driver_profile_ranges():
    rng = random.Random(5)
    for _ in range(200):
        p = DriverProfile.random(rng)
        assert 0.0 <= p.patience <= 1.0
        assert 0.3 <= p.walking_preference <= 1.0
        assert 0.5 <= p.parking_duration_bias <= 2.0


def test_driver_profile_is_frozen():
    p = DriverProfile(patience=0.5, walking_preference=0.5, parking_duration_bias=1.0)
    with pytest.raises(AttributeError):
        p.patience = 1.0


def test_config_validation():
    SimulationConfig(time_scale=0.25)
    SimulationConfig(time_scale=8)
    with pytest.raises(ValueError):
        SimulationConfig(time_scale=0)
    with pytest.raises(ValueError):
        SimulationConfig(spawn_rate=-1)
