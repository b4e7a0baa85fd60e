"""
Tests for layout tooling: the text legend, flow stamping and the demo lot.
"""

import pytest

from parking_simulation import (
    CellType, Edges, PathCell, SpotType, build_demo_lot, grid_from_strings,
    grid_to_strings, stamp_flow, verify_layout,
)


def test_legend_round_trip():
    rows = ["#.^>v<", "PCVDRI", "OMZ..."]
    assert grid_to_strings(grid_from_strings(rows)) == rows


def test_legend_cell_types():
    grid = grid_from_strings(["^V"])
    cell = grid.cell(0, 0)
    assert isinstance(cell, PathCell)
    assert cell.has_flow and cell.rotation == 0
    assert grid.cell(1, 0).spot_type == SpotType.EV


def test_unknown_character_rejected():
    with pytest.raises(ValueError):
        grid_from_strings(["I?O"])


def test_ragged_layout_rejected():
    with pytest.raises(ValueError):
        grid_from_strings(["...", ".."])


def test_stamp_flow_points_at_successor():
    grid = grid_from_strings(["..", ".."])
    stamped = stamp_flow(grid, [(0, 0), (1, 0), (1, 1)])
    assert grid_to_strings(stamped) == [">v", ".v"]
    assert grid_to_strings(grid) == ["..", ".."]


def test_stamp_flow_leaves_other_cells_alone():
    grid = grid_from_strings(["I.O"])
    assert grid_to_strings(stamp_flow(grid, [(0, 0), (1, 0), (2, 0)])) == ["I>O"]
    assert stamp_flow(grid, [(1, 0)]) is grid


def test_stamp_flow_keeps_edges():
    grid = grid_from_strings([".."]).with_cell(0, 0, PathCell(edges=Edges(north=True)))
    stamped = stamp_flow(grid, [(0, 0), (1, 0)])
    assert stamped.cell(0, 0).edges.north
    assert stamped.cell(0, 0).flow is not None


def test_stamp_flow_rejects_gaps():
    grid = grid_from_strings(["..."])
    with pytest.raises(ValueError):
        stamp_flow(grid, [(0, 0), (2, 0)])


def test_demo_lot_contents():
    grid = build_demo_lot()
    assert grid.entry_points() == [(0, 2)]
    assert grid.exit_point() == (15, 7)
    assert len(grid.parking_positions()) == 47
    assert grid.positions_of(CellType.DESTINATION) == [(7, 0), (8, 0)]


def test_demo_lot_fully_drivable_with_two_way_aisles():
    report = verify_layout(build_demo_lot(), strict_flow=False)
    assert report["spots"] == 47
    assert report["unreachable_spots"] == []
    assert report["stranded_spots"] == []


def test_demo_lot_closed_under_strict_flow():
    report = verify_layout(build_demo_lot(), strict_flow=True)
    assert len(report["unreachable_spots"]) == 47


def test_verify_layout_reports_missing_exit():
    report = verify_layout(grid_from_strings(["I>P"]))
    assert report["exit"] is None
    assert report["unreachable_spots"] == []
    assert report["stranded_spots"] == [(2, 0)]
