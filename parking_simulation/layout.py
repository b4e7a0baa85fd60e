"""Layout builders: text legend parser, demo facility, flow stamping."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .enums import CellType, Direction, SpotType
from .models import (
    Cell, DestinationCell, EntryCell, ExitCell, Grid, ParkingCell, PathCell,
    WallCell, ZoneCell,
)
from .distance_field import build_distance_field, has_distance_signal
from .pathfinding import find_route

logger = logging.getLogger(__name__)

# Text legend used by grid_from_strings / grid_to_strings
LEGEND: dict[str, Callable[[], Cell]] = {
    "#": WallCell,
    ".": PathCell,
    "^": lambda: PathCell(rotation=0, has_flow=True),
    ">": lambda: PathCell(rotation=90, has_flow=True),
    "v": lambda: PathCell(rotation=180, has_flow=True),
    "<": lambda: PathCell(rotation=270, has_flow=True),
    "P": ParkingCell,
    "C": lambda: ParkingCell(SpotType.COMPACT),
    "V": lambda: ParkingCell(SpotType.EV),
    "D": lambda: ParkingCell(SpotType.DISABLED),
    "R": lambda: ParkingCell(SpotType.RESERVED),
    "I": EntryCell,
    "O": ExitCell,
    "M": DestinationCell,
    "Z": ZoneCell,
}

_FLOW_CHARS = {0: "^", 90: ">", 180: "v", 270: "<"}
_SPOT_CHARS = {
    SpotType.STANDARD: "P", SpotType.COMPACT: "C", SpotType.EV: "V",
    SpotType.DISABLED: "D", SpotType.RESERVED: "R",
}
_TYPE_CHARS = {
    CellType.WALL: "#", CellType.ENTRY: "I", CellType.EXIT: "O",
    CellType.DESTINATION: "M", CellType.ZONE: "Z", CellType.DISPLAY: "Z",
}


def grid_from_strings(rows: Sequence[str]) -> Grid:
    """Parse one string per row using :data:`LEGEND`.

    Example::

        grid_from_strings([
            "#M###",
            "I>>PO",
        ])
    """
    cells: list[list[Cell]] = []
    for y, row in enumerate(rows):
        parsed: list[Cell] = []
        for x, ch in enumerate(row):
            factory = LEGEND.get(ch)
            if factory is None:
                raise ValueError(f"Unknown layout character {ch!r} at {(x, y)}")
            parsed.append(factory())
        cells.append(parsed)
    return Grid(cells)


def grid_to_strings(grid: Grid) -> list[str]:
    """Inverse of :func:`grid_from_strings` (edges and sub-masks are dropped)."""
    out: list[str] = []
    for row in grid.rows:
        chars = []
        for cell in row:
            if isinstance(cell, PathCell):
                chars.append(_FLOW_CHARS[cell.rotation] if cell.has_flow else ".")
            elif isinstance(cell, ParkingCell):
                chars.append(_SPOT_CHARS[cell.spot_type])
            else:
                chars.append(_TYPE_CHARS[cell.cell_type])
        out.append("".join(chars))
    return out


def _direction_between(a: tuple[int, int], b: tuple[int, int]) -> Direction:
    step = (b[0] - a[0], b[1] - a[1])
    for direction in Direction:
        if direction.delta == step:
            return direction
    raise ValueError(f"{a} and {b} are not orthogonally adjacent")


def stamp_flow(grid: Grid, route: Sequence[tuple[int, int]]) -> Grid:
    """Give every Path cell on *route* a flow pointing at its successor.

    The last cell copies the direction of the step into it. Non-path cells
    on the route keep their type. Returns a new grid.
    """
    if len(route) < 2:
        return grid
    directions: dict[tuple[int, int], Direction] = {}
    for current, nxt in zip(route, route[1:]):
        directions[current] = _direction_between(current, nxt)
    directions[route[-1]] = directions[route[-2]]

    changes: dict[tuple[int, int], Cell] = {}
    for (x, y), direction in directions.items():
        cell = grid.cell(x, y)
        if isinstance(cell, PathCell):
            changes[(x, y)] = PathCell(
                rotation=direction.value, has_flow=True,
                edges=cell.edges, sub_mask=cell.sub_mask, locked=cell.locked,
            )
    return grid.with_cells(changes)


# Entry ramp and exit ramp are one-way; the aisles between bays are two-way
# (no flow), so the demo needs strict_flow=False to be driveable.
DEMO_LOT = [
    "#######MM#######",
    "###PPPPPPPPPPPP#",
    "I>>............#",
    "###CCPPPPPPVVP.#",
    "#DD#PPPPPPPP#P.#",
    "#..............#",
    "#.PPPPPPPPPPPPP#",
    "#............>>O",
    "################",
]


def build_demo_lot() -> Grid:
    """Create the demo facility described by :data:`DEMO_LOT`."""
    return grid_from_strings(DEMO_LOT)


def verify_layout(grid: Grid, strict_flow: bool = True) -> dict:
    """Log layout stats and check every spot can be reached and left.

    Returns a summary dict.
    """
    logger.info("--- Layout verification ---")
    counts: dict[str, int] = {}
    for _, cell in grid:
        counts[cell.cell_type.value] = counts.get(cell.cell_type.value, 0) + 1
    logger.info("Grid: %dx%d  cells by type: %s", grid.width, grid.height, counts)

    entries = grid.entry_points()
    exit_pos = grid.exit_point()
    spots = grid.parking_positions()
    field = build_distance_field(grid)
    if not entries:
        logger.info("  No entry cells!")
    if exit_pos is None:
        logger.info("  No exit cell!")
    if not has_distance_signal(field):
        logger.info("  No destination cell: spot scoring will ignore walking distance")

    unreachable: list[tuple[int, int]] = []
    stranded: list[tuple[int, int]] = []
    for spot in spots:
        if not any(find_route(grid, e, spot, strict_flow) for e in entries):
            unreachable.append(spot)
        elif exit_pos is None or not find_route(grid, spot, exit_pos, strict_flow):
            stranded.append(spot)

    logger.info(
        "  %d spots: %d unreachable from any entry, %d cannot reach the exit",
        len(spots), len(unreachable), len(stranded),
    )
    logger.info("--- End verification ---")
    return {
        "counts": counts,
        "entries": entries,
        "exit": exit_pos,
        "spots": len(spots),
        "unreachable_spots": unreachable,
        "stranded_spots": stranded,
    }
