"""Flow-constrained BFS route finding on the facility grid."""

from __future__ import annotations

from collections import deque

from .enums import CellType, Direction
from .models import Cell, Grid, PathCell


def _legal_exits(cell: Cell, is_start: bool, strict_flow: bool) -> tuple[Direction, ...]:
    """Directions a vehicle may leave *cell* by, in neighbour-scan order."""
    if isinstance(cell, PathCell):
        if cell.has_flow:
            return (cell.flow,)
        if strict_flow and not is_start:
            return ()
    return tuple(Direction)


def _is_walkable(cell: Cell, is_target: bool, strict_flow: bool) -> bool:
    if cell.cell_type in (CellType.ENTRY, CellType.EXIT):
        return True
    if cell.cell_type == CellType.PARKING:
        return is_target
    if isinstance(cell, PathCell):
        return cell.has_flow or not strict_flow
    return False


def is_legal_move(
    current: Cell,
    nxt: Cell,
    direction: Direction,
    is_target: bool,
    strict_flow: bool = True,
) -> bool:
    """Check the destination-side rules for moving from *current* into *nxt*.

    Source-side flow is handled by :func:`_legal_exits`; this covers one-way
    collisions, edge walls on both sides, sub-cell masks and walkability.
    """
    # one-way: only an exact 180 degree mismatch is a wrong-way entry
    if strict_flow and isinstance(nxt, PathCell) and nxt.has_flow:
        if nxt.flow == direction.opposite:
            return False

    if current.edges.is_solid(direction.edge):
        return False
    if nxt.edges.is_solid(direction.opposite.edge):
        return False

    if nxt.sub_blocked:
        return False

    return _is_walkable(nxt, is_target, strict_flow)


def find_route(
    grid: Grid,
    start: tuple[int, int],
    target: tuple[int, int],
    strict_flow: bool = True,
) -> list[tuple[int, int]]:
    """Breadth-first search from *start* to *target* under the traffic rules.

    Returns list of ``(x, y)`` from *start* to *target* inclusive, or ``[]``
    if no legal route exists. Neighbours are scanned up, right, down, left,
    so among equally short routes the first one reached wins.
    """
    if not grid.in_bounds(*start) or not grid.in_bounds(*target):
        return []

    queue: deque[tuple[int, int]] = deque([start])
    came_from: dict[tuple[int, int], tuple[int, int] | None] = {start: None}

    while queue:
        current = queue.popleft()

        if current == target:
            path: list[tuple[int, int]] = [current]
            while came_from[current] is not None:
                current = came_from[current]
                path.append(current)
            path.reverse()
            return path

        x, y = current
        cell = grid.cell(x, y)
        for direction in _legal_exits(cell, current == start, strict_flow):
            dx, dy = direction.delta
            neighbor = (x + dx, y + dy)
            if neighbor in came_from or not grid.in_bounds(*neighbor):
                continue
            if not is_legal_move(
                cell, grid.cell(*neighbor), direction,
                is_target=neighbor == target, strict_flow=strict_flow,
            ):
                continue
            came_from[neighbor] = current
            queue.append(neighbor)

    return []
