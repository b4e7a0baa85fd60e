"""Walking-distance field from the nearest destination cell."""

from __future__ import annotations

from collections import deque

import numpy as np

from .enums import CellType, Direction
from .models import Grid

UNREACHABLE = int(np.iinfo(np.int32).max)


def build_distance_field(grid: Grid) -> np.ndarray:
    """Multi-source BFS from every Destination cell.

    Returns an ``int32`` array of shape ``(height, width)`` holding the hop
    count to the nearest destination through non-wall cells, or
    ``UNREACHABLE``. Only Wall cells block; edge walls are not consulted.
    """
    field = np.full(grid.shape, UNREACHABLE, dtype=np.int32)
    queue: deque[tuple[int, int]] = deque()

    for x, y in grid.positions_of(CellType.DESTINATION):
        field[y, x] = 0
        queue.append((x, y))

    while queue:
        x, y = queue.popleft()
        candidate = int(field[y, x]) + 1
        for direction in Direction:
            dx, dy = direction.delta
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny):
                continue
            if grid.cell(nx, ny).cell_type == CellType.WALL:
                continue
            if candidate < field[ny, nx]:
                field[ny, nx] = candidate
                queue.append((nx, ny))

    return field


def has_distance_signal(field: np.ndarray | None) -> bool:
    """``False`` when *field* is missing, empty, or reaches nowhere."""
    if field is None or field.size == 0:
        return False
    return bool((field != UNREACHABLE).any())


def distance_at(field: np.ndarray | None, pos: tuple[int, int]) -> int | None:
    """Hop distance at *pos*, or ``None`` if unknown or unreachable."""
    if field is None:
        return None
    x, y = pos
    if not (0 <= y < field.shape[0] and 0 <= x < field.shape[1]):
        return None
    value = int(field[y, x])
    return None if value == UNREACHABLE else value
