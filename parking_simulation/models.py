"""Data models: cells, grid, driver profiles, and simulation config."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence

import numpy as np

from .enums import CellType, Direction, SpotType
from .constants import (
    VALID_ROTATIONS, SUBMASK_BLOCK_RATIO,
    MIN_WALKING_PREFERENCE, MIN_DURATION_BIAS, DURATION_BIAS_SPREAD,
    DEFAULT_SPAWN_RATE, MIN_TIME_SCALE, MAX_TIME_SCALE,
)


@dataclass(frozen=True)
class Edges:
    """Solid-wall flags on the four sides of a cell.

    Frozen, so one instance can be shared between cells and grids.
    """

    north: bool = False
    south: bool = False
    east: bool = False
    west: bool = False

    def is_solid(self, side: str) -> bool:
        return getattr(self, side)

    def __repr__(self) -> str:
        solid = [s for s in ("north", "south", "east", "west") if getattr(self, s)]
        return f"Edges({', '.join(solid)})"


NO_EDGES = Edges()


class Cell:
    """One square on the facility grid.

    Subclasses are the tagged variants; each carries only the attributes
    meaningful to its type. Edge walls and sub-masks are shared by all.
    """

    cell_type: CellType

    def __init__(
        self,
        edges: Edges | None = None,
        sub_mask: Sequence[Sequence[int]] | None = None,
        locked: bool = False,
    ) -> None:
        self.edges: Edges = edges or NO_EDGES
        self.sub_mask: np.ndarray | None = (
            np.asarray(sub_mask, dtype=np.int8) if sub_mask is not None else None
        )
        self.locked: bool = locked

    @property
    def sub_blocked(self) -> bool:
        """``True`` if more than half of the sub-mask is solid."""
        if self.sub_mask is None or self.sub_mask.size == 0:
            return False
        solid = int(np.count_nonzero(self.sub_mask == 1))
        return solid > self.sub_mask.size * SUBMASK_BLOCK_RATIO

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class WallCell(Cell):
    cell_type = CellType.WALL


class PathCell(Cell):
    """Drivable road. ``rotation`` only counts when ``has_flow`` is set."""

    cell_type = CellType.PATH

    def __init__(self, rotation: int = 0, has_flow: bool = False, **kwargs) -> None:
        if rotation not in VALID_ROTATIONS:
            raise ValueError(f"Invalid rotation {rotation!r}; expected one of {VALID_ROTATIONS}")
        super().__init__(**kwargs)
        self.rotation: int = rotation
        self.has_flow: bool = has_flow

    @property
    def flow(self) -> Direction | None:
        """The single legal exit direction, or ``None`` for an ungoverned cell."""
        return Direction(self.rotation) if self.has_flow else None

    def __repr__(self) -> str:
        if self.has_flow:
            return f"PathCell(rotation={self.rotation})"
        return "PathCell()"


class ParkingCell(Cell):
    cell_type = CellType.PARKING

    def __init__(self, spot_type: SpotType = SpotType.STANDARD, **kwargs) -> None:
        super().__init__(**kwargs)
        self.spot_type: SpotType = spot_type

    def __repr__(self) -> str:
        return f"ParkingCell({self.spot_type.value})"


class EntryCell(Cell):
    cell_type = CellType.ENTRY


class ExitCell(Cell):
    cell_type = CellType.EXIT


class DestinationCell(Cell):
    cell_type = CellType.DESTINATION


class ZoneCell(Cell):
    """Editor-only zone or display marker. Not drivable, not a wall."""

    def __init__(
        self,
        cell_type: CellType = CellType.ZONE,
        label: str | None = None,
        **kwargs,
    ) -> None:
        if cell_type not in (CellType.ZONE, CellType.DISPLAY):
            raise ValueError(f"ZoneCell cannot have type {cell_type}")
        super().__init__(**kwargs)
        self.cell_type = cell_type
        self.label: str | None = label


class Grid:
    """Immutable rectangle of cells addressed as ``(x, y)``."""

    def __init__(self, rows: Iterable[Iterable[Cell]]) -> None:
        self._rows: tuple[tuple[Cell, ...], ...] = tuple(tuple(r) for r in rows)
        self.height: int = len(self._rows)
        self.width: int = len(self._rows[0]) if self._rows else 0
        for y, row in enumerate(self._rows):
            if len(row) != self.width:
                raise ValueError(
                    f"Row {y} has {len(row)} cells, expected {self.width}"
                )

    @property
    def rows(self) -> tuple[tuple[Cell, ...], ...]:
        return self._rows

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        return self._rows[y][x]

    def __iter__(self) -> Iterator[tuple[tuple[int, int], Cell]]:
        """Yield ``((x, y), cell)`` in row-major order."""
        for y, row in enumerate(self._rows):
            for x, cell in enumerate(row):
                yield (x, y), cell

    def positions_of(self, cell_type: CellType) -> list[tuple[int, int]]:
        return [pos for pos, cell in self if cell.cell_type == cell_type]

    def entry_points(self) -> list[tuple[int, int]]:
        return self.positions_of(CellType.ENTRY)

    def exit_point(self) -> tuple[int, int] | None:
        """Return the first Exit cell in row-major order, or ``None``."""
        for pos, cell in self:
            if cell.cell_type == CellType.EXIT:
                return pos
        return None

    def parking_positions(self) -> list[tuple[int, int]]:
        return self.positions_of(CellType.PARKING)

    def with_cells(self, changes: Mapping[tuple[int, int], Cell]) -> Grid:
        """Return a new grid with the cells in *changes* replaced."""
        rows = [list(r) for r in self._rows]
        for (x, y), cell in changes.items():
            if not self.in_bounds(x, y):
                raise ValueError(f"Position {(x, y)} is outside a {self.width}x{self.height} grid")
            rows[y][x] = cell
        return Grid(rows)

    def with_cell(self, x: int, y: int, cell: Cell) -> Grid:
        return self.with_cells({(x, y): cell})

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"


@dataclass(frozen=True)
class DriverProfile:
    """Per-vehicle personality, rolled once at spawn."""

    patience: float               # 0-1, reroute tolerance (not used by the engine yet)
    walking_preference: float     # 0.3-1.0, 1 = wants to be close to the destination
    parking_duration_bias: float  # 0.5-2.0, multiplier on dwell time

    @classmethod
    def random(cls, rng: random.Random) -> DriverProfile:
        return cls(
            patience=rng.random(),
            walking_preference=MIN_WALKING_PREFERENCE + rng.random() * (1.0 - MIN_WALKING_PREFERENCE),
            parking_duration_bias=MIN_DURATION_BIAS + rng.random() * DURATION_BIAS_SPREAD,
        )


@dataclass
class SimulationConfig:
    """Runtime options exposed to the editor / viewer layer."""

    time_scale: float = 1.0
    is_paused: bool = False
    spawn_rate: float = DEFAULT_SPAWN_RATE
    show_debug: bool = False
    strict_flow: bool = True

    def __post_init__(self) -> None:
        if not MIN_TIME_SCALE <= self.time_scale <= MAX_TIME_SCALE:
            raise ValueError(
                f"time_scale must be between {MIN_TIME_SCALE} and {MAX_TIME_SCALE}, "
                f"got {self.time_scale}"
            )
        if self.spawn_rate < 0:
            raise ValueError(f"spawn_rate must be non-negative, got {self.spawn_rate}")
