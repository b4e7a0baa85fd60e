"""Simulation clock: advances vehicles, spawns arrivals, tracks occupancy."""

from __future__ import annotations

import logging
import random

import numpy as np

from .enums import SpotType, VehicleEvent, VehicleState
from .constants import (
    BASE_TICK_INTERVAL, SPAWN_RATE_DIVISOR,
    EV_SPAWN_CHANCE, DISABLED_SPAWN_CHANCE,
)
from .distance_field import build_distance_field
from .models import DriverProfile, Grid, SimulationConfig
from .spot_selector import find_best_spot
from .vehicle import Vehicle, pick_color

logger = logging.getLogger(__name__)


class _TickPlan:
    """Occupancy and vehicle-list changes collected during one tick."""

    def __init__(self) -> None:
        self.released: set[tuple[int, int]] = set()
        self.confirmed: set[tuple[int, int]] = set()
        self.departed: list[Vehicle] = []
        self.parked: list[Vehicle] = []
        self.left: list[Vehicle] = []
        self.spawned: Vehicle | None = None


class Simulation:
    """Discrete-time parking facility simulation over a fixed grid.

    Owns the active vehicle list and the occupied-spot set; nothing else
    writes to either.
    """

    def __init__(
        self,
        grid: Grid,
        config: SimulationConfig | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        self.config: SimulationConfig = config or SimulationConfig()
        self.rng: random.Random = rng or random.Random(seed)
        self.grid: Grid = grid
        self.distance_field: np.ndarray = build_distance_field(grid)
        self._exit_pos: tuple[int, int] | None = grid.exit_point()
        self._entries: list[tuple[int, int]] = grid.entry_points()
        self._total_spots: int = len(grid.parking_positions())

        self.vehicles: list[Vehicle] = []
        self.occupied_spots: set[tuple[int, int]] = set()
        self.tick_count: int = 0
        self._time_accumulator: float = 0.0
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.total_vehicles_parked: int = 0
        self.total_vehicles_departed: int = 0
        self.spawns_rejected: int = 0
        self.time_to_park: list[int] = []
        self.dwell_times: list[int] = []

    # ── map / lifecycle controls ────────────────────────────────

    def set_grid(self, grid: Grid) -> None:
        """Swap in a new map. Vehicles and occupancy are cleared."""
        self.grid = grid
        self.distance_field = build_distance_field(grid)
        self._exit_pos = grid.exit_point()
        self._entries = grid.entry_points()
        self._total_spots = len(grid.parking_positions())
        self.clear_vehicles()
        logger.info(
            "Grid replaced: %dx%d, %d entries, %d spots",
            grid.width, grid.height, len(self._entries), self._total_spots,
        )

    def clear_vehicles(self) -> None:
        self.vehicles = []
        self.occupied_spots = set()

    def reset(self) -> None:
        """Clear vehicles, analytics and the tick counter, and unpause."""
        self.clear_vehicles()
        self._reset_stats()
        self.tick_count = 0
        self._time_accumulator = 0.0
        self.config.is_paused = False

    # ── clock ───────────────────────────────────────────────────

    @property
    def tick_interval(self) -> float:
        """Wall-clock seconds per tick at the current time scale."""
        return BASE_TICK_INTERVAL / self.config.time_scale

    def advance(self, elapsed: float) -> int:
        """Feed *elapsed* wall-clock seconds; run every whole tick that fits.

        Returns the number of ticks run. Nothing happens while paused.
        """
        if self.config.is_paused:
            return 0
        self._time_accumulator += elapsed
        ran = 0
        interval = self.tick_interval
        while self._time_accumulator >= interval:
            self._time_accumulator -= interval
            self.tick()
            ran += 1
        return ran

    def tick(self) -> dict:
        """Run one discrete step and return the resulting snapshot."""
        plan = _TickPlan()
        keep_path = self.config.show_debug
        # entries are checked against where vehicles stood before moving
        start_positions = {v.pos for v in self.vehicles}

        # 1. per-vehicle decisions; only the vehicle itself is mutated here
        for vehicle in self.vehicles:
            event = vehicle.update(
                self.grid, self.tick_count, self._exit_pos, self.rng,
                strict_flow=self.config.strict_flow, keep_path=keep_path,
            )
            if event == VehicleEvent.PARKED:
                plan.parked.append(vehicle)
            elif event == VehicleEvent.DWELLING:
                plan.confirmed.add(vehicle.pos)
            elif event == VehicleEvent.DEPARTED:
                plan.departed.append(vehicle)
                plan.released.add(vehicle.pos)
            elif event == VehicleEvent.LEFT:
                plan.left.append(vehicle)

        # 2. spawn against the projected end-of-tick state
        if self._entries and self.rng.random() < self.config.spawn_rate / SPAWN_RATE_DIVISOR:
            projected = (self.occupied_spots - plan.released) | plan.confirmed
            plan.spawned = self._try_spawn(projected, start_positions)

        # 3. commit
        self._commit(plan)
        self.tick_count += 1
        return self.snapshot()

    def _commit(self, plan: _TickPlan) -> None:
        self.occupied_spots -= plan.released
        self.occupied_spots |= plan.confirmed

        for vehicle in plan.parked:
            self.total_vehicles_parked += 1
            self.time_to_park.append(vehicle.parked_tick - vehicle.entry_tick)
        for vehicle in plan.departed:
            self.dwell_times.append(vehicle.dwell_ticks)

        if plan.left:
            gone = {id(v) for v in plan.left}
            self.vehicles = [v for v in self.vehicles if id(v) not in gone]
            self.total_vehicles_departed += len(plan.left)

        if plan.spawned is not None:
            self.vehicles.append(plan.spawned)
            self.occupied_spots.add(plan.spawned.target)

    # ── spawning ────────────────────────────────────────────────

    def _roll_spot_type(self) -> SpotType:
        roll = self.rng.random()
        if roll < EV_SPAWN_CHANCE:
            return SpotType.EV
        if roll < EV_SPAWN_CHANCE + DISABLED_SPAWN_CHANCE:
            return SpotType.DISABLED
        return SpotType.STANDARD

    def _try_spawn(
        self,
        occupied: set[tuple[int, int]],
        blocked: set[tuple[int, int]] | None = None,
        entry: tuple[int, int] | None = None,
        spot_type: SpotType | None = None,
    ) -> Vehicle | None:
        """Build a new vehicle at an entry, or ``None`` if the spawn is rejected.

        *blocked* holds the vehicle positions an entry is checked against;
        defaults to where the vehicles are now.
        """
        if entry is None:
            entry = self._entries[self.rng.randrange(len(self._entries))]
        if spot_type is None:
            spot_type = self._roll_spot_type()
        color = pick_color(spot_type, self.rng)
        profile = DriverProfile.random(self.rng)

        if blocked is None:
            blocked = {v.pos for v in self.vehicles}
        if entry in blocked:
            self.spawns_rejected += 1
            logger.debug("Spawn at %s rejected: entry occupied", entry)
            return None

        spot = find_best_spot(
            self.grid, occupied, entry, spot_type, profile,
            distance_field=self.distance_field, rng=self.rng,
        )
        if spot is None:
            self.spawns_rejected += 1
            logger.debug("Spawn at %s rejected: no free %s spot", entry, spot_type.value)
            return None

        vehicle = Vehicle(
            entry, spot, spot_type, profile,
            entry_tick=self.tick_count, color=color,
        )
        logger.debug(
            "Vehicle %d spawned at %s (%s) -> spot %s",
            vehicle.vehicle_id, entry, spot_type.value, spot,
        )
        return vehicle

    def spawn_vehicle(
        self,
        entry: tuple[int, int] | None = None,
        spot_type: SpotType | None = None,
    ) -> Vehicle | None:
        """Attempt a spawn right now, skipping the spawn-rate roll.

        The spot is reserved immediately. Returns the vehicle or ``None``.
        """
        if entry is None and not self._entries:
            return None
        if entry is not None and entry not in self._entries:
            raise ValueError(f"{entry} is not an entry cell")
        vehicle = self._try_spawn(self.occupied_spots, entry=entry, spot_type=spot_type)
        if vehicle is not None:
            self.vehicles.append(vehicle)
            self.occupied_spots.add(vehicle.target)
        return vehicle

    # ── output ──────────────────────────────────────────────────

    @property
    def occupancy_pct(self) -> float:
        return len(self.occupied_spots) / (self._total_spots or 1) * 100.0

    def vehicles_in(self, state: VehicleState) -> list[Vehicle]:
        return [v for v in self.vehicles if v.state == state]

    def snapshot(self) -> dict:
        """Per-tick output for the viewer layer."""
        show_path = self.config.show_debug
        return {
            "tick": self.tick_count,
            "vehicles": [v.to_dict(include_path=show_path) for v in self.vehicles],
            "occupied_spots": sorted(self.occupied_spots),
            "total_vehicles_parked": self.total_vehicles_parked,
            "total_vehicles_departed": self.total_vehicles_departed,
            "spawns_rejected": self.spawns_rejected,
            "occupancy_pct": self.occupancy_pct,
            "total_current": sum(v.electrical_current for v in self.vehicles),
            "avg_time_to_park": (
                sum(self.time_to_park) / len(self.time_to_park) if self.time_to_park else 0.0
            ),
            "avg_dwell_time": (
                sum(self.dwell_times) / len(self.dwell_times) if self.dwell_times else 0.0
            ),
        }
