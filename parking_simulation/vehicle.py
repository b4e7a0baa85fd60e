"""Vehicle class and its per-tick lifecycle."""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from .enums import SpotType, VehicleEvent, VehicleState
from .constants import (
    BASE_PARKING_TIME, PARKING_TIME_SPREAD,
    VEHICLE_COLORS, EV_COLOR, DISABLED_COLOR,
    DRIVING_CURRENT_BASE, DRIVING_CURRENT_SPREAD, ARRIVAL_CURRENT,
    PARKED_CURRENT_BASE, PARKED_CURRENT_SPREAD, DEPARTURE_CURRENT,
)
from .pathfinding import find_route

if TYPE_CHECKING:
    from .models import DriverProfile, Grid

logger = logging.getLogger(__name__)


def pick_color(spot_type: SpotType, rng: random.Random) -> tuple[int, int, int]:
    """Return the display colour for a vehicle with *spot_type* preference."""
    if spot_type == SpotType.EV:
        return EV_COLOR
    if spot_type == SpotType.DISABLED:
        return DISABLED_COLOR
    return VEHICLE_COLORS[rng.randrange(len(VEHICLE_COLORS))]


class Vehicle:
    """A car that enters, parks for a while, and leaves through the exit."""

    _next_id: int = 1

    def __init__(
        self,
        pos: tuple[int, int],
        target: tuple[int, int],
        spot_type: SpotType,
        profile: DriverProfile,
        entry_tick: int = 0,
        color: tuple[int, int, int] = VEHICLE_COLORS[0],
    ) -> None:
        self.vehicle_id: int = Vehicle._next_id
        Vehicle._next_id += 1
        self.pos: tuple[int, int] = pos
        self.state: VehicleState = VehicleState.ENTERING
        self.target: tuple[int, int] | None = target
        self.parking_time: int = 0
        self.spot_type: SpotType = spot_type
        self.profile: DriverProfile = profile
        self.entry_tick: int = entry_tick
        self.color: tuple[int, int, int] = color
        self.electrical_current: float = 0.0
        self.path: list[tuple[int, int]] | None = None
        self.parked_tick: int | None = None
        self.dwell_ticks: int = 0
        self.blocked_ticks: int = 0
        self.blocked_streak: int = 0      # consecutive ticks without a route
        self._warned_no_exit: bool = False

    def update(
        self,
        grid: Grid,
        tick: int,
        exit_pos: tuple[int, int] | None,
        rng: random.Random,
        strict_flow: bool = True,
        keep_path: bool = False,
    ) -> VehicleEvent:
        """Advance one tick and report what happened.

        Only this vehicle is mutated; spot bookkeeping is left to the caller
        based on the returned event.
        """
        if self.state == VehicleState.PARKING:
            return self._count_down(exit_pos, rng)
        return self._drive(grid, tick, rng, strict_flow, keep_path)

    def _drive(
        self,
        grid: Grid,
        tick: int,
        rng: random.Random,
        strict_flow: bool,
        keep_path: bool,
    ) -> VehicleEvent:
        if self.target is None:
            if not self._warned_no_exit:
                logger.warning("Vehicle %d has nowhere to go (no exit cell)", self.vehicle_id)
                self._warned_no_exit = True
            self.blocked_ticks += 1
            self.blocked_streak += 1
            return VehicleEvent.WAITING

        self.electrical_current = DRIVING_CURRENT_BASE + rng.random() * DRIVING_CURRENT_SPREAD
        route = find_route(grid, self.pos, self.target, strict_flow)
        self.path = route if keep_path else None
        if route:
            self.blocked_streak = 0

        if len(route) > 1:
            self.pos = route[1]
            return VehicleEvent.MOVED

        if not route:
            self.blocked_ticks += 1
            self.blocked_streak += 1
            logger.debug("Vehicle %d has no route %s -> %s", self.vehicle_id, self.pos, self.target)
            return VehicleEvent.WAITING

        # route == [pos]: arrived
        if self.state == VehicleState.EXITING:
            logger.info("Vehicle %d left after %d ticks", self.vehicle_id, tick - self.entry_tick)
            return VehicleEvent.LEFT

        self.state = VehicleState.PARKING
        self.target = None
        self.parked_tick = tick
        self.parking_time = math.floor(
            (BASE_PARKING_TIME + rng.random() * PARKING_TIME_SPREAD)
            * self.profile.parking_duration_bias
        )
        self.electrical_current = ARRIVAL_CURRENT
        logger.info(
            "Vehicle %d parked at %s for %d ticks",
            self.vehicle_id, self.pos, self.parking_time,
        )
        return VehicleEvent.PARKED

    def _count_down(self, exit_pos: tuple[int, int] | None, rng: random.Random) -> VehicleEvent:
        self.parking_time -= 1
        self.dwell_ticks += 1
        if self.parking_time > 0:
            self.electrical_current = PARKED_CURRENT_BASE + rng.random() * PARKED_CURRENT_SPREAD
            return VehicleEvent.DWELLING

        self.parking_time = 0
        self.state = VehicleState.EXITING
        self.target = exit_pos
        self.electrical_current = DEPARTURE_CURRENT
        return VehicleEvent.DEPARTED

    def to_dict(self, include_path: bool = False) -> dict:
        """Plain-data view for the viewer layer."""
        data = {
            "id": self.vehicle_id,
            "pos": self.pos,
            "state": self.state.value,
            "target": self.target,
            "spot_type": self.spot_type.value,
            "color": self.color,
            "electrical_current": self.electrical_current,
        }
        if include_path:
            data["path"] = list(self.path) if self.path else []
        return data
