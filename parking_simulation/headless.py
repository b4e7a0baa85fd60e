"""Headless (no-viewer) simulation runner."""

from __future__ import annotations

import logging
import time as _time

from .models import Grid, SimulationConfig
from .layout import build_demo_lot
from .simulation import Simulation
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _reset_id_counters() -> None:
    """Reset class-level ID counters so each headless run starts fresh."""
    Vehicle._next_id = 1


def run_headless(
    grid: Grid | None = None,
    num_ticks: int = 2000,
    config: SimulationConfig | None = None,
    seed: int | None = None,
) -> dict:
    """Run the simulation for *num_ticks* discrete ticks, ignoring wall-clock pacing.

    Defaults to the demo lot with flow enforcement off (its aisles are
    two-way). Returns a dict of performance metrics.
    """
    if num_ticks < 0:
        raise ValueError(f"num_ticks must be non-negative, got {num_ticks}")
    _reset_id_counters()
    wall_start = _time.monotonic()

    if grid is None:
        grid = build_demo_lot()
        if config is None:
            config = SimulationConfig(strict_flow=False)
    sim = Simulation(grid, config=config, seed=seed)

    occupancy: list[float] = []
    active: list[int] = []
    waiting_ticks = 0

    for _ in range(num_ticks):
        sim.tick()
        occupancy.append(sim.occupancy_pct)
        active.append(len(sim.vehicles))

    for vehicle in sim.vehicles:
        waiting_ticks += vehicle.blocked_ticks
    # only vehicles still without a route at the end of the run
    stuck = [v.vehicle_id for v in sim.vehicles if v.blocked_streak > 0]

    wall_elapsed = _time.monotonic() - wall_start
    final = sim.snapshot()

    logger.info(
        "Headless run: %d ticks, %d parked, %d departed, peak occupancy %.1f%%",
        num_ticks, sim.total_vehicles_parked, sim.total_vehicles_departed,
        max(occupancy, default=0.0),
    )

    return {
        "num_ticks": num_ticks,
        "spawn_rate": sim.config.spawn_rate,
        "strict_flow": sim.config.strict_flow,
        "total_vehicles_parked": sim.total_vehicles_parked,
        "total_vehicles_departed": sim.total_vehicles_departed,
        "spawns_rejected": sim.spawns_rejected,
        "active_vehicles": len(sim.vehicles),
        "peak_active_vehicles": max(active, default=0),
        "final_occupancy_pct": final["occupancy_pct"],
        "mean_occupancy_pct": sum(occupancy) / len(occupancy) if occupancy else 0.0,
        "peak_occupancy_pct": max(occupancy, default=0.0),
        "avg_time_to_park": final["avg_time_to_park"],
        "avg_dwell_time": final["avg_dwell_time"],
        "waiting_ticks": waiting_ticks,
        "stuck_vehicle_ids": stuck,
        "wall_clock_seconds": wall_elapsed,
    }
