"""
Parking facility simulation package.

Public API re-exports.
"""

from .enums import CellType, SpotType, VehicleState, VehicleEvent, Direction
from .constants import *  # noqa: F401,F403
from .models import (
    Edges, Cell, WallCell, PathCell, ParkingCell, EntryCell, ExitCell,
    DestinationCell, ZoneCell, Grid, DriverProfile, SimulationConfig,
)
from .distance_field import UNREACHABLE, build_distance_field, distance_at, has_distance_signal
from .pathfinding import find_route, is_legal_move
from .spot_selector import find_best_spot, is_compatible, score_spot
from .vehicle import Vehicle
from .simulation import Simulation
from .layout import (
    grid_from_strings, grid_to_strings, stamp_flow, build_demo_lot, verify_layout,
)
from .headless import run_headless

__all__ = [
    "CellType", "SpotType", "VehicleState", "VehicleEvent", "Direction",
    "Edges", "Cell", "WallCell", "PathCell", "ParkingCell", "EntryCell",
    "ExitCell", "DestinationCell", "ZoneCell", "Grid", "DriverProfile",
    "SimulationConfig",
    "UNREACHABLE", "build_distance_field", "distance_at", "has_distance_signal",
    "find_route", "is_legal_move",
    "find_best_spot", "is_compatible", "score_spot",
    "Vehicle",
    "Simulation",
    "grid_from_strings", "grid_to_strings", "stamp_flow", "build_demo_lot",
    "verify_layout",
    "run_headless",
]
