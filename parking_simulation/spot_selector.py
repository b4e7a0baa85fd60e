"""Parking spot selection: compatibility filter plus a weighted score."""

from __future__ import annotations

import logging
import random
from typing import AbstractSet

import numpy as np

from .enums import SpotType
from .constants import (
    COMPATIBLE_SPOTS, MALL_WEIGHT, ENTRY_WEIGHT, RANDOM_WEIGHT, NOISE_RANGE,
)
from .distance_field import UNREACHABLE, has_distance_signal
from .models import DriverProfile, Grid, ParkingCell

logger = logging.getLogger(__name__)


def is_compatible(preference: SpotType, spot_type: SpotType) -> bool:
    """Return ``True`` if a vehicle wanting *preference* may use *spot_type*.

    EV drivers also accept standard spots, disabled drivers only disabled
    spots, everyone else standard or compact.
    """
    allowed = COMPATIBLE_SPOTS.get(preference, COMPATIBLE_SPOTS[SpotType.STANDARD])
    return spot_type in allowed


def score_spot(
    pos: tuple[int, int],
    entry: tuple[int, int],
    profile: DriverProfile,
    walk_distance: float,
    noise: float,
) -> float:
    """Lower is better."""
    w_mall = MALL_WEIGHT * profile.walking_preference
    w_entry = ENTRY_WEIGHT * (1.0 - profile.walking_preference)
    from_entry = abs(pos[0] - entry[0]) + abs(pos[1] - entry[1])
    # w_mall of 0 must not turn an infinite walk into NaN
    mall_term = walk_distance * w_mall if w_mall else 0.0
    return mall_term + from_entry * w_entry + noise * RANDOM_WEIGHT


def find_best_spot(
    grid: Grid,
    occupied: AbstractSet[tuple[int, int]],
    entry: tuple[int, int],
    preference: SpotType,
    profile: DriverProfile,
    distance_field: np.ndarray | None = None,
    rng: random.Random | None = None,
) -> tuple[int, int] | None:
    """Pick the lowest-scoring free, compatible parking cell, or ``None``.

    Does not reserve the spot; the caller marks it occupied.
    """
    rng = rng or random.Random()
    use_field = has_distance_signal(distance_field)

    best: tuple[int, int] | None = None
    best_score = float("inf")
    for (x, y), cell in grid:
        if not isinstance(cell, ParkingCell) or (x, y) in occupied:
            continue
        if not is_compatible(preference, cell.spot_type):
            continue
        walk = 0.0
        if use_field:
            hops = int(distance_field[y, x])
            walk = float("inf") if hops == UNREACHABLE else float(hops)
        noise = rng.random() * NOISE_RANGE
        score = score_spot((x, y), entry, profile, walk, noise)
        # strict < keeps the earliest candidate on ties
        if best is None or score < best_score:
            best = (x, y)
            best_score = score

    if best is None:
        logger.debug("No free %s-compatible spot for entry %s", preference.value, entry)
    return best
