from .enums import SpotType

# ============================================================
# CLOCK
# ============================================================
BASE_TICK_INTERVAL = 0.3    # wall-clock seconds per tick at time_scale 1.0
MIN_TIME_SCALE     = 0.25
MAX_TIME_SCALE     = 8.0

# ============================================================
# SPAWNING
# ============================================================
DEFAULT_SPAWN_RATE   = 10.0   # vehicles per minute (approx)
SPAWN_RATE_DIVISOR   = 200.0  # spawn chance per tick = spawn_rate / divisor
EV_SPAWN_CHANCE       = 0.10
DISABLED_SPAWN_CHANCE = 0.05  # cumulative threshold is EV + DISABLED

# ============================================================
# PARKING DWELL
# ============================================================
BASE_PARKING_TIME   = 20    # ticks
PARKING_TIME_SPREAD = 40    # ticks, uniform on [0, spread)

# ============================================================
# DRIVER PROFILES
# ============================================================
MIN_WALKING_PREFERENCE = 0.3
MIN_DURATION_BIAS      = 0.5
DURATION_BIAS_SPREAD   = 1.5

# ============================================================
# SPOT SCORING
# ============================================================
MALL_WEIGHT   = 2.0     # scaled by walking_preference
ENTRY_WEIGHT  = 0.5     # scaled by (1 - walking_preference)
RANDOM_WEIGHT = 0.2
NOISE_RANGE   = 10.0

COMPATIBLE_SPOTS: dict[SpotType, frozenset[SpotType]] = {
    SpotType.EV:       frozenset({SpotType.EV, SpotType.STANDARD}),
    SpotType.DISABLED: frozenset({SpotType.DISABLED}),
    SpotType.STANDARD: frozenset({SpotType.STANDARD, SpotType.COMPACT}),
}

# ============================================================
# GEOMETRY
# ============================================================
VALID_ROTATIONS      = (0, 90, 180, 270)
SUBMASK_BLOCK_RATIO  = 0.5   # destination blocked above this solid fraction

# ============================================================
# COLOURS  (RGB)
# ============================================================
VEHICLE_COLORS = [
    (59, 130, 246),   # blue
    (239, 68, 68),    # red
    (34, 197, 94),    # green
    (234, 179, 8),    # yellow
    (249, 115, 22),   # orange
    (6, 182, 212),    # cyan
]
EV_COLOR       = (16, 185, 129)   # emerald
DISABLED_COLOR = (37, 99, 235)    # blue

# ============================================================
# ELECTRICAL TELEMETRY  (amps)
# ============================================================
DRIVING_CURRENT_BASE   = 12.0
DRIVING_CURRENT_SPREAD = 6.0
ARRIVAL_CURRENT        = 0.5
PARKED_CURRENT_BASE    = 0.2
PARKED_CURRENT_SPREAD  = 0.1
DEPARTURE_CURRENT      = 5.0
