from enum import Enum


class CellType(Enum):
    WALL        = "wall"          # Structure / obstacle
    PATH        = "path"          # Drivable road
    PARKING     = "parking"       # Parking spot
    ENTRY       = "entry"         # Vehicle entry
    EXIT        = "exit"          # Vehicle exit
    DESTINATION = "destination"   # Pedestrian goal (mall entrance)
    DISPLAY     = "display"       # Editor-only display screen
    ZONE        = "zone"          # Editor-only zone marker


class SpotType(Enum):
    STANDARD = "standard"
    COMPACT  = "compact"
    EV       = "ev"
    DISABLED = "disabled"
    RESERVED = "reserved"


class VehicleState(Enum):
    ENTERING = "entering"
    PARKING  = "parking"
    EXITING  = "exiting"


class VehicleEvent(Enum):
    """What happened to a vehicle during one tick."""
    MOVED    = "moved"      # advanced one cell along its route
    WAITING  = "waiting"    # no legal route this tick
    PARKED   = "parked"     # reached its spot
    DWELLING = "dwelling"   # still parked, spot confirmed
    DEPARTED = "departed"   # dwell time over, spot released
    LEFT     = "left"       # reached the exit, drop from the active set


class Direction(Enum):
    """Travel directions in neighbour-scan order, valued by flow rotation."""
    UP    = 0
    RIGHT = 90
    DOWN  = 180
    LEFT  = 270

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    @property
    def edge(self) -> str:
        """Name of the cell edge crossed when leaving in this direction."""
        return _EDGES[self]

    @property
    def opposite(self) -> "Direction":
        return Direction((self.value + 180) % 360)


_DELTAS = {
    Direction.UP:    (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN:  (0, 1),
    Direction.LEFT:  (-1, 0),
}

_EDGES = {
    Direction.UP:    "north",
    Direction.RIGHT: "east",
    Direction.DOWN:  "south",
    Direction.LEFT:  "west",
}
