import enum
import types
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Tuple, Union

# Pingball physics constants. Distances are in L (one board square),
# times in seconds.
DEFAULT_GRAVITY = 25.0               # L / s^2, downward
DEFAULT_MU1 = 0.025                  # friction per second
DEFAULT_MU2 = 0.025                  # friction per L
DEFAULT_FRAMERATE = 20               # simulation frames per second
BOARD_SIZE = 20                      # playing field is BOARD_SIZE x BOARD_SIZE

VALID_ORIENTATIONS = (0, 90, 180, 270)

BUMPER_REFLECTION = 1.0
FLIPPER_REFLECTION = 0.95
FLIPPER_EXTENT = 2                   # flippers sweep a 2L x 2L box


class Orientation(enum.IntEnum):
    DEG_0 = 0
    DEG_90 = 90
    DEG_180 = 180
    DEG_270 = 270


class FlipperSide(enum.Enum):
    LEFT = 'left'
    RIGHT = 'right'


class GadgetKind(enum.IntEnum):
    SQUARE_BUMPER = 0
    CIRCLE_BUMPER = 1
    TRIANGLE_BUMPER = 2
    ABSORBER = 3
    LEFT_FLIPPER = 4
    RIGHT_FLIPPER = 5


@dataclass(frozen=True)
class SquareBumper:
    name: str
    x: int
    y: int

    kind = GadgetKind.SQUARE_BUMPER
    width = 1
    height = 1
    reflection = BUMPER_REFLECTION


@dataclass(frozen=True)
class CircleBumper:
    name: str
    x: int
    y: int

    kind = GadgetKind.CIRCLE_BUMPER
    width = 1
    height = 1
    reflection = BUMPER_REFLECTION


@dataclass(frozen=True)
class TriangleBumper:
    name: str
    x: int
    y: int
    orientation: Orientation = Orientation.DEG_0

    kind = GadgetKind.TRIANGLE_BUMPER
    width = 1
    height = 1
    reflection = BUMPER_REFLECTION


@dataclass(frozen=True)
class Absorber:
    name: str
    x: int
    y: int
    width: int
    height: int

    kind = GadgetKind.ABSORBER
    reflection = 0.0                 # captures the ball instead of bouncing it


@dataclass(frozen=True)
class Flipper:
    name: str
    x: int
    y: int
    side: FlipperSide
    orientation: Orientation = Orientation.DEG_0

    width = FLIPPER_EXTENT
    height = FLIPPER_EXTENT
    reflection = FLIPPER_REFLECTION

    @property
    def kind(self):
        if self.side is FlipperSide.LEFT:
            return GadgetKind.LEFT_FLIPPER
        return GadgetKind.RIGHT_FLIPPER


Gadget = Union[SquareBumper, CircleBumper, TriangleBumper, Absorber, Flipper]

GADGET_TYPES = (SquareBumper, CircleBumper, TriangleBumper, Absorber, Flipper)


@dataclass(frozen=True)
class Ball:
    name: str
    position: Tuple[float, float]
    velocity: Tuple[float, float]


@dataclass(frozen=True)
class Scene:
    name: str
    gravity: float
    mu1: float
    mu2: float
    # gadget -> gadgets it fires when struck; every gadget has an entry
    triggers: Mapping[Gadget, FrozenSet[Gadget]]
    timestep: float
    balls: Tuple[Ball, ...] = field(default_factory=tuple)

    # triggers is a read-only mapping, so scenes compare by value but are unhashable
    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.triggers, types.MappingProxyType):
            frozen = {g: frozenset(acts) for g, acts in self.triggers.items()}
            object.__setattr__(self, 'triggers', types.MappingProxyType(frozen))
        object.__setattr__(self, 'balls', tuple(self.balls))

    @property
    def gadgets(self) -> Dict[str, Gadget]:
        return {g.name: g for g in self.triggers}

    def gadget(self, name: str) -> Gadget:
        for g in self.triggers:
            if g.name == name:
                return g
        raise KeyError(f"Unknown gadget: {name}")

    def targets_of(self, name: str) -> FrozenSet[str]:
        """Names of the gadgets fired when gadget `name` is struck."""
        return frozenset(g.name for g in self.triggers[self.gadget(name)])
