"""
Builder: walks parsed declarations in source order and assembles a Scene.
"""
import re
import warnings
from typing import Iterable, Optional

from pingball_jax.config import RuntimeConfig
from pingball_jax.data_model import (
    SquareBumper, CircleBumper, TriangleBumper, Absorber, Flipper, Ball, Scene,
    Orientation, FlipperSide, VALID_ORIENTATIONS,
)
from pingball_jax.errors import DeclarationError
from pingball_jax.registry import GadgetRegistry, TriggerGraph

INT_RE = re.compile(r'-?[0-9]+\Z')
INT_MIN, INT_MAX = -2 ** 31, 2 ** 31 - 1
FLOAT_RE = re.compile(r'-?([0-9]+\.[0-9]*|\.?[0-9]+)\Z')


# ── Literal decoders ──────────────────────────────────────────────────

def _decode_int(decl, key):
    raw = decl.fields[key]
    if not INT_RE.match(raw):
        raise DeclarationError(f"Field '{key}' expects an integer, got '{raw}'",
                               field=key, line=decl.line, text=decl.text)
    value = int(raw)
    if not INT_MIN <= value <= INT_MAX:
        raise DeclarationError(f"Field '{key}' is out of integer range, got '{raw}'",
                               field=key, line=decl.line, text=decl.text)
    return value


def _decode_float(decl, key):
    raw = decl.fields[key]
    if not FLOAT_RE.match(raw):
        raise DeclarationError(f"Field '{key}' expects a number, got '{raw}'",
                               field=key, line=decl.line, text=decl.text)
    return float(raw)


def _decode_orientation(decl):
    if 'orientation' not in decl.fields:
        return Orientation.DEG_0
    value = _decode_int(decl, 'orientation')
    if value not in VALID_ORIENTATIONS:
        raise DeclarationError(
            f"Orientation must be one of {VALID_ORIENTATIONS}, got {value}",
            field='orientation', line=decl.line, text=decl.text)
    return Orientation(value)


def _decode_extent(decl, key):
    value = _decode_int(decl, key)
    if value <= 0:
        raise DeclarationError(f"Field '{key}' must be positive, got {value}",
                               field=key, line=decl.line, text=decl.text)
    return value


# ── Gadget builders ───────────────────────────────────────────────────

def _build_square_bumper(decl):
    return SquareBumper(decl.fields['name'], _decode_int(decl, 'x'), _decode_int(decl, 'y'))


def _build_circle_bumper(decl):
    return CircleBumper(decl.fields['name'], _decode_int(decl, 'x'), _decode_int(decl, 'y'))


def _build_triangle_bumper(decl):
    return TriangleBumper(decl.fields['name'], _decode_int(decl, 'x'),
                          _decode_int(decl, 'y'), _decode_orientation(decl))


def _build_absorber(decl):
    return Absorber(decl.fields['name'], _decode_int(decl, 'x'), _decode_int(decl, 'y'),
                    _decode_extent(decl, 'width'), _decode_extent(decl, 'height'))


def _build_left_flipper(decl):
    return Flipper(decl.fields['name'], _decode_int(decl, 'x'), _decode_int(decl, 'y'),
                   FlipperSide.LEFT, _decode_orientation(decl))


def _build_right_flipper(decl):
    return Flipper(decl.fields['name'], _decode_int(decl, 'x'), _decode_int(decl, 'y'),
                   FlipperSide.RIGHT, _decode_orientation(decl))


GADGET_BUILDERS = {
    'squareBumper': _build_square_bumper,
    'circleBumper': _build_circle_bumper,
    'triangleBumper': _build_triangle_bumper,
    'absorber': _build_absorber,
    'leftFlipper': _build_left_flipper,
    'rightFlipper': _build_right_flipper,
}


def _build_ball(decl):
    return Ball(
        name=decl.fields['name'],
        position=(_decode_float(decl, 'x'), _decode_float(decl, 'y')),
        velocity=(_decode_float(decl, 'xVelocity'), _decode_float(decl, 'yVelocity')),
    )


# ── Scene builder ─────────────────────────────────────────────────────

class SceneBuilder:
    """
    Single-use accumulator for one board.

    Declarations must be fed in source order: a fire line only resolves
    gadgets added before it. finish() may be called once; the builder is
    closed afterwards.
    """

    def __init__(self, config: Optional[RuntimeConfig] = None):
        self.config = config if config is not None else RuntimeConfig()
        self._registry = GadgetRegistry()
        self._graph = TriggerGraph(self._registry)
        self._balls = []
        self._header = None
        self._finished = False

    def add(self, decl):
        if self._finished:
            raise RuntimeError("SceneBuilder already produced its scene")
        if decl.kind == 'board':
            self._header = decl
        elif decl.kind == 'fire':
            self._graph.connect(decl.fields['trigger'], decl.fields['action'],
                                decl.line, decl.text)
        elif decl.kind == 'ball':
            ball = _build_ball(decl)
            self._balls.append(ball)
            x, y = ball.position
            self._check_on_board(x, y, 0, 0, decl)
        elif decl.kind in GADGET_BUILDERS:
            gadget = GADGET_BUILDERS[decl.kind](decl)
            self._registry.register(gadget, decl.line, decl.text)
            self._graph.add_gadget(gadget)
            self._check_on_board(gadget.x, gadget.y, gadget.width, gadget.height, decl)
        else:
            raise DeclarationError(f"Unsupported declaration '{decl.kind}'",
                                   line=decl.line, text=decl.text)

    def _check_on_board(self, x, y, width, height, decl):
        # Called directly from add() so stacklevel 3 is add()'s caller
        size = self.config.board_size
        if x < 0 or y < 0 or x + width > size or y + height > size:
            warnings.warn(
                f"line {decl.line}: '{decl.fields['name']}' extends outside "
                f"the {size}x{size} board",
                stacklevel=3,
            )

    def _header_float(self, key, default):
        if key not in self._header.fields:
            return default
        return _decode_float(self._header, key)

    def finish(self) -> Scene:
        if self._finished:
            raise RuntimeError("SceneBuilder already produced its scene")
        if self._header is None:
            raise DeclarationError("Board has no 'board name=...' line", field='name')
        cfg = self.config
        scene = Scene(
            name=self._header.fields['name'],
            gravity=self._header_float('gravity', cfg.default_gravity),
            mu1=self._header_float('friction1', cfg.default_mu1),
            mu2=self._header_float('friction2', cfg.default_mu2),
            triggers=self._graph.edges(),
            timestep=cfg.timestep,
            balls=tuple(self._balls),
        )
        self._finished = True
        return scene


def build_scene(declarations: Iterable, config: Optional[RuntimeConfig] = None) -> Scene:
    """Walk declarations once, top to bottom, and return the finished Scene."""
    builder = SceneBuilder(config)
    for decl in declarations:
        builder.add(decl)
    return builder.finish()
