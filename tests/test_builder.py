import dataclasses
import warnings

import pytest

from pingball_jax.builder import SceneBuilder, build_scene
from pingball_jax.config import RuntimeConfig
from pingball_jax.parser import parse_board, parse_board_text, tokenize_board
from pingball_jax.data_model import DEFAULT_GRAVITY, DEFAULT_MU1, DEFAULT_MU2
from pingball_jax.errors import (
    DeclarationError, DuplicateNameError, UnresolvedReferenceError,
)
from conftest import ALL_BOARDS, board_path, board_text


# ── Wiring / reference resolution ─────────────────────────────────────

def test_ball_cannot_be_fire_endpoint():
    text = (
        'board name=MyBoard\n'
        'circleBumper name=Bump x=1 y=1\n'
        'ball name=Ball1 x=2.0 y=2.0 xVelocity=0.0 yVelocity=-5.0\n'
        'fire trigger=Ball1 action=Bump\n'
    )
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        parse_board_text(text)
    assert exc_info.value.name == 'Ball1'
    assert exc_info.value.line == 4


def test_forward_reference_fails_naming_action():
    text = board_text(
        'squareBumper name=A x=1 y=1',
        'fire trigger=A action=B',
        'squareBumper name=B x=2 y=1',
    )
    with pytest.raises(UnresolvedReferenceError, match="'B'") as exc_info:
        parse_board_text(text)
    assert exc_info.value.name == 'B'


def test_forward_reference_succeeds_once_reordered():
    text = board_text(
        'squareBumper name=A x=1 y=1',
        'squareBumper name=B x=2 y=1',
        'fire trigger=A action=B',
    )
    scene = parse_board_text(text)
    assert scene.targets_of('A') == {'B'}
    assert scene.targets_of('B') == frozenset()


def test_unknown_trigger_reported_first():
    text = board_text('fire trigger=Nope action=AlsoNope')
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        parse_board_text(text)
    assert exc_info.value.name == 'Nope'


def test_repeated_fire_lines_collapse():
    text = board_text(
        'absorber name=Abs x=0 y=19 width=20 height=1',
        'fire trigger=Abs action=Abs',
        'fire trigger=Abs action=Abs',
    )
    scene = parse_board_text(text)
    assert scene.triggers[scene.gadget('Abs')] == {scene.gadget('Abs')}


@pytest.mark.parametrize('board_name', ALL_BOARDS)
def test_trigger_graph_is_closed(board_name):
    """Every action in the graph is itself a registered gadget."""
    scene = parse_board(board_path(board_name))
    for trigger, actions in scene.triggers.items():
        assert scene.gadget(trigger.name) is trigger
        for action in actions:
            assert action.name in scene.gadgets
            assert action in scene.triggers


# ── Name uniqueness ───────────────────────────────────────────────────

def test_duplicate_gadget_name_rejected():
    text = board_text(
        'squareBumper name=A x=1 y=1',
        'squareBumper name=A x=5 y=5',
    )
    with pytest.raises(DuplicateNameError) as exc_info:
        parse_board_text(text)
    assert exc_info.value.name == 'A'
    assert exc_info.value.line == 3


def test_duplicate_name_across_gadget_kinds_rejected():
    text = board_text(
        'circleBumper name=A x=1 y=1',
        'leftFlipper name=A x=5 y=5',
    )
    with pytest.raises(DuplicateNameError):
        parse_board_text(text)


def test_balls_with_same_name_are_both_kept():
    text = board_text(
        'ball name=B x=1.0 y=1.0 xVelocity=0 yVelocity=0',
        'ball name=B x=2.0 y=1.0 xVelocity=0 yVelocity=0',
    )
    scene = parse_board_text(text)
    assert [b.name for b in scene.balls] == ['B', 'B']
    assert [b.position for b in scene.balls] == [(1.0, 1.0), (2.0, 1.0)]


def test_ball_and_gadget_names_are_separate():
    text = board_text(
        'ball name=Same x=1.0 y=1.0 xVelocity=0 yVelocity=0',
        'squareBumper name=Same x=3 y=3',
    )
    scene = parse_board_text(text)
    assert 'Same' in scene.gadgets
    assert scene.balls[0].name == 'Same'


# ── Literal decoding ──────────────────────────────────────────────────

@pytest.mark.parametrize('line, field', [
    ('squareBumper name=S x=abc y=1', 'x'),
    ('circleBumper name=C x=1 y=1.5', 'y'),
    ('squareBumper name=S x=2147483648 y=1', 'x'),
    ('squareBumper name=S x=1 y=-2147483649', 'y'),
    ('circleBumper name=C x=' + '9' * 400 + ' y=1', 'x'),
    ('triangleBumper name=T x=1 y=1 orientation=45', 'orientation'),
    ('triangleBumper name=T x=1 y=1 orientation=ninety', 'orientation'),
    ('leftFlipper name=F x=1 y=1 orientation=360', 'orientation'),
    ('absorber name=A x=0 y=0 width=0 height=1', 'width'),
    ('absorber name=A x=0 y=0 width=2 height=-1', 'height'),
    ('ball name=B x=1.0 y=nan xVelocity=0 yVelocity=0', 'y'),
    ('ball name=B x=1.0 y=1.0 xVelocity=fast yVelocity=0', 'xVelocity'),
])
def test_bad_literal_raises_declaration_error(line, field):
    with pytest.raises(DeclarationError) as exc_info:
        parse_board_text(board_text(line))
    assert exc_info.value.field == field
    assert exc_info.value.line == 2


def test_bad_board_float_raises_declaration_error():
    with pytest.raises(DeclarationError) as exc_info:
        parse_board_text('board name=B gravity=heavy\n')
    assert exc_info.value.field == 'gravity'


def test_missing_board_line_raises_declaration_error():
    with pytest.raises(DeclarationError) as exc_info:
        parse_board_text('squareBumper name=S x=1 y=1\n')
    assert exc_info.value.field == 'name'


def test_orientation_defaults_to_zero():
    scene = parse_board_text(board_text(
        'triangleBumper name=T x=1 y=1',
        'rightFlipper name=F x=4 y=4',
    ))
    assert scene.gadget('T').orientation == 0
    assert scene.gadget('F').orientation == 0


def test_float_literal_forms():
    scene = parse_board_text(board_text('ball name=B x=1 y=.5 xVelocity=-2. yVelocity=-0.25'))
    ball = scene.balls[0]
    assert ball.position == (1.0, 0.5)
    assert ball.velocity == (-2.0, -0.25)


# ── Global parameters ─────────────────────────────────────────────────

def test_defaults_when_unset():
    scene = parse_board_text('board name=B\n')
    assert scene.gravity == DEFAULT_GRAVITY
    assert scene.mu1 == DEFAULT_MU1
    assert scene.mu2 == DEFAULT_MU2


def test_explicit_globals_override_defaults():
    scene = parse_board_text('board name=B gravity=10.5 friction1=0.5 friction2=0.125\n')
    assert scene.gravity == 10.5
    assert scene.mu1 == 0.5
    assert scene.mu2 == 0.125


def test_config_supplies_defaults_and_timestep():
    config = RuntimeConfig(framerate=50, default_gravity=9.8)
    scene = parse_board_text('board name=B friction1=0.1\n', config)
    assert scene.gravity == 9.8
    assert scene.mu1 == 0.1
    assert scene.mu2 == DEFAULT_MU2
    assert scene.timestep == pytest.approx(0.02)


def test_config_rejects_nonpositive_framerate():
    with pytest.raises(ValueError):
        RuntimeConfig(framerate=0)


def test_config_rejects_nan_framerate():
    with pytest.raises(ValueError):
        RuntimeConfig(framerate=float('nan'))


# ── Off-board placement ───────────────────────────────────────────────

def test_off_board_gadget_warns():
    with pytest.warns(UserWarning, match="outside"):
        scene = parse_board_text(board_text('rightFlipper name=F x=19 y=0'))
    assert 'F' in scene.gadgets


def test_off_board_ball_warns():
    with pytest.warns(UserWarning, match="'B'"):
        parse_board_text(board_text('ball name=B x=25.0 y=1.0 xVelocity=0 yVelocity=0'))


def test_sample_boards_do_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        for board_name in ALL_BOARDS:
            parse_board(board_path(board_name))


# ── Builder lifecycle ─────────────────────────────────────────────────

def test_builder_is_single_use():
    builder = SceneBuilder()
    for decl in tokenize_board('board name=B\ncircleBumper name=C x=1 y=1\n'):
        builder.add(decl)
    scene = builder.finish()
    assert scene.name == 'B'

    extra = tokenize_board('board name=X\nsquareBumper name=S x=1 y=1\n')[1]
    with pytest.raises(RuntimeError):
        builder.add(extra)
    with pytest.raises(RuntimeError):
        builder.finish()
    assert 'S' not in scene.gadgets


def test_scene_is_immutable():
    scene = build_scene(tokenize_board(board_text('circleBumper name=C x=1 y=1')))
    with pytest.raises(dataclasses.FrozenInstanceError):
        scene.name = 'Other'
    with pytest.raises(TypeError):
        scene.triggers[scene.gadget('C')] = frozenset()


def test_int_range_limits_accepted():
    with pytest.warns(UserWarning, match="outside"):
        scene = parse_board_text(board_text('squareBumper name=S x=2147483647 y=-2147483648'))
    assert scene.gadget('S').x == 2 ** 31 - 1


def test_off_board_warning_points_at_caller():
    """Gadget and ball warnings are both attributed to the code calling add()."""
    builder = SceneBuilder()
    decls = tokenize_board(board_text(
        'squareBumper name=S x=30 y=1',
        'ball name=B x=30.0 y=1.0 xVelocity=0 yVelocity=0',
    ))
    with pytest.warns(UserWarning) as record:
        for decl in decls:
            builder.add(decl)
    assert len(record) == 2
    assert all(w.filename == __file__ for w in record)


def test_scene_is_unhashable():
    scene = parse_board_text(board_text('circleBumper name=C x=1 y=1'))
    with pytest.raises(TypeError):
        hash(scene)
