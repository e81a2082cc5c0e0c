"""Pingball board compiler: board text → Scene → JAX array tables."""
from .parser import parse_board, parse_board_text, tokenize_board, Declaration
from .builder import SceneBuilder, build_scene
from .compiler import compile_scene, CompiledBoard
from .config import RuntimeConfig
from .data_model import (Scene, Ball, SquareBumper, CircleBumper, TriangleBumper,
                         Absorber, Flipper, GadgetKind, FlipperSide, Orientation)
from .errors import (BoardError, BoardSyntaxError, DeclarationError,
                     UnresolvedReferenceError, DuplicateNameError)
