"""
Standalone Pingball board parser.
Reads board files, produces a Scene.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pingball_jax.builder import build_scene
from pingball_jax.config import RuntimeConfig
from pingball_jax.data_model import Scene
from pingball_jax.errors import BoardSyntaxError


# ── Keyword → (required fields, optional fields) ──────────────────────

GRAMMAR = {
    'board': (('name',), ('gravity', 'friction1', 'friction2')),
    'squareBumper': (('name', 'x', 'y'), ()),
    'circleBumper': (('name', 'x', 'y'), ()),
    'triangleBumper': (('name', 'x', 'y'), ('orientation',)),
    'absorber': (('name', 'x', 'y', 'width', 'height'), ()),
    'leftFlipper': (('name', 'x', 'y'), ('orientation',)),
    'rightFlipper': (('name', 'x', 'y'), ('orientation',)),
    'ball': (('name', 'x', 'y', 'xVelocity', 'yVelocity'), ()),
    'fire': (('trigger', 'action'), ()),
}

# Fields whose value is an identifier rather than a numeric literal
NAME_FIELDS = frozenset({'name', 'trigger', 'action'})

NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*\Z')

COMMENT_CHAR = '#'


@dataclass
class Declaration:
    """One recognized line: keyword plus its raw key=value text."""
    kind: str
    fields: Dict[str, str] = field(default_factory=dict)
    line: int = 0
    text: str = ''


# ── Line parser ───────────────────────────────────────────────────────

def _parse_line(content, line_no, raw):
    """Parse 'keyword key=val key=val ...' into a Declaration."""
    parts = content.split()
    kind = parts[0]
    if kind not in GRAMMAR:
        raise BoardSyntaxError(f"Unknown declaration '{kind}'", line=line_no, text=raw)
    required, optional = GRAMMAR[kind]
    allowed = set(required) | set(optional)

    fields = {}
    for part in parts[1:]:
        if '=' not in part:
            raise BoardSyntaxError(f"Expected key=value, got '{part}'",
                                   line=line_no, text=raw)
        k, v = part.split('=', 1)
        if not k or not v:
            raise BoardSyntaxError(f"Empty key or value in '{part}'",
                                   line=line_no, text=raw)
        if k not in allowed:
            raise BoardSyntaxError(f"'{kind}' has no field '{k}'",
                                   line=line_no, text=raw)
        if k in fields:
            raise BoardSyntaxError(f"Field '{k}' given twice",
                                   line=line_no, text=raw)
        if k in NAME_FIELDS and not NAME_RE.match(v):
            raise BoardSyntaxError(f"'{v}' is not a valid name",
                                   line=line_no, text=raw)
        fields[k] = v

    missing = [k for k in required if k not in fields]
    if missing:
        raise BoardSyntaxError(
            f"'{kind}' is missing required field(s): {', '.join(missing)}",
            line=line_no, text=raw)
    return Declaration(kind=kind, fields=fields, line=line_no, text=raw.strip())


def tokenize_board(text: str) -> List[Declaration]:
    """
    Split board text into declarations, in source order.

    Raises BoardSyntaxError on the first line that does not match the grammar.
    """
    declarations = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        content = raw.split(COMMENT_CHAR, 1)[0].strip()
        if not content:
            continue
        decl = _parse_line(content, line_no, raw)
        if decl.kind == 'board' and declarations:
            raise BoardSyntaxError(
                "The board line must be the first declaration",
                line=line_no, text=raw)
        declarations.append(decl)
    return declarations


# ── Main entry point ──────────────────────────────────────────────────

def parse_board(path, encoding='utf-8', config: Optional[RuntimeConfig] = None) -> Scene:
    """
    Parse a board file into a Scene.

    Args:
        path: path to the board file
        encoding: text encoding of the file
        config: runtime settings (frame rate, defaults); RuntimeConfig() if None

    Returns:
        Scene
    """
    with open(path, encoding=encoding) as f:
        board_text = f.read()
    return parse_board_text(board_text, config)


def parse_board_text(board_text: str, config: Optional[RuntimeConfig] = None) -> Scene:
    """
    Parse board text into a Scene.
    """
    return build_scene(tokenize_board(board_text), config)
