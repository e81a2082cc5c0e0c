#!/usr/bin/env python
"""
Parse a Pingball board file and print what it declares.

Usage:
    python scripts/inspect_board.py boards/default.pb
    python scripts/inspect_board.py board.pb --encoding latin-1
    python scripts/inspect_board.py board.pb --framerate 60 --arrays
"""

import argparse
import sys

from pingball_jax.compiler import compile_scene
from pingball_jax.config import RuntimeConfig
from pingball_jax.errors import BoardError
from pingball_jax.parser import parse_board


def _print_scene(scene):
    print(f"board {scene.name}")
    print(f"  gravity={scene.gravity} mu1={scene.mu1} mu2={scene.mu2} "
          f"timestep={scene.timestep:.4f}")
    print(f"  gadgets ({len(scene.triggers)}):")
    for gadget in sorted(scene.triggers, key=lambda g: g.name):
        targets = ', '.join(sorted(scene.targets_of(gadget.name))) or '-'
        print(f"    {gadget.name:<12} {gadget.kind.name:<16} "
              f"({gadget.x}, {gadget.y})  fires: {targets}")
    print(f"  balls ({len(scene.balls)}):")
    for ball in scene.balls:
        print(f"    {ball.name:<12} pos={ball.position} vel={ball.velocity}")


def _print_arrays(compiled):
    print("  compiled arrays:")
    for field in ('kinds', 'positions', 'sizes', 'orientations', 'reflections', 'triggers'):
        arr = getattr(compiled, field)
        print(f"    {field:<13} shape={tuple(arr.shape)} dtype={arr.dtype}")


def main():
    parser = argparse.ArgumentParser(description="Inspect a Pingball board file")
    parser.add_argument("board", help="path to the board file")
    parser.add_argument("--encoding", default="utf-8", help="file encoding")
    parser.add_argument("--framerate", type=float, default=None,
                        help="simulation frames per second")
    parser.add_argument("--arrays", action="store_true",
                        help="also compile the board and show array shapes")
    args = parser.parse_args()

    config = RuntimeConfig() if args.framerate is None else RuntimeConfig(framerate=args.framerate)
    try:
        scene = parse_board(args.board, encoding=args.encoding, config=config)
    except BoardError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    _print_scene(scene)
    if args.arrays:
        _print_arrays(compile_scene(scene))
    return 0


if __name__ == "__main__":
    sys.exit(main())
