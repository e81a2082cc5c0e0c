"""
Compiler: converts a Scene into fixed-shape JAX arrays for a vectorised
simulator (gadget table, trigger matrix and initial ball state).
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import jax.numpy as jnp

from pingball_jax.data_model import Scene
from pingball_jax.state import BallState, create_initial_state


@dataclass
class CompiledBoard:
    kinds: jnp.ndarray           # [n_gadgets] int32, GadgetKind codes
    positions: jnp.ndarray       # [n_gadgets, 2] float32, top-left corner (x, y)
    sizes: jnp.ndarray           # [n_gadgets, 2] float32, (width, height)
    orientations: jnp.ndarray    # [n_gadgets] int32, degrees
    reflections: jnp.ndarray     # [n_gadgets] float32
    triggers: jnp.ndarray        # [n_gadgets, n_gadgets] bool, row fires column
    init_state: BallState
    gravity: float
    mu1: float
    mu2: float
    timestep: float
    gadget_index: Dict[str, int]  # gadget name → row
    ball_index: Dict[str, Tuple[int, ...]]  # ball name → rows in init_state
    scene: Scene

    @property
    def n_gadgets(self):
        return len(self.gadget_index)

    def fired_by(self, struck):
        """Bool mask of gadgets whose action runs when the `struck` gadgets are hit."""
        struck = jnp.asarray(struck, dtype=jnp.int32)
        return (struck @ self.triggers.astype(jnp.int32)) > 0


def compile_scene(scene: Scene) -> CompiledBoard:
    """
    Compile a Scene into a CompiledBoard.

    Gadgets are indexed in name order so the same scene always yields the
    same arrays.
    """
    gadgets = sorted(scene.triggers, key=lambda g: g.name)
    gadget_index = {g.name: i for i, g in enumerate(gadgets)}
    n = len(gadgets)

    # Built in numpy, converted to device arrays once
    kinds = np.zeros((n,), dtype=np.int32)
    positions = np.zeros((n, 2), dtype=np.float32)
    sizes = np.zeros((n, 2), dtype=np.float32)
    orientations = np.zeros((n,), dtype=np.int32)
    reflections = np.zeros((n,), dtype=np.float32)
    triggers = np.zeros((n, n), dtype=bool)

    for i, g in enumerate(gadgets):
        kinds[i] = int(g.kind)
        positions[i] = (g.x, g.y)
        sizes[i] = (g.width, g.height)
        orientations[i] = int(getattr(g, 'orientation', 0))
        reflections[i] = g.reflection
        for action in scene.triggers[g]:
            triggers[i, gadget_index[action.name]] = True

    # Ball names need not be unique, so each name maps to all of its rows
    ball_rows = defaultdict(list)
    for i, b in enumerate(scene.balls):
        ball_rows[b.name].append(i)
    ball_index = {name: tuple(rows) for name, rows in ball_rows.items()}
    init_state = create_initial_state(
        np.array([b.position for b in scene.balls], dtype=np.float32).reshape(-1, 2),
        np.array([b.velocity for b in scene.balls], dtype=np.float32).reshape(-1, 2),
    )

    return CompiledBoard(
        kinds=jnp.array(kinds),
        positions=jnp.array(positions),
        sizes=jnp.array(sizes),
        orientations=jnp.array(orientations),
        reflections=jnp.array(reflections),
        triggers=jnp.array(triggers),
        init_state=init_state,
        gravity=scene.gravity,
        mu1=scene.mu1,
        mu2=scene.mu2,
        timestep=scene.timestep,
        gadget_index=gadget_index,
        ball_index=ball_index,
        scene=scene,
    )
