import jax.numpy as jnp
import flax.struct


@flax.struct.dataclass
class BallState:
    positions: jnp.ndarray       # [n_balls, 2] float32, (x, y) in L
    velocities: jnp.ndarray      # [n_balls, 2] float32, L / s
    alive: jnp.ndarray           # [n_balls] bool, False once captured


def create_initial_state(positions, velocities):
    positions = jnp.asarray(positions, dtype=jnp.float32).reshape(-1, 2)
    velocities = jnp.asarray(velocities, dtype=jnp.float32).reshape(-1, 2)
    return BallState(
        positions=positions,
        velocities=velocities,
        alive=jnp.ones((positions.shape[0],), dtype=jnp.bool_),
    )
