"""Runtime settings supplied by the simulation that consumes a scene."""
from dataclasses import dataclass

from pingball_jax.data_model import (
    DEFAULT_GRAVITY, DEFAULT_MU1, DEFAULT_MU2, DEFAULT_FRAMERATE, BOARD_SIZE,
)


@dataclass(frozen=True)
class RuntimeConfig:
    framerate: float = DEFAULT_FRAMERATE
    # Used when the board line leaves gravity / friction1 / friction2 unset
    default_gravity: float = DEFAULT_GRAVITY
    default_mu1: float = DEFAULT_MU1
    default_mu2: float = DEFAULT_MU2
    board_size: int = BOARD_SIZE

    def __post_init__(self):
        if not self.framerate > 0:
            raise ValueError(f"framerate must be positive, got {self.framerate}")
        if self.board_size <= 0:
            raise ValueError(f"board_size must be positive, got {self.board_size}")

    @property
    def timestep(self) -> float:
        return 1.0 / float(self.framerate)
