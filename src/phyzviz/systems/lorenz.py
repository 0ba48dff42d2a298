import math
import numpy as np
from dataclasses import dataclass

DIMENSION = 3


@dataclass(frozen=True)
class LorenzParams:
    sigma: float = 10.0
    rho: float = 28.0
    beta: float = 8.0 / 3.0
    x0: float = 10.0
    y0: float = 10.0
    z0: float = 10.0

    def __post_init__(self):
        for name in ("sigma", "beta"):
            v = getattr(self, name)
            if not math.isfinite(v) or v <= 0:
                raise ValueError(f"LorenzParams.{name} must be finite and > 0, got {v}")
        if not math.isfinite(self.rho):
            raise ValueError(f"LorenzParams.rho must be finite, got {self.rho}")


def initial_state(params: LorenzParams):
    return np.array([params.x0, params.y0, params.z0], dtype=np.float64)


def derivative(state, params: LorenzParams):
    x, y, z = state[..., 0], state[..., 1], state[..., 2]
    dx = params.sigma * (y - x)
    dy = x * (params.rho - z) - y
    dz = x * y - params.beta * z
    return np.stack([dx, dy, dz], axis=-1)


def positions(state, params: LorenzParams):
    # the attractor is drawn in its own phase space
    return np.asarray(state, dtype=np.float64)[..., np.newaxis, :]
