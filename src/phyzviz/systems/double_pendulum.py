"""
Planar double pendulum with point masses on massless rods.

State layout is (theta1, omega1, theta2, omega2); both angles are absolute,
measured from the downward vertical. Equations follow the standard coupled
form (see e.g. MIT "chaos talk" double pendulum notes).
"""
import math
import numpy as np
from dataclasses import dataclass

DIMENSION = 4


@dataclass(frozen=True)
class DoublePendulumParams:
    g: float = 9.81
    L1: float = 1.0
    L2: float = 1.0
    m1: float = 1.0
    m2: float = 1.0
    damping: float = 0.0     # joint friction, applied to both arms
    theta1_0: float = math.pi / 2
    theta2_0: float = math.pi / 2
    omega1_0: float = 0.0
    omega2_0: float = 0.0

    def __post_init__(self):
        for name in ("g", "L1", "L2", "m1", "m2"):
            v = getattr(self, name)
            if not math.isfinite(v) or v <= 0:
                raise ValueError(f"DoublePendulumParams.{name} must be finite and > 0, got {v}")
        if not math.isfinite(self.damping) or self.damping < 0:
            raise ValueError(f"DoublePendulumParams.damping must be finite and >= 0, got {self.damping}")


def initial_state(params: DoublePendulumParams):
    return np.array([params.theta1_0, params.omega1_0,
                     params.theta2_0, params.omega2_0], dtype=np.float64)


def derivative(state, params: DoublePendulumParams):
    th1, w1 = state[..., 0], state[..., 1]
    th2, w2 = state[..., 2], state[..., 3]
    g, L1, L2, m1, m2 = params.g, params.L1, params.L2, params.m1, params.m2

    delta = th1 - th2
    sin_d, cos_d = np.sin(delta), np.cos(delta)
    denom = 2.0 * m1 + m2 - m2 * np.cos(2.0 * delta)

    dw1 = (
        -g * (2.0 * m1 + m2) * np.sin(th1)
        - m2 * g * np.sin(th1 - 2.0 * th2)
        - 2.0 * sin_d * m2 * (w2**2 * L2 + w1**2 * L1 * cos_d)
    ) / (L1 * denom)
    dw2 = (
        2.0 * sin_d * (
            w1**2 * L1 * (m1 + m2)
            + g * (m1 + m2) * np.cos(th1)
            + w2**2 * L2 * m2 * cos_d
        )
    ) / (L2 * denom)

    if params.damping:
        dw1 = dw1 - params.damping * w1
        dw2 = dw2 - params.damping * w2

    return np.stack([w1, dw1, w2, dw2], axis=-1)


def energy(state, params: DoublePendulumParams):
    th1, w1 = state[..., 0], state[..., 1]
    th2, w2 = state[..., 2], state[..., 3]
    g, L1, L2, m1, m2 = params.g, params.L1, params.L2, params.m1, params.m2
    kinetic = (0.5 * (m1 + m2) * L1**2 * w1**2
               + 0.5 * m2 * L2**2 * w2**2
               + m2 * L1 * L2 * w1 * w2 * np.cos(th1 - th2))
    potential = -(m1 + m2) * g * L1 * np.cos(th1) - m2 * g * L2 * np.cos(th2)
    return kinetic + potential


def positions(state, params: DoublePendulumParams):
    """Cartesian bob positions, shape (..., 2, 2); bob 2 hangs off bob 1."""
    th1, th2 = state[..., 0], state[..., 2]
    bob1 = np.stack([params.L1 * np.sin(th1), -params.L1 * np.cos(th1)], axis=-1)
    bob2 = bob1 + np.stack([params.L2 * np.sin(th2), -params.L2 * np.cos(th2)], axis=-1)
    return np.stack([bob1, bob2], axis=-2)
