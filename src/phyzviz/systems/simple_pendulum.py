import math
import numpy as np
from scipy.special import ellipk
from dataclasses import dataclass

DIMENSION = 2  # (theta, omega)


@dataclass(frozen=True)
class SimplePendulumParams:
    g: float = 9.81
    L: float = 1.0
    damping: float = 0.0
    theta0: float = math.pi / 2
    omega0: float = 0.0

    def __post_init__(self):
        for name in ("g", "L"):
            v = getattr(self, name)
            if not math.isfinite(v) or v <= 0:
                raise ValueError(f"SimplePendulumParams.{name} must be finite and > 0, got {v}")
        if not math.isfinite(self.damping) or self.damping < 0:
            raise ValueError(f"SimplePendulumParams.damping must be finite and >= 0, got {self.damping}")


def initial_state(params: SimplePendulumParams):
    return np.array([params.theta0, params.omega0], dtype=np.float64)


def derivative(state, params: SimplePendulumParams):
    theta, omega = state[..., 0], state[..., 1]
    dtheta = omega
    domega = -(params.g / params.L) * np.sin(theta) - params.damping * omega
    return np.stack([dtheta, domega], axis=-1)


def energy(state, params: SimplePendulumParams):
    """Mechanical energy per unit mass: 1/2 L^2 w^2 + g L (1 - cos th)."""
    theta, omega = state[..., 0], state[..., 1]
    return 0.5 * params.L**2 * omega**2 + params.g * params.L * (1.0 - np.cos(theta))


def positions(state, params: SimplePendulumParams):
    # pivot at origin, y up; returns (..., 1, 2)
    theta = state[..., 0]
    bob = np.stack([params.L * np.sin(theta), -params.L * np.cos(theta)], axis=-1)
    return bob[..., np.newaxis, :]


def small_angle_period(params: SimplePendulumParams) -> float:
    return 2.0 * math.pi * math.sqrt(params.L / params.g)


def exact_period(params: SimplePendulumParams) -> float:
    """
    Undamped libration period for the configured initial state,
    4 sqrt(L/g) K(m) with m = sin^2(theta_max / 2) = E / (2 g L).
    """
    m = float(energy(initial_state(params), params)) / (2.0 * params.g * params.L)
    if m >= 1.0:
        raise ValueError("pendulum goes over the top; it has no libration period")
    return 4.0 * math.sqrt(params.L / params.g) * float(ellipk(m))
