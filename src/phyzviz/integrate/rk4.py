import numpy as np


def _checked(f, s):
    out = f(s)
    if np.shape(out) != np.shape(s):
        raise ValueError(
            f"derivative returned shape {np.shape(out)} for state of shape {np.shape(s)}"
        )
    return out


def rk4_step(f, s, dt):
    """One classical RK4 step of ds/dt = f(s); every stage starts from `s`."""
    k1 = _checked(f, s)
    k2 = _checked(f, s + 0.5 * dt * k1)
    k3 = _checked(f, s + 0.5 * dt * k2)
    k4 = _checked(f, s + dt * k3)
    return s + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def step(state, params, derivative_fn, h):
    """
    Advance `state` by `h` with classical RK4.

    `derivative_fn(state, params)` must return an array of the same shape as
    `state`; anything else raises ValueError. `h` is not validated and angles
    are never wrapped. Leading axes are treated as independent instances.
    """
    s = np.asarray(state, dtype=np.float64)
    return rk4_step(lambda x: derivative_fn(x, params), s, h)


def simulate(derivative_fn, params, x0, T, dt):
    n = int(T / dt) + 1
    t = np.linspace(0.0, (n - 1) * dt, n)
    x0 = np.asarray(x0, dtype=np.float64)
    x = np.zeros((n,) + x0.shape, dtype=np.float64)
    x[0] = x0
    for k in range(n - 1):
        x[k + 1] = step(x[k], params, derivative_fn, dt)
    return t, x
