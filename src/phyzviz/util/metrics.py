import numpy as np


def long_horizon_rmse(truth, pred):
    return float(np.sqrt(np.mean((truth - pred)**2)))


def state_distance(a, b):
    return np.linalg.norm(np.asarray(a) - np.asarray(b), axis=-1)


def relative_energy_drift(E):
    """
    Largest |E(t) - E(0)| over the series, relative to |E(0)|.
    Falls back to the absolute deviation when E(0) is exactly zero.
    """
    E = np.asarray(E, dtype=np.float64)
    dev = float(np.max(np.abs(E - E[0])))
    return dev / abs(E[0]) if E[0] != 0 else dev


def estimate_period(t, y):
    """Mean spacing of upward zero crossings of y, linearly interpolated."""
    y = np.asarray(y)
    idx = np.nonzero((y[:-1] < 0) & (y[1:] >= 0))[0]
    if idx.size < 2:
        raise ValueError(f"need at least 2 upward zero crossings to estimate a period, found {idx.size}")
    frac = -y[idx] / (y[idx + 1] - y[idx])
    crossings = t[idx] + frac * (t[idx + 1] - t[idx])
    return float(np.mean(np.diff(crossings)))


def divergence_time(t, xa, xb, threshold=0.1):
    d = state_distance(xa, xb)
    hit = np.nonzero(d > threshold)[0]
    if hit.size == 0:
        return None
    return float(t[hit[0]])
