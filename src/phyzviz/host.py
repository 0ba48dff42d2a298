"""
Headless stand-in for the render loop.

Owns the state, feeds a fixed frame time into a SimulationClock and records
the state once per frame, the way a renderer would read it. With `perturb`
set, a second copy offset by `perturb` in the first coordinate is stepped in
the same batch so chaotic divergence can be measured.
"""
import math
from dataclasses import dataclass

import numpy as np
from tqdm import tqdm

from phyzviz.integrate.clock import SimulationClock
from phyzviz.integrate.rk4 import step
from phyzviz.systems import registry, simple_pendulum
from phyzviz.util.logging_utils import get_logger
from phyzviz.util.metrics import (
    divergence_time, estimate_period, long_horizon_rmse, relative_energy_drift, state_distance
)

log = get_logger(__name__)


@dataclass
class RunConfig:
    system: str = "simple"
    duration: float = 10.0
    h: float = 1.0 / 240.0
    fps: float = 60.0
    max_steps_per_frame: int = 16
    perturb: float = 0.0
    divergence_threshold: float = 0.1

    def __post_init__(self):
        registry.get(self.system)
        for name in ("duration", "h", "fps", "divergence_threshold"):
            v = getattr(self, name)
            if not math.isfinite(v) or v <= 0:
                raise ValueError(f"RunConfig.{name} must be finite and > 0, got {v}")
        if not math.isfinite(self.perturb) or self.perturb < 0:
            raise ValueError(f"RunConfig.perturb must be finite and >= 0, got {self.perturb}")
        if self.max_steps_per_frame < 1:
            raise ValueError(f"RunConfig.max_steps_per_frame must be >= 1, got {self.max_steps_per_frame}")
        # the cap must cover one frame, otherwise every frame drops simulated time
        needed = math.ceil(1.0 / (self.fps * self.h) - 1e-9)
        if self.max_steps_per_frame < needed:
            raise ValueError(
                f"h={self.h:g} at fps={self.fps:g} needs {needed} steps per frame, "
                f"but max_steps_per_frame is {self.max_steps_per_frame}"
            )


@dataclass
class RunResult:
    t: np.ndarray        # simulated time at each recorded frame
    x: np.ndarray        # (frames, dim), or (frames, 2, dim) when perturbed
    steps: int

    @property
    def primary(self):
        return self.x[:, 0] if self.x.ndim == 3 else self.x


def run_headless(cfg: RunConfig, params, progress=False) -> RunResult:
    system = registry.system_for(params)
    if system.name != cfg.system:
        raise ValueError(f"RunConfig.system is '{cfg.system}' but parameters are for '{system.name}'")

    state = system.initial_state(params)
    if cfg.perturb:
        shifted = state.copy()
        shifted[0] += cfg.perturb
        state = np.stack([state, shifted])

    clock = SimulationClock(h=cfg.h, max_steps_per_frame=cfg.max_steps_per_frame)
    n_frames = int(round(cfg.duration * cfg.fps))
    frame_dt = 1.0 / cfg.fps
    log.info("running %s for %d frames (fps=%g, h=%g)", system.name, n_frames, cfg.fps, cfg.h)

    t = np.zeros(n_frames + 1)
    x = np.zeros((n_frames + 1,) + state.shape)
    x[0] = state
    steps = 0
    for i in tqdm(range(n_frames), disable=not progress):
        n = clock.advance(frame_dt)
        for _ in range(n):
            state = step(state, params, system.derivative, clock.h)
        steps += n
        t[i + 1] = steps * clock.h
        x[i + 1] = state
    return RunResult(t=t, x=x, steps=steps)


def summarize(cfg: RunConfig, params, result: RunResult) -> dict:
    system = registry.system_for(params)
    final = result.primary[-1]
    out = {
        "system": system.name,
        "h": cfg.h,
        "fps": cfg.fps,
        "steps": result.steps,
        "simulated_time": float(result.t[-1]),
        "final_state": [float(v) for v in final],
        "finite": bool(np.all(np.isfinite(result.x))),
    }
    if system.energy is not None:
        E = system.energy(result.primary, params)
        out["energy_initial"] = float(E[0])
        out["energy_relative_drift"] = relative_energy_drift(E)
    if system.name == "simple" and params.damping == 0:
        try:
            out["period_exact"] = simple_pendulum.exact_period(params)
            out["period_measured"] = estimate_period(result.t, result.primary[:, 0])
        except ValueError as e:
            log.info("period not reported: %s", e)
    if result.x.ndim == 3:
        a, b = result.x[:, 0], result.x[:, 1]
        out["perturb"] = cfg.perturb
        out["divergence_threshold"] = cfg.divergence_threshold
        out["divergence_time"] = divergence_time(result.t, a, b, cfg.divergence_threshold)
        out["final_distance"] = float(state_distance(a[-1], b[-1]))
        out["rmse_between_runs"] = long_horizon_rmse(a, b)
    return out
