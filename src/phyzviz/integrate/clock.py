import math
from dataclasses import dataclass

from phyzviz.integrate.rk4 import step
from phyzviz.util.logging_utils import get_logger

log = get_logger(__name__)

# slack for frame times that are a whole number of steps up to round-off
_EPS = 1e-9


@dataclass
class SimulationClock:
    """
    Accumulates render-frame time and hands out whole fixed-size steps.

    If a stalled frame leaves more than `max_steps_per_frame` steps due, the
    backlog is dropped instead of being integrated.
    """
    h: float = 1.0 / 240.0
    max_steps_per_frame: int = 16
    accumulator: float = 0.0

    def __post_init__(self):
        if not math.isfinite(self.h) or self.h <= 0:
            raise ValueError(f"SimulationClock.h must be finite and > 0, got {self.h}")
        if self.max_steps_per_frame < 1:
            raise ValueError(f"max_steps_per_frame must be >= 1, got {self.max_steps_per_frame}")

    def advance(self, frame_dt: float) -> int:
        if not math.isfinite(frame_dt) or frame_dt < 0:
            raise ValueError(f"frame_dt must be finite and >= 0, got {frame_dt}")
        self.accumulator += frame_dt
        n = int(math.floor(self.accumulator / self.h + _EPS))
        if n > self.max_steps_per_frame:
            log.warning("dropping %d of %d due steps (frame_dt=%.4fs)",
                        n - self.max_steps_per_frame, n, frame_dt)
            self.accumulator = 0.0
            return self.max_steps_per_frame
        self.accumulator = max(0.0, self.accumulator - n * self.h)
        return n

    @property
    def alpha(self) -> float:
        return self.accumulator / self.h

    def reset(self):
        self.accumulator = 0.0


def tick(state, params, derivative_fn, clock: SimulationClock, frame_dt: float):
    for _ in range(clock.advance(frame_dt)):
        state = step(state, params, derivative_fn, clock.h)
    return state
