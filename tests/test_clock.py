import math
import numpy as np
import pytest

from phyzviz.integrate.clock import SimulationClock, tick
from phyzviz.integrate.rk4 import step
from phyzviz.systems import simple_pendulum


def test_sixty_hz_frames_give_four_steps_at_240hz():
    clock = SimulationClock(h=1.0 / 240.0)
    for _ in range(120):
        assert clock.advance(1.0 / 60.0) == 4
        assert clock.accumulator < 1e-12


def test_partial_steps_carry_over():
    clock = SimulationClock(h=0.25)
    assert clock.advance(0.1) == 0
    assert clock.alpha == pytest.approx(0.4)
    assert clock.advance(0.2) == 1
    assert clock.accumulator == pytest.approx(0.05)
    clock.reset()
    assert clock.accumulator == 0.0


def test_stalled_frame_drops_backlog(caplog):
    clock = SimulationClock(h=0.25, max_steps_per_frame=4)
    assert clock.advance(10.0) == 4
    assert clock.accumulator == 0.0
    assert "dropping" in caplog.text


@pytest.mark.parametrize("frame_dt", [-0.01, math.nan, math.inf])
def test_bad_frame_time_rejected(frame_dt):
    clock = SimulationClock()
    with pytest.raises(ValueError):
        clock.advance(frame_dt)


def test_bad_clock_configuration_rejected():
    with pytest.raises(ValueError):
        SimulationClock(h=0.0)
    with pytest.raises(ValueError):
        SimulationClock(max_steps_per_frame=0)


def test_tick_runs_granted_steps():
    params = simple_pendulum.SimplePendulumParams(theta0=1.0)
    s0 = simple_pendulum.initial_state(params)
    clock = SimulationClock(h=0.25)
    out = tick(s0, params, simple_pendulum.derivative, clock, 0.5)
    expected = step(step(s0, params, simple_pendulum.derivative, 0.25), params, simple_pendulum.derivative, 0.25)
    assert np.array_equal(out, expected)

    # no whole step due: state comes back untouched
    assert tick(out, params, simple_pendulum.derivative, clock, 0.1) is out
