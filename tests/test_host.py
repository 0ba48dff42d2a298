import importlib.util
import json
from pathlib import Path

import numpy as np
import pytest

from phyzviz.host import RunConfig, run_headless, summarize
from phyzviz.integrate.rk4 import step
from phyzviz.systems import simple_pendulum
from phyzviz.systems.double_pendulum import DoublePendulumParams
from phyzviz.systems.lorenz import LorenzParams
from phyzviz.systems.simple_pendulum import SimplePendulumParams

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_simulation.py"


def _load_script():
    mod_spec = importlib.util.spec_from_file_location("run_simulation", SCRIPT)
    mod = importlib.util.module_from_spec(mod_spec)
    mod_spec.loader.exec_module(mod)
    return mod


def test_headless_run_matches_direct_stepping():
    params = SimplePendulumParams()
    res = run_headless(RunConfig(system="simple", duration=1.0), params)
    assert res.steps == 240
    assert res.x.shape == (61, 2)
    assert res.t[-1] == pytest.approx(1.0)

    s = simple_pendulum.initial_state(params)
    for _ in range(240):
        s = step(s, params, simple_pendulum.derivative, 1.0 / 240.0)
    assert np.array_equal(res.x[-1], s)


def test_summary_reports_energy_drift():
    cfg = RunConfig(system="simple", duration=2.0)
    params = SimplePendulumParams()
    out = summarize(cfg, params, run_headless(cfg, params))
    assert out["finite"]
    assert out["steps"] == 480
    assert out["energy_relative_drift"] < 1e-6
    assert "divergence_time" not in out


def test_summary_reports_period_for_undamped_pendulum():
    cfg = RunConfig(system="simple", duration=6.0)
    params = SimplePendulumParams()
    out = summarize(cfg, params, run_headless(cfg, params))
    assert out["period_measured"] == pytest.approx(out["period_exact"], rel=1e-3)


def test_perturbed_run_tracks_shadow_instance():
    cfg = RunConfig(system="double", duration=0.5, perturb=1e-3)
    params = DoublePendulumParams()
    res = run_headless(cfg, params)
    assert res.x.shape == (31, 2, 4)
    assert res.x[0, 1, 0] - res.x[0, 0, 0] == pytest.approx(1e-3)
    out = summarize(cfg, params, res)
    assert "divergence_time" in out
    assert out["final_distance"] > 0.0


def test_lorenz_summary_has_no_energy():
    cfg = RunConfig(system="lorenz", duration=0.5)
    params = LorenzParams()
    out = summarize(cfg, params, run_headless(cfg, params))
    assert "energy_initial" not in out
    assert len(out["final_state"]) == 3


def test_run_config_validation():
    with pytest.raises(ValueError):
        RunConfig(system="triple")
    with pytest.raises(ValueError):
        RunConfig(duration=0.0)
    with pytest.raises(ValueError):
        RunConfig(perturb=-1.0)
    with pytest.raises(ValueError):
        RunConfig(max_steps_per_frame=0)
    with pytest.raises(ValueError, match="parameters are for"):
        run_headless(RunConfig(system="double"), SimplePendulumParams())


def test_step_cap_must_cover_a_frame():
    with pytest.raises(ValueError, match="needs 17 steps per frame"):
        RunConfig(duration=1.0, h=1e-3)

    cfg = RunConfig(duration=1.0, h=1e-3, max_steps_per_frame=17)
    res = run_headless(cfg, SimplePendulumParams())
    assert res.t[-1] == pytest.approx(1.0, abs=1e-3)


def test_script_writes_artifacts(tmp_path):
    mod = _load_script()
    mod.main(["--system", "double", "--duration", "0.5", "--perturb", "1e-6",
              "--artifacts", str(tmp_path)])
    summary = json.loads((tmp_path / "summary.json").read_text())
    assert summary["system"] == "double"
    for name in ("VERSIONS.txt", "trajectory.png", "energy.png", "divergence.png"):
        assert (tmp_path / name).exists()


@pytest.mark.parametrize("argv", [
    ["--duration", "-1"],
    ["--max-steps-per-frame", "0"],
    ["--h", "0.001"],
    ["--system", "simple", "--theta2", "1.0"],
    ["--system", "lorenz", "--damping", "0.1"],
])
def test_script_rejects_bad_arguments(tmp_path, argv):
    mod = _load_script()
    art = tmp_path / "art"
    with pytest.raises(SystemExit) as exc:
        mod.main(argv + ["--artifacts", str(art)])
    assert exc.value.code == 1
    assert not (art / "VERSIONS.txt").exists()
