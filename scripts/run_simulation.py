import json
from pathlib import Path
import importlib
import argparse
import sys

from phyzviz.host import RunConfig, run_headless, summarize
from phyzviz.systems import registry
from phyzviz.util.logging_utils import get_logger
from phyzviz.util.metrics import state_distance
from phyzviz.util.plotting import plot_divergence, plot_energy, plot_trajectories

log = get_logger("phyzviz.run_simulation")

LABELS = {
    "simple": ["θ", "ω"],
    "double": ["θ1", "ω1", "θ2", "ω2"],
    "lorenz": ["x", "y", "z"],
}


def dump_versions(art: Path):
    pkgs = ["numpy", "scipy", "matplotlib", "sympy", "tqdm"]
    lines = []
    for mod in pkgs:
        try:
            m = importlib.import_module(mod)
            v = getattr(m, "__version__", "unknown")
        except ImportError:
            v = "not-importable"
        lines.append(f"{mod}=={v}")
    (art / "VERSIONS.txt").write_text("\n".join(lines))


IGNORED = {
    "simple": ("theta2",),
    "double": (),
    "lorenz": ("theta0", "theta2", "damping"),
}


def build_params(args):
    unused = [f"--{name}" for name in IGNORED[args.system] if getattr(args, name) is not None]
    if unused:
        raise ValueError(f"{', '.join(unused)} does not apply to the {args.system} system")
    if args.system == "simple":
        return registry.make_params("simple", theta0=args.theta0, damping=args.damping)
    if args.system == "double":
        return registry.make_params("double", theta1_0=args.theta0, theta2_0=args.theta2, damping=args.damping)
    return registry.make_params("lorenz")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Headless RK4 simulation run")
    p.add_argument("--system", choices=sorted(registry.REGISTRY), default="simple")
    p.add_argument("--duration", type=float, default=10.0, help="Simulated seconds")
    p.add_argument("--h", type=float, default=1.0 / 240.0, help="Fixed RK4 step (s)")
    p.add_argument("--fps", type=float, default=60.0, help="Render frame rate driving the clock")
    p.add_argument("--max-steps-per-frame", type=int, default=16)
    p.add_argument("--theta0", type=float, default=None, help="Initial angle (θ or θ1), rad")
    p.add_argument("--theta2", type=float, default=None, help="Initial θ2 for the double pendulum, rad")
    p.add_argument("--damping", type=float, default=None)
    p.add_argument("--perturb", type=float, default=0.0, help="Offset of a shadow run in the first coordinate")
    p.add_argument("--threshold", type=float, default=0.1, help="Divergence threshold for --perturb")
    p.add_argument("--artifacts", type=Path, default=Path("artifacts"))
    p.add_argument("--no-plots", action="store_true")
    p.add_argument("--progress", action="store_true")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        cfg = RunConfig(system=args.system, duration=args.duration, h=args.h, fps=args.fps,
                        max_steps_per_frame=args.max_steps_per_frame, perturb=args.perturb,
                        divergence_threshold=args.threshold)
        params = build_params(args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    art = args.artifacts
    art.mkdir(parents=True, exist_ok=True)
    dump_versions(art)

    result = run_headless(cfg, params, progress=args.progress)
    out = summarize(cfg, params, result)
    (art / "summary.json").write_text(json.dumps(out, indent=2))
    print(json.dumps(out, indent=2))

    if not out["finite"]:
        log.error("state became non-finite; try a smaller --h (with --max-steps-per-frame raised to match)")
        sys.exit(1)

    if not args.no_plots:
        system = registry.get(cfg.system)
        x = result.primary
        plot_trajectories(result.t, x, LABELS[system.name], art / "trajectory.png",
                          title=f"{system.name} (h={cfg.h:.5f}s)")
        if system.energy is not None:
            plot_energy(result.t, system.energy(x, params), art / "energy.png")
        if result.x.ndim == 3:
            d = state_distance(result.x[:, 0], result.x[:, 1])
            plot_divergence(result.t, d, cfg.divergence_threshold, art / "divergence.png")
        log.info("plots written to %s", art)


if __name__ == "__main__":
    main()
