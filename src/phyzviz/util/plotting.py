import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path


def plot_trajectories(t, x, labels, outpath, title="Integrated trajectory"):
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(7,4))
    for i, label in enumerate(labels):
        plt.plot(t, x[:, i], label=label, linewidth=1.6)
    plt.xlabel("t (s)")
    plt.legend(frameon=False)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()


def plot_energy(t, E, outpath):
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(6,4))
    plt.plot(t, E - E[0], linewidth=2)
    plt.axhline(0.0, linestyle="--", linewidth=1.0)
    plt.xlabel("t (s)")
    plt.ylabel(r"$E(t) - E(0)$")
    plt.title("Energy drift")
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()


def plot_divergence(t, distance, threshold, outpath):
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(6,4))
    # floor keeps log scale defined while both runs are still identical
    plt.semilogy(t, np.maximum(distance, 1e-16), linewidth=2)
    plt.axhline(threshold, linestyle="--", linewidth=1.5)
    plt.xlabel("t (s)")
    plt.ylabel("state-space distance")
    plt.title("Sensitivity to initial conditions")
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()
