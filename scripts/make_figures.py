#!/usr/bin/env python
"""
Plot a training log written by run_demo.py.

Produces figures/mlp_training_error.png (squared error per iteration
with a moving average) and figures/mlp_sin2_fit.png (predictions
against the sin^2 target).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import matplotlib.pyplot as plt

from matrix_mlp.train_demo import load_log, moving_average

FIGURES_DIR = Path(__file__).parent.parent / "figures"
WINDOW = 50


def plot_error(log: np.ndarray, out: Path):
    mse = log[:, 0]
    it = np.arange(1, len(mse) + 1)
    smoothed = moving_average(mse, WINDOW)

    plt.figure(figsize=(6.5, 4.0))
    plt.plot(it, mse, alpha=0.3, label="per sample")
    if len(smoothed) > 0:
        plt.plot(it[WINDOW - 1:], smoothed, label=f"moving average ({WINDOW})")
    plt.xlabel("Iteration")
    plt.ylabel("Squared error")
    plt.title("MLP demo: training error")
    plt.yscale("log")
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out, dpi=200)
    plt.close()
    print(f"Wrote {out}")


def plot_fit(log: np.ndarray, out: Path, tail: int = 200):
    x, y_hat = log[-tail:, 1], log[-tail:, 3]
    grid = np.linspace(x.min(), x.max(), 200) if len(x) else np.array([])

    plt.figure(figsize=(6.5, 4.0))
    plt.plot(grid, np.sin(grid) ** 2, color="black", label="sin²(x)")
    plt.scatter(x, y_hat, s=8, alpha=0.6, label=f"prediction (last {len(x)})")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.title("MLP demo: fit")
    plt.ylim(-0.05, 1.05)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out, dpi=200)
    plt.close()
    print(f"Wrote {out}")


def main():
    parser = argparse.ArgumentParser(description="Plot an MLP training log.")
    parser.add_argument("log", nargs="?", default="results/data.txt")
    args = parser.parse_args()

    log = load_log(args.log)
    FIGURES_DIR.mkdir(exist_ok=True)
    plot_error(log, FIGURES_DIR / "mlp_training_error.png")
    plot_fit(log, FIGURES_DIR / "mlp_sin2_fit.png")


if __name__ == "__main__":
    main()
