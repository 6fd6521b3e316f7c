#!/usr/bin/env python
"""
Train the demo MLP on y = sin(x)^2 and write the training log.

Each log line holds ``mse x y y_hat`` for one iteration. The run is
deterministic for a given --seed.

Usage:
  python scripts/run_demo.py
  python scripts/run_demo.py --max-iter 5000 --lr 0.1 --out results/data.txt
"""

import argparse
import sys
from pathlib import Path

# Ensure package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from matrix_mlp.train_demo import (
    DEFAULT_HIDDEN_LAYERS,
    DEFAULT_HIDDEN_UNITS,
    DEFAULT_LR,
    DEFAULT_MAX_ITER,
    DEFAULT_SCALE,
    DEFAULT_SEED,
    make_demo_model,
    moving_average,
    train,
    write_log,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Train an MLP on sin^2 one sample at a time.")
    parser.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITER,
                        help="Number of forward/backprop steps")
    parser.add_argument("--lr", type=float, default=DEFAULT_LR,
                        help="Learning rate")
    parser.add_argument("--hidden-units", type=int, default=DEFAULT_HIDDEN_UNITS,
                        help="Units in each hidden layer")
    parser.add_argument("--hidden-layers", type=int, default=DEFAULT_HIDDEN_LAYERS,
                        help="Number of hidden layers")
    parser.add_argument("--scale", type=float, default=DEFAULT_SCALE,
                        help="Multiplier applied to the Gaussian inputs")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED,
                        help="Seed for weight init and data")
    parser.add_argument("--out", type=str, default="results/data.txt",
                        help="Path of the training log")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    print("=" * 60)
    print("MLP sin^2 demo")
    print("=" * 60)
    print(f"Configuration: hidden={args.hidden_layers}x{args.hidden_units}, "
          f"lr={args.lr}, iters={args.max_iter}, seed={args.seed}")

    model = make_demo_model(seed=args.seed, lr=args.lr,
                            hidden_units=args.hidden_units,
                            hidden_layers=args.hidden_layers)
    print(f"Layers: {list(model.units_per_layer)} ({model.parameter_count()} parameters)")

    records = train(model, max_iter=args.max_iter, seed=args.seed, scale=args.scale)
    out = write_log(args.out, records)

    mse = np.array([r.mse for r in records])
    window = min(100, len(mse))
    if window > 0:
        smoothed = moving_average(mse, window)
        print(f"[run_demo] Mean squared error, first {window}: {smoothed[0]:.5f}")
        print(f"[run_demo] Mean squared error, last {window}:  {smoothed[-1]:.5f}")
    print(f"Wrote {out}")
    return records


if __name__ == "__main__":
    main()
