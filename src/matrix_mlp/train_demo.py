import numpy as np
from pathlib import Path
from typing import List, NamedTuple, Tuple

from .matrix import Matrix
from .mlp import MLP, make_model

DEFAULT_SEED = 42069
DEFAULT_MAX_ITER = 1000
DEFAULT_SCALE = 3.0
DEFAULT_HIDDEN_UNITS = 8
DEFAULT_HIDDEN_LAYERS = 3
DEFAULT_LR = 0.5
DATA_STREAM = 1


class TrainingRecord(NamedTuple):
    iteration: int
    x: float
    y: float
    y_hat: float
    mse: float


def make_sample(rng: np.random.Generator, in_channels: int = 1,
                scale: float = DEFAULT_SCALE) -> Tuple[Matrix, Matrix]:
    """Draw x ~ N(0, 1/in_channels) * scale and return (x, sin(x)^2)."""
    x = Matrix.random(in_channels, 1, rng=rng).matmul_scalar(scale)
    y = x.apply_function(lambda v: np.sin(v) ** 2)
    return x, y


def make_demo_model(seed: int = DEFAULT_SEED, lr: float = DEFAULT_LR,
                    hidden_units: int = DEFAULT_HIDDEN_UNITS,
                    hidden_layers: int = DEFAULT_HIDDEN_LAYERS) -> MLP:
    return make_model(in_channels=1, out_channels=1,
                      hidden_units_per_layer=hidden_units,
                      hidden_layers=hidden_layers,
                      learning_rate=lr, seed=seed)


def train(model: MLP, max_iter: int = DEFAULT_MAX_ITER, seed: int = DEFAULT_SEED,
          scale: float = DEFAULT_SCALE) -> List[TrainingRecord]:
    """
    Fit ``model`` to sin^2 one sample at a time.

    Parameters
    ----------
    model : MLP
        Network with matching input and output widths.
    max_iter : int
        Number of forward/backprop steps.
    seed : int
        Seed of the data generator.
    scale : float
        Multiplier applied to the Gaussian inputs.

    Returns
    -------
    records : List[TrainingRecord]
        One record per iteration, with the prediction made before the
        update of that iteration.
    """
    # separate stream from the weight init, which may use the same seed
    rng = np.random.default_rng([DATA_STREAM, seed])
    in_channels = model.units_per_layer[0]
    records = []
    for i in range(1, max_iter + 1):
        x, y = make_sample(rng, in_channels=in_channels, scale=scale)
        y_hat = model.forward(x)
        model.backprop(y)

        mse = (y - y_hat).square().data[0]
        records.append(TrainingRecord(i, float(x.data[0]), float(y.data[0]),
                                      float(y_hat.data[0]), float(mse)))
    return records


def write_log(path, records: List[TrainingRecord]) -> Path:
    """Write ``mse x y y_hat`` per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        for rec in records:
            f.write(f"{rec.mse} {rec.x} {rec.y} {rec.y_hat}\n")
    return path


def load_log(path) -> np.ndarray:
    """Read a log written by ``write_log`` as an array of shape (n, 4)."""
    return np.loadtxt(path, ndmin=2)


def moving_average(values: np.ndarray, window: int) -> np.ndarray:
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")
    values = np.asarray(values, dtype=float)
    if len(values) < window:
        return np.array([], dtype=float)
    kernel = np.ones(window) / window
    return np.convolve(values, kernel, mode="valid")
