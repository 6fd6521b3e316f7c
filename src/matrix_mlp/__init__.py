"""matrix-mlp-demo: dense matrix algebra and a backprop-trained MLP."""

from .matrix import Matrix, ShapeMismatchError, seed_random
from .mlp import MLP, ForwardTrace, StaleActivationsError, sigmoid, d_sigmoid, make_model
from .train_demo import (
    TrainingRecord,
    make_sample,
    make_demo_model,
    train,
    write_log,
    load_log,
    moving_average,
)
