"""
Fully-connected feed-forward network trained by backpropagation.

Each layer computes ``sigmoid(W @ prev + b)`` on single-sample column
vectors. Training applies one synchronous update per forward/backprop
pair with a fixed learning rate.
"""

import math
import numpy as np
from typing import List, NamedTuple, Optional, Sequence

from .matrix import Matrix, ShapeMismatchError, default_rng


class StaleActivationsError(RuntimeError):
    """Raised when backprop runs without activations from a forward pass."""


class ForwardTrace(NamedTuple):
    """Prediction plus the per-layer activations that produced it."""
    prediction: Matrix
    activations: List[Matrix]


def sigmoid(x: float) -> float:
    # exp of a non-positive argument only, so neither branch overflows
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def d_sigmoid(a: float) -> float:
    """Sigmoid derivative expressed in terms of the activation a = sigmoid(x)."""
    return a * (1.0 - a)


class MLP:
    """
    Multi-layer perceptron with sigmoid activations.

    Parameters
    ----------
    units_per_layer : Sequence[int]
        Widths of every layer including input and output,
        e.g. [n_input, n_hidden1, n_output].
    learning_rate : float
        Fixed step size for parameter updates.
    rng : np.random.Generator, optional
        Generator for weight initialisation.
    seed : int, optional
        Seed for a fresh generator when ``rng`` is not given. With
        neither, the module-wide generator of ``matrix`` is used.
    """

    def __init__(
        self,
        units_per_layer: Sequence[int],
        learning_rate: float = 0.001,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        units = tuple(int(u) for u in units_per_layer)
        if len(units) < 2:
            raise ValueError(f"Need at least two layers, got units_per_layer={list(units)}")
        for u in units:
            if u <= 0:
                raise ValueError(f"Layer widths must be positive, got units_per_layer={list(units)}")

        if rng is None:
            rng = np.random.default_rng(seed) if seed is not None else default_rng()

        self.units_per_layer = units
        self.learning_rate = float(learning_rate)
        self.weight_matrices: List[Matrix] = []
        self.bias_vectors: List[Matrix] = []

        for l in range(len(units) - 1):
            n_in = units[l]
            n_out = units[l + 1]
            # (n_out, n_in) so that W @ x maps an n_in column to n_out
            self.weight_matrices.append(Matrix.random(n_out, n_in, rng=rng))
            self.bias_vectors.append(Matrix.random(n_out, 1, rng=rng))

        self.activations: List[Matrix] = [Matrix() for _ in units]
        self._has_activations = False

    @property
    def n_layers(self) -> int:
        return len(self.weight_matrices)

    def parameter_count(self) -> int:
        return sum(W.num_elements + b.num_elements
                   for W, b in zip(self.weight_matrices, self.bias_vectors))

    def _check_column(self, m: Matrix, width: int, what: str):
        if m.shape != (width, 1):
            raise ShapeMismatchError(f"{what} has shape {m.shape}, expected ({width}, 1)")

    def forward_trace(self, x: Matrix) -> ForwardTrace:
        """
        Run the network without touching the cached activations.

        Parameters
        ----------
        x : Matrix
            Input column vector, shape (units_per_layer[0], 1).

        Returns
        -------
        trace : ForwardTrace
            Output of the last layer and the activations of every layer,
            ``activations[0]`` being a copy of the input.
        """
        self._check_column(x, self.units_per_layer[0], "input")
        activations = [x.copy()]
        prev = activations[0]
        for W, b in zip(self.weight_matrices, self.bias_vectors):
            out = (W.matmul(prev) + b).apply_function(sigmoid)
            activations.append(out)
            prev = out
        return ForwardTrace(prev, activations)

    def forward(self, x: Matrix) -> Matrix:
        """Predict for ``x`` and cache the activations for ``backprop``."""
        trace = self.forward_trace(x)
        self.activations = trace.activations
        self._has_activations = True
        return trace.prediction.copy()

    def backprop(self, target: Matrix, trace: Optional[ForwardTrace] = None):
        """
        Update weights and biases in place from one target vector.

        Parameters
        ----------
        target : Matrix
            Desired output, shape (units_per_layer[-1], 1).
        trace : ForwardTrace, optional
            Activations to train against. Defaults to those cached by the
            most recent ``forward`` call.
        """
        self._check_column(target, self.units_per_layer[-1], "target")
        if trace is not None:
            activations = trace.activations
            if len(activations) != len(self.units_per_layer):
                raise ShapeMismatchError(
                    f"trace has {len(activations)} activations, "
                    f"expected {len(self.units_per_layer)}"
                )
            for a, width in zip(activations, self.units_per_layer):
                self._check_column(a, width, "trace activation")
        elif self._has_activations:
            activations = self.activations
        else:
            raise StaleActivationsError("backprop called before forward")

        # error = target - output; the scaled product is added, not subtracted
        error = target - activations[-1]

        for l in range(self.n_layers - 1, -1, -1):
            prev_errors = self.weight_matrices[l].transpose().matmul(error)

            d_outputs = activations[l + 1].apply_function(d_sigmoid)
            gradients = error.matmul_elementwise(d_outputs).matmul_scalar(self.learning_rate)
            weight_gradients = gradients.matmul(activations[l].transpose())

            self.bias_vectors[l] = self.bias_vectors[l] + gradients
            self.weight_matrices[l] = self.weight_matrices[l] + weight_gradients
            error = prev_errors


def make_model(
    in_channels: int,
    out_channels: int,
    hidden_units_per_layer: int,
    hidden_layers: int,
    learning_rate: float,
    seed: Optional[int] = None,
) -> MLP:
    """Build an MLP whose hidden layers all have the same width."""
    units = [in_channels] + [hidden_units_per_layer] * hidden_layers + [out_channels]
    return MLP(units, learning_rate=learning_rate, seed=seed)
