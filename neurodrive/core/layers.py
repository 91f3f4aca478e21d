"""
Fully connected (dense) layer.

A layer owns one weight matrix of shape (input_count + 1, output_count).
Rows 0..input_count-1 hold the connection weights, the last row holds the
per-output biases:

    output[j] = activation(bias[j] + sum_i input[i] * weight[i][j])

The matrix is copied on construction and frozen, so no two layers ever share
a buffer. Crossover and mutation build new layers through `with_weights`.
"""

import numpy as np
from typing import Callable, Optional, Tuple, Union

from ..errors import ConfigurationError, InputSizeError
from .activations import resolve_activation, activation_name


class DenseLayer:
    """A fully connected affine transform followed by an activation."""

    def __init__(
        self,
        weights: np.ndarray,
        activation: Union[str, Callable, None] = None,
    ):
        matrix = np.array(weights, dtype=float, copy=True)
        if matrix.ndim != 2 or matrix.shape[0] < 2 or matrix.shape[1] < 1:
            raise ConfigurationError(
                f"Weight matrix must have shape (input_count + 1, output_count) with "
                f"input_count >= 1 and output_count >= 1, got {matrix.shape}"
            )
        matrix.setflags(write=False)
        self._weights = matrix
        self._activation = resolve_activation(activation)

    @classmethod
    def random(
        cls,
        input_count: int,
        output_count: int,
        activation: Union[str, Callable, None] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> 'DenseLayer':
        """
        Create a layer with weights drawn uniformly from [-1, 1).

        Args:
            input_count: Number of inputs (>= 1)
            output_count: Number of outputs (>= 1)
            activation: Activation name or callable (sigmoid when None)
            rng: Uniform [0, 1) source; a fresh default_rng() when None

        Returns:
            A new randomly initialized DenseLayer
        """
        if input_count < 1 or output_count < 1:
            raise ConfigurationError(
                f"Layer needs at least 1 input and 1 output, got {input_count}x{output_count}"
            )
        if rng is None:
            rng = np.random.default_rng()
        uniform = rng.random((input_count + 1, output_count))
        return cls(-1.0 + 2.0 * uniform, activation)

    @property
    def input_count(self) -> int:
        return self._weights.shape[0] - 1

    @property
    def output_count(self) -> int:
        return self._weights.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        """(input_count, output_count) - the pair written to serialized text."""
        return self.input_count, self.output_count

    @property
    def parameter_count(self) -> int:
        return self._weights.size

    @property
    def activation(self) -> Callable:
        return self._activation

    @property
    def activation_name(self) -> Optional[str]:
        return activation_name(self._activation)

    @property
    def weights(self) -> np.ndarray:
        """A writable copy of the weight matrix (bias row last)."""
        return self._weights.copy()

    def weight(self, i: int, j: int) -> float:
        """Weight between input i (or the bias row when i == input_count) and output j."""
        if not (0 <= i <= self.input_count and 0 <= j < self.output_count):
            raise IndexError(
                f"Weight index ({i}, {j}) out of range for a "
                f"{self.input_count + 1}x{self.output_count} matrix"
            )
        return float(self._weights[i, j])

    def apply(self, inputs) -> np.ndarray:
        """
        Apply this layer to one input vector.

        Raises:
            InputSizeError: if the vector length differs from input_count
        """
        x = np.asarray(inputs, dtype=float)
        if x.ndim != 1 or x.shape[0] != self.input_count:
            raise InputSizeError(
                f"Layer expects {self.input_count} inputs, got shape {x.shape}"
            )
        z = x @ self._weights[:-1] + self._weights[-1]
        return np.asarray(self._activation(z), dtype=float)

    def apply_batch(self, X) -> np.ndarray:
        """Apply this layer to every row of an (n_samples, input_count) matrix."""
        X = np.asarray(X, dtype=float)
        if X.ndim != 2 or X.shape[1] != self.input_count:
            raise InputSizeError(
                f"Layer expects (n, {self.input_count}) inputs, got shape {X.shape}"
            )
        z = X @ self._weights[:-1] + self._weights[-1]
        return np.asarray(self._activation(z), dtype=float)

    def with_weights(self, weights: np.ndarray) -> 'DenseLayer':
        """New layer with the same activation and the given weight matrix."""
        matrix = np.asarray(weights, dtype=float)
        if matrix.shape != self._weights.shape:
            raise ValueError(
                f"Replacement weights must have shape {self._weights.shape}, got {matrix.shape}"
            )
        return DenseLayer(matrix, self._activation)

    def clone(self) -> 'DenseLayer':
        """Create a deep copy of this layer."""
        return DenseLayer(self._weights, self._activation)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DenseLayer):
            return NotImplemented
        return (
            self._activation is other._activation
            and np.array_equal(self._weights, other._weights)
        )

    __hash__ = None

    def __repr__(self) -> str:
        name = self.activation_name or getattr(self._activation, '__name__', 'custom')
        return f"DenseLayer({self.input_count}->{self.output_count}, activation={name})"
