"""
Feedforward neural network built from dense layers, plus its text format.

Serialized form (UTF-8, two lines):

    in1,out1,in2,out2,...
    w,w,w,...

Line 1 holds one (input_count, output_count) pair per layer. Line 2 holds
every weight, row-major per layer with the bias row last, layers in order.
Activations are not stored; networks read back from text use sigmoid.
"""

import logging
import numpy as np
from typing import Iterable, List, Tuple

from ..errors import ConfigurationError, NetworkFormatError
from .layers import DenseLayer
from .activations import sigmoid

logger = logging.getLogger(__name__)


class NeuralNetwork:
    """
    An ordered, immutable sequence of dense layers.

    Input flows through every layer in order; there is no skipping and no
    residual path. Operators that change weights return new networks.
    """

    def __init__(self, layers: Iterable[DenseLayer]):
        self._layers: Tuple[DenseLayer, ...] = tuple(layers)
        if not self._layers:
            raise ConfigurationError("A network needs at least one layer")
        for k in range(len(self._layers) - 1):
            out_count = self._layers[k].output_count
            in_count = self._layers[k + 1].input_count
            if out_count != in_count:
                raise ValueError(
                    f"Layer {k} outputs {out_count} values but layer {k + 1} "
                    f"expects {in_count} inputs"
                )

    @property
    def input_count(self) -> int:
        return self._layers[0].input_count

    @property
    def output_count(self) -> int:
        return self._layers[-1].output_count

    @property
    def shape(self) -> List[Tuple[int, int]]:
        """(input_count, output_count) per layer."""
        return [layer.shape for layer in self._layers]

    @property
    def parameter_count(self) -> int:
        return sum(layer.parameter_count for layer in self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def get_layers(self) -> List[DenseLayer]:
        """The layers as a new list; changing the list leaves the network alone."""
        return list(self._layers)

    def get_all_weights(self) -> np.ndarray:
        """All weights flattened in serialization order."""
        return np.concatenate([layer.weights.ravel() for layer in self._layers])

    def process(self, inputs) -> np.ndarray:
        """Apply all layers to one input vector."""
        outputs = inputs
        for layer in self._layers:
            outputs = layer.apply(outputs)
        return outputs

    def process_batch(self, X) -> np.ndarray:
        """Apply all layers to every row of a sample matrix."""
        outputs = X
        for layer in self._layers:
            outputs = layer.apply_batch(outputs)
        return outputs

    def clone(self) -> 'NeuralNetwork':
        """Create a deep copy of this network."""
        return NeuralNetwork(layer.clone() for layer in self._layers)

    def serialize_to_string(self) -> str:
        """Layer shapes on the first line, weights on the second."""
        sizes = ','.join(f"{i},{o}" for i, o in self.shape)
        weights = ','.join(repr(float(w)) for w in self.get_all_weights())
        return f"{sizes}\n{weights}"

    @classmethod
    def construct_from_string(cls, text: str) -> 'NeuralNetwork':
        """
        Rebuild a network from `serialize_to_string` output.

        Args:
            text: Two-line network representation (header line already stripped)

        Returns:
            The network, every layer using sigmoid

        Raises:
            NetworkFormatError: on any malformed size or weight data
        """
        if text is None:
            raise NetworkFormatError("Network text is missing")
        lines = text.splitlines()
        if len(lines) < 2:
            raise NetworkFormatError("The network text must contain 2 lines")

        size_tokens = lines[0].split(',')
        if len(size_tokens) < 4:
            raise NetworkFormatError("The network text must contain sizes for at least 2 layers")
        if len(size_tokens) % 2 != 0:
            raise NetworkFormatError(
                f"Layer sizes must come in (inputs, outputs) pairs, got {len(size_tokens)} values"
            )

        sizes = []
        for token in size_tokens:
            try:
                size = int(token.strip())
            except ValueError:
                raise NetworkFormatError(f"Invalid layer size {token!r}") from None
            if size < 1:
                raise NetworkFormatError("Every layer must have at least 1 input and 1 output")
            sizes.append(size)

        weight_tokens = lines[1].split(',')
        position = 0
        layers = []
        for c in range(0, len(sizes), 2):
            input_count, output_count = sizes[c], sizes[c + 1]
            needed = (input_count + 1) * output_count
            chunk = weight_tokens[position:position + needed]
            if len(chunk) < needed:
                raise NetworkFormatError("Weights count must match the layer sizes")
            try:
                values = [float(token) for token in chunk]
            except ValueError:
                raise NetworkFormatError("Weights must be numeric") from None
            position += needed
            matrix = np.array(values).reshape(input_count + 1, output_count)
            layers.append(DenseLayer(matrix, sigmoid))

        if position < len(weight_tokens):
            logger.debug("Ignoring %d surplus weight values", len(weight_tokens) - position)

        try:
            return cls(layers)
        except ValueError as e:
            raise NetworkFormatError(str(e)) from e

    def __eq__(self, other) -> bool:
        if not isinstance(other, NeuralNetwork):
            return NotImplemented
        return self._layers == other._layers

    __hash__ = None

    def __repr__(self) -> str:
        arch = '-'.join([str(self.input_count)] + [str(o) for _, o in self.shape])
        return f"NeuralNetwork({arch}, params={self.parameter_count})"
