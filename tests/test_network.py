"""
Tests for the network model: activations, dense layers, networks and the
two-line text format.

Run with: python -m pytest tests/test_network.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neurodrive.core.activations import (
    ACTIVATIONS,
    sigmoid,
    relu,
    tanh,
    get_activation,
    resolve_activation,
    activation_name,
    list_activations,
)
from neurodrive.core.layers import DenseLayer
from neurodrive.core.network import NeuralNetwork
from neurodrive.errors import ConfigurationError, InputSizeError, NetworkFormatError


class TestActivations:
    """Tests for activation functions."""

    def test_sigmoid_values(self):
        assert sigmoid(0.0) == pytest.approx(0.5)
        assert sigmoid(1.0) == pytest.approx(1 / (1 + np.exp(-1.0)))
        assert 0.0 < sigmoid(-10.0) < 0.5 < sigmoid(10.0) < 1.0

    def test_sigmoid_extreme_inputs(self):
        """Huge inputs saturate without overflow warnings turning into NaN."""
        out = sigmoid(np.array([-1e6, 1e6]))
        assert np.all(np.isfinite(out))
        assert out[0] == pytest.approx(0.0, abs=1e-12)
        assert out[1] == pytest.approx(1.0)

    def test_relu_and_tanh(self):
        np.testing.assert_array_equal(relu(np.array([-2.0, 0.0, 3.0])), [0.0, 0.0, 3.0])
        assert tanh(0.0) == pytest.approx(0.0)
        assert tanh(100.0) == pytest.approx(1.0)

    def test_registry(self):
        assert set(ACTIVATIONS) == {'sigmoid', 'relu', 'tanh'}
        assert get_activation('relu').func is relu
        info = list_activations()
        assert info['sigmoid']['range'] == (0, 1)
        assert 'func' not in info['tanh']

    def test_unknown_activation(self):
        with pytest.raises(ValueError):
            get_activation('softplus')

    def test_resolve_activation(self):
        assert resolve_activation(None) is sigmoid
        assert resolve_activation('tanh') is tanh
        assert resolve_activation(ACTIVATIONS['relu']) is relu

        def custom(x):
            return x
        assert resolve_activation(custom) is custom
        assert activation_name(custom) is None
        assert activation_name(sigmoid) == 'sigmoid'

        with pytest.raises(ValueError):
            resolve_activation(42)


class TestDenseLayer:
    """Tests for DenseLayer."""

    @pytest.fixture
    def layer(self):
        # 2 inputs, 3 outputs; last row is the bias
        weights = np.array([
            [0.1, 0.2, 0.3],
            [0.4, 0.5, 0.6],
            [-0.1, 0.0, 0.1],
        ])
        return DenseLayer(weights, 'sigmoid')

    def test_shape(self, layer):
        assert layer.input_count == 2
        assert layer.output_count == 3
        assert layer.shape == (2, 3)
        assert layer.parameter_count == 9
        assert layer.activation_name == 'sigmoid'

    def test_apply(self, layer):
        """output[j] = sigmoid(bias[j] + sum_i input[i] * weight[i][j])"""
        out = layer.apply([1.0, 2.0])
        expected = sigmoid(np.array([
            -0.1 + 1.0 * 0.1 + 2.0 * 0.4,
            0.0 + 1.0 * 0.2 + 2.0 * 0.5,
            0.1 + 1.0 * 0.3 + 2.0 * 0.6,
        ]))
        np.testing.assert_allclose(out, expected)

    def test_apply_batch_matches_apply(self, layer):
        X = np.array([[1.0, 2.0], [0.0, -1.0], [0.5, 0.5]])
        batch = layer.apply_batch(X)
        for row, out in zip(X, batch):
            np.testing.assert_allclose(out, layer.apply(row))

    def test_input_size_mismatch(self, layer):
        with pytest.raises(InputSizeError):
            layer.apply([1.0, 2.0, 3.0])
        with pytest.raises(InputSizeError):
            layer.apply_batch(np.zeros((4, 3)))

    def test_weight_accessor(self, layer):
        assert layer.weight(1, 2) == pytest.approx(0.6)
        assert layer.weight(2, 0) == pytest.approx(-0.1)  # bias row
        with pytest.raises(IndexError):
            layer.weight(3, 0)
        with pytest.raises(IndexError):
            layer.weight(0, 3)

    def test_weights_are_not_shared(self):
        source = np.ones((3, 2))
        layer = DenseLayer(source)
        source[0, 0] = 99.0
        assert layer.weight(0, 0) == 1.0

        copy = layer.weights
        copy[0, 0] = -5.0
        assert layer.weight(0, 0) == 1.0

    def test_invalid_matrix(self):
        with pytest.raises(ConfigurationError):
            DenseLayer(np.ones((1, 3)))  # no input row
        with pytest.raises(ConfigurationError):
            DenseLayer(np.ones((3, 0)))
        with pytest.raises(ConfigurationError):
            DenseLayer(np.ones(4))

    @pytest.mark.parametrize("sizes", [(0, 2), (2, 0), (-1, 3)])
    def test_random_layer_invalid_sizes(self, sizes):
        with pytest.raises(ConfigurationError):
            DenseLayer.random(*sizes)

    def test_random_layer(self):
        rng = np.random.default_rng(42)
        layer = DenseLayer.random(4, 3, 'tanh', rng)
        w = layer.weights
        assert w.shape == (5, 3)
        assert np.all(w >= -1.0) and np.all(w < 1.0)
        assert layer.activation is tanh

    def test_random_layer_is_reproducible(self):
        a = DenseLayer.random(3, 2, rng=np.random.default_rng(7))
        b = DenseLayer.random(3, 2, rng=np.random.default_rng(7))
        assert a == b

    def test_with_weights(self, layer):
        replaced = layer.with_weights(np.zeros((3, 3)))
        assert replaced.activation is layer.activation
        np.testing.assert_allclose(replaced.apply([5.0, 5.0]), [0.5, 0.5, 0.5])
        with pytest.raises(ValueError):
            layer.with_weights(np.zeros((2, 3)))

    def test_clone_is_equal(self, layer):
        clone = layer.clone()
        assert clone == layer
        assert clone is not layer
        assert layer != layer.with_weights(np.zeros((3, 3)))


class TestNeuralNetwork:
    """Tests for NeuralNetwork."""

    @pytest.fixture
    def network(self):
        rng = np.random.default_rng(0)
        return NeuralNetwork([
            DenseLayer.random(4, 3, rng=rng),
            DenseLayer.random(3, 2, rng=rng),
        ])

    def test_properties(self, network):
        assert network.input_count == 4
        assert network.output_count == 2
        assert network.shape == [(4, 3), (3, 2)]
        assert network.parameter_count == 5 * 3 + 4 * 2
        assert len(network) == 2

    def test_process(self, network):
        out = network.process([0.1, 0.2, 0.3, 0.4])
        assert out.shape == (2,)
        assert np.all((out > 0) & (out < 1))

    def test_process_batch(self, network):
        X = np.random.default_rng(1).random((6, 4))
        batch = network.process_batch(X)
        assert batch.shape == (6, 2)
        np.testing.assert_allclose(batch[3], network.process(X[3]))

    def test_process_wrong_length(self, network):
        with pytest.raises(InputSizeError):
            network.process([1.0, 2.0])

    def test_layers_must_chain(self):
        with pytest.raises(ValueError):
            NeuralNetwork([DenseLayer.random(2, 3), DenseLayer.random(4, 1)])
        with pytest.raises(ConfigurationError):
            NeuralNetwork([])

    def test_get_layers_returns_new_list(self, network):
        layers = network.get_layers()
        layers.pop()
        assert len(network) == 2

    def test_clone(self, network):
        clone = network.clone()
        assert clone == network
        assert clone.get_layers()[0] is not network.get_layers()[0]

    def test_get_all_weights_order(self):
        first = DenseLayer(np.array([[1.0, 2.0], [3.0, 4.0]]))
        second = DenseLayer(np.array([[5.0], [6.0], [7.0]]))
        network = NeuralNetwork([first, second])
        np.testing.assert_array_equal(
            network.get_all_weights(),
            [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0],
        )


class TestSerialization:
    """Tests for the two-line network text."""

    def test_serialize_format(self):
        network = NeuralNetwork([
            DenseLayer(np.array([[0.5, -0.25], [1.0, 0.0]])),
            DenseLayer(np.array([[0.1], [0.2], [0.3]])),
        ])
        text = network.serialize_to_string()
        assert text == "1,2,2,1\n0.5,-0.25,1.0,0.0,0.1,0.2,0.3"

    def test_round_trip_is_exact(self):
        rng = np.random.default_rng(3)
        network = NeuralNetwork([
            DenseLayer.random(5, 3, rng=rng),
            DenseLayer.random(3, 2, rng=rng),
        ])
        restored = NeuralNetwork.construct_from_string(network.serialize_to_string())
        assert restored == network

    def test_construct_and_process(self):
        """A 2-3-1 network read from text yields one sigmoid output."""
        weights = ','.join(['0.1'] * 21)
        network = NeuralNetwork.construct_from_string("2,3,3,1\n" + weights)

        assert network.shape == [(2, 3), (3, 1)]
        out = network.process([0.5, -0.5])
        assert out.shape == (1,)
        assert 0.0 < out[0] < 1.0

    def test_surplus_weights_are_ignored(self):
        exact = NeuralNetwork.construct_from_string("1,1,1,1\n1,2,3,4")
        surplus = NeuralNetwork.construct_from_string("1,1,1,1\n1,2,3,4,5,6")
        assert exact == surplus

    def test_whitespace_around_sizes(self):
        network = NeuralNetwork.construct_from_string(" 1, 1 ,1,1\n1,2,3,4")
        assert network.shape == [(1, 1), (1, 1)]

    @pytest.mark.parametrize('text', [
        None,
        "",
        "2,3,3,1",
        "2,3\n0.1,0.2",
        "2,3,3\n0.1,0.2",
        "2,x,3,1\n" + ','.join(['0.1'] * 13),
        "2,0,0,1\n0.1",
        "2,3,3,1\n" + ','.join(['0.1'] * 12),
        "2,3,3,1\n" + ','.join(['0.1'] * 12 + ['abc']),
        "2,3,4,1\n" + ','.join(['0.1'] * 30),
    ])
    def test_malformed_text(self, text):
        with pytest.raises(NetworkFormatError):
            NeuralNetwork.construct_from_string(text)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            NeuralNetwork.construct_from_string("1,1\n0")


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
