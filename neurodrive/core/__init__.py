"""Neural network model: activations, dense layers, networks and network files."""

from .activations import ACTIVATIONS, get_activation, list_activations, sigmoid, relu, tanh
from .layers import DenseLayer
from .network import NeuralNetwork
from .persistence import (
    TrainedNetwork,
    save_network,
    load_network,
    split_header,
    trained_network_filename,
)

__all__ = [
    'ACTIVATIONS',
    'get_activation',
    'list_activations',
    'sigmoid',
    'relu',
    'tanh',
    'DenseLayer',
    'NeuralNetwork',
    'TrainedNetwork',
    'save_network',
    'load_network',
    'split_header',
    'trained_network_filename',
]
