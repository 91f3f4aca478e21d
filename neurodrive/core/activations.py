"""
Activation functions for dense layers.

Each function is a pure scalar map. They are written with numpy so the same
callable works on a single float or elementwise on a vector:
- Sigmoid: smooth, bounded (0, 1), the default for every layer
- ReLU: piecewise linear, sparse
- Tanh: smooth, zero-centered, bounded (-1, 1)
"""

import numpy as np
from typing import Callable, Dict, Optional, Union


def sigmoid(x):
    """Sigmoid - smooth, bounded (0, 1)."""
    # Clip to avoid overflow
    x = np.clip(x, -500, 500)
    return 1 / (1 + np.exp(-x))


def relu(x):
    """Rectified Linear Unit - positive part of the argument."""
    return np.maximum(0, x)


def tanh(x):
    """Hyperbolic tangent - smooth, bounded (-1, 1)."""
    return np.tanh(x)


class Activation:
    """Wrapper for an activation function with its metadata."""

    def __init__(
        self,
        name: str,
        func: Callable,
        family: str,
        properties: Dict
    ):
        self.name = name
        self.func = func
        self.family = family
        self.properties = properties

    def __call__(self, x):
        return self.func(x)

    def __repr__(self):
        return f"Activation({self.name}, family={self.family})"


# Registry of all activation functions
ACTIVATIONS: Dict[str, Activation] = {
    'sigmoid': Activation(
        name='sigmoid',
        func=sigmoid,
        family='smooth',
        properties={
            'bounded': True,
            'monotonic': True,
            'range': (0, 1),
            'description': 'Sigmoid - smooth, bounded between 0 and 1'
        }
    ),
    'relu': Activation(
        name='relu',
        func=relu,
        family='rectified',
        properties={
            'bounded': False,
            'monotonic': True,
            'range': (0, np.inf),
            'description': 'Rectified Linear Unit - piecewise linear, sparse'
        }
    ),
    'tanh': Activation(
        name='tanh',
        func=tanh,
        family='smooth',
        properties={
            'bounded': True,
            'monotonic': True,
            'range': (-1, 1),
            'description': 'Hyperbolic tangent - smooth, zero-centered'
        }
    ),
}

DEFAULT_ACTIVATION = 'sigmoid'


def get_activation(name: str) -> Activation:
    """Get an activation function by name."""
    if name not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")
    return ACTIVATIONS[name]


def resolve_activation(activation: Union[str, Callable, None]) -> Callable:
    """Turn a name, a callable or None (sigmoid) into a callable."""
    if activation is None:
        return ACTIVATIONS[DEFAULT_ACTIVATION].func
    if isinstance(activation, str):
        return get_activation(activation).func
    if isinstance(activation, Activation):
        return activation.func
    if not callable(activation):
        raise ValueError(f"Activation must be a name or a callable, got {activation!r}")
    return activation


def activation_name(func: Callable) -> Optional[str]:
    """Registry name of an activation callable, or None for custom functions."""
    for name, act in ACTIVATIONS.items():
        if func is act.func or func is act:
            return name
    return None


def list_activations() -> Dict[str, Dict]:
    """List all available activations with their properties."""
    return {
        name: {
            'family': act.family,
            **act.properties
        }
        for name, act in ACTIVATIONS.items()
    }
