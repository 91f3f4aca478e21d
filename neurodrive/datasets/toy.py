"""
Toy datasets for exercising the genetic algorithm without a simulator.

Each dataset is a labelled binary classification problem; a two-output
controller network "solves" it when the larger output matches the label.
They stand in for the driving simulation when testing and demoing:
- xor / circles / linear: classic 2D problems of increasing ease
- steering: synthetic ray-sensor readings, label = which side is clearer
"""

import numpy as np
from typing import Tuple, Dict, Optional


def xor_dataset(
    n_samples: int = 200,
    noise: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Classic XOR problem - the simplest non-linearly separable dataset.

    Requires at least one hidden layer to solve.

    Returns:
        X: Features of shape (n_samples, 2)
        y: Labels of shape (n_samples,)
    """
    rng = np.random.default_rng(seed)

    # Generate points in four quadrants
    n_per_class = n_samples // 4

    # Class 0: top-left and bottom-right
    X0_tl = rng.standard_normal((n_per_class, 2)) * noise + np.array([-1, 1])
    X0_br = rng.standard_normal((n_per_class, 2)) * noise + np.array([1, -1])

    # Class 1: top-right and bottom-left
    X1_tr = rng.standard_normal((n_per_class, 2)) * noise + np.array([1, 1])
    X1_bl = rng.standard_normal((n_per_class, 2)) * noise + np.array([-1, -1])

    X = np.vstack([X0_tl, X0_br, X1_tr, X1_bl])
    y = np.hstack([
        np.zeros(2 * n_per_class),
        np.ones(2 * n_per_class)
    ])

    # Shuffle
    indices = rng.permutation(len(y))
    return X[indices], y[indices].astype(int)


def circles(
    n_samples: int = 200,
    noise: float = 0.1,
    factor: float = 0.5,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two concentric circles; label 1 is the inner circle.

    Args:
        n_samples: Total number of samples
        noise: Noise level
        factor: Ratio between inner and outer circle radii
        seed: Random seed
    """
    rng = np.random.default_rng(seed)
    n_per_class = n_samples // 2

    # Outer circle
    theta0 = rng.random(n_per_class) * 2 * np.pi
    r0 = 1 + rng.standard_normal(n_per_class) * noise
    X0 = np.column_stack([r0 * np.cos(theta0), r0 * np.sin(theta0)])

    # Inner circle
    theta1 = rng.random(n_per_class) * 2 * np.pi
    r1 = factor + rng.standard_normal(n_per_class) * noise
    X1 = np.column_stack([r1 * np.cos(theta1), r1 * np.sin(theta1)])

    X = np.vstack([X0, X1])
    y = np.hstack([np.zeros(n_per_class), np.ones(n_per_class)])

    indices = rng.permutation(len(y))
    return X[indices], y[indices].astype(int)


def linear_separable(
    n_samples: int = 200,
    margin: float = 0.5,
    noise: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Two Gaussian blobs either side of a horizontal margin."""
    rng = np.random.default_rng(seed)
    n_per_class = n_samples // 2

    X0 = rng.standard_normal((n_per_class, 2)) * noise
    X0[:, 1] -= margin

    X1 = rng.standard_normal((n_per_class, 2)) * noise
    X1[:, 1] += margin

    X = np.vstack([X0, X1])
    y = np.hstack([np.zeros(n_per_class), np.ones(n_per_class)])

    indices = rng.permutation(len(y))
    return X[indices], y[indices].astype(int)


def steering(
    n_samples: int = 200,
    n_sensors: int = 5,
    noise: float = 0.05,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Synthetic ray-sensor readings of a car.

    Each sample holds n_sensors normalized distances in [0, 1], fanned from
    the car's left to its right. The label is 1 when the left half of the fan
    sees more free space than the right half (steer left), 0 otherwise.

    Args:
        n_samples: Number of samples
        n_sensors: Rays per sample (an odd count has a centre ray)
        noise: Standard deviation of reading noise
        seed: Random seed

    Returns:
        X: Features of shape (n_samples, n_sensors)
        y: Labels of shape (n_samples,)
    """
    if n_sensors < 2:
        raise ValueError(f"steering needs at least 2 sensors, got {n_sensors}")
    rng = np.random.default_rng(seed)

    X = rng.random((n_samples, n_sensors))
    half = n_sensors // 2
    left = X[:, :half].sum(axis=1)
    right = X[:, n_sensors - half:].sum(axis=1)
    y = (left > right).astype(int)

    X = np.clip(X + rng.standard_normal(X.shape) * noise, 0.0, 1.0)
    return X, y


# Dataset registry
DATASETS: Dict[str, Dict] = {
    'xor': {
        'function': xor_dataset,
        'name': 'XOR',
        'description': 'Classic XOR problem - simplest non-linear dataset',
        'difficulty': 'easy',
        'default_params': {'n_samples': 200, 'noise': 0.1},
    },
    'circles': {
        'function': circles,
        'name': 'Circles',
        'description': 'Two concentric circles',
        'difficulty': 'medium',
        'default_params': {'n_samples': 200, 'noise': 0.1, 'factor': 0.5},
    },
    'linear': {
        'function': linear_separable,
        'name': 'Linear',
        'description': 'Linearly separable - baseline dataset',
        'difficulty': 'trivial',
        'default_params': {'n_samples': 200, 'margin': 0.5, 'noise': 0.1},
    },
    'steering': {
        'function': steering,
        'name': 'Steering',
        'description': 'Ray-sensor readings labelled with the clearer side',
        'difficulty': 'easy',
        'default_params': {'n_samples': 200, 'n_sensors': 5, 'noise': 0.05},
    },
}


def get_dataset(
    name: str,
    **kwargs
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Get a dataset by name.

    Args:
        name: Dataset name
        **kwargs: Override default parameters

    Returns:
        X: Features
        y: Labels
    """
    if name not in DATASETS:
        available = ', '.join(DATASETS.keys())
        raise ValueError(f"Unknown dataset '{name}'. Available: {available}")

    dataset_info = DATASETS[name]
    params = dataset_info['default_params'].copy()
    params.update(kwargs)

    return dataset_info['function'](**params)


def list_datasets() -> Dict[str, Dict]:
    """List all available datasets with their metadata."""
    return {
        name: {k: v for k, v in info.items() if k != 'function'}
        for name, info in DATASETS.items()
    }
