"""
Matplotlib-based visualization for evolution runs.

These functions create static plots for analysis and documentation.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import numpy as np

# Matplotlib imports with non-GUI backend
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from ..core.network import NeuralNetwork
from ..evolution.checkpoint import EvolutionHistory


def plot_fitness_history(
    history: EvolutionHistory,
    figsize: Tuple[int, int] = (10, 4),
    title: Optional[str] = None
) -> plt.Figure:
    """
    Plot best and mean fitness per generation, with the population spread.

    Args:
        history: Recorded generation statistics
        figsize: Figure size
        title: Plot title

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    generations = [g.generation for g in history.generations]
    best = np.array([g.best_fitness for g in history.generations])
    mean = np.array([g.mean_fitness for g in history.generations])
    std = np.array([g.std_fitness for g in history.generations])

    ax.plot(generations, best, 'g-', linewidth=2, label='Best')
    ax.plot(generations, mean, 'b-', linewidth=1.5, label='Mean')
    if len(generations):
        ax.fill_between(generations, mean - std, mean + std, color='b', alpha=0.15)

    ax.set_xlabel('Generation')
    ax.set_ylabel('Fitness')
    ax.set_title(title or 'Fitness by Generation')
    ax.grid(True, alpha=0.3)
    ax.legend()

    plt.tight_layout()
    return fig


def plot_weight_distribution(
    network: NeuralNetwork,
    figsize: Tuple[int, int] = (10, 4)
) -> plt.Figure:
    """
    Plot distribution of weights (biases included) in each layer.

    Args:
        network: Network to inspect
        figsize: Figure size

    Returns:
        matplotlib Figure
    """
    layers = network.get_layers()
    fig, axes = plt.subplots(1, len(layers), figsize=figsize)
    if len(layers) == 1:
        axes = [axes]

    for i, (ax, layer) in enumerate(zip(axes, layers)):
        ax.hist(layer.weights.ravel(), bins=30, color='steelblue', edgecolor='white', alpha=0.8)
        ax.axvline(x=0, color='red', linewidth=1, linestyle='--')
        ax.set_title(f'Layer {i+1} ({layer.input_count}×{layer.output_count})')
        ax.set_xlabel('Weight value')
        ax.set_ylabel('Count')

    plt.tight_layout()
    return fig


def save_figure(fig: plt.Figure, path: Union[str, Path], dpi: int = 150) -> Path:
    """Write a figure to disk and release it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return path
