"""Visualization utilities for evolution runs."""

from .plots import (
    plot_fitness_history,
    plot_weight_distribution,
    save_figure,
)

__all__ = [
    'plot_fitness_history',
    'plot_weight_distribution',
    'save_figure',
]
