"""
Tests for matplotlib plots.

Run with: python -m pytest tests/test_visualization.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neurodrive.evolution.checkpoint import EvolutionHistory
from neurodrive.evolution.population import Population
from neurodrive.visualization.plots import (
    plot_fitness_history,
    plot_weight_distribution,
    save_figure,
)


class TestPlots:
    """Tests for figure creation and saving."""

    @pytest.fixture
    def population(self):
        return Population.generate_random(4, 3, rng=np.random.default_rng(0))

    def test_fitness_history(self, population, tmp_path):
        history = EvolutionHistory()
        for gen in range(1, 4):
            history.record_generation(gen, population, {'1': 0.2 * gen, '2': 0.1})

        fig = plot_fitness_history(history, title='test')
        assert fig.axes[0].get_title() == 'test'

        path = save_figure(fig, tmp_path / 'plots' / 'history.png')
        assert path.exists()

    def test_empty_history(self):
        fig = plot_fitness_history(EvolutionHistory())
        assert len(fig.axes) == 1

    def test_weight_distribution(self, population, tmp_path):
        fig = plot_weight_distribution(population[0].network)
        assert len(fig.axes) == 2
        assert save_figure(fig, tmp_path / 'weights.png').exists()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
