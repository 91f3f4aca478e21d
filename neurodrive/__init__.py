"""
neurodrive - evolving neural network controllers with a genetic algorithm.

The package is split into:
- core: activations, dense layers, networks and their text format
- evolution: chromosomes, populations, operators, generators, the engine
- datasets: toy fitness tasks
- visualization: matplotlib plots of runs
"""

from .core import DenseLayer, NeuralNetwork, save_network, load_network
from .evolution import (
    Chromosome,
    Population,
    SRMPopulationGenerator,
    GeneticAlgorithmManager,
    EvolutionConfig,
    FitnessEvaluator,
)
from .errors import (
    NeurodriveError,
    ConfigurationError,
    NetworkFormatError,
    InputSizeError,
    InsufficientPopulationError,
)

__version__ = '0.1.0'

__all__ = [
    'DenseLayer',
    'NeuralNetwork',
    'save_network',
    'load_network',
    'Chromosome',
    'Population',
    'SRMPopulationGenerator',
    'GeneticAlgorithmManager',
    'EvolutionConfig',
    'FitnessEvaluator',
    'NeurodriveError',
    'ConfigurationError',
    'NetworkFormatError',
    'InputSizeError',
    'InsufficientPopulationError',
]
