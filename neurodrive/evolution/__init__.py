"""
Genetic algorithm over neural network controllers.

Key components:
- Chromosome / Population: identity + network, ordered by fitness
- Operators: truncation selection, uniform crossover, Gaussian mutation
- SRMPopulationGenerator: Selection -> Recombination -> Mutation pipeline
- GeneticAlgorithmManager: generation state machine around an evaluator

Example usage:
    from neurodrive.evolution import (
        GeneticAlgorithmManager, EvolutionConfig, DatasetFitnessEvaluator,
    )
    from neurodrive.datasets import get_dataset

    X, y = get_dataset('xor', n_samples=200)
    evaluator = DatasetFitnessEvaluator(X, y)
    config = EvolutionConfig(population_size=20, network_inputs_length=2,
                             target_fitness=0.95, max_generations=100)

    manager = GeneticAlgorithmManager(evaluator, config=config)
    result = manager.run()
    print(result.summary())
"""

from .chromosome import Chromosome
from .population import Population, fitness_of, get_population_stats
from .operators import (
    next_gaussian,
    truncation_selection,
    uniform_crossover,
    recombine,
    gaussian_mutation,
    mutate_offspring,
)
from .generator import PopulationGenerator, SRMPopulationGenerator
from .fitness import FitnessEvaluator, CallableFitnessEvaluator, DatasetFitnessEvaluator
from .checkpoint import EvolutionCheckpoint, EvolutionHistory, GenerationStats
from .engine import (
    GeneticAlgorithmManager,
    EvolutionConfig,
    EvolutionResult,
    GenerationEvent,
    AlgorithmFinishedEvent,
    AlgorithmState,
)

__all__ = [
    # Core classes
    'Chromosome',
    'Population',
    'GeneticAlgorithmManager',
    'EvolutionConfig',
    'EvolutionResult',
    'GenerationEvent',
    'AlgorithmFinishedEvent',
    'AlgorithmState',
    'EvolutionCheckpoint',
    'EvolutionHistory',
    'GenerationStats',
    # Population
    'fitness_of',
    'get_population_stats',
    # Generators
    'PopulationGenerator',
    'SRMPopulationGenerator',
    # Fitness
    'FitnessEvaluator',
    'CallableFitnessEvaluator',
    'DatasetFitnessEvaluator',
    # Operators
    'next_gaussian',
    'truncation_selection',
    'uniform_crossover',
    'recombine',
    'gaussian_mutation',
    'mutate_offspring',
]
