"""
Population of chromosomes competing within one generation.

A population is created once per generation by a population generator and
replaced, never edited, at the next generation boundary. The only in-place
change is `sort_by_fitness`, after which index 0 is the fittest chromosome.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple
import numpy as np

from ..core.layers import DenseLayer
from ..core.network import NeuralNetwork
from ..errors import ConfigurationError
from .chromosome import Chromosome

# Controllers steer with two outputs
OUTPUT_WIDTH = 2


def fitness_of(chromosome: Chromosome, fitness_values: Mapping[str, float]) -> float:
    """Fitness looked up by id; ids missing from the map score 0."""
    return float(fitness_values.get(chromosome.id, 0.0))


def hidden_width(inputs_length: int) -> int:
    """Hidden layer width: the integer mean of input and output widths."""
    return (inputs_length + OUTPUT_WIDTH) // 2


class Population:
    """Ordered collection of chromosomes."""

    def __init__(self, chromosomes: Iterable[Chromosome]):
        self._chromosomes: List[Chromosome] = list(chromosomes)

    @classmethod
    def generate_random(
        cls,
        count: int,
        inputs_length: int,
        id_generator: Optional[Callable[[int], str]] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> 'Population':
        """
        Build `count` chromosomes with random two-layer sigmoid networks.

        Each network maps inputs_length -> (inputs_length + 2) // 2 -> 2, with
        weights uniform in [-1, 1].

        Args:
            count: Number of chromosomes
            inputs_length: Network input width
            id_generator: Maps a 1-based ordinal to an id (str(ordinal) when None)
            rng: Random source for the weights

        Returns:
            A new Population
        """
        if count < 1:
            raise ConfigurationError(f"Population size must be positive, got {count}")
        if inputs_length < 1:
            raise ConfigurationError(f"Network inputs length must be positive, got {inputs_length}")
        if rng is None:
            rng = np.random.default_rng()

        hidden = hidden_width(inputs_length)
        chromosomes = []
        for ordinal in range(1, count + 1):
            network = NeuralNetwork([
                DenseLayer.random(inputs_length, hidden, 'sigmoid', rng),
                DenseLayer.random(hidden, OUTPUT_WIDTH, 'sigmoid', rng),
            ])
            chromosome_id = id_generator(ordinal) if id_generator is not None else str(ordinal)
            chromosomes.append(Chromosome(chromosome_id, network))

        return cls(chromosomes)

    @property
    def chromosomes(self) -> Tuple[Chromosome, ...]:
        """Point-in-time snapshot of the current order."""
        return tuple(self._chromosomes)

    @property
    def ids(self) -> List[str]:
        return [c.id for c in self._chromosomes]

    @property
    def best(self) -> Chromosome:
        """First chromosome; the fittest once sort_by_fitness has run."""
        if not self._chromosomes:
            raise IndexError("Population is empty")
        return self._chromosomes[0]

    def sort_by_fitness(self, fitness_values: Mapping[str, float]) -> None:
        """Stable descending sort by fitness (missing ids score 0)."""
        self._chromosomes.sort(key=lambda c: fitness_of(c, fitness_values), reverse=True)

    def fitness_list(self, fitness_values: Mapping[str, float]) -> List[float]:
        """Fitness of every chromosome in current order."""
        return [fitness_of(c, fitness_values) for c in self._chromosomes]

    def networks(self) -> List[NeuralNetwork]:
        return [c.network for c in self._chromosomes]

    def __len__(self) -> int:
        return len(self._chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(tuple(self._chromosomes))

    def __getitem__(self, index: int) -> Chromosome:
        return self._chromosomes[index]

    def __repr__(self) -> str:
        return f"Population(size={len(self)}, ids={self.ids[:5]}{'...' if len(self) > 5 else ''})"


def get_population_stats(
    population: Population,
    fitness_values: Optional[Dict[str, float]] = None,
) -> Dict[str, object]:
    """
    Compute summary statistics about a population.

    Args:
        population: Population to describe
        fitness_values: Optional fitness map for fitness statistics

    Returns:
        Dictionary with population statistics
    """
    if len(population) == 0:
        return {'size': 0}

    params = [c.network.parameter_count for c in population]
    shapes = {tuple(c.network.shape) for c in population}

    stats = {
        'size': len(population),
        'unique_shapes': len(shapes),
        'params_range': (min(params), max(params)),
    }
    if fitness_values is not None:
        fitnesses = population.fitness_list(fitness_values)
        stats.update({
            'min_fitness': min(fitnesses),
            'max_fitness': max(fitnesses),
            'mean_fitness': float(np.mean(fitnesses)),
            'evaluated_count': sum(1 for c in population if c.id in fitness_values),
        })
    return stats
