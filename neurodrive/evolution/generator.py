"""
Population generators.

A population generator creates the first population of a run and every
following one. The engine only talks to the `PopulationGenerator` interface,
so other breeding schemes can be plugged in without touching it.

`SRMPopulationGenerator` is the shipped scheme: Selection (truncation),
Recombination (uniform crossover over a pair sweep), Mutation (Gaussian,
best child kept as is).
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
import numpy as np

from ..core.network import NeuralNetwork
from ..errors import ConfigurationError, InsufficientPopulationError
from .chromosome import Chromosome
from .population import Population
from .operators import (
    DEFAULT_SELECTION_PERCENTAGE,
    DEFAULT_MIXING_RATIO,
    DEFAULT_MUTATION_PROBABILITY,
    DEFAULT_MUTATION_VARIANCE,
    truncation_selection,
    recombine,
    gaussian_mutation,
    mutate_offspring,
)

logger = logging.getLogger(__name__)


def chromosome_id(generation: int, ordinal: int) -> str:
    """Chromosome identifier: '{generation}_{1-based ordinal}'."""
    return f"{generation}_{ordinal}"


class PopulationGenerator(ABC):
    """Creates populations for successive generations."""

    @abstractmethod
    def generate_first_population(
        self,
        size: int,
        network_text: Optional[str] = None,
    ) -> Population:
        """
        Create the generation-1 population.

        Args:
            size: Number of chromosomes
            network_text: Optional serialized seed network

        Returns:
            The first Population
        """

    @abstractmethod
    def generate_population(self, current_population: Population, generation: int) -> Population:
        """
        Create the next population from an evaluated one.

        Args:
            current_population: Previous population, sorted best first
            generation: Number of the generation being created

        Returns:
            The new Population
        """


class SRMPopulationGenerator(PopulationGenerator):
    """Selection, Recombination, Mutation population generator."""

    def __init__(
        self,
        network_inputs_length: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        selection_percentage: float = DEFAULT_SELECTION_PERCENTAGE,
        mixing_ratio: float = DEFAULT_MIXING_RATIO,
        mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
        mutation_variance: float = DEFAULT_MUTATION_VARIANCE,
    ):
        """
        Initialize the generator.

        Args:
            network_inputs_length: Input width of randomly created networks
            rng: Random source owned by this generator
            seed: Seed for a new random source (ignored when rng is given)
            selection_percentage: Share of the population kept for breeding
            mixing_ratio: Probability a child keeps its own parent's weight
            mutation_probability: Per-weight mutation probability
            mutation_variance: Scale of the Gaussian noise
        """
        if network_inputs_length < 1:
            raise ConfigurationError(
                f"Network inputs length must be positive, got {network_inputs_length}"
            )
        if not 0 < selection_percentage <= 100:
            raise ConfigurationError(
                f"Selection percentage must be in (0, 100], got {selection_percentage}"
            )
        self.network_inputs_length = network_inputs_length
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.selection_percentage = selection_percentage
        self.mixing_ratio = mixing_ratio
        self.mutation_probability = mutation_probability
        self.mutation_variance = mutation_variance

    def generate_first_population(
        self,
        size: int,
        network_text: Optional[str] = None,
    ) -> Population:
        if size < 1:
            raise ConfigurationError(f"Population size must be positive, got {size}")

        if network_text is None:
            return Population.generate_random(
                size,
                self.network_inputs_length,
                lambda ordinal: chromosome_id(1, ordinal),
                self.rng,
            )

        seed_network = NeuralNetwork.construct_from_string(network_text)
        chromosomes = [Chromosome(chromosome_id(1, 1), seed_network)]
        for ordinal in range(2, size + 1):
            mutated = gaussian_mutation(
                seed_network,
                self.mutation_probability,
                self.mutation_variance,
                self.rng,
            )
            chromosomes.append(Chromosome(chromosome_id(1, ordinal), mutated))

        logger.debug("Seeded first population of %d from a %s network", size, seed_network)
        return Population(chromosomes)

    def generate_population(self, current_population: Population, generation: int) -> Population:
        if current_population is None:
            raise InsufficientPopulationError("No population was given")
        if len(current_population) < 2:
            raise InsufficientPopulationError(
                f"The given population must contain at least 2 chromosomes, "
                f"got {len(current_population)}"
            )

        # 1. Selection
        current_networks = current_population.networks()
        selected = self.make_selection(current_networks)

        # 2. Recombination
        children = self.do_recombination(selected, len(current_population))

        # 3. Mutation
        mutated = self.do_mutation(children)

        chromosomes = [
            Chromosome(chromosome_id(generation, ordinal), network)
            for ordinal, network in enumerate(mutated, start=1)
        ]

        logger.debug(
            "Generation %d: %d survivors bred into %d chromosomes",
            generation, len(selected), len(chromosomes),
        )
        return Population(chromosomes)

    def make_selection(self, networks: List[NeuralNetwork]) -> List[NeuralNetwork]:
        return truncation_selection(networks, self.selection_percentage)

    def do_recombination(self, selected: List[NeuralNetwork], population_size: int) -> List[NeuralNetwork]:
        return recombine(selected, population_size, self.mixing_ratio, self.rng)

    def do_mutation(self, networks: List[NeuralNetwork]) -> List[NeuralNetwork]:
        return mutate_offspring(
            networks,
            self.mutation_probability,
            self.mutation_variance,
            self.rng,
        )
