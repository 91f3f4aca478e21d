"""
Evolutionary operators: selection, recombination, and mutation.

These operators work on networks, not chromosomes; the population generator
wraps their output into chromosomes with fresh ids. Every random draw comes
from an explicit numpy Generator so a seeded run is reproducible.
"""

import math
from typing import List, Optional, Sequence, Tuple
import numpy as np

from ..core.network import NeuralNetwork

DEFAULT_SELECTION_PERCENTAGE = 10
DEFAULT_MIXING_RATIO = 0.7
DEFAULT_MUTATION_PROBABILITY = 0.3
DEFAULT_MUTATION_VARIANCE = 1.0


# =============================================================================
# Random helpers
# =============================================================================

def next_gaussian(
    rng: np.random.Generator,
    mean: float = 0.0,
    variance: float = 1.0,
    size=None,
):
    """
    Normally distributed values via the Box-Muller transform.

    Two uniform [0, 1) draws are mapped to (0, 1] so the logarithm is finite;
    sqrt(-2 ln u1) * sin(2 pi u2) is then standard normal.

    Args:
        rng: Random source
        mean: Shift applied to the standard normal value
        variance: Scale applied to the standard normal value
        size: Output shape (a single float when None)
    """
    u1 = 1.0 - rng.random(size)
    u2 = 1.0 - rng.random(size)
    std_normal = np.sqrt(-2.0 * np.log(u1)) * np.sin(2.0 * np.pi * u2)
    if size is None:
        return mean + variance * float(std_normal)
    return mean + variance * std_normal


# =============================================================================
# Selection Operators
# =============================================================================

def selection_count(population_size: int, selection_percentage: float = DEFAULT_SELECTION_PERCENTAGE) -> int:
    """Number of survivors: ceil(size * percentage / 100), at least 2."""
    if not 0 < selection_percentage <= 100:
        raise ValueError(
            f"Selection percentage must be in (0, 100], got {selection_percentage}"
        )
    return max(2, math.ceil(population_size * selection_percentage / 100))


def truncation_selection(
    networks: Sequence[NeuralNetwork],
    selection_percentage: float = DEFAULT_SELECTION_PERCENTAGE,
) -> List[NeuralNetwork]:
    """
    Keep the top networks of an already sorted (best first) sequence.

    Args:
        networks: Networks ordered by fitness, best first
        selection_percentage: Share of the population that survives

    Returns:
        The first selection_count(...) networks
    """
    count = selection_count(len(networks), selection_percentage)
    return list(networks[:count])


# =============================================================================
# Crossover Operators
# =============================================================================

def uniform_crossover(
    parent1: NeuralNetwork,
    parent2: NeuralNetwork,
    mixing_ratio: float = DEFAULT_MIXING_RATIO,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[NeuralNetwork, NeuralNetwork]:
    """
    Weight-wise uniform crossover.

    For each weight, with probability mixing_ratio child 1 takes parent 1's
    value and child 2 takes parent 2's; otherwise the values swap. Both
    children use parent 1's activations.

    Example (mixing_ratio=1.0): child1 == parent1, child2 == parent2.
    Example (mixing_ratio=0.0): child1 == parent2, child2 == parent1.

    Returns:
        Tuple of two child networks
    """
    if parent1.shape != parent2.shape:
        raise ValueError(
            f"Parents must share a topology, got {parent1.shape} and {parent2.shape}"
        )
    if rng is None:
        rng = np.random.default_rng()

    child1_layers = []
    child2_layers = []
    for layer1, layer2 in zip(parent1.get_layers(), parent2.get_layers()):
        w1 = layer1.weights
        w2 = layer2.weights
        keep = rng.random(w1.shape) < mixing_ratio
        child1_layers.append(layer1.with_weights(np.where(keep, w1, w2)))
        child2_layers.append(layer1.with_weights(np.where(keep, w2, w1)))

    return NeuralNetwork(child1_layers), NeuralNetwork(child2_layers)


def recombine(
    selected: Sequence[NeuralNetwork],
    population_size: int,
    mixing_ratio: float = DEFAULT_MIXING_RATIO,
    rng: Optional[np.random.Generator] = None,
) -> List[NeuralNetwork]:
    """
    Breed exactly population_size children from the survivors.

    Pairs are visited in a fixed sweep: (0, 1), (0, 2), ..., (0, n-1),
    (1, 2), ... and each pair yields two children (the second only while
    room remains). When the first index reaches the last survivor the sweep
    starts again from (0, 1).

    Args:
        selected: Survivors, best first (at least 2)
        population_size: Number of children to produce
        mixing_ratio: Passed to uniform_crossover
        rng: Random source

    Returns:
        List of population_size child networks
    """
    if len(selected) < 2:
        raise ValueError(f"Recombination needs at least 2 networks, got {len(selected)}")
    if rng is None:
        rng = np.random.default_rng()

    children: List[NeuralNetwork] = []
    first, second = 0, 1
    while len(children) < population_size:
        if first >= len(selected) - 1:
            first, second = 0, 1
        elif second < len(selected):
            child1, child2 = uniform_crossover(selected[first], selected[second], mixing_ratio, rng)
            children.append(child1)
            if len(children) < population_size:
                children.append(child2)
            second += 1
        else:
            first += 1
            second = first + 1

    return children


# =============================================================================
# Mutation Operators
# =============================================================================

def gaussian_mutation(
    network: NeuralNetwork,
    mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    variance: float = DEFAULT_MUTATION_VARIANCE,
    rng: Optional[np.random.Generator] = None,
) -> NeuralNetwork:
    """
    Add Box-Muller Gaussian noise to a random subset of weights.

    Each weight is perturbed independently with probability
    mutation_probability. The input network is not modified.
    """
    if rng is None:
        rng = np.random.default_rng()

    new_layers = []
    for layer in network.get_layers():
        weights = layer.weights
        mask = rng.random(weights.shape) < mutation_probability
        noise = next_gaussian(rng, 0.0, variance, size=weights.shape)
        new_layers.append(layer.with_weights(np.where(mask, weights + noise, weights)))

    return NeuralNetwork(new_layers)


def mutate_offspring(
    networks: Sequence[NeuralNetwork],
    mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    variance: float = DEFAULT_MUTATION_VARIANCE,
    rng: Optional[np.random.Generator] = None,
) -> List[NeuralNetwork]:
    """Keep the first network unmutated (elitism of one), mutate the rest."""
    if not networks:
        return []
    if rng is None:
        rng = np.random.default_rng()

    mutated = [networks[0].clone()]
    for network in networks[1:]:
        mutated.append(gaussian_mutation(network, mutation_probability, variance, rng))
    return mutated
