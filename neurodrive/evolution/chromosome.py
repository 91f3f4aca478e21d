"""Chromosome: the evolvable unit, an identity paired with one network."""

from dataclasses import dataclass

from ..core.network import NeuralNetwork


@dataclass(frozen=True)
class Chromosome:
    """
    One member of a population.

    Attributes:
        id: Identifier, unique within a generation (e.g. '3_7')
        network: The controller network this chromosome carries
    """
    id: str
    network: NeuralNetwork

    def __repr__(self) -> str:
        return f"Chromosome(id={self.id}, network={self.network!r})"
