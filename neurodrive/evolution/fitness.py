"""
Fitness evaluation.

The engine hands a population to a `FitnessEvaluator` and gets back a map
from chromosome id to a real-valued score (higher is better). In the car
trainer the evaluator is the driving simulation; here two stand-ins ship:
one wraps a plain scoring function, one measures classification accuracy on
a labelled dataset.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Mapping
import numpy as np

from .chromosome import Chromosome
from .population import Population


class FitnessEvaluator(ABC):
    """Scores every chromosome of a population."""

    @abstractmethod
    def evaluate(self, population: Population) -> Mapping[str, float]:
        """
        Evaluate a population.

        Args:
            population: Chromosomes to score

        Returns:
            Mapping from chromosome id to fitness. Ids left out score 0.
        """


class CallableFitnessEvaluator(FitnessEvaluator):
    """Evaluator that applies a scoring function to each chromosome."""

    def __init__(self, score_fn: Callable[[Chromosome], float]):
        self.score_fn = score_fn

    def evaluate(self, population: Population) -> Dict[str, float]:
        return {c.id: float(self.score_fn(c)) for c in population}


class DatasetFitnessEvaluator(FitnessEvaluator):
    """
    Fitness as classification accuracy on a labelled dataset.

    The predicted class of a sample is the index of the largest network
    output, so a two-output controller acts as a binary classifier.
    """

    def __init__(self, X: np.ndarray, y: np.ndarray):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y).astype(int)
        if X.ndim != 2 or len(X) != len(y) or len(y) == 0:
            raise ValueError(f"Expected X of shape (n, d) and y of length n, got {X.shape} and {y.shape}")
        self.X = X
        self.y = y

    @property
    def inputs_length(self) -> int:
        return self.X.shape[1]

    def accuracy(self, network) -> float:
        """Share of samples whose argmax output equals the label."""
        outputs = network.process_batch(self.X)
        predictions = np.argmax(outputs, axis=1)
        return float(np.mean(predictions == self.y))

    def evaluate(self, population: Population) -> Dict[str, float]:
        return {c.id: self.accuracy(c.network) for c in population}
