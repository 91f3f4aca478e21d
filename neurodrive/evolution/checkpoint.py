"""
Checkpointing for evolutionary runs.

Enables:
- Saving evolution state for resumption
- Recording generation history
- Early stopping on stagnating best fitness
"""

from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Mapping, Optional
from pathlib import Path
from datetime import datetime
import json
import uuid
import numpy as np

from ..core.network import NeuralNetwork
from .chromosome import Chromosome
from .population import Population


@dataclass
class EvolutionCheckpoint:
    """
    Checkpoint for resuming evolutionary runs.

    Contains all state needed to continue evolution from a saved point. The
    population is stored best first, each network in its two-line text form.
    """
    run_id: str
    generation: int
    population: List[Dict[str, str]]  # [{'id': ..., 'network': ...}]
    history: Dict[str, List[Any]]     # Generation-by-generation stats
    config: Dict[str, Any]            # Evolution configuration
    timestamp: str
    state: str = 'running'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EvolutionCheckpoint':
        """Create from dictionary."""
        return cls(**data)

    def save(self, path: Path) -> None:
        """Save checkpoint to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'EvolutionCheckpoint':
        """Load checkpoint from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @staticmethod
    def serialize_population(population: Population) -> List[Dict[str, str]]:
        return [
            {'id': c.id, 'network': c.network.serialize_to_string()}
            for c in population
        ]

    def get_population(self) -> Population:
        """Deserialize the stored population."""
        return Population(
            Chromosome(entry['id'], NeuralNetwork.construct_from_string(entry['network']))
            for entry in self.population
        )


@dataclass
class GenerationStats:
    """Statistics for a single generation."""
    generation: int
    best_fitness: float
    mean_fitness: float
    min_fitness: float
    std_fitness: float
    sum_fitness: float
    population_size: int
    evaluated_count: int
    best_chromosome_id: Optional[str]
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EvolutionHistory:
    """
    Tracks evolution progress over generations.

    Records per-generation statistics for analysis and visualization.
    """

    def __init__(self):
        self.generations: List[GenerationStats] = []
        self.fitness_trajectory: List[float] = []

    def record_generation(
        self,
        generation: int,
        population: Population,
        fitness_values: Mapping[str, float],
    ) -> GenerationStats:
        """
        Record statistics for a completed generation.

        Args:
            generation: Generation number
            population: Evaluated population, sorted best first
            fitness_values: Fitness map returned by the evaluator

        Returns:
            GenerationStats for this generation
        """
        fitnesses = population.fitness_list(fitness_values) or [0.0]

        stats = GenerationStats(
            generation=generation,
            best_fitness=max(fitnesses),
            mean_fitness=float(np.mean(fitnesses)),
            min_fitness=min(fitnesses),
            std_fitness=float(np.std(fitnesses)),
            sum_fitness=float(sum(fitness_values.values())),
            population_size=len(population),
            evaluated_count=sum(1 for c in population if c.id in fitness_values),
            best_chromosome_id=population[0].id if len(population) else None,
            timestamp=datetime.now().isoformat(),
        )

        self.generations.append(stats)
        self.fitness_trajectory.append(stats.best_fitness)

        return stats

    def to_dict(self) -> Dict[str, Any]:
        """Convert history to dictionary for serialization."""
        return {
            'generations': [g.to_dict() for g in self.generations],
            'fitness_trajectory': self.fitness_trajectory,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EvolutionHistory':
        """Restore history from dictionary."""
        history = cls()
        history.generations = [
            GenerationStats(**g) for g in data.get('generations', [])
        ]
        history.fitness_trajectory = data.get('fitness_trajectory', [])
        return history

    def should_early_stop(
        self,
        patience: int = 10,
        min_improvement: float = 0.001,
    ) -> bool:
        """
        Check if evolution should stop early.

        Args:
            patience: Generations without improvement before stopping
            min_improvement: Minimum improvement to count as progress

        Returns:
            True if should stop, False otherwise
        """
        # Need at least patience + 1 generations to compare
        if len(self.fitness_trajectory) <= patience:
            return False

        recent_best = max(self.fitness_trajectory[-patience:])
        older_best = max(self.fitness_trajectory[:-patience])

        improvement = recent_best - older_best
        return improvement < min_improvement


def generate_run_id() -> str:
    """Generate unique run identifier."""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    short_uuid = uuid.uuid4().hex[:6]
    return f"evo_{timestamp}_{short_uuid}"
