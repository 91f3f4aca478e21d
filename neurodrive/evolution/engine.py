"""
Genetic algorithm manager: the generation state machine.

    NOT_STARTED --start()--> RUNNING(1) --submit_fitness()--> RUNNING(2) ...
                                           +--(last generation)--> FINISHED

Each generation:
1. The current population goes to the fitness evaluator
2. The population is sorted by the returned fitness
3. A GenerationEvent (generation, best fitness, fitness sum) is built
4. The termination policy and the generation listeners may mark it last
5. Either the next population is bred, or the run finishes with the best
   chromosome of the sorted population as its result

Hosts with a blocking evaluator call `run()` (or `step()` per generation).
Hosts whose evaluation is asynchronous (a game loop, a simulator) call
`start()`, evaluate `current_population` themselves, and report back with
`submit_fitness()`; the return value tells them whether the run continues.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional
from pathlib import Path
from datetime import datetime
import logging
import time

from ..errors import ConfigurationError
from .chromosome import Chromosome
from .population import Population, fitness_of
from .generator import PopulationGenerator, SRMPopulationGenerator
from .fitness import FitnessEvaluator
from .checkpoint import (
    EvolutionCheckpoint,
    EvolutionHistory,
    generate_run_id,
)

logger = logging.getLogger(__name__)


class AlgorithmState(str, Enum):
    NOT_STARTED = 'not_started'
    RUNNING = 'running'
    FINISHED = 'finished'


@dataclass
class GenerationEvent:
    """Summary of an evaluated generation; recipients may mark it the last one."""
    generation: int
    best_fitness: float
    sum_fitness: float
    is_last: bool = False
    stop_reason: Optional[str] = None

    def set_the_last(self, reason: Optional[str] = None) -> None:
        """Make this generation the final one."""
        self.is_last = True
        if reason and self.stop_reason is None:
            self.stop_reason = reason


@dataclass
class AlgorithmFinishedEvent:
    """Emitted once, when the run reaches FINISHED."""
    best_chromosome: Chromosome
    generation: int
    best_fitness: float


@dataclass
class EvolutionConfig:
    """Configuration for evolution run."""
    # Population parameters
    population_size: int = 4
    network_inputs_length: int = 25

    # Termination policy (any that is set can end the run)
    target_fitness: Optional[float] = None
    max_generations: Optional[int] = None
    early_stop_patience: Optional[int] = None
    early_stop_min_improvement: float = 0.001

    # Checkpointing
    checkpoint_every: int = 0
    checkpoint_dir: Optional[str] = None

    # Reproducibility
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.population_size < 1:
            raise ConfigurationError(f"population_size must be positive, got {self.population_size}")
        if self.network_inputs_length < 1:
            raise ConfigurationError(
                f"network_inputs_length must be positive, got {self.network_inputs_length}"
            )
        if self.max_generations is not None and self.max_generations < 1:
            raise ConfigurationError(f"max_generations must be positive, got {self.max_generations}")
        if self.early_stop_patience is not None and self.early_stop_patience < 1:
            raise ConfigurationError(
                f"early_stop_patience must be positive, got {self.early_stop_patience}"
            )
        if self.checkpoint_every < 0:
            raise ConfigurationError(f"checkpoint_every must not be negative, got {self.checkpoint_every}")

    @property
    def has_termination_policy(self) -> bool:
        return (
            self.target_fitness is not None
            or self.max_generations is not None
            or self.early_stop_patience is not None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EvolutionConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)


@dataclass
class EvolutionResult:
    """Results from an evolution run."""
    run_id: str
    best_chromosome: Chromosome
    best_fitness: float
    generations_completed: int
    history: EvolutionHistory
    runtime_seconds: float
    stop_reason: Optional[str] = None

    def summary(self) -> str:
        """Generate summary string."""
        lines = [
            f"Evolution Run: {self.run_id}",
            f"Generations: {self.generations_completed}",
            f"Best fitness: {self.best_fitness:.4f}",
            f"Best chromosome: {self.best_chromosome.id}",
            f"Best network: {self.best_chromosome.network!r}",
            f"Runtime: {self.runtime_seconds:.1f}s",
        ]
        if self.stop_reason:
            lines.append(f"Stopped: {self.stop_reason}")
        return '\n'.join(lines)


class GeneticAlgorithmManager:
    """
    Runs generations of a genetic algorithm against an external evaluator.

    Listeners are plain observers: they receive events and may mark a
    generation as the last one, but must not call back into the manager.
    """

    def __init__(
        self,
        fitness_evaluator: FitnessEvaluator,
        population_generator: Optional[PopulationGenerator] = None,
        config: Optional[EvolutionConfig] = None,
        initial_network_text: Optional[str] = None,
        run_id: Optional[str] = None,
    ):
        """
        Initialize the manager.

        Args:
            fitness_evaluator: Scores each population (required)
            population_generator: Breeds populations (SRM when None)
            config: Evolution configuration (defaults when None)
            initial_network_text: Serialized network seeding the first population
            run_id: Optional run identifier (auto-generated if not provided)
        """
        if fitness_evaluator is None:
            raise ConfigurationError("A fitness evaluator is required")

        self.config = config or EvolutionConfig()
        self.config.validate()

        self.fitness_evaluator = fitness_evaluator
        self.population_generator = population_generator or SRMPopulationGenerator(
            self.config.network_inputs_length,
            seed=self.config.seed,
        )
        self.initial_network_text = initial_network_text
        self.run_id = run_id or generate_run_id()

        self.state = AlgorithmState.NOT_STARTED
        self.generation = 0
        self.current_population: Optional[Population] = None
        self.best_chromosome: Optional[Chromosome] = None
        self.last_event: Optional[GenerationEvent] = None
        self.history = EvolutionHistory()

        self._generation_listeners: List[Callable[[GenerationEvent], None]] = []
        self._finished_listeners: List[Callable[[AlgorithmFinishedEvent], None]] = []
        self._started_at: Optional[float] = None

        if self.config.checkpoint_dir:
            self.checkpoint_dir = Path(self.config.checkpoint_dir)
        else:
            self.checkpoint_dir = None

    @property
    def population_size(self) -> int:
        return self.config.population_size

    @property
    def is_started(self) -> bool:
        return self.state != AlgorithmState.NOT_STARTED

    @property
    def is_finished(self) -> bool:
        return self.state == AlgorithmState.FINISHED

    def add_generation_listener(self, callback: Callable[[GenerationEvent], None]) -> None:
        self._generation_listeners.append(callback)

    def add_finished_listener(self, callback: Callable[[AlgorithmFinishedEvent], None]) -> None:
        self._finished_listeners.append(callback)

    def start(self) -> bool:
        """
        Create the first population.

        Returns:
            False if the algorithm was already started, True otherwise
        """
        if self.is_started:
            return False

        self._started_at = time.time()
        self.generation = 1
        self.current_population = self.population_generator.generate_first_population(
            self.population_size,
            self.initial_network_text,
        )
        self.state = AlgorithmState.RUNNING
        logger.info(
            "Run %s started with %d chromosomes%s",
            self.run_id, len(self.current_population),
            " from a seed network" if self.initial_network_text is not None else "",
        )
        return True

    def submit_fitness(self, fitness_values: Mapping[str, float]) -> GenerationEvent:
        """
        Complete the evaluation of the current population.

        Args:
            fitness_values: Chromosome id -> fitness (missing ids score 0)

        Returns:
            The GenerationEvent; `is_last` tells whether the run finished
        """
        if self.state != AlgorithmState.RUNNING:
            raise RuntimeError(f"Cannot submit fitness while {self.state.value}")

        population = self.current_population
        population.sort_by_fitness(fitness_values)

        best_fitness = fitness_of(population[0], fitness_values)
        sum_fitness = float(sum(fitness_values.values()))
        self.history.record_generation(self.generation, population, fitness_values)

        event = GenerationEvent(self.generation, best_fitness, sum_fitness)
        self._apply_termination_policy(event)
        for listener in self._generation_listeners:
            listener(event)
        self.last_event = event

        logger.info(
            "Generation %d: best=%.4f sum=%.4f%s",
            event.generation, event.best_fitness, event.sum_fitness,
            " (last)" if event.is_last else "",
        )

        if event.is_last:
            self._finish(event)
        else:
            if self._checkpoint_due():
                self.save_checkpoint()
            # Breeding errors leave the evaluated generation in place
            next_population = self.population_generator.generate_population(
                population,
                self.generation + 1,
            )
            self.generation += 1
            self.current_population = next_population

        return event

    def step(self) -> GenerationEvent:
        """Evaluate the current population with the configured evaluator."""
        if self.state != AlgorithmState.RUNNING:
            raise RuntimeError(f"Cannot step while {self.state.value}")
        fitness_values = self.fitness_evaluator.evaluate(self.current_population)
        return self.submit_fitness(fitness_values)

    def run(self) -> EvolutionResult:
        """
        Run generations until one is marked last.

        Requires a termination policy in the config or a generation listener
        that ends the run.
        """
        if not self.config.has_termination_policy and not self._generation_listeners:
            raise ConfigurationError(
                "run() needs target_fitness, max_generations, early_stop_patience "
                "or a generation listener that ends the run"
            )
        if not self.is_finished:
            self.start()
            while not self.is_finished:
                self.step()
        return self.result()

    def result(self) -> EvolutionResult:
        """The result of a finished run."""
        if not self.is_finished:
            raise RuntimeError("The algorithm has not finished")
        runtime = time.time() - self._started_at if self._started_at else 0.0
        if self.last_event is not None:
            best_fitness = self.last_event.best_fitness
        elif self.history.fitness_trajectory:
            best_fitness = self.history.fitness_trajectory[-1]
        else:
            best_fitness = 0.0
        return EvolutionResult(
            run_id=self.run_id,
            best_chromosome=self.best_chromosome,
            best_fitness=best_fitness,
            generations_completed=self.generation,
            history=self.history,
            runtime_seconds=runtime,
            stop_reason=self.last_event.stop_reason if self.last_event else None,
        )

    def _apply_termination_policy(self, event: GenerationEvent) -> None:
        config = self.config
        if config.target_fitness is not None and event.best_fitness >= config.target_fitness:
            event.set_the_last(f"Best fitness reached {config.target_fitness}")
        if config.max_generations is not None and event.generation >= config.max_generations:
            event.set_the_last(f"Reached {config.max_generations} generations")
        if config.early_stop_patience is not None and self.history.should_early_stop(
            patience=config.early_stop_patience,
            min_improvement=config.early_stop_min_improvement,
        ):
            event.set_the_last(
                f"No improvement > {config.early_stop_min_improvement} "
                f"in {config.early_stop_patience} generations"
            )

    def _finish(self, event: GenerationEvent) -> None:
        self.state = AlgorithmState.FINISHED
        self.best_chromosome = self.current_population[0]
        if self.checkpoint_dir is not None:
            self.save_checkpoint()

        finished = AlgorithmFinishedEvent(self.best_chromosome, event.generation, event.best_fitness)
        logger.info("Run %s finished: best chromosome %s", self.run_id, self.best_chromosome.id)
        for listener in self._finished_listeners:
            listener(finished)

    def _checkpoint_due(self) -> bool:
        every = self.config.checkpoint_every
        return self.checkpoint_dir is not None and every > 0 and self.generation % every == 0

    def save_checkpoint(self) -> Path:
        """Save current evolution state to checkpoint file."""
        if self.current_population is None:
            raise RuntimeError("Nothing to checkpoint before start()")
        checkpoint_dir = self.checkpoint_dir or Path('data/evolution')

        checkpoint = EvolutionCheckpoint(
            run_id=self.run_id,
            generation=self.generation,
            population=EvolutionCheckpoint.serialize_population(self.current_population),
            history=self.history.to_dict(),
            config=self.config.to_dict(),
            timestamp=datetime.now().isoformat(),
            state=self.state.value,
        )

        checkpoint_path = checkpoint_dir / f"{self.run_id}_gen{self.generation:03d}.json"
        checkpoint.save(checkpoint_path)
        logger.debug("Saved checkpoint %s", checkpoint_path)
        return checkpoint_path

    def load_checkpoint(self, checkpoint_path: Path) -> None:
        """
        Resume evolution from a checkpoint.

        The stored population is the one of the stored generation, sorted by
        its fitness. A running run continues by breeding the next generation
        from it; a finished run restores its best chromosome.

        Raises:
            RuntimeError: if this manager has already started a run
        """
        if self.is_started:
            raise RuntimeError(f"Cannot load a checkpoint while {self.state.value}")

        checkpoint = EvolutionCheckpoint.load(checkpoint_path)
        population = checkpoint.get_population()

        if checkpoint.state == AlgorithmState.FINISHED.value:
            generation = checkpoint.generation
            state = AlgorithmState.FINISHED
            self.best_chromosome = population[0]
        else:
            generation = checkpoint.generation + 1
            state = AlgorithmState.RUNNING
            population = self.population_generator.generate_population(population, generation)

        self.run_id = checkpoint.run_id
        self.generation = generation
        self.current_population = population
        self.history = EvolutionHistory.from_dict(checkpoint.history)
        self._started_at = time.time()
        self.state = state
        logger.info("Resumed run %s at generation %d", self.run_id, self.generation)
