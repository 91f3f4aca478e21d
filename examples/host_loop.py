#!/usr/bin/env python3
"""
Host-driven evolution - the manager is fed by an outside loop.

A game or simulator cannot hand the manager a blocking evaluator: it runs its
own frame loop and only knows each car's score once the car has crashed. This
script plays that role with a crude corridor "drive": every frame a car reads
its ray sensors, picks a side with its two outputs and survives while it keeps
steering towards the clearer side.

Usage:
    python examples/host_loop.py [--population N] [--generations N] [--seed N]
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neurodrive.core.persistence import save_network, trained_network_filename
from neurodrive.datasets.toy import steering
from neurodrive.evolution.engine import EvolutionConfig, GeneticAlgorithmManager
from neurodrive.evolution.fitness import CallableFitnessEvaluator
from neurodrive.visualization.plots import plot_fitness_history, save_figure

N_SENSORS = 5
MAX_FRAMES = 300


def parse_args():
    parser = argparse.ArgumentParser(description='Evolve controllers from a host frame loop')
    parser.add_argument('--population', type=int, default=20)
    parser.add_argument('--generations', type=int, default=30)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--output', type=str, default='trained')
    return parser.parse_args()


def drive(network, readings, labels) -> float:
    """Frames survived: the car crashes on its third wrong turn."""
    crashes = 0
    for frame, (x, label) in enumerate(zip(readings, labels)):
        if int(np.argmax(network.process(x))) != label:
            crashes += 1
            if crashes == 3:
                return float(frame)
    return float(len(labels))


def main():
    args = parse_args()
    readings, labels = steering(MAX_FRAMES, N_SENSORS, seed=args.seed)

    config = EvolutionConfig(
        population_size=args.population,
        network_inputs_length=N_SENSORS,
        seed=args.seed,
    )
    # Only used by step()/run(); the frame loop below submits its own scores
    manager = GeneticAlgorithmManager(
        CallableFitnessEvaluator(lambda c: drive(c.network, readings, labels)),
        config=config,
    )

    def stop_when_done(event):
        if event.generation >= args.generations or event.best_fitness >= MAX_FRAMES:
            event.set_the_last('host finished')

    manager.add_generation_listener(stop_when_done)
    manager.start()

    while not manager.is_finished:
        scores = {}
        for chromosome in manager.current_population:
            scores[chromosome.id] = drive(chromosome.network, readings, labels)
        event = manager.submit_fitness(scores)
        print(f"\r   Gen {event.generation:3d} | best {event.best_fitness:5.0f} frames", end='')

    print()
    result = manager.result()
    print(result.summary())

    path = Path(args.output) / trained_network_filename(result.best_chromosome.id)
    save_network(path, result.best_chromosome.network, feature_count=0)
    save_figure(plot_fitness_history(result.history, title='Frames survived'), Path(args.output) / 'history.png')
    print(f"Saved {path}")


if __name__ == '__main__':
    main()
