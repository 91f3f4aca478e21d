"""
Command line entry point.

Usage:
    python -m neurodrive train --dataset steering --population 20 --generations 50
    python -m neurodrive evaluate trained/ch___12_1.txt --dataset steering
    python -m neurodrive info trained/ch___12_1.txt
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .core.persistence import load_network, save_network, trained_network_filename
from .datasets.toy import DATASETS, get_dataset
from .errors import NeurodriveError
from .evolution.engine import EvolutionConfig, GeneticAlgorithmManager, GenerationEvent
from .evolution.fitness import DatasetFitnessEvaluator


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='neurodrive',
        description='Evolve neural network controllers with a genetic algorithm'
    )
    parser.add_argument(
        '-v', '--verbose', action='count', default=0,
        help='Increase log verbosity (-v info, -vv debug)'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    train = subparsers.add_parser('train', help='Evolve a controller on a toy dataset')
    train.add_argument(
        '--config', type=str, default=None,
        help='JSON file with EvolutionConfig fields (flags override it)'
    )
    train.add_argument(
        '--dataset', choices=sorted(DATASETS), default='steering',
        help='Dataset used as the fitness task (default: steering)'
    )
    train.add_argument(
        '--samples', type=int, default=200,
        help='Number of dataset samples (default: 200)'
    )
    train.add_argument(
        '--sensors', type=int, default=None,
        help='Sensor count for the steering dataset'
    )
    train.add_argument(
        '--population', type=int, default=None,
        help='Population size (default: 20)'
    )
    train.add_argument(
        '--generations', type=int, default=None,
        help='Maximum number of generations (default: 50)'
    )
    train.add_argument(
        '--target-fitness', type=float, default=None,
        help='Stop once the best fitness reaches this value'
    )
    train.add_argument(
        '--patience', type=int, default=None,
        help='Stop after this many generations without improvement'
    )
    train.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )
    train.add_argument(
        '--seed-network', type=str, default=None,
        help='Network file whose network seeds the first population'
    )
    train.add_argument(
        '--output', type=str, default='trained',
        help='Directory for the trained network file (default: trained)'
    )
    train.add_argument(
        '--feature-count', type=int, default=None,
        help='Header value stored on the first line of the network file'
    )
    train.add_argument(
        '--checkpoint-dir', type=str, default=None,
        help='Directory for JSON checkpoints'
    )
    train.add_argument(
        '--checkpoint-every', type=int, default=None,
        help='Checkpoint every N generations'
    )
    train.add_argument(
        '--resume', type=str, default=None,
        help='Path to checkpoint file to resume from'
    )
    train.add_argument(
        '--plot', type=str, default=None,
        help='Write a fitness history plot to this PNG file'
    )

    evaluate = subparsers.add_parser('evaluate', help='Score a trained network on a dataset')
    evaluate.add_argument('network', type=str, help='Network file')
    evaluate.add_argument('--dataset', choices=sorted(DATASETS), default='steering')
    evaluate.add_argument('--samples', type=int, default=200)
    evaluate.add_argument('--seed', type=int, default=None)

    info = subparsers.add_parser('info', help='Describe a network file')
    info.add_argument('network', type=str, help='Network file')

    return parser.parse_args(argv)


def load_dataset(name: str, n_samples: int, seed=None, n_inputs=None):
    params = {'n_samples': n_samples, 'seed': seed}
    if name == 'steering' and n_inputs is not None:
        params['n_sensors'] = n_inputs
    return get_dataset(name, **params)


def build_config(args, inputs_length: int) -> EvolutionConfig:
    data = {}
    if args.config:
        with open(args.config, 'r') as f:
            data = json.load(f)

    overrides = {
        'population_size': args.population,
        'max_generations': args.generations,
        'target_fitness': args.target_fitness,
        'early_stop_patience': args.patience,
        'seed': args.seed,
        'checkpoint_dir': args.checkpoint_dir,
        'checkpoint_every': args.checkpoint_every,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    data.setdefault('population_size', 20)
    data.setdefault('max_generations', 50)
    data['network_inputs_length'] = inputs_length

    config = EvolutionConfig.from_dict(data)
    config.validate()
    return config


def print_generation(event: GenerationEvent) -> None:
    print(
        f"   Gen {event.generation:3d} | "
        f"Best fitness: {event.best_fitness:.4f} | "
        f"Sum: {event.sum_fitness:.4f}"
    )


def cmd_train(args) -> int:
    initial_network_text = None
    n_inputs = args.sensors
    if args.seed_network:
        seeded = load_network(args.seed_network).network
        initial_network_text = seeded.serialize_to_string()
        n_inputs = seeded.input_count
        print(f"   Seeding from {args.seed_network}: {seeded!r}")

    X, y = load_dataset(args.dataset, args.samples, args.seed, n_inputs)
    evaluator = DatasetFitnessEvaluator(X, y)
    config = build_config(args, evaluator.inputs_length)

    print("=" * 60)
    print(f"   Dataset: {args.dataset.upper()} ({len(y)} samples, {evaluator.inputs_length} inputs)")
    print(f"   Population size: {config.population_size}")
    print(f"   Max generations: {config.max_generations}")
    print("=" * 60)

    manager = GeneticAlgorithmManager(
        evaluator,
        config=config,
        initial_network_text=initial_network_text,
    )
    manager.add_generation_listener(print_generation)

    if args.resume:
        print(f"   Resuming from: {args.resume}")
        manager.load_checkpoint(Path(args.resume))
        print(f"   Resumed at generation {manager.generation}")

    result = manager.run()
    print()
    print(result.summary())

    output_path = Path(args.output) / trained_network_filename(result.best_chromosome.id)
    save_network(output_path, result.best_chromosome.network, args.feature_count)
    print(f"\nSaved best network to {output_path}")

    if args.plot:
        from .visualization.plots import plot_fitness_history, save_figure
        fig = plot_fitness_history(result.history, title=f'{args.dataset} - {result.run_id}')
        save_figure(fig, args.plot)
        print(f"Saved fitness plot to {args.plot}")

    return 0


def cmd_evaluate(args) -> int:
    trained = load_network(args.network)
    X, y = load_dataset(args.dataset, args.samples, args.seed, trained.network.input_count)
    evaluator = DatasetFitnessEvaluator(X, y)
    accuracy = evaluator.accuracy(trained.network)
    print(f"{args.network}: accuracy {accuracy:.4f} on {args.dataset} ({len(y)} samples)")
    return 0


def cmd_info(args) -> int:
    trained = load_network(args.network)
    network = trained.network
    print(f"File:          {args.network}")
    if trained.feature_count is not None:
        print(f"Feature count: {trained.feature_count}")
    print(f"Layers:        {len(network)}")
    for i, (n_in, n_out) in enumerate(network.shape, start=1):
        print(f"   Layer {i}: {n_in} -> {n_out}")
    print(f"Parameters:    {network.parameter_count}")
    return 0


COMMANDS = {
    'train': cmd_train,
    'evaluate': cmd_evaluate,
    'info': cmd_info,
}


def main(argv=None) -> int:
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    try:
        return COMMANDS[args.command](args)
    except (NeurodriveError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
