"""
Trained network files.

A trained network file is the two-line network text, optionally preceded by
one header line holding an integer: the number of external feature values the
controller was trained with beside its sensors.

    3
    25,13,13,2
    0.12,-0.5,...

Writes are guarded by a file lock so a trainer and a tester can share a
directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union
from filelock import FileLock

from .network import NeuralNetwork


@dataclass
class TrainedNetwork:
    """A network loaded from disk together with its header value."""
    network: NeuralNetwork
    feature_count: Optional[int] = None  # None when the file has no header


def trained_network_filename(chromosome_id: str) -> str:
    """File name used for the winner of a training run."""
    return f"ch___{chromosome_id}.txt"


def _get_lock(path: Path) -> FileLock:
    """Get a file lock for atomic operations."""
    return FileLock(str(path) + '.lock')


def split_header(text: str) -> Tuple[Optional[int], str]:
    """
    Separate the optional feature-count header from the network payload.

    A header is present when the text has three or more non-empty lines. A
    header that is not an integer counts as 0.

    Returns:
        (feature_count or None, two-line network text)
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 3:
        return None, '\n'.join(lines)
    try:
        feature_count = int(lines[0].strip())
    except ValueError:
        feature_count = 0
    return feature_count, '\n'.join(lines[1:])


def save_network(
    path: Union[str, Path],
    network: NeuralNetwork,
    feature_count: Optional[int] = None,
) -> Path:
    """
    Write a network to a text file.

    Args:
        path: Destination file
        network: Network to serialize
        feature_count: Optional header value written before the network

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = []
    if feature_count is not None:
        lines.append(str(int(feature_count)))
    lines.append(network.serialize_to_string())

    with _get_lock(path):
        path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


def load_network(path: Union[str, Path]) -> TrainedNetwork:
    """
    Read a network file written by `save_network` (or by hand).

    Raises:
        NetworkFormatError: if the payload is not a valid network
    """
    path = Path(path)
    with _get_lock(path):
        text = path.read_text(encoding='utf-8')
    feature_count, payload = split_header(text)
    return TrainedNetwork(
        network=NeuralNetwork.construct_from_string(payload),
        feature_count=feature_count,
    )
