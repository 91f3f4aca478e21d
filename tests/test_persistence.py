"""
Tests for trained network files and the command line.

Run with: python -m pytest tests/test_persistence.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neurodrive.core.layers import DenseLayer
from neurodrive.core.network import NeuralNetwork
from neurodrive.core.persistence import (
    load_network,
    save_network,
    split_header,
    trained_network_filename,
)
from neurodrive.errors import NetworkFormatError
from neurodrive.__main__ import main


@pytest.fixture
def network():
    rng = np.random.default_rng(0)
    return NeuralNetwork([
        DenseLayer.random(5, 3, rng=rng),
        DenseLayer.random(3, 2, rng=rng),
    ])


class TestNetworkFiles:
    """Tests for saving and loading network files."""

    def test_filename(self):
        assert trained_network_filename('12_1') == 'ch___12_1.txt'

    def test_save_without_header(self, network, tmp_path):
        path = save_network(tmp_path / 'net.txt', network)

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0] == '5,3,3,2'

        loaded = load_network(path)
        assert loaded.feature_count is None
        assert loaded.network == network

    def test_save_with_header(self, network, tmp_path):
        path = save_network(tmp_path / 'nested' / 'net.txt', network, feature_count=3)

        lines = path.read_text().splitlines()
        assert len(lines) == 3
        assert lines[0] == '3'

        loaded = load_network(path)
        assert loaded.feature_count == 3
        assert loaded.network == network

    def test_overwrite(self, network, tmp_path):
        path = tmp_path / 'net.txt'
        save_network(path, network, feature_count=1)
        save_network(path, network.clone())
        assert load_network(path).feature_count is None

    def test_split_header(self):
        assert split_header("1,1,1,1\n1,2,3,4") == (None, "1,1,1,1\n1,2,3,4")
        assert split_header("7\n1,1,1,1\n1,2,3,4\n") == (7, "1,1,1,1\n1,2,3,4")
        assert split_header("\n1,1,1,1\n\n1,2,3,4\n") == (None, "1,1,1,1\n1,2,3,4")

    def test_non_integer_header_counts_as_zero(self, tmp_path):
        path = tmp_path / 'net.txt'
        path.write_text("sensors\n1,1,1,1\n1,2,3,4\n")

        loaded = load_network(path)

        assert loaded.feature_count == 0
        assert loaded.network.shape == [(1, 1), (1, 1)]

    def test_malformed_file(self, tmp_path):
        path = tmp_path / 'net.txt'
        path.write_text("1,1,1,1\n1,2\n")
        with pytest.raises(NetworkFormatError):
            load_network(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_network(tmp_path / 'absent.txt')


class TestCommandLine:
    """Tests for the neurodrive command."""

    def test_train_evaluate_info(self, tmp_path, capsys):
        output = tmp_path / 'trained'
        plot = tmp_path / 'fitness.png'

        code = main([
            'train',
            '--dataset', 'xor',
            '--samples', '40',
            '--population', '6',
            '--generations', '2',
            '--seed', '1',
            '--feature-count', '2',
            '--output', str(output),
            '--plot', str(plot),
        ])

        assert code == 0
        files = list(output.glob('ch___2_*.txt'))
        assert len(files) == 1
        assert plot.exists()
        assert 'Saved best network' in capsys.readouterr().out

        assert main(['evaluate', str(files[0]), '--dataset', 'xor', '--samples', '40']) == 0
        assert 'accuracy' in capsys.readouterr().out

        assert main(['info', str(files[0])]) == 0
        out = capsys.readouterr().out
        assert 'Feature count: 2' in out
        assert 'Layer 1: 2 -> 2' in out

    def test_train_from_seed_network(self, network, tmp_path):
        seed_path = save_network(tmp_path / 'seed.txt', network)
        output = tmp_path / 'trained'

        code = main([
            'train',
            '--dataset', 'steering',
            '--samples', '30',
            '--population', '4',
            '--generations', '1',
            '--seed-network', str(seed_path),
            '--output', str(output),
        ])

        assert code == 0
        saved = list(output.glob('ch___1_*.txt'))
        assert len(saved) == 1
        assert load_network(saved[0]).network.input_count == 5

    def test_train_with_config_file(self, tmp_path):
        config_path = tmp_path / 'config.json'
        config_path.write_text('{"population_size": 3, "max_generations": 1}')

        code = main([
            'train',
            '--dataset', 'linear',
            '--samples', '20',
            '--config', str(config_path),
            '--output', str(tmp_path / 'trained'),
        ])

        assert code == 0
        assert len(list((tmp_path / 'trained').glob('ch___1_*.txt'))) == 1

    def test_errors_return_nonzero(self, tmp_path, capsys):
        bad = tmp_path / 'bad.txt'
        bad.write_text("not a network\n")

        assert main(['info', str(bad)]) == 1
        assert 'error' in capsys.readouterr().err

        config_path = tmp_path / 'config.json'
        config_path.write_text('{"population": 3}')
        code = main(['train', '--config', str(config_path), '--output', str(tmp_path)])
        assert code == 1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
