"""
test_model_persistence.py
~~~~~~~~~~~~~~~~~~~~~~~~~~

Unit tests for the plain-text weight format.
"""

import pytest
import os

import numpy as np

from feedforward.errors import PersistenceFormatError
from feedforward.network import Network
from feedforward.model_persistence import (
    dumps_weights,
    loads_weights,
    parse_weights,
    save_weights,
    load_weights
)


@pytest.fixture
def temp_weights_path(tmp_path):
    """Path for a weight file in a temporary directory."""
    weights_dir = tmp_path / "test_models"
    weights_dir.mkdir()
    return str(weights_dir / "weights.txt")


@pytest.fixture
def simple_network():
    """Create a simple 3-layer network for testing."""
    return Network([2, 3, 1], rng=np.random.default_rng(7))


@pytest.fixture
def trained_network(simple_network):
    """Create a simple network with some training applied."""
    samples = [([0, 0], [0]), ([0, 1], [1]), ([1, 0], [1]), ([1, 1], [0])]
    for _ in range(20):
        for x, t in samples:
            simple_network.train(x, t)
    return simple_network


def assert_same_weights(network_a, network_b):
    """Assert two networks hold exactly equal weights and biases."""
    for layer_a, layer_b in zip(network_a.layers, network_b.layers):
        for unit_a, unit_b in zip(layer_a.units, layer_b.units):
            assert np.array_equal(unit_a.weights, unit_b.weights)
            assert unit_a.bias == unit_b.bias


@pytest.mark.unit
class TestWeightFormat:
    """Test the text written for a network."""

    def test_dumps_layout(self, simple_network):
        """Test one line per unit and a separator after each layer."""
        lines = dumps_weights(simple_network).splitlines()

        assert len(lines) == 3 + 1 + 1 + 1
        assert lines[3] == '---'
        assert lines[5] == '---'

        for line in lines[:3]:
            tokens = line.split(' ')
            assert len(tokens) == 2 + 2
            assert tokens[2] == 'B'

        output_tokens = lines[4].split(' ')
        assert len(output_tokens) == 3 + 2
        assert output_tokens[3] == 'B'

    def test_dumps_uses_round_trip_decimals(self, simple_network):
        """Test that every number reparses to the exact stored float."""
        unit = simple_network.layers[0].units[0]
        tokens = dumps_weights(simple_network).splitlines()[0].split(' ')

        assert float(tokens[0]) == unit.weights[0]
        assert float(tokens[1]) == unit.weights[1]
        assert float(tokens[3]) == unit.bias

    def test_loads_hand_written_file(self):
        """Test that a hand-written file is applied in layer and unit order."""
        network = Network([2, 2, 1], rng=np.random.default_rng(0))
        text = (
            "0.5 -0.25 B 0.125\n"
            "1  2 B 3\n"
            "---\n"
            "\n"
            "-1.5 2.5 B -0.75\n"
            "---\n"
        )

        loads_weights(network, text)

        hidden, output = network.layers
        assert list(hidden.units[0].weights) == [0.5, -0.25]
        assert hidden.units[0].bias == 0.125
        assert list(hidden.units[1].weights) == [1.0, 2.0]
        assert hidden.units[1].bias == 3.0
        assert list(output.units[0].weights) == [-1.5, 2.5]
        assert output.units[0].bias == -0.75

    def test_parse_weights_groups_by_layer(self):
        """Test that parse_weights returns one list of records per layer."""
        layers = parse_weights("1 B 2\n3 B 4\n---\n5 6 B 7\n---\n")

        assert layers == [
            [([1.0], 2.0), ([3.0], 4.0)],
            [([5.0, 6.0], 7.0)]
        ]


@pytest.mark.unit
class TestRoundTrip:
    """Test save followed by load."""

    def test_save_creates_file(self, simple_network, temp_weights_path):
        """Test that saving a network creates the weight file."""
        save_weights(simple_network, temp_weights_path)
        assert os.path.exists(temp_weights_path)

    def test_round_trip_is_exact(self, trained_network, temp_weights_path):
        """Test that loaded weights equal the saved weights exactly."""
        save_weights(trained_network, temp_weights_path)

        fresh = Network([2, 3, 1], rng=np.random.default_rng(8))
        load_weights(fresh, temp_weights_path)

        assert_same_weights(trained_network, fresh)
        inputs = [0.25, 0.75]
        assert np.array_equal(trained_network.predict(inputs), fresh.predict(inputs))

    def test_round_trip_extreme_values(self, temp_weights_path):
        """Test values that need many digits or exponents to round-trip."""
        network = Network([2, 1], rng=np.random.default_rng(0))
        unit = network.layers[0].units[0]
        unit.weights[:] = [0.1 + 0.2, 1e-300]
        unit.bias = -123456789.123456789

        save_weights(network, temp_weights_path)
        fresh = Network([2, 1], rng=np.random.default_rng(1))
        load_weights(fresh, temp_weights_path)

        assert_same_weights(network, fresh)

    def test_network_save_and_load_methods(self, trained_network, temp_weights_path):
        """Test the Network.save and Network.load shortcuts."""
        trained_network.save(temp_weights_path)

        fresh = Network([2, 3, 1])
        fresh.load(temp_weights_path)

        assert_same_weights(trained_network, fresh)

    def test_save_overwrites_existing_file(self, simple_network, temp_weights_path):
        """Test that saving twice leaves only the latest weights."""
        save_weights(Network([2, 3, 1]), temp_weights_path)
        save_weights(simple_network, temp_weights_path)

        with open(temp_weights_path, encoding='utf-8') as f:
            assert f.read() == dumps_weights(simple_network)


@pytest.mark.unit
class TestLoadRejectsBadFiles:
    """Test that malformed or mismatched files are rejected cleanly."""

    def test_shape_mismatch_raises_without_mutation(self, temp_weights_path):
        """Test loading a [2, 3, 1] file into a [2, 4, 1] network."""
        save_weights(Network([2, 3, 1]), temp_weights_path)

        target = Network([2, 4, 1], rng=np.random.default_rng(3))
        untouched = Network([2, 4, 1], rng=np.random.default_rng(3))

        with pytest.raises(PersistenceFormatError) as exc_info:
            load_weights(target, temp_weights_path)

        assert "layer 0" in str(exc_info.value)
        assert_same_weights(target, untouched)

    def test_layer_count_mismatch(self, temp_weights_path):
        """Test loading a two-layer file into a three-layer network."""
        save_weights(Network([2, 3, 1]), temp_weights_path)

        with pytest.raises(PersistenceFormatError) as exc_info:
            load_weights(Network([2, 3, 3, 1]), temp_weights_path)
        assert "2 layer(s)" in str(exc_info.value)

    def test_weights_per_unit_mismatch(self, temp_weights_path):
        """Test loading a file whose units have the wrong input width."""
        save_weights(Network([2, 3, 1]), temp_weights_path)

        with pytest.raises(PersistenceFormatError) as exc_info:
            load_weights(Network([3, 3, 1]), temp_weights_path)
        assert "weight(s)" in str(exc_info.value)

    def test_missing_marker(self):
        """Test a data line with no bias marker."""
        network = Network([2, 1])

        with pytest.raises(PersistenceFormatError) as exc_info:
            loads_weights(network, "0.5 0.25 0.125\n---\n")

        assert exc_info.value.line_number == 1
        assert exc_info.value.line == "0.5 0.25 0.125"

    def test_non_numeric_token(self):
        """Test a data line containing something that is not a number."""
        network = Network([2, 1])

        with pytest.raises(PersistenceFormatError) as exc_info:
            loads_weights(network, "0.5 abc B 0.125\n---\n")

        assert "'abc'" in str(exc_info.value)
        assert exc_info.value.line_number == 1

    def test_non_numeric_bias(self):
        """Test a bias value that is not a number."""
        with pytest.raises(PersistenceFormatError):
            loads_weights(Network([2, 1]), "0.5 0.25 B x\n---\n")

    @pytest.mark.parametrize("line", [
        "0.5 0.25 B",
        "0.5 0.25 B 1 2",
        "0.5 B 0.25 B 1",
    ])
    def test_bad_bias_section(self, line):
        """Test lines without exactly one bias after a single marker."""
        with pytest.raises(PersistenceFormatError):
            loads_weights(Network([2, 1]), line + "\n---\n")

    def test_unterminated_block(self):
        """Test a file whose last layer has no separator line."""
        with pytest.raises(PersistenceFormatError) as exc_info:
            loads_weights(Network([2, 1]), "0.5 0.25 B 0.125\n")
        assert exc_info.value.line_number == 1

    def test_error_on_later_line_leaves_network_unchanged(self):
        """Test that a bad line late in the file causes no partial update."""
        network = Network([2, 2, 1], rng=np.random.default_rng(4))
        untouched = Network([2, 2, 1], rng=np.random.default_rng(4))
        text = "1 2 B 3\n4 5 B 6\n---\n7 oops B 9\n---\n"

        with pytest.raises(PersistenceFormatError) as exc_info:
            loads_weights(network, text)

        assert exc_info.value.line_number == 4
        assert_same_weights(network, untouched)

    def test_missing_file_raises_os_error(self, tmp_path):
        """Test that a nonexistent file is reported, not ignored."""
        with pytest.raises(FileNotFoundError):
            load_weights(Network([2, 1]), str(tmp_path / "missing.txt"))


@pytest.mark.integration
class TestPersistenceIntegration:
    """Integration tests for weight persistence."""

    def test_save_load_train_cycle(self, simple_network, temp_weights_path):
        """Test complete cycle: save, load, train, save again."""
        save_weights(simple_network, temp_weights_path)

        loaded = Network([2, 3, 1])
        load_weights(loaded, temp_weights_path)

        for _ in range(10):
            loaded.train([1, 0], [1])
            simple_network.train([1, 0], [1])

        save_weights(loaded, temp_weights_path)
        final = Network([2, 3, 1])
        load_weights(final, temp_weights_path)

        assert_same_weights(simple_network, final)

    def test_multiple_architectures(self, tmp_path):
        """Test round trips for several network shapes."""
        architectures = [[784, 30, 10], [3, 4, 2], [10, 20, 20, 10], [1, 1]]

        for index, sizes in enumerate(architectures):
            path = str(tmp_path / f"weights_{index}.txt")
            network = Network(sizes, rng=np.random.default_rng(index))
            save_weights(network, path)

            loaded = Network(sizes)
            load_weights(loaded, path)
            assert_same_weights(network, loaded)
