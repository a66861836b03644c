"""Tests for saving and loading networks as JSON."""
import json

import numpy as np
import pytest

from netlite import AutoEncoder, Convolution, Dense, Flatten, Network, Pooling
from netlite.errors import InvalidArgument, InvalidTopology, ShapeMismatch
from netlite.filters import FILTER_HORIZONTAL_EDGES, FILTER_VERTICAL_EDGES
from netlite.serialization import (
    NetworkEncoder,
    autoencoder_from_dict,
    load_autoencoder,
    load_network,
    network_from_dict,
    network_to_dict,
    save_autoencoder,
    save_network,
)


@pytest.fixture
def image_network(rng):
    """Create a network using every layer type."""
    return Network(
        Convolution(6, 6, 1, [FILTER_VERTICAL_EDGES, FILTER_HORIZONTAL_EDGES], "relu"),
        Pooling(6, 6, 2, 2, "avg"),
        Flatten(3, 3, 2),
        Dense(18, 4, "tanh", rng=rng),
        Dense(4, 1, "sigmoid", rng=rng),
    )


class TestNetworkPersistence:
    """Tests for save_network / load_network."""

    def test_save_creates_file(self, image_network, tmp_path):
        path = tmp_path / "models" / "image.json"
        save_network(image_network, str(path))
        assert path.exists()

    def test_file_is_plain_json(self, image_network, tmp_path):
        path = tmp_path / "image.json"
        save_network(image_network, str(path))
        with open(path) as f:
            data = json.load(f)
        assert [layer["type"] for layer in data["layers"]] == [
            "convolution", "pooling", "flatten", "dense", "dense",
        ]

    def test_round_trip_predicts_the_same(self, image_network, tmp_path, rng):
        path = str(tmp_path / "image.json")
        save_network(image_network, path)
        loaded = load_network(path)

        assert loaded.layer_count() == image_network.layer_count()
        image = rng.uniform(0, 1, size=(6, 6))
        assert loaded.predict(image).equals(image_network.predict(image))

    def test_round_trip_after_training(self, tmp_path, rng):
        network = Network(Dense(2, 3, "relu", rng=rng), Dense(3, 2, "softmax", rng=rng))
        for _ in range(20):
            network.train([0.5, 1.0], [0, 1], 0.3, 0.5)

        path = str(tmp_path / "trained.json")
        save_network(network, path)
        loaded = load_network(path)

        for original, restored in zip(network, loaded):
            assert restored.weights.equals(original.weights)
            assert restored.bias.equals(original.bias)

    def test_unknown_layer_type(self):
        with pytest.raises(InvalidArgument):
            network_from_dict({"layers": [{"type": "lstm"}]})

    def test_layer_missing_key(self, rng):
        data = network_to_dict(Network(Dense(2, 1, "relu", rng=rng)))
        del data["layers"][0]["weights"]
        with pytest.raises(InvalidArgument):
            network_from_dict(data)

    def test_missing_layers_entry(self):
        with pytest.raises(InvalidArgument):
            network_from_dict({})

    def test_shapes_rechecked_on_load(self, rng):
        data = network_to_dict(Network(Dense(2, 3, "relu", rng=rng)))
        data["layers"].append(Dense(4, 1, "relu", rng=rng).to_dict())
        with pytest.raises(ShapeMismatch):
            network_from_dict(data)


class TestAutoEncoderPersistence:
    """Tests for save_autoencoder / load_autoencoder."""

    def test_round_trip(self, tmp_path, rng):
        autoencoder = AutoEncoder(4, rng=rng).add_coding_layer(3, "sigmoid").add_coding_layer(2, "sigmoid").close()
        path = str(tmp_path / "autoencoder.json")
        save_autoencoder(autoencoder, path)
        loaded = load_autoencoder(path, rng=np.random.default_rng(0))

        assert loaded.layer_count() == 4
        assert loaded.closed
        sample = [0, 1, 1, 0]
        assert loaded.encode(sample).equals(autoencoder.encode(sample))
        assert loaded.reconstruct(sample).equals(autoencoder.reconstruct(sample))

    def test_decoding_activation_round_trip(self, tmp_path, rng):
        autoencoder = AutoEncoder(4, rng=rng).add_coding_layer(2, "sigmoid").add_decoding_layer("softmax")
        path = str(tmp_path / "softmax.json")
        save_autoencoder(autoencoder, path)
        loaded = load_autoencoder(path)

        assert loaded.closed
        assert [layer.activation.name for layer in loaded.layers] == ["sigmoid", "softmax"]
        with pytest.raises(InvalidTopology):
            loaded.add_decoding_layer("sigmoid")

    def test_missing_entry(self):
        with pytest.raises(InvalidArgument):
            autoencoder_from_dict({"inputSize": 4, "encodingLayers": []})

    def test_unmirrored_halves(self, rng):
        data = {
            "inputSize": 4,
            "encodingLayers": [Dense(4, 2, "sigmoid", rng=rng).to_dict()],
            "decodingLayers": [],
        }
        with pytest.raises(InvalidTopology):
            autoencoder_from_dict(data)


class TestNetworkEncoder:
    """Tests for the JSON encoder."""

    def test_numpy_values(self):
        text = json.dumps({"a": np.float32(0.5), "b": np.arange(3)}, cls=NetworkEncoder)
        assert json.loads(text) == {"a": 0.5, "b": [0, 1, 2]}
