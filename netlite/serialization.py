"""
NetLite Serialization

Save and load networks and autoencoders as JSON.

A network is stored as {"layers": [...]}, one entry per layer as produced
by Layer.to_dict(). Each entry carries a "type" tag ("dense",
"convolution", "pooling", "flatten") that decides which class rebuilds it.
"""

import json
import logging
import os

import numpy as np

from .autoencoder import AutoEncoder
from .errors import InvalidArgument
from .network import Network
from .nn import Dense, layer_from_dict
from .tensor import Tensor

logger = logging.getLogger(__name__)


class NetworkEncoder(json.JSONEncoder):
    """JSON encoder that also handles numpy values and tensors"""

    def default(self, obj):
        if isinstance(obj, Tensor):
            return obj.tolist()
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.generic):
            return obj.item()
        return super().default(obj)


# =========================
# DICT CONVERSION
# =========================

def network_to_dict(network):
    return {"layers": [layer.to_dict() for layer in network.layers]}


def network_from_dict(data):
    """Rebuild a network; layer shapes are re-checked by Network.add()"""
    if "layers" not in data:
        raise InvalidArgument("network data has no 'layers' entry")
    try:
        layers = [layer_from_dict(layer) for layer in data["layers"]]
    except KeyError as err:
        raise InvalidArgument(f"layer data is missing {err}") from err
    return Network(*layers)


def autoencoder_to_dict(autoencoder):
    return {
        "inputSize": autoencoder.input_size,
        "closed": autoencoder.closed,
        "encodingLayers": [layer.to_dict() for layer in autoencoder.encoding_layers],
        "decodingLayers": [layer.to_dict() for layer in autoencoder.decoding_layers],
    }


def autoencoder_from_dict(data, rng=None):
    """Rebuild an autoencoder; the halves must still mirror each other"""
    try:
        encoding = [Dense.from_dict(layer) for layer in data["encodingLayers"]]
        decoding = [Dense.from_dict(layer) for layer in data["decodingLayers"]]
        input_size = data["inputSize"]
    except KeyError as err:
        raise InvalidArgument(f"autoencoder data is missing {err}") from err
    return AutoEncoder.from_layers(input_size, encoding, decoding, closed=data.get("closed", False), rng=rng)


# =========================
# FILES
# =========================

def _write_json(data, path):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, cls=NetworkEncoder)


def _read_json(path):
    with open(path, 'r') as f:
        return json.load(f)


def save_network(network, path):
    """
    Save a network to a JSON file.

    Args:
        network: Network to save
        path: File to write (parent directories are created)
    """
    _write_json(network_to_dict(network), path)
    logger.info("Saved network with %d layers to %s", network.layer_count(), path)


def load_network(path):
    """Load a network saved with save_network()"""
    network = network_from_dict(_read_json(path))
    logger.info("Loaded network with %d layers from %s", network.layer_count(), path)
    return network


def save_autoencoder(autoencoder, path):
    """Save an autoencoder to a JSON file"""
    _write_json(autoencoder_to_dict(autoencoder), path)
    logger.info("Saved autoencoder with %d layers to %s", autoencoder.layer_count(), path)


def load_autoencoder(path, rng=None):
    """
    Load an autoencoder saved with save_autoencoder().

    Args:
        path: File to read
        rng: numpy Generator for training noise of the loaded autoencoder
    """
    autoencoder = autoencoder_from_dict(_read_json(path), rng=rng)
    logger.info("Loaded autoencoder with %d layers from %s", autoencoder.layer_count(), path)
    return autoencoder
