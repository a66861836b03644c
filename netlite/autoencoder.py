"""
NetLite AutoEncoder

A network that learns to reproduce its own input through a narrower (or
wider) middle. The encoding half maps the input to a code, the decoding
half maps the code back.

    input (4) -> encode (3) -> encode (2) -> decode (3) -> decode (4)

Every add_coding_layer() call adds one stage to each half, so the two
halves always mirror each other.
"""

import copy
import logging

import numpy as np

from .activations import get_activation
from .errors import InvalidTopology
from .network import as_tensor
from .nn import Dense

logger = logging.getLogger(__name__)


class AutoEncoder:
    """
    Mirrored encoder / decoder built from Dense layers.

    If any coding layer is at least as wide as the input, the network could
    learn to copy its input straight through. To prevent that, training
    then zeroes random columns of every intermediate output (half as many
    picks as there are columns, with replacement). Inference never adds
    noise.

    Args:
        input_size: Number of values in each input
        rng: numpy Generator for weight initialization and training noise
    """

    def __init__(self, input_size, rng=None):
        self.input_size = input_size
        self.encoding_layers = []
        self.decoding_layers = []
        self.closed = False
        self.rng = rng if rng is not None else np.random.default_rng()

    # =========================
    # STRUCTURE
    # =========================

    def add_coding_layer(self, size, activation):
        """
        Add a coding stage of `size` values.

        Appends an encoding layer (previous size -> size) and puts the
        matching decoding layer (size -> previous size) at the front of the
        decoding half.
        """
        if self.closed:
            raise InvalidTopology("the auto encoder has been closed, no more layers can be added")
        if size < 1:
            raise InvalidTopology(f"coding layer size must be at least 1, is: {size}")

        previous = self.encoding_layers[-1].output_size if self.encoding_layers else self.input_size
        self.encoding_layers.append(Dense(previous, size, activation, rng=self.rng))
        self.decoding_layers.insert(0, Dense(size, previous, activation, rng=self.rng))

        logger.debug("Added coding layer %d -> %d", previous, size)
        return self

    def close(self):
        """Freeze the structure: add_coding_layer() fails from now on"""
        self.closed = True
        return self

    def add_decoding_layer(self, activation):
        """
        Close the autoencoder with its own output activation.

        The final decoding layer (the one producing input_size values) gets
        `activation`, e.g. a softmax output after sigmoid coding layers.
        Weights are kept; only the activation changes.
        """
        if self.closed:
            raise InvalidTopology("the auto encoder has already been closed with a decoding layer")
        if not self.decoding_layers:
            raise InvalidTopology("add a coding layer before the decoding layer")

        self.decoding_layers[-1].activation = get_activation(activation)
        self.closed = True

        logger.debug("Closed auto encoder with %s decoding layer", self.decoding_layers[-1].activation.name)
        return self

    @classmethod
    def from_layers(cls, input_size, encoding_layers, decoding_layers, closed=False, rng=None):
        """
        Build an autoencoder around existing Dense layers.

        The layers must chain from input_size back to input_size and the
        decoding half must mirror the encoding half.
        """
        encoding_layers = list(encoding_layers)
        decoding_layers = list(decoding_layers)
        if len(encoding_layers) != len(decoding_layers):
            raise InvalidTopology(
                f"encoding and decoding halves differ in length: {len(encoding_layers)} != {len(decoding_layers)}"
            )

        size = input_size
        for layer in encoding_layers:
            if not isinstance(layer, Dense) or layer.input_size != size:
                raise InvalidTopology(f"encoding layer {layer!r} does not accept {size} inputs")
            size = layer.output_size
        for encoder, decoder in zip(reversed(encoding_layers), decoding_layers):
            if not isinstance(decoder, Dense) or (decoder.input_size, decoder.output_size) != (
                encoder.output_size, encoder.input_size
            ):
                raise InvalidTopology(f"decoding layer {decoder!r} does not mirror {encoder!r}")

        autoencoder = cls(input_size, rng=rng)
        autoencoder.encoding_layers = encoding_layers
        autoencoder.decoding_layers = decoding_layers
        autoencoder.closed = closed
        return autoencoder

    @property
    def layers(self):
        """Full chain: encoding layers, then decoding layers"""
        return self.encoding_layers + self.decoding_layers

    def layer_count(self):
        return len(self.encoding_layers) + len(self.decoding_layers)

    def layer_at(self, index):
        """Layer at `index` of the full chain, or None when there is no such layer"""
        layers = self.layers
        if index < 0 or index >= len(layers):
            return None
        return layers[index]

    def is_sparse(self):
        """
        True when some coding layer is at least as wide as the input.

        Only coding layers count, not every layer: the last decoding layer
        is always input_size wide and would make any autoencoder sparse.
        """
        return any(layer.output_size >= self.input_size for layer in self.encoding_layers)

    def copy(self):
        """Deep copy: layers, noise generator and closed flag are all independent"""
        new = AutoEncoder(self.input_size, rng=copy.deepcopy(self.rng))
        new.encoding_layers = [layer.copy() for layer in self.encoding_layers]
        new.decoding_layers = [layer.copy() for layer in self.decoding_layers]
        new.closed = self.closed
        return new

    # =========================
    # FORWARD & BACKWARD
    # =========================

    def _check_ready(self):
        if not self.encoding_layers:
            raise InvalidTopology("the auto encoder has no coding layers")

    def _drop_columns(self, tensor):
        columns = self.rng.integers(0, tensor.cols, size=tensor.cols // 2)
        tensor.data[0, 0, columns] = 0.0

    def _feed_forward(self, inputs, layers, train):
        noisy = train and self.is_sparse()
        last = len(layers) - 1
        for index, layer in enumerate(layers):
            inputs = layer.feed_forward(inputs)
            if noisy and index < last:
                self._drop_columns(inputs)
        return inputs

    def encode(self, inputs):
        """Map an input to its code (a new Tensor)"""
        self._check_ready()
        return self._feed_forward(as_tensor(inputs), self.encoding_layers, train=False).copy()

    def decode(self, code):
        """Map a code back to the input space (a new Tensor)"""
        self._check_ready()
        return self._feed_forward(as_tensor(code), self.decoding_layers, train=False).copy()

    def reconstruct(self, inputs):
        """Encode then decode"""
        self._check_ready()
        return self._feed_forward(as_tensor(inputs), self.layers, train=False).copy()

    def features(self, inputs):
        """Outputs of every encoding layer for one input, first to last"""
        self._check_ready()
        self._feed_forward(as_tensor(inputs), self.encoding_layers, train=False)
        return [layer.outputs.copy() for layer in self.encoding_layers]

    def train(self, inputs, learning_rate, momentum):
        """
        Train on one input: the target is the input itself.

        Returns:
            Mean squared reconstruction error before the update
        """
        self._check_ready()
        layers = self.layers
        outputs = self._feed_forward(as_tensor(inputs), layers, train=True)

        delta = as_tensor(inputs).subtract_tensor(outputs)
        loss = float(np.mean(delta.data ** 2))
        for layer in reversed(layers):
            delta = layer.back_propagate(delta, learning_rate, momentum)
        return loss

    def __repr__(self):
        sizes = [self.input_size] + [layer.output_size for layer in self.layers]
        return f"AutoEncoder({' -> '.join(map(str, sizes))}, closed={self.closed})"
