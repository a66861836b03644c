"""
NetLite Network

A linear stack of layers trained one example at a time.
"""

import logging

import numpy as np

from .errors import ShapeMismatch
from .tensor import Tensor

logger = logging.getLogger(__name__)


def as_tensor(values):
    """Wrap raw values in a new Tensor (tensors are copied too)"""
    if isinstance(values, Tensor):
        return values.copy()
    return Tensor(values)


class Network:
    """
    Container for stacking layers sequentially.

    Each layer's output shape must equal the next layer's input shape; this
    is checked when layers are added.

    Example:
        network = Network(
            Dense(2, 2, 'sigmoid'),
            Dense(2, 1, 'sigmoid'),
        )
        network.train([0, 1], [1], learning_rate=0.3, momentum=0.5)
        output = network.predict([0, 1])
    """

    def __init__(self, *layers):
        self.layers = []
        if layers:
            self.add(*layers)

    def add(self, *layers):
        """
        Append layers to the end of the network.

        The whole chain is checked before anything is appended, so a
        ShapeMismatch leaves the network exactly as it was.
        """
        previous = self.layers[-1] if self.layers else None
        for layer in layers:
            if previous is not None and previous.output_shape != layer.input_shape:
                raise ShapeMismatch(
                    "output shape of last layer does not match input shape of new layer: "
                    f"{tuple(previous.output_shape)} != {tuple(layer.input_shape)}"
                )
            previous = layer

        self.layers.extend(layers)
        logger.debug("Added %d layer(s), network now has %d", len(layers), len(self.layers))
        return self

    def layer_count(self):
        return len(self.layers)

    def layer_at(self, index):
        """Layer at `index`, or None when there is no such layer"""
        if index < 0 or index >= len(self.layers):
            return None
        return self.layers[index]

    def copy(self):
        """Deep copy: every layer is copied, nothing is shared"""
        return Network(*(layer.copy() for layer in self.layers))

    def feed_forward(self, inputs):
        """Push a tensor through every layer and return the last layer's output buffer"""
        for layer in self.layers:
            inputs = layer.feed_forward(inputs)
        return inputs

    def back_propagate(self, delta, learning_rate, momentum):
        """Push a delta through every layer, last to first"""
        for layer in reversed(self.layers):
            delta = layer.back_propagate(delta, learning_rate, momentum)
        return delta

    def predict(self, inputs):
        """
        Run the network on one input.

        Args:
            inputs: Tensor or nested sequence matching the first layer's input shape

        Returns:
            A new Tensor with the outputs (safe to modify)
        """
        return self.feed_forward(as_tensor(inputs)).copy()

    def train(self, inputs, targets, learning_rate, momentum):
        """
        Train on one example.

        Runs a forward pass, takes delta = targets - outputs, then runs the
        backward pass so every layer updates itself.

        Args:
            inputs: Tensor or nested sequence for the first layer
            targets: Expected outputs, same shape as the last layer's output
            learning_rate: Step size
            momentum: Fraction of each layer's previous weight change to re-apply

        Returns:
            Mean squared error of this example before the update
        """
        outputs = self.feed_forward(as_tensor(inputs))
        delta = as_tensor(targets).subtract_tensor(outputs)
        loss = float(np.mean(delta.data ** 2))
        self.back_propagate(delta, learning_rate, momentum)
        return loss

    def __len__(self):
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def __call__(self, inputs):
        """Make network callable: network(x) calls network.predict(x)"""
        return self.predict(inputs)

    def __repr__(self):
        layer_str = '\n  '.join(str(layer) for layer in self.layers)
        return f"Network(\n  {layer_str}\n)"
