"""
NetLite Neural Network Layers

Simple, understandable implementations of the layer types a network is
built from. Every layer has:

- a fixed input shape and output shape (a LayerShape)
- feed_forward(inputs): compute the outputs, remembering the inputs
- back_propagate(delta, learning_rate, momentum): learn from the error
  and return the delta for the layer in front of it

Only Dense actually learns. Convolution, Pooling and Flatten are fixed
stages: going backwards they hand over the input they last saw, which keeps
the shapes lined up for the layer before them.
"""

import logging
from typing import NamedTuple

import numpy as np

from .activations import get_activation
from .errors import DimensionMismatch, InvalidArgument, ShapeMismatch
from .linalg import matrix_multiply, matrix_transpose
from .pooling import get_pooling
from .tensor import Tensor

logger = logging.getLogger(__name__)


class LayerShape(NamedTuple):
    """Rows, columns and frames of the data a layer accepts or produces"""

    rows: int
    cols: int
    frames: int


class Layer:
    """
    Base class for all layers.

    Holds the two buffers every layer owns: `inputs`, a copy of the last
    input (needed on the way back), and `outputs`, overwritten on every
    forward pass and returned from feed_forward().

    Args:
        input_shape: LayerShape of accepted inputs
        output_shape: LayerShape of produced outputs
    """

    layer_type = None

    def __init__(self, input_shape, output_shape):
        self.input_shape = input_shape
        self.output_shape = output_shape
        self.inputs = Tensor.zeros(input_shape.frames, input_shape.rows, input_shape.cols)
        self.outputs = Tensor.zeros(output_shape.frames, output_shape.rows, output_shape.cols)

    def feed_forward(self, inputs):
        """Compute and return the outputs for `inputs`"""
        raise NotImplementedError

    def back_propagate(self, delta, learning_rate, momentum):
        """Update any parameters from `delta` and return the delta for the previous layer"""
        raise NotImplementedError

    def copy(self):
        """Return an independent layer with the same shape and parameters"""
        raise NotImplementedError

    def to_dict(self):
        """Everything needed to rebuild the layer, as plain JSON types"""
        raise NotImplementedError

    @classmethod
    def from_dict(cls, data):
        raise NotImplementedError

    def parameters(self):
        """Return all trainable parameters in this layer"""
        return []

    def __call__(self, inputs):
        """Make layer callable: layer(x) calls layer.feed_forward(x)"""
        return self.feed_forward(inputs)


class Dense(Layer):
    """
    Fully connected layer: y = activation(x @ W + b)

    Weights and bias start uniformly random in [-1, 1]. Training uses plain
    gradient steps plus momentum: the previous weight change is scaled and
    added again on the next step.

    Args:
        input_size: Number of input values
        output_size: Number of output values
        activation: Activation name or instance
        weights: Optional initial weights, input_size x output_size
        bias: Optional initial bias, output_size values
        rng: numpy Generator used for the random initialization
    """

    layer_type = "dense"

    def __init__(self, input_size, output_size, activation, weights=None, bias=None, rng=None):
        super().__init__(LayerShape(1, input_size, 1), LayerShape(1, output_size, 1))
        self.activation = get_activation(activation)

        if rng is None:
            rng = np.random.default_rng()
        self.weights = self._initial(weights, (1, input_size, output_size), rng, "weights")
        self.bias = self._initial(bias, (1, 1, output_size), rng, "bias")

        # The last weight change, re-applied (scaled by momentum) next step
        self.prev_update = Tensor.zeros(1, input_size, output_size)

        logger.debug(
            "Dense layer created: input_size=%d, output_size=%d, activation=%s",
            input_size, output_size, self.activation.name,
        )

    @staticmethod
    def _initial(values, shape, rng, label):
        if values is None:
            return Tensor.zeros(*shape).set_random(-1.0, 1.0, rng)
        tensor = values.copy() if isinstance(values, Tensor) else Tensor(values)
        if tensor.shape != shape:
            raise ShapeMismatch(f"initial {label} shape {tensor.shape} does not match expected shape {shape}")
        return tensor

    @property
    def input_size(self):
        return self.input_shape.cols

    @property
    def output_size(self):
        return self.output_shape.cols

    def feed_forward(self, inputs):
        """
        Forward pass: y = activation(x @ W + b)

        Args:
            inputs: Tensor of shape (1, 1, input_size)

        Returns:
            The layer's output buffer, shape (1, 1, output_size)
        """
        if inputs.frames != 1:
            raise DimensionMismatch(f"input shape must have frame length of 1, is: {inputs.frames}")

        self.inputs.set_all(inputs)
        matrix_multiply(self.inputs, self.weights, self.outputs)
        self.outputs.add_tensor(self.bias)
        self.activation.forward(self.outputs)
        return self.outputs

    def back_propagate(self, delta, learning_rate, momentum):
        """
        Backward pass: nudge weights and bias towards a smaller error.

            gradient     = activation'(output) * delta * learning_rate
            weight_change = inputs.T @ gradient
            W           += weight_change + momentum * previous_change
            b           += gradient

        Args:
            delta: Error for this layer's outputs, shape (1, 1, output_size)
            learning_rate: Step size
            momentum: Fraction of the previous weight change to add again

        Returns:
            delta @ W.T (with the weights from before this update), the
            error handed to the previous layer
        """
        if delta.frames != 1:
            raise DimensionMismatch(f"delta shape must have frame length of 1, is: {delta.frames}")

        gradient = self.activation.derivative(self.outputs.copy())
        gradient.scale_tensor(delta).scale(learning_rate)

        transposed_weights = matrix_transpose(self.weights)
        weight_change = matrix_multiply(matrix_transpose(self.inputs), gradient)

        self.weights.add_tensor(weight_change)
        self.weights.add_tensor(self.prev_update.scale(momentum))
        self.prev_update.set_all(weight_change)
        self.bias.add_tensor(gradient)

        return matrix_multiply(delta, transposed_weights)

    def copy(self):
        layer = Dense(self.input_size, self.output_size, self.activation, weights=self.weights, bias=self.bias)
        layer.prev_update.set_all(self.prev_update)
        return layer

    def parameters(self):
        """Return trainable parameters"""
        return [self.weights, self.bias]

    def to_dict(self):
        return {
            "type": self.layer_type,
            "inputSize": self.input_size,
            "outputSize": self.output_size,
            "weights": self.weights.tolist()[0],
            "bias": self.bias.tolist()[0][0],
            "activation": self.activation.name,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data["inputSize"],
            data["outputSize"],
            data["activation"],
            weights=data["weights"],
            bias=data["bias"],
        )

    def __repr__(self):
        return (f"Dense(input_size={self.input_size}, output_size={self.output_size}, "
                f"activation='{self.activation.name}')")


class Convolution(Layer):
    """
    Convolution layer with fixed filters.

    Every filter slides over every input frame. Each output value is the sum
    of the filter times the input patch centred on that position, with zeros
    outside the edges (cross-correlation: the filter is not flipped). The
    output keeps the input's rows and columns and has one frame per
    (filter, input frame) pair: frame k * input_frames + f holds filter k
    applied to input frame f.

    The filters are never trained.

    Args:
        input_rows, input_cols, input_frames: Input shape
        filters: Single-frame tensors with an odd number of rows and columns
        activation: Activation name or instance, applied to the whole output
    """

    layer_type = "convolution"

    def __init__(self, input_rows, input_cols, input_frames, filters, activation):
        filters = [f if isinstance(f, Tensor) else Tensor(f) for f in filters]
        if not filters:
            raise InvalidArgument("a convolution layer needs at least one filter")
        for f in filters:
            if f.frames != 1 or f.rows % 2 == 0 or f.cols % 2 == 0:
                raise InvalidArgument(f"filters must be one frame with odd rows and cols, got {f.shape}")

        super().__init__(
            LayerShape(input_rows, input_cols, input_frames),
            LayerShape(input_rows, input_cols, input_frames * len(filters)),
        )
        self.filters = filters
        self.activation = get_activation(activation)

        logger.debug(
            "Convolution layer created: input=%s, filters=%d, activation=%s",
            self.input_shape, len(filters), self.activation.name,
        )

    @staticmethod
    def _cross_correlate(values, kernel):
        """Zero-padded cross-correlation of every frame of `values` with a 2D kernel"""
        _, rows, cols = values.shape
        pad_rows, pad_cols = kernel.shape[0] // 2, kernel.shape[1] // 2
        padded = np.pad(values, ((0, 0), (pad_rows, pad_rows), (pad_cols, pad_cols)))

        result = np.zeros_like(values)
        for i in range(kernel.shape[0]):
            for j in range(kernel.shape[1]):
                result += kernel[i, j] * padded[:, i:i + rows, j:j + cols]
        return result

    def feed_forward(self, inputs):
        self.inputs.set_all(inputs)
        frames = self.input_shape.frames
        for index, kernel in enumerate(self.filters):
            self.outputs.data[index * frames:(index + 1) * frames] = \
                self._cross_correlate(self.inputs.data, kernel.data[0])
        self.activation.forward(self.outputs)
        return self.outputs

    def back_propagate(self, delta, learning_rate, momentum):
        return self.inputs

    def copy(self):
        return Convolution(
            self.input_shape.rows,
            self.input_shape.cols,
            self.input_shape.frames,
            [f.copy() for f in self.filters],
            self.activation,
        )

    def to_dict(self):
        return {
            "type": self.layer_type,
            "inputRows": self.input_shape.rows,
            "inputCols": self.input_shape.cols,
            "inputFrames": self.input_shape.frames,
            "filters": [f.tolist()[0] for f in self.filters],
            "activation": self.activation.name,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data["inputRows"],
            data["inputCols"],
            data["inputFrames"],
            data["filters"],
            data["activation"],
        )

    def __repr__(self):
        return (f"Convolution(input_shape={tuple(self.input_shape)}, filters={len(self.filters)}, "
                f"activation='{self.activation.name}')")


class Pooling(Layer):
    """
    Pooling layer: shrink every frame by reducing pool_size x pool_size blocks.

    Output rows and columns are the input's divided by pool_size, rounded
    down; leftover rows / columns are ignored.

    Args:
        input_rows, input_cols, input_frames: Input shape
        pool_size: Side length of each block
        pooling: 'max' or 'avg' (or a PoolingMethod)
    """

    layer_type = "pooling"

    def __init__(self, input_rows, input_cols, input_frames, pool_size, pooling="max"):
        if pool_size < 1:
            raise InvalidArgument(f"pool size must be at least 1, is: {pool_size}")

        super().__init__(
            LayerShape(input_rows, input_cols, input_frames),
            LayerShape(input_rows // pool_size, input_cols // pool_size, input_frames),
        )
        self.pool_size = pool_size
        self.pooling = get_pooling(pooling)

    def feed_forward(self, inputs):
        self.inputs.set_all(inputs)
        np.copyto(self.outputs.data, self.pooling.pool(self.inputs.data, self.pool_size))
        return self.outputs

    def back_propagate(self, delta, learning_rate, momentum):
        return self.inputs

    def copy(self):
        return Pooling(
            self.input_shape.rows,
            self.input_shape.cols,
            self.input_shape.frames,
            self.pool_size,
            self.pooling,
        )

    def to_dict(self):
        return {
            "type": self.layer_type,
            "inputRows": self.input_shape.rows,
            "inputCols": self.input_shape.cols,
            "inputFrames": self.input_shape.frames,
            "poolSize": self.pool_size,
            "pooling": self.pooling.name,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data["inputRows"],
            data["inputCols"],
            data["inputFrames"],
            data["poolSize"],
            data["pooling"],
        )

    def __repr__(self):
        return (f"Pooling(input_shape={tuple(self.input_shape)}, pool_size={self.pool_size}, "
                f"pooling='{self.pooling.name}')")


class Flatten(Layer):
    """
    Flatten layer: (frames, rows, cols) -> one row of frames * rows * cols values.

    Values are laid out frame by frame, then row by row, then column by
    column, which is what a Dense layer after it expects.
    """

    layer_type = "flatten"

    def __init__(self, input_rows, input_cols, input_frames):
        super().__init__(
            LayerShape(input_rows, input_cols, input_frames),
            LayerShape(1, input_rows * input_cols * input_frames, 1),
        )

    def feed_forward(self, inputs):
        self.inputs.set_all(inputs)
        self.outputs.data[0, 0, :] = self.inputs.data.reshape(-1)
        return self.outputs

    def back_propagate(self, delta, learning_rate, momentum):
        # Hands back the original-shape input, undoing the flatten
        return self.inputs

    def copy(self):
        return Flatten(self.input_shape.rows, self.input_shape.cols, self.input_shape.frames)

    def to_dict(self):
        return {
            "type": self.layer_type,
            "inputRows": self.input_shape.rows,
            "inputCols": self.input_shape.cols,
            "inputFrames": self.input_shape.frames,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data["inputRows"], data["inputCols"], data["inputFrames"])

    def __repr__(self):
        return f"Flatten(input_shape={tuple(self.input_shape)})"


# =========================
# LAYER LOOKUP
# =========================

LAYER_TYPES = {layer.layer_type: layer for layer in (Dense, Convolution, Pooling, Flatten)}


def layer_for_type(layer_type):
    """Map a stable type tag ('dense', 'convolution', 'pooling', 'flatten') to its class"""
    try:
        return LAYER_TYPES[layer_type]
    except KeyError:
        raise InvalidArgument(f"invalid layer type: {layer_type}") from None


def layer_from_dict(data):
    """Rebuild a layer from the output of its to_dict()"""
    return layer_for_type(data.get("type")).from_dict(data)
