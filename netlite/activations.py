"""
NetLite Activation Functions

Each activation is a pair of elementwise transforms working in place on a
Tensor: forward() squashes a layer's raw output, derivative() turns an
*activated* output back into the slope used during back-propagation.

Note the convention: derivative() expects the value that forward()
produced, not the raw input. For sigmoid that means x * (1 - x) instead of
sigmoid(x) * (1 - sigmoid(x)).

Activations are identified by a stable name ("relu", "sigmoid", "tanh",
"softmax") which is what gets written to disk.
"""

import numpy as np

from .errors import InvalidArgument


class Activation:
    """Base class for all activation functions"""

    name = None

    def forward(self, tensor):
        """Activate every value of the tensor in place and return it"""
        raise NotImplementedError

    def derivative(self, tensor):
        """Replace every activated value with its derivative, in place"""
        raise NotImplementedError

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class ReLU(Activation):
    """
    ReLU activation: max(0, x)

    derivative: 1 where the output is positive, 0 elsewhere
    """

    name = "relu"

    def forward(self, tensor):
        return tensor.apply(lambda x: np.maximum(x, 0))

    def derivative(self, tensor):
        return tensor.apply(lambda x: np.where(x > 0, 1.0, 0.0))


class Sigmoid(Activation):
    """
    Sigmoid activation: 1 / (1 + exp(-x))

    derivative: s * (1 - s) where s is the sigmoid output
    """

    name = "sigmoid"

    def forward(self, tensor):
        def sigmoid(x):
            # exp(-x) may overflow to inf for very negative x, giving 0 as it should
            with np.errstate(over="ignore"):
                return 1.0 / (1.0 + np.exp(-x.astype(np.float64)))

        return tensor.apply(sigmoid)

    def derivative(self, tensor):
        return tensor.apply(lambda x: x * (1 - x))


class Tanh(Activation):
    """
    Tanh activation: tanh(x)

    derivative: 1 - t^2 where t is the tanh output
    """

    name = "tanh"

    def forward(self, tensor):
        return tensor.apply(np.tanh)

    def derivative(self, tensor):
        return tensor.apply(lambda x: 1 - x ** 2)


class Softmax(Activation):
    """
    Softmax activation: exp(x_i) / sum(exp(x_j))

    The sum runs over the whole tensor, not one row.

    derivative: for a value s in column c,
        sum over all values v of (v * -s)  +  sum over values v in column c of (v * (1 - s))

    This collapses the softmax Jacobian into one sum per element; it is not
    the textbook Jacobian-vector product.
    """

    name = "softmax"

    def forward(self, tensor):
        def softmax(x):
            exp_x = np.exp(x.astype(np.float64))
            return exp_x / exp_x.sum()

        return tensor.apply(softmax)

    def derivative(self, tensor):
        def softmax_derivative(s):
            total = s.sum()
            column_sums = s.sum(axis=(0, 1), keepdims=True)
            return (1 - s) * column_sums - s * total

        return tensor.apply(softmax_derivative)


RELU = ReLU()
SIGMOID = Sigmoid()
TANH = Tanh()
SOFTMAX = Softmax()

ACTIVATIONS = {activation.name: activation for activation in (RELU, SIGMOID, TANH, SOFTMAX)}


def get_activation(name):
    """
    Look up an activation by name.

    Args:
        name: One of 'relu', 'sigmoid', 'tanh', 'softmax' (or an Activation,
            returned unchanged)
    """
    if isinstance(name, Activation):
        return name
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise InvalidArgument(
            f"unknown activation '{name}', expected one of {sorted(ACTIVATIONS)}"
        ) from None
