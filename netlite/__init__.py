"""
NetLite - A minimal neural network library for learning
Built from scratch to understand how layers really feed forward and learn
"""

from .tensor import Tensor
from .linalg import matrix_multiply, matrix_transpose
from .errors import (
    NetliteError,
    DimensionMismatch,
    ShapeMismatch,
    OutOfBounds,
    InvalidArgument,
    InvalidTopology,
)
from .nn import LayerShape, Layer, Dense, Convolution, Pooling, Flatten
from .network import Network
from .autoencoder import AutoEncoder
from . import activations
from . import pooling
from . import filters
from . import serialization

__version__ = "0.1.0"
