"""
NetLite Convolution Filters

Fixed 3x3 edge detectors for the Convolution layer. They are built once
and their buffers are read-only: layers share them, nobody writes to them.
"""

from .tensor import Tensor

# Emphasizes vertical edges (left-to-right changes)
FILTER_VERTICAL_EDGES = Tensor([
    [-1, 0, 1],
    [-1, 0, 1],
    [-1, 0, 1],
]).read_only()

# Emphasizes horizontal edges (top-to-bottom changes)
FILTER_HORIZONTAL_EDGES = Tensor([
    [-1, -1, -1],
    [0, 0, 0],
    [1, 1, 1],
]).read_only()
