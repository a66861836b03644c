"""
NetLite Pooling Methods

A pooling method reduces a square block of values to one number.
Identified on disk by "max" or "avg".
"""

import numpy as np

from .errors import InvalidArgument


class PoolingMethod:
    """
    A named block reduction.

    Args:
        name: Stable identifier ('max' or 'avg')
        reduce: numpy reduction called as reduce(blocks, axis=(2, 4))
    """

    def __init__(self, name, reduce):
        self.name = name
        self.reduce = reduce

    def pool(self, values, pool_size):
        """
        Pool every frame of a (frames, rows, cols) array.

        Rows and columns that do not fill a whole block are dropped, so the
        result is (frames, rows // pool_size, cols // pool_size).
        """
        frames, rows, cols = values.shape
        out_rows, out_cols = rows // pool_size, cols // pool_size
        blocks = values[:, :out_rows * pool_size, :out_cols * pool_size].reshape(
            frames, out_rows, pool_size, out_cols, pool_size
        )
        return self.reduce(blocks, axis=(2, 4))

    def __repr__(self):
        return f"PoolingMethod('{self.name}')"


MAX = PoolingMethod("max", np.max)
AVG = PoolingMethod("avg", np.mean)

POOLING_METHODS = {MAX.name: MAX, AVG.name: AVG}


def get_pooling(name):
    """Look up a pooling method by name ('max' or 'avg')"""
    if isinstance(name, PoolingMethod):
        return name
    try:
        return POOLING_METHODS[name]
    except KeyError:
        raise InvalidArgument(
            f"unknown pooling method '{name}', expected one of {sorted(POOLING_METHODS)}"
        ) from None
