"""
NetLite Linear Algebra

Matrix multiply and transpose, done frame by frame: frame f of the result
only depends on frame f of the operands.
"""

import numpy as np

from .errors import ShapeMismatch
from .tensor import Tensor


def _result_buffer(dest, frames, rows, cols):
    """Return dest if it has exactly the expected shape, else a new tensor"""
    if dest is None:
        return Tensor.zeros(frames, rows, cols)
    if dest.shape != (frames, rows, cols):
        raise ShapeMismatch(
            f"invalid dest dimensions: {dest.shape} != {(frames, rows, cols)}"
        )
    return dest


def matrix_multiply(a, b, dest=None):
    """
    Multiply the matrices of two tensors: result[f] = a[f] @ b[f]

    Args:
        a: Tensor of shape (frames, n, k)
        b: Tensor of shape (frames, k, m)
        dest: Optional tensor of shape (frames, n, m) to write into

    Returns:
        dest (or a new tensor) holding the product
    """
    if a.frames != b.frames:
        raise ShapeMismatch(f"tensor frame lengths do not match: {a.frames} != {b.frames}")
    if a.cols != b.rows:
        raise ShapeMismatch(f"columns of first must match rows of second: {a.cols} != {b.rows}")

    result = _result_buffer(dest, a.frames, a.rows, b.cols)
    # Compute into a temporary first so dest may alias a or b
    np.copyto(result.data, np.matmul(a.data, b.data))
    return result


def matrix_transpose(a, dest=None):
    """
    Transpose every frame: result[f, r, c] = a[f, c, r]

    Args:
        a: Tensor of shape (frames, n, m)
        dest: Optional tensor of shape (frames, m, n) to write into
    """
    result = _result_buffer(dest, a.frames, a.cols, a.rows)
    np.copyto(result.data, np.swapaxes(a.data, 1, 2).copy())
    return result
