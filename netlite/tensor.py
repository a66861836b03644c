"""
NetLite Tensor - a fixed-size 3D grid of numbers

Every value in the library lives in one of these: layer inputs and outputs,
weights, biases and the deltas handed backwards during training.

A tensor is indexed as (frame, row, col). Think of it as a stack of
matrices: a dense layer only ever uses one frame, a convolution layer
stacks one feature map per frame.

The numbers are kept in a numpy float32 array so the math stays fast, but
layers only talk to it through the small bounds-checked API below.
"""

import numpy as np

from .errors import DimensionMismatch, InvalidArgument, OutOfBounds


class Tensor:
    """
    A (frames, rows, cols) grid of 32-bit floats.

    The dimensions are fixed when the tensor is created. All arithmetic
    happens in place and returns the tensor itself, so calls can be chained:

        t = Tensor.zeros(1, 2, 2).add(1).scale(3)

    Args:
        values: Nested sequence (1D, 2D or 3D) or numpy array of numbers.
            1D values become one frame with one row, 2D values become one
            frame. Empty input gives a single zero.
    """

    def __init__(self, values):
        try:
            data = np.array(values, dtype=np.float32)
        except ValueError as err:
            raise InvalidArgument(f"values must form a regular grid: {err}") from err

        if data.size == 0:
            data = np.zeros((1, 1, 1), dtype=np.float32)
        elif data.ndim == 0:
            data = data.reshape(1, 1, 1)
        elif data.ndim == 1:
            data = data.reshape(1, 1, -1)
        elif data.ndim == 2:
            data = data.reshape(1, *data.shape)
        elif data.ndim != 3:
            raise InvalidArgument(f"tensors have at most 3 dimensions, got {data.ndim}")

        self.data = data

    # =========================
    # FACTORIES
    # =========================

    @staticmethod
    def zeros(frames, rows, cols):
        """Create a tensor of zeros"""
        if frames < 0 or rows < 0 or cols < 0:
            raise InvalidArgument(f"dimensions must not be negative: ({frames}, {rows}, {cols})")
        return Tensor._wrap(np.zeros((frames, rows, cols), dtype=np.float32))

    @staticmethod
    def from_values(values):
        """Create a tensor holding a copy of the given values"""
        return Tensor(values)

    def copy(self):
        """Deep copy: the new tensor shares no memory with this one"""
        return Tensor._wrap(self.data.copy())

    @staticmethod
    def _wrap(array):
        # Takes ownership of an existing 3D float32 array without copying
        tensor = Tensor.__new__(Tensor)
        tensor.data = array
        return tensor

    # =========================
    # SHAPE
    # =========================

    @property
    def frames(self):
        return self.data.shape[0]

    @property
    def rows(self):
        return self.data.shape[1]

    @property
    def cols(self):
        return self.data.shape[2]

    @property
    def shape(self):
        """(frames, rows, cols)"""
        return self.data.shape

    def _check_index(self, frame, row, col):
        frames, rows, cols = self.data.shape
        if not (0 <= frame < frames and 0 <= row < rows and 0 <= col < cols):
            raise OutOfBounds(f"dimensions out of bounds: ({frame}, {row}, {col})")

    def _check_writable(self):
        if not self.data.flags.writeable:
            raise InvalidArgument("tensor is read-only")

    def _check_same_shape(self, other):
        if self.data.shape != other.data.shape:
            raise DimensionMismatch(
                f"dimensions must match: {self.data.shape} != {other.data.shape}"
            )

    # =========================
    # ELEMENT ACCESS
    # =========================

    def get(self, frame, row, col):
        """Read one value. Raises OutOfBounds outside the grid."""
        self._check_index(frame, row, col)
        return float(self.data[frame, row, col])

    def set(self, frame, row, col, value):
        """Write one value. Raises OutOfBounds outside the grid."""
        self._check_index(frame, row, col)
        self._check_writable()
        self.data[frame, row, col] = value
        return self

    def set_all(self, other):
        """Copy every value of `other` into this tensor (shapes must match)"""
        self._check_writable()
        self._check_same_shape(other)
        np.copyto(self.data, other.data)
        return self

    def set_random(self, low, high, rng=None):
        """
        Fill with uniform random values in [low, high).

        Args:
            low: Lower bound
            high: Upper bound, must be greater than low
            rng: numpy Generator to draw from (default: a fresh unseeded one)
        """
        if low >= high:
            raise InvalidArgument(f"minimum must be less than maximum: {low} >= {high}")
        self._check_writable()
        if rng is None:
            rng = np.random.default_rng()
        self.data[...] = rng.uniform(low, high, size=self.data.shape)
        return self

    def frame(self, index):
        """Return a copy of one frame as a single-frame tensor"""
        if not 0 <= index < self.frames:
            raise OutOfBounds(f"frame out of bounds: {index}")
        return Tensor._wrap(self.data[index:index + 1].copy())

    # =========================
    # ELEMENTWISE OPERATIONS
    # =========================

    def apply_function(self, function):
        """
        Replace every value with function(value, frame, row, col).

        Values are visited frame by frame, then row by row, then column by
        column. This is the general (slow) form; apply() is the vectorized
        one used internally.
        """
        self._check_writable()
        for frame, row, col in np.ndindex(*self.data.shape):
            self.data[frame, row, col] = function(float(self.data[frame, row, col]), frame, row, col)
        return self

    def apply(self, function):
        """Replace the whole grid with function(array), computed in one go"""
        self._check_writable()
        self.data[...] = function(self.data)
        return self

    def add(self, value):
        return self.apply(lambda x: x + value)

    def subtract(self, value):
        return self.apply(lambda x: x - value)

    def scale(self, value):
        return self.apply(lambda x: x * value)

    def add_tensor(self, other):
        self._check_same_shape(other)
        self._check_writable()
        self.data += other.data
        return self

    def subtract_tensor(self, other):
        self._check_same_shape(other)
        self._check_writable()
        self.data -= other.data
        return self

    def scale_tensor(self, other):
        """Elementwise (Hadamard) product with another tensor"""
        self._check_same_shape(other)
        self._check_writable()
        self.data *= other.data
        return self

    # =========================
    # REDUCTION & COMPARISON
    # =========================

    def sum(self):
        """Sum of every value"""
        return float(self.data.sum())

    def equals(self, other):
        """True when both tensors have the same dimensions and values"""
        if not isinstance(other, Tensor):
            return False
        return self.data.shape == other.data.shape and np.array_equal(self.data, other.data)

    def __eq__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    # =========================
    # UTILITY METHODS
    # =========================

    def read_only(self):
        """
        Lock the buffer against writes (used for shared constants).

        Every mutator then raises InvalidArgument.
        """
        self.data.setflags(write=False)
        return self

    def tolist(self):
        """Nested (frames, rows, cols) lists of Python floats"""
        return self.data.tolist()

    def numpy(self):
        """Get a copy of the values as a numpy array"""
        return self.data.copy()

    def __repr__(self):
        return f"Tensor(frames={self.frames}, rows={self.rows}, cols={self.cols})"

    def __str__(self):
        lines = []
        for frame in self.data:
            for row in frame:
                lines.append(" ".join(f"{value:.4f}" for value in row))
            lines.append("")
        return "\n".join(lines) + "\n"
