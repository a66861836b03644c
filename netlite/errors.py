"""
NetLite Errors

Every failure the library reports is one of these. They are raised where
the problem is found and travel, unwrapped, up to whoever called
Network.train / predict.
"""


class NetliteError(Exception):
    """Base class for all NetLite errors"""


class DimensionMismatch(NetliteError, ValueError):
    """Two operands do not have compatible dimensions"""


class ShapeMismatch(DimensionMismatch):
    """
    A layer or destination buffer has the wrong shape.

    Raised when composing layers and when an explicit destination tensor
    does not fit the result of a matrix operation.
    """


class OutOfBounds(NetliteError, IndexError):
    """An element index lies outside the tensor"""


class InvalidArgument(NetliteError, ValueError):
    """An argument value is not allowed (e.g. low >= high for a random fill)"""


class InvalidTopology(NetliteError):
    """The autoencoder structure does not allow this operation"""
