"""Exceptions raised by the grid Biot-Savart routines
"""


class BiotSavartGridError(Exception):
    """Base class of all errors raised by this package"""


class ShapeMismatch(BiotSavartGridError, ValueError):
    """Nested input is not a strict rectangular MxNxK grid"""


class AxisShapeInconsistency(BiotSavartGridError, ValueError):
    """Current density shape does not match the coordinate axes"""


class IOFailure(BiotSavartGridError, OSError):
    """The visualization script could not be written

    ``result`` holds the already computed field when raised from
    :func:`biot_savart_grid.core.biot`, otherwise None.
    """

    def __init__(self, message, path=None, result=None):
        super().__init__(message)
        self.path = path
        self.result = result
