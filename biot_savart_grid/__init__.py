"""Magnetic field of a current density grid by direct Biot-Savart summation.

The field is evaluated at every node of a rectilinear 3D grid by summing the
contributions of all other nodes, optionally exporting a Jmol script of the
result.
"""
from .core import biot
from .exceptions import (BiotSavartGridError, ShapeMismatch,
                         AxisShapeInconsistency, IOFailure)
