"""Vectorized Biot-Savart integrand of a generic current density

Coincident source and evaluation points contribute nothing.
"""
import numpy as np
from scipy.constants import mu_0, pi
from .utils import cross


_SI_FACTOR = mu_0 / (4*pi)


def biot_savart_integrand(r, r_j, j, spatial_dim, si_units=False):
    R = r - r_j
    numerator = cross(j, R, spatial_dim)
    if si_units:
        numerator = _SI_FACTOR * numerator
    denominator = (R**2).sum(dim=spatial_dim)**(3/2.)
    with np.errstate(divide='ignore', invalid='ignore'):
        integrand = numerator / denominator
    return integrand.where(denominator != 0, 0)
