"""Numba kernels for the direct Biot-Savart sum over a current density grid

The field at an evaluation point r_p is

    B(r_p) = sum_q J(r_q) x (r_p - r_q) / |r_p - r_q|^3

where q runs over all grid nodes. Nodes coinciding exactly with the
evaluation point are left out of the sum.
"""
import logging

import numpy as np
import numba
from scipy.constants import mu_0, pi

from ..exceptions import AxisShapeInconsistency


logger = logging.getLogger(__name__)

_SI_FACTOR = mu_0 / (4*pi)


@numba.jit(nopython=True, nogil=True)
def point_field(px, py, pz, jx, jy, jz, x, y, z):
    """Sum the contributions of all grid nodes to the field at (px, py, pz)

    Nodes are visited x-index outermost, z-index innermost, so the result
    for a given point is reproducible bit for bit.
    """
    bx = 0.
    by = 0.
    bz = 0.
    for xi in range(x.shape[0]):
        rx = px - x[xi]
        for yi in range(y.shape[0]):
            ry = py - y[yi]
            for zi in range(z.shape[0]):
                rz = pz - z[zi]
                r3 = np.sqrt(rx*rx + ry*ry + rz*rz)**3.
                if r3 != 0.:
                    jx_val = jx[xi, yi, zi]
                    jy_val = jy[xi, yi, zi]
                    jz_val = jz[xi, yi, zi]
                    bx += (jy_val*rz - jz_val*ry) / r3
                    by += (jz_val*rx - jx_val*rz) / r3
                    bz += (jx_val*ry - jy_val*rx) / r3
    return bx, by, bz


def _field_at_points(points, jx, jy, jz, x, y, z, out):
    # row p of out belongs to point p only
    for p in numba.prange(points.shape[0]):
        bx, by, bz = point_field(points[p, 0], points[p, 1], points[p, 2],
                                 jx, jy, jz, x, y, z)
        out[p, 0] = bx
        out[p, 1] = by
        out[p, 2] = bz


# prange degrades to range without parallel=True
field_at_points_parallel = numba.jit(_field_at_points, nopython=True, nogil=True,
                                     parallel=True)
field_at_points_serial = numba.jit(_field_at_points, nopython=True, nogil=True)


def _as_axis(a, name):
    a = np.ascontiguousarray(a, dtype=np.float64)
    if a.ndim != 1:
        raise AxisShapeInconsistency('{} axis must be 1D, got shape {}'.format(name, a.shape))
    return a


def check_grid(jx, jy, jz, x, y, z):
    """Validate and convert current density components and axes

    Returns
    -------
    jx, jy, jz : (M, N, K) contiguous float64 ndarrays
    x, y, z : (M,), (N,), (K,) contiguous float64 ndarrays

    Raises
    ------
    AxisShapeInconsistency
        if the components differ in shape or do not match the axis lengths
    """
    x, y, z = (_as_axis(a, name) for a, name in zip((x, y, z), 'xyz'))
    jx, jy, jz = (np.ascontiguousarray(j, dtype=np.float64) for j in (jx, jy, jz))
    axes_shape = (x.shape[0], y.shape[0], z.shape[0])
    for name, j in zip(('Jx', 'Jy', 'Jz'), (jx, jy, jz)):
        if j.shape != axes_shape:
            raise AxisShapeInconsistency('{} has shape {}, axes give {}'.format(
                name, j.shape, axes_shape))
    return jx, jy, jz, x, y, z


def grid_points(x, y, z):
    """Return (M*N*K, 3) positions of the grid nodes in row-major order"""
    X, Y, Z = np.meshgrid(x, y, z, indexing='ij')
    return np.stack([X.ravel(), Y.ravel(), Z.ravel()], axis=-1)


class _num_threads:
    """Temporarily bound the numba worker pool"""

    def __init__(self, n_threads):
        self.n_threads = n_threads
        self.previous = None

    def __enter__(self):
        if self.n_threads is not None:
            self.previous = numba.get_num_threads()
            numba.set_num_threads(self.n_threads)
        return self

    def __exit__(self, *exc):
        if self.previous is not None:
            numba.set_num_threads(self.previous)
        return False


def biot_savart_points(points, jx, jy, jz, x, y, z, si_units=False, parallel=True):
    """Calculate the magnetic field at arbitrary positions from a current grid

    Parameters
    ----------
    points : (..., 3) array_like
        positions at which the field is evaluated
    jx, jy, jz : (M, N, K) array_like
        current density components on the grid
    x, y, z : array_like
        grid coordinates of the 3 dimensions of J
    si_units : bool, optional
        multiply by mu_0/(4 pi), by default the raw sum is returned
    parallel : bool, optional
        distribute the points over the numba thread pool, by default True.
        Both variants give identical results.

    Returns
    -------
    B : (..., 3) ndarray
        field vectors at ``points``
    """
    jx, jy, jz, x, y, z = check_grid(jx, jy, jz, x, y, z)
    points = np.asarray(points, dtype=np.float64)
    if points.shape[-1:] != (3,):
        raise ValueError('last dimension of points must have length 3, got shape {}'.format(
            points.shape))
    flat = np.ascontiguousarray(points.reshape(-1, 3))
    out = np.zeros_like(flat)
    kernel = field_at_points_parallel if parallel else field_at_points_serial
    kernel(flat, jx, jy, jz, x, y, z, out)
    if si_units:
        out *= _SI_FACTOR
    return out.reshape(points.shape)


def biot_savart_grid(jx, jy, jz, x, y, z, si_units=False, n_threads=None):
    """Calculate the magnetic field, B, generated by a current density, J

    The field is evaluated at every node of the grid J is given on.

    Parameters
    ----------
    jx, jy, jz : (M, N, K) array_like
        current density components on a 3D grid
    x, y, z : array_like
        coordinates along the first, second and third dimension of the grid
    si_units : bool, optional
        multiply by mu_0/(4 pi), by default False
    n_threads : int, optional
        number of numba threads to use, by default numba's configured count

    Returns
    -------
    bx, by, bz : (M, N, K) ndarray
        field components at the grid nodes

    Raises
    ------
    AxisShapeInconsistency
        if the J components and the axes do not agree in shape
    """
    jx, jy, jz, x, y, z = check_grid(jx, jy, jz, x, y, z)
    shape = jx.shape
    points = grid_points(x, y, z)
    out = np.zeros_like(points)
    logger.info('starting calculations on a %s grid', shape)
    with _num_threads(n_threads):
        field_at_points_parallel(points, jx, jy, jz, x, y, z, out)
    logger.info('calculations done')
    if si_units:
        out *= _SI_FACTOR
    return tuple(out[:, i].reshape(shape) for i in range(3))
