"""Entry point computing B from nested current density data
"""
import logging

from .direct.convert import pack_components
from .direct.kernel import biot_savart_grid
from .exceptions import IOFailure
from .jmol import export_jmol, OUTPUT_PATH


logger = logging.getLogger(__name__)


def biot(jx, jy, jz, x_cor, y_cor, z_cor, export=True, si_units=False, n_threads=None):
    """Calculates the magnetic field, B, generated by a current density, J

    Parameters
    ----------
    jx, jy, jz : nested sequences or ndarray
        Values of Jx, Jy, Jz on a 3D grid. Each has to be of size MxNxK.
    x_cor, y_cor, z_cor : array_like
        Coordinates for the first, second and third dimension of the J grid.
    export : bool, optional
        Write the Jmol script ./parallel.spt, by default True.
    si_units : bool, optional
        Multiply by mu_0/(4 pi), by default False.
    n_threads : int, optional
        Number of numba threads, by default numba's configured count.

    Returns
    -------
    B : tuple of ndarray
        Flat Bx, By and Bz in row-major order. Each has to be reshaped to
        match the original size of J.

    Raises
    ------
    ShapeMismatch
        if any of the J grids is not rectangular or they differ in shape
    AxisShapeInconsistency
        if the J grid shape does not match the coordinate lengths
    IOFailure
        if the script cannot be written; the computed field is available
        as its ``result`` attribute
    """
    jx, jy, jz = pack_components(jx, jy, jz)
    bx, by, bz = biot_savart_grid(jx, jy, jz, x_cor, y_cor, z_cor,
                                  si_units=si_units, n_threads=n_threads)

    logger.debug('sums: x: %s, y: %s, z: %s', bx.sum(), by.sum(), bz.sum())
    logger.debug('shapes: x: %s, y: %s, z: %s', bx.shape, by.shape, bz.shape)
    result = (bx.ravel(), by.ravel(), bz.ravel())

    if export:
        logger.info('writing to disk')
        try:
            export_jmol(bx, by, bz, x_cor, y_cor, z_cor, path=OUTPUT_PATH)
        except IOFailure as e:
            e.result = result
            raise
    logger.info('done')
    return result
