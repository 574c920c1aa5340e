"""Biot-Savart sum over a current density grid given as an xarray.DataArray

:func:`biot_savart_direct` runs the ordered numba sum on every (dask) chunk
of evaluation positions, :func:`biot_savart_volume_sum` is a fully
vectorized xarray version whose summation order is left to numpy.
"""
import numpy as np
import xarray as xr

from ..direct.kernel import biot_savart_points, check_grid
from .integrand import biot_savart_integrand as bsintegrand
from .utils import check_spatial_dim, grid_positions, source_dims_of


def _overlapping_dims(r, source_dims):
    common = set(r.dims) & set(source_dims)
    if common:
        raise ValueError('evaluation positions share dimensions {} with the source grid, '
                         'rename them'.format(sorted(common)))


def biot_savart_volume_sum(r, j, spatial_dim, source_dims=None, si_units=False):
    """Vectorized field at positions r from current density j

    Broadcasts all evaluation positions against all grid nodes,
    so memory scales with their product.
    """
    check_spatial_dim(j, spatial_dim)
    source_dims = source_dims_of(j, spatial_dim, source_dims)
    _overlapping_dims(r, source_dims)
    r_j = grid_positions(j, spatial_dim, source_dims)
    integrand = bsintegrand(r, r_j, j, spatial_dim, si_units=si_units)
    return integrand.sum(dim=list(source_dims))


def _direct_sum(points, grid, si_units):
    # each chunk of points is handled by one dask task, serially
    return biot_savart_points(points, *grid, si_units=si_units, parallel=False)


def biot_savart_direct(r, j, spatial_dim, source_dims=None, si_units=False):
    """Field at positions r from current density j by ordered direct summation

    Parameters
    ----------
    r : xarray.DataArray
        evaluation positions with dimension spatial_dim (in x, y, z order),
        may be dask-chunked along any other dimension
    j : xarray.DataArray
        current density with dimension spatial_dim and 3 grid dimensions
        whose coordinates give the node positions
    spatial_dim : str
        vector component dimension
    source_dims : sequence of str, optional
        grid dimensions in (x, y, z) order, by default the remaining dims of j
    si_units : bool, optional
        multiply by mu_0/(4 pi), by default False

    Returns
    -------
    B : xarray.DataArray
        same dims as r, lazy if r is dask-backed. At grid nodes the values
        are identical to :func:`biot_savart_grid.direct.kernel.biot_savart_grid`.
    """
    for d in (r, j):
        check_spatial_dim(d, spatial_dim)
    source_dims = source_dims_of(j, spatial_dim, source_dims)
    j = j.transpose(*((spatial_dim,) + source_dims))
    values = np.asarray(j.values, dtype=np.float64)
    grid = check_grid(values[0], values[1], values[2],
                      *(j[d].values for d in source_dims))
    B = xr.apply_ufunc(_direct_sum, r,
                       input_core_dims=[[spatial_dim]],
                       output_core_dims=[[spatial_dim]],
                       dask='parallelized', output_dtypes=[np.float64],
                       kwargs=dict(grid=grid, si_units=si_units))
    return B
