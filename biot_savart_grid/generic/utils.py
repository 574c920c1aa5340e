"""Helper functions
"""

import numpy as np
import xarray as xr


def check_spatial_dim(d, spatial_dim):
    if spatial_dim not in d.dims:
        raise ValueError('dimension {} not in {}'.format(spatial_dim, d.dims))
    if d.sizes[spatial_dim] != 3:
        raise ValueError('dimension {} has length {}, not 3'.format(
            spatial_dim, d.sizes[spatial_dim]))


def source_dims_of(j, spatial_dim, source_dims=None):
    """The 3 grid dimensions of current density j, in order"""
    if source_dims is None:
        source_dims = [d for d in j.dims if d != spatial_dim]
    source_dims = tuple(source_dims)
    if len(source_dims) != 3:
        raise ValueError('expected 3 grid dimensions besides {}, got {}'.format(
            spatial_dim, source_dims))
    return source_dims


def cross(a, b, spatial_dim, output_dtype=None):
    """xarray-compatible cross product

    Compatible with dask, parallelization uses a.dtype as output_dtype
    """
    for d in (a, b):
        check_spatial_dim(d, spatial_dim)

    if output_dtype is None:
        output_dtype = a.dtype
    c = xr.apply_ufunc(np.cross, a, b,
                       input_core_dims=[[spatial_dim], [spatial_dim]],
                       output_core_dims=[[spatial_dim]],
                       dask='parallelized', output_dtypes=[output_dtype]
                      )
    return c


def grid_positions(j, spatial_dim, source_dims=None):
    """Positions of the nodes of the grid j is defined on

    Parameters
    ----------
    j : xarray.DataArray
        current density with dimension spatial_dim and 3 grid dimensions
        whose coordinates give the node positions
    spatial_dim : str
        vector component dimension
    source_dims : sequence of str, optional
        grid dimensions in (x, y, z) order, by default the remaining dims of j

    Returns
    -------
    r_j : xarray.DataArray
        dims (*source_dims, spatial_dim)
    """
    source_dims = source_dims_of(j, spatial_dim, source_dims)
    axes = [np.asarray(j[d].values, dtype=np.float64) for d in source_dims]
    r_j = np.stack(np.meshgrid(*axes, indexing='ij'), axis=-1)
    coords = {d: j.coords[d] for d in source_dims + (spatial_dim,) if d in j.coords}
    return xr.DataArray(r_j, dims=source_dims + (spatial_dim,), coords=coords)
