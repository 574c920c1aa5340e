"""Labelled (xarray) interface to the grid Biot-Savart sum.

The routines accept (dask-chunked) xarray inputs in order to facilitate
memory-efficient and parallelized computation.
"""
