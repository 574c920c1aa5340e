"""Packing of nested per-axis current density data into dense arrays
"""
from collections import Counter

import numpy as np

from ..exceptions import ShapeMismatch


def _path(*index):
    return ''.join('[{}]'.format(i) for i in index)


def _length(seq, name):
    try:
        return len(seq)
    except TypeError:
        raise ShapeMismatch('{} is not a sequence but {!r}'.format(name, seq)) from None


def _expected_length(lengths):
    """Most common length, the first one seen on ties"""
    return Counter(lengths).most_common(1)[0][0]


def _check_lengths(lengths, expected, level):
    for index, length in lengths:
        if length != expected:
            raise ShapeMismatch('row {} has length {}, expected {}'.format(
                _path(*index), length, expected))
    if expected == 0:
        raise ShapeMismatch('cannot infer grid shape, {} rows are empty'.format(level))


def _grid_shape(nested):
    """Return (M, N, K) of a nested sequence, checking it is rectangular

    The expected row lengths are the most common ones, so the error names
    the row that differs from its siblings.
    """
    m = _length(nested, 'input')
    if m == 0:
        raise ShapeMismatch('cannot infer grid shape from empty input')
    planes = [((i,), _length(plane, 'row ' + _path(i))) for i, plane in enumerate(nested)]
    n = _expected_length([length for _, length in planes])
    _check_lengths(planes, n, 'second level')
    rows = [((i, j), _length(row, 'row ' + _path(i, j)))
            for i, plane in enumerate(nested) for j, row in enumerate(plane)]
    k = _expected_length([length for _, length in rows])
    _check_lengths(rows, k, 'third level')
    return m, n, k


def pack(nested):
    """Convert a rectangular MxNxK nested sequence into a dense float array

    Parameters
    ----------
    nested : sequence of sequences of sequences of float, or 3D ndarray
        values on a 3D grid, the outer level indexes the first axis

    Returns
    -------
    arr : (M, N, K) ndarray of float64
        the same values in the same (row-major) order

    Raises
    ------
    ShapeMismatch
        if any sublist length differs from its siblings or the nesting
        is not exactly 3 levels deep
    """
    if isinstance(nested, np.ndarray):
        if nested.ndim != 3:
            raise ShapeMismatch('expected a 3D array, got shape {}'.format(nested.shape))
        return np.ascontiguousarray(nested, dtype=np.float64)
    shape = _grid_shape(nested)
    arr = np.empty(shape, dtype=np.float64)
    for i, plane in enumerate(nested):
        for j, row in enumerate(plane):
            try:
                row = np.asarray(row, dtype=np.float64)
            except ValueError as e:
                raise ShapeMismatch('row {} is not a flat sequence of numbers'.format(
                    _path(i, j))) from e
            if row.shape != (shape[2],):
                raise ShapeMismatch('row {} has shape {}, expected {}'.format(
                    _path(i, j), row.shape, (shape[2],)))
            arr[i, j, :] = row
    return arr


def pack_components(jx, jy, jz):
    """Pack all three current density components, which must share a shape"""
    packed = tuple(pack(j) for j in (jx, jy, jz))
    shapes = [j.shape for j in packed]
    if len(set(shapes)) != 1:
        raise ShapeMismatch('component shapes differ: Jx {}, Jy {}, Jz {}'.format(*shapes))
    return packed
