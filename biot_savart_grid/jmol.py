"""Export of a magnetic field grid as a Jmol script of arrows

The script loads the central region geometry next to it, draws one red arrow
per sampled grid node and sets up the view. Arrow diameters encode the
relative field magnitude, arrow endpoints are the node position -/+ the field
vector.
"""
import logging
import math

import numpy as np

from .exceptions import IOFailure


logger = logging.getLogger(__name__)

OUTPUT_PATH = './parallel.spt'
STEP = 3
ARROW_SCALE = 0.1

_HEADER = (
    'load "file:$SCRIPT_PATH$/central_region.xyz" \n'
    'write "$SCRIPT_PATH$/central_region2.xyz" \n'
    'load "file:$SCRIPT_PATH$/central_region2.xyz" \n'
)
_FOOTER = (
    'set defaultdrawarrowscale {} \n'
    'rotate 90 \n'
    'background white \n'
)
_ARROW = 'draw arrow{} arrow color [1,0,0] diameter {} {{ {},{},{} }} {{ {},{},{} }}\n'


def format_float(value):
    """Shortest round-trip decimal without exponent, e.g. 1 or 0.0000001"""
    value = float(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    return np.format_float_positional(value, unique=True, trim='-')


def sample_indices(x, y, z, step=STEP):
    """Yield (ix, iy, iz) of every step-th node, in grid order"""
    for ix in range(0, len(x), step):
        for iy in range(0, len(y), step):
            for iz in range(0, len(z), step):
                yield ix, iy, iz


def normalized_magnitudes(bx, by, bz, samples):
    """Field magnitudes at samples rescaled to [0, 1]

    If all magnitudes are equal they are returned unchanged.
    """
    lengths = np.array([math.sqrt(bx[i]**2 + by[i]**2 + bz[i]**2) for i in samples],
                       dtype=np.float64)
    if lengths.size == 0 or np.all(np.isnan(lengths)):
        return lengths
    lmax = np.nanmax(lengths)
    lmin = np.nanmin(lengths)
    if lmax == lmin:
        logger.warning('max and min the same. max: %s, min: %s', lmax, lmin)
        return lengths
    return (lengths - lmin) / (lmax - lmin)


def arrow_lines(bx, by, bz, x, y, z, step=STEP):
    """Generate the draw directives of all sampled nodes"""
    samples = list(sample_indices(x, y, z, step))
    lengths = normalized_magnitudes(bx, by, bz, samples)
    for arrow_idx, (i, length) in enumerate(zip(samples, lengths)):
        r = (x[i[0]], y[i[1]], z[i[2]])
        b = (bx[i], by[i], bz[i])
        tail = [format_float(r_ - b_) for r_, b_ in zip(r, b)]
        head = [format_float(r_ + b_) for r_, b_ in zip(r, b)]
        yield _ARROW.format(arrow_idx, format_float(length), *(tail + head))


def export_jmol(bx, by, bz, x, y, z, path=OUTPUT_PATH, step=STEP):
    """Write a Jmol script drawing the field B as arrows

    Parameters
    ----------
    bx, by, bz : (M, N, K) array_like
        field components on the grid
    x, y, z : array_like
        grid coordinates of the 3 dimensions
    path : str or path-like, optional
        output script, by default ./parallel.spt
    step : int, optional
        sampling stride along each dimension, by default 3

    Raises
    ------
    IOFailure
        if the script cannot be created or written
    """
    bx, by, bz = (np.asarray(b, dtype=np.float64) for b in (bx, by, bz))
    x, y, z = (np.asarray(a, dtype=np.float64) for a in (x, y, z))
    lines = list(arrow_lines(bx, by, bz, x, y, z, step))
    logger.info('writing %d arrows to %s', len(lines), path)
    try:
        with open(path, 'w', newline='\n') as f:
            f.write(_HEADER)
            f.writelines(lines)
            f.write(_FOOTER.format(ARROW_SCALE))
    except OSError as e:
        raise IOFailure('unable to write {}: {}'.format(path, e), path=path) from e
