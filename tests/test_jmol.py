from biot_savart_grid.jmol import export_jmol, format_float, normalized_magnitudes
from biot_savart_grid.exceptions import IOFailure

import logging

import numpy as np

import pytest


HEADER = ('load "file:$SCRIPT_PATH$/central_region.xyz" \n'
          'write "$SCRIPT_PATH$/central_region2.xyz" \n'
          'load "file:$SCRIPT_PATH$/central_region2.xyz" \n')
FOOTER = ('set defaultdrawarrowscale 0.1 \n'
          'rotate 90 \n'
          'background white \n')


def _read(path):
    with open(path, 'r', newline='') as f:
        return f.read()


@pytest.mark.parametrize('value, text', [
    (1., '1'),
    (-0.5, '-0.5'),
    (1e-7, '0.0000001'),
    (0.1 + 0.2, '0.30000000000000004'),
    (1e20, '100000000000000000000'),
    (-0., '-0'),
    (float('nan'), 'NaN'),
    (float('inf'), 'inf'),
])
def test_format_float(value, text):
    assert format_float(value) == text


def test_single_sample_keeps_raw_magnitude(tmp_path):
    """One sample: min == max, the raw magnitude is the diameter"""
    x = [0., 1.]
    y = z = [0.]
    bx = np.array([[[0.]], [[9.]]])
    by = np.array([[[0.5]], [[9.]]])
    bz = np.array([[[0.]], [[9.]]])
    path = tmp_path / 'field.spt'
    export_jmol(bx, by, bz, x, y, z, path=path)
    assert _read(path) == (HEADER
                           + 'draw arrow0 arrow color [1,0,0] diameter 0.5 { 0,-0.5,0 } { 0,0.5,0 }\n'
                           + FOOTER)


def test_normalized_diameter_raw_endpoints(tmp_path):
    x = [0., 1., 2., 3.]
    y = [0.]
    z = [0.25]
    bx = np.zeros((4, 1, 1))
    bx[3] = 2.
    zeros = np.zeros_like(bx)
    path = tmp_path / 'field.spt'
    export_jmol(bx, zeros, zeros, x, y, z, path=path)
    lines = _read(path).splitlines(keepends=True)
    assert lines[3:5] == [
        'draw arrow0 arrow color [1,0,0] diameter 0 { 0,0,0.25 } { 0,0,0.25 }\n',
        'draw arrow1 arrow color [1,0,0] diameter 1 { 1,0,0.25 } { 5,0,0.25 }\n',
    ]
    assert len(lines) == 8


def test_stride_sampling(tmp_path):
    n = 7
    x = y = z = np.arange(n, dtype=float)
    rng = np.random.default_rng(0)
    bx, by, bz = (rng.normal(size=(n, n, n)) for _ in range(3))
    path = tmp_path / 'field.spt'
    export_jmol(bx, by, bz, x, y, z, path=path)
    arrows = [l for l in _read(path).splitlines() if l.startswith('draw')]
    # indices 0, 3, 6 along each dimension
    assert len(arrows) == 27
    assert arrows[-1].startswith('draw arrow26 ')


def test_equal_magnitudes_no_nan():
    zeros = np.zeros((4, 4, 4))
    samples = [(0, 0, 0), (3, 0, 0), (0, 3, 3)]
    lengths = normalized_magnitudes(zeros, zeros, zeros, samples)
    np.testing.assert_array_equal(lengths, [0., 0., 0.])
    ones = np.ones((4, 4, 4))
    lengths = normalized_magnitudes(ones, zeros, zeros, samples)
    np.testing.assert_array_equal(lengths, [1., 1., 1.])


def test_equal_magnitudes_logs_warning(caplog):
    ones = np.ones((4, 4, 4))
    zeros = np.zeros_like(ones)
    with caplog.at_level(logging.WARNING, logger='biot_savart_grid.jmol'):
        normalized_magnitudes(ones, zeros, zeros, [(0, 0, 0), (3, 3, 3)])
    assert any(r.levelno == logging.WARNING and 'max and min the same' in r.getMessage()
               for r in caplog.records)
    caplog.clear()
    with caplog.at_level(logging.WARNING, logger='biot_savart_grid.jmol'):
        ones[3, 3, 3] = 2.
        normalized_magnitudes(ones, zeros, zeros, [(0, 0, 0), (3, 3, 3)])
    assert not caplog.records


def test_no_samples_still_writes_header_footer(tmp_path):
    empty = np.zeros((0, 2, 2))
    path = tmp_path / 'field.spt'
    export_jmol(empty, empty, empty, [], [0., 1.], [0., 1.], path=path)
    assert _read(path) == HEADER + FOOTER


def test_unwritable_path(tmp_path):
    zeros = np.zeros((1, 1, 1))
    path = tmp_path / 'missing' / 'field.spt'
    with pytest.raises(IOFailure) as excinfo:
        export_jmol(zeros, zeros, zeros, [0.], [0.], [0.], path=path)
    assert excinfo.value.path == path
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
