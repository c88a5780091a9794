"""
Tests for var/shapes.py and var/coords.py.

"""

from .helpers import np, aarc, raises, parametrize
from adi_hci.var import (frame_center, dist_matrix, get_annulus_segments,
                         matrix_scaling, prepare_matrix, reshape_matrix)
from adi_hci.config.paramenum import Scaling


@parametrize("shape,center", [((10, 10), (5, 5)), ((11, 11), (5, 5)),
                              ((10, 11), (5, 5)), ((4, 10, 11), (5, 5))])
def test_frame_center(shape, center):
    assert frame_center(np.zeros(shape)) == center


def test_dist_matrix():
    rad = dist_matrix((5, 5))
    assert rad[2, 2] == 0
    aarc(rad[0, 0], np.sqrt(8))
    assert rad.shape == (5, 5)


def test_reshape_roundtrip():
    cube = np.random.RandomState(42).randn(4, 7, 9)
    matrix = prepare_matrix(cube, verbose=False)
    assert matrix.shape == (4, 63)
    assert np.array_equal(reshape_matrix(matrix, 7, 9), cube)


def test_get_annulus_segments():
    frame = np.ones((21, 21))
    yy, xx = get_annulus_segments(frame, 4, 3)[0]
    rad = dist_matrix(frame.shape)[yy, xx]
    assert np.all(rad >= 4) and np.all(rad < 7)
    n_expected = np.sum((dist_matrix(frame.shape) >= 4) &
                        (dist_matrix(frame.shape) < 7))
    assert yy.size == n_expected

    # the segments cover the annulus
    segments = get_annulus_segments(frame.shape, 4, 3, nsegm=4)
    covered = set()
    for seg_yy, seg_xx in segments:
        covered.update(zip(seg_yy.tolist(), seg_xx.tolist()))
    assert covered == set(zip(yy.tolist(), xx.tolist()))

    values = get_annulus_segments(frame, 4, 3, mode="val")[0]
    assert values.size == n_expected

    with raises(ValueError):
        get_annulus_segments(frame, 4, 3, mode="bad")
    with raises(TypeError):
        get_annulus_segments(frame, 4, 3, nsegm=2.5)


def test_matrix_scaling():
    matrix = np.random.RandomState(0).randn(10, 30) + 5
    aarc(matrix_scaling(matrix, 'temp-mean').mean(axis=0), 0, atol=1e-10)
    aarc(matrix_scaling(matrix, 'spat-mean').mean(axis=1), 0, atol=1e-10)
    aarc(matrix_scaling(matrix, 'temp-standard').std(axis=0), 1)
    aarc(matrix_scaling(matrix, Scaling.SPATSTANDARD).std(axis=1), 1)
    assert matrix_scaling(matrix, None) is matrix
    with raises(ValueError):
        matrix_scaling(matrix, 'bad')
