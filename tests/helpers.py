"""Helper functions for tests"""

__author__ = "Ralf Farkas, Thomas Bédrine"

__all__ = ["aarc", "gaussian_frame", "synthetic_cube", "parametrize",
           "filterwarnings", "raises", "warns", "fixture", "param"]

from pytest import mark, param, raises, fixture, warns
import numpy as np

filterwarnings = mark.filterwarnings
parametrize = mark.parametrize


def aarc(actual, desired, rtol=1e-5, atol=1e-6):
    """
    Assert array-compare. Like ``np.allclose``, but with different defaults.

    Notes
    -----
    Default values for
    - ``np.allclose``: ``atol=1e-8, rtol=1e-5``
    - ``np.testing.assert_allclose``: ``atol=0, rtol=1e-7``

    The reductions go through interpolations and iterative solvers, so `atol`
    has to be chosen accordingly. The contribution of `rtol` is dominant for
    large numbers, where an absolute comparison to `1e-6` would not make sense.

    """
    __tracebackhide__ = True  # Hide traceback for pytest
    np.testing.assert_allclose(actual, desired, rtol=rtol, atol=atol)


def gaussian_frame(size, y, x, sigma=2, amplitude=1):
    """Frame with a 2d gaussian blob centered at (``y``, ``x``)."""
    yy, xx = np.mgrid[:size, :size]
    return amplitude * np.exp(-((yy - y) ** 2 + (xx - x) ** 2) /
                              (2 * sigma ** 2))


def synthetic_cube(n_frames=12, size=21, n_speckles=3, noise=0.05,
                   seed=42):
    """
    ADI-like cube: a few static speckle patterns with amplitudes varying from
    frame to frame, plus white noise. All values are positive.

    Returns
    -------
    cube : numpy ndarray
        ``(n_frames, size, size)`` cube.
    angle_list : numpy ndarray
        Parallactic angles, regularly spaced from 0 to 120 degrees.

    """
    rng = np.random.RandomState(seed)
    patterns = rng.rand(n_speckles, size, size)
    amplitudes = 1 + rng.rand(n_frames, n_speckles)
    cube = np.tensordot(amplitudes, patterns, axes=1)
    cube += noise * rng.rand(n_frames, size, size)
    angle_list = np.linspace(0, 120, n_frames)
    return cube, angle_list
