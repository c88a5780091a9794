#! /usr/bin/env python
"""
Module with frame combination functions.

.. [BRA13]
   | Brandt et al. 2013
   | **New Techniques for High-contrast Imaging with ADI: The ACORNS-ADI SEEDS
     Data Reduction Pipeline**
   | *The Astrophysical Journal, Volume 764, Issue 2, p. 183*
   | `https://arxiv.org/abs/1209.3014
     <https://arxiv.org/abs/1209.3014>`_

"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Valentin Christiaens'
__all__ = ['cube_collapse']

import numpy as np


def cube_collapse(cube, mode='median', n=50):
    """Collapse a 3D cube into a 2D frame.

    The  ``mode`` parameter determines how the collapse should be done. It is
    possible to perform a trimmed mean combination of the frames, as in
    [BRA13]_.

    Parameters
    ----------
    cube : numpy ndarray
        Cube.
    mode : {'median', 'mean', 'sum', 'max', 'trimmean', 'absmean'}
        Sets the way of collapsing the images in the cube.
        'absmean' stands for the mean of absolute values.
    n : int, optional
        [mode='trimmean'] Sets the discarded values at high and low ends. When
        n = N is the same as taking the mean, when n = 1 is like taking the
        median.

    Returns
    -------
    frame : numpy ndarray
        Output array, cube combined.
    """
    arr = cube
    if arr.ndim != 3:
        raise TypeError('The input array is not a cube or 3d array.')

    if mode == 'mean':
        frame = np.nanmean(arr, axis=0)
    elif mode == 'median':
        frame = np.nanmedian(arr, axis=0)
    elif mode == 'sum':
        frame = np.nansum(arr, axis=0)
    elif mode == 'max':
        frame = np.nanmax(arr, axis=0)
    elif mode == 'trimmean':
        N = arr.shape[0]
        n = min(n, N)
        if N % 2 != n % 2:
            n += 1
        k = (N - n) // 2
        frame = np.nanmean(np.sort(arr, axis=0)[k:k+n], axis=0)
    elif mode == 'absmean':
        frame = np.nanmean(np.abs(arr), axis=0)
    else:
        raise TypeError("mode not recognized")

    return frame
