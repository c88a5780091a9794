#! /usr/bin/env python

"""
Module with functions related to image coordinates.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Valentin Christiaens'
__all__ = ['dist',
           'dist_matrix',
           'frame_center']

import numpy as np


def dist(yc, xc, y1, x1):
    """
    Return the Euclidean distance between two points, or between an array
    of positions and a point.
    """
    return np.sqrt(np.power(yc-y1, 2) + np.power(xc-x1, 2))


def dist_matrix(shape, cy=None, cx=None):
    """
    Create a frame with the euclidean distance of every pixel to a reference
    point (by default the frame center).

    Parameters
    ----------
    shape : tuple of int
        Output frame shape ``(y, x)``.
    cy, cx : float, optional
        Reference point. Defaults to the center given by ``frame_center``.

    Returns
    -------
    im : 2d ndarray
        Distances in pixels.

    """
    if cy is None or cx is None:
        cy, cx = frame_center(np.empty(shape))
    yy, xx = np.mgrid[:shape[0], :shape[1]]
    return dist(cy, cx, yy, xx)


def frame_center(array, verbose=False):
    """
    Return the coordinates y,x of the frame(s) center.
    If odd: dim/2-0.5
    If even: dim/2

    Parameters
    ----------
    array : 2d/3d numpy ndarray
        Frame or cube.
    verbose : bool optional
        If True the center coordinates are printed out.

    Returns
    -------
    cy, cx : int
        Coordinates of the center.

    """
    if array.ndim == 2:
        shape = array.shape
    elif array.ndim == 3:
        shape = array[0].shape
    else:
        raise ValueError('`array` is not a 2d or 3d array')

    cy = shape[0] / 2
    cx = shape[1] / 2

    if shape[0] % 2:
        cy -= 0.5
    if shape[1] % 2:
        cx -= 0.5

    if verbose:
        print('Center px coordinates at x,y = ({}, {})'.format(cx, cy))

    return int(cy), int(cx)
