#! /usr/bin/env python

"""
Module with functions to extract annuli and to go back and forth between cubes
and matrices of vectorized frames.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez'
__all__ = ['get_annulus_segments',
           'matrix_scaling',
           'prepare_matrix',
           'reshape_matrix']

import numpy as np
from sklearn.preprocessing import scale

from .coords import frame_center
from ..config.errors import ShapeMismatch
from ..config.paramenum import Scaling
from ..config.utils_conf import check_array


def _frame_or_shape(data):
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise TypeError("`data` is not a frame or 2d array")
        return data
    elif isinstance(data, tuple):
        return np.zeros(data)
    raise TypeError("`data` must be a tuple (shape) or a 2d array")


def get_annulus_segments(data, inner_radius, width, nsegm=1, theta_init=0,
                         mode="ind"):
    """
    Return indices or values in segments of a centerered annulus.

    The annulus is defined by ``inner_radius <= annulus < inner_radius+width``.

    Parameters
    ----------
    data : 2d numpy ndarray or tuple
        Input 2d array (image) ot tuple with its shape.
    inner_radius : float
        The inner radius of the donut region.
    width : float
        The size of the annulus.
    nsegm : int
        Number of segments of annulus to be extracted.
    theta_init : int
        Initial azimuth [degrees] of the first segment, counting from the
        positive x-axis counterclockwise.
    mode : {'ind', 'val', 'mask'}, optional
        Controls what is returned: indices of selected pixels, values of
        selected pixels, or a boolean mask.

    Returns
    -------
    indices : list of ndarrays
        [mode='ind'] Coordinates of pixels for each annulus segment.
    values : list of ndarrays
        [mode='val'] Pixel values.
    masked : list of ndarrays
        [mode='mask'] Copy of ``data`` with masked out regions.

    """
    array = _frame_or_shape(data)

    if not isinstance(nsegm, int):
        raise TypeError('`nsegm` must be an integer')

    cy, cx = frame_center(array)
    azimuth_coverage = np.deg2rad(int(np.ceil(360 / nsegm)))
    twopi = 2 * np.pi

    yy, xx = np.mgrid[:array.shape[0], :array.shape[1]]
    rad = np.sqrt((xx - cx) ** 2 + (yy - cy) ** 2)
    phirot = np.arctan2(yy - cy, xx - cx) % twopi
    in_ring = (rad >= inner_radius) & (rad < inner_radius + width)
    masks = []

    for i in range(nsegm):
        if nsegm == 1:
            masks.append(in_ring)
            continue
        phi_start = (np.deg2rad(theta_init) + i * azimuth_coverage) % twopi
        phi_end = phi_start + azimuth_coverage
        if phi_end > twopi:
            masks.append(in_ring & ((phirot >= phi_start) |
                                    (phirot < phi_end - twopi)))
        else:
            masks.append(in_ring & (phirot >= phi_start) & (phirot < phi_end))

    if mode == "ind":
        return [np.where(mask) for mask in masks]
    elif mode == "val":
        return [array[mask] for mask in masks]
    elif mode == "mask":
        return [array*mask for mask in masks]
    else:
        raise ValueError("mode '{}' unknown!".format(mode))


# (with_std, axis) of ``sklearn.preprocessing.scale`` for each mode
_SCALINGS = {Scaling.TEMPMEAN.value: (False, 0),
             Scaling.SPATMEAN.value: (False, 1),
             Scaling.TEMPSTANDARD.value: (True, 0),
             Scaling.SPATSTANDARD.value: (True, 1)}


def matrix_scaling(matrix, scaling):
    """
    Center (and optionally reduce) a matrix of vectorized frames with
    ``sklearn.preprocessing.scale``.

    Parameters
    ----------
    matrix : 2d numpy ndarray
        ``(n_frames, n_pixels)`` matrix.
    scaling : {None, 'temp-mean', 'spat-mean', 'temp-standard',
               'spat-standard'}, Scaling or None
        ``temp`` modes center every pixel over time, ``spat`` modes center
        every frame. ``standard`` modes also scale to unit variance. With None
        the matrix is returned untouched.

    Returns
    -------
    matrix : 2d numpy ndarray

    """
    if scaling is None:
        return matrix
    scaling = getattr(scaling, 'value', scaling)
    if scaling not in _SCALINGS:
        raise ValueError('Scaling mode not recognized')
    with_std, axis = _SCALINGS[scaling]
    return scale(matrix, with_mean=True, with_std=with_std, axis=axis)


def prepare_matrix(array, scaling=None, verbose=True):
    """
    Vectorize the frames of a cube into the rows of a matrix, the input of
    every post-processing algorithm.

    Parameters
    ----------
    array : 3d numpy ndarray
        Input cube.
    scaling : str or None, optional
        See ``matrix_scaling``.
    verbose : bool, optional
        If True the shape of the matrix is printed.

    Returns
    -------
    matrix : 2d numpy ndarray
        ``(n_frames, n_pixels)`` matrix. Without scaling, it is a view of
        ``array``: ``reshape_matrix`` gives back the cube, bit for bit.

    """
    check_array(array, 3, msg='array')
    matrix = matrix_scaling(array.reshape(array.shape[0], -1), scaling)

    if verbose:
        msg = 'Done vectorizing the frames. Matrix shape: ({}, {})'
        print(msg.format(matrix.shape[0], matrix.shape[1]))
    return matrix


def reshape_matrix(array, y, x):
    """
    Inverse of ``prepare_matrix``: ``(n_frames, y*x)`` matrix to
    ``(n_frames, y, x)`` cube.
    """
    if array.shape[-1] != y * x:
        msg = 'Rows of {} pixels cannot be reshaped into {}x{} frames'
        raise ShapeMismatch(msg.format(array.shape[-1], y, x))
    return array.reshape(array.shape[0], y, x)
