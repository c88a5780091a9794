#! /usr/bin/env python
"""
Module with frame de-rotation routines for ADI and the parallactic angle
criterion used to build the reference library of a frame.
"""

__author__ = 'C. A. Gomez Gonzalez, V. Christiaens, S. Juillard'
__all__ = ['RotOptions',
           'cube_derotate',
           'frame_rotate',
           'compute_pa_thresh',
           'find_indices_adi']

import warnings
from dataclasses import dataclass
from enum import Enum
from multiprocessing import cpu_count
from typing import Tuple

import numpy as np
from skimage.transform import rotate

from ..config.errors import DegenerateThreshold, ShapeMismatch
from ..config.paramenum import Imlib, Interpolation
from ..config.utils_conf import iterable, pool_map
from ..var import frame_center

try:
    import cv2
    no_opencv = False
except ImportError:
    msg = "Opencv python bindings are missing."
    warnings.warn(msg, ImportWarning)
    no_opencv = True


@dataclass
class RotOptions:
    """
    Set of options of the (de)rotation of frames.

    See function `frame_rotate` for the documentation.
    """

    imlib: Enum = Imlib.SKIMAGE
    interpolation: Enum = Interpolation.BIQUARTIC
    cxy: Tuple[float] = None
    border_mode: str = 'constant'


def frame_rotate(array, angle, imlib='skimage', interpolation='biquartic',
                 cxy=None, border_mode='constant'):
    """Rotate a frame or 2D array.

    Parameters
    ----------
    array : numpy ndarray
        Input image, 2d array.
    angle : float
        Rotation angle, counter-clockwise, in degrees.
    imlib : {'skimage', 'opencv'}, str optional
        Library used for image transformations. Opencv is faster than skimage,
        while skimage with a biquintic interpolation better preserves the flux.
    interpolation : str, optional
        For Skimage the options are: 'nearneig', bilinear', 'biquadratic',
        'bicubic', 'biquartic' or 'biquintic'. The 'nearneig' interpolation is
        the fastest and the 'biquintic' the slowest. The 'nearneig' is the
        poorer option for interpolation of noisy astronomical images.
        For Opencv the options are: 'nearneig', 'bilinear', 'bicubic' or
        'lanczos4'. The 'nearneig' interpolation is the fastest and the
        'lanczos4' the slowest and more accurate.
    cxy : float, optional
        Coordinates X,Y  of the point with respect to which the rotation will be
        performed. By default the rotation is done with respect to the center
        of the frame.
    border_mode : {'constant', 'edge', 'symmetric', 'reflect', 'wrap'}, str opt
        Pixel extrapolation method for handling the borders. 'constant' for
        padding with zeros. 'edge' for padding with the edge values of the
        image. 'symmetric' for padding with the reflection of the vector
        mirrored along the edge of the array. 'reflect' for padding with the
        reflection of the vector mirrored on the first and last values of the
        vector along each axis. 'wrap' for padding with the wrap of the vector
        along the axis (the first values are used to pad the end and the end
        values are used to pad the beginning). Default is 'constant'.

    Returns
    -------
    array_out : numpy ndarray
        Resulting frame.

    """
    if array.ndim != 2:
        raise TypeError('Input array is not a frame or 2d array')

    imlib = getattr(imlib, 'value', imlib)
    interpolation = getattr(interpolation, 'value', interpolation)

    # nans would propagate through the interpolation
    array_prep = np.nan_to_num(array.astype(float, copy=True))
    y, x = array_prep.shape

    if cxy is None:
        cy, cx = frame_center(array_prep)
    else:
        cx, cy = cxy

    if imlib == 'skimage':
        orders = {'nearneig': 0, 'bilinear': 1, 'biquadratic': 2, 'bicubic': 3,
                  'biquartic': 4, 'lanczos4': 4, 'biquintic': 5}
        if interpolation not in orders:
            raise ValueError('Skimage interpolation method not recognized')
        order = orders[interpolation]

        if border_mode not in ['constant', 'edge', 'symmetric', 'reflect',
                               'wrap']:
            raise ValueError('Skimage `border_mode` not recognized.')

        # for a non-constant image, normalize manually
        min_val = np.min(array_prep)
        max_val = np.max(array_prep)
        if min_val != max_val:
            norm = True
            im_temp = array_prep - min_val
            max_val = np.max(im_temp)
            im_temp /= max_val
        else:
            norm = False
            im_temp = array_prep

        array_out = rotate(im_temp, angle, order=order, center=(cx, cy),
                           cval=0, mode=border_mode)

        if norm:
            array_out *= max_val
            array_out += min_val
        array_out = np.nan_to_num(array_out, copy=False)

    elif imlib == 'opencv':
        if no_opencv:
            msg = 'Opencv python bindings cannot be imported. Install opencv or'
            msg += ' set imlib to skimage'
            raise RuntimeError(msg)

        intps = {'bilinear': cv2.INTER_LINEAR, 'bicubic': cv2.INTER_CUBIC,
                 'nearneig': cv2.INTER_NEAREST, 'lanczos4': cv2.INTER_LANCZOS4}
        if interpolation not in intps:
            msg = 'Opencv interpolation method `{}` is not recognized'
            raise ValueError(msg.format(interpolation))

        bormos = {'constant': cv2.BORDER_CONSTANT,       # iiii|abcdefgh|iiii
                  'edge': cv2.BORDER_REPLICATE,          # aaaa|abcdefgh|hhhh
                  'symmetric': cv2.BORDER_REFLECT,       # dcba|abcdefgh|hgfe
                  'reflect': cv2.BORDER_REFLECT_101,     # edcb|abcdefgh|gfed
                  'wrap': cv2.BORDER_WRAP}               # efgh|abcdefgh|abcd
        if border_mode not in bormos:
            raise ValueError('Opencv `border_mode` not recognized.')

        M = cv2.getRotationMatrix2D((cx, cy), angle, 1)
        array_out = cv2.warpAffine(array_prep.astype(np.float32), M, (x, y),
                                   flags=intps[interpolation],
                                   borderMode=bormos[border_mode])
        array_out = array_out.astype(float)

    else:
        raise ValueError('Image transformation library not recognized')

    return array_out


def cube_derotate(array, angle_list, imlib='skimage', interpolation='biquartic',
                  cxy=None, nproc=1, border_mode='constant'):
    """Rotate a cube (3d array or image sequence) providing a vector or\
    corresponding angles.

    Serves for rotating an ADI sequence to a common north given a vector with
    the corresponding parallactic angles for each frame. Frame ``i`` is rotated
    by ``-angle_list[i]``.

    Parameters
    ----------
    array : numpy.ndarray
        Input 3d array, cube.
    angle_list : list or 1D numpy.ndarray
        Vector containing the parallactic angles.
    imlib : str, optional
        See the documentation of the ``adi_hci.preproc.frame_rotate`` function.
    interpolation : str, optional
        See the documentation of the ``adi_hci.preproc.frame_rotate`` function.
    cxy : tuple of int, optional
        Coordinates X,Y  of the point with respect to which the rotation will be
        performed. By default the rotation is done with respect to the center
        of the frames, as it is returned by the function
        adi_hci.var.frame_center.
    nproc : int, optional
        Whether to rotate the frames in the sequence in a multi-processing
        fashion. Only useful if the cube is significantly large (frame size and
        number of frames).
    border_mode : str, optional
        See the documentation of the ``adi_hci.preproc.frame_rotate`` function.

    Returns
    -------
    array_der : numpy ndarray
        Resulting cube with de-rotated frames.

    """
    if array.ndim != 3:
        raise TypeError('Input array is not a cube or 3d array.')
    angle_list = np.asarray(angle_list, dtype=float)
    n_frames = array.shape[0]
    if angle_list.shape != (n_frames,):
        msg = 'Got {} angles for {} frames'
        raise ShapeMismatch(msg.format(angle_list.size, n_frames))

    if nproc is None:
        nproc = cpu_count() // 2        # Hyper-threading doubles the # of cores

    if nproc == 1:
        array_der = np.zeros(array.shape, dtype=float)
        for i in range(n_frames):
            array_der[i] = frame_rotate(array[i], -angle_list[i], imlib=imlib,
                                        interpolation=interpolation, cxy=cxy,
                                        border_mode=border_mode)
    else:
        res = pool_map(nproc, frame_rotate, iterable(array),
                       iterable(-angle_list), imlib, interpolation, cxy,
                       border_mode)
        array_der = np.array(res)

    return array_der


def compute_pa_thresh(angle_list, ann_center, fwhm, delta_rot=1,
                      verbose=False):
    """Compute the parallactic angle threshold [degrees].

    The threshold is the angle subtended by an arc of ``delta_rot * fwhm``
    pixels at a distance ``ann_center`` from the star. It cannot exceed 90% of
    half the rotation range of ``angle_list``: larger values are clamped and a
    ``DegenerateThreshold`` warning is emitted.

    Parameters
    ----------
    angle_list : numpy ndarray, 1d
        Vector of parallactic angle (PA) for each frame.
    ann_center : float
        Radius in pixels at which the threshold is computed.
    fwhm : float
        FWHM in pixels.
    delta_rot : float, optional
        Arc length, in FWHM units.
    verbose : bool, optional
        If True the threshold is printed.

    Returns
    -------
    pa_threshold : float
        PA threshold in degrees.

    """
    pa_threshold = np.rad2deg(2 * np.arctan(delta_rot * fwhm /
                                            (2 * ann_center)))
    mid_range = np.abs(np.amax(angle_list) - np.amin(angle_list)) / 2
    max_threshold = 0.9 * mid_range
    if pa_threshold >= max_threshold:
        msg = 'PA threshold {:.2f} is likely too big, will be set to {:.2f}'
        warnings.warn(msg.format(pa_threshold, max_threshold),
                      DegenerateThreshold)
        pa_threshold = float(max_threshold)

    if verbose:
        print('PA thresh: {:5.2f}    Ann center: {:3.0f}'.format(pa_threshold,
                                                                ann_center))
    return pa_threshold


def find_indices_adi(angle_list, frame, thr, limit=None):
    """Return the indices of the frames left in the reference library of\
    ``frame`` after applying a parallactic angle threshold.

    Parameters
    ----------
    angle_list : numpy ndarray, 1d
        Vector of parallactic angle (PA) for each frame.
    frame : int
        Index of the current frame for which we are applying the PA threshold.
    thr : float or None
        PA threshold. With None no angular filtering is done, with 0 all the
        frames but ``frame`` are kept.
    limit : int or None, optional
        Maximum number of indices to be left. At most ``limit // 2`` indices
        are kept on each side of the excluded frames, the ones closest to the
        exclusion boundary. If None then all the indices are returned (after
        the PA threshold).

    Returns
    -------
    indices : numpy ndarray, 1d
        Vector with the indices left, in increasing order.

    """
    n = len(angle_list)
    if not 0 <= frame < n:
        raise IndexError('`frame` {} out of range for {} frames'.format(frame,
                                                                       n))

    if thr is None:
        if limit is None:
            half1 = range(0, frame)
            half2 = range(frame + 1, n)
        else:
            window = limit // 2
            half1 = range(max(frame - window, 0), frame)
            half2 = range(frame + 1, min(frame + 1 + window, n))
        return np.array(list(half1) + list(half2), dtype=int)

    if thr == 0:
        return np.array(list(range(0, frame)) + list(range(frame + 1, n)),
                        dtype=int)

    index_prev = 0
    index_foll = frame
    for i in range(0, frame):
        if np.abs(angle_list[frame] - angle_list[i]) < thr:
            index_prev = i
            break
        else:
            index_prev += 1
    for k in range(frame, n):
        if np.abs(angle_list[k] - angle_list[frame]) > thr:
            index_foll = k
            break
        else:
            index_foll += 1

    if limit is not None:
        window = limit // 2
        half1 = range(max(index_prev - window, 0), index_prev)
        half2 = range(index_foll, min(index_foll + window, n))
    else:
        half1 = range(0, index_prev)
        half2 = range(index_foll, n)

    return np.array(list(half1) + list(half2), dtype=int)
