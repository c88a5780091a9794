#! /usr/bin/env python

"""
Annular views of ADI cubes.

A view keeps a reference to its parent cube and the ``(yy, xx)`` indices of the
pixels it covers. Calling a view returns the matrix of vectorized pixels,
``(n_frames, n_pixels)``, which is what the post-processing algorithms fit;
``inverse`` puts such a matrix back into a cube, with ``fill`` outside of the
view.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Ralf Farkas'
__all__ = ['AnnulusView',
           'MultiAnnulusView']

import copy

import numpy as np

from .coords import dist_matrix
from .shapes import get_annulus_segments
from ..config.errors import ShapeMismatch
from ..config.utils_conf import check_array


def _empty_like_frames(matrix, n, frame_shape, fill):
    dtype = matrix.dtype
    if not np.issubdtype(dtype, np.floating) and not float(fill).is_integer():
        dtype = np.float64
    if n is None:
        return np.full(frame_shape, fill, dtype=dtype)
    return np.full((n,) + tuple(frame_shape), fill, dtype=dtype)


class AnnulusView(object):
    """
    View of the pixels of a cube lying in a centered annulus.

    The annulus contains the pixels with ``inner <= r <= outer``, ``r`` being
    the distance to the center given by ``frame_center``.

    Parameters
    ----------
    cube : 3d numpy ndarray
        Parent cube.
    inner : float, optional
        Inner radius in pixels.
    outer : float, optional
        Outer radius in pixels. Defaults to half the frame width plus half a
        pixel, which covers the whole frame along the x axis.
    fill : float, optional
        Value of the pixels outside of the annulus when going back to a cube.

    Examples
    --------
    .. code:: python

        av = AnnulusView(cube, inner=5, outer=30)
        matrix = av()               # (n_frames, n_pixels)
        cube_ann = av.inverse(matrix)

    """
    def __init__(self, cube, inner=0, outer=None, fill=0):
        check_array(cube, 3, msg='cube')
        if outer is None:
            outer = cube.shape[-1] / 2 + 0.5
        if inner < 0 or outer <= inner:
            msg = 'Annulus radii must verify 0 <= inner < outer (got {}, {})'
            raise ValueError(msg.format(inner, outer))

        self.parent = cube
        self.rmin = inner
        self.rmax = outer
        self.fill = fill
        rad = dist_matrix(cube.shape[1:])
        self.indices = np.where((rad >= inner) & (rad <= outer))

    @classmethod
    def _from_indices(cls, cube, indices, rmin, rmax, fill):
        view = cls.__new__(cls)
        view.parent = cube
        view.rmin = rmin
        view.rmax = rmax
        view.fill = fill
        view.indices = indices
        return view

    def __call__(self):
        yy, xx = self.indices
        return self.parent[:, yy, xx]

    def __repr__(self):
        return 'AnnulusView(rmin={}, rmax={}, npix={}, nframes={})'.format(
            self.rmin, self.rmax, self.npix, self.parent.shape[0])

    @property
    def npix(self):
        return self.indices[0].size

    @property
    def shape(self):
        """Shape of the matrix returned when calling the view."""
        return self.parent.shape[0], self.npix

    @property
    def frame_shape(self):
        return self.parent.shape[1:]

    @property
    def radius(self):
        """Mid radius of the annulus."""
        return self.rmin + (self.rmax - self.rmin) / 2

    def inverse(self, matrix):
        """
        Put vectorized annulus pixels back into frames.

        Parameters
        ----------
        matrix : numpy ndarray
            ``(n_frames, n_pixels)`` matrix, or a single ``(n_pixels,)`` row.

        Returns
        -------
        array : numpy ndarray
            Cube (or frame for a single row) with ``fill`` outside of the
            annulus.

        """
        matrix = np.asarray(matrix)
        if matrix.shape[-1] != self.npix:
            msg = 'Matrix has {} pixels but the annulus has {}'
            raise ShapeMismatch(msg.format(matrix.shape[-1], self.npix))

        yy, xx = self.indices
        if matrix.ndim == 1:
            out = _empty_like_frames(matrix, None, self.frame_shape, self.fill)
            out[yy, xx] = matrix
        elif matrix.ndim == 2:
            out = _empty_like_frames(matrix, matrix.shape[0], self.frame_shape,
                                     self.fill)
            out[:, yy, xx] = matrix
        else:
            raise TypeError('`matrix` must be a 1d or 2d numpy ndarray')
        return out

    def to_cube(self):
        """Parent cube with ``fill`` outside of the annulus."""
        return self.inverse(self())

    def similar(self, cube):
        """Same annulus over another cube of identical frame shape."""
        check_array(cube, 3, msg='cube')
        if cube.shape[1:] != self.frame_shape:
            msg = 'Frame shape {} differs from the view frame shape {}'
            raise ShapeMismatch(msg.format(cube.shape[1:], self.frame_shape))
        view = copy.copy(self)
        view.parent = cube
        return view

    def same_geometry(self, other):
        """Whether ``other`` covers the same pixels of frames of same shape."""
        return (type(other) is type(self) and
                other.frame_shape == self.frame_shape and
                other.npix == self.npix and
                all(np.array_equal(a, b)
                    for a, b in zip(other.indices, self.indices)))


class MultiAnnulusView(object):
    """
    View of a cube split into concentric annuli of the same width.

    Annulus ``i`` is centered at ``radii[i] = inner + width/2 + i*width`` and
    contains the pixels with ``radii[i] - width/2 <= r < radii[i] + width/2``,
    so the annuli do not overlap. Annuli are created as long as their outer
    edge does not go beyond ``outer``.

    Parameters
    ----------
    cube : 3d numpy ndarray
        Parent cube.
    width : float
        Width of every annulus in pixels.
    inner : float, optional
        Inner radius of the first annulus.
    outer : float, optional
        Maximum outer radius. Defaults to half the frame width plus half a
        pixel.
    fill : float, optional
        Value of the pixels outside of the annuli when going back to a cube.

    """
    def __init__(self, cube, width, inner=0, outer=None, fill=0):
        check_array(cube, 3, msg='cube')
        if width <= 0:
            raise ValueError('`width` must be strictly positive')
        if outer is None:
            outer = cube.shape[-1] / 2 + 0.5

        n_annuli = int(np.floor((outer - inner) / width + 1e-9))
        if n_annuli < 1:
            msg = 'No annulus of width {} fits between radii {} and {}'
            raise ValueError(msg.format(width, inner, outer))

        self.parent = cube
        self.width = width
        self.fill = fill
        self.radii = inner + width / 2 + width * np.arange(n_annuli)
        self.indices = [get_annulus_segments(cube.shape[1:], r - width / 2,
                                             width)[0]
                        for r in self.radii]

    def __repr__(self):
        return 'MultiAnnulusView(width={}, n_annuli={}, nframes={})'.format(
            self.width, self.n_annuli, self.parent.shape[0])

    @property
    def n_annuli(self):
        return len(self.radii)

    @property
    def frame_shape(self):
        return self.parent.shape[1:]

    def annulus(self, i):
        """``AnnulusView`` over the pixels of annulus ``i``."""
        r = self.radii[i]
        return AnnulusView._from_indices(self.parent, self.indices[i],
                                         r - self.width / 2,
                                         r + self.width / 2, self.fill)

    def eachannulus(self):
        """List of ``(n_frames, n_pixels)`` matrices, one per annulus."""
        return [self.parent[:, yy, xx] for yy, xx in self.indices]

    def inverse(self, matrices):
        """
        Put the vectorized pixels of every annulus back into a cube.

        Parameters
        ----------
        matrices : list of numpy ndarray
            One ``(n_frames, n_pixels)`` matrix per annulus, in radius order.

        Returns
        -------
        cube : 3d numpy ndarray
            Cube with ``fill`` outside of the annuli.

        """
        if len(matrices) != self.n_annuli:
            msg = 'Got {} matrices for {} annuli'
            raise ShapeMismatch(msg.format(len(matrices), self.n_annuli))

        matrices = [np.asarray(mat) for mat in matrices]
        out = _empty_like_frames(matrices[0], matrices[0].shape[0],
                                 self.frame_shape, self.fill)
        for (yy, xx), mat in zip(self.indices, matrices):
            if mat.shape[-1] != yy.size:
                msg = 'Matrix has {} pixels but the annulus has {}'
                raise ShapeMismatch(msg.format(mat.shape[-1], yy.size))
            out[:, yy, xx] = mat
        return out

    def to_cube(self):
        """Parent cube with ``fill`` outside of the annuli."""
        return self.inverse(self.eachannulus())

    def similar(self, cube):
        """Same annuli over another cube of identical frame shape."""
        check_array(cube, 3, msg='cube')
        if cube.shape[1:] != self.frame_shape:
            msg = 'Frame shape {} differs from the view frame shape {}'
            raise ShapeMismatch(msg.format(cube.shape[1:], self.frame_shape))
        view = copy.copy(self)
        view.parent = cube
        return view

    def same_geometry(self, other):
        """Whether ``other`` has the same width, radii and frame shape."""
        return (type(other) is type(self) and other.width == self.width and
                other.n_annuli == self.n_annuli and
                np.allclose(other.radii, self.radii) and
                other.frame_shape == self.frame_shape)
