#! /usr/bin/env python
"""
Generic interface of the post-processing algorithms.

Every algorithm implements ``fit(matrix, ref=None, **kwargs)``, which takes a
matrix of vectorized frames and returns a design (see ``psfsub.design``). The
functions of this module lift that matrix-level operation to the geometries of
the package: full frame cubes, ``AnnulusView`` and ``MultiAnnulusView``, and
build on it the usual reduction chain::

    fit -> reconstruct -> subtract -> derotate -> collapse

A reference cube (RDI) can be given with ``ref``, as long as it has the same
geometry as the target. Without it, the target is its own reference (ADI).
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Thomas Bédrine'
__all__ = ['ADIAlgorithm',
           'fit',
           'reconstruct',
           'subtract',
           'process',
           'expand_geometry']

from dataclasses import is_dataclass
from functools import singledispatch

import numpy as np

from .design import ADIDesign, AnnularDesigns
from ..config import time_ini, timing, check_array, pool_map, iterable
from ..config.errors import GeometryMismatch, ShapeMismatch
from ..config.utils_param import separate_kwargs_dict, print_algo_params
from ..preproc import RotOptions, cube_derotate, cube_collapse
from ..var import (prepare_matrix, reshape_matrix, AnnulusView,
                   MultiAnnulusView)


class ADIAlgorithm(object):
    """
    Base class of the post-processing algorithms.

    Subclasses are frozen dataclasses holding the configuration of the
    algorithm, and implement ``fit``. Calling an algorithm instance runs the
    full reduction (see ``process``).
    """

    def fit(self, matrix, ref=None, **kwargs):
        """
        Fit the algorithm to a ``(n_frames, n_pixels)`` matrix.

        Parameters
        ----------
        matrix : numpy ndarray, 2d
            Target matrix.
        ref : numpy ndarray, 2d or None, optional
            Reference matrix with the same number of pixels. If None the
            target is its own reference.
        **kwargs : dict
            Options of the reduction (angles, rotation options...), to be used
            by the algorithms that need them.

        Returns
        -------
        design : ADIDesign
            Design whose reconstruction has the shape of ``matrix``.

        """
        raise NotImplementedError

    def fit_geometry(self, cube, ref=None, **kwargs):
        """Fit the algorithm to a cube, matrix or annular view."""
        return _fit_geometry(cube, self, ref, **kwargs)

    def reconstruct(self, cube, ref=None, **kwargs):
        """Model of the speckle field, in the geometry of ``cube``."""
        design = fit(self, cube, ref=ref, **kwargs)
        return expand_geometry(cube, design.reconstruct())

    def subtract(self, cube, ref=None, **kwargs):
        return subtract(self, cube, ref=ref, **kwargs)

    def process(self, cube, angle_list, ref=None, **kwargs):
        return process(self, cube, angle_list, ref=ref, **kwargs)

    __call__ = process


def _check_ref_matrix(data, ref):
    if ref is not None and data.shape[1] != ref.shape[1]:
        msg = 'Target has {} pixels per frame, the reference has {}'
        raise ShapeMismatch(msg.format(data.shape[1], ref.shape[1]))


@singledispatch
def _fit_geometry(cube, alg, ref=None, **kwargs):
    raise TypeError('Data of type {} is not supported'.format(type(cube)))


@_fit_geometry.register(np.ndarray)
def _fit_array(cube, alg, ref=None, **kwargs):
    check_array(cube, (2, 3), msg='cube')
    if ref is cube:
        ref = None
    if ref is not None:
        if not isinstance(ref, np.ndarray) or ref.ndim != cube.ndim:
            msg = 'The reference must be a {}d array like the target'
            raise GeometryMismatch(msg.format(cube.ndim))

    if cube.ndim == 3:
        data = prepare_matrix(cube, verbose=False)
        ref_mat = None if ref is None else prepare_matrix(ref, verbose=False)
    else:
        data = cube
        ref_mat = ref
    _check_ref_matrix(data, ref_mat)
    return alg.fit(data, ref_mat, **kwargs)


@_fit_geometry.register(AnnulusView)
def _fit_annulus(cube, alg, ref=None, **kwargs):
    if ref is cube:
        ref = None
    if ref is not None and not cube.same_geometry(ref):
        raise GeometryMismatch('The reference must be an AnnulusView with the'
                               ' same pixels and frame shape as the target')
    data = cube()
    ref_mat = None if ref is None else ref()
    _check_ref_matrix(data, ref_mat)
    return alg.fit(data, ref_mat, **kwargs)


@_fit_geometry.register(MultiAnnulusView)
def _fit_multi(cube, alg, ref=None, **kwargs):
    return _fit_annuli([alg] * cube.n_annuli, cube, ref, **kwargs)


def _fit_one_annulus(alg, view, ref, kwargs):
    return alg.fit_geometry(view, ref=ref, **kwargs)


def _fit_annuli(algs, cube, ref=None, **kwargs):
    if len(algs) != cube.n_annuli:
        msg = 'Got {} algorithms for {} annuli'
        raise ValueError(msg.format(len(algs), cube.n_annuli))
    if ref is cube:
        ref = None
    if ref is not None and not cube.same_geometry(ref):
        raise GeometryMismatch('The reference must be a MultiAnnulusView with'
                               ' the same annuli as the target')

    annuli = [cube.annulus(i) for i in range(cube.n_annuli)]
    if ref is None:
        refs = [None] * cube.n_annuli
    else:
        refs = [ref.annulus(i) for i in range(cube.n_annuli)]

    nproc = kwargs.get('nproc', 1)
    if nproc is not None and nproc > 1:
        # workers cannot spawn processes themselves
        kwargs = dict(kwargs, nproc=1)
    designs = pool_map(nproc, _fit_one_annulus, iterable(algs),
                       iterable(annuli), iterable(refs), kwargs,
                       msg='Fitting the annuli',
                       verbose=kwargs.get('verbose', False))
    return AnnularDesigns(designs)


def fit(alg, cube, ref=None, **kwargs):
    """
    Fit a post-processing algorithm to a cube, a matrix or an annular view.

    Parameters
    ----------
    alg : ADIAlgorithm or list of ADIAlgorithm
        Algorithm. A list of algorithms (one per annulus, in increasing radius)
        is only accepted when ``cube`` is a ``MultiAnnulusView``.
    cube : numpy ndarray, AnnulusView or MultiAnnulusView
        Target data: 3d cube, 2d matrix of vectorized frames or view.
    ref : same type as ``cube`` or None, optional
        Reference data for RDI, with the same geometry as ``cube``. If None
        (or ``cube`` itself), the target is its own reference.
    **kwargs : dict
        Passed to the ``fit`` method of the algorithm(s). ``nproc`` also sets
        the number of processes used to fit the annuli of a
        ``MultiAnnulusView``.

    Returns
    -------
    design : ADIDesign or AnnularDesigns
        One design, or one design per annulus for a ``MultiAnnulusView``.

    """
    if isinstance(alg, (list, tuple)):
        if not isinstance(cube, MultiAnnulusView):
            raise GeometryMismatch('A list of algorithms can only be fit to a '
                                   'MultiAnnulusView')
        return _fit_annuli(list(alg), cube, ref, **kwargs)
    return alg.fit_geometry(cube, ref=ref, **kwargs)


@singledispatch
def expand_geometry(cube, reconstruction):
    """
    Put a reconstructed matrix back in the geometry of ``cube``.

    Parameters
    ----------
    cube : numpy ndarray, AnnulusView or MultiAnnulusView
        The data the algorithm was fit to.
    reconstruction : numpy ndarray or list of ndarrays
        Output of the ``reconstruct`` method of the design(s).

    Returns
    -------
    array : numpy ndarray
        Cube (or matrix, when ``cube`` is a matrix).

    """
    raise TypeError('Data of type {} is not supported'.format(type(cube)))


@expand_geometry.register(np.ndarray)
def _expand_array(cube, reconstruction):
    if cube.ndim == 2:
        return reconstruction
    return reshape_matrix(reconstruction, cube.shape[1], cube.shape[2])


@expand_geometry.register(AnnulusView)
@expand_geometry.register(MultiAnnulusView)
def _expand_view(cube, reconstruction):
    return cube.inverse(reconstruction)


def _geometry_cube(cube):
    if isinstance(cube, (AnnulusView, MultiAnnulusView)):
        return cube.to_cube()
    return cube


def _n_frames(cube):
    if isinstance(cube, (AnnulusView, MultiAnnulusView)):
        return cube.parent.shape[0]
    return cube.shape[0]


def reconstruct(alg, cube=None, ref=None, **kwargs):
    """
    Reconstruct the speckle field.

    Parameters
    ----------
    alg : ADIAlgorithm, list of ADIAlgorithm, ADIDesign or AnnularDesigns
        Algorithm(s) to fit, or an already fitted design.
    cube : numpy ndarray, AnnulusView or MultiAnnulusView
        Target data. For a design, if given, the reconstruction is put back in
        its geometry.
    ref : same type as ``cube`` or None, optional
        Reference data for RDI.
    **kwargs : dict
        Passed to the fit.

    Returns
    -------
    reconstruction : numpy ndarray
        Cube with the geometry of ``cube``. For a design without ``cube``, the
        reconstructed matrix (or list of matrices).

    """
    if isinstance(alg, (ADIDesign, AnnularDesigns)):
        rec = alg.reconstruct()
        if cube is None:
            return rec
        return expand_geometry(cube, rec)

    if cube is None:
        raise TypeError('`cube` is required to reconstruct an algorithm')
    if isinstance(alg, (list, tuple)):
        design = fit(alg, cube, ref=ref, **kwargs)
        return expand_geometry(cube, design.reconstruct())
    return alg.reconstruct(cube, ref=ref, **kwargs)


def subtract(alg, cube, ref=None, **kwargs):
    """
    Residuals of the target after subtraction of the reconstructed speckles.

    For annular views, pixels outside of the view hold the fill value of the
    view (the view ``to_cube`` minus a reconstruction filled alike).
    """
    return _geometry_cube(cube) - reconstruct(alg, cube, ref=ref, **kwargs)


def process(alg, cube, angle_list, ref=None, collapse='median', nproc=1,
            verbose=False, **kwargs):
    """
    Full reduction: subtraction of the speckles, de-rotation of the residuals
    and temporal combination.

    Parameters
    ----------
    alg : ADIAlgorithm or list of ADIAlgorithm
        Algorithm(s).
    cube : numpy ndarray, AnnulusView or MultiAnnulusView
        ADI cube, or annular view of an ADI cube.
    angle_list : numpy ndarray, 1d
        Parallactic angles, one per frame.
    ref : same type as ``cube`` or None, optional
        Reference data for RDI.
    collapse : {'median', 'mean', 'sum', 'max', 'trimmean', 'absmean'}, str
        Combination of the de-rotated residuals, see ``cube_collapse``.
    nproc : int, optional
        Number of processes, used by the fits that support it and by the
        de-rotation.
    verbose : bool, optional
        If True the parameters and the running time are printed.
    **kwargs : dict
        Rotation options (``imlib``, ``interpolation``, ``cxy``,
        ``border_mode``, see ``RotOptions``) and options of the fit. Both are
        forwarded to the fit, along with ``angle_list``.

    Returns
    -------
    frame : numpy ndarray, 2d
        Final residual frame.

    """
    n_frames = _n_frames(cube)
    angle_list = np.asarray(angle_list)
    if angle_list.shape != (n_frames,):
        msg = 'Got {} angles for {} frames'
        raise ShapeMismatch(msg.format(angle_list.size, n_frames))

    if verbose:
        start_time = time_ini()
        if is_dataclass(alg):
            print_algo_params(alg)

    rot_options, _ = separate_kwargs_dict(kwargs, RotOptions)
    residuals = subtract(alg, cube, ref=ref, angle_list=angle_list,
                         collapse=collapse, nproc=nproc, verbose=verbose,
                         **kwargs)
    if verbose:
        print('Done subtracting the speckles')

    residuals_der = cube_derotate(residuals, angle_list, nproc=nproc,
                                  **rot_options)
    frame = cube_collapse(residuals_der, mode=collapse)

    if verbose:
        print('Done derotating and combining the residuals')
        timing(start_time)
    return frame
