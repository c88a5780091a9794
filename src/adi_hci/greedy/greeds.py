#! /usr/bin/env python
"""
Module with the greedy disk subtraction (GreeDS) algorithm.

.. [PAI18]
   | Pairet et al. 2018
   | **Reference-less algorithm for circumstellar disks imaging**
   | *Proceedings of the 2018 iTWIST workshop*
   | `https://arxiv.org/abs/1812.01333
     <https://arxiv.org/abs/1812.01333>`_

.. [PAI21]
   | Pairet et al. 2021
   | **MAYONNAISE: a morphological components analysis pipeline for
     circumstellar discs and exoplanets imaging in the near-infrared**
   | *MNRAS, Volume 503, Issue 3, pp. 3724-3742*
   | `https://arxiv.org/abs/2008.05170
     <https://arxiv.org/abs/2008.05170>`_

"""

__author__ = 'Sandrine Juillard, Carlos Alberto Gomez Gonzalez'
__all__ = ['GreeDS',
           'expand_rotate']

from dataclasses import dataclass, field, replace

import numpy as np

from ..config import Progressbar, pool_map, iterable, check_array
from ..config.errors import GeometryMismatch, ShapeMismatch, UnsupportedKernel
from ..config.utils_param import separate_kwargs_dict
from ..preproc import RotOptions, frame_rotate, cube_derotate, cube_collapse
from ..psfsub import ADIAlgorithm, PCA, NMF
from ..psfsub.interface import _fit_annuli, _check_ref_matrix
from ..var import (prepare_matrix, reshape_matrix, AnnulusView,
                   MultiAnnulusView)


def expand_rotate(frame, angle_list, threshold=0, imlib='skimage',
                  interpolation='biquartic', cxy=None, border_mode='constant',
                  nproc=1):
    """
    Expand a frame into a cube, rotating it to the parallactic angle of every
    frame of an ADI sequence.

    Values of ``frame`` below ``threshold`` are set to ``threshold`` before the
    rotations. Frame ``i`` of the output is rotated by ``+angle_list[i]``,
    which undoes ``cube_derotate``.

    Parameters
    ----------
    frame : numpy ndarray, 2d
        Input frame, e.g. a de-rotated and combined residual frame.
    angle_list : numpy ndarray, 1d
        Parallactic angles.
    threshold : float, optional
        Minimum value of the frame.
    imlib, interpolation, cxy, border_mode : optional
        See ``adi_hci.preproc.frame_rotate``.
    nproc : int, optional
        Number of processes used over the frames.

    Returns
    -------
    cube : numpy ndarray, 3d
        ``(len(angle_list), y, x)`` cube.

    """
    check_array(frame, 2, msg='frame')
    frame_thr = np.where(frame > threshold, frame, threshold)
    res = pool_map(nproc, frame_rotate, frame_thr, iterable(angle_list), imlib,
                   interpolation, cxy, border_mode)
    return np.array(res)


def _with_rank(kernel, ncomp):
    changes = {'ncomp': ncomp}
    if isinstance(kernel, PCA):
        # the rank is already resolved
        changes['cevr'] = None
    return replace(kernel, **changes)


@dataclass(frozen=True)
class GreeDS(ADIAlgorithm):
    """
    Greedy disk subtraction [PAI18]_ [PAI21]_.

    Iterative version of a low-rank reduction which limits the
    self-subtraction of extended signals. The rank of the ``kernel`` is
    increased one by one, from 1 to its maximum rank. At each step the current
    estimate of the signal (de-rotated and combined residuals) is rotated back
    into a cube, clipped below ``threshold``, and subtracted from the data. The
    result is the reference of the next, higher rank, fit.

    The maximum rank is found once, with the rank policy of the ``kernel``
    applied to the original reference (e.g. ``PCA(ncomp=None)`` goes up to the
    number of frames).

    For RDI, the basis of every step is fit on the reference cube, the weights
    are the projections of the data minus the current estimate, and the final
    weights are re-projected against the data.

    Parameters
    ----------
    kernel : PCA or NMF, optional
        Linear algorithm whose rank is increased.
    threshold : float, optional
        Minimum value of the signal estimate rotated back into a cube.

    """

    kernel: ADIAlgorithm = field(default_factory=PCA)
    threshold: float = 0.0

    def __post_init__(self):
        if not isinstance(self.kernel, (PCA, NMF)):
            msg = 'GreeDS needs a PCA or NMF kernel, got {}'
            raise UnsupportedKernel(msg.format(type(self.kernel).__name__))

    def fit(self, matrix, ref=None, **kwargs):
        raise TypeError('GreeDS needs the frames of the cube, use a cube '
                        'or an AnnulusView, not a matrix')

    def fit_geometry(self, cube, ref=None, angle_list=None, full_output=False,
                     collapse='median', nproc=1, verbose=False, **kwargs):
        """
        Fit GreeDS to a cube or an annular view.

        Parameters
        ----------
        cube : numpy ndarray, AnnulusView or MultiAnnulusView
            ADI cube, or annular view of an ADI cube. The annuli of a
            ``MultiAnnulusView`` are reduced independently.
        ref : same type as ``cube`` or None, optional
            Reference data for RDI.
        angle_list : numpy ndarray, 1d
            Parallactic angles, one per frame.
        full_output : bool, optional
            If True the ranks and the signal estimates of the iterations are
            returned too (not for a ``MultiAnnulusView``).
        collapse : str, optional
            Combination of the de-rotated residuals at each step, see
            ``cube_collapse``.
        nproc : int, optional
            Number of processes for the rotations.
        verbose : bool, optional
            If True a progress bar over the ranks is shown.
        **kwargs : dict
            Rotation options, see ``RotOptions``. Other keys are ignored.

        Returns
        -------
        design : ADIDesign or AnnularDesigns
            Design of the last (highest rank) step.
        ranks : list of int
            [full_output=True] Rank of each step, ``1`` to the maximum rank.
        frames : list of numpy ndarray
            [full_output=True] Signal estimate after each step.

        """
        if angle_list is None:
            raise ValueError('`angle_list` is required by GreeDS')

        if isinstance(cube, MultiAnnulusView):
            if full_output:
                raise ValueError('`full_output` is not available for a '
                                 'MultiAnnulusView')
            return _fit_annuli([self] * cube.n_annuli, cube, ref,
                               angle_list=angle_list, collapse=collapse,
                               nproc=nproc, verbose=verbose, **kwargs)

        if ref is cube:
            ref = None
        if isinstance(cube, AnnulusView):
            if ref is not None and not cube.same_geometry(ref):
                raise GeometryMismatch('The reference must be an AnnulusView '
                                       'with the same pixels as the target')
            n_frames = cube.parent.shape[0]
            data = cube()
            ref_mat = None if ref is None else ref()
            _check_ref_matrix(data, ref_mat)

            def to_matrix(array):
                return cube.similar(array)()

            def to_cube(matrix):
                return cube.inverse(matrix)

        elif isinstance(cube, np.ndarray):
            check_array(cube, 3, msg='cube')
            if ref is not None:
                if not isinstance(ref, np.ndarray) or ref.ndim != 3:
                    raise GeometryMismatch('The reference must be a 3d array '
                                           'like the target')
                if ref.shape[1:] != cube.shape[1:]:
                    msg = 'Target frames are {}, reference frames are {}'
                    raise ShapeMismatch(msg.format(cube.shape[1:],
                                                   ref.shape[1:]))
            n_frames = cube.shape[0]
            y, x = cube.shape[1:]
            data = prepare_matrix(cube, verbose=False)
            ref_mat = None if ref is None else prepare_matrix(ref,
                                                              verbose=False)

            def to_matrix(array):
                return prepare_matrix(array, verbose=False)

            def to_cube(matrix):
                return reshape_matrix(matrix, y, x)

        else:
            raise TypeError('Data of type {} is not supported by GreeDS'.format(
                type(cube)))

        angle_list = np.asarray(angle_list, dtype=float)
        if angle_list.shape != (n_frames,):
            msg = 'Got {} angles for {} frames'
            raise ShapeMismatch(msg.format(angle_list.size, n_frames))

        rot_options, _ = separate_kwargs_dict(kwargs, RotOptions)
        rdi = ref_mat is not None

        max_rank = self.kernel.get_ncomp(data if ref_mat is None else ref_mat)

        def estimate(design):
            residuals = to_cube(data - design.reconstruct())
            residuals = cube_derotate(residuals, angle_list, nproc=nproc,
                                      **rot_options)
            return cube_collapse(residuals, mode=collapse)

        kernel = _with_rank(self.kernel, 1)
        design = kernel.fit(data, ref_mat)
        frame = estimate(design)
        ranks = [1]
        frames = [frame]

        for n in Progressbar(range(2, max_rank + 1), desc='GreeDS rank',
                             total=max_rank - 1, verbose=verbose):
            synthetic = to_matrix(expand_rotate(frame, angle_list,
                                                self.threshold, nproc=nproc,
                                                **rot_options))
            kernel = _with_rank(self.kernel, n)
            if rdi:
                design = kernel.fit(data - synthetic, ref_mat)
            else:
                design = kernel.fit(data, data - synthetic)
            frame = estimate(design)
            ranks.append(n)
            frames.append(frame)

        if rdi:
            # weights of the target itself on the last basis
            design = kernel.fit(data, ref_mat)

        if full_output:
            return design, ranks, frames
        return design
