#! /usr/bin/env python
"""
Frame by frame reduction of ADI sequences.

The reference library of each frame is built from the other frames of the
sequence, discarding the ones where a companion would not have rotated enough
(parallactic angle threshold, see ``compute_pa_thresh`` and
``find_indices_adi``). The wrapped algorithm is then fit to that single frame.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Valentin Christiaens'
__all__ = ['Framewise']

from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np

from .interface import ADIAlgorithm
from .loci import LOCI, loci_distances_mask
from ..config import Progressbar, pool_map, iterable, check_array
from ..config.errors import GeometryMismatch, ShapeMismatch, UnsupportedKernel
from ..preproc import compute_pa_thresh, find_indices_adi
from ..var import (prepare_matrix, reshape_matrix, AnnulusView,
                   MultiAnnulusView)


def _reconstruct_frame(kernel, matrix, angle_list, pa_thr, limit, mask, i,
                       kwargs):
    """Reconstruction of row ``i`` of ``matrix`` from its reference frames."""
    ind = find_indices_adi(angle_list, i, pa_thr, limit)
    if mask is not None:
        ind = ind[mask[i, ind]]
    if ind.size == 0:
        msg = "No frames left in the reference set. Try increasing "
        msg += "`dist_threshold` or decreasing `delta_rot`."
        raise RuntimeError(msg)

    design = kernel.fit(matrix[i:i + 1], matrix[ind],
                        angle_list=angle_list[ind], **kwargs)
    return design.reconstruct()[0]


def _normalize_delta_rot(delta_rot, n_annuli):
    if isinstance(delta_rot, tuple):
        if len(delta_rot) != 2:
            raise TypeError('`delta_rot` tuple must have 2 values')
        return np.linspace(delta_rot[0], delta_rot[1], n_annuli)
    elif isinstance(delta_rot, list):
        if len(delta_rot) != n_annuli:
            msg = 'Got {} `delta_rot` values for {} annuli'
            raise ValueError(msg.format(len(delta_rot), n_annuli))
        return delta_rot
    return [delta_rot] * n_annuli


@dataclass(frozen=True)
class Framewise(ADIAlgorithm):
    """
    Wrap an algorithm so that the data is processed frame by frame.

    For every frame, a reference library is made of the other frames of the
    data. The frames which have not rotated at least ``delta_rot`` FWHM (arc
    length at radius ``r``) with respect to the current one are discarded. The
    number of frames kept can be limited with ``limit``, in which case the
    frames closest to the excluded ones are used.

    ``Framewise`` algorithms do not implement ``fit`` and do not support RDI.
    Frames are processed in parallel with ``nproc``, and for a
    ``LOCI`` kernel the references are further pruned with
    ``loci_distances_mask``.

    Parameters
    ----------
    kernel : ADIAlgorithm or list of ADIAlgorithm
        Algorithm fit to each frame. A list (one algorithm per annulus) can be
        used with a ``MultiAnnulusView``.
    limit : int or None, optional
        Maximum number of reference frames per frame. None for no limit.
    delta_rot : float, tuple, list or None, optional
        Parallactic angle threshold, expressed in FWHM. None for no angular
        filtering. With a ``MultiAnnulusView`` it can be a list (one value per
        annulus) or a tuple of two values, the threshold then grows linearly
        from the first value to the last one across the annuli.

    Examples
    --------
    .. code:: python

        alg = Framewise(PCA(10), delta_rot=1)
        frame = alg(cube, angles, fwhm=4, r=20)

        mav = MultiAnnulusView(cube, 5, inner=5)
        frame_ann = Framewise(PCA(10), delta_rot=(0.1, 1))(mav, angles)

    """

    kernel: Union[ADIAlgorithm, List[ADIAlgorithm]]
    limit: int = None
    delta_rot: Union[float, Tuple[float, float], List[float]] = None

    def __post_init__(self):
        from ..greedy import GreeDS

        kernels = self.kernel
        if not isinstance(kernels, (list, tuple)):
            kernels = [kernels]
        for kernel in kernels:
            if isinstance(kernel, (Framewise, GreeDS)):
                msg = '{} cannot be used as the kernel of Framewise'
                raise UnsupportedKernel(msg.format(type(kernel).__name__))
            if not isinstance(kernel, ADIAlgorithm):
                raise TypeError('`kernel` must be an ADIAlgorithm')

    def fit(self, matrix, ref=None, **kwargs):
        raise NotImplementedError('Framewise algorithms do not implement `fit`'
                                  ', use `reconstruct` or `subtract`')

    def _pa_threshold(self, angle_list, delta_rot, r, fwhm, verbose):
        if delta_rot is None:
            return None
        if r is None or fwhm is None:
            raise ValueError('`r` and `fwhm` are required to compute the '
                             'parallactic angle threshold')
        return compute_pa_thresh(angle_list, r, fwhm, delta_rot,
                                 verbose=verbose)

    def _reconstruct_matrix(self, kernel, matrix, angle_list, pa_thr, nproc,
                            kwargs):
        mask = None
        if isinstance(kernel, LOCI):
            mask = loci_distances_mask(matrix, kernel.dist_threshold,
                                       kernel.metric)

        n_frames = matrix.shape[0]
        res = pool_map(nproc, _reconstruct_frame, kernel, matrix, angle_list,
                       pa_thr, self.limit, mask, iterable(range(n_frames)),
                       kwargs)
        recon = np.empty(matrix.shape, dtype=float)
        for i, row in enumerate(res):
            recon[i] = row
        return recon

    def reconstruct(self, cube, angle_list=None, ref=None, fwhm=None, r=None,
                    nproc=1, verbose=False, **kwargs):
        """
        Reconstruct the speckles of ``cube``, frame by frame.

        Parameters
        ----------
        cube : numpy ndarray, AnnulusView or MultiAnnulusView
            ADI cube (or matrix of vectorized frames), or annular view.
        angle_list : numpy ndarray, 1d
            Parallactic angles, one per frame.
        ref : None
            RDI is not supported, only None (or ``cube``) is accepted.
        fwhm : float, optional
            FWHM in pixels. Defaults to the width of the annuli of a
            ``MultiAnnulusView``. Required for other data when ``delta_rot``
            is set.
        r : float, optional
            Radius in pixels at which the threshold is computed. Defaults to
            the mid radius of an ``AnnulusView``. Required for full frames when
            ``delta_rot`` is set. The centers of the annuli are used for a
            ``MultiAnnulusView``.
        nproc : int, optional
            Number of processes used over the frames.
        verbose : bool, optional
            If True the thresholds and a progress bar are shown.
        **kwargs : dict
            Passed to the ``fit`` method of the kernel.

        Returns
        -------
        reconstruction : numpy ndarray
            Reconstructed cube (or matrix), in the geometry of ``cube``.

        """
        if ref is not None and ref is not cube:
            raise ValueError('Framewise algorithms do not support RDI')
        if angle_list is None:
            raise ValueError('`angle_list` is required by Framewise algorithms')
        angle_list = np.asarray(angle_list, dtype=float)
        check_array(angle_list, 1, msg='angle_list')

        is_multi = isinstance(cube, MultiAnnulusView)
        if isinstance(self.kernel, (list, tuple)) and not is_multi:
            raise GeometryMismatch('A list of kernels can only be used with a '
                                   'MultiAnnulusView')
        if isinstance(self.delta_rot, (list, tuple)) and not is_multi:
            raise TypeError('`delta_rot` can only be a list or tuple with a '
                            'MultiAnnulusView')

        if isinstance(cube, np.ndarray):
            check_array(cube, (2, 3), msg='cube')
            matrix = cube if cube.ndim == 2 else prepare_matrix(cube,
                                                                verbose=False)
        elif isinstance(cube, AnnulusView):
            matrix = cube()
            if r is None:
                r = cube.radius
        elif is_multi:
            matrix = None
        else:
            raise TypeError('Data of type {} is not supported'.format(
                type(cube)))

        n_frames = cube.parent.shape[0] if matrix is None else matrix.shape[0]
        if angle_list.shape[0] != n_frames:
            msg = 'Got {} angles for {} frames'
            raise ShapeMismatch(msg.format(angle_list.shape[0], n_frames))

        if matrix is not None:
            pa_thr = self._pa_threshold(angle_list, self.delta_rot, r, fwhm,
                                        verbose)
            recon = self._reconstruct_matrix(self.kernel, matrix, angle_list,
                                             pa_thr, nproc, kwargs)
            if isinstance(cube, AnnulusView):
                return cube.inverse(recon)
            if cube.ndim == 2:
                return recon
            return reshape_matrix(recon, cube.shape[1], cube.shape[2])

        n_annuli = cube.n_annuli
        if fwhm is None:
            fwhm = cube.width
        kernels = self.kernel
        if isinstance(kernels, (list, tuple)):
            if len(kernels) != n_annuli:
                msg = 'Got {} kernels for {} annuli'
                raise ValueError(msg.format(len(kernels), n_annuli))
        else:
            kernels = [kernels] * n_annuli
        delta_rots = _normalize_delta_rot(self.delta_rot, n_annuli)

        recons = []
        for ann in Progressbar(range(n_annuli), desc='annulus',
                               verbose=verbose):
            pa_thr = self._pa_threshold(angle_list, delta_rots[ann],
                                        cube.radii[ann], fwhm, verbose)
            matrix = cube.annulus(ann)()
            recons.append(self._reconstruct_matrix(kernels[ann], matrix,
                                                   angle_list, pa_thr, nproc,
                                                   kwargs))
        return cube.inverse(recons)
