#! /usr/bin/env python
"""
Module with the PCA algorithm for ADI and RDI cubes.

.. [AMA12]
   | Amara & Quanz 2012
   | **PYNPOINT: an image processing package for finding exoplanets**
   | *MNRAS, Volume 427, Issue 1, pp. 948-955*
   | `https://arxiv.org/abs/1207.6637
     <https://arxiv.org/abs/1207.6637>`_

.. [SOU12]
   | Soummer, Pueyo & Larkin 2012
   | **Detection and Characterization of Exoplanets and Disks Using Projections
     on Karhunen-Loève Eigenimages**
   | *The Astrophysical Journal Letters, Volume 755, Issue 2, p. 28*
   | `https://arxiv.org/abs/1207.4197
     <https://arxiv.org/abs/1207.4197>`_

"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Valentin Christiaens, Thomas Bédrine'
__all__ = ['PCA']

from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from .design import LinearDesign
from .interface import ADIAlgorithm
from .svd import svd_wrapper, get_ncomp_cevr, get_ncomp_noise
from ..config.errors import RankExceeded
from ..config.paramenum import SvdMode, AutoRankMode


@dataclass(frozen=True)
class PCA(ADIAlgorithm):
    """
    Principal component analysis [AMA12]_ [SOU12]_.

    The reference matrix is decomposed with an SVD, the target frames are
    projected on the first ``ncomp`` right singular vectors and the
    reconstruction is ``weights @ basis``.

    Parameters
    ----------
    ncomp : int, {'noise', 'cevr'} or None, optional
        Number of principal components.

        * int: it cannot exceed the number of reference frames
          (``RankExceeded`` otherwise). With ``cevr`` also set, the rank is the
          smallest of ``ncomp`` and the rank reaching ``cevr``.
        * 'cevr': smallest rank whose cumulative explained variance ratio
          reaches ``cevr`` (0.9 if not set), see ``get_ncomp_cevr``.
        * 'noise': rank after which the residual noise stops decreasing, see
          ``get_ncomp_noise``.
        * None: every reference frame (or every pixel, if there are fewer
          pixels than frames).
    svd_mode : {'lapack', 'arpack', 'eigen', 'randsvd'}, str optional
        Switch for the SVD method/library to be used, see ``svd_wrapper``.
    cevr : float or None, optional
        Target cumulative explained variance ratio, in ``(0, 1]``.
    noise_error : float, optional
        [ncomp='noise'] Tolerance on the decay of the residual noise.
    collapse_noise : bool, optional
        [ncomp='noise'] If True the noise is measured on the temporal median of
        the residuals.
    random_state : int or None, optional
        [svd_mode='randsvd'] Seed of the randomized SVD.

    """

    ncomp: Union[int, str, None] = None
    svd_mode: Enum = SvdMode.LAPACK
    cevr: float = None
    noise_error: float = 1e-3
    collapse_noise: bool = False
    random_state: int = None

    def get_ncomp(self, ref, verbose=False):
        """
        Number of principal components used with the reference matrix ``ref``.
        """
        n_ref = ref.shape[0]
        ncomp = self.ncomp
        if ncomp is None:
            return min(ref.shape)

        if isinstance(ncomp, str):
            mode = getattr(ncomp, 'value', ncomp)
            if mode == AutoRankMode.CEVR.value:
                cevr = 0.9 if self.cevr is None else self.cevr
                return get_ncomp_cevr(ref, cevr, verbose=verbose)
            elif mode == AutoRankMode.NOISE.value:
                return get_ncomp_noise(ref, self.noise_error,
                                       self.collapse_noise, self.svd_mode,
                                       verbose=verbose)
            raise ValueError('`ncomp` mode {} not recognized'.format(ncomp))

        if isinstance(ncomp, bool) or not isinstance(ncomp, (int, np.integer)):
            raise TypeError('`ncomp` must be an int, a str or None')
        if ncomp < 1:
            raise ValueError('`ncomp` must be strictly positive')
        if ncomp > n_ref:
            msg = '{} PCs requested but the reference has only {} frames'
            raise RankExceeded(msg.format(ncomp, n_ref))

        if self.cevr is not None:
            ncomp = min(ncomp, get_ncomp_cevr(ref, self.cevr, verbose=verbose))
        return int(ncomp)

    def fit(self, matrix, ref=None, verbose=False, **kwargs):
        if ref is None:
            ref = matrix
        ncomp = self.get_ncomp(ref, verbose=verbose)
        V = svd_wrapper(ref, self.svd_mode, ncomp, verbose=verbose,
                        random_state=self.random_state)
        weights = np.dot(matrix, V.T)
        return LinearDesign(V, weights)
