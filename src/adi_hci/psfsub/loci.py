#! /usr/bin/env python

"""
Module with a least-squares (LOCI style) algorithm for ADI post-processing.

.. [LAF07]
   | Lafrenière et al. 2007
   | **A New Algorithm for Point-Spread Function Subtraction in High-Contrast
     Imaging: A Demonstration with Angular Differential Imaging**
   | *The Astrophysical Journal, Volume 660, Issue 1, pp. 770-780*
   | `https://arxiv.org/abs/astro-ph/0702697
     <https://arxiv.org/abs/astro-ph/0702697>`_

"""

__author__ = 'Carlos Alberto Gomez Gonzalez'
__all__ = ['LOCI',
           'loci_distances_mask']

from dataclasses import dataclass
from enum import Enum

import numpy as np
import scipy as sp
import scipy.linalg
import scipy.optimize
from sklearn.metrics import pairwise_distances

from .design import LinearDesign
from .interface import ADIAlgorithm
from ..config.paramenum import Metric


@dataclass(frozen=True)
class LOCI(ADIAlgorithm):
    """
    Locally optimized combination of images [LAF07]_.

    Every target frame is modeled as the least-squares combination of the
    reference frames (solving ``ref.T x = b`` for the vector of coefficients
    ``x`` that minimizes the Euclidean 2-norm ``|| b - ref.T x ||^2``).

    Without a selection of the reference frames, each frame would be its own
    best model. LOCI is meant to be wrapped in a ``Framewise`` algorithm, which
    removes from the reference of each frame the frames that have not rotated
    enough and, when ``dist_threshold`` is set, the frames that are too far
    from it (see ``loci_distances_mask``).

    Parameters
    ----------
    dist_threshold : float or None, optional
        [Framewise] Percentile of the pairwise distances between frames above
        which the reference frames are discarded. None keeps them all.
    metric : str, optional
        [Framewise] Distance metric ('cityblock', 'cosine', 'euclidean', 'l1',
        'l2', 'manhattan', 'correlation'), used by
        ``sklearn.metrics.pairwise_distances``.
    tol : float, optional
        Cutoff for the small singular values of the reference, passed as
        ``cond`` to ``scipy.linalg.lstsq``.
    solver : {'lstsq', 'nnls'}, str optional
        Least-squares solver: ``scipy.linalg.lstsq`` or non-negative least
        squares (``scipy.optimize.nnls``, the coefficients are positive).

    """

    dist_threshold: float = None
    metric: Enum = Metric.CITYBLOCK
    tol: float = 1e-2
    solver: str = 'lstsq'

    def fit(self, matrix, ref=None, **kwargs):
        if ref is None:
            ref = matrix
        if self.solver == 'lstsq':
            coef = sp.linalg.lstsq(ref.T, matrix.T, cond=self.tol)[0]
            coeffs = coef.T
        elif self.solver == 'nnls':
            coeffs = np.array([sp.optimize.nnls(ref.T, b)[0] for b in matrix])
        else:
            raise ValueError("`solver` not recognized")
        return LinearDesign(ref, coeffs)


def loci_distances_mask(matrix, dist_threshold=None, metric='cityblock'):
    """
    Mask of the pairs of frames close enough to be used as reference of each
    other.

    Parameters
    ----------
    matrix : numpy ndarray, 2d
        ``(n_frames, n_pixels)`` matrix.
    dist_threshold : float or None, optional
        Percentile (0-100) of all the pairwise distances. Pairs with a larger
        distance are discarded, as well as pairs of identical frames. None
        keeps every pair.
    metric : str, optional
        Distance metric, see ``sklearn.metrics.pairwise_distances``.

    Returns
    -------
    mask : numpy ndarray, 2d
        ``(n_frames, n_frames)`` boolean array, True for the pairs kept.

    """
    n = matrix.shape[0]
    if dist_threshold is None:
        return np.ones((n, n), dtype=bool)

    metric = getattr(metric, 'value', metric)
    distances = pairwise_distances(matrix, metric=metric)
    threshold = np.percentile(distances, dist_threshold)
    return (distances > 0) & (distances <= threshold)
