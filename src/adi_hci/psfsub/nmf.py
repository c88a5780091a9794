#! /usr/bin/env python
"""
Module with PSF reference approximation using Non-negative matrix factorization
for ADI and RDI data, in full frames or annuli.

.. [LEE99]
   | Lee & Seung 1999
   | **Learning the parts of objects by non-negative matrix factorization**
   | *Nature, Volume 401, Issue 6755, pp. 788-791*
   | `https://www.nature.com/articles/44565
     <https://www.nature.com/articles/44565>`_

.. [REN18]
   | Ren et al. 2018
   | **Non-negative Matrix Factorization: Robust Extraction of Extended
     Structures**
   | *The Astrophysical Journal, Volume 852, Issue 2, p. 104*
   | `https://arxiv.org/abs/1712.10317
     <https://arxiv.org/abs/1712.10317>`_

"""

__author__ = 'Valentin Christiaens, Carlos Alberto Gomez Gonzalez'
__all__ = ['NMF']

import warnings
from dataclasses import dataclass
from enum import Enum

import numpy as np
from sklearn import decomposition

from .design import NMFDesign
from .interface import ADIAlgorithm
from ..config.errors import RankExceeded, NonNegativityViolation
from ..config.paramenum import Initsvd, NmfSolver


@dataclass(frozen=True)
class NMF(ADIAlgorithm):
    """
    Non-negative matrix factorization [LEE99]_ [REN18]_, solved with
    ``sklearn.decomposition.NMF``.

    The factorization is fit on the reference matrix, whose components are the
    basis, and the target frames are projected on them (``transform``).

    The solver needs non-negative inputs. When the target or the reference hold
    negative values, a ``NonNegativityViolation`` warning is emitted and both
    are shifted by their common minimum. The shift is kept in the design and
    added back to the reconstruction, so the residuals are those of the shifted
    data. Beware that this shift changes the scale of any aperture photometry
    done on the residuals.

    Parameters
    ----------
    ncomp : int or None, optional
        Number of components. It cannot exceed the number of reference frames
        (``RankExceeded`` otherwise). None uses every reference frame (or every
        pixel, if there are fewer pixels than frames).
    max_iter : int, optional
        Maximum number of iterations of the solver.
    init_svd : {'nndsvd', 'nndsvda', 'random'}, str optional
        Initialization of the factorization, see ``Initsvd``.
    solver : {'cd', 'mu'}, str optional
        Numerical solver, see ``NmfSolver``.
    tol : float, optional
        Tolerance of the stopping condition.
    random_state : int or None, optional
        Seed of the initialization.

    """

    ncomp: int = None
    max_iter: int = 1000
    init_svd: Enum = Initsvd.NNDSVD
    solver: Enum = NmfSolver.CD
    tol: float = 1e-4
    random_state: int = None

    def get_ncomp(self, ref, verbose=False):
        """Number of components used with the reference matrix ``ref``."""
        if self.ncomp is None:
            return min(ref.shape)
        if isinstance(self.ncomp, bool) or not isinstance(self.ncomp,
                                                          (int, np.integer)):
            raise TypeError('`ncomp` must be an int or None')
        if self.ncomp < 1:
            raise ValueError('`ncomp` must be strictly positive')
        if self.ncomp > ref.shape[0]:
            msg = '{} components requested but the reference has only {} '
            msg += 'frames'
            raise RankExceeded(msg.format(self.ncomp, ref.shape[0]))
        return int(self.ncomp)

    def fit(self, matrix, ref=None, verbose=False, **kwargs):
        if ref is None:
            ref = matrix
        ncomp = self.get_ncomp(ref)

        offset = min(np.amin(matrix), np.amin(ref))
        if offset < 0:
            msg = 'Negative values found, the data is shifted by {:.3g} '
            msg += 'before the factorization'
            warnings.warn(msg.format(-offset), NonNegativityViolation)
            matrix = matrix - offset
            ref = ref - offset
        else:
            offset = 0

        mod = decomposition.NMF(n_components=ncomp,
                                init=getattr(self.init_svd, 'value',
                                             self.init_svd),
                                solver=getattr(self.solver, 'value',
                                               self.solver),
                                max_iter=self.max_iter, tol=self.tol,
                                random_state=self.random_state)
        # H [ncomp, n_pixels]: non-negative components of the reference
        H = mod.fit(ref).components_
        # W [n_frames, ncomp]: coefficients of the target frames
        W = mod.transform(matrix)
        if verbose:
            print('Done NMF with sklearn.NMF ({} iterations)'.format(
                mod.n_iter_))
        return NMFDesign(H, W, offset)
