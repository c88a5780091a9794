#! /usr/bin/env python
"""
Designs: what a post-processing algorithm keeps after being fit to a matrix of
vectorized frames, and from which the model PSF (reconstruction) is built.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Thomas Bédrine'
__all__ = ['ADIDesign',
           'LinearDesign',
           'NMFDesign',
           'ClassicDesign',
           'AnnularDesigns']

from dataclasses import dataclass

import numpy as np


class ADIDesign(object):
    """Base class of the designs."""

    def reconstruct(self):
        """Return the reconstructed ``(n_frames, n_pixels)`` matrix."""
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class LinearDesign(ADIDesign):
    """
    Linear design: the reconstruction is ``coeffs @ basis``.

    Parameters
    ----------
    basis : numpy ndarray, 2d
        ``(ncomp, n_pixels)`` basis (principal components, NMF components or
        reference frames).
    coeffs : numpy ndarray, 2d
        ``(n_frames, ncomp)`` weights of each frame on the basis.
    """

    basis: np.ndarray
    coeffs: np.ndarray

    def __iter__(self):
        return iter((self.basis, self.coeffs))

    @property
    def ncomp(self):
        return self.basis.shape[0]

    def reconstruct(self):
        return np.dot(self.coeffs, self.basis)


@dataclass(frozen=True, eq=False)
class NMFDesign(LinearDesign):
    """
    Linear design of a non-negative factorization.

    ``offset`` is the global shift that was applied to the data to make it
    non-negative; it is added back to the reconstruction.
    """

    offset: float = 0

    def reconstruct(self):
        return np.dot(self.coeffs, self.basis) + self.offset


@dataclass(frozen=True, eq=False)
class ClassicDesign(ADIDesign):
    """Single model frame (vectorized) repeated for each of the ``n`` frames."""

    n: int
    frame: np.ndarray

    def reconstruct(self):
        return np.tile(self.frame, (self.n, 1))


class AnnularDesigns(list):
    """Designs of concentric annuli, ordered by increasing radius."""

    def reconstruct(self):
        return [des.reconstruct() for des in self]
