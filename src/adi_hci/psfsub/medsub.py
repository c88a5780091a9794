#! /usr/bin/env python
"""
Implementation of the classic (median) subtraction algorithm for model PSF
subtraction in ADI sequences, originally proposed in [MAR06]_.

.. [MAR06]
   | Marois et al. 2006
   | **Angular Differential Imaging: A Powerful High-Contrast Imaging
     Technique**
   | *The Astrophysical Journal, Volume 641, Issue 1, pp. 556-564*
   | `https://arxiv.org/abs/astro-ph/0512335
     <https://arxiv.org/abs/astro-ph/0512335>`_

"""

__author__ = "C. A. Gomez Gonzalez, T. Bédrine, V. Christiaens"
__all__ = ["Classic", "Median"]

from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from .design import ClassicDesign
from .interface import ADIAlgorithm
from ..config.paramenum import Collapse
from ..preproc import cube_collapse


@dataclass(frozen=True)
class Classic(ADIAlgorithm):
    """
    Classic ADI: the model of the speckles is a single frame combining the
    reference frames, subtracted from every target frame.

    Parameters
    ----------
    method : {'median', 'mean', 'sum', 'max', 'trimmean', 'absmean'} or callable
        Temporal combination of the reference frames, see ``cube_collapse``.
        A callable must accept an ``axis`` keyword, like ``numpy.median``.

    """

    method: Union[Collapse, str, Callable] = Collapse.MEDIAN

    def fit(self, matrix, ref=None, **kwargs):
        if ref is None:
            ref = matrix
        if callable(self.method):
            frame = self.method(ref, axis=0)
        else:
            frame = cube_collapse(ref[:, np.newaxis], mode=self.method)[0]
        return ClassicDesign(matrix.shape[0], np.asarray(frame))


@dataclass(frozen=True)
class Median(Classic):
    """Median subtraction, ``Classic`` with the temporal median."""

    method: Union[Collapse, str, Callable] = Collapse.MEDIAN
