#! /usr/bin/env python
"""
Exceptions and warnings raised by the ADI post-processing routines.

Structural errors subclass the builtin exception raised for the same kind of
misuse elsewhere in the package, so that ``except TypeError`` or
``except RuntimeError`` clauses keep working.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Ralf Farkas'
__all__ = ['GeometryMismatch',
           'ShapeMismatch',
           'RankExceeded',
           'UnsupportedKernel',
           'DegenerateThreshold',
           'NonNegativityViolation']


class GeometryMismatch(TypeError):
    """Target and reference geometries differ in kind or bounds."""


class ShapeMismatch(ValueError):
    """Pixel, frame or angle counts of target and reference disagree."""


class RankExceeded(RuntimeError):
    """Requested number of components larger than the reference allows."""


class UnsupportedKernel(TypeError):
    """Wrapper algorithm built around a kernel it cannot iterate on."""


class DegenerateThreshold(UserWarning):
    """Parallactic angle threshold clamped to the observed rotation range."""


class NonNegativityViolation(UserWarning):
    """Negative values passed to a non-negative factorization."""
