#! /usr/bin/env python
# -*- coding: utf-8 -*-

"""
Module with utilities: progress bars, input checks and multiprocessing.
"""

__author__ = 'Carlos Alberto Gomez Gonzalez, Ralf Farkas'
__all__ = ['Progressbar',
           'check_array',
           'pool_map',
           'iterable',
           'sep']

import sys
import itertools as itt
import multiprocessing

import numpy as np

sep = '―' * 80


class Progressbar(object):
    """ Show progress bars. Supports multiple backends.

    Examples
    --------
    .. code:: python

        from adi_hci.config import Progressbar
        Progressbar.backend = "pyprind"

        for i in Progressbar(range(50)):
            sleep(0.02)

        # Progressbar can be disabled globally using
        Progressbar.backend = "hide"

        # or locally using the ``verbose`` keyword:
        Progressbar(iterable, verbose=False)

    """
    backend = "tqdm"

    def __new__(cls, iterable=None, desc=None, total=None, leave=True,
                backend=None, verbose=True):
        if backend is None:
            backend = Progressbar.backend

        if not verbose:
            backend = "hide"

        if backend == "tqdm":
            from tqdm import tqdm
            return tqdm(iterable=iterable, desc=desc, total=total, leave=leave,
                        ascii=True, ncols=80, file=sys.stdout,
                        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed"
                                   "}<{remaining}{postfix}]")
        elif backend == "pyprind":
            from pyprind import ProgBar, prog_bar
            ProgBar._adjust_width = lambda self: None  # keep constant width
            if iterable is None:
                return ProgBar(total, title=desc, stream=1)
            else:
                return prog_bar(iterable, title=desc, stream=1,
                                iterations=total)
        elif backend == "hide":
            return NoProgressbar(iterable=iterable)
        else:
            raise NotImplementedError("unknown backend")

    @staticmethod
    def set(b):
        Progressbar.backend = b


class NoProgressbar(object):
    """ Wraps an ``iterable`` to behave like ``Progressbar``, but without
    producing output.
    """
    def __init__(self, iterable=None):
        self.iterable = iterable

    def __iter__(self):
        return self.iterable.__iter__()

    def __next__(self):
        return self.iterable.__next__()

    def __getattr__(self, key):
        return getattr(self.iterable, key)

    def update(self):
        pass


def check_array(input_array, dim, msg=None):
    """
    Check the dimensionality of an input array.

    Parameters
    ----------
    input_array : numpy ndarray
        Input data. Lists and tuples are accepted when ``dim`` is 1.
    dim : int or tuple of int
        Accepted number(s) of dimensions: 1, 2, 3, (1, 2) or (2, 3).
    msg : str, optional
        Name of the array, used in the error message.

    Raises
    ------
    TypeError
        If ``input_array`` is not an array with an accepted dimensionality.
    ValueError
        If ``dim`` is not one of the values above.

    """
    if dim not in (1, 2, 3, (1, 2), (2, 3)):
        raise ValueError("`dim` must be: 1, 2, 3, (1,2) or (2,3)")
    dims = dim if isinstance(dim, tuple) else (dim,)
    name = 'Input array' if msg is None else '`{}`'.format(msg)

    if dims == (1,) and isinstance(input_array, (list, tuple)):
        input_array = np.asarray(input_array)
    if not isinstance(input_array, np.ndarray) or input_array.ndim not in dims:
        expected = ' or '.join(str(d) for d in dims)
        raise TypeError('{} must be a {}d numpy ndarray'.format(name,
                                                                expected))


def eval_func_tuple(f_args):
    """ Takes a tuple of a function and args, evaluates and returns result"""
    return f_args[0](*f_args[1:])


class FixedObj(object):
    def __init__(self, v):
        self.v = v


def iterable(v):
    """ Helper function for ``pool_map``: prevents the argument from being
    wrapped in ``itertools.repeat()``.

    Examples
    --------
    .. code-block:: python

        # rotate every frame of a cube by its own angle, with the same
        # interpolation for all of them:
        pool_map(3, frame_rotate, iterable(cube), iterable(angles), 'skimage')

        # this results in calling
        #
        # frame_rotate(cube[0], angles[0], 'skimage')
        # frame_rotate(cube[1], angles[1], 'skimage')
        # ...
    """
    return FixedObj(v)


def pool_map(nproc, fkt, *args, **kwargs):
    """
    Abstraction layer for multiprocessing. When ``nproc=1``, the builtin
    ``map()`` is used. For ``nproc>1`` a ``multiprocessing.Pool`` is created.

    The results are returned in the order of the iterated arguments, whatever
    the scheduling of the workers.

    Parameters
    ----------
    nproc : int
        Number of processes to use.
    fkt : callable
        The function to be called with each ``*args``
    *args : function arguments
        Arguments passed to ``fkt`` By default, ``itertools.repeat`` is applied
        on all the arguments, except when you wrap the argument in
        ``iterable()``.
    msg : str or None, optional
        Description to be displayed.
    progressbar_single : bool, optional
        Display a progress bar when single-processing is used. Defaults to
        ``False``.
    verbose : bool, optional
        Show more output. Also disables the progress bar when set to ``False``.

    Returns
    -------
    res : list
        A list with the results.

    """
    msg = kwargs.get("msg", None)
    verbose = kwargs.get("verbose", True)
    progressbar_single = kwargs.get("progressbar_single", False)

    args_r = [a.v if isinstance(a, FixedObj) else itt.repeat(a) for a in args]
    z = zip(itt.repeat(fkt), *args_r)

    if nproc is None or nproc == 1:
        if progressbar_single:
            total = len([a.v for a in args if isinstance(a, FixedObj)][0])
            z = Progressbar(z, desc=msg, verbose=verbose, total=total)
        res = list(map(eval_func_tuple, z))
    else:
        if verbose and msg is not None:
            print("{} with {} processes".format(msg, nproc))
        ctx = multiprocessing.get_context('fork')
        with ctx.Pool(processes=nproc) as pool:
            res = pool.map(eval_func_tuple, z)

    return res
