#! /usr/bin/env python
"""
Module with functions for computing SVDs and for choosing the number of
principal components.

.. [HAL09]
   | Halko et al. 2009
   | **Finding structure with randomness: Stochastic algorithms for
     constructing approximate matrix decompositions**
   | *arXiv e-prints*
   | `https://arxiv.org/abs/0909.4061
     <https://arxiv.org/abs/0909.4061>`_

"""

__author__ = 'Carlos Alberto Gomez Gonzalez'
__all__ = ['SVDecomposer',
           'svd_wrapper',
           'get_ncomp_cevr',
           'get_ncomp_noise']

import numpy as np
from numpy import linalg
from matplotlib import pyplot as plt
from scipy.sparse.linalg import svds
from sklearn.decomposition import randomized_svd
from pandas import DataFrame

from ..config import timing, time_ini, sep, check_array
from ..config.errors import RankExceeded
from ..config.paramenum import Scaling
from ..var import matrix_scaling, prepare_matrix, AnnulusView

figsize = (8, 5)


class SVDecomposer:
    """
    Full SVD of a reference (cube, matrix or annulus), to inspect how much of
    its variance the first principal components explain.

    Parameters
    ----------
    data : numpy ndarray or AnnulusView
        Reference data: ``(n_frames, n_pixels)`` matrix, cube or annulus.
    svd_mode : {'lapack', 'arpack', 'eigen', 'randsvd'}, str optional
        See ``svd_wrapper``. The full decomposition is out of reach of
        ``arpack``, LAPACK is used instead.
    scaling : Scaling, str or None, optional
        Scaling of the matrix before the decomposition, see
        ``matrix_scaling``. The explained variance is only meaningful for
        temporally centered data.
    verbose : bool, optional
        If True the steps and their running time are printed.

    Examples
    --------
    .. code:: python

        decomposer = SVDecomposer(AnnulusView(cube, 5, 15))
        table = decomposer.get_cevr(plot=False)
        ncomp = decomposer.cevr_to_ncomp(0.95)

    """

    def __init__(self, data, svd_mode='lapack', scaling=Scaling.TEMPMEAN,
                 verbose=True):
        if not isinstance(data, AnnulusView):
            check_array(data, (2, 3), msg='data')
        self.data = data
        self.svd_mode = svd_mode
        self.scaling = scaling
        self.verbose = verbose

        if self.verbose:
            print(sep)

    def generate_matrix(self):
        """Vectorize and scale ``data`` into ``self.matrix``."""
        if isinstance(self.data, AnnulusView):
            matrix = self.data()
        elif self.data.ndim == 3:
            matrix = prepare_matrix(self.data, verbose=self.verbose)
        else:
            matrix = self.data
        self.matrix = matrix_scaling(matrix, self.scaling)

    def run(self):
        """Compute the singular values and vectors of the scaled matrix."""
        start_time = time_ini(False)
        if not hasattr(self, 'matrix'):
            self.generate_matrix()

        rank = min(self.matrix.shape)
        mode = getattr(self.svd_mode, 'value', self.svd_mode)
        if mode == 'arpack':
            mode = 'lapack'
        decomposition = svd_wrapper(self.matrix, mode, rank,
                                    verbose=self.verbose, full_output=True)
        # eigen mode does not return the left singular vectors
        self.u = decomposition[0] if len(decomposition) == 3 else None
        self.s, self.v = decomposition[-2:]

        if self.verbose:
            timing(start_time)

    def get_cevr(self, ncomp_list=None, plot=True, plot_save=False, plot_dpi=90,
                 plot_truncation=None):
        """
        Explained variance ratio of every principal component, and its
        cumulative sum (CEVR).

        The variance explained by component ``k`` is ``S[k]**2 / (n - 1)``.

        Parameters
        ----------
        ncomp_list : list or tuple of int, optional
            Numbers of components to report. By default, all of them.
        plot : bool, optional
            If True the ratios are plotted with matplotlib.
        plot_save : bool, optional
            If True the figure is saved to ``./figure.pdf``.
        plot_dpi : int, optional
            Resolution of the figure.
        plot_truncation : int, optional
            If set, a second panel zooms on the first ``plot_truncation``
            components.

        Returns
        -------
        table : pandas DataFrame
            Columns ``ncomp``, ``expvar_ratio`` and ``cevr``, one row per
            number of components.

        """
        start_time = time_ini(False)
        if not hasattr(self, 's'):
            self.run()
        if self.verbose:
            print("Computing the cumulative explained variance ratios")

        variance = self.s ** 2 / max(self.s.size - 1, 1)
        if variance.sum() > 0:
            self.explained_variance_ratio = variance / variance.sum()
        else:
            # constant data: a single component explains it
            self.explained_variance_ratio = np.zeros_like(variance)
            self.explained_variance_ratio[0] = 1
        self.cevr = np.cumsum(self.explained_variance_ratio)
        self.table_cevr = DataFrame({
            'ncomp': np.arange(1, self.s.size + 1),
            'expvar_ratio': self.explained_variance_ratio,
            'cevr': self.cevr})

        if plot:
            self._plot_cevr(plot_truncation, plot_dpi)
            if plot_save:
                plt.savefig('figure.pdf', dpi=300, bbox_inches='tight')

        table = self.table_cevr
        if ncomp_list is not None:
            table = table.iloc[[k - 1 for k in ncomp_list]]
            table = table.reset_index(drop=True)
            self.table_cevr_ncomp = table

        if self.verbose:
            timing(start_time)
        return table

    def _plot_cevr(self, truncation, dpi):
        fig = plt.figure(figsize=figsize, dpi=dpi)
        fig.subplots_adjust(wspace=0.4)
        ncols = 2 if truncation is None else 3
        axes = [plt.subplot2grid((1, ncols), (0, 0), colspan=2)]
        if truncation is not None:
            axes.append(plt.subplot2grid((1, ncols), (0, 2)))

        n = self.explained_variance_ratio.size
        for ax, last in zip(axes, (n, truncation)):
            ax.step(range(last), self.explained_variance_ratio[:last],
                    where='mid', alpha=0.4, lw=2, label='Individual EVR')
            ax.plot(self.cevr[:last], '.-', alpha=0.4, lw=2,
                    label='Cumulative EVR')
            ax.set_xlabel('Principal components')
            ax.set_xlim(-1, last + 1)
            ax.set_ylim(0, 1)
            ax.grid(linestyle='solid', alpha=0.2)
        axes[0].set_ylabel('Explained variance ratio (EVR)')
        axes[0].legend(loc='best', frameon=False, fontsize='medium')
        return fig

    def cevr_to_ncomp(self, cevr=0.9):
        """
        Smallest number of components whose CEVR reaches ``cevr``.

        Parameters
        ----------
        cevr : float or tuple of floats, optional
            Target ratio(s).

        Returns
        -------
        ncomp : int or list of int
            Capped to the number of components when ``cevr`` is not reached.

        """
        if not hasattr(self, 'cevr'):
            self.get_cevr(plot=False)

        def to_ncomp(target):
            ncomp = int(np.searchsorted(self.cevr, target)) + 1
            return min(ncomp, self.cevr.size)

        if isinstance(cevr, tuple):
            return [to_ncomp(c) for c in cevr]
        return to_ncomp(cevr)


def svd_wrapper(matrix, mode, ncomp, verbose, full_output=False,
                random_state=None):
    """
    Truncated SVD of a matrix of vectorized frames, with one of several
    libraries.

    Parameters
    ----------
    matrix : numpy ndarray, 2d
        ``(n_frames, n_pixels)`` matrix.
    mode : {'lapack', 'arpack', 'eigen', 'randsvd'}, SvdMode or str
        * ``lapack``: ``numpy.linalg.svd`` (deterministic, exact).
        * ``arpack``: ``scipy.sparse.linalg.svds``. LAPACK is used when
          ``ncomp`` equals the smallest dimension of ``matrix``.
        * ``eigen``: eigendecomposition of the frame covariance ``M M'``
          (``numpy.linalg.eigh``), fast when there are few frames. LAPACK is
          used when ``ncomp`` exceeds the numerical rank of ``matrix``.
        * ``randsvd``: ``sklearn.utils.extmath.randomized_svd`` [HAL09]_.
    ncomp : int
        Number of singular vectors. It cannot exceed the smallest dimension
        of ``matrix`` (``RankExceeded`` otherwise).
    verbose : bool
        If True the library used is printed.
    full_output : bool, optional
        If True ``(U, S, V)`` are returned, ``(S, V)`` in ``eigen`` mode.
    random_state : int, RandomState instance or None, optional
        [mode='randsvd'] Seed of the randomized SVD.

    Returns
    -------
    V : numpy ndarray
        ``(ncomp, n_pixels)`` right singular vectors, by decreasing singular
        value.
    U, S, V : numpy ndarrays
        [full_output=True] Also the ``(n_frames, ncomp)`` left singular
        vectors and the ``ncomp`` singular values.

    """
    if matrix.ndim != 2:
        raise TypeError('Input matrix is not a 2d array')

    if ncomp > min(matrix.shape[0], matrix.shape[1]):
        msg = '{} PCs cannot be obtained from a matrix with size [{},{}].'
        msg += ' Increase the size of the reference library or request less PCs'
        raise RankExceeded(msg.format(ncomp, matrix.shape[0], matrix.shape[1]))

    mode = getattr(mode, 'value', mode)
    eigen = mode == 'eigen'
    if mode == 'arpack' and ncomp == min(matrix.shape):
        # svds needs k < min(matrix.shape)
        mode = 'lapack'

    if eigen:
        # the covariance of the frames is much smaller than that of the pixels
        e, EV = linalg.eigh(np.dot(matrix, matrix.T))
        # eigh sorts the eigenvalues by increasing value
        e, EV = e[::-1], EV[:, ::-1]
        tol = max(e[0], 0) * max(matrix.shape) * np.finfo(e.dtype).eps
        if ncomp <= np.count_nonzero(e > tol):
            S = np.sqrt(e[:ncomp])
            V = np.dot(EV[:, :ncomp].T, matrix) / S[:, np.newaxis]
            if verbose:
                print('Done PCA with numpy linalg eigh functions')
            if full_output:
                return S, V
            return V
        # directions of null variance have no eigen vectors in pixel space
        mode = 'lapack'

    if mode == 'lapack':
        # the SVD of M' is faster when there are fewer frames than pixels
        U, S, Vt = linalg.svd(matrix.T, full_matrices=False)
        V = U[:, :ncomp].T
        S = S[:ncomp]
        U = Vt[:ncomp].T
        if verbose:
            print('Done SVD/PCA with numpy SVD (LAPACK)')

    elif mode == 'arpack':
        U, S, V = svds(matrix, k=ncomp)
        # svds returns the singular values in increasing order
        order = np.argsort(S)[::-1]
        U, S, V = U[:, order], S[order], V[order]
        if verbose:
            print('Done SVD/PCA with scipy sparse SVD (ARPACK)')

    elif mode == 'randsvd':
        U, S, V = randomized_svd(matrix, n_components=ncomp, n_iter=2,
                                 transpose='auto', random_state=random_state)
        if verbose:
            print('Done SVD/PCA with randomized SVD')

    else:
        raise ValueError('The SVD `mode` is not recognized')

    if full_output:
        return (S, V) if eigen else (U, S, V)
    return V


def get_ncomp_cevr(matrix, cevr=0.9, verbose=False):
    """
    Smallest number of principal components whose cumulative explained
    variance ratio reaches ``cevr``.

    The explained variance is measured on the temporally mean-subtracted
    ``matrix`` (``S**2 / (n - 1)``, S being its singular values).

    Parameters
    ----------
    matrix : numpy ndarray, 2d
        Reference matrix, ``(n_frames, n_pixels)``.
    cevr : float, optional
        Target ratio, in ``(0, 1]``.
    verbose : bool, optional
        If True the selected number of components is printed.

    Returns
    -------
    ncomp : int

    """
    if not 0 < cevr <= 1:
        raise ValueError('`cevr` must be in (0, 1], got {}'.format(cevr))

    decomposer = SVDecomposer(matrix, svd_mode='lapack',
                              scaling=Scaling.TEMPMEAN, verbose=False)
    ncomp = decomposer.cevr_to_ncomp(cevr)
    if verbose:
        print('{} PCs explain {:.1%} of the variance'.format(ncomp, cevr))
    return ncomp


def get_ncomp_noise(matrix, noise_error=1e-3, collapse=False,
                    svd_mode='lapack', verbose=False):
    """
    Number of principal components after which the residual noise stops
    decreasing.

    The rank is increased one step at a time. At each step the temporally
    mean-subtracted ``matrix`` is projected on the first principal components
    and the standard deviation of the residuals is measured. The iteration
    stops at the first rank (from the third one on) for which the noise decay
    over the last two steps is smaller than ``noise_error``. This is a local
    heuristic: if the noise fluctuates, it may stop before the global minimum.
    When the criterion is never met, all the components are used.

    Parameters
    ----------
    matrix : numpy ndarray, 2d
        Reference matrix, ``(n_frames, n_pixels)``.
    noise_error : float, optional
        Tolerance on the noise decay.
    collapse : bool, optional
        If True the noise is measured on the temporal median of the residuals.
    svd_mode : str, optional
        See ``svd_wrapper``.
    verbose : bool, optional
        If True the noise at each step is printed.

    Returns
    -------
    ncomp : int

    """
    data_sc = matrix_scaling(matrix, Scaling.TEMPMEAN)
    max_pcs = min(data_sc.shape[0], data_sc.shape[1])
    # arpack cannot compute the full decomposition
    svd_mode = 'lapack' if svd_mode == 'arpack' else svd_mode
    V_sc = svd_wrapper(data_sc, svd_mode, max_pcs, False)

    px_noise = []
    for ncomp in range(1, max_pcs + 1):
        V = V_sc[:ncomp]
        transformed = np.dot(data_sc, V.T)
        residuals = data_sc - np.dot(transformed, V)
        if not collapse:
            curr_noise = np.std(residuals)
        else:
            curr_noise = np.std(np.median(residuals, axis=0))
        px_noise.append(curr_noise)
        if verbose:
            print('ncomp {}    noise {:.4e}'.format(ncomp, curr_noise))
        if ncomp >= 3:
            px_noise_decay = px_noise[-3] - curr_noise
            if px_noise_decay < noise_error:
                break

    return ncomp
