"""Module containing enums for parameters of ADI algorithms."""
from enum import Enum


class SvdMode(str, Enum):
    """
    Define the various modes to use with SVD in PCA as constant strings.

    Modes
    -----
    * ``LAPACK``: uses the LAPACK linear algebra library through Numpy
    and it is the most conventional way of computing the SVD
    (deterministic result computed on CPU).

    * ``ARPACK``: uses the ARPACK Fortran libraries accessible through
    Scipy (computation on CPU).

    * ``EIGEN``: computes the singular vectors through the
    eigendecomposition of the covariance M.M' (computation on CPU).

    * ``RANDSVD``: uses the randomized_svd algorithm implemented in
    Sklearn (computation on CPU), proposed in [HAL09]_.

    """

    LAPACK = "lapack"
    ARPACK = "arpack"
    EIGEN = "eigen"
    RANDSVD = "randsvd"


class Scaling(str, Enum):
    """
    Define modes for the pixel-wise scaling.

    Modes
    -----
    * ``TEMPMEAN``: temporal px-wise mean is subtracted.

    * ``SPATMEAN``: spatial mean is subtracted.

    * ``TEMPSTANDARD``: temporal mean centering plus scaling pixel values
    to unit variance.

    * ``SPATSTANDARD``: spatial mean centering plus scaling pixel values
    to unit variance.
    """

    TEMPMEAN = "temp-mean"
    SPATMEAN = "spat-mean"
    TEMPSTANDARD = "temp-standard"
    SPATSTANDARD = "spat-standard"


class Imlib(str, Enum):
    """
    Define modes for image transformations to be used.

    Modes
    -----
    * ``OPENCV``: uses OpenCV. Faster than Skimage.

    * ``SKIMAGE``: uses Skimage.
    """

    OPENCV = "opencv"
    SKIMAGE = "skimage"


class Interpolation(str, Enum):
    """
    Define modes for interpolation.

    Modes
    -----
    * ``NEARNEIG``

    * ``BILINEAR``

    * ``BIQUADRATIC`` : Skimage only.

    * ``BICUBIC``

    * ``BIQUARTIC`` : Default for Skimage (only).

    * ``BIQUINTIC`` : slowest and most accurate. Skimage only.

    * ``LANCZOS4`` : slowest and most accurate. Default for OpenCV.
    """

    NEARNEIG = "nearneig"
    BILINEAR = "bilinear"
    BIQUADRATIC = "biquadratic"
    BICUBIC = "bicubic"
    BIQUARTIC = "biquartic"
    BIQUINTIC = "biquintic"
    LANCZOS4 = "lanczos4"


class Collapse(str, Enum):
    """
    Define modes for temporal residuals frames combining.

    Modes
    -----
    * ``MEDIAN``

    * ``MEAN``

    * ``SUM``

    * ``MAX``

    * ``TRIMMEAN``

    * ``ABSMEAN`` : mean of the absolute values.
    """

    MEDIAN = "median"
    MEAN = "mean"
    SUM = "sum"
    MAX = "max"
    TRIMMEAN = "trimmean"
    ABSMEAN = "absmean"


class Metric(str, Enum):
    """Define the metrics available for the LOCI distance mask."""

    CITYBLOCK = "cityblock"
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    L1 = "l1"
    L2 = "l2"
    MANHATTAN = "manhattan"
    CORRELATION = "correlation"


class AutoRankMode(str, Enum):
    """
    Define the automatic rank selection policies for PCA.

    Modes
    -----
    * ``NOISE`` : increase the rank until the residual noise stops decaying.

    * ``CEVR`` : smallest rank reaching a cumulative explained variance ratio.
    """

    NOISE = "noise"
    CEVR = "cevr"


class Initsvd(str, Enum):
    """
    Define modes for initializing NMF.

    Modes
    -----
    * ``NNDSVD``: non-negative double SVD recommended for sparseness.

    * ``NNDSVDA`` : NNDSVD where zeros are filled with the average of cube;
        recommended when sparsity is not desired.

    * ``RANDOM`` : random initial non-negative matrix.
    """

    NNDSVD = "nndsvd"
    NNDSVDA = "nndsvda"
    RANDOM = "random"


class NmfSolver(str, Enum):
    """
    Define the numerical solver of scikit-learn NMF.

    Modes
    -----
    * ``CD`` : coordinate descent.

    * ``MU`` : multiplicative update.
    """

    CD = "cd"
    MU = "mu"
