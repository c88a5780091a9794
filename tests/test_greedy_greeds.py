"""
Tests for greedy/greeds.py.

"""

from .helpers import (np, aarc, raises, filterwarnings,
                      synthetic_cube)
from adi_hci.config.errors import (GeometryMismatch, RankExceeded,
                                   UnsupportedKernel)
from adi_hci.greedy import GreeDS
from adi_hci.psfsub import (PCA, NMF, LOCI, Median, Framewise, fit,
                            AnnularDesigns)
from adi_hci.var import prepare_matrix, AnnulusView, MultiAnnulusView


def test_greeds_kernels():
    for kernel in (Median(), LOCI(), Framewise(PCA(1))):
        with raises(UnsupportedKernel):
            GreeDS(kernel)
    assert isinstance(GreeDS().kernel, PCA)
    with raises(TypeError):
        GreeDS(PCA(2)).fit(np.ones((4, 5)))


def test_greeds_ranks(example_cube_adi):
    cube, angles = example_cube_adi
    design, ranks, frames = GreeDS(PCA(4)).fit_geometry(
        cube, angle_list=angles, full_output=True)
    assert ranks == [1, 2, 3, 4]
    assert len(frames) == 4
    assert all(frame.shape == (21, 21) for frame in frames)
    assert design.ncomp == 4


def test_greeds_full_rank():
    cube, angles = synthetic_cube(n_frames=8, size=15, seed=7)
    design, ranks, _ = GreeDS(PCA()).fit_geometry(cube, angle_list=angles,
                                                  full_output=True)
    assert ranks == list(range(1, 9))
    assert design.ncomp == 8


def test_greeds_first_step(example_cube_adi):
    cube, angles = example_cube_adi
    # a single step is the rank 1 reduction
    design, _, frames = GreeDS(PCA(1)).fit_geometry(cube, angle_list=angles,
                                                    full_output=True)
    aarc(design.reconstruct(), fit(PCA(1), cube).reconstruct())
    aarc(frames[0], PCA(1)(cube, angles))


def test_greeds_errors(example_cube_adi):
    cube, angles = example_cube_adi
    with raises(ValueError):
        GreeDS(PCA(2)).reconstruct(cube)
    with raises(RankExceeded):
        GreeDS(PCA(13)).reconstruct(cube, angle_list=angles)
    with raises(GeometryMismatch):
        GreeDS(PCA(2)).fit_geometry(AnnulusView(cube, 2, 8), ref=cube,
                                    angle_list=angles)
    with raises(TypeError):
        GreeDS(PCA(2)).fit_geometry(list(cube), angle_list=angles)
    with raises(ValueError):
        GreeDS(PCA(2)).fit_geometry(MultiAnnulusView(cube, 4, inner=2),
                                    angle_list=angles, full_output=True)


def test_greeds_annulus(example_cube_adi):
    cube, angles = example_cube_adi
    av = AnnulusView(cube, 3, 9)
    design = GreeDS(PCA(3)).fit_geometry(av, angle_list=angles)
    assert design.basis.shape == (3, av.npix)
    frame = GreeDS(PCA(3))(av, angles)
    assert frame.shape == (21, 21)

    mav = MultiAnnulusView(cube, 4, inner=2)
    designs = GreeDS(PCA(2)).fit_geometry(mav, angle_list=angles)
    assert isinstance(designs, AnnularDesigns)
    assert [des.ncomp for des in designs] == [2, 2]


def test_greeds_rdi(example_cube_rdi):
    cube, angles, cube_ref = example_cube_rdi
    design = GreeDS(PCA(3)).fit_geometry(cube, ref=cube_ref,
                                         angle_list=angles)
    data = prepare_matrix(cube, verbose=False)
    # the final weights are those of the target on the last basis
    aarc(design.coeffs, np.dot(data, design.basis.T))
    aarc(np.dot(design.basis, design.basis.T), np.eye(3), atol=1e-8)


def test_greeds_process(example_cube_adi):
    cube, angles = example_cube_adi
    frame = GreeDS(PCA(3), threshold=0)(cube, angles, collapse='mean',
                                        imlib='opencv',
                                        interpolation='lanczos4')
    assert frame.shape == (21, 21)
    assert np.all(np.isfinite(frame))


@filterwarnings("ignore::UserWarning")
def test_greeds_nmf(example_cube_adi):
    cube, angles = example_cube_adi
    design, ranks, _ = GreeDS(NMF(2, random_state=0)).fit_geometry(
        cube, angle_list=angles, full_output=True)
    assert ranks == [1, 2]
    assert design.ncomp == 2
