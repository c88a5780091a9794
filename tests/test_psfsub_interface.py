"""
Tests for psfsub/interface.py: geometries, RDI and the reduction chain.

"""

from .helpers import np, aarc, parametrize, raises, filterwarnings
from adi_hci.config.errors import GeometryMismatch, ShapeMismatch
from adi_hci.preproc import cube_derotate, cube_collapse
from adi_hci.greedy import GreeDS
from adi_hci.psfsub import (ADIAlgorithm, PCA, NMF, LOCI, Median, Framewise,
                            fit, reconstruct, subtract, process,
                            expand_geometry, LinearDesign, AnnularDesigns)
from adi_hci.var import (AnnulusView, MultiAnnulusView, prepare_matrix,
                         dist_matrix)


def test_fit_not_implemented():
    with raises(NotImplementedError):
        ADIAlgorithm().fit(np.ones((3, 4)))


def test_rdi_self_reference(example_cube_adi):
    cube, _ = example_cube_adi
    rec = PCA(2).reconstruct(cube)
    aarc(PCA(2).reconstruct(cube, ref=cube), rec)
    aarc(PCA(2).reconstruct(cube, ref=cube.copy()), rec)


@filterwarnings("ignore::UserWarning")
@parametrize("alg",
             [
                 PCA(2),
                 NMF(2, random_state=0),
                 Median(),
                 LOCI(),
                 GreeDS(PCA(2)),
                 Framewise(PCA(1)),
             ])
def test_subtract_self_reference(example_cube_adi, alg):
    cube, angles = example_cube_adi
    res = subtract(alg, cube, angle_list=angles)
    aarc(subtract(alg, cube, ref=cube, angle_list=angles), res)

    av = AnnulusView(cube, 2, 8)
    res = subtract(alg, av, angle_list=angles)
    aarc(subtract(alg, av, ref=av, angle_list=angles), res)


def test_fit_matrix_and_cube(example_cube_adi):
    cube, _ = example_cube_adi
    matrix = prepare_matrix(cube, verbose=False)
    design = fit(PCA(3), cube)
    assert isinstance(design, LinearDesign)
    assert design.basis.shape == (3, 21 * 21)
    assert design.coeffs.shape == (12, 3)
    aarc(fit(PCA(3), matrix).reconstruct(), design.reconstruct())
    # 2d data stays 2d
    assert PCA(3).reconstruct(matrix).shape == matrix.shape
    assert PCA(3).reconstruct(cube).shape == cube.shape


def test_fit_rdi(example_cube_rdi):
    cube, _, cube_ref = example_cube_rdi
    design = fit(PCA(4), cube, ref=cube_ref)
    V = design.basis
    # the basis comes from the reference, the weights from the target
    aarc(np.abs(np.dot(V, V.T)), np.eye(4), atol=1e-8)
    aarc(design.coeffs, np.dot(prepare_matrix(cube, verbose=False), V.T))
    with raises(AssertionError):
        aarc(design.reconstruct(), fit(PCA(4), cube).reconstruct())


def test_geometry_errors(example_cube_adi):
    cube, _ = example_cube_adi
    av = AnnulusView(cube, 2, 8)
    mav = MultiAnnulusView(cube, 4, inner=2)

    with raises(GeometryMismatch):
        fit(PCA(2), av, ref=cube)
    with raises(GeometryMismatch):
        fit(PCA(2), av, ref=AnnulusView(cube, 2, 9))
    with raises(GeometryMismatch):
        fit(PCA(2), mav, ref=MultiAnnulusView(cube, 3, inner=2))
    with raises(GeometryMismatch):
        fit(PCA(2), cube, ref=cube[0])
    with raises(GeometryMismatch):
        fit([PCA(2), PCA(3)], cube)
    with raises(ShapeMismatch):
        fit(PCA(2), cube, ref=cube[:, :19, :19])
    with raises(ValueError):
        fit([PCA(2)] * 3, mav)
    with raises(TypeError):
        fit(PCA(2), list(cube))
    # annular references with the same geometry are accepted
    design = fit(PCA(2), av, ref=AnnulusView(cube[::-1].copy(), 2, 8))
    assert design.coeffs.shape == (12, 2)


@parametrize("alg", [PCA(2), GreeDS(PCA(2))])
def test_annulus_reference_other_pixels(example_cube_rdi, alg):
    cube, angles, cube_ref = example_cube_rdi
    target = MultiAnnulusView(cube, 4, inner=2).annulus(0)
    # same radii, but the closed outer bound keeps more pixels
    ref = AnnulusView(cube_ref, target.rmin, target.rmax)
    assert ref.npix != target.npix
    assert not target.same_geometry(ref)
    with raises(GeometryMismatch):
        fit(alg, target, ref=ref, angle_list=angles)
    assert target.same_geometry(target.similar(cube_ref))
    design = fit(alg, target, ref=target.similar(cube_ref), angle_list=angles)
    assert design.reconstruct().shape == (12, target.npix)


def test_reconstruct_design(example_cube_adi):
    cube, _ = example_cube_adi
    design = fit(PCA(2), cube)
    rec = reconstruct(design)
    assert rec.shape == (12, 21 * 21)
    aarc(reconstruct(design, cube), PCA(2).reconstruct(cube))
    aarc(expand_geometry(cube, rec), reconstruct(PCA(2), cube))
    assert expand_geometry(rec, rec) is rec
    with raises(TypeError):
        reconstruct(PCA(2))

    mav = MultiAnnulusView(cube, 4, inner=2)
    designs = fit(PCA(2), mav)
    assert isinstance(designs, AnnularDesigns)
    assert len(designs) == 2
    assert reconstruct(designs, mav).shape == cube.shape


def test_subtract_annulus(example_cube_adi):
    cube, _ = example_cube_adi
    av = AnnulusView(cube, 2, 8)
    res = subtract(PCA(2), av)
    assert res.shape == cube.shape
    rad = dist_matrix(cube.shape[1:])
    outside = (rad < 2) | (rad > 8)
    assert np.all(res[:, outside] == 0)
    yy, xx = av.indices
    rec = fit(PCA(2), av).reconstruct()
    aarc(res[:, yy, xx], av() - rec)


def test_process_chain(example_cube_adi):
    cube, angles = example_cube_adi
    frame = PCA(2)(cube, angles, collapse='mean', imlib='opencv',
                   interpolation='lanczos4')
    res = subtract(PCA(2), cube)
    expected = cube_collapse(cube_derotate(res, angles, imlib='opencv',
                                           interpolation='lanczos4'), 'mean')
    aarc(frame, expected)
    aarc(process(PCA(2), cube, angles, collapse='mean', imlib='opencv',
                 interpolation='lanczos4'), frame)


def test_process_verbose(example_cube_adi, capsys):
    cube, angles = example_cube_adi
    frame = process(Median(), cube, angles, verbose=True)
    assert frame.shape == (21, 21)
    out = capsys.readouterr().out
    assert 'Median parameters' in out
    assert 'Running time' in out


def test_process_errors(example_cube_adi):
    cube, angles = example_cube_adi
    with raises(ShapeMismatch):
        PCA(2)(cube, angles[:-1])
    with raises(ShapeMismatch):
        PCA(2)(AnnulusView(cube, 2, 8), angles[1:])
