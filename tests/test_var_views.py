"""
Tests for var/views.py.

"""

from .helpers import np, aarc, raises
from adi_hci.config.errors import ShapeMismatch
from adi_hci.var import AnnulusView, MultiAnnulusView, dist_matrix

CUBE = np.random.RandomState(42).rand(5, 21, 21)
RAD = dist_matrix((21, 21))


def test_annulus_view_pixels():
    av = AnnulusView(CUBE, inner=3, outer=8)
    yy, xx = av.indices
    assert np.all(RAD[yy, xx] >= 3) and np.all(RAD[yy, xx] <= 8)
    assert av.npix == np.sum((RAD >= 3) & (RAD <= 8))
    assert av().shape == (5, av.npix)
    assert av.shape == (5, av.npix)
    assert av.radius == 5.5


def test_annulus_view_defaults():
    av = AnnulusView(CUBE)
    assert av.rmin == 0
    assert av.rmax == 11
    # the whole frame is covered along the axes
    assert av.npix == np.sum(RAD <= 11)


def test_annulus_view_inverse():
    av = AnnulusView(CUBE, inner=3, outer=8, fill=np.nan)
    matrix = av()
    cube_ann = av.inverse(matrix)
    assert cube_ann.shape == CUBE.shape
    mask = (RAD >= 3) & (RAD <= 8)
    assert np.array_equal(cube_ann[:, mask], CUBE[:, mask])
    assert np.all(np.isnan(cube_ann[:, ~mask]))

    # stable under repeated calls
    assert np.array_equal(av.inverse(av()), cube_ann, equal_nan=True)

    # single row
    frame = av.inverse(matrix[2])
    assert frame.shape == (21, 21)
    assert np.array_equal(frame[mask], CUBE[2][mask])

    with raises(ShapeMismatch):
        av.inverse(matrix[:, :-1])


def test_annulus_view_to_cube_fill():
    av = AnnulusView(CUBE, inner=3, outer=8)
    cube_ann = av.to_cube()
    mask = (RAD >= 3) & (RAD <= 8)
    assert np.all(cube_ann[:, ~mask] == 0)


def test_annulus_view_similar():
    av = AnnulusView(CUBE, inner=3, outer=8)
    other = CUBE * 2
    av2 = av.similar(other)
    assert av2.parent is other
    aarc(av2(), 2 * av())
    assert av.same_geometry(av2)
    assert not av.same_geometry(AnnulusView(CUBE, inner=3, outer=9))
    assert not av.same_geometry(CUBE)
    with raises(ShapeMismatch):
        av.similar(np.zeros((5, 19, 19)))


def test_annulus_view_errors():
    with raises(ValueError):
        AnnulusView(CUBE, inner=8, outer=3)
    with raises(TypeError):
        AnnulusView(CUBE[0])


def test_multi_annulus_view_disjoint():
    mav = MultiAnnulusView(CUBE, 4, inner=2)
    # outer defaults to 11: annuli centered at 4 and 8
    assert mav.n_annuli == 2
    aarc(mav.radii, [4, 8])

    count = np.zeros((21, 21), dtype=int)
    for yy, xx in mav.indices:
        count[yy, xx] += 1
    assert count.max() == 1
    union = count == 1
    assert np.array_equal(union, (RAD >= 2) & (RAD < 10))


def test_multi_annulus_view_inverse():
    mav = MultiAnnulusView(CUBE, 3, inner=1)
    matrices = mav.eachannulus()
    assert len(matrices) == mav.n_annuli
    cube_ann = mav.inverse(matrices)
    union = np.zeros((21, 21), dtype=bool)
    for yy, xx in mav.indices:
        union[yy, xx] = True
    assert np.array_equal(cube_ann[:, union], CUBE[:, union])
    assert np.all(cube_ann[:, ~union] == 0)
    assert np.array_equal(mav.to_cube(), cube_ann)

    with raises(ShapeMismatch):
        mav.inverse(matrices[:-1])


def test_multi_annulus_view_annulus():
    mav = MultiAnnulusView(CUBE, 4, inner=2)
    av = mav.annulus(1)
    assert isinstance(av, AnnulusView)
    assert av.radius == 8
    assert np.array_equal(av(), mav.eachannulus()[1])


def test_multi_annulus_view_geometry():
    mav = MultiAnnulusView(CUBE, 4, inner=2)
    assert mav.same_geometry(mav.similar(CUBE + 1))
    assert not mav.same_geometry(MultiAnnulusView(CUBE, 3, inner=2))
    assert not mav.same_geometry(AnnulusView(CUBE))
    with raises(ValueError):
        MultiAnnulusView(CUBE, 0)
    with raises(ValueError):
        MultiAnnulusView(CUBE, 20, inner=5)
