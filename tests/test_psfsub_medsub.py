"""
Tests for psfsub/medsub.py.

"""

from .helpers import np, aarc, parametrize
from adi_hci.config.paramenum import Collapse
from adi_hci.psfsub import Classic, Median, ClassicDesign, fit
from adi_hci.var import prepare_matrix, AnnulusView


def test_median_reconstruction(example_cube_adi):
    cube, _ = example_cube_adi
    design = fit(Median(), cube)
    assert isinstance(design, ClassicDesign)
    assert design.n == 12
    rec = Median().reconstruct(cube)
    assert rec.shape == cube.shape
    for frame in rec:
        aarc(frame, np.median(cube, axis=0))


@parametrize("method,func",
             [
                 ('mean', np.mean),
                 (Collapse.MAX, np.max),
                 (np.mean, np.mean),
                 (np.median, np.median),
             ])
def test_classic_methods(example_cube_adi, method, func):
    cube, _ = example_cube_adi
    matrix = prepare_matrix(cube, verbose=False)
    design = fit(Classic(method), matrix)
    aarc(design.frame, func(matrix, axis=0))


def test_classic_rdi(example_cube_rdi):
    cube, _, cube_ref = example_cube_rdi
    rec = Median().reconstruct(cube[:4], ref=cube_ref)
    assert rec.shape == (4, 21, 21)
    aarc(rec[3], np.median(cube_ref, axis=0))


def test_median_static_cube():
    static = np.random.RandomState(1).rand(11, 11)
    cube = np.repeat(static[np.newaxis], 10, axis=0)
    angles = np.linspace(0, 60, 10)
    aarc(Median()(cube, angles), np.zeros((11, 11)), atol=1e-8)
    av = AnnulusView(cube, 2, 5)
    aarc(Median()(av, angles), np.zeros((11, 11)), atol=1e-8)
