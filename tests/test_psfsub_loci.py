"""
Tests for psfsub/loci.py.

"""

from .helpers import np, aarc, raises
from sklearn.metrics import pairwise_distances

from adi_hci.config.paramenum import Metric
from adi_hci.preproc import compute_pa_thresh, find_indices_adi
from adi_hci.psfsub import LOCI, Framewise, loci_distances_mask
from adi_hci.var import prepare_matrix


def test_loci_exact_combination():
    random_state = np.random.RandomState(3)
    ref = random_state.rand(5, 100)
    coeffs = random_state.rand(2, 5)
    target = np.dot(coeffs, ref)
    for solver in ('lstsq', 'nnls'):
        design = LOCI(solver=solver).fit(target, ref)
        aarc(design.coeffs, coeffs)
        aarc(design.reconstruct(), target)
    with raises(ValueError):
        LOCI(solver='bad').fit(target, ref)


def test_loci_self_reference(example_cube_adi):
    cube, _ = example_cube_adi
    # without frame selection, every frame is its own best model
    aarc(LOCI(tol=1e-12).reconstruct(cube), cube, atol=1e-5)


def test_loci_distances_mask(example_cube_adi):
    cube, _ = example_cube_adi
    matrix = prepare_matrix(cube, verbose=False)
    mask = loci_distances_mask(matrix)
    assert mask.shape == (12, 12)
    assert np.all(mask)

    mask = loci_distances_mask(matrix, 50, Metric.CITYBLOCK)
    distances = pairwise_distances(matrix, metric="cityblock")
    expected = (distances > 0) & (distances <= np.percentile(distances, 50))
    assert np.array_equal(mask, expected)
    assert np.array_equal(mask, mask.T)
    assert not np.any(np.diag(mask))


def test_framewise_loci(example_cube_adi):
    cube, angles = example_cube_adi
    matrix = prepare_matrix(cube, verbose=False)
    rec = Framewise(LOCI(), delta_rot=0.5).reconstruct(cube, angles, fwhm=4,
                                                       r=8)
    assert rec.shape == cube.shape
    pa_thr = compute_pa_thresh(angles, 8, 4, 0.5)
    for i in (0, 5, 11):
        ind = find_indices_adi(angles, i, pa_thr)
        expected = LOCI().fit(matrix[i:i + 1], matrix[ind]).reconstruct()
        aarc(rec[i].ravel(), expected[0])


def test_framewise_loci_distance(example_cube_adi):
    cube, angles = example_cube_adi
    matrix = prepare_matrix(cube, verbose=False)
    alg = Framewise(LOCI(dist_threshold=90, metric='euclidean'))
    rec = alg.reconstruct(cube, angles)
    mask = loci_distances_mask(matrix, 90, "euclidean")
    for i in range(12):
        ind = find_indices_adi(angles, i, None)
        ind = ind[mask[i, ind]]
        expected = LOCI().fit(matrix[i:i + 1], matrix[ind]).reconstruct()
        aarc(rec[i].ravel(), expected[0])


def test_framewise_loci_empty_reference(example_cube_adi):
    cube, angles = example_cube_adi
    with raises(RuntimeError):
        Framewise(LOCI(dist_threshold=0)).reconstruct(cube, angles)
