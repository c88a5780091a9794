"""
Configuration file for pytest, containing global ("session-level") fixtures.

"""
import time

import numpy as np
import pytest

from .helpers import synthetic_cube


@pytest.fixture(scope="session")
def example_cube_adi():
    """
    Synthetic ADI sequence of 12 frames of 21x21 pixels.

    Returns
    -------
    cube : numpy ndarray
    angle_list : numpy ndarray

    Notes
    -----
    Tests must not modify the arrays in place, they are shared by the whole
    session.

    """
    return synthetic_cube(n_frames=12, size=21, seed=42)


@pytest.fixture(scope="session")
def example_cube_rdi():
    """
    Synthetic reference cube with the same speckle patterns as
    ``example_cube_adi``, observed at other times (different amplitudes and
    noise).
    """
    cube, angle_list = synthetic_cube(n_frames=12, size=21, seed=42)
    rng = np.random.RandomState(0)
    cube_ref = cube[::-1] * (1 + 0.1 * rng.rand(12, 1, 1))
    cube_ref += 0.05 * rng.rand(*cube.shape)
    return cube, angle_list, cube_ref


@pytest.fixture(autouse=True)
def time_test():
    """Time a test and print out how long it took."""
    before = time.time()
    yield
    after = time.time()
    print(f"Test took {after - before:.02f} seconds!")


@pytest.fixture(autouse=True, scope="session")
def time_all_tests():
    """Time all tests and print out how long they took."""
    before = time.time()
    yield
    after = time.time()
    print(f"Total test time: {after - before:.02f} seconds!")
