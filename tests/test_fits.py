"""
Tests for fits/fits.py.

"""

from astropy.io.fits import Header

from .helpers import np, aarc, raises
from adi_hci.config.errors import ShapeMismatch
from adi_hci.fits import (open_fits, info_fits, write_fits, open_adicube,
                          write_adicube)
from adi_hci.fits.fits import ALL_FITS

CUBE = np.random.RandomState(5).rand(4, 9, 9)


def test_fits_round_trip(tmp_path, capsys):
    fname = tmp_path / "cube.fits"
    header = Header()
    header["OBJECT"] = "star"
    write_fits(fname, CUBE, header=header)
    data, head = open_fits(fname, header=True)
    assert data.dtype == np.float32
    aarc(data, CUBE)
    assert head["OBJECT"] == "star"

    write_fits(fname, CUBE, precision=np.float64, verbose=True)
    assert "overwritten" in capsys.readouterr().out
    aarc(open_fits(fname, precision=np.float64, verbose=False), CUBE,
         rtol=0, atol=0)

    info_fits(str(fname))
    assert "PrimaryHDU" in capsys.readouterr().out


def test_fits_extension(tmp_path):
    # the extension is added when missing
    write_fits(tmp_path / "frames", CUBE[0], verbose=False)
    assert (tmp_path / "frames.fits").exists()
    aarc(open_fits(tmp_path / "frames", verbose=False), CUBE[0])


def test_fits_multiple(tmp_path):
    fname = tmp_path / "multi.fits"
    write_fits(fname, (CUBE, CUBE[0], np.arange(4.)), verbose=False)
    data = open_fits(fname, n=ALL_FITS, verbose=False)
    assert len(data) == 3
    aarc(data[1], CUBE[0])
    aarc(open_fits(fname, n=2, verbose=False), np.arange(4.))
    with raises(ValueError):
        write_fits(fname, (CUBE, CUBE), header=(None,), verbose=False)


def test_adicube(tmp_path):
    fname = tmp_path / "adi.fits"
    angles = np.linspace(-30.5, 60.25, 4)
    write_adicube(fname, CUBE, angles, verbose=False)
    cube, angle_list = open_adicube(fname, verbose=False)
    aarc(cube, CUBE)
    aarc(angle_list, angles)
    assert angle_list.dtype == float

    with raises(ShapeMismatch):
        write_adicube(fname, CUBE, angles[:3], verbose=False)
    write_fits(tmp_path / "noangles.fits", CUBE, verbose=False)
    with raises(ValueError):
        open_adicube(tmp_path / "noangles.fits", verbose=False)
