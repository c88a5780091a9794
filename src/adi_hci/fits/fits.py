#! /usr/bin/env python
"""
Module with fits handling functions for ADI cubes and reduced frames.
"""


__author__ = "C. A. Gomez Gonzalez, T. Bédrine, V. Christiaens, I. Hammond"
__all__ = ["open_fits", "info_fits", "write_fits", "open_adicube",
           "write_adicube"]


from os.path import isfile, exists
from os import remove

import numpy as np
from astropy.io.fits.convenience import writeto
from astropy.io.fits.hdu.hdulist import fitsopen, HDUList
from astropy.io.fits.hdu.image import ImageHDU, PrimaryHDU

from ..config.errors import ShapeMismatch

# value of ``n`` selecting every extension
ALL_FITS = -2


def open_fits(fitsfilename, n=0, header=False, ignore_missing_end=False,
              precision=np.float32, verbose=True, **kwargs):
    """
    Load a fits file into memory as numpy array.

    Parameters
    ----------
    fitsfilename : string or pathlib.Path
        Name of the fits file or ``pathlib.Path`` object
    n : int, optional
        It chooses which HDU to open. Default is the first one. If n is equal
        to -2, opens and returns all extensions.
    header : bool, optional
        Whether to return the header along with the data or not.
    ignore_missing_end : bool optional
        Allows to open fits files with a header missing END card.
    precision : numpy dtype, optional
        Float precision, by default np.float32 or single precision float.
    verbose : bool, optional
        If True prints message of completion.
    **kwargs: optional
        Optional arguments to the astropy.io.fits.open() function. E.g.
        "output_verify" can be set to ignore, in case of non-standard header.

    Returns
    -------
    data : numpy ndarray or list of numpy ndarrays
        Array containing the frames of the fits-cube. If n equals -2, returns a
        list of all arrays.
    header : dict or list of dict
        [header=True] Dictionary containing the fits header. If n equals -2,
        returns a list of all dictionaries.

    """
    fitsfilename = str(fitsfilename)
    if not isfile(fitsfilename):
        fitsfilename += ".fits"

    try:
        hdulist = fitsopen(fitsfilename, ignore_missing_end=ignore_missing_end,
                           memmap=True, **kwargs)
    except ValueError:
        # If BZERO/BSCALE/BLANK header keywords present HDU can’t load as memmap
        hdulist = fitsopen(fitsfilename, ignore_missing_end=ignore_missing_end,
                           memmap=False, **kwargs)

    with hdulist:
        if n == ALL_FITS:
            indices = range(len(hdulist))
        else:
            indices = [n]
        data_list = []
        header_list = []
        for index in indices:
            data = np.array(hdulist[index].data, dtype=precision)
            data_list.append(data)
            header_list.append(hdulist[index].header)
            if verbose:
                print(f"FITS HDU-{index} data successfully loaded. "
                      f"Data shape: {data.shape}")

    if n != ALL_FITS:
        data_list = data_list[0]
        header_list = header_list[0]
    if header:
        return data_list, header_list
    return data_list


def info_fits(fitsfilename, **kwargs):
    """
    Print the information about a fits file.

    Parameters
    ----------
    fitsfilename : str
        Path to the fits file.
    **kwargs: optional
        Optional arguments to the astropy.io.fits.open() function.

    """
    with fitsopen(fitsfilename, memmap=True, **kwargs) as hdulist:
        hdulist.info()


def write_fits(fitsfilename, array, header=None, output_verify="exception",
               precision=np.float32, verbose=True):
    """
    Write array and header into FITS file.

    If there is a previous file with the same filename then it's replaced.

    Parameters
    ----------
    fitsfilename : string or pathlib.Path
        Full path of the fits file to be written.
    array : numpy ndarray or tuple of numpy ndarray
        Array(s) to be written into a fits file. If a tuple of several arrays,
        the fits file will be written as a multiple extension fits file
    header : numpy ndarray, or tuple of headers, optional
        Header dictionary, or tuple of headers for a multiple extension fits
        file.
    output_verify : str, optional
        {"fix", "silentfix", "ignore", "warn", "exception"}
        Verification options:
        https://docs.astropy.org/en/stable/io/fits/api/verification.html
    precision : numpy dtype, optional
        Float precision, by default np.float32 or single precision float.
    verbose : bool, optional
        If True prints message.

    """
    fitsfilename = str(fitsfilename)
    if not fitsfilename.endswith(".fits"):
        fitsfilename += ".fits"

    res = "saved"
    if exists(fitsfilename):
        remove(fitsfilename)
        res = "overwritten"

    if isinstance(array, tuple):
        if header is None:
            header = [None] * len(array)
        elif not isinstance(header, tuple):
            header = [header] * len(array)
        elif len(header) != len(array):
            msg = "If input header is a tuple, it should have the same length "
            msg += "as tuple of arrays."
            raise ValueError(msg)

        new_hdul = HDUList()
        for i, arr in enumerate(array):
            array_tmp = np.asarray(arr).astype(precision, copy=False)
            if i == 0:
                new_hdul.append(PrimaryHDU(array_tmp, header=header[i]))
            else:
                new_hdul.append(ImageHDU(array_tmp, header=header[i]))

        new_hdul.writeto(fitsfilename, output_verify=output_verify)
    else:
        array = np.asarray(array).astype(precision, copy=False)
        writeto(fitsfilename, array, header, output_verify)

    if verbose:
        print(f"FITS file successfully {res}")


def open_adicube(fitsfilename, precision=np.float32, verbose=True):
    """
    Load an ADI cube whose parallactic angles are stored in the first
    extension of the fits file (see ``write_adicube``).

    Returns
    -------
    cube : numpy ndarray, 3d
        ADI cube.
    angle_list : numpy ndarray, 1d
        Parallactic angles.

    """
    data = open_fits(fitsfilename, n=ALL_FITS, precision=precision,
                     verbose=False)
    if len(data) < 2:
        raise ValueError('The fits file has no extension with the parallactic '
                         'angles')
    cube = data[0]
    angle_list = data[1].astype(float)
    if cube.ndim != 3 or angle_list.shape != (cube.shape[0],):
        msg = 'Got {} angles for an array of shape {}'
        raise ShapeMismatch(msg.format(angle_list.size, cube.shape))

    if verbose:
        print(f"ADI cube successfully loaded. Cube shape: {cube.shape}")
    return cube, angle_list


def write_adicube(fitsfilename, cube, angle_list, header=None,
                  precision=np.float32, verbose=True):
    """
    Write an ADI cube into a fits file, with the parallactic angles in the
    first extension.
    """
    angle_list = np.asarray(angle_list, dtype=float)
    if cube.ndim != 3 or angle_list.shape != (cube.shape[0],):
        msg = 'Got {} angles for an array of shape {}'
        raise ShapeMismatch(msg.format(angle_list.size, cube.shape))

    write_fits(fitsfilename, (cube, angle_list), header=(header, None),
               precision=precision, verbose=verbose)
