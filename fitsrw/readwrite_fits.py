"""
Read and write FITS images and spectral cubes held in the primary HDU.

Arrays are float32 and indexed in FITS axis order, image[i, j] or cube[i, j, k] with shape
(NAXIS1, NAXIS2[, NAXIS3]), so the first index varies fastest in the file.

Every routine returns a status code instead of raising; see fits_errors.fits_error for the messages.
"""
import logging
from collections import namedtuple
import numpy as np
from fitsrw.fits_codec import FitsReader, FitsWriter, NULL_VALUE, FLOAT_BITPIX
from fitsrw.fits_header import read_fits_head, write_fits_head
from fitsrw.fits_errors import CodecError, SUCCESS, OPEN_FAILURE, NO_PIXELS, ALLOCATION_FAILURE

logger = logging.getLogger('fitsrw')

FitsData = namedtuple('FitsData', ['data', 'naxes', 'ierr', 'header'])


def allocate_pixels(shape):
    return np.empty(shape, dtype=np.float32, order='F')


def image_shape(fits_file):
    naxes = fits_file.get_axis_sizes(2)
    return naxes, naxes


def cube_shape(fits_file):
    """
    Work out the cube shape from the header; a 2-D image becomes a cube with one plane.

    Only three axes are read. A 4th axis is reported in naxes[3] but only its first plane is read.
    """
    ndim = fits_file.get_img_dim()
    naxes = fits_file.get_axis_sizes(3) + [int(fits_file.header.get('NAXIS4', 1))]

    if ndim <= 0:
        return naxes, [0, 0, 0]

    for axis in range(ndim, 3):
        naxes[axis] = 1

    if ndim > 3 and naxes[3] > 1:
        logger.warning("{filename} has {ndim} axes; reading the first of {nplanes} planes along axis 4".format(
            filename=fits_file.filename, ndim=ndim, nplanes=naxes[3]))

    return naxes, naxes[:3]


def read_fits_array(filename, get_shape, hdr=False):
    """
    Open a FITS file and read its primary array into a newly allocated float32 array.

    :param filename: path to the FITS file
    :param get_shape: function of the open file returning (naxes, array shape)
    :param hdr: also return the header records
    :return: FitsData
    """
    header = None
    try:
        fits_file = FitsReader.open(filename)
    except CodecError as exception:
        logger.error("Could not open {filename}: {error}".format(filename=filename, error=exception))
        return FitsData(None, None, OPEN_FAILURE, header)

    with fits_file:
        try:
            if hdr:
                header = read_fits_head(fits_file)

            naxes, shape = get_shape(fits_file)
            npixels = int(np.prod(shape))
            if npixels <= 0:
                logger.error("No pixels found in {filename}".format(filename=filename))
                return FitsData(None, naxes, NO_PIXELS, header)

            try:
                image = allocate_pixels(shape)
            except (MemoryError, ValueError):
                logger.error("Could not allocate {npixels} pixels for {filename}".format(npixels=npixels,
                                                                                         filename=filename))
                return FitsData(None, naxes, ALLOCATION_FAILURE, header)

            anynull = fits_file.read_pixels(image.ravel(order='F'), NULL_VALUE)
        except CodecError as exception:
            logger.error("Error reading {filename}: {error}".format(filename=filename, error=exception))
            return FitsData(None, None, exception.status, header)

    if anynull:
        logger.debug("Undefined pixels in {filename} set to {nullval}".format(filename=filename, nullval=NULL_VALUE))

    logger.info("Read {shape} pixels from {filename}".format(shape=shape, filename=filename))
    return FitsData(image, naxes, SUCCESS, header)


def write_fits_array(filename, image, naxes, hdr=None):
    """
    Write a float32 array as the primary HDU of a new FITS file.

    :param filename: destination, replaced if it exists
    :param image: array indexed in FITS axis order with naxes as its shape
    :param naxes: axis sizes written to NAXISn
    :param hdr: optional header records to copy; structural keywords are regenerated, not copied
    :return: status code
    """
    logger.info("writing {filename}".format(filename=filename))
    naxes = [int(axis) for axis in naxes]

    try:
        with FitsWriter.create(filename) as fits_file:
            fits_file.write_required_header(naxes, bitpix=FLOAT_BITPIX, extend=True)
            if hdr is not None:
                write_fits_head(fits_file, hdr)

            pixels = np.asarray(image, dtype=np.float32).ravel(order='F')
            fits_file.write_pixels(pixels)
    except CodecError as exception:
        logger.error("Error writing {filename}: {error}".format(filename=filename, error=exception))
        return exception.status

    return SUCCESS


def read_fits_image(filename, hdr=False):
    """
    Read a 2-D image.

    :return: FitsData(image, naxes, ierr, header); naxes is [NAXIS1, NAXIS2]
    """
    return read_fits_array(filename, image_shape, hdr=hdr)


def write_fits_image(filename, image, naxes, hdr=None):
    return write_fits_array(filename, image, list(naxes)[:2], hdr=hdr)


def read_fits_cube(filename, hdr=False):
    """
    Read a spectral cube. 2-D files come back as a cube with a single plane.

    :return: FitsData(cube, naxes, ierr, header); naxes has 4 entries, the 4th being NAXIS4 or 1
    """
    return read_fits_array(filename, cube_shape, hdr=hdr)


def write_fits_cube(filename, cube, naxes, hdr=None):
    return write_fits_array(filename, cube, list(naxes)[:3], hdr=hdr)
