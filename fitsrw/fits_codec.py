import os
import logging
import numpy as np
import astropy.io.fits as fits
from fitsrw.fits_errors import CodecError, FILE_NOT_OPENED, FILE_NOT_CREATED, WRITE_ERROR, \
    READ_ERROR, BAD_KEYCHAR, BAD_NAXES, BAD_DIMEN, ZERO_SCALE

logger = logging.getLogger('fitsrw')

NULL_VALUE = -999
FLOAT_BITPIX = -32
RECORD_LENGTH = 80


class FitsReader:
    """
    Read access to the primary HDU of a FITS file.

    Use as a context manager so the file is closed on every exit path.
    """

    def __init__(self, hdu_list, filename):
        self.hdu_list = hdu_list
        self.filename = filename

    @classmethod
    def open(cls, filename):
        try:
            hdu_list = fits.open(filename, mode='readonly', memmap=False)
        except (OSError, ValueError, TypeError) as exception:
            raise CodecError(FILE_NOT_OPENED, str(exception)) from exception
        logger.debug("Opened {filename}".format(filename=filename))
        return cls(hdu_list, filename)

    @property
    def header(self):
        return self.hdu_list[0].header

    def header_records(self):
        """
        Return every keyword record of the primary header, END excluded, as 80 character strings.
        """
        try:
            header_string = self.header.tostring(sep='', endcard=False, padding=False)
        except (ValueError, fits.VerifyError) as exception:
            raise CodecError(READ_ERROR, str(exception)) from exception

        return [header_string[i:i + RECORD_LENGTH] for i in range(0, len(header_string), RECORD_LENGTH)]

    def get_img_dim(self):
        return int(self.header.get('NAXIS', 0))

    def get_axis_sizes(self, maxdim):
        """
        Return NAXIS1..NAXISmaxdim from the header; missing axes are reported as 0.
        """
        return [int(self.header.get('NAXIS{axis}'.format(axis=axis), 0)) for axis in range(1, maxdim + 1)]

    def read_pixels(self, out, nullval=NULL_VALUE):
        """
        Fill the flat float32 buffer with the first out.size pixels of the primary array, in file order.

        :param out: 1-D numpy array to receive the pixels
        :param nullval: value substituted for undefined pixels
        :return: True if any undefined pixels were found
        """
        try:
            data = self.hdu_list[0].data
        except (OSError, ValueError, TypeError) as exception:
            raise CodecError(READ_ERROR, str(exception)) from exception

        if data is None or data.size < out.size:
            raise CodecError(READ_ERROR, "Primary array holds fewer than {npixels} pixels".format(npixels=out.size))

        pixels = data.reshape(-1)[:out.size]

        if pixels.dtype.kind == 'f':
            nulls = np.isnan(pixels)
        elif 'BLANK' in self.header:
            nulls = pixels == self.header['BLANK']
        else:
            nulls = np.zeros(pixels.shape, dtype=bool)

        np.copyto(out, pixels, casting='unsafe')
        out[nulls] = nullval

        return bool(nulls.any())

    def close(self):
        if self.hdu_list is not None:
            self.hdu_list.close()
            self.hdu_list = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class FitsWriter:
    """
    Write access for a new single-HDU FITS file.

    Header records are collected first and go to disk, ahead of the data, when the pixels are written.
    """

    def __init__(self, filename):
        self.filename = filename
        self.header = fits.Header()
        self.stream = None
        self.fileobj = None

    @classmethod
    def create(cls, filename):
        """
        Start a new FITS file, replacing any existing file at the same path.
        """
        directory = os.path.dirname(os.path.abspath(filename))
        if not os.path.isdir(directory) or not os.access(directory, os.W_OK):
            raise CodecError(FILE_NOT_CREATED, "Cannot create {filename}".format(filename=filename))

        try:
            if os.path.exists(filename):
                os.remove(filename)
        except OSError as exception:
            raise CodecError(FILE_NOT_CREATED, str(exception)) from exception

        return cls(filename)

    def write_required_header(self, naxes, bitpix=FLOAT_BITPIX, extend=True):
        if any(axis <= 0 for axis in naxes):
            raise CodecError(BAD_NAXES, "Axis sizes must be positive, got {naxes}".format(naxes=list(naxes)))

        self.header['SIMPLE'] = True
        self.header['BITPIX'] = bitpix
        self.header['NAXIS'] = len(naxes)
        for axis, size in enumerate(naxes, start=1):
            self.header['NAXIS{axis}'.format(axis=axis)] = int(size)
        self.header['EXTEND'] = extend

    def write_record(self, record):
        try:
            card = fits.Card.fromstring(record)
            card.verify('silentfix+exception')
        except (ValueError, fits.VerifyError) as exception:
            raise CodecError(BAD_KEYCHAR, str(exception)) from exception

        self.header.append(card, end=True)

    def write_pixels(self, pixels):
        """
        Write the header followed by the flat float32 pixel buffer, which must match the header's axis sizes.

        Pixels are physical values; when the header carries BSCALE/BZERO the stored values are
        (pixels - BZERO) / BSCALE, so readers applying the scaling get the pixels back.
        """
        npixels = 1
        for axis in range(1, self.header['NAXIS'] + 1):
            npixels *= self.header['NAXIS{axis}'.format(axis=axis)]
        if pixels.size != npixels:
            raise CodecError(BAD_DIMEN, "Got {size} pixels for a header declaring {npixels}".format(size=pixels.size,
                                                                                                   npixels=npixels))

        bscale = self.header.get('BSCALE', 1.0)
        bzero = self.header.get('BZERO', 0.0)
        if bscale == 0:
            raise CodecError(ZERO_SCALE, "BSCALE is zero in the header for {filename}".format(filename=self.filename))
        if bscale != 1 or bzero != 0:
            pixels = (np.asarray(pixels, dtype=np.float64) - bzero) / bscale

        try:
            self.fileobj = open(self.filename, 'ab+')
            self.stream = fits.StreamingHDU(self.fileobj, self.header)
            self.stream.write(np.ascontiguousarray(pixels, dtype=np.float32))
        except (OSError, ValueError, TypeError) as exception:
            raise CodecError(WRITE_ERROR, str(exception)) from exception

    def close(self):
        if self.stream is not None:
            self.stream.close()
            self.stream = None
        if self.fileobj is not None:
            self.fileobj.close()
            self.fileobj = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
