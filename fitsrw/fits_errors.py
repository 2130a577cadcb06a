"""
Status codes returned by the FITS read/write routines and their messages.

Codes other than the ones below are passed straight through from the codec
layer and use the CFITSIO numbering for the same failure.
"""

SUCCESS = 0
OPEN_FAILURE = -1
NO_PIXELS = 1
ALLOCATION_FAILURE = 2

# codec status numbers, as CFITSIO reports them
FILE_NOT_OPENED = 104
FILE_NOT_CREATED = 105
WRITE_ERROR = 106
READ_ERROR = 108
BAD_KEYCHAR = 207
BAD_NAXES = 308
BAD_DIMEN = 320
ZERO_SCALE = 322

_messages = {ALLOCATION_FAILURE: 'could not allocate memory',
             NO_PIXELS: 'no pixels found',
             OPEN_FAILURE: 'could not open fits file'}


class CodecError(Exception):
    """
    Raised by the codec adapter when astropy fails to read or write a file.
    The status is what the public routines hand back to the caller.
    """

    def __init__(self, status, message=''):
        super().__init__(message)
        self.status = status


def fits_error(ierr):
    """
    Translate a status code into a message for the user.

    :param ierr: status returned by one of the read/write routines
    :return: message string; 'unknown error' for anything unrecognised
    """
    return _messages.get(ierr, 'unknown error')
