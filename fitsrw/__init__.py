from fitsrw.readwrite_fits import FitsData, read_fits_image, write_fits_image, read_fits_cube, write_fits_cube
from fitsrw.fits_header import HeaderTag, read_fits_header, get_floats_from_fits_header
from fitsrw.fits_errors import fits_error, SUCCESS, OPEN_FAILURE, NO_PIXELS, ALLOCATION_FAILURE
