import re
import logging
from collections import namedtuple
from fitsrw.fits_codec import FitsReader, RECORD_LENGTH
from fitsrw.fits_errors import CodecError, SUCCESS

logger = logging.getLogger('fitsrw')

# Keywords regenerated from the pixel array on every write, matched on the first 6 characters of a record
STRUCTURAL_KEYWORDS = ('SIMPLE', 'BITPIX', 'NAXIS ', 'NAXIS1', 'NAXIS2', 'NAXIS3', 'NAXIS4', 'EXTEND')

HeaderTag = namedtuple('HeaderTag', ['name', 'value'])

# blank, comma and slash end a value in a list-directed read
_value_separators = re.compile(r'[\s,/]')


def read_fits_head(fits_file):
    """
    Copy the keyword records of an open FITS file, in order.

    :param fits_file: an open fits_codec.FitsReader
    :return: list of 80 character records, not including END
    """
    hdr = fits_file.header_records()
    logger.debug("Read {nkeys} header records from {filename}".format(nkeys=len(hdr), filename=fits_file.filename))
    return hdr


def is_structural(record):
    return record.ljust(RECORD_LENGTH)[:6].upper() in STRUCTURAL_KEYWORDS


def write_fits_head(fits_file, hdr):
    """
    Append header records to a FITS file being written, leaving out the ones describing the array layout.

    :param fits_file: a fits_codec.FitsWriter with its required keywords already written
    :param hdr: list of 80 character records
    :return: the number of records skipped
    """
    logger.debug("Writing up to {nkeys} header records to {filename}".format(nkeys=len(hdr),
                                                                             filename=fits_file.filename))
    skipped = 0
    for record in hdr:
        if is_structural(record):
            skipped += 1
        else:
            fits_file.write_record(record)

    return skipped


def read_fits_header(filename):
    """
    Read just the header records of a FITS file.

    :param filename: path to the FITS file
    :return: (hdr, ierr); hdr is None unless ierr is 0
    """
    try:
        with FitsReader.open(filename) as fits_file:
            return read_fits_head(fits_file), SUCCESS
    except CodecError as exception:
        logger.error("Could not read header of {filename}: {error}".format(filename=filename, error=exception))
        return None, exception.status


def _parse_real(text):
    token = _value_separators.split(text.strip(), maxsplit=1)[0]
    # digit separators are not valid in a FITS value
    if not token or '_' in token:
        return None

    try:
        return float(token.replace('D', 'E').replace('d', 'e'))
    except ValueError:
        return None


def get_floats_from_fits_header(hdr, max_out=None):
    """
    Extract tag/value pairs from every header record whose value reads as a real number.

    Records without an '=' or with a non-numeric value (strings, logicals, comments) are skipped.

    :param hdr: list of header records
    :param max_out: if given, keep at most this many pairs
    :raises ValueError: if max_out is negative
    :return: list of HeaderTag; with max_out, a tuple (tags, number of pairs dropped)
    """
    if max_out is not None and max_out < 0:
        raise ValueError("max_out must not be negative, got {max_out}".format(max_out=max_out))

    tags = []
    for record in hdr:
        name, equals, value_text = record.partition('=')
        if not equals:
            continue

        value = _parse_real(value_text)
        if value is not None:
            tags.append(HeaderTag(name.strip(), value))

    if max_out is None:
        return tags

    ndropped = max(len(tags) - max_out, 0)
    if ndropped:
        logger.warning("Found {nfound} numeric header values, keeping the first {max_out}".format(nfound=len(tags),
                                                                                                   max_out=max_out))
    return tags[:max_out], ndropped
