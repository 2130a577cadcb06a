import sys
import logging
import argparse
import lcogt_logging
from fitsrw.fits_header import read_fits_header, get_floats_from_fits_header
from fitsrw.fits_errors import fits_error, SUCCESS

logger = logging.getLogger('fitsrw')


def setup_logging(log_level):
    logger.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(lcogt_logging.LCOGTFormatter())
    logger.addHandler(handler)


def parse_args(args=None):
    parser = argparse.ArgumentParser(description='Print the header records of a FITS file.')
    parser.add_argument('filename', help='FITS file to read')
    parser.add_argument('--tags', dest='tags', action='store_true',
                        help='Print only the keywords with numeric values, one "name value" pair per line')
    parser.add_argument('--max-tags', dest='max_tags', type=int, default=None,
                        help='Maximum number of numeric keywords to print with --tags. Default = no limit')
    parser.add_argument('--log-level', dest='log_level', default='INFO', help='Logging level to be displayed',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])

    return parser.parse_args(args)


def dump_header(args=None):
    args = parse_args(args)
    setup_logging(getattr(logging, args.log_level))

    hdr, ierr = read_fits_header(args.filename)
    if ierr != SUCCESS:
        logger.error("{filename}: {message} (status {ierr})".format(filename=args.filename,
                                                                    message=fits_error(ierr), ierr=ierr))
        return 1

    if args.tags:
        if args.max_tags is None:
            tags = get_floats_from_fits_header(hdr)
        else:
            tags, _ = get_floats_from_fits_header(hdr, max_out=args.max_tags)
        for tag in tags:
            print("{name} {value}".format(name=tag.name, value=tag.value))
    else:
        for record in hdr:
            print(record)

    return 0


def main():
    sys.exit(dump_header())
