# logsetup.py
#


"""
Module logsetup

This is a wrapper for logging setup.

For details see: https://stackoverflow.com/a/7622029
"""

import logging
import sys

from . import libconstants as const

NOTSET = logging.NOTSET
DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL


def setup_root_logger(format=const.LOG_FORMAT):
    root = logging.getLogger()

    # the report goes to stdout, diagnostics to stderr
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(format)
    handler.setFormatter(formatter)

    root.addHandler(handler)

    return root


def get_root_logger():
    return logging.getLogger()


def set_scapy_loglevel(lvl):
    logging.getLogger('scapy.runtime').setLevel(lvl)
