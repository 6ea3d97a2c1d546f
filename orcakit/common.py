"""
This module contains functions which are shared across multiple orcakit modules.
As such, it should not import any other orcakit module (specifically ones that use the logger defined here)
to avoid circular imports.

VERSION is the full orcakit version, using `semantic versioning <https://semver.org/>`_.
"""

import logging
import os
import sys
from typing import Optional


logger = logging.getLogger('orcakit')

# Absolute path to the orcakit folder.
ORCAKIT_PATH = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

VERSION = '1.0.0'


class _MaxLevelFilter(logging.Filter):
    """
    Pass only records below a given level (used to keep warnings and errors off stdout).
    """
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def initialize_log(verbose: int = logging.INFO,
                   log_file: Optional[str] = None,
                   ) -> None:
    """
    Set up a logger for orcakit.
    Informative messages are written to stdout, warnings and errors to stderr.

    Args:
        verbose (int, optional): Specify the amount of log text seen.
        log_file (str, optional): A file to additionally write all log messages into.
    """
    logger.setLevel(verbose)
    logger.propagate = False

    # Use custom level names for cleaner log output.
    logging.addLevelName(logging.CRITICAL, 'Critical: ')
    logging.addLevelName(logging.ERROR, 'Error: ')
    logging.addLevelName(logging.WARNING, 'Warning: ')
    logging.addLevelName(logging.INFO, '')
    logging.addLevelName(logging.DEBUG, '')
    logging.addLevelName(0, '')

    # Create formatter and add to handlers.
    formatter = logging.Formatter('  %(levelname)s%(message)s')

    # Remove old handlers before adding ours.
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    out = logging.StreamHandler(sys.stdout)
    out.setLevel(verbose)
    out.addFilter(_MaxLevelFilter(logging.WARNING))
    out.setFormatter(formatter)
    logger.addHandler(out)

    err = logging.StreamHandler(sys.stderr)
    err.setLevel(max(verbose, logging.WARNING))
    err.setFormatter(formatter)
    logger.addHandler(err)

    if log_file is not None:
        fh = logging.FileHandler(filename=log_file)
        fh.setLevel(verbose)
        fh.setFormatter(formatter)
        logger.addHandler(fh)


def get_logger():
    """
    Get the orcakit logger (avoid having multiple entries of the logger).
    """
    return logger
