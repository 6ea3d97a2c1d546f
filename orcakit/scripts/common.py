"""
A common module for the orcakit command-line tools
"""

import argparse
import re
import sys
from typing import List, Optional

from orcakit.common import get_logger
from orcakit.exceptions import InputError


logger = get_logger()

POSITIVE_INT_PATTERN = re.compile(r'^[1-9][0-9]*$')


class ToolArgumentParser(argparse.ArgumentParser):
    """
    An argument parser which reports usage errors like the rest of orcakit and exits with status 1.
    """
    def error(self, message: str):
        logger.error(message)
        self.exit(1)


def split_file_list(value: Optional[str]) -> List[str]:
    """
    Split a whitespace-separated list of file names given as a single command-line argument.

    Args:
        value (str): The argument, e.g., ``"name.gbw name.hess"``.

    Returns: List[str]
        The file names.
    """
    return value.split() if value else list()


def print_help_and_exit(parser: argparse.ArgumentParser, status: int) -> None:
    """
    Print the help message of a tool and exit.

    Args:
        parser (argparse.ArgumentParser): The tool's argument parser.
        status (int): The exit status.
    """
    parser.print_help(sys.stdout)
    sys.exit(status)


def to_positive_int(value: Optional[str], name: str) -> Optional[int]:
    """
    Convert a command-line value into a positive integer.

    Args:
        value (str): The value, ``None`` if the option was not given.
        name (str): The name of the quantity, used in the error message.

    Raises:
        InputError: If the value is not a positive integer.

    Returns: Optional[int]
        The integer, ``None`` if no value was given.
    """
    if value is None:
        return None
    if not POSITIVE_INT_PATTERN.match(value):
        raise InputError(f"Invalid value '{value}' for {name}. Must be a positive integer greater than zero.")
    return int(value)
