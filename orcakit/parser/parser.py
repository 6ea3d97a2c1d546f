"""
A module for reading text files to be parsed.
"""

import os
from typing import List

from orcakit.exceptions import InputError


def _get_lines_from_file(path: str) -> List[str]:
    """
    A helper function for getting a list of lines from a file.
    Line terminators are removed, undecodable bytes are replaced.

    Args:
        path (str): The file path.

    Raises:
        InputError: If the file could not be found.

    Returns: List[str]
        Entries are lines from the file.
    """
    if os.path.isfile(path):
        with open(path, 'r', errors='replace') as f:
            lines = f.read().splitlines()
    else:
        raise InputError(f'Could not find file {path}')
    return lines


def is_nonempty_file(path: str) -> bool:
    """
    Check whether a path points to an existing file with content.

    Args:
        path (str): The file path.

    Returns: bool
        ``True`` if the file exists and is not empty.
    """
    return os.path.isfile(path) and os.path.getsize(path) > 0
