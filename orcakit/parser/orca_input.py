"""
A module for parsing the resource directives and file references of ORCA input files.
"""

import re
from typing import List, Optional, Sequence


PAL_BLOCK_START = re.compile(r'%pal', re.IGNORECASE)
BLOCK_END = re.compile(r'^[ \t]*end', re.IGNORECASE)
NPROCS_PATTERN = re.compile(r'nprocs[ \t]+(\d+)', re.IGNORECASE)
MAXCORE_PATTERN = re.compile(r'maxcore[ \t]+(\d+)', re.IGNORECASE)
XYZ_FILE_PATTERN = re.compile(r'\S+\.xyz')


def parse_nprocs(lines: Sequence[str]) -> Optional[int]:
    """
    Parse the number of parallel processes from the ``%pal`` block of an ORCA input file, e.g.::

        %pal
          nprocs 16
        end

    or ``%pal nprocs 16 end``.

    Args:
        lines (Sequence[str]): The lines of the input file.

    Returns: Optional[int]
        The first ``nprocs`` value within a ``%pal`` block, ``None`` if not found.
    """
    in_pal_block = False
    for line in lines:
        if PAL_BLOCK_START.search(line):
            in_pal_block = True
        if in_pal_block:
            match = NPROCS_PATTERN.search(line)
            if match is not None:
                return int(match.group(1))
        if BLOCK_END.search(line):
            in_pal_block = False
    return None


def parse_maxcore(lines: Sequence[str]) -> Optional[int]:
    """
    Parse the scratch memory per process (``%maxcore``, in MB) from an ORCA input file.

    Args:
        lines (Sequence[str]): The lines of the input file.

    Returns: Optional[int]
        The first ``maxcore`` value, ``None`` if not found.
    """
    for line in lines:
        match = MAXCORE_PATTERN.search(line)
        if match is not None:
            return int(match.group(1))
    return None


def parse_xyz_file_references(lines: Sequence[str]) -> List[str]:
    """
    Parse the external .xyz files an ORCA input file refers to,
    e.g., ``* xyzfile 0 1 "start.xyz"`` or ``NEB_End_XYZFile "product.xyz"``.

    Args:
        lines (Sequence[str]): The lines of the input file.

    Returns: List[str]
        The referenced file names without duplicates, in order of appearance.
    """
    xyz_files = list()
    for line in lines:
        for token in XYZ_FILE_PATTERN.findall(line):
            token = token[1:] if token.startswith('"') else token
            if token not in xyz_files:
                xyz_files.append(token)
    return xyz_files
