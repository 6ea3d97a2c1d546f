"""
A module for parsing ORCA output files.

All parsing functions take the lines of an output file and return either the parsed value
or ``None`` if it is absent. They never raise for missing content.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from orcakit.parser.parser import is_nonempty_file


SIGNATURE_PATTERN = re.compile(r'\* O   R   C   A \*')
NORMAL_TERMINATION = 'ORCA TERMINATED NORMALLY'
ERROR_MARKERS = ('ERROR', 'aborting the run')

FREQ_BLOCK_OPEN = 'VIBRATIONAL FREQUENCIES'
FREQ_BLOCK_CLOSE = 'NORMAL MODES'

IMAGINARY_MARKER = '***imaginary mode***'
MODE_PATTERN = re.compile(r'(\d+):[ ]*([+-]?\d*\.?\d+)')
# Unsigned values only, imaginary modes are printed with a minus sign
SMALL_MODE_PATTERN = re.compile(r'^[ ]*(\d+):[ ]+(\d*\.?\d+) cm\*\*-1')
SMALL_MODE_MAX = 15.0  # cm^-1, modes in (0, SMALL_MODE_MAX] are reported


class LogStatus(str, Enum):
    """
    The outcome of validating an ORCA output file.
    The checks are made in this order, the first failing one determines the status.
    """
    ok = 'ok'
    not_found = 'not_found'
    not_recognized = 'not_recognized'
    abnormal_termination = 'abnormal_termination'
    run_error = 'run_error'


class ScalarField(str, Enum):
    """
    Energies reported by ORCA which can be extracted, in their report order.
    """
    single_point_energy = 'single_point_energy'
    gibbs_free_energy = 'gibbs_free_energy'
    g_minus_e_el = 'g_minus_e_el'


SCALAR_PATTERNS = {
    ScalarField.single_point_energy: re.compile(r'FINAL SINGLE POINT ENERGY[ ]*([-+]?\d*\.?\d+)'),
    ScalarField.gibbs_free_energy: re.compile(r'Final Gibbs free energy[^-+\d]*([-+]?\d*\.?\d+)[ ]*Eh'),
    ScalarField.g_minus_e_el: re.compile(r'G-E\(el\)[^-+\d]*([-+]?\d*\.?\d+)[ ]*Eh'),
}


def check_log_status(log_file_path: str,
                     lines: Optional[Sequence[str]] = None,
                     ) -> LogStatus:
    """
    Determine whether a file is the output of a successfully completed ORCA calculation.

    Args:
        log_file_path (str): The path to the ORCA output file.
        lines (Sequence[str], optional): The lines of the file, if already read.

    Returns: LogStatus
        ``LogStatus.ok`` if all checks pass, otherwise the status of the first failing check.
    """
    if not is_nonempty_file(log_file_path):
        return LogStatus.not_found
    if lines is None:
        with open(log_file_path, 'r', errors='replace') as f:
            lines = f.read().splitlines()
    if not any(SIGNATURE_PATTERN.search(line) for line in lines):
        return LogStatus.not_recognized
    if not any(NORMAL_TERMINATION in line for line in lines):
        return LogStatus.abnormal_termination
    if any(marker in line for line in lines for marker in ERROR_MARKERS):
        return LogStatus.run_error
    return LogStatus.ok


def get_last_frequency_block(lines: Sequence[str]) -> Optional[List[str]]:
    """
    Get the lines of the last vibrational frequencies block.
    ORCA may print several frequency analyses (e.g., after a re-optimization), only the last one is relevant.
    A block which is opened but never closed is not considered.

    Args:
        lines (Sequence[str]): The lines of an ORCA output file.

    Returns: Optional[List[str]]
        The lines between the last block header and the following normal modes header,
        ``None`` if no (non-empty) block was found.
    """
    last_block, block, in_block = list(), list(), False
    for line in lines:
        if FREQ_BLOCK_OPEN in line:
            block, in_block = list(), True
        elif FREQ_BLOCK_CLOSE in line:
            if in_block:
                last_block, in_block = block, False
        elif in_block:
            block.append(line)
    return last_block or None


def classify_modes(block: Sequence[str]) -> Tuple[List[Tuple[int, float]], List[Tuple[int, float]]]:
    """
    Find imaginary and very low vibrational modes in a frequency block.

    Args:
        block (Sequence[str]): The lines of a vibrational frequencies block.

    Returns: Tuple[List[Tuple[int, float]], List[Tuple[int, float]]]
        The imaginary modes and the very low modes, entries are (mode index, frequency in cm^-1) in document order.
    """
    imaginary, small = list(), list()
    for line in block:
        if IMAGINARY_MARKER in line:
            match = MODE_PATTERN.search(line)
            if match is not None:
                imaginary.append((int(match.group(1)), float(match.group(2))))
            continue
        match = SMALL_MODE_PATTERN.search(line)
        if match is not None:
            frequency = float(match.group(2))
            if 0 < frequency <= SMALL_MODE_MAX:
                small.append((int(match.group(1)), frequency))
    return imaginary, small


def parse_scalar_field(lines: Sequence[str],
                       field: ScalarField,
                       ) -> Optional[float]:
    """
    Parse an energy from an ORCA output file.
    If the label appears more than once, the last occurrence is returned.

    Args:
        lines (Sequence[str]): The lines of an ORCA output file.
        field (ScalarField): The energy to parse.

    Returns: Optional[float]
        The energy in Hartree, ``None`` if not found.
    """
    pattern = SCALAR_PATTERNS[ScalarField(field)]
    value = None
    for line in lines:
        match = pattern.search(line)
        if match is not None:
            value = float(match.group(1))
    return value


def parse_scalar_fields(lines: Sequence[str]) -> Dict[ScalarField, float]:
    """
    Parse all known energies from an ORCA output file.

    Args:
        lines (Sequence[str]): The lines of an ORCA output file.

    Returns: Dict[ScalarField, float]
        Keys are the fields that were found, in report order.
    """
    values = dict()
    for field in ScalarField:
        value = parse_scalar_field(lines, field)
        if value is not None:
            values[field] = value
    return values
