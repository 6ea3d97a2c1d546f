"""
A module for collecting thermodynamic information from ORCA output files.

The report lists imaginary and very low vibrational modes of the last frequency analysis,
followed by the final single point energy, the final Gibbs free energy and G-E(el).
"""

from typing import Dict, List, Optional, Tuple

from orcakit.common import get_logger
from orcakit.exceptions import (AbnormalTerminationError,
                                LogNotFoundError,
                                NoThermodynamicDataError,
                                NotRecognizedError,
                                RunError,
                                )
from orcakit.parser.orca import (LogStatus,
                                 ScalarField,
                                 check_log_status,
                                 classify_modes,
                                 get_last_frequency_block,
                                 parse_scalar_fields,
                                 )
from orcakit.parser.parser import _get_lines_from_file, is_nonempty_file


logger = get_logger()

IMAGINARY_LABEL = '  Warning: Imaginary mode(s)'
SMALL_LABEL = '  Caution: Very low mode(s)'
NO_IMAGINARY_MESSAGE = '  No imaginary frequencies.'

ENERGY_FORMATS = {ScalarField.single_point_energy: '  Final single point energy{0:32.12f} Eh',
                  ScalarField.gibbs_free_energy: '  Final Gibbs free energy{0:30.8f}     Eh',
                  ScalarField.g_minus_e_el: '  For completeness G-E(el){0:29.8f}     Eh',
                  }


class ThermoReport(object):
    """
    Thermodynamic information extracted from an ORCA output file.

    Args:
        log_file_path (str): The path to the ORCA output file.
        frequency_block (List[str], optional): The lines of the last vibrational frequencies block.
        imaginary_modes (List[Tuple[int, float]], optional): Imaginary modes as (index, frequency) tuples.
        small_modes (List[Tuple[int, float]], optional): Very low modes as (index, frequency) tuples.
        energies (Dict[ScalarField, float], optional): The energies found, in Hartree.
    """
    def __init__(self,
                 log_file_path: str,
                 frequency_block: Optional[List[str]] = None,
                 imaginary_modes: Optional[List[Tuple[int, float]]] = None,
                 small_modes: Optional[List[Tuple[int, float]]] = None,
                 energies: Optional[Dict[ScalarField, float]] = None,
                 ):
        self.log_file_path = log_file_path
        self.frequency_block = frequency_block
        self.imaginary_modes = imaginary_modes or list()
        self.small_modes = small_modes or list()
        self.energies = energies or dict()

    @property
    def has_frequencies(self) -> bool:
        return bool(self.frequency_block)

    @property
    def has_data(self) -> bool:
        return self.has_frequencies or bool(self.energies)

    def report(self) -> str:
        """
        Format the report.

        Returns: str
            The report text, ending with a newline character.
        """
        lines = list()
        if self.has_frequencies:
            if self.imaginary_modes:
                rows = [f'{index:15d}:{frequency:11.2f} cm**-1' for index, frequency in self.imaginary_modes]
                lines.append('')
                lines.extend(_label_rows(IMAGINARY_LABEL, rows))
            else:
                lines.extend(['', NO_IMAGINARY_MESSAGE])
            if self.small_modes:
                rows = [f'{index:16d}:{frequency:11.2f} cm**-1' for index, frequency in self.small_modes]
                lines.append('')
                lines.extend(_label_rows(SMALL_LABEL, rows))
        if ScalarField.single_point_energy in self.energies:
            lines.append('')
        for field in ScalarField:
            if field in self.energies:
                lines.append(ENERGY_FORMATS[field].format(self.energies[field]))
        lines.append('')
        return '\n'.join(lines) + '\n'


def _label_rows(label: str, rows: List[str]) -> List[str]:
    """
    Put the first row right after the label, and align the following rows under it.
    """
    return [label + rows[0]] + [' ' * len(label) + row for row in rows[1:]]


def extract_thermo(log_file_path: str) -> ThermoReport:
    """
    Validate an ORCA output file and extract its thermodynamic information.

    Args:
        log_file_path (str): The path to the ORCA output file.

    Raises:
        LogNotFoundError: If the file does not exist or is empty.
        NotRecognizedError: If the file is not an ORCA output file.
        AbnormalTerminationError: If ORCA did not terminate normally.
        RunError: If the file contains an error message.
        NoThermodynamicDataError: If neither frequencies nor energies were found.

    Returns: ThermoReport
        The extracted information.
    """
    if not is_nonempty_file(log_file_path):
        raise LogNotFoundError(f"ORCA output file '{log_file_path}' does not exist.")
    lines = _get_lines_from_file(log_file_path)
    status = check_log_status(log_file_path, lines=lines)
    if status == LogStatus.not_recognized:
        raise NotRecognizedError(f"'{log_file_path}' is not a valid ORCA output file.")
    if status == LogStatus.abnormal_termination:
        raise AbnormalTerminationError('ORCA did not terminate normally.')
    if status == LogStatus.run_error:
        raise RunError('ORCA terminated with an error.')

    block = get_last_frequency_block(lines)
    imaginary_modes, small_modes = classify_modes(block) if block is not None else (None, None)
    thermo = ThermoReport(log_file_path=log_file_path,
                          frequency_block=block,
                          imaginary_modes=imaginary_modes,
                          small_modes=small_modes,
                          energies=parse_scalar_fields(lines),
                          )
    if not thermo.has_data:
        raise NoThermodynamicDataError('No thermodynamic information found in output file.')
    logger.debug(f'Extracted {len(thermo.energies)} energies and {len(imaginary_modes or [])} imaginary modes '
                 f'from {log_file_path}')
    return thermo
