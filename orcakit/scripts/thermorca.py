#!/usr/bin/env python3
# encoding: utf-8

"""
thermorca

Extract thermodynamic information from an ORCA output file: imaginary and very low vibrational modes
of the last frequency analysis, the final single point energy and the final Gibbs free energy.
"""

import sys

from orcakit.common import get_logger, initialize_log
from orcakit.exceptions import ThermoError
from orcakit.scripts.common import ToolArgumentParser, print_help_and_exit
from orcakit.thermo import extract_thermo


logger = get_logger()


def parse_command_line_arguments(command_line_args=None):
    """
    Parse command-line arguments.

    Args:
        command_line_args: The command line arguments.

    Returns:
        The parsed command-line arguments by keywords.
    """
    parser = ToolArgumentParser(prog='thermorca',
                                description='Take an ORCA output file and extract thermodynamic information '
                                            'including vibrational frequencies, final single point and '
                                            'Gibbs free energies.')
    parser.add_argument('file', metavar='ORCA_OUTPUT_FILE', type=str, nargs='?', help='the ORCA output file')
    args = parser.parse_args(command_line_args)
    if not args.file:
        print_help_and_exit(parser, 0)
    return args


def main(command_line_args=None) -> int:
    """
    The thermorca executable function
    """
    initialize_log()
    args = parse_command_line_arguments(command_line_args)
    try:
        thermo = extract_thermo(args.file)
    except ThermoError as e:
        logger.error(str(e))
        return 1
    sys.stdout.write(thermo.report())
    return 0


if __name__ == '__main__':
    sys.exit(main())
