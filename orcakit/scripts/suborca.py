#!/usr/bin/env python3
# encoding: utf-8

"""
suborca

Submit an ORCA calculation to the SLURM scheduler. The 'nprocs' and 'maxcore' values are extracted
from the ORCA input file and the memory per CPU is adjusted accordingly. A temporary job script with
the corresponding parameters is generated and submitted, managing input/output files as well as cleanup tasks.
"""

import argparse
import sys

from orcakit.common import get_logger, initialize_log
from orcakit.exceptions import InputError, SettingsError
from orcakit.imports import settings
from orcakit.job.submit import OrcaJob
from orcakit.scripts.common import ToolArgumentParser, print_help_and_exit, split_file_list, to_positive_int


logger = get_logger()

cluster_limits, default_walltime_hrs, orca_default_version = \
    settings['cluster_limits'], settings['default_walltime_hrs'], settings['orca_default_version']


def parse_command_line_arguments(command_line_args=None):
    """
    Parse command-line arguments.

    Args:
        command_line_args: The command line arguments.

    Returns:
        The parsed command-line arguments by keywords.
    """
    parser = ToolArgumentParser(prog='suborca',
                                description='Submit ORCA calculations to the SLURM scheduler.',
                                formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('input_file', metavar='input_file.inp', type=str, nargs='?',
                        help="the ORCA input file containing 'nprocs' and 'maxcore' values")
    parser.add_argument('-t', dest='walltime', metavar='walltime', type=str, default=None,
                        help=f'set the walltime limit in hours (default: {default_walltime_hrs} hours, '
                             f"maximum: {cluster_limits['max_walltime_hrs']} hours)")
    parser.add_argument('-v', dest='orca_version', metavar='ORCA_version', type=str, default=None,
                        help=f'the ORCA version to use for the calculation (default: {orca_default_version})')
    parser.add_argument('-a', dest='additional_files', metavar='add_files', type=str, default=None,
                        help='additional files required for the job, besides the external .xyz files\n'
                             'specified in the ORCA input file (example: "name.gbw name.hess")')
    parser.add_argument('-s', dest='scratch', metavar='scratch_space', type=str, default=None,
                        help='request node-local scratch space in GB '
                             f"(default: none, maximum: {cluster_limits['max_scratch_gb']} GB)")
    parser.add_argument('-k', dest='keep_files', metavar='keep_files', type=str, default=None,
                        help='files to keep after the calculation, besides .out .xyz .gbw .densities\n'
                             '.opt .hess and .interp (example: "name_MEP_trj.xyz name.cis")')
    if command_line_args is None:
        command_line_args = sys.argv[1:]
    if not command_line_args:
        print_help_and_exit(parser, 1)
    args = parser.parse_args(command_line_args)
    if not args.input_file:
        parser.error('ORCA input file not provided.')
    return args


def main(command_line_args=None) -> int:
    """
    The suborca executable function
    """
    initialize_log()
    args = parse_command_line_arguments(command_line_args)
    try:
        job = OrcaJob(input_file=args.input_file,
                      walltime_hrs=to_positive_int(args.walltime, 'walltime'),
                      orca_version=args.orca_version,
                      additional_files=split_file_list(args.additional_files),
                      scratch_gb=to_positive_int(args.scratch, 'scratch space'),
                      keep_files=split_file_list(args.keep_files),
                      )
        job.execute()
    except (InputError, SettingsError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
