#!/usr/bin/env python3
# encoding: utf-8

"""
smiles2xyz

Generate an xTB optimized .xyz file from a SMILES string. A 3D structure is generated by OpenBabel,
and the initial guess is then optimized by the semiempirical quantum chemistry program xTB.

Request an interactive job first (e.g., 'salloc --nodes=1 --ntasks-per-node=4') or submit
to the SLURM scheduler with -s. Running on a login node may result in policy violations.
"""

import sys

from orcakit.common import get_logger, initialize_log
from orcakit.exceptions import InputError, JobError, SettingsError
from orcakit.imports import settings
from orcakit.job.smiles2xyz import StructureJob
from orcakit.scripts.common import ToolArgumentParser, print_help_and_exit


logger = get_logger()

xtb_opt_thresholds, xtb_default_threshold = settings['xtb_opt_thresholds'], settings['xtb_default_threshold']


def parse_command_line_arguments(command_line_args=None):
    """
    Parse command-line arguments.

    Args:
        command_line_args: The command line arguments.

    Returns:
        The parsed command-line arguments by keywords.
    """
    parser = ToolArgumentParser(prog='smiles2xyz',
                                description='Generate an xTB optimized .xyz file from a SMILES string.',
                                epilog="Do not forget to first request an interactive job like this "
                                       "'salloc --nodes=1 --ntasks-per-node=4' or submit to the SLURM scheduler.")
    parser.add_argument('smiles', metavar='"SMILES"', type=str, nargs='?',
                        help='the SMILES string in quotation marks, representing the structure to be created')
    parser.add_argument('-c', dest='charge', metavar='charge', type=str, default='0',
                        help='the molecular charge for the geometry optimization with xTB (default: 0)')
    parser.add_argument('-m', dest='multiplicity', metavar='multiplicity', type=str, default='1',
                        help='the spin multiplicity for the geometry optimization with xTB (default: 1)')
    parser.add_argument('-o', dest='name', metavar='output_filename', type=str, default=None,
                        help='the output filename without extension (default: current directory name)')
    parser.add_argument('-t', dest='threshold', metavar='opt_threshold', type=str, default=xtb_default_threshold,
                        help=f'the threshold for the geometry optimization with xTB (default: '
                             f'{xtb_default_threshold}), one of {", ".join(xtb_opt_thresholds)}')
    parser.add_argument('-v', dest='verbose', action='store_true', help='print program output to screen')
    parser.add_argument('-l', dest='keep_log', action='store_true', help='keep the logged program output')
    parser.add_argument('-f', dest='keep_all', action='store_true', help='keep all intermediate files')
    parser.add_argument('-s', dest='submit', action='store_true', help='submit the job to the SLURM scheduler')
    if command_line_args is None:
        command_line_args = sys.argv[1:]
    if not command_line_args:
        print_help_and_exit(parser, 1)
    args = parser.parse_args(command_line_args)
    if not args.smiles:
        parser.error('SMILES string in quotation marks not provided.')
    return args


def main(command_line_args=None) -> int:
    """
    The smiles2xyz executable function
    """
    initialize_log()
    args = parse_command_line_arguments(command_line_args)
    try:
        job = StructureJob(smiles=args.smiles,
                           charge=args.charge,
                           multiplicity=args.multiplicity,
                           name=args.name,
                           threshold=args.threshold,
                           verbose=args.verbose,
                           keep_log=args.keep_log,
                           keep_all=args.keep_all,
                           )
        if args.submit:
            job.submit()
            return 0
        return job.run()
    except (InputError, JobError, SettingsError) as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
