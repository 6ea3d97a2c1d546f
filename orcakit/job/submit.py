"""
A module for submitting ORCA calculations to the SLURM scheduler.

The ORCA input file is scanned for its ``%pal nprocs`` and ``%maxcore`` values and for external .xyz files,
the requested resources are checked against the cluster limits, and a temporary job script is rendered,
submitted with ``sbatch`` and removed again. The job itself stages its files to the node-local scratch,
runs ORCA, keeps the important results and archives them back into the submit directory.
"""

import os
import re
from typing import Callable, List, Optional, Tuple

from orcakit.common import get_logger
from orcakit.exceptions import InputError
from orcakit.imports import settings, submit_scripts
from orcakit.job.local import change_mode, is_module_available, submit_job, write_file
from orcakit.parser.orca_input import parse_maxcore, parse_nprocs, parse_xyz_file_references
from orcakit.parser.parser import _get_lines_from_file


logger = get_logger()

cluster_limits, memory_overhead_factor, default_walltime_hrs, timeout_signal_seconds, orca_module, \
    orca_default_version, orca_keep_extensions, orca_timeout_keep_suffixes, yes_answers = \
    settings['cluster_limits'], settings['memory_overhead_factor'], settings['default_walltime_hrs'], \
    settings['timeout_signal_seconds'], settings['orca_module'], settings['orca_default_version'], \
    settings['orca_keep_extensions'], settings['orca_timeout_keep_suffixes'], settings['yes_answers']

VERSION_PATTERN = re.compile(r'^[0-9]+\.[0-9]+\.[0-9]+$')


def format_walltime(hours: int) -> str:
    """
    Convert a walltime in hours into the SLURM ``hh:mm:ss`` format, e.g., ``04:00:00`` or ``120:00:00``.

    Args:
        hours (int): The walltime in hours.

    Raises:
        InputError: If the walltime is not a positive integer or exceeds the cluster limit.

    Returns: str
        The formatted walltime.
    """
    if isinstance(hours, bool) or not isinstance(hours, int) or hours < 1:
        raise InputError(f"Invalid value '{hours}' for walltime. Must be a positive integer greater than zero.")
    if hours > cluster_limits['max_walltime_hrs']:
        raise InputError(f"Maximum walltime for a job is {cluster_limits['max_walltime_hrs']} hours.")
    return f'{hours:02d}:00:00'


def determine_memory(nprocs: int, maxcore: int) -> Tuple[int, int]:
    """
    Determine the memory to request from SLURM.
    ORCA's %maxcore is only a lower bound of what each process actually allocates,
    so an overhead is added to the memory per CPU.

    Args:
        nprocs (int): The number of parallel processes.
        maxcore (int): The scratch memory per process in MB.

    Returns: Tuple[int, int]
        - The memory per CPU in MB.
        - The memory per node in GB, rounded up.
    """
    mem_per_cpu = round(maxcore * memory_overhead_factor)
    memory_gb = round(nprocs * mem_per_cpu / 1024 + 0.5)
    return mem_per_cpu, memory_gb


def check_orca_version(version: str) -> None:
    """
    Check that an ORCA version is formatted as ``x.y.z`` and is installed as a module.

    Args:
        version (str): The ORCA version.

    Raises:
        InputError: If the version is malformed or not available.
    """
    if not VERSION_PATTERN.match(version):
        raise InputError(f"Invalid format '{version}' for ORCA version. Must be in 'x.x.x' format.")
    if not is_module_available(orca_module, version):
        raise InputError(f"ORCA version '{version}' not available. "
                         f"Check available versions with 'module avail {orca_module}'.")


def confirm_or_cancel(warning: str,
                      cancel_message: str,
                      confirm: Optional[Callable[[str], str]] = None,
                      ) -> None:
    """
    Warn the user about questionable settings and ask whether to continue.

    Args:
        warning (str): The warning to display.
        cancel_message (str): The message of the error raised if the user does not confirm.
        confirm (Callable[[str], str], optional): A function which prompts the user and returns the answer,
                                                      ``input`` by default.

    Raises:
        InputError: If the user did not answer with yes.
    """
    logger.warning(warning)
    choice = (confirm or input)('  Continue with current settings anyway? [yes/no] ')
    if choice.strip().lower() not in yes_answers:
        raise InputError(f'Job submission canceled. {cancel_message}')


class OrcaJob(object):
    """
    An ORCA calculation to be submitted to SLURM.

    Args:
        input_file (str): The ORCA input file. Relative file names refer to the directory of this file.
        walltime_hrs (int, optional): The walltime limit in hours.
        orca_version (str, optional): The ORCA version to load. Checked against the installed modules if given.
        additional_files (List[str], optional): Further files required for the calculation, e.g., a .gbw guess.
        scratch_gb (int, optional): The node-local scratch space to request in GB.
        keep_files (List[str], optional): Further files to keep after the calculation.

    Attributes:
        input_file (str): The input file name.
        path (str): The directory the job is submitted from.
        name (str): The job name, the input file name without its extension.
        walltime (str): The walltime in SLURM format.
        orca_version (str): The ORCA version.
        additional_files (List[str]): Further files required for the calculation.
        scratch_gb (int): The node-local scratch space in GB.
        keep_files (List[str]): All files to keep after the calculation.
        nprocs (int): The number of parallel processes.
        maxcore (int): The scratch memory per process in MB.
        xyz_files (List[str]): External geometry files referred to by the input file.
        mem_per_cpu (int): The memory per CPU in MB.
        memory_gb (int): The memory per node in GB.
        job_id (str): The SLURM job ID, set upon submission.
    """
    def __init__(self,
                 input_file: str,
                 walltime_hrs: Optional[int] = None,
                 orca_version: Optional[str] = None,
                 additional_files: Optional[List[str]] = None,
                 scratch_gb: Optional[int] = None,
                 keep_files: Optional[List[str]] = None,
                 ):
        if not input_file:
            raise InputError('ORCA input file not provided.')
        self.path = os.path.dirname(os.path.abspath(input_file))
        self.input_file = os.path.basename(input_file)
        self.name = os.path.splitext(self.input_file)[0]
        self.walltime = format_walltime(walltime_hrs if walltime_hrs is not None else default_walltime_hrs)
        if orca_version is not None:
            check_orca_version(orca_version)
        self.orca_version = orca_version or orca_default_version

        self.additional_files = additional_files or list()
        for file_name in self.additional_files:
            if not os.path.isfile(os.path.join(self.path, file_name)):
                raise InputError(f"Additional file '{file_name}' does not exist.")

        if scratch_gb is not None and (scratch_gb < 1 or scratch_gb > cluster_limits['max_scratch_gb']):
            raise InputError(f"Maximum local scratch space is {cluster_limits['max_scratch_gb']} GB per node."
                             if scratch_gb > 0 else
                             f"Invalid value '{scratch_gb}' for scratch space. "
                             f"Must be a positive integer greater than zero.")
        self.scratch_gb = scratch_gb

        self.keep_files = (keep_files or list()) + [self.name + extension for extension in orca_keep_extensions]
        self.nprocs, self.maxcore, self.xyz_files = None, None, list()
        self.mem_per_cpu, self.memory_gb = None, None
        self.job_id = None

    def parse_input_file(self) -> None:
        """
        Read the resource directives and the external geometry files from the ORCA input file
        and set the memory to request.

        Raises:
            InputError: If the input file is missing, if nprocs or maxcore are missing or out of range,
                        or if a referenced .xyz file does not exist.
        """
        input_path = os.path.join(self.path, self.input_file)
        if not os.path.isfile(input_path):
            raise InputError(f"ORCA input file '{self.input_file}' does not exist.")
        lines = _get_lines_from_file(input_path)

        self.nprocs = parse_nprocs(lines)
        if self.nprocs is None:
            raise InputError("Could not extract 'nprocs' from ORCA input file.")
        if not cluster_limits['min_nprocs'] <= self.nprocs <= cluster_limits['max_nprocs']:
            raise InputError(f"Number of parallel processes must be between {cluster_limits['min_nprocs']} "
                             f"and {cluster_limits['max_nprocs']}.")

        self.maxcore = parse_maxcore(lines)
        if self.maxcore is None:
            raise InputError("Could not extract 'maxcore' from ORCA input file.")
        if not cluster_limits['min_maxcore_mb'] <= self.maxcore <= cluster_limits['max_maxcore_mb']:
            raise InputError(f"Amount of scratch memory in MB must be between {cluster_limits['min_maxcore_mb']} "
                             f"and {cluster_limits['max_maxcore_mb']}.")

        self.xyz_files = parse_xyz_file_references(lines)
        for file_name in self.xyz_files:
            if not os.path.isfile(os.path.join(self.path, file_name)):
                raise InputError(f"External .xyz file '{file_name}' does not exist.")

        self.mem_per_cpu, self.memory_gb = determine_memory(self.nprocs, self.maxcore)

    def log_specifications(self) -> None:
        """
        Report the job specifications.
        """
        logger.info('')
        logger.info(f'Job name: {self.name}')
        logger.info(f'Walltime limit: {self.walltime} hours')
        logger.info(f'Process/core count per node: {self.nprocs}')
        logger.info(f'Memory limit per core: {self.mem_per_cpu} MB')
        logger.info(f'Memory limit per node: {self.memory_gb} GB')
        if self.scratch_gb is not None:
            logger.info(f'Local scratch space: {self.scratch_gb} GB')

    def check_resources(self, confirm: Optional[Callable[[str], str]] = None) -> None:
        """
        Ask the user to confirm resource requests which are allowed but wasteful.

        Args:
            confirm (Callable[[str], str], optional): A function which prompts the user and returns the answer.

        Raises:
            InputError: If the user canceled the submission.
        """
        cores, threshold = cluster_limits['cores_per_node'], cluster_limits['large_memory_threshold_gb']
        if cores % self.nprocs:
            confirm_or_cancel(
                warning=f'Requested number of cores is not an integer divisor of {cores} (total number of cores on\n'
                        f'  each node). This is recommended for efficient resource utilization and maximum job '
                        f'throughput.\n  Always consider whether your application really benefits from allocating '
                        f'more cores.',
                cancel_message='Adjust number of requested cores accordingly.',
                confirm=confirm,
            )
        if self.memory_gb > threshold:
            excluded = cluster_limits['total_nodes'] - cluster_limits['large_memory_nodes']
            confirm_or_cancel(
                warning=f"Requested memory exceeds {threshold} GB. Slurm will rule out {excluded} of "
                        f"{cluster_limits['total_nodes']} available nodes and\n  consider only "
                        f"{cluster_limits['large_memory_nodes']} nodes suitable for this job. Over-requesting memory "
                        f"can adversely affect the\n  wait time for this job and the priority of subsequent jobs due "
                        f"to resource usage accounting.",
                cancel_message='Adjust amount of resources requested accordingly.',
                confirm=confirm,
            )

    @property
    def submit_filename(self) -> str:
        return f'{self.name}.sh'

    def render_submit_script(self) -> str:
        """
        Render the SLURM job script.

        Returns: str
            The content of the job script.
        """
        gres = f'#SBATCH --gres=scratch:{self.scratch_gb}\n' if self.scratch_gb is not None else ''
        files_to_copy = [self.input_file] + self.xyz_files + self.additional_files
        try:
            return submit_scripts['orca'].format(
                name=self.name,
                walltime=self.walltime,
                signal_seconds=timeout_signal_seconds,
                nprocs=self.nprocs,
                mem_per_cpu=self.mem_per_cpu,
                gres=gres,
                input_file=self.input_file,
                keep_files=' '.join(self.keep_files),
                timeout_keep_files=' '.join(self.name + suffix for suffix in orca_timeout_keep_suffixes),
                orca_module=f'{orca_module}/{self.orca_version}',
                files_to_copy=' '.join(f'"{file_name}"' for file_name in files_to_copy),
            )
        except KeyError:
            logger.error('Could not render the ORCA submit script. If you defined parameters in curly braces '
                         '(e.g., {PARAM}) in a custom submit script, replace them with double curly braces '
                         '(e.g., {{PARAM}}).')
            raise

    def write_submit_script(self) -> str:
        """
        Write an executable SLURM job script into the submit directory.

        Returns: str
            The path to the job script.
        """
        script_path = os.path.join(self.path, self.submit_filename)
        write_file(script_path, self.render_submit_script())
        change_mode(mode='+x', file_name=self.submit_filename, path=self.path)
        return script_path

    def submit(self) -> Optional[str]:
        """
        Write the job script, submit it and remove it again.

        Returns: Optional[str]
            The SLURM job ID.
        """
        script_path = self.write_submit_script()
        try:
            _, self.job_id = submit_job(path=self.path, submit_filename=self.submit_filename)
        finally:
            if os.path.isfile(script_path):
                os.remove(script_path)
        return self.job_id

    def execute(self, confirm: Optional[Callable[[str], str]] = None) -> Optional[str]:
        """
        Parse the input file, check the resources and submit the job.

        Args:
            confirm (Callable[[str], str], optional): A function which prompts the user and returns the answer.

        Returns: Optional[str]
            The SLURM job ID.
        """
        self.parse_input_file()
        self.log_specifications()
        self.check_resources(confirm=confirm)
        return self.submit()
