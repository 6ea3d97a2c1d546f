"""
A module for generating optimized 3D structures from SMILES strings.

OpenBabel builds an initial guess, which is optimized by xTB in a temporary directory on a compute node.
The resulting .xyz file carries the SMILES string in its comment line.
Alternatively, the same steps are submitted as a SLURM job.
"""

import os
import re
import resource
import shlex
import shutil
import signal
import socket
import subprocess
import sys
import tarfile
from typing import List, Optional, Union

from orcakit.common import get_logger
from orcakit.exceptions import InputError, JobError, JobInterruptedError
from orcakit.imports import settings, submit_scripts
from orcakit.job.local import change_mode, check_command_available, submit_job, write_file
from orcakit.parser.parser import _get_lines_from_file, is_nonempty_file


logger = get_logger()

compute_node_pattern, openbabel_module, xtb_module, xtb_opt_thresholds, xtb_default_threshold, \
    xtb_environment, smiles2xyz_job_settings = \
    settings['compute_node_pattern'], settings['openbabel_module'], settings['xtb_module'], \
    settings['xtb_opt_thresholds'], settings['xtb_default_threshold'], settings['xtb_environment'], \
    settings['smiles2xyz_job_settings']

CHARGE_PATTERN = re.compile(r'^[+-]?[0-9]+$')
MULTIPLICITY_PATTERN = re.compile(r'^[1-9][0-9]*$')

OBABEL_XYZ = 'obabel.xyz'
XTB_OPT_XYZ = 'xtbopt.xyz'

BANNER = ['',
          '                           **************',
          '                           * smiles2xyz *',
          '                           **************',
          ]

CLOSING_MESSAGES = {0: 'Job completed successfully. *HURRAY*',
                    1: 'Job terminated with errors. Check log for details.',
                    128 + signal.SIGINT: 'Job interrupted by user (SIGINT).',
                    128 + signal.SIGTERM: 'Job terminated by signal (SIGTERM).',
                    }


def add_smiles_to_comment(lines: List[str], smiles: str) -> List[str]:
    """
    Append the SMILES string to the comment (second) line of an xyz file.

    Args:
        lines (List[str]): The lines of the xyz file.
        smiles (str): The SMILES string.

    Returns: List[str]
        The modified lines.
    """
    return [f'{line} SMILES: {smiles}' if i == 1 else line for i, line in enumerate(lines)]


def _uncap_stack() -> None:
    """
    Raise the soft stack size limit of a child process to its hard limit (unlimited on most clusters).
    """
    _, hard = resource.getrlimit(resource.RLIMIT_STACK)
    resource.setrlimit(resource.RLIMIT_STACK, (hard, hard))


def _raise_interrupt(signum, frame):
    raise JobInterruptedError(signum)


class StructureJob(object):
    """
    A SMILES to xyz conversion job.

    Args:
        smiles (str): The SMILES string of the molecule.
        charge (Union[int, str], optional): The molecular charge.
        multiplicity (Union[int, str], optional): The spin multiplicity.
        name (str, optional): The output file name without extension, the current directory name by default.
        threshold (str, optional): The xTB optimization level.
        verbose (bool, optional): Whether to echo the output of OpenBabel and xTB.
        keep_log (bool, optional): Whether to keep the ``<name>.out`` log file.
        keep_all (bool, optional): Whether to keep all intermediate files as a tgz archive.

    Attributes:
        smiles (str): The SMILES string of the molecule.
        charge (int): The molecular charge.
        multiplicity (int): The spin multiplicity.
        name (str): The output file name without extension.
        threshold (str): The xTB optimization level.
        verbose (bool): Whether to echo the output of OpenBabel and xTB.
        keep_log (bool): Whether to keep the log file.
        keep_all (bool): Whether to keep all intermediate files.
        original_dir (str): The directory the job was started from.
        work_dir (str): The temporary directory the job runs in.
        exit_status (int): The exit status of the last interactive run.
    """
    def __init__(self,
                 smiles: str,
                 charge: Union[int, str] = 0,
                 multiplicity: Union[int, str] = 1,
                 name: Optional[str] = None,
                 threshold: Optional[str] = None,
                 verbose: bool = False,
                 keep_log: bool = False,
                 keep_all: bool = False,
                 ):
        if not smiles:
            raise InputError('SMILES string in quotation marks not provided.')
        if not CHARGE_PATTERN.match(str(charge)):
            raise InputError(f"Invalid value '{charge}' for charge. Must be an integer with optional sign.")
        if not MULTIPLICITY_PATTERN.match(str(multiplicity)):
            raise InputError(f"Invalid value '{multiplicity}' for multiplicity. "
                             f"Must be a positive integer greater than zero.")
        threshold = threshold or xtb_default_threshold
        if threshold not in xtb_opt_thresholds:
            raise InputError(f"Invalid optimization threshold. Must be one of {', '.join(xtb_opt_thresholds)}.")
        self.smiles = smiles
        self.charge = int(charge)
        self.multiplicity = int(multiplicity)
        self.name = name or os.path.basename(os.getcwd())
        self.threshold = threshold
        self.verbose = verbose
        self.keep_log = keep_log
        self.keep_all = keep_all
        self.original_dir = os.getcwd()
        self.work_dir = None
        self.exit_status = None

    @property
    def log_path(self) -> str:
        return os.path.join(self.work_dir, f'{self.name}.out')

    @property
    def xyz_path(self) -> str:
        return os.path.join(self.work_dir, f'{self.name}.xyz')

    def command_line(self) -> List[str]:
        """
        The command which runs this job interactively.

        Returns: List[str]
            The command arguments.
        """
        command = [sys.executable, '-m', 'orcakit.scripts.smiles2xyz',
                   '-c', str(self.charge), '-m', str(self.multiplicity), '-o', self.name, '-t', self.threshold]
        for flag, value in (('-v', self.verbose), ('-l', self.keep_log), ('-f', self.keep_all)):
            if value:
                command.append(flag)
        return command + ['--', self.smiles]

    def render_submit_script(self) -> str:
        """
        Render the SLURM job script, which loads the modules and runs this job on a compute node.

        Returns: str
            The content of the job script.
        """
        return submit_scripts['smiles2xyz'].format(name=self.name,
                                                   time=smiles2xyz_job_settings['time'],
                                                   cpus=smiles2xyz_job_settings['cpus'],
                                                   mem_per_cpu=smiles2xyz_job_settings['mem_per_cpu'],
                                                   openbabel_module=openbabel_module,
                                                   xtb_module=xtb_module,
                                                   command=shlex.join(self.command_line()),
                                                   )

    def submit(self) -> Optional[str]:
        """
        Submit the job to SLURM. The job script is removed after submission.

        Returns: Optional[str]
            The SLURM job ID.
        """
        submit_filename = f'{self.name}.sh'
        script_path = os.path.join(self.original_dir, submit_filename)
        write_file(script_path, self.render_submit_script())
        try:
            change_mode(mode='+x', file_name=submit_filename, path=self.original_dir)
            _, job_id = submit_job(path=self.original_dir, submit_filename=submit_filename)
        finally:
            if os.path.isfile(script_path):
                os.remove(script_path)
        return job_id

    def setup_work_dir(self) -> None:
        """
        Check that this is a compute node and create the temporary working directory.

        Raises:
            JobError: If not on a compute node, or if ``$TMPDIR`` is not set.
        """
        if not re.match(compute_node_pattern, socket.gethostname()):
            raise JobError('Script not executed on a compute node. '
                           'Request an interactive job first or submit to the SLURM scheduler.')
        tmp_dir = os.environ.get('TMPDIR')
        if not tmp_dir:
            raise JobError('Environment variable $TMPDIR not set.')
        self.work_dir = os.path.join(tmp_dir, f'{self.name}.{os.getpid()}')
        os.makedirs(self.work_dir, exist_ok=True)

    def _append_to_log(self, text: str) -> None:
        with open(self.log_path, 'a') as f:
            f.write(text + '\n')

    def _fail(self, message: str) -> None:
        self._append_to_log(f'Error: {message}')
        raise JobError(message)

    def _run_program(self,
                     command: List[str],
                     env: Optional[dict] = None,
                     preexec_fn=None,
                     ) -> int:
        """
        Run an external program in the working directory, appending its output to the log file.

        Args:
            command (List[str]): The command arguments.
            env (dict, optional): Additional environment variables.
            preexec_fn (optional): A callable run in the child process before the program starts.

        Returns: int
            The exit code of the program.
        """
        environment = {**os.environ, **env} if env else None
        with open(self.log_path, 'a') as log_file:
            process = subprocess.Popen(command,
                                       stdout=subprocess.PIPE,
                                       stderr=subprocess.STDOUT,
                                       cwd=self.work_dir,
                                       env=environment,
                                       preexec_fn=preexec_fn,
                                       universal_newlines=True,
                                       errors='replace',
                                       )
            try:
                for line in process.stdout:
                    log_file.write(line)
                    if self.verbose:
                        logger.info(line.rstrip('\n'))
            except JobInterruptedError:
                process.kill()
                process.wait()
                raise
            return process.wait()

    def generate_initial_guess(self) -> None:
        """
        Generate a 3D structure from the SMILES string using OpenBabel.
        """
        self._append_to_log('\nGenerating 3D molecular structure using OpenBabel...')
        logger.info('Generating 3D molecular structure...')
        command = ['obabel', f'-:{self.smiles}', '-oxyz', '-O', OBABEL_XYZ, '--gen3d', '--better']
        if self._run_program(command):
            self._fail('OpenBabel failed to generate initial guess.')
        if not is_nonempty_file(os.path.join(self.work_dir, OBABEL_XYZ)):
            self._fail(f"Output file '{OBABEL_XYZ}' not created by OpenBabel.")

    def optimize(self) -> None:
        """
        Optimize the initial guess using xTB and write the final xyz file.
        """
        self._append_to_log(f"\nOptimizing initial guess '{OBABEL_XYZ}' using xTB...")
        logger.info('Optimizing initial guess using xTB...')
        command = ['xtb', OBABEL_XYZ, '--chrg', str(self.charge), '--uhf', str(self.multiplicity - 1),
                   '--opt', self.threshold]
        if self._run_program(command, env=xtb_environment, preexec_fn=_uncap_stack):
            self._fail('xTB geometry optimization failed.')
        opt_path = os.path.join(self.work_dir, XTB_OPT_XYZ)
        if not is_nonempty_file(opt_path):
            self._fail(f"Output file '{XTB_OPT_XYZ}' not created by xTB.")

        self._append_to_log(f"\nAdding SMILES string to '{XTB_OPT_XYZ}' comment line and renaming output...")
        logger.info('Preparing final output file...')
        lines = add_smiles_to_comment(_get_lines_from_file(opt_path), self.smiles)
        write_file(self.xyz_path, '\n'.join(lines) + '\n')
        self._append_to_log(f"\nFinal output file '{self.name}.xyz' created successfully.")

    def cleanup(self) -> None:
        """
        Bring the results back to the original directory and remove the working directory.
        """
        logger.info('Cleaning up temporary directory...')
        if self.keep_all:
            base_name = os.path.basename(self.work_dir)
            with tarfile.open(os.path.join(self.original_dir, f'{base_name}.tgz'), 'w:gz') as tar:
                tar.add(self.work_dir, arcname=base_name)
        else:
            if os.path.isfile(self.xyz_path):
                shutil.move(self.xyz_path, os.path.join(self.original_dir, os.path.basename(self.xyz_path)))
            if self.keep_log and os.path.isfile(self.log_path):
                shutil.move(self.log_path, os.path.join(self.original_dir, os.path.basename(self.log_path)))
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def run(self) -> int:
        """
        Run the job interactively. Results are brought back even if the job fails or is interrupted.

        Raises:
            JobError: If the job cannot be started on this host.

        Returns: int
            The exit status: 0 on success, 1 on errors, 130 on SIGINT and 143 on SIGTERM.
        """
        self.setup_work_dir()
        original_handlers = {signum: signal.signal(signum, _raise_interrupt)
                             for signum in (signal.SIGINT, signal.SIGTERM)}
        try:
            self._append_to_log('\n'.join(BANNER))
            for program in ('obabel', 'xtb'):
                if not check_command_available(program):
                    self._fail(f'Command {program} not available. Make sure module is loaded properly.')
            self.generate_initial_guess()
            self.optimize()
            self.exit_status = 0
        except JobInterruptedError as e:
            self.exit_status = e.exit_status
        except JobError as e:
            logger.error(str(e))
            self.exit_status = 1
        finally:
            try:
                self.cleanup()
            finally:
                for signum, handler in original_handlers.items():
                    signal.signal(signum, handler)
        logger.info(CLOSING_MESSAGES.get(self.exit_status,
                                         f'Job finished with unknown exit status {self.exit_status}.'))
        return self.exit_status
