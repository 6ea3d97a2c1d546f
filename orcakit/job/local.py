"""
A module for running commands and submitting jobs on the local machine (a cluster login or compute node).
"""

import os
import re
import shlex
import shutil
import subprocess
from typing import List, Optional, Tuple, Union

from orcakit.common import get_logger
from orcakit.exceptions import SettingsError
from orcakit.imports import settings


logger = get_logger()

cluster_soft, module_avail_command, submit_command = \
    settings['cluster_soft'], settings['module_avail_command'], settings['submit_command']


def execute_command(command: Union[str, List[str]],
                    shell: bool = True,
                    no_fail: bool = False,
                    cwd: Optional[str] = None,
                    ) -> Tuple[Optional[List[str]], Optional[List[str]]]:
    """
    Execute a command.

    Notes:
        If ``no_fail`` is ``True``, then a warning is logged and ``(None, None)`` is returned
        so that the calling function can debug the situation.

    Args:
        command (Union[str, List[str]]): An array of string commands to send, joined by ``&&``.
        shell (bool, optional): Specifies whether the command should be executed using bash instead of Python.
        no_fail (bool, optional): If ``True`` then orcakit will not crash if an error is encountered.
        cwd (str, optional): The directory to execute the command in.

    Raises:
        SettingsError: If the command returned a non-zero exit code and ``no_fail`` is ``False``.

    Returns: Tuple[list, list]:
        - A list of lines of standard output stream.
        - A list of lines of the standard error stream.
    """
    if not isinstance(command, list):
        command = [command]
    command = ' && '.join(command)
    try:
        completed_process = subprocess.run(command if shell else shlex.split(command),
                                           shell=shell,
                                           capture_output=True,
                                           check=True,
                                           cwd=cwd,
                                           )
    except subprocess.CalledProcessError as e:
        if no_fail:
            _output_command_error_message(command, e, logger.warning)
            return None, None
        _output_command_error_message(command, e, logger.error)
        raise SettingsError(f'The command "{command}" is erroneous, got: \n{e}'
                            f'\nThis maybe either a cluster issue or the command is wrong.'
                            f'\nTo correct the command, modify ~/.orcakit/settings.yml')
    return _format_stdout(completed_process.stdout), _format_stdout(completed_process.stderr)


def _output_command_error_message(command: str,
                                  error: subprocess.CalledProcessError,
                                  logging_func,
                                  ) -> None:
    """
    Formats and logs the error message returned from a command at the desired logging level.

    Args:
        command (str): The command that threw the error.
        error (subprocess.CalledProcessError): The exception caught by python from subprocess.
        logging_func: ``logger.warning`` or ``logger.error`` as a function object.
    """
    logging_func('The command is erroneous.')
    logging_func(f'Tried to execute the following command:\n{command}')
    logging_func(f'And got return code {error.returncode} with the following output:')
    for line in _format_stdout(error.stderr or b'') or _format_stdout(error.stdout or b''):
        logging_func(line)


def _format_stdout(stdout: bytes) -> List[str]:
    """
    Format the stdout as a list of unicode strings

    Args:
        stdout (bytes): The standard output.

    Returns:
        List(str): The decoded lines from stdout.
    """
    return [line.decode(errors='replace') for line in stdout.splitlines()]


def check_command_available(command: str) -> bool:
    """
    Check whether an executable can be found on the ``PATH``.

    Args:
        command (str): The executable name, e.g., ``'xtb'``.

    Returns: bool
        ``True`` if found.
    """
    return shutil.which(command) is not None


def is_module_available(module: str, version: str) -> bool:
    """
    Check whether an environment module version is installed, using Lmod's ``module avail``.
    ``module`` is a shell function, so a login shell is used.

    Args:
        module (str): The module name, e.g., ``'chem/orca'``.
        version (str): The version, e.g., ``'6.0.0'``.

    Returns: bool
        ``True`` if the version is listed.
    """
    command = f'bash -lc {shlex.quote(f"{module_avail_command} {module} 2>&1")}'
    stdout, _ = execute_command(command, no_fail=True)
    if stdout is None:
        return False
    pattern = re.compile(rf'(?<!\w){re.escape(version)}(?!\w)')
    return any(pattern.search(line) for line in stdout)


def submit_job(path: str,
               submit_filename: str,
               ) -> Tuple[Optional[str], Optional[str]]:
    """
    Submit a job. The output of the submission command is logged.

    Args:
        path (str): The folder path where the submit script is located (just the folder path, w/o the filename).
        submit_filename (str): The submit script file name.

    Returns:
        Tuple[Optional[str], Optional[str]]: job_status, job_id
    """
    job_status, job_id = '', ''
    cmd = f'{submit_command[cluster_soft]} {shlex.quote(submit_filename)}'
    stdout, stderr = execute_command(cmd, cwd=path or None)
    for line in stdout:
        logger.info(line)
    if len(stderr) > 0 or len(stdout) == 0:
        logger.warning(f'Got the following error when trying to submit job:\n{stderr}.')
        job_status = 'errored'
    else:
        job_id = _determine_job_id(stdout)
    job_status = 'running' if job_id else job_status
    return job_status, job_id


def _determine_job_id(stdout: List[str],
                      cluster_soft_: Optional[str] = None,
                      ) -> str:
    """
    Determine the job ID right after it was submitted from the stdout.

    Args:
        stdout (List[str]): The stdout got from submitting a job.
        cluster_soft_ (str, optional): The cluster software, taken from the settings if not given.

    Returns: str
        The job ID, an empty string if it could not be determined.
    """
    job_id = ''
    cluster_soft_ = (cluster_soft_ or cluster_soft).lower()
    if cluster_soft_ == 'slurm':
        for line in stdout:
            if 'submitted' in line.lower():
                job_id = line.split()[3]
                break
    else:
        raise ValueError(f'Unrecognized cluster software: {cluster_soft_}')
    return job_id


def write_file(file_path: str, file_string: str) -> None:
    """
    Write ``file_string`` as the file's content in ``file_path``.

    Args:
        file_path (str): The file path.
        file_string (str): The content to be written into the file.
    """
    with open(file_path, 'w') as f:
        f.write(file_string)


def change_mode(mode: str,
                file_name: str,
                recursive: bool = False,
                path: str = '',
                ) -> None:
    """
    Change the mode of a file or a directory.

    Args:
        mode (str): The mode change to be applied, can be either octal or symbolic.
        file_name (str): The path to the file or the directory to be changed.
        recursive (bool, optional): Whether to recursively change the mode to all files
                                    under a directory.``True`` for recursively change.
        path (str, optional): The directory path at which the command will be executed.
    """
    if os.path.isfile(path):
        path = os.path.dirname(path)
    recursive = ' -R' if recursive else ''
    command = [f'cd {shlex.quote(path)}'] if path else []
    command.append(f'chmod{recursive} {mode} {shlex.quote(file_name)}')
    execute_command(command=command)
