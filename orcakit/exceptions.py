"""
This module contains classes which extend Exception for usage in orcakit.
"""


class InputError(Exception):
    """
    An exception raised when parsing command-line arguments or an input file.
    """
    pass


class JobError(Exception):
    """
    An exception class for exceptional behavior that occurs while running an external program.
    """
    pass


class SettingsError(Exception):
    """
    An exception raised when dealing with settings or with the scheduler commands defined in them.
    """
    pass


class ThermoError(Exception):
    """
    A base exception for ORCA output files that cannot be reported on.

    Args:
        message (str): A human-readable description of the problem.
        status (str, optional): The status (a ``LogStatus`` value) that triggered the error.
    """
    status = None

    def __init__(self, message: str, status=None):
        super().__init__(message)
        if status is not None:
            self.status = status


class LogNotFoundError(ThermoError):
    """
    An exception raised when the ORCA output file is missing or empty.
    """
    status = 'not_found'


class NotRecognizedError(ThermoError):
    """
    An exception raised when a file does not carry the ORCA program signature.
    """
    status = 'not_recognized'


class AbnormalTerminationError(ThermoError):
    """
    An exception raised when ORCA did not report a normal termination.
    """
    status = 'abnormal_termination'


class RunError(ThermoError):
    """
    An exception raised when an ORCA output file contains an error marker.
    """
    status = 'run_error'


class NoThermodynamicDataError(ThermoError):
    """
    An exception raised when a valid ORCA output file holds no frequencies and no energies.
    """
    status = 'no_thermodynamic_data'


class JobInterruptedError(Exception):
    """
    An exception raised from a signal handler when a running job receives SIGINT or SIGTERM.

    Args:
        signum (int): The number of the received signal.
    """
    def __init__(self, signum: int):
        super().__init__(f'Received signal {signum}')
        self.signum = signum
        self.exit_status = 128 + signum
