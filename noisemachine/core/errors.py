"""
Error kinds raised by the noise machine.
Validation errors are raised before any buffer is allocated; every error maps to exit code 1.
"""


class NoiseMachineError(Exception):
    """Base error. Carries the process exit code used by the CLI."""
    exit_code = 1


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

class ArgumentCountError(NoiseMachineError, ValueError):
    """Wrong number of command-line arguments."""


class InvalidNoiseType(NoiseMachineError, ValueError):
    """Noise type is not one of white / pink / red."""


class InvalidDuration(NoiseMachineError, ValueError):
    """Duration is not an integer within the allowed range."""


class InvalidSampleRate(NoiseMachineError, ValueError):
    """Sample rate is not a positive integer."""


class UnknownOutputFormat(NoiseMachineError, ValueError):
    """Output filename extension does not map to a supported container."""


# -----------------------------------------------------------------------------
# Runtime
# -----------------------------------------------------------------------------

class SubsystemInitError(NoiseMachineError):
    """Random source or audio I/O backend could not be initialized."""


class FileCreateError(NoiseMachineError, OSError):
    pass


class FileWriteError(NoiseMachineError, OSError):
    pass


class FileCloseError(NoiseMachineError, OSError):
    pass
